"""
Tests for the MCP server tools.

Tests cover:
- Masking JSON objects and arrays of objects
- Profiles and length options
- Defaults from the environment
- Invalid input handling
"""

import json

from server import MAX_DOCUMENT_CHARS, list_profiles, scrub_json


class TestScrubJson:
    """Test suite for scrub_json tool."""

    def test_masks_default_field(self):
        """Should mask the password with the default options."""
        result = scrub_json('{"user": "admin", "password": "hunter22!"}')

        assert result["status"] == "success"
        assert result["scrubbed"] == '{"user":"admin","password":"********"}'
        assert result["masked_count"] == 1
        assert result["fields"] == ["password"]

    def test_masks_named_fields_in_arrays_of_objects(self):
        """Objects inside arrays are searched, key names are case-insensitive."""
        document = json.dumps({
            "accounts": [{"ApiKey": "abc123"}, {"apikey": "def456", "name": "ops"}],
        })

        result = scrub_json(document, fields=["apiKey"])

        assert result["status"] == "success"
        assert json.loads(result["scrubbed"]) == {
            "accounts": [{"ApiKey": "********"}, {"apikey": "********", "name": "ops"}],
        }
        assert result["masked_count"] == 2

    def test_top_level_array(self):
        """A top-level array of objects is scrubbed too."""
        result = scrub_json('[{"password": "a"}, {"password": "b"}]')

        assert result["scrubbed"] == '[{"password":"********"},{"password":"********"}]'

    def test_vary_length(self):
        """Masks keep the original length when requested."""
        result = scrub_json('{"password": "hunter22!"}', vary_length=True)

        assert result["scrubbed"] == '{"password":"*********"}'

    def test_payment_profile(self):
        """The payment card profile keeps the first 6 and last 4 digits."""
        result = scrub_json('{"card_number": "4111111111111111", "cvv": "123"}', profiles=["payment_card"])

        assert result["status"] == "success"
        assert result["scrubbed"] == '{"card_number":"411111******1111","cvv":"********"}'

    def test_defaults_from_env(self, monkeypatch):
        """Default fields and length come from the environment."""
        monkeypatch.setenv("SCRUB_DEFAULT_FIELDS", "token")
        monkeypatch.setenv("SCRUB_MASK_LEN_VARY", "1")

        result = scrub_json('{"token": "abc", "password": "pw"}')

        assert result["scrubbed"] == '{"token":"***","password":"pw"}'

    def test_invalid_json(self):
        """Should report malformed documents."""
        result = scrub_json("{not json")

        assert result["status"] == "error"
        assert "Invalid JSON" in result["message"]

    def test_scalar_document(self):
        """Should reject documents that are not objects or arrays."""
        result = scrub_json('"just a string"')

        assert result["status"] == "error"

    def test_unknown_profile(self):
        """Should reject unknown profile names."""
        result = scrub_json('{"password": "pw"}', profiles=["nope"])

        assert result["status"] == "error"
        assert "nope" in result["message"]

    def test_document_too_large(self):
        """Should enforce the document size limit."""
        result = scrub_json(" " * (MAX_DOCUMENT_CHARS + 1))

        assert result["status"] == "error"
        assert "too large" in result["message"]


class TestListProfiles:
    """Test suite for list_profiles tool."""

    def test_lists_builtin_profiles(self):
        """Should list every built-in profile with its fields."""
        result = list_profiles()

        assert result["status"] == "success"
        assert result["count"] == 3
        by_name = {profile["name"]: profile for profile in result["profiles"]}
        assert by_name["default"]["fields"] == ["password"]
        assert "card_number" in by_name["payment_card"]["partial_fields"]
        assert by_name["credentials"]["partial_fields"] == []
