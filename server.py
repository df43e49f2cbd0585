"""
Field Scrubber - MCP Server for masking secrets in structured documents

A local MCP (Model Context Protocol) server that lets AI agents mask sensitive
fields (passwords, tokens, card numbers, ...) in JSON documents before they
are logged, stored or passed on.

Tools:
    - scrub_json: Mask the named fields of a JSON document
    - list_profiles: List the built-in field profiles

Configuration (environment or .env file):
    - SCRUB_DEFAULT_FIELDS: fields masked when a call names none (default "password")
    - SCRUB_MASK_SYMBOL: default masking character (default "*")
    - SCRUB_MASK_LEN: length of a fixed-length mask (default 8)
    - SCRUB_MASK_LEN_VARY: "true" to mask with the original value's length

Safety Constraints:
    - Documents larger than 1,000,000 characters are rejected
    - The submitted document is never echoed back unmasked
"""

import dataclasses
import json
from typing import Any, Optional

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from scrub import ScrubConfig, ScrubEngine
from scrub.profiles import ALL_PROFILES

# Load environment variables from .env file
load_dotenv()

# Initialize MCP server
mcp = FastMCP(
    "field-scrubber",
    instructions="MCP Server for masking sensitive fields in JSON documents"
)

# Safety constants
MAX_DOCUMENT_CHARS = 1_000_000

PROFILES_BY_NAME = {profile.name: profile for profile in ALL_PROFILES}


def get_config(vary_length: Optional[bool] = None) -> ScrubConfig:
    """Read the scrub configuration from the environment, with an optional length override."""
    config = ScrubConfig.from_env()
    if vary_length is not None:
        config = dataclasses.replace(config, mask_len_vary=vary_length)
    return config


@mcp.tool()
def scrub_json(
    document: str,
    fields: Optional[list[str]] = None,
    profiles: Optional[list[str]] = None,
    vary_length: Optional[bool] = None,
) -> dict[str, Any]:
    """
    Mask sensitive fields in a JSON document.

    Every string value stored under one of the given key names is masked, at
    any depth reached through objects and arrays of objects. Key names are
    compared case-insensitively.

    Args:
        document: The JSON document, as text. Must be an object or an array.
        fields: Key names to mask fully, e.g. ["password", "apiKey"].
        profiles: Built-in profiles to apply, e.g. ["credentials", "payment_card"].
                  See list_profiles for the available names.
        vary_length: If true, masks are as long as the original value;
                     if false, masks have a fixed length. Defaults to the
                     server configuration.

    When neither fields nor profiles are given, the server's default fields
    (normally just "password") are masked.

    Returns:
        A dictionary containing:
        - status: "success" or "error"
        - scrubbed: The masked document as compact JSON
        - masked_count: Number of values that were masked
        - fields: The key names that were matched against

    Example usage:
        scrub_json('{"user": "admin", "password": "hunter22"}')
        scrub_json('{"card_number": "4111111111111111"}', profiles=["payment_card"])

    Notes:
        - Values of nested objects are only searched when the object sits
          in an array; plain nested objects are left as they are
        - Non-string values (numbers, booleans) are never masked
    """
    if len(document) > MAX_DOCUMENT_CHARS:
        return {
            "status": "error",
            "message": f"Document too large ({len(document)} characters, limit {MAX_DOCUMENT_CHARS})"
        }

    unknown = [name for name in (profiles or []) if name not in PROFILES_BY_NAME]
    if unknown:
        return {
            "status": "error",
            "message": f"Unknown profile(s): {', '.join(unknown)}. Available: {', '.join(PROFILES_BY_NAME)}"
        }

    try:
        parsed = json.loads(document)
    except json.JSONDecodeError as e:
        return {
            "status": "error",
            "message": f"Invalid JSON document: {e}"
        }

    if not isinstance(parsed, (dict, list)):
        return {
            "status": "error",
            "message": "Document must be a JSON object or array"
        }

    try:
        engine = ScrubEngine(fields, config=get_config(vary_length))
        for name in profiles or []:
            engine.load_profile(PROFILES_BY_NAME[name])

        result = engine.scrub_clone(type(parsed)(), parsed)
        if not result.ok:
            return {
                "status": "error",
                "message": f"Could not scrub document: {result.error}"
            }

        return {
            "status": "success",
            "scrubbed": result.text,
            "masked_count": result.masked,
            "fields": sorted(engine.field_policies)
        }

    except Exception as e:
        return {
            "status": "error",
            "message": f"Unexpected error: {str(e)}"
        }


@mcp.tool()
def list_profiles() -> dict[str, Any]:
    """
    List the built-in scrub profiles and the key names each one masks.

    Returns:
        A dictionary containing:
        - status: "success"
        - profiles: List of profiles, each with:
            - name: Profile name to pass to scrub_json
            - description: What the profile covers
            - fields: Key names masked by the profile
            - partial_fields: Key names that keep part of the value visible
        - count: Number of profiles
    """
    profiles = []
    for profile in ALL_PROFILES:
        policies = profile.get_field_policies()
        profiles.append({
            "name": profile.name,
            "description": profile.description,
            "fields": sorted(policies),
            "partial_fields": sorted(
                name for name, policy in policies.items()
                if policy is not None and policy.partial_enabled
            ),
        })

    return {
        "status": "success",
        "profiles": profiles,
        "count": len(profiles)
    }


if __name__ == "__main__":
    # Run the MCP server using stdio transport
    mcp.run()
