"""
Default and credential profiles.

The default profile only covers the "password" field. The credentials profile
adds the secret names that commonly show up in configuration and request
structures.
"""

from ..base_profile import FieldPolicy, PolicyMap, ScrubProfile


class DefaultProfile(ScrubProfile):
    """Fully masks any field named "password"."""

    @property
    def name(self) -> str:
        return "default"

    @property
    def description(self) -> str:
        return "Password fields, fully masked"

    def get_field_policies(self) -> PolicyMap:
        return {"password": FieldPolicy(symbol="*")}


class CredentialsProfile(ScrubProfile):
    """Common credential field names, all fully masked."""

    FIELD_NAMES = (
        "password",
        "passwd",
        "passphrase",
        "secret",
        "clientsecret",
        "client_secret",
        "token",
        "accesstoken",
        "access_token",
        "refreshtoken",
        "refresh_token",
        "apikey",
        "api_key",
        "privatekey",
        "private_key",
        "authorization",
    )

    @property
    def name(self) -> str:
        return "credentials"

    @property
    def description(self) -> str:
        return "Passwords, tokens, API keys and private keys"

    def get_field_policies(self) -> PolicyMap:
        return {field_name: None for field_name in self.FIELD_NAMES}


# Export the default profile
DEFAULT_PROFILE = DefaultProfile()
