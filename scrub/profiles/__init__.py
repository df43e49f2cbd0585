"""
Scrub Profiles Package

This package contains reusable bundles of field policies.
Add new profiles here to extend the scrub engine.

Available profiles:
    - default: the password field, fully masked (always loaded by default)
    - credentials: common secret names (tokens, API keys, passphrases)
    - payment_card: card numbers partially masked, CVV/PIN fully masked

To add a new profile:
    1. Create a new file (e.g., hr.py)
    2. Subclass ScrubProfile
    3. Implement get_field_policies() with your FieldPolicy entries
    4. Register it with engine.load_profile()
"""

from .default import CredentialsProfile, DefaultProfile, DEFAULT_PROFILE
from .payment import PaymentCardProfile

ALL_PROFILES = [DEFAULT_PROFILE, CredentialsProfile(), PaymentCardProfile()]

__all__ = [
    "ALL_PROFILES",
    "CredentialsProfile",
    "DEFAULT_PROFILE",
    "DefaultProfile",
    "PaymentCardProfile",
]
