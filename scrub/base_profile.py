"""
Field policies and the base Scrub Profile.

A field policy tells the engine how to mask the string values found under a
given field or map key name. Names are compared case-insensitively, so every
policy map is keyed by the lower-cased name.

Extend ScrubProfile to ship a reusable bundle of field policies, for example:
    - credentials (passwords, tokens, API keys)
    - payment cards (PAN with first 6 / last 4 visible)

Each profile defines:
    - name: Unique identifier for the profile
    - description: Human-readable description
    - get_field_policies(): Returns the field name -> policy mapping
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class PartialMaskConfig:
    """Thresholds for masking only part of a value."""
    enabled: bool = False
    min_field_len: int = 0  # shorter values are fully masked
    max_field_len: int = 0  # longer values are fully masked
    visible_front_len: int = 0
    visible_back_only_if_len_greater_than: int = 0
    visible_back_len: int = 0


@dataclass(frozen=True)
class FieldPolicy:
    """How to mask one field."""
    symbol: str = "*"
    partial: Optional[PartialMaskConfig] = None

    @property
    def partial_enabled(self) -> bool:
        return self.partial is not None and self.partial.enabled


# A policy value of None means "mask with the default options".
PolicyMap = dict[str, Optional[FieldPolicy]]
FieldsToScrub = Union[Mapping[str, Optional[FieldPolicy]], Iterable[str]]


def normalize_field_name(name: str) -> str:
    """Field names are matched case-insensitively."""
    return name.lower()


def normalize_policies(fields: FieldsToScrub) -> PolicyMap:
    """
    Turn a policy mapping or a plain collection of names into a PolicyMap.

    Args:
        fields: Either a mapping of field name -> FieldPolicy (or None), or an
                iterable of field names to fully mask with default options.
                A mapping value of True is read as None, so name sets written
                as {"password": True} keep working.

    Returns:
        A new dict keyed by lower-cased field name.

    Raises:
        TypeError: if a mapping value is neither a FieldPolicy, None nor True.
    """
    if isinstance(fields, str):
        fields = [fields]
    if isinstance(fields, Mapping):
        return {normalize_field_name(name): _normalize_policy(name, policy) for name, policy in fields.items()}
    return {normalize_field_name(name): None for name in fields}


def _normalize_policy(name: str, policy: object) -> Optional[FieldPolicy]:
    if policy is None or policy is True:
        return None
    if isinstance(policy, FieldPolicy):
        return policy
    raise TypeError(f"policy for field '{name}' must be a FieldPolicy or None, got {policy!r}")


class ScrubProfile(ABC):
    """
    Abstract base class for scrub profiles.

    Subclass this to add new bundles of sensitive field names without
    modifying the ScrubEngine.

    Example:
        class HRProfile(ScrubProfile):
            @property
            def name(self) -> str:
                return "hr"

            @property
            def description(self) -> str:
                return "Employee identifiers"

            def get_field_policies(self) -> PolicyMap:
                return {
                    "ssn": FieldPolicy(),
                    "salary": FieldPolicy(symbol="#"),
                }
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this profile (e.g., 'default', 'payment_card')."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this profile covers."""
        pass

    @abstractmethod
    def get_field_policies(self) -> PolicyMap:
        """
        Return the field name -> FieldPolicy mapping for this profile.

        Names may use any case; the engine lower-cases them on load.
        A None policy masks the field fully with the default symbol.
        """
        pass

    def __repr__(self) -> str:
        return f"<ScrubProfile: {self.name}>"
