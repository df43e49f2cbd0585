"""
Scrub configuration - process-wide defaults for the scrubbing engine.

Settings:
    - default_fields: field names masked when a call supplies no policy
    - default_symbol: masking character used when a policy names none
    - mask_len: length of a fixed-length full mask
    - mask_len_vary: if True, a full mask is as long as the original value

The configuration is read (never mutated) during a scrub call. Callers that
need different settings per call should pass an explicit ScrubConfig instead
of changing the process-wide default while calls are in flight.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_MASK_SYMBOL = "*"
DEFAULT_MASK_LEN = 8

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ScrubConfig:
    """Settings read by the masking strategy at call time."""
    default_fields: frozenset = field(default_factory=lambda: frozenset({"password"}))
    default_symbol: str = DEFAULT_MASK_SYMBOL
    mask_len: int = DEFAULT_MASK_LEN
    mask_len_vary: bool = False

    @classmethod
    def from_env(cls) -> "ScrubConfig":
        """
        Build a configuration from environment variables.

        Recognized variables:
            SCRUB_DEFAULT_FIELDS: comma separated field names (e.g. "password,secret")
            SCRUB_MASK_SYMBOL: single masking character
            SCRUB_MASK_LEN: fixed mask length
            SCRUB_MASK_LEN_VARY: "true" to mask with the original value's length

        Unset or blank variables keep the built-in defaults.
        """
        defaults = cls()

        fields_env = os.getenv("SCRUB_DEFAULT_FIELDS", "")
        names = [name.strip().lower() for name in fields_env.split(",") if name.strip()]

        symbol = os.getenv("SCRUB_MASK_SYMBOL") or defaults.default_symbol
        if len(symbol) != 1:
            symbol = defaults.default_symbol

        try:
            mask_len = int(os.getenv("SCRUB_MASK_LEN", defaults.mask_len))
        except ValueError:
            mask_len = defaults.mask_len

        vary = os.getenv("SCRUB_MASK_LEN_VARY", "").strip().lower() in _TRUTHY

        return cls(
            default_fields=frozenset(names) if names else defaults.default_fields,
            default_symbol=symbol,
            mask_len=max(mask_len, 0),
            mask_len_vary=vary,
        )


_default_config: Optional[ScrubConfig] = None


def get_default_config() -> ScrubConfig:
    """Return the process-wide configuration, creating the built-in one on first use."""
    global _default_config
    if _default_config is None:
        _default_config = ScrubConfig()
    return _default_config


def set_default_config(config: Optional[ScrubConfig]) -> None:
    """
    Replace the process-wide configuration.

    Passing None resets to the built-in defaults. Not synchronized with
    in-flight scrub calls.
    """
    global _default_config
    _default_config = config
