"""
Scrub Module - Field-level masking of sensitive values in nested structures

This module masks secrets (passwords, keys, tokens) held in arbitrarily nested
records, lists and maps before they are rendered as JSON or XML for logging
or transmission, without modifying the caller's value.

Architecture:
    - ScrubEngine: Orchestrates a scrub call and keeps the original intact
    - walker: Finds every string stored under a named field
    - masking: Computes full and partial masks
    - codecs: Record notation (JSON) and tag notation (XML) renderers
    - ScrubProfile: Abstract base class for reusable field policy bundles
    - profiles/: Directory containing specific profiles

Example:
    from scrub import scrub

    out = scrub(user, {"password"})
    # out: '{"Username":"Shyam Rathi","Password":"********",...}'
"""

from .base_profile import FieldPolicy, PartialMaskConfig, ScrubProfile
from .codecs import CodecError, DataType, DecodeError, EncodeError, FormatCodec, get_codec
from .config import ScrubConfig, get_default_config, set_default_config
from .engine import ScrubEngine, ScrubResult, ScrubStatus, get_default_engine, scrub, scrub_clone

__all__ = [
    "CodecError",
    "DataType",
    "DecodeError",
    "EncodeError",
    "FieldPolicy",
    "FormatCodec",
    "PartialMaskConfig",
    "ScrubConfig",
    "ScrubEngine",
    "ScrubProfile",
    "ScrubResult",
    "ScrubStatus",
    "get_codec",
    "get_default_config",
    "get_default_engine",
    "scrub",
    "scrub_clone",
    "set_default_config",
]
