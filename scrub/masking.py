"""
Masking strategy - computes the replacement for a single string value.

Given a value and the FieldPolicy of the field it was found under, produce
either a full mask (every character hidden) or a partial mask that keeps a
front and/or back span visible. Empty strings are never masked.
"""

from typing import Optional

from .base_profile import FieldPolicy, PartialMaskConfig
from .config import ScrubConfig


def resolve_symbol(policy: Optional[FieldPolicy], config: ScrubConfig) -> str:
    """Return the policy's single-character symbol, or the configured default."""
    if policy is not None and policy.symbol and len(policy.symbol) == 1:
        return policy.symbol
    return config.default_symbol


def full_mask(value: str, symbol: str, config: ScrubConfig) -> str:
    """Hide the whole value: fixed length, or the value's length if mask_len_vary is set."""
    length = len(value) if config.mask_len_vary else config.mask_len
    return symbol * length


def partial_mask(value: str, symbol: str, partial: PartialMaskConfig, config: ScrubConfig) -> str:
    """
    Mask a value according to partial-mask thresholds.

    Decision order:
        1. shorter than min_field_len -> full mask
        2. longer than max_field_len -> full mask
        3. shorter than visible_back_only_if_len_greater_than -> keep the front only
        4. up to max_field_len -> keep the front and the back
        5. anything else -> full mask

    Partially masked values keep their original length.

    Example:
        >>> cfg = PartialMaskConfig(True, 10, 19, 6, 16, 4)
        >>> partial_mask("1234567891111111111", "*", cfg, ScrubConfig())
        '123456*********1111'
    """
    length = len(value)
    front = partial.visible_front_len
    back = partial.visible_back_len

    if length < partial.min_field_len or length > partial.max_field_len:
        return full_mask(value, symbol, config)

    if length < partial.visible_back_only_if_len_greater_than:
        if front >= length:
            return full_mask(value, symbol, config)
        return value[:front] + symbol * (length - front)

    if length <= partial.max_field_len:
        hidden = length - front - back
        if hidden <= 0:
            return full_mask(value, symbol, config)
        return value[:front] + symbol * hidden + value[length - back:]

    return full_mask(value, symbol, config)


def mask_value(value: str, policy: Optional[FieldPolicy], config: ScrubConfig) -> str:
    """
    Return the masked form of a value found under a matched field.

    Args:
        value: The original string.
        policy: The field's policy, or None for the default options.
        config: Supplies the default symbol and the fixed/variable length switch.

    Returns:
        The replacement string. Empty values are returned unchanged.
    """
    if not value:
        return value

    symbol = resolve_symbol(policy, config)
    if policy is not None and policy.partial_enabled:
        return partial_mask(value, symbol, policy.partial, config)
    return full_mask(value, symbol, config)
