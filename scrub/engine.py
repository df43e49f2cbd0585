"""
ScrubEngine - masks sensitive fields of a value and renders it as text.

The engine combines:
1. Field policies (from loaded profiles and/or explicit policies)
2. The recursive walker, which finds every string under a named field
3. The masking strategy, which computes each replacement
4. A format codec, which renders the masked value

The caller's value is never left modified. Two strategies are available:
    - scrub_in_place(): mask the value itself, render it, then restore every
      original from a saved-value queue filled in traversal order
    - scrub_clone(): round-trip the value through the codec into a fresh
      instance supplied by the caller, and only mask that instance
"""

import dataclasses
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .base_profile import FieldsToScrub, PolicyMap, ScrubProfile, normalize_field_name, normalize_policies
from .codecs import CodecError, DataType, EncodeError, get_codec
from .config import ScrubConfig, get_default_config
from .masking import mask_value
from .walker import iter_slots

logger = logging.getLogger(__name__)


class ScrubStatus(Enum):
    SUCCESS = "success"
    EMPTY_INPUT = "empty_input"
    CODEC_FAILURE = "codec_failure"


@dataclass(frozen=True)
class ScrubResult:
    """
    Outcome of a scrub call.

    text always holds something printable: the scrubbed rendering on success,
    otherwise the format's empty value ("null" for JSON, "" for XML).
    """
    text: str
    status: ScrubStatus
    masked: int = 0  # number of non-empty values masked
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ScrubStatus.SUCCESS


class ScrubEngine:
    """
    Engine for masking sensitive fields in arbitrarily nested values.

    Example:
        engine = ScrubEngine({"password": None, "keys": FieldPolicy(symbol=".")})

        # Mutate + restore
        result = engine.scrub_in_place(user)
        # result.text: '{"Username":"admin","Password":"********",...}'

        # Clone + mutate
        result = engine.scrub_clone(User(), user, DataType.XML)

        # Profiles
        from scrub.profiles import PaymentCardProfile
        engine.load_profile(PaymentCardProfile())

    When neither explicit policies nor profiles are given, the configured
    default field names (``password`` unless changed) are fully masked.

    Thread Safety:
        scrub_clone() never touches the original and is safe to call
        concurrently. scrub_in_place() temporarily modifies the target, so
        concurrent calls must not share a target value.
    """

    def __init__(
        self,
        field_policies: Optional[FieldsToScrub] = None,
        config: Optional[ScrubConfig] = None,
    ):
        """
        Initialize the ScrubEngine.

        Args:
            field_policies: Mapping of field name -> FieldPolicy (or None for
                            default options), or an iterable of field names.
            config: Explicit configuration. If omitted, the process-wide
                    default is read at each call.
        """
        self._profiles: dict[str, ScrubProfile] = {}
        self._policies: PolicyMap = normalize_policies(field_policies) if field_policies is not None else {}
        self._config = config

    @property
    def config(self) -> ScrubConfig:
        return self._config if self._config is not None else get_default_config()

    def load_profile(self, profile: ScrubProfile) -> None:
        """
        Load a scrub profile into the engine.

        Note:
            If a profile with the same name already exists, it will be replaced.
        """
        self._profiles[profile.name] = profile
        logger.info(f"Loaded scrub profile: {profile.name}")

    def unload_profile(self, profile_name: str) -> bool:
        """
        Remove a scrub profile from the engine.

        Returns:
            True if profile was removed, False if not found.
        """
        if profile_name in self._profiles:
            del self._profiles[profile_name]
            logger.info(f"Unloaded scrub profile: {profile_name}")
            return True
        return False

    def list_profiles(self) -> list[str]:
        """Return a list of loaded profile names."""
        return list(self._profiles.keys())

    @property
    def field_policies(self) -> PolicyMap:
        """
        The effective policy map: profiles in load order, then explicit policies.

        Falls back to the configured default field names when empty.
        """
        policies: PolicyMap = {}
        for profile in self._profiles.values():
            policies.update(normalize_policies(profile.get_field_policies()))
        policies.update(self._policies)
        if not policies:
            policies = {normalize_field_name(name): None for name in self.config.default_fields}
        return policies

    def mask_in_place(self, target: Any) -> int:
        """
        Mask every matching field of target without restoring it.

        Returns:
            The number of non-empty values masked.
        """
        return self._mask(target, self.field_policies, self.config, None)

    def scrub_in_place(self, target: Any, data_type: Union[DataType, str] = DataType.JSON) -> ScrubResult:
        """
        Render target with its sensitive fields masked (mutate + restore).

        The target is masked in place, encoded, and then every original value
        is written back, also when encoding fails.

        Args:
            target: The value to render. It must be mutable for masking to
                    have any effect; read-only locations are left as they are.
            data_type: Output format.

        Returns:
            A ScrubResult; EMPTY_INPUT for a None target.
        """
        codec = get_codec(data_type)
        if target is None:
            return ScrubResult(codec.empty_text, ScrubStatus.EMPTY_INPUT)

        policies = self.field_policies
        config = self.config
        saved: deque = deque()
        try:
            masked = self._mask(target, policies, config, saved)
            try:
                data = codec.encode(target)
            except EncodeError as e:
                logger.warning(f"Could not encode scrubbed {type(target).__name__} as {codec.data_type.value}: {e}")
                return ScrubResult(codec.empty_text, ScrubStatus.CODEC_FAILURE, error=str(e))
            return ScrubResult(data.decode("utf-8"), ScrubStatus.SUCCESS, masked)
        finally:
            self._restore(target, policies, saved)

    def scrub_clone(
        self,
        empty_clone: Any,
        target: Any,
        data_type: Union[DataType, str] = DataType.JSON,
    ) -> ScrubResult:
        """
        Render target with its sensitive fields masked (clone + mutate).

        Args:
            empty_clone: A fresh, empty instance of the same shape as target
                         (e.g. ``User()`` for a User, ``{}`` for a dict). It is
                         overwritten with a copy of target and then masked.
            target: The value to render; it is only read. Where the clone's
                    type hints are silent (plain objects, ``Any`` fields),
                    nested values are rebuilt with target's runtime types.
            data_type: Output format, also used for the copy round trip.

        Returns:
            A ScrubResult; EMPTY_INPUT if either argument is None,
            CODEC_FAILURE if the round trip or the final encoding fails.
        """
        codec = get_codec(data_type)
        if target is None or empty_clone is None:
            return ScrubResult(codec.empty_text, ScrubStatus.EMPTY_INPUT)
        if empty_clone is target:
            logger.warning("Clone receptacle is the target itself; refusing to mask the original")
            return ScrubResult(codec.empty_text, ScrubStatus.EMPTY_INPUT)

        try:
            codec.decode(codec.encode(target), empty_clone, like=target)
            masked = self._mask(empty_clone, self.field_policies, self.config, None)
            data = codec.encode(empty_clone)
        except CodecError as e:
            logger.warning(f"Could not clone {type(target).__name__} through {codec.data_type.value}: {e}")
            return ScrubResult(codec.empty_text, ScrubStatus.CODEC_FAILURE, error=str(e))

        return ScrubResult(data.decode("utf-8"), ScrubStatus.SUCCESS, masked)

    @staticmethod
    def _mask(target: Any, policies: PolicyMap, config: ScrubConfig, saved: Optional[deque]) -> int:
        # Every matched, writable slot is recorded in saved (empty values
        # included) so that _restore can pop once per matched slot.
        masked = 0
        for slot in iter_slots(target):
            key = normalize_field_name(slot.field_name)
            if key not in policies:
                continue
            if not slot.writable:
                logger.debug(f"Skipping read-only field '{slot.field_name}'")
                continue
            original = slot.value
            replacement = mask_value(original, policies[key], config)
            try:
                slot.set(replacement)
            except (AttributeError, TypeError) as e:
                logger.debug(f"Skipping field '{slot.field_name}': {e}")
                continue
            if saved is not None:
                saved.append(original)
            if original:
                masked += 1
        return masked

    @staticmethod
    def _restore(target: Any, policies: PolicyMap, saved: deque) -> None:
        for slot in iter_slots(target):
            if not saved:
                break
            if normalize_field_name(slot.field_name) not in policies or not slot.writable:
                continue
            try:
                slot.set(saved[0])
            except (AttributeError, TypeError):
                continue
            saved.popleft()


# Singleton instance for convenience
_default_engine: Optional[ScrubEngine] = None


def get_default_engine() -> ScrubEngine:
    """
    Get the default ScrubEngine instance.

    It masks the configured default fields. For more control, instantiate
    ScrubEngine directly.
    """
    global _default_engine
    if _default_engine is None:
        _default_engine = ScrubEngine()
    return _default_engine


def scrub(target: Any, fields_to_scrub: Optional[FieldsToScrub] = None,
          config: Optional[ScrubConfig] = None) -> str:
    """
    Return the JSON rendering of target with the named fields masked.

    target is masked in place and restored before returning. Names are
    compared case-insensitively; without names the configured default
    fields (``password``) are masked.

    Masks have the fixed length (``"********"`` by default) unless an
    explicit config asks for length-proportional masks; the process-wide
    mask_len_vary flag is not consulted here.

    Example:
        >>> scrub(User(Username="admin", Password="hunter22"))
        '{"Username":"admin","Password":"********"}'

    Returns:
        "null" for a None target or when the value cannot be encoded.
    """
    if config is None:
        config = dataclasses.replace(get_default_config(), mask_len_vary=False)
    return ScrubEngine(fields_to_scrub, config=config).scrub_in_place(target).text


def scrub_clone(
    empty_clone: Any,
    target: Any,
    field_policies: Optional[FieldsToScrub] = None,
    data_type: Union[DataType, str] = DataType.JSON,
    config: Optional[ScrubConfig] = None,
) -> str:
    """
    Return the rendering of target with the named fields masked, using a clone.

    Returns:
        The format's empty value ("null" / "") for missing input or a codec failure.
    """
    engine = ScrubEngine(field_policies, config=config)
    return engine.scrub_clone(empty_clone, target, data_type).text
