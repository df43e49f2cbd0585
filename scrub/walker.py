"""
Recursive walker - discovers every maskable string location in a value graph.

The walker classifies each value it meets as one of the NodeKind shapes and
descends into records, sequences and keyed maps. Every string found under a
non-empty field name is yielded as a Slot, which the caller may rewrite.

Traversal rules:
    - None (an absent value) stops the walk for that branch
    - Records: every public field (no leading underscore), in declaration order,
      under the field's own name
    - Sequences: every element, under the sequence's field name
    - Keyed maps: string values under their key; list values are searched for
      nested maps; anything else is left alone
    - Strings under an empty field name are never yielded

The order is deterministic for a given value, so two walks over the same
shape (mask, then restore) visit the same slots in the same order.
"""

import dataclasses
import functools
import logging
import types
import typing
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from enum import Enum
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    RECORD = "record"
    SEQUENCE = "sequence"
    KEYED_MAP = "keyed_map"
    ABSENT = "absent"
    STRING = "string"
    OTHER = "other"


_OPAQUE_TYPES = (type, types.ModuleType, types.FunctionType, types.BuiltinFunctionType, types.MethodType, Enum)


def classify(value: Any) -> NodeKind:
    """Return the shape the walker sees for a value."""
    if value is None:
        return NodeKind.ABSENT
    if isinstance(value, str):
        return NodeKind.STRING
    if isinstance(value, (bytes, bytearray)):
        return NodeKind.OTHER
    if isinstance(value, Mapping):
        return NodeKind.KEYED_MAP
    if isinstance(value, (list, tuple)):
        return NodeKind.SEQUENCE
    if isinstance(value, _OPAQUE_TYPES):
        return NodeKind.OTHER
    if dataclasses.is_dataclass(value) or hasattr(value, "__dict__"):
        return NodeKind.RECORD
    return NodeKind.OTHER


class Slot:
    """One string location: a record attribute, a sequence index or a map key."""

    __slots__ = ("field_name", "value", "writable", "_container", "_key", "_is_attribute")

    def __init__(self, field_name: str, value: str, container: Any, key: Any,
                 writable: bool = True, is_attribute: bool = False):
        self.field_name = field_name
        self.value = value
        self.writable = writable
        self._container = container
        self._key = key
        self._is_attribute = is_attribute

    def set(self, new_value: str) -> None:
        """
        Rewrite the location.

        Raises:
            AttributeError/TypeError: if the location cannot be rewritten.
        """
        if not self.writable:
            raise TypeError(f"field '{self.field_name}' is read-only")
        if self._is_attribute:
            setattr(self._container, self._key, new_value)
        else:
            self._container[self._key] = new_value
        self.value = new_value

    def __repr__(self) -> str:
        return f"<Slot {self.field_name}={self.value!r}>"


def iter_slots(target: Any, field_name: str = "") -> Iterator[Slot]:
    """
    Yield every string location reachable from target.

    Args:
        target: Any value; records, lists, tuples and mappings are searched.
        field_name: Name the target itself was reached through, if any.

    Each container is visited at most once per call, so shared references
    and reference cycles do not yield a location twice.
    """
    return _Walk().walk(target, field_name, None)


class _Walk:

    def __init__(self):
        self._seen: set[int] = set()

    def _enter(self, container: Any) -> bool:
        marker = id(container)
        if marker in self._seen:
            return False
        self._seen.add(marker)
        return True

    def walk(self, value: Any, field_name: str, hint: Any) -> Iterator[Slot]:
        kind = classify(value)
        if kind is NodeKind.RECORD:
            yield from self._walk_record(value)
        elif kind is NodeKind.SEQUENCE:
            yield from self._walk_sequence(value, field_name, hint)
        elif kind is NodeKind.KEYED_MAP:
            yield from self._walk_map(value, field_name, hint)

    def _walk_record(self, record: Any) -> Iterator[Slot]:
        if not self._enter(record):
            return
        frozen = _is_frozen(record)
        for name, hint in record_fields(record):
            try:
                value = getattr(record, name)
            except AttributeError:
                continue
            if isinstance(value, str):
                yield Slot(name, value, record, name, writable=not frozen, is_attribute=True)
            else:
                yield from self.walk(value, name, hint)

    def _walk_sequence(self, sequence: Any, field_name: str, hint: Any) -> Iterator[Slot]:
        if not self._enter(sequence):
            return
        writable = isinstance(sequence, MutableSequence)
        element_hint = _element_hint(hint)
        for index, item in enumerate(sequence):
            if isinstance(item, str):
                if field_name:
                    yield Slot(field_name, item, sequence, index, writable=writable)
            else:
                yield from self.walk(item, field_name, element_hint)

    def _walk_map(self, mapping: Mapping, field_name: str, hint: Any) -> Iterator[Slot]:
        if hint is not None and not _is_dynamic_map_hint(hint):
            logger.debug(f"Skipping statically typed map under '{field_name}'")
            return
        if not self._enter(mapping):
            return
        writable = isinstance(mapping, MutableMapping)
        for key, value in list(mapping.items()):
            if not isinstance(key, str):
                continue
            if isinstance(value, str):
                yield Slot(key, value, mapping, key, writable=writable)
            elif isinstance(value, (list, tuple)) and self._enter(value):
                for item in value:
                    if isinstance(item, Mapping):
                        yield from self._walk_map(item, key, None)


def _is_frozen(record: Any) -> bool:
    params = getattr(type(record), "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


@functools.lru_cache(maxsize=256)
def record_type_hints(cls: type) -> dict:
    try:
        return typing.get_type_hints(cls)
    except Exception as e:
        logger.debug(f"Could not resolve type hints for {cls.__name__}: {e}")
        return {}


def record_fields(record: Any) -> list[tuple[str, Any]]:
    """Public (name, type hint) pairs of a record or dataclass type, in declaration order."""
    if dataclasses.is_dataclass(record):
        hints = record_type_hints(record if isinstance(record, type) else type(record))
        return [
            (f.name, hints.get(f.name))
            for f in dataclasses.fields(record)
            if not f.name.startswith("_")
        ]
    return [(name, None) for name in list(vars(record)) if not name.startswith("_")]


def unwrap_optional(hint: Any) -> Any:
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _is_dynamic_map_hint(hint: Any) -> bool:
    """
    True if a field hint allows arbitrary map values (dict, dict[str, Any]).

    A mapping annotated with a concrete value type, such as dict[str, str],
    is not searched.
    """
    hint = unwrap_optional(hint)
    if hint is Any or hint is object:
        return True
    origin = typing.get_origin(hint) or hint
    if not (isinstance(origin, type) and issubclass(origin, Mapping)):
        return True
    args = typing.get_args(hint)
    if len(args) != 2:
        return True
    return args[1] is Any or args[1] is object


def _element_hint(hint: Any) -> Optional[Any]:
    if hint is None:
        return None
    hint = unwrap_optional(hint)
    origin = typing.get_origin(hint)
    if isinstance(origin, type) and issubclass(origin, Sequence):
        args = typing.get_args(hint)
        if args:
            return args[0]
    return None
