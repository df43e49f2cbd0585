"""
Format codecs - render values as record notation (JSON) or tag notation (XML).

The engine only relies on the FormatCodec contract:
    - encode(value) -> bytes, raising EncodeError
    - decode(data, into, like=None) populating an existing instance, raising DecodeError
    - empty_text, the format's rendering of an absent value

decode() is what makes the clone strategy work: the original is encoded and
decoded into a fresh instance supplied by the caller, and only that instance
is masked. Records are rebuilt from the target's dataclass type hints, so
nested records, lists and maps come back with the same shape. Where no hint
says what a value was (plain objects, Any fields), the optional ``like``
value, normally the original itself, supplies the runtime type. Leaf values
are checked against their hints with pydantic.
"""

import copy
import dataclasses
import functools
import json
import typing
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from enum import Enum
from typing import Any, Callable, Union

from pydantic import TypeAdapter, ValidationError

from .walker import NodeKind, classify, record_fields, record_type_hints, unwrap_optional


class DataType(Enum):
    JSON = "json"  # record notation
    XML = "xml"  # tag notation


class CodecError(Exception):
    """Base class for codec failures."""


class EncodeError(CodecError):
    """A value could not be serialized."""


class DecodeError(CodecError):
    """Serialized data could not be loaded into the target instance."""


_MISSING = object()

# lookup(field_name, hint) -> decoded value, or _MISSING when the data has no such field
FieldLookup = Callable[[str, Any], Any]


class FormatCodec(ABC):
    """Serializer contract consumed by the scrub engine."""

    @property
    @abstractmethod
    def data_type(self) -> DataType:
        pass

    @property
    @abstractmethod
    def empty_text(self) -> str:
        """Text returned for absent input or a failed scrub."""
        pass

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        pass

    @abstractmethod
    def decode(self, data: bytes, into: Any, like: Any = None) -> None:
        """
        Populate into from data.

        like, if given, is a value of the encoded shape whose runtime types
        are used wherever into's type hints do not name one.
        """
        pass

    def __repr__(self) -> str:
        return f"<FormatCodec: {self.data_type.value}>"


# ---------------------------------------------------------------------------
# Shared record construction
# ---------------------------------------------------------------------------

def _zero_value(field: dataclasses.Field) -> Any:
    if field.default is not dataclasses.MISSING:
        return _MISSING
    if field.default_factory is not dataclasses.MISSING:
        return _MISSING
    return None


def _make_record(cls: type, lookup: FieldLookup) -> Any:
    """Instantiate a dataclass from decoded field values."""
    hints = record_type_hints(cls)
    init_args = {}
    late = {}
    for field in dataclasses.fields(cls):
        value = _MISSING
        if not field.name.startswith("_"):
            value = lookup(field.name, hints.get(field.name))
        if value is _MISSING:
            value = _zero_value(field)
        if value is _MISSING:
            continue
        if field.init:
            init_args[field.name] = value
        else:
            late[field.name] = value

    try:
        record = cls(**init_args)
    except TypeError as e:
        raise DecodeError(f"cannot build {cls.__name__}: {e}") from e
    for name, value in late.items():
        object.__setattr__(record, name, value)
    return record


def _populate_record(into: Any, lookup: FieldLookup, names: Sequence[str] = ()) -> None:
    """Set the decoded fields on an existing record instance."""
    if dataclasses.is_dataclass(into):
        fields = record_fields(into)
    else:
        fields = [(name, None) for name in names if not name.startswith("_")]

    for name, hint in fields:
        value = lookup(name, hint)
        if value is _MISSING:
            continue
        try:
            setattr(into, name, value)
        except AttributeError as e:
            raise DecodeError(f"cannot set field '{name}' on {type(into).__name__}: {e}") from e


def _rebuild_like(like: Any, lookup: FieldLookup, names: Sequence[str]) -> Any:
    """Build a fresh record of like's runtime type from decoded field values."""
    if dataclasses.is_dataclass(like):
        return _make_record(type(like), lookup)

    try:
        record = copy.copy(like)
    except (TypeError, copy.Error) as e:
        raise DecodeError(f"cannot copy {type(like).__name__}: {e}") from e
    # Attributes the data did not carry (None, empty containers) must not be
    # shared with like.
    for name, value in list(vars(record).items()):
        if not name.startswith("_") and name not in names:
            setattr(record, name, copy.deepcopy(value))
    _populate_record(record, lookup, names)
    return record


def _like_field(like: Any, name: str) -> Any:
    if classify(like) is NodeKind.RECORD:
        return getattr(like, name, None)
    return None


def _like_item(like: Any, index: int) -> Any:
    if isinstance(like, (list, tuple)) and index < len(like):
        return like[index]
    return None


def _like_value(like: Any, key: str) -> Any:
    if isinstance(like, Mapping):
        return like.get(key)
    return None


def _is_open_hint(hint: Any) -> bool:
    return hint is None or hint is Any or hint is object


def _is_sequence_hint(hint: Any) -> bool:
    if hint in (list, tuple):
        return True
    origin = typing.get_origin(hint)
    return isinstance(origin, type) and issubclass(origin, Sequence) and not issubclass(origin, str)


def _is_mapping_hint(hint: Any) -> bool:
    if hint is dict:
        return True
    origin = typing.get_origin(hint)
    return isinstance(origin, type) and issubclass(origin, Mapping)


def _is_record_hint(hint: Any) -> bool:
    return isinstance(hint, type) and dataclasses.is_dataclass(hint)


def _record_class(hint: type, like: Any) -> type:
    # A subclass instance encodes its own fields, so it is rebuilt as itself.
    return type(like) if isinstance(like, hint) else hint


def _element_type(hint: Any, position: int = 0) -> Any:
    args = typing.get_args(hint)
    if len(args) > position:
        return args[position]
    return None


_SCALAR_TYPES = (bool, int, float, str)


@functools.lru_cache(maxsize=128)
def _adapter(hint: type) -> TypeAdapter:
    return TypeAdapter(hint)


def _validate_scalar(hint: Any, raw: Any, strict: bool = True) -> Any:
    """
    Check a leaf value against its hint.

    Basic scalars are validated strictly for record notation and converted
    from text for tag notation. Enum members are looked up by value. Any
    other hint is trusted as is.
    """
    if not isinstance(hint, type) or typing.get_origin(hint) is not None:
        return raw
    if issubclass(hint, Enum):
        strict = False
    elif hint not in _SCALAR_TYPES:
        return raw
    try:
        value = _adapter(hint).validate_python(raw, strict=strict)
    except ValidationError as e:
        raise DecodeError(f"expected {hint.__name__}, got {raw!r}") from e
    return float(value) if hint is float else value


# ---------------------------------------------------------------------------
# Record notation
# ---------------------------------------------------------------------------

def to_plain(value: Any, _active: set = None) -> Any:
    """
    Convert records, sequences and maps into JSON-ready builtins.

    Record fields keep their declared names and order. Private fields
    (leading underscore) are not rendered.

    Raises:
        EncodeError: on unsupported types, non-string map keys or cycles.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Enum):
        return to_plain(value.value, _active)

    active = set() if _active is None else _active
    marker = id(value)
    if marker in active:
        raise EncodeError(f"circular reference through {type(value).__name__}")
    active.add(marker)
    try:
        kind = classify(value)
        if kind is NodeKind.KEYED_MAP:
            plain = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise EncodeError(f"map key {key!r} is not a string")
                plain[key] = to_plain(item, active)
            return plain
        if kind is NodeKind.SEQUENCE:
            return [to_plain(item, active) for item in value]
        if kind is NodeKind.RECORD:
            return {
                name: to_plain(getattr(value, name, None), active)
                for name, _ in record_fields(value)
            }
        raise EncodeError(f"unsupported type: {type(value).__name__}")
    finally:
        active.discard(marker)


def from_plain(hint: Any, raw: Any, like: Any = None) -> Any:
    """
    Rebuild a value of the hinted type from JSON builtins.

    Without a usable hint the runtime shape of like is followed; without
    either the raw builtin is returned as is.
    """
    if raw is None:
        return None
    hint = unwrap_optional(hint)
    if _is_open_hint(hint):
        return _from_plain_like(raw, like)

    if _is_record_hint(hint):
        if not isinstance(raw, Mapping):
            raise DecodeError(f"expected an object for {hint.__name__}, got {type(raw).__name__}")
        return _make_record(_record_class(hint, like), _plain_lookup(raw, like))

    if _is_sequence_hint(hint):
        if not isinstance(raw, list):
            raise DecodeError(f"expected an array, got {type(raw).__name__}")
        item_hint = _element_type(hint)
        items = [from_plain(item_hint, item, _like_item(like, index)) for index, item in enumerate(raw)]
        origin = typing.get_origin(hint) or hint
        return tuple(items) if issubclass(origin, tuple) else items

    if _is_mapping_hint(hint):
        if not isinstance(raw, Mapping):
            raise DecodeError(f"expected an object, got {type(raw).__name__}")
        value_hint = _element_type(hint, 1)
        return {key: from_plain(value_hint, item, _like_value(like, key)) for key, item in raw.items()}

    return _validate_scalar(hint, raw)


def _from_plain_like(raw: Any, like: Any) -> Any:
    kind = classify(like)
    if kind is NodeKind.RECORD and isinstance(raw, Mapping):
        return _rebuild_like(like, _plain_lookup(raw, like), list(raw))
    if kind is NodeKind.SEQUENCE and isinstance(raw, list):
        items = [from_plain(None, item, _like_item(like, index)) for index, item in enumerate(raw)]
        return tuple(items) if isinstance(like, tuple) else items
    if kind is NodeKind.KEYED_MAP and isinstance(raw, Mapping):
        return {key: from_plain(None, item, _like_value(like, key)) for key, item in raw.items()}
    if isinstance(like, Enum):
        return _validate_scalar(type(like), raw)
    return raw


def _plain_lookup(raw: Mapping, like: Any = None) -> FieldLookup:
    def lookup(name: str, hint: Any) -> Any:
        if name not in raw:
            return _MISSING
        return from_plain(hint, raw[name], _like_field(like, name))
    return lookup


class JSONCodec(FormatCodec):
    """Compact record notation, e.g. {"Username":"admin","Password":"********"}."""

    @property
    def data_type(self) -> DataType:
        return DataType.JSON

    @property
    def empty_text(self) -> str:
        return "null"

    def encode(self, value: Any) -> bytes:
        plain = to_plain(value)
        try:
            text = json.dumps(plain, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise EncodeError(str(e)) from e
        return text.encode("utf-8")

    def decode(self, data: Union[bytes, str], into: Any, like: Any = None) -> None:
        try:
            raw = json.loads(data)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"invalid JSON: {e}") from e

        if isinstance(into, MutableMapping):
            if not isinstance(raw, Mapping):
                raise DecodeError(f"expected an object, got {type(raw).__name__}")
            into.clear()
            into.update({key: from_plain(None, item, _like_value(like, key)) for key, item in raw.items()})
        elif isinstance(into, MutableSequence):
            if not isinstance(raw, list):
                raise DecodeError(f"expected an array, got {type(raw).__name__}")
            into[:] = [from_plain(None, item, _like_item(like, index)) for index, item in enumerate(raw)]
        elif classify(into) is NodeKind.RECORD:
            if not isinstance(raw, Mapping):
                raise DecodeError(f"expected an object, got {type(raw).__name__}")
            _populate_record(into, _plain_lookup(raw, like), list(raw))
        else:
            raise DecodeError(f"cannot decode into {type(into).__name__}")


# ---------------------------------------------------------------------------
# Tag notation
# ---------------------------------------------------------------------------

def _append_element(parent: ET.Element, name: str, value: Any, active: set) -> None:
    if value is None:
        return
    if isinstance(value, Enum):
        value = value.value

    if isinstance(value, str):
        ET.SubElement(parent, name).text = value
    elif isinstance(value, bool):
        ET.SubElement(parent, name).text = "true" if value else "false"
    elif isinstance(value, (int, float)):
        ET.SubElement(parent, name).text = str(value)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _append_element(parent, name, item, active)
    elif isinstance(value, Mapping):
        if value:
            raise EncodeError(f"unsupported type: mapping in field '{name}'")
    elif classify(value) is NodeKind.RECORD:
        marker = id(value)
        if marker in active:
            raise EncodeError(f"circular reference through {type(value).__name__}")
        active.add(marker)
        child = ET.SubElement(parent, name)
        for field_name, _ in record_fields(value):
            _append_element(child, field_name, getattr(value, field_name, None), active)
        active.discard(marker)
    else:
        raise EncodeError(f"unsupported type: {type(value).__name__} in field '{name}'")


def _child_tags(element: ET.Element) -> list[str]:
    return list(dict.fromkeys(child.tag for child in element))


def _from_element(hint: Any, element: ET.Element, like: Any = None) -> Any:
    hint = unwrap_optional(hint)
    if _is_open_hint(hint):
        if classify(like) is NodeKind.RECORD:
            return _rebuild_like(like, _element_lookup(element, like), _child_tags(element))
        if type(like) in _SCALAR_TYPES or isinstance(like, Enum):
            hint = type(like)
        elif len(element):
            raise DecodeError(f"cannot rebuild element '{element.tag}' without a record type")

    if _is_record_hint(hint):
        return _make_record(_record_class(hint, like), _element_lookup(element, like))
    if _is_mapping_hint(hint):
        raise DecodeError(f"unsupported type: mapping in element '{element.tag}'")

    text = element.text or ""
    if hint is str or _is_open_hint(hint):
        return text
    try:
        return _validate_scalar(hint, text, strict=False)
    except DecodeError as e:
        raise DecodeError(f"invalid value in element '{element.tag}': {e}") from e


def _from_elements(hint: Any, elements: list, like: Any = None) -> Any:
    hint = unwrap_optional(hint)
    if _is_sequence_hint(hint):
        item_hint = _element_type(hint)
        as_tuple = issubclass(typing.get_origin(hint) or hint, tuple)
    elif _is_open_hint(hint) and (isinstance(like, (list, tuple)) or len(elements) > 1):
        # Repeated elements without a hint are a sequence.
        item_hint = None
        as_tuple = isinstance(like, tuple)
    elif not elements:
        return _MISSING
    else:
        return _from_element(hint, elements[0], like)

    items = [_from_element(item_hint, element, _like_item(like, index)) for index, element in enumerate(elements)]
    return tuple(items) if as_tuple else items


def _element_lookup(element: ET.Element, like: Any = None) -> FieldLookup:
    def lookup(name: str, hint: Any) -> Any:
        return _from_elements(hint, element.findall(name), _like_field(like, name))
    return lookup


class XMLCodec(FormatCodec):
    """
    Indented tag notation with one element per field.

    The root element is named after the record's class and sequences become
    repeated elements. Non-empty maps have no tag-notation form and fail to encode.
    """

    INDENT = "    "

    @property
    def data_type(self) -> DataType:
        return DataType.XML

    @property
    def empty_text(self) -> str:
        return ""

    def encode(self, value: Any) -> bytes:
        if classify(value) is not NodeKind.RECORD:
            raise EncodeError(f"unsupported top-level type: {type(value).__name__}")

        root = ET.Element(type(value).__name__)
        active = {id(value)}
        for name, _ in record_fields(value):
            _append_element(root, name, getattr(value, name, None), active)

        ET.indent(root, space=self.INDENT)
        return ET.tostring(root, encoding="unicode", short_empty_elements=False).encode("utf-8")

    def decode(self, data: Union[bytes, str], into: Any, like: Any = None) -> None:
        if classify(into) is not NodeKind.RECORD:
            raise DecodeError(f"cannot decode into {type(into).__name__}")
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise DecodeError(f"invalid XML: {e}") from e

        _populate_record(into, _element_lookup(root, like), _child_tags(root))


_CODECS: dict[DataType, FormatCodec] = {
    DataType.JSON: JSONCodec(),
    DataType.XML: XMLCodec(),
}


def get_codec(data_type: Union[DataType, str]) -> FormatCodec:
    """
    Return the codec for a data type.

    Raises:
        ValueError: for an unknown data type name.
    """
    return _CODECS[DataType(data_type)]
