"""Front matter values and their canonical serialisation.

Front matter is parsed by PyYAML into loosely typed Python objects. The
pipeline converts them into a closed set of value types so the canonical
serialiser can match on them exhaustively:

`ScalarValue`
: A YAML scalar. Strings are the common case, but implicitly typed scalars
  (integers, booleans, dates, ...) keep their native type so they round-trip
  without gaining quotes.

`SequenceValue`
: An ordered list of values, usually strings.

`MappingValue`
: A string-keyed mapping of values, nested to any depth.

Canonical form
: Top-level keys are emitted in descending lexicographic order while nested
  mappings are emitted in ascending order. The descending root order is kept
  for compatibility with documents already formatted by earlier releases.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import yaml

from .exceptions import MalformedMetadataError


__all__ = [
    "FRONT_MATTER_MARKER",
    "MappingValue",
    "Metadata",
    "MetadataValue",
    "ScalarValue",
    "SequenceValue",
    "canonicalize_metadata",
    "coerce_metadata",
    "coerce_value",
    "mapping_field",
    "sequence_field",
    "text_field",
    "to_plain",
]


FRONT_MATTER_MARKER = "---"

_STR_TAG = "tag:yaml.org,2002:str"
_SCALAR_TYPES = (str, bool, int, float, date, datetime, type(None))


@dataclass(frozen=True, slots=True)
class ScalarValue:
    """A single YAML scalar."""

    value: str | bool | int | float | date | datetime | None


@dataclass(frozen=True, slots=True)
class SequenceValue:
    """An ordered sequence of front matter values."""

    items: tuple[MetadataValue, ...] = ()


@dataclass(frozen=True, slots=True)
class MappingValue:
    """A nested string-keyed mapping of front matter values."""

    entries: tuple[tuple[str, MetadataValue], ...] = ()

    def get(self, key: str) -> MetadataValue | None:
        for name, value in self.entries:
            if name == key:
                return value
        return None

    def keys(self) -> list[str]:
        return [name for name, _ in self.entries]


MetadataValue = ScalarValue | SequenceValue | MappingValue
Metadata = dict[str, MetadataValue]


def coerce_value(raw: Any) -> MetadataValue:
    """Convert a parsed YAML object into a `MetadataValue`.

    Raises `MalformedMetadataError` when a YAML alias makes a container hold
    itself.
    """
    return _coerce(raw, set())


def _coerce(raw: Any, active: set[int]) -> MetadataValue:
    if isinstance(raw, ScalarValue | SequenceValue | MappingValue):
        return raw
    if isinstance(raw, Mapping | set | frozenset | list | tuple):
        if id(raw) in active:
            raise MalformedMetadataError("Front matter contains a recursive alias.")
        active.add(id(raw))
        try:
            if isinstance(raw, Mapping):
                return MappingValue(tuple(_coerce_entries(raw.items(), active).items()))
            if isinstance(raw, set | frozenset):
                items = sorted(raw, key=str)
            else:
                items = raw
            return SequenceValue(tuple(_coerce(item, active) for item in items))
        finally:
            active.discard(id(raw))
    if isinstance(raw, _SCALAR_TYPES):
        return ScalarValue(raw)
    if isinstance(raw, bytes):
        return ScalarValue(raw.decode("utf-8", errors="replace"))
    return ScalarValue(str(raw))


def coerce_metadata(raw: Mapping[Any, Any] | None) -> Metadata:
    """Convert a parsed front matter mapping into typed metadata."""
    if not raw:
        return {}
    return _coerce_entries(raw.items(), {id(raw)})


def _coerce_entries(
    items: Iterable[tuple[Any, Any]], active: set[int]
) -> dict[str, MetadataValue]:
    # Keys are coerced to strings; on collision (e.g. `1` and `"1"`) the last one wins.
    return {str(key): _coerce(value, active) for key, value in items}


def to_plain(value: MetadataValue) -> Any:
    """Return the plain Python object used to serialise a value."""
    match value:
        case ScalarValue(value=scalar):
            return scalar
        case SequenceValue(items=items):
            return [to_plain(item) for item in items]
        case MappingValue(entries=entries):
            ordered = sorted(entries, key=lambda entry: entry[0])
            return {key: to_plain(item) for key, item in ordered}
    raise TypeError(f"Unsupported metadata value: {value!r}")


class _CanonicalDumper(yaml.SafeDumper):
    """Safe dumper emitting indented block sequences."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        super().increase_indent(flow, False)


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    # Quote only when a plain scalar would resolve to another type (dates, numbers, ...).
    style = None
    if dumper.resolve(yaml.ScalarNode, value, (True, False)) != _STR_TAG:
        style = '"'
    return dumper.represent_scalar(_STR_TAG, value, style=style)


_CanonicalDumper.add_representer(str, _represent_str)


def canonicalize_metadata(metadata: Mapping[str, MetadataValue]) -> str:
    """Serialise metadata into a delimited, deterministic YAML block.

    Returns an empty string for empty metadata so callers never emit an empty
    marker pair.
    """
    if not metadata:
        return ""

    payload = {key: to_plain(metadata[key]) for key in sorted(metadata, reverse=True)}
    body = yaml.dump(
        payload,
        Dumper=_CanonicalDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    )
    return f"{FRONT_MATTER_MARKER}\n{body}{FRONT_MATTER_MARKER}\n\n"


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value)


def text_field(metadata: Mapping[str, MetadataValue], key: str, default: str = "") -> str:
    """Return a field as text, joining sequences with commas."""
    match metadata.get(key):
        case ScalarValue(value=scalar):
            return _scalar_text(scalar) or default
        case SequenceValue(items=items):
            parts = [_scalar_text(item.value) for item in items if isinstance(item, ScalarValue)]
            return ", ".join(parts) or default
    return default


def sequence_field(metadata: Mapping[str, MetadataValue], key: str) -> list[str]:
    """Return a field as an ordered list of strings."""
    match metadata.get(key):
        case ScalarValue(value=scalar) if scalar is not None:
            text = _scalar_text(scalar)
            return [text] if text else []
        case SequenceValue(items=items):
            return [_scalar_text(item.value) for item in items if isinstance(item, ScalarValue)]
    return []


def mapping_field(metadata: Mapping[str, MetadataValue], key: str) -> dict[str, str]:
    """Return the scalar entries of a nested mapping, sorted by key."""
    value = metadata.get(key)
    if not isinstance(value, MappingValue):
        return {}
    return {
        name: _scalar_text(item.value)
        for name, item in sorted(value.entries, key=lambda entry: entry[0])
        if isinstance(item, ScalarValue)
    }
