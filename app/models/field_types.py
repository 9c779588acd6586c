# File: /app/models/field_types.py | Version: 1.0 | Title: Work item field kinds and the closed FieldType variant
"""
Field types of a work item type.

A field type is one of exactly three shapes:

* ``SimpleType``  - a single simple kind (``string``, ``user``, ...)
* ``ListType``    - ``list`` of a simple component kind
* ``EnumType``    - ``enum`` over a simple base kind with an ordered list of values

Every consumer matches on these three classes; anything else is a bug.
Values are kept JSON-friendly since definitions are persisted as JSON.
"""
from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlparse

from app.core.errors import ConversionError


class Kind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    INSTANT = "instant"
    DURATION = "duration"
    URL = "url"
    MARKUP = "markup"
    USER = "user"
    ITERATION = "iteration"
    AREA = "area"
    LABEL = "label"
    BOARDCOLUMN = "boardcolumn"
    CODEBASE = "codebase"
    LIST = "list"
    ENUM = "enum"

    def is_simple(self) -> bool:
        return self not in (Kind.LIST, Kind.ENUM)


def kind_from_string(value: Any) -> Kind:
    """Strict lookup; unknown kinds are a conversion error."""
    if isinstance(value, Kind):
        return value
    if not isinstance(value, str):
        raise ConversionError(f"kind must be a string, got {type(value).__name__}")
    try:
        return Kind(value)
    except ValueError:
        raise ConversionError(f"kind '{value}' is not a known field kind") from None


# ----- value converters (one per simple kind) -----


def _to_str(value: Any) -> str:
    if not isinstance(value, str):
        raise ConversionError(f"value {value!r} is not a string")
    return value


def _to_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise ConversionError(f"value {value!r} is not an integer")
    return value


def _to_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConversionError(f"value {value!r} is not a number")
    return float(value)


def _to_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConversionError(f"value {value!r} is not a boolean")
    return value


def _to_instant(value: Any) -> str:
    if isinstance(value, dt.datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ConversionError(f"value {value!r} is not an ISO-8601 instant") from None
    else:
        raise ConversionError(f"value {value!r} is not an instant")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed.astimezone(dt.timezone.utc).isoformat()


def _to_url(value: Any) -> str:
    text = _to_str(value)
    parsed = urlparse(text)
    if not parsed.scheme or not parsed.netloc:
        raise ConversionError(f"value {value!r} is not an absolute URL")
    return text


def _to_uuid(value: Any) -> str:
    if isinstance(value, uuid.UUID):
        return str(value)
    text = _to_str(value)
    try:
        return str(uuid.UUID(text))
    except ValueError:
        raise ConversionError(f"value {value!r} is not a UUID") from None


_CONVERTERS: Dict[Kind, Callable[[Any], Any]] = {
    Kind.STRING: _to_str,
    Kind.MARKUP: _to_str,
    Kind.INTEGER: _to_int,
    Kind.DURATION: _to_int,
    Kind.FLOAT: _to_float,
    Kind.BOOLEAN: _to_bool,
    Kind.INSTANT: _to_instant,
    Kind.URL: _to_url,
    Kind.USER: _to_uuid,
    Kind.ITERATION: _to_uuid,
    Kind.AREA: _to_uuid,
    Kind.LABEL: _to_uuid,
    Kind.BOARDCOLUMN: _to_uuid,
    Kind.CODEBASE: _to_uuid,
}


# ----- the variant -----


@dataclass(frozen=True)
class SimpleType:
    kind: Kind

    def __post_init__(self):
        if not self.kind.is_simple():
            raise ConversionError(f"'{self.kind.value}' is not a simple kind")

    def convert_to_model(self, value: Any) -> Any:
        if value is None:
            return None
        return _CONVERTERS[self.kind](value)


@dataclass(frozen=True)
class ListType:
    component_type: SimpleType
    kind: Kind = field(default=Kind.LIST, init=False)

    def convert_to_model(self, value: Any) -> Optional[List[Any]]:
        if value is None:
            return None
        items = value if isinstance(value, (list, tuple)) else [value]
        return convert_list(self.component_type.convert_to_model, items)


@dataclass(frozen=True)
class EnumType:
    base_type: SimpleType
    values: List[Any]
    kind: Kind = field(default=Kind.ENUM, init=False)

    def convert_to_model(self, value: Any) -> Any:
        if value is None:
            return None
        converted = self.base_type.convert_to_model(value)
        if converted not in self.values:
            raise ConversionError(f"value {value!r} is not one of {self.values!r}")
        return converted


FieldType = Union[SimpleType, ListType, EnumType]


def convert_list(converter: Callable[[Any], Any], values: Optional[List[Any]]) -> List[Any]:
    """Convert every element or fail as a whole."""
    converted = []
    for index, element in enumerate(values or []):
        try:
            converted.append(converter(element))
        except ConversionError as exc:
            raise ConversionError(f"element {index}: {exc.detail}") from exc
    return converted


@dataclass(frozen=True)
class FieldDefinition:
    type: FieldType
    label: str = ""
    description: Optional[str] = None
    required: bool = False


# ----- JSON storage -----


def field_type_to_dict(t: FieldType) -> Dict[str, Any]:
    if isinstance(t, SimpleType):
        return {"kind": t.kind.value}
    if isinstance(t, ListType):
        return {"kind": t.kind.value, "componentType": t.component_type.kind.value}
    if isinstance(t, EnumType):
        return {
            "kind": t.kind.value,
            "baseType": t.base_type.kind.value,
            "values": list(t.values),
        }
    raise TypeError(f"unexpected field type {t!r}")


def field_type_from_dict(data: Dict[str, Any]) -> FieldType:
    kind = kind_from_string(data.get("kind"))
    if kind is Kind.LIST:
        return ListType(component_type=SimpleType(kind_from_string(data.get("componentType"))))
    if kind is Kind.ENUM:
        base = SimpleType(kind_from_string(data.get("baseType")))
        return EnumType(base_type=base, values=list(data.get("values") or []))
    return SimpleType(kind)


def field_definitions_to_json(fields: Dict[str, FieldDefinition]) -> Dict[str, Any]:
    return {
        name: {
            "label": fd.label,
            "description": fd.description,
            "required": fd.required,
            "type": field_type_to_dict(fd.type),
        }
        for name, fd in fields.items()
    }


def field_definitions_from_json(data: Optional[Dict[str, Any]]) -> Dict[str, FieldDefinition]:
    return {
        name: FieldDefinition(
            type=field_type_from_dict(raw.get("type") or {}),
            label=raw.get("label") or name,
            description=raw.get("description"),
            required=bool(raw.get("required", False)),
        )
        for name, raw in (data or {}).items()
    }
