"""Temporal DataConverter for return-leg payloads.

Decimal and date values are tagged so they survive JSON unchanged, and
dataclasses carry a ``__type__`` tag so nested frozen records
(AssetReturnLeg, ValuationSchedule, FrozenMap, NotionalChangeEvent)
round-trip through workflow history.
"""

from __future__ import annotations

import dataclasses
import importlib
import json
from datetime import date
from decimal import Decimal
from enum import Enum
from functools import cache
from typing import Any, get_type_hints

from temporalio.converter import (
    CompositePayloadConverter,
    DataConverter,
    DefaultPayloadConverter,
    JSONPlainPayloadConverter,
    JSONTypeConverter,
)

_TYPE_TAG = "__type__"
_DECIMAL_TAG = "__decimal__"
_DATE_TAG = "__date__"

# Only classes from these modules are instantiated from payloads.
_ALLOWED_MODULES: frozenset[str] = frozenset({
    "returnleg.core.numeric",
    "returnleg.core.types",
    "returnleg.instrument.return_leg",
    "returnleg.pricing.balance",
    "returnleg.workflow.types",
})

# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def to_json(obj: Any) -> Any:
    """Recursively convert payload objects to JSON-compatible values."""
    match obj:
        case None | bool() | int() | str():
            return obj
        case Decimal():
            return {_DECIMAL_TAG: str(obj)}
        case date():
            return {_DATE_TAG: obj.isoformat()}
        case Enum():
            return obj.value
        case tuple() | list():
            return [to_json(x) for x in obj]
        case _ if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            cls = type(obj)
            return {
                _TYPE_TAG: f"{cls.__module__}.{cls.__qualname__}",
                **{f.name: to_json(getattr(obj, f.name)) for f in dataclasses.fields(obj)},
            }
    raise TypeError(f"Cannot encode {type(obj).__name__} for workflow payload")


class ReturnLegJSONEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        return to_json(o)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


@cache
def _resolve_class(fqn: str) -> type | None:
    module_name, _, class_name = fqn.rpartition(".")
    if module_name not in _ALLOWED_MODULES:
        return None
    cls = getattr(importlib.import_module(module_name), class_name, None)
    return cls if isinstance(cls, type) and dataclasses.is_dataclass(cls) else None


def _decode_dataclass(fqn: str, value: dict[str, Any]) -> Any:
    cls = _resolve_class(fqn)
    if cls is None:
        raise TypeError(f"Refusing to decode payload type {fqn!r}")
    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError):
        # PEP 695 type parameters are not resolvable from module globals.
        hints = {}
    return cls(**{
        f.name: from_json(hints.get(f.name, Any), value[f.name])
        for f in dataclasses.fields(cls)
        if f.name in value
    })


def from_json(hint: Any, value: Any) -> Any:
    """Recursively convert JSON values back to payload objects."""
    match value:
        case None:
            return None
        case {"__type__": str(fqn)}:
            return _decode_dataclass(fqn, value)
        case {"__decimal__": str(raw)}:
            return Decimal(raw)
        case {"__date__": str(raw)}:
            return date.fromisoformat(raw)
        case list():
            return tuple(from_json(Any, x) for x in value)
    if isinstance(hint, type) and issubclass(hint, Enum):
        return hint(value)
    return value


class ReturnLegJSONTypeConverter(JSONTypeConverter):
    """Route tagged JSON values through from_json."""

    def to_typed_value(self, hint: type, value: Any) -> Any:
        if isinstance(value, dict) and value.keys() & {_TYPE_TAG, _DECIMAL_TAG, _DATE_TAG}:
            return from_json(hint, value)
        return JSONTypeConverter.Unhandled


class ReturnLegPayloadConverter(CompositePayloadConverter):
    """Default payload converters with the JSON one made Decimal/date aware."""

    def __init__(self) -> None:
        defaults = (
            c for c in DefaultPayloadConverter.default_encoding_payload_converters
            if not isinstance(c, JSONPlainPayloadConverter)
        )
        super().__init__(
            *defaults,
            JSONPlainPayloadConverter(
                encoder=ReturnLegJSONEncoder,
                custom_type_converters=[ReturnLegJSONTypeConverter()],
            ),
        )


RETURNLEG_DATA_CONVERTER = DataConverter(
    payload_converter_class=ReturnLegPayloadConverter,
)
