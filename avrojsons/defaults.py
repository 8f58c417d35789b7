"""
Conversion of Avro field defaults into JSON values.

Avro defaults are written in JSON, so they may be nested lists and objects.
They are converted generically, without checking them against the field type.
"""

import logging
import math
from decimal import Decimal
from typing import Any, Dict, List, Union

from avrojsons.avroschema import Field

logger = logging.getLogger(__name__)

JsonValue = Union[None, bool, int, float, str, List['JsonValue'], Dict[str, 'JsonValue']]


class _OmitDefault:
    """Marker returned when a default could not be converted."""

    def __repr__(self) -> str:
        return '<omit default>'


OMIT_DEFAULT = _OmitDefault()


def convert_default_value(value: Any) -> JsonValue:
    """
    Convert a default value into a value that can be written as JSON.

    :raises ValueError: For numbers JSON cannot represent (NaN, infinity).
    :raises TypeError: For objects with non-string keys.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{value} cannot be represented in JSON")
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"{value} cannot be represented in JSON")
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (bytes, bytearray)):
        # Avro writes bytes and fixed defaults as strings of code points 0-255
        return bytes(value).decode('latin-1')
    if isinstance(value, (list, tuple)):
        return [convert_default_value(item) for item in value]
    if isinstance(value, dict):
        converted: Dict[str, JsonValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"object key {key!r} is not a string")
            converted[key] = convert_default_value(item)
        return converted
    return str(value)


def convert_field_default(avro_field: Field) -> Union[JsonValue, _OmitDefault]:
    """
    Convert the default of a record field, or return OMIT_DEFAULT if that fails.

    A failure is logged and never propagated; the field is converted without
    a default.
    """
    try:
        return convert_default_value(avro_field.default)
    except Exception as e:  # pylint: disable=broad-except
        logger.warning("Failed to convert default value for field '%s': %s", avro_field.name, e)
        return OMIT_DEFAULT
