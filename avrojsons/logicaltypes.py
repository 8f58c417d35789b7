"""
Logical type lookups for Avro schema nodes.

A node carries a logical type either as a structured ``LogicalType``
annotation or, for fixed types, as a plain ``logicalType`` string property.
The latter covers annotations such as ``duration`` that Avro tooling does not
promote to the structured form.
"""

from typing import Any, Dict, Optional

from avrojsons.avroschema import AvroSchema, FixedSchema

# JSON Schema string formats for logical types, in order of precedence
INT_LOGICAL_FORMATS: Dict[str, str] = {
    'date': 'date',
    'time-millis': 'time',
}

LONG_LOGICAL_FORMATS: Dict[str, str] = {
    'timestamp-millis': 'date-time',
    'timestamp-micros': 'date-time',
    'local-timestamp-millis': 'date-time',
    'local-timestamp-micros': 'date-time',
    'time-micros': 'time',
}


def has_logical_type(avro_schema: AvroSchema, name: str) -> bool:
    """
    Check if a schema node carries the named logical type.

    The structured annotation is consulted first; for fixed types the raw
    ``logicalType`` property is accepted as well.
    """
    logical_type = getattr(avro_schema, 'logical_type', None)
    if logical_type is not None and logical_type.name == name:
        return True
    if isinstance(avro_schema, FixedSchema):
        return avro_schema.props.get('logicalType') == name
    return False


def logical_format(avro_schema: AvroSchema, formats: Dict[str, str]) -> Optional[str]:
    """Return the format of the first logical type in ``formats`` the node carries."""
    for name, json_format in formats.items():
        if has_logical_type(avro_schema, name):
            return json_format
    return None


def decimal_parameters(avro_schema: AvroSchema) -> Dict[str, Any]:
    """
    Return the raw precision and scale of a decimal node.

    Values are returned as found in the schema and may not be integers.
    """
    logical_type = getattr(avro_schema, 'logical_type', None)
    if logical_type is not None and logical_type.name == 'decimal':
        return dict(logical_type.params)
    props = getattr(avro_schema, 'props', {})
    return {key: props[key] for key in ('precision', 'scale') if key in props}
