"""
Converts Avro schemas to JSON Schema (draft-07) documents.
"""

# pylint: disable=line-too-long

import json
import logging
import os
from typing import Any, Dict, List, Optional, Union

from avrojsons.avroschema import (AvroSchema, AvroType, ArraySchema, BytesSchema, EnumSchema, FixedSchema,
                                  MapSchema, RecordSchema, UnionSchema, is_nullable,
                                  load_avro_schema_file, parse_avro_schema)
from avrojsons.constants import DEFAULT_INDENT, DRAFT_07_SCHEMA_URI
from avrojsons.defaults import OMIT_DEFAULT, convert_field_default
from avrojsons.logicaltypes import (INT_LOGICAL_FORMATS, LONG_LOGICAL_FORMATS, decimal_parameters,
                                    has_logical_type, logical_format)

logger = logging.getLogger(__name__)

PRIMITIVE_MAPPING: Dict[AvroType, Dict[str, Any]] = {
    AvroType.NULL: {'type': 'null'},
    AvroType.BOOLEAN: {'type': 'boolean'},
    AvroType.INT: {'type': 'integer', 'format': 'int32'},
    AvroType.LONG: {'type': 'integer'},
    AvroType.FLOAT: {'type': 'number', 'format': 'float'},
    AvroType.DOUBLE: {'type': 'number', 'format': 'double'},
    AvroType.BYTES: {'type': 'string', 'contentEncoding': 'base64'},
    AvroType.STRING: {'type': 'string'},
}


class AvroToJsonSchemaConverter:
    """
    Maps an Avro schema tree onto a JSON Schema document.

    The mapping is total: every Avro node yields exactly one JSON Schema node,
    and problems with optional details (defaults, decimal parameters) are
    logged and the detail is left out.

    An instance tracks the records and fields it is inside while converting,
    so it must not be shared between threads. The module-level functions use
    a new instance for every call.
    """

    def __init__(self, schema_uri: str = DRAFT_07_SCHEMA_URI) -> None:
        self.schema_uri = schema_uri
        self.record_stack: List[RecordSchema] = []
        self.field_path: List[str] = []

    def current_path(self) -> str:
        """Dotted path of the field currently being converted, for log messages."""
        return '.'.join(self.field_path) if self.field_path else '<root>'

    def avro_primitive_to_json_type(self, avro_schema: AvroSchema) -> Dict[str, Any]:
        """
        Map Avro primitive types to JSON types with appropriate format annotations.
        """
        avro_type = avro_schema.avro_type
        if avro_type == AvroType.INT:
            json_format = logical_format(avro_schema, INT_LOGICAL_FORMATS)
            if json_format:
                return {'type': 'string', 'format': json_format}
        elif avro_type == AvroType.LONG:
            json_format = logical_format(avro_schema, LONG_LOGICAL_FORMATS)
            if json_format:
                return {'type': 'string', 'format': json_format}
        elif avro_type == AvroType.BYTES:
            if has_logical_type(avro_schema, 'decimal'):
                return self.convert_decimal(avro_schema)
        elif avro_type == AvroType.STRING:
            if has_logical_type(avro_schema, 'uuid'):
                return {'type': 'string', 'format': 'uuid'}
        return dict(PRIMITIVE_MAPPING[avro_type])

    @staticmethod
    def decimal_parameter(params: Dict[str, Any], key: str) -> Optional[int]:
        value = params.get(key)
        if value is None:
            return None
        if isinstance(value, bool):
            raise TypeError(f"{key} must be an integer, not {value!r}")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"{key} must be an integer, not {value!r}")
        return int(value)

    def convert_decimal(self, avro_schema: Union[BytesSchema, FixedSchema]) -> Dict[str, Any]:
        """
        Convert a decimal to a string with its precision and scale as vendor extensions.
        """
        json_type: Dict[str, Any] = {'type': 'string', 'x-avro-logicalType': 'decimal'}
        params = decimal_parameters(avro_schema)
        try:
            precision = self.decimal_parameter(params, 'precision')
            scale = self.decimal_parameter(params, 'scale')
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning("Ignoring precision and scale of decimal at %s: %s", self.current_path(), e)
            return json_type
        if precision is not None:
            json_type['x-precision'] = precision
        if scale is not None:
            json_type['x-scale'] = scale
        return json_type

    def convert_fixed(self, avro_schema: FixedSchema) -> Dict[str, Any]:
        """
        Convert an Avro fixed type. The size has no JSON Schema equivalent and is dropped.
        """
        if has_logical_type(avro_schema, 'decimal'):
            return self.convert_decimal(avro_schema)
        if has_logical_type(avro_schema, 'duration'):
            return {'type': 'string', 'format': 'duration'}
        return {'type': 'string', 'contentEncoding': 'base64'}

    def convert_enum(self, avro_schema: EnumSchema) -> Dict[str, Any]:
        return {'type': 'string', 'enum': list(avro_schema.symbols)}

    def convert_array(self, avro_schema: ArraySchema) -> Dict[str, Any]:
        """
        Convert an Avro array type to a JSON schema array.
        """
        return {
            'type': 'array',
            'items': self.map_schema(avro_schema.items)
        }

    def convert_map(self, avro_schema: MapSchema) -> Dict[str, Any]:
        """
        Convert an Avro map type to a JSON schema object with additionalProperties.
        """
        return {
            'type': 'object',
            'additionalProperties': self.map_schema(avro_schema.values)
        }

    def convert_record(self, avro_schema: RecordSchema) -> Dict[str, Any]:
        """
        Convert an Avro record type to a JSON schema object.

        Fields are mapped with their full schema, so a nullable field keeps its
        nullable type. A field is required unless its type is a union with null.
        """
        if any(record is avro_schema for record in self.record_stack):
            logger.debug("Recursive reference to record %s at %s mapped to a generic object", avro_schema.name, self.current_path())
            return {'type': 'object'}

        properties: Dict[str, Any] = {}
        required: List[str] = []
        self.record_stack.append(avro_schema)
        try:
            for field in avro_schema.fields:
                self.field_path.append(field.name)
                try:
                    prop = self.map_schema(field.type)
                finally:
                    self.field_path.pop()
                if field.doc:
                    prop['description'] = field.doc
                if field.has_default:
                    default = convert_field_default(field)
                    if default is not OMIT_DEFAULT:
                        prop['default'] = default
                properties[field.name] = prop
                if not is_nullable(field.type):
                    required.append(field.name)
        finally:
            self.record_stack.pop()

        json_schema: Dict[str, Any] = {
            'type': 'object',
            'properties': properties
        }
        if required:
            json_schema['required'] = required
        return json_schema

    def handle_type_union(self, union: UnionSchema) -> Dict[str, Any]:
        """
        Handle Avro type unions.

        A union of null and one other type becomes that type with a nullable
        type pair, e.g. ``["string", "null"]``. All other unions become an
        ``anyOf`` of the mapped branches, with null last.
        """
        non_null_types = union.non_null_types
        if not non_null_types:
            return {'type': 'null'}

        union_types = [self.map_schema(t) for t in non_null_types]
        if union.is_nullable and len(union_types) == 1 and isinstance(union_types[0].get('type'), str):
            json_type = union_types[0]
            json_type['type'] = [json_type['type'], 'null']
            return json_type
        if union.is_nullable:
            union_types.append({'type': 'null'})
        if len(union_types) == 1:
            return union_types[0]
        return {'anyOf': union_types}

    def map_schema(self, avro_schema: AvroSchema) -> Dict[str, Any]:
        """
        Map an Avro schema node, and everything below it, to a JSON schema node.
        """
        avro_type = getattr(avro_schema, 'avro_type', None)
        if avro_type == AvroType.UNION:
            return self.handle_type_union(avro_schema)

        json_type: Dict[str, Any] = {}
        doc = getattr(avro_schema, 'doc', None)
        if doc:
            json_type['description'] = doc

        if avro_type == AvroType.RECORD:
            json_type.update(self.convert_record(avro_schema))
        elif avro_type == AvroType.ENUM:
            json_type.update(self.convert_enum(avro_schema))
        elif avro_type == AvroType.FIXED:
            json_type.update(self.convert_fixed(avro_schema))
        elif avro_type == AvroType.ARRAY:
            json_type.update(self.convert_array(avro_schema))
        elif avro_type == AvroType.MAP:
            json_type.update(self.convert_map(avro_schema))
        elif avro_type in PRIMITIVE_MAPPING:
            json_type.update(self.avro_primitive_to_json_type(avro_schema))
        else:
            json_type['type'] = 'object'
        return json_type

    def convert(self, avro_schema: AvroSchema) -> Dict[str, Any]:
        """
        Convert the root Avro schema to a JSON schema document.
        """
        self.record_stack = []
        self.field_path = []
        json_schema: Dict[str, Any] = {'$schema': self.schema_uri}
        json_schema.update(self.map_schema(avro_schema))
        return json_schema


def convert_avro_schema_to_json_schema(avro_schema: Union[str, Dict[str, Any], List[Any]], schema_uri: str = DRAFT_07_SCHEMA_URI) -> Dict[str, Any]:
    """
    Convert the JSON form of an Avro schema to a JSON schema document.

    :param avro_schema: The decoded Avro schema.
    :param schema_uri: The JSON Schema dialect written to $schema.
    """
    return AvroToJsonSchemaConverter(schema_uri).convert(parse_avro_schema(avro_schema))


def convert_avro_to_json_schema(avro_schema_file: str, json_schema_file: str, indent: int = DEFAULT_INDENT, schema_uri: str = DRAFT_07_SCHEMA_URI) -> Dict[str, Any]:
    """
    Convert an Avro schema file to a JSON schema file.

    :param avro_schema_file: The path to the input Avro schema file.
    :param json_schema_file: The path to the output JSON schema file.
    :param indent: Indentation of the written JSON.
    :param schema_uri: The JSON Schema dialect written to $schema.
    :return: The JSON schema document that was written.
    """
    avro_schema = load_avro_schema_file(avro_schema_file)
    json_schema = AvroToJsonSchemaConverter(schema_uri).convert(avro_schema)

    output_dir = os.path.dirname(json_schema_file)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)
    with open(json_schema_file, 'w', encoding='utf-8') as file:
        json.dump(json_schema, file, indent=indent)
    logger.info("Converted %s -> %s", avro_schema_file, json_schema_file)
    return json_schema
