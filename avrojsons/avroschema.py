"""
Avro schema model for the JSON Schema converter.

The converter does not work on the raw JSON form of an Avro schema. Instead,
``parse_avro_schema`` validates the raw schema with fastavro and then builds a
tree of immutable nodes, one class per Avro type:

    NullSchema, BooleanSchema, IntSchema, LongSchema, FloatSchema,
    DoubleSchema, BytesSchema, StringSchema, EnumSchema, FixedSchema,
    ArraySchema, MapSchema, RecordSchema, UnionSchema

Named types (records, enums and fixed types) are resolved while the tree is
built, so references by name point at the node that declared the type.
Logical types that Avro defines for a given base type are promoted into a
structured ``LogicalType`` annotation. Primitive and fixed nodes keep all other
properties of their JSON object form, including ``logicalType`` itself, in
``props``; the converter reads nothing else from the raw form.
"""

# pylint: disable=too-many-return-statements, line-too-long

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from fastavro import parse_schema
from fastavro.schema import SchemaParseException, UnknownType

logger = logging.getLogger(__name__)


class AvroType(str, Enum):
    """Variant tag of an Avro schema node."""
    NULL = 'null'
    BOOLEAN = 'boolean'
    INT = 'int'
    LONG = 'long'
    FLOAT = 'float'
    DOUBLE = 'double'
    BYTES = 'bytes'
    STRING = 'string'
    ENUM = 'enum'
    FIXED = 'fixed'
    ARRAY = 'array'
    MAP = 'map'
    RECORD = 'record'
    UNION = 'union'


class AvroSchemaParseError(ValueError):
    """
    Raised when the text or structure of an Avro schema is invalid.

    Attributes:
        message: Human-readable error description
        source: Optional path of the schema file that failed to parse
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, source: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        self.source = source
        self.cause = cause
        full_message = message
        if source:
            full_message = f"Failed to parse Avro schema {source}: {message}"
        super().__init__(full_message)


class _NoDefault:
    """Marker for record fields that do not declare a default."""

    def __repr__(self) -> str:
        return '<no default>'


NO_DEFAULT = _NoDefault()

# Properties that describe the structure of a schema node. Everything else
# in the JSON object form of a primitive or fixed type ends up in its props.
STRUCTURAL_PROPERTIES = {'type', 'name', 'namespace', 'fields', 'items', 'values',
                         'symbols', 'size', 'doc', 'aliases', 'default'}

# Logical types and the base types Avro defines them for. A logicalType on
# any other base type is ignored by Avro and remains a plain property.
LOGICAL_TYPE_BASES: Dict[str, Tuple[str, ...]] = {
    'decimal': ('bytes', 'fixed'),
    'uuid': ('string',),
    'date': ('int',),
    'time-millis': ('int',),
    'time-micros': ('long',),
    'timestamp-millis': ('long',),
    'timestamp-micros': ('long',),
    'local-timestamp-millis': ('long',),
    'local-timestamp-micros': ('long',),
}


@dataclass(frozen=True)
class LogicalType:
    """A logical type annotation, e.g. ``decimal`` with precision and scale."""
    name: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class _PrimitiveSchema:
    doc: Optional[str] = None
    logical_type: Optional[LogicalType] = None
    props: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NullSchema(_PrimitiveSchema):
    avro_type: ClassVar[AvroType] = AvroType.NULL


@dataclass(frozen=True)
class BooleanSchema(_PrimitiveSchema):
    avro_type: ClassVar[AvroType] = AvroType.BOOLEAN


@dataclass(frozen=True)
class IntSchema(_PrimitiveSchema):
    avro_type: ClassVar[AvroType] = AvroType.INT


@dataclass(frozen=True)
class LongSchema(_PrimitiveSchema):
    avro_type: ClassVar[AvroType] = AvroType.LONG


@dataclass(frozen=True)
class FloatSchema(_PrimitiveSchema):
    avro_type: ClassVar[AvroType] = AvroType.FLOAT


@dataclass(frozen=True)
class DoubleSchema(_PrimitiveSchema):
    avro_type: ClassVar[AvroType] = AvroType.DOUBLE


@dataclass(frozen=True)
class BytesSchema(_PrimitiveSchema):
    avro_type: ClassVar[AvroType] = AvroType.BYTES


@dataclass(frozen=True)
class StringSchema(_PrimitiveSchema):
    avro_type: ClassVar[AvroType] = AvroType.STRING


@dataclass(frozen=True)
class EnumSchema:
    name: str
    symbols: Tuple[str, ...]
    doc: Optional[str] = None
    avro_type: ClassVar[AvroType] = AvroType.ENUM


@dataclass(frozen=True)
class FixedSchema:
    name: str
    size: int
    doc: Optional[str] = None
    logical_type: Optional[LogicalType] = None
    props: Dict[str, Any] = field(default_factory=dict)
    avro_type: ClassVar[AvroType] = AvroType.FIXED


@dataclass(frozen=True)
class ArraySchema:
    items: 'AvroSchema'
    avro_type: ClassVar[AvroType] = AvroType.ARRAY


@dataclass(frozen=True)
class MapSchema:
    values: 'AvroSchema'
    avro_type: ClassVar[AvroType] = AvroType.MAP


@dataclass(frozen=True)
class Field:
    """A record field. ``default`` is NO_DEFAULT when none is declared."""
    name: str
    type: 'AvroSchema'
    doc: Optional[str] = None
    default: Any = NO_DEFAULT

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT


# Records compare by identity: a recursive record contains itself.
@dataclass(frozen=True, eq=False)
class RecordSchema:
    name: str
    fields: List[Field] = field(default_factory=list)
    doc: Optional[str] = None
    avro_type: ClassVar[AvroType] = AvroType.RECORD


@dataclass(frozen=True)
class UnionSchema:
    types: Tuple['AvroSchema', ...]
    avro_type: ClassVar[AvroType] = AvroType.UNION

    @property
    def is_nullable(self) -> bool:
        return any(isinstance(t, NullSchema) for t in self.types)

    @property
    def non_null_types(self) -> List['AvroSchema']:
        return [t for t in self.types if not isinstance(t, NullSchema)]


AvroSchema = Union[NullSchema, BooleanSchema, IntSchema, LongSchema, FloatSchema,
                   DoubleSchema, BytesSchema, StringSchema, EnumSchema, FixedSchema,
                   ArraySchema, MapSchema, RecordSchema, UnionSchema]

PRIMITIVE_SCHEMAS = {
    'null': NullSchema,
    'boolean': BooleanSchema,
    'int': IntSchema,
    'long': LongSchema,
    'float': FloatSchema,
    'double': DoubleSchema,
    'bytes': BytesSchema,
    'string': StringSchema,
}


def is_nullable(avro_schema: AvroSchema) -> bool:
    """Check if a schema is a union that contains the null type."""
    return isinstance(avro_schema, UnionSchema) and avro_schema.is_nullable


class AvroSchemaParser:
    """
    Builds the node tree from the JSON form of an Avro schema.

    The parser expects a schema that has already been validated; it keeps a
    registry of the named types it has seen so that later references by name
    resolve to the declaring node.
    """

    def __init__(self) -> None:
        self.named_types: Dict[str, AvroSchema] = {}

    @staticmethod
    def qualified_name(avro_schema: Dict[str, Any], namespace: str) -> Tuple[str, str]:
        """
        Return the full name of a named type and the namespace it establishes
        for the types nested in it.
        """
        name = avro_schema['name']
        if '.' in name:
            return name, name.rsplit('.', 1)[0]
        namespace = avro_schema.get('namespace', namespace) or ''
        return (f"{namespace}.{name}" if namespace else name), namespace

    @staticmethod
    def extra_props(avro_schema: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in avro_schema.items() if k not in STRUCTURAL_PROPERTIES}

    @staticmethod
    def parse_logical_type(avro_schema: Dict[str, Any], base_type: str) -> Optional[LogicalType]:
        """Promote a logicalType property when Avro defines it for the base type."""
        name = avro_schema.get('logicalType')
        if not isinstance(name, str) or base_type not in LOGICAL_TYPE_BASES.get(name, ()):
            return None
        params: Dict[str, Any] = {}
        if name == 'decimal':
            if 'precision' in avro_schema:
                params['precision'] = avro_schema['precision']
            params['scale'] = avro_schema.get('scale', 0)
        return LogicalType(name, params)

    def register(self, name: str, avro_schema: AvroSchema) -> None:
        if name in self.named_types:
            raise AvroSchemaParseError(f"Type {name} is defined more than once")
        self.named_types[name] = avro_schema

    def resolve_reference(self, name: str, namespace: str) -> AvroSchema:
        if '.' not in name and namespace and f"{namespace}.{name}" in self.named_types:
            return self.named_types[f"{namespace}.{name}"]
        if name in self.named_types:
            return self.named_types[name]
        raise AvroSchemaParseError(f"Unknown type reference {name}")

    def parse(self, avro_schema: Union[str, Dict[str, Any], List[Any]], namespace: str = '') -> AvroSchema:
        """Parse a (sub)schema in the scope of the given namespace."""
        if isinstance(avro_schema, list):
            return UnionSchema(tuple(self.parse(t, namespace) for t in avro_schema))
        if isinstance(avro_schema, str):
            if avro_schema in PRIMITIVE_SCHEMAS:
                return PRIMITIVE_SCHEMAS[avro_schema]()
            return self.resolve_reference(avro_schema, namespace)
        if not isinstance(avro_schema, dict):
            raise AvroSchemaParseError(f"Avro schema contains unexpected construct {avro_schema!r}")

        type_name = avro_schema.get('type')
        if isinstance(type_name, (dict, list)):
            # nested type definition, e.g. {"type": {"type": "array", ...}}
            return self.parse(type_name, namespace)
        if type_name in PRIMITIVE_SCHEMAS:
            return PRIMITIVE_SCHEMAS[type_name](
                doc=avro_schema.get('doc'),
                logical_type=self.parse_logical_type(avro_schema, type_name),
                props=self.extra_props(avro_schema))
        if type_name in ('record', 'error'):
            return self.parse_record(avro_schema, namespace)
        if type_name == 'enum':
            full_name, _ = self.qualified_name(avro_schema, namespace)
            enum_schema = EnumSchema(
                name=full_name,
                symbols=tuple(avro_schema['symbols']),
                doc=avro_schema.get('doc'))
            self.register(full_name, enum_schema)
            return enum_schema
        if type_name == 'fixed':
            full_name, _ = self.qualified_name(avro_schema, namespace)
            fixed_schema = FixedSchema(
                name=full_name,
                size=avro_schema['size'],
                doc=avro_schema.get('doc'),
                logical_type=self.parse_logical_type(avro_schema, 'fixed'),
                props=self.extra_props(avro_schema))
            self.register(full_name, fixed_schema)
            return fixed_schema
        if type_name == 'array':
            return ArraySchema(self.parse(avro_schema['items'], namespace))
        if type_name == 'map':
            return MapSchema(self.parse(avro_schema['values'], namespace))
        if isinstance(type_name, str):
            return self.resolve_reference(type_name, namespace)
        raise AvroSchemaParseError(f"Avro schema contains unexpected type {type_name!r}")

    def parse_record(self, avro_schema: Dict[str, Any], namespace: str) -> RecordSchema:
        full_name, record_namespace = self.qualified_name(avro_schema, namespace)
        record = RecordSchema(name=full_name, doc=avro_schema.get('doc'))
        # registered before the fields so that fields can refer to the record
        self.register(full_name, record)
        for avro_field in avro_schema.get('fields', []):
            record.fields.append(Field(
                name=avro_field['name'],
                type=self.parse(avro_field['type'], record_namespace),
                doc=avro_field.get('doc'),
                default=avro_field['default'] if 'default' in avro_field else NO_DEFAULT))
        return record


def parse_avro_schema(avro_schema: Union[str, Dict[str, Any], List[Any]], source: Optional[str] = None) -> AvroSchema:
    """
    Validate the JSON form of an Avro schema and build its node tree.

    :param avro_schema: The decoded Avro schema (type name, union list or object).
    :param source: Optional file path used in error messages.
    :raises AvroSchemaParseError: If the schema is not a valid Avro schema.
    """
    try:
        parse_schema(avro_schema)
        return AvroSchemaParser().parse(avro_schema)
    except AvroSchemaParseError as e:
        if source and not e.source:
            raise AvroSchemaParseError(e.message, source, e.cause) from e
        raise
    except (SchemaParseException, UnknownType, KeyError, TypeError) as e:
        raise AvroSchemaParseError(str(e) or repr(e), source, e) from e


def load_avro_schema_file(avro_schema_file: str) -> AvroSchema:
    """Read an Avro schema file (.avsc) and build its node tree."""
    with open(avro_schema_file, 'r', encoding='utf-8') as file:
        try:
            avro_schema = json.load(file)
        except json.JSONDecodeError as e:
            raise AvroSchemaParseError(f"Invalid JSON: {e}", avro_schema_file, e) from e
    logger.debug("Loaded Avro schema from %s", avro_schema_file)
    return parse_avro_schema(avro_schema, avro_schema_file)
