"""Constants for the avrojsons package."""

# JSON Schema dialect written into the $schema key of every document
DRAFT_07_SCHEMA_URI = 'http://json-schema.org/draft-07/schema#'

AVRO_SCHEMA_EXTENSION = '.avsc'
JSON_SCHEMA_EXTENSION = '.schema.json'

DEFAULT_INDENT = 4
