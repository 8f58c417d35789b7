"""
Converts a file or a directory tree of Avro schemas to JSON schema files.

Output files mirror the layout of the input: ``<input>/a/b.avsc`` is written
to ``<output>/a/b.schema.json``. A file that fails to convert is logged and
reported in the result; the remaining files are still converted.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from avrojsons.avrotojsons import convert_avro_to_json_schema
from avrojsons.constants import (AVRO_SCHEMA_EXTENSION, DEFAULT_INDENT, DRAFT_07_SCHEMA_URI,
                                 JSON_SCHEMA_EXTENSION)

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of a batch conversion."""
    converted: List[Tuple[str, str]] = field(default_factory=list)  # (input, output)
    failed: List[Tuple[str, str]] = field(default_factory=list)  # (input, error)

    @property
    def ok(self) -> bool:
        return not self.failed


def find_avro_schema_files(input_dir: str, recursive: bool = True) -> List[str]:
    """List the .avsc files in a directory, in a stable order."""
    avsc_files: List[str] = []
    if recursive:
        for dirpath, dirnames, filenames in os.walk(input_dir):
            dirnames.sort()
            avsc_files.extend(os.path.join(dirpath, f) for f in sorted(filenames) if f.endswith(AVRO_SCHEMA_EXTENSION))
    else:
        for f in sorted(os.listdir(input_dir)):
            file_path = os.path.join(input_dir, f)
            if os.path.isfile(file_path) and f.endswith(AVRO_SCHEMA_EXTENSION):
                avsc_files.append(file_path)
    return avsc_files


def json_schema_path(avro_schema_file: str, input_root: str, output_dir: str) -> str:
    """Return the output path for an Avro schema file found under input_root."""
    relative_path = os.path.relpath(os.path.abspath(avro_schema_file), os.path.abspath(input_root))
    if relative_path.endswith(AVRO_SCHEMA_EXTENSION):
        relative_path = relative_path[:-len(AVRO_SCHEMA_EXTENSION)]
    return os.path.join(output_dir, relative_path + JSON_SCHEMA_EXTENSION)


def convert_avro_dir_to_json_schema(input_path: str, output_dir: str, recursive: bool = True, indent: int = DEFAULT_INDENT, schema_uri: str = DRAFT_07_SCHEMA_URI) -> BatchResult:
    """
    Convert an Avro schema file, or all Avro schema files in a directory, to JSON schema files.

    :param input_path: An .avsc file or a directory containing .avsc files.
    :param output_dir: The directory the JSON schema files are written to.
    :param recursive: Whether to descend into subdirectories.
    :param indent: Indentation of the written JSON.
    :param schema_uri: The JSON Schema dialect written to $schema.
    :raises FileNotFoundError: If input_path does not exist.
    """
    if not os.path.exists(input_path):
        raise FileNotFoundError(f"Input path does not exist: {input_path}")
    if os.path.isdir(input_path):
        input_root = input_path
        avsc_files = find_avro_schema_files(input_path, recursive)
    else:
        input_root = os.path.dirname(os.path.abspath(input_path))
        avsc_files = [input_path]
    os.makedirs(output_dir, exist_ok=True)

    result = BatchResult()
    for avro_schema_file in avsc_files:
        json_schema_file = json_schema_path(avro_schema_file, input_root, output_dir)
        try:
            convert_avro_to_json_schema(avro_schema_file, json_schema_file, indent=indent, schema_uri=schema_uri)
        except (OSError, ValueError) as e:
            logger.error("Failed to convert %s: %s", avro_schema_file, e)
            result.failed.append((avro_schema_file, str(e)))
        else:
            result.converted.append((avro_schema_file, json_schema_file))
    return result


def convert_avro_path_to_json_schema(input_path: str, output_path: str, recursive: bool = True, indent: int = DEFAULT_INDENT, schema_uri: Optional[str] = None) -> BatchResult:
    """
    Convert a single file to a named .json file, or anything else to an output directory.

    Used by the command line: when input_path is a file and output_path ends
    with .json, the file is written to exactly that path.
    """
    schema_uri = schema_uri or DRAFT_07_SCHEMA_URI
    if os.path.isfile(input_path) and output_path.endswith('.json'):
        result = BatchResult()
        try:
            convert_avro_to_json_schema(input_path, output_path, indent=indent, schema_uri=schema_uri)
        except (OSError, ValueError) as e:
            logger.error("Failed to convert %s: %s", input_path, e)
            result.failed.append((input_path, str(e)))
        else:
            result.converted.append((input_path, output_path))
        return result
    return convert_avro_dir_to_json_schema(input_path, output_path, recursive=recursive, indent=indent, schema_uri=schema_uri)
