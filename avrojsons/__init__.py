import importlib
import importlib.util

mod = "avrojsons"
class LazyLoader:
    """
    Lazy loader for the avrojsons functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        module_name = f"{mod}.{item}"
        if importlib.util.find_spec(module_name) is None:
            raise AttributeError(f"module {mod!r} has no attribute {item!r}")
        return self._load_module(module_name)

# Define the functions and their corresponding module paths
_mappings = {
    "convert_avro_to_json_schema": (f"{mod}.avrotojsons", "convert_avro_to_json_schema"),
    "convert_avro_schema_to_json_schema": (f"{mod}.avrotojsons", "convert_avro_schema_to_json_schema"),
    "convert_avro_dir_to_json_schema": (f"{mod}.batch", "convert_avro_dir_to_json_schema"),
    "AvroToJsonSchemaConverter": (f"{mod}.avrotojsons", "AvroToJsonSchemaConverter"),
    "parse_avro_schema": (f"{mod}.avroschema", "parse_avro_schema"),
    "load_avro_schema_file": (f"{mod}.avroschema", "load_avro_schema_file"),
}

__all__ = list(_mappings)

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
