from typing import Any, Dict, Set

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")


class SchemaValidator:
    """
    Helper class for validating and sanitizing the JSON schemas published in tool descriptors.
    """

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Checks if the schema contains recursive references by traversing the graph.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        defs = schema.get("$defs", {}) or schema.get("definitions", {})

        def check(node: Any, path: Set[str]) -> None:
            if isinstance(node, dict):
                if "$ref" in node:
                    ref = node["$ref"]
                    if ref in path:
                        msg = f"Recursive structure detected: {ref}. Tool arguments must be flat."
                        logger.error(msg)
                        raise ToolValidationError(msg)

                    # e.g. #/$defs/MyModel
                    if ref.startswith("#"):
                        def_name = ref.split("/")[-1]
                        if def_name in defs:
                            check(defs[def_name], path | {ref})
                    return

                for v in node.values():
                    check(v, path)
            elif isinstance(node, list):
                for item in node:
                    check(item, path)

        check(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans up a pydantic-generated schema for publication.
        Removes $defs, $schema, $id, title and definitions, and
        simplifies Optional fields (anyOf with null).

        Keys of a ``properties`` mapping are argument names and are never
        stripped, even when an argument is called ``title``.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        new_schema = schema.copy()

        for key in _METADATA_KEYS:
            new_schema.pop(key, None)

        if "anyOf" in new_schema:
            non_null = [x for x in new_schema["anyOf"] if not (isinstance(x, dict) and x.get("type") == "null")]

            if len(non_null) == 1 and isinstance(non_null[0], dict):
                merged = {k: v for k, v in new_schema.items() if k != "anyOf"}
                merged.update(non_null[0])
                # The parent's description wins over the variant's
                if "description" in new_schema:
                    merged["description"] = new_schema["description"]
                return SchemaValidator.sanitize_schema(merged)

        for key, value in new_schema.items():
            if key == "properties" and isinstance(value, dict):
                new_schema[key] = {name: SchemaValidator.sanitize_schema(prop) for name, prop in value.items()}
            elif isinstance(value, dict):
                new_schema[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                new_schema[key] = [
                    SchemaValidator.sanitize_schema(item) if isinstance(item, dict) else item for item in value
                ]

        return new_schema
