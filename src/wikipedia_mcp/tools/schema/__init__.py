"""Tool schema validation and sanitizing."""

from .schema_validator import SchemaValidator

__all__ = ["SchemaValidator"]
