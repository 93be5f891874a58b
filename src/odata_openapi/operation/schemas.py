"""Schema fragments and the shared components they reference."""

from typing import Any

from odata_openapi.context import ODataContext
from odata_openapi.document import reference
from odata_openapi.edm.model import StructuredType, element_type_name, is_collection_type

COLLECTION_RESPONSE_SUFFIX = "CollectionResponse"
COUNT_RESPONSE = "ODataCountResponse"
ERROR = "error"
ERROR_SCHEMA = "ODataErrors.ODataError"

_PRIMITIVES: dict[str, dict[str, Any]] = {
    "Edm.String": {"type": "string"},
    "Edm.Boolean": {"type": "boolean"},
    "Edm.Byte": {"type": "integer", "format": "uint8"},
    "Edm.SByte": {"type": "integer", "format": "int8"},
    "Edm.Int16": {"type": "integer", "format": "int16"},
    "Edm.Int32": {"type": "integer", "format": "int32"},
    "Edm.Int64": {"type": "integer", "format": "int64"},
    "Edm.Single": {"type": "number", "format": "float"},
    "Edm.Double": {"type": "number", "format": "double"},
    "Edm.Decimal": {"type": "number", "format": "decimal"},
    "Edm.Guid": {"type": "string", "format": "uuid"},
    "Edm.Date": {"type": "string", "format": "date"},
    "Edm.DateTimeOffset": {"type": "string", "format": "date-time"},
    "Edm.TimeOfDay": {"type": "string", "format": "time"},
    "Edm.Duration": {"type": "string", "format": "duration"},
    "Edm.Binary": {"type": "string", "format": "base64url"},
    "Edm.Stream": {"type": "string", "format": "binary"},
}


def type_schema(type_name: str) -> dict[str, Any]:
    """Schema for a primitive, structured or collection type name."""
    if is_collection_type(type_name):
        return {"type": "array", "items": type_schema(element_type_name(type_name))}
    if type_name in _PRIMITIVES:
        return dict(_PRIMITIVES[type_name])
    return {"$ref": reference("schemas", type_name)}


def structured_schema(context: ODataContext, structured: StructuredType, derived_references: bool) -> dict[str, Any]:
    """A ``$ref`` to the type, or ``oneOf`` of base and derived types when enabled."""
    if derived_references:
        derived = context.model.derived_types(structured)
        if derived:
            return {
                "oneOf": [type_schema(t.full_name) for t in [structured, *derived]],
            }
    return type_schema(structured.full_name)


def collection_response_ref(context: ODataContext, type_name: str, component_id: str | None = None) -> str:
    """Register ``<Type>CollectionResponse`` on first use."""
    component_id = component_id or f"{type_name}{COLLECTION_RESPONSE_SUFFIX}"
    return context.registry.register_component(
        "responses",
        component_id,
        {
            "description": "Retrieved collection",
            "content": {
                "application/json": {
                    "schema": {
                        "title": f"Collection of {type_name.rsplit('.', 1)[-1]}",
                        "type": "object",
                        "properties": {
                            "value": {"type": "array", "items": type_schema(type_name)},
                            "@odata.nextLink": {"type": "string", "nullable": True},
                        },
                    }
                }
            },
        },
    )


def count_response_ref(context: ODataContext) -> str:
    return context.registry.register_component(
        "responses",
        COUNT_RESPONSE,
        {
            "description": "The count of the resource",
            "content": {"text/plain": {"schema": {"type": "integer", "format": "int32"}}},
        },
    )


def error_response_ref(context: ODataContext) -> str:
    context.registry.register_component(
        "schemas",
        ERROR_SCHEMA,
        {
            "required": ["error"],
            "type": "object",
            "properties": {
                "error": {
                    "type": "object",
                    "required": ["code", "message"],
                    "properties": {
                        "code": {"type": "string"},
                        "message": {"type": "string"},
                        "target": {"type": "string", "nullable": True},
                    },
                }
            },
        },
    )
    return context.registry.register_component(
        "responses",
        ERROR,
        {
            "description": "error",
            "content": {"application/json": {"schema": {"$ref": reference("schemas", ERROR_SCHEMA)}}},
        },
    )
