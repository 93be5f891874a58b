"""Response, link, security and extension helpers shared by all handlers."""

from typing import Any

from odata_openapi.context import ODataContext
from odata_openapi.edm.model import EntityType
from odata_openapi.operation.descriptor import (
    Link,
    MediaType,
    OperationDescriptor,
    Parameter,
    Response,
)
from odata_openapi.operation.identifiers import upper_first
from odata_openapi.operation.schemas import error_response_ref
from odata_openapi.vocabulary.capabilities import PermissionType

APPLICATION_JSON = "application/json"
OCTET_STREAM = "application/octet-stream"
SUCCESS_RANGE = "2XX"
NO_CONTENT = "204"

PAGEABLE = "x-ms-pageable"
OPERATION_TYPE = "x-ms-docs-operation-type"
DEPRECATION = "x-ms-deprecation"
NEXT_LINK = "@odata.nextLink"


def success_status_code(context: ODataContext, code: str) -> str:
    """The exact code, or ``2XX`` when ranges are enabled. 204 is always exact."""
    if code == NO_CONTENT:
        return NO_CONTENT
    return SUCCESS_RANGE if context.settings.use_success_status_code_range else code


def set_success_response(context: ODataContext, operation: OperationDescriptor, code: str, response: Response) -> None:
    operation.responses[success_status_code(context, code)] = response


def set_no_content_response(operation: OperationDescriptor) -> None:
    operation.responses[NO_CONTENT] = Response(description="Success")


def json_content(schema: dict[str, Any]) -> dict[str, MediaType]:
    return {APPLICATION_JSON: MediaType(schema_=schema)}


def media_content(media_types: list[str] | None, schema: dict[str, Any] | None = None) -> dict[str, MediaType]:
    """Content keyed by each media type, ``application/octet-stream`` when none given."""
    schema = schema or {"type": "string", "format": "binary"}
    return {media_type: MediaType(schema_=dict(schema)) for media_type in media_types or [OCTET_STREAM]}


def append_error_responses(context: ODataContext, operation: OperationDescriptor) -> None:
    """Append ``default`` last; it always references the shared error response."""
    operation.responses.pop("default", None)
    operation.responses["default"] = Response(ref=error_response_ref(context))


def security_requirements(permissions: list[PermissionType] | None) -> list[dict[str, list[str]]]:
    """One requirement per permission: ``{scheme: [scopes]}``."""
    return [
        {permission.scheme_name: [scope.scope for scope in permission.scopes]}
        for permission in permissions or []
    ]


def pagination_extension(context: ODataContext) -> dict[str, str]:
    return {"nextLinkName": NEXT_LINK, "operationName": context.settings.pageable_operation_name}


def add_pagination(context: ODataContext, operation: OperationDescriptor) -> None:
    """Mark a collection-returning operation as pageable when enabled."""
    if context.settings.enable_pagination:
        operation.extensions[PAGEABLE] = pagination_extension(context)


def create_links(
    context: ODataContext,
    entity_type: EntityType,
    operation_id_prefix: str,
    parameters: list[Parameter],
) -> dict[str, Link] | None:
    """One link per navigation property of the returned entity type."""
    if not context.settings.show_links:
        return None
    path_parameters = [p.name for p in parameters if p.location == "path" and p.name]
    links = {}
    for nav in context.model.all_navigation_properties(entity_type):
        action = "List" if nav.is_collection else "Get"
        links[nav.name] = Link(
            operation_id=f"{operation_id_prefix}.{action}{upper_first(nav.name)}",
            parameters={name: f"$request.path.{name}" for name in path_parameters},
        )
    return links or None
