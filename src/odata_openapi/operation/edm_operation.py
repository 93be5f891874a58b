"""Handlers for bound actions (POST) and bound functions (GET)."""

from typing import Any

from odata_openapi.context import ODataContext
from odata_openapi.edm.model import EdmOperation, StructuredType, element_type_name
from odata_openapi.edm.segments import ODataPath, OperationSegment
from odata_openapi.errors import InvalidDispatchError
from odata_openapi.operation.descriptor import OperationDescriptor, OperationType, RequestBody, Response
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import CONTAINER, bound_operation_tag_name, operation_path_id
from odata_openapi.operation.parameters import collection_query_parameters
from odata_openapi.operation.responses import (
    OPERATION_TYPE,
    add_pagination,
    json_content,
    set_no_content_response,
    set_success_response,
)
from odata_openapi.operation.restrictions import resolve_restriction
from odata_openapi.operation.schemas import structured_schema, type_schema
from odata_openapi.settings import LinkRelKey
from odata_openapi.vocabulary.capabilities import OperationRestrictions


def return_schema(context: ODataContext, operation: EdmOperation) -> dict[str, Any]:
    """Schema of an operation result; collections are wrapped in ``value``."""
    element = element_type_name(operation.return_type)
    structured = context.model.find_type(element)
    if isinstance(structured, StructuredType):
        item = structured_schema(context, structured, context.settings.enable_derived_types_references_for_responses)
    else:
        item = type_schema(element)

    if not operation.returns_collection:
        return item
    return {
        "title": f"Collection of {element.rsplit('.', 1)[-1]}",
        "type": "object",
        "properties": {
            "value": {"type": "array", "items": item},
            "@odata.nextLink": {"type": "string", "nullable": True},
        },
    }


def parameters_body(context: ODataContext, operation: EdmOperation) -> RequestBody | None:
    """Inline object of the non-binding parameters, or a shared component when reused."""
    parameters = operation.non_binding_parameters
    if not parameters:
        return None
    schema = {
        "type": "object",
        "properties": {p.name: type_schema(p.type) for p in parameters},
    }
    body = {"description": "Action parameters", "required": True, "content": json_content(schema)}
    if context.model.operation_targets_multiple_paths(operation):
        ref = context.registry.register_component(
            "requestBodies",
            f"{operation.name}RequestBody",
            {
                "description": "Action parameters",
                "required": True,
                "content": {"application/json": {"schema": schema}},
            },
        )
        return RequestBody(ref=ref)
    return RequestBody(**body)


class EdmOperationState(OperationState):
    def __init__(self, context: ODataContext, path: ODataPath):
        super().__init__(context, path)
        if not isinstance(path.last_segment, OperationSegment):
            raise InvalidDispatchError(f"Operation handler dispatched for {path}, which does not end in an operation")
        self.segment: OperationSegment = path.last_segment
        self.operation = self.segment.operation
        self.annotatable = self.operation


class EdmOperationOperationHandler(OperationHandler):
    def initialize(self, context, path) -> EdmOperationState:
        state = EdmOperationState(context, path)
        state.restriction = resolve_restriction(context, OperationRestrictions, state.target_path, state.operation)
        return state

    def link_rel_key(self, state):
        return LinkRelKey.ACTION if state.operation.is_action else LinkRelKey.FUNCTION

    def set_basic_info(self, state, operation):
        kind = "action" if state.operation.is_action else "function"
        operation.summary = (
            state.context.annotations.get_description(state.operation)
            or f"Invoke {kind} {state.operation.name}"
        )
        if state.settings.enable_operation_id:
            operation.operation_id = operation_path_id(state.context, state.path)
        super().set_basic_info(state, operation)

    def set_responses(self, state, operation):
        if state.operation.return_type is None:
            set_no_content_response(operation)
        else:
            response = Response(description="Success", content=json_content(return_schema(state.context, state.operation)))
            set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)

    def set_tags(self, state, operation):
        self.add_tag(state, operation, bound_operation_tag_name(state.path, state.operation), CONTAINER)
        super().set_tags(state, operation)

    def set_extensions(self, state, operation):
        operation.extensions[OPERATION_TYPE] = "action" if state.operation.is_action else "function"
        super().set_extensions(state, operation)


class EdmActionOperationHandler(EdmOperationOperationHandler):
    operation_type = OperationType.POST

    def initialize(self, context, path):
        state = super().initialize(context, path)
        if not state.operation.is_action:
            raise InvalidDispatchError(f"{state.operation.full_name} is not an action")
        return state

    def set_request_body(self, state, operation):
        operation.request_body = parameters_body(state.context, state.operation)
        super().set_request_body(state, operation)


class EdmFunctionOperationHandler(EdmOperationOperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path):
        state = super().initialize(context, path)
        if not state.operation.is_function:
            raise InvalidDispatchError(f"{state.operation.full_name} is not a function")
        return state

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        if state.operation.returns_collection:
            operation.parameters.extend(collection_query_parameters(state.context, state.operation))

    def set_extensions(self, state, operation: OperationDescriptor):
        if state.operation.returns_collection:
            add_pagination(state.context, operation)
        super().set_extensions(state, operation)
