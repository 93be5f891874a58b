"""Handlers for a singleton such as ``/Me``."""

from odata_openapi.context import ODataContext
from odata_openapi.edm.segments import ODataPath
from odata_openapi.operation.descriptor import OperationDescriptor, OperationType, RequestBody, Response
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import PAGE, upper_first
from odata_openapi.operation.parameters import read_query_parameters
from odata_openapi.operation.responses import (
    create_links,
    json_content,
    set_no_content_response,
    set_success_response,
)
from odata_openapi.operation.restrictions import resolve_restriction
from odata_openapi.operation.schemas import structured_schema
from odata_openapi.vocabulary.capabilities import ReadRestrictions, UpdateRestrictions


class SingletonState(OperationState):
    def __init__(self, context: ODataContext, path: ODataPath):
        super().__init__(context, path)
        self.singleton = path.first_segment.navigation_source
        self.entity_type = path.first_segment.entity_type
        self.annotatable = self.singleton

    @property
    def prefix(self) -> str:
        return f"{self.singleton.name}.{self.entity_type.name}"


class SingletonOperationHandler(OperationHandler):
    def initialize(self, context, path) -> SingletonState:
        return SingletonState(context, path)

    def operation_id(self, state: SingletonState, action: str) -> str:
        return f"{state.prefix}.{action}{upper_first(state.entity_type.name)}"

    def set_tags(self, state: SingletonState, operation: OperationDescriptor) -> None:
        self.add_tag(state, operation, state.prefix, PAGE)
        super().set_tags(state, operation)


class SingletonGetOperationHandler(SingletonOperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = resolve_restriction(context, ReadRestrictions, state.target_path, state.singleton)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Get {state.singleton.name}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Get")
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.extend(
            read_query_parameters(state.context, state.singleton, state.entity_type, collection=False)
        )

    def set_responses(self, state, operation):
        schema = structured_schema(
            state.context, state.entity_type, state.settings.enable_derived_types_references_for_responses
        )
        response = Response(
            description="Retrieved entity",
            content=json_content(schema),
            links=create_links(state.context, state.entity_type, state.prefix, operation.parameters),
        )
        set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)


class SingletonUpdateOperationHandler(SingletonOperationHandler):
    verb = "Update"

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = resolve_restriction(context, UpdateRestrictions, state.target_path, state.singleton)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Update {state.singleton.name}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, self.verb)
        super().set_basic_info(state, operation)

    def set_request_body(self, state, operation):
        schema = structured_schema(
            state.context, state.entity_type, state.settings.enable_derived_types_references_for_request_body
        )
        operation.request_body = RequestBody(
            description="New property values", required=True, content=json_content(schema)
        )
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)


class SingletonPatchOperationHandler(SingletonUpdateOperationHandler):
    operation_type = OperationType.PATCH
    verb = "Update"


class SingletonPutOperationHandler(SingletonUpdateOperationHandler):
    operation_type = OperationType.PUT
    verb = "Set"
