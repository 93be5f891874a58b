"""Handlers for action imports (POST) and function imports (GET)."""

from odata_openapi.edm.segments import OperationImportSegment
from odata_openapi.errors import InvalidDispatchError
from odata_openapi.operation.descriptor import OperationType, Response
from odata_openapi.operation.edm_operation import parameters_body, return_schema
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import CONTAINER
from odata_openapi.operation.parameters import collection_query_parameters
from odata_openapi.operation.responses import (
    OPERATION_TYPE,
    add_pagination,
    json_content,
    set_no_content_response,
    set_success_response,
)
from odata_openapi.operation.restrictions import resolve_restriction
from odata_openapi.settings import LinkRelKey
from odata_openapi.vocabulary.capabilities import OperationRestrictions


class OperationImportState(OperationState):
    def __init__(self, context, path):
        super().__init__(context, path)
        if not isinstance(path.last_segment, OperationImportSegment):
            raise InvalidDispatchError(f"Operation import handler dispatched for {path}")
        self.segment: OperationImportSegment = path.last_segment
        self.operation_import = self.segment.operation_import
        self.operation = self.segment.operation
        self.annotatable = self.operation_import


class OperationImportOperationHandler(OperationHandler):
    def initialize(self, context, path) -> OperationImportState:
        state = OperationImportState(context, path)
        state.restriction = resolve_restriction(
            context, OperationRestrictions, state.target_path, state.operation_import, state.operation
        )
        return state

    def link_rel_key(self, state):
        return LinkRelKey.ACTION if state.operation_import.is_action_import else LinkRelKey.FUNCTION

    def set_basic_info(self, state, operation):
        operation_import = state.operation_import
        kind = "actionImport" if operation_import.is_action_import else "functionImport"
        operation.summary = (
            state.context.annotations.get_description(operation_import) or f"Invoke {kind} {operation_import.name}"
        )
        if state.settings.enable_operation_id:
            operation_id = f"OperationImport.{operation_import.name}"
            if not operation_import.is_action_import:
                operation_id += f"-{state.segment.path_hash(state.settings)}"
            operation.operation_id = operation_id
        super().set_basic_info(state, operation)

    def set_responses(self, state, operation):
        if state.operation.return_type is None:
            set_no_content_response(operation)
        else:
            response = Response(description="Success", content=json_content(return_schema(state.context, state.operation)))
            set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)

    def set_tags(self, state, operation):
        operation_import = state.operation_import
        self.add_tag(state, operation, operation_import.entity_set or operation_import.name, CONTAINER)
        super().set_tags(state, operation)

    def set_extensions(self, state, operation):
        operation.extensions[OPERATION_TYPE] = (
            "actionImport" if state.operation_import.is_action_import else "functionImport"
        )
        super().set_extensions(state, operation)


class ActionImportOperationHandler(OperationImportOperationHandler):
    operation_type = OperationType.POST

    def initialize(self, context, path):
        state = super().initialize(context, path)
        if not state.operation_import.is_action_import:
            raise InvalidDispatchError(f"{state.operation_import.name} is not an action import")
        return state

    def set_request_body(self, state, operation):
        operation.request_body = parameters_body(state.context, state.operation)
        super().set_request_body(state, operation)


class FunctionImportOperationHandler(OperationImportOperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path):
        state = super().initialize(context, path)
        if state.operation_import.is_action_import:
            raise InvalidDispatchError(f"{state.operation_import.name} is not a function import")
        return state

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        if state.operation.returns_collection:
            operation.parameters.extend(collection_query_parameters(state.context, state.operation_import))

    def set_extensions(self, state, operation):
        if state.operation.returns_collection:
            add_pagination(state.context, operation)
        super().set_extensions(state, operation)
