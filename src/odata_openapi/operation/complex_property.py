"""Handlers for complex properties: ``/Customers({ID})/Address``."""

from odata_openapi.edm.segments import ComplexPropertySegment, NavigationPropertySegment
from odata_openapi.errors import InvalidDispatchError
from odata_openapi.operation.descriptor import OperationType, RequestBody, Response
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import PAGE, navigation_operation_id, navigation_tag_name
from odata_openapi.operation.parameters import (
    collection_query_parameters,
    if_match_header,
    select_parameter,
)
from odata_openapi.operation.responses import (
    add_pagination,
    json_content,
    set_no_content_response,
    set_success_response,
)
from odata_openapi.operation.restrictions import resolve_restriction
from odata_openapi.operation.schemas import collection_response_ref, type_schema
from odata_openapi.vocabulary.capabilities import InsertRestrictions, ReadRestrictions, UpdateRestrictions


class ComplexPropertyState(OperationState):
    def __init__(self, context, path):
        super().__init__(context, path)
        self.segment: ComplexPropertySegment = path.last_segment
        self.property = self.segment.property
        self.complex_type = self.segment.complex_type
        self.annotatable = self.property

    @property
    def is_collection(self) -> bool:
        return self.property.is_collection

    def value_schema(self) -> dict:
        schema = type_schema(self.complex_type.full_name)
        return {"type": "array", "items": schema} if self.is_collection else schema


class ComplexPropertyOperationHandler(OperationHandler):
    restriction_type = ReadRestrictions

    def initialize(self, context, path) -> ComplexPropertyState:
        state = ComplexPropertyState(context, path)
        state.restriction = resolve_restriction(context, self.restriction_type, state.target_path, state.property)
        return state

    def set_tags(self, state, operation):
        navigations = [s for s in state.path if isinstance(s, NavigationPropertySegment)]
        if navigations:
            name = navigation_tag_name(state.path, navigations[-1])
        else:
            source = state.path.first_segment
            name = f"{source.identifier}.{source.entity_type.name}"
        self.add_tag(state, operation, name, PAGE)
        super().set_tags(state, operation)


class ComplexPropertyGetOperationHandler(ComplexPropertyOperationHandler):
    operation_type = OperationType.GET

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Get {state.property.name} property value")
        if state.settings.enable_operation_id:
            prefix = "List" if state.is_collection else "Get"
            operation.operation_id = navigation_operation_id(state.path, prefix)
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        if state.is_collection:
            operation.parameters.extend(collection_query_parameters(state.context, state.property))
        operation.parameters.append(select_parameter(state.context, state.property, state.complex_type))

    def set_responses(self, state, operation):
        if state.is_collection:
            ref = collection_response_ref(state.context, state.complex_type.full_name)
            set_success_response(state.context, operation, "200", Response(ref=ref))
        else:
            response = Response(description="Result entities", content=json_content(state.value_schema()))
            set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)

    def set_extensions(self, state, operation):
        if state.is_collection:
            add_pagination(state.context, operation)
        super().set_extensions(state, operation)


class ComplexPropertyUpdateOperationHandler(ComplexPropertyOperationHandler):
    restriction_type = UpdateRestrictions
    verb = "Update"

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Update property {state.property.name} value.")
        if state.settings.enable_operation_id:
            operation.operation_id = navigation_operation_id(state.path, self.verb)
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.append(if_match_header())

    def set_request_body(self, state, operation):
        operation.request_body = RequestBody(
            description="New property values", required=True, content=json_content(state.value_schema())
        )
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)


class ComplexPropertyPatchOperationHandler(ComplexPropertyUpdateOperationHandler):
    operation_type = OperationType.PATCH
    verb = "Update"


class ComplexPropertyPutOperationHandler(ComplexPropertyUpdateOperationHandler):
    operation_type = OperationType.PUT
    verb = "Set"


class ComplexPropertyPostOperationHandler(ComplexPropertyOperationHandler):
    """Append to a collection-valued complex property."""

    operation_type = OperationType.POST
    restriction_type = InsertRestrictions

    def initialize(self, context, path):
        state = super().initialize(context, path)
        if not state.is_collection:
            raise InvalidDispatchError(
                f"POST is only defined for collection-valued complex properties, not {state.property.name}"
            )
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state, f"Sets a new value for the collection of {state.complex_type.name}."
        )
        if state.settings.enable_operation_id:
            operation.operation_id = navigation_operation_id(state.path, "Create")
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.append(if_match_header())

    def set_request_body(self, state, operation):
        operation.request_body = RequestBody(
            description="New property values", required=True, content=json_content(state.value_schema())
        )
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)
