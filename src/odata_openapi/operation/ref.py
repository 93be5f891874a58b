"""Handlers for navigation links: ``/Customers({ID})/Orders/$ref``."""

from odata_openapi.edm.segments import SegmentKind
from odata_openapi.operation.descriptor import OperationType, RequestBody, Response
from odata_openapi.operation.navigation_property import NavigationPropertyOperationHandler
from odata_openapi.operation.parameters import (
    collection_query_parameters,
    delete_ref_id_parameter,
    if_match_header,
    orderby_parameter,
)
from odata_openapi.operation.responses import (
    add_pagination,
    json_content,
    set_no_content_response,
    set_success_response,
)
from odata_openapi.operation.schemas import collection_response_ref
from odata_openapi.vocabulary.capabilities import (
    DeleteRestrictions,
    InsertRestrictions,
    ReadRestrictions,
    UpdateRestrictions,
)

REF_POST_BODY = "refPostBody"
REF_PUT_BODY = "refPutBody"
STRING_COLLECTION_RESPONSE = "StringCollectionResponse"

_REFERENCE_SCHEMA = {
    "type": "object",
    "properties": {"@odata.id": {"type": "string"}},
    "required": ["@odata.id"],
}


def _key_before_ref(path) -> bool:
    return len(path) > 1 and path[-2].kind == SegmentKind.KEY


def _ref_body(context, component_id: str, description: str) -> RequestBody:
    ref = context.registry.register_component(
        "requestBodies",
        component_id,
        {"description": description, "required": True, "content": {"application/json": {"schema": _REFERENCE_SCHEMA}}},
    )
    return RequestBody(ref=ref)


class RefGetOperationHandler(NavigationPropertyOperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = state.resolve(ReadRestrictions)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state, f"Get ref of {state.navigation_property.name} from {state.source_name}"
        )
        if state.settings.enable_operation_id:
            prefix = "ListRef" if state.navigation_property.is_collection else "GetRef"
            operation.operation_id = self.operation_id(state, prefix)
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        if state.navigation_property.is_collection:
            operation.parameters.extend(
                collection_query_parameters(state.context, state.navigation_property, state.navigation_restriction)
            )
            orderby = orderby_parameter(state.context, state.navigation_property, state.entity_type)
            if orderby is not None:
                operation.parameters.append(orderby)

    def set_responses(self, state, operation):
        if state.navigation_property.is_collection:
            ref = collection_response_ref(state.context, "Edm.String", STRING_COLLECTION_RESPONSE)
            set_success_response(state.context, operation, "200", Response(ref=ref))
        else:
            response = Response(
                description="Retrieved navigation property link",
                content=json_content({"type": "string"}),
            )
            set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)

    def set_extensions(self, state, operation):
        if state.navigation_property.is_collection:
            add_pagination(state.context, operation)
        super().set_extensions(state, operation)


class RefPostOperationHandler(NavigationPropertyOperationHandler):
    operation_type = OperationType.POST

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = state.resolve(InsertRestrictions)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state, f"Create new navigation property ref to {state.navigation_property.name} for {state.source_name}"
        )
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "CreateRef")
        super().set_basic_info(state, operation)

    def set_request_body(self, state, operation):
        operation.request_body = _ref_body(state.context, REF_POST_BODY, "New navigation property ref value")
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)


class RefPutOperationHandler(NavigationPropertyOperationHandler):
    operation_type = OperationType.PUT

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = state.resolve(UpdateRestrictions)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state, f"Update the ref of navigation property {state.navigation_property.name} in {state.source_name}"
        )
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "UpdateRef")
        super().set_basic_info(state, operation)

    def set_request_body(self, state, operation):
        operation.request_body = _ref_body(state.context, REF_PUT_BODY, "New navigation property ref values")
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)


class RefDeleteOperationHandler(NavigationPropertyOperationHandler):
    operation_type = OperationType.DELETE

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = state.resolve(DeleteRestrictions)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state, f"Delete ref of navigation property {state.navigation_property.name} for {state.source_name}"
        )
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "DeleteRef")
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.append(if_match_header())
        if state.navigation_property.is_collection and not _key_before_ref(state.path):
            operation.parameters.append(delete_ref_id_parameter())

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)
