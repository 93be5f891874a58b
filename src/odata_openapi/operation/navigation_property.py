"""Handlers for navigation property paths such as ``/Customers({ID})/Orders``."""

from odata_openapi.context import ODataContext
from odata_openapi.edm.segments import NavigationPropertySegment, ODataPath, SegmentKind
from odata_openapi.operation.descriptor import OperationDescriptor, OperationType, RequestBody, Response
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import (
    PAGE,
    navigation_items,
    navigation_operation_id,
    navigation_tag_name,
)
from odata_openapi.operation.parameters import if_match_header, read_query_parameters
from odata_openapi.operation.responses import (
    add_pagination,
    create_links,
    json_content,
    set_no_content_response,
    set_success_response,
)
from odata_openapi.operation.restrictions import (
    apply_read_by_key,
    find_navigation_restriction,
    resolve_navigation_restriction,
)
from odata_openapi.operation.schemas import collection_response_ref, structured_schema
from odata_openapi.vocabulary.capabilities import (
    DeleteRestrictions,
    InsertRestrictions,
    ReadRestrictions,
    UpdateRestrictions,
)


class NavigationPropertyState(OperationState):
    def __init__(self, context: ODataContext, path: ODataPath):
        super().__init__(context, path)
        self.navigation_source = path.first_segment.navigation_source
        self.segment: NavigationPropertySegment = [
            s for s in path if isinstance(s, NavigationPropertySegment)
        ][-1]
        self.navigation_property = self.segment.navigation_property
        self.entity_type = self.segment.entity_type
        self.annotatable = self.navigation_property
        self.last_segment_is_key = path.last_segment.kind == SegmentKind.KEY
        self.navigation_restriction = find_navigation_restriction(context, path, self.navigation_property)

    @property
    def returns_collection(self) -> bool:
        return self.navigation_property.is_collection and not self.last_segment_is_key

    @property
    def source_name(self) -> str:
        return self.navigation_source.name

    @property
    def link_prefix(self) -> str:
        return ".".join(navigation_items(self.path))

    def resolve(self, record_type):
        return resolve_navigation_restriction(self.context, self.path, self.navigation_property, record_type)


class NavigationPropertyOperationHandler(OperationHandler):
    def initialize(self, context, path) -> NavigationPropertyState:
        return NavigationPropertyState(context, path)

    def operation_id(self, state: NavigationPropertyState, prefix: str) -> str:
        return navigation_operation_id(state.path, prefix)

    def set_tags(self, state: NavigationPropertyState, operation: OperationDescriptor) -> None:
        self.add_tag(state, operation, navigation_tag_name(state.path, state.segment), PAGE)
        super().set_tags(state, operation)

    def entity_schema(self, state: NavigationPropertyState, derived: bool) -> dict:
        return structured_schema(state.context, state.entity_type, derived)


class NavigationPropertyGetOperationHandler(NavigationPropertyOperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path):
        state = super().initialize(context, path)
        read = state.resolve(ReadRestrictions)
        state.restriction = apply_read_by_key(read) if state.last_segment_is_key else read
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state, f"Get {state.navigation_property.name} from {state.source_name}"
        )
        if state.settings.enable_operation_id:
            prefix = "List" if state.returns_collection else "Get"
            operation.operation_id = self.operation_id(state, prefix)
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.extend(
            read_query_parameters(
                state.context,
                state.navigation_property,
                state.entity_type,
                collection=state.returns_collection,
                nav_restriction=state.navigation_restriction,
            )
        )

    def set_responses(self, state, operation):
        if state.returns_collection:
            ref = collection_response_ref(state.context, state.entity_type.full_name)
            set_success_response(state.context, operation, "200", Response(ref=ref))
        else:
            response = Response(
                description="Retrieved navigation property",
                content=json_content(
                    self.entity_schema(state, state.settings.enable_derived_types_references_for_responses)
                ),
                links=create_links(state.context, state.entity_type, state.link_prefix, operation.parameters),
            )
            set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)

    def set_extensions(self, state, operation):
        if state.returns_collection:
            add_pagination(state.context, operation)
        super().set_extensions(state, operation)


class NavigationPropertyPostOperationHandler(NavigationPropertyOperationHandler):
    operation_type = OperationType.POST

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = state.resolve(InsertRestrictions)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state,
            f"Create new navigation property to {state.navigation_property.name} for {state.source_name}",
        )
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Create")
        super().set_basic_info(state, operation)

    def set_request_body(self, state, operation):
        schema = self.entity_schema(state, state.settings.enable_derived_types_references_for_request_body)
        operation.request_body = RequestBody(
            description="New navigation property", required=True, content=json_content(schema)
        )
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        response = Response(
            description="Created navigation property.",
            content=json_content(
                self.entity_schema(state, state.settings.enable_derived_types_references_for_responses)
            ),
            links=create_links(state.context, state.entity_type, state.link_prefix, operation.parameters),
        )
        set_success_response(state.context, operation, "201", response)
        super().set_responses(state, operation)


class NavigationPropertyUpdateOperationHandler(NavigationPropertyOperationHandler):
    verb = "Update"

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = state.resolve(UpdateRestrictions)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state, f"Update the navigation property {state.navigation_property.name} in {state.source_name}"
        )
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, self.verb)
        super().set_basic_info(state, operation)

    def set_request_body(self, state, operation):
        schema = self.entity_schema(state, state.settings.enable_derived_types_references_for_request_body)
        operation.request_body = RequestBody(
            description="New navigation property values", required=True, content=json_content(schema)
        )
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)


class NavigationPropertyPatchOperationHandler(NavigationPropertyUpdateOperationHandler):
    operation_type = OperationType.PATCH
    verb = "Update"


class NavigationPropertyPutOperationHandler(NavigationPropertyUpdateOperationHandler):
    operation_type = OperationType.PUT
    verb = "Set"


class NavigationPropertyDeleteOperationHandler(NavigationPropertyOperationHandler):
    operation_type = OperationType.DELETE

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = state.resolve(DeleteRestrictions)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(
            state, f"Delete navigation property {state.navigation_property.name} for {state.source_name}"
        )
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Delete")
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.append(if_match_header())

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)
