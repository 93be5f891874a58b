"""Handlers for ``/Customers`` and ``/Customers({ID})``."""

from odata_openapi.context import ODataContext
from odata_openapi.edm.segments import KeySegment, ODataPath
from odata_openapi.operation.descriptor import (
    OperationDescriptor,
    OperationType,
    RequestBody,
    Response,
)
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import PAGE, upper_first
from odata_openapi.operation.parameters import if_match_header, read_query_parameters
from odata_openapi.operation.responses import (
    add_pagination,
    create_links,
    json_content,
    media_content,
    set_no_content_response,
    set_success_response,
)
from odata_openapi.operation.restrictions import apply_read_by_key, resolve_restriction
from odata_openapi.operation.schemas import collection_response_ref, structured_schema
from odata_openapi.vocabulary import core
from odata_openapi.vocabulary.capabilities import (
    DeleteRestrictions,
    InsertRestrictions,
    ReadRestrictions,
    UpdateRestrictions,
)


class EntitySetState(OperationState):
    def __init__(self, context: ODataContext, path: ODataPath):
        super().__init__(context, path)
        source_segment = path.first_segment
        self.entity_set = source_segment.navigation_source
        self.entity_type = source_segment.entity_type
        self.annotatable = self.entity_set
        last = path.last_segment
        self.key_segment = last if isinstance(last, KeySegment) else None

    @property
    def prefix(self) -> str:
        return f"{self.entity_set.name}.{self.entity_type.name}"


class EntitySetOperationHandler(OperationHandler):
    """Shared by the entity set and the single entity handlers."""

    def initialize(self, context: ODataContext, path: ODataPath) -> EntitySetState:
        return EntitySetState(context, path)

    def operation_id(self, state: EntitySetState, action: str) -> str:
        operation_id = f"{state.prefix}.{action}{upper_first(state.entity_type.name)}"
        key = state.key_segment
        if key is not None and key.is_alternate_key:
            operation_id += "By" + "".join(upper_first(k) for k in key.identifier.split(","))
        return operation_id

    def set_tags(self, state: EntitySetState, operation: OperationDescriptor) -> None:
        self.add_tag(state, operation, state.prefix, PAGE)
        super().set_tags(state, operation)

    def entity_body(self, state: EntitySetState, description: str, content_types: list[str] | None) -> RequestBody:
        entity_type = state.entity_type
        if entity_type.has_stream:
            media_types = state.context.annotations.get_collection(entity_type, core.ACCEPTABLE_MEDIA_TYPES)
            return RequestBody(description=description, required=True, content=media_content(content_types or media_types))
        schema = structured_schema(
            state.context, entity_type, state.settings.enable_derived_types_references_for_request_body
        )
        content = json_content(schema)
        if content_types:
            content = {media_type: content["application/json"] for media_type in content_types}
        return RequestBody(description=description, required=True, content=content)

    def entity_response(self, state: EntitySetState, description: str, operation: OperationDescriptor) -> Response:
        schema = structured_schema(
            state.context, state.entity_type, state.settings.enable_derived_types_references_for_responses
        )
        return Response(
            description=description,
            content=json_content(schema),
            links=create_links(state.context, state.entity_type, state.prefix, operation.parameters),
        )


class EntitySetGetOperationHandler(EntitySetOperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = resolve_restriction(context, ReadRestrictions, state.target_path, state.entity_set)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Get entities from {state.entity_set.name}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "List")
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.extend(
            read_query_parameters(state.context, state.entity_set, state.entity_type, collection=True)
        )

    def set_responses(self, state, operation):
        ref = collection_response_ref(state.context, state.entity_type.full_name)
        set_success_response(state.context, operation, "200", Response(ref=ref))
        super().set_responses(state, operation)

    def set_extensions(self, state, operation):
        add_pagination(state.context, operation)
        super().set_extensions(state, operation)


class EntitySetPostOperationHandler(EntitySetOperationHandler):
    operation_type = OperationType.POST

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = resolve_restriction(context, InsertRestrictions, state.target_path, state.entity_set)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Add new entity to {state.entity_set.name}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Create")
        super().set_basic_info(state, operation)

    def set_request_body(self, state, operation):
        content_types = state.restriction.request_content_types if state.restriction else None
        operation.request_body = self.entity_body(state, "New entity", content_types)
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_success_response(
            state.context, operation, "201", self.entity_response(state, "Created entity", operation)
        )
        super().set_responses(state, operation)


class EntityGetOperationHandler(EntitySetOperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path):
        state = super().initialize(context, path)
        read = resolve_restriction(context, ReadRestrictions, state.target_path, state.entity_set)
        state.restriction = apply_read_by_key(read)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Get entity from {state.entity_set.name} by key")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Get")
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.extend(
            read_query_parameters(state.context, state.entity_set, state.entity_type, collection=False)
        )

    def set_responses(self, state, operation):
        set_success_response(
            state.context, operation, "200", self.entity_response(state, "Retrieved entity", operation)
        )
        super().set_responses(state, operation)


class EntityUpdateOperationHandler(EntitySetOperationHandler):
    """PATCH and PUT on a single entity; they differ only in the id verb."""

    verb = "Update"

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = resolve_restriction(context, UpdateRestrictions, state.target_path, state.entity_set)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Update entity in {state.entity_set.name}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, self.verb)
        super().set_basic_info(state, operation)

    def set_request_body(self, state, operation):
        content_types = state.restriction.request_content_types if state.restriction else None
        operation.request_body = self.entity_body(state, "New property values", content_types)
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)


class EntityPatchOperationHandler(EntityUpdateOperationHandler):
    operation_type = OperationType.PATCH
    verb = "Update"


class EntityPutOperationHandler(EntityUpdateOperationHandler):
    operation_type = OperationType.PUT
    verb = "Set"


class EntityDeleteOperationHandler(EntitySetOperationHandler):
    operation_type = OperationType.DELETE

    def initialize(self, context, path):
        state = super().initialize(context, path)
        state.restriction = resolve_restriction(context, DeleteRestrictions, state.target_path, state.entity_set)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Delete entity from {state.entity_set.name}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Delete")
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.append(if_match_header())

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)
