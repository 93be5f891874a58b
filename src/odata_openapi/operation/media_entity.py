"""Handlers for media content: ``/Customers({ID})/$value`` and stream properties."""

from odata_openapi.context import ODataContext
from odata_openapi.edm.segments import (
    NavigationPropertySegment,
    ODataPath,
    StreamPropertySegment,
)
from odata_openapi.operation.descriptor import OperationType, RequestBody, Response
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import PAGE, navigation_items, navigation_tag_name, upper_first
from odata_openapi.operation.parameters import if_match_header
from odata_openapi.operation.responses import media_content, set_no_content_response, set_success_response
from odata_openapi.operation.restrictions import resolve_restriction
from odata_openapi.vocabulary import core
from odata_openapi.vocabulary.capabilities import DeleteRestrictions, ReadRestrictions, UpdateRestrictions


class MediaEntityState(OperationState):
    def __init__(self, context: ODataContext, path: ODataPath):
        super().__init__(context, path)
        self.navigation_source = path.first_segment.navigation_source
        navigations = [s for s in path if isinstance(s, NavigationPropertySegment)]
        self.navigation_segment = navigations[-1] if navigations else None
        streams = [s for s in path if isinstance(s, StreamPropertySegment)]
        self.stream_segment = streams[-1] if streams else None

        if self.stream_segment is not None:
            self.entity_type = self.stream_segment.entity_type
            self.annotatable = self.stream_segment.property
        elif self.navigation_segment is not None:
            self.entity_type = self.navigation_segment.entity_type
            self.annotatable = self.navigation_segment.navigation_property
        else:
            self.entity_type = path.first_segment.entity_type
            self.annotatable = self.navigation_source

    @property
    def identifier(self) -> str:
        return self.stream_segment.identifier if self.stream_segment else "Content"

    @property
    def media_types(self) -> list[str] | None:
        annotations = self.context.annotations
        if self.stream_segment is not None:
            found = annotations.get_collection(self.stream_segment.property, core.ACCEPTABLE_MEDIA_TYPES)
            if found:
                return found
        return annotations.get_collection(self.entity_type, core.ACCEPTABLE_MEDIA_TYPES)

    @property
    def subject(self) -> str:
        if self.navigation_segment is not None:
            return f"the navigation property {self.navigation_segment.identifier} in {self.navigation_source.name}"
        return f"{self.entity_type.name} in {self.navigation_source.name}"


class MediaEntityOperationHandler(OperationHandler):
    restriction_type = ReadRestrictions

    def initialize(self, context, path) -> MediaEntityState:
        state = MediaEntityState(context, path)
        state.restriction = resolve_restriction(
            context, self.restriction_type, state.target_path, state.annotatable
        )
        return state

    def operation_id(self, state: MediaEntityState, verb: str) -> str:
        if state.navigation_segment is None:
            prefix = f"{state.navigation_source.name}.{state.entity_type.name}"
        else:
            prefix = ".".join(navigation_items(state.path))
        return f"{prefix}.{verb}{upper_first(state.identifier)}"

    def set_tags(self, state, operation):
        if state.navigation_segment is not None:
            name = navigation_tag_name(state.path, state.navigation_segment)
        else:
            name = f"{state.navigation_source.name}.{state.entity_type.name}"
        self.add_tag(state, operation, name, PAGE)
        super().set_tags(state, operation)


class MediaEntityGetOperationHandler(MediaEntityOperationHandler):
    operation_type = OperationType.GET

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Get media content for {state.subject}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Get")
        super().set_basic_info(state, operation)

    def set_responses(self, state, operation):
        response = Response(description="Retrieved media content", content=media_content(state.media_types))
        set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)


class MediaEntityPutOperationHandler(MediaEntityOperationHandler):
    operation_type = OperationType.PUT
    restriction_type = UpdateRestrictions

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Update media content for {state.subject}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Update")
        super().set_basic_info(state, operation)

    def set_request_body(self, state, operation):
        operation.request_body = RequestBody(
            description="New media content.", required=True, content=media_content(state.media_types)
        )
        super().set_request_body(state, operation)

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)


class MediaEntityDeleteOperationHandler(MediaEntityOperationHandler):
    operation_type = OperationType.DELETE
    restriction_type = DeleteRestrictions

    def set_basic_info(self, state, operation):
        operation.summary = self.summary(state, f"Delete media content for {state.subject}")
        if state.settings.enable_operation_id:
            operation.operation_id = self.operation_id(state, "Delete")
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        operation.parameters.append(if_match_header())

    def set_responses(self, state, operation):
        set_no_content_response(operation)
        super().set_responses(state, operation)
