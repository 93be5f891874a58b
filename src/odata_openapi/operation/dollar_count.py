"""GET ``.../$count``: the number of items in a collection."""

from odata_openapi.edm.segments import NavigationPropertySegment, NavigationSourceSegment
from odata_openapi.operation.descriptor import OperationType, Response
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import PAGE, navigation_tag_name
from odata_openapi.operation.parameters import filter_parameter, search_parameter
from odata_openapi.operation.responses import set_success_response
from odata_openapi.operation.restrictions import resolve_restriction
from odata_openapi.operation.schemas import count_response_ref
from odata_openapi.vocabulary.capabilities import ReadRestrictions


class DollarCountState(OperationState):
    def __init__(self, context, path):
        super().__init__(context, path)
        self.second_last = path[-2] if len(path) > 1 else path.first_segment
        if isinstance(self.second_last, NavigationPropertySegment):
            self.annotatable = self.second_last.navigation_property
        elif isinstance(self.second_last, NavigationSourceSegment):
            self.annotatable = self.second_last.navigation_source
        else:
            annotatables = self.second_last.annotatables()
            self.annotatable = annotatables[0] if annotatables else None


class DollarCountGetOperationHandler(OperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path) -> DollarCountState:
        state = DollarCountState(context, path)
        state.restriction = resolve_restriction(context, ReadRestrictions, state.target_path, state.annotatable)
        return state

    def set_basic_info(self, state, operation):
        operation.summary = "Get the number of the resource"
        if state.settings.enable_operation_id:
            operation.operation_id = (
                f"Get.Count.{state.second_last.identifier}-{state.path.path_hash(state.settings)}"
            )
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        if state.annotatable is None:
            return
        for parameter in (
            search_parameter(state.context, state.annotatable),
            filter_parameter(state.context, state.annotatable),
        ):
            if parameter is not None:
                operation.parameters.append(parameter)

    def set_responses(self, state, operation):
        set_success_response(state.context, operation, "200", Response(ref=count_response_ref(state.context)))
        super().set_responses(state, operation)

    def set_tags(self, state, operation):
        second_last = state.second_last
        if isinstance(second_last, NavigationPropertySegment):
            name = navigation_tag_name(state.path, second_last)
        else:
            source = state.path.first_segment
            entity_type = second_last.entity_type or source.entity_type
            name = f"{source.identifier}.{entity_type.name}" if entity_type else source.identifier
        self.add_tag(state, operation, name, PAGE)
        super().set_tags(state, operation)
