"""GET on a derived-type cast: ``/Customers/NS.VipCustomer``."""

from odata_openapi.edm.model import EntitySet, Singleton
from odata_openapi.edm.segments import (
    ComplexPropertySegment,
    KeySegment,
    NavigationPropertySegment,
    NavigationSourceSegment,
    TypeCastSegment,
)
from odata_openapi.errors import InvalidDispatchError
from odata_openapi.operation.descriptor import OperationType, Response
from odata_openapi.operation.handler import OperationHandler, OperationState
from odata_openapi.operation.identifiers import PAGE
from odata_openapi.operation.parameters import read_query_parameters
from odata_openapi.operation.responses import add_pagination, json_content, set_success_response
from odata_openapi.operation.restrictions import find_navigation_restriction
from odata_openapi.operation.schemas import collection_response_ref, structured_schema
from odata_openapi.vocabulary.capabilities import NavigationRestrictions


class TypeCastState(OperationState):
    def __init__(self, context, path):
        super().__init__(context, path)
        last = path.last_segment
        if not isinstance(last, TypeCastSegment):
            raise InvalidDispatchError(
                f"Type cast handler dispatched for a path ending in {last.kind.value}"
            )
        self.target_type = last.structured_type
        self.is_key = False
        self.entity_set: EntitySet | None = None
        self.singleton: Singleton | None = None
        self.navigation_property = None
        self.navigation_restriction = None

        second_last = path[-2] if len(path) > 1 else path.first_segment
        if isinstance(second_last, ComplexPropertySegment):
            self.parent_type = second_last.complex_type
        else:
            self.parent_type = second_last.entity_type or self.target_type

        if isinstance(second_last, KeySegment):
            self.is_key = True
            second_last = path[-3] if len(path) > 2 else path.first_segment

        if isinstance(second_last, NavigationPropertySegment):
            self.navigation_property = second_last.navigation_property
            self.navigation_restriction = find_navigation_restriction(context, path, self.navigation_property)
            self.annotatable = self.navigation_property
        elif isinstance(second_last, NavigationSourceSegment):
            source = second_last.navigation_source
            if isinstance(source, EntitySet):
                self.entity_set = source
            else:
                self.singleton = source
            self.annotatable = source
            self.navigation_restriction = self._unnamed_restriction(source)

        if self.navigation_restriction is not None:
            self.restriction = self.navigation_restriction.read_restrictions

    def _unnamed_restriction(self, source):
        restrictions = self.context.annotations.get_record(source, NavigationRestrictions)
        if restrictions is None or not restrictions.restricted_properties:
            return None
        return next((r for r in restrictions.restricted_properties if r.navigation_property is None), None)

    @property
    def is_single_element(self) -> bool:
        if self.is_key or self.singleton is not None:
            return True
        return (
            self.navigation_property is not None
            and not self.navigation_property.is_collection
            and self.entity_set is None
        )


class TypeCastGetOperationHandler(OperationHandler):
    operation_type = OperationType.GET

    def initialize(self, context, path) -> TypeCastState:
        return TypeCastState(context, path)

    def set_basic_info(self, state, operation):
        parent = state.parent_type.full_name
        target = state.target_type.full_name
        if state.is_single_element:
            operation.summary = f"Get the item of type {parent} as {target}"
        else:
            operation.summary = f"Get the items of type {target} in the {parent} collection"
        if state.settings.enable_operation_id:
            item = "Item" if state.is_single_element else "Items"
            operation.operation_id = f"Get.{parent}.{item}.As.{target}-{state.path.path_hash(state.settings)}"
        super().set_basic_info(state, operation)

    def set_parameters(self, state, operation):
        super().set_parameters(state, operation)
        if state.annotatable is None:
            return
        collection = not state.is_single_element
        operation.parameters.extend(
            read_query_parameters(
                state.context,
                state.annotatable,
                state.target_type,
                collection=collection,
                nav_restriction=state.navigation_restriction if state.navigation_property else None,
            )
        )

    def set_responses(self, state, operation):
        if state.is_single_element:
            schema = structured_schema(
                state.context, state.target_type, state.settings.enable_derived_types_references_for_responses
            )
            response = Response(description="Result entities", content=json_content(schema))
        else:
            response = Response(ref=collection_response_ref(state.context, state.target_type.full_name))
        set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)

    def set_tags(self, state, operation):
        name = f"{state.parent_type.name}.{state.target_type.name}"
        self.add_tag(state, operation, name, None if state.is_single_element else PAGE)
        super().set_tags(state, operation)

    def set_extensions(self, state, operation):
        if not state.is_single_element:
            add_pagination(state.context, operation)
        super().set_extensions(state, operation)
