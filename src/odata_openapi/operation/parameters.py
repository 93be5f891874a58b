"""Parameter builders: path templates, custom parameters, system query options."""

from odata_openapi.context import ODataContext
from odata_openapi.edm.model import EntityType, StructuredType
from odata_openapi.edm.segments import (
    KeySegment,
    ODataPath,
    OperationImportSegment,
    OperationSegment,
)
from odata_openapi.operation.descriptor import Example, Parameter
from odata_openapi.operation.schemas import type_schema
from odata_openapi.vocabulary import capabilities as cap

STRING_SCHEMA = {"type": "string"}

QUERY_OPTIONS = {
    "top": {
        "name": "$top",
        "in": "query",
        "description": "Show only the first n items",
        "schema": {"type": "integer", "minimum": 0},
        "style": "form",
        "explode": False,
    },
    "skip": {
        "name": "$skip",
        "in": "query",
        "description": "Skip the first n items",
        "schema": {"type": "integer", "minimum": 0},
        "style": "form",
        "explode": False,
    },
    "search": {
        "name": "$search",
        "in": "query",
        "description": "Search items by search phrases",
        "schema": {"type": "string"},
        "style": "form",
        "explode": False,
    },
    "filter": {
        "name": "$filter",
        "in": "query",
        "description": "Filter items by property values",
        "schema": {"type": "string"},
        "style": "form",
        "explode": False,
    },
    "count": {
        "name": "$count",
        "in": "query",
        "description": "Include count of items",
        "schema": {"type": "boolean"},
        "style": "form",
        "explode": False,
    },
}


# -- path parameters ------------------------------------------------------


def path_parameters(context: ODataContext, path: ODataPath) -> list[Parameter]:
    """Key and function parameters in path order, using the unique template names."""
    parameters = []
    for segment, mapping in path.parameter_mappings(context.settings):
        if isinstance(segment, KeySegment):
            parameters.extend(_key_parameters(context, segment, mapping))
        elif isinstance(segment, (OperationSegment, OperationImportSegment)):
            parameters.extend(_function_parameters(segment, mapping))
    return parameters


def _key_parameters(context: ODataContext, segment: KeySegment, mapping: dict[str, str]) -> list[Parameter]:
    entity_type = segment.entity_type
    result = []
    for key_name, template_name in mapping.items():
        prop = context.model.find_property(entity_type, key_name)
        if segment.is_alternate_key:
            description = f"Alternate key: {key_name} of {entity_type.name}"
        else:
            description = f"The unique identifier of {entity_type.name}"
        result.append(
            Parameter(
                name=template_name,
                location="path",
                required=True,
                description=description,
                schema_=type_schema(prop.type) if prop else dict(STRING_SCHEMA),
            )
        )
    return result


def _function_parameters(segment, mapping: dict[str, str]) -> list[Parameter]:
    by_name = {p.name: p for p in segment.operation.non_binding_parameters}
    result = []
    for name, template_name in mapping.items():
        param = by_name[name]
        result.append(
            Parameter(
                name=template_name,
                location="path",
                required=not (param.nullable or param.optional),
                description=f"Usage: {name}={{{template_name}}}",
                schema_=type_schema(param.type),
            )
        )
    return result


# -- custom parameters ----------------------------------------------------


def custom_parameters(record) -> list[Parameter]:
    """Custom headers then custom query options declared on a restriction record."""
    if record is None:
        return []
    result = []
    for params, location in (
        (record.custom_headers, "header"),
        (record.custom_query_options, "query"),
    ):
        for param in params or []:
            result.append(_custom_parameter(param, location))
    return result


def _custom_parameter(param: cap.CustomParameter, location: str) -> Parameter:
    examples = None
    if param.example_values:
        examples = {
            f"example-{index}": Example(description=example.description, value=example.value)
            for index, example in enumerate(param.example_values, start=1)
        }
    return Parameter(
        name=param.name,
        location=location,
        description=param.description,
        required=param.required or False,
        schema_=dict(STRING_SCHEMA),
        example=param.documentation_url,
        examples=examples,
    )


def if_match_header() -> Parameter:
    return Parameter(
        name="If-Match",
        location="header",
        description="ETag",
        schema_=dict(STRING_SCHEMA),
    )


def delete_ref_id_parameter() -> Parameter:
    return Parameter(
        name="@id",
        location="query",
        description="The delete Uri",
        required=True,
        schema_=dict(STRING_SCHEMA),
    )


# -- system query options -------------------------------------------------


def _query_option_ref(context: ODataContext, component_id: str) -> Parameter:
    value = dict(QUERY_OPTIONS[component_id])
    if component_id == "top":
        value["example"] = context.settings.top_example
    return Parameter(ref=context.registry.register_component("parameters", component_id, value))


def collection_query_parameters(
    context: ODataContext,
    target,
    nav_restriction: cap.NavigationPropertyRestriction | None = None,
) -> list[Parameter]:
    """``$top $skip $search $filter $count`` unless an annotation disables them."""
    annotations = context.annotations
    result = []

    top_supported = annotations.get_boolean(target, cap.TOP_SUPPORTED)
    if nav_restriction and nav_restriction.top_supported is not None:
        top_supported = nav_restriction.top_supported
    if top_supported is not False:
        result.append(_query_option_ref(context, "top"))

    skip_supported = annotations.get_boolean(target, cap.SKIP_SUPPORTED)
    if nav_restriction and nav_restriction.skip_supported is not None:
        skip_supported = nav_restriction.skip_supported
    if skip_supported is not False:
        result.append(_query_option_ref(context, "skip"))

    result.append(search_parameter(context, target))
    result.append(filter_parameter(context, target))

    count = annotations.get_record(target, cap.CountRestrictions)
    if count is None or count.countable is not False:
        result.append(_query_option_ref(context, "count"))

    return [p for p in result if p is not None]


def search_parameter(context: ODataContext, target) -> Parameter | None:
    search = context.annotations.get_record(target, cap.SearchRestrictions)
    if search is not None and search.searchable is False:
        return None
    return _query_option_ref(context, "search")


def filter_parameter(context: ODataContext, target) -> Parameter | None:
    filter_ = context.annotations.get_record(target, cap.FilterRestrictions)
    if filter_ is not None and filter_.filterable is False:
        return None
    return _query_option_ref(context, "filter")


def _enum_array(values: list[str]) -> dict:
    return {"type": "array", "uniqueItems": True, "items": {"type": "string", "enum": values}}


def orderby_parameter(context: ODataContext, target, structured: StructuredType) -> Parameter | None:
    sort = context.annotations.get_record(target, cap.SortRestrictions)
    if sort is not None and sort.sortable is False:
        return None
    excluded = set(sort.non_sortable_properties or []) if sort else set()
    values = []
    for prop in context.model.all_properties(structured):
        if prop.name in excluded:
            continue
        values.extend([prop.name, f"{prop.name} desc"])
    return Parameter(
        name="$orderby",
        location="query",
        description="Order items by property values",
        schema_=_enum_array(values),
        style="form",
        explode=False,
    )


def select_parameter(context: ODataContext, target, structured: StructuredType) -> Parameter:
    values = [p.name for p in context.model.all_properties(structured)]
    values.extend(p.name for p in context.model.all_navigation_properties(structured))
    return Parameter(
        name="$select",
        location="query",
        description="Select properties to be returned",
        schema_=_enum_array(values),
        style="form",
        explode=False,
    )


def expand_parameter(context: ODataContext, target, structured: StructuredType) -> Parameter | None:
    if not isinstance(structured, EntityType):
        return None
    expand = context.annotations.get_record(target, cap.ExpandRestrictions)
    if expand is not None and expand.expandable is False:
        return None
    excluded = set(expand.non_expandable_properties or []) if expand else set()
    values = ["*"]
    values.extend(
        p.name for p in context.model.all_navigation_properties(structured) if p.name not in excluded
    )
    return Parameter(
        name="$expand",
        location="query",
        description="Expand related entities",
        schema_=_enum_array(values),
        style="form",
        explode=False,
    )


def read_query_parameters(
    context: ODataContext,
    target,
    structured: StructuredType,
    collection: bool,
    nav_restriction: cap.NavigationPropertyRestriction | None = None,
) -> list[Parameter]:
    """System query options for a read: paging and filtering only on collections."""
    result = []
    if collection:
        result.extend(collection_query_parameters(context, target, nav_restriction))
        result.append(orderby_parameter(context, target, structured))
    result.append(select_parameter(context, target, structured))
    result.append(expand_parameter(context, target, structured))
    return [p for p in result if p is not None]
