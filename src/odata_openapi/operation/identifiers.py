"""Operation id and tag name synthesis."""

from odata_openapi.context import ODataContext
from odata_openapi.edm.model import EdmOperation
from odata_openapi.edm.segments import (
    KeySegment,
    NavigationPropertySegment,
    ODataPath,
    OperationSegment,
    SegmentKind,
    sha256_prefix,
)

PAGE = "page"
CONTAINER = "container"


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def operation_path_id(context: ODataContext, path: ODataPath) -> str:
    """Join the identifiers of every segment; overloaded functions add a hash.

    Key segments contribute the entity type name, or ``By<Keys>`` for an
    alternate key in final position.
    """
    tokens = []
    path_hash = ""
    last = path.last_segment
    for segment in path:
        if isinstance(segment, KeySegment):
            if not segment.is_alternate_key:
                tokens.append(segment.entity_type.name)
            elif segment is last:
                tokens.append("By" + "".join(upper_first(k) for k in segment.identifier.split(",")))
            else:
                tokens.append(segment.identifier)
            continue

        if isinstance(segment, OperationSegment):
            operation = segment.operation
            if operation.is_function and context.model.is_operation_overload(operation):
                segment_hash = segment.path_hash(context.settings)
                path_hash = sha256_prefix(path_hash + segment_hash) if path_hash else segment_hash

        if segment.identifier:
            tokens.append(segment.identifier)

    operation_id = ".".join(tokens)
    return f"{operation_id}-{path_hash}" if path_hash else operation_id


def navigation_items(path: ODataPath) -> list[str]:
    """Source name followed by every navigation and complex property name."""
    items = [path.first_segment.identifier]
    items.extend(
        segment.identifier
        for segment in path
        if segment.kind in (SegmentKind.NAVIGATION_PROPERTY, SegmentKind.COMPLEX_PROPERTY)
    )
    return items


def navigation_operation_id(path: ODataPath, prefix: str | None = None) -> str:
    """``Customers.Orders.ListItems``: the prefix joins the last property name."""
    items = navigation_items(path)
    if len(items) > 1:
        items[-1] = (prefix or "") + upper_first(items[-1])
    elif prefix:
        items.append(prefix)
    return ".".join(items)


def navigation_tag_name(path: ODataPath, upto: NavigationPropertySegment | None = None) -> str:
    """``<Source>.<Nav>...<TargetEntityTypeName>`` for the navigation ending at ``upto``."""
    navigations = [s for s in path if isinstance(s, NavigationPropertySegment)]
    if not navigations:
        return f"{path.first_segment.identifier}.{path.first_segment.entity_type.name}"
    upto = upto or navigations[-1]

    items = [path.first_segment.identifier]
    for segment in navigations:
        if segment is upto:
            items.append(segment.entity_type.name)
            break
        items.append(segment.identifier)
    return ".".join(items)


def operation_tag_name(path: ODataPath) -> str:
    """Tag of the element owning the trailing operation.

    Walk backward skipping the operation itself, then any key or operation
    import segment.
    """
    segments = path.segments
    index = len(segments) - 2
    while index > 0 and segments[index].kind in (SegmentKind.KEY, SegmentKind.OPERATION_IMPORT):
        index -= 1
    owner = segments[max(index, 0)]

    if isinstance(owner, NavigationPropertySegment):
        return navigation_tag_name(path, owner)

    source = path.first_segment
    entity_type = owner.entity_type or source.entity_type
    if entity_type is None:
        return source.identifier
    return f"{source.identifier}.{entity_type.name}"


def bound_operation_tag_name(path: ODataPath, operation: EdmOperation) -> str:
    suffix = "Actions" if operation.is_action else "Functions"
    return f"{operation_tag_name(path)}.{suffix}"
