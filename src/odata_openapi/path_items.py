"""Choose which HTTP methods a resource path exposes.

The handler registry answers "how is (kind, method) built"; this module
answers "which methods belong on this path item", from the path shape and
the insert/update/delete capabilities of the addressed element.
"""

from odata_openapi.context import ODataContext
from odata_openapi.edm.segments import (
    KeySegment,
    NavigationPropertySegment,
    NavigationSourceSegment,
    ODataPath,
    OperationImportSegment,
    OperationSegment,
    PathKind,
    SegmentKind,
)
from odata_openapi.operation.descriptor import OperationType
from odata_openapi.operation.restrictions import apply_read_by_key, resolve_restriction
from odata_openapi.vocabulary.capabilities import (
    DeleteRestrictions,
    InsertRestrictions,
    ReadRestrictions,
    UpdateRestrictions,
)

GET = OperationType.GET
POST = OperationType.POST
PUT = OperationType.PUT
PATCH = OperationType.PATCH
DELETE = OperationType.DELETE

UPDATE_METHOD_PUT = "PUT"


def _update_methods(update: UpdateRestrictions | None) -> list[OperationType]:
    if update is not None and not update.is_updatable:
        return []
    if update is not None and (update.update_method or "").upper() == UPDATE_METHOD_PUT:
        return [PUT]
    return [PATCH]


def _source_methods(context: ODataContext, path: ODataPath) -> list[OperationType]:
    source: NavigationSourceSegment = path.first_segment
    targets = (path.target_path(context.container_target), source.navigation_source)
    read = resolve_restriction(context, ReadRestrictions, *targets)
    update = resolve_restriction(context, UpdateRestrictions, *targets)

    if path.kind == PathKind.ENTITY_SET:
        methods = [GET] if read is None or read.is_readable else []
        insert = resolve_restriction(context, InsertRestrictions, *targets)
        if insert is None or insert.is_insertable:
            methods.append(POST)
        return methods

    if path.kind == PathKind.SINGLETON:
        methods = [GET] if read is None or read.is_readable else []
        return methods + _update_methods(update)

    read = apply_read_by_key(read)
    methods = [GET] if read is None or read.is_readable else []
    methods.extend(_update_methods(update))
    delete = resolve_restriction(context, DeleteRestrictions, *targets)
    if delete is None or delete.is_deletable:
        methods.append(DELETE)
    return methods


def _navigation_methods(path: ODataPath) -> list[OperationType]:
    segment = [s for s in path if isinstance(s, NavigationPropertySegment)][-1]
    navigation_property = segment.navigation_property
    methods = [GET]
    if not navigation_property.contains_target:
        return methods
    if navigation_property.is_collection and path.last_segment.kind != SegmentKind.KEY:
        methods.append(POST)
    else:
        methods.extend([PATCH, DELETE])
    return methods


def _ref_methods(path: ODataPath) -> list[OperationType]:
    segment = [s for s in path if isinstance(s, NavigationPropertySegment)][-1]
    if not segment.navigation_property.is_collection:
        return [GET, PUT, DELETE]
    if isinstance(path[-2], KeySegment):
        return [DELETE]
    return [GET, POST, DELETE]


def applicable_methods(context: ODataContext, path: ODataPath) -> list[OperationType]:
    """Methods to generate for path, in ``OperationType`` order."""
    kind = path.kind
    if kind in (PathKind.ENTITY_SET, PathKind.ENTITY, PathKind.SINGLETON):
        methods = _source_methods(context, path)
    elif kind in (PathKind.OPERATION, PathKind.OPERATION_IMPORT):
        last = path.last_segment
        if isinstance(last, OperationImportSegment):
            is_action = last.operation_import.is_action_import
        else:
            is_action = isinstance(last, OperationSegment) and last.operation.is_action
        methods = [POST] if is_action else [GET]
    elif kind == PathKind.NAVIGATION_PROPERTY:
        methods = _navigation_methods(path)
    elif kind == PathKind.REF:
        methods = _ref_methods(path)
    elif kind == PathKind.MEDIA_ENTITY:
        methods = [GET, PUT, DELETE]
    elif kind == PathKind.COMPLEX_PROPERTY:
        methods = [GET, PATCH]
        if path.last_segment.property.is_collection:
            methods.append(POST)
    elif kind in (PathKind.TYPE_CAST, PathKind.DOLLAR_COUNT, PathKind.METADATA):
        methods = [GET]
    else:
        methods = []
    return [method for method in OperationType if method in methods]
