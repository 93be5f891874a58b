"""Registry mapping (path kind, HTTP method) to an operation handler."""

import logging

from odata_openapi.edm.segments import PathKind
from odata_openapi.operation.complex_property import (
    ComplexPropertyGetOperationHandler,
    ComplexPropertyPatchOperationHandler,
    ComplexPropertyPostOperationHandler,
    ComplexPropertyPutOperationHandler,
)
from odata_openapi.operation.descriptor import OperationType
from odata_openapi.operation.dollar_count import DollarCountGetOperationHandler
from odata_openapi.operation.edm_operation import EdmActionOperationHandler, EdmFunctionOperationHandler
from odata_openapi.operation.entity_set import (
    EntityDeleteOperationHandler,
    EntityGetOperationHandler,
    EntityPatchOperationHandler,
    EntityPutOperationHandler,
    EntitySetGetOperationHandler,
    EntitySetPostOperationHandler,
)
from odata_openapi.operation.handler import OperationHandler
from odata_openapi.operation.media_entity import (
    MediaEntityDeleteOperationHandler,
    MediaEntityGetOperationHandler,
    MediaEntityPutOperationHandler,
)
from odata_openapi.operation.metadata import MetadataGetOperationHandler
from odata_openapi.operation.navigation_property import (
    NavigationPropertyDeleteOperationHandler,
    NavigationPropertyGetOperationHandler,
    NavigationPropertyPatchOperationHandler,
    NavigationPropertyPostOperationHandler,
    NavigationPropertyPutOperationHandler,
)
from odata_openapi.operation.operation_import import ActionImportOperationHandler, FunctionImportOperationHandler
from odata_openapi.operation.ref import (
    RefDeleteOperationHandler,
    RefGetOperationHandler,
    RefPostOperationHandler,
    RefPutOperationHandler,
)
from odata_openapi.operation.singleton import (
    SingletonGetOperationHandler,
    SingletonPatchOperationHandler,
    SingletonPutOperationHandler,
)
from odata_openapi.operation.type_cast import TypeCastGetOperationHandler

logger = logging.getLogger(__name__)

GET = OperationType.GET
POST = OperationType.POST
PUT = OperationType.PUT
PATCH = OperationType.PATCH
DELETE = OperationType.DELETE

HANDLERS: dict[PathKind, dict[OperationType, type[OperationHandler]]] = {
    PathKind.ENTITY_SET: {
        GET: EntitySetGetOperationHandler,
        POST: EntitySetPostOperationHandler,
    },
    PathKind.ENTITY: {
        GET: EntityGetOperationHandler,
        PATCH: EntityPatchOperationHandler,
        PUT: EntityPutOperationHandler,
        DELETE: EntityDeleteOperationHandler,
    },
    PathKind.SINGLETON: {
        GET: SingletonGetOperationHandler,
        PATCH: SingletonPatchOperationHandler,
        PUT: SingletonPutOperationHandler,
    },
    PathKind.OPERATION: {
        GET: EdmFunctionOperationHandler,
        POST: EdmActionOperationHandler,
    },
    PathKind.OPERATION_IMPORT: {
        GET: FunctionImportOperationHandler,
        POST: ActionImportOperationHandler,
    },
    PathKind.NAVIGATION_PROPERTY: {
        GET: NavigationPropertyGetOperationHandler,
        POST: NavigationPropertyPostOperationHandler,
        PATCH: NavigationPropertyPatchOperationHandler,
        PUT: NavigationPropertyPutOperationHandler,
        DELETE: NavigationPropertyDeleteOperationHandler,
    },
    PathKind.REF: {
        GET: RefGetOperationHandler,
        POST: RefPostOperationHandler,
        PUT: RefPutOperationHandler,
        DELETE: RefDeleteOperationHandler,
    },
    PathKind.MEDIA_ENTITY: {
        GET: MediaEntityGetOperationHandler,
        PUT: MediaEntityPutOperationHandler,
        DELETE: MediaEntityDeleteOperationHandler,
    },
    PathKind.METADATA: {GET: MetadataGetOperationHandler},
    PathKind.DOLLAR_COUNT: {GET: DollarCountGetOperationHandler},
    PathKind.TYPE_CAST: {GET: TypeCastGetOperationHandler},
    PathKind.COMPLEX_PROPERTY: {
        GET: ComplexPropertyGetOperationHandler,
        PATCH: ComplexPropertyPatchOperationHandler,
        PUT: ComplexPropertyPutOperationHandler,
        POST: ComplexPropertyPostOperationHandler,
    },
}


def to_operation_type(method: OperationType | str) -> OperationType | None:
    """Normalise a method name; None when it is not a known HTTP method."""
    if isinstance(method, OperationType):
        return method
    try:
        return OperationType(str(method).lower())
    except ValueError:
        return None


class OperationHandlerProvider:
    """Creates a fresh handler per lookup."""

    def get_handler(self, path_kind: PathKind, method: OperationType | str) -> OperationHandler | None:
        """Return the handler for the pair, or None when the pair has no operation."""
        method = to_operation_type(method)
        if method is None:
            logger.debug("No handler for unknown method on %s", path_kind.value)
            return None
        handler_class = HANDLERS.get(path_kind, {}).get(method)
        if handler_class is None:
            logger.debug("No handler for %s %s", method.value, path_kind.value)
            return None
        logger.debug("Dispatching %s %s to %s", method.value, path_kind.value, handler_class.__name__)
        return handler_class()


class CachedOperationHandlerProvider(OperationHandlerProvider):
    """Memoizes one handler instance per (path kind, method).

    Handlers hold no per-call state, so a cached instance can serve every
    path of its kind.
    """

    def __init__(self):
        self._cache: dict[tuple[PathKind, OperationType], OperationHandler | None] = {}

    def get_handler(self, path_kind: PathKind, method: OperationType | str) -> OperationHandler | None:
        operation_type = to_operation_type(method)
        if operation_type is None:
            return None
        key = (path_kind, operation_type)
        if key in self._cache:
            logger.debug("Handler cache hit for %s %s", key[1].value, path_kind.value)
            return self._cache[key]
        handler = super().get_handler(path_kind, operation_type)
        self._cache[key] = handler
        return handler
