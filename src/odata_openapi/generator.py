"""Turn a loaded fixture into an OpenAPI ``paths`` / ``tags`` / ``components`` document."""

import logging
from typing import Any

from odata_openapi.context import ODataContext
from odata_openapi.edm.loader import Fixture
from odata_openapi.edm.segments import PathKind
from odata_openapi.errors import InvalidDispatchError
from odata_openapi.operation.provider import CachedOperationHandlerProvider, OperationHandlerProvider
from odata_openapi.path_items import applicable_methods
from odata_openapi.settings import ConvertSettings

logger = logging.getLogger(__name__)


def generate_document(
    fixture: Fixture,
    settings: ConvertSettings | None = None,
    provider: OperationHandlerProvider | None = None,
) -> dict[str, Any]:
    """Create the operations of every fixture path.

    Paths of an unknown shape are skipped with a warning, as are handlers
    that reject the path they were dispatched for.
    """
    context = ODataContext(fixture.model, settings, fixture.annotations)
    provider = provider or CachedOperationHandlerProvider()

    paths: dict[str, Any] = {}
    for path in fixture.paths:
        if path.kind == PathKind.UNKNOWN:
            logger.warning("Skipping %s: unsupported path shape", path)
            continue

        item: dict[str, Any] = {}
        for method in applicable_methods(context, path):
            handler = provider.get_handler(path.kind, method)
            if handler is None:
                continue
            try:
                operation = handler.create_operation(context, path)
            except InvalidDispatchError as e:
                logger.warning("Skipping %s %s: %s", method.value, path, e)
                continue
            item[method.value] = operation.to_openapi()

        if item:
            paths[path.path_item_name(context.settings)] = item

    return context.registry.to_document(paths)
