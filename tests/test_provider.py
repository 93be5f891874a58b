from odata_openapi.edm.segments import PathKind
from odata_openapi.operation.descriptor import OperationType
from odata_openapi.operation.entity_set import EntitySetGetOperationHandler
from odata_openapi.operation.metadata import MetadataGetOperationHandler
from odata_openapi.operation.provider import (
    HANDLERS,
    CachedOperationHandlerProvider,
    OperationHandlerProvider,
)


class TestOperationHandlerProvider:
    def test_known_pair(self):
        handler = OperationHandlerProvider().get_handler(PathKind.ENTITY_SET, OperationType.GET)
        assert isinstance(handler, EntitySetGetOperationHandler)

    def test_method_as_string(self):
        handler = OperationHandlerProvider().get_handler(PathKind.METADATA, "get")
        assert isinstance(handler, MetadataGetOperationHandler)

    def test_upper_case_method(self):
        handler = OperationHandlerProvider().get_handler(PathKind.ENTITY_SET, "GET")
        assert isinstance(handler, EntitySetGetOperationHandler)

    def test_unknown_method_returns_none(self):
        provider = OperationHandlerProvider()
        assert provider.get_handler(PathKind.ENTITY_SET, "head") is None
        assert provider.get_handler(PathKind.ENTITY, "options") is None

    def test_unknown_pair_returns_none(self):
        provider = OperationHandlerProvider()
        assert provider.get_handler(PathKind.SINGLETON, OperationType.DELETE) is None
        assert provider.get_handler(PathKind.METADATA, OperationType.POST) is None
        assert provider.get_handler(PathKind.UNKNOWN, OperationType.GET) is None

    def test_fresh_instance_per_lookup(self):
        provider = OperationHandlerProvider()
        first = provider.get_handler(PathKind.ENTITY, OperationType.PATCH)
        second = provider.get_handler(PathKind.ENTITY, OperationType.PATCH)
        assert first is not second

    def test_handler_method_matches_registration(self):
        for methods in HANDLERS.values():
            for method, handler_class in methods.items():
                assert handler_class.operation_type == method


class TestCachedOperationHandlerProvider:
    def test_same_instance_per_pair(self):
        provider = CachedOperationHandlerProvider()
        first = provider.get_handler(PathKind.ENTITY, OperationType.PATCH)
        second = provider.get_handler(PathKind.ENTITY, OperationType.PATCH)
        assert first is second

    def test_distinct_pairs(self):
        provider = CachedOperationHandlerProvider()
        get = provider.get_handler(PathKind.ENTITY, OperationType.GET)
        delete = provider.get_handler(PathKind.ENTITY, OperationType.DELETE)
        assert get is not delete

    def test_unknown_method_returns_none(self):
        provider = CachedOperationHandlerProvider()
        assert provider.get_handler(PathKind.ENTITY_SET, "head") is None
        assert provider.get_handler(PathKind.ENTITY_SET, "head") is None

    def test_method_string_shares_cache_entry(self):
        provider = CachedOperationHandlerProvider()
        first = provider.get_handler(PathKind.ENTITY, OperationType.GET)
        assert provider.get_handler(PathKind.ENTITY, "GET") is first

    def test_caches_none(self):
        provider = CachedOperationHandlerProvider()
        assert provider.get_handler(PathKind.SINGLETON, OperationType.DELETE) is None
        assert provider.get_handler(PathKind.SINGLETON, OperationType.DELETE) is None
