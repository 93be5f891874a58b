from pathlib import Path

from odata_openapi.context import ODataContext
from odata_openapi.edm.annotations import AnnotationStore
from odata_openapi.edm.loader import load_fixture
from odata_openapi.edm.path_builder import build_path
from odata_openapi.operation.restrictions import (
    apply_read_by_key,
    find_navigation_restriction,
    merge_properties_if_null,
    resolve_navigation_restriction,
    resolve_restriction,
)
from odata_openapi.vocabulary.capabilities import (
    InsertRestrictions,
    PermissionType,
    ReadByKeyRestrictions,
    ReadRestrictions,
    ScopeType,
)
from odata_openapi.vocabulary.core import RevisionRecord

FIXTURES = Path(__file__).parent / "fixtures"


def _context():
    fixture = load_fixture(FIXTURES / "customers.yaml")
    return ODataContext(fixture.model, annotations=fixture.annotations)


def _permission(scheme: str, *scopes: str) -> PermissionType:
    return PermissionType(scheme_name=scheme, scopes=[ScopeType(scope=s) for s in scopes])


class TestMergePropertiesIfNull:
    def test_specific_fields_win(self):
        specific = ReadRestrictions(description="specific")
        broader = ReadRestrictions(description="broader", readable=False)
        merged = merge_properties_if_null(specific, broader)
        assert merged.description == "specific"
        assert merged.readable is False

    def test_inputs_are_not_modified(self):
        specific = ReadRestrictions(description="specific")
        broader = ReadRestrictions(readable=False)
        merge_properties_if_null(specific, broader)
        assert specific.readable is None
        assert broader.description is None

    def test_missing_specific_returns_broader(self):
        broader = ReadRestrictions(readable=True)
        assert merge_properties_if_null(None, broader) is broader

    def test_missing_broader_returns_specific(self):
        specific = ReadRestrictions(readable=True)
        assert merge_properties_if_null(specific, None) is specific

    def test_both_missing(self):
        assert merge_properties_if_null(None, None) is None

    def test_explicit_false_is_kept(self):
        merged = merge_properties_if_null(InsertRestrictions(insertable=False), InsertRestrictions(insertable=True))
        assert merged.is_insertable is False


class TestApplyReadByKey:
    def test_nested_record_overrides(self):
        read = ReadRestrictions(
            description="list",
            permissions=[_permission("Delegated", "Read.All")],
            read_by_key_restrictions=ReadByKeyRestrictions(
                description="by key", permissions=[_permission("Delegated", "Read.One")]
            ),
        )
        result = apply_read_by_key(read)
        assert result.description == "by key"
        assert result.permissions[0].scopes[0].scope == "Read.One"

    def test_parent_fills_unset_fields(self):
        read = ReadRestrictions(
            long_description="from parent",
            read_by_key_restrictions=ReadByKeyRestrictions(description="by key"),
        )
        result = apply_read_by_key(read)
        assert result.long_description == "from parent"

    def test_without_nested_record(self):
        read = ReadRestrictions(description="list")
        assert apply_read_by_key(read) is read
        assert apply_read_by_key(None) is None


class TestResolveRestriction:
    def test_target_path_record(self):
        context = _context()
        read = resolve_restriction(context, ReadRestrictions, "NS.Default/Customers")
        assert read.description == "List customers"
        assert [p.scheme_name for p in read.permissions] == ["Delegated", "Application"]

    def test_specific_target_then_broader(self):
        annotations = AnnotationStore({
            "NS.Default/Customers/Orders": {ReadRestrictions.term: {"Description": "orders"}},
            "NS.Customer/Orders": {ReadRestrictions.term: {"Description": "ignored", "Readable": False}},
        })
        context = ODataContext(_context().model, annotations=annotations)
        read = resolve_restriction(context, ReadRestrictions, "NS.Default/Customers/Orders", "NS.Customer/Orders")
        assert read.description == "orders"
        assert read.is_readable is False

    def test_missing_everywhere(self):
        assert resolve_restriction(_context(), InsertRestrictions, "NS.Default/Customers", None) is None


class TestNavigationRestriction:
    def test_entry_found_by_navigation_path(self):
        context = _context()
        path = build_path(context.model, ["Customers", "{key}", "Orders"])
        nav = path.last_segment.navigation_property
        entry = find_navigation_restriction(context, path, nav)
        assert entry.navigation_property == "Orders"
        assert entry.top_supported is False

    def test_insert_restriction_from_entry(self):
        context = _context()
        path = build_path(context.model, ["Customers", "{key}", "Orders"])
        nav = path.last_segment.navigation_property
        insert = resolve_navigation_restriction(context, path, nav, InsertRestrictions)
        assert insert.description == "Place an order"
        assert insert.permissions[0].scopes[0].scope == "Orders.Create"

    def test_target_path_record_wins(self):
        context = _context()
        path = build_path(context.model, ["Customers", "{key}", "Orders"])
        nav = path.last_segment.navigation_property
        read = resolve_navigation_restriction(context, path, nav, ReadRestrictions)
        assert read.description == "List orders of a customer"

    def test_unrestricted_navigation(self):
        context = _context()
        path = build_path(context.model, ["Customers", "{key}", "Friends"])
        nav = path.last_segment.navigation_property
        assert find_navigation_restriction(context, path, nav) is None


class TestAnnotationStore:
    def test_deprecation_informations(self):
        context = _context()
        customer = context.model.find_type("NS.Customer")
        orders = context.model.find_navigation_property(customer, "Orders")
        revisions = context.annotations.get_deprecation_informations(orders)
        assert len(revisions) == 1
        assert revisions[0].to_extension() == {
            "removalDate": "2025-01-15",
            "date": "2024-01-15",
            "version": "2024-01/orders",
            "description": "Orders move to the sales service.",
        }

    def test_extension_omits_unset_fields(self):
        revision = RevisionRecord.model_validate({"Kind": "Deprecated", "Date": "2024-01-15"})
        assert revision.to_extension() == {"date": "2024-01-15"}

    def test_extension_without_values_is_empty(self):
        revision = RevisionRecord.model_validate({"Kind": "Deprecated"})
        assert revision.to_extension() == {}

    def test_added_revisions_are_not_deprecations(self):
        revision = RevisionRecord.model_validate({"Kind": "Added", "Version": "v1"})
        assert revision.is_deprecated is False

    def test_collection_annotation(self):
        context = _context()
        customer = context.model.find_type("NS.Customer")
        photo = context.model.find_property(customer, "Photo")
        media_types = context.annotations.get_collection(photo, "Org.OData.Core.V1.AcceptableMediaTypes")
        assert media_types == ["image/png", "image/jpeg"]

    def test_link_record_by_rel(self):
        context = _context()
        link = context.annotations.get_link_record(
            "NS.Default/Customers", "https://graph.microsoft.com/rels/docs/list"
        )
        assert link.href == "https://docs.example.com/customers/list"
        assert context.annotations.get_link_record("NS.Default/Customers", "other") is None
