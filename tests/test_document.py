import pytest

from odata_openapi.document import DocumentRegistry, reference
from odata_openapi.operation.descriptor import (
    OperationDescriptor,
    Parameter,
    Response,
)


class TestTags:
    def test_register_once(self):
        registry = DocumentRegistry()
        registry.register_tag("Customers.Customer", {"x-ms-docs-toc-type": "page"})
        registry.register_tag("Customers.Customer")
        assert registry.tags == [{"name": "Customers.Customer", "x-ms-docs-toc-type": "page"}]

    def test_later_registration_adds_missing_marker(self):
        registry = DocumentRegistry()
        registry.register_tag("Customers.Customer")
        registry.register_tag("Customers.Customer", {"x-ms-docs-toc-type": "page"})
        assert registry.tags[0]["x-ms-docs-toc-type"] == "page"

    def test_existing_marker_is_kept(self):
        registry = DocumentRegistry()
        registry.register_tag("Customers", {"x-ms-docs-toc-type": "container"})
        registry.add_extension_to_tag("Customers", "x-ms-docs-toc-type", "page")
        assert registry.tags[0]["x-ms-docs-toc-type"] == "container"

    def test_add_extension_registers_tag(self):
        registry = DocumentRegistry()
        registry.add_extension_to_tag("Orders", "x-ms-docs-toc-type", "page")
        assert registry.has_tag("Orders")


class TestComponents:
    def test_first_registration_wins(self):
        registry = DocumentRegistry()
        ref = registry.register_component("responses", "error", {"description": "first"})
        registry.register_component("responses", "error", {"description": "second"})
        assert ref == "#/components/responses/error"
        assert registry.get_component("responses", "error") == {"description": "first"}

    def test_registered_value_is_copied(self):
        registry = DocumentRegistry()
        value = {"schema": {"type": "string"}}
        registry.register_component("parameters", "search", value)
        value["schema"]["type"] = "integer"
        assert registry.get_component("parameters", "search")["schema"]["type"] == "string"

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            DocumentRegistry().register_component("headers", "x", {})

    def test_document_omits_empty_sections(self):
        assert DocumentRegistry().to_document({}) == {"paths": {}}

    def test_reference(self):
        assert reference("schemas", "NS.Customer") == "#/components/schemas/NS.Customer"


class TestOperationDescriptor:
    def test_empty_collections_are_dropped(self):
        data = OperationDescriptor(summary="s").to_openapi()
        assert data == {"summary": "s", "responses": {}}

    def test_extensions_are_inlined(self):
        operation = OperationDescriptor()
        operation.extensions["x-ms-docs-operation-type"] = "operation"
        assert operation.to_openapi()["x-ms-docs-operation-type"] == "operation"

    def test_aliases(self):
        operation = OperationDescriptor(operation_id="Customers.ListCustomer")
        operation.parameters.append(Parameter(name="ID", location="path", schema_={"type": "string"}))
        operation.responses["default"] = Response(ref="#/components/responses/error")
        data = operation.to_openapi()
        assert data["operationId"] == "Customers.ListCustomer"
        assert data["parameters"] == [{"name": "ID", "in": "path", "schema": {"type": "string"}}]
        assert data["responses"]["default"] == {"$ref": "#/components/responses/error"}

    def test_add_tag_is_idempotent(self):
        operation = OperationDescriptor()
        operation.add_tag("Customers.Customer")
        operation.add_tag("Customers.Customer")
        assert operation.tags == ["Customers.Customer"]

    def test_find_parameter(self):
        operation = OperationDescriptor()
        operation.parameters.append(Parameter(name="If-Match", location="header"))
        assert operation.find_parameter("If-Match").location == "header"
        assert operation.find_parameter("missing") is None
