from pathlib import Path

import pytest

from odata_openapi.context import ODataContext
from odata_openapi.edm.loader import load_fixture
from odata_openapi.edm.path_builder import build_path
from odata_openapi.errors import ArgumentNullError
from odata_openapi.operation.entity_set import (
    EntityDeleteOperationHandler,
    EntityGetOperationHandler,
    EntityPatchOperationHandler,
    EntityPutOperationHandler,
    EntitySetGetOperationHandler,
    EntitySetPostOperationHandler,
)
from odata_openapi.operation.singleton import (
    SingletonGetOperationHandler,
    SingletonPutOperationHandler,
)
from odata_openapi.settings import ConvertSettings

FIXTURES = Path(__file__).parent / "fixtures"

CUSTOMER_REF = {"$ref": "#/components/schemas/NS.Customer"}
ERROR_RESPONSE = {"$ref": "#/components/responses/error"}


def _context(**settings) -> ODataContext:
    fixture = load_fixture(FIXTURES / "customers.yaml")
    return ODataContext(fixture.model, ConvertSettings(**settings), fixture.annotations)


def _operation(handler, raw: str, context: ODataContext | None = None, **settings) -> dict:
    context = context or _context(**settings)
    path = build_path(context.model, raw.split("/"))
    return handler.create_operation(context, path).to_openapi()


def _parameter_names(operation: dict) -> list[str]:
    return [p.get("name") or p["$ref"].rsplit("/", 1)[-1] for p in operation["parameters"]]


class TestEntitySetGet:
    def test_operation_id(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        assert operation["operationId"] == "Customers.Customer.ListCustomer"

    def test_operation_id_disabled(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers", enable_operation_id=False)
        assert "operationId" not in operation

    def test_summary_and_description_from_read_restrictions(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        assert operation["summary"] == "List customers"
        assert operation["description"] == "Returns every customer of the tenant."

    def test_security_per_permission(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        assert operation["security"] == [
            {"Delegated": ["Customer.Read", "Customer.ReadWrite"]},
            {"Application": ["Customer.Read.All"]},
        ]

    def test_parameter_order(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        assert _parameter_names(operation) == [
            "ConsistencyLevel", "top", "skip", "filter", "count", "$orderby", "$select", "$expand",
        ]

    def test_custom_header(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        header = operation["parameters"][0]
        assert header["in"] == "header"
        assert header["required"] is False
        assert header["example"] == "https://docs.example.com/consistency"
        assert header["examples"]["example-1"]["value"] == "eventual"

    def test_select_and_expand_values(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        by_name = {p.get("name"): p for p in operation["parameters"]}
        assert "Photo" in by_name["$select"]["schema"]["items"]["enum"]
        assert by_name["$expand"]["schema"]["items"]["enum"] == ["*", "Orders", "Friends"]
        assert "Name desc" in by_name["$orderby"]["schema"]["items"]["enum"]

    def test_collection_response_and_default_last(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        assert list(operation["responses"]) == ["200", "default"]
        assert operation["responses"]["200"] == {"$ref": "#/components/responses/NS.CustomerCollectionResponse"}
        assert operation["responses"]["default"] == ERROR_RESPONSE

    def test_registers_collection_response_component(self):
        context = _context()
        _operation(EntitySetGetOperationHandler(), "Customers", context)
        component = context.registry.get_component("responses", "NS.CustomerCollectionResponse")
        schema = component["content"]["application/json"]["schema"]
        assert schema["properties"]["value"]["items"] == CUSTOMER_REF

    def test_tag_registered_as_page(self):
        context = _context()
        operation = _operation(EntitySetGetOperationHandler(), "Customers", context)
        assert operation["tags"] == ["Customers.Customer"]
        assert context.registry.tags == [{"name": "Customers.Customer", "x-ms-docs-toc-type": "page"}]

    def test_external_docs_from_links(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        assert operation["externalDocs"] == {
            "description": "Find more info here",
            "url": "https://docs.example.com/customers/list",
        }

    def test_external_docs_disabled(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers", show_external_docs=False)
        assert "externalDocs" not in operation

    def test_success_range(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers", use_success_status_code_range=True)
        assert list(operation["responses"]) == ["2XX", "default"]

    def test_pagination(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers", enable_pagination=True)
        assert operation["x-ms-pageable"] == {"nextLinkName": "@odata.nextLink", "operationName": "listMore"}

    def test_no_pagination_by_default(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        assert "x-ms-pageable" not in operation
        assert operation["x-ms-docs-operation-type"] == "operation"

    def test_search_disabled_by_annotation(self):
        operation = _operation(EntitySetGetOperationHandler(), "Customers")
        assert "search" not in _parameter_names(operation)

    def test_missing_arguments(self):
        context = _context()
        path = build_path(context.model, ["Customers"])
        with pytest.raises(ArgumentNullError):
            EntitySetGetOperationHandler().create_operation(None, path)
        with pytest.raises(ValueError):
            EntitySetGetOperationHandler().create_operation(context, None)


class TestEntitySetPost:
    def test_create(self):
        operation = _operation(EntitySetPostOperationHandler(), "Customers")
        assert operation["operationId"] == "Customers.Customer.CreateCustomer"
        assert operation["summary"] == "Add new entity to Customers"
        assert operation["requestBody"]["content"]["application/json"]["schema"] == CUSTOMER_REF
        assert list(operation["responses"]) == ["201", "default"]
        assert "security" not in operation

    def test_derived_types_in_request_body(self):
        operation = _operation(
            EntitySetPostOperationHandler(), "Customers", enable_derived_types_references_for_request_body=True
        )
        schema = operation["requestBody"]["content"]["application/json"]["schema"]
        assert schema == {"oneOf": [CUSTOMER_REF, {"$ref": "#/components/schemas/NS.VipCustomer"}]}


class TestEntityGet:
    def test_read_by_key_restrictions(self):
        operation = _operation(EntityGetOperationHandler(), "Customers/{key}")
        assert operation["operationId"] == "Customers.Customer.GetCustomer"
        assert operation["summary"] == "Get a customer"
        assert operation["security"] == [{"Delegated": ["Customer.ReadBasic"]}]

    def test_parent_read_restrictions_fill_gaps(self):
        operation = _operation(EntityGetOperationHandler(), "Customers/{key}")
        assert operation["description"] == "Returns every customer of the tenant."
        assert _parameter_names(operation) == ["ID", "ConsistencyLevel", "$select", "$expand"]

    def test_key_parameter(self):
        operation = _operation(EntityGetOperationHandler(), "Customers/{key}")
        key = operation["parameters"][0]
        assert key == {
            "name": "ID",
            "in": "path",
            "description": "The unique identifier of Customer",
            "required": True,
            "schema": {"type": "integer", "format": "int32"},
        }

    def test_links_use_assembled_parameters(self):
        operation = _operation(EntityGetOperationHandler(), "Customers/{key}", show_links=True)
        links = operation["responses"]["200"]["links"]
        assert links == {
            "Orders": {"operationId": "Customers.Customer.ListOrders", "parameters": {"ID": "$request.path.ID"}},
            "Friends": {"operationId": "Customers.Customer.ListFriends", "parameters": {"ID": "$request.path.ID"}},
        }

    def test_no_links_by_default(self):
        operation = _operation(EntityGetOperationHandler(), "Customers/{key}")
        assert "links" not in operation["responses"]["200"]

    def test_derived_types_in_response(self):
        operation = _operation(
            EntityGetOperationHandler(), "Customers/{key}", enable_derived_types_references_for_responses=True
        )
        schema = operation["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["oneOf"][1] == {"$ref": "#/components/schemas/NS.VipCustomer"}


class TestEntityUpdate:
    def test_patch(self):
        operation = _operation(EntityPatchOperationHandler(), "Customers/{key}")
        assert operation["operationId"] == "Customers.Customer.UpdateCustomer"
        assert list(operation["responses"]) == ["204", "default"]

    def test_put(self):
        operation = _operation(EntityPutOperationHandler(), "Customers/{key}")
        assert operation["operationId"] == "Customers.Customer.SetCustomer"
        assert operation["requestBody"]["required"] is True

    def test_no_content_stays_exact_with_range(self):
        operation = _operation(EntityPatchOperationHandler(), "Customers/{key}", use_success_status_code_range=True)
        assert list(operation["responses"]) == ["204", "default"]


class TestEntityDelete:
    def test_delete_by_alternate_key(self):
        operation = _operation(EntityDeleteOperationHandler(), "Customers/{key:CustomerCode}")
        assert operation["operationId"] == "Customers.Customer.DeleteCustomerByCustomerCode"
        assert _parameter_names(operation) == ["CustomerCode", "If-Match"]
        assert operation["parameters"][0]["description"] == "Alternate key: CustomerCode of Customer"

    def test_delete_security(self):
        operation = _operation(EntityDeleteOperationHandler(), "Customers/{key}")
        assert operation["security"] == [{"Delegated": ["Customer.ReadWrite"]}]

    def test_no_content_stays_exact_with_range(self):
        operation = _operation(EntityDeleteOperationHandler(), "Customers/{key}", use_success_status_code_range=True)
        assert operation["responses"]["204"] == {"description": "Success"}


class TestSingleton:
    def test_get(self):
        operation = _operation(SingletonGetOperationHandler(), "Me")
        assert operation["operationId"] == "Me.Customer.GetCustomer"
        assert operation["summary"] == "Get Me"
        assert operation["tags"] == ["Me.Customer"]
        assert _parameter_names(operation) == ["$select", "$expand"]

    def test_put(self):
        operation = _operation(SingletonPutOperationHandler(), "Me")
        assert operation["operationId"] == "Me.Customer.SetCustomer"
        assert list(operation["responses"]) == ["204", "default"]
