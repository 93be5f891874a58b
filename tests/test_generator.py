import logging
from pathlib import Path

from odata_openapi.context import ODataContext
from odata_openapi.edm.annotations import AnnotationStore
from odata_openapi.edm.loader import load_fixture
from odata_openapi.edm.path_builder import build_path
from odata_openapi.edm.segments import KeySegment, ODataPath
from odata_openapi.generator import generate_document
from odata_openapi.operation.descriptor import OperationType
from odata_openapi.operation.provider import OperationHandlerProvider
from odata_openapi.operation.type_cast import TypeCastGetOperationHandler
from odata_openapi.path_items import applicable_methods
from odata_openapi.settings import ConvertSettings

FIXTURES = Path(__file__).parent / "fixtures"

EXPECTED_METHODS = {
    "/Customers": ["get", "post"],
    "/Customers({ID})": ["get", "patch", "delete"],
    "/Customers(CustomerCode={CustomerCode})": ["get", "patch", "delete"],
    "/Customers({ID})/Orders": ["get", "post"],
    "/Customers({ID})/Orders({OrderID})": ["get", "patch", "delete"],
    "/Customers({ID})/Friends/$ref": ["get", "post", "delete"],
    "/Customers({ID})/Friends({ID1})": ["get"],
    "/Customers({ID})/Orders/$count": ["get"],
    "/Customers({ID})/Address": ["get", "patch"],
    "/Customers({ID})/Addresses": ["get", "post", "patch"],
    "/Customers({ID})/Photo": ["get", "put", "delete"],
    "/Customers({ID})/Orders({OrderID})/$value": ["get", "put", "delete"],
    "/Customers/NS.VipCustomer": ["get"],
    "/Customers/NS.MyFunction(Name={Name})": ["get"],
    "/Customers/NS.MyFunction(Name={Name},Age={Age})": ["get"],
    "/Customers({ID})/NS.Promote": ["post"],
    "/Customers/$count": ["get"],
    "/Me": ["get", "put"],
    "/GetTopCustomers(count={count})": ["get"],
    "/ResetData": ["post"],
    "/$metadata": ["get"],
}


def _fixture():
    return load_fixture(FIXTURES / "customers.yaml")


class TypeCastOnlyProvider(OperationHandlerProvider):
    def get_handler(self, path_kind, method):
        return TypeCastGetOperationHandler()


class TestGenerateDocument:
    def test_paths_and_methods(self):
        document = generate_document(_fixture())
        methods = {name: list(item) for name, item in document["paths"].items()}
        assert methods == EXPECTED_METHODS

    def test_shared_components(self):
        document = generate_document(_fixture())
        components = document["components"]
        assert "error" in components["responses"]
        assert "ODataErrors.ODataError" in components["schemas"]
        assert "NS.CustomerCollectionResponse" in components["responses"]
        assert {"top", "skip", "filter", "count"} <= set(components["parameters"])

    def test_tags(self):
        document = generate_document(_fixture())
        tags = {tag["name"]: tag.get("x-ms-docs-toc-type") for tag in document["tags"]}
        assert tags["Customers.Customer"] == "page"
        assert tags["Customers.Customer.Actions"] == "container"
        assert tags["Customers.Customer.Functions"] == "container"
        assert tags["ResetData"] == "container"

    def test_operation_ids_are_unique(self):
        document = generate_document(_fixture())
        ids = [op["operationId"] for item in document["paths"].values() for op in item.values()]
        assert len(ids) == len(set(ids))

    def test_settings_are_applied(self):
        document = generate_document(_fixture(), ConvertSettings(key_as_segment=True))
        assert "/Customers/{ID}" in document["paths"]

    def test_unknown_path_is_skipped(self, caplog):
        fixture = _fixture()
        customer = fixture.model.find_type("NS.Customer")
        fixture.paths.append(ODataPath([KeySegment(customer, ["ID"])]))
        with caplog.at_level(logging.WARNING, logger="odata_openapi.generator"):
            document = generate_document(fixture)
        assert len(document["paths"]) == len(EXPECTED_METHODS)
        assert "unsupported path shape" in caplog.text

    def test_rejected_dispatch_is_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="odata_openapi.generator"):
            document = generate_document(_fixture(), provider=TypeCastOnlyProvider())
        assert list(document["paths"]) == ["/Customers/NS.VipCustomer"]
        assert "Skipping get /Customers" in caplog.text


class TestApplicableMethods:
    def _methods(self, raw: str, annotations=None):
        fixture = _fixture()
        context = ODataContext(fixture.model, annotations=annotations or fixture.annotations)
        return applicable_methods(context, build_path(fixture.model, raw.split("/")))

    def test_bound_function(self):
        assert self._methods("Customers/NS.MyFunction(Name)") == [OperationType.GET]

    def test_bound_action(self):
        assert self._methods("Customers/{key}/NS.Promote") == [OperationType.POST]

    def test_keyed_collection_ref(self):
        assert self._methods("Customers/{key}/Friends/{key}/$ref") == [OperationType.DELETE]

    def test_non_containment_navigation(self):
        assert self._methods("Customers/{key}/Friends") == [OperationType.GET]

    def test_update_method_put(self):
        assert self._methods("Me") == [OperationType.GET, OperationType.PUT]

    def test_not_insertable(self):
        annotations = AnnotationStore({
            "NS.Default/Customers": {"Org.OData.Capabilities.V1.InsertRestrictions": {"Insertable": False}},
        })
        assert self._methods("Customers", annotations) == [OperationType.GET]
