"""GET ``/$metadata``."""

from odata_openapi.operation.descriptor import MediaType, OperationType, Response
from odata_openapi.operation.handler import OperationHandler
from odata_openapi.operation.responses import set_success_response


class MetadataGetOperationHandler(OperationHandler):
    operation_type = OperationType.GET

    def set_basic_info(self, state, operation):
        operation.summary = "Get OData metadata (CSDL) document"
        if state.settings.enable_operation_id:
            prefix = state.settings.path_prefix
            operation.operation_id = f"{prefix}.Get.Metadata" if prefix else "Get.Metadata"
        super().set_basic_info(state, operation)

    def set_responses(self, state, operation):
        response = Response(
            description="Retrieved metadata document",
            content={"application/xml": MediaType(schema_={"type": "string"})},
        )
        set_success_response(state.context, operation, "200", response)
        super().set_responses(state, operation)
