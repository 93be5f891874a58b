"""The context shared by every handler during one document generation."""

from odata_openapi.document import DocumentRegistry
from odata_openapi.edm.annotations import AnnotationStore
from odata_openapi.edm.model import EdmModel
from odata_openapi.errors import check_argument_not_none
from odata_openapi.settings import ConvertSettings


class ODataContext:
    """Model, settings, annotations and the document registry.

    Handlers only read from the context, except for tag and component
    registration through ``registry``.
    """

    def __init__(
        self,
        model: EdmModel,
        settings: ConvertSettings | None = None,
        annotations: AnnotationStore | None = None,
        registry: DocumentRegistry | None = None,
    ):
        self.model = check_argument_not_none(model, "model")
        self.settings = settings or ConvertSettings()
        self.annotations = annotations or AnnotationStore()
        self.registry = registry or DocumentRegistry()

    @property
    def container_target(self) -> str:
        return self.model.container_target
