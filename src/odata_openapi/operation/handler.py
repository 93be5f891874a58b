"""Base operation handler: the fixed pipeline every handler runs.

Handlers are stateless and may be cached and shared. Everything computed
for one call lives on the ``OperationState`` returned by ``initialize`` and
is passed to every step.
"""

import logging

from odata_openapi.context import ODataContext
from odata_openapi.document import TOC_TYPE
from odata_openapi.edm.segments import ODataPath, SegmentKind
from odata_openapi.errors import check_argument_not_none
from odata_openapi.operation.descriptor import ExternalDocs, OperationDescriptor, OperationType
from odata_openapi.operation.parameters import custom_parameters, path_parameters
from odata_openapi.operation.responses import (
    DEPRECATION,
    OPERATION_TYPE,
    append_error_responses,
    security_requirements,
)
from odata_openapi.settings import LinkRelKey

logger = logging.getLogger(__name__)

EXTERNAL_DOCS_DESCRIPTION = "Find more info here"


class OperationState:
    """Per-call data shared by the pipeline steps of one handler run."""

    def __init__(self, context: ODataContext, path: ODataPath):
        self.context = context
        self.path = path
        self.target_path = path.target_path(context.container_target)
        # annotation holder of the addressed element (entity set, property, operation, ...)
        self.annotatable = None
        # restriction record governing this operation: permissions and custom parameters
        self.restriction = None
        self.link_rel_key: LinkRelKey | None = None

    @property
    def settings(self):
        return self.context.settings

    @property
    def custom_link_rel(self) -> str | None:
        if self.link_rel_key is None:
            return None
        return self.settings.custom_http_method_link_rel_mapping.get(self.link_rel_key)


class OperationHandler:
    operation_type: OperationType

    def create_operation(self, context: ODataContext, path: ODataPath) -> OperationDescriptor:
        check_argument_not_none(context, "context")
        check_argument_not_none(path, "path")

        state = self.initialize(context, path)
        if state.link_rel_key is None:
            state.link_rel_key = self.link_rel_key(state)

        operation = OperationDescriptor()
        self.set_basic_info(state, operation)
        self.set_deprecation(state, operation)
        self.set_external_docs(state, operation)
        self.set_security(state, operation)
        self.set_parameters(state, operation)
        self.set_responses(state, operation)
        self.set_request_body(state, operation)
        self.set_tags(state, operation)
        self.set_extensions(state, operation)
        return operation

    def initialize(self, context: ODataContext, path: ODataPath) -> OperationState:
        return OperationState(context, path)

    def link_rel_key(self, state: OperationState) -> LinkRelKey | None:
        """Key into the custom link relation mapping for this operation."""
        if self.operation_type == OperationType.GET:
            if state.path.last_segment.kind == SegmentKind.KEY:
                return LinkRelKey.READ_BY_KEY
            return LinkRelKey.LIST
        if self.operation_type == OperationType.POST:
            return LinkRelKey.CREATE
        if self.operation_type in (OperationType.PATCH, OperationType.PUT):
            return LinkRelKey.UPDATE
        if self.operation_type == OperationType.DELETE:
            return LinkRelKey.DELETE
        return None

    # -- pipeline steps --------------------------------------------------

    def set_basic_info(self, state: OperationState, operation: OperationDescriptor) -> None:
        if operation.description is None and state.restriction is not None:
            operation.description = getattr(state.restriction, "long_description", None)
        if operation.description is None and state.annotatable is not None:
            operation.description = state.context.annotations.get_long_description(state.annotatable)

    def set_deprecation(self, state: OperationState, operation: OperationDescriptor) -> None:
        if not state.settings.enable_deprecation_information:
            return
        annotations = state.context.annotations
        revisions = [
            revision
            for segment in state.path
            for element in segment.annotatables()
            for revision in annotations.get_deprecation_informations(element)
        ]
        if not revisions:
            return
        latest = max(revisions, key=lambda r: (r.date is not None, r.date, r.removal_date is not None, r.removal_date))
        operation.deprecated = True
        extension = latest.to_extension()
        if extension:
            operation.extensions[DEPRECATION] = extension

    def set_external_docs(self, state: OperationState, operation: OperationDescriptor) -> None:
        rel = state.custom_link_rel
        if not state.settings.show_external_docs or not rel:
            return
        annotations = state.context.annotations
        link = annotations.get_link_record(state.target_path, rel)
        if link is None and state.annotatable is not None:
            link = annotations.get_link_record(state.annotatable, rel)
        if link is not None:
            operation.external_docs = ExternalDocs(description=EXTERNAL_DOCS_DESCRIPTION, url=link.href)

    def set_security(self, state: OperationState, operation: OperationDescriptor) -> None:
        if state.restriction is not None:
            operation.security = security_requirements(state.restriction.permissions)

    def set_parameters(self, state: OperationState, operation: OperationDescriptor) -> None:
        operation.parameters.extend(path_parameters(state.context, state.path))
        operation.parameters.extend(custom_parameters(state.restriction))

    def set_responses(self, state: OperationState, operation: OperationDescriptor) -> None:
        append_error_responses(state.context, operation)

    def set_request_body(self, state: OperationState, operation: OperationDescriptor) -> None:
        pass

    def set_tags(self, state: OperationState, operation: OperationDescriptor) -> None:
        pass

    def set_extensions(self, state: OperationState, operation: OperationDescriptor) -> None:
        operation.extensions.setdefault(OPERATION_TYPE, "operation")

    # -- helpers ---------------------------------------------------------

    def summary(self, state: OperationState, default: str) -> str:
        """The restriction's description, falling back to a generated summary."""
        description = getattr(state.restriction, "description", None)
        return description or default

    def add_tag(self, state: OperationState, operation: OperationDescriptor, name: str, toc_type: str | None = None) -> None:
        operation.add_tag(name)
        state.context.registry.register_tag(name, {TOC_TYPE: toc_type} if toc_type else None)
