"""Build ODataPath instances against a model, fluently or from string tokens.

Token forms accepted by ``parse``::

    Customers                  navigation source or operation import (first token)
    {key}                      key segment using the declared key
    {key:CustomerCode}         alternate key segment
    Orders                     navigation, complex or stream property
    NS.VipCustomer             type cast
    NS.MyFunction(Name,Age)    bound operation, overload picked by parameter names
    $ref / $value / $count     reference, stream content, count
    $metadata                  service metadata (only token)
"""

import logging

from odata_openapi.edm.model import (
    ComplexType,
    EdmModel,
    EdmOperation,
    EntityType,
    StructuredType,
)
from odata_openapi.edm.segments import (
    ComplexPropertySegment,
    DollarCountSegment,
    KeySegment,
    MetadataSegment,
    NavigationPropertySegment,
    NavigationSourceSegment,
    ODataPath,
    ODataSegment,
    OperationImportSegment,
    OperationSegment,
    RefSegment,
    StreamContentSegment,
    StreamPropertySegment,
    TypeCastSegment,
)
from odata_openapi.errors import ModelLoadError, check_argument_not_none

logger = logging.getLogger(__name__)

STREAM_TYPE = "Edm.Stream"


class PathBuilder:
    """Appends segments while tracking the structured type in scope."""

    def __init__(self, model: EdmModel):
        self.model = check_argument_not_none(model, "model")
        self._segments: list[ODataSegment] = []
        self._current: StructuredType | None = None

    def _entity_type(self, full_name: str) -> EntityType:
        found = self.model.find_type(full_name)
        if not isinstance(found, EntityType):
            raise ModelLoadError(f"Entity type '{full_name}' not found")
        return found

    def _require_current(self, what: str) -> StructuredType:
        if self._current is None:
            raise ModelLoadError(f"Cannot append {what}: no structured type in scope")
        return self._current

    def navigation_source(self, name: str) -> "PathBuilder":
        source = self.model.find_navigation_source(name)
        if source is None:
            raise ModelLoadError(f"Navigation source '{name}' not found")
        entity_type = self._entity_type(source.entity_type)
        self._segments.append(NavigationSourceSegment(source, entity_type))
        self._current = entity_type
        return self

    def key(self, alternate: list[str] | None = None) -> "PathBuilder":
        current = self._require_current("a key")
        if not isinstance(current, EntityType):
            raise ModelLoadError(f"Cannot key into non-entity type '{current.full_name}'")

        if alternate:
            if alternate not in current.alternate_keys:
                raise ModelLoadError(
                    f"'{','.join(alternate)}' is not an alternate key of {current.full_name}"
                )
            mappings = {name: name for name in alternate}
            self._segments.append(KeySegment(current, alternate, mappings, is_alternate_key=True))
        else:
            key_names = [p.name for p in self.model.key_properties(current)]
            if not key_names:
                raise ModelLoadError(f"Entity type '{current.full_name}' declares no key")
            self._segments.append(KeySegment(current, key_names))
        return self

    def navigation_property(self, name: str) -> "PathBuilder":
        current = self._require_current(f"navigation property '{name}'")
        nav = self.model.find_navigation_property(current, name)
        if nav is None:
            raise ModelLoadError(f"Navigation property '{name}' not found on {current.full_name}")
        target = self._entity_type(nav.target_type_name)
        self._segments.append(NavigationPropertySegment(nav, target))
        self._current = target
        return self

    def property(self, name: str) -> "PathBuilder":
        """Append a complex or stream property segment."""
        current = self._require_current(f"property '{name}'")
        prop = self.model.find_property(current, name)
        if prop is None:
            raise ModelLoadError(f"Property '{name}' not found on {current.full_name}")

        if prop.type == STREAM_TYPE:
            if not isinstance(current, EntityType):
                raise ModelLoadError(f"Stream property '{name}' must belong to an entity type")
            self._segments.append(StreamPropertySegment(prop, current))
            return self

        complex_type = self.model.find_type(prop.type)
        if not isinstance(complex_type, ComplexType):
            raise ModelLoadError(f"Property '{name}' is neither complex nor a stream")
        self._segments.append(ComplexPropertySegment(current, prop, complex_type))
        self._current = complex_type
        return self

    def type_cast(self, full_name: str) -> "PathBuilder":
        target = self.model.find_type(full_name)
        if target is None:
            raise ModelLoadError(f"Type '{full_name}' not found")
        self._segments.append(TypeCastSegment(target))
        self._current = target
        return self

    def operation(self, full_name: str, parameters: list[str] | None = None) -> "PathBuilder":
        """Append a bound operation; ``parameters`` selects among overloads."""
        candidates = [o for o in self.model.find_operations(full_name) if o.is_bound]
        if parameters is not None:
            candidates = [
                o for o in candidates
                if [p.name for p in o.non_binding_parameters] == parameters
            ]
        if not candidates:
            raise ModelLoadError(f"Bound operation '{full_name}' not found")
        if len(candidates) > 1:
            logger.debug("Ambiguous operation %s, using the first overload", full_name)

        operation = candidates[0]
        self._segments.append(OperationSegment(operation, self._return_entity_type(operation)))
        self._current = self.model.find_type(operation.return_type) if operation.return_type else None
        return self

    def operation_import(self, name: str) -> "PathBuilder":
        operation_import = self.model.find_operation_import(name)
        if operation_import is None:
            raise ModelLoadError(f"Operation import '{name}' not found")
        operations = self.model.find_operations(operation_import.operation)
        unbound = [o for o in operations if not o.is_bound]
        if not unbound:
            raise ModelLoadError(f"Operation '{operation_import.operation}' of import '{name}' not found")
        operation = unbound[0]
        self._segments.append(OperationImportSegment(operation_import, operation))
        self._current = self.model.find_type(operation.return_type) if operation.return_type else None
        return self

    def value(self) -> "PathBuilder":
        self._segments.append(StreamContentSegment())
        return self

    def ref(self) -> "PathBuilder":
        self._segments.append(RefSegment())
        return self

    def count(self) -> "PathBuilder":
        self._segments.append(DollarCountSegment())
        return self

    def metadata(self) -> "PathBuilder":
        self._segments.append(MetadataSegment())
        return self

    def build(self) -> ODataPath:
        if not self._segments:
            raise ModelLoadError("Cannot build an empty path")
        return ODataPath(self._segments)

    def _return_entity_type(self, operation: EdmOperation) -> EntityType | None:
        if operation.return_type is None:
            return None
        found = self.model.find_type(operation.return_type)
        return found if isinstance(found, EntityType) else None

    # -- token parsing ---------------------------------------------------

    def parse(self, tokens: list[str]) -> ODataPath:
        """Parse a list of string tokens into a path."""
        if not tokens:
            raise ModelLoadError("A path needs at least one token")

        first, *rest = tokens
        if first == "$metadata":
            if rest:
                raise ModelLoadError("$metadata must be the only segment")
            return self.metadata().build()

        if self.model.find_navigation_source(first) is not None:
            self.navigation_source(first)
        elif self.model.find_operation_import(first) is not None:
            self.operation_import(first)
        else:
            raise ModelLoadError(f"'{first}' is neither a navigation source nor an operation import")

        for token in rest:
            self._append_token(token)
        return self.build()

    def _append_token(self, token: str) -> None:
        if token == "$ref":
            self.ref()
        elif token == "$value":
            self.value()
        elif token == "$count":
            self.count()
        elif token.startswith("{") and token.endswith("}"):
            inner = token[1:-1]
            _, _, alternate = inner.partition(":")
            self.key(alternate.split(",") if alternate else None)
        elif "(" in token and token.endswith(")"):
            name, _, arguments = token[:-1].partition("(")
            self.operation(name, [a for a in arguments.split(",") if a])
        elif self.model.find_operations(token):
            self.operation(token)
        elif "." in token and self.model.find_type(token) is not None:
            self.type_cast(token)
        elif self._current is not None and self.model.find_navigation_property(self._current, token):
            self.navigation_property(token)
        else:
            self.property(token)


def build_path(model: EdmModel, tokens: list[str]) -> ODataPath:
    return PathBuilder(model).parse(tokens)
