"""Semantic data model consumed by the operation engine.

The model is plain data: types reference each other by qualified name and
``EdmModel`` resolves those names. Every annotatable element exposes a
``target`` string, the key under which annotations are stored.
"""

from typing import Literal

from pydantic import BaseModel, Field, PrivateAttr

COLLECTION_PREFIX = "Collection("


def is_collection_type(type_name: str) -> bool:
    return type_name.startswith(COLLECTION_PREFIX)


def element_type_name(type_name: str) -> str:
    """Strip a ``Collection(...)`` wrapper: ``Collection(NS.Order)`` -> ``NS.Order``."""
    if is_collection_type(type_name):
        return type_name[len(COLLECTION_PREFIX):-1]
    return type_name


def is_primitive_type(type_name: str) -> bool:
    return element_type_name(type_name).startswith("Edm.")


class StructuralProperty(BaseModel):
    """A primitive or complex valued property."""

    name: str
    type: str  # Edm.String / NS.Address / Collection(NS.Address)
    nullable: bool = True

    _declaring_type: str = PrivateAttr(default="")

    @property
    def is_collection(self) -> bool:
        return is_collection_type(self.type)

    @property
    def target(self) -> str:
        return f"{self._declaring_type}/{self.name}"


class NavigationProperty(BaseModel):
    """A navigation property pointing at another entity type."""

    name: str
    type: str  # NS.Order / Collection(NS.Order)
    nullable: bool = True
    contains_target: bool = False

    _declaring_type: str = PrivateAttr(default="")

    @property
    def is_collection(self) -> bool:
        return is_collection_type(self.type)

    @property
    def target_type_name(self) -> str:
        return element_type_name(self.type)

    @property
    def target(self) -> str:
        return f"{self._declaring_type}/{self.name}"


class StructuredType(BaseModel):
    name: str
    namespace: str = ""
    base_type: str | None = None
    abstract: bool = False
    properties: list[StructuralProperty] = []
    navigation_properties: list[NavigationProperty] = []

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def target(self) -> str:
        return self.full_name


class EntityType(StructuredType):
    key: list[str] = []
    alternate_keys: list[list[str]] = []
    has_stream: bool = False


class ComplexType(StructuredType):
    pass


class OperationParameter(BaseModel):
    name: str
    type: str
    nullable: bool = True
    optional: bool = False


class EdmOperation(BaseModel):
    """A bound or unbound action or function."""

    name: str
    namespace: str = ""
    kind: Literal["Action", "Function"]
    is_bound: bool = False
    parameters: list[OperationParameter] = []
    return_type: str | None = None
    is_composable: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def target(self) -> str:
        return self.full_name

    @property
    def is_action(self) -> bool:
        return self.kind == "Action"

    @property
    def is_function(self) -> bool:
        return self.kind == "Function"

    @property
    def binding_parameter(self) -> OperationParameter | None:
        if self.is_bound and self.parameters:
            return self.parameters[0]
        return None

    @property
    def non_binding_parameters(self) -> list[OperationParameter]:
        return self.parameters[1:] if self.is_bound else list(self.parameters)

    @property
    def returns_collection(self) -> bool:
        return self.return_type is not None and is_collection_type(self.return_type)


class OperationImport(BaseModel):
    name: str
    kind: Literal["Action", "Function"]
    operation: str  # qualified name of the imported operation
    entity_set: str | None = None

    _container: str = PrivateAttr(default="")

    @property
    def is_action_import(self) -> bool:
        return self.kind == "Action"

    @property
    def target(self) -> str:
        return f"{self._container}/{self.name}"


class EntitySet(BaseModel):
    name: str
    entity_type: str

    _container: str = PrivateAttr(default="")

    @property
    def target(self) -> str:
        return f"{self._container}/{self.name}"


class Singleton(BaseModel):
    name: str
    type: str

    _container: str = PrivateAttr(default="")

    @property
    def entity_type(self) -> str:
        return self.type

    @property
    def target(self) -> str:
        return f"{self._container}/{self.name}"


NavigationSource = EntitySet | Singleton


class EdmModel(BaseModel):
    """A single-schema, single-container service model."""

    namespace: str
    container: str = "Default"
    entity_types: list[EntityType] = []
    complex_types: list[ComplexType] = []
    operations: list[EdmOperation] = []
    operation_imports: list[OperationImport] = []
    entity_sets: list[EntitySet] = []
    singletons: list[Singleton] = []

    def model_post_init(self, __context) -> None:
        for structured in [*self.entity_types, *self.complex_types]:
            if not structured.namespace:
                structured.namespace = self.namespace
            for prop in [*structured.properties, *structured.navigation_properties]:
                prop._declaring_type = structured.full_name
        for operation in self.operations:
            if not operation.namespace:
                operation.namespace = self.namespace
        for element in [*self.entity_sets, *self.singletons, *self.operation_imports]:
            element._container = self.container_target

    @property
    def container_target(self) -> str:
        return f"{self.namespace}.{self.container}"

    # -- types -----------------------------------------------------------

    def find_type(self, full_name: str) -> EntityType | ComplexType | None:
        name = element_type_name(full_name)
        for structured in [*self.entity_types, *self.complex_types]:
            if structured.full_name == name:
                return structured
        return None

    def entity_type_of(self, source: NavigationSource) -> EntityType:
        found = self.find_type(source.entity_type)
        if not isinstance(found, EntityType):
            raise KeyError(f"Entity type {source.entity_type} of {source.name} not found")
        return found

    def base_types(self, structured: StructuredType) -> list[StructuredType]:
        """Ancestors of a type, nearest first."""
        result = []
        current = structured
        while current.base_type:
            current = self.find_type(current.base_type)
            if current is None:
                break
            result.append(current)
        return result

    def derived_types(self, structured: StructuredType) -> list[StructuredType]:
        """Every type deriving (directly or not) from structured."""
        result = []
        for candidate in [*self.entity_types, *self.complex_types]:
            if candidate is structured:
                continue
            if any(base is structured for base in self.base_types(candidate)):
                result.append(candidate)
        return result

    def all_properties(self, structured: StructuredType) -> list[StructuralProperty]:
        result = []
        for declaring in reversed([structured, *self.base_types(structured)]):
            result.extend(declaring.properties)
        return result

    def all_navigation_properties(self, structured: StructuredType) -> list[NavigationProperty]:
        result = []
        for declaring in reversed([structured, *self.base_types(structured)]):
            result.extend(declaring.navigation_properties)
        return result

    def find_property(self, structured: StructuredType, name: str) -> StructuralProperty | None:
        return next((p for p in self.all_properties(structured) if p.name == name), None)

    def find_navigation_property(self, structured: StructuredType, name: str) -> NavigationProperty | None:
        return next((p for p in self.all_navigation_properties(structured) if p.name == name), None)

    def key_properties(self, entity_type: EntityType) -> list[StructuralProperty]:
        for declaring in [entity_type, *self.base_types(entity_type)]:
            if isinstance(declaring, EntityType) and declaring.key:
                return [self.find_property(entity_type, name) for name in declaring.key]
        return []

    # -- container -------------------------------------------------------

    def find_navigation_source(self, name: str) -> NavigationSource | None:
        for source in [*self.entity_sets, *self.singletons]:
            if source.name == name:
                return source
        return None

    def find_operation_import(self, name: str) -> OperationImport | None:
        return next((i for i in self.operation_imports if i.name == name), None)

    # -- operations ------------------------------------------------------

    def find_operations(self, full_name: str) -> list[EdmOperation]:
        return [o for o in self.operations if o.full_name == full_name]

    def is_operation_overload(self, operation: EdmOperation) -> bool:
        """True when another operation shares name, binding kind and binding type."""

        def binding_type(o: EdmOperation) -> str | None:
            return o.binding_parameter.type if o.binding_parameter else None

        siblings = [
            o for o in self.find_operations(operation.full_name)
            if o.is_bound == operation.is_bound and binding_type(o) == binding_type(operation)
        ]
        return len(siblings) > 1

    def operation_targets_multiple_paths(self, operation: EdmOperation) -> bool:
        """True when the same bound operation is declared for several binding types."""
        if not operation.is_bound:
            return False
        bindings = {
            o.binding_parameter.type
            for o in self.find_operations(operation.full_name)
            if o.binding_parameter is not None
        }
        return len(bindings) > 1
