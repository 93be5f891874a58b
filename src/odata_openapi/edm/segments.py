"""Resource path segments and the immutable path built from them."""

import hashlib
from enum import Enum

from odata_openapi.edm.model import (
    ComplexType,
    EdmOperation,
    EntitySet,
    EntityType,
    NavigationProperty,
    NavigationSource,
    OperationImport,
    Singleton,
    StructuralProperty,
    StructuredType,
)
from odata_openapi.errors import check_argument_not_none
from odata_openapi.settings import ConvertSettings


class SegmentKind(str, Enum):
    NAVIGATION_SOURCE = "NavigationSource"
    KEY = "Key"
    NAVIGATION_PROPERTY = "NavigationProperty"
    OPERATION = "Operation"
    OPERATION_IMPORT = "OperationImport"
    TYPE_CAST = "TypeCast"
    COMPLEX_PROPERTY = "ComplexProperty"
    STREAM_PROPERTY = "StreamProperty"
    STREAM_CONTENT = "StreamContent"
    REF = "Ref"
    DOLLAR_COUNT = "DollarCount"
    METADATA = "Metadata"


class PathKind(str, Enum):
    ENTITY_SET = "EntitySet"
    ENTITY = "Entity"
    SINGLETON = "Singleton"
    OPERATION = "Operation"
    OPERATION_IMPORT = "OperationImport"
    NAVIGATION_PROPERTY = "NavigationProperty"
    REF = "Ref"
    MEDIA_ENTITY = "MediaEntity"
    TYPE_CAST = "TypeCast"
    COMPLEX_PROPERTY = "ComplexProperty"
    DOLLAR_COUNT = "DollarCount"
    METADATA = "Metadata"
    UNKNOWN = "Unknown"


def unique_name(name: str, parameters: set[str]) -> str:
    """Return name, or name1, name2, ... if already taken; records the result."""
    if name not in parameters:
        parameters.add(name)
        return name
    index = 1
    while f"{name}{index}" in parameters:
        index += 1
    result = f"{name}{index}"
    parameters.add(result)
    return result


def sha256_prefix(value: str, length: int = 4) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:length]


class ODataSegment:
    """One typed element of a resource path."""

    kind: SegmentKind

    @property
    def identifier(self) -> str:
        raise NotImplementedError

    @property
    def entity_type(self) -> EntityType | None:
        return None

    @property
    def target_identifier(self) -> str:
        """Name used for this segment inside an annotation target path."""
        return self.identifier

    def annotatables(self) -> list:
        """Model elements whose annotations apply to this segment."""
        return []

    def parameter_mapping(self, settings: ConvertSettings, parameters: set[str]) -> dict[str, str]:
        """Map model names to unique path template names."""
        return {}

    def path_item_name(self, settings: ConvertSettings, parameters: set[str]) -> str:
        return self.identifier

    def path_hash(self, settings: ConvertSettings) -> str:
        return sha256_prefix(self.path_item_name(settings, set()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier!r})"


class NavigationSourceSegment(ODataSegment):
    kind = SegmentKind.NAVIGATION_SOURCE

    def __init__(self, navigation_source: NavigationSource, entity_type: EntityType):
        self.navigation_source = check_argument_not_none(navigation_source, "navigation_source")
        self._entity_type = check_argument_not_none(entity_type, "entity_type")

    @property
    def identifier(self) -> str:
        return self.navigation_source.name

    @property
    def entity_type(self) -> EntityType:
        return self._entity_type

    @property
    def is_entity_set(self) -> bool:
        return isinstance(self.navigation_source, EntitySet)

    @property
    def is_singleton(self) -> bool:
        return isinstance(self.navigation_source, Singleton)

    def annotatables(self) -> list:
        return [self.navigation_source, self._entity_type]


class KeySegment(ODataSegment):
    kind = SegmentKind.KEY

    def __init__(
        self,
        entity_type: EntityType,
        key_names: list[str],
        key_mappings: dict[str, str] | None = None,
        is_alternate_key: bool = False,
    ):
        self._entity_type = check_argument_not_none(entity_type, "entity_type")
        self.key_names = list(key_names)
        self.key_mappings = key_mappings
        self.is_alternate_key = is_alternate_key

    @property
    def identifier(self) -> str:
        if self.is_alternate_key and self.key_mappings:
            return ",".join(self.key_mappings.values())
        return ",".join(self.key_names)

    @property
    def entity_type(self) -> EntityType:
        return self._entity_type

    def parameter_mapping(self, settings: ConvertSettings, parameters: set[str]) -> dict[str, str]:
        if self.key_mappings is not None:
            return {key: unique_name(value, parameters) for key, value in self.key_mappings.items()}

        if len(self.key_names) == 1:
            key_name = self.key_names[0]
            if settings.prefix_entity_type_name_before_key:
                return {key_name: unique_name(f"{self._entity_type.name}-{key_name}", parameters)}
            return {key_name: unique_name(key_name, parameters)}

        return {key_name: unique_name(key_name, parameters) for key_name in self.key_names}

    def path_item_name(self, settings: ConvertSettings, parameters: set[str]) -> str:
        mapping = self.parameter_mapping(settings, parameters)
        if len(mapping) == 1 and not self.is_alternate_key:
            return "{" + next(iter(mapping.values())) + "}"
        return ",".join(f"{key}={{{value}}}" for key, value in mapping.items())


class NavigationPropertySegment(ODataSegment):
    kind = SegmentKind.NAVIGATION_PROPERTY

    def __init__(self, navigation_property: NavigationProperty, entity_type: EntityType):
        self.navigation_property = check_argument_not_none(navigation_property, "navigation_property")
        self._entity_type = check_argument_not_none(entity_type, "entity_type")

    @property
    def identifier(self) -> str:
        return self.navigation_property.name

    @property
    def entity_type(self) -> EntityType:
        return self._entity_type

    def annotatables(self) -> list:
        return [self.navigation_property]


class OperationSegment(ODataSegment):
    kind = SegmentKind.OPERATION

    def __init__(self, operation: EdmOperation, entity_type: EntityType | None = None):
        self.operation = check_argument_not_none(operation, "operation")
        self._entity_type = entity_type

    @property
    def identifier(self) -> str:
        return self.operation.name

    @property
    def entity_type(self) -> EntityType | None:
        return self._entity_type

    @property
    def target_identifier(self) -> str:
        return self.operation.full_name

    def annotatables(self) -> list:
        return [self.operation]

    def parameter_mapping(self, settings: ConvertSettings, parameters: set[str]) -> dict[str, str]:
        if not self.operation.is_function:
            return {}
        return {p.name: unique_name(p.name, parameters) for p in self.operation.non_binding_parameters}

    def path_item_name(self, settings: ConvertSettings, parameters: set[str]) -> str:
        name = self.operation.name if settings.enable_unqualified_call else self.operation.full_name
        if not self.operation.is_function:
            return name
        mapping = self.parameter_mapping(settings, parameters)
        arguments = ",".join(f"{key}={{{value}}}" for key, value in mapping.items())
        return f"{name}({arguments})"


class OperationImportSegment(ODataSegment):
    kind = SegmentKind.OPERATION_IMPORT

    def __init__(self, operation_import: OperationImport, operation: EdmOperation):
        self.operation_import = check_argument_not_none(operation_import, "operation_import")
        self.operation = check_argument_not_none(operation, "operation")

    @property
    def identifier(self) -> str:
        return self.operation_import.name

    def annotatables(self) -> list:
        return [self.operation_import]

    def parameter_mapping(self, settings: ConvertSettings, parameters: set[str]) -> dict[str, str]:
        if self.operation_import.is_action_import:
            return {}
        return {p.name: unique_name(p.name, parameters) for p in self.operation.non_binding_parameters}

    def path_item_name(self, settings: ConvertSettings, parameters: set[str]) -> str:
        if self.operation_import.is_action_import:
            return self.operation_import.name
        mapping = self.parameter_mapping(settings, parameters)
        arguments = ",".join(f"{key}={{{value}}}" for key, value in mapping.items())
        return f"{self.operation_import.name}({arguments})"


class TypeCastSegment(ODataSegment):
    kind = SegmentKind.TYPE_CAST

    def __init__(self, structured_type: StructuredType):
        self.structured_type = check_argument_not_none(structured_type, "structured_type")

    @property
    def identifier(self) -> str:
        return self.structured_type.full_name

    @property
    def entity_type(self) -> EntityType | None:
        return self.structured_type if isinstance(self.structured_type, EntityType) else None

    def annotatables(self) -> list:
        return [self.structured_type]


class ComplexPropertySegment(ODataSegment):
    kind = SegmentKind.COMPLEX_PROPERTY

    def __init__(self, declaring_type: StructuredType, prop: StructuralProperty, complex_type: ComplexType):
        self.declaring_type = check_argument_not_none(declaring_type, "declaring_type")
        self.property = check_argument_not_none(prop, "prop")
        self.complex_type = check_argument_not_none(complex_type, "complex_type")

    @property
    def identifier(self) -> str:
        return self.property.name

    @property
    def entity_type(self) -> EntityType | None:
        return self.declaring_type if isinstance(self.declaring_type, EntityType) else None

    def annotatables(self) -> list:
        return [self.property]


class StreamPropertySegment(ODataSegment):
    kind = SegmentKind.STREAM_PROPERTY

    def __init__(self, prop: StructuralProperty, entity_type: EntityType):
        self.property = check_argument_not_none(prop, "prop")
        self._entity_type = check_argument_not_none(entity_type, "entity_type")

    @property
    def identifier(self) -> str:
        return self.property.name

    @property
    def entity_type(self) -> EntityType:
        return self._entity_type

    def annotatables(self) -> list:
        return [self.property]


class StreamContentSegment(ODataSegment):
    kind = SegmentKind.STREAM_CONTENT

    @property
    def identifier(self) -> str:
        return "$value"


class RefSegment(ODataSegment):
    kind = SegmentKind.REF

    @property
    def identifier(self) -> str:
        return "$ref"


class DollarCountSegment(ODataSegment):
    kind = SegmentKind.DOLLAR_COUNT

    @property
    def identifier(self) -> str:
        return "$count"


class MetadataSegment(ODataSegment):
    kind = SegmentKind.METADATA

    @property
    def identifier(self) -> str:
        return "$metadata"


_TARGET_PATH_TERMINALS = (
    SegmentKind.REF,
    SegmentKind.STREAM_PROPERTY,
    SegmentKind.STREAM_CONTENT,
    SegmentKind.DOLLAR_COUNT,
)

_NAVIGATION_PATH_EXCLUDED = (
    SegmentKind.NAVIGATION_SOURCE,
    SegmentKind.KEY,
    SegmentKind.TYPE_CAST,
    SegmentKind.STREAM_CONTENT,
    SegmentKind.STREAM_PROPERTY,
    SegmentKind.REF,
    SegmentKind.DOLLAR_COUNT,
)


class ODataPath:
    """An immutable, ordered sequence of segments."""

    def __init__(self, segments):
        self._segments = tuple(check_argument_not_none(segments, "segments"))
        if not self._segments:
            raise ValueError("An OData path needs at least one segment")
        self._kind: PathKind | None = None

    @property
    def segments(self) -> tuple[ODataSegment, ...]:
        return self._segments

    @property
    def first_segment(self) -> ODataSegment:
        return self._segments[0]

    @property
    def last_segment(self) -> ODataSegment:
        return self._segments[-1]

    def __iter__(self):
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index):
        return self._segments[index]

    def of_kind(self, kind: SegmentKind) -> list[ODataSegment]:
        return [s for s in self._segments if s.kind == kind]

    def has_kind(self, kind: SegmentKind) -> bool:
        return any(s.kind == kind for s in self._segments)

    @property
    def kind(self) -> PathKind:
        if self._kind is None:
            self._kind = self._calculate_kind()
        return self._kind

    def _calculate_kind(self) -> PathKind:
        last = self.last_segment.kind
        if last == SegmentKind.METADATA:
            return PathKind.METADATA
        if last == SegmentKind.DOLLAR_COUNT:
            return PathKind.DOLLAR_COUNT
        if last == SegmentKind.TYPE_CAST:
            return PathKind.TYPE_CAST
        if last in (SegmentKind.STREAM_CONTENT, SegmentKind.STREAM_PROPERTY):
            return PathKind.MEDIA_ENTITY
        if last == SegmentKind.COMPLEX_PROPERTY:
            return PathKind.COMPLEX_PROPERTY
        if self.has_kind(SegmentKind.REF):
            return PathKind.REF
        if self.has_kind(SegmentKind.OPERATION_IMPORT):
            return PathKind.OPERATION_IMPORT
        if self.has_kind(SegmentKind.OPERATION):
            return PathKind.OPERATION
        if self.has_kind(SegmentKind.NAVIGATION_PROPERTY):
            return PathKind.NAVIGATION_PROPERTY

        first = self.first_segment
        if isinstance(first, NavigationSourceSegment):
            if len(self) == 1:
                return PathKind.ENTITY_SET if first.is_entity_set else PathKind.SINGLETON
            if len(self) == 2 and last == SegmentKind.KEY:
                return PathKind.ENTITY
        return PathKind.UNKNOWN

    def parameter_mappings(self, settings: ConvertSettings) -> list[tuple[ODataSegment, dict[str, str]]]:
        """Unique path parameter names per segment, in path order."""
        parameters: set[str] = set()
        return [(s, s.parameter_mapping(settings, parameters)) for s in self._segments]

    def path_item_name(self, settings: ConvertSettings) -> str:
        parameters: set[str] = set()
        parts = []
        for segment in self._segments:
            name = segment.path_item_name(settings, parameters)
            if segment.kind == SegmentKind.KEY and not settings.key_as_segment:
                parts.append(f"({name})")
            else:
                parts.append(f"/{name}")
        return "".join(parts)

    def path_hash(self, settings: ConvertSettings) -> str:
        return sha256_prefix(self.path_item_name(settings))

    def target_path(self, container_target: str) -> str:
        """The annotation target of this exact path, e.g. ``NS.Default/Customers/Orders``."""
        segments = [s for s in self._segments if s.kind != SegmentKind.KEY]
        if segments and segments[-1].kind in _TARGET_PATH_TERMINALS:
            segments = segments[:-1]
        return "/".join([container_target, *(s.target_identifier for s in segments)])

    def navigation_property_path(self) -> str:
        """Navigation hops below the navigation source, e.g. ``Orders/Items``."""
        return "/".join(
            s.identifier for s in self._segments if s.kind not in _NAVIGATION_PATH_EXCLUDED
        )

    def __str__(self) -> str:
        return "/" + "/".join(s.identifier for s in self._segments)

    def __repr__(self) -> str:
        return f"ODataPath({str(self)!r})"
