"""Capability restriction records (Org.OData.Capabilities.V1).

Every optional field defaults to ``None``, meaning "not stated here, fall
back to the next scope". Disabling a capability is always an explicit
boolean such as ``Insertable: false``.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

CAPABILITIES = "Org.OData.Capabilities.V1"


class Record(BaseModel):
    """Base for annotation records. Keys use the vocabulary's PascalCase names."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    term: ClassVar[str] = ""


class Example(Record):
    value: str | None = None
    description: str | None = None


class CustomParameter(Record):
    name: str
    description: str | None = None
    documentation_url: str | None = Field(default=None, alias="DocumentationURL")
    required: bool | None = None
    example_values: list[Example] | None = None


class ScopeType(Record):
    scope: str
    restricted_properties: str | None = None


class PermissionType(Record):
    scheme_name: str
    scopes: list[ScopeType] = []


class RestrictionRecord(Record):
    """Fields shared by every restriction variant."""

    permissions: list[PermissionType] | None = None
    custom_headers: list[CustomParameter] | None = None
    custom_query_options: list[CustomParameter] | None = None
    description: str | None = None
    long_description: str | None = None


class ReadRestrictionsBase(RestrictionRecord):
    readable: bool | None = None

    @property
    def is_readable(self) -> bool:
        return self.readable is None or self.readable


class ReadByKeyRestrictions(ReadRestrictionsBase):
    pass


class ReadRestrictions(ReadRestrictionsBase):
    term: ClassVar[str] = f"{CAPABILITIES}.ReadRestrictions"

    read_by_key_restrictions: ReadByKeyRestrictions | None = None
    response_content_types: list[str] | None = None


class InsertRestrictions(RestrictionRecord):
    term: ClassVar[str] = f"{CAPABILITIES}.InsertRestrictions"

    insertable: bool | None = None
    non_insertable_navigation_properties: list[str] | None = None
    max_levels: int | None = None
    typecast_segment_supported: bool | None = None
    request_content_types: list[str] | None = None
    response_content_types: list[str] | None = None

    @property
    def is_insertable(self) -> bool:
        return self.insertable is None or self.insertable


class UpdateRestrictions(RestrictionRecord):
    term: ClassVar[str] = f"{CAPABILITIES}.UpdateRestrictions"

    updatable: bool | None = None
    upsertable: bool | None = None
    delta_update_supported: bool | None = None
    update_method: str | None = None
    non_updatable_navigation_properties: list[str] | None = None
    max_levels: int | None = None
    typecast_segment_supported: bool | None = None
    request_content_types: list[str] | None = None
    response_content_types: list[str] | None = None

    @property
    def is_updatable(self) -> bool:
        return self.updatable is None or self.updatable


class DeleteRestrictions(RestrictionRecord):
    term: ClassVar[str] = f"{CAPABILITIES}.DeleteRestrictions"

    deletable: bool | None = None
    non_deletable_navigation_properties: list[str] | None = None
    max_levels: int | None = None

    @property
    def is_deletable(self) -> bool:
        return self.deletable is None or self.deletable


class OperationRestrictions(Record):
    term: ClassVar[str] = f"{CAPABILITIES}.OperationRestrictions"

    filter_segment_supported: bool | None = None
    permissions: list[PermissionType] | None = None
    custom_headers: list[CustomParameter] | None = None
    custom_query_options: list[CustomParameter] | None = None


class NavigationPropertyRestriction(Record):
    """One ``RestrictedProperties`` entry of NavigationRestrictions."""

    navigation_property: str | None = None
    navigability: str | None = None
    top_supported: bool | None = None
    skip_supported: bool | None = None
    read_restrictions: ReadRestrictions | None = None
    insert_restrictions: InsertRestrictions | None = None
    update_restrictions: UpdateRestrictions | None = None
    delete_restrictions: DeleteRestrictions | None = None


class NavigationRestrictions(Record):
    term: ClassVar[str] = f"{CAPABILITIES}.NavigationRestrictions"

    navigability: str | None = None
    restricted_properties: list[NavigationPropertyRestriction] | None = None


class SearchRestrictions(Record):
    term: ClassVar[str] = f"{CAPABILITIES}.SearchRestrictions"

    searchable: bool | None = None


class FilterRestrictions(Record):
    term: ClassVar[str] = f"{CAPABILITIES}.FilterRestrictions"

    filterable: bool | None = None


class CountRestrictions(Record):
    term: ClassVar[str] = f"{CAPABILITIES}.CountRestrictions"

    countable: bool | None = None


class SortRestrictions(Record):
    term: ClassVar[str] = f"{CAPABILITIES}.SortRestrictions"

    sortable: bool | None = None
    non_sortable_properties: list[str] | None = None


class ExpandRestrictions(Record):
    term: ClassVar[str] = f"{CAPABILITIES}.ExpandRestrictions"

    expandable: bool | None = None
    non_expandable_properties: list[str] | None = None


TOP_SUPPORTED = f"{CAPABILITIES}.TopSupported"
SKIP_SUPPORTED = f"{CAPABILITIES}.SkipSupported"
