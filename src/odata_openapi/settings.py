"""Conversion settings.

Field names follow Python conventions; every field also accepts the
PascalCase name used by settings files (``EnableOperationId``, ...).
"""

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_pascal

from odata_openapi.errors import ModelLoadError


class LinkRelKey(str, Enum):
    """Keys of the custom link-relation mapping."""

    LIST = "List"
    READ_BY_KEY = "ReadByKey"
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    ACTION = "Action"
    FUNCTION = "Function"


DEFAULT_LINK_REL_MAPPING = {
    LinkRelKey.LIST: "https://graph.microsoft.com/rels/docs/list",
    LinkRelKey.READ_BY_KEY: "https://graph.microsoft.com/rels/docs/get",
    LinkRelKey.CREATE: "https://graph.microsoft.com/rels/docs/create",
    LinkRelKey.UPDATE: "https://graph.microsoft.com/rels/docs/update",
    LinkRelKey.DELETE: "https://graph.microsoft.com/rels/docs/delete",
    LinkRelKey.ACTION: "https://graph.microsoft.com/rels/docs/action",
    LinkRelKey.FUNCTION: "https://graph.microsoft.com/rels/docs/function",
}


class ConvertSettings(BaseModel):
    """Feature flags consumed while building operations."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    enable_operation_id: bool = True
    enable_pagination: bool = False
    use_success_status_code_range: bool = False
    show_links: bool = False
    show_external_docs: bool = True
    enable_derived_types_references_for_responses: bool = False
    enable_derived_types_references_for_request_body: bool = False
    enable_deprecation_information: bool = True
    pageable_operation_name: str = "listMore"
    custom_http_method_link_rel_mapping: dict[LinkRelKey, str] = Field(
        default_factory=lambda: dict(DEFAULT_LINK_REL_MAPPING)
    )
    key_as_segment: bool = False
    prefix_entity_type_name_before_key: bool = False
    enable_unqualified_call: bool = False
    path_prefix: str | None = None
    top_example: int = 50


def load_settings(file_path: Path | None) -> ConvertSettings:
    """Load settings from a YAML file. Missing or empty files give defaults."""
    if file_path is None:
        return ConvertSettings()

    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) or {}
        return ConvertSettings.model_validate(data)
    except (yaml.YAMLError, ValidationError) as e:
        raise ModelLoadError(f"Invalid settings file {file_path}: {e}") from e
