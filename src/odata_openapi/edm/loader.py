"""Load a model, its annotations and a list of resource paths from YAML.

Fixture layout::

    model:
      namespace: NS
      entity_types: [...]
      entity_sets: [...]
    annotations:
      NS.Default/Customers:
        Org.OData.Capabilities.V1.ReadRestrictions: {...}
    paths:
      - Customers
      - [Customers, "{key}", Orders]
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from odata_openapi.edm.annotations import AnnotationStore
from odata_openapi.edm.model import EdmModel
from odata_openapi.edm.path_builder import build_path
from odata_openapi.edm.segments import ODataPath
from odata_openapi.errors import ModelLoadError


class Fixture(BaseModel):
    """A loaded model together with its annotations and paths."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: EdmModel
    annotations: AnnotationStore
    paths: list[ODataPath]


def _tokens(raw) -> list[str]:
    if isinstance(raw, str):
        return [token for token in raw.strip("/").split("/") if token]
    if isinstance(raw, list):
        return [str(token) for token in raw]
    raise ModelLoadError(f"Path must be a string or a list of tokens, got {type(raw).__name__}")


def load_fixture_data(data: dict) -> Fixture:
    """Build a Fixture from already-parsed YAML data."""
    if not isinstance(data, dict) or "model" not in data:
        raise ModelLoadError("Fixture must be a mapping with a 'model' section")

    try:
        model = EdmModel.model_validate(data["model"])
    except ValidationError as e:
        raise ModelLoadError(f"Invalid model: {e}") from e

    annotations = data.get("annotations") or {}
    if not isinstance(annotations, dict):
        raise ModelLoadError("'annotations' must map targets to terms")

    paths = [build_path(model, _tokens(raw)) for raw in data.get("paths") or []]
    return Fixture(model=model, annotations=AnnotationStore(annotations), paths=paths)


def load_fixture(file_path: Path) -> Fixture:
    """Read a YAML fixture file."""
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ModelLoadError(f"Cannot parse {file_path}: {e}") from e
    return load_fixture_data(data)
