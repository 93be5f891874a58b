"""Shared document-level registries: tags and reusable components.

Handlers register into one registry per generated document. The registry
is plain mutable state and is not thread-safe.
"""

import copy
import logging
from typing import Any

logger = logging.getLogger(__name__)

TOC_TYPE = "x-ms-docs-toc-type"

COMPONENT_KINDS = ("schemas", "responses", "parameters", "requestBodies", "securitySchemes")


class DocumentRegistry:
    def __init__(self):
        self._tags: dict[str, dict[str, Any]] = {}
        self._components: dict[str, dict[str, Any]] = {kind: {} for kind in COMPONENT_KINDS}

    # -- tags ------------------------------------------------------------

    def register_tag(self, name: str, extensions: dict[str, Any] | None = None) -> None:
        """Add a tag once; a later call only fills extensions that are missing."""
        tag = self._tags.get(name)
        if tag is None:
            self._tags[name] = {"name": name, **(extensions or {})}
            logger.debug("Registered tag %s", name)
            return
        for key, value in (extensions or {}).items():
            tag.setdefault(key, value)

    def add_extension_to_tag(self, name: str, key: str, value: Any) -> None:
        """Set an extension on a registered tag unless it already carries one."""
        tag = self._tags.get(name)
        if tag is None:
            self.register_tag(name, {key: value})
        else:
            tag.setdefault(key, value)

    def has_tag(self, name: str) -> bool:
        return name in self._tags

    @property
    def tags(self) -> list[dict[str, Any]]:
        return [dict(tag) for tag in self._tags.values()]

    # -- components ------------------------------------------------------

    def register_component(self, kind: str, component_id: str, value: dict[str, Any]) -> str:
        """Register a component on first use and return its ``$ref`` string."""
        if kind not in self._components:
            raise ValueError(f"Unknown component kind: {kind}")
        if component_id not in self._components[kind]:
            self._components[kind][component_id] = copy.deepcopy(value)
            logger.debug("Registered %s component %s", kind, component_id)
        return reference(kind, component_id)

    def get_component(self, kind: str, component_id: str) -> dict[str, Any] | None:
        return self._components.get(kind, {}).get(component_id)

    @property
    def components(self) -> dict[str, dict[str, Any]]:
        return {kind: dict(values) for kind, values in self._components.items() if values}

    def to_document(self, paths: dict[str, Any]) -> dict[str, Any]:
        document: dict[str, Any] = {"paths": paths}
        if self._tags:
            document["tags"] = self.tags
        components = self.components
        if components:
            document["components"] = components
        return document


def reference(kind: str, component_id: str) -> str:
    return f"#/components/{kind}/{component_id}"
