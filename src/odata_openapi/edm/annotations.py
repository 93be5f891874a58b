"""Annotation store: raw vocabulary annotations keyed by target and term.

Records are validated on every lookup, so callers always receive a fresh
instance they are free to modify.
"""

from typing import Any, TypeVar

from pydantic import ValidationError

from odata_openapi.errors import ModelLoadError
from odata_openapi.vocabulary import core
from odata_openapi.vocabulary.capabilities import Record

R = TypeVar("R", bound=Record)


def _target_key(target) -> str:
    return target if isinstance(target, str) else target.target


class AnnotationStore:
    """Lookup primitives over ``{target: {term: value}}`` annotation data."""

    def __init__(self, annotations: dict[str, dict[str, Any]] | None = None):
        self._annotations = annotations or {}

    def get_value(self, target, term: str) -> Any:
        if target is None:
            return None
        return self._annotations.get(_target_key(target), {}).get(term)

    def get_record(self, target, record_type: type[R]) -> R | None:
        """Return the record of record_type.term annotated on target, or None."""
        raw = self.get_value(target, record_type.term)
        if raw is None:
            return None
        return self._validate(record_type, raw, target)

    def get_records(self, target, record_type: type[R]) -> list[R]:
        """Return a collection-valued annotation as a list of records."""
        raw = self.get_value(target, record_type.term)
        if not raw:
            return []
        return [self._validate(record_type, item, target) for item in raw]

    def get_boolean(self, target, term: str) -> bool | None:
        value = self.get_value(target, term)
        return value if isinstance(value, bool) else None

    def get_collection(self, target, term: str) -> list[str] | None:
        value = self.get_value(target, term)
        return list(value) if value is not None else None

    def get_description(self, target) -> str | None:
        return self.get_value(target, core.DESCRIPTION)

    def get_long_description(self, target) -> str | None:
        return self.get_value(target, core.LONG_DESCRIPTION)

    def get_link_record(self, target, rel: str) -> core.LinkRecord | None:
        return next(
            (link for link in self.get_records(target, core.LinkRecord) if link.rel == rel),
            None,
        )

    def get_deprecation_informations(self, target) -> list[core.RevisionRecord]:
        return [r for r in self.get_records(target, core.RevisionRecord) if r.is_deprecated]

    def _validate(self, record_type: type[R], raw: Any, target) -> R:
        try:
            return record_type.model_validate(raw)
        except ValidationError as e:
            raise ModelLoadError(
                f"Invalid {record_type.term} annotation on {_target_key(target)}: {e}"
            ) from e
