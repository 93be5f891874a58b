"""Core vocabulary records (Org.OData.Core.V1)."""

import datetime
from typing import ClassVar

from pydantic import Field

from odata_openapi.vocabulary.capabilities import Record

CORE = "Org.OData.Core.V1"

DESCRIPTION = f"{CORE}.Description"
LONG_DESCRIPTION = f"{CORE}.LongDescription"
ACCEPTABLE_MEDIA_TYPES = f"{CORE}.AcceptableMediaTypes"


class LinkRecord(Record):
    """One entry of ``Core.Links``."""

    term: ClassVar[str] = f"{CORE}.Links"

    rel: str = Field(alias="rel")
    href: str = Field(alias="href")


class RevisionRecord(Record):
    """One entry of ``Core.Revisions``."""

    term: ClassVar[str] = f"{CORE}.Revisions"

    kind: str  # Added / Modified / Deprecated
    version: str | None = None
    description: str | None = None
    date: datetime.date | None = None
    removal_date: datetime.date | None = None

    @property
    def is_deprecated(self) -> bool:
        return self.kind == "Deprecated"

    def to_extension(self) -> dict:
        """Render as the ``x-ms-deprecation`` extension value, leaving out unset fields."""
        values = {
            "removalDate": self.removal_date.isoformat() if self.removal_date else None,
            "date": self.date.isoformat() if self.date else None,
            "version": self.version,
            "description": self.description,
        }
        return {key: value for key, value in values.items() if value is not None}
