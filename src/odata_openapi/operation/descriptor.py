"""Operation descriptor models and their OpenAPI serialization."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OperationType(str, Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"


class OpenApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_openapi(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Example(OpenApiModel):
    description: str | None = None
    value: Any = None


class Parameter(OpenApiModel):
    """A parameter object, or a ``$ref`` to a parameter component."""

    name: str | None = None
    location: str | None = Field(default=None, alias="in")  # path / query / header
    description: str | None = None
    required: bool | None = None
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    style: str | None = None
    explode: bool | None = None
    example: Any = None
    examples: dict[str, Example] | None = None
    ref: str | None = Field(default=None, alias="$ref")


class MediaType(OpenApiModel):
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")


class RequestBody(OpenApiModel):
    description: str | None = None
    required: bool | None = None
    content: dict[str, MediaType] | None = None
    ref: str | None = Field(default=None, alias="$ref")


class Link(OpenApiModel):
    operation_id: str = Field(alias="operationId")
    parameters: dict[str, str] = {}


class Response(OpenApiModel):
    description: str | None = None
    content: dict[str, MediaType] | None = None
    links: dict[str, Link] | None = None
    ref: str | None = Field(default=None, alias="$ref")


class ExternalDocs(OpenApiModel):
    description: str | None = None
    url: str


class OperationDescriptor(OpenApiModel):
    """The operation object produced for one (path, method) pair."""

    summary: str | None = None
    description: str | None = None
    operation_id: str | None = Field(default=None, alias="operationId")
    tags: list[str] = []
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = {}
    security: list[dict[str, list[str]]] = []
    external_docs: ExternalDocs | None = Field(default=None, alias="externalDocs")
    deprecated: bool = False
    extensions: dict[str, Any] = {}

    def add_tag(self, name: str) -> None:
        if name not in self.tags:
            self.tags.append(name)

    def find_parameter(self, name: str) -> Parameter | None:
        return next((p for p in self.parameters if p.name == name), None)

    def to_openapi(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={"extensions"})
        for key in ("tags", "parameters", "security"):
            if not data.get(key):
                data.pop(key, None)
        if not self.deprecated:
            data.pop("deprecated")
        data.update(self.extensions)
        return data
