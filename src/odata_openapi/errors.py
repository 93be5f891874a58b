"""Error types raised by the operation engine and its loaders."""


class ODataOpenApiError(Exception):
    """Base class for every error raised by odata_openapi."""


class ArgumentNullError(ODataOpenApiError, ValueError):
    """A required argument was missing (caller contract violation)."""

    def __init__(self, name: str):
        super().__init__(f"Value cannot be None: {name}")
        self.name = name


class InvalidDispatchError(ODataOpenApiError, RuntimeError):
    """A handler was invoked for a path shape it cannot interpret."""


class ModelLoadError(ODataOpenApiError):
    """A model, annotation or path fixture could not be loaded."""


def check_argument_not_none(value, name: str):
    """Return value, raising ArgumentNullError when it is None."""
    if value is None:
        raise ArgumentNullError(name)
    return value
