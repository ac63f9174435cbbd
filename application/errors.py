"""Exceptions raised across the application layer."""


class StorageError(Exception):
    """A persistence operation failed.

    Raised by repositories so callers never see driver-specific exceptions.
    """


class ToolNotFoundError(LookupError):
    """No tool is registered under the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Tool '{slug}' is not registered")
        self.slug = slug


class DuplicateToolError(ValueError):
    """A tool with the same slug is already registered."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Tool '{slug}' is already registered")
        self.slug = slug
