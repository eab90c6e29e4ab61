"""Catalog and refresh exceptions.

Discovery calls never raise for "no results"; they return empty
collections. These exceptions cover structural failures only.
"""
from typing import Optional


class CatalogError(Exception):
    """Base exception for catalog errors."""

    def __init__(self, message: str, phase: Optional[str] = None, **context):
        super().__init__(message)
        self.phase = phase
        self.context = context


class CatalogNotLoadedError(CatalogError):
    """The catalog store was queried before any load."""

    def __init__(self, operation: str):
        super().__init__(
            f"Catalog is not loaded (operation: {operation})",
            phase="query",
            operation=operation,
        )
        self.operation = operation


class NotFoundError(CatalogError):
    """An explicitly requested entity does not exist."""

    def __init__(self, identifier: str):
        super().__init__(f"Node '{identifier}' not found", phase="lookup", identifier=identifier)
        self.identifier = identifier


class DuplicateIdentifierError(CatalogError):
    """Two records in one load share an identifier."""

    def __init__(self, identifier: str, count: int = 2):
        super().__init__(
            f"Duplicate identifier '{identifier}' ({count} records)",
            phase="load",
            identifier=identifier,
        )
        self.identifier = identifier
        self.count = count


class MalformedEntityError(CatalogError):
    """A single record could not be parsed."""

    def __init__(self, record: str, reason: str):
        super().__init__(f"Malformed node record '{record}': {reason}", phase="parse", record=record)
        self.record = record
        self.reason = reason


class RefreshUnavailableError(CatalogError):
    """The remote source could not be reached and no snapshot exists."""

    def __init__(self, message: str, phase: str = "refresh", status_code: Optional[int] = None):
        super().__init__(message, phase=phase)
        self.status_code = status_code


class ChainEntityNotFoundError(CatalogError):
    """A canned chain refers to a node missing from the catalog."""

    def __init__(self, display_name: str, suggestion: str):
        super().__init__(
            f"Chain '{suggestion}' references unknown node '{display_name}'",
            phase="suggest",
            display_name=display_name,
        )
        self.display_name = display_name
        self.suggestion = suggestion
