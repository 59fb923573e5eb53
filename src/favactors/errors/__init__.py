"""Custom exception hierarchy for favactors."""

from __future__ import annotations


class FavActorsError(Exception):
    """Base class for all custom errors raised by favactors."""


# --- 3-layer hierarchy ---

class DomainError(FavActorsError):
    """Base class for domain-level errors."""


class InfrastructureError(FavActorsError):
    """Base class for infrastructure-level errors."""


class ApplicationError(FavActorsError):
    """Base class for application-level errors."""


# --- Domain errors ---

class PersonNotFoundError(DomainError):
    """Raised when the requested person cannot be located."""


class ChangePreconditionError(DomainError):
    """Raised when a change notification carries the wrong positions for its kind."""


# --- Infrastructure errors ---

class DatabaseError(InfrastructureError):
    """Raised when a database operation fails."""


class ConnectionPoolExhausted(InfrastructureError):
    """Raised when no connections are available in the pool."""


class RemoteServiceError(InfrastructureError):
    """Raised when The Movie Database cannot be reached or answers with an error."""


# --- Application errors ---

class FetchError(ApplicationError):
    """Raised when the sorted view cannot be read from the store."""


class CommitError(ApplicationError):
    """Raised when pending record changes cannot be committed."""


class SyncInvariantError(ApplicationError):
    """Raised when change notifications cannot describe the current list."""


# --- DI-specific errors ---

class CircularDependencyError(FavActorsError):
    """Raised when a circular dependency is detected during resolution."""


class ResolutionError(FavActorsError):
    """Raised when a dependency cannot be resolved."""


# --- Settings ---

class SettingsError(FavActorsError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
