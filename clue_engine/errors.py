"""Exception types for the deduction engine."""


class ClueError(Exception):
    """Base class for all engine errors."""


class SetupError(ClueError):
    """A game could not be set up (empty category, bad player count)."""


class ValidationError(ClueError):
    """A hypothesis is incomplete or malformed.

    Engine operations report this as a rejected ValidationResult instead of
    raising, so callers only see it when building hypotheses directly.
    """


class ExternalServiceError(ClueError):
    """The narrative backend failed or returned nothing usable."""


class CatalogError(ClueError):
    """Catalog management was asked to break id uniqueness."""
