"""
Exception types for tilenav.

Constructors and validators raise these; NavSystem catches them and turns
them into its sentinel results so a bad map or query never crashes the host.
"""


class NavigationError(Exception):
    """Base class for navigation errors."""


class GridError(NavigationError, ValueError):
    """Raised when a collision buffer does not describe a valid grid."""


class ConfigError(NavigationError, ValueError):
    """Raised when build or query parameters are out of range."""
