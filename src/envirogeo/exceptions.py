"""EnviroGeo exception hierarchy.

All exceptions follow a three-part message pattern: what failed,
likely cause, and suggested fix.
"""

from __future__ import annotations


class EnviroGeoError(Exception):
    """Base exception for all EnviroGeo errors.

    Args:
        what: Description of what failed.
        cause: Likely cause of the failure.
        fix: Suggested action to resolve the issue.

    Example:
        >>> raise EnviroGeoError(
        ...     what="Analysis failed",
        ...     cause="Unexpected internal state",
        ...     fix="Please report this issue",
        ... )
    """

    def __init__(
        self,
        what: str,
        cause: str = "",
        fix: str = "",
    ) -> None:
        """Initialize with structured error context.

        Args:
            what: Description of what failed.
            cause: Likely cause of the failure.
            fix: Suggested action to resolve the issue.
        """
        self.what = what
        self.cause = cause
        self.fix = fix
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Build the multi-line error message from parts.

        Returns:
            Formatted message with optional Cause and Fix lines.
        """
        parts = [self.what]
        if self.cause:
            parts.append(f"Cause: {self.cause}")
        if self.fix:
            parts.append(f"Fix: {self.fix}")
        return "\n".join(parts)


class ConfigurationError(EnviroGeoError):
    """Raised for invalid configuration (unknown backend, missing URL).

    Example:
        >>> raise ConfigurationError(
        ...     what="Unknown store backend: 'redis'",
        ...     cause="Valid backends are: memory, sqlite",
        ...     fix="Set store_backend to one of: memory, sqlite",
        ... )
    """


class InputError(EnviroGeoError):
    """Raised when user input fails validation before an analysis runs.

    Covers a missing area selection, coordinates that are not numbers,
    an area outside the supported region, dates outside the supported
    window, and unknown parameter identifiers.

    Example:
        >>> raise InputError(
        ...     what="No area selected",
        ...     fix="Draw a shape on the map or enter coordinates",
        ... )
    """


class ProviderError(EnviroGeoError):
    """Raised when the external satellite-data function fails.

    No retry is attempted; the user may re-run the analysis.

    Example:
        >>> raise ProviderError(
        ...     what="NDVI request failed",
        ...     cause="HTTP 503",
        ...     fix="Try again later",
        ... )
    """


class StoreError(EnviroGeoError):
    """Raised for document store and store proxy failures.

    Example:
        >>> raise StoreError(
        ...     what="Store action 'saveAnalysis' failed",
        ...     cause="database is locked",
        ... )
    """
