"""
Package-level exception hierarchy for planviz.

All exceptions inherit from PlanVizError, enabling:
- Catching all planviz errors with a single except clause
- Context fields for debugging (source, config_key)
- Structured serialization via to_dict() for JSON error output

Hierarchy:
    PlanVizError
    ├── ParseError          – Unexpected failure while scanning plan text
    ├── ComparisonError     – Plan comparison requested with missing input
    ├── RenderError         – The external diagram renderer failed
    └── ConfigurationError  – Invalid configuration

Malformed cost annotations are not errors: the parser defaults the
affected cost to 0 and keeps going.
"""

from __future__ import annotations

from typing import Any


class PlanVizError(Exception):
    """
    Base exception for all planviz errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON error output."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
        }


# ── Parse Errors ─────────────────────────────────────────────────────────


class ParseError(PlanVizError):
    """
    Raised when plan text cannot be turned into a node tree.

    The message of the underlying failure is carried verbatim so the
    caller can show it to the user as-is.

    Attributes:
        detail: Technical details for debugging (optional)
        source: Where the error occurred (e.g., "scan", "file_read", "resource_limit")
    """

    def __init__(
        self,
        message: str,
        *,
        detail: str | None = None,
        source: str = "unknown",
    ) -> None:
        self.detail = detail
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}\n\nDetails: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["detail"] = self.detail
        result["source"] = self.source
        return result


# ── Comparison Errors ────────────────────────────────────────────────────


class ComparisonError(PlanVizError):
    """
    Raised before any diff work when one or both plans are missing.

    Never raised for plans that merely differ.
    """
    pass


# ── Render Errors ────────────────────────────────────────────────────────


class RenderError(PlanVizError):
    """
    The external diagram renderer failed on a graph description.

    render_diagram() catches this and returns an inline error artifact;
    only direct renderer callers see it raised.
    """
    pass


# ── Configuration Errors ─────────────────────────────────────────────────


class ConfigurationError(PlanVizError):
    """
    Error in planviz configuration.

    Attributes:
        config_key: The configuration key that caused the error (if known).
    """

    def __init__(self, message: str, config_key: str | None = None) -> None:
        self.config_key = config_key
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["config_key"] = self.config_key
        return result
