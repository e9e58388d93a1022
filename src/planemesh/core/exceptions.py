"""
Custom exceptions for planemesh.

All planemesh exceptions inherit from PlaneMeshError for easy catching.
"""

from enum import Enum
from typing import Any


class PlaneMeshError(Exception):
    """Base exception for all planemesh errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(PlaneMeshError):
    """Raised when configuration is invalid or missing."""

    pass


class GeometryError(PlaneMeshError):
    """Raised when mesh input data is invalid or import/export fails."""

    pass


class TopologyError(PlaneMeshError):
    """Raised when a splice would leave a node with a non-manifold fan."""

    def __init__(
        self,
        message: str,
        node: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.node = node


class AddFaceReason(Enum):
    """Why a face could not be created."""

    NOT_FREE = "not-free"
    NOT_A_CHAIN = "not-a-chain"
    NON_MANIFOLD = "non-manifold"


class AddFaceError(PlaneMeshError):
    """Raised when three half-edges cannot be closed into a face."""

    def __init__(
        self,
        message: str,
        reason: AddFaceReason,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.reason = reason


class StaleHandleError(PlaneMeshError):
    """Raised when a handle refers to a removed or recycled record."""

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.kind = kind


class LocateError(PlaneMeshError):
    """Raised when point location cannot start or does not terminate."""

    pass
