"""
Base Frame abstraction for the deployment pipeline.

Frames are immutable data containers that flow from one deployment
step to the next. Each step consumes the previous step's frame and
returns a new frame derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, TypeVar
from uuid import UUID, uuid4

from ...errors import (
    DeployIOError,
    ForeignHandleError,
    NotFoundError,
    RemoteCallError,
    UnresolvedReferenceError,
)

# Type variable for generic derive() method
F = TypeVar("F", bound="Frame")


def _utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


@dataclass(frozen=True, kw_only=True, slots=True)
class Frame:
    """
    Base class for all frames in the deployment pipeline.

    Frames are immutable data containers with:
    - Unique ID for tracking
    - Creation timestamp
    - Source frame ID for lineage tracking
    - Metadata for extensibility
    """

    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utc_now)
    source_frame_id: UUID | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def frame_type(self) -> str:
        """Frame type name for logging and debugging."""
        return self.__class__.__name__

    def derive(self: F, **changes: Any) -> F:
        """
        Create a new frame derived from this one.

        The new frame gets a new ID and timestamp, and its
        source_frame_id points to this frame.
        """
        return replace(
            self,
            id=uuid4(),
            created_at=_utc_now(),
            source_frame_id=self.id,
            **changes,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize frame to dictionary for logging/storage."""
        return {
            "id": str(self.id),
            "frame_type": self.frame_type,
            "created_at": self.created_at.isoformat(),
            "source_frame_id": str(self.source_frame_id) if self.source_frame_id else None,
            "metadata": self.metadata,
        }

    def __repr__(self) -> str:
        return f"{self.frame_type}(id={str(self.id)[:8]}...)"


@dataclass(frozen=True, kw_only=True, slots=True)
class ErrorFrame(Frame):
    """
    Frame representing a failed deployment step.

    Every deployment error is fatal, so the executor stops as soon as a
    step produces one.
    """

    error_type: str = "internal"
    error_message: str = "An error occurred"
    processor_name: str = ""
    original_frame_type: str = ""
    exception_class: str | None = None
    is_fatal: bool = True

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        processor_name: str,
        source_frame: Frame | None = None,
    ) -> ErrorFrame:
        """Create ErrorFrame from an exception."""
        return cls(
            error_type=_classify_error(exc),
            error_message=str(exc),
            processor_name=processor_name,
            original_frame_type=source_frame.frame_type if source_frame else "",
            exception_class=type(exc).__name__,
            source_frame_id=source_frame.id if source_frame else None,
        )

    def to_dict(self) -> dict[str, Any]:
        base = Frame.to_dict(self)
        base.update(
            {
                "error_type": self.error_type,
                "error_message": self.error_message,
                "processor_name": self.processor_name,
                "original_frame_type": self.original_frame_type,
                "exception_class": self.exception_class,
                "is_fatal": self.is_fatal,
            }
        )
        return base


def _classify_error(exc: Exception) -> str:
    """Classify exception into error type."""
    if isinstance(exc, UnresolvedReferenceError):
        return ErrorType.REFERENCE
    if isinstance(exc, NotFoundError):
        return ErrorType.NOT_FOUND
    if isinstance(exc, ForeignHandleError):
        return ErrorType.FOREIGN_HANDLE
    if isinstance(exc, RemoteCallError):
        return ErrorType.REMOTE
    if isinstance(exc, (DeployIOError, OSError)):
        return ErrorType.IO
    return ErrorType.INTERNAL


class ErrorType:
    """Error type constants for ErrorFrame classification."""

    REFERENCE = "reference"
    IO = "io"
    REMOTE = "remote"
    NOT_FOUND = "not_found"
    FOREIGN_HANDLE = "foreign_handle"
    INTERNAL = "internal"
