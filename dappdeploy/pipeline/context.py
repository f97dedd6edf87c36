"""
Deployment Context.

The context carries run-scoped state through the pipeline: the resolved
reference bundle, the settings, the audit trail, and the remote objects
this run has created so far.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from dappdeploy.config.schemas import DeploySettings
    from dappdeploy.references import ReferenceBundle
    from dappdeploy.services.base import AdminInvite, RemoteHandle

    from .frames import ErrorFrame


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DeployContext:
    """
    Run-scoped context passed to every processor.

    Provides:
    - Unique execution ID for tracing
    - Reference bundle (remote services)
    - Deployment settings
    - Remote objects created by this run
    - Audit trail of frame processing
    """

    references: ReferenceBundle
    settings: DeploySettings

    # Execution identification
    execution_id: UUID = field(default_factory=uuid4)
    started_at: datetime = field(default_factory=_utc_now)

    # Remote side effects of this run
    installation: RemoteHandle | None = None
    admin_invite: AdminInvite | None = None
    registry_key: str | None = None

    # Audit trail
    processor_timings: dict[str, float] = field(default_factory=dict)
    frame_log: list[dict[str, Any]] = field(default_factory=list)

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the run started."""
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    def record_frame(self, frame_dict: dict[str, Any], processor_name: str) -> None:
        """Record a frame in the audit trail."""
        self.frame_log.append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "processor": processor_name,
            "frame": frame_dict,
            "elapsed_ms": self.elapsed_ms,
        })

    def record_timing(self, processor_name: str, duration_ms: float) -> None:
        """Record processor execution timing."""
        self.processor_timings[processor_name] = duration_ms

    def remote_side_effects(self) -> list[str]:
        """Describe the remote objects this run has created so far."""
        effects = []
        if self.installation is not None:
            effects.append(f"installation {self.installation!r}")
        if self.admin_invite is not None:
            effects.append(f"instance {self.admin_invite.instance!r}")
        if self.registry_key is not None:
            effects.append(f"registry key {self.registry_key}")
        return effects

    def to_audit_dict(self) -> dict[str, Any]:
        """Generate audit record for logging."""
        return {
            "execution_id": str(self.execution_id),
            "started_at": self.started_at.isoformat(),
            "duration_ms": self.elapsed_ms,
            "contract_name": self.settings.contract_name,
            "installation": repr(self.installation) if self.installation else None,
            "registry_key": self.registry_key,
            "processor_timings": self.processor_timings,
            "frame_count": len(self.frame_log),
        }


@dataclass
class PipelineResult:
    """
    Result of a pipeline run.

    Contains the frames produced by the last step that ran and, on
    failure, the error frame plus the exception that stopped the run.
    """

    context: DeployContext
    output_frames: list[Any] = field(default_factory=list)
    success: bool = True
    error: str | None = None
    error_frame: ErrorFrame | None = None
    exception: BaseException | None = None

    @property
    def execution_id(self) -> UUID:
        return self.context.execution_id

    @property
    def duration_ms(self) -> float:
        return self.context.elapsed_ms

    def get_frame(self, frame_type: type) -> Any | None:
        """Get the first frame of a specific type."""
        for frame in self.output_frames:
            if isinstance(frame, frame_type):
                return frame
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize result for logging."""
        return {
            "execution_id": str(self.execution_id),
            "success": self.success,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "failed_step": self.error_frame.processor_name if self.error_frame else None,
            "output_frame_types": [f.frame_type for f in self.output_frames],
        }
