"""
Errors raised by the deployment orchestrator.

Every error here is fatal for a deployment run: the pipeline stops at
the first failing step and the triggering exception is surfaced to the
operator. Nothing is retried, because each step has a remote side
effect (an install, an instantiation, a registration).
"""

from __future__ import annotations


class DeployError(Exception):
    """Base exception for deployment failures."""


class UnresolvedReferenceError(DeployError):
    """Raised when the pending reference bundle fails to resolve."""


class DeployIOError(DeployError, OSError):
    """Raised when a local file cannot be read or written."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return f"{self.args[0]} ({self.path})"


class RemoteCallError(DeployError):
    """Raised when a remote service rejects a call or the transport fails."""

    def __init__(
        self,
        message: str,
        target: str,
        method: str,
        *,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.target = target
        self.method = method
        self.status_code = status_code

    def __str__(self) -> str:
        parts = [f"[{self.target}.{self.method}] {self.args[0]}"]
        if self.status_code:
            parts.append(f"(status={self.status_code})")
        return " ".join(parts)


class NotFoundError(DeployError):
    """Raised when a requested issuer petname is not known to the wallet."""

    def __init__(self, petname: str, known: list[str]):
        super().__init__(f"Issuer petname '{petname}' not found in wallet")
        self.petname = petname
        self.known = known

    def __str__(self) -> str:
        known = ", ".join(self.known) if self.known else "none"
        return f"{self.args[0]} (known: {known})"


class ConfigFormatError(DeployError):
    """Raised when a generated config file cannot be parsed back."""


class ForeignHandleError(DeployError):
    """Raised when a step is handed an installation this run did not create."""

    def __init__(self, handle: object, step: str):
        super().__init__(f"Refusing to {step} {handle!r}: not installed by this run")
        self.handle = handle
        self.step = step
