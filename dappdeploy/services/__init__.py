"""
dappdeploy Remote Services

Protocols for the remote collaborators and an in-memory sandbox.
The HTTP bridge client lives in `dappdeploy.services.bridge`.
"""

from .base import AdminInvite, ExecutionService, RegistryService, RemoteHandle, WalletService
from .memory import InMemoryExecutionService, InMemoryRegistry, InMemoryWallet

__all__ = [
    # Protocols
    "ExecutionService",
    "RegistryService",
    "WalletService",
    # Types
    "RemoteHandle",
    "AdminInvite",
    # Sandbox
    "InMemoryExecutionService",
    "InMemoryRegistry",
    "InMemoryWallet",
]
