"""Re-export persistence protocols from core for convenience."""

from __future__ import annotations

from hrledger.core.protocols import ICacheBackend, IEmployeeStore, IUserRegistry

__all__ = ["ICacheBackend", "IEmployeeStore", "IUserRegistry"]
