# kioskscan/contracts/planning.py
"""
Bulk reconciliation plan types handed to the transaction compiler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TargetStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (TargetStatus.SUCCESS, TargetStatus.FAILED)


@dataclass
class ReconciliationTarget:
    """One recipient address and its existing container, if any.

    Mutable while the plan is executed; once ``success`` or ``failed`` the
    target is terminal and further transitions raise ``ValueError``.
    """

    address: str
    container_id: str | None = None
    capability_id: str | None = None
    has_container: bool = False
    status: TargetStatus = TargetStatus.PENDING
    error: str | None = None

    def _transition(self, status: TargetStatus) -> None:
        if self.status.terminal:
            raise ValueError(
                f"Target {self.address} is already {self.status.value}"
            )
        self.status = status

    def mark_processing(self) -> None:
        self._transition(TargetStatus.PROCESSING)

    def mark_success(self) -> None:
        self._transition(TargetStatus.SUCCESS)

    def mark_failed(self, error: str) -> None:
        self._transition(TargetStatus.FAILED)
        self.error = error

    @classmethod
    def failed(cls, address: str, error: str) -> "ReconciliationTarget":
        return cls(address=address, status=TargetStatus.FAILED, error=error)


@dataclass
class BulkTransferPlan:
    """Targets paired one-to-one with the item ids to place for them."""

    sender: str
    item_type: str
    targets: list[ReconciliationTarget] = field(default_factory=list)
    item_ids: list[str] = field(default_factory=list)

    @property
    def pending(self) -> list[tuple[ReconciliationTarget, str]]:
        return [
            (t, i)
            for t, i in zip(self.targets, self.item_ids)
            if t.status is TargetStatus.PENDING
        ]


@dataclass
class TransferValidation:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    recipient_count: int = 0
    available_items: int = 0
