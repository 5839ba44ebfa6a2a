# kioskscan/planning/transfer.py
"""
Bulk transfer preparation: pair each recipient with one of the sender's
items of a given type. Building and signing the transaction is left to the
transaction compiler.
"""
from __future__ import annotations

import logging

from kioskscan.contracts.discovery import ContentSelection
from kioskscan.contracts.planning import BulkTransferPlan, TransferValidation
from kioskscan.core.errors import ValidationError
from kioskscan.core.validation import is_valid_address
from kioskscan.discovery.orchestrator import DiscoveryOrchestrator
from kioskscan.planning.planner import BulkReconciliationPlanner, parse_addresses

logger = logging.getLogger(__name__)


def _check_inputs(sender: str, recipients_text: str, item_type: str) -> None:
    if not is_valid_address(sender):
        raise ValidationError("Invalid sender wallet address format", "sender")
    if not item_type or not item_type.strip():
        raise ValidationError("Item type is required", "item_type")
    if not recipients_text or not recipients_text.strip():
        raise ValidationError("Recipient addresses are required", "recipients")


def _select(
    selections: list[ContentSelection], item_type: str, needed: int
) -> ContentSelection:
    selected = next((s for s in selections if s.type_tag == item_type), None)
    if selected is None:
        raise ValidationError(
            f"Item type '{item_type}' not found in sender's collection", "item_type"
        )
    if selected.available_count < needed:
        raise ValidationError(
            f"Not enough items available. Required: {needed}, "
            f"Available: {selected.available_count}",
            "item_count",
        )
    return selected


class BulkTransferPreparer:
    """
    Prepare one-item-per-recipient transfers from a sender's collection.

    Discovery of the sender runs through the orchestrator; recipient
    containers are resolved by the reconciliation planner.
    """

    def __init__(
        self,
        orchestrator: DiscoveryOrchestrator,
        planner: BulkReconciliationPlanner,
        max_recipients: int = 100,
    ) -> None:
        self._orchestrator = orchestrator
        self._planner = planner
        self._max_recipients = max_recipients

    async def prepare_transfer(
        self, sender: str, recipients_text: str, item_type: str
    ) -> BulkTransferPlan:
        """
        Prepare targets for a one-item-per-recipient transfer.

        Args:
            sender: Wallet holding the items
            recipients_text: Comma-separated recipient addresses
            item_type: Full type tag of the items to hand out

        Returns:
            The plan pairing targets with item ids, in target order

        Raises:
            ValidationError: Bad inputs, unknown type or too few items.
            DiscoveryError: The sender's collection could not be discovered.
        """
        _check_inputs(sender, recipients_text, item_type)
        recipients = parse_addresses(recipients_text, self._max_recipients)
        if not recipients:
            raise ValidationError("No valid recipient addresses found", "recipients")

        logger.info(
            "Preparing bulk transfer: sender=%s type=%s recipients=%d",
            sender,
            item_type,
            len(recipients),
        )

        selections = await self._orchestrator.available_item_types(sender)
        selected = _select(selections, item_type, len(recipients))

        targets = await self._planner.prepare(recipients)
        item_ids = selected.item_ids[: len(targets)]
        selected.selected_count = len(item_ids)

        plan = BulkTransferPlan(
            sender=sender, item_type=item_type, targets=targets, item_ids=item_ids
        )
        logger.info(
            "Bulk transfer prepared: targets=%d pending=%d",
            len(targets),
            len(plan.pending),
        )
        return plan

    async def validate_transfer(
        self, sender: str, recipients_text: str, item_type: str
    ) -> TransferValidation:
        """
        Report problems with a transfer request instead of raising.

        Args:
            sender: Wallet holding the items
            recipients_text: Comma-separated recipient addresses
            item_type: Full type tag of the items to hand out

        Returns:
            A ``TransferValidation``; discovery failures become warnings
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not is_valid_address(sender):
            errors.append("Invalid sender wallet address format")
        if not item_type or not item_type.strip():
            errors.append("Item type is required")
        if not recipients_text or not recipients_text.strip():
            errors.append("Recipient addresses are required")
            return TransferValidation(is_valid=False, errors=errors)

        try:
            recipients = parse_addresses(recipients_text, self._max_recipients)
        except ValidationError as exc:
            errors.append(str(exc))
            return TransferValidation(is_valid=False, errors=errors)

        if not recipients:
            errors.append("No valid recipient addresses found")
        if errors:
            return TransferValidation(
                is_valid=False, errors=errors, recipient_count=len(recipients)
            )

        available = 0
        try:
            selections = await self._orchestrator.available_item_types(sender)
        except Exception as exc:
            warnings.append(f"Could not verify item availability: {exc}")
        else:
            try:
                available = _select(selections, item_type, len(recipients)).available_count
            except ValidationError as exc:
                errors.append(str(exc))
                available = next(
                    (s.available_count for s in selections if s.type_tag == item_type),
                    0,
                )

        return TransferValidation(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            recipient_count=len(recipients),
            available_items=available,
        )
