import logging
import uuid
from typing import Callable, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .choices import OrderStatus, TableStatus
from .domain import ActingUser, FinalizedOrder, OrderDraft, OrderRecord, TableUpdate
from .pricing import compute_totals
from .repositories import OrderRepository, TableRepository

logger = logging.getLogger(__name__)

EMPTY_DRAFT = 'nothing to complete'
TABLE_ZONE_MISMATCH = 'table belongs to another zone'


def new_order_id() -> str:
    return uuid.uuid4().hex


class OrderFinalizer:
    """Turns a draft into a completed order and releases its table"""

    def __init__(self, orders=None, tables=None, strict_zones: Optional[bool] = None,
                 clock: Callable = timezone.now, id_factory: Callable[[], str] = new_order_id):
        self.orders = orders if orders is not None else OrderRepository()
        self.tables = tables if tables is not None else TableRepository()
        if strict_zones is None:
            strict_zones = getattr(settings, 'POS_STRICT_ZONES', False)
        self.strict_zones = strict_zones
        self.clock = clock
        self.id_factory = id_factory

    def validate(self, draft: OrderDraft) -> Optional[str]:
        """Return the reason the draft cannot be finalized, or None"""
        if draft.is_empty:
            return EMPTY_DRAFT
        if self.strict_zones and draft.table is not None and draft.table.zone != draft.zone:
            return TABLE_ZONE_MISMATCH
        return None

    def finalize(self, draft: OrderDraft, acting_user: ActingUser) -> Optional[FinalizedOrder]:
        """
        Complete the sale held in a draft

        The order write and the table release happen atomically; an exception
        from either collaborator propagates and leaves nothing written. The
        draft itself is never modified: resetting it after a successful
        return is the caller's job.

        Args:
            draft: The draft to complete
            acting_user: Operator recorded as the waiter

        Returns:
            FinalizedOrder with the new order and the table update (if a table
            was selected), or None if the draft is not valid for completion
        """
        problem = self.validate(draft)
        if problem is not None:
            logger.info("Order not completed: %s", problem)
            return None

        totals = compute_totals(draft.lines)
        now = self.clock()
        table = draft.table

        record = OrderRecord(
            id=self.id_factory(),
            table_id=table.id if table is not None else None,
            zone=draft.zone,
            lines=tuple(draft.lines),
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            total=totals.total,
            status=OrderStatus.COMPLETED,
            waiter_id=acting_user.id,
            waiter_name=acting_user.name,
            created_at=now,
            completed_at=now,
        )

        table_update = None
        if table is not None:
            table_update = TableUpdate(table_id=table.id, status=TableStatus.AVAILABLE, current_order=None)

        with transaction.atomic():
            order = self.orders.create_order(record)
            if table_update is not None:
                self.tables.update_table_status(
                    table_update.table_id, table_update.status, table_update.current_order
                )

        logger.info(
            "Order %s completed by %s: %s items, total %s",
            order.id, acting_user.name, order.total_quantity, order.total
        )
        return FinalizedOrder(order=order, table_update=table_update)
