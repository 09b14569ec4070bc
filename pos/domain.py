"""
Value types passed between the POS core and its collaborators.

The catalog, table registry and identity component hand the core plain
snapshots; the core never holds ORM instances.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from .choices import OrderStatus, TableStatus, Zone


@dataclass(frozen=True)
class CatalogProduct:
    """An active product as seen by the POS screen"""

    id: str
    name: str
    final_price: Decimal
    stock: Optional[int] = None
    active: bool = True


@dataclass(frozen=True)
class TableSnapshot:
    id: str
    number: int
    zone: Zone
    seats: int
    status: TableStatus = TableStatus.AVAILABLE
    current_order: Optional[str] = None


@dataclass(frozen=True)
class ActingUser:
    """The authenticated operator of a POS session"""

    id: str
    name: str
    role: str


@dataclass(frozen=True)
class OrderLine:
    """
    One product entry of a draft or a finished order.

    The line total is derived from quantity and the unit price snapshotted
    when the product was first added; it is never stored on its own.
    """

    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal

    @property
    def total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass
class OrderDraft:
    zone: Zone = Zone.TERRACE
    table: Optional[TableSnapshot] = None
    lines: List[OrderLine] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def index_of(self, product_id: str) -> Optional[int]:
        for index, line in enumerate(self.lines):
            if line.product_id == product_id:
                return index
        return None


@dataclass(frozen=True)
class OrderRecord:
    """A completed sale, immutable once created"""

    id: str
    zone: Zone
    lines: Tuple[OrderLine, ...]
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    status: OrderStatus
    waiter_id: str
    waiter_name: str
    created_at: datetime
    table_id: Optional[str] = None
    completed_at: Optional[datetime] = None

    @property
    def item_count(self) -> int:
        return len(self.lines)

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)


@dataclass(frozen=True)
class TableUpdate:
    table_id: str
    status: TableStatus
    current_order: Optional[str] = None


@dataclass(frozen=True)
class FinalizedOrder:
    order: OrderRecord
    table_update: Optional[TableUpdate] = None
