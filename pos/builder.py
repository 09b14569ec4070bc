"""
Order builder for the POS screen.

Holds the draft of one in-progress sale and applies line operations to it.
Operations that reference something missing are no-ops that return None;
nothing here raises for an unknown product or line.
"""
import logging
from dataclasses import replace
from typing import Optional, Tuple

from django.conf import settings

from .choices import Zone
from .domain import OrderDraft, OrderLine, TableSnapshot
from .pricing import Totals, compute_totals

logger = logging.getLogger(__name__)


def default_zone() -> Zone:
    return Zone(getattr(settings, 'POS_DEFAULT_ZONE', Zone.TERRACE))


class OrderBuilder:
    """
    Line-item set of one draft order.

    With ``strict_zones`` the draft only ever holds a table of its own zone:
    selecting a table from another zone is refused and switching zone drops
    the selected table. Without it (the default) zone and table are
    independent and keeping them consistent is up to the caller.
    """

    def __init__(self, catalog, zone=None, strict_zones: Optional[bool] = None):
        self.catalog = catalog
        if strict_zones is None:
            strict_zones = getattr(settings, 'POS_STRICT_ZONES', False)
        self.strict_zones = strict_zones
        self.draft = OrderDraft(zone=Zone(zone) if zone is not None else default_zone())

    @property
    def lines(self) -> Tuple[OrderLine, ...]:
        return tuple(self.draft.lines)

    @property
    def zone(self) -> Zone:
        return self.draft.zone

    @property
    def table(self) -> Optional[TableSnapshot]:
        return self.draft.table

    def add_product(self, product_id: str) -> Optional[OrderLine]:
        """
        Add one unit of a catalog product

        A product already in the draft keeps the unit price it had when it was
        first added; only its quantity grows.

        Returns:
            The new or updated line, or None if the catalog has no such
            active product
        """
        product = self.catalog.get_product(product_id)
        if product is None:
            logger.info("Product %s not found in catalog, nothing added", product_id)
            return None

        index = self.draft.index_of(product.id)
        if index is None:
            line = OrderLine(
                product_id=product.id,
                product_name=product.name,
                quantity=1,
                unit_price=product.final_price,
            )
            self.draft.lines.append(line)
        else:
            current = self.draft.lines[index]
            line = replace(current, quantity=current.quantity + 1)
            self.draft.lines[index] = line
        return line

    def update_quantity(self, product_id: str, quantity: int) -> Optional[OrderLine]:
        """
        Set the quantity of a line; zero or less removes it

        Returns:
            The updated line, or None if it was removed or never existed
        """
        index = self.draft.index_of(product_id)
        if index is None:
            logger.debug("No line for product %s in draft", product_id)
            return None

        if quantity <= 0:
            del self.draft.lines[index]
            return None

        line = replace(self.draft.lines[index], quantity=int(quantity))
        self.draft.lines[index] = line
        return line

    def remove_product(self, product_id: str) -> None:
        self.update_quantity(product_id, 0)

    def select_table(self, table: Optional[TableSnapshot]) -> bool:
        if table is not None and self.strict_zones and table.zone != self.draft.zone:
            logger.info(
                "Table %s belongs to zone %s, draft is in %s",
                table.number, table.zone, self.draft.zone
            )
            return False
        self.draft.table = table
        return True

    def set_zone(self, zone) -> None:
        self.draft.zone = Zone(zone)
        table = self.draft.table
        if self.strict_zones and table is not None and table.zone != self.draft.zone:
            self.draft.table = None

    def compute_totals(self) -> Totals:
        return compute_totals(self.draft.lines)

    def reset(self) -> None:
        """Replace the draft with an empty one in the same zone"""
        self.draft = OrderDraft(zone=self.draft.zone)
