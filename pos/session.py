"""
State of one operator's POS screen.

A session owns the operator identity, the order builder with its draft, and
the finalizer. Sessions share nothing; each operator gets their own.
"""
import logging
from typing import List, Optional

from .builder import OrderBuilder
from .domain import ActingUser, CatalogProduct, FinalizedOrder, TableSnapshot
from .finalizer import OrderFinalizer
from .identity import resolve_acting_user
from .repositories import ProductRepository, TableRepository

logger = logging.getLogger(__name__)


class PosSession:

    def __init__(self, acting_user: ActingUser, catalog=None, tables=None, orders=None,
                 zone=None, strict_zones: Optional[bool] = None):
        self.acting_user = acting_user
        self.catalog = catalog if catalog is not None else ProductRepository()
        self.table_registry = tables if tables is not None else TableRepository()
        self.builder = OrderBuilder(self.catalog, zone=zone, strict_zones=strict_zones)
        self.finalizer = OrderFinalizer(
            orders=orders,
            tables=self.table_registry,
            strict_zones=self.builder.strict_zones,
        )

    @classmethod
    def open(cls, staff_id, **kwargs):
        """Start a session for a staff member; raises IdentityError if they cannot operate"""
        acting_user = resolve_acting_user(staff_id)
        logger.info("POS session opened for %s", acting_user.name)
        return cls(acting_user, **kwargs)

    @property
    def draft(self):
        return self.builder.draft

    def products(self) -> List[CatalogProduct]:
        return self.catalog.get_active_products()

    def tables(self) -> List[TableSnapshot]:
        return self.table_registry.get_tables_by_zone(self.builder.zone)

    def complete_order(self) -> Optional[FinalizedOrder]:
        """Finalize the current draft and start a fresh one on success"""
        finalized = self.finalizer.finalize(self.builder.draft, self.acting_user)
        if finalized is not None:
            self.builder.reset()
        return finalized

    def cancel_order(self) -> None:
        if not self.builder.draft.is_empty:
            logger.info("Draft with %d lines cancelled by %s",
                        len(self.builder.draft.lines), self.acting_user.name)
        self.builder.reset()
