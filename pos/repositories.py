"""
Collaborators of the POS core: product catalog, table registry and order
history.

Each exposes the narrow read/write surface the core needs and speaks in the
value types of ``pos.domain``. The ORM-backed classes are the default
implementations; ``StaticProductCatalog`` serves a fixed product list.
"""
import logging
from typing import Dict, Iterable, List, Optional

from .choices import TableStatus, Zone
from .domain import CatalogProduct, OrderRecord, TableSnapshot
from .models import Order, OrderItem, Product, Table
from .serializers import CatalogProductSerializer

logger = logging.getLogger(__name__)


class ProductRepository:
    """Catalog backed by the Product table"""

    def get_active_products(self) -> List[CatalogProduct]:
        return [
            product.to_catalog_product()
            for product in Product.objects.filter(active=True).order_by('name')
        ]

    def get_product(self, product_id: str) -> Optional[CatalogProduct]:
        """
        Look up an active product

        Returns:
            The product snapshot, or None if the id is unknown or inactive
        """
        product = Product.objects.filter(pk=product_id, active=True).first()
        if product is None:
            return None
        return product.to_catalog_product()


class StaticProductCatalog:
    """Catalog over a fixed list of product payloads"""

    def __init__(self, products: Iterable[dict]):
        serializer = CatalogProductSerializer(data=list(products), many=True)
        serializer.is_valid(raise_exception=True)
        self._products: Dict[str, CatalogProduct] = {
            data['id']: CatalogProduct(**data) for data in serializer.validated_data
        }

    def get_active_products(self) -> List[CatalogProduct]:
        return [product for product in self._products.values() if product.active]

    def get_product(self, product_id: str) -> Optional[CatalogProduct]:
        product = self._products.get(product_id)
        if product is None or not product.active:
            return None
        return product


class TableRepository:

    def get_tables_by_zone(self, zone) -> List[TableSnapshot]:
        return [table.to_snapshot() for table in Table.objects.filter(zone=Zone(zone))]

    def get_table(self, table_id: str) -> Optional[TableSnapshot]:
        table = Table.objects.filter(pk=table_id).first()
        if table is None:
            return None
        return table.to_snapshot()

    def update_table_status(self, table_id: str, status, current_order: Optional[str] = None) -> TableSnapshot:
        """
        Set a table's status and current order reference

        Raises:
            Table.DoesNotExist: if the table is no longer registered
        """
        table = Table.objects.get(pk=table_id)
        table.status = TableStatus(status)
        table.current_order = current_order
        table.save(update_fields=['status', 'current_order'])
        logger.debug("Table %s set to %s", table_id, table.status)
        return table.to_snapshot()


class OrderRepository:
    """Order history backed by the Order and OrderItem tables"""

    def create_order(self, record: OrderRecord) -> OrderRecord:
        order = Order.objects.create(
            id=record.id,
            table_id=record.table_id,
            zone=record.zone,
            subtotal=record.subtotal,
            tax_amount=record.tax_amount,
            total=record.total,
            status=record.status,
            waiter_id=record.waiter_id,
            waiter_name=record.waiter_name,
            created_at=record.created_at,
            completed_at=record.completed_at,
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                line_index=index,
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total=line.total,
            )
            for index, line in enumerate(record.lines)
        ])
        return record

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            return None
        return order.to_record()

    def list_orders(self, waiter_id: Optional[str] = None) -> List[OrderRecord]:
        orders = Order.objects.order_by('created_at')
        if waiter_id is not None:
            orders = orders.filter(waiter_id=waiter_id)
        return [order.to_record() for order in orders]
