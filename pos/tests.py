from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework.exceptions import ValidationError

from .builder import OrderBuilder
from .choices import OrderStatus, TableStatus, Zone
from .domain import ActingUser, OrderDraft, OrderLine, TableSnapshot
from .finalizer import EMPTY_DRAFT, TABLE_ZONE_MISMATCH, OrderFinalizer
from .identity import IdentityError, resolve_acting_user
from .models import Order, OrderItem, Product, Role, StaffMember, Table
from .pricing import compute_totals, round2
from .repositories import OrderRepository, ProductRepository, StaticProductCatalog, TableRepository
from .serializers import finalized_order_payload
from .session import PosSession


FIXED_NOW = datetime(2026, 10, 19, 12, 30, tzinfo=dt_timezone.utc)


def make_catalog():
    return StaticProductCatalog([
        {'id': 'p1', 'name': 'Café Solo', 'final_price': '1.32'},
        {'id': 'p2', 'name': 'Cerveza', 'final_price': '3.00'},
        {'id': 'p3', 'name': 'Tostada Jamón', 'final_price': '4.00'},
        {'id': 'p4', 'name': 'Zumo', 'final_price': '2.00', 'active': False},
    ])


class PricingTests(SimpleTestCase):
    """Test tax and total arithmetic"""

    def test_round2_half_up(self):
        self.assertEqual(round2(Decimal('0.005')), Decimal('0.01'))
        self.assertEqual(round2(Decimal('0.004')), Decimal('0.00'))
        self.assertEqual(round2(1.325), Decimal('1.33'))

    def test_totals_apply_ten_percent_tax(self):
        """Test tax = round2(subtotal * 0.10) and total = subtotal + tax"""
        lines = [
            OrderLine('p2', 'Cerveza', 2, Decimal('3.00')),
            OrderLine('p3', 'Tostada Jamón', 1, Decimal('4.00')),
        ]
        totals = compute_totals(lines)

        self.assertEqual(totals.subtotal, Decimal('10.00'))
        self.assertEqual(totals.tax_amount, Decimal('1.00'))
        self.assertEqual(totals.total, Decimal('11.00'))

    def test_tax_rounds_to_cent(self):
        totals = compute_totals([OrderLine('x', 'Caramelo', 1, Decimal('0.05'))])

        self.assertEqual(totals.tax_amount, Decimal('0.01'))
        self.assertEqual(totals.total, Decimal('0.06'))

    def test_empty_lines_total_zero(self):
        totals = compute_totals([])

        self.assertEqual(totals.subtotal, Decimal('0.00'))
        self.assertEqual(totals.tax_amount, Decimal('0.00'))
        self.assertEqual(totals.total, Decimal('0.00'))

    @override_settings(POS_TAX_RATE=Decimal('0.21'))
    def test_tax_rate_comes_from_settings(self):
        totals = compute_totals([OrderLine('p3', 'Tostada Jamón', 1, Decimal('10.00'))])

        self.assertEqual(totals.tax_amount, Decimal('2.10'))
        self.assertEqual(totals.total, Decimal('12.10'))


class OrderBuilderTests(SimpleTestCase):
    """Test line management and derived totals of the draft"""

    def setUp(self):
        self.builder = OrderBuilder(make_catalog(), zone=Zone.TERRACE, strict_zones=False)

    def test_add_update_scenario(self):
        line = self.builder.add_product('p1')
        self.assertEqual(line.quantity, 1)
        self.assertEqual(line.total, Decimal('1.32'))

        line = self.builder.add_product('p1')
        self.assertEqual(line.quantity, 2)
        self.assertEqual(line.total, Decimal('2.64'))

        line = self.builder.update_quantity('p1', 5)
        self.assertEqual(line.total, Decimal('6.60'))

        totals = self.builder.compute_totals()
        self.assertEqual(totals.subtotal, Decimal('6.60'))
        self.assertEqual(totals.tax_amount, Decimal('0.66'))
        self.assertEqual(totals.total, Decimal('7.26'))

    def test_adding_same_product_merges_lines(self):
        self.builder.add_product('p2')
        self.builder.add_product('p2')

        self.assertEqual(len(self.builder.lines), 1)
        self.assertEqual(self.builder.lines[0].quantity, 2)

    def test_lines_keep_insertion_order(self):
        self.builder.add_product('p3')
        self.builder.add_product('p1')
        self.builder.add_product('p3')

        self.assertEqual([line.product_id for line in self.builder.lines], ['p3', 'p1'])

    def test_line_snapshots_name_and_price(self):
        line = self.builder.add_product('p3')

        self.assertEqual(line.product_name, 'Tostada Jamón')
        self.assertEqual(line.unit_price, Decimal('4.00'))

    def test_unknown_product_is_skipped(self):
        self.assertIsNone(self.builder.add_product('missing'))
        self.assertEqual(self.builder.lines, ())

    def test_inactive_product_is_skipped(self):
        self.assertIsNone(self.builder.add_product('p4'))
        self.assertTrue(self.builder.draft.is_empty)

    def test_update_quantity_zero_removes_line(self):
        self.builder.add_product('p1')
        self.builder.add_product('p2')

        self.assertIsNone(self.builder.update_quantity('p1', 0))
        self.assertEqual([line.product_id for line in self.builder.lines], ['p2'])

    def test_negative_quantity_removes_line(self):
        self.builder.add_product('p1')
        self.builder.update_quantity('p1', -3)

        self.assertEqual(self.builder.lines, ())

    def test_remove_product_equals_zero_quantity(self):
        other = OrderBuilder(make_catalog(), strict_zones=False)
        for builder in (self.builder, other):
            builder.add_product('p1')
            builder.add_product('p2')

        self.builder.remove_product('p1')
        other.update_quantity('p1', 0)

        self.assertEqual(self.builder.lines, other.lines)

    def test_update_missing_line_is_noop(self):
        self.builder.add_product('p1')

        self.assertIsNone(self.builder.update_quantity('p2', 4))
        self.builder.remove_product('p2')
        self.assertEqual(len(self.builder.lines), 1)

    def test_subtotal_always_matches_lines(self):
        """Test subtotal equals sum of quantity x unit price after every mutation"""
        operations = [
            ('add', 'p1'), ('add', 'p2'), ('add', 'p1'), ('qty', 'p2', 7),
            ('add', 'p3'), ('qty', 'p1', 0), ('add', 'p1'), ('qty', 'p3', 2),
        ]
        for operation in operations:
            if operation[0] == 'add':
                self.builder.add_product(operation[1])
            else:
                self.builder.update_quantity(operation[1], operation[2])

            expected = sum(
                (line.quantity * line.unit_price for line in self.builder.lines), Decimal('0')
            )
            self.assertEqual(self.builder.compute_totals().subtotal, expected)

    def test_select_and_clear_table(self):
        table = TableSnapshot(id='t1', number=1, zone=Zone.TERRACE, seats=4)

        self.assertTrue(self.builder.select_table(table))
        self.assertEqual(self.builder.table, table)

        self.builder.select_table(None)
        self.assertIsNone(self.builder.table)

    def test_relaxed_zone_switch_keeps_table_and_lines(self):
        table = TableSnapshot(id='t1', number=1, zone=Zone.TERRACE, seats=4)
        self.builder.select_table(table)
        self.builder.add_product('p1')

        self.builder.set_zone(Zone.BAR)

        self.assertEqual(self.builder.zone, Zone.BAR)
        self.assertEqual(self.builder.table, table)
        self.assertEqual(len(self.builder.lines), 1)

    def test_relaxed_accepts_table_from_other_zone(self):
        table = TableSnapshot(id='t4', number=1, zone=Zone.BAR, seats=2)

        self.assertTrue(self.builder.select_table(table))

    def test_set_zone_accepts_string_and_rejects_unknown(self):
        self.builder.set_zone('bar')
        self.assertEqual(self.builder.zone, Zone.BAR)

        with self.assertRaises(ValueError):
            self.builder.set_zone('kitchen')

    def test_reset_keeps_zone(self):
        self.builder.set_zone(Zone.BAR)
        self.builder.add_product('p1')
        self.builder.select_table(TableSnapshot(id='t4', number=1, zone=Zone.BAR, seats=2))

        self.builder.reset()

        self.assertTrue(self.builder.draft.is_empty)
        self.assertIsNone(self.builder.table)
        self.assertEqual(self.builder.zone, Zone.BAR)

    @override_settings(POS_DEFAULT_ZONE='bar')
    def test_default_zone_from_settings(self):
        self.assertEqual(OrderBuilder(make_catalog()).zone, Zone.BAR)


class StrictZoneTests(SimpleTestCase):
    """Test the strict zone policy"""

    def setUp(self):
        self.builder = OrderBuilder(make_catalog(), zone=Zone.TERRACE, strict_zones=True)
        self.terrace_table = TableSnapshot(id='t1', number=1, zone=Zone.TERRACE, seats=4)
        self.bar_table = TableSnapshot(id='t4', number=1, zone=Zone.BAR, seats=2)

    def test_refuses_table_from_other_zone(self):
        self.assertFalse(self.builder.select_table(self.bar_table))
        self.assertIsNone(self.builder.table)

    def test_zone_switch_clears_foreign_table(self):
        self.builder.select_table(self.terrace_table)
        self.builder.add_product('p1')

        self.builder.set_zone(Zone.BAR)

        self.assertIsNone(self.builder.table)
        self.assertEqual(len(self.builder.lines), 1)

    def test_zone_switch_to_same_zone_keeps_table(self):
        self.builder.select_table(self.terrace_table)
        self.builder.set_zone(Zone.TERRACE)

        self.assertEqual(self.builder.table, self.terrace_table)

    def test_finalizer_refuses_mismatched_draft(self):
        draft = OrderDraft(zone=Zone.TERRACE, table=self.bar_table,
                           lines=[OrderLine('p1', 'Café Solo', 1, Decimal('1.32'))])

        self.assertEqual(OrderFinalizer(strict_zones=True).validate(draft), TABLE_ZONE_MISMATCH)
        self.assertIsNone(OrderFinalizer(strict_zones=False).validate(draft))


class ProductCatalogTests(TestCase):
    """Test the catalog collaborators"""

    def setUp(self):
        self.coffee = Product.objects.create(
            name='Café Solo', base_price=Decimal('1.20'), vat_rate=Decimal('10'), stock=100
        )
        self.retired = Product.objects.create(
            name='Zumo', base_price=Decimal('2.00'), vat_rate=Decimal('10'), active=False
        )

    def test_final_price_includes_vat(self):
        self.assertEqual(self.coffee.final_price, Decimal('1.32'))

    def test_final_price_follows_base_price(self):
        self.coffee.base_price = Decimal('2.50')
        self.coffee.save()
        self.coffee.refresh_from_db()

        self.assertEqual(self.coffee.final_price, Decimal('2.75'))

    def test_repository_lists_only_active_products(self):
        products = ProductRepository().get_active_products()

        self.assertEqual([product.id for product in products], [self.coffee.id])

    def test_repository_hides_inactive_and_unknown(self):
        repository = ProductRepository()

        self.assertIsNone(repository.get_product(self.retired.id))
        self.assertIsNone(repository.get_product('p1'))
        self.assertEqual(repository.get_product(self.coffee.id).final_price, Decimal('1.32'))

    def test_price_change_does_not_touch_draft(self):
        """Test unit price stays snapshotted from the first add"""
        builder = OrderBuilder(ProductRepository(), strict_zones=False)
        builder.add_product(self.coffee.id)

        self.coffee.base_price = Decimal('2.00')
        self.coffee.save()
        line = builder.add_product(self.coffee.id)

        self.assertEqual(line.unit_price, Decimal('1.32'))
        self.assertEqual(line.quantity, 2)
        self.assertEqual(line.total, Decimal('2.64'))

    def test_builder_never_decrements_stock(self):
        builder = OrderBuilder(ProductRepository(), strict_zones=False)
        builder.add_product(self.coffee.id)
        builder.update_quantity(self.coffee.id, 9)

        self.coffee.refresh_from_db()
        self.assertEqual(self.coffee.stock, 100)

    def test_static_catalog_rejects_bad_payload(self):
        with self.assertRaises(ValidationError):
            StaticProductCatalog([{'id': 'p1', 'name': 'Café Solo', 'final_price': 'free'}])


class OrderFinalizerTests(TestCase):
    """Test turning drafts into completed orders"""

    def setUp(self):
        self.user = ActingUser(id='u2', name='María García', role='Camarero/a')
        self.table = Table.objects.create(
            number=1, zone=Zone.TERRACE, seats=4,
            status=TableStatus.OCCUPIED, current_order='previous'
        )
        self.finalizer = OrderFinalizer(strict_zones=False, clock=lambda: FIXED_NOW)
        self.builder = OrderBuilder(make_catalog(), zone=Zone.TERRACE, strict_zones=False)

    def fill_draft(self):
        # 2 x 3.00 + 1 x 4.00 = 10.00
        self.builder.add_product('p2')
        self.builder.add_product('p2')
        self.builder.add_product('p3')

    def test_empty_draft_is_not_finalized(self):
        draft = self.builder.draft

        self.assertEqual(self.finalizer.validate(draft), EMPTY_DRAFT)
        self.assertIsNone(self.finalizer.finalize(draft, self.user))
        self.assertEqual(Order.objects.count(), 0)

    def test_finalize_releases_table(self):
        self.fill_draft()
        self.builder.select_table(self.table.to_snapshot())

        finalized = self.finalizer.finalize(self.builder.draft, self.user)

        self.assertEqual(finalized.order.total, Decimal('11.00'))
        self.assertEqual(finalized.order.status, OrderStatus.COMPLETED)
        self.assertEqual(finalized.table_update.table_id, self.table.id)
        self.assertEqual(finalized.table_update.status, TableStatus.AVAILABLE)
        self.assertIsNone(finalized.table_update.current_order)

        self.table.refresh_from_db()
        self.assertEqual(self.table.status, TableStatus.AVAILABLE)
        self.assertIsNone(self.table.current_order)

    def test_reserved_table_is_released_too(self):
        self.table.status = TableStatus.RESERVED
        self.table.save()
        self.fill_draft()
        self.builder.select_table(self.table.to_snapshot())

        self.finalizer.finalize(self.builder.draft, self.user)

        self.table.refresh_from_db()
        self.assertEqual(self.table.status, TableStatus.AVAILABLE)

    def test_order_fields(self):
        self.fill_draft()
        self.builder.select_table(self.table.to_snapshot())

        order = self.finalizer.finalize(self.builder.draft, self.user).order

        self.assertEqual(order.subtotal, Decimal('10.00'))
        self.assertEqual(order.tax_amount, Decimal('1.00'))
        self.assertEqual(order.table_id, self.table.id)
        self.assertEqual(order.zone, Zone.TERRACE)
        self.assertEqual(order.waiter_id, 'u2')
        self.assertEqual(order.waiter_name, 'María García')
        self.assertEqual(order.created_at, FIXED_NOW)
        self.assertEqual(order.completed_at, FIXED_NOW)
        self.assertEqual(order.total_quantity, 3)

    def test_order_is_persisted_with_lines(self):
        self.fill_draft()

        order = self.finalizer.finalize(self.builder.draft, self.user).order

        stored = OrderRepository().get_order(order.id)
        self.assertEqual(stored.lines, order.lines)
        self.assertEqual(stored.total, Decimal('11.00'))
        self.assertEqual(stored.status, OrderStatus.COMPLETED)
        self.assertEqual(OrderItem.objects.filter(order_id=order.id).count(), 2)

    def test_without_table_no_update(self):
        self.fill_draft()

        finalized = self.finalizer.finalize(self.builder.draft, self.user)

        self.assertIsNone(finalized.order.table_id)
        self.assertIsNone(finalized.table_update)

    def test_order_ids_are_unique(self):
        self.fill_draft()
        first = self.finalizer.finalize(self.builder.draft, self.user).order
        second = self.finalizer.finalize(self.builder.draft, self.user).order

        self.assertNotEqual(first.id, second.id)

    def test_finalize_leaves_draft_untouched(self):
        self.fill_draft()
        self.builder.select_table(self.table.to_snapshot())
        lines = self.builder.lines

        self.finalizer.finalize(self.builder.draft, self.user)

        self.assertEqual(self.builder.lines, lines)
        self.assertIsNotNone(self.builder.table)

    def test_table_update_failure_rolls_back_order(self):
        self.fill_draft()
        self.builder.select_table(self.table.to_snapshot())
        self.table.delete()

        with self.assertRaises(Table.DoesNotExist):
            self.finalizer.finalize(self.builder.draft, self.user)

        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderItem.objects.count(), 0)

    def test_payload(self):
        self.fill_draft()
        self.builder.select_table(self.table.to_snapshot())

        payload = finalized_order_payload(self.finalizer.finalize(self.builder.draft, self.user))

        self.assertEqual(payload['order']['total'], '11.00')
        self.assertEqual(payload['order']['zone'], 'terrace')
        self.assertEqual(payload['order']['status'], 'completed')
        self.assertEqual(payload['order']['lines'][0]['total'], '6.00')
        self.assertEqual(payload['table_update']['status'], 'available')
        self.assertIsNone(payload['table_update']['current_order'])


class IdentityTests(TestCase):
    """Test resolving the acting user"""

    def setUp(self):
        Role.objects.create(name='Camarero/a')
        self.waiter = StaffMember.objects.create(name='Juan López', role='Camarero/a')

    def test_resolves_active_staff(self):
        user = resolve_acting_user(self.waiter.pk)

        self.assertEqual(user, ActingUser(id=self.waiter.pk, name='Juan López', role='Camarero/a'))

    def test_unknown_staff(self):
        with self.assertRaises(IdentityError):
            resolve_acting_user('nobody')

    def test_inactive_staff(self):
        self.waiter.active = False
        self.waiter.save()

        with self.assertRaises(IdentityError):
            resolve_acting_user(self.waiter.pk)

    def test_unregistered_role(self):
        cook = StaffMember.objects.create(name='Pepe', role='Cocinero')

        with self.assertRaises(IdentityError):
            resolve_acting_user(cook.pk)


class PosSessionTests(TestCase):
    """Test the session-scoped order workflow"""

    def setUp(self):
        Role.objects.create(name='Camarero/a')
        self.waiter = StaffMember.objects.create(name='María García', role='Camarero/a')
        self.terrace_table = Table.objects.create(
            number=1, zone=Zone.TERRACE, seats=4, status=TableStatus.OCCUPIED
        )
        self.bar_table = Table.objects.create(number=1, zone=Zone.BAR, seats=2)
        self.session = PosSession.open(
            self.waiter.pk, catalog=make_catalog(), zone=Zone.TERRACE, strict_zones=False
        )

    def test_tables_follow_zone(self):
        self.assertEqual([table.id for table in self.session.tables()], [self.terrace_table.id])

        self.session.builder.set_zone(Zone.BAR)
        self.assertEqual([table.id for table in self.session.tables()], [self.bar_table.id])

    def test_products_are_active_catalog(self):
        self.assertEqual([product.id for product in self.session.products()], ['p1', 'p2', 'p3'])

    def test_complete_resets_draft(self):
        self.session.builder.add_product('p1')
        self.session.builder.select_table(self.terrace_table.to_snapshot())

        finalized = self.session.complete_order()

        self.assertEqual(finalized.order.waiter_id, self.waiter.pk)
        self.assertTrue(self.session.draft.is_empty)
        self.assertIsNone(self.session.draft.table)
        self.assertEqual(self.session.draft.zone, Zone.TERRACE)

    def test_complete_empty_draft(self):
        self.assertIsNone(self.session.complete_order())
        self.assertEqual(Order.objects.count(), 0)

    def test_persistence_failure_keeps_draft(self):
        self.session.builder.add_product('p1')
        self.session.builder.add_product('p2')
        self.session.builder.select_table(self.terrace_table.to_snapshot())
        lines = self.session.builder.lines

        with mock.patch.object(OrderRepository, 'create_order', side_effect=DatabaseError('disk full')):
            with self.assertRaises(DatabaseError):
                self.session.complete_order()

        self.assertEqual(self.session.builder.lines, lines)
        self.assertEqual(self.session.draft.table.id, self.terrace_table.id)
        self.terrace_table.refresh_from_db()
        self.assertEqual(self.terrace_table.status, TableStatus.OCCUPIED)

    def test_cancel_discards_draft(self):
        self.session.builder.add_product('p1')
        self.session.builder.select_table(self.terrace_table.to_snapshot())

        self.session.cancel_order()

        self.assertTrue(self.session.draft.is_empty)
        self.assertIsNone(self.session.draft.table)
        self.assertEqual(Order.objects.count(), 0)

    def test_orders_listed_per_waiter(self):
        self.session.builder.add_product('p1')
        self.session.complete_order()
        self.session.builder.add_product('p2')
        self.session.complete_order()

        orders = OrderRepository().list_orders(waiter_id=self.waiter.pk)
        self.assertEqual(len(orders), 2)
        self.assertEqual(OrderRepository().list_orders(waiter_id='other'), [])

    def test_open_rejects_unknown_staff(self):
        with self.assertRaises(IdentityError):
            PosSession.open('nobody', catalog=make_catalog())


class TableRepositoryTests(TestCase):

    def test_update_table_status(self):
        table = Table.objects.create(number=2, zone=Zone.BAR, seats=2)

        snapshot = TableRepository().update_table_status(table.id, TableStatus.OCCUPIED, 'abc')

        self.assertEqual(snapshot.status, TableStatus.OCCUPIED)
        self.assertEqual(snapshot.current_order, 'abc')
        table.refresh_from_db()
        self.assertEqual(table.status, 'occupied')

    def test_get_table(self):
        table = Table.objects.create(number=3, zone=Zone.TERRACE, seats=6)

        self.assertEqual(TableRepository().get_table(table.id).seats, 6)
        self.assertIsNone(TableRepository().get_table('missing'))


class SeedCatalogCommandTests(TestCase):

    def test_seed_is_idempotent(self):
        call_command('seed_catalog', stdout=StringIO())
        call_command('seed_catalog', stdout=StringIO())

        self.assertEqual(Product.objects.count(), 3)
        self.assertEqual(Table.objects.count(), 5)
        self.assertEqual(Role.objects.count(), 2)
        self.assertEqual(StaffMember.objects.count(), 3)
        self.assertEqual(Product.objects.get(name='Café Solo').final_price, Decimal('1.32'))
        self.assertEqual(Table.objects.filter(zone=Zone.BAR).count(), 2)

    def test_clear(self):
        call_command('seed_catalog', stdout=StringIO())
        Product.objects.create(name='Extra', base_price=Decimal('1.00'), vat_rate=Decimal('10'))

        call_command('seed_catalog', '--clear', stdout=StringIO())

        self.assertEqual(Product.objects.count(), 3)
