from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from pos.choices import Zone
from pos.models import Product, Role, StaffMember, Table
from pos.serializers import TableSerializer

ROLES = ['Administrador', 'Camarero/a']

STAFF = [
    {"name": "Admin", "role": "Administrador"},
    {"name": "María García", "role": "Camarero/a"},
    {"name": "Juan López", "role": "Camarero/a"},
]

PRODUCTS = [
    {
        "name": "Café Solo",
        "category_name": "Bebidas Calientes",
        "base_price": Decimal("1.20"),
        "vat_rate": Decimal("10"),
        "cost_price": Decimal("0.60"),
        "sku": "CAFE001",
        "stock": 100,
        "min_stock": 10,
    },
    {
        "name": "Cerveza",
        "category_name": "Bebidas Frías",
        "base_price": Decimal("2.50"),
        "vat_rate": Decimal("10"),
        "cost_price": Decimal("1.20"),
        "sku": "CERVEZA001",
        "stock": 50,
        "min_stock": 5,
    },
    {
        "name": "Tostada Jamón",
        "category_name": "Comida",
        "base_price": Decimal("3.50"),
        "vat_rate": Decimal("10"),
        "cost_price": Decimal("1.75"),
        "sku": "TOS001",
        "stock": 30,
        "min_stock": 5,
    },
]

TABLES = [
    {"number": 1, "zone": Zone.TERRACE, "seats": 4},
    {"number": 2, "zone": Zone.TERRACE, "seats": 2},
    {"number": 3, "zone": Zone.TERRACE, "seats": 6},
    {"number": 1, "zone": Zone.BAR, "seats": 2},
    {"number": 2, "zone": Zone.BAR, "seats": 2},
]


class Command(BaseCommand):
    help = 'Seed the database with roles, staff, products and tables'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing catalog, tables and staff before seeding',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing catalog, tables and staff...')
            Product.objects.all().delete()
            Table.objects.all().delete()
            StaffMember.objects.all().delete()
            Role.objects.all().delete()
            self.stdout.write(self.style.SUCCESS('Successfully cleared seed data'))

        for name in ROLES:
            Role.objects.get_or_create(name=name)

        for member in STAFF:
            StaffMember.objects.get_or_create(name=member['name'], defaults={'role': member['role']})

        created_products = 0
        for product_data in PRODUCTS:
            product, created = Product.objects.get_or_create(
                name=product_data['name'],
                defaults={key: value for key, value in product_data.items() if key != 'name'}
            )
            if created:
                created_products += 1
                self.stdout.write(
                    f"Created: {product.name} - €{product.final_price:.2f} (VAT: {product.vat_rate}%)"
                )
            else:
                self.stdout.write(f"Already exists: {product.name}")

        created_tables = 0
        for table_data in TABLES:
            if Table.objects.filter(number=table_data['number'], zone=table_data['zone']).exists():
                continue
            serializer = TableSerializer(data=table_data)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            created_tables += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'\nTotal new products created: {created_products}, new tables created: {created_tables}'
            )
        )

        self.stdout.write("\nActive catalog:")
        self.stdout.write("-" * 50)
        for product in Product.objects.filter(active=True).order_by('name'):
            self.stdout.write(
                f"{product.name:20s} | €{product.final_price:6.2f} | stock: {product.stock:4d}"
            )
