import uuid

from django.db import models

from .choices import OrderStatus, TableStatus, Zone
from .domain import CatalogProduct, OrderLine, OrderRecord, TableSnapshot
from .pricing import round2


def generate_id():
	return uuid.uuid4().hex


class Product(models.Model):
	id = models.CharField(primary_key=True, max_length=32, default=generate_id, editable=False)
	name = models.CharField(max_length=100)
	description = models.TextField(blank=True)
	category_name = models.CharField(max_length=100, blank=True)
	base_price = models.DecimalField(max_digits=10, decimal_places=2)
	vat_rate = models.DecimalField(max_digits=5, decimal_places=2)
	final_price = models.DecimalField(max_digits=10, decimal_places=2, editable=False)
	cost_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
	sku = models.CharField(max_length=50, blank=True)
	barcode = models.CharField(max_length=50, blank=True)
	stock = models.IntegerField(default=0)
	min_stock = models.IntegerField(default=0)
	active = models.BooleanField(default=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	def save(self, *args, **kwargs):
		# final price is always derived from base price and VAT rate
		self.final_price = round2(round2(self.base_price) * (1 + round2(self.vat_rate) / 100))
		super().save(*args, **kwargs)

	def to_catalog_product(self):
		return CatalogProduct(
			id=self.id,
			name=self.name,
			final_price=self.final_price,
			stock=self.stock,
			active=self.active,
		)

	def __str__(self):
		return self.name


class Table(models.Model):
	id = models.CharField(primary_key=True, max_length=32, default=generate_id, editable=False)
	number = models.PositiveIntegerField()
	zone = models.CharField(max_length=10, choices=Zone.choices)
	seats = models.PositiveIntegerField()
	status = models.CharField(max_length=10, choices=TableStatus.choices, default=TableStatus.AVAILABLE)
	current_order = models.CharField(max_length=32, null=True, blank=True)

	class Meta:
		ordering = ['zone', 'number']

	def to_snapshot(self):
		return TableSnapshot(
			id=self.id,
			number=self.number,
			zone=Zone(self.zone),
			seats=self.seats,
			status=TableStatus(self.status),
			current_order=self.current_order,
		)

	def __str__(self):
		return f"Table {self.number} ({self.zone})"


class Order(models.Model):
	id = models.CharField(primary_key=True, max_length=32, default=generate_id, editable=False)
	table_id = models.CharField(max_length=32, null=True, blank=True)
	zone = models.CharField(max_length=10, choices=Zone.choices)
	subtotal = models.DecimalField(max_digits=10, decimal_places=2)
	tax_amount = models.DecimalField(max_digits=10, decimal_places=2)
	total = models.DecimalField(max_digits=10, decimal_places=2)
	status = models.CharField(max_length=10, choices=OrderStatus.choices, default=OrderStatus.PENDING)
	waiter_id = models.CharField(max_length=32)
	waiter_name = models.CharField(max_length=100)
	created_at = models.DateTimeField()
	completed_at = models.DateTimeField(null=True, blank=True)

	def to_record(self):
		lines = tuple(
			OrderLine(
				product_id=item.product_id,
				product_name=item.product_name,
				quantity=item.quantity,
				unit_price=item.unit_price,
			)
			for item in self.items.order_by('line_index')
		)
		return OrderRecord(
			id=self.id,
			table_id=self.table_id,
			zone=Zone(self.zone),
			lines=lines,
			subtotal=self.subtotal,
			tax_amount=self.tax_amount,
			total=self.total,
			status=OrderStatus(self.status),
			waiter_id=self.waiter_id,
			waiter_name=self.waiter_name,
			created_at=self.created_at,
			completed_at=self.completed_at,
		)

	def __str__(self):
		return f"Order {self.id} ({self.status})"


class OrderItem(models.Model):
	order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
	line_index = models.PositiveIntegerField()
	product_id = models.CharField(max_length=32)
	product_name = models.CharField(max_length=100)
	quantity = models.PositiveIntegerField()
	unit_price = models.DecimalField(max_digits=10, decimal_places=2)
	total = models.DecimalField(max_digits=10, decimal_places=2)

	def __str__(self):
		return f"{self.quantity} x {self.product_name} for Order {self.order_id}"


class Role(models.Model):
	name = models.CharField(max_length=50, unique=True)

	def __str__(self):
		return self.name


class StaffMember(models.Model):
	id = models.CharField(primary_key=True, max_length=32, default=generate_id, editable=False)
	name = models.CharField(max_length=100)
	role = models.CharField(max_length=50)
	active = models.BooleanField(default=True)

	def __str__(self):
		return f"{self.name} ({self.role})"
