from django.db import models


class Zone(models.TextChoices):
	BAR = 'bar', 'Bar'
	TERRACE = 'terrace', 'Terrace'


class TableStatus(models.TextChoices):
	AVAILABLE = 'available', 'Available'
	OCCUPIED = 'occupied', 'Occupied'
	RESERVED = 'reserved', 'Reserved'


class OrderStatus(models.TextChoices):
	PENDING = 'pending', 'Pending'
	COMPLETED = 'completed', 'Completed'
	CANCELLED = 'cancelled', 'Cancelled'
