from rest_framework import serializers

from .choices import OrderStatus, TableStatus, Zone
from .models import Table


class CatalogProductSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=32)
    name = serializers.CharField(max_length=100)
    final_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0,
        help_text='Unit price including VAT (e.g., 1.32)'
    )
    stock = serializers.IntegerField(required=False, allow_null=True, default=None)
    active = serializers.BooleanField(default=True)


class TableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['id', 'number', 'zone', 'seats', 'status', 'current_order']
        read_only_fields = ['id']

    def validate_number(self, value):
        if value <= 0:
            raise serializers.ValidationError("number must be a positive integer")
        return value

    def validate_seats(self, value):
        if value <= 0:
            raise serializers.ValidationError("seats must be a positive integer")
        return value


class OrderLineSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    product_name = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    total = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True,
        help_text='quantity x unit_price'
    )


class OrderRecordSerializer(serializers.Serializer):
    """Payload of a completed order as handed to the order history"""
    id = serializers.CharField()
    table_id = serializers.CharField(allow_null=True)
    zone = serializers.ChoiceField(choices=Zone.choices)
    lines = OrderLineSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    tax_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    waiter_id = serializers.CharField()
    waiter_name = serializers.CharField()
    created_at = serializers.DateTimeField()
    completed_at = serializers.DateTimeField(allow_null=True)


class TableUpdateSerializer(serializers.Serializer):
    table_id = serializers.CharField()
    status = serializers.ChoiceField(choices=TableStatus.choices)
    current_order = serializers.CharField(allow_null=True)


def finalized_order_payload(finalized):
    """Render a FinalizedOrder as primitive data"""
    return {
        'order': OrderRecordSerializer(finalized.order).data,
        'table_update': (
            TableUpdateSerializer(finalized.table_update).data
            if finalized.table_update is not None else None
        ),
    }
