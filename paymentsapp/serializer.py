from rest_framework import serializers
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Payment
        fields = [
            'id',
            'rental',
            'amount',
            'payment_status',
            'payment_method',
            'transaction_id',
            'payment_date',
            'comment',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
