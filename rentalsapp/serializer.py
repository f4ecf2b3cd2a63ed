from django.core.exceptions import ObjectDoesNotExist
from rest_framework import serializers

from usersapp.models import User
from watchesapp.serializer import WatchSummarySerializer
from .models import Rental


class UserSummarySerializer(serializers.ModelSerializer):

    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name', 'email']


class RentalSerializer(serializers.ModelSerializer):

    duration_days = serializers.IntegerField(read_only=True)

    class Meta:
        model = Rental
        fields = [
            'id',
            'user',
            'watch',
            'rental_days',
            'rental_start_date',
            'rental_end_date',
            'duration_days',
            'total_rental_price',
            'rental_status',
            'collection_mode',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class RentalDetailSerializer(RentalSerializer):
    """Rental with its user and watch resolved to display fields."""

    user = UserSummarySerializer(read_only=True)
    watch = serializers.SerializerMethodField()

    def get_watch(self, rental):
        try:
            watch = rental.watch
        except ObjectDoesNotExist:
            return {'id': rental.watch_id, 'model': None, 'year': None, 'brand': None}
        return WatchSummarySerializer(watch).data
