from rest_framework import serializers
from .models import Brand, Watch, CONDITIONS, MIN_WATCH_YEAR, current_year, normalize_condition


class BrandSerializer(serializers.ModelSerializer):

    class Meta:
        model = Brand
        fields = [
            'id',
            'brand_name',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_brand_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Brand name is required')
        return value


class BrandSummarySerializer(serializers.ModelSerializer):

    class Meta:
        model = Brand
        fields = ['id', 'brand_name']


class WatchSerializer(serializers.ModelSerializer):

    brand = BrandSummarySerializer(read_only=True)
    brand_id = serializers.PrimaryKeyRelatedField(
        queryset=Brand.objects.all(),
        source='brand',
        write_only=True
    )
    condition = serializers.CharField(required=False)
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Watch
        fields = [
            'id',
            'brand',
            'brand_id',
            'model',
            'year',
            'rental_day_price',
            'condition',
            'quantity',
            'in_stock',
            'description',
            'image_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_model(self, value):
        return value.strip()

    def validate_year(self, value):
        if len(str(value)) != 4:
            raise serializers.ValidationError('Year must be a 4-digit number')
        if value < MIN_WATCH_YEAR or value > current_year():
            raise serializers.ValidationError(
                f'Year must be between {MIN_WATCH_YEAR} and {current_year()}'
            )
        return value

    def validate_condition(self, value):
        value = normalize_condition(value)
        if value not in CONDITIONS:
            raise serializers.ValidationError(
                f"Condition must be one of: {', '.join(CONDITIONS)}"
            )
        return value


class WatchSummarySerializer(serializers.ModelSerializer):

    brand = serializers.CharField(source='brand.brand_name', read_only=True)

    class Meta:
        model = Watch
        fields = ['id', 'model', 'year', 'brand']
