from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from .models import Address, User


class AddressSerializer(serializers.ModelSerializer):

    state = serializers.CharField(max_length=3)

    class Meta:
        model = Address
        fields = [
            'id',
            'street_address',
            'suburb',
            'state',
            'postcode',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_state(self, value):
        value = value.strip().upper()
        states = [code for code, _ in Address.STATE_CHOICES]
        if value not in states:
            raise serializers.ValidationError(f"State must be one of: {', '.join(states)}")
        return value

    def validate_postcode(self, value):
        return value.strip()


class UserSerializer(serializers.ModelSerializer):

    address = AddressSerializer(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'first_name',
            'last_name',
            'email',
            'phone_number',
            'role',
            'address',
            'created_at',
        ]
        read_only_fields = ['role', 'created_at']


class RegisterSerializer(serializers.ModelSerializer):

    # uniqueness is checked case-insensitively by the view
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = [
            'first_name',
            'last_name',
            'email',
            'phone_number',
            'password',
        ]

    def validate_email(self, value):
        return value.strip().lower()

    def validate_password(self, value):
        validate_password(value)
        return value

    def create(self, validated_data):
        return User.objects.create_user(**validated_data)


class ProfileUpdateSerializer(serializers.ModelSerializer):

    email = serializers.EmailField(required=False)
    password = serializers.CharField(write_only=True, required=False, min_length=8)

    class Meta:
        model = User
        fields = [
            'first_name',
            'last_name',
            'email',
            'phone_number',
            'password',
        ]

    def validate_email(self, value):
        return value.strip().lower()

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class RoleSerializer(serializers.Serializer):

    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)
