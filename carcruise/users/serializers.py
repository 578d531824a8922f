from django.contrib.auth.password_validation import validate_password
from django.core import exceptions as django_exc
from rest_framework import serializers

from .models import CustomUser


class AccountSerializer(serializers.ModelSerializer):
    """
    The signed-in account as returned by register and `me`.
    Email is the login and cannot be changed here.
    """
    phone_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=30)
    listings_count = serializers.SerializerMethodField()
    bookings_count = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = (
            'id', 'email', 'first_name', 'last_name', 'phone_number',
            'listings_count', 'bookings_count',
        )
        read_only_fields = ('id', 'email')

    def get_listings_count(self, obj) -> int:
        return obj.listings.count()

    def get_bookings_count(self, obj) -> int:
        # bookings made as a renter
        return obj.bookings.count()


class RegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    phone_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=30)

    class Meta:
        model = CustomUser
        fields = ('email', 'password', 'first_name', 'last_name', 'phone_number')

    def validate_password(self, value):
        try:
            validate_password(value)
        except django_exc.ValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        # an empty phone is stored as NULL
        validated_data['phone_number'] = validated_data.get('phone_number') or None
        return CustomUser.objects.create_user(password=password, **validated_data)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
