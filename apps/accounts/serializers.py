from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Shop


class UserSerializer(serializers.ModelSerializer):
    """Admin account as shown on the profile page."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'username',
            'role',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'role', 'created_at', 'last_login']

    def validate_email(self, value):
        return value.strip().lower()


class LoginSerializer(serializers.Serializer):
    """Serializer for admin login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
    captcha_token = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text='reCAPTCHA response token from the login form'
    )


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer for password change."""

    current_password = serializers.CharField(
        required=True,
        style={'input_type': 'password'}
    )
    new_password = serializers.CharField(
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )


class ShopSerializer(serializers.ModelSerializer):
    """Shop profile."""

    class Meta:
        model = Shop
        fields = ['name', 'phone', 'email', 'address', 'established', 'license']
