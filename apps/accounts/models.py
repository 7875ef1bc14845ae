from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class ShopRole(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    SUPER_ADMIN = 'super_admin', 'Super Admin'


class UserManager(BaseUserManager):
    """Manager for email-based shop admin accounts."""

    use_in_migrations = True

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email).lower()
        extra_fields.setdefault('username', email.split('@')[0])
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', ShopRole.SUPER_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Back-office account. Every account belongs to the single shop."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    username = models.CharField(max_length=100, unique=True)
    role = models.CharField(
        max_length=20,
        choices=ShopRole.choices,
        default=ShopRole.ADMIN
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.email

    @property
    def is_shop_admin(self):
        return self.is_active and self.role in ShopRole.values


class Shop(models.Model):
    """The shop's public profile. A single row, created with defaults on first read."""

    name = models.CharField(max_length=200, default='Mojito Paradise')
    phone = models.CharField(max_length=30, default='+91 98765 43210')
    email = models.EmailField(default='contact@mojitoparadise.com')
    address = models.CharField(max_length=300, default='123 Beach Road, Goa 403001, India')
    established = models.CharField(max_length=10, default='2023')
    license = models.CharField(max_length=50, default='FSSAI-12345678901234')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shop'

    def __str__(self):
        return self.name
