from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
import uuid


# Reserved for anonymized accounts; users cannot pick it
DELETED_PSEUDONYM_PREFIX = 'deleted-'


class UserManager(BaseUserManager):
    """Custom user manager for pseudonym-based authentication."""

    def create_user(self, pseudonym, email, password=None, **extra_fields):
        if not pseudonym:
            raise ValueError('Pseudonym is required')
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(pseudonym=pseudonym, email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, pseudonym, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(pseudonym, email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Group ledger user, identified by a unique pseudonym."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    pseudonym = models.CharField(unique=True, max_length=50, db_index=True)
    email = models.EmailField(unique=True, max_length=255)
    firstname = models.CharField(max_length=100, blank=True)
    lastname = models.CharField(max_length=100, blank=True)
    iban = models.CharField(max_length=34, blank=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    # Set when the account is deleted and anonymized
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'pseudonym'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['email']

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]

    def __str__(self):
        return self.pseudonym

    def get_display_name(self):
        """Return the name shown next to balances and refunds."""
        return self.pseudonym

    def anonymize(self):
        """
        Scrub personal data while keeping the row.

        Expenses and refund shares keep pointing at the anonymized user, so
        balances stay zero-sum and a display name can still be resolved.
        """
        self.pseudonym = f"{DELETED_PSEUDONYM_PREFIX}{self.id.hex}"
        self.email = f"deleted_{self.id}@anonymized.local"
        self.firstname = ''
        self.lastname = ''
        self.iban = ''
        self.is_active = False
        self.deleted_at = timezone.now()
        self.set_unusable_password()
        self.save()
