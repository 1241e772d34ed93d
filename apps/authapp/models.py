import uuid

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from model_utils import FieldTracker

from apps.authapp.constants import (
    MANAGEMENT_ROLES,
    ROLE_ADMIN,
    ROLE_CUSTOMER_SERVICE,
    ROLE_MANAGER,
    ROLE_SALES,
    ROLE_TECHNICIAN,
)
from apps.authapp.managers import UserManager
from apps.authapp.validators import validate_phone_number


class User(AbstractBaseUser, PermissionsMixin):
    """
    Shop staff account. Customers do not log in; they are plain records.
    """

    ROLE_CHOICES = (
        (ROLE_ADMIN, _("Admin")),
        (ROLE_MANAGER, _("Manager")),
        (ROLE_TECHNICIAN, _("Technician")),
        (ROLE_SALES, _("Sales")),
        (ROLE_CUSTOMER_SERVICE, _("Customer Service")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, verbose_name=_("ID"))
    username = models.CharField(_("Username"), max_length=150, unique=True)
    email = models.EmailField(_("Email Address"), blank=True)
    first_name = models.CharField(_("First Name"), max_length=150, blank=True)
    last_name = models.CharField(_("Last Name"), max_length=150, blank=True)
    phone = models.CharField(
        _("Phone"), max_length=20, blank=True, validators=[validate_phone_number]
    )
    role = models.CharField(_("Role"), max_length=20, choices=ROLE_CHOICES, default=ROLE_TECHNICIAN)
    location = models.ForeignKey(
        "locationsapp.Location",
        on_delete=models.SET_NULL,
        related_name="users",
        verbose_name=_("Location"),
        null=True,
        blank=True,
    )
    is_staff = models.BooleanField(
        _("Staff Status"),
        default=False,
        help_text=_("Designates whether the user can log into the Django admin site."),
    )
    is_active = models.BooleanField(
        _("Active"),
        default=True,
        help_text=_(
            "Designates whether this user should be treated as active. "
            "Unselect this instead of deleting accounts."
        ),
    )
    date_joined = models.DateTimeField(_("Date Joined"), default=timezone.now)

    tracker = FieldTracker(fields=["is_active", "role", "location_id"])

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["username"]
        indexes = [
            models.Index(fields=["role"]),
        ]

    def __str__(self):
        return self.username

    def get_full_name(self):
        full_name = f"{self.first_name} {self.last_name}"
        return full_name.strip() or self.username

    def get_short_name(self):
        return self.first_name or self.username

    @property
    def is_admin(self):
        return self.is_superuser or self.role == ROLE_ADMIN

    @property
    def can_manage(self):
        """Admins and managers may edit catalogue, SMS and campaign data."""
        return self.is_admin or self.role in MANAGEMENT_ROLES
