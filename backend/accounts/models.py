"""
Accounts app models.

Defines the custom ``User`` model (a single ``Role`` per user, see
``core.constants.Role``) and the ``RoleChangeRequest`` a User files to be
promoted to Legal Officer or Admin.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models

from core.constants import RecordStatus, Role
from core.models import ModeratedModel


class User(AbstractUser):
    """
    Custom user model for the scam-watch platform.

    Each user holds exactly **one** role at a time.  New users register as
    ``Role.USER``; a role change is requested through
    ``RoleChangeRequest`` and takes effect when an Admin approves it.
    Superusers always act as Admin regardless of the stored role.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    phone_number = models.CharField(
        max_length=15,
        blank=True,
        default="",
        verbose_name="Phone Number",
    )
    role = models.CharField(
        max_length=16,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
        verbose_name="Role",
    )

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_admin_role(self) -> bool:
        return self.is_superuser or self.role == Role.ADMIN


class RoleChangeRequest(ModeratedModel):
    """
    A User's request to be granted another role.

    At most one request per user may be pending at a time; the partial
    unique constraint backs the service-level check against races.
    """

    requested_role = models.CharField(
        max_length=16,
        choices=Role.choices,
        verbose_name="Requested Role",
    )
    reason = models.TextField(
        verbose_name="Reason",
    )

    class Meta(ModeratedModel.Meta):
        verbose_name = "Role Change Request"
        verbose_name_plural = "Role Change Requests"
        constraints = ModeratedModel.Meta.constraints + [
            models.UniqueConstraint(
                fields=["owner"],
                condition=models.Q(status=RecordStatus.PENDING),
                name="accounts_one_pending_role_change_per_user",
            ),
        ]

    def __str__(self):
        return f"{self.owner_id} → {self.requested_role} ({self.status})"
