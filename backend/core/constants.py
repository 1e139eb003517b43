"""
Core constants — **Single Source of Truth** for project-wide enumerations
and content limits.

Any rule that references a role, a workflow status or a length limit
should import it from here instead of hardcoding the literal.  This avoids
drift between the apps that share the moderation workflow.
"""

from django.db import models


class Role(models.TextChoices):
    """
    The three principal classes of the system.

    Legacy numeric role codes (1 = Admin, 2 = Legal Officer, 3 = User) are
    still accepted by ``core.domain.roles.coerce_role`` so imported user
    rows keep working.
    """

    ADMIN = "admin", "Admin"
    OFFICER = "officer", "Legal Officer"
    USER = "user", "User"


class RecordStatus(models.TextChoices):
    """
    Shared workflow status for every moderated record.

    ``CLOSED`` is reserved: no transition produces it, but it is counted in
    the moderation statistics so dashboards keep a stable shape.
    """

    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    CLOSED = "closed", "Closed"


# Sentinel accepted by list filters meaning "do not filter by status".
STATUS_ALL: str = "all"

# ── Content limits ──────────────────────────────────────────────────
TITLE_MAX_LENGTH: int = 200
DESCRIPTION_MAX_LENGTH: int = 5000

# ── Legal case numbering ────────────────────────────────────────────
# Generated case numbers look like ``LC-1718000000000-K3F9Q``.
CASE_NUMBER_PREFIX: str = "LC"
CASE_NUMBER_SUFFIX_LENGTH: int = 5
