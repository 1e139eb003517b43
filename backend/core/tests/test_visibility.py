"""
Unit tests for role-scoped visibility (``core.domain.visibility``).

Records are plain namespaces; no database is touched.
"""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import pytest
from django.db.models import Q
from django.utils import timezone

from alerts.services import ALERT_KIND, COMMENT_KIND
from core.constants import Role
from core.domain.exceptions import DomainError, PermissionDenied, Unauthenticated
from core.domain.roles import Principal
from core.domain.visibility import Clause, Visibility, build_filter
from faqs.services import FAQ_KIND
from reports.services import REPORT_KIND

ADMIN = Principal(id=1, role=Role.ADMIN)
OFFICER = Principal(id=2, role=Role.OFFICER)
USER = Principal(id=3, role=Role.USER)


def _record(owner_id, status="pending", is_active=True, **extra):
    return SimpleNamespace(owner_id=owner_id, status=status, is_active=is_active, **extra)


class TestCeilings:
    def test_anonymous_is_refused(self):
        with pytest.raises(Unauthenticated):
            build_filter(None, REPORT_KIND)

    def test_anonymous_sees_published_public_records(self):
        visibility = build_filter(None, FAQ_KIND)
        assert visibility.matches(_record(owner_id=ADMIN.id, status="approved"))
        assert not visibility.matches(_record(owner_id=ADMIN.id, status="pending"))
        assert not visibility.matches(_record(owner_id=ADMIN.id, status="approved", is_active=False))

    def test_anonymous_filter_outside_published_is_forbidden(self):
        with pytest.raises(PermissionDenied):
            build_filter(None, FAQ_KIND, {"status": "pending"})

    def test_admin_sees_everything(self):
        visibility = build_filter(ADMIN, ALERT_KIND)
        assert visibility.matches(_record(owner_id=99, status="rejected", is_active=False))
        assert visibility.to_q() == Q()

    def test_user_sees_only_own_reports(self):
        visibility = build_filter(USER, REPORT_KIND)
        assert visibility.matches(_record(owner_id=USER.id))
        assert not visibility.matches(_record(owner_id=OFFICER.id, status="approved"))

    def test_officer_sees_every_report(self):
        visibility = build_filter(OFFICER, REPORT_KIND)
        assert visibility.matches(_record(owner_id=USER.id, status="rejected"))

    def test_officer_sees_own_and_published_alerts(self):
        visibility = build_filter(OFFICER, ALERT_KIND)
        assert visibility.matches(_record(owner_id=OFFICER.id, status="pending"))
        assert visibility.matches(_record(owner_id=ADMIN.id, status="approved"))
        assert not visibility.matches(_record(owner_id=ADMIN.id, status="pending"))
        assert not visibility.matches(_record(owner_id=ADMIN.id, status="approved", is_active=False))

    def test_user_sees_own_comments_and_published_ones(self):
        visibility = build_filter(USER, COMMENT_KIND)
        assert visibility.matches(_record(owner_id=USER.id, status="rejected"))
        assert visibility.matches(_record(owner_id=OFFICER.id, status="approved"))
        assert not visibility.matches(_record(owner_id=OFFICER.id, status="pending"))


class TestAlertExpiry:
    def test_expired_alert_hidden_from_users(self):
        past = timezone.now() - timedelta(hours=1)
        alert = _record(owner_id=ADMIN.id, status="approved", expires_at=past)
        assert not build_filter(USER, ALERT_KIND).matches(alert)

    def test_expired_alert_still_visible_to_officers(self):
        past = timezone.now() - timedelta(hours=1)
        alert = _record(owner_id=ADMIN.id, status="approved", expires_at=past)
        assert build_filter(OFFICER, ALERT_KIND).matches(alert)

    def test_alert_without_expiry_visible_to_users(self):
        alert = _record(owner_id=ADMIN.id, status="approved", expires_at=None)
        assert build_filter(USER, ALERT_KIND).matches(alert)


class TestCallerFilters:
    def test_filters_narrow_the_ceiling(self):
        visibility = build_filter(OFFICER, ALERT_KIND, {"status": "pending"})
        assert visibility.matches(_record(owner_id=OFFICER.id, status="pending"))
        assert not visibility.matches(_record(owner_id=ADMIN.id, status="approved"))

    def test_contradicting_clause_is_dropped(self):
        visibility = build_filter(OFFICER, ALERT_KIND, {"status": "pending"})
        assert len(visibility.clauses) == 1

    def test_filter_outside_ceiling_is_forbidden(self):
        with pytest.raises(PermissionDenied):
            build_filter(USER, ALERT_KIND, {"status": "pending"})

    def test_status_all_means_no_status_filter(self):
        visibility = build_filter(USER, REPORT_KIND, {"status": "all"})
        assert visibility.matches(_record(owner_id=USER.id, status="rejected"))

    def test_none_values_are_ignored(self):
        visibility = build_filter(USER, REPORT_KIND, {"is_active": None, "platform": None})
        assert visibility.matches(_record(owner_id=USER.id, is_active=False, platform="x"))

    def test_unknown_filter_key_is_a_validation_error(self):
        with pytest.raises(DomainError) as excinfo:
            build_filter(ADMIN, REPORT_KIND, {"owner_id": 5})
        assert excinfo.value.kind.value == "validation_error"


class TestClause:
    def test_merge_returns_none_on_contradiction(self):
        assert Clause(equals={"status": "approved"}).merge({"status": "pending"}) is None

    def test_visibility_with_unrestricted_clause_compiles_to_empty_q(self):
        visibility = Visibility(clauses=(Clause(equals={"owner_id": 1}), Clause()))
        assert visibility.to_q() == Q()
