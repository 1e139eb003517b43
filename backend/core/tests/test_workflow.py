"""
Workflow engine and policy facade tests against ``InMemoryRepository``.

These exercise the state machine, the moderation ledger, compare-and-set
conflicts and cascade rollback without a database.
"""

from __future__ import annotations

import dataclasses
import threading
from types import SimpleNamespace

import pytest

from accounts.services import ROLE_CHANGE_KIND
from alerts.services import ALERT_KIND, COMMENT_KIND
from cases.services import CASE_KIND
from core.constants import Role
from core.domain.exceptions import (
    CascadeFailure,
    Conflict,
    DomainError,
    ErrorKind,
    InvalidTransition,
    NotFound,
    PermissionDenied,
)
from core.domain.policies import ModerationPolicy, Operation
from core.domain.repositories import InMemoryRepository
from core.domain.roles import Principal
from reports.services import REPORT_KIND

ADMIN = Principal(id=1, role=Role.ADMIN)
OFFICER = Principal(id=2, role=Role.OFFICER)
USER = Principal(id=3, role=Role.USER)
OTHER_USER = Principal(id=4, role=Role.USER)

REPORT = {
    "title": "Fake parcel SMS",
    "description": "Asked to pay a customs fee through a link.",
    "scammer_info": "+100000000",
    "platform": "SMS",
}


def _policy(kind, **repo_kwargs):
    return ModerationPolicy(kind, InMemoryRepository(kind.name, **repo_kwargs))


@pytest.fixture()
def reports():
    return _policy(REPORT_KIND)


@pytest.fixture()
def alerts():
    return _policy(ALERT_KIND)


@pytest.fixture()
def cases():
    return _policy(CASE_KIND)


# ── Creation ─────────────────────────────────────────────────────────

class TestCreate:
    def test_user_report_starts_pending(self, reports):
        report = reports.create(USER, REPORT)
        assert report.status == "pending"
        assert report.owner_id == USER.id
        assert report.is_active is True
        assert report.moderator_id is None
        assert report.moderator_notes is None

    def test_admin_alert_is_approved_on_creation(self, alerts):
        alert = alerts.create(ADMIN, {"title": "Bank calls", "description": "Do not share OTPs."})
        assert alert.status == "approved"
        assert alert.moderator_id == ADMIN.id

    def test_officer_alert_starts_pending(self, alerts):
        alert = alerts.create(OFFICER, {"title": "Bank calls", "description": "Do not share OTPs."})
        assert alert.status == "pending"
        assert alert.moderator_id is None

    def test_user_cannot_create_alert(self, alerts):
        with pytest.raises(PermissionDenied):
            alerts.create(USER, {"title": "t", "description": "d"})

    def test_missing_required_field(self, reports):
        with pytest.raises(DomainError):
            reports.create(USER, {**REPORT, "title": "   "})

    def test_title_limit(self, reports):
        with pytest.raises(DomainError):
            reports.create(USER, {**REPORT, "title": "x" * 201})

    def test_unknown_field_rejected(self, reports):
        with pytest.raises(DomainError):
            reports.create(USER, {**REPORT, "status": "approved"})

    def test_case_number_generated_and_unique(self, cases):
        first = cases.create(OFFICER, {"title": "Ponzi", "description": "Investment fraud"})
        assert first.case_number.startswith("LC-")
        assert len(first.case_number.rsplit("-", 1)[1]) == 5

        with pytest.raises(DomainError):
            cases.create(
                OFFICER,
                {"title": "Dup", "description": "d", "case_number": first.case_number},
            )

    def test_comment_requires_existing_alert(self):
        comments = _policy(COMMENT_KIND, parents={"scam alert": {7}})
        assert comments.create(USER, {"alert_id": 7, "content": "Got this too"}).status == "pending"
        with pytest.raises(NotFound):
            comments.create(USER, {"alert_id": 8, "content": "Which alert?"})

    def test_comment_on_alert_outside_visibility_reads_as_missing(self, alerts):
        hidden = alerts.create(OFFICER, {"title": "Draft", "description": "Not yet reviewed."})
        comments = ModerationPolicy(
            COMMENT_KIND,
            InMemoryRepository("comment", parents={"scam alert": {hidden.pk}}),
            parent_policy=alerts,
        )
        with pytest.raises(NotFound):
            comments.create(USER, {"alert_id": hidden.pk, "content": "Seen it"})
        assert comments.create(OFFICER, {"alert_id": hidden.pk, "content": "Context"}).status == "pending"

        alerts.approve(ADMIN, hidden.pk)
        assert comments.create(USER, {"alert_id": hidden.pk, "content": "Seen it"}).alert_id == hidden.pk


# ── Moderation ───────────────────────────────────────────────────────

class TestModeration:
    def test_reject_requires_notes(self, reports):
        report = reports.create(USER, REPORT)
        with pytest.raises(DomainError):
            reports.reject(ADMIN, report.pk, "   ")
        assert reports.repository.get(report.pk).status == "pending"

    def test_reject_trims_and_stores_notes(self, reports):
        report = reports.create(USER, REPORT)
        rejected = reports.reject(ADMIN, report.pk, "  not a scam  ")
        assert rejected.status == "rejected"
        assert rejected.moderator_id == ADMIN.id
        assert rejected.moderator_notes == "not a scam"

    def test_approve_after_reject_clears_notes(self, reports):
        report = reports.create(USER, REPORT)
        reports.reject(ADMIN, report.pk, "needs proof")
        approved = reports.approve(ADMIN, report.pk, "looks fine now")
        assert approved.status == "approved"
        assert approved.moderator_notes is None
        assert approved.moderator_id == ADMIN.id

    def test_non_admin_cannot_moderate(self, reports):
        report = reports.create(USER, REPORT)
        with pytest.raises(PermissionDenied):
            reports.approve(OFFICER, report.pk)

    def test_closed_record_cannot_be_moderated(self, reports):
        report = reports.create(USER, REPORT)
        reports.repository.rows[report.pk].status = "closed"
        with pytest.raises(InvalidTransition):
            reports.approve(ADMIN, report.pk)

    def test_reapproval_runs_hook_once(self):
        calls = []
        kind = dataclasses.replace(
            ROLE_CHANGE_KIND,
            on_approved=lambda record, approver: calls.append(record.pk),
        )
        requests = _policy(kind)
        request = requests.create(USER, {"requested_role": "officer", "reason": "I work in legal"})
        requests.approve(ADMIN, request.pk)
        requests.approve(ADMIN, request.pk)
        assert calls == [request.pk]

    def test_role_change_cannot_be_rejected_after_approval(self):
        kind = dataclasses.replace(ROLE_CHANGE_KIND, on_approved=None)
        requests = _policy(kind)
        request = requests.create(USER, {"requested_role": "officer", "reason": "r"})
        requests.approve(ADMIN, request.pk)
        with pytest.raises(InvalidTransition):
            requests.reject(ADMIN, request.pk, "changed my mind")

    def test_toggle_active(self, reports):
        report = reports.create(USER, REPORT)
        assert reports.toggle_active(ADMIN, report.pk).is_active is False
        assert reports.toggle_active(ADMIN, report.pk, True).is_active is True
        with pytest.raises(PermissionDenied):
            reports.toggle_active(USER, report.pk)

    def test_notifier_called_for_approve_and_reject(self):
        events = []
        reports = ModerationPolicy(
            REPORT_KIND,
            InMemoryRepository("report"),
            notifier=lambda kind, event, record, actor: events.append((kind.name, event, record.pk)),
        )
        report = reports.create(USER, REPORT)
        reports.reject(ADMIN, report.pk, "duplicate")
        reports.approve(ADMIN, report.pk)
        assert events == [("report", "rejected", report.pk), ("report", "approved", report.pk)]


# ── Editing ──────────────────────────────────────────────────────────

class TestEdit:
    def test_officer_cannot_edit_own_approved_case(self, cases):
        case = cases.create(OFFICER, {"title": "Ponzi", "description": "d"})
        cases.approve(ADMIN, case.pk)
        with pytest.raises(PermissionDenied):
            cases.update(OFFICER, case.pk, {"title": "Renamed"})

    def test_officer_re_edit_of_rejected_alert_resubmits(self, alerts):
        alert = alerts.create(OFFICER, {"title": "t", "description": "d"})
        alerts.reject(ADMIN, alert.pk, "too vague")
        edited = alerts.update(OFFICER, alert.pk, {"description": "Much more detail"})
        assert edited.status == "pending"
        assert edited.moderator_id is None
        assert edited.moderator_notes is None

    def test_user_edit_keeps_report_status(self, reports):
        report = reports.create(USER, REPORT)
        reports.approve(ADMIN, report.pk)
        edited = reports.update(USER, report.pk, {"platform": "WhatsApp"})
        assert edited.status == "approved"
        assert edited.platform == "WhatsApp"

    def test_admin_edit_of_approved_alert_keeps_status(self, alerts):
        alert = alerts.create(OFFICER, {"title": "t", "description": "d"})
        alerts.approve(ADMIN, alert.pk)
        assert alerts.update(ADMIN, alert.pk, {"title": "New"}).status == "approved"

    def test_other_user_cannot_edit(self, reports):
        report = reports.create(USER, REPORT)
        with pytest.raises(PermissionDenied):
            reports.update(OTHER_USER, report.pk, {"title": "mine now"})

    def test_empty_patch_is_rejected(self, reports):
        report = reports.create(USER, REPORT)
        with pytest.raises(DomainError):
            reports.update(USER, report.pk, {})


# ── Concurrency ──────────────────────────────────────────────────────

class TestCompareAndSet:
    def test_stale_reject_after_approve_conflicts(self, reports):
        report = reports.create(USER, REPORT)
        stale = reports.repository.get(report.pk)
        reports.engine.approve(ADMIN, stale)
        with pytest.raises(Conflict):
            reports.engine.reject(ADMIN, stale, "too late")
        current = reports.repository.get(report.pk)
        assert current.status == "approved"
        assert current.moderator_notes is None

    def test_concurrent_approve_and_reject_one_wins(self, reports):
        report = reports.create(USER, REPORT)
        stale = reports.repository.get(report.pk)
        barrier = threading.Barrier(2)
        outcomes = {}

        def run(name, action):
            barrier.wait()
            try:
                action()
                outcomes[name] = "ok"
            except Conflict:
                outcomes[name] = "conflict"

        threads = [
            threading.Thread(target=run, args=("approve", lambda: reports.engine.approve(ADMIN, stale))),
            threading.Thread(target=run, args=("reject", lambda: reports.engine.reject(ADMIN, stale, "no"))),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes.values()) == ["conflict", "ok"]
        final = reports.repository.get(report.pk)
        winner = "approved" if outcomes["approve"] == "ok" else "rejected"
        assert final.status == winner


# ── Deletion ─────────────────────────────────────────────────────────

class TestCascadeDelete:
    def _alert_with_comments(self):
        comments = [SimpleNamespace(alert=1), SimpleNamespace(alert=1), SimpleNamespace(alert=2)]
        alerts = _policy(ALERT_KIND, children={"comments": comments})
        alerts.create(ADMIN, {"title": "t", "description": "d"})
        return alerts

    def test_delete_removes_children(self):
        alerts = self._alert_with_comments()
        alerts.delete(ADMIN, 1)
        assert 1 not in alerts.repository.rows
        assert [c.alert for c in alerts.repository.children["comments"]] == [2]

    def test_child_failure_rolls_back_everything(self):
        alerts = self._alert_with_comments()
        alerts.repository.failing_children.add("comments")
        with pytest.raises(CascadeFailure):
            alerts.delete(ADMIN, 1)
        assert 1 in alerts.repository.rows
        assert len(alerts.repository.children["comments"]) == 3

    def test_user_cannot_delete_own_approved_report(self, reports):
        report = reports.create(USER, REPORT)
        reports.approve(ADMIN, report.pk)
        with pytest.raises(PermissionDenied):
            reports.delete(USER, report.pk)

    def test_owner_deletes_pending_report(self, reports):
        report = reports.create(USER, REPORT)
        reports.delete(USER, report.pk)
        with pytest.raises(NotFound):
            reports.repository.get(report.pk)


# ── Role change requests ─────────────────────────────────────────────

class TestRoleChangeRequests:
    @pytest.fixture()
    def requests(self):
        return _policy(dataclasses.replace(ROLE_CHANGE_KIND, on_approved=None))

    def test_second_pending_request_rejected(self, requests):
        requests.create(USER, {"requested_role": "officer", "reason": "first"})
        with pytest.raises(DomainError):
            requests.create(USER, {"requested_role": "admin", "reason": "second"})

    def test_new_request_allowed_after_rejection(self, requests):
        first = requests.create(USER, {"requested_role": "officer", "reason": "first"})
        requests.reject(ADMIN, first.pk, "not yet")
        second = requests.create(USER, {"requested_role": "officer", "reason": "again"})
        assert second.status == "pending"

    def test_only_users_may_request(self, requests):
        with pytest.raises(PermissionDenied):
            requests.create(OFFICER, {"requested_role": "admin", "reason": "promote me"})


# ── Facade ───────────────────────────────────────────────────────────

class TestExecute:
    def test_success_result(self, reports):
        result = reports.execute(USER, Operation.CREATE, payload=REPORT)
        assert result.ok
        assert result.value.title == REPORT["title"]

    def test_failure_result_carries_kind(self, reports):
        result = reports.execute(USER, "create", payload={**REPORT, "title": ""})
        assert not result.ok
        assert result.error is ErrorKind.VALIDATION_ERROR
        with pytest.raises(DomainError):
            result.unwrap()

    def test_anonymous_is_unauthenticated(self, reports):
        result = reports.execute(None, Operation.LIST)
        assert result.error is ErrorKind.UNAUTHENTICATED

    def test_get_invisible_record_is_forbidden(self, reports):
        report = reports.create(USER, REPORT)
        result = reports.execute(OTHER_USER, Operation.GET, pk=report.pk)
        assert result.error is ErrorKind.FORBIDDEN

    def test_missing_record_is_not_found(self, reports):
        assert reports.execute(ADMIN, Operation.GET, pk=404).error is ErrorKind.NOT_FOUND

    def test_list_with_search(self, reports):
        reports.create(USER, REPORT)
        reports.create(USER, {**REPORT, "title": "Crypto giveaway", "platform": "Telegram"})
        result = reports.execute(USER, Operation.LIST, payload={"search": "crypto"})
        assert [r.title for r in result.value] == ["Crypto giveaway"]

    def test_reject_then_approve_end_to_end(self, reports):
        report = reports.execute(USER, Operation.CREATE, payload=REPORT).value
        rejected = reports.execute(ADMIN, Operation.REJECT, pk=report.pk, payload={"notes": "proof?"})
        assert rejected.value.status == "rejected"
        assert reports.moderation_entry(USER, report.pk).moderator_notes == "proof?"
        with pytest.raises(PermissionDenied):
            reports.moderation_entry(OTHER_USER, report.pk)
        approved = reports.execute(ADMIN, Operation.APPROVE, pk=report.pk)
        assert approved.value.status == "approved"
        assert reports.status_summary(ADMIN) == {
            "pending": 0, "approved": 1, "rejected": 0, "closed": 0, "total": 1,
        }
