"""
core.domain.transactions — Compare-and-set status transitions.

Every workflow write goes through ``transition_status`` so that all kinds
follow the same concurrency-safe approach: validate the transition against
the status the caller *read*, then ask the repository to commit only if the
stored status still equals that value.  Two requests racing to moderate the
same pending record therefore commit exactly once; the loser receives
``Conflict`` instead of silently overwriting the winner.

Usage::

    from core.domain.transactions import transition_status

    updated = transition_status(
        repository,
        record,
        target_status="approved",
        allowed_sources={"pending", "rejected", "approved"},
        changes={"moderator_id": admin.id, "moderator_notes": None},
    )
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from core.domain.exceptions import InvalidTransition
from core.domain.repositories import Repository


def transition_status(
    repository: Repository,
    record: Any,
    *,
    target_status: str,
    allowed_sources: Iterable[str],
    status_field: str = "status",
    changes: Mapping[str, Any] | None = None,
) -> Any:
    """
    Move ``record`` to ``target_status`` with a compare-and-set write.

    Args:
        repository:      Storage port the record belongs to.
        record:          The record as read by the caller.
        target_status:   The desired new status.
        allowed_sources: Statuses from which the transition is permitted.
        status_field:    Name of the status attribute.
        changes:         Extra fields written in the same update.

    Returns:
        The updated record.

    Raises:
        InvalidTransition: The status read by the caller is not an allowed source.
        Conflict:          The stored status changed since it was read.
        NotFound:          The record no longer exists.
    """
    current = getattr(record, status_field)
    sources = set(allowed_sources)
    if current not in sources:
        raise InvalidTransition(
            current=str(current),
            target=str(target_status),
            reason=f"Allowed source states: {', '.join(sorted(str(s) for s in sources))}.",
        )

    values = {status_field: target_status}
    values.update(changes or {})
    return repository.compare_and_set(
        record.pk,
        values,
        expected={status_field: current},
    )
