"""
core.domain.cascade — Transactional parent/child deletion.

A legal case owns its documents and evidence, an alert owns its comments
and a checklist owns its items.  ``CascadeManager`` removes the children
declared in the kind descriptor and then the parent, all inside one
repository transaction.  A failing child deletion is reported as
``CascadeFailure`` and rolls the whole unit back.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from core.domain.exceptions import CascadeFailure
from core.domain.kinds import KindDescriptor
from core.domain.repositories import Repository, StorageError

logger = logging.getLogger(__name__)


class CascadeManager:
    def __init__(self, repository: Repository) -> None:
        self.repository = repository

    def delete_with_children(
        self,
        kind: KindDescriptor,
        record: Any,
        *,
        expected: Mapping[str, Any] | None = None,
    ) -> dict[str, int]:
        """
        Delete ``record`` and its children; returns the child counts removed.

        ``expected`` is forwarded to the final compare-and-set delete so a
        record whose status changed meanwhile is not removed.
        """
        removed: dict[str, int] = {}
        with self.repository.atomic():
            for child in kind.child_cascades:
                try:
                    removed[child.name] = self.repository.delete_children(record, child)
                except StorageError as exc:
                    logger.error(
                        "Cascade delete of %s for %s pk=%s failed: %s",
                        child.name,
                        kind.name,
                        record.pk,
                        exc,
                    )
                    raise CascadeFailure(
                        f"Could not delete the {child.name} of {kind.verbose_name} "
                        f"{record.pk}; nothing was removed."
                    ) from exc
            self.repository.delete(record.pk, expected=expected)

        logger.info(
            "Deleted %s pk=%s with children %s",
            kind.name,
            record.pk,
            removed or "{}",
        )
        return removed
