"""
core.domain.repositories — Storage ports for the moderation core.

The workflow engine never imports a model class.  Each kind is handed a
``Repository`` at construction time:

* ``DjangoRepository`` — backed by the ORM.  Compare-and-set is a
  conditional ``UPDATE ... WHERE pk = %s AND status = %s``; zero updated
  rows means a concurrent writer got there first.
* ``InMemoryRepository`` — a thread-safe dict of ``SimpleNamespace`` rows
  used by the domain tests and by anything that needs a fake store.

Every mutation is all-or-nothing; ``atomic()`` opens the unit of work that
cascade deletes and approval hooks run in.
"""

from __future__ import annotations

import abc
import contextlib
import copy
import itertools
import logging
import threading
from collections import Counter
from types import SimpleNamespace
from typing import Any, Iterable, Iterator, Mapping

from django.apps import apps
from django.db import DatabaseError, IntegrityError, models, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from core.domain.exceptions import Conflict, DomainError, NotFound
from core.domain.kinds import ChildCascade, ParentRef
from core.domain.visibility import Visibility

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The backing store failed to apply a write."""


class Repository(abc.ABC):
    """Per-kind persistence port used by the workflow engine."""

    name: str = "record"

    @abc.abstractmethod
    def get(self, pk: Any) -> Any:
        """Return the record or raise ``NotFound``."""

    @abc.abstractmethod
    def list(
        self,
        visibility: Visibility,
        *,
        search: str | None = None,
        search_fields: Iterable[str] = (),
        ordering: Iterable[str] = (),
    ) -> Iterable[Any]:
        """Return every record matching ``visibility`` and ``search``."""

    @abc.abstractmethod
    def create(self, values: Mapping[str, Any]) -> Any:
        ...

    @abc.abstractmethod
    def compare_and_set(
        self,
        pk: Any,
        changes: Mapping[str, Any],
        *,
        expected: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Apply ``changes`` only if the stored row still matches ``expected``.

        Raises ``Conflict`` when the row exists but no longer matches and
        ``NotFound`` when it is gone.  Returns the updated record.
        """

    @abc.abstractmethod
    def increment(self, pk: Any, field_name: str, amount: int = 1) -> Any:
        """Atomically add ``amount`` to a counter column and return the record."""

    @abc.abstractmethod
    def delete(self, pk: Any, *, expected: Mapping[str, Any] | None = None) -> None:
        ...

    @abc.abstractmethod
    def delete_children(self, record: Any, child: ChildCascade) -> int:
        """Remove every ``child`` row of ``record``; raise ``StorageError`` on failure."""

    @abc.abstractmethod
    def exists(self, *, exclude_pk: Any = None, **lookup: Any) -> bool:
        ...

    @abc.abstractmethod
    def parent_exists(self, parent: ParentRef, pk: Any) -> bool:
        ...

    @abc.abstractmethod
    def count_by_status(self, visibility: Visibility, status_field: str = "status") -> dict[str, int]:
        ...

    @abc.abstractmethod
    def atomic(self) -> contextlib.AbstractContextManager:
        ...


# ────────────────────────────────────────────────────────────────────
# ORM
# ────────────────────────────────────────────────────────────────────


class DjangoRepository(Repository):
    def __init__(self, model: type[models.Model], *, select_related: Iterable[str] = ()) -> None:
        self.model = model
        self.name = str(model._meta.verbose_name)
        self.select_related = tuple(select_related)

    def _base(self) -> models.QuerySet:
        return self.model._default_manager.all()

    def _queryset(self) -> models.QuerySet:
        qs = self._base()
        if self.select_related:
            qs = qs.select_related(*self.select_related)
        return qs

    def _raise_miss(self, pk: Any, expected: Mapping[str, Any] | None) -> None:
        if self._base().filter(pk=pk).exists():
            raise Conflict(
                f"The {self.name} with pk={pk} was changed by another request "
                f"(expected {dict(expected or {})}). Reload it and try again."
            )
        raise NotFound(f"{self.name.capitalize()} with pk={pk} does not exist.")

    def get(self, pk: Any) -> models.Model:
        try:
            return self._queryset().get(pk=pk)
        except self.model.DoesNotExist:
            raise NotFound(f"{self.name.capitalize()} with pk={pk} does not exist.")

    def list(self, visibility, *, search=None, search_fields=(), ordering=()):
        qs = self._queryset().filter(visibility.to_q(timezone.now()))
        if search:
            search_q = Q()
            for field_name in search_fields:
                search_q |= Q(**{f"{field_name}__icontains": search})
            qs = qs.filter(search_q)
        if ordering:
            qs = qs.order_by(*ordering)
        return qs

    def create(self, values):
        try:
            with transaction.atomic():
                return self._base().create(**values)
        except IntegrityError as exc:
            raise DomainError(
                f"This {self.name} conflicts with an existing record."
            ) from exc
        except DatabaseError as exc:
            raise StorageError(str(exc)) from exc

    def compare_and_set(self, pk, changes, *, expected=None):
        values = dict(changes)
        if any(f.name == "updated_at" for f in self.model._meta.concrete_fields):
            values.setdefault("updated_at", timezone.now())
        try:
            with transaction.atomic():
                updated = self._base().filter(pk=pk, **(expected or {})).update(**values)
        except IntegrityError as exc:
            raise DomainError(
                f"This change to the {self.name} conflicts with an existing record."
            ) from exc
        except DatabaseError as exc:
            raise StorageError(str(exc)) from exc
        if not updated:
            self._raise_miss(pk, expected)
        return self.get(pk)

    def increment(self, pk, field_name, amount=1):
        updated = self._base().filter(pk=pk).update(**{field_name: F(field_name) + amount})
        if not updated:
            raise NotFound(f"{self.name.capitalize()} with pk={pk} does not exist.")
        return self.get(pk)

    def delete(self, pk, *, expected=None):
        try:
            deleted, _ = self._base().filter(pk=pk, **(expected or {})).delete()
        except IntegrityError as exc:
            raise DomainError(
                f"The {self.name} still has related records and cannot be deleted."
            ) from exc
        except DatabaseError as exc:
            raise StorageError(str(exc)) from exc
        if not deleted:
            self._raise_miss(pk, expected)

    def delete_children(self, record, child):
        child_model = apps.get_model(child.model_label)
        try:
            deleted, _ = child_model._default_manager.filter(**{child.fk_field: record.pk}).delete()
        except DatabaseError as exc:
            raise StorageError(str(exc)) from exc
        return deleted

    def exists(self, *, exclude_pk=None, **lookup):
        qs = self._base().filter(**lookup)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.exists()

    def parent_exists(self, parent, pk):
        parent_model = apps.get_model(parent.model_label)
        return parent_model._default_manager.filter(pk=pk).exists()

    def count_by_status(self, visibility, status_field="status"):
        rows = (
            self._base()
            .filter(visibility.to_q(timezone.now()))
            .values(status_field)
            .annotate(total=Count("pk"))
            .order_by()
        )
        return {row[status_field]: row["total"] for row in rows}

    def atomic(self):
        return transaction.atomic()


# ────────────────────────────────────────────────────────────────────
# In-memory
# ────────────────────────────────────────────────────────────────────


class InMemoryRepository(Repository):
    """
    Dictionary-backed repository.

    ``children`` maps a ``ChildCascade.name`` to its rows and ``parents``
    maps a ``ParentRef.name`` to the set of existing parent ids.  Child
    names listed in ``failing_children`` make ``delete_children`` raise
    ``StorageError``, which is how cascade rollback is exercised.
    """

    def __init__(
        self,
        name: str = "record",
        *,
        children: Mapping[str, list[Any]] | None = None,
        parents: Mapping[str, set[Any]] | None = None,
    ) -> None:
        self.name = name
        self.rows: dict[int, SimpleNamespace] = {}
        self.children: dict[str, list[Any]] = {k: list(v) for k, v in (children or {}).items()}
        self.parents: dict[str, set[Any]] = {k: set(v) for k, v in (parents or {}).items()}
        self.failing_children: set[str] = set()
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def _row(self, pk: Any) -> SimpleNamespace:
        row = self.rows.get(pk)
        if row is None:
            raise NotFound(f"{self.name.capitalize()} with pk={pk} does not exist.")
        return row

    def _check_expected(self, row: SimpleNamespace, expected: Mapping[str, Any] | None) -> None:
        for key, value in (expected or {}).items():
            if getattr(row, key, None) != value:
                raise Conflict(
                    f"The {self.name} with pk={row.pk} was changed by another request "
                    f"(expected {key}={value!r}). Reload it and try again."
                )

    def get(self, pk):
        with self._lock:
            return copy.copy(self._row(pk))

    def list(self, visibility, *, search=None, search_fields=(), ordering=()):
        now = timezone.now()
        with self._lock:
            rows = [copy.copy(row) for row in self.rows.values() if visibility.matches(row, now)]
        if search:
            needle = search.lower()
            rows = [
                row for row in rows
                if any(needle in str(getattr(row, f, "") or "").lower() for f in search_fields)
            ]
        for key in reversed(tuple(ordering)):
            attr = key.lstrip("-")
            rows.sort(key=lambda row: getattr(row, attr), reverse=key.startswith("-"))
        return rows

    def create(self, values):
        with self._lock:
            pk = next(self._ids)
            now = timezone.now()
            row = SimpleNamespace(**values)
            row.id = row.pk = pk
            row.created_at = row.updated_at = now
            self.rows[pk] = row
            return copy.copy(row)

    def compare_and_set(self, pk, changes, *, expected=None):
        with self._lock:
            row = self._row(pk)
            self._check_expected(row, expected)
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = timezone.now()
            return copy.copy(row)

    def increment(self, pk, field_name, amount=1):
        with self._lock:
            row = self._row(pk)
            setattr(row, field_name, getattr(row, field_name, 0) + amount)
            return copy.copy(row)

    def delete(self, pk, *, expected=None):
        with self._lock:
            row = self._row(pk)
            self._check_expected(row, expected)
            del self.rows[pk]

    def delete_children(self, record, child):
        with self._lock:
            if child.name in self.failing_children:
                raise StorageError(f"Simulated failure deleting {child.name}.")
            rows = self.children.get(child.name, [])
            keep = [row for row in rows if getattr(row, child.fk_field, None) != record.pk]
            self.children[child.name] = keep
            return len(rows) - len(keep)

    def exists(self, *, exclude_pk=None, **lookup):
        with self._lock:
            return any(
                all(getattr(row, key, None) == value for key, value in lookup.items())
                for pk, row in self.rows.items()
                if pk != exclude_pk
            )

    def parent_exists(self, parent, pk):
        return pk in self.parents.get(parent.name, set())

    def count_by_status(self, visibility, status_field="status"):
        now = timezone.now()
        with self._lock:
            return dict(
                Counter(
                    str(getattr(row, status_field))
                    for row in self.rows.values()
                    if visibility.matches(row, now)
                )
            )

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            snapshot = copy.deepcopy((self.rows, self.children))
            try:
                yield
            except BaseException:
                self.rows, self.children = snapshot
                raise
