"""Write paths for imported worker, enrollment and time entry records."""
from __future__ import annotations

from typing import Any

from sqlalchemy import select

from benefits.models import AuditLog, Enrollment, TimeEntry, Worker

from .base import BaseRepository

_WORKER_FIELDS = (
    "worker_id",
    "first_name",
    "last_name",
    "email",
    "department",
    "job_title",
    "hire_date",
    "birth_date",
    "salary",
    "manager_id",
    "status",
)


class RecordsRepository(BaseRepository):
    """Create/upsert helpers used by the import pipeline and the seed CLI."""

    def get_worker(self, worker_id: str) -> Worker | None:
        return self._session.execute(
            select(Worker).where(Worker.worker_id == worker_id)
        ).scalar_one_or_none()

    def upsert_worker(self, values: dict[str, Any]) -> tuple[Worker, dict[str, Any] | None]:
        """Insert or update a worker keyed by ``worker_id``.

        Returns the worker together with a snapshot of its previous values
        (``None`` when the worker is new).
        """

        worker = self.get_worker(values["worker_id"])
        before: dict[str, Any] | None = None
        if worker is None:
            worker = Worker(**{key: values[key] for key in _WORKER_FIELDS if key in values})
            self._session.add(worker)
        else:
            before = {key: getattr(worker, key) for key in _WORKER_FIELDS}
            for key in _WORKER_FIELDS:
                if key in values:
                    setattr(worker, key, values[key])
        self._session.flush()
        return worker, before

    def add_enrollment(self, values: dict[str, Any]) -> Enrollment:
        enrollment = Enrollment(**values)
        self._session.add(enrollment)
        self._session.flush()
        return enrollment

    def add_time_entry(self, values: dict[str, Any]) -> TimeEntry:
        entry = TimeEntry(**values)
        self._session.add(entry)
        self._session.flush()
        return entry

    def add_audit(
        self,
        *,
        actor: str,
        action: str,
        entity: str,
        entity_id: str,
        after: dict[str, Any] | None = None,
        before: dict[str, Any] | None = None,
        reason: str | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            actor=actor,
            action=action,
            entity=entity,
            entity_id=entity_id,
            before=before,
            after=after,
            reason=reason,
        )
        self._session.add(entry)
        return entry
