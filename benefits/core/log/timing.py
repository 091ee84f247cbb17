"""Timing helpers to log duration and throughput of operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session


class StatementCounter:
    """Counts SQL statements issued through a session while attached."""

    def __init__(self) -> None:
        self.call_count = 0
        self._session: Session | None = None

    def _on_execute(self, orm_execute_state) -> None:
        self.call_count += 1

    def attach(self, session: Session) -> None:
        self._session = session
        event.listen(session, "do_orm_execute", self._on_execute)

    def detach(self) -> None:
        if self._session is not None:
            event.remove(self._session, "do_orm_execute", self._on_execute)
            self._session = None


@dataclass
class _Timer:
    label: str
    logger: logging.Logger
    level: int
    unit: str
    expected_total: Optional[int]
    count: int = 0
    start: float = field(default_factory=perf_counter)
    statements: Optional[StatementCounter] = None

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def set_total(self, total: int) -> None:
        self.expected_total = total

    def _resolved_total(self) -> Optional[int]:
        return self.expected_total if self.expected_total is not None else self.count

    def _statement_suffix(self) -> str:
        if self.statements is None or self.statements.call_count <= 0:
            return ""
        return f" ({self.statements.call_count:,} DB calls)"

    def finish(self, success: bool = True) -> None:
        elapsed = perf_counter() - self.start
        total = self._resolved_total()

        if success:
            message = f"{self.label} completed in {elapsed:.2f}s"
            if total is not None:
                message += f" ({total:,} {self.unit}"
                if elapsed > 0 and total:
                    rate = total / elapsed
                    message += f" @ {rate:,.0f} {self.unit}/s"
                message += ")"
            self.logger.log(self.level, message + self._statement_suffix())
        else:
            fail_message = f"{self.label} failed after {elapsed:.2f}s"
            if total is not None:
                fail_message += f" ({total:,} {self.unit})"
            self.logger.error(fail_message + self._statement_suffix())


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "items",
    total: Optional[int] = None,
    session: Optional[Session] = None,
) -> Iterator[_Timer]:
    """Time a block, logging duration, throughput and optionally DB calls.

    Args:
        label: Description of the operation being timed
        logger: Logger instance to use (defaults to "benefits.timer")
        level: Logging level for the timing message
        unit: Unit for throughput calculation (e.g., "rows", "workers")
        total: Expected total count for throughput calculation
        session: When given, ORM statements executed through it are counted
    """
    log = logger or logging.getLogger("benefits.timer")
    counter: StatementCounter | None = None
    if session is not None:
        counter = StatementCounter()
        counter.attach(session)

    timer = _Timer(
        label=label,
        logger=log,
        level=level,
        unit=unit,
        expected_total=total,
        statements=counter,
    )

    try:
        yield timer
    except Exception:
        timer.finish(success=False)
        raise
    else:
        timer.finish(success=True)
    finally:
        if counter is not None:
            counter.detach()
