from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence

from neurolens_web.domain.errors import AnalysisError, InvalidTransition
from neurolens_web.domain.models import AnalysisReport, EncodedFile, SessionSnapshot, SessionStatus
from neurolens_web.services.analysis_client import AnalysisClient

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Analysis sequence failed."


class AnalysisSession:
    """
    Lifecycle of one browser's analysis: IDLE -> ANALYZING -> SUCCESS | ERROR -> (reset) -> IDLE.

    Every begin() and reset() bumps a generation counter. A result is only
    committed when it carries the generation it was started under and the
    session is still ANALYZING, so a reply that lands after a reset is dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._status = SessionStatus.IDLE
        self._files: tuple[EncodedFile, ...] = ()
        self._report: Optional[AnalysisReport] = None
        self._error: Optional[str] = None

    @property
    def status(self) -> SessionStatus:
        return self._status

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                status=self._status,
                generation=self._generation,
                files=self._files,
                report=self._report,
                error_message=self._error,
            )

    def begin(self, files: Sequence[EncodedFile]) -> int:
        if not files:
            raise ValueError("At least one file is required.")

        with self._lock:
            if self._status is not SessionStatus.IDLE:
                raise InvalidTransition(
                    f"Cannot start an analysis while the session is {self._status.value}; reset first."
                )
            self._generation += 1
            self._status = SessionStatus.ANALYZING
            self._files = tuple(files)
            self._report = None
            self._error = None
            return self._generation

    def _is_current(self, ticket: int) -> bool:
        return ticket == self._generation and self._status is SessionStatus.ANALYZING

    def complete(self, ticket: int, report: AnalysisReport) -> bool:
        with self._lock:
            if not self._is_current(ticket):
                logger.info("Dropped stale report for generation %d (current %d)", ticket, self._generation)
                return False
            self._status = SessionStatus.SUCCESS
            self._report = report
            return True

    def fail(self, ticket: int, message: str) -> bool:
        with self._lock:
            if not self._is_current(ticket):
                logger.info("Dropped stale failure for generation %d (current %d)", ticket, self._generation)
                return False
            self._status = SessionStatus.ERROR
            self._error = message or GENERIC_FAILURE_MESSAGE
            return True

    def reset(self) -> None:
        with self._lock:
            self._generation += 1
            self._status = SessionStatus.IDLE
            self._files = ()
            self._report = None
            self._error = None

    def run(self, files: Sequence[EncodedFile], client: AnalysisClient) -> SessionSnapshot:
        """
        begin -> client.analyze -> complete | fail.
        Analysis failures end in ERROR; only InvalidTransition reaches the caller.
        """
        ticket = self.begin(files)

        try:
            report = client.analyze(files)
        except AnalysisError as e:
            logger.warning("Analysis %d failed: %s", ticket, e.user_message)
            self.fail(ticket, e.user_message)
        except Exception:
            logger.exception("Analysis %d failed unexpectedly", ticket)
            self.fail(ticket, GENERIC_FAILURE_MESSAGE)
        else:
            if self.complete(ticket, report):
                logger.info("Analysis %d succeeded: %s", ticket, report.detected_task)

        return self.snapshot()
