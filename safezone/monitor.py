import asyncio
import datetime
import logging
from typing import Iterable, Set

from justbackoff import Backoff

from .api import ApiClient
from .config import (
    DEFAULT_LOCATE_TIMEOUT,
    DEFAULT_MAX_PENDING_POLLS,
    DEFAULT_POLL_INTERVAL,
)
from .evaluator import Classification, ContainmentPolicy, ZoneEvaluator
from .exceptions import ApiError, LocationError
from .geo import Position
from .provider import LocationProvider
from .tracker import ClassificationCallback, Tracker
from .zone import Zone, default_zones

_LOGGER = logging.getLogger(__name__)


class Monitor:
    """
    Periodically locates a single subject, classifies the position and
    reports it upstream.

    :param provider: Source of positions for the subject
    :param subject_id: Identifier the subject is tracked and reported under
    :param zones: Zone configuration, defaults to the embedded zones. Ignored
        when ``evaluator`` or ``tracker`` is given.
    :param api: Optional API client; positions are reported upstream when set
    :param update_interval: Seconds between the start of two polls. Polls are
        not awaited before the next one starts, so slow location fixes may
        overlap.
    :param locate_timeout: Seconds a location fix may take before the poll
        counts it as failed. None waits forever.
    :param max_pending_polls: Polls allowed in flight at once. Ticks that
        would exceed it are skipped.
    """

    def __init__(
        self,
        provider: LocationProvider,
        subject_id: str,
        zones: Iterable[Zone] | None = None,
        evaluator: ZoneEvaluator | None = None,
        tracker: Tracker | None = None,
        api: ApiClient | None = None,
        update_interval: float = DEFAULT_POLL_INTERVAL,
        policy: ContainmentPolicy = ContainmentPolicy.FIRST_MATCH,
        locate_timeout: float | None = DEFAULT_LOCATE_TIMEOUT,
        max_pending_polls: int = DEFAULT_MAX_PENDING_POLLS,
    ) -> None:
        if tracker is None:
            if evaluator is None:
                evaluator = ZoneEvaluator(
                    zones if zones is not None else default_zones(), policy=policy
                )
            tracker = Tracker(evaluator)

        self.tracker = tracker
        self.subject_id = subject_id
        self._provider = provider
        self._api = api
        self._update_interval = update_interval
        self._locate_timeout = locate_timeout
        self._max_pending_polls = max_pending_polls
        self._closed = False
        self._backoff = Backoff(min_ms=1000, max_ms=60000)
        self._report_not_before: datetime.datetime | None = None
        self._pending_polls: Set[asyncio.Task[Classification | None]] = set()

    @property
    def classification(self) -> Classification | None:
        return self.tracker.classification(self.subject_id)

    @property
    def position(self) -> Position | None:
        return self.tracker.position(self.subject_id)

    async def poll(self) -> Classification | None:
        """
        Run one location, classification and report cycle.

        Returns the subject's current classification, or None when no
        position could be acquired. A failed acquisition leaves the previous
        classification in place.
        """
        try:
            position = await self._locate()
        except LocationError as e:
            _LOGGER.warning("Failed to acquire location for %s: %s", self.subject_id, e)
            return None

        _LOGGER.debug("Acquired position for %s: %s", self.subject_id, position)
        self.tracker.handle_position(self.subject_id, position)

        if self._api is not None:
            await self._report(position)

        return self.classification

    async def _locate(self) -> Position:
        try:
            return await asyncio.wait_for(
                self._provider.locate(), timeout=self._locate_timeout
            )
        except asyncio.TimeoutError:
            raise LocationError(
                "No location fix within {}s".format(self._locate_timeout)
            ) from None

    async def _report(self, position: Position) -> None:
        assert self._api is not None

        now = datetime.datetime.now()
        if self._report_not_before is not None and now < self._report_not_before:
            _LOGGER.debug("Skipping location report until %s", self._report_not_before)
            return

        try:
            await self._api.report_location(self.subject_id, position.point)
        except ApiError as e:
            delay = self._backoff.duration()
            self._report_not_before = now + datetime.timedelta(seconds=delay)
            _LOGGER.warning("Location report failed, retrying in %.1fs: %s", delay, e)
            return

        self._backoff.reset()
        self._report_not_before = None

    def _spawn_poll(self) -> None:
        if len(self._pending_polls) >= self._max_pending_polls:
            _LOGGER.debug(
                "Skipping poll for %s, %d still in flight",
                self.subject_id,
                len(self._pending_polls),
            )
            return
        task = asyncio.create_task(self.poll())
        self._pending_polls.add(task)
        task.add_done_callback(self._poll_done)

    def _poll_done(self, task: "asyncio.Task[Classification | None]") -> None:
        self._pending_polls.discard(task)
        if not task.cancelled() and task.exception() is not None:
            _LOGGER.warning(
                "Poll for %s raised", self.subject_id, exc_info=task.exception()
            )

    async def keepalive(self) -> None:
        """Poll every ``update_interval`` seconds until closed"""
        while not self._closed:
            self._spawn_poll()
            await asyncio.sleep(self._update_interval)

    async def close(self) -> None:
        self._closed = True
        for task in list(self._pending_polls):
            task.cancel()
        if self._pending_polls:
            await asyncio.gather(*self._pending_polls, return_exceptions=True)
        await self._provider.close()

    def on_classification_change(
        self, f: ClassificationCallback
    ) -> ClassificationCallback:
        self.tracker.on_classification_change(f)
        return f
