import asyncio
import datetime
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from .api import ApiClient, SosAlert, TouristRecord
from .config import DEFAULT_DASHBOARD_INTERVAL
from .evaluator import Classification, ContainmentPolicy, ZoneEvaluator
from .exceptions import ApiError
from .geo import Point, Position
from .tracker import ClassificationCallback, Tracker
from .zone import SubjectStatus, Zone, default_zones

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TouristStatus:
    record: TouristRecord
    classification: Classification | None
    status: SubjectStatus

    @property
    def zone_name(self) -> str | None:
        if self.classification is None:
            return None
        return self.classification.zone_name


@dataclass(frozen=True)
class Alert:
    id: str
    type: str  # "sos" or "geofence"
    tourist_id: str
    tourist_name: str
    message: str
    point: Point | None
    timestamp: str | None


def _derive_status(
    record: TouristRecord, classification: Classification | None
) -> SubjectStatus:
    if record.last_sos:
        return SubjectStatus.EMERGENCY
    if classification is None:
        # No coordinates reported yet.
        return SubjectStatus.WARNING
    return classification.status


class Dashboard:
    """
    Police-side view over every tourist known to the API.

    Each refresh fetches tourists and SOS alerts, classifies every tourist
    with a known position and rebuilds :py:attr:`tourists` and
    :py:attr:`alerts`. If a refresh fails the previous view is kept.
    """

    def __init__(
        self,
        api: ApiClient,
        zones: Iterable[Zone] | None = None,
        evaluator: ZoneEvaluator | None = None,
        tracker: Tracker | None = None,
        update_interval: float = DEFAULT_DASHBOARD_INTERVAL,
        policy: ContainmentPolicy = ContainmentPolicy.FIRST_MATCH,
    ) -> None:
        if tracker is None:
            if evaluator is None:
                evaluator = ZoneEvaluator(
                    zones if zones is not None else default_zones(), policy=policy
                )
            tracker = Tracker(evaluator)

        self.tracker = tracker
        self.tourists: List[TouristStatus] = []
        self.alerts: List[Alert] = []
        self._api = api
        self._update_interval = update_interval
        self._closed = False
        self._fetch_failing = False

    async def refresh(self) -> bool:
        """Fetch and classify the latest data. Returns False if the fetch failed."""
        try:
            records, sos_alerts = await asyncio.gather(
                self._api.fetch_tourists(), self._api.fetch_sos_alerts()
            )
        except ApiError as e:
            if not self._fetch_failing:
                _LOGGER.warning(
                    "Failed to fetch live data, keeping last known state: %s", e
                )
            else:
                _LOGGER.debug("Fetch still failing: %s", e)
            self._fetch_failing = True
            return False

        if self._fetch_failing:
            _LOGGER.info("Live data fetch recovered")
        self._fetch_failing = False

        now = datetime.datetime.now()
        tourists = []
        for record in records:
            classification = None
            if record.point is not None:
                self.tracker.handle_position(
                    record.id, Position(point=record.point, timestamp=now)
                )
                classification = self.tracker.classification(record.id)
            tourists.append(
                TouristStatus(
                    record=record,
                    classification=classification,
                    status=_derive_status(record, classification),
                )
            )

        located = {r.id for r in records if r.point is not None}
        for subject_id in set(self.tracker.subjects) - located:
            self.tracker.forget(subject_id)

        self.tourists = tourists
        self.alerts = self._build_alerts(records, sos_alerts, now)
        _LOGGER.debug(
            "Refreshed %d tourists, %d alerts", len(self.tourists), len(self.alerts)
        )
        return True

    def _build_alerts(
        self,
        records: List[TouristRecord],
        sos_alerts: List[SosAlert],
        now: datetime.datetime,
    ) -> List[Alert]:
        names = {record.id: record.name for record in records}
        alerts = [
            Alert(
                id="SOS-{}".format(sos.id),
                type="sos",
                tourist_id=sos.tourist_id,
                tourist_name=names.get(sos.tourist_id, "Unknown"),
                message="Emergency SOS alert triggered",
                point=sos.point,
                timestamp=sos.timestamp,
            )
            for sos in sos_alerts
        ]

        known = set(names)
        for geofence in self.tracker.alerts():
            if geofence.subject_id not in known:
                continue
            alerts.append(
                Alert(
                    id=geofence.id,
                    type="geofence",
                    tourist_id=geofence.subject_id,
                    tourist_name=names[geofence.subject_id],
                    message=geofence.message,
                    point=geofence.position.point,
                    timestamp=now.isoformat(),
                )
            )

        # Later duplicates replace earlier ones but keep their position.
        unique: Dict[str, Alert] = {}
        for alert in alerts:
            unique[alert.id] = alert
        return list(unique.values())

    async def keepalive(self) -> None:
        while not self._closed:
            await self.refresh()
            await asyncio.sleep(self._update_interval)

    async def close(self) -> None:
        self._closed = True

    def on_classification_change(
        self, f: ClassificationCallback
    ) -> ClassificationCallback:
        self.tracker.on_classification_change(f)
        return f
