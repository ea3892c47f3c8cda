import datetime
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from .evaluator import Classification, ZoneEvaluator
from .geo import Position
from .zone import Zone, ZoneType

_LOGGER = logging.getLogger(__name__)

ClassificationCallback = Callable[[str, Classification, Classification], None]


def _comparable(timestamp: datetime.datetime) -> datetime.datetime:
    # Naive timestamps are local time.
    if timestamp.tzinfo is None:
        return timestamp.astimezone()
    return timestamp


@dataclass(frozen=True)
class GeofenceAlert:
    id: str
    subject_id: str
    zone: Zone
    position: Position
    message: str


class Tracker:
    """
    In-memory representation of the last known position and classification
    of every subject being monitored.
    """

    @dataclass
    class Subject:
        position: Position | None = None
        classification: Classification | None = None

    def __init__(self, evaluator: ZoneEvaluator) -> None:
        self.evaluator = evaluator
        self.subjects: Dict[str, Tracker.Subject] = {}

        self._on_classification_change: ClassificationCallback | None = None

    def handle_position(self, subject_id: str, position: Position) -> bool:
        """
        Classify a new position for ``subject_id`` and store it.

        Returns whether the zone type changed. A subject seen for the first
        time starts from the safe baseline. Positions older than the one
        already stored are stale (a slower poll finishing after a newer one)
        and are dropped.
        """
        subject = self.subjects.setdefault(subject_id, Tracker.Subject())
        if subject.position is not None and _comparable(
            position.timestamp
        ) < _comparable(subject.position.timestamp):
            _LOGGER.debug(
                "Discarding stale position for %s (%s < %s)",
                subject_id,
                position.timestamp,
                subject.position.timestamp,
            )
            return False

        classification = self.evaluator.classify(position.point)
        subject.position = position
        return self._update_classification(subject_id, subject, classification)

    def _update_classification(
        self, subject_id: str, subject: "Tracker.Subject", classification: Classification
    ) -> bool:
        previous = subject.classification or Classification.safe()
        subject.classification = classification
        if previous.zone_type == classification.zone_type:
            return False

        _LOGGER.info(
            "Subject %s moved from %s to %s (zone: %s)",
            subject_id,
            previous.zone_type.value,
            classification.zone_type.value,
            classification.zone_name,
        )
        if self._on_classification_change is not None:
            try:
                self._on_classification_change(subject_id, classification, previous)
            except Exception:
                _LOGGER.warning(
                    "Classification change handler raised for %s",
                    subject_id,
                    exc_info=True,
                )
        return True

    def classification(self, subject_id: str) -> Classification | None:
        subject = self.subjects.get(subject_id)
        return subject.classification if subject is not None else None

    def position(self, subject_id: str) -> Position | None:
        subject = self.subjects.get(subject_id)
        return subject.position if subject is not None else None

    def forget(self, subject_id: str) -> None:
        self.subjects.pop(subject_id, None)

    def alerts(self) -> List[GeofenceAlert]:
        alerts: Dict[str, GeofenceAlert] = {}
        for subject_id, subject in self.subjects.items():
            classification = subject.classification
            if (
                classification is None
                or classification.zone is None
                or classification.zone_type == ZoneType.GREEN
                or subject.position is None
            ):
                continue

            alert_id = "GEO-{}".format(subject_id)
            alerts[alert_id] = GeofenceAlert(
                id=alert_id,
                subject_id=subject_id,
                zone=classification.zone,
                position=subject.position,
                message="Entered {} zone: {}".format(
                    classification.zone_type.value,
                    classification.zone_name or "unnamed",
                ),
            )
        return list(alerts.values())

    def on_classification_change(self, f: ClassificationCallback) -> None:
        self._on_classification_change = f
