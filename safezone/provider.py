import asyncio
import datetime
import logging
from abc import ABC, abstractmethod
from typing import Iterable

from .exceptions import LocationError
from .geo import Point, Position

_LOGGER = logging.getLogger(__name__)


class LocationProvider(ABC):
    """Produces the current position of a monitored subject"""

    @abstractmethod
    async def locate(self) -> Position:
        """
        Acquire a position.

        :raises LocationError: if no position could be acquired
        """
        raise NotImplementedError()

    async def close(self) -> None:
        pass


class StaticLocationProvider(LocationProvider):
    """Always reports the same point, timestamped at acquisition"""

    def __init__(self, point: Point) -> None:
        self._point = point

    async def locate(self) -> Position:
        return Position(point=self._point, timestamp=datetime.datetime.now())


class ScriptedLocationProvider(LocationProvider):
    """Replays a route one point per call, e.g. for simulations and demos"""

    def __init__(self, points: Iterable[Point], loop: bool = False) -> None:
        self._points = list(points)
        self._loop = loop
        self._index = 0
        self._lock = asyncio.Lock()

        if not self._points:
            raise ValueError("A scripted route needs at least one point")

    @property
    def exhausted(self) -> bool:
        return not self._loop and self._index >= len(self._points)

    async def locate(self) -> Position:
        async with self._lock:
            if self._index >= len(self._points):
                if not self._loop:
                    raise LocationError("Scripted route exhausted")
                _LOGGER.debug("Scripted route finished, restarting")
                self._index = 0

            point = self._points[self._index]
            self._index += 1

        return Position(point=point, timestamp=datetime.datetime.now())
