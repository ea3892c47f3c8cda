from __future__ import annotations

import logging
from typing import TextIO

from ..geo import Position
from ..provider import LocationProvider

_LOGGER = logging.getLogger(__name__)


class LoggingLocationProvider(LocationProvider):
    """Wrap a provider and append every acquired position to a file."""

    def __init__(self, inner: LocationProvider, log_file: TextIO) -> None:
        self._inner = inner
        self._log_file = log_file

    async def locate(self) -> Position:
        position = await self._inner.locate()
        try:
            self._log_file.write(
                "{} {}\n".format(position.timestamp.isoformat(), position.point)
            )
            self._log_file.flush()
        except OSError:
            _LOGGER.warning("Failed to write position log", exc_info=True)
        return position

    async def close(self) -> None:
        await self._inner.close()
        self._log_file.close()
