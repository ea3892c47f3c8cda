"""Async HTTP client for the upstream tourist tracking API."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from .config import DEFAULT_API_BASE
from .exceptions import ApiError, InvalidPointError
from .geo import Point

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TouristDetails:
    name: str
    age: str
    id_proof: str
    emergency_contact: str
    itinerary: str = ""

    def validate(self) -> None:
        missing = [
            label
            for label, value in (
                ("name", self.name),
                ("age", self.age),
                ("id_proof", self.id_proof),
                ("emergency_contact", self.emergency_contact),
            )
            if not str(value).strip()
        ]
        if missing:
            raise ValueError("Missing required fields: {}".format(", ".join(missing)))

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "age": self.age,
            "idProof": self.id_proof,
            "emergencyContact": self.emergency_contact,
            "itinerary": self.itinerary,
        }


@dataclass(frozen=True)
class TouristRecord:
    """
    A tourist as known to the upstream API.

    ``point`` is None when the API has no coordinates for the tourist yet.
    """

    id: str
    name: str
    age: str | None = None
    emergency_contact: str | None = None
    point: Point | None = None
    last_sos: Any = None
    created_at: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "TouristRecord":
        point = None
        lat, lng = data.get("currentLat"), data.get("currentLng")
        if lat is not None and lng is not None:
            try:
                point = Point(latitude=lat, longitude=lng)
            except InvalidPointError:
                _LOGGER.warning(
                    "Ignoring invalid coordinates for tourist %s: %r, %r",
                    data.get("id"),
                    lat,
                    lng,
                )

        return cls(
            id=str(data["id"]),
            name=data.get("name") or "Unknown",
            age=str(data["age"]) if data.get("age") is not None else None,
            emergency_contact=data.get("emergencyContact"),
            point=point,
            last_sos=data.get("lastSOS"),
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class SosAlert:
    id: str
    tourist_id: str
    point: Point | None
    timestamp: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "SosAlert":
        point = None
        if data.get("lat") is not None and data.get("lng") is not None:
            try:
                point = Point(latitude=data["lat"], longitude=data["lng"])
            except InvalidPointError:
                _LOGGER.warning("Ignoring invalid SOS coordinates: %r", data)

        return cls(
            id=str(data["id"]),
            tourist_id=str(data.get("touristId")),
            point=point,
            timestamp=data.get("timestamp"),
        )


def _point_json(point: Point) -> dict[str, float]:
    return {"lat": point.latitude, "lng": point.longitude}


class ApiClient:
    """
    :param base_url: Root URL of the tracking API
    :param timeout: Per-request timeout in seconds
    :param client: Optional pre-configured ``httpx.AsyncClient``. When given,
        the caller remains responsible for closing it.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=5.0))
        self._client = client

    async def _request(
        self, method: str, path: str, json: Any | None = None
    ) -> Any:
        url = "{}{}".format(self.base_url, path)
        _LOGGER.debug("%s %s %r", method, url, json)
        try:
            response = await self._client.request(method, url, json=json)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ApiError("{} {} failed: {}".format(method, path, e)) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                "{} {} returned invalid JSON: {}".format(method, path, e)
            ) from e

    async def register_tourist(self, details: TouristDetails) -> TouristRecord:
        details.validate()
        data = await self._request("POST", "/tourists", json=details.to_json())
        if not isinstance(data, Mapping) or "id" not in data:
            raise ApiError("Registration response did not include a tourist id")
        return TouristRecord.from_json(data)

    async def report_location(self, tourist_id: str, point: Point) -> None:
        await self._request(
            "POST", "/tourists/{}/location".format(tourist_id), json=_point_json(point)
        )

    async def send_sos(self, tourist_id: str, point: Point) -> None:
        await self._request(
            "POST", "/tourists/{}/sos".format(tourist_id), json=_point_json(point)
        )

    async def fetch_tourists(self) -> list[TouristRecord]:
        data = await self._request("GET", "/police/tourists")
        try:
            return [TouristRecord.from_json(item) for item in data or []]
        except (KeyError, TypeError, AttributeError) as e:
            raise ApiError("Malformed tourist list: {}".format(e)) from e

    async def fetch_sos_alerts(self) -> list[SosAlert]:
        data = await self._request("GET", "/sos_alerts")
        try:
            return [SosAlert.from_json(item) for item in data or []]
        except (KeyError, TypeError, AttributeError) as e:
            raise ApiError("Malformed SOS alert list: {}".format(e)) from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
