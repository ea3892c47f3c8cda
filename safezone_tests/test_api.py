import json

import httpx
import pytest

from safezone.api import ApiClient, SosAlert, TouristDetails, TouristRecord
from safezone.exceptions import ApiError
from safezone.geo import Point

BASE_URL = "https://api.example.test"


class Recorder:
    """Collects requests and answers them from a queue of responses."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(recorder: Recorder) -> ApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return ApiClient(base_url=BASE_URL + "/", client=http)


@pytest.mark.asyncio
async def test_report_location():
    recorder = Recorder(httpx.Response(200, json={"ok": True}))
    api = make_client(recorder)

    await api.report_location("42", Point(latitude=28.7, longitude=77.1))

    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == BASE_URL + "/tourists/42/location"
    assert json.loads(request.content) == {"lat": 28.7, "lng": 77.1}


@pytest.mark.asyncio
async def test_send_sos():
    recorder = Recorder(httpx.Response(201))
    api = make_client(recorder)

    await api.send_sos("42", Point(latitude=28.7, longitude=77.1))

    request = recorder.requests[0]
    assert str(request.url) == BASE_URL + "/tourists/42/sos"
    assert json.loads(request.content) == {"lat": 28.7, "lng": 77.1}


@pytest.mark.asyncio
async def test_register_tourist():
    recorder = Recorder(
        httpx.Response(200, json={"id": 7, "name": "Asha", "age": 29})
    )
    api = make_client(recorder)
    details = TouristDetails(
        name="Asha", age="29", id_proof="P123", emergency_contact="+911234567890"
    )

    record = await api.register_tourist(details)

    assert record.id == "7"
    assert record.name == "Asha"
    assert record.point is None
    body = json.loads(recorder.requests[0].content)
    assert body == {
        "name": "Asha",
        "age": "29",
        "idProof": "P123",
        "emergencyContact": "+911234567890",
        "itinerary": "",
    }


@pytest.mark.asyncio
async def test_register_tourist_requires_fields():
    recorder = Recorder()
    api = make_client(recorder)
    details = TouristDetails(name="Asha", age="", id_proof=" ", emergency_contact="x")

    with pytest.raises(ValueError) as exc_info:
        await api.register_tourist(details)

    assert "age" in str(exc_info.value)
    assert "id_proof" in str(exc_info.value)
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_register_tourist_without_id():
    api = make_client(Recorder(httpx.Response(200, json={"name": "Asha"})))
    details = TouristDetails(name="Asha", age="29", id_proof="P", emergency_contact="1")

    with pytest.raises(ApiError):
        await api.register_tourist(details)


@pytest.mark.asyncio
async def test_fetch_tourists():
    recorder = Recorder(
        httpx.Response(
            200,
            json=[
                {
                    "id": 1,
                    "name": "Asha",
                    "age": 29,
                    "currentLat": 28.75,
                    "currentLng": 77.11,
                    "emergencyContact": "+91",
                    "created_at": "2024-03-01T10:00:00",
                },
                {"id": 2, "name": "Ben", "currentLat": None, "currentLng": None},
                {"id": 3, "name": "Cy", "currentLat": 28.7, "currentLng": 779.1},
                {"id": 4, "lastSOS": "2024-03-01T10:05:00"},
            ],
        )
    )
    api = make_client(recorder)

    tourists = await api.fetch_tourists()

    assert str(recorder.requests[0].url) == BASE_URL + "/police/tourists"
    assert [t.id for t in tourists] == ["1", "2", "3", "4"]
    assert tourists[0].point == Point(latitude=28.75, longitude=77.11)
    assert tourists[0].age == "29"
    # Missing or invalid coordinates are never replaced with a placeholder.
    assert tourists[1].point is None
    assert tourists[2].point is None
    assert tourists[3].name == "Unknown"
    assert tourists[3].last_sos == "2024-03-01T10:05:00"


@pytest.mark.asyncio
async def test_fetch_sos_alerts():
    recorder = Recorder(
        httpx.Response(
            200,
            json=[{"id": 9, "touristId": 1, "lat": 28.75, "lng": 77.11, "timestamp": "t"}],
        )
    )
    api = make_client(recorder)

    alerts = await api.fetch_sos_alerts()

    assert alerts == [
        SosAlert(
            id="9",
            tourist_id="1",
            point=Point(latitude=28.75, longitude=77.11),
            timestamp="t",
        )
    ]


@pytest.mark.asyncio
async def test_http_error_status_raises_api_error():
    api = make_client(Recorder(httpx.Response(500, text="boom")))
    with pytest.raises(ApiError):
        await api.fetch_tourists()


@pytest.mark.asyncio
async def test_transport_error_raises_api_error():
    api = make_client(Recorder(httpx.ConnectError("refused")))
    with pytest.raises(ApiError) as exc_info:
        await api.report_location("1", Point(latitude=0, longitude=0))
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_invalid_json_raises_api_error():
    api = make_client(Recorder(httpx.Response(200, text="<html>")))
    with pytest.raises(ApiError):
        await api.fetch_sos_alerts()


@pytest.mark.asyncio
async def test_malformed_records_raise_api_error():
    api = make_client(Recorder(httpx.Response(200, json=[{"name": "no id"}])))
    with pytest.raises(ApiError):
        await api.fetch_tourists()


@pytest.mark.asyncio
async def test_close_leaves_injected_client_open():
    http = httpx.AsyncClient(transport=httpx.MockTransport(Recorder()))
    api = ApiClient(base_url=BASE_URL, client=http)
    await api.close()
    assert not http.is_closed
    await http.aclose()


@pytest.mark.asyncio
async def test_close_owned_client():
    api = ApiClient(base_url=BASE_URL)
    await api.close()
    assert api._client.is_closed


def test_tourist_record_from_json_minimal():
    record = TouristRecord.from_json({"id": "abc"})
    assert record == TouristRecord(id="abc", name="Unknown")
