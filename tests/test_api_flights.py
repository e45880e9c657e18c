import pytest
from fastapi.testclient import TestClient

from globeview.config import settings
from globeview.ingestors.opensky import FlightFetchError
from globeview.main import app
from globeview.models import AircraftState


class FakeIngestor:
    def __init__(self, flights):
        self.flights = flights
        self.error: Exception | None = None
        self.call_count = 0

    async def fetch_states(self):
        self.call_count += 1
        if self.error is not None:
            raise self.error
        return list(self.flights)


FLIGHT = AircraftState(
    icao24="abc123",
    callsign="TEST123",
    origin_country="Testland",
    longitude=0.0,
    latitude=0.0,
    baro_altitude=10000.0,
    true_track=45.0,
)


@pytest.fixture
def client_and_ingestor(monkeypatch):
    monkeypatch.setattr(settings, "show_flights", False)
    monkeypatch.setattr(settings, "flight_poll_interval", None)

    ingestor = FakeIngestor([FLIGHT])
    with TestClient(app) as client:
        client.app.state.flight_layer.ingestor = ingestor
        yield client, ingestor


def test_health_check(client_and_ingestor):
    client, _ = client_and_ingestor

    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_enable_layer_and_pick_flight(client_and_ingestor):
    client, ingestor = client_and_ingestor

    assert client.put(
        "/api/v1/scene/camera",
        json={"longitude": 0.0, "latitude": 0.0, "height": 1_000_000},
    ).status_code == 204

    response = client.put(
        "/api/v1/flights/layer",
        json={"show_flights": True, "use_3d_models": False, "max_flight_distance": 1e8},
    )
    assert response.status_code == 200
    status = response.json()
    assert status["enabled"] is True
    assert status["universe_size"] == 1
    assert status["visible_count"] == 1
    assert ingestor.call_count == 1

    entities = client.get("/api/v1/scene/entities").json()
    assert [entity["entity_id"] for entity in entities] == ["flight_abc123"]
    assert entities[0]["style"] == "billboard"
    assert entities[0]["rotation"] == pytest.approx(0.7853981)

    picked = client.post("/api/v1/scene/pick", json={"x": 640, "y": 360})
    assert picked.status_code == 200
    assert picked.json()["icao24"] == "abc123"
    assert picked.json()["flight"]["callsign"] == "TEST123"

    assert client.post("/api/v1/scene/pick", json={"x": 5, "y": 5}).status_code == 404

    flight = client.get("/api/v1/flights/abc123")
    assert flight.status_code == 200
    assert flight.json()["origin_country"] == "Testland"
    assert client.get("/api/v1/flights/zzz999").status_code == 404

    event_types = [event["event_type"] for event in client.get("/api/v1/flights/events").json()]
    assert "visible_count_changed" in event_types
    assert "flight_selected" in event_types


def test_disable_layer_clears_scene(client_and_ingestor):
    client, _ = client_and_ingestor
    client.put(
        "/api/v1/scene/camera",
        json={"longitude": 0.0, "latitude": 0.0, "height": 1_000_000},
    )
    client.put("/api/v1/flights/layer", json={"show_flights": True})

    response = client.put("/api/v1/flights/layer", json={"show_flights": False})

    assert response.json()["enabled"] is False
    assert response.json()["universe_size"] == 0
    assert client.get("/api/v1/scene/entities").json() == []
    assert client.post("/api/v1/flights/refresh").status_code == 409


def test_refresh_reports_fetch_errors(client_and_ingestor):
    client, ingestor = client_and_ingestor
    client.put(
        "/api/v1/scene/camera",
        json={"longitude": 0.0, "latitude": 0.0, "height": 1_000_000},
    )
    client.put("/api/v1/flights/layer", json={"show_flights": True})

    ingestor.error = FlightFetchError("OpenSky rate limit exceeded")
    response = client.post("/api/v1/flights/refresh")

    assert response.status_code == 200
    body = response.json()
    assert body["enabled"] is True
    assert body["universe_size"] == 0
    assert body["visible_count"] == 0
    assert body["last_error"] == "OpenSky rate limit exceeded"


def test_camera_update_is_validated(client_and_ingestor):
    client, _ = client_and_ingestor

    response = client.put(
        "/api/v1/scene/camera",
        json={"longitude": 200.0, "latitude": 0.0, "height": 1_000_000},
    )

    assert response.status_code == 422
