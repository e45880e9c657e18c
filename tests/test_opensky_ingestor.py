import json

import httpx
import pytest

from globeview.ingestors.opensky import (
    FlightFetchError,
    OpenSkyIngestor,
    decode_states,
    parse_state_vector,
)


def _row(**overrides):
    row = [
        "abc123",  # icao24
        "TEST123 ",  # callsign with trailing space
        "United States",
        1714765198,  # time_position
        1714765200,  # last_contact
        20.0,  # longitude
        10.0,  # latitude
        3657.6,  # baro_altitude meters
        False,  # on_ground
        164.6,  # velocity m/s
        90.0,  # true_track
        2.0,  # vertical_rate m/s
        [1, 2],  # sensors
        3700.0,  # geo_altitude meters
        " 7000 ",  # squawk
        False,  # spi
        0,  # position_source
        4,  # category
    ]
    index = {
        "icao24": 0,
        "callsign": 1,
        "longitude": 5,
        "latitude": 6,
        "baro_altitude": 7,
        "on_ground": 8,
        "true_track": 10,
        "squawk": 14,
    }
    for key, value in overrides.items():
        row[index[key]] = value
    return row


def test_parse_state_vector_decodes_all_fields():
    flight = parse_state_vector(_row())

    assert flight is not None
    assert flight.icao24 == "abc123"
    assert flight.callsign == "TEST123"
    assert flight.origin_country == "United States"
    assert flight.time_position == 1714765198
    assert flight.last_contact == 1714765200
    assert flight.longitude == 20.0
    assert flight.latitude == 10.0
    assert flight.baro_altitude == pytest.approx(3657.6)
    assert flight.on_ground is False
    assert flight.velocity == pytest.approx(164.6)
    assert flight.true_track == 90.0
    assert flight.vertical_rate == 2.0
    assert flight.sensors == [1, 2]
    assert flight.geo_altitude == 3700.0
    assert flight.squawk == "7000"
    assert flight.spi is False
    assert flight.position_source == 0
    assert flight.category == 4
    assert flight.entity_id == "flight_abc123"


def test_parse_state_vector_applies_defaults():
    flight = parse_state_vector(
        _row(baro_altitude=None, true_track=None, callsign=None, squawk=7000)
    )

    assert flight is not None
    assert flight.baro_altitude == 10000
    assert flight.true_track == 0
    assert flight.callsign == ""
    assert flight.squawk is None


def test_parse_state_vector_accepts_numeric_strings_for_altitude_and_heading():
    flight = parse_state_vector(_row(baro_altitude="1200.5", true_track="270"))

    assert flight is not None
    assert flight.baro_altitude == 1200.5
    assert flight.true_track == 270.0

    flight = parse_state_vector(_row(baro_altitude="n/a", true_track=True))
    assert flight is not None
    assert flight.baro_altitude == 10000
    assert flight.true_track == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"icao24": None},
        {"icao24": "  "},
        {"longitude": None},
        {"latitude": None},
        {"longitude": "20.0"},
        {"longitude": 181.0},
        {"latitude": -91.0},
        {"longitude": True},
        {"on_ground": True},
        {"on_ground": None},
    ],
)
def test_parse_state_vector_drops_invalid_rows(overrides):
    assert parse_state_vector(_row(**overrides)) is None


def test_parse_state_vector_tolerates_short_rows():
    row = ["def456", "SHORT", "France", None, None, 2.35, 48.85, None, False]

    flight = parse_state_vector(row)

    assert flight is not None
    assert flight.baro_altitude == 10000
    assert flight.true_track == 0
    assert flight.category is None
    assert parse_state_vector("not a row") is None


def test_decode_states_filters_and_rejects_malformed_envelope():
    flights = decode_states(
        {
            "time": 1714765200,
            "states": [
                _row(),
                _row(icao24="grnd01", on_ground=True),
                _row(icao24="nopos1", longitude=None),
                None,
            ],
        }
    )
    assert [flight.icao24 for flight in flights] == ["abc123"]

    with pytest.raises(FlightFetchError):
        decode_states({"time": 1714765200, "states": None})
    with pytest.raises(FlightFetchError):
        decode_states({"states": "oops"})
    with pytest.raises(FlightFetchError):
        decode_states([])


@pytest.mark.anyio
async def test_ingestor_fetches_states():
    payload = {"time": 1714765200, "states": [_row(), _row(icao24="xyz789")]}
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request):
        seen.append(request)
        return httpx.Response(200, json=payload)

    transport = httpx.MockTransport(handler)
    ingestor = OpenSkyIngestor(base_url="https://example.test/states", transport=transport)

    flights = await ingestor.fetch_states()

    assert [flight.icao24 for flight in flights] == ["abc123", "xyz789"]
    assert len(seen) == 1
    assert seen[0].method == "GET"
    assert not seen[0].url.params


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(429, text="rate limited"),
        httpx.Response(503, text="unavailable"),
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json={"time": 1, "states": None}),
    ],
)
async def test_ingestor_raises_fetch_error(response):
    transport = httpx.MockTransport(lambda request: response)
    ingestor = OpenSkyIngestor(base_url="https://example.test/states", transport=transport)

    with pytest.raises(FlightFetchError):
        await ingestor.fetch_states()


@pytest.mark.anyio
async def test_ingestor_wraps_transport_errors():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    transport = httpx.MockTransport(handler)
    ingestor = OpenSkyIngestor(base_url="https://example.test/states", transport=transport)

    with pytest.raises(FlightFetchError):
        await ingestor.fetch_states()


@pytest.mark.parametrize("bad_sensor", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_sensor_ids_do_not_drop_the_row(bad_sensor):
    row = _row()
    row[12] = [bad_sensor, 3]

    flights = decode_states({"states": [row, _row(icao24="def456")]})

    assert [flight.icao24 for flight in flights] == ["abc123", "def456"]
    assert flights[0].sensors == [3]


def test_non_finite_sensor_ids_decoded_from_json_body():
    body = (
        '{"states": [["abc123", "TEST1", "X", null, null, 20.0, 10.0, 3000.0,'
        ' false, null, 90.0, null, [NaN, Infinity], null, null, null, null, null]]}'
    )

    flights = decode_states(json.loads(body))

    assert len(flights) == 1
    assert flights[0].sensors == []
