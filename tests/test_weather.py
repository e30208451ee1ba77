import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from weatherservice.weather import Forecast, OpenMeteoClient, parse_forecast, urllib_fetch

RESPONSE = (
    '{"latitude":43.0,"longitude":23.0,"daily":{"time":["2025-07-10"],'
    '"temperature_2m_max":[20.8],"uv_index_max":[5.3],"precipitation_probability_max":[0]}}'
)


class RecordingFetch:
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.urls = []

    def __call__(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.payload


def test_get_forecast_returns_weather_data():
    fetch = RecordingFetch(RESPONSE.encode())
    client = OpenMeteoClient(fetch, "testurl.com/latitude=%s&longitude=%s")
    resp = client.get_forecast("43.0", "23.0")
    assert len(resp) == 1
    day = resp["2025-07-10"]
    assert day.latitude == "43.0000"
    assert day.longitude == "23.0000"
    assert day.temp_2m_max == 20.8
    assert day.uv_index_max == 5.3
    assert day.precip_probability == 0.0


def test_get_forecast_fills_url_template():
    fetch = RecordingFetch(RESPONSE)
    client = OpenMeteoClient(fetch, "testurl.com/latitude=%s&longitude=%s")
    client.get_forecast("43.0", "23.0")
    assert fetch.urls == ["testurl.com/latitude=43.0&longitude=23.0"]


def test_get_forecast_request_fails():
    client = OpenMeteoClient(RecordingFetch(error=RuntimeError("error")), "testurl.com/latitude=%s&longitude=%s")
    with pytest.raises(RuntimeError) as info:
        client.get_forecast("43.0", "23.0")
    assert str(info.value) == "error"


def test_get_forecast_invalid_json_raises():
    client = OpenMeteoClient(RecordingFetch("not json"), "testurl.com/%s/%s")
    with pytest.raises(ValueError):
        client.get_forecast("43.0", "23.0")


def test_parse_forecast_several_days():
    payload = json.dumps(
        {
            "latitude": 42.0,
            "longitude": 23.0,
            "daily": {
                "time": ["2025-07-10", "2025-07-11"],
                "temperature_2m_max": [20.8, 23.0],
                "uv_index_max": [5.3, 3.0],
                "precipitation_probability_max": [0, 40],
            },
        }
    )
    result = parse_forecast(payload)
    assert list(result) == ["2025-07-10", "2025-07-11"]
    assert result["2025-07-11"] == Forecast("42.0000", "23.0000", 23.0, 3.0, 40.0)


def test_parse_forecast_null_value_counts_as_zero():
    payload = json.dumps(
        {
            "latitude": 42.0,
            "longitude": 23.0,
            "daily": {
                "time": ["2025-07-10"],
                "temperature_2m_max": [20.8],
                "uv_index_max": [5.3],
                "precipitation_probability_max": [None],
            },
        }
    )
    assert parse_forecast(payload)["2025-07-10"].precip_probability == 0.0


def test_parse_forecast_short_series_raises():
    payload = json.dumps(
        {"daily": {"time": ["2025-07-10"], "temperature_2m_max": [], "uv_index_max": [1], "precipitation_probability_max": [1]}}
    )
    with pytest.raises(ValueError):
        parse_forecast(payload)


def test_parse_forecast_non_numeric_raises():
    payload = json.dumps({"latitude": "north", "daily": {}})
    with pytest.raises(ValueError):
        parse_forecast(payload)


def test_parse_forecast_empty_daily():
    assert parse_forecast('{"latitude":43.0,"longitude":23.0}') == {}


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self):
        status = 404 if self.path == "/missing" else 200
        body = b'{"path": "%s"}' % self.path.encode()
        self.send_response(status)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, *args):
        pass


@pytest.fixture
def server_url():
    server = HTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


def test_urllib_fetch_returns_body(server_url):
    assert json.loads(urllib_fetch(server_url + "/forecast")) == {"path": "/forecast"}


def test_urllib_fetch_returns_body_on_error_status(server_url):
    assert json.loads(urllib_fetch(server_url + "/missing")) == {"path": "/missing"}