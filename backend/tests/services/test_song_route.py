"""GET /song — end-to-end through FastAPI, middleware and the real upstream client.

Invariants:
    - Missing/empty id → 400 "Missing required parameter: id"
    - Non-integer id → 400 "Invalid song id format"
    - Upstream code 200 → 200 with the upstream body unchanged
    - Upstream code != 200 → 400 {code: <upstream code>, message: "Music service returned error"}
    - Transport/read/decode failures → 500 with fixed messages, no upstream details
"""

import logging

import httpx
import pytest

from tests.services.mock_upstream import BrokenStream, json_response, track_entry


@pytest.mark.parametrize("path", ["/song", "/song?id=", "/song?level=exhigh"])
async def test_missing_id_returns_400(client, fake_upstream, path):
    res = await client.get(path)
    assert res.status_code == 400
    assert res.json() == {"code": 400, "message": "Missing required parameter: id"}
    assert fake_upstream.requests == []


@pytest.mark.parametrize("song_id", ["abc", "12ab", "1.0", "-", "99999999999999999999"])
async def test_non_numeric_id_returns_400(client, fake_upstream, song_id):
    res = await client.get("/song", params={"id": song_id})
    assert res.status_code == 400
    assert res.json() == {"code": 400, "message": "Invalid song id format"}
    assert fake_upstream.requests == []


async def test_success_passes_upstream_body_through(client, fake_upstream):
    payload = {
        "code": 200,
        "data": [
            track_entry(),
            track_entry(id=2, url=None, code=404, br=0, size=0, md5=None, level=None),
        ],
    }
    fake_upstream.queue(json_response(payload))

    res = await client.get("/song", params={"id": "1969519579"})

    assert res.status_code == 200
    assert res.json() == payload
    assert list(res.json()["data"][0]) == list(track_entry())


async def test_defaults_and_overrides_reach_upstream(client, fake_upstream):
    await client.get("/song", params={"id": "7"})
    assert fake_upstream.last_params["level"] == "exhigh"
    assert fake_upstream.last_params["realIP"] == "116.25.146.177"

    await client.get("/song", params={"id": "7", "level": "hires", "realip": "9.9.9.9"})
    assert fake_upstream.last_params["level"] == "hires"
    assert fake_upstream.last_params["realIP"] == "9.9.9.9"


async def test_upstream_rejection_returns_400_with_upstream_code(client, fake_upstream):
    fake_upstream.queue(json_response({"code": 404, "message": "raw upstream text"}))
    res = await client.get("/song", params={"id": "1"})
    assert res.status_code == 400
    assert res.json() == {"code": 404, "message": "Music service returned error"}


async def test_upstream_http_status_is_ignored(client, fake_upstream):
    fake_upstream.queue(json_response({"code": 200, "data": []}, status_code=503))
    res = await client.get("/song", params={"id": "1"})
    assert res.status_code == 200


async def test_unreachable_upstream_returns_500(client, fake_upstream):
    fake_upstream.queue(httpx.ConnectError("connection refused"))
    res = await client.get("/song", params={"id": "1"})
    assert res.status_code == 500
    assert res.json() == {"code": 500, "message": "Failed to request music service"}


async def test_upstream_timeout_returns_500_unreachable(client, fake_upstream):
    fake_upstream.queue(httpx.ConnectTimeout("timed out"))
    res = await client.get("/song", params={"id": "1"})
    assert res.status_code == 500
    assert res.json()["message"] == "Failed to request music service"


async def test_broken_body_returns_500_read_error(client, fake_upstream):
    fake_upstream.queue(httpx.Response(200, stream=BrokenStream()))
    res = await client.get("/song", params={"id": "1"})
    assert res.status_code == 500
    assert res.json() == {
        "code": 500, "message": "Failed to read response from music service",
    }


async def test_non_json_body_returns_500_decode_error(client, fake_upstream):
    fake_upstream.queue(httpx.Response(200, content=b"<html>oops</html>"))
    res = await client.get("/song", params={"id": "1"})
    assert res.status_code == 500
    assert res.json() == {
        "code": 500, "message": "Failed to parse response from music service",
    }
    assert "oops" not in res.text


async def test_failure_is_logged_once_with_context(client, fake_upstream, caplog):
    fake_upstream.queue(httpx.ConnectError("connection refused"))
    with caplog.at_level(logging.INFO):
        await client.get("/song", params={"id": "77"})

    errors = [r for r in caplog.records if r.name == "pms.api.error_handlers"]
    assert len(errors) == 1
    assert errors[0].levelno == logging.ERROR
    assert errors[0].error_code == "UPSTREAM_UNREACHABLE"
    assert errors[0].song_id == 77
    assert errors[0].path == "/song"


async def test_cookie_never_appears_in_logs(client, fake_upstream, caplog):
    fake_upstream.queue(httpx.Response(200, content=b"not json"))
    with caplog.at_level(logging.DEBUG):
        await client.get("/song", params={"id": "1"})
    assert "MUSIC_U" not in caplog.text


async def test_success_carries_cors_headers(client):
    res = await client.get("/song", params={"id": "1"})
    assert res.headers["access-control-allow-origin"] == "*"


async def test_non_finite_number_returns_500_decode_error(client, fake_upstream):
    fake_upstream.queue(
        httpx.Response(200, content=b'{"code": 200, "data": [{"gain": NaN}]}'),
    )
    res = await client.get("/song", params={"id": "1"})
    assert res.status_code == 500
    assert res.json() == {
        "code": 500, "message": "Failed to parse response from music service",
    }


async def test_null_body_returns_400_with_code_zero(client, fake_upstream):
    fake_upstream.queue(httpx.Response(200, content=b"null"))
    res = await client.get("/song", params={"id": "1"})
    assert res.status_code == 400
    assert res.json() == {"code": 0, "message": "Music service returned error"}


async def test_repeated_parameters_bind_first_value(client, fake_upstream):
    res = await client.get(
        "/song?id=1&id=abc&level=lossless&level=hires&realip=1.1.1.1&realip=2.2.2.2",
    )
    assert res.status_code == 200
    assert fake_upstream.last_params["id"] == "1"
    assert fake_upstream.last_params["level"] == "lossless"
    assert fake_upstream.last_params["realIP"] == "1.1.1.1"
