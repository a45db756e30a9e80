"""NASA POWER aggregation: request shape, statistics and strict error handling."""

from __future__ import annotations

import asyncio
from datetime import date

import httpx
import pytest

from sitescout.climate.power import aggregate, build_params
from sitescout.climate.types import ClimateQuery, FetchCancelled, FetchError, ParseError
from sitescout.core.settings import PLAYBACK_PARAMETERS, POWER_TIMEOUT_S, SITE_SCOUT_PARAMETERS
from sitescout.tests.test_data import (
    HOUSTON,
    HOUSTON_KEYS,
    HOUSTON_PAYLOAD,
    HOUSTON_VALUES,
    day_keys,
    power_payload,
    series,
)

KEYS = day_keys(date(2024, 3, 1), 4)


def _query(**overrides) -> ClimateQuery:
    params = {"latitude": 29.62, "longitude": -95.63, "start": "20240301", "end": "20240304"}
    params.update(overrides)
    return ClimateQuery(**params)


def _full(values_by_code):
    return power_payload({code: series(KEYS, vals) for code, vals in values_by_code.items()})


@pytest.mark.asyncio
async def test_request_uses_daily_point_contract(mock_client, recorder) -> None:
    async with mock_client(body=_full({"T2M": [1, 2, 3, 4]})) as client:
        await aggregate(_query(), client=client)

    assert len(recorder.requests) == 1
    req = recorder.requests[0]
    assert req.method == "GET"
    assert req.url.path == "/api/temporal/daily/point"
    assert dict(req.url.params) == {
        "parameters": ",".join(SITE_SCOUT_PARAMETERS),
        "community": "RE",
        "latitude": "29.62",
        "longitude": "-95.63",
        "start": "20240301",
        "end": "20240304",
        "format": "JSON",
    }


def test_date_objects_are_formatted_compactly() -> None:
    params = build_params(_query(start=date(2024, 1, 5), end=date(2024, 2, 1)))
    assert params["start"] == "20240105"
    assert params["end"] == "20240201"


@pytest.mark.asyncio
async def test_series_length_and_mean(mock_client) -> None:
    ghi = [4.0, 5.0, 6.5, 2.5]
    async with mock_client(body=_full({"ALLSKY_SFC_SW_DWN": ghi, "WS10M": [1, 1, 1, 1]})) as client:
        result = await aggregate(_query(), client=client)

    assert len(result.daily["ALLSKY_SFC_SW_DWN"]) == 4
    assert result.stats["ghi"].avg == pytest.approx(sum(ghi) / len(ghi))
    assert result.stats["wind"].avg == pytest.approx(1.0)
    assert result.stats["ghi"].min is None and result.stats["ghi"].max is None


@pytest.mark.asyncio
async def test_every_requested_parameter_present_even_when_missing(mock_client) -> None:
    async with mock_client(body=_full({"T2M": [20, 21, 22, 23]})) as client:
        result = await aggregate(_query(), client=client)

    assert set(result.daily) == set(SITE_SCOUT_PARAMETERS)
    assert result.daily["PRECTOTCORR"] == {}
    assert "precip" not in result.stats
    assert "temp" in result.stats


@pytest.mark.asyncio
async def test_first_value_sentinel_drops_bucket(mock_client) -> None:
    body = _full({
        "ALLSKY_SFC_SW_DWN": [-999.0, 5.0, 5.0, 5.0],
        "PRECTOTCORR": [1.0, -999.0, 3.0, 4.0],
    })
    async with mock_client(body=body) as client:
        result = await aggregate(_query(), client=client)

    assert "ghi" not in result.stats
    # 첫 값만 본다: 중간 결측은 그대로 평균에 포함
    assert result.stats["precip"].avg == pytest.approx((1.0 - 999.0 + 3.0 + 4.0) / 4)


@pytest.mark.asyncio
async def test_first_value_is_chronological_not_insertion_order(mock_client) -> None:
    reversed_series = dict(reversed(list(series(KEYS, [-999.0, 2.0, 2.0, 2.0]).items())))
    async with mock_client(body=power_payload({"WS10M": reversed_series})) as client:
        result = await aggregate(_query(), client=client)

    assert "wind" not in result.stats


@pytest.mark.asyncio
async def test_strict_sentinels_filters_every_missing_value(mock_client) -> None:
    body = _full({"PRECTOTCORR": [1.0, -999.0, 3.0, -999.0]})
    async with mock_client(body=body) as client:
        result = await aggregate(_query(), client=client, strict_sentinels=True)

    assert result.stats["precip"].avg == pytest.approx(2.0)


@pytest.mark.asyncio
async def test_min_max_come_from_dedicated_channels(mock_client) -> None:
    body = _full({
        "T2M": [10.0, 40.0, -5.0, 12.0],
        "T2M_MIN": [2.0, 3.0, 1.5, 4.0],
        "T2M_MAX": [20.0, 25.0, 19.0, 30.5],
    })
    async with mock_client(body=body) as client:
        result = await aggregate(_query(), client=client)

    temp = result.stats["temp"]
    assert temp.avg == pytest.approx(14.25)
    assert temp.min == 1.5
    assert temp.max == 30.5


@pytest.mark.asyncio
async def test_wind_50m_channels_for_playback_parameters(mock_client) -> None:
    body = _full({
        "T2M": [1, 2, 3, 4], "T2M_MIN": [0, 0, 0, 0], "T2M_MAX": [5, 5, 5, 5],
        "WS50M": [6, 7, 8, 9], "WS50M_MIN": [1, 2, 3, 4], "WS50M_MAX": [10, 11, 12, 13],
    })
    async with mock_client(body=body) as client:
        result = await aggregate(_query(parameters=PLAYBACK_PARAMETERS), client=client)

    assert result.stats["wind"].to_dict() == {"avg": 7.5, "min": 1.0, "max": 13.0}
    assert set(result.stats) == {"temp", "wind"}


@pytest.mark.asyncio
async def test_non_2xx_raises_fetch_error(mock_client) -> None:
    body = {"messages": ["Your request has errors: latitude out of range"]}
    async with mock_client(status=422, body=body) as client:
        with pytest.raises(FetchError) as exc:
            await aggregate(_query(latitude=123.0), client=client)

    assert exc.value.status_code == 422
    assert "422" in str(exc.value)
    assert "latitude out of range" in str(exc.value)


@pytest.mark.asyncio
async def test_server_error_raises_fetch_error(mock_client) -> None:
    async with mock_client(status=503, text="unavailable") as client:
        with pytest.raises(FetchError, match="status 503"):
            await aggregate(_query(), client=client)


@pytest.mark.asyncio
async def test_transport_failure_raises_fetch_error(mock_client) -> None:
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(boom) as client:
        with pytest.raises(FetchError, match="Communication failure"):
            await aggregate(_query(), client=client)


@pytest.mark.asyncio
async def test_timeout_raises_fetch_error(mock_client) -> None:
    def slow(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    async with mock_client(slow) as client:
        with pytest.raises(FetchError, match="timed out"):
            await aggregate(_query(), client=client)


@pytest.mark.asyncio
async def test_missing_parameter_container_raises_parse_error(mock_client) -> None:
    async with mock_client(body={"properties": {"other": {}}}) as client:
        with pytest.raises(ParseError):
            await aggregate(_query(), client=client)


@pytest.mark.asyncio
async def test_non_json_body_raises_parse_error(mock_client) -> None:
    async with mock_client(text="<html>oops</html>") as client:
        with pytest.raises(ParseError):
            await aggregate(_query(), client=client)


@pytest.mark.asyncio
async def test_pre_cancelled_token_sends_nothing(mock_client, recorder) -> None:
    cancel = asyncio.Event()
    cancel.set()
    async with mock_client(body=_full({"T2M": [1, 2, 3, 4]})) as client:
        with pytest.raises(FetchCancelled):
            await aggregate(_query(), client=client, cancel=cancel)

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_cancel_while_waiting_for_response(mock_client) -> None:
    async def hang(request):
        await asyncio.sleep(10)
        return httpx.Response(200, json={})

    cancel = asyncio.Event()
    asyncio.get_running_loop().call_later(0.01, cancel.set)
    async with mock_client(hang) as client:
        with pytest.raises(FetchCancelled):
            await aggregate(_query(), client=client, cancel=cancel)


@pytest.mark.asyncio
async def test_caller_timeout_leaves_no_request_running(mock_client) -> None:
    aborted = []

    async def hang(request):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            aborted.append(request.url.path)
            raise
        return httpx.Response(200, json={})

    async with mock_client(hang) as client:
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(aggregate(_query(), client=client, cancel=asyncio.Event()), 0.05)

        pending = [t for t in asyncio.all_tasks() if t.get_coro().__qualname__ == "AsyncClient.get"]
        assert pending == []
        assert aborted == ["/api/temporal/daily/point"]


@pytest.mark.asyncio
async def test_timeout_applies_to_injected_client(mock_client, recorder) -> None:
    async with mock_client(body=_full({"T2M": [1, 2, 3, 4]})) as client:
        await aggregate(_query(), client=client, timeout=2.5)
        await aggregate(_query(), client=client)

    assert recorder.requests[0].extensions["timeout"] == {"connect": 2.5, "read": 2.5, "write": 2.5, "pool": 2.5}
    assert recorder.requests[1].extensions["timeout"]["read"] == POWER_TIMEOUT_S


@pytest.mark.asyncio
async def test_repeated_calls_refetch(mock_client, recorder) -> None:
    async with mock_client(body=_full({"T2M": [1, 2, 3, 4]})) as client:
        first = await aggregate(_query(), client=client)
        second = await aggregate(_query(), client=client)

    assert len(recorder.requests) == 2
    assert first.to_dict() == second.to_dict()
    assert first.daily is not second.daily


@pytest.mark.asyncio
async def test_houston_full_year(mock_client) -> None:
    query = ClimateQuery(
        latitude=HOUSTON["lat"], longitude=HOUSTON["lon"], start=HOUSTON["start"], end=HOUSTON["end"],
    )
    async with mock_client(body=HOUSTON_PAYLOAD) as client:
        result = await aggregate(query, client=client)

    assert result.meta == {
        "lat": 29.62, "lon": -95.63, "start": "20230101", "end": "20231231",
        "parameters": list(SITE_SCOUT_PARAMETERS),
    }
    assert all(len(result.daily[code]) == 365 for code in SITE_SCOUT_PARAMETERS)
    assert result.dates == HOUSTON_KEYS

    def mean(code):
        return sum(HOUSTON_VALUES[code]) / 365

    assert set(result.stats) == {"ghi", "wind", "temp", "precip"}
    assert result.stats["ghi"].avg == pytest.approx(mean("ALLSKY_SFC_SW_DWN"))
    assert result.stats["wind"].avg == pytest.approx(mean("WS10M"))
    assert result.stats["temp"].avg == pytest.approx(mean("T2M"))
    assert result.stats["temp"].min == 5.0
    assert result.stats["temp"].max == 44.0
    assert result.stats["precip"].avg == pytest.approx(2.0)
