import asyncio
import json
import logging

import httpx
import pytest
import respx
from httpx import Response

from ticktrader import signer
from ticktrader.client import TickTraderWebClient
from ticktrader.errors import ConfigurationError, DecodeError, ErrorKind, HttpStatusError, TransportError
from ticktrader.models import (
    RequestDirection,
    Symbol,
    TradeCreate,
    TradeHistoryRequest,
    TradeModify,
    TradeSide,
    TradeType,
)
from ticktrader.protocols import TickTraderMarketDataClient, TickTraderTradingClient
from ticktrader.settings import TickTraderSettings

BASE = "https://ttdemowebapi.fxopen.com:8443"


def _private_client() -> TickTraderWebClient:
    return TickTraderWebClient(BASE, "acc-1", "key-1", "secret-1")


@pytest.mark.asyncio
@respx.mock
async def test_public_trade_session() -> None:
    route = respx.get(f"{BASE}/api/v1/public/tradesession").mock(
        return_value=Response(200, json={"PlatformName": "TickTrader", "TradeSessionStatus": "Opened"})
    )

    client = TickTraderWebClient(BASE)
    session = await client.get_public_trade_session_async()

    assert route.called
    request = route.calls.last.request
    assert "Authorization" not in request.headers
    assert request.headers["Accept"] == "application/json"
    assert session.platform_name == "TickTrader"
    assert session.trade_session_status == "Opened"


@pytest.mark.asyncio
@respx.mock
async def test_public_symbol_is_double_encoded() -> None:
    route = respx.route(method="GET", path__startswith="/api/v1/public/symbol/").mock(
        return_value=Response(200, json={"Symbol": "EUR/USD", "Precision": 5, "SomethingNew": 1})
    )

    client = TickTraderWebClient(BASE)
    symbol = await client.get_public_symbol_async("EUR/USD")

    assert route.calls.last.request.url.raw_path == b"/api/v1/public/symbol/EUR%252FUSD"
    assert isinstance(symbol, Symbol)
    assert symbol.symbol == "EUR/USD"
    assert symbol.precision == 5
    assert symbol.model_extra == {"SomethingNew": 1}


@pytest.mark.asyncio
@respx.mock
async def test_list_results_are_decoded() -> None:
    respx.get(f"{BASE}/api/v1/public/level2").mock(
        return_value=Response(
            200,
            json=[
                {
                    "Symbol": "EURUSD",
                    "Timestamp": 1500000000000,
                    "Bids": [{"Type": "Bid", "Price": 1.1, "Volume": 100000}],
                    "Asks": [{"Type": "Ask", "Price": 1.2, "Volume": 50000}],
                }
            ],
        )
    )

    client = TickTraderWebClient(BASE)
    books = await client.get_public_all_ticks_level2_async()

    assert len(books) == 1
    assert books[0].bids[0].price == 1.1
    assert books[0].asks[0].volume == 50000


@pytest.mark.asyncio
@respx.mock
async def test_signed_request_carries_valid_authorization(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(signer, "now_ms", lambda: 1500000000000)
    route = respx.get(f"{BASE}/api/v1/account").mock(return_value=Response(200, json={"Id": 5, "Balance": 100.5}))

    account = await _private_client().get_account_async()

    header = route.calls.last.request.headers["Authorization"]
    assert header == "HMAC acc-1:key-1:1500000000000:4t6oqfY8gPH4fs3y1XKP2TZNgKg8Ufd8b0n5rVilKKI="
    assert account.id == 5
    assert account.balance == 100.5


@pytest.mark.asyncio
@respx.mock
async def test_create_trade_signs_body() -> None:
    route = respx.post(f"{BASE}/api/v1/trade").mock(
        return_value=Response(200, json={"Id": 77, "Type": "Market", "Side": "Buy", "Amount": 10000})
    )

    request = TradeCreate(type=TradeType.MARKET, side=TradeSide.BUY, symbol="EURUSD", amount=10000.0)
    trade = await _private_client().create_trade_async(request)

    sent = route.calls.last.request
    assert sent.headers["Content-Type"] == "application/json"
    assert json.loads(sent.content) == {"Type": "Market", "Side": "Buy", "Symbol": "EURUSD", "Amount": 10000.0}

    scheme, credentials = sent.headers["Authorization"].split(" ", 1)
    web_api_id, web_api_key, timestamp, signature = credentials.split(":", 3)
    assert scheme == "HMAC"
    assert (web_api_id, web_api_key) == ("acc-1", "key-1")
    expected = signer.sign(
        "acc-1", "key-1", "secret-1", int(timestamp), "POST", str(sent.url), sent.content.decode()
    )
    assert signature == expected
    assert trade.id == 77


@pytest.mark.asyncio
@respx.mock
async def test_modify_trade_uses_put() -> None:
    route = respx.put(f"{BASE}/api/v1/trade").mock(return_value=Response(200, json={"Id": 77, "Price": 1.25}))

    trade = await _private_client().modify_trade_async(TradeModify(id=77, price=1.25, comment="moved"))

    assert json.loads(route.calls.last.request.content) == {"Id": 77, "Price": 1.25, "Comment": "moved"}
    assert trade.price == 1.25


@pytest.mark.asyncio
@respx.mock
async def test_delete_operations_build_query_paths() -> None:
    route = respx.route(method="DELETE", path="/api/v1/trade").mock(return_value=Response(200))
    client = _private_client()

    await client.close_trade_async(42)
    await client.close_trade_async(42, 1.5)
    await client.cancel_trade_async(43)
    await client.close_by_trade_async(44, 45)

    paths = [call.request.url.raw_path for call in route.calls]
    assert paths == [
        b"/api/v1/trade?type=Close&id=42",
        b"/api/v1/trade?type=Close&id=42&amount=1.5",
        b"/api/v1/trade?type=Cancel&id=43",
        b"/api/v1/trade?type=CloseBy&id=44&byid=45",
    ]
    assert all("Authorization" in call.request.headers for call in route.calls)


@pytest.mark.asyncio
@respx.mock
async def test_http_error_keeps_status_and_body() -> None:
    body = '{"error":"InvalidAmount"}'
    respx.post(f"{BASE}/api/v1/trade").mock(return_value=Response(400, text=body))

    request = TradeCreate(type=TradeType.LIMIT, side=TradeSide.SELL, symbol="EURUSD", amount=-1, price=1.1)
    with pytest.raises(HttpStatusError) as exc_info:
        await _private_client().create_trade_async(request)

    assert exc_info.value.status_code == 400
    assert exc_info.value.body == body
    assert exc_info.value.json() == {"error": "InvalidAmount"}
    assert exc_info.value.kind is ErrorKind.HTTP_STATUS


@respx.mock
def test_http_error_blocking_form() -> None:
    body = '{"error":"InvalidAmount"}'
    respx.route(method="DELETE", path="/api/v1/trade").mock(return_value=Response(400, text=body))

    with pytest.raises(HttpStatusError) as exc_info:
        _private_client().close_trade(42, 1.5)

    assert exc_info.value.status_code == 400
    assert exc_info.value.body == body


@pytest.mark.asyncio
@respx.mock
async def test_malformed_body_is_decode_error() -> None:
    respx.get(f"{BASE}/api/v1/public/tick/EURUSD").mock(return_value=Response(200, text="<html>oops</html>"))

    with pytest.raises(DecodeError) as exc_info:
        await TickTraderWebClient(BASE).get_public_tick_async("EURUSD")

    assert exc_info.value.body == "<html>oops</html>"
    assert exc_info.value.kind is ErrorKind.DECODE


@pytest.mark.asyncio
@respx.mock
async def test_type_mismatch_is_decode_error() -> None:
    respx.get(f"{BASE}/api/v1/public/symbol").mock(return_value=Response(200, json={"Symbol": "EURUSD"}))

    with pytest.raises(DecodeError):
        await TickTraderWebClient(BASE).get_public_all_symbols_async()


@pytest.mark.asyncio
@respx.mock
async def test_network_failure_is_transport_error() -> None:
    respx.get(f"{BASE}/api/v1/public/currency").mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(TransportError) as exc_info:
        await TickTraderWebClient(BASE).get_public_all_currencies_async()

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@respx.mock
def test_blocking_form_raises_original_error_kind() -> None:
    respx.get(f"{BASE}/api/v1/public/currency").mock(side_effect=httpx.ConnectTimeout("timed out"))

    with pytest.raises(TransportError) as exc_info:
        TickTraderWebClient(BASE).get_public_all_currencies()

    assert type(exc_info.value) is TransportError
    assert isinstance(exc_info.value.__cause__, httpx.ConnectTimeout)


@pytest.mark.asyncio
@respx.mock
async def test_blocking_form_inside_running_loop() -> None:
    respx.get(f"{BASE}/api/v1/public/currency/EUR").mock(
        return_value=Response(200, json={"Name": "EUR", "Precision": 2})
    )
    respx.get(f"{BASE}/api/v1/public/currency/XXX").mock(return_value=Response(404, text="not found"))

    client = TickTraderWebClient(BASE)
    currency = client.get_public_currency("EUR")
    with pytest.raises(HttpStatusError) as exc_info:
        client.get_public_currency("XXX")

    assert currency.name == "EUR"
    assert exc_info.value.status_code == 404


@respx.mock
def test_blocking_and_async_forms_return_same_value() -> None:
    respx.get(f"{BASE}/api/v1/public/tick/EURUSD").mock(
        return_value=Response(200, json={"Symbol": "EURUSD", "BestBid": {"Price": 1.1, "Volume": 1}})
    )
    client = TickTraderWebClient(BASE)

    assert client.get_public_tick("EURUSD") == asyncio.run(client.get_public_tick_async("EURUSD"))


@pytest.mark.asyncio
@respx.mock
async def test_pending_call_can_be_cancelled() -> None:
    started = asyncio.Event()

    async def slow(request: httpx.Request) -> Response:
        started.set()
        await asyncio.sleep(10)
        return Response(200, json={})

    respx.get(f"{BASE}/api/v1/public/tradesession").mock(side_effect=slow)

    task = asyncio.create_task(TickTraderWebClient(BASE).get_public_trade_session_async())
    await asyncio.wait_for(started.wait(), timeout=1)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
@respx.mock
async def test_trade_history_paging() -> None:
    route = respx.post(f"{BASE}/api/v1/tradehistory").mock(
        side_effect=[
            Response(
                200,
                json={
                    "IsLastReport": False,
                    "TotalReports": 3,
                    "Records": [{"Id": "100-1", "TradeId": 1}, {"Id": "100-2", "TradeId": 2}],
                },
            ),
            Response(200, json={"IsLastReport": True, "TotalReports": 3, "Records": [{"Id": "100-3"}]}),
        ]
    )
    client = _private_client()
    request = TradeHistoryRequest(
        timestamp_from=1500000000000,
        timestamp_to=1600000000000,
        request_direction=RequestDirection.BACKWARD,
    )

    first = await client.get_trade_history_async(request)
    next_request = first.next_request(request)
    assert next_request is not None
    last = await client.get_trade_history_async(next_request)

    assert json.loads(route.calls[0].request.content) == {
        "TimestampFrom": 1500000000000,
        "TimestampTo": 1600000000000,
        "RequestDirection": "Backward",
    }
    assert json.loads(route.calls[1].request.content) == {
        "TimestampFrom": 1500000000000,
        "TimestampTo": 1600000000000,
        "RequestDirection": "Backward",
        "RequestFromId": "100-2",
    }
    assert last.is_last_report
    assert last.next_request(next_request) is None


@pytest.mark.asyncio
@respx.mock
async def test_trade_history_by_trade_id() -> None:
    route = respx.post(f"{BASE}/api/v1/tradehistory/77").mock(
        return_value=Response(200, json={"IsLastReport": True, "Records": []})
    )

    report = await _private_client().get_trade_history_by_trade_async(77, TradeHistoryRequest())

    assert json.loads(route.calls.last.request.content) == {"RequestDirection": "Forward"}
    assert report.records == []


@pytest.mark.parametrize(
    ("web_api_id", "web_api_key", "web_api_secret"),
    [("", "key", "secret"), ("id", "", "secret"), ("id", "key", ""), ("id", None, None)],
)
def test_private_client_requires_full_token(web_api_id, web_api_key, web_api_secret) -> None:
    with pytest.raises(ConfigurationError):
        TickTraderWebClient(BASE, web_api_id, web_api_key, web_api_secret)


@respx.mock
def test_public_client_refuses_private_calls_without_network() -> None:
    client = TickTraderWebClient(BASE)

    assert client.is_public_only
    with pytest.raises(ConfigurationError):
        client.get_account()

    assert respx.calls.call_count == 0


def test_from_settings() -> None:
    public = TickTraderWebClient.from_settings(TickTraderSettings(TICKTRADER_ADDRESS=BASE))
    private = TickTraderWebClient.from_settings(
        TickTraderSettings(
            TICKTRADER_ADDRESS=BASE,
            TICKTRADER_WEB_API_ID="acc-1",
            TICKTRADER_WEB_API_KEY="key-1",
            TICKTRADER_WEB_API_SECRET="secret-1",
            TICKTRADER_VERIFY_SSL=False,
        )
    )

    assert public.is_public_only
    assert not private.is_public_only
    assert private.verify_ssl is False


def test_client_satisfies_protocols() -> None:
    client = TickTraderWebClient(BASE)
    assert isinstance(client, TickTraderMarketDataClient)
    assert isinstance(client, TickTraderTradingClient)


@pytest.mark.asyncio
@respx.mock
async def test_failed_request_is_logged_as_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="ticktrader.transport")
    respx.get(f"{BASE}/api/v1/public/tradesession").mock(return_value=Response(503, text="maintenance"))

    with pytest.raises(HttpStatusError):
        await TickTraderWebClient(BASE).get_public_trade_session_async()

    assert "REQUEST_FAILED" in caplog.text
    assert "kind=HttpStatus" in caplog.text
    assert "detail=503" in caplog.text


@pytest.mark.asyncio
@respx.mock
@pytest.mark.parametrize(
    "error",
    [
        httpx.TooManyRedirects("Exceeded maximum allowed redirects."),
        httpx.DecodingError("malformed gzip payload"),
        httpx.RemoteProtocolError("peer closed connection"),
    ],
)
async def test_any_request_error_is_transport_error(error: httpx.RequestError) -> None:
    respx.get(f"{BASE}/api/v1/public/currency").mock(side_effect=error)

    with pytest.raises(TransportError) as exc_info:
        await TickTraderWebClient(BASE).get_public_all_currencies_async()

    assert exc_info.value.kind is ErrorKind.TRANSPORT
    assert isinstance(exc_info.value.__cause__, type(error))


@pytest.mark.asyncio
@respx.mock
async def test_verify_ssl_is_per_client(monkeypatch: pytest.MonkeyPatch) -> None:
    other = "https://other.example.com:8443"
    seen: dict[str, bool] = {}

    class _RecordingClient(httpx.AsyncClient):
        def __init__(self, *args, **kwargs) -> None:
            seen[str(kwargs["base_url"])] = kwargs["verify"]
            super().__init__(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", _RecordingClient)
    payload = {"PlatformName": "TickTrader"}
    respx.get(f"{BASE}/api/v1/public/tradesession").mock(return_value=Response(200, json=payload))
    respx.get(f"{other}/api/v1/public/tradesession").mock(return_value=Response(200, json=payload))

    insecure = TickTraderWebClient(other, verify_ssl=False)
    default = TickTraderWebClient(BASE)
    await asyncio.gather(
        insecure.get_public_trade_session_async(),
        default.get_public_trade_session_async(),
    )

    assert seen == {other: False, BASE: True}


@pytest.mark.asyncio
@respx.mock
async def test_close_trade_amount_has_no_float_noise() -> None:
    route = respx.route(method="DELETE", path="/api/v1/trade").mock(return_value=Response(200))

    await _private_client().close_trade_async(42, 1000.1)

    assert route.calls.last.request.url.raw_path == b"/api/v1/trade?type=Close&id=42&amount=1000.1"
