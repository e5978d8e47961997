from urllib.parse import parse_qsl, urlsplit

import pytest
import requests
import responses

from domhedge.binance import (
    COPY_TRADE_API,
    FUTURES_API,
    SPOT_API,
    BinanceError,
    MarketClient,
    generate_signature,
)


@pytest.fixture
def rsps():
    with responses.RequestsMock() as mock:
        yield mock


@pytest.fixture
def client():
    return MarketClient(requests.Session())


def _query(url):
    return parse_qsl(urlsplit(url).query)


def _body(request):
    body = request.body
    return body.decode() if isinstance(body, bytes) else body


KLINE_ROW = [
    1700000000000, "1.0", "2.0", "0.5", "1.5", "100", 1700000899999,
    "150", 42, "50", "75", "0",
]


def test_signature_is_hex_sha256():
    signature = generate_signature("secret", "symbol=XRPUSDT&timestamp=1")
    assert len(signature) == 64
    assert set(signature) <= set("0123456789abcdef")


def test_signature_mapping_is_sorted_query():
    from_mapping = generate_signature("secret", {"timestamp": "1", "recvWindow": "5000"})
    from_string = generate_signature("secret", "recvWindow=5000&timestamp=1")
    assert from_mapping == from_string


def test_signature_depends_on_secret():
    payload = "symbol=XRPUSDT"
    assert generate_signature("secret", payload) != generate_signature("token", payload)
    assert generate_signature("secret", payload) == generate_signature("secret", payload)


def test_server_time(rsps, client):
    rsps.add(responses.GET, f"{SPOT_API}/api/v3/time", json={"serverTime": 1700000000123})
    assert client.server_time() == 1700000000123


def test_server_time_invalid_json(rsps, client):
    rsps.add(responses.GET, f"{SPOT_API}/api/v3/time", body="not json")
    with pytest.raises(BinanceError):
        client.server_time()


def test_connection_failure_raises(rsps, client):
    with pytest.raises(BinanceError):
        client.futures_price("XRPUSDT")


def test_trader_margin_balance(rsps, client):
    rsps.add(
        responses.GET,
        f"{COPY_TRADE_API}/lead-portfolio/detail",
        json={"data": {"marginBalance": "1234.5"}},
    )
    assert client.trader_margin_balance(77) == "1234.5"
    assert ("portfolioId", "77") in _query(rsps.calls[0].request.url)


def test_trader_margin_balance_without_data(rsps, client):
    rsps.add(responses.GET, f"{COPY_TRADE_API}/lead-portfolio/detail", json={"data": None})
    assert client.trader_margin_balance(77) == ""


def test_exchange_filters(rsps, client):
    rsps.add(
        responses.GET,
        f"{FUTURES_API}/fapi/v1/exchangeInfo",
        json={"symbols": [{"symbol": "XRPUSDT", "filters": [
            {"filterType": "PRICE_FILTER", "tickSize": "0.0001"}]}]},
    )
    result = client.exchange_filters()
    assert [s.symbol for s in result] == ["XRPUSDT"]
    assert result[0].filters[0].tick_size == "0.0001"
    assert result[0].filters[0].filter_type == "PRICE_FILTER"


def test_futures_pairs(rsps, client):
    rsps.add(
        responses.GET,
        f"{FUTURES_API}/fapi/v1/exchangeInfo",
        json={"symbols": [
            {"symbol": "BTCDOMUSDT", "baseAsset": "BTCDOM", "quantityPrecision": 3},
            {"symbol": "XRPUSDT", "baseAsset": "XRP", "quantityPrecision": 1},
        ]},
    )
    pairs = client.futures_pairs()
    assert [(p.symbol, p.base_asset, p.quantity_precision) for p in pairs] == [
        ("BTCDOMUSDT", "BTCDOM", 3),
        ("XRPUSDT", "XRP", 1),
    ]


def test_futures_pairs_missing_symbols(rsps, client):
    rsps.add(responses.GET, f"{FUTURES_API}/fapi/v1/exchangeInfo", json={})
    assert client.futures_pairs() == []


def test_futures_klines_query_and_parse(rsps, client):
    rsps.add(responses.GET, f"{FUTURES_API}/fapi/v1/klines", json=[KLINE_ROW])
    klines = client.futures_klines("BTCDOMUSDT", "15m", "100", "200", "1")
    assert klines[0].close == "1.5"
    assert klines[0].open_time == 1700000000000
    assert _query(rsps.calls[0].request.url) == [
        ("endTime", "200"),
        ("interval", "15m"),
        ("limit", "1"),
        ("startTime", "100"),
        ("symbol", "BTCDOMUSDT"),
    ]


def test_spot_klines_omit_empty_params(rsps, client):
    rsps.add(responses.GET, f"{SPOT_API}/api/v3/klines", json=[KLINE_ROW, KLINE_ROW])
    klines = client.spot_klines("XRPBTC", "15m", "", "", "")
    assert len(klines) == 2
    assert _query(rsps.calls[0].request.url) == [("interval", "15m"), ("symbol", "XRPBTC")]


def test_spot_klines_error_object(rsps, client):
    rsps.add(responses.GET, f"{SPOT_API}/api/v3/klines", json={"code": -1121, "msg": "Invalid symbol."})
    with pytest.raises(BinanceError):
        client.spot_klines("NOPE", "15m")


def test_spot_exchange_info(rsps, client):
    rsps.add(
        responses.GET,
        f"{SPOT_API}/api/v3/exchangeInfo",
        json={"timezone": "UTC", "serverTime": 5, "symbols": [
            {"symbol": "XRPBTC", "orderTypes": ["LIMIT", "MARKET"], "isSpotTradingAllowed": True}]},
    )
    info = client.spot_exchange_info()
    assert info.timezone == "UTC"
    assert info.server_time == 5
    assert info.symbols[0].order_types == ("LIMIT", "MARKET")
    assert info.symbols[0].is_spot_trading is True


def test_futures_price(rsps, client):
    rsps.add(
        responses.GET,
        f"{FUTURES_API}/fapi/v1/ticker/price",
        json={"symbol": "XRPUSDT", "price": "0.6123"},
    )
    price = client.futures_price("XRPUSDT")
    assert (price.symbol, price.price) == ("XRPUSDT", "0.6123")
    assert ("symbol", "XRPUSDT") in _query(rsps.calls[0].request.url)


def test_all_futures_prices_skips_bad_and_zero(rsps, client):
    rsps.add(
        responses.GET,
        f"{FUTURES_API}/fapi/v1/ticker/price",
        json=[
            {"symbol": "XRPUSDT", "price": "0.5"},
            {"symbol": "ZEROUSDT", "price": "0"},
            {"symbol": "BADUSDT", "price": "abc"},
        ],
    )
    assert client.all_futures_prices() == {"XRPUSDT": 0.5}


def test_trade_history_body_and_items(rsps, client):
    rsps.add(
        responses.POST,
        f"{COPY_TRADE_API}/lead-portfolio/trade-history",
        json={"data": {"total": 1, "list": [
            {"time": 10, "symbol": "XRPUSDT", "side": "BUY", "price": 0.5, "activeBuy": True}]}},
    )
    items = client.trade_history(1, 50, 99)
    assert _body(rsps.calls[0].request) == '{"pageNumber":1,"pageSize":50,portfolioId:99}'
    assert [(i.symbol, i.side, i.price, i.active_buy) for i in items] == [
        ("XRPUSDT", "BUY", 0.5, True)
    ]


def test_trade_history_without_data(rsps, client):
    rsps.add(responses.POST, f"{COPY_TRADE_API}/lead-portfolio/trade-history", json={})
    assert client.trade_history(1, 50, 99) is None


def test_trade_history_without_list(rsps, client):
    rsps.add(
        responses.POST,
        f"{COPY_TRADE_API}/lead-portfolio/trade-history",
        json={"data": {"total": 0, "list": None}},
    )
    assert client.trade_history(1, 50, 99) == []


def test_position_history_body(rsps, client):
    rsps.add(
        responses.POST,
        f"{COPY_TRADE_API}/lead-portfolio/position-history",
        json={"data": {"list": [{"symbol": "XRPUSDT", "opened": 3, "closed": 4, "status": "Closed"}]}},
    )
    items = client.position_history(2, 10, 99)
    assert _body(rsps.calls[0].request) == (
        '{"sort":"OPENING","pageNumber":2,"pageSize":10,portfolioId:99}'
    )
    assert [(i.symbol, i.opened, i.closed, i.status) for i in items] == [
        ("XRPUSDT", 3, 4, "Closed")
    ]


def test_lead_positions_headers_and_items(rsps, client):
    rsps.add(
        responses.GET,
        f"{COPY_TRADE_API}/lead-data/positions",
        json={"data": [{"symbol": "XRPUSDT", "positionSide": "LONG",
                        "positionAmount": "10", "markPrice": "0.5"}]},
    )
    positions = client.lead_positions(99, "token", "token")
    request = rsps.calls[0].request
    assert request.headers["Clienttype"] == "web"
    assert request.headers["Csrftoken"] == "token"
    assert ("portfolioId", "99") in _query(request.url)
    assert [(p.symbol, p.position_side, p.position_amount) for p in positions] == [
        ("XRPUSDT", "LONG", "10")
    ]


def test_lead_positions_without_data(rsps, client):
    rsps.add(responses.GET, f"{COPY_TRADE_API}/lead-data/positions", json={"data": None})
    assert client.lead_positions(99, "token", "token") is None


def test_lead_positions_wrong_shape(rsps, client):
    rsps.add(responses.GET, f"{COPY_TRADE_API}/lead-data/positions", json={"data": "oops"})
    with pytest.raises(BinanceError):
        client.lead_positions(99, "token", "token")