"""Public market-data and copy-trading endpoints of the exchange."""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any, Callable, Mapping, TypeVar
from urllib.parse import urlencode

import requests

from domhedge.binance_types import (
    BinanceSymbolInfo,
    ExchangeFilterSymbol,
    ExchangeInfo,
    FuturesPrice,
    KLine,
    LeadPosition,
    PositionHistoryItem,
    TradeHistoryItem,
)

T = TypeVar("T")

FUTURES_API = "https://fapi.binance.com"
SPOT_API = "https://api.binance.com"
COPY_TRADE_API = "https://www.binance.com/bapi/futures/v1/friendly/future/copy-trade"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36 Edg/126.0.0.0"
)

_PRICE_TIMEOUT = 10.0
_KLINE_TIMEOUT = 15.0
_HISTORY_TIMEOUT = 10.0
_LEAD_POSITIONS_TIMEOUT = 2.0


class BinanceError(Exception):
    """A request to the exchange failed or its answer could not be read."""


def generate_signature(secret: str, payload: str | Mapping[str, Any]) -> str:
    """Hex HMAC-SHA256 of ``payload`` keyed with ``secret``.

    A mapping is first encoded as a query string with its keys sorted.
    """
    if not isinstance(payload, str):
        payload = urlencode(sorted((key, str(value)) for key, value in payload.items()))
    digest = hmac.new(secret.encode(), payload.encode(), hashlib.sha256)
    return digest.hexdigest()


def _field(data: Any, key: str) -> Any:
    """Look up ``key`` in a JSON object, ignoring case; None if absent."""
    if not isinstance(data, Mapping):
        return None
    if key in data:
        return data[key]
    folded = key.lower()
    for name, value in data.items():
        if isinstance(name, str) and name.lower() == folded:
            return value
    return None


def _build(factory: Callable[[Any], T], data: Any) -> T:
    try:
        return factory(data)
    except ValueError as exc:
        raise BinanceError(f"unexpected response: {exc}") from exc


def _array(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise BinanceError(f"{what} must be an array, got {value!r}")
    return value


def _history_body(page_number: int, page_size: int, portfolio_id: int, sort: str | None) -> str:
    # The endpoint accepts this exact, loosely formed body.
    prefix = f'"sort":"{sort}",' if sort else ""
    return (
        "{" + prefix + f'"pageNumber":{int(page_number)},"pageSize":{int(page_size)},'
        f"portfolioId:{int(portfolio_id)}" + "}"
    )


class MarketClient:
    """Unauthenticated calls for prices, klines, symbols and lead portfolios."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session if session is not None else requests.Session()

    def _request(
        self,
        method: str,
        url: str,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        **kwargs: Any,
    ) -> Any:
        proxies = {"http": proxy, "https": proxy} if proxy else None
        try:
            response = self._session.request(
                method, url, timeout=timeout, proxies=proxies, **kwargs
            )
        except requests.RequestException as exc:
            raise BinanceError(f"{method} {url} failed: {exc}") from exc
        try:
            return json.loads(response.content)
        except ValueError as exc:
            raise BinanceError(f"{method} {url} returned invalid JSON: {exc}") from exc

    def server_time(self) -> int:
        """The exchange's clock in epoch milliseconds."""
        data = self._request("GET", f"{SPOT_API}/api/v3/time")
        value = _field(data, "serverTime")
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, int):
            raise BinanceError(f"server time must be an integer, got {value!r}")
        return value

    def trader_margin_balance(self, portfolio_id: int) -> str:
        """Margin balance of a lead portfolio, or "" when none is reported."""
        data = self._request(
            "GET",
            f"{COPY_TRADE_API}/lead-portfolio/detail",
            params={"portfolioId": str(int(portfolio_id))},
        )
        detail = _field(data, "data")
        if detail is None:
            return ""
        balance = _field(detail, "marginBalance")
        if balance is None:
            return ""
        if not isinstance(balance, str):
            raise BinanceError(f"margin balance must be a string, got {balance!r}")
        return balance

    def exchange_filters(self) -> list[ExchangeFilterSymbol]:
        """Futures symbols with their trading rule filters."""
        data = self._request("GET", f"{FUTURES_API}/fapi/v1/exchangeInfo")
        symbols = _array(_field(data, "symbols"), "symbols")
        return [_build(ExchangeFilterSymbol.from_dict, item) for item in symbols]

    def futures_pairs(self) -> list[BinanceSymbolInfo]:
        """All USD-margined futures trading pairs."""
        data = self._request("GET", f"{FUTURES_API}/fapi/v1/exchangeInfo")
        symbols = _array(_field(data, "symbols"), "symbols")
        return [_build(BinanceSymbolInfo.from_dict, item) for item in symbols]

    def _klines(
        self,
        url: str,
        symbol: str,
        interval: str,
        start_time: str | int | None,
        end_time: str | int | None,
        limit: str | int | None,
    ) -> list[KLine]:
        params = {"symbol": symbol, "interval": interval}
        optional = {"startTime": start_time, "endTime": end_time, "limit": limit}
        params.update({key: str(value) for key, value in optional.items() if value not in (None, "")})
        data = self._request("GET", url, params=sorted(params.items()), timeout=_KLINE_TIMEOUT)
        if not isinstance(data, list):
            raise BinanceError(f"klines response must be an array, got {data!r}")
        return [_build(KLine.from_raw, item) for item in data]

    def futures_klines(
        self,
        symbol: str,
        interval: str,
        start_time: str | int | None = "",
        end_time: str | int | None = "",
        limit: str | int | None = "",
    ) -> list[KLine]:
        """Candles of a USD-margined futures symbol."""
        return self._klines(
            f"{FUTURES_API}/fapi/v1/klines", symbol, interval, start_time, end_time, limit
        )

    def spot_klines(
        self,
        symbol: str,
        interval: str,
        start_time: str | int | None = "",
        end_time: str | int | None = "",
        limit: str | int | None = "",
    ) -> list[KLine]:
        """Candles of a spot symbol."""
        return self._klines(
            f"{SPOT_API}/api/v3/klines", symbol, interval, start_time, end_time, limit
        )

    def spot_exchange_info(self) -> ExchangeInfo:
        """Spot exchange information."""
        data = self._request("GET", f"{SPOT_API}/api/v3/exchangeInfo", timeout=_PRICE_TIMEOUT)
        return _build(ExchangeInfo.from_dict, data)

    def futures_price(self, symbol: str) -> FuturesPrice:
        """Latest price of one futures symbol."""
        data = self._request(
            "GET",
            f"{FUTURES_API}/fapi/v1/ticker/price",
            params={"symbol": symbol},
            timeout=_PRICE_TIMEOUT,
        )
        return _build(FuturesPrice.from_dict, data)

    def all_futures_prices(self) -> dict[str, float]:
        """Latest positive price of every futures symbol, keyed by symbol."""
        data = self._request("GET", f"{FUTURES_API}/fapi/v1/ticker/price", timeout=_PRICE_TIMEOUT)
        if not isinstance(data, list):
            raise BinanceError(f"price list must be an array, got {data!r}")
        prices: dict[str, float] = {}
        for item in data:
            entry = _build(FuturesPrice.from_dict, item)
            try:
                price = float(entry.price)
            except ValueError:
                continue
            if price <= 0:
                continue
            prices[entry.symbol] = price
        return prices

    def _history(
        self,
        path: str,
        factory: Callable[[Any], T],
        body: str,
        proxy: str | None,
    ) -> list[T] | None:
        data = self._request(
            "POST",
            f"{COPY_TRADE_API}/{path}",
            data=body,
            headers={"Content-Type": "application/json"},
            timeout=_HISTORY_TIMEOUT,
            proxy=proxy,
        )
        page = _field(data, "data")
        if page is None:
            return None
        return [_build(factory, item) for item in _array(_field(page, "list"), "list")]

    def trade_history(
        self,
        page_number: int,
        page_size: int,
        portfolio_id: int,
        proxy: str | None = None,
    ) -> list[TradeHistoryItem] | None:
        """One page of a lead portfolio's trades; None when no data came back."""
        body = _history_body(page_number, page_size, portfolio_id, None)
        return self._history("lead-portfolio/trade-history", TradeHistoryItem.from_dict, body, proxy)

    def position_history(
        self,
        page_number: int,
        page_size: int,
        portfolio_id: int,
        proxy: str | None = None,
    ) -> list[PositionHistoryItem] | None:
        """One page of a lead portfolio's positions; None when no data came back."""
        body = _history_body(page_number, page_size, portfolio_id, "OPENING")
        return self._history(
            "lead-portfolio/position-history", PositionHistoryItem.from_dict, body, proxy
        )

    def lead_positions(
        self,
        portfolio_id: int,
        cookie: str,
        token: str,
        proxy: str | None = None,
    ) -> list[LeadPosition] | None:
        """Positions a lead portfolio holds now; None when no data came back."""
        headers = {
            "Clienttype": "web",
            "Cookie": cookie,
            "Csrftoken": token,
            "User-Agent": BROWSER_USER_AGENT,
        }
        data = self._request(
            "GET",
            f"{COPY_TRADE_API}/lead-data/positions",
            params={"portfolioId": str(int(portfolio_id))},
            headers=headers,
            timeout=_LEAD_POSITIONS_TIMEOUT,
            proxy=proxy,
        )
        positions = _field(data, "data")
        if positions is None:
            return None
        return [_build(LeadPosition.from_dict, item) for item in _array(positions, "data")]