"""Records decoded from exchange REST responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

_KLINE_FIELDS = 12


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    """Find ``key`` exactly, else by case-insensitive match; None if absent."""
    if key in data:
        return data[key]
    folded = key.lower()
    for name, value in data.items():
        if isinstance(name, str) and name.lower() == folded:
            return value
    return None


def _str(data: Mapping[str, Any], key: str) -> str:
    value = _lookup(data, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {value!r}")
    return value


def _int(data: Mapping[str, Any], key: str) -> int:
    value = _lookup(data, key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer, got {value!r}")
    return value


def _uint(data: Mapping[str, Any], key: str) -> int:
    value = _int(data, key)
    if value < 0:
        raise ValueError(f"field {key!r} must not be negative, got {value!r}")
    return value


def _float(data: Mapping[str, Any], key: str) -> float:
    value = _lookup(data, key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {key!r} must be a number, got {value!r}")
    return float(value)


def _bool(data: Mapping[str, Any], key: str) -> bool:
    value = _lookup(data, key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean, got {value!r}")
    return value


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = _lookup(data, key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be an array, got {value!r}")
    return value


@dataclass(frozen=True)
class KLine:
    """One candlestick row of a kline response."""

    open_time: int
    open: str
    high: str
    low: str
    close: str
    volume: str
    close_time: int
    quote_asset_volume: str
    trade_num: int
    taker_buy_base_volume: str
    taker_buy_quote_volume: str
    ignore: str

    @classmethod
    def from_raw(cls, item: Any) -> KLine:
        """Decode the 12-element array the exchange sends for one candle."""
        if not isinstance(item, (list, tuple)) or len(item) < _KLINE_FIELDS:
            raise ValueError(f"kline row must be an array of {_KLINE_FIELDS} values: {item!r}")

        def number(index: int) -> int:
            value = item[index]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"kline column {index} must be a number, got {value!r}")
            return int(value)

        def text(index: int) -> str:
            value = item[index]
            if not isinstance(value, str):
                raise ValueError(f"kline column {index} must be a string, got {value!r}")
            return value

        return cls(
            open_time=number(0),
            open=text(1),
            high=text(2),
            low=text(3),
            close=text(4),
            volume=text(5),
            close_time=number(6),
            quote_asset_volume=text(7),
            trade_num=number(8),
            taker_buy_base_volume=text(9),
            taker_buy_quote_volume=text(10),
            ignore=text(11),
        )


@dataclass(frozen=True)
class FuturesPrice:
    """Latest price of a futures symbol."""

    symbol: str = ""
    price: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> FuturesPrice:
        data = _mapping(data, "price")
        return cls(symbol=_str(data, "symbol"), price=_str(data, "price"))


@dataclass(frozen=True)
class BinanceSymbolInfo:
    """A futures trading pair from the exchange information endpoint."""

    symbol: str = ""
    pair: str = ""
    contract_type: str = ""
    status: str = ""
    base_asset: str = ""
    quote_asset: str = ""
    margin_asset: str = ""
    price_precision: int = 0
    quantity_precision: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> BinanceSymbolInfo:
        data = _mapping(data, "symbol info")
        return cls(
            symbol=_str(data, "symbol"),
            pair=_str(data, "pair"),
            contract_type=_str(data, "contractType"),
            status=_str(data, "status"),
            base_asset=_str(data, "baseAsset"),
            quote_asset=_str(data, "quoteAsset"),
            margin_asset=_str(data, "marginAsset"),
            price_precision=_int(data, "pricePrecision"),
            quantity_precision=_int(data, "quantityPrecision"),
        )


@dataclass(frozen=True)
class BinanceOrder:
    """An order as returned when placing, cancelling or querying it."""

    order_id: int = 0
    executed_qty: str = ""
    client_order_id: str = ""
    symbol: str = ""
    avg_price: str = ""
    cum_quote: str = ""
    side: str = ""
    position_side: str = ""
    close_position: bool = False
    type: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> BinanceOrder:
        data = _mapping(data, "order")
        return cls(
            order_id=_int(data, "orderId"),
            executed_qty=_str(data, "executedQty"),
            client_order_id=_str(data, "clientOrderId"),
            symbol=_str(data, "symbol"),
            avg_price=_str(data, "avgPrice"),
            cum_quote=_str(data, "cumQuote"),
            side=_str(data, "side"),
            position_side=_str(data, "positionSide"),
            close_position=_bool(data, "closePosition"),
            type=_str(data, "type"),
            status=_str(data, "status"),
        )


@dataclass(frozen=True)
class OrderInfo:
    """Error code and message the exchange sends when an order fails."""

    code: int = 0
    msg: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> OrderInfo:
        data = _mapping(data, "order info")
        return cls(code=_int(data, "code"), msg=_str(data, "msg"))


@dataclass(frozen=True)
class BinancePosition:
    """One position entry of a futures account."""

    symbol: str = ""
    initial_margin: str = ""
    maint_margin: str = ""
    unrealized_profit: str = ""
    position_initial_margin: str = ""
    open_order_initial_margin: str = ""
    leverage: str = ""
    isolated: bool = False
    entry_price: str = ""
    max_notional: str = ""
    bid_notional: str = ""
    ask_notional: str = ""
    position_side: str = ""
    position_amt: str = ""
    update_time: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> BinancePosition:
        data = _mapping(data, "position")
        return cls(
            symbol=_str(data, "symbol"),
            initial_margin=_str(data, "initialMargin"),
            maint_margin=_str(data, "maintMargin"),
            unrealized_profit=_str(data, "unrealizedProfit"),
            position_initial_margin=_str(data, "positionInitialMargin"),
            open_order_initial_margin=_str(data, "openOrderInitialMargin"),
            leverage=_str(data, "leverage"),
            isolated=_bool(data, "isolated"),
            entry_price=_str(data, "entryPrice"),
            max_notional=_str(data, "maxNotional"),
            bid_notional=_str(data, "bidNotional"),
            ask_notional=_str(data, "askNotional"),
            position_side=_str(data, "positionSide"),
            position_amt=_str(data, "positionAmt"),
            update_time=_int(data, "updateTime"),
        )


@dataclass(frozen=True)
class ExchangeSymbol:
    """A spot trading pair from the spot exchange information endpoint."""

    symbol: str = ""
    status: str = ""
    base_asset: str = ""
    base_asset_precision: int = 0
    quote_asset: str = ""
    quote_precision: int = 0
    order_types: tuple[str, ...] = ()
    is_spot_trading: bool = False
    is_margin_trading: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> ExchangeSymbol:
        data = _mapping(data, "exchange symbol")
        order_types = _list(data, "orderTypes")
        for order_type in order_types:
            if not isinstance(order_type, str):
                raise ValueError(f"order type must be a string, got {order_type!r}")
        return cls(
            symbol=_str(data, "symbol"),
            status=_str(data, "status"),
            base_asset=_str(data, "baseAsset"),
            base_asset_precision=_int(data, "baseAssetPrecision"),
            quote_asset=_str(data, "quoteAsset"),
            quote_precision=_int(data, "quotePrecision"),
            order_types=tuple(order_types),
            is_spot_trading=_bool(data, "isSpotTradingAllowed"),
            is_margin_trading=_bool(data, "isMarginTradingAllowed"),
        )


@dataclass(frozen=True)
class ExchangeInfo:
    """Spot exchange information: timezone, server time and symbols."""

    timezone: str = ""
    server_time: int = 0
    symbols: list[ExchangeSymbol] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ExchangeInfo:
        data = _mapping(data, "exchange info")
        return cls(
            timezone=_str(data, "timezone"),
            server_time=_int(data, "serverTime"),
            symbols=[ExchangeSymbol.from_dict(item) for item in _list(data, "symbols")],
        )


@dataclass(frozen=True)
class ExchangeFilter:
    """A trading rule filter of a symbol; only the tick size is kept."""

    tick_size: str = ""
    filter_type: str = ""


@dataclass(frozen=True)
class ExchangeFilterSymbol:
    """A futures symbol with its trading rule filters."""

    symbol: str = ""
    filters: list[ExchangeFilter] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ExchangeFilterSymbol:
        data = _mapping(data, "exchange symbol")
        filters = []
        for item in _list(data, "filters"):
            item = _mapping(item, "filter")
            filters.append(
                ExchangeFilter(
                    tick_size=_str(item, "tickSize"),
                    filter_type=_str(item, "filterType"),
                )
            )
        return cls(symbol=_str(data, "symbol"), filters=filters)


@dataclass(frozen=True)
class TradeHistoryItem:
    """One trade from a lead portfolio's trade history."""

    time: int = 0
    symbol: str = ""
    side: str = ""
    price: float = 0.0
    fee: float = 0.0
    fee_asset: str = ""
    quantity: float = 0.0
    quantity_asset: str = ""
    realized_profit: float = 0.0
    realized_profit_asset: str = ""
    base_asset: str = ""
    qty: float = 0.0
    position_side: str = ""
    active_buy: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> TradeHistoryItem:
        data = _mapping(data, "trade")
        return cls(
            time=_uint(data, "time"),
            symbol=_str(data, "symbol"),
            side=_str(data, "side"),
            price=_float(data, "price"),
            fee=_float(data, "fee"),
            fee_asset=_str(data, "feeAsset"),
            quantity=_float(data, "quantity"),
            quantity_asset=_str(data, "quantityAsset"),
            realized_profit=_float(data, "realizedProfit"),
            realized_profit_asset=_str(data, "realizedProfitAsset"),
            base_asset=_str(data, "baseAsset"),
            qty=_float(data, "qty"),
            position_side=_str(data, "positionSide"),
            active_buy=_bool(data, "activeBuy"),
        )


@dataclass(frozen=True)
class PositionHistoryItem:
    """One entry of a lead portfolio's position history."""

    time: int = 0
    symbol: str = ""
    side: str = ""
    opened: int = 0
    closed: int = 0
    status: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> PositionHistoryItem:
        data = _mapping(data, "position history")
        return cls(
            time=_uint(data, "time"),
            symbol=_str(data, "symbol"),
            side=_str(data, "side"),
            opened=_uint(data, "opened"),
            closed=_uint(data, "closed"),
            status=_str(data, "status"),
        )


@dataclass(frozen=True)
class LeadPosition:
    """A position currently held by a lead portfolio."""

    symbol: str = ""
    position_side: str = ""
    position_amount: str = ""
    mark_price: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> LeadPosition:
        data = _mapping(data, "lead position")
        return cls(
            symbol=_str(data, "symbol"),
            position_side=_str(data, "positionSide"),
            position_amount=_str(data, "positionAmount"),
            mark_price=_str(data, "markPrice"),
        )