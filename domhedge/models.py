"""Records stored in the trading database and the in-memory user summary."""

import dataclasses
import re
import typing
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, TypeVar

T = TypeVar("T")


@dataclass
class LhCoinSymbol:
    """A tradable contract and its price and quantity precision."""

    id: int = 0
    coin: str = ""
    symbol: str = ""
    start_time: int = 0
    end_time: int = 0
    price_precision: int = 0
    quantity_precision: int = 0
    is_open: int = 0


@dataclass
class NewBinancePosition:
    """A position held by a followed trader."""

    id: int = 0
    symbol: str = ""
    side: str = ""
    position_side: str = ""
    qty: float = 0.0
    status: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class NewBinancePositionHistory:
    """A historic position of a followed trader."""

    id: int = 0
    closed: int = 0
    opened: int = 0
    symbol: str = ""
    side: str = ""
    status: str = ""
    qty: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class NewBinanceTrader:
    """A followed lead trader; status 0 means active."""

    id: int = 0
    trader_num: int = 0
    status: int = 0


@dataclass
class NewUser:
    """A user account with exchange credentials and hedge parameters."""

    id: int = 0
    address: str = ""
    api_status: int = 0
    api_key: str = ""
    api_secret: str = ""
    bind_trader_status: int = 0
    bind_trader_status_tfi: int = 0
    use_new_system: int = 0
    is_dai: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    binance_id: int = 0
    need_init: int = 0
    num: float = 0.0
    order_type: int = 0
    first: float = 0.0
    second: float = 0.0


@dataclass
class Trader:
    """A lead trader portfolio; is_open 1 means it is followed."""

    id: int = 0
    name: str = ""
    portfolio_id: str = ""
    is_open: int = 0
    base_money: float = 0.0
    lever: float = 0.0
    area: int = 0
    sort: int = 0
    create_time: int = 0
    update_time: int = 0
    switch: int = 0
    close_time: int = 0
    level: int = 0
    amount: int = 0
    created_at: datetime | None = None
    updaated_at: datetime | None = None


@dataclass
class UserInfo:
    """A user's settings together with the quantities currently held."""

    api_key: str = ""
    api_secret: str = ""
    num: float = 0.0
    first: float = 0.0
    second: float = 0.0
    dom: float = 0.0
    eth: float = 0.0


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def _coerce(field_type: Any, value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode()
    if datetime in typing.get_args(field_type) or field_type is datetime:
        if isinstance(value, datetime):
            return value
        return datetime.fromisoformat(str(value))
    if field_type is int:
        if isinstance(value, str):
            return int(float(value)) if "." in value else int(value)
        return int(value)
    if field_type in (float, str):
        return field_type(value)
    return value


def from_row(model: type[T], row: Mapping[str, Any]) -> T:
    """Build a record of type ``model`` from a column-name mapping.

    Keys may be snake_case column names or camelCase JSON names; keys that
    match no field are ignored and missing fields keep their defaults.
    """
    if not (isinstance(model, type) and dataclasses.is_dataclass(model)):
        raise TypeError(f"{model!r} is not a record type")
    fields = {f.name: f for f in dataclasses.fields(model)}
    values: dict[str, Any] = {}
    for key, value in row.items():
        name = key if key in fields else _snake(key)
        if name in fields:
            values[name] = _coerce(fields[name].type, value)
    return model(**values)