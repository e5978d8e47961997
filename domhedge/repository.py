"""Read access to trader and position tables."""

import logging
import time
from contextlib import closing
from typing import Any, Callable, TypeVar

from domhedge.models import (
    NewBinancePosition,
    NewBinancePositionHistory,
    NewBinanceTrader,
    Trader,
    from_row,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

_MAX_TRADER_NUM = 2**64 - 1


def _trader_number(trader_num: int) -> int:
    if isinstance(trader_num, bool) or not isinstance(trader_num, int):
        raise TypeError(f"trader number must be an integer, got {trader_num!r}")
    if not 0 <= trader_num <= _MAX_TRADER_NUM:
        raise ValueError(f"trader number out of range: {trader_num}")
    return trader_num


class Repository:
    """Queries over a DB-API connection."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    def _fetch(self, model: type[T], sql: str) -> list[T]:
        with closing(self._connection.cursor()) as cursor:
            cursor.execute(sql)
            columns = [column[0] for column in cursor.description]
            return [from_row(model, dict(zip(columns, row))) for row in cursor.fetchall()]

    def positions_for_trader(self, trader_num: int) -> list[NewBinancePosition]:
        """All positions of a trader, newest id first."""
        table = f"new_binance_{_trader_number(trader_num)}_position"
        return self._fetch(NewBinancePosition, f"SELECT * FROM {table} ORDER BY id DESC")

    def position_history_for_trader(self, trader_num: int) -> list[NewBinancePositionHistory]:
        """All historic positions of a trader, newest id first."""
        table = f"new_binance_position_{_trader_number(trader_num)}_history"
        return self._fetch(NewBinancePositionHistory, f"SELECT * FROM {table} ORDER BY id DESC")

    def active_binance_traders(self) -> list[NewBinanceTrader]:
        """Followed traders whose status is 0."""
        return self._fetch(NewBinanceTrader, "SELECT * FROM new_binance_trader WHERE status=0")

    def open_traders(self) -> list[Trader]:
        """Trader portfolios that are open for following."""
        return self._fetch(Trader, "SELECT * FROM trader WHERE is_open=1")


def wait_seconds(num: int, sleep: Callable[[float], Any] = time.sleep) -> None:
    """Block for ``num`` seconds."""
    if num < 0:
        raise ValueError(f"cannot wait a negative number of seconds: {num}")
    log.info("%s 秒的协程", num)
    sleep(num)