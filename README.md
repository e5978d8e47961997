# domhedge

`domhedge` is the groundwork for keeping a pair of long futures positions
(`BTCDOMUSDT` and `XRPUSDT`) balanced against 15-minute candle moves. It
provides:

* a client for the exchange's public market-data and copy-trading
  endpoints;
* typed records for the exchange's responses;
* the float comparisons, quantity formatting and 15-minute window
  arithmetic that the rebalancing rules rely on;
* records and read-only queries for trader and position tables.

## Modules

| Module | Contents |
| --- | --- |
| `domhedge.models` | Records `NewUser`, `UserInfo`, `LhCoinSymbol`, `Trader`, `NewBinanceTrader`, `NewBinancePosition`, `NewBinancePositionHistory`, and `from_row` to build one from a column mapping |
| `domhedge.repository` | `Repository`, queries over a DB-API connection, and `wait_seconds` |
| `domhedge.numeric` | `is_equal`, `less_than_or_equal_zero`, `float_greater`, `float_equal`, `format_quantity`, `last_15_area` |
| `domhedge.binance_types` | Decoded responses: `KLine`, `FuturesPrice`, `BinanceSymbolInfo`, `BinanceOrder`, `OrderInfo`, `BinancePosition`, `ExchangeInfo`, `ExchangeSymbol`, `ExchangeFilterSymbol`, `ExchangeFilter`, `TradeHistoryItem`, `PositionHistoryItem`, `LeadPosition` |
| `domhedge.binance` | `MarketClient`, `BinanceError`, `generate_signature` |

## Market data

```python
import requests

from domhedge.binance import MarketClient
from domhedge.numeric import last_15_area

market = MarketClient(requests.Session())

# Millisecond bounds of the 15-minute window that ended at the last
# quarter hour, in Asia/Shanghai time.
start, end = last_15_area(0)

for kline in market.futures_klines("BTCDOMUSDT", "15m", start, end, "1"):
    print(kline.close)

for kline in market.spot_klines("XRPBTC", "15m", start, end, "1"):
    print(kline.close)

print(market.futures_price("XRPUSDT").price)
prices = market.all_futures_prices()      # symbol -> positive float price
pairs = market.futures_pairs()            # BinanceSymbolInfo with precisions
```

`MarketClient` also offers `server_time`, `exchange_filters`,
`spot_exchange_info`, and for lead portfolios `trader_margin_balance`,
`trade_history`, `position_history` and `lead_positions`. The history
and lead-position calls take an optional `proxy` URL and return `None`
when the answer carries no `data` field:

```python
trades = market.trade_history(1, 50, 1234567890)
held = market.lead_positions(1234567890, cookie="placeholder", token="token")
```

## Numbers and quantities

```python
from domhedge.numeric import format_quantity, float_greater, less_than_or_equal_zero

format_quantity(12.3456, 2)   # "12.35"
format_quantity(12.9, 0)      # "12" – precision 0 or less truncates
float_greater(1.0002, 1.0, 1e-4)          # True
less_than_or_equal_zero(0.0, 0.0, 1e-7)   # True
```

`last_15_area(slot, now)` takes a slot number (0 and 1 both mean the most
recent finished window, higher numbers step further back) and an optional
`now`; a naive `now` is read as Shanghai wall time. Both bounds come back
as strings of epoch milliseconds.

`generate_signature(secret, payload)` returns the hex HMAC-SHA256 of a
query string, or of a mapping encoded with its keys sorted:

```python
from domhedge.binance import generate_signature

generate_signature("secret", "symbol=XRPUSDT&timestamp=1")
```

## Reading trader tables

`Repository` wraps any DB-API 2.0 connection:

```python
import sqlite3

from domhedge.repository import Repository

repo = Repository(sqlite3.connect("traders.db"))
for trader in repo.open_traders():            # trader WHERE is_open=1
    print(trader.name, trader.portfolio_id)

for bt in repo.active_binance_traders():      # new_binance_trader WHERE status=0
    positions = repo.positions_for_trader(bt.trader_num)
    history = repo.position_history_for_trader(bt.trader_num)
```

The per-trader queries read `new_binance_<num>_position` and
`new_binance_position_<num>_history`, newest id first. Rows are turned
into records with `models.from_row`, which accepts snake_case or
camelCase column names and ignores unknown ones.

## Errors

Failed HTTP calls, bodies that are not JSON and responses of an
unexpected shape raise `domhedge.binance.BinanceError`. The response
records' `from_dict` methods raise `ValueError` on malformed input.

## What it does not do

The package reads public market data and stored trader data only. It
does not place, cancel or query orders, does not read signed account
positions, and has no user registry or rebalancing loop: nothing in it
opens, adjusts or closes positions. It keeps no state of its own, writes
nothing to the database, and has no command-line entry point.