"""Float comparisons, quantity formatting and 15-minute kline windows."""

import math
from datetime import datetime, timedelta, timezone, tzinfo

try:
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
except ImportError:  # pragma: no cover
    ZoneInfo = None  # type: ignore[assignment,misc]
    ZoneInfoNotFoundError = Exception  # type: ignore[assignment,misc]

SLOT = timedelta(minutes=15)
_MILLISECOND = timedelta(milliseconds=1)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EQUAL_TOLERANCE = 0.000000001


def _shanghai() -> tzinfo:
    # Asia/Shanghai has kept a fixed +08:00 offset since 1991.
    if ZoneInfo is not None:
        try:
            return ZoneInfo("Asia/Shanghai")
        except (ZoneInfoNotFoundError, ValueError, OSError):
            pass
    return timezone(timedelta(hours=8), "Asia/Shanghai")


SHANGHAI = _shanghai()


def is_equal(f1: float, f2: float) -> bool:
    """True when the two values differ by less than 1e-9."""
    return abs(f1 - f2) < _EQUAL_TOLERANCE


def less_than_or_equal_zero(a: float, b: float, epsilon: float) -> bool:
    """True when ``a`` is below ``b`` or within ``epsilon`` of it."""
    return a - b < epsilon or math.fabs(a - b) < epsilon


def float_greater(a: float, b: float, epsilon: float) -> bool:
    """True when ``a`` exceeds ``b`` by at least ``epsilon``."""
    return a - b >= epsilon


def float_equal(a: float, b: float, epsilon: float) -> bool:
    """True when ``a`` and ``b`` are within ``epsilon`` of each other."""
    return math.fabs(a - b) <= epsilon


def format_quantity(qty: float, precision: int) -> str:
    """Render an order quantity with ``precision`` decimal places.

    A precision of zero or less truncates toward zero to a whole number.
    """
    if precision <= 0:
        return str(int(qty))
    return f"{qty:.{precision}f}"


def _unix_millis(moment: datetime) -> int:
    return (moment - _EPOCH) // _MILLISECOND


def last_15_area(slot: int = 0, now: datetime | None = None) -> tuple[str, str]:
    """Start and end, in epoch milliseconds, of a finished 15-minute window.

    Slot 1 (also chosen for 0) is the window that ended at the last quarter
    hour before ``now``; higher slots step further back. A naive ``now`` is
    read as Shanghai wall time.
    """
    if slot < 0:
        raise ValueError(f"slot must not be negative: {slot}")
    if slot == 0:
        slot = 1

    if now is None:
        local = datetime.now(SHANGHAI)
    elif now.tzinfo is None:
        local = now.replace(tzinfo=SHANGHAI)
    else:
        local = now.astimezone(SHANGHAI)

    slot_end = local.replace(minute=local.minute // 15 * 15, second=0, microsecond=0)
    end = slot_end - (slot - 1) * SLOT - _MILLISECOND
    start = end - SLOT + _MILLISECOND
    return str(_unix_millis(start)), str(_unix_millis(end))