from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

import pytz

BERLIN = pytz.timezone("Europe/Berlin")


@dataclass(frozen=True)
class TimeWindow:
    name: str
    offset_minutes: int
    duration_minutes: int

    def start(self, now: datetime) -> datetime:
        return BERLIN.normalize(now + timedelta(minutes=self.offset_minutes))


def _fmt_offset(minutes: int) -> str:
    if minutes % 60 == 0:
        return f"{minutes // 60}h"
    return f"{minutes}m"


def time_windows(count: int, duration_minutes: int) -> list[TimeWindow]:
    """
    Contiguous windows starting now, e.g. count=4, 360 min:
      now-6h, 6h-12h, 12h-18h, 18h-24h
    """
    windows: list[TimeWindow] = []
    for i in range(count):
        start = i * duration_minutes
        end = start + duration_minutes
        label = "now" if start == 0 else _fmt_offset(start)
        windows.append(TimeWindow(f"{label}-{_fmt_offset(end)}", start, duration_minutes))
    return windows


def berlin_now() -> datetime:
    return datetime.now(BERLIN)
