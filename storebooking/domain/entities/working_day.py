from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WorkingDay:
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    is_open: bool
    open_minute: int | None = None  # minute of day
    close_minute: int | None = None

    @classmethod
    def from_hhmm(
        cls,
        day_of_week: int,
        is_open: bool,
        open_time: str | None = None,
        close_time: str | None = None,
    ) -> "WorkingDay":
        return cls(
            day_of_week=day_of_week,
            is_open=is_open,
            open_minute=_hhmm_to_minute(open_time) if open_time else None,
            close_minute=_hhmm_to_minute(close_time) if close_time else None,
        )

    @property
    def open_time(self) -> str | None:
        return _minute_to_hhmm(self.open_minute) if self.open_minute is not None else None

    @property
    def close_time(self) -> str | None:
        return _minute_to_hhmm(self.close_minute) if self.close_minute is not None else None


def _hhmm_to_minute(value: str) -> int:
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


def _minute_to_hhmm(value: int) -> str:
    return f"{value // 60:02d}:{value % 60:02d}"
