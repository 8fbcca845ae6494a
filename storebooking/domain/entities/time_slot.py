from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class TimeSlot:
    date: date
    start_time: datetime
    end_time: datetime

    @property
    def start_hhmm(self) -> str:
        return self.start_time.strftime("%H:%M")

    @property
    def end_hhmm(self) -> str:
        return self.end_time.strftime("%H:%M")

    def to_dict(self) -> dict[str, str]:
        return {
            "date": self.date.isoformat(),
            "start_time": self.start_hhmm,
            "end_time": self.end_hhmm,
        }
