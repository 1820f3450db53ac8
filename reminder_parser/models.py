from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


RecurrenceType = Literal['yearly', 'monthly', 'weekly', 'daily', 'none']
WeekdayCode = Literal['SU', 'MO', 'TU', 'WE', 'TH', 'FR', 'SA']


class RecurrenceInfo(BaseModel):
    """Structured description of a repeat pattern found in reminder text.

    ``calculated_date`` is set only for patterns whose first occurrence the
    detector computes itself (weekday, month position, month day, daily).
    """
    model_config = ConfigDict(frozen=True)

    type: RecurrenceType = 'none'
    is_birthday: bool = False
    is_anniversary: bool = False
    needs_end_date: bool = False
    interval: Optional[int] = Field(default=None, ge=1)
    by_day: Optional[WeekdayCode] = None
    by_month_day: Optional[int] = Field(default=None, ge=1, le=31)
    by_set_pos: Optional[Literal[-1, 1, 2, 3, 4]] = None
    until_date: Optional[datetime] = None
    calculated_date: Optional[datetime] = None

    @model_validator(mode='after')
    def _check_invariants(self):
        if self.type == 'none':
            extras = (
                self.is_birthday, self.is_anniversary, self.needs_end_date,
                self.interval, self.by_day, self.by_month_day, self.by_set_pos,
                self.until_date, self.calculated_date,
            )
            if any(v not in (None, False) for v in extras):
                raise ValueError("a recurrence of type 'none' cannot carry other fields")
        if self.is_birthday and self.is_anniversary:
            raise ValueError('is_birthday and is_anniversary are mutually exclusive')
        if self.is_birthday or self.is_anniversary:
            if self.type != 'yearly':
                raise ValueError('birthdays and anniversaries repeat yearly')
            if self.needs_end_date or self.until_date is not None:
                raise ValueError('birthdays and anniversaries are open-ended')
        if self.by_set_pos is not None and self.by_day is None:
            raise ValueError('by_set_pos requires by_day')
        return self

    @property
    def is_recurring(self) -> bool:
        return self.type != 'none'


class DateTimeMatch(BaseModel):
    """A date resolved by the generic extractor plus the text that produced it."""
    model_config = ConfigDict(frozen=True)

    date: datetime
    matched_text: tuple[str, ...] = ()
    has_time: bool = False
    explicit_meridiem: bool = False


class ParseResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    date: Optional[datetime] = None
    recurrence: RecurrenceInfo = Field(default_factory=RecurrenceInfo)


class DetectedName(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    confidence: Literal['high', 'medium']
    source: Literal['relationship', 'proper']
