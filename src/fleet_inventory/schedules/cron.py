"""
Cron-style recurrence matching.

Five fields, evaluated in UTC: minute, hour, day-of-month, month and
day-of-week. Each field accepts:

- ``*`` for any value,
- a literal (``5``; month and weekday names like ``jan`` or ``mon`` too),
- a range ``a-b``; a range whose start is above its end wraps around
  (``22-2`` in the hour field is 22, 23, 0, 1, 2),
- a step ``*/n``, ``a-b/n`` or ``a/n`` (from ``a`` to the field maximum),
- a comma-separated list of any of the above.

Day-of-week runs 0-7 where both 0 and 7 are Sunday.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from ..errors import InvalidArgumentError

WILDCARD = "*"


class CronSyntaxError(InvalidArgumentError):
    """Raised when a recurrence field cannot be parsed."""
    pass


@dataclass(frozen=True, slots=True)
class CronField:
    """Bounds and aliases for one recurrence field."""
    name: str
    low: int
    high: int
    aliases: dict[str, int] = field(default_factory=dict)


MINUTE = CronField("minute", 0, 59)
HOUR = CronField("hour", 0, 23)
DAY_OF_MONTH = CronField("day_of_month", 1, 31)
MONTH = CronField(
    "month", 1, 12,
    aliases={name: i + 1 for i, name in enumerate(
        ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]
    )},
)
DAY_OF_WEEK = CronField(
    "day_of_week", 0, 7,
    aliases={name: i for i, name in enumerate(["sun", "mon", "tue", "wed", "thu", "fri", "sat"])},
)


def _parse_value(spec: CronField, token: str, pattern: str) -> int:
    token = token.strip().lower()
    if token in spec.aliases:
        return spec.aliases[token]
    if not token.isdigit():
        raise CronSyntaxError(f"Invalid {spec.name} value {token!r} in {pattern!r}")
    value = int(token)
    if not spec.low <= value <= spec.high:
        raise CronSyntaxError(
            f"{spec.name} value {value} out of range {spec.low}-{spec.high} in {pattern!r}"
        )
    return value


def _expand_range(spec: CronField, start: int, end: int, step: int) -> list[int]:
    if start <= end:
        return list(range(start, end + 1, step))
    # Wraparound range: start..high then low..end, stepping across the seam
    span = list(range(start, spec.high + 1)) + list(range(spec.low, end + 1))
    return span[::step]


def parse_field(spec: CronField, pattern: str) -> frozenset[int]:
    """
    Parse one recurrence field into the set of values it matches.

    Args:
        spec: Field definition (bounds and aliases)
        pattern: Field text, e.g. ``"*/15"`` or ``"1-5,10"``

    Returns:
        Matching values; day-of-week 7 is folded onto 0

    Raises:
        CronSyntaxError: If the pattern is empty or malformed
    """
    if pattern is None or not pattern.strip():
        raise CronSyntaxError(f"{spec.name} field must be set")

    values: set[int] = set()
    for part in pattern.strip().split(","):
        if not part:
            raise CronSyntaxError(f"Empty list element in {spec.name} field {pattern!r}")

        base, slash, step_text = part.partition("/")
        step = 1
        if slash:
            if not step_text.isdigit() or int(step_text) == 0:
                raise CronSyntaxError(f"Invalid step {step_text!r} in {spec.name} field {pattern!r}")
            step = int(step_text)

        if base == WILDCARD:
            start, end = spec.low, spec.high
        elif "-" in base:
            first, _, last = base.partition("-")
            start = _parse_value(spec, first, pattern)
            end = _parse_value(spec, last, pattern)
        elif base:
            start = _parse_value(spec, base, pattern)
            end = spec.high if slash else start
        else:
            raise CronSyntaxError(f"Missing value before step in {spec.name} field {pattern!r}")

        values.update(_expand_range(spec, start, end, step))

    if spec is DAY_OF_WEEK and 7 in values:
        values.discard(7)
        values.add(0)
    return frozenset(values)


def _cron_weekday(moment: datetime) -> int:
    # datetime.weekday() is Monday=0; cron is Sunday=0
    return (moment.weekday() + 1) % 7


@dataclass(frozen=True)
class CronExpression:
    """A parsed five-field recurrence."""
    minute: str
    hour: str
    day_of_month: str
    month: str
    day_of_week: str

    minutes: frozenset[int] = field(init=False, repr=False)
    hours: frozenset[int] = field(init=False, repr=False)
    days_of_month: frozenset[int] = field(init=False, repr=False)
    months: frozenset[int] = field(init=False, repr=False)
    days_of_week: frozenset[int] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "minutes", parse_field(MINUTE, self.minute))
        object.__setattr__(self, "hours", parse_field(HOUR, self.hour))
        object.__setattr__(self, "days_of_month", parse_field(DAY_OF_MONTH, self.day_of_month))
        object.__setattr__(self, "months", parse_field(MONTH, self.month))
        object.__setattr__(self, "days_of_week", parse_field(DAY_OF_WEEK, self.day_of_week))

    @property
    def day_of_month_restricted(self) -> bool:
        return self.day_of_month.strip() != WILDCARD

    @property
    def day_of_week_restricted(self) -> bool:
        return self.day_of_week.strip() != WILDCARD

    def day_matches(self, moment: datetime) -> bool:
        """
        Apply the day rule.

        When both day fields are restricted either may match; when only one
        is, that one decides; when neither is, every day matches.
        """
        dom = moment.day in self.days_of_month
        dow = _cron_weekday(moment) in self.days_of_week
        if self.day_of_month_restricted and self.day_of_week_restricted:
            return dom or dow
        if self.day_of_month_restricted:
            return dom
        if self.day_of_week_restricted:
            return dow
        return True

    def matches(self, moment: datetime) -> bool:
        """Check whether the minute containing ``moment`` satisfies every field."""
        moment = _as_utc(moment)
        return (
            moment.minute in self.minutes
            and moment.hour in self.hours
            and moment.month in self.months
            and self.day_matches(moment)
        )

    def latest_match(self, moment: datetime, earliest: datetime) -> datetime | None:
        """
        Find the start of the most recent matching minute in ``[earliest, moment]``.

        Whole months, days and hours that cannot match are skipped in one step.

        Returns:
            The matching minute start (UTC), or None if nothing in range matches
        """
        current = _as_utc(moment).replace(second=0, microsecond=0)
        earliest = _as_utc(earliest)

        while current >= earliest:
            if current.month not in self.months:
                current = current.replace(day=1, hour=0, minute=0) - timedelta(minutes=1)
            elif not self.day_matches(current):
                current = current.replace(hour=0, minute=0) - timedelta(minutes=1)
            elif current.hour not in self.hours:
                current = current.replace(minute=0) - timedelta(minutes=1)
            elif current.minute not in self.minutes:
                current -= timedelta(minutes=1)
            else:
                return current
        return None


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def cron_matches(
    minute: str,
    hour: str,
    day_of_month: str,
    month: str,
    day_of_week: str,
    moment: datetime,
) -> bool:
    """Check a calendar instant against five recurrence patterns."""
    return CronExpression(minute, hour, day_of_month, month, day_of_week).matches(moment)
