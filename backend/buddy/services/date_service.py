# /buddy/services/date_service.py

"""
Deterministic date and time resolution.

Everything in this module is a pure function of the user's text and the
caller-supplied clock:
- Relative day phrases ("today", "kal", "parso") become absolute dates
- Explicit day-month mentions ("25 feb", "march 5") become absolute dates
- Clock expressions ("9am", "21:00", "shaam 6 baje", "9 to 11 am") are parsed
- "in N minutes" offsets are added to the caller's clock, never the server's

No oracle calls, no I/O. Unresolvable input falls back to "today".
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple, Union

DateLike = Union[date, datetime]

MONTHS = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6, "jul": 7, "july": 7,
    "aug": 8, "august": 8, "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10, "nov": 11, "november": 11, "dec": 12, "december": 12,
}

WEEKDAYS = {
    "monday": 0, "somvar": 0, "tuesday": 1, "mangalvar": 1, "wednesday": 2, "budhvar": 2,
    "thursday": 3, "guruvar": 3, "veervar": 3, "friday": 4, "shukravar": 4,
    "saturday": 5, "shanivar": 5, "sunday": 6, "ravivar": 6, "itvar": 6,
}

_MONTH_ALT = "|".join(sorted(MONTHS, key=len, reverse=True))
_WEEKDAY_ALT = "|".join(sorted(WEEKDAYS, key=len, reverse=True))
# Devanagari letters and marks are not all \w, so word edges are spelled out.
_DEV_EDGE_L = r"(?<![ऀ-ॿ])"
_DEV_EDGE_R = r"(?![ऀ-ॿ])"

_ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
_DAY_MONTH_RE = re.compile(rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s*(?:of\s+)?({_MONTH_ALT})\b", re.I)
_MONTH_DAY_RE = re.compile(rf"\b({_MONTH_ALT})\s+(\d{{1,2}})(?:st|nd|rd|th)?\b", re.I)
_SLASH_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b")
_DAY_AFTER_RE = re.compile(
    rf"\b(?:day after tomorrow|parso|parson)\b|{_DEV_EDGE_L}परसों{_DEV_EDGE_R}", re.I
)
_TOMORROW_RE = re.compile(
    rf"\b(?:tomorrow|tmrw|tmr|kal|next day|agle din)\b|{_DEV_EDGE_L}(?:कल|अगले दिन){_DEV_EDGE_R}", re.I
)
_TODAY_RE = re.compile(rf"\b(?:today|aaj|tonight)\b|{_DEV_EDGE_L}आज{_DEV_EDGE_R}", re.I)
_WEEKDAY_RE = re.compile(rf"\b(next\s+|agle\s+)?({_WEEKDAY_ALT})\b", re.I)

_MERIDIEM = r"(am|pm|a\.m\.|p\.m\.)(?![a-z])"
_RELATIVE_RE = re.compile(
    r"(?P<prefix>\bin\s+|\bafter\s+)?\b(?P<amount>\d{1,3})\s*"
    r"(?P<unit>minutes?|mins?|minat|hours?|hrs?|ghante|ghanta)\b"
    r"(?P<suffix>\s*(?:mai|mein|mei|me|main|baad|later)\b)?",
    re.I,
)
_HALF_HOUR_RE = re.compile(r"\b(?:in\s+)?(?:half an hour|aadhe ghante)\b", re.I)
_RANGE_RE = re.compile(
    rf"\b(?P<h1>\d{{1,2}})(?:[:.](?P<m1>\d{{2}}))?\s*(?P<p1>{_MERIDIEM})?\s*"
    rf"(?:to|till|until|se|-|–)\s*"
    rf"(?P<h2>\d{{1,2}})(?:[:.](?P<m2>\d{{2}}))?\s*(?P<p2>{_MERIDIEM})?",
    re.I,
)
_MERIDIEM_TIME_RE = re.compile(rf"\b(\d{{1,2}})(?:[:.](\d{{2}}))?\s*{_MERIDIEM}", re.I)
_COLON_TIME_RE = re.compile(r"\b(\d{1,2}):(\d{2})\b")
_BAJE_RE = re.compile(r"\b(\d{1,2})(?:[:.](\d{2}))?\s*(?:baje|bje|o'?clock)\b", re.I)
_PREPOSITION_RE = re.compile(r"(?:\bat|\bpe|\bpar|@)\s*(\d{1,2})(?:[:.](\d{2}))?\b", re.I)
_BARE_RE = re.compile(r"\b(\d{1,2})(?:[:.](\d{2}))?\b")
_NOON_RE = re.compile(r"\b(?:noon|midday)\b", re.I)
_MIDNIGHT_RE = re.compile(rf"\b(?:midnight|aadhi raat)\b|{_DEV_EDGE_L}आधी रात{_DEV_EDGE_R}", re.I)

_MORNING_RE = re.compile(rf"\b(?:subah|subha|savere|morning)\b|{_DEV_EDGE_L}सुबह{_DEV_EDGE_R}", re.I)
_AFTERNOON_RE = re.compile(rf"\b(?:dopahar|dopehar|afternoon)\b|{_DEV_EDGE_L}दोपहर{_DEV_EDGE_R}", re.I)
_EVENING_RE = re.compile(rf"\b(?:shaam|sham|evening)\b|{_DEV_EDGE_L}शाम{_DEV_EDGE_R}", re.I)
_NIGHT_RE = re.compile(rf"\b(?:raat|rat|night|tonight)\b|{_DEV_EDGE_L}रात{_DEV_EDGE_R}", re.I)
_AM_ANSWER_RE = re.compile(r"\b(?:am|a\.m\.?)(?![a-z])", re.I)
_PM_ANSWER_RE = re.compile(r"\b(?:pm|p\.m\.?)(?![a-z])", re.I)


@dataclass(frozen=True)
class ClockTime:
    """A resolved 24-hour wall-clock time."""
    hour: int
    minute: int

    def hhmm(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def minutes(self) -> int:
        return self.hour * 60 + self.minute


@dataclass(frozen=True)
class RawTime:
    """A clock time as written by the user, before AM/PM resolution."""
    hour: int
    minute: int = 0
    meridiem: Optional[str] = None
    explicit_24h: bool = False

    @property
    def ambiguous(self) -> bool:
        return self.meridiem is None and not self.explicit_24h and 1 <= self.hour <= 12

    def resolve(self, meridiem: Optional[str] = None) -> ClockTime:
        return to_24h(self.hour, self.minute, meridiem or self.meridiem)

    def display(self) -> str:
        return f"{self.hour}:{self.minute:02d}"


@dataclass(frozen=True)
class TimeMatch:
    """Result of parsing a clock expression out of free text."""
    start: Optional[RawTime] = None
    end: Optional[RawTime] = None
    relative_minutes: Optional[int] = None

    @property
    def is_relative(self) -> bool:
        return self.relative_minutes is not None


# ---------------- Dates ---------------- #

def as_date(reference: DateLike) -> date:
    return reference.date() if isinstance(reference, datetime) else reference


def _rolled_date(reference: date, month: int, day: int, year: Optional[int] = None) -> Optional[date]:
    """Builds a day-month date, rolling into next year when it has already passed."""
    try:
        if year is not None:
            return date(year, month, day)
        candidate = date(reference.year, month, day)
        if candidate < reference:
            candidate = date(reference.year + 1, month, day)
        return candidate
    except ValueError:
        return None


def _explicit_date_spans(text: str):
    for regex in (_ISO_DATE_RE, _DAY_MONTH_RE, _MONTH_DAY_RE, _SLASH_DATE_RE):
        for match in regex.finditer(text):
            yield regex, match


def _date_from_match(regex, match, reference: date) -> Optional[date]:
    if regex is _ISO_DATE_RE:
        year, month, day = (int(g) for g in match.groups())
        return _rolled_date(reference, month, day, year)
    if regex is _DAY_MONTH_RE:
        return _rolled_date(reference, MONTHS[match.group(2).lower()], int(match.group(1)))
    if regex is _MONTH_DAY_RE:
        return _rolled_date(reference, MONTHS[match.group(1).lower()], int(match.group(2)))
    day, month, year = match.group(1), match.group(2), match.group(3)
    full_year = None
    if year:
        full_year = int(year) + 2000 if len(year) == 2 else int(year)
    return _rolled_date(reference, int(month), int(day), full_year)


def find_date(reference: DateLike, text: Optional[str]) -> Optional[str]:
    """
    Returns the ISO date explicitly named in `text`, or None when the text
    names no date at all. Callers use None to keep an inherited date.
    """
    if not text:
        return None
    ref = as_date(reference)

    for regex, match in _explicit_date_spans(text):
        resolved = _date_from_match(regex, match, ref)
        if resolved:
            return resolved.isoformat()

    if _DAY_AFTER_RE.search(text):
        return (ref + timedelta(days=2)).isoformat()
    if _TOMORROW_RE.search(text):
        return (ref + timedelta(days=1)).isoformat()
    if _TODAY_RE.search(text):
        return ref.isoformat()

    weekday = _WEEKDAY_RE.search(text)
    if weekday:
        target = WEEKDAYS[weekday.group(2).lower()]
        days_ahead = (target - ref.weekday()) % 7
        if weekday.group(1) and days_ahead == 0:
            days_ahead = 7
        return (ref + timedelta(days=days_ahead)).isoformat()
    return None


def resolve_date(reference: DateLike, text: Optional[str] = None) -> str:
    """Absolute YYYY-MM-DD for `text`; anything unresolvable means the reference day."""
    return find_date(reference, text) or as_date(reference).isoformat()


def is_iso_date(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10


def reference_now(current_date: Optional[str], current_time: Optional[str]) -> datetime:
    """Builds the caller's clock from the request strings, using the server clock for gaps."""
    server_now = datetime.now()
    day = server_now.date()
    if is_iso_date(current_date):
        day = date.fromisoformat(current_date)
    clock = parse_hhmm(current_time)
    if clock is None:
        return datetime.combine(day, time(server_now.hour, server_now.minute))
    return datetime.combine(day, time(clock.hour, clock.minute))


# ---------------- Times ---------------- #

def to_24h(hour: int, minute: int, meridiem: Optional[str]) -> ClockTime:
    """PM adds 12 below noon; 12 AM becomes 00."""
    if meridiem == "pm" and hour < 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return ClockTime(hour % 24, minute)


def parse_hhmm(value) -> Optional[ClockTime]:
    """Validates an H:MM / HH:MM 24-hour string."""
    if not isinstance(value, str):
        return None
    match = re.fullmatch(r"\s*(\d{1,2}):(\d{2})\s*", value)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return ClockTime(hour, minute)


def _normalize_meridiem(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    return "am" if token.lower().startswith("a") else "pm"


def part_of_day_meridiem(text: str, hour: int) -> Optional[str]:
    """Infers AM/PM from words like subah / shaam / raat for a 1-12 hour."""
    if _MORNING_RE.search(text):
        return "am"
    if _NIGHT_RE.search(text):
        # "raat 2 baje" and "raat 12 baje" are after midnight
        return "am" if hour == 12 or hour <= 4 else "pm"
    if _AFTERNOON_RE.search(text) or _EVENING_RE.search(text):
        return "pm"
    return None


def part_of_day(text: Optional[str]) -> Optional[str]:
    """Maps an explicit part-of-day word onto a timeOfDay bucket."""
    if not text:
        return None
    if _MORNING_RE.search(text):
        return "morning"
    if _AFTERNOON_RE.search(text):
        return "afternoon"
    if _EVENING_RE.search(text) or _NIGHT_RE.search(text):
        return "evening"
    return None


def _raw_time(hour: str, minute: Optional[str], meridiem: Optional[str] = None) -> Optional[RawTime]:
    h, m = int(hour), int(minute) if minute else 0
    if h > 23 or m > 59:
        return None
    norm = _normalize_meridiem(meridiem)
    if norm and not 1 <= h <= 12:
        # "15 pm" is already 24-hour
        norm = None
    explicit_24h = h == 0 or h >= 13 or (len(hour) == 2 and hour.startswith("0"))
    return RawTime(h, m, norm, explicit_24h)


def strip_dates(text: str) -> str:
    """Removes explicit date mentions so that "5 march" is not read as 5 o'clock."""
    for regex in (_ISO_DATE_RE, _DAY_MONTH_RE, _MONTH_DAY_RE, _SLASH_DATE_RE):
        text = regex.sub(" ", text)
    return text


def strip_temporal(text: str) -> str:
    """
    Removes every date, clock and part-of-day phrase, leaving what the user
    wants done. Used to derive titles without the oracle.
    """
    text = strip_dates(text)
    for regex in (_DAY_AFTER_RE, _TOMORROW_RE, _TODAY_RE, _WEEKDAY_RE, _RELATIVE_RE, _HALF_HOUR_RE,
                  _RANGE_RE, _MERIDIEM_TIME_RE, _COLON_TIME_RE, _BAJE_RE, _PREPOSITION_RE,
                  _NOON_RE, _MIDNIGHT_RE, _MORNING_RE, _AFTERNOON_RE, _EVENING_RE, _NIGHT_RE):
        text = regex.sub(" ", text)
    return re.sub(r"\s+", " ", text).strip()


def _with_context_meridiem(raw: RawTime, text: str) -> RawTime:
    if raw.ambiguous:
        inferred = part_of_day_meridiem(text, raw.hour)
        if inferred:
            return RawTime(raw.hour, raw.minute, inferred, raw.explicit_24h)
    return raw


def parse_time_expression(text: Optional[str], allow_bare: bool = False) -> Optional[TimeMatch]:
    """
    Extracts a clock expression from free text.

    Bare numbers ("7") are only read as hours when `allow_bare` is set or when
    preceded by at/pe/par/@, so "3 tasks" is never mistaken for 3 o'clock.
    """
    if not text:
        return None
    cleaned = strip_dates(text.lower())

    relative = _RELATIVE_RE.search(cleaned)
    if relative and (relative.group("prefix") or relative.group("suffix")):
        amount = int(relative.group("amount"))
        unit = relative.group("unit").lower()
        if unit.startswith(("h", "ghant")):
            amount *= 60
        return TimeMatch(relative_minutes=amount)
    if _HALF_HOUR_RE.search(cleaned):
        return TimeMatch(relative_minutes=30)

    span = _RANGE_RE.search(cleaned)
    if span:
        start = _raw_time(span.group("h1"), span.group("m1"), span.group("p1"))
        end = _raw_time(span.group("h2"), span.group("m2"), span.group("p2"))
        if start and end:
            return share_meridiem(TimeMatch(start=_with_context_meridiem(start, cleaned),
                                            end=_with_context_meridiem(end, cleaned)))

    for regex in (_MERIDIEM_TIME_RE, _COLON_TIME_RE, _BAJE_RE, _PREPOSITION_RE):
        match = regex.search(cleaned)
        if match:
            groups = match.groups()
            raw = _raw_time(groups[0], groups[1], groups[2] if len(groups) > 2 else None)
            if raw:
                return TimeMatch(start=_with_context_meridiem(raw, cleaned))

    if _MIDNIGHT_RE.search(cleaned):
        return TimeMatch(start=RawTime(0, 0, None, True))
    if _NOON_RE.search(cleaned):
        return TimeMatch(start=RawTime(12, 0, "pm"))

    if allow_bare:
        match = _BARE_RE.search(cleaned)
        if match:
            raw = _raw_time(match.group(1), match.group(2))
            if raw:
                return TimeMatch(start=_with_context_meridiem(raw, cleaned))
    return None


def share_meridiem(match: TimeMatch) -> TimeMatch:
    """'9 to 11 am' means both ends are AM; '11 to 1 pm' starts at 11 AM."""
    start, end = match.start, match.end
    if start and end and start.ambiguous and end.meridiem:
        shared = RawTime(start.hour, start.minute, end.meridiem, start.explicit_24h)
        if shared.resolve().minutes() > end.resolve().minutes():
            flipped = "am" if end.meridiem == "pm" else "pm"
            shared = RawTime(start.hour, start.minute, flipped, start.explicit_24h)
        start = shared
    elif start and end and end.ambiguous and start.meridiem:
        shared = RawTime(end.hour, end.minute, start.meridiem, end.explicit_24h)
        if shared.resolve().minutes() < start.resolve().minutes():
            flipped = "pm" if start.meridiem == "am" else "am"
            shared = RawTime(end.hour, end.minute, flipped, end.explicit_24h)
        end = shared
    return TimeMatch(start=start, end=end, relative_minutes=match.relative_minutes)


def parse_meridiem_answer(text: Optional[str]) -> Optional[str]:
    """Reads an answer to "AM or PM?"; returns None when unclear or contradictory."""
    if not text:
        return None
    lowered = text.lower()
    am = bool(_AM_ANSWER_RE.search(lowered) or _MORNING_RE.search(lowered))
    pm = bool(_PM_ANSWER_RE.search(lowered) or _EVENING_RE.search(lowered)
              or _NIGHT_RE.search(lowered) or _AFTERNOON_RE.search(lowered))
    if am == pm:
        return None
    return "am" if am else "pm"


def resolve_upcoming(raw: RawTime, now: datetime) -> ClockTime:
    """
    Resolves a possibly ambiguous hour to whichever of AM/PM comes next after
    `now`. When both have passed, the later reading is kept, so "12:30" at
    14:00 stays 12:30 rather than becoming midnight. Used by flows that do
    not stop to ask for AM/PM.
    """
    if not raw.ambiguous:
        return raw.resolve()
    now_minutes = now.hour * 60 + now.minute
    am, pm = raw.resolve("am"), raw.resolve("pm")
    for candidate in sorted((am, pm), key=ClockTime.minutes):
        if candidate.minutes() >= now_minutes:
            return candidate
    return max(am, pm, key=ClockTime.minutes)


def add_minutes(now: datetime, minutes: int) -> Tuple[str, str]:
    """Offsets the caller's clock; crossing midnight moves the date forward."""
    target = now + timedelta(minutes=minutes)
    return target.date().isoformat(), f"{target.hour:02d}:{target.minute:02d}"


def time_of_day_bucket(value) -> str:
    """05:00-11:59 morning, 12:00-16:59 afternoon, everything else evening."""
    clock = value if isinstance(value, ClockTime) else parse_hhmm(value)
    if clock is None:
        return "morning"
    if 5 <= clock.hour < 12:
        return "morning"
    if 12 <= clock.hour < 17:
        return "afternoon"
    return "evening"


def next_day(value: str) -> str:
    return (date.fromisoformat(value) + timedelta(days=1)).isoformat()
