"""
Pattern-based temporal extractor.

Recognizes a fixed vocabulary of relative time phrases, weekday names and two
explicit date shapes ("June 15th, 2025" and "6/15/25"). Phrase checks are plain
substring tests on lower-cased text, so "will" also matches inside "willing";
the order of each cascade below decides which category wins.
"""
import re
from datetime import datetime, timezone
from logging import Logger
from typing import NamedTuple, Optional

from dateutil.relativedelta import relativedelta, MO, TU, WE, TH, FR, SA, SU
from scitrera_app_framework import Variables

from ...models.temporal import TemporalInfo, TemporalType, TimeGranularity
from ...utils.datetime import utc_now, ensure_utc, start_of_day
from .base import TemporalExtractorService, TemporalServicePluginBase

# Relative phrases, in scan order. Phrases without an entry in _RELATIVE_OFFSETS
# are still reported as markers but never resolve to an event time.
RELATIVE_PHRASES = (
    "today", "yesterday", "tomorrow",
    "this morning", "this afternoon", "this evening", "tonight",
    "last night", "last week", "last month", "last year",
    "next week", "next month", "next year",
    "a few days ago", "a few weeks ago", "a few months ago",
    "recently", "just now", "earlier", "later",
    "in the morning", "in the afternoon", "in the evening",
    "this week", "this month", "this year",
)

WEEKDAYS = {
    "monday": MO, "tuesday": TU, "wednesday": WE, "thursday": TH,
    "friday": FR, "saturday": SA, "sunday": SU,
}
_PREVIOUS_PREFIX = "last "
_NEXT_PREFIX = "next "

# Tense cascade: future, then past, then habitual, else present
FUTURE_INDICATORS = ("will", "going to", "plan to", "tomorrow", "next", "want to", "hope to", "intend to")
PAST_INDICATORS = ("yesterday", "last", "ago", "was", "were", "had", "did", "went", "used to")
HABITUAL_INDICATORS = ("always", "usually", "often", "sometimes", "rarely", "never", "every day", "every week")

# Ongoing cascade: ongoing phrase, then point-in-time phrase, then first-person present
ONGOING_PHRASES = (
    "i have been", "i've been",
    "currently", "at the moment", "these days",
    "for a while", "for some time",
)
POINT_IN_TIME_PHRASES = ("yesterday", "last night", "this morning", "went", "did", "was", "happened")
FIRST_PERSON_PRESENT = ("i am", "i'm")

_MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4,
    "may": 5, "june": 6, "july": 7, "august": 8,
    "september": 9, "october": 10, "november": 11, "december": 12,
}
_MONTH_DAY_PATTERN = re.compile(
    r"(" + "|".join(_MONTHS) + r")\s+(\d{1,2})(?:st|nd|rd|th)?(?:,?\s+(\d{4}))?",
    re.IGNORECASE,
)
_NUMERIC_DATE_PATTERN = re.compile(r"(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?")

_SECONDS_PER_DAY = 86400.0


class _RelativeOffset(NamedTuple):
    delta: relativedelta
    granularity: TimeGranularity
    snap_to_day: bool = False


_RELATIVE_OFFSETS = {
    "today": _RelativeOffset(relativedelta(), TimeGranularity.DAY, True),
    "yesterday": _RelativeOffset(relativedelta(days=-1), TimeGranularity.DAY, True),
    "last night": _RelativeOffset(relativedelta(days=-1), TimeGranularity.DAY, True),
    "tomorrow": _RelativeOffset(relativedelta(days=1), TimeGranularity.DAY, True),
    "last week": _RelativeOffset(relativedelta(weeks=-1), TimeGranularity.WEEK),
    "last month": _RelativeOffset(relativedelta(months=-1), TimeGranularity.MONTH),
    "last year": _RelativeOffset(relativedelta(years=-1), TimeGranularity.YEAR),
    "next week": _RelativeOffset(relativedelta(weeks=1), TimeGranularity.WEEK),
    "next month": _RelativeOffset(relativedelta(months=1), TimeGranularity.MONTH),
    "next year": _RelativeOffset(relativedelta(years=1), TimeGranularity.YEAR),
    "this week": _RelativeOffset(relativedelta(), TimeGranularity.WEEK),
    "this month": _RelativeOffset(relativedelta(), TimeGranularity.MONTH),
    "this year": _RelativeOffset(relativedelta(), TimeGranularity.YEAR),
    "a few days ago": _RelativeOffset(relativedelta(days=-3), TimeGranularity.APPROXIMATE),
    "a few weeks ago": _RelativeOffset(relativedelta(weeks=-2), TimeGranularity.APPROXIMATE),
    "a few months ago": _RelativeOffset(relativedelta(months=-2), TimeGranularity.APPROXIMATE),
    "recently": _RelativeOffset(relativedelta(days=-2), TimeGranularity.APPROXIMATE),
}


def _contains_any(text: str, phrases: tuple[str, ...]) -> bool:
    return any(phrase in text for phrase in phrases)


def _with_timezone(dt: datetime) -> datetime:
    # naive input is UTC; aware input keeps its zone so calendar days follow the caller
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def _has_bare_weekday(text: str, day: str) -> bool:
    """True if ``day`` occurs somewhere not directly preceded by "last " or "next "."""
    start = text.find(day)
    while start != -1:
        if text[max(0, start - len(_PREVIOUS_PREFIX)):start] not in (_PREVIOUS_PREFIX, _NEXT_PREFIX):
            return True
        start = text.find(day, start + 1)
    return False


def _build_date(reference: datetime, month: int, day: int, year: Optional[int]) -> Optional[datetime]:
    try:
        return datetime(year if year is not None else reference.year, month, day, tzinfo=reference.tzinfo)
    except ValueError:
        return None


class PatternTemporalExtractorService(TemporalExtractorService):
    """Temporal extractor built on phrase tables and two date regexes."""

    def extract(self, content: str, reference_date: Optional[datetime] = None) -> TemporalInfo:
        reference = _with_timezone(reference_date) if reference_date is not None else utc_now()
        text = content.lower()

        markers = self.find_markers(text)
        event_time, granularity = self._resolve_event_time(content, markers, reference)

        info = TemporalInfo(
            storage_time=reference,
            event_time=event_time,
            event_time_granularity=granularity,
            is_ongoing=self._is_ongoing(text),
            temporal_markers=markers,
            temporal_type=self._classify(text),
        )
        self.logger.debug(
            "Extracted temporal info: markers=%s, type=%s, granularity=%s",
            markers, info.temporal_type.value, granularity.value
        )
        return info

    @staticmethod
    def find_markers(text: str) -> list[str]:
        """
        Collect recognized time phrases from lower-cased ``text``.

        Relative phrases come first in vocabulary order. Each weekday then
        contributes its bare name (only if it appears outside a "last/next"
        compound), followed by "last <day>" and "next <day>" when present.
        Each phrase is recorded at most once.
        """
        markers = [phrase for phrase in RELATIVE_PHRASES if phrase in text]

        for day in WEEKDAYS:
            if _has_bare_weekday(text, day):
                markers.append(day)
            for prefix in (_PREVIOUS_PREFIX, _NEXT_PREFIX):
                if prefix + day in text:
                    markers.append(prefix + day)

        return markers

    @staticmethod
    def _classify(text: str) -> TemporalType:
        if _contains_any(text, FUTURE_INDICATORS):
            return TemporalType.FUTURE
        if _contains_any(text, PAST_INDICATORS):
            return TemporalType.PAST
        if _contains_any(text, HABITUAL_INDICATORS):
            return TemporalType.HABITUAL
        return TemporalType.PRESENT

    @staticmethod
    def _is_ongoing(text: str) -> bool:
        if _contains_any(text, ONGOING_PHRASES):
            return True
        if _contains_any(text, POINT_IN_TIME_PHRASES):
            return False
        return _contains_any(text, FIRST_PERSON_PRESENT)

    def _resolve_event_time(
            self,
            content: str,
            markers: list[str],
            reference: datetime,
    ) -> tuple[Optional[datetime], TimeGranularity]:
        explicit = self._parse_explicit_date(content, reference)
        if explicit is not None:
            return explicit, TimeGranularity.DAY

        for marker in markers:
            resolved = self._resolve_marker(marker, reference)
            if resolved is not None:
                return resolved

        return None, TimeGranularity.UNKNOWN

    @staticmethod
    def _parse_explicit_date(content: str, reference: datetime) -> Optional[datetime]:
        """First month-name date, else first numeric M/D[/Y] date. Calendar-invalid dates do not resolve."""
        match = _MONTH_DAY_PATTERN.search(content)
        if match:
            year = int(match.group(3)) if match.group(3) else None
            date = _build_date(reference, _MONTHS[match.group(1).lower()], int(match.group(2)), year)
            if date is not None:
                return date

        match = _NUMERIC_DATE_PATTERN.search(content)
        if match:
            year = None
            if match.group(3):
                year = int(match.group(3))
                if year < 100:
                    year += 2000
            return _build_date(reference, int(match.group(1)), int(match.group(2)), year)

        return None

    @staticmethod
    def _resolve_marker(marker: str, reference: datetime) -> Optional[tuple[datetime, TimeGranularity]]:
        offset = _RELATIVE_OFFSETS.get(marker)
        if offset is not None:
            resolved = reference + offset.delta
            if offset.snap_to_day:
                resolved = start_of_day(resolved)
            return resolved, offset.granularity

        if marker.startswith(_NEXT_PREFIX):
            weekday = WEEKDAYS.get(marker[len(_NEXT_PREFIX):])
            if weekday is not None:
                # strictly after the reference day
                return start_of_day(reference + relativedelta(days=1, weekday=weekday(+1))), TimeGranularity.DAY
            return None

        day = marker[len(_PREVIOUS_PREFIX):] if marker.startswith(_PREVIOUS_PREFIX) else marker
        weekday = WEEKDAYS.get(day)
        if weekday is not None:
            # most recent start of that weekday before the reference; today counts once its midnight has passed
            resolved = start_of_day(reference + relativedelta(weekday=weekday(-1)))
            if resolved >= reference:
                resolved -= relativedelta(weeks=1)
            return resolved, TimeGranularity.DAY

        return None

    def recency_score(self, date: datetime, reference_date: Optional[datetime] = None) -> float:
        """
        Recency score with separate linear segments per age band.

        Future dates score a flat 0.5. Bands are today (1.0), this week,
        this month and this year, each decaying linearly from its own
        starting value, and anything older floors at 0.1.
        """
        reference = reference_date if reference_date is not None else utc_now()
        days = (ensure_utc(reference) - ensure_utc(date)).total_seconds() / _SECONDS_PER_DAY

        if days < 0:
            return 0.5
        if days < 1:
            return 1.0
        if days < 7:
            return 0.9 - days * 0.05
        if days < 30:
            return 0.6 - (days - 7) * 0.01
        if days < 365:
            return 0.35 - (days - 30) * 0.001
        return max(0.1, 0.25 - (days - 365) * 0.0001)

    def are_in_same_period(self, a: datetime, b: datetime, granularity: TimeGranularity) -> bool:
        granularity = TimeGranularity(granularity)
        a, b = ensure_utc(a), ensure_utc(b)

        if granularity == TimeGranularity.EXACT:
            return abs((a - b).total_seconds()) < 60
        if granularity == TimeGranularity.DAY:
            return a.date() == b.date()
        if granularity == TimeGranularity.WEEK:
            return a.isocalendar()[:2] == b.isocalendar()[:2]
        if granularity == TimeGranularity.MONTH:
            return (a.year, a.month) == (b.year, b.month)
        if granularity == TimeGranularity.YEAR:
            return a.year == b.year
        # approximate / unknown: within two weeks
        return abs((a - b).total_seconds()) < 14 * _SECONDS_PER_DAY

    def format_relative(self, date: datetime, reference_date: Optional[datetime] = None) -> str:
        reference = reference_date if reference_date is not None else utc_now()
        # whole days elapsed, truncated toward zero
        days = int((ensure_utc(reference) - ensure_utc(date)).total_seconds() / _SECONDS_PER_DAY)

        if days == 0:
            return "today"
        if days == 1:
            return "yesterday"
        if days == -1:
            return "tomorrow"
        if 0 < days < 7:
            return f"{days} days ago"
        if -7 < days < 0:
            return f"in {-days} days"
        if 7 <= days < 30:
            return _plural(days // 7, "week") + " ago"
        if 30 <= days < 365:
            return _plural(days // 30, "month") + " ago"
        if days >= 365:
            return _plural(days // 365, "year") + " ago"
        return f"{date:%b} {date.day}, {date.year}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


class DefaultTemporalServicePlugin(TemporalServicePluginBase):
    """Plugin for the pattern-based temporal extractor."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> PatternTemporalExtractorService:
        return PatternTemporalExtractorService(v=v)
