# satis_purge/core/max_age.py
"""
Max-age grammar -> AgeCutoff

Intent
- Turn the human-readable max-age argument (default "-1 week") into the single
  timezone-aware cutoff timestamp used for the whole purge run.

Accepted forms
- keywords: "now", "today", "midnight", "yesterday", "tomorrow"
- relative terms: "-1 week", "+2 days 3 hours", "1 month ago", "last year", "next week"
  (a keyword may be followed by relative terms: "yesterday -1 week")
- absolute dates understood by dateutil, e.g. "2024-01-31" or "2024-01-31 12:00:00+00:00";
  they must name a year and a month ("march" or a bare "5" is rejected)

Units: sec/second, min/minute, hour, day, week, fortnight, month, year (singular or plural).
Calendar arithmetic (months/years) goes through dateutil.relativedelta.

Naive absolute dates are interpreted in local time.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, Optional, Tuple

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

DEFAULT_MAX_AGE = "-1 week"


class InvalidMaxAgeError(ValueError):
    def __init__(self, value: str) -> None:
        super().__init__(f"invalid max-age parameter: {value}")
        self.value = value


# unit -> (relativedelta field, multiplier)
_UNITS: Dict[str, Tuple[str, int]] = {}
for _names, _field, _mult in (
    (("sec", "secs", "second", "seconds"), "seconds", 1),
    (("min", "mins", "minute", "minutes"), "minutes", 1),
    (("hour", "hours"), "hours", 1),
    (("day", "days"), "days", 1),
    (("week", "weeks"), "weeks", 1),
    (("fortnight", "fortnights"), "weeks", 2),
    (("month", "months"), "months", 1),
    (("year", "years"), "years", 1),
):
    for _name in _names:
        _UNITS[_name] = (_field, _mult)

_KEYWORDS = ("now", "today", "midnight", "yesterday", "tomorrow")

_TERM_RE = re.compile(r"\s*(?P<amount>[+-]?\d+|last|next|this)\s*(?P<unit>[a-z]+)\b")
_AGO_RE = re.compile(r"\s+ago$")

# two defaults that differ in year and month expose fields dateutil filled in
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 1)


def _local_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now().astimezone()
    if now.tzinfo is None:
        return now.astimezone()
    return now


def _keyword_base(word: str, now: datetime) -> datetime:
    if word == "now":
        return now
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if word == "yesterday":
        return midnight - relativedelta(days=1)
    if word == "tomorrow":
        return midnight + relativedelta(days=1)
    return midnight


def _parse_amount(token: str) -> int:
    if token == "last":
        return -1
    if token == "next":
        return 1
    if token == "this":
        return 0
    return int(token)


def _parse_relative(text: str) -> Optional[relativedelta]:
    """
    Parse a sequence of relative terms. Returns None when text is not purely relative.
    """
    negate = False
    m = _AGO_RE.search(text)
    if m:
        negate = True
        text = text[: m.start()]

    if not text.strip():
        return None

    delta = relativedelta()
    pos = 0
    while pos < len(text):
        if not text[pos:].strip():
            break
        m = _TERM_RE.match(text, pos)
        if m is None:
            return None
        unit = _UNITS.get(m.group("unit"))
        if unit is None:
            return None
        field, mult = unit
        amount = _parse_amount(m.group("amount")) * mult
        delta += relativedelta(**{field: amount})
        pos = m.end()

    return -delta if negate else delta


def _parse_absolute(text: str) -> Optional[datetime]:
    """
    Parse an absolute date that names at least a year and a month. Missing days default to the 1st,
    missing times to midnight. Returns None when the year or month had to be guessed.
    """
    first = date_parser.parse(text, default=_DEFAULT_A)
    second = date_parser.parse(text, default=_DEFAULT_B)
    if (first.year, first.month) != (second.year, second.month):
        return None
    return first


def parse_max_age(value: str, now: Optional[datetime] = None) -> datetime:
    """
    Resolve a max-age expression into an absolute, timezone-aware cutoff.

    Raises InvalidMaxAgeError for anything that is neither a relative expression
    nor an absolute date.
    """
    raw = value
    cleaned = " ".join((value or "").replace("\\", "").split())
    text = cleaned.lower()
    if not text:
        raise InvalidMaxAgeError(raw)

    current = _local_now(now)

    # out-of-range arithmetic ("-10000 years") surfaces as ValueError or OverflowError
    try:
        base = current
        rest = text
        head, _, tail = text.partition(" ")
        if head in _KEYWORDS:
            base = _keyword_base(head, current)
            rest = tail
            if not rest:
                return base

        delta = _parse_relative(rest)
        if delta is not None:
            return base + delta

        parsed = _parse_absolute(cleaned)
        if parsed is None:
            raise InvalidMaxAgeError(raw)
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
        return parsed
    except InvalidMaxAgeError:
        raise
    except (ValueError, OverflowError) as e:
        raise InvalidMaxAgeError(raw) from e


__all__ = ["DEFAULT_MAX_AGE", "InvalidMaxAgeError", "parse_max_age"]
