"""
Parsing and rendering of date values according to Unicode date patterns
(the ``yyyy-MM-dd'T'HH:mm:ss.SSSZZZZZ`` notation).

Supported pattern letters:

========  ===================================================
``y``     year (``yy`` is a two-digit year)
``M``     month (``MMM`` / ``MMMM`` for English month names)
``d``     day of month
``E``     day of week (``EEE`` / ``EEEE``), ignored on parsing
``H``     hour (0-23)
``h``     hour (1-12), used with ``a``
``a``     AM / PM marker
``m``     minute
``s``     second
``S``     fractional second, one digit per letter
``Z``     zone offset (``Z``-``ZZZ``: ``+0900``, ``ZZZZZ``: ``+09:00`` or ``Z``)
``X``     zone offset, ``Z`` for UTC (``X``: ``+09``, ``XX``: ``+0900``, ``XXX``: ``+09:00``)
``x``     same as ``X`` but never ``Z``
========  ===================================================

Text between single quotes is literal; ``''`` stands for a single quote.
"""

import dataclasses
import datetime
import functools
import re
import typing

from .exceptions import InvalidDeclarationError, ValueConversionError

ISO8601_PATTERN = "yyyy-MM-dd'T'HH:mm:ss.SSSZZZZZ"

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
MONTH_ABBRS = tuple(n[:3] for n in MONTH_NAMES)
WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
WEEKDAY_ABBRS = tuple(n[:3] for n in WEEKDAY_NAMES)


@dataclasses.dataclass(frozen=True)
class PatternField:
    letter: str
    width: int


PatternElement = typing.Union[str, PatternField]


def tokenize(pattern: str) -> typing.List[PatternElement]:
    """
    Splits a date pattern into literal strings and :py:class:`PatternField`s.
    """
    elements: typing.List[PatternElement] = []
    literal: typing.List[str] = []
    i = 0
    n = len(pattern)

    def flush():
        if literal:
            elements.append("".join(literal))
            literal.clear()

    while i < n:
        c = pattern[i]
        if pattern.startswith("''", i):
            literal.append("'")
            i += 2
        elif c == "'":
            i += 1
            while True:
                if i >= n:
                    raise InvalidDeclarationError(f"unterminated quote in date pattern {pattern!r}")
                if pattern[i] == "'":
                    if pattern.startswith("''", i):
                        literal.append("'")
                        i += 2
                        continue
                    i += 1
                    break
                literal.append(pattern[i])
                i += 1
        elif c.isascii() and c.isalpha():
            j = i
            while j < n and pattern[j] == c:
                j += 1
            flush()
            elements.append(PatternField(c, j - i))
            i = j
        else:
            literal.append(c)
            i += 1
    flush()
    return elements


def _alternation(names: typing.Iterable[str]) -> str:
    return "|".join(re.escape(name) for name in names)


def _fragment_for(f: PatternField) -> typing.Optional[str]:
    if f.letter == "y":
        return r"\d{2}" if f.width == 2 else rf"\d{{{f.width},}}"
    elif f.letter == "M":
        if f.width <= 2:
            return r"\d{1,2}" if f.width == 1 else r"\d{2}"
        elif f.width == 3:
            return _alternation(MONTH_ABBRS)
        elif f.width == 4:
            return _alternation(MONTH_NAMES)
    elif f.letter in "dHhms":
        if f.width == 1:
            return r"\d{1,2}"
        elif f.width == 2:
            return r"\d{2}"
    elif f.letter == "S":
        return rf"\d{{{f.width}}}"
    elif f.letter == "a":
        if f.width == 1:
            return "AM|PM"
    elif f.letter == "E":
        if f.width <= 3:
            return _alternation(WEEKDAY_ABBRS)
        elif f.width == 4:
            return _alternation(WEEKDAY_NAMES)
    elif f.letter == "Z":
        if f.width <= 3:
            return r"[+-]\d{4}"
        elif f.width == 5:
            return r"Z|[+-]\d{2}:\d{2}"
    elif f.letter in "Xx":
        utc = "Z|" if f.letter == "X" else ""
        if f.width == 1:
            return utc + r"[+-]\d{2}(?:\d{2})?"
        elif f.width == 2:
            return utc + r"[+-]\d{4}"
        elif f.width == 3:
            return utc + r"[+-]\d{2}:\d{2}"
    return None


def _parse_offset(value: str) -> datetime.timezone:
    if value == "Z":
        return datetime.timezone.utc
    digits = value[1:].replace(":", "")
    delta = datetime.timedelta(hours=int(digits[:2]), minutes=int(digits[2:4] or "0"))
    return datetime.timezone(-delta if value[0] == "-" else delta)


def _render_offset(f: PatternField, offset: datetime.timedelta) -> str:
    minutes = int(offset.total_seconds()) // 60
    if minutes == 0 and (f.letter == "X" or (f.letter == "Z" and f.width == 5)):
        return "Z"
    sign = "-" if minutes < 0 else "+"
    hh, mm = divmod(abs(minutes), 60)
    if f.letter == "Z":
        return f"{sign}{hh:02d}:{mm:02d}" if f.width == 5 else f"{sign}{hh:02d}{mm:02d}"
    elif f.width == 1:
        return f"{sign}{hh:02d}" if mm == 0 else f"{sign}{hh:02d}{mm:02d}"
    elif f.width == 2:
        return f"{sign}{hh:02d}{mm:02d}"
    else:
        return f"{sign}{hh:02d}:{mm:02d}"


class DatePattern:
    """
    A compiled date pattern.

    :param str pattern: the pattern string.
    :raises InvalidDeclarationError: if the pattern contains an unsupported field.
    """

    pattern: str
    elements: typing.Sequence[PatternElement]
    has_zone: bool
    _regex: typing.Pattern[str]
    _groups: typing.Mapping[str, PatternField]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern!r})"

    def parse(self, value: str) -> datetime.datetime:
        """
        Parses ``value`` into a :py:class:`datetime.datetime`.
        The result is timezone-aware if and only if the pattern has a zone field.

        :raises ValueConversionError: if ``value`` does not match the pattern.
        """
        m = self._regex.fullmatch(value)
        if m is None:
            raise ValueConversionError(value, f"does not match the date pattern {self.pattern!r}")

        year, month, day = 1970, 1, 1
        hour, minute, second, microsecond = 0, 0, 0, 0
        hour12: typing.Optional[int] = None
        pm = False
        tz: typing.Optional[datetime.tzinfo] = None

        for group, f in self._groups.items():
            v = m.group(group)
            if f.letter == "y":
                year = int(v)
                if f.width == 2:
                    year += 2000 if year < 69 else 1900
            elif f.letter == "M":
                if f.width == 3:
                    month = MONTH_ABBRS.index(v) + 1
                elif f.width == 4:
                    month = MONTH_NAMES.index(v) + 1
                else:
                    month = int(v)
            elif f.letter == "d":
                day = int(v)
            elif f.letter == "H":
                hour = int(v)
            elif f.letter == "h":
                hour12 = int(v)
            elif f.letter == "a":
                pm = v == "PM"
            elif f.letter == "m":
                minute = int(v)
            elif f.letter == "s":
                second = int(v)
            elif f.letter == "S":
                microsecond = int(v[:6].ljust(6, "0"))
            elif f.letter in "ZXx":
                tz = _parse_offset(v)

        if hour12 is not None:
            hour = hour12 % 12 + (12 if pm else 0)

        try:
            return datetime.datetime(
                year, month, day, hour, minute, second, microsecond, tzinfo=tz
            )
        except ValueError as e:
            raise ValueConversionError(value, str(e)) from e

    def render(self, value: typing.Union[datetime.datetime, datetime.date]) -> str:
        """
        Renders ``value`` according to the pattern.
        A :py:class:`datetime.date` is rendered as midnight of that day.

        :raises ValueConversionError: if ``value`` is not a date, or if the pattern has
                                      a zone field and ``value`` carries no offset.
        """
        if not isinstance(value, datetime.date):
            raise ValueConversionError(value, "not a date or datetime")
        if not isinstance(value, datetime.datetime):
            value = datetime.datetime.combine(value, datetime.time())
        offset = value.utcoffset()
        if self.has_zone and offset is None:
            raise ValueConversionError(
                value, f"a naive datetime cannot be rendered with {self.pattern!r}"
            )

        buf: typing.List[str] = []
        for e in self.elements:
            if isinstance(e, str):
                buf.append(e)
                continue
            if e.letter == "y":
                if e.width == 2:
                    buf.append(f"{value.year % 100:02d}")
                else:
                    buf.append(f"{value.year:0{e.width}d}")
            elif e.letter == "M":
                if e.width == 3:
                    buf.append(MONTH_ABBRS[value.month - 1])
                elif e.width == 4:
                    buf.append(MONTH_NAMES[value.month - 1])
                else:
                    buf.append(f"{value.month:0{e.width}d}")
            elif e.letter == "d":
                buf.append(f"{value.day:0{e.width}d}")
            elif e.letter == "E":
                names = WEEKDAY_NAMES if e.width == 4 else WEEKDAY_ABBRS
                buf.append(names[value.weekday()])
            elif e.letter == "H":
                buf.append(f"{value.hour:0{e.width}d}")
            elif e.letter == "h":
                buf.append(f"{value.hour % 12 or 12:0{e.width}d}")
            elif e.letter == "a":
                buf.append("AM" if value.hour < 12 else "PM")
            elif e.letter == "m":
                buf.append(f"{value.minute:0{e.width}d}")
            elif e.letter == "s":
                buf.append(f"{value.second:0{e.width}d}")
            elif e.letter == "S":
                buf.append(f"{value.microsecond:06d}"[: e.width].ljust(e.width, "0"))
            else:
                assert offset is not None
                buf.append(_render_offset(e, offset))
        return "".join(buf)

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.elements = tokenize(pattern)

        regex_buf: typing.List[str] = []
        groups: typing.Dict[str, PatternField] = {}
        unsupported: typing.List[str] = []
        for e in self.elements:
            if isinstance(e, str):
                regex_buf.append(re.escape(e))
                continue
            fragment = _fragment_for(e)
            if fragment is None:
                unsupported.append(e.letter * e.width)
                continue
            group = f"f{len(groups)}"
            groups[group] = e
            regex_buf.append(f"(?P<{group}>{fragment})")
        if unsupported:
            raise InvalidDeclarationError(
                f"unsupported field(s) in date pattern {pattern!r}: {', '.join(unsupported)}"
            )
        self._regex = re.compile("".join(regex_buf))
        self._groups = groups
        self.has_zone = any(f.letter in "ZXx" for f in groups.values())


@functools.lru_cache(maxsize=None)
def compile_pattern(pattern: str) -> DatePattern:
    return DatePattern(pattern)
