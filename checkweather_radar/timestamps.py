# region Imports
import re
from datetime import datetime, date, time, timedelta
# endregion

_ID_TIME = re.compile(r"(\d{2})(\d{2})\Z", re.ASCII)
_CLOCK = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$")
DAY_MINUTES = 24 * 60


class TimeParseError(ValueError):
    """A clock string that is neither HH:MM nor H:MM AM/PM."""


# region Dataset Id
def time_label(dataset_id: str) -> str:
    """
    12-hour label for the dataset id's HHMM suffix, "" when there is none.
      "...1430" -> "2:30 PM", "...0005" -> "12:05 AM"
    """
    m = _ID_TIME.search(dataset_id or "")
    if not m:
        return ""
    h = int(m.group(1))
    ampm = "PM" if h >= 12 else "AM"
    if h == 0:
        h = 12
    elif h > 12:
        h -= 12
    return f"{h}:{m.group(2)} {ampm}"
# endregion

# region Clock Arithmetic
def clock_label(now: datetime) -> str:
    return now.strftime("%H:%M")


def parse_clock(text: str) -> time:
    m = _CLOCK.match(text or "")
    if not m:
        raise TimeParseError(f"unrecognised clock time: {text!r}")
    hour, minute, meridiem = int(m.group(1)), int(m.group(2)), m.group(3)
    if meridiem:
        if not 1 <= hour <= 12:
            raise TimeParseError(f"hour out of range in {text!r}")
        hour = hour % 12 + (12 if meridiem.upper() == "PM" else 0)
    if hour > 23 or minute > 59:
        raise TimeParseError(f"clock time out of range: {text!r}")
    return time(hour, minute)


def minutes_between(time1: str, time2: str, day_rollover: bool = False) -> int:
    """
    time1 - time2 in minutes, both taken on the same calendar day.

    With day_rollover, a result more than half a day negative is read as
    time2 being late on the previous day (e.g. 00:02 - 23:58 = 4).
    """
    day = date(2001, 1, 1)
    t1 = datetime.combine(day, parse_clock(time1))
    t2 = datetime.combine(day, parse_clock(time2))
    minutes = int((t1 - t2) / timedelta(minutes=1))
    if day_rollover and minutes < -DAY_MINUTES // 2:
        minutes += DAY_MINUTES
    return minutes
# endregion
