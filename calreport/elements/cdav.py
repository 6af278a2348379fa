#!/usr/bin/env python
"""CalDAV elements used in report bodies, ref RFC4791 section 9"""
from datetime import date
from datetime import datetime
from datetime import timezone
from typing import Optional
from typing import Union

from .base import Element
from calreport.lib.namespace import ns

utc_tz = timezone.utc


def _to_utc_date_string(ts: Union[date, datetime]) -> str:
    """coerce datetimes to UTC (naive timestamps are taken as localtime)"""
    if isinstance(ts, datetime):
        ts = ts.astimezone(utc_tz)
    return ts.strftime("%Y%m%dT%H%M%SZ")


## report bodies
class CalendarQuery(Element):
    tag = ns("C", "calendar-query")


class CalendarMultiGet(Element):
    tag = ns("C", "calendar-multiget")


class CalendarData(Element):
    tag = ns("C", "calendar-data")


## filters
class Filter(Element):
    tag = ns("C", "filter")


class CompFilter(Element):
    tag = ns("C", "comp-filter")
    name_required = True


class PropFilter(Element):
    tag = ns("C", "prop-filter")
    name_required = True


class ParamFilter(Element):
    tag = ns("C", "param-filter")
    name_required = True


class NotDefined(Element):
    tag = ns("C", "is-not-defined")


class TextMatch(Element):
    tag = ns("C", "text-match")

    def __init__(self, value: str, collation: str = "i;octet", negate: bool = False) -> None:
        super().__init__(value=value)
        self.attributes["collation"] = collation
        if negate:
            self.attributes["negate-condition"] = "yes"


class TimeRange(Element):
    """
    start and end are sent as icalendar "date with UTC time",
    ref https://tools.ietf.org/html/rfc4791#section-9.9
    """

    tag = ns("C", "time-range")

    def __init__(
        self,
        start: Union[date, datetime, None] = None,
        end: Union[date, datetime, None] = None,
    ) -> None:
        super().__init__()
        if start is not None:
            self.attributes["start"] = _to_utc_date_string(start)
        if end is not None:
            self.attributes["end"] = _to_utc_date_string(end)


class Expand(TimeRange):
    tag = ns("C", "expand")
