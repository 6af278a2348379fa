"""
Structured report queries.

A report query describes what the client wants from the server.  It is
turned into the XML request document of a REPORT method by
:func:`calreport.protocol.xml_builders.compile_document`.
"""
from datetime import date
from datetime import datetime
from datetime import timezone
from typing import List
from typing import Optional
from typing import Union

from lxml.etree import _Element

from calreport.elements import cdav
from calreport.elements import dav
from calreport.elements.base import Element
from calreport.lib.error import DocumentValidationError

COMPONENT_NAMES = ("VEVENT", "VTODO", "VJOURNAL", "VFREEBUSY", "VALARM", "VTIMEZONE")


def _as_utc(ts: Union[date, datetime]) -> datetime:
    ## same convention as the time-range attributes: naive means localtime
    if isinstance(ts, datetime):
        return ts.astimezone(timezone.utc)
    return datetime(ts.year, ts.month, ts.day, tzinfo=timezone.utc)


class ReportQuery:
    """
    Base class for the queries a CalendarReportMethod can send.

    Subclasses implement :meth:`validate` and :meth:`build`, the
    element tree of the request.
    """

    def validate(self) -> None:
        pass

    def build(self) -> Element:
        raise NotImplementedError()

    def create_document(self) -> _Element:
        """
        Validates the query and returns the root of the request
        document.  Raises DocumentValidationError on invalid queries.
        """
        self.validate()
        try:
            ## unnamed filters, or props and filters that are not elements
            return self.build().xmlelement()
        except (ValueError, TypeError, AttributeError) as e:
            raise DocumentValidationError(reason=str(e)) from e


class CalendarQuery(ReportQuery):
    """
    calendar-query report, ref RFC4791 section 7.8.

    Asks for the calendar data of all components of one type,
    optionally limited to a time range and optionally with recurrences
    expanded by the server.
    """

    def __init__(
        self,
        component: str = "VEVENT",
        start: Union[date, datetime, None] = None,
        end: Union[date, datetime, None] = None,
        expand: bool = False,
        props: Optional[List[Element]] = None,
        filters: Optional[List[Element]] = None,
    ) -> None:
        self.component = component
        self.start = start
        self.end = end
        self.expand = expand
        self.props = props or []
        self.filters = filters or []

    def validate(self) -> None:
        if self.component not in COMPONENT_NAMES:
            raise DocumentValidationError(
                reason="unknown component %r, expected one of %s"
                % (self.component, ", ".join(COMPONENT_NAMES))
            )
        if self.expand and (not self.start or not self.end):
            raise DocumentValidationError(reason="can't expand without a date range")
        for bound in (self.start, self.end):
            if bound is not None and not isinstance(bound, date):
                raise DocumentValidationError(
                    reason="time range bounds must be date or datetime, got %r"
                    % (bound,)
                )
        if self.start and self.end and _as_utc(self.start) >= _as_utc(self.end):
            raise DocumentValidationError(
                reason="time range start %s is not before end %s"
                % (self.start, self.end)
            )

    def build(self) -> Element:
        data = cdav.CalendarData()
        if self.expand:
            data += cdav.Expand(self.start, self.end)
        prop = dav.Prop() + ([dav.GetEtag(), data] + self.props)

        comp_filter = cdav.CompFilter(self.component)
        if self.filters:
            comp_filter += self.filters
        if self.start or self.end:
            comp_filter += cdav.TimeRange(self.start, self.end)
        vcalendar = cdav.CompFilter("VCALENDAR") + comp_filter

        return cdav.CalendarQuery() + [prop, cdav.Filter() + vcalendar]


class CalendarMultiget(ReportQuery):
    """
    calendar-multiget report, ref RFC4791 section 7.9.  Fetches a
    known set of calendar object resources by href.
    """

    def __init__(
        self, hrefs: List[str], props: Optional[List[Element]] = None
    ) -> None:
        self.hrefs = list(hrefs or [])
        self.props = props or []

    def validate(self) -> None:
        if not self.hrefs:
            raise DocumentValidationError(
                reason="calendar-multiget needs at least one href"
            )

    def build(self) -> Element:
        prop = dav.Prop() + ([dav.GetEtag(), cdav.CalendarData()] + self.props)
        return cdav.CalendarMultiGet() + (
            [prop] + [dav.Href(href) for href in self.hrefs]
        )
