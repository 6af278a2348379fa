"""
Tests for the report queries and the query-to-document compiler.

These are pure data transformations, no mocking required.
"""
import datetime

import pytest
from lxml import etree

from calreport.elements import cdav
from calreport.elements import dav
from calreport.elements.cdav import _to_utc_date_string
from calreport.lib.error import DocumentValidationError
from calreport.protocol import CalendarMultiget
from calreport.protocol import CalendarQuery
from calreport.protocol import compile_document
from calreport.protocol import serialize_document

C = "{urn:ietf:params:xml:ns:caldav}"
D = "{DAV:}"

utc = datetime.timezone.utc


def test_element():
    cq = cdav.CalendarQuery()
    assert str(cq).startswith("<?xml")
    assert "CalendarQuery" in repr(cq)
    assert "calendar-query" in str(cq)


def test_named_element_requires_name():
    with pytest.raises(ValueError):
        cdav.CompFilter().xmlelement()


def test_text_match_attributes():
    el = cdav.TextMatch("meeting", negate=True).xmlelement()
    assert el.text == "meeting"
    assert el.get("collation") == "i;octet"
    assert el.get("negate-condition") == "yes"


def test_to_utc_date_string_date():
    assert _to_utc_date_string(datetime.date(2019, 5, 14)) == "20190514T000000Z"


def test_to_utc_date_string_utc():
    ts = datetime.datetime(2019, 5, 14, 21, 10, 23, tzinfo=utc)
    assert _to_utc_date_string(ts) == "20190514T211023Z"


def test_to_utc_date_string_other_tz():
    ts = datetime.datetime(
        2019, 5, 14, 21, 10, 23, tzinfo=datetime.timezone(datetime.timedelta(hours=-2))
    )
    assert _to_utc_date_string(ts) == "20190514T231023Z"


class TestCalendarQuery:
    def test_minimal(self):
        root = compile_document(CalendarQuery())
        assert root.tag == C + "calendar-query"
        prop = root.find(D + "prop")
        assert prop.find(D + "getetag") is not None
        assert prop.find(C + "calendar-data") is not None
        vcalendar = root.find(C + "filter").find(C + "comp-filter")
        assert vcalendar.get("name") == "VCALENDAR"
        assert vcalendar.find(C + "comp-filter").get("name") == "VEVENT"

    def test_time_range(self):
        query = CalendarQuery(
            "VTODO",
            start=datetime.datetime(2024, 1, 1, tzinfo=utc),
            end=datetime.datetime(2024, 12, 31, tzinfo=utc),
        )
        root = compile_document(query)
        tr = root.find(".//%stime-range" % C)
        assert tr.get("start") == "20240101T000000Z"
        assert tr.get("end") == "20241231T000000Z"
        assert tr.getparent().get("name") == "VTODO"

    def test_expand(self):
        query = CalendarQuery(
            start=datetime.datetime(2024, 1, 1, tzinfo=utc),
            end=datetime.datetime(2024, 2, 1, tzinfo=utc),
            expand=True,
        )
        root = compile_document(query)
        expand = root.find(D + "prop").find(C + "calendar-data").find(C + "expand")
        assert expand.get("start") == "20240101T000000Z"
        assert expand.get("end") == "20240201T000000Z"

    def test_extra_filters(self):
        query = CalendarQuery(
            filters=[cdav.PropFilter("SUMMARY") + cdav.TextMatch("party")]
        )
        root = compile_document(query)
        pf = root.find(".//%sprop-filter" % C)
        assert pf.get("name") == "SUMMARY"
        assert pf.find(C + "text-match").text == "party"

    def test_expand_without_range(self):
        with pytest.raises(DocumentValidationError):
            compile_document(CalendarQuery(expand=True))

    def test_inverted_range(self):
        with pytest.raises(DocumentValidationError):
            compile_document(
                CalendarQuery(
                    start=datetime.datetime(2024, 2, 1),
                    end=datetime.datetime(2024, 1, 1),
                )
            )

    def test_unknown_component(self):
        with pytest.raises(DocumentValidationError):
            compile_document(CalendarQuery("VCARD"))

    def test_unnamed_filter(self):
        with pytest.raises(DocumentValidationError):
            compile_document(CalendarQuery(filters=[cdav.PropFilter()]))


class TestCalendarMultiget:
    def test_hrefs(self):
        root = compile_document(CalendarMultiget(["/cal/event1.ics", "/cal/event2.ics"]))
        assert root.tag == C + "calendar-multiget"
        assert [x.text for x in root.findall(D + "href")] == [
            "/cal/event1.ics",
            "/cal/event2.ics",
        ]
        assert root.find(D + "prop").find(C + "calendar-data") is not None

    def test_extra_props(self):
        root = compile_document(CalendarMultiget(["/a.ics"], props=[dav.Allprop()]))
        assert root.find(D + "prop").find(D + "allprop") is not None

    def test_no_hrefs(self):
        with pytest.raises(DocumentValidationError):
            compile_document(CalendarMultiget([]))


def test_compile_without_query():
    with pytest.raises(DocumentValidationError):
        compile_document(None)


def test_serialize_document():
    text = serialize_document(compile_document(CalendarMultiget(["/a.ics"])))
    assert text.startswith("<?xml version='1.0' encoding='utf-8'?>")
    assert "\n  <D:prop" in text
    assert etree.fromstring(text.encode("utf-8")).tag == C + "calendar-multiget"


def test_serialize_nothing():
    assert serialize_document(None) == ""


def test_param_filter_and_not_defined():
    query = CalendarQuery(
        filters=[
            cdav.PropFilter("ATTENDEE")
            + (cdav.ParamFilter("PARTSTAT") + cdav.TextMatch("DECLINED", negate=True)),
            cdav.PropFilter("CLASS") + cdav.NotDefined(),
        ]
    )
    root = compile_document(query)
    param = root.find(".//%sparam-filter" % C)
    assert param.get("name") == "PARTSTAT"
    assert param.find(C + "text-match").get("negate-condition") == "yes"
    assert root.find(".//%sis-not-defined" % C).getparent().get("name") == "CLASS"
