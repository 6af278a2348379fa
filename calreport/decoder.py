#!/usr/bin/env python
"""
Decoding of calendar data received from the server.
"""
from typing import BinaryIO
from typing import Union

import icalendar

from calreport.lib.error import CalendarParseError
from calreport.lib.error import log


class CalendarDecoder:
    """
    Turns a byte stream into an :class:`icalendar.Calendar`.

    The whole stream is read before parsing, icalendar has no
    incremental parser.  Errors while reading the stream are passed on
    as they are; only malformed data gives a CalendarParseError.
    """

    def decode(self, stream: Union[BinaryIO, bytes, str]) -> icalendar.Calendar:
        if isinstance(stream, (bytes, str)):
            data = stream
        else:
            data = stream.read()
        if not data or not data.strip():
            raise CalendarParseError(reason="no calendar data received")
        try:
            calendar = icalendar.Calendar.from_ical(data)
        except ValueError as e:
            raise CalendarParseError(reason=str(e)) from e
        if not isinstance(calendar, icalendar.Calendar):
            raise CalendarParseError(
                reason="expected a VCALENDAR, got %s" % getattr(calendar, "name", None)
            )
        log.debug("decoded calendar with %i components", len(calendar.subcomponents))
        return calendar
