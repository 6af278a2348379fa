#!/usr/bin/env python
"""
The CalDAV REPORT method, for reports answered with calendar data.

Unlike the usual REPORT answered with a multistatus XML document, the
response of this one is expected to be ``text/calendar``, and is
decoded into an :class:`icalendar.Calendar`.

Usage:

1. construct the method with a path and a report query
2. optionally set the depth (defaults to 1)
3. execute it, typically through :meth:`calreport.DAVClient.execute`
4. call :meth:`CalendarReportMethod.get_response_body_as_calendar`
"""
from typing import Callable
from typing import Optional
from typing import Union

import icalendar
import requests
import urllib3

from calreport.decoder import CalendarDecoder
from calreport.exchange import RequestBodyExchange
from calreport.lib import error
from calreport.lib.debug import format_request
from calreport.lib.error import log
from calreport.lib.url import remove_double_slashes
from calreport.protocol.queries import ReportQuery
from calreport.protocol.types import CONTENT_TYPE_CALENDAR
from calreport.protocol.types import CONTENT_TYPE_TEXT_XML
from calreport.protocol.types import Depth
from calreport.protocol.types import HEADER_CONTENT_TYPE
from calreport.protocol.types import HEADER_DEPTH
from calreport.protocol.types import METHOD_REPORT
from calreport.protocol.xml_builders import compile_document
from calreport.protocol.xml_builders import serialize_document

## what reading a streamed response body may raise
READ_ERRORS = (OSError, urllib3.exceptions.HTTPError)


class CalendarReportMethod:
    """
    One REPORT request/response exchange, ref RFC4791.

    The request body is generated from the report query the first time
    the content length is asked for, and is kept from then on.  If a
    body has been set on the exchange beforehand, the query is not
    used at all.

    An instance models exactly one round trip and is not thread safe;
    concurrent reports need one instance each.  Changing the depth,
    path or query after the request has been sent is a usage error.
    """

    name: str = METHOD_REPORT

    def __init__(
        self,
        path: str,
        report_request: Optional[ReportQuery] = None,
        exchange: Optional[RequestBodyExchange] = None,
        calendar_decoder: Optional[CalendarDecoder] = None,
        debug_sink: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.path = path
        self.report_request = report_request
        self.exchange = exchange if exchange is not None else RequestBodyExchange()
        self.calendar_decoder = (
            calendar_decoder if calendar_decoder is not None else CalendarDecoder()
        )
        self.debug_sink = debug_sink
        self._depth = Depth.ONE

    def __repr__(self) -> str:
        return "%s(%r, depth=%s)" % (
            self.__class__.__name__,
            self.path,
            self._depth.value,
        )

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, path: str) -> None:
        self._path = remove_double_slashes(path)

    @property
    def depth(self) -> Depth:
        return self._depth

    @depth.setter
    def depth(self, depth: Union[Depth, int, str]) -> None:
        self._depth = Depth.from_value(depth)

    def get_depth(self) -> Depth:
        return self.depth

    def set_depth(self, depth: Union[Depth, int, str]) -> None:
        self.depth = depth

    ## request side

    def add_request_headers(self) -> None:
        """
        Adds the Depth header, and a text/xml Content-Type unless the
        caller has set one already.  Headers from the exchange itself
        are added first.
        """
        self.exchange.add_request_headers()
        self.exchange.set_request_header(HEADER_DEPTH, self._depth.header_value)
        if self.exchange.get_request_header(HEADER_CONTENT_TYPE) is None:
            self.exchange.add_request_header(HEADER_CONTENT_TYPE, CONTENT_TYPE_TEXT_XML)

    def get_request_content_length(self) -> int:
        """
        Length in bytes of the request body, for the Content-Length
        header.  Generates the body from the report query if nothing
        has set it yet.
        """
        if not self.exchange.is_request_content_already_set():
            contents = self.generate_request_body()
            ## queries producing no content are fine, the body is empty then
            if contents is None:
                contents = ""
            self.exchange.set_request_body(contents)

            if self.debug_sink is not None:
                self.debug_sink(
                    format_request(
                        self.name,
                        self.path,
                        self.exchange.request_headers.items(),
                        self.exchange.get_request_content_length(),
                        self._depth.header_value,
                        contents,
                    )
                )

        return self.exchange.get_request_content_length()

    def generate_request_body(self) -> str:
        """
        Builds the XML request body from the report query.

        Raises:
            ReportRequestDefect: the query could not be turned into a
                valid document.  This is a bug on the calling side and
                is not reported as a protocol error.
        """
        try:
            document = compile_document(self.report_request)
        except error.DocumentValidationError as e:
            log.error(
                "Error trying to create a request document from %r" % self.report_request,
                exc_info=True,
            )
            raise error.ReportRequestDefect(
                "could not build the REPORT body for %s: %s" % (self.path, e.reason)
            ) from e
        return serialize_document(document)

    def execute(self, session: requests.Session, url: Optional[str] = None, **kwargs) -> int:
        """
        Prepares headers and body and sends the request.  Returns the
        HTTP status code.  ``url`` defaults to the path of the method.
        """
        self.add_request_headers()
        self.get_request_content_length()
        return self.exchange.execute(session, url or self.path, self.name, **kwargs)

    ## response side

    @property
    def status_code(self) -> int:
        return self.exchange.status_code

    def get_response_header(self, name: str) -> Optional[str]:
        return self.exchange.get_response_header(name)

    def get_response_body_as_calendar(self) -> icalendar.Calendar:
        """
        Decodes the response body into a calendar.

        Raises:
            ProtocolError: the server did not answer with text/calendar
            CalendarParseError: the calendar data is malformed
            ReportError: the response body could not be read
        """
        content_type = self.get_response_header(HEADER_CONTENT_TYPE) or ""
        try:
            if not content_type.startswith(CONTENT_TYPE_CALENDAR):
                log.error(
                    "Expected content-type %s. Was: %s"
                    % (CONTENT_TYPE_CALENDAR, content_type)
                )
                raise error.ProtocolError(
                    url=self.path,
                    reason="Expected content-type %s. Was: %s"
                    % (CONTENT_TYPE_CALENDAR, content_type),
                    content_type=content_type,
                )
            return self._decode_body()
        finally:
            ## the response was requested with stream=True
            self.exchange.close()

    def _decode_body(self) -> icalendar.Calendar:
        stream = None
        try:
            stream = self.exchange.get_response_body_as_stream()
            return self.calendar_decoder.decode(stream)
        except READ_ERRORS as e:
            if stream is not None:
                self._log_partial_response(stream)
            raise error.ReportError(
                url=self.path,
                reason="Error retrieving and parsing server response: %s" % e,
            ) from e

    def _log_partial_response(self, stream) -> None:
        ## best effort only, the original error is what gets raised
        try:
            rest = stream.read()
        except READ_ERRORS + (ValueError,):
            log.debug("could not read the rest of the response", exc_info=True)
            return
        log.warning("Server response is %r" % (rest,))
