#!/usr/bin/env python
import logging
import os
from typing import Optional

from calreport import __version__

## Environmental variables prepended with "PYTHON_CALREPORT" are used for debug purposes,
## environmental variables prepended with "CALREPORT_" are for connection parameters
## one of DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_CALREPORT_DEBUGMODE")
if not debugmode:
    if "dev" in __version__:
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("calreport")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def errmsg(r) -> str:
    """Utility for formatting an error response to an error string"""
    return "%s %s\n\n%s" % (r.status_code, r.reason, r.text)


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, url: Optional[str] = None, reason: Optional[str] = None) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class AuthorizationError(DAVError):
    """
    The client encountered an HTTP 401 or 403 error and is passing it
    on to the user. The url property will contain the url in question,
    the reason property will contain the excuse the server sent.
    """

    pass


class ReportError(DAVError):
    """
    Reading the report response failed at the transport level.  The
    underlying error is available as ``__cause__``.
    """

    pass


class ProtocolError(DAVError):
    """
    The server completed the exchange but did not answer with calendar
    data.  ``content_type`` holds what the server claimed to send.
    """

    content_type: Optional[str] = None

    def __init__(
        self,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> None:
        super(ProtocolError, self).__init__(url=url, reason=reason)
        self.content_type = content_type


class CalendarParseError(DAVError, ValueError):
    """The response claimed to be text/calendar, but could not be parsed"""

    pass


class DocumentValidationError(DAVError):
    """A report query could not be turned into a valid XML document"""

    pass


class ReportRequestDefect(RuntimeError):
    """
    Raised when the request body of a report cannot be generated.
    This is a programming or configuration error on the caller side,
    not something the server did, and it should not be retried.
    """

    pass
