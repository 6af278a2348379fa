#!/usr/bin/env python
"""
A generic HTTP request carrying a body, executed through a
``requests.Session``.  The REPORT method composes one of these and
adds its own header logic, body generation and response decoding.
"""
from typing import Any
from typing import BinaryIO
from typing import Dict
from typing import Optional
from typing import Union

import requests
from requests.structures import CaseInsensitiveDict

from calreport import __version__
from calreport.lib.error import log
from calreport.lib.python_utilities import to_normal_str

USER_AGENT = "python/calreport/" + __version__


class RequestBodyExchange:
    """
    One HTTP request/response round trip with a request body.

    Request headers and body are set before :meth:`execute`, the
    response headers, status and body stream are available after it.
    An instance is good for a single exchange and is not thread safe.
    """

    def __init__(self, headers: Optional[Dict[str, str]] = None) -> None:
        self.request_headers: CaseInsensitiveDict = CaseInsensitiveDict(headers or {})
        self.request_body: Optional[bytes] = None
        self.response: Optional[requests.Response] = None

    ## request side

    def set_request_header(self, name: str, value: str) -> None:
        self.request_headers[name] = value

    def add_request_header(self, name: str, value: str) -> None:
        """Sets the header unless it is already present"""
        if name not in self.request_headers:
            self.request_headers[name] = value

    def get_request_header(self, name: str) -> Optional[str]:
        return self.request_headers.get(name)

    def add_request_headers(self) -> None:
        """
        Hook for headers every request should carry.  Called by the
        method before its own headers are added.
        """
        self.add_request_header("User-Agent", USER_AGENT)

    def set_request_body(self, body: Union[str, bytes, None]) -> None:
        if body is None:
            body = b""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.request_body = body

    def is_request_content_already_set(self) -> bool:
        return self.request_body is not None

    def get_request_content_length(self) -> int:
        """Length in bytes of the request body, -1 if no body is set"""
        if self.request_body is None:
            return -1
        return len(self.request_body)

    def execute(self, session: requests.Session, url: str, method: str, **kwargs: Any) -> int:
        """
        Sends the request and returns the status code.  The response
        body is not read, it's available through
        :meth:`get_response_body_as_stream`.  Transport errors from
        requests propagate to the caller.
        """
        headers = dict(self.request_headers)
        if self.request_body is not None:
            headers["Content-Length"] = str(len(self.request_body))
        log.debug(
            "sending request - method={0}, url={1}, headers={2}\nbody:\n{3}".format(
                method, url, headers, to_normal_str(self.request_body)
            )
        )
        self.response = session.request(
            method,
            url,
            data=self.request_body,
            headers=headers,
            stream=True,
            **kwargs,
        )
        log.debug(
            "server responded with %i %s"
            % (self.response.status_code, self.response.reason)
        )
        log.debug("response headers: " + str(self.response.headers))
        return self.response.status_code

    ## response side

    def _require_response(self) -> requests.Response:
        if self.response is None:
            raise RuntimeError("the request has not been executed yet")
        return self.response

    @property
    def status_code(self) -> int:
        return self._require_response().status_code

    @property
    def reason(self) -> str:
        ## some servers have been observed to send no reason at all
        return getattr(self._require_response(), "reason", None) or ""

    def get_response_header(self, name: str) -> Optional[str]:
        return self._require_response().headers.get(name)

    def get_response_body_as_stream(self) -> BinaryIO:
        """
        The raw response stream.  Content encodings (gzip etc) are
        decoded while reading.
        """
        raw = self._require_response().raw
        if hasattr(raw, "decode_content"):
            raw.decode_content = True
        return raw

    def close(self) -> None:
        """Releases the connection of the response, if there is one"""
        if self.response is not None:
            self.response.close()
