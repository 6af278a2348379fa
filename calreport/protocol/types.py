"""
Core protocol types for the REPORT method.

These are plain values with no I/O attached.
"""

from enum import Enum
from typing import Union

METHOD_REPORT = "REPORT"

HEADER_CONTENT_TYPE = "Content-Type"
HEADER_DEPTH = "Depth"

CONTENT_TYPE_TEXT_XML = "text/xml"
CONTENT_TYPE_CALENDAR = "text/calendar"

INFINITY_STRING = "infinity"


class Depth(Enum):
    """
    How far into the collection hierarchy the server should apply a
    request.  The value is what goes into the ``Depth`` header.
    """

    ZERO = "0"
    ONE = "1"
    INFINITY = INFINITY_STRING

    @classmethod
    def from_value(cls, value: Union["Depth", int, str]) -> "Depth":
        """
        Coerces 0, 1, "0", "1" and "infinity" into a Depth.  Anything
        else raises a ValueError.
        """
        if isinstance(value, Depth):
            return value
        if isinstance(value, bool):
            raise ValueError("invalid depth: %r" % (value,))
        if isinstance(value, int):
            value = str(value)
        if isinstance(value, str):
            value = value.strip().lower()
        return cls(value)

    @property
    def header_value(self) -> str:
        return self.value
