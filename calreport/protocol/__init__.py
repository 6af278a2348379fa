"""
Protocol-level building blocks of the REPORT method.

- types: Depth and the header and content type constants
- queries: structured report queries (calendar-query, calendar-multiget)
- xml_builders: query-to-document compiler and document serializer
"""

from .queries import CalendarMultiget, CalendarQuery, ReportQuery
from .types import Depth, METHOD_REPORT
from .xml_builders import compile_document, serialize_document

__all__ = [
    "Depth",
    "METHOD_REPORT",
    "ReportQuery",
    "CalendarQuery",
    "CalendarMultiget",
    "compile_document",
    "serialize_document",
]
