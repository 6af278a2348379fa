#!/usr/bin/env python
import logging

__version__ = "0.1.0"

from .davclient import DAVClient
from .davclient import get_davclient
from .protocol.queries import CalendarMultiget
from .protocol.queries import CalendarQuery
from .protocol.types import Depth
from .report import CalendarReportMethod

# Silence notification of no default logging handler
log = logging.getLogger("calreport")
log.addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "CalendarMultiget",
    "CalendarQuery",
    "CalendarReportMethod",
    "DAVClient",
    "Depth",
    "get_davclient",
]
