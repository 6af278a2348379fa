"""
Turns report queries into XML documents and documents into text.

Both functions are pure: the same query always gives the same text.
"""
from typing import Optional

from lxml import etree
from lxml.etree import _Element

from calreport.lib.error import DocumentValidationError
from calreport.protocol.queries import ReportQuery


def compile_document(query: Optional[ReportQuery]) -> _Element:
    """
    Build the request document for a report query.

    Raises:
        DocumentValidationError: no query was given, or the query
            cannot be expressed as a valid document
    """
    if query is None:
        raise DocumentValidationError(reason="no report query given")
    return query.create_document()


def serialize_document(document: Optional[_Element]) -> str:
    """
    Serialize a request document to pretty-printed XML text, including
    the XML declaration.  No document gives an empty string.
    """
    if document is None:
        return ""
    return etree.tostring(
        document, encoding="utf-8", xml_declaration=True, pretty_print=True
    ).decode("utf-8")
