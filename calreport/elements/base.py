#!/usr/bin/env python
"""
A small element tree for building request documents.

Elements are combined with ``+`` (or :meth:`Element.append`) and turned
into an lxml tree by :meth:`Element.xmlelement`.  Child nodes are
created inside their parent, so namespace declarations only appear on
the root.
"""
import sys
from typing import ClassVar
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from calreport.lib.namespace import nsmap
from calreport.lib.python_utilities import to_unicode

if sys.version_info < (3, 9):
    from typing import Iterable
else:
    from collections.abc import Iterable


class Element:
    tag: ClassVar[Optional[str]] = None
    ## CalDAV filters must carry a name attribute
    name_required: ClassVar[bool] = False

    def __init__(
        self, name: Optional[str] = None, value: Union[str, bytes, None] = None
    ) -> None:
        self.attributes: Dict[str, str] = {}
        self.children: List["Element"] = []
        self.value: Optional[str] = to_unicode(value)
        if name is not None:
            self.attributes["name"] = name

    def __add__(self, other: Union["Element", Iterable["Element"]]) -> "Element":
        return self.append(other)

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.attributes)

    def __str__(self) -> str:
        return etree.tostring(
            self.xmlelement(), encoding="utf-8", xml_declaration=True, pretty_print=True
        ).decode("utf-8")

    def append(self, other: Union["Element", Iterable["Element"]]) -> "Element":
        if isinstance(other, Element):
            self.children.append(other)
        else:
            self.children.extend(other)
        return self

    def xmlelement(self, parent: Optional[_Element] = None) -> _Element:
        """
        Builds the lxml node of this element and its children, as a new
        root or below ``parent``.  Raises ValueError on incomplete
        elements.
        """
        if self.tag is None:
            raise ValueError("%s has no tag" % self.__class__.__name__)
        if self.name_required and not self.attributes.get("name"):
            raise ValueError("%s needs a name attribute" % self.tag)

        if parent is None:
            node = etree.Element(self.tag, nsmap=nsmap)
        else:
            node = etree.SubElement(parent, self.tag)
        if self.value is not None:
            node.text = self.value
        for key, value in self.attributes.items():
            node.set(key, value)
        for child in self.children:
            child.xmlelement(node)
        return node
