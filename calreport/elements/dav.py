#!/usr/bin/env python
"""DAV: elements used in report bodies, ref RFC4918 section 14"""
from .base import Element
from calreport.lib.namespace import ns


class Prop(Element):
    tag = ns("D", "prop")


class Allprop(Element):
    tag = ns("D", "allprop")


class GetEtag(Element):
    tag = ns("D", "getetag")


class Href(Element):
    tag = ns("D", "href")

    def __init__(self, href: str) -> None:
        super().__init__(value=href)
