from typing import Iterable
from typing import Optional
from typing import Tuple

from lxml import etree

from calreport.lib.error import log


def xmlstring(root) -> str:
    """Pretty-prints an element, or some XML text, for debugging output"""
    if root is None:
        return ""
    if hasattr(root, "xmlelement"):
        root = root.xmlelement()
    if isinstance(root, (str, bytes)):
        if not root.strip():
            return root if isinstance(root, str) else root.decode("utf-8")
        try:
            root = etree.fromstring(
                root.encode("utf-8") if isinstance(root, str) else root,
                parser=etree.XMLParser(remove_blank_text=True),
            )
        except etree.XMLSyntaxError:
            return root if isinstance(root, str) else root.decode("utf-8")
    return etree.tostring(root, pretty_print=True).decode("utf-8")


def format_request(
    method: str,
    path: str,
    headers: Iterable[Tuple[str, str]],
    content_length: int,
    depth: str,
    body: Optional[str],
) -> str:
    """
    Formats an outgoing request the way it would appear on the wire,
    for a diagnostic sink.
    """
    lines = [">>>>>>>  to  server  " + "-" * 51]
    lines.append("%s %s HTTP/1.1" % (method, path))
    for name, value in headers:
        lines.append("%s: %s" % (name, value))
    lines.append("Content-Length: %i" % content_length)
    lines.append("Depth: %s" % depth)
    lines.append("")
    lines.append(xmlstring(body).rstrip("\n"))
    lines.append("-" * 72)
    return "\n".join(lines)


def log_sink(text: str) -> None:
    log.debug(text)
