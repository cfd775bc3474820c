"""Render a nested element model to a pretty-printed XML document.

The model is a single-key mapping ``{root_name: body}``. Inside a body:

- a mapping value becomes a child element with its own children;
- a list or tuple value becomes repeated sibling elements, in order;
- any other value becomes the element's text;
- ``None``, ``""`` and elements left without children are not emitted.

Names written ``"prefix:local"`` are resolved through the namespace map;
unprefixed names live in the default (``None``) namespace when one is given.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lxml import etree

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _qualify(name: str, namespaces: Mapping[str | None, str]) -> str:
    prefix, sep, local = name.partition(":")
    if sep:
        return f"{{{namespaces[prefix]}}}{local}"
    default = namespaces.get(None)
    return f"{{{default}}}{name}" if default else name


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple)) and not value)


def _append(parent: etree._Element, name: str, value: Any, namespaces: Mapping[str | None, str]) -> None:
    if _is_empty(value):
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _append(parent, name, item, namespaces)
        return

    element = etree.SubElement(parent, _qualify(name, namespaces))
    if isinstance(value, Mapping):
        _append_children(element, value, namespaces)
        if len(element) == 0:
            parent.remove(element)
    else:
        element.text = str(value)


def _append_children(
    element: etree._Element, body: Mapping[str, Any], namespaces: Mapping[str | None, str]
) -> None:
    for name, value in body.items():
        _append(element, name, value, namespaces)


def render_document(model: Mapping[str, Any], namespaces: Mapping[str | None, str]) -> str:
    """Serialise ``model`` to UTF-8 XML text with a leading XML declaration."""
    if len(model) != 1:
        raise ValueError("XML document model must have exactly one root element")
    ((root_name, body),) = model.items()

    nsmap = dict(namespaces)
    root = etree.Element(_qualify(root_name, nsmap), nsmap=nsmap)
    if isinstance(body, Mapping):
        _append_children(root, body, nsmap)
    if len(root) == 0:
        # Empty string text serialises as an open/close pair, never <root/>
        root.text = ""

    return XML_DECLARATION + etree.tostring(root, pretty_print=True, encoding="unicode")
