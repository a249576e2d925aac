import xml.etree.ElementTree as ET
import logging
import io
import re
from typing import Any, Dict, List, Union

from errors import DecodeFailure

logger = logging.getLogger(__name__)

ATTRIBUTES_KEY = "$"
TEXT_KEY = "_"

_CONTROL_CHARS = r'[\x00-\x08\x0B\x0C\x0E-\x1F]'
_BARE_AMPERSAND = r'&(?!amp;|lt;|gt;|quot;|apos;|#\d+;|#x[0-9A-Fa-f]+;)'


def _local_name(tag) -> str:
    return tag.split("}")[-1] if isinstance(tag, str) else tag


def _recover(xml: Union[bytes, str]) -> Union[bytes, str]:
    if isinstance(xml, str):
        s = xml.lstrip("\ufeff")
        s = re.sub(_CONTROL_CHARS, '', s)
        return re.sub(_BARE_AMPERSAND, '&amp;', s)
    b = xml[3:] if xml.startswith(b'\xef\xbb\xbf') else xml
    b = re.sub(_CONTROL_CHARS.encode(), b'', b)
    return re.sub(_BARE_AMPERSAND.encode(), b'&amp;', b)


def _parse(xml: Union[bytes, str]):
    # text is already decoded, expat then ignores the declared encoding
    if isinstance(xml, str):
        return ET.fromstring(xml)
    return ET.parse(io.BytesIO(xml)).getroot()


def _shape(element, children: List[Any]) -> Any:
    text = (element.text or "").strip()
    if not element.attrib and not children:
        return text

    node: Dict[str, Any] = {}
    if element.attrib:
        node[ATTRIBUTES_KEY] = {_local_name(k): v for k, v in element.attrib.items()}
    if text:
        node[TEXT_KEY] = text
    repeated = set()
    for child, value in children:
        name = _local_name(child.tag)
        if name not in node:
            node[name] = value
        elif name in repeated:
            node[name].append(value)
        else:
            node[name] = [node[name], value]
            repeated.add(name)
    return node


def _node(root) -> Any:
    """Turns an element and everything under it into a tree node.

    Leaf elements collapse to their text. Attributes go under ``$`` and the
    text of an attributed element under ``_``. A child tag seen more than
    once becomes a list in document order, a child seen once stays a
    single node. Built bottom-up with an explicit stack, so nesting depth is
    not bounded by the interpreter's recursion limit.
    """
    built: Dict[int, Any] = {}
    stack = [(root, False)]
    while stack:
        element, expanded = stack.pop()
        if not expanded:
            stack.append((element, True))
            stack.extend((child, False) for child in element)
            continue
        children = [(child, built.pop(id(child))) for child in element]
        built[id(element)] = _shape(element, children)
    return built[id(root)]


def decode(xml: Union[bytes, str]) -> Dict[str, Any]:
    if not xml or not xml.strip():
        raise DecodeFailure("empty XML document")
    try:
        root_element = _parse(xml)
    except ET.ParseError:
        logger.debug("XML did not parse as-is; retrying after cleanup")
        try:
            root_element = _parse(_recover(xml))
        except ET.ParseError as e:
            raise DecodeFailure(str(e)) from e

    return {_local_name(root_element.tag): _node(root_element)}
