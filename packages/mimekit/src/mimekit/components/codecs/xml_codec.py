"""XML codec: one element per field.

Mapping rules (encode side; decode reverses them):

- mappings become an element with one child per key; keys that are not
  valid XML names are written as ``<entry key="...">``; an empty mapping is
  marked ``kind="object"``
- sequences become ``kind="list"`` elements with one ``<item>`` per value
- ``None`` becomes an empty element marked ``nil="true"``
- booleans are ``true``/``false``; other scalars use their JSON text form

Decoded scalars are strings; pydantic coerces them to the target field types.
Foreign XML without the markers decodes naturally: leaf elements become
strings and repeated sibling elements become lists.
"""

import re
from typing import Any, ClassVar
from xml.etree import ElementTree as ET

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .base import BaseCodec, adapter_for
from ...errors import ErrorEnvelope

__all__ = ["XMLCodec"]

_XML_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")
# code points outside the XML 1.0 Char production
_NOT_XML_CHAR_RE = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

#: deepest element nesting decoded before the body is rejected
MAX_DEPTH = 200

ENVELOPE_TAG = "error-envelope"
_ENVELOPE_FIELDS = {"type": "type_name", "error-string": "message", "error": "payload"}


def _is_xml_name(key: str) -> bool:
    return bool(_XML_NAME_RE.fullmatch(key)) and not key.lower().startswith("xml")


def _xml_text(text: str) -> str:
    """Replace characters XML cannot carry with U+FFFD."""
    return _NOT_XML_CHAR_RE.sub("\ufffd", text)


def _child(parent: ET.Element, key: str) -> ET.Element:
    if _is_xml_name(key):
        return ET.SubElement(parent, key)
    return ET.SubElement(parent, "entry", key=_xml_text(key))


def _fill(elem: ET.Element, value: Any) -> ET.Element:
    if value is None:
        elem.set("nil", "true")
    elif isinstance(value, dict):
        if not value:
            elem.set("kind", "object")
        for key, item in value.items():
            _fill(_child(elem, str(key)), item)
    elif isinstance(value, (list, tuple)):
        elem.set("kind", "list")
        for item in value:
            _fill(ET.SubElement(elem, "item"), item)
    elif isinstance(value, bool):
        elem.text = "true" if value else "false"
    else:
        elem.text = _xml_text(str(value))
    return elem


def _read(elem: ET.Element, depth: int = 0) -> Any:
    if depth > MAX_DEPTH:
        raise ValueError(f"XML nested deeper than {MAX_DEPTH} elements")
    if elem.get("nil") == "true":
        return None
    children = list(elem)
    if elem.get("kind") == "list":
        return [_read(child, depth + 1) for child in children]
    if not children and elem.get("kind") != "object":
        return elem.text or ""

    out: dict[str, Any] = {}
    repeated: set[str] = set()
    for child in children:
        key = child.get("key") if child.tag == "entry" and "key" in child.attrib else child.tag
        value = _read(child, depth + 1)
        if key not in out:
            out[key] = value
        elif key in repeated:
            out[key].append(value)
        else:
            out[key] = [out[key], value]
            repeated.add(key)
    return out


def _root_tag(value: Any) -> str:
    if isinstance(value, BaseModel) or hasattr(type(value), "__dataclass_fields__"):
        name = type(value).__name__
        if _is_xml_name(name):
            return name
    return "value"


class XMLCodec(BaseCodec):
    format_ids = ("application/xml", "text/xml")
    sniff_hints = frozenset("<")

    encode_exceptions: ClassVar[tuple[type[BaseException], ...]] = (
        PydanticSerializationError, RecursionError, TypeError, ValueError,
    )
    decode_exceptions: ClassVar[tuple[type[BaseException], ...]] = (
        ET.ParseError, RecursionError, TypeError, ValueError,
    )

    def _dumps(self, value: Any) -> bytes:
        root = _fill(ET.Element(_root_tag(value)), to_jsonable_python(value))
        return ET.tostring(root, encoding="utf-8")

    def _loads(self, data: bytes, into: Any) -> Any:
        return adapter_for(into).validate_python(_read(ET.fromstring(data)))

    def _dumps_envelope(self, envelope: ErrorEnvelope) -> bytes:
        root = ET.Element(ENVELOPE_TAG)
        ET.SubElement(root, "type").text = _xml_text(envelope.type_name)
        ET.SubElement(root, "error-string").text = _xml_text(envelope.message)
        if envelope.payload is not None:
            _fill(ET.SubElement(root, "error"), envelope.payload)
        return ET.tostring(root, encoding="utf-8")

    def _loads_envelope(self, data: bytes) -> ErrorEnvelope:
        root = ET.fromstring(data)
        fields: dict[str, Any] = {}
        for child in root:
            name = _ENVELOPE_FIELDS.get(child.tag)
            if name is None:
                continue
            fields[name] = _read(child) if name == "payload" else (child.text or "")
        return ErrorEnvelope.model_validate(fields)
