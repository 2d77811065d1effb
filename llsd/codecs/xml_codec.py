# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
XML LLSD: one element per value inside an `<llsd>` root.

>>> encode_xml({'a': 1})
'<?xml version="1.0" encoding="UTF-8"?><llsd><map><key>a</key><integer>1</integer></map></llsd>'
>>> decode_xml('<llsd><array><string/><integer/><boolean>TRUE</boolean></array></llsd>')
['', 0, True]
>>> decode_xml('<llsd/>') is None
True
"""

import re
import xml.etree.ElementTree as ET
from typing import Any, Optional, Union
from uuid import UUID

from structlog import get_logger
from typing_extensions import assert_never

from llsd.codecs.common import (
    check_depth,
    decode_base16,
    decode_base64,
    encode_base64,
    format_date,
    format_real,
    format_uuid,
    parse_date,
    parse_integer,
    parse_real,
    parse_uuid,
)
from llsd.conf.get_settings import get_global_settings
from llsd.conf.settings import LLSDSettings
from llsd.exception import (
    EncodeError,
    InvalidBase64Error,
    InvalidIdentifierFormatError,
    InvalidTimestampFormatError,
    MalformedInputError,
    UnknownTagError,
)
from llsd.types import Uri, Value, ValueKind, check_integer, check_key, kind_of, zero_value

logger = get_logger()

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
ROOT_TAG = 'llsd'

# XML 1.0 has no way to carry these, not even as character references
_UNREPRESENTABLE = re.compile('[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]')

# parsers fold a raw CR into LF, a character reference survives
_CARRIAGE_RETURN_REF = '&#13;'

_TRUE_TEXTS = frozenset({'1', 'true'})
_FALSE_TEXTS = frozenset({'', '0', 'false'})

_LEAF_KINDS = {
    'undef': ValueKind.UNDEFINED,
    'boolean': ValueKind.BOOLEAN,
    'integer': ValueKind.INTEGER,
    'real': ValueKind.REAL,
    'string': ValueKind.TEXT,
    'uuid': ValueKind.IDENTIFIER,
    'date': ValueKind.TIMESTAMP,
    'uri': ValueKind.RESOURCE,
    'binary': ValueKind.OPAQUE,
}


def _local_name(tag: str) -> str:
    return tag.rpartition('}')[2]


def _position_to_offset(data: Union[str, bytes], line: int, column: int) -> int:
    lines = data.splitlines(keepends=True)
    return sum(len(previous) for previous in lines[:line - 1]) + column


class _XMLDecoder:
    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth

    def decode(self, data: Union[str, bytes]) -> Value:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            line, column = e.position
            raise MalformedInputError(f'invalid xml: {e}', offset=_position_to_offset(data, line, column)) from e
        if _local_name(root.tag) != ROOT_TAG:
            raise MalformedInputError(f'root element must be <{ROOT_TAG}>, found <{_local_name(root.tag)}>')
        if len(root) == 0:
            return None
        if len(root) > 1:
            raise MalformedInputError(f'<{ROOT_TAG}> must have at most one child, found {len(root)}')
        return self._decode_element(root[0], depth=0)

    def _decode_element(self, element: ET.Element, depth: int) -> Value:
        tag = _local_name(element.tag)
        if tag == 'array':
            check_depth(depth + 1, self.max_depth)
            return [self._decode_element(child, depth + 1) for child in element]
        if tag == 'map':
            check_depth(depth + 1, self.max_depth)
            return self._decode_map(element, depth + 1)
        kind = _LEAF_KINDS.get(tag)
        if kind is None:
            raise UnknownTagError(f'unknown element <{tag}>')
        if len(element):
            raise MalformedInputError(f'<{tag}> cannot contain elements')
        text = element.text or ''
        if not text.strip() and kind not in (ValueKind.TEXT, ValueKind.RESOURCE):
            return zero_value(kind)
        return self._decode_leaf(kind, element, text)

    def _decode_map(self, element: ET.Element, depth: int) -> dict[str, Value]:
        children = list(element)
        if len(children) % 2:
            raise MalformedInputError('<map> must have an even number of children')
        result: dict[str, Value] = {}
        for key_element, value_element in zip(children[::2], children[1::2]):
            if _local_name(key_element.tag) != 'key':
                raise MalformedInputError(f'expected <key> in <map>, found <{_local_name(key_element.tag)}>')
            result[key_element.text or ''] = self._decode_element(value_element, depth)
        return result

    def _decode_leaf(self, kind: ValueKind, element: ET.Element, text: str) -> Value:
        match kind:
            case ValueKind.UNDEFINED:
                return None
            case ValueKind.BOOLEAN:
                lowered = text.strip().lower()
                if lowered in _TRUE_TEXTS:
                    return True
                if lowered in _FALSE_TEXTS:
                    return False
                raise MalformedInputError(f'invalid boolean: {text!r}')
            case ValueKind.INTEGER:
                try:
                    return parse_integer(text.strip())
                except ValueError as e:
                    raise MalformedInputError(str(e)) from e
            case ValueKind.REAL:
                try:
                    return parse_real(text.strip())
                except ValueError as e:
                    raise MalformedInputError(str(e)) from e
            case ValueKind.TEXT:
                return text
            case ValueKind.IDENTIFIER:
                try:
                    return parse_uuid(text.strip())
                except ValueError as e:
                    raise InvalidIdentifierFormatError(str(e)) from e
            case ValueKind.TIMESTAMP:
                try:
                    return parse_date(text.strip())
                except ValueError as e:
                    raise InvalidTimestampFormatError(str(e)) from e
            case ValueKind.RESOURCE:
                return Uri(text)
            case ValueKind.OPAQUE:
                encoding = element.get('encoding', 'base64')
                if encoding not in ('base64', 'base16'):
                    raise MalformedInputError(f'unsupported binary encoding: {encoding!r}')
                try:
                    return decode_base16(text) if encoding == 'base16' else decode_base64(text)
                except ValueError as e:
                    raise InvalidBase64Error(str(e)) from e
            case ValueKind.SEQUENCE | ValueKind.DICTIONARY:
                raise AssertionError('containers are not leaves')
            case _:
                assert_never(kind)


def _check_text(text: str) -> str:
    if _UNREPRESENTABLE.search(text):
        raise EncodeError('text contains characters that XML cannot represent')
    return text


class _XMLEncoder:
    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth

    def build(self, value: Any) -> ET.Element:
        root = ET.Element(ROOT_TAG)
        self._append(root, value, depth=0)
        return root

    def _leaf(self, parent: ET.Element, tag: str, text: Optional[str]) -> None:
        element = ET.SubElement(parent, tag)
        element.text = text

    def _append(self, parent: ET.Element, value: Any, depth: int) -> None:
        kind = kind_of(value)
        match kind:
            case ValueKind.UNDEFINED:
                ET.SubElement(parent, 'undef')
            case ValueKind.BOOLEAN:
                self._leaf(parent, 'boolean', 'true' if value else 'false')
            case ValueKind.INTEGER:
                self._leaf(parent, 'integer', str(check_integer(value)))
            case ValueKind.REAL:
                self._leaf(parent, 'real', format_real(value))
            case ValueKind.TEXT:
                self._leaf(parent, 'string', _check_text(value) or None)
            case ValueKind.IDENTIFIER:
                assert isinstance(value, UUID)
                self._leaf(parent, 'uuid', format_uuid(value))
            case ValueKind.TIMESTAMP:
                self._leaf(parent, 'date', format_date(value))
            case ValueKind.RESOURCE:
                self._leaf(parent, 'uri', _check_text(str(value)) or None)
            case ValueKind.OPAQUE:
                self._leaf(parent, 'binary', encode_base64(bytes(value)) or None)
            case ValueKind.SEQUENCE:
                check_depth(depth + 1, self.max_depth)
                array = ET.SubElement(parent, 'array')
                for item in value:
                    self._append(array, item, depth + 1)
            case ValueKind.DICTIONARY:
                check_depth(depth + 1, self.max_depth)
                mapping = ET.SubElement(parent, 'map')
                for key, item in value.items():
                    self._leaf(mapping, 'key', _check_text(check_key(key)))
                    self._append(mapping, item, depth + 1)
            case _:
                assert_never(kind)


def decode_xml(data: Union[str, bytes], *, settings: Optional[LLSDSettings] = None) -> Value:
    """Decode an XML document, empty leaf elements decode to the zero value of their type."""
    settings = settings or get_global_settings()
    log = logger.new(format='xml', size=len(data))
    value = _XMLDecoder(settings.MAX_NESTING_DEPTH).decode(data)
    log.debug('document decoded')
    return value


def encode_xml(value: Any, *, indent: Optional[int] = None, settings: Optional[LLSDSettings] = None) -> str:
    """Encode a value as an XML document, pretty-printed with `indent` spaces per level when given."""
    settings = settings or get_global_settings()
    if indent is None:
        indent = settings.XML_INDENT
    root = _XMLEncoder(settings.MAX_NESTING_DEPTH).build(value)
    if indent is None:
        body = ET.tostring(root, encoding='unicode')
    else:
        ET.indent(root, space=' ' * indent)
        body = '\n' + ET.tostring(root, encoding='unicode') + '\n'
    # markup never contains CR, so every one left is character data
    text = XML_DECLARATION + body.replace('\r', _CARRIAGE_RETURN_REF)
    logger.debug('document encoded', format='xml', size=len(text))
    return text
