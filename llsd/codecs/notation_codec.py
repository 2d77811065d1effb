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

r"""
Notation LLSD: a compact text form where every value starts with a sigil character.

>>> encode_notation(42)
'i42'
>>> encode_notation({'key1': 'value1', 'key2': 42})
"{'key1':'value1','key2':i42}"
>>> decode_notation("{'key1':'value1','key2':i42}")
{'key1': 'value1', 'key2': 42}
>>> decode_notation('[ r1.5, "tab\\there", s(2)"π", b64"AAEC", d2024-01-01T00:00:00Z ]')
[1.5, 'tab\there', 'π', b'\x00\x01\x02', datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)]
>>> decode_notation("{'a':i1, 'a':i2}")
{'a': 2}
>>> decode_notation("['unterminated")
Traceback (most recent call last):
...
llsd.exception.UnexpectedEndOfInputError: unterminated string (at offset 14)
"""

import re
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
    InvalidBase64Error,
    InvalidEscapeError,
    InvalidIdentifierFormatError,
    InvalidTimestampFormatError,
    MalformedInputError,
    UnexpectedEndOfInputError,
    UnknownSigilError,
)
from llsd.types import Uri, Value, ValueKind, check_integer, check_key, kind_of

logger = get_logger()

_WHITESPACE = frozenset(' \t\r\n')
_BOM = '\ufeff'

_SIMPLE_ESCAPES = {
    "'": "'",
    '"': '"',
    '\\': '\\',
    'a': '\a',
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
    'v': '\v',
}

_PLAIN_RUN = {
    "'": re.compile(r"[^'\\]+"),
    '"': re.compile(r'[^"\\]+'),
}

_INTEGER_CHARS = re.compile(r'[+\-0-9]*')
_REAL_CHARS = re.compile(r'[+\-.0-9A-Za-z]*')
_UUID_CHARS = re.compile(r'[\-0-9A-Fa-f]*')
_DATE_CHARS = re.compile(r'[^\s,\]}]*')
_DIGITS = re.compile(r'[0-9]*')


class _NotationParser:
    def __init__(self, text: str, max_depth: int) -> None:
        self.text = text
        self.pos = 0
        self.max_depth = max_depth

    def parse(self) -> Value:
        if self.text.startswith(_BOM):
            self.pos = 1
        self._skip_whitespace()
        if self._at_end():
            raise UnexpectedEndOfInputError('empty input', offset=self.pos)
        value = self._parse_value(depth=0)
        self._skip_whitespace()
        if not self._at_end():
            raise MalformedInputError('trailing data after the root value', offset=self.pos)
        return value

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self) -> str:
        """Current character, or an empty string at the end of the input."""
        return self.text[self.pos:self.pos + 1]

    def _skip_whitespace(self) -> None:
        text = self.text
        while self.pos < len(text) and text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _expect(self, char: str, what: str) -> None:
        if self._at_end():
            raise UnexpectedEndOfInputError(f'expected {what}', offset=self.pos)
        if self.text[self.pos] != char:
            raise MalformedInputError(f'expected {what}, found {self.text[self.pos]!r}', offset=self.pos)
        self.pos += 1

    def _take(self, pattern: re.Pattern[str]) -> str:
        match = pattern.match(self.text, self.pos)
        assert match is not None
        self.pos = match.end()
        return match.group()

    def _parse_value(self, depth: int) -> Value:
        self._skip_whitespace()
        start = self.pos
        sigil = self._peek()
        match sigil:
            case '':
                raise UnexpectedEndOfInputError('expected a value', offset=start)
            case '!':
                self.pos += 1
                return None
            case 't' | 'T':
                return self._parse_boolean(True, ('true', 'TRUE'))
            case 'f' | 'F':
                return self._parse_boolean(False, ('false', 'FALSE'))
            case 'i':
                self.pos += 1
                try:
                    return parse_integer(self._take(_INTEGER_CHARS))
                except ValueError as e:
                    raise MalformedInputError(str(e), offset=start) from e
            case 'r':
                self.pos += 1
                try:
                    return parse_real(self._take(_REAL_CHARS))
                except ValueError as e:
                    raise MalformedInputError(str(e), offset=start) from e
            case 'u':
                self.pos += 1
                try:
                    return parse_uuid(self._take(_UUID_CHARS))
                except ValueError as e:
                    raise InvalidIdentifierFormatError(str(e), offset=start) from e
            case 'd':
                self.pos += 1
                if self._peek() in ('"', "'"):
                    date_text = self._parse_quoted()
                else:
                    date_text = self._take(_DATE_CHARS)
                try:
                    return parse_date(date_text)
                except ValueError as e:
                    raise InvalidTimestampFormatError(str(e), offset=start) from e
            case 'l':
                self.pos += 1
                return Uri(self._parse_quoted())
            case 's':
                self.pos += 1
                return self._parse_string_body()
            case 'b':
                self.pos += 1
                return self._parse_binary()
            case '"' | "'":
                return self._parse_quoted()
            case '[':
                return self._parse_array(depth)
            case '{':
                return self._parse_map(depth)
            case _:
                raise UnknownSigilError(f'unknown sigil {sigil!r}', offset=start)

    def _parse_boolean(self, value: bool, words: tuple[str, ...]) -> bool:
        for word in words:
            if self.text.startswith(word, self.pos):
                self.pos += len(word)
                return value
        self.pos += 1
        return value

    def _parse_string_body(self) -> str:
        """What follows an `s` sigil, either a sized string or a quoted one."""
        if self._peek() == '(':
            start = self.pos
            data = self._parse_sized()
            try:
                return data.decode('utf-8')
            except UnicodeDecodeError as e:
                raise MalformedInputError('invalid utf-8 in sized string', offset=start) from e
        return self._parse_quoted()

    def _parse_binary(self) -> bytes:
        start = self.pos - 1
        if self._peek() == '(':
            return self._parse_sized()
        if self.text.startswith('64', self.pos):
            self.pos += 2
            decode = decode_base64
        elif self.text.startswith('16', self.pos):
            self.pos += 2
            decode = decode_base16
        else:
            raise MalformedInputError('expected 64, 16 or a size after the binary sigil', offset=self.pos)
        payload = self._parse_quoted()
        try:
            return decode(payload)
        except ValueError as e:
            raise InvalidBase64Error(str(e), offset=start) from e

    def _parse_sized(self) -> bytes:
        """Parse `(N)` followed by N raw bytes between quotes, no escapes inside."""
        self._expect('(', "'('")
        digits = self._take(_DIGITS)
        if not digits:
            raise MalformedInputError('expected a size', offset=self.pos)
        size = int(digits)
        self._expect(')', "')'")
        quote = self._peek()
        if quote not in ('"', "'"):
            self._expect('"', 'a quote')
        self.pos += 1
        start = self.pos
        raw = bytearray()
        text = self.text
        while len(raw) < size:
            if self.pos >= len(text):
                raise UnexpectedEndOfInputError(f'sized data shorter than {size} bytes', offset=start)
            try:
                raw += text[self.pos].encode('utf-8', 'surrogateescape')
            except UnicodeEncodeError as e:
                raise MalformedInputError('sized data is not valid unicode', offset=start) from e
            self.pos += 1
        if len(raw) != size:
            raise MalformedInputError(f'sized data does not end at byte {size}', offset=start)
        self._expect(quote, 'closing quote')
        return bytes(raw)

    def _parse_quoted(self) -> str:
        start = self.pos
        quote = self._peek()
        if quote not in ('"', "'"):
            if not quote:
                raise UnexpectedEndOfInputError('expected a quoted string', offset=start)
            raise MalformedInputError(f'expected a quoted string, found {quote!r}', offset=start)
        self.pos += 1
        plain_run = _PLAIN_RUN[quote]
        text = self.text
        buffer = bytearray()
        while True:
            match = plain_run.match(text, self.pos)
            if match is not None:
                try:
                    buffer += match.group().encode('utf-8', 'surrogateescape')
                except UnicodeEncodeError as e:
                    raise MalformedInputError('string is not valid unicode', offset=start) from e
                self.pos = match.end()
            if self.pos >= len(text):
                raise UnexpectedEndOfInputError('unterminated string', offset=self.pos)
            char = text[self.pos]
            self.pos += 1
            if char == quote:
                break
            # backslash
            buffer += self._parse_escape()
        try:
            return buffer.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedInputError('invalid utf-8 in string', offset=start) from e

    def _parse_escape(self) -> bytes:
        start = self.pos - 1
        if self._at_end():
            raise UnexpectedEndOfInputError('unterminated string', offset=self.pos)
        char = self.text[self.pos]
        self.pos += 1
        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char].encode('ascii')
        if char == 'x':
            digits = self.text[self.pos:self.pos + 2]
            if len(digits) != 2 or not all(d in '0123456789abcdefABCDEF' for d in digits):
                raise InvalidEscapeError(f'invalid hex escape \\x{digits}', offset=start)
            self.pos += 2
            return bytes([int(digits, 16)])
        raise InvalidEscapeError(f'invalid escape \\{char}', offset=start)

    def _parse_array(self, depth: int) -> list[Value]:
        check_depth(depth + 1, self.max_depth, offset=self.pos)
        self.pos += 1
        items: list[Value] = []
        self._skip_whitespace()
        if self._peek() == ']':
            self.pos += 1
            return items
        while True:
            items.append(self._parse_value(depth + 1))
            self._skip_whitespace()
            separator = self._peek()
            if separator == ',':
                self.pos += 1
            elif separator == ']':
                self.pos += 1
                return items
            elif not separator:
                raise UnexpectedEndOfInputError('unterminated array', offset=self.pos)
            else:
                raise MalformedInputError(f"expected ',' or ']', found {separator!r}", offset=self.pos)

    def _parse_map(self, depth: int) -> dict[str, Value]:
        check_depth(depth + 1, self.max_depth, offset=self.pos)
        self.pos += 1
        result: dict[str, Value] = {}
        self._skip_whitespace()
        if self._peek() == '}':
            self.pos += 1
            return result
        while True:
            self._skip_whitespace()
            key = self._parse_key()
            self._skip_whitespace()
            self._expect(':', "':'")
            result[key] = self._parse_value(depth + 1)
            self._skip_whitespace()
            separator = self._peek()
            if separator == ',':
                self.pos += 1
            elif separator == '}':
                self.pos += 1
                return result
            elif not separator:
                raise UnexpectedEndOfInputError('unterminated map', offset=self.pos)
            else:
                raise MalformedInputError(f"expected ',' or '}}', found {separator!r}", offset=self.pos)

    def _parse_key(self) -> str:
        char = self._peek()
        if char == 's':
            self.pos += 1
            return self._parse_string_body()
        if char in ('"', "'"):
            return self._parse_quoted()
        if not char:
            raise UnexpectedEndOfInputError('unterminated map', offset=self.pos)
        raise MalformedInputError(f'expected a key, found {char!r}', offset=self.pos)


def _escape_table(quote: str) -> dict[int, str]:
    table = {code: f'\\x{code:02x}' for code in range(0x20)}
    table[0x7f] = '\\x7f'
    table[ord('\\')] = '\\\\'
    table[ord(quote)] = '\\' + quote
    return table


_SINGLE_QUOTE_ESCAPES = _escape_table("'")
_DOUBLE_QUOTE_ESCAPES = _escape_table('"')


def _quote(text: str) -> str:
    return "'" + text.translate(_SINGLE_QUOTE_ESCAPES) + "'"


def _double_quote(text: str) -> str:
    return '"' + text.translate(_DOUBLE_QUOTE_ESCAPES) + '"'


class _NotationWriter:
    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        self.parts: list[str] = []

    def write(self, value: Any, depth: int) -> None:
        parts = self.parts
        kind = kind_of(value)
        match kind:
            case ValueKind.UNDEFINED:
                parts.append('!')
            case ValueKind.BOOLEAN:
                parts.append('t' if value else 'f')
            case ValueKind.INTEGER:
                parts.append(f'i{check_integer(value)}')
            case ValueKind.REAL:
                parts.append('r' + format_real(value))
            case ValueKind.TEXT:
                parts.append(_quote(value))
            case ValueKind.IDENTIFIER:
                assert isinstance(value, UUID)
                parts.append('u' + format_uuid(value))
            case ValueKind.TIMESTAMP:
                parts.append(f'd"{format_date(value)}"')
            case ValueKind.RESOURCE:
                parts.append('l' + _double_quote(value))
            case ValueKind.OPAQUE:
                parts.append(f'b64"{encode_base64(bytes(value))}"')
            case ValueKind.SEQUENCE:
                check_depth(depth + 1, self.max_depth)
                parts.append('[')
                for i, item in enumerate(value):
                    if i:
                        parts.append(',')
                    self.write(item, depth + 1)
                parts.append(']')
            case ValueKind.DICTIONARY:
                check_depth(depth + 1, self.max_depth)
                parts.append('{')
                for i, (key, item) in enumerate(value.items()):
                    if i:
                        parts.append(',')
                    parts.append(_quote(check_key(key)))
                    parts.append(':')
                    self.write(item, depth + 1)
                parts.append('}')
            case _:
                assert_never(kind)


def decode_notation(data: Union[str, bytes], *, settings: Optional[LLSDSettings] = None) -> Value:
    """Decode a notation document, bytes are taken as UTF-8."""
    settings = settings or get_global_settings()
    log = logger.new(format='notation', size=len(data))
    if isinstance(data, (bytes, bytearray, memoryview)):
        # undecodable bytes survive as surrogates so that sized binary literals can carry raw bytes
        text = bytes(data).decode('utf-8', 'surrogateescape')
    else:
        text = data
    value = _NotationParser(text, settings.MAX_NESTING_DEPTH).parse()
    log.debug('document decoded')
    return value


def encode_notation(value: Any, *, settings: Optional[LLSDSettings] = None) -> str:
    settings = settings or get_global_settings()
    writer = _NotationWriter(settings.MAX_NESTING_DEPTH)
    writer.write(value, depth=0)
    text = ''.join(writer.parts)
    logger.debug('document encoded', format='notation', size=len(text))
    return text
