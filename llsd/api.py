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
The public entry points: parse any supported document and serialize a value to a chosen format.

>>> parse(b'<?xml version="1.0"?><llsd><integer>42</integer></llsd>')
42
>>> parse('{"a":1}')
{'a': 1}
>>> serialize({'a': 1}, LLSDFormat.NOTATION)
"{'a':i1}"
>>> serialize(True, 'binary')
b'1'
>>> try_parse('[i1,', LLSDFormat.NOTATION)
Err(UnexpectedEndOfInputError('expected a value (at offset 4)'))
"""

from typing import Any, Optional, Union

from structlog import get_logger
from typing_extensions import assert_never

from llsd.codecs.binary_codec import decode_binary, encode_binary
from llsd.codecs.json_codec import decode_json, encode_json
from llsd.codecs.notation_codec import decode_notation, encode_notation
from llsd.codecs.xml_codec import decode_xml, encode_xml
from llsd.conf.get_settings import get_global_settings
from llsd.conf.settings import LLSDSettings
from llsd.detector import detect_format
from llsd.exception import CodecError, DecodeError
from llsd.format import LLSDFormat
from llsd.serialization.types import Buffer
from llsd.types import Value
from llsd.utils.result import as_result

logger = get_logger()

Data = Union[str, Buffer]


def _as_format(format: Union[LLSDFormat, str]) -> LLSDFormat:
    if isinstance(format, LLSDFormat):
        return format
    return LLSDFormat.from_name(format)


def _decode(data: Data, format: LLSDFormat, settings: LLSDSettings) -> Value:
    match format:
        case LLSDFormat.XML:
            return decode_xml(bytes(data) if isinstance(data, (bytearray, memoryview)) else data, settings=settings)
        case LLSDFormat.BINARY:
            return decode_binary(data.encode('utf-8') if isinstance(data, str) else data, settings=settings)
        case LLSDFormat.NOTATION:
            return decode_notation(data, settings=settings)
        case LLSDFormat.JSON:
            return decode_json(data, settings=settings)
        case _:
            assert_never(format)


def parse(data: Data, format: Union[LLSDFormat, str, None] = None, *,
          settings: Optional[LLSDSettings] = None) -> Value:
    """Decode a document, detecting its format when none is given.

    When the format is detected as notation and the notation parse fails, the document is parsed again as JSON, the
    two look alike when they start with `{` or `[`. If both fail the JSON error is raised, chained to the notation
    one. A document too deeply nested is never retried.
    """
    settings = settings or get_global_settings()
    if format is not None:
        return _decode(data, _as_format(format), settings)

    detected = detect_format(data, settings=settings)
    if detected is not LLSDFormat.NOTATION:
        return _decode(data, detected, settings)

    try:
        return decode_notation(data, settings=settings)
    except DecodeError as notation_error:
        log = logger.new(error=str(notation_error))
        log.debug('not notation, trying json')
        try:
            return decode_json(data, settings=settings)
        except DecodeError as json_error:
            raise json_error from notation_error


@as_result(CodecError)
def try_parse(data: Data, format: Union[LLSDFormat, str, None] = None, *,
              settings: Optional[LLSDSettings] = None) -> Value:
    """Same as `parse` but codec errors are returned as `Err` instead of raised."""
    return parse(data, format, settings=settings)


def serialize(
    value: Any,
    format: Union[LLSDFormat, str],
    *,
    emit_header: Optional[bool] = None,
    indent: Optional[int] = None,
    settings: Optional[LLSDSettings] = None,
) -> Union[bytes, str]:
    """Encode a value, returning bytes for the binary format and str for the text formats.

    `emit_header` only applies to the binary format and `indent` only to XML and JSON, passing either to a format
    that doesn't support it is a ValueError.
    """
    settings = settings or get_global_settings()
    format = _as_format(format)
    if emit_header is not None and format is not LLSDFormat.BINARY:
        raise ValueError(f'emit_header is not supported by the {format.value} format')
    if indent is not None and format not in (LLSDFormat.XML, LLSDFormat.JSON):
        raise ValueError(f'indent is not supported by the {format.value} format')

    match format:
        case LLSDFormat.XML:
            return encode_xml(value, indent=indent, settings=settings)
        case LLSDFormat.BINARY:
            return encode_binary(value, emit_header=emit_header, settings=settings)
        case LLSDFormat.NOTATION:
            return encode_notation(value, settings=settings)
        case LLSDFormat.JSON:
            return encode_json(value, indent=indent, settings=settings)
        case _:
            assert_never(format)
