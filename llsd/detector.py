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
Guess the encoding of a document by looking at its first few bytes.

>>> detect_format(b'<?xml version="1.0"?><llsd/>')
<LLSDFormat.XML: 'xml'>
>>> detect_format(b'<?llsd/binary?>\\n!')
<LLSDFormat.BINARY: 'binary'>
>>> detect_format('  t')
<LLSDFormat.NOTATION: 'notation'>
>>> detect_format('{"a":1}')
<LLSDFormat.NOTATION: 'notation'>
>>> detect_format('null')
<LLSDFormat.JSON: 'json'>
"""

from typing import Optional, Union

from llsd.conf.get_settings import get_global_settings
from llsd.conf.settings import LLSDSettings
from llsd.format import LLSDFormat
from llsd.serialization.types import Buffer

XML_PREFIXES = ('<?xml', '<llsd')
BINARY_PREFIX = '<?llsd/binary?>'
NOTATION_SIGILS = frozenset('tfir\'"udlbs![{')

_UTF8_BOM = b'\xef\xbb\xbf'
_BOM = '\ufeff'
_WHITESPACE = ' \t\r\n'


def detect_format(data: Union[str, Buffer], *, settings: Optional[LLSDSettings] = None) -> LLSDFormat:
    """Pick the format of a document from a bounded prefix, never reading the whole input.

    A leading `{` or `[` is reported as notation, `llsd.api.parse` falls back to JSON when that guess is wrong.
    """
    settings = settings or get_global_settings()
    prefix = data[:settings.DETECT_PREFIX_LENGTH]
    if isinstance(prefix, str):
        text = prefix.removeprefix(_BOM).lstrip(_WHITESPACE)
    else:
        raw = bytes(prefix).removeprefix(_UTF8_BOM).lstrip(_WHITESPACE.encode('ascii'))
        # only ASCII matters for the checks below
        text = raw.decode('ascii', 'replace')

    if text.startswith(XML_PREFIXES):
        return LLSDFormat.XML
    if text.startswith(BINARY_PREFIX):
        return LLSDFormat.BINARY
    if text[:1] in NOTATION_SIGILS:
        return LLSDFormat.NOTATION
    return LLSDFormat.JSON
