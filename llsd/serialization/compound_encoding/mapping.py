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
A mapping is written as an opening byte, then for each entry a key marker byte, the key and the value, and finally a
closing byte. Like sequences there is no count.

Layout: [begin]([key_marker][key_0][value_0])...([key_marker][key_N][value_N])[end]

>>> from llsd.serialization.encoding.utf8 import encode_utf8, decode_utf8
>>> from llsd.serialization.encoding.int import encode_int, decode_int
>>> encode_i8 = lambda se, v: encode_int(se, v, length=1, signed=True)
>>> decode_i8 = lambda de: decode_int(de, length=1, signed=True)
>>> se = Serializer.build_bytes_serializer()
>>> encode_mapping(se, {'a': 1, 'b': 2}, encode_utf8, encode_i8, begin=ord('{'), key_marker=ord('k'), end=ord('}'))
>>> bytes(se.finalize()).hex()
'7b6b0000000161016b0000000162027d'

Breakdown of the result:

    7b: '{', the opening byte
    6b 0000000161 01: 'k', then key 'a' with length prefix, then the value 1
    6b 0000000162 02: 'k', then key 'b' with length prefix, then the value 2
    7d: '}', the closing byte

The builder receives the pairs in order, building a `dict` means a repeated key keeps the last value:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('6b0000000161016b0000000161027d'))
>>> decode_mapping(de, decode_utf8, decode_i8, dict, key_marker=ord('k'), end=ord('}'))
{'a': 2}
>>> de.finalize()

Anything other than the key marker or the closing byte where an entry should start is rejected:

>>> de = Deserializer.build_bytes_deserializer(b'x')
>>> try:
...     decode_mapping(de, decode_utf8, decode_i8, dict, key_marker=ord('k'), end=ord('}'))
... except InvalidTagError as e:
...     print(*e.args)
invalid tag b'x'
"""

from collections.abc import Iterable, Mapping
from typing import Callable, TypeVar

from llsd.serialization import Deserializer, InvalidTagError, Serializer

from . import Decoder, Encoder

KT = TypeVar('KT')
VT = TypeVar('VT')
R = TypeVar('R')


def encode_mapping(
    serializer: Serializer,
    values_mapping: Mapping[KT, VT],
    key_encoder: Encoder[KT],
    value_encoder: Encoder[VT],
    *,
    begin: int,
    key_marker: int,
    end: int,
) -> None:
    serializer.write_byte(begin)
    for key, value in values_mapping.items():
        serializer.write_byte(key_marker)
        key_encoder(serializer, key)
        value_encoder(serializer, value)
    serializer.write_byte(end)


def decode_mapping(
    deserializer: Deserializer,
    key_decoder: Decoder[KT],
    value_decoder: Decoder[VT],
    mapping_builder: Callable[[Iterable[tuple[KT, VT]]], R],
    *,
    key_marker: int,
    end: int,
) -> R:
    pairs: list[tuple[KT, VT]] = []
    while True:
        marker = deserializer.read_byte()
        if marker == end:
            break
        if marker != key_marker:
            raise InvalidTagError(marker)
        key = key_decoder(deserializer)
        pairs.append((key, value_decoder(deserializer)))
    return mapping_builder(pairs)
