import struct
from datetime import datetime, timezone
from uuid import UUID

import pytest

from llsd.codecs.binary_codec import BINARY_HEADER, decode_binary, encode_binary
from llsd.conf.settings import LLSDSettings
from llsd.exception import (
    EncodeError,
    IntegerOutOfRangeError,
    InvalidTimestampFormatError,
    MalformedInputError,
    NestingTooDeepError,
    UnexpectedEndOfInputError,
    UnknownTagError,
    UnsupportedTypeError,
)
from llsd.types import Uri


@pytest.mark.parametrize(
    ['value', 'encoded'],
    [
        (None, b'!'),
        (True, b'1'),
        (False, b'0'),
        (42, b'i\x00\x00\x00\x2a'),
        (-1, b'i\xff\xff\xff\xff'),
        (1.5, b'r\x3f\xf8\x00\x00\x00\x00\x00\x00'),
        ('hi', b's\x00\x00\x00\x02hi'),
        (Uri('http://a'), b'l\x00\x00\x00\x08http://a'),
        (b'\x00\xff', b'b\x00\x00\x00\x02\x00\xff'),
        (UUID('00112233-4455-6677-8899-aabbccddeeff'), b'u' + bytes.fromhex('00112233445566778899aabbccddeeff')),
        (datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc), b'd' + struct.pack('!d', 1.0)),
        ([], b'[]'),
        ({}, b'{}'),
        ([1, 'a'], b'[i\x00\x00\x00\x01s\x00\x00\x00\x01a]'),
    ]
)
def test_encode_and_decode(value: object, encoded: bytes, settings: LLSDSettings) -> None:
    assert encode_binary(value, settings=settings) == encoded
    assert decode_binary(encoded, settings=settings) == value


def test_resource_stays_a_resource(settings: LLSDSettings) -> None:
    value = decode_binary(b'l\x00\x00\x00\x01x', settings=settings)
    assert isinstance(value, Uri)


def test_dictionary_with_header(settings: LLSDSettings) -> None:
    value = {'name': 'Ann', 'tags': [1, 2], 'ok': True}
    data = encode_binary(value, emit_header=True, settings=settings)
    assert data.startswith(BINARY_HEADER + b'\n{')
    assert decode_binary(data, settings=settings) == value


def test_header_is_optional_and_may_follow_whitespace(settings: LLSDSettings) -> None:
    assert decode_binary(b'  \n<?llsd/binary?>\n!', settings=settings) is None
    assert decode_binary(b'<?llsd/binary?>!', settings=settings) is None
    assert decode_binary(b'!', settings=settings) is None


def test_header_from_settings() -> None:
    settings = LLSDSettings(BINARY_EMIT_HEADER=True)
    assert encode_binary(None, settings=settings) == b'<?llsd/binary?>\n!'
    assert encode_binary(None, emit_header=False, settings=settings) == b'!'


def test_duplicate_keys_last_wins(settings: LLSDSettings) -> None:
    data = b'{k\x00\x00\x00\x01ai\x00\x00\x00\x01k\x00\x00\x00\x01ai\x00\x00\x00\x02}'
    assert decode_binary(data, settings=settings) == {'a': 2}


@pytest.mark.parametrize(
    ['data', 'offset'],
    [
        (b'', 0),
        (b'i\x00\x00', 1),
        (b's\x00\x00\x00\x05abc', 5),
        (b'[!', 2),
        (b'{k\x00\x00\x00\x01a', 7),
    ]
)
def test_truncated_input(data: bytes, offset: int, settings: LLSDSettings) -> None:
    with pytest.raises(UnexpectedEndOfInputError) as e:
        decode_binary(data, settings=settings)
    assert e.value.offset == offset


def test_unknown_tag(settings: LLSDSettings) -> None:
    with pytest.raises(UnknownTagError) as e:
        decode_binary(b'[!x]', settings=settings)
    assert e.value.offset == 2


def test_non_key_inside_map(settings: LLSDSettings) -> None:
    with pytest.raises(UnknownTagError) as e:
        decode_binary(b'{s\x00\x00\x00\x01a!}', settings=settings)
    assert e.value.offset == 1


def test_negative_length(settings: LLSDSettings) -> None:
    with pytest.raises(MalformedInputError) as e:
        decode_binary(b'b\xff\xff\xff\xff', settings=settings)
    assert not isinstance(e.value, UnexpectedEndOfInputError)


def test_length_above_maximum() -> None:
    settings = LLSDSettings(MAX_BINARY_LENGTH=2)
    with pytest.raises(MalformedInputError, match='exceeds the maximum'):
        decode_binary(b's\x00\x00\x00\x03abc', settings=settings)


def test_invalid_utf8(settings: LLSDSettings) -> None:
    with pytest.raises(MalformedInputError, match='utf-8'):
        decode_binary(b's\x00\x00\x00\x01\xff', settings=settings)


def test_trailing_data(settings: LLSDSettings) -> None:
    with pytest.raises(MalformedInputError, match='trailing data') as e:
        decode_binary(b'!!', settings=settings)
    assert e.value.offset == 1


@pytest.mark.parametrize('seconds', [float('nan'), float('inf'), 1e300, 253402300802.0, -62135596801.0])
def test_unrepresentable_timestamp(seconds: float, settings: LLSDSettings) -> None:
    with pytest.raises(InvalidTimestampFormatError) as e:
        decode_binary(b'd' + struct.pack('!d', seconds), settings=settings)
    assert e.value.offset == 1


def test_last_representable_timestamp(settings: LLSDSettings) -> None:
    last = datetime(9999, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)
    assert decode_binary(encode_binary(last, settings=settings), settings=settings) == last
    assert decode_binary(encode_binary([last], settings=settings), settings=settings) == [last]
    first = datetime(1, 1, 1, tzinfo=timezone.utc)
    assert decode_binary(encode_binary(first, settings=settings), settings=settings) == first


@pytest.mark.parametrize('value', ['\ud800', ['ok', 'a\udfffb'], {'\ud800': 1}, Uri('http://\ud800')])
def test_text_without_utf8_form(value: object, settings: LLSDSettings) -> None:
    with pytest.raises(EncodeError):
        encode_binary(value, settings=settings)


@pytest.mark.parametrize('value', [2**31, -2**31 - 1, [1, 2**40]])
def test_integer_out_of_range(value: object, settings: LLSDSettings) -> None:
    with pytest.raises(IntegerOutOfRangeError):
        encode_binary(value, settings=settings)


def test_unsupported_values(settings: LLSDSettings) -> None:
    with pytest.raises(UnsupportedTypeError):
        encode_binary({1, 2}, settings=settings)
    with pytest.raises(UnsupportedTypeError):
        encode_binary({1: 'a'}, settings=settings)


def test_nesting_limit(shallow_settings: LLSDSettings) -> None:
    assert decode_binary(b'[[[[]]]]', settings=shallow_settings) == [[[[]]]]
    with pytest.raises(NestingTooDeepError) as e:
        decode_binary(b'[[[[[]]]]]', settings=shallow_settings)
    assert e.value.offset == 4
    with pytest.raises(NestingTooDeepError):
        encode_binary([[[[[]]]]], settings=shallow_settings)


def test_cyclic_value_fails_cleanly(settings: LLSDSettings) -> None:
    cyclic: list = []
    cyclic.append(cyclic)
    with pytest.raises(NestingTooDeepError):
        encode_binary(cyclic, settings=settings)


def test_deep_document_does_not_exhaust_the_stack(settings: LLSDSettings) -> None:
    data = b'[' * 100_000 + b']' * 100_000
    with pytest.raises(NestingTooDeepError):
        decode_binary(data, settings=settings)
