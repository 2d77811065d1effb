import math
from datetime import datetime, timezone
from uuid import UUID

import pytest

from llsd.codecs.json_codec import decode_json, encode_json
from llsd.conf.settings import LLSDSettings
from llsd.exception import (
    IntegerOutOfRangeError,
    InvalidBase64Error,
    InvalidIdentifierFormatError,
    InvalidTimestampFormatError,
    MalformedInputError,
    NestingTooDeepError,
    UnexpectedEndOfInputError,
    UnsupportedTypeError,
)
from llsd.types import Uri, llsd_equal

ID = UUID('6bad258e-06f0-4d9b-a7c5-3e4a2f1a8b3c')


@pytest.mark.parametrize(
    ['text', 'expected'],
    [
        ('null', None),
        ('true', True),
        ('false', False),
        ('-7', -7),
        ('2147483647', 2147483647),
        ('2.5', 2.5),
        ('1e2', 100.0),
        ('"text"', 'text'),
        ('"\\u03c0"', 'π'),
        ('[]', []),
        ('{}', {}),
        ('{"d":"2006-02-01T14:29:53.43Z"}', datetime(2006, 2, 1, 14, 29, 53, 430000, tzinfo=timezone.utc)),
        ('{"i":"6bad258e-06f0-4d9b-a7c5-3e4a2f1a8b3c"}', ID),
        ('{"b":"aGVsbG8="}', b'hello'),
        ('{"u":"http://example.com/"}', Uri('http://example.com/')),
        ('{"a":[1,{"b":""}],"c":null}', {'a': [1, b''], 'c': None}),
    ]
)
def test_decode(text: str, expected: object, settings: LLSDSettings) -> None:
    assert llsd_equal(decode_json(text, settings=settings), expected)


def test_integer_bounds(settings: LLSDSettings) -> None:
    value = decode_json('[2147483647, -2147483648, 4294967296.0, 1e10]', settings=settings)
    assert llsd_equal(value, [2147483647, -2147483648, 4294967296.0, 1e10])
    assert decode_json('{"4294967296": "99999999999"}', settings=settings) == {'4294967296': '99999999999'}


@pytest.mark.parametrize(
    ['text', 'offset'],
    [
        ('[1, 4294967296]', 4),
        ('2147483648', 0),
        ('-2147483649', 0),
        ('{"n": "1 99999999999", "m": 99999999999}', 28),
        ('[1.5, 1e40, ' + '9' * 5000 + ']', 12),
    ]
)
def test_integers_outside_32_bits_are_rejected(text: str, offset: int, settings: LLSDSettings) -> None:
    with pytest.raises(MalformedInputError) as e:
        decode_json(text, settings=settings)
    assert not isinstance(e.value, UnexpectedEndOfInputError)
    assert e.value.offset == offset


def test_non_finite_literals(settings: LLSDSettings) -> None:
    nan, inf, ninf = decode_json('[NaN, Infinity, -Infinity]', settings=settings)
    assert math.isnan(nan)
    assert inf == float('inf')
    assert ninf == float('-inf')


def test_objects_that_are_not_wrappers(settings: LLSDSettings) -> None:
    assert decode_json('{"u":1}', settings=settings) == {'u': 1}
    assert decode_json('{"x":"http://a"}', settings=settings) == {'x': 'http://a'}
    assert decode_json('{"d":"nope","e":1}', settings=settings) == {'d': 'nope', 'e': 1}


def test_single_key_text_dictionary_reads_as_wrapper(settings: LLSDSettings) -> None:
    text = encode_json({'u': 'http://a'}, settings=settings)
    assert text == '{"u":"http://a"}'
    assert llsd_equal(decode_json(text, settings=settings), Uri('http://a'))


def test_duplicate_keys_last_wins(settings: LLSDSettings) -> None:
    assert decode_json('{"a":1,"a":2}', settings=settings) == {'a': 2}
    # the wrapper check happens after duplicates collapse
    assert decode_json('{"b":"x","b":"aGk="}', settings=settings) == b'hi'


def test_bytes_input(settings: LLSDSettings) -> None:
    assert decode_json('["π"]'.encode('utf-8'), settings=settings) == ['π']
    assert decode_json(b'\xef\xbb\xbf[1]', settings=settings) == [1]
    with pytest.raises(MalformedInputError) as e:
        decode_json(b'["\xff"]', settings=settings)
    assert e.value.offset == 2


def test_wrapper_payload_errors(settings: LLSDSettings) -> None:
    with pytest.raises(InvalidTimestampFormatError):
        decode_json('{"d":"yesterday"}', settings=settings)
    with pytest.raises(InvalidIdentifierFormatError):
        decode_json('{"i":"6bad258e06f04d9ba7c53e4a2f1a8b3c"}', settings=settings)
    with pytest.raises(InvalidBase64Error):
        decode_json('[{"b":"#"}]', settings=settings)


@pytest.mark.parametrize(
    ['text', 'offset'],
    [
        ('[1,', 3),
        ('{"a":', 5),
        ('"abc', 0),
        ('', 0),
    ]
)
def test_truncated(text: str, offset: int, settings: LLSDSettings) -> None:
    with pytest.raises(UnexpectedEndOfInputError) as e:
        decode_json(text, settings=settings)
    assert e.value.offset == offset


@pytest.mark.parametrize(
    ['text', 'offset'],
    [
        ('[1 2]', 3),
        ('{"a":1} x', 8),
        ('{a:1}', 1),
        ('[tru]', 1),
    ]
)
def test_malformed(text: str, offset: int, settings: LLSDSettings) -> None:
    with pytest.raises(MalformedInputError) as e:
        decode_json(text, settings=settings)
    assert not isinstance(e.value, UnexpectedEndOfInputError)
    assert e.value.offset == offset


def test_nesting_limit(shallow_settings: LLSDSettings) -> None:
    assert decode_json('[[[{"a":1}]]]', settings=shallow_settings) == [[[{'a': 1}]]]
    assert decode_json('["[[[[[[[[", {"x": "]]]]"}]', settings=shallow_settings) == ['[[[[[[[[', {'x': ']]]]'}]
    with pytest.raises(NestingTooDeepError) as e:
        decode_json('[[[[[1]]]]]', settings=shallow_settings)
    assert e.value.offset == 4
    with pytest.raises(NestingTooDeepError):
        encode_json({'a': [[[[]]]]}, settings=shallow_settings)


def test_encode(settings: LLSDSettings) -> None:
    value = {
        'u': None,
        'b': False,
        'i': -3,
        'r': 0.25,
        's': 'π "q"',
        'id': ID,
        'd': datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc),
        'l': Uri('http://example.com/'),
        'bin': b'\x00\x01',
        'seq': [1, [2]],
    }
    assert encode_json(value, settings=settings) == (
        '{"u":null,"b":false,"i":-3,"r":0.25,"s":"π \\"q\\"",'
        '"id":{"i":"6bad258e-06f0-4d9b-a7c5-3e4a2f1a8b3c"},'
        '"d":{"d":"2024-01-01T12:30:00Z"},'
        '"l":{"u":"http://example.com/"},'
        '"bin":{"b":"AAE="},'
        '"seq":[1,[2]]}'
    )


def test_encode_non_finite(settings: LLSDSettings) -> None:
    assert encode_json([float('nan'), float('inf'), float('-inf')], settings=settings) == '[NaN,Infinity,-Infinity]'


def test_encode_indented(settings: LLSDSettings) -> None:
    assert encode_json({'a': [1]}, indent=2, settings=settings) == '{\n  "a": [\n    1\n  ]\n}'
    assert encode_json([1], settings=LLSDSettings(JSON_INDENT=0)) == '[\n1\n]'


def test_encode_errors(settings: LLSDSettings) -> None:
    with pytest.raises(IntegerOutOfRangeError):
        encode_json([1 << 31], settings=settings)
    with pytest.raises(UnsupportedTypeError):
        encode_json({1: 'a'}, settings=settings)
    with pytest.raises(UnsupportedTypeError):
        encode_json(object(), settings=settings)


def test_round_trip(settings: LLSDSettings) -> None:
    value = {'when': datetime(1999, 12, 31, 23, 59, 59, 1, tzinfo=timezone.utc), 'ids': [ID, ID], 'raw': b'\xff' * 7}
    assert llsd_equal(decode_json(encode_json(value, settings=settings), settings=settings), value)
