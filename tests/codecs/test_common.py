import math
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from llsd.codecs.common import (
    check_depth,
    decode_base16,
    decode_base64,
    encode_base64,
    format_date,
    format_real,
    parse_date,
    parse_integer,
    parse_real,
    parse_uuid,
)
from llsd.exception import NestingTooDeepError


@pytest.mark.parametrize(
    ['text', 'expected'],
    [
        ('1970-01-01T00:00:00Z', datetime(1970, 1, 1, tzinfo=timezone.utc)),
        ('2006-02-01T14:29:53.43Z', datetime(2006, 2, 1, 14, 29, 53, 430000, tzinfo=timezone.utc)),
        ('2006-02-01T14:29:53.1234567Z', datetime(2006, 2, 1, 14, 29, 53, 123456, tzinfo=timezone.utc)),
        ('0001-01-01T00:00:00Z', datetime(1, 1, 1, tzinfo=timezone.utc)),
    ]
)
def test_parse_date(text: str, expected: datetime) -> None:
    assert parse_date(text) == expected


@pytest.mark.parametrize(
    'text',
    [
        '2006-02-01',
        '2006-02-01T14:29:53',
        '2006-02-01T14:29:53+00:00',
        '2006-13-01T00:00:00Z',
        '2006-02-30T00:00:00Z',
        '2006-02-01T14:29:53.Z',
        '2006-02-01T14:29:53Z\n',
        '２００６-02-01T14:29:53Z',
    ]
)
def test_parse_date_invalid(text: str) -> None:
    with pytest.raises(ValueError):
        parse_date(text)


def test_format_date_normalizes_to_utc() -> None:
    local = datetime(2024, 1, 1, 3, 0, tzinfo=timezone(timedelta(hours=3)))
    assert format_date(local) == '2024-01-01T00:00:00Z'
    assert format_date(datetime(2024, 1, 1)) == '2024-01-01T00:00:00Z'
    assert format_date(datetime(2024, 1, 1, microsecond=5, tzinfo=timezone.utc)) == '2024-01-01T00:00:00.000005Z'


def test_parse_uuid() -> None:
    expected = UUID('6bad258e-06f0-4d9b-a7c5-3e4a2f1a8b3c')
    assert parse_uuid('6bad258e-06f0-4d9b-a7c5-3e4a2f1a8b3c') == expected
    assert parse_uuid('6BAD258E-06F0-4D9B-A7C5-3E4A2F1A8B3C') == expected
    for text in ('6bad258e06f04d9ba7c53e4a2f1a8b3c', '{6bad258e-06f0-4d9b-a7c5-3e4a2f1a8b3c}', '', 'nope'):
        with pytest.raises(ValueError):
            parse_uuid(text)


def test_base64() -> None:
    assert encode_base64(b'') == ''
    assert encode_base64(b'\x00\xff') == 'AP8='
    assert decode_base64('AP8=') == b'\x00\xff'
    assert decode_base64(' AP\n8= ') == b'\x00\xff'
    with pytest.raises(ValueError):
        decode_base64('AP8')
    with pytest.raises(ValueError):
        decode_base64('AP-8')


def test_base16() -> None:
    assert decode_base16('00ff') == b'\x00\xff'
    assert decode_base16('00 FF\n') == b'\x00\xff'
    with pytest.raises(ValueError):
        decode_base16('0g')


def test_reals() -> None:
    assert format_real(1e100) == '1e+100'
    assert parse_real(format_real(0.1)) == 0.1
    assert parse_real('.5') == 0.5
    assert parse_real('+5.') == 5.0
    assert parse_real('INF') == float('inf')
    assert math.isnan(parse_real('NaN'))
    for text in ('', '1.2.3', 'e5', '0x10', '1_000'):
        with pytest.raises(ValueError):
            parse_real(text)


def test_integers() -> None:
    assert parse_integer('+12') == 12
    assert parse_integer('-0') == 0
    assert parse_integer('2147483647') == 2147483647
    for text in ('', '-', '1.0', '-2147483649', '1_0', '٣'):
        with pytest.raises(ValueError):
            parse_integer(text)


def test_check_depth() -> None:
    check_depth(3, 3)
    with pytest.raises(NestingTooDeepError) as e:
        check_depth(4, 3, offset=10)
    assert e.value.offset == 10
    assert str(e.value) == 'nesting deeper than 3 levels (at offset 10)'
