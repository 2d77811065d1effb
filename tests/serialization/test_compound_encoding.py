import pytest

from llsd.serialization import Deserializer, InvalidTagError, OutOfDataError, Serializer
from llsd.serialization.compound_encoding.mapping import decode_mapping, encode_mapping
from llsd.serialization.compound_encoding.sequence import decode_sequence, encode_sequence
from llsd.serialization.encoding.int import decode_int, encode_int


def encode_u8(serializer: Serializer, value: int) -> None:
    encode_int(serializer, value, length=1, signed=False)


def decode_u8(deserializer: Deserializer) -> int:
    return decode_int(deserializer, length=1, signed=False)


def test_empty_sequence() -> None:
    se = Serializer.build_bytes_serializer()
    encode_sequence(se, [], encode_u8, begin=ord('['), end=ord(']'))
    assert bytes(se.finalize()) == b'[]'

    de = Deserializer.build_bytes_deserializer(b']')
    assert decode_sequence(de, decode_u8, tuple, end=ord(']')) == ()
    de.finalize()


def test_sequence_stops_at_its_terminator() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02]rest')
    assert decode_sequence(de, decode_u8, list, end=ord(']')) == [1, 2]
    assert bytes(de.read_all()) == b'rest'


def test_unterminated_sequence() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02')
    with pytest.raises(OutOfDataError):
        decode_sequence(de, decode_u8, list, end=ord(']'))


def test_mapping_round_trip() -> None:
    se = Serializer.build_bytes_serializer()
    encode_mapping(se, {1: 2, 3: 4}, encode_u8, encode_u8, begin=ord('{'), key_marker=ord('k'), end=ord('}'))
    data = bytes(se.finalize())
    assert data == b'{k\x01\x02k\x03\x04}'

    de = Deserializer.build_bytes_deserializer(data)
    assert de.read_byte() == ord('{')
    assert decode_mapping(de, decode_u8, decode_u8, dict, key_marker=ord('k'), end=ord('}')) == {1: 2, 3: 4}
    de.finalize()


def test_mapping_bad_key_marker() -> None:
    de = Deserializer.build_bytes_deserializer(b'k\x01\x02j')
    with pytest.raises(InvalidTagError) as e:
        decode_mapping(de, decode_u8, decode_u8, dict, key_marker=ord('k'), end=ord('}'))
    assert e.value.tag == ord('j')


def test_unterminated_mapping() -> None:
    de = Deserializer.build_bytes_deserializer(b'k\x01')
    with pytest.raises(OutOfDataError):
        decode_mapping(de, decode_u8, decode_u8, dict, key_marker=ord('k'), end=ord('}'))
