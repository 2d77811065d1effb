import pytest

from llsd.utils.result import Err, Ok, OkErr, UnwrapError, as_result, is_err, is_ok


def test_ok():
    result = Ok(1)
    assert result.is_ok() and is_ok(result)
    assert not result.is_err() and not is_err(result)
    assert result.ok() == 1
    assert result.err() is None
    assert result.unwrap() == 1
    assert result.unwrap_or(2) == 1
    assert result.unwrap_or_raise() == 1
    assert result.map(lambda x: x + 1) == Ok(2)
    assert result.map_err(str) is result
    assert repr(result) == 'Ok(1)'
    with pytest.raises(UnwrapError):
        result.unwrap_err()


def test_err():
    error = ValueError('boom')
    result = Err(error)
    assert result.is_err() and is_err(result)
    assert result.err() is error
    assert result.ok() is None
    assert result.unwrap_err() is error
    assert result.unwrap_or(2) == 2
    assert result.map(lambda x: x + 1) is result
    assert result.map_err(str) == Err('boom')
    with pytest.raises(UnwrapError) as e:
        result.unwrap()
    assert e.value.result is result
    assert e.value.__cause__ is error
    with pytest.raises(ValueError, match='boom'):
        result.unwrap_or_raise()


def test_equality_and_hash():
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)
    assert len({Ok(1), Ok(1), Err(1)}) == 2
    assert isinstance(Ok(1), OkErr) and isinstance(Err(1), OkErr)


def test_as_result():
    @as_result(KeyError, IndexError)
    def pick(items, index):
        return items[index]

    assert pick([1], 0) == Ok(1)
    assert isinstance(pick([1], 1).err(), IndexError)
    assert isinstance(pick({}, 'a').err(), KeyError)
    with pytest.raises(TypeError):
        pick(None, 0)


def test_as_result_requires_exception_types():
    with pytest.raises(TypeError):
        as_result()
    with pytest.raises(TypeError):
        as_result(int)
