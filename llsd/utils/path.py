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
Helpers to read values out of a decoded tree without a cascade of isinstance checks.

A path is a dotted list of dictionary keys with `[n]` sequence indexes, any step that doesn't resolve makes the whole
lookup return None (or the given default):

>>> doc = {'agents': [{'name': 'Ann', 'age': 30}], 'region': {'id': '6f4b4f63-3fa6-4b3e-9b1c-2f6a8a1e2a10'}}
>>> get_path(doc, 'agents[0].name')
'Ann'
>>> get_path(doc, 'agents[3].name') is None
True
>>> get_real(doc, 'agents[0].age')
30.0
>>> get_text(doc, 'agents[0].age', 'unknown')
'unknown'
>>> get_uuid(doc, 'region.id')
UUID('6f4b4f63-3fa6-4b3e-9b1c-2f6a8a1e2a10')
>>> missing_keys(doc, ['agents', 'owner'])
['owner']
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional, Union
from uuid import UUID

from llsd.codecs.common import parse_uuid
from llsd.types import NIL_UUID, Value, ValueKind, kind_of
from llsd.utils.dict import deep_merge

PathStep = Union[str, int]

_STEP_RE = re.compile(r'(?P<dot>\.)?(?:(?P<key>[^.\[\]]+)|\[(?P<index>\d+)\])')


def parse_path(path: str) -> list[PathStep]:
    """Split a path like `agents[0].name` into its steps.

    >>> parse_path('agents[0].name')
    ['agents', 0, 'name']
    >>> parse_path('a..b')
    Traceback (most recent call last):
    ...
    ValueError: invalid path: 'a..b'
    """
    steps: list[PathStep] = []
    pos = 0
    while pos < len(path):
        match = _STEP_RE.match(path, pos)
        if match is None:
            raise ValueError(f'invalid path: {path!r}')
        dot, key, index = match.group('dot', 'key', 'index')
        # every key but the first is introduced by a dot, indexes never are
        if (key is not None and bool(dot) != bool(steps)) or (index is not None and dot):
            raise ValueError(f'invalid path: {path!r}')
        steps.append(key if key is not None else int(index))
        pos = match.end()
    return steps


def get_path(root: Value, path: Union[str, Sequence[PathStep]]) -> Optional[Value]:
    steps = parse_path(path) if isinstance(path, str) else path
    current: Any = root
    for step in steps:
        if isinstance(step, int):
            if not isinstance(current, list) or not 0 <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, Mapping) or step not in current:
                return None
            current = current[step]
    return current


def get_or_default(root: Value, path: Union[str, Sequence[PathStep]], kind: ValueKind, default: Any) -> Any:
    """Return the value at path if it is of the requested kind, `default` otherwise.

    Integers are accepted where a real is requested and text holding a UUID where an identifier is requested.
    """
    value = get_path(root, path)
    actual = kind_of(value)
    if actual is kind:
        return value
    if kind is ValueKind.REAL and actual is ValueKind.INTEGER:
        return float(value)  # type: ignore[arg-type]
    if kind is ValueKind.IDENTIFIER and actual is ValueKind.TEXT:
        assert isinstance(value, str)
        try:
            return parse_uuid(value)
        except ValueError:
            return default
    return default


def get_text(root: Value, path: Union[str, Sequence[PathStep]], default: str = '') -> str:
    return get_or_default(root, path, ValueKind.TEXT, default)


def get_integer(root: Value, path: Union[str, Sequence[PathStep]], default: int = 0) -> int:
    return get_or_default(root, path, ValueKind.INTEGER, default)


def get_real(root: Value, path: Union[str, Sequence[PathStep]], default: float = 0.0) -> float:
    return get_or_default(root, path, ValueKind.REAL, default)


def get_boolean(root: Value, path: Union[str, Sequence[PathStep]], default: bool = False) -> bool:
    return get_or_default(root, path, ValueKind.BOOLEAN, default)


def get_uuid(root: Value, path: Union[str, Sequence[PathStep]], default: UUID = NIL_UUID) -> UUID:
    return get_or_default(root, path, ValueKind.IDENTIFIER, default)


def as_dict(value: Optional[Value]) -> dict[str, Value]:
    """The value itself if it is a dictionary, a new empty one otherwise."""
    return value if isinstance(value, dict) else {}


def as_list(value: Optional[Value]) -> list[Value]:
    """The value itself if it is a sequence, a new empty one otherwise."""
    return value if isinstance(value, list) else []


def deep_copy(value: Value) -> Value:
    """Copy containers recursively, leaves are immutable and shared.

    >>> original = {'a': [1, {'b': b'x'}]}
    >>> copy = deep_copy(original)
    >>> copy == original, copy['a'] is original['a']
    (True, False)
    """
    kind = kind_of(value)
    if kind is ValueKind.SEQUENCE:
        return [deep_copy(item) for item in value]  # type: ignore[union-attr]
    if kind is ValueKind.DICTIONARY:
        return {key: deep_copy(item) for key, item in value.items()}  # type: ignore[union-attr]
    if kind is ValueKind.OPAQUE:
        return bytes(value)  # type: ignore[arg-type]
    return value


def merge_dicts(first: dict[str, Value], second: dict[str, Value]) -> dict[str, Value]:
    """Deep merge two dictionaries into a new one, values from `second` win."""
    return deep_merge(first, second)


def missing_keys(value: Optional[Value], required: Iterable[str]) -> list[str]:
    """The required keys that are not present in value, in the order they were given."""
    present = as_dict(value)
    return [key for key in required if key not in present]
