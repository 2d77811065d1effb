import doctest
import importlib

import pytest

MODULES_WITH_DOCTESTS = [
    'llsd.api',
    'llsd.codecs.binary_codec',
    'llsd.codecs.common',
    'llsd.codecs.json_codec',
    'llsd.codecs.notation_codec',
    'llsd.codecs.xml_codec',
    'llsd.detector',
    'llsd.serialization.compound_encoding.mapping',
    'llsd.serialization.compound_encoding.sequence',
    'llsd.serialization.encoding.bytes',
    'llsd.serialization.encoding.int',
    'llsd.serialization.encoding.real',
    'llsd.serialization.encoding.timestamp',
    'llsd.serialization.encoding.utf8',
    'llsd.serialization.encoding.uuid',
    'llsd.types',
    'llsd.utils.dict',
    'llsd.utils.path',
    'llsd.utils.result',
]


@pytest.mark.parametrize('module_name', MODULES_WITH_DOCTESTS)
def test_doctests(module_name: str) -> None:
    module = importlib.import_module(module_name)
    result = doctest.testmod(module)
    assert result.attempted > 0
    assert result.failed == 0
