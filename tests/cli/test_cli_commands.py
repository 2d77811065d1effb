from argparse import Namespace
from pathlib import Path

import pytest

from llsd import LLSDFormat, parse
from llsd_cli import convert, detect, validate


def convert_args(input: Path, output: Path, to_format: str, **kwargs) -> Namespace:
    options = dict(from_format=None, header=False, indent=None)
    options.update(kwargs)
    return Namespace(input=str(input), output=str(output), to_format=to_format, **options)


@pytest.mark.parametrize(
    ['content', 'expected'],
    [
        (b'<?xml version="1.0"?><llsd><undef/></llsd>', 'xml'),
        (b'<?llsd/binary?>\n!', 'binary'),
        (b"{'a':i1}", 'notation'),
        (b'null', 'json'),
    ]
)
def test_detect(tmp_path: Path, capsys, content: bytes, expected: str):
    path = tmp_path / 'doc'
    path.write_bytes(content)

    assert detect.execute(Namespace(input=str(path))) == 0
    assert capsys.readouterr().out == f'{expected}\n'


def test_validate(tmp_path: Path, capsys):
    good = tmp_path / 'good.json'
    good.write_text('{"a": [1, 2]}')
    bad = tmp_path / 'bad.json'
    bad.write_text('{"a": [1, 2}')

    assert validate.execute(Namespace(input=str(good), from_format=None)) == 0
    assert capsys.readouterr().out == 'valid\n'

    assert validate.execute(Namespace(input=str(bad), from_format='json')) == 1
    assert capsys.readouterr().err.startswith('invalid: ')


def test_convert_json_to_notation(tmp_path: Path):
    source = tmp_path / 'doc.json'
    source.write_text('{"a": [1, {"u": "http://example.com"}]}')
    target = tmp_path / 'doc.llsd'

    assert convert.execute(convert_args(source, target, 'notation')) == 0
    assert target.read_text() == "{'a':[i1,l\"http://example.com\"]}"


def test_convert_to_binary_with_header(tmp_path: Path):
    source = tmp_path / 'doc.xml'
    source.write_text('<llsd><array><integer>7</integer></array></llsd>')
    target = tmp_path / 'doc.bin'

    assert convert.execute(convert_args(source, target, 'binary', header=True)) == 0
    data = target.read_bytes()
    assert data.startswith(b'<?llsd/binary?>\n')
    assert parse(data) == [7]


def test_convert_indented_xml(tmp_path: Path):
    source = tmp_path / 'doc.bin'
    source.write_bytes(b'[\x00\x00\x00\x01i\x00\x00\x00\x02]')
    target = tmp_path / 'doc.xml'

    assert convert.execute(convert_args(source, target, 'xml', from_format='binary', indent=2)) == 0
    assert parse(target.read_bytes(), LLSDFormat.XML) == [2]
    assert '\n  <array>\n' in target.read_text()


def test_convert_reports_codec_errors(tmp_path: Path, capsys):
    source = tmp_path / 'doc.xml'
    source.write_text('<llsd><integer>one</integer></llsd>')
    target = tmp_path / 'out'

    assert convert.execute(convert_args(source, target, 'json')) == 1
    assert capsys.readouterr().err.startswith('error: ')
    assert not target.exists()


@pytest.mark.parametrize(
    ['to_format', 'options'],
    [
        ('json', dict(header=True)),
        ('notation', dict(indent=2)),
        ('binary', dict(indent=2)),
    ]
)
def test_convert_rejects_options(tmp_path: Path, to_format: str, options: dict):
    source = tmp_path / 'doc'
    source.write_text('i1')

    with pytest.raises(SystemExit) as e:
        convert.execute(convert_args(source, tmp_path / 'out', to_format, **options))
    assert e.value.code == 2


def test_convert_parser_requires_target_format():
    parser = convert.create_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(['doc.xml'])
    args = parser.parse_args(['doc.xml', '--to', 'json', '--from', 'xml', '--indent', '2'])
    assert (args.to_format, args.from_format, args.indent, args.header) == ('json', 'xml', 2, False)
