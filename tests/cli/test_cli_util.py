import io
import logging
from pathlib import Path

import pytest
import structlog

from llsd_cli.util import (
    LoggingOptions,
    LoggingOutput,
    check_or_exit,
    format_choices,
    process_logging_options,
    process_logging_output,
    read_input,
    setup_logging,
    write_output,
)


def test_format_choices():
    assert format_choices() == ['xml', 'binary', 'notation', 'json']


@pytest.mark.parametrize(
    ['argv', 'expected'],
    [
        (['prog', 'doc.xml'], LoggingOutput.PRETTY),
        (['prog', '--json-logs', 'doc.xml'], LoggingOutput.JSON),
        (['prog', 'doc.xml', '--disable-logs'], LoggingOutput.NULL),
    ]
)
def test_process_logging_output(argv, expected):
    assert process_logging_output(argv) == expected
    assert argv == ['prog', 'doc.xml']


def test_process_logging_options():
    argv = ['prog', '--debug', 'doc.xml', '--to', 'json']
    assert process_logging_options(argv) == LoggingOptions(debug=True)
    assert argv == ['prog', 'doc.xml', '--to', 'json']
    assert process_logging_options(argv) == LoggingOptions(debug=False)


@pytest.mark.usefixtures('restore_logging')
@pytest.mark.parametrize('output', list(LoggingOutput))
def test_setup_logging(output):
    setup_logging(logging_output=output, logging_options=LoggingOptions(debug=True))
    structlog.get_logger().debug('logging configured', output=output.name)
    assert logging.getLogger().level == logging.DEBUG


def test_read_and_write_files(tmp_path: Path):
    path = tmp_path / 'doc.bin'
    write_output(b'\x00data', str(path))
    assert read_input(str(path)) == b'\x00data'


def test_write_output_to_stdout():
    out = io.BytesIO()
    write_output(b'data', None, stdout=out)
    write_output(b'!', '-', stdout=out)
    assert out.getvalue() == b'data!'


def test_read_input_from_stdin(monkeypatch):
    monkeypatch.setattr('sys.stdin', io.TextIOWrapper(io.BytesIO(b'i1')))
    assert read_input('-') == b'i1'


def test_check_or_exit(capsys):
    check_or_exit(True, 'unused')
    with pytest.raises(SystemExit) as e:
        check_or_exit(False, 'bad option')
    assert e.value.code == 2
    assert capsys.readouterr().err == 'bad option\n'
