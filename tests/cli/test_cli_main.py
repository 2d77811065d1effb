import sys
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from llsd_cli import main


class CliMainTest(unittest.TestCase):
    def test_init(self):
        # basically making sure importing works
        cli = main.CliManager()

        # Help method only prints on the screen
        # So just making sure it has no errors
        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                cli.help()
        # Transforming prints str in array
        output = f.getvalue().strip().splitlines()

        # the title plus one line per group and one per command
        self.assertTrue(len(output) >= 6)
        self.assertIn('[inspect]', f.getvalue())
        self.assertIn('[transform]', f.getvalue())


def test_no_command_prints_help(monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['llsd-cli'])

    assert main.CliManager().execute_from_command_line() == 0
    assert 'Available subcommands' in capsys.readouterr().out


def test_unknown_command(monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['llsd-cli', 'explode'])

    assert main.CliManager().execute_from_command_line() == -1
    assert 'Unknown command: "explode"' in capsys.readouterr().out


@pytest.mark.usefixtures('restore_logging')
def test_dispatch_to_subcommand(monkeypatch, capsys, tmp_path: Path):
    document = tmp_path / 'doc.xml'
    document.write_text('<llsd><integer>1</integer></llsd>')
    monkeypatch.setattr(sys, 'argv', ['llsd-cli', 'detect', str(document), '--disable-logs'])

    assert main.CliManager().execute_from_command_line() == 0
    assert capsys.readouterr().out == 'xml\n'


@pytest.mark.usefixtures('restore_logging')
def test_main_exits_with_the_command_status(monkeypatch, tmp_path: Path):
    document = tmp_path / 'doc.txt'
    document.write_text('[i1')
    monkeypatch.setattr(sys, 'argv', ['llsd-cli', 'validate', str(document), '--disable-logs'])

    with pytest.raises(SystemExit) as e:
        main.main()
    assert e.value.code == 1
