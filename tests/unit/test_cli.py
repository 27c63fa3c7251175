"""
Unit tests for the command-line interface.
"""

import pytest
from unittest.mock import patch

from yopmail import cli
from tests.mocks.http_mock import INBOX_URL, make_response


@pytest.fixture
def run_cli(make_client):
    """Run the CLI with the client factory and logging setup patched out."""

    def _run(argv, **client_kwargs):
        cfg = {"LOG_LEVEL": "INFO", "LOG_FILE": None, "PROXY": None}
        with patch.object(cli, "_load_env", return_value=cfg), \
             patch.object(cli, "setup_logging"), \
             patch.object(cli, "_init_client", side_effect=lambda c, username: make_client(username, **client_kwargs)):
            cli.main(argv)

    return _run


def test_inbox(run_cli, capsys):
    run_cli(["inbox", "test"])
    lines = capsys.readouterr().out.split()
    assert len(lines) == 3
    assert lines[0] == "e_ZwRjAGVkZGHlZQN0ZQNjAmx2ZGN0AD=="


def test_read(run_cli, capsys):
    run_cli(["read", "test", "abc", "--images"])
    assert '<div id="mail">' in capsys.readouterr().out


def test_delete(run_cli, capsys, fake_http):
    run_cli(["delete", "test", "abc"])
    assert "Deleted abc" in capsys.readouterr().out
    assert fake_http.calls_to(INBOX_URL)[-1]["params"]["d"] == "abc"


def test_domains(run_cli, capsys):
    run_cli(["domains"])
    assert capsys.readouterr().out.split() == ["yopmail.fr", "cool.fr.nf", "jetable.fr.nf"]


def test_rate_limit_exit_code(run_cli, routes):
    routes[INBOX_URL] = make_response(429)
    with pytest.raises(SystemExit) as exc:
        run_cli(["inbox", "test"])
    assert exc.value.code == 2


def test_invalid_username_exit_code(run_cli):
    with pytest.raises(SystemExit) as exc:
        run_cli(["inbox", "not valid"])
    assert exc.value.code == 1


def test_no_command(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 1
