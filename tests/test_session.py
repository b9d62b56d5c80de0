"""End-to-end sessions against a loopback server.

There are no socket timeouts in a session, so every test makes sure the
server side ends its output or the user "exits" via EOFError.
"""
import io
import threading

import pytest

from conftest import wait_for
from replance import run, session
from replance.config import SessionConfig
from replance.history import open_history


def _user(*steps):
    """input() stand-in. Each step is a line, or a callable run before EOF."""
    queue = list(steps)

    def _input(prompt=""):
        if not queue:
            raise EOFError
        step = queue.pop(0)
        if callable(step):
            step()
            return _input(prompt)
        return step

    return _input


def _reader_alive():
    return any(t.name == "replance-inbound" and t.is_alive() for t in threading.enumerate())


@pytest.mark.smoke
def test_lines_reach_remote_in_order(server, settings):
    config = SessionConfig(host=server.host, port=server.port)
    session.start(config, settings, input_func=_user("one", "two", "three"), out=io.BytesIO())

    assert server.wait_client_closed()
    assert bytes(server.received) == b"one\ntwo\nthree\n"


@pytest.mark.smoke
def test_raw_output_printed(server, settings):
    out = io.BytesIO()
    payload = b"hello from remote\npartial"

    def remote_speaks():
        server.send(payload)
        assert wait_for(lambda: out.getvalue() == payload)

    config = SessionConfig(host=server.host, port=server.port)
    session.start(config, settings, input_func=_user(remote_speaks), out=out)

    assert out.getvalue() == payload


@pytest.mark.smoke
def test_json_mode_reports_bad_value_and_continues(server, settings):
    out = io.BytesIO()

    def remote_speaks():
        server.send(b'{"a":1}garbage{"b":2}')
        server.finish_sending()
        assert wait_for(lambda: not _reader_alive())

    config = SessionConfig(host=server.host, port=server.port, json_mode=True)
    session.start(config, settings, input_func=_user(remote_speaks), out=out)

    output = out.getvalue().decode("utf-8")
    assert output.startswith('{\n  "a": 1\n}\n')
    assert "Expecting value" in output
    assert output.endswith('{\n  "b": 2\n}\n')


@pytest.mark.smoke
def test_prompt_usable_after_remote_closes(server, settings):
    def remote_hangs_up():
        server.finish_sending()
        assert wait_for(lambda: not _reader_alive())

    config = SessionConfig(host=server.host, port=server.port)
    session.start(config, settings, input_func=_user(remote_hangs_up, "still here"), out=io.BytesIO())

    assert server.wait_client_closed()
    assert bytes(server.received) == b"still here\n"


@pytest.mark.smoke
def test_history_carries_over_between_sessions(server, settings):
    config = SessionConfig(host=server.host, port=server.port)
    session.start(config, settings, input_func=_user("remember me", "and me"), out=io.BytesIO())

    store = open_history(server.host, server.port, cache_dir=settings.cache_dir)
    assert store.entries == ["remember me", "and me"]


def test_unreachable_endpoint(closed_port, tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    run(["127.0.0.1", str(closed_port)])
    assert capsys.readouterr().out.strip() == "Couldn't connect"


@pytest.mark.parametrize("argv", [[], ["localhost"]])
def test_usage_without_connecting(argv, tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    def must_not_connect(*args, **kwargs):
        raise AssertionError("session started without host and port")

    monkeypatch.setattr(session, "start", must_not_connect)
    run(argv)
    output = capsys.readouterr().out
    assert "Replance - REPL for nc" in output
    assert "Usage - rnc <HOST> <PORT>" in output
