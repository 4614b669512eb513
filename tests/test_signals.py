import signal

import pytest

from mshell.signals import (
    interactive_signals,
    noninteractive_signals,
    print_newline,
    reset_prompt,
)


@pytest.fixture
def restore_handlers():
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGQUIT)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)


def _fire_installed(sig):
    handler = signal.getsignal(sig)
    assert callable(handler)
    handler(sig, None)


def test_interactive_ignores_quit_and_resets_prompt(restore_handlers, capsys):
    interactive_signals()
    assert signal.getsignal(signal.SIGQUIT) == signal.SIG_IGN
    assert signal.getsignal(signal.SIGINT) is reset_prompt
    _fire_installed(signal.SIGINT)
    assert capsys.readouterr().out == "\n"


def test_noninteractive_prints_newline_on_both(restore_handlers, capsys):
    noninteractive_signals()
    assert signal.getsignal(signal.SIGINT) is print_newline
    assert signal.getsignal(signal.SIGQUIT) is print_newline
    _fire_installed(signal.SIGINT)
    _fire_installed(signal.SIGQUIT)
    assert capsys.readouterr().out == "\n\n"


def test_switching_back_to_interactive(restore_handlers, capsys):
    noninteractive_signals()
    interactive_signals()
    assert signal.getsignal(signal.SIGINT) is reset_prompt
    assert signal.getsignal(signal.SIGQUIT) == signal.SIG_IGN
    _fire_installed(signal.SIGINT)
    assert capsys.readouterr().out == "\n"


def test_reset_prompt_writes_newline(capsys):
    reset_prompt(signal.SIGINT, None)
    assert capsys.readouterr().out == "\n"


def test_print_newline_writes_newline(capsys):
    print_newline(signal.SIGQUIT, None)
    assert capsys.readouterr().out == "\n"