import io
import os
import sys

import pytest

from mshell.builtins import ShellExit
from mshell.shell import Shell


def make_shell(environ=None):
    shell = Shell(environ if environ is not None else {"PATH": os.environ.get("PATH", "")})
    shell.stdout = io.StringIO()
    shell.stderr = io.StringIO()
    return shell


def test_echo_line():
    shell = make_shell()
    assert shell.run_line("echo hello") is True
    assert shell.stdout.getvalue() == "hello\n"


def test_environment_from_entries():
    shell = make_shell(["A=b"])
    shell.run_line("echo $A")
    assert shell.stdout.getvalue() == "b\n"


def test_blank_line_does_nothing():
    shell = make_shell()
    assert shell.run_line("   \t ") is False
    assert shell.stdout.getvalue() == ""
    assert shell.state.status == 0


def test_unclosed_quote():
    shell = make_shell()
    assert shell.run_line("echo 'abc") is False
    assert shell.state.status == 2
    assert shell.stderr.getvalue() == "unexpected EOF while looking for matching\n"


def test_leading_pipe_is_syntax_error():
    shell = make_shell()
    assert shell.run_line("| echo") is False
    assert shell.state.status == 2
    assert shell.stderr.getvalue() == "parse error near `|'\n"


def test_status_variable_after_error():
    shell = make_shell()
    shell.run_line("echo >")
    shell.run_line("echo $?")
    assert shell.stdout.getvalue() == "2\n"


def test_variable_expansion():
    shell = make_shell({"HOME": "/home/someone"})
    shell.run_line('echo "$HOME" \'$HOME\'')
    assert shell.stdout.getvalue() == "/home/someone $HOME\n"


def test_export_persists_between_lines():
    shell = make_shell()
    shell.run_line("export A=1")
    shell.run_line("echo $A")
    assert shell.stdout.getvalue() == "1\n"


def test_unset_removes_variable():
    shell = make_shell({"GONE": "x"})
    shell.run_line("unset GONE")
    assert shell.state.env.find("GONE") is None


def test_exit_raises_with_status():
    shell = make_shell()
    with pytest.raises(ShellExit) as info:
        shell.run_line("exit 5")
    assert info.value.status == 5


def test_output_redirect(tmp_path):
    target = tmp_path / "out.txt"
    shell = make_shell()
    shell.run_line(f"echo hi > '{target}'")
    assert target.read_text() == "hi\n"
    assert shell.stdout.getvalue() == ""


def test_pipeline_with_program():
    shell = make_shell()
    line = (f"echo abc | '{sys.executable}' -c "
            "'import sys; sys.stdout.write(sys.stdin.read().upper())'")
    assert shell.run_line(line) is True
    assert shell.stdout.getvalue() == "ABC\n"
    assert shell.state.status == 0


def test_command_not_found(tmp_path):
    shell = make_shell({"PATH": str(tmp_path)})
    shell.run_line("nosuchcmd")
    assert shell.state.status == 127
    assert "command not found" in shell.stderr.getvalue()


def test_empty_expansion_leaves_nothing_to_run():
    shell = make_shell({})
    assert shell.run_line("$NOTHING") is False
    assert shell.stdout.getvalue() == ""