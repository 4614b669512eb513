"""Running the commands of a pipeline."""

from __future__ import annotations

import contextlib
import io
import subprocess
import tempfile
import threading
from typing import IO, Optional, Sequence, TextIO, Union

from .builtins import ShellExit, is_builtin, run_builtin
from .commands import Command
from .env import Environment, ShellState
from .redirect import RedirectError, open_input, open_output
from .resolve import CommandError, posix_status, resolve_command
from .signals import interactive_signals, noninteractive_signals

_Input = Union[None, bytes, IO[bytes]]


def exit_status(returncode: int) -> int:
    """Turn a child's return code into the shell's status; signals give 128+N."""
    if returncode < 0:
        return posix_status(128 - returncode)
    return posix_status(returncode)


def _terminal_reader(prompt: str) -> Optional[str]:
    with contextlib.suppress(ValueError):
        interactive_signals()
    try:
        return input(prompt)
    except EOFError:
        return None
    finally:
        with contextlib.suppress(ValueError):
            noninteractive_signals()


def _fileno(stream: TextIO) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _discard(handle: _Input) -> None:
    if handle is not None and not isinstance(handle, bytes):
        handle.close()


def _feed(pipe: IO[bytes], data: bytes) -> None:
    try:
        pipe.write(data)
    except OSError:
        pass
    finally:
        with contextlib.suppress(OSError):
            pipe.close()


def _run_single_builtin(state: ShellState, command: Command, stdout: TextIO,
                        stderr: TextIO) -> None:
    try:
        infile = open_input(command.inputs, _terminal_reader, stderr)
    except RedirectError:
        state.status = 1
        return
    _discard(infile)
    try:
        outfile = open_output(command.outputs, stderr)
    except RedirectError:
        state.status = 1
        return
    if outfile is not None and command.name == "exit":
        outfile.close()
        outfile = None
    if outfile is None:
        run_builtin(state, command.args, stdout, stderr)
        return
    with io.TextIOWrapper(outfile, encoding="utf-8") as target:
        run_builtin(state, command.args, target, stderr)


class _Pipeline:
    """Starts each stage with its input taken from the stage before."""

    def __init__(self, state: ShellState, stdout: TextIO, stderr: TextIO) -> None:
        self.state = state
        self.stdout = stdout
        self.stderr = stderr
        self.out_fd = _fileno(stdout)
        self.err_fd = _fileno(stderr)
        self.out_sink: Optional[IO[bytes]] = None
        self.err_sink: Optional[IO[bytes]] = (
            tempfile.TemporaryFile() if self.err_fd is None else None
        )
        self.processes: list[subprocess.Popen] = []
        self.feeders: list[threading.Thread] = []

    def run(self, commands: Sequence[Command]) -> int:
        previous: _Input = None
        status = self.state.status
        process: Optional[subprocess.Popen] = None
        try:
            for position, command in enumerate(commands):
                last = position == len(commands) - 1
                previous, status, process = self._stage(command, previous, last)
            for running in self.processes:
                running.wait()
            for feeder in self.feeders:
                feeder.join()
            self._copy_sinks()
        finally:
            for sink in (self.out_sink, self.err_sink):
                if sink is not None:
                    sink.close()
        if process is not None:
            return exit_status(process.returncode)
        return posix_status(status)

    @staticmethod
    def _empty(last: bool) -> _Input:
        return None if last else b""

    def _flush(self) -> None:
        for stream in (self.stdout, self.stderr):
            with contextlib.suppress(OSError, ValueError):
                stream.flush()

    def _copy_sinks(self) -> None:
        for sink, stream in ((self.out_sink, self.stdout), (self.err_sink, self.stderr)):
            if sink is not None:
                sink.seek(0)
                stream.write(sink.read().decode("utf-8", errors="replace"))

    def _stage(self, command: Command, source: _Input, last: bool):
        try:
            infile = open_input(command.inputs, _terminal_reader, self.stderr)
        except RedirectError:
            _discard(source)
            return self._empty(last), 1, None
        try:
            outfile = open_output(command.outputs, self.stderr)
        except RedirectError:
            _discard(source)
            _discard(infile)
            return self._empty(last), 1, None
        if command.name is None:
            for handle in (source, infile, outfile):
                _discard(handle)
            return self._empty(last), self.state.status, None
        if is_builtin(command.name):
            _discard(source)
            _discard(infile)
            return self._builtin(command, outfile, last)
        return self._external(command, source, infile, outfile, last)

    def _builtin(self, command: Command, outfile: Optional[IO[bytes]], last: bool):
        child = ShellState(Environment(self.state.env.as_list()), self.state.status)
        buffer = io.StringIO()
        try:
            status = run_builtin(child, command.args, buffer, self.stderr)
        except ShellExit as exc:
            status = exc.status
        data = buffer.getvalue()
        if outfile is not None:
            with outfile:
                outfile.write(data.encode("utf-8"))
            return self._empty(last), status, None
        if not last:
            return data.encode("utf-8"), status, None
        self.stdout.write(data)
        self._flush()
        return None, status, None

    def _external(self, command: Command, source: _Input, infile, outfile, last: bool):
        stdin_source: _Input = infile if infile is not None else source
        handles = (source, infile, outfile)
        try:
            path = resolve_command(command.name, self.state.env)
        except CommandError as exc:
            self.stderr.write(f"{exc.message}\n")
            for handle in handles:
                _discard(handle)
            return self._empty(last), exc.status, None
        if outfile is not None:
            stdout_target = outfile
        elif not last:
            stdout_target = subprocess.PIPE
        elif self.out_fd is not None:
            stdout_target = self.out_fd
        else:
            self.out_sink = tempfile.TemporaryFile()
            stdout_target = self.out_sink
        feed = stdin_source if isinstance(stdin_source, bytes) else None
        stdin_target = subprocess.PIPE if feed is not None else stdin_source
        stderr_target = self.err_fd if self.err_fd is not None else self.err_sink
        self._flush()
        try:
            process = subprocess.Popen(
                command.args,
                executable=path,
                stdin=stdin_target,
                stdout=stdout_target,
                stderr=stderr_target,
                env=self.state.env.as_dict(),
            )
        except OSError:
            return self._empty(last), self.state.status, None
        finally:
            for handle in handles:
                _discard(handle)
        self.processes.append(process)
        if feed is not None:
            feeder = threading.Thread(target=_feed, args=(process.stdin, feed), daemon=True)
            feeder.start()
            self.feeders.append(feeder)
        following = process.stdout if stdout_target is subprocess.PIPE else self._empty(last)
        return following, 0, process


def execute(state: ShellState, commands: Sequence[Command], stdout: TextIO,
            stderr: TextIO) -> int:
    """Run a pipeline and return the shell's new status.

    A lone builtin runs in the shell itself and may change its state; in a
    longer pipeline every stage works on a copy. ``exit`` run alone raises
    :class:`ShellExit`.
    """
    if not commands:
        return state.status
    if len(commands) == 1 and is_builtin(commands[0].name):
        _run_single_builtin(state, commands[0], stdout, stderr)
        return state.status
    state.status = _Pipeline(state, stdout, stderr).run(commands)
    return state.status