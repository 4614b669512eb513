# mshell

`mshell` is a small POSIX-style command shell written as a Python library.
It takes a command line as text and does four things with it. It splits the
line into tokens. It expands variables and removes quotes. It groups the
tokens into a pipeline of commands. Then it runs that pipeline. External
programs are started as child processes. A handful of commands are handled
inside the shell itself.

## What it understands

- **Pipelines**: `cmd1 | cmd2 | cmd3`
- **Redirections**: `< file`, `> file`, `>> file` and here-documents
  `<< DELIM`. When a command has several redirections of one kind, each file
  is opened in turn and the last one is used. A here-document ends at the
  first line that starts with the delimiter.
- **Quoting**: single quotes keep their contents literally. Double quotes
  still expand `$VAR`. The quote characters themselves are removed.
- **Variables**: `$NAME` is replaced with its value from the environment.
  `$?` is replaced with the status of the last command. An unknown variable
  expands to nothing. A word that ends up empty is dropped. Substituted
  values are not expanded a second time.
- **Built-in commands**: `echo` (with `-n`), `cd`, `pwd`, `export`, `unset`
  and `exit`.
  - A built-in that runs on its own changes the shell's state.
  - Inside a longer pipeline, a built-in works on a copy of that state.

### Exit statuses

| Situation | Status |
| --- | --- |
| Syntax error | 2 |
| Command not found | 127 |
| Command found but not executable, or a directory | 126 |
| Child process killed by signal N | 128 + N |

A syntax error is any of the following: a pipe at the start of a line, two
operators in a row, an operator at the end of a line, or an unclosed quote.
Its message is written to the shell's standard error.

## Using it from Python

```python
import os

from mshell.shell import Shell

shell = Shell(os.environ)
shell.run_line("export GREETING=hello")
shell.run_line('echo "$GREETING, world" | tr a-z A-Z')
shell.run_line("ls -l > listing.txt")
```

### Creating a `Shell`

`Shell` takes its environment in one of two forms:

- a mapping, such as `os.environ`;
- an iterable of `NAME=value` strings.

With no argument it uses `os.environ`.

### Running lines

Each call to `Shell.run_line` parses and runs one line. It returns `False`
when nothing was run: a blank line, a syntax error, or a line with no
commands. Otherwise it returns `True`.

The environment and the last exit status carry over from one call to the
next. They are kept in `shell.state`, a `mshell.env.ShellState` with the
fields `env` and `status`. Output goes to `shell.stdout` and `shell.stderr`,
which default to `sys.stdout` and `sys.stderr`.

### Handling `exit`

The `exit` built-in raises `mshell.builtins.ShellExit`. The exception's
`status` attribute holds the exit code, reduced modulo 256. Catch it to stop
your own loop.

### Using the parsing stages on their own

```python
from mshell.lexer import tokenize, validate_tokens
from mshell.env import Environment
from mshell.expand import expand_tokens
from mshell.commands import build_commands

tokens = tokenize("grep -i $PATTERN < input.txt | sort")
validate_tokens(tokens)
env = Environment(["PATTERN=error"])
tokens = expand_tokens(tokens, env, 0)
commands = build_commands(tokens)
```

### Modules

- `mshell.lexer`: `tokenize`, `validate_tokens` (raises `ShellSyntaxError`),
  `has_unclosed_quote` and `drop_empty_tokens`.
- `mshell.expand`: `expand_word` and `expand_tokens`.
- `mshell.commands`: `build_commands`, which turns tokens into `Command`
  objects. Each `Command` has a `name`, `args`, and lists of `inputs` and
  `outputs` that hold `Redirect` objects.
- `mshell.env`: `Environment`, which holds the variables as ordered
  `NAME=value` entries. It provides `find`, `lookup`, `export`, `unset`,
  `as_list` and `as_dict`.
- `mshell.resolve`: `resolve_command`, which finds a program on `PATH` or
  raises `CommandError`.
- `mshell.builtins`: the built-in commands and `run_builtin`.
- `mshell.redirect`: `open_input`, `open_output` and `read_heredoc`.
- `mshell.executor`: `execute`, which runs a list of commands joined by pipes
  and returns the new status.
- `mshell.signals`: `interactive_signals` and `noninteractive_signals`, which
  install SIGINT and SIGQUIT handlers.

## What it does not do

`mshell` is a library only. It has no interactive program or command to
start it: there is no prompt loop, no line editing and no command history. A
caller has to read lines and hand them to `Shell.run_line` itself.

Here-documents are the one exception. Their lines are read from standard
input with `input()`, using the prompt `>`.

Only the features listed above are supported. The shell has none of the
following:

- `&&`, `||` or `;`
- subshells
- globbing
- background jobs
- scripting constructs