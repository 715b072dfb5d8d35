"""
Quill built-ins: the standard types, groups, commands and functions.

Scope
- register_builtins(registry) fills an explicit Registry once, before any
  Interpreter is built from it; default_registry() returns a fresh one.
- The commands act on a Session-like target: they reach the interpreter
  through `target.interpreter` and print on the quill.log consoles.

Commands
- include FILE (-f, --file): run a script file (nested run).
- eval COMMANDS (-e, --eval): run script text (nested run).
- set NAME VALUE: define a variable holding VALUE verbatim.
- print TEXT (--print): print TEXT and keep it in target.output.
- verbose (-v, --verbose): show informative messages.
- log-level LEVEL (--log-level): error, warning, info, debug or trace.
- version (-V, --version): print the version.
- command-line-help (-h, --help): list the command-line options and exit.
- echo (--echo): print the command line used, quoted, on stderr.

Functions
- $(strip text), $(words a b ...), $(word N a b ...), $(join SEP a b ...)
"""
import logging
import re

from . import __version__, log
from .help import print_commandline_options
from .log import TRACE, logger
from .registry import Registry
from .strings import InterpreterString

VARIABLE_NAME = re.compile(r"[A-Za-z0-9_-]+")


def _variable_name(text, /):
    if not VARIABLE_NAME.fullmatch(text):
        raise ValueError("variable names are made of letters, digits, '_' and '-'")
    return text


def register_builtin_types(registry, /):
    registry.register_type("file", "file", "a file name")
    registry.register_type("text", "string", "plain text")
    registry.register_type("commands", "string", "script commands, as found in command files")
    registry.register_type("boolean", "boolean", "yes or no")
    registry.register_type("float", "float", "a floating-point number")
    registry.register_type("float-or-false", {
        "type": "float",
        "shortcuts": {"none": False},
    }, "a floating-point number, or none")
    registry.register_type("float-list", {
        "type": "array",
        "subtype": "float",
        "separator": r"\s+|\s*,\s*",
        "separator_out": " ",
    }, "space-separated or comma-separated floating-point numbers")
    registry.register_type("text-list", {
        "type": "array",
        "subtype": "string",
        "separator": r"\s*,\s*",
        "alternative_separator": r"\s*\|\|\s*",
        "separator_out": ",",
    }, "comma-separated texts; use || as separator when the texts contain commas")
    registry.register_type("integer", "integer", "an integer")
    registry.register_type("float-range", "float_range", "a START:END range")
    registry.register_type("partial-float-range", "partial_float_range", "a START:END range, either end may be omitted")
    registry.register_type("regexp", "regexp", "a plain text or a /regular expression/")
    registry.register_type("date", "date", "an ISO 8601 date")
    registry.register_type("log-level", {
        "type": "re_list",
        "list": {
            r"(?i)^\s*(error|0)\s*$": logging.ERROR,
            r"(?i)^\s*(warn(ing)?|1)\s*$": logging.WARNING,
            r"(?i)^\s*(info|2)\s*$": logging.INFO,
            r"(?i)^\s*(debug|3)\s*$": logging.DEBUG,
            r"(?i)^\s*(trace|4)\s*$": TRACE,
        },
    }, "a log level: error, warning, info, debug or trace")
    registry.register_type("variable-name", {
        "type": "function",
        "function": _variable_name,
        "expected": "a variable name (letters, digits, '_' and '-')",
    }, "the name of a variable")


def register_builtin_groups(registry, /):
    registry.register_group("general", "general commands", "general scope commands", 1000)
    registry.register_group("variables", "variables", "defining and showing variables", 1010)


def register_builtin_commands(registry, /):

    @registry.command("include", "f", "file", ["file"], descr="runs the given command file", group="general")
    def include(target, file):
        """
        reads the file and runs the commands found in it, using the quill
        script language.
        """
        target.interpreter.run_command_file(file)

    @registry.command("eval", "e", "eval", ["commands"], descr="runs the given commands", group="general")
    def evaluate(target, commands):
        """
        runs the given text as script commands.
        """
        target.interpreter.run_commands(commands)

    @registry.command("set", arguments=["variable-name", "text"], descr="sets a variable", group="variables")
    def define(target, name, value):
        """
        defines a variable holding the value verbatim: it is neither expanded
        again nor split into words when referenced.
        """
        target.interpreter.variables.define(name, InterpreterString.literal(value))

    @registry.command("print", long="print", arguments=["text"], descr="prints the given text", group="variables")
    def show(target, text):
        target.output.append(text)
        log.console.print(text, markup=False, highlight=False)

    @registry.command("verbose", "v", "verbose", descr="makes quill more verbose", group="general")
    def verbose(target):
        """
        with this on, informative messages are shown.
        """
        logger.setLevel(logging.INFO)

    @registry.command("log-level", long="log-level", arguments=["log-level"], descr="sets the logging level", group="general")
    def log_level(target, level):
        logger.setLevel(level)

    @registry.command("version", "V", "version", descr="prints the version", group="general")
    def version(target):
        log.console.print("this is quill version %s" % __version__, highlight=False)

    @registry.command("command-line-help", "h", "help", descr="prints help on command-line options and exits", group="general")
    def command_line_help(target):
        """
        prints the short and long options available from the command line.
        """
        print_commandline_options(target.interpreter.registry.commands.values(), console=log.console)
        raise SystemExit(0)

    @registry.command("echo", long="echo", descr="prints the command line used on standard error", group="general")
    def echo(target):
        """
        writes the whole command line to standard error, quoted so that it can
        be pasted back into a shell.
        """
        log.stderr.print("command line used:", highlight=False)
        log.stderr.print(target.quoted_command_line, markup=False, highlight=False)


def register_builtin_functions(registry, /):

    @registry.function("strip", "collapses runs of whitespace and trims both ends")
    def strip(target, text):
        return " ".join(text.split())

    @registry.function("words", "the number of words")
    def words(target, *words):
        return len(words)

    @registry.function("word", "the N-th word (1-based), empty when out of range")
    def word(target, index, *words):
        index = int(index)
        if index < 1:
            raise ValueError("word index must be at least 1, got %d" % index)
        return words[index - 1] if index <= len(words) else ""

    @registry.function("join", "the words joined with the separator")
    def join(target, separator, *words):
        return separator.join(words)


def register_builtins(registry, /):
    """
    register every built-in type, group, command and function; returns registry.
    """
    register_builtin_types(registry)
    register_builtin_groups(registry)
    register_builtin_commands(registry)
    register_builtin_functions(registry)
    return registry


def default_registry():
    return register_builtins(Registry())


__all__ = (
    "register_builtin_types",
    "register_builtin_groups",
    "register_builtin_commands",
    "register_builtin_functions",
    "register_builtins",
    "default_registry",
)
