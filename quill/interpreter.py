"""
Quill interpreter: scripts and command lines in, command callbacks out.

Overview
- Interpreter(registry, target, ...) snapshots the registry: commands,
  types and functions registered afterwards are invisible to it.
- run_commands(text) / run_command_file(path) read script statements (see
  quill.parsers.file), define variables and dispatch invocations in
  document order.
- run_command_line(argv) maps flags to commands (see
  quill.parsers.commandline) and dispatches them through the same
  conversion path.
- run_command(command, arguments, options) converts raw values through the
  command's argument types, calls the callback with the execution target
  and returns the Instruction that ran.

Faults
- Every invocation is a boundary. A recoverable fault raised inside it
  (unknown command, bad value, wrong count, failing callback...) is located
  with the parsing context and, when `deferred` is set, recorded in
  `faults`, logged, and processing resumes with the next invocation.
- Structural faults (unterminated strings, malformed lines, runaway
  nesting) are located and propagate, aborting the enclosing run.
- Nested runs (include, eval, hooks calling back into the interpreter) are
  bounded by `max_depth` (RecursionDepthError).

Quick example:
    >>> from quill import Interpreter, Session, default_registry
    >>> session = Session()
    >>> interpreter = Interpreter(default_registry(), session, environment=False)
    >>> interpreter.run_commands('set x "a b"\\nprint $(x)')
    >>> session.output
    ['a b']
"""
import os
import re
from contextlib import contextmanager
from pathlib import Path

from . import faults
from .context import ParsingContext
from .faults import (
    QuillException,
    QuillWarning,
    DelegatedCommandError,
    RecursionDepthError,
    FaultCode,
    getdoc,
)
from .instruction import Instruction
from .log import logger, trace
from .parsers import CommandLineParser, Definition, FileParser, Invocation, split_words
from .strings import InterpreterString
from .variables import Variables

WHITESPACE = re.compile(r"\s+")
ENVIRONMENT_NAME = re.compile(r"[A-Za-z0-9_-]+")


class Interpreter:
    """
    per-run orchestrator.

    parameters
    - registry: the Registry to snapshot.
    - target: object passed first to every command and function callback.
    - environment: import os.environ as variables.
    - shell: render faults on the console instead of raising them.
    - fancy / colorful: presentation of rendered faults.
    - deferred: record recoverable faults and continue.
    - max_depth: bound on nested runs.
    """

    def __init__(
            self,
            registry,
            target=None,
            /,
            *,
            environment=True,
            shell=False,
            fancy=False,
            colorful=True,
            deferred=True,
            max_depth=64,
    ):
        self.registry = registry.snapshot()
        self.target = target
        self.variables = Variables()
        self.context = ParsingContext()
        self.faults = []
        self.shell = shell
        self.fancy = fancy
        self.colorful = colorful
        self.deferred = deferred
        self.max_depth = max_depth
        self.depth = 0
        if hasattr(target, "interpreter"):
            target.interpreter = self
        if environment:
            for name, value in os.environ.items():
                if ENVIRONMENT_NAME.fullmatch(name):
                    self.variables.define(name, value)

    # --- lookups ---

    def get_command(self, name, /):
        return self.registry.get_command(name)

    def delete_command(self, name, /):
        """
        remove a command from this interpreter only; the registry it was
        built from keeps it.
        """
        return self.registry.delete_command(name)

    def get_function(self, name, /):
        return self.registry.get_function(name)

    def command_names(self):
        return sorted(self.registry.commands)

    def expand(self, text, /):
        """
        expand every reference of a script fragment into a plain string.
        """
        return InterpreterString.parse(text, strict=True).expand_to_string(self)

    # --- faults ---

    def trigger(self, fault, /, **options):
        """
        surface a fault raised while interpreting.

        warnings go through faults.trigger with the interpreter flags. errors
        are located; recoverable ones are recorded when deferred (and the
        located copy returned), the others propagate.
        """
        options = {
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
            **options,
        }
        if "location" not in fault.options and "location" not in options:
            if (location := str(self.context)) != "top level":
                options["location"] = location

        if isinstance(fault, QuillWarning):
            return faults.trigger(fault, **options)

        deferred = self.deferred and fault.recoverable
        fault = fault.__replace__(deferred=deferred, **options)
        if not deferred:
            if self.shell:
                fault.__trigger__()
            raise fault from fault.__cause__

        self.faults.append(fault)
        if self.shell:
            fault.__trigger__()
        else:
            logger.error("%s", fault)
        return fault

    @contextmanager
    def _boundary(self):
        try:
            yield
        except QuillException as fault:
            self.trigger(fault)

    @contextmanager
    def _nested(self):
        if self.depth >= self.max_depth:
            raise RecursionDepthError(
                "nesting deeper than %d runs" % self.max_depth,
                title="recursion too deep",
                code=FaultCode.RECURSION_DEPTH,
                hint="check for scripts including or evaluating themselves",
                depth=self.depth,
                docs=getdoc(FaultCode.RECURSION_DEPTH),
            )
        self.depth += 1
        try:
            with self.context.scope():
                yield
        finally:
            self.depth -= 1

    # --- running ---

    def run_command(self, command, arguments=(), options=None, /):
        """
        convert raw values and run command on the target.

        parameters
        - command: a Command or a command name.
        - arguments: raw compulsory values (texts are converted).
        - options: raw option values by name.

        returns
        - the Instruction that ran.
        """
        if isinstance(command, str):
            command = self.get_command(command)
        self.context.parsing_command(command.name)
        instruction = Instruction(
            command,
            command.convert_arguments(arguments),
            command.convert_options(options or {}, trigger=self.trigger),
        )
        logger.debug("running %s", instruction)
        try:
            instruction.run(self.target)
        except QuillException:
            raise
        except Exception as exception:
            raise DelegatedCommandError(
                "command %r failed: %s" % (command.name, exception),
                title="command error",
                code=FaultCode.DELEGATED_ERROR,
                hint="check the values given to %r" % command.name,
                command=command.name,
                exception=exception,
                docs=getdoc(FaultCode.DELEGATED_ERROR),
            ) from exception
        return instruction

    def _invoke(self, name, text, /):
        command = self.get_command(name)
        words = text.expand_and_split(WHITESPACE, self)
        trace("words of %r: %s", name, words)
        arguments, options = split_words(command, words)
        return self.run_command(command, arguments, options)

    def run_commands(self, text, /, path=None):
        """
        run a script given as text; path only locates diagnostics.

        returns
        - the list of Instructions that ran.
        """
        instructions = []
        with self._nested():
            try:
                for statement in FileParser(text, path):
                    match statement:
                        case Definition(name, value, immediate, line):
                            self.context.parsing_file(None, path, line)
                            with self._boundary():
                                self.variables.define(name, value, self if immediate else None)
                                trace("defined %r", name)
                        case Invocation(name, arguments, line):
                            self.context.parsing_file(name, path, line)
                            with self._boundary():
                                instructions.append(self._invoke(name, arguments))
            except QuillException as fault:
                if "location" in fault.options:
                    raise
                self.trigger(fault, location=_where(path, fault.options.get("line")))
        return instructions

    def run_command_file(self, path, /):
        """
        run a script file; the target's figure_name defaults to its stem.
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        if hasattr(self.target, "figure_name") and not self.target.figure_name:
            self.target.figure_name = path.stem
        logger.info("running %s", path)
        return self.run_commands(text, path=str(path))

    def run_command_line(self, argv, /, default=None):
        """
        run the commands given as command-line flags.

        parameters
        - argv: the words (without the program name).
        - default: optional command (or name) receiving non-flag words;
          without one such words are returned.

        returns
        - the words no command took.
        """
        if isinstance(default, str):
            default = self.get_command(default)
        commands = list(self.registry.commands.values())
        parser = CommandLineParser(commands, default)
        leftovers = []
        with self._nested():
            calls = parser.parse(argv, trigger=self.trigger)
            while True:
                self.context.parsing_option(None, None)
                with self._boundary():
                    try:
                        call = next(calls)
                    except StopIteration:
                        break
                    if call.command is None:
                        leftovers.extend(call.arguments)
                        continue
                    self.context.parsing_option(call.spelling, call.number, call.command.name)
                    self.run_command(call.command, call.arguments, call.options)
        return leftovers

    def __repr__(self):
        return "Interpreter(commands=%d, variables=%d, depth=%d)" % (
            len(self.registry.commands), len(self.variables), self.depth
        )


def _where(path, line, /):
    where = "file %r" % path if path else "script"
    return where + (", line %d" % line if line else "")


__all__ = (
    "Interpreter",
)
