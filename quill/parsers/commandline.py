"""
command-line parsing: argv → command invocations.

every command with a long spelling is reachable as --long (and -s when it
has a short one). the words following a flag are its compulsory arguments,
then come its options as '/name=value' or '/name value'.

- boolean commands (one boolean argument) take no word: --grid gives
  [True], --no-grid gives [False].
- short flags may be bundled: -ab is -a then -b, each taking its own
  arguments from the following words.
- a word that is not a flag goes to the default command when there is one,
  otherwise it is handed back to the caller (see CommandLineParser.parse).
- a word looking like an option the command does not declare ends option
  parsing with an IgnoredOptionWarning.
- a bare '/name' is true for a boolean option; other options take the
  next word unless it is itself a flag or an option.
"""
import difflib
import re
from typing import NamedTuple

from ..faults import (
    IgnoredOptionWarning,
    OptionRedefinedError,
    UnknownCommandError,
    FaultCode,
    getdoc,
    trigger as _trigger,
)

OPTION = re.compile(r"/([\w-]+)(?:=(.*))?", re.DOTALL)
FLAG = re.compile(r"-{1,2}[A-Za-z]")


class Call(NamedTuple):
    """
    one command found on the command line (or a stray word when command is None).
    """
    command: object
    arguments: list
    options: dict
    spelling: str
    number: int


class CommandLineParser:
    """
    maps command-line spellings to commands.

    parameters
    - commands: iterable of Command.
    - default: optional Command receiving the words that are not flags.

    raises
    - OptionRedefinedError: two commands claim the same spelling.
    """

    def __init__(self, commands, /, default=None):
        self.short = {}
        self.long = {}
        self.default = default
        for command in commands:
            if command.short:
                self._claim(self.short, command.short, command, "-")
            if command.long:
                self._claim(self.long, command.long, command, "--")
                if command.boolean:
                    self._claim(self.long, "no-" + command.long, command, "--")

    @staticmethod
    def _claim(table, spelling, command, dashes, /):
        if (owner := table.get(spelling)) is not None:
            raise OptionRedefinedError(
                "option %s%s of command %r is already used by command %r" % (dashes, spelling, command.name, owner.name),
                title="option redefined",
                code=FaultCode.OPTION_REDEFINED,
                hint="give one of the commands another spelling",
                option=dashes + spelling,
                command=command.name,
                owner=owner.name,
                docs=getdoc(FaultCode.OPTION_REDEFINED),
            )
        table[spelling] = command

    def _unknown(self, spelling, /):
        candidates = ["--" + name for name in self.long] + ["-" + name for name in self.short]
        suggestions = difflib.get_close_matches(spelling, candidates, 3)
        raise UnknownCommandError(
            "unknown command-line option %r" % spelling,
            title="unknown option",
            code=FaultCode.UNKNOWN_COMMAND,
            hint=("did you mean %r?" % suggestions[0]) if suggestions else "run with --help to list the options",
            option=spelling,
            suggestions=suggestions,
            docs=getdoc(FaultCode.UNKNOWN_COMMAND),
        )

    def _extract(self, argv, command, sentinel, /, trigger):
        """
        take the arguments and options of command from the front of argv.
        """
        if sentinel is not None:
            arguments = [sentinel]
        else:
            arguments = argv[:command.argument_number]
            del argv[:command.argument_number]

        options = {}
        while argv and (match := OPTION.fullmatch(argv[0])):
            if not command.has_option(match[1]):
                trigger(IgnoredOptionWarning(
                    "%r looks like an option but command %r has no option %r" % (argv[0], command.name, match[1]),
                    title="ignored option",
                    code=FaultCode.IGNORED_OPTION,
                    hint="it is treated as a plain word",
                    command=command.name,
                    option=match[1],
                    docs=getdoc(FaultCode.IGNORED_OPTION),
                ))
                break
            argv.pop(0)
            if match[2] is not None:
                options[match[1]] = match[2]
            elif command.is_boolean_option(match[1]):
                options[match[1]] = "true"
            elif argv and not self._flag(argv[0]):
                options[match[1]] = argv.pop(0)
            else:
                options[match[1]] = ""
        return arguments, options

    @staticmethod
    def _flag(word, /):
        return bool(OPTION.fullmatch(word) or FLAG.match(word))

    def parse(self, argv, /, trigger=_trigger):
        """
        yield a Call per command found in argv, in order.

        words that are neither flags nor consumed by a command are yielded as
        Call(None, [word], {}, word, number) when there is no default command.

        raises
        - UnknownCommandError: an unknown --long or -s spelling.
        """
        argv = list(argv)
        number = 0
        while argv:
            current = argv.pop(0)
            if current.startswith("--") and len(current) > 2:
                spelling = current[2:]
                if (command := self.long.get(spelling)) is None:
                    self._unknown(current)
                sentinel = None
                if command.boolean:
                    sentinel = not spelling.startswith("no-") or spelling == command.long
                number += 1
                arguments, options = self._extract(argv, command, sentinel, trigger=trigger)
                yield Call(command, arguments, options, current, number)
            elif current.startswith("-") and len(current) > 1 and current != "--":
                for short in current[1:]:
                    if (command := self.short.get(short)) is None:
                        self._unknown("-" + short)
                    number += 1
                    arguments, options = self._extract(argv, command, True if command.boolean else None, trigger=trigger)
                    yield Call(command, arguments, options, "-" + short, number)
            elif self.default is not None:
                argv.insert(0, current)
                number += 1
                arguments, options = self._extract(argv, self.default, None, trigger=trigger)
                yield Call(self.default, arguments, options, "(default)", number)
            else:
                number += 1
                yield Call(None, [current], {}, current, number)


__all__ = (
    "CommandLineParser",
    "Call",
)
