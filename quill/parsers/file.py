r"""
script files: one statement per line.

syntax
    # comment
    name := value          immediate variable (expanded now)
    name = value           recursive variable (expanded at each use)
    command arg1 arg2 /option=value /other value

- names are symbols made of letters, digits, '_' and '-'.
- a statement ends at the first newline outside quotes and references, so
  quoted values may span several lines.
- after expansion, the words of a command line are split on whitespace in
  unquoted text only (see InterpreterString.expand_and_split). the first
  words are the compulsory arguments; the following ones are options, given
  as '/name=value', '/name = value' or '/name value'. a boolean option given
  as a bare '/name' is true.

the parser yields statements and never runs anything: the interpreter
expands, converts and dispatches them (see Interpreter.run_commands).
"""
import re
from typing import NamedTuple

from ..faults import ParserSyntaxError, UnexpectedCharacterError, getdoc
from ..lexer import Stream
from ..strings import InterpreterString

SYMBOL = re.compile(r"[A-Za-z0-9_-]")
OPTION = re.compile(r"/([\w-]+)(?:=(.*))?", re.DOTALL)


class Definition(NamedTuple):
    name: str
    value: InterpreterString
    immediate: bool
    line: int


class Invocation(NamedTuple):
    name: str
    text: InterpreterString
    line: int


class FileParser:
    """
    statement reader over a script.

    parameters
    - source: the script text (or a Stream).
    - path: shown in diagnostics; None for in-memory scripts.
    """

    def __init__(self, source, /, path=None):
        self.stream = source if isinstance(source, Stream) else Stream(source, path)
        self.path = path

    def _fail(self, fault, message, line, /, **options):
        raise fault(
            message,
            title="script syntax error",
            code=fault.code,
            file=self.path,
            line=line,
            docs=getdoc(fault.code),
            **options,
        )

    def _skip_blank(self):
        while character := self.stream.read():
            if character == "#":
                while (character := self.stream.read()) and character != "\n":
                    pass
            elif not character.isspace():
                self.stream.unread(character)
                return True
        return False

    def _symbol(self):
        characters = []
        while (character := self.stream.read()) and SYMBOL.match(character):
            characters.append(character)
        self.stream.unread(character)
        return "".join(characters)

    def _skip_spaces(self):
        while (character := self.stream.read()) and character in " \t\r\f\v":
            pass
        self.stream.unread(character)

    def statements(self):
        """
        yield Definition and Invocation statements in document order.

        raises
        - UnexpectedCharacterError: a line that does not start with a symbol,
          or a symbol glued to something else ('print"x"').
        - ParserSyntaxError: ':' not followed by '='.
        - UnterminatedStringError: from the lexer.
        """
        while self._skip_blank():
            line = self.stream.line
            name = self._symbol()
            character = self.stream.read()
            if not name:
                self._fail(
                    UnexpectedCharacterError,
                    "unexpected character %r at the start of line %d" % (character, line),
                    line,
                    hint="start every line with a command name or a variable definition",
                    character=character,
                )

            if character and character not in "#:=" and not character.isspace():
                self._fail(
                    UnexpectedCharacterError,
                    "unexpected character %r after %r on line %d" % (character, name, line),
                    line,
                    hint="separate the command name from its arguments with a space",
                    character=character,
                )
            self.stream.unread(character)
            self._skip_spaces()

            match self.stream.read():
                case ":":
                    if (character := self.stream.read()) != "=":
                        self._fail(
                            ParserSyntaxError,
                            "expected '=' after '%s :' on line %d, got %r" % (name, line, character or "end of file"),
                            line,
                            hint="write immediate definitions as 'name := value'",
                        )
                    yield Definition(name, self._rest(), True, line)
                case "=":
                    yield Definition(name, self._rest(), False, line)
                case character:
                    self.stream.unread(character)
                    yield Invocation(name, self._rest(), line)

    def _rest(self):
        text = InterpreterString.parse(self.stream, "\n")
        self.stream.read()  # the newline, if any
        return text

    def __iter__(self):
        return self.statements()


def split_words(command, words, /):
    """
    split the words of an invocation into (arguments, options).

    the first command.argument_number words are arguments; then options.
    a word that is not an option ends option parsing and is returned with
    the arguments, so that the argument count check reports it.
    """
    count = command.argument_number
    arguments = list(words[:count])
    rest = list(words[count:])
    options = {}
    index = 0
    while index < len(rest):
        if not (match := OPTION.fullmatch(rest[index])):
            arguments.extend(rest[index:])
            break
        name, value = match[1], match[2]
        index += 1
        if value is None:
            following = rest[index] if index < len(rest) else None
            if following == "=":
                value = rest[index + 1] if index + 1 < len(rest) else ""
                index += 2
            elif following is not None and following.startswith("="):
                value = following[1:]
                index += 1
            elif following is not None and not OPTION.fullmatch(following) and not command.is_boolean_option(name):
                value = following
                index += 1
            else:
                value = "true" if command.is_boolean_option(name) else ""
        options[name] = value
    return arguments, options


__all__ = (
    "FileParser",
    "Definition",
    "Invocation",
    "split_words",
)
