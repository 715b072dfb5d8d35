r"""
quill lexical analyzer: raw script text → quoted/unquoted/variable segments.

overview
- Stream: character source over a string with push-back and line tracking.
- State / SegmentKind: enums for the analyzer states and the segment kinds.
- TRANSITIONS: explicit table (state, character class) → (action, next state).
- LexicalAnalyzer: drives the table until a terminator or end of input.

grammar (informal)
- leading whitespace is skipped.
- '...'     literal text, no interpolation, no escapes.
- "..."     text with escapes (\n, \t, \\, \", \$ …) and $(...) references.
- $(name)   variable reference (or function call, see quill.variables).
- $ not followed by ( is a literal dollar sign.
- # outside quotes comments out the rest of the line (the newline stays).

segments
- text gathered in the top state becomes an "unquoted" segment, text from
  quotes becomes "quoted", references become "unquoted_variable" or
  "quoted_variable" depending on where they appear. empty segments are
  never produced.

example
    >>> LexicalAnalyzer(Stream('a "b c" d')).parse()
    [Segment(kind=<SegmentKind.UNQUOTED: 'unquoted'>, text='a '), ...]
"""
from enum import Enum, StrEnum, auto
from typing import NamedTuple

from .faults import UnterminatedStringError, FaultCode, getdoc
from .utils import Unset

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "e": "\x1b",
    "f": "\f",
    "v": "\v",
    "s": " ",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "$": "$",
}


class State(Enum):
    START = auto()
    TOP = auto()
    SINGLE = auto()
    DOUBLE = auto()
    DOLLAR = auto()
    DQ_DOLLAR = auto()
    VAR = auto()
    DQ_VAR = auto()
    ESCAPE = auto()


class SegmentKind(StrEnum):
    UNQUOTED = "unquoted"
    QUOTED = "quoted"
    UNQUOTED_VARIABLE = "unquoted_variable"
    QUOTED_VARIABLE = "quoted_variable"

    @property
    def variable(self):
        return self in (SegmentKind.UNQUOTED_VARIABLE, SegmentKind.QUOTED_VARIABLE)

    @property
    def quoted(self):
        return self in (SegmentKind.QUOTED, SegmentKind.QUOTED_VARIABLE)


class Segment(NamedTuple):
    kind: SegmentKind
    text: str


class Action(Enum):
    APPEND = auto()          # keep the character
    SKIP = auto()            # drop the character
    PUSH = auto()            # close the pending segment, drop the character
    STOP = auto()            # close the pending segment, push the character back, stop
    COMMENT = auto()         # drop everything up to (not including) the newline
    DOLLAR = auto()          # keep a literal '$', then re-read the character
    REPLAY = auto()          # re-read the character in the next state
    ESCAPE = auto()          # keep the translated escape sequence


# segment kind produced when the pending text is closed in a given state
KINDS = {
    State.START: SegmentKind.UNQUOTED,
    State.TOP: SegmentKind.UNQUOTED,
    State.SINGLE: SegmentKind.QUOTED,
    State.DOUBLE: SegmentKind.QUOTED,
    State.DOLLAR: SegmentKind.UNQUOTED,
    State.DQ_DOLLAR: SegmentKind.QUOTED,
    State.VAR: SegmentKind.UNQUOTED_VARIABLE,
    State.DQ_VAR: SegmentKind.QUOTED_VARIABLE,
    State.ESCAPE: SegmentKind.QUOTED,
}

# literal text owed when input ends in a given state
PENDING = {
    State.DOLLAR: "$",
    State.DQ_DOLLAR: "$",
    State.ESCAPE: "\\",
}

# states that cannot legally end the input, with the missing closer
UNTERMINATED = {
    State.SINGLE: ("single-quoted string", "'"),
    State.DOUBLE: ("double-quoted string", '"'),
    State.DQ_DOLLAR: ("double-quoted string", '"'),
    State.ESCAPE: ("double-quoted string", '"'),
    State.VAR: ("variable reference", "')'"),
    State.DQ_VAR: ("variable reference", "')'"),
}

# character classes; "*" is the fallback for any other character
TRANSITIONS = {
    (State.START, "space"): (Action.SKIP, State.START),
    (State.START, "terminator"): (Action.STOP, State.START),
    (State.START, "*"): (Action.REPLAY, State.TOP),

    (State.TOP, "terminator"): (Action.STOP, State.TOP),
    (State.TOP, "'"): (Action.PUSH, State.SINGLE),
    (State.TOP, '"'): (Action.PUSH, State.DOUBLE),
    (State.TOP, "$"): (Action.SKIP, State.DOLLAR),
    (State.TOP, "#"): (Action.COMMENT, State.TOP),
    (State.TOP, "*"): (Action.APPEND, State.TOP),

    (State.SINGLE, "'"): (Action.PUSH, State.TOP),
    (State.SINGLE, "*"): (Action.APPEND, State.SINGLE),

    (State.DOUBLE, '"'): (Action.PUSH, State.TOP),
    (State.DOUBLE, "\\"): (Action.SKIP, State.ESCAPE),
    (State.DOUBLE, "$"): (Action.SKIP, State.DQ_DOLLAR),
    (State.DOUBLE, "*"): (Action.APPEND, State.DOUBLE),

    (State.DOLLAR, "("): (Action.PUSH, State.VAR),
    (State.DOLLAR, "*"): (Action.DOLLAR, State.TOP),

    (State.DQ_DOLLAR, "("): (Action.PUSH, State.DQ_VAR),
    (State.DQ_DOLLAR, "*"): (Action.DOLLAR, State.DOUBLE),

    (State.VAR, ")"): (Action.PUSH, State.TOP),
    (State.VAR, "*"): (Action.APPEND, State.VAR),

    (State.DQ_VAR, ")"): (Action.PUSH, State.DOUBLE),
    (State.DQ_VAR, "*"): (Action.APPEND, State.DQ_VAR),

    (State.ESCAPE, "*"): (Action.ESCAPE, State.DOUBLE),
}


class Stream:
    """
    character stream over a string with push-back and line tracking.

    read() returns "" at end of input. line is 1-based and follows every
    newline read (and un-read).
    """

    def __init__(self, text, /, name=Unset, line=1):
        if not isinstance(text, str):
            raise TypeError("stream text must be a string")
        self.text = text
        self.name = name
        self.position = 0
        self.line = line

    def read(self):
        if self.position >= len(self.text):
            return ""
        character = self.text[self.position]
        self.position += 1
        if character == "\n":
            self.line += 1
        return character

    def unread(self, character, /):
        if not character:
            return
        self.position -= 1
        if character == "\n":
            self.line -= 1

    def __repr__(self):
        return "Stream(name=%r, line=%d, position=%d)" % (self.name, self.line, self.position)


class LexicalAnalyzer:
    """
    table-driven tokenizer splitting text into segments.

    parameters
    - stream: Stream to read from (left positioned on the terminator).
    - terminators: characters ending the segment list when seen outside
      quotes and references (e.g. "\n" for one script line).
    """

    def __init__(self, stream, /, terminators=""):
        self.stream = stream
        self.terminators = frozenset(terminators)

    def _classify(self, state, character):
        if state in (State.START, State.TOP) and character in self.terminators:
            return "terminator"
        if state is State.START and character.isspace():
            return "space"
        if (state, character) in TRANSITIONS:
            return character
        return "*"

    def parse(self, strict=True):
        """
        read segments until a terminator (left in the stream) or end of input.

        parameters
        - strict: when True, end of input inside quotes, a reference or an
          escape raises UnterminatedStringError; otherwise the pending text is
          kept as a segment of the open context.

        returns
        - list[Segment]
        """
        segments = []
        current = []
        state = State.START
        start = self.stream.line

        def close(kind):
            if text := "".join(current):
                segments.append(Segment(kind, text))
            current.clear()

        while character := self.stream.read():
            action, following = TRANSITIONS[state, self._classify(state, character)]
            match action:
                case Action.APPEND:
                    current.append(character)
                case Action.SKIP:
                    pass
                case Action.PUSH:
                    close(KINDS[state])
                case Action.STOP:
                    self.stream.unread(character)
                    close(KINDS[state])
                    return segments
                case Action.COMMENT:
                    while (character := self.stream.read()) and character != "\n":
                        pass
                    self.stream.unread(character)
                case Action.DOLLAR:
                    current.append("$")
                    self.stream.unread(character)
                case Action.REPLAY:
                    self.stream.unread(character)
                case Action.ESCAPE:
                    current.append(ESCAPES.get(character, character))
            state = following

        if strict and state in UNTERMINATED:
            construct, closer = UNTERMINATED[state]
            raise UnterminatedStringError(
                "unterminated %s starting on line %d" % (construct, start),
                title="unterminated string",
                code=FaultCode.UNTERMINATED_STRING,
                hint="close the %s with %s" % (construct, closer),
                line=start,
                docs=getdoc(FaultCode.UNTERMINATED_STRING),
            )

        current.append(PENDING.get(state, ""))
        close(KINDS[state])
        return segments


def tokenize(text, /, terminators="", strict=True):
    """
    shortcut: segments of a whole string.
    """
    return LexicalAnalyzer(Stream(text), terminators).parse(strict)


__all__ = (
    "State",
    "SegmentKind",
    "Segment",
    "Stream",
    "LexicalAnalyzer",
    "tokenize",
    "TRANSITIONS",
)
