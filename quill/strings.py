r"""
interpreter strings: lexed text that still has to be expanded.

an InterpreterString is an ordered list of segments (see quill.lexer). it is
produced by the lexer, stored as the value of recursive variables, and
expanded by the interpreter right before a command runs.

expansion
- expand(interpreter) substitutes every variable/function reference and
  returns a new InterpreterString holding only quoted and unquoted segments.
- expand_to_string(interpreter) concatenates the expanded text.
- expand_and_split(separator, interpreter) splits the expanded text into
  words, but only inside unquoted segments: quoted text never splits and is
  glued to its neighbours ('a"b c"d' is the single word "ab cd"). an empty
  result is an empty list.
"""
import re

from .lexer import LexicalAnalyzer, Segment, SegmentKind, Stream


class InterpreterString:
    """
    ordered (kind, text) segments awaiting expansion.

    instances are immutable; expand() returns a new instance.
    """
    __slots__ = ("_segments",)

    def __init__(self, segments=(), /):
        self._segments = tuple(Segment(SegmentKind(kind), text) for kind, text in segments)

    @classmethod
    def parse(cls, source, /, terminators="", strict=True):
        """
        lex source (a string or a Stream) up to an unquoted terminator.
        """
        stream = source if isinstance(source, Stream) else Stream(source)
        return cls(LexicalAnalyzer(stream, terminators).parse(strict))

    @classmethod
    def literal(cls, text, /):
        """
        a single quoted segment: expands to text, verbatim and unsplit.
        """
        return cls(((SegmentKind.QUOTED, text),) if text else ())

    @property
    def segments(self):
        return self._segments

    @property
    def references(self):
        """
        names (or function calls) referenced, in order of appearance.
        """
        return tuple(segment.text.strip() for segment in self._segments if segment.kind.variable)

    @property
    def expanded(self):
        """
        True when no reference is left to substitute.
        """
        return not self.references

    def expand(self, interpreter, /):
        segments = []
        for segment in self._segments:
            if segment.kind.variable:
                segments.extend(interpreter.variables.expand_reference(
                    segment.text,
                    interpreter,
                    quoted=segment.kind is SegmentKind.QUOTED_VARIABLE,
                ))
            else:
                segments.append(segment)
        return type(self)(segments)

    def expand_to_string(self, interpreter, /):
        return "".join(segment.text for segment in self.expand(interpreter).segments)

    def expand_and_split(self, separator, interpreter, /):
        """
        expand, then split unquoted text on separator (a regex or pattern).
        """
        separator = re.compile(separator) if isinstance(separator, str) else separator
        words = []
        current = None  # None: no word started yet
        for kind, text in self.expand(interpreter).segments:
            if kind.quoted:
                current = (current or "") + text
                continue
            for index, piece in enumerate(separator.split(text)):
                if index and current is not None:
                    words.append(current)
                    current = None
                if piece:
                    current = (current or "") + piece
        if current is not None:
            words.append(current)
        return words

    def __iter__(self):
        return iter(self._segments)

    def __len__(self):
        return len(self._segments)

    def __bool__(self):
        return bool(self._segments)

    def __eq__(self, other):
        if not isinstance(other, InterpreterString):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self):
        return hash(self._segments)

    def __str__(self):
        """
        source-like rendering (used by help and debug output).
        """
        parts = []
        for kind, text in self._segments:
            match kind:
                case SegmentKind.UNQUOTED:
                    parts.append(text)
                case SegmentKind.QUOTED:
                    parts.append("'%s'" % text if '"' in text else '"%s"' % text)
                case _:
                    parts.append("$(%s)" % text)
        return "".join(parts)

    def __repr__(self):
        return "InterpreterString(%r)" % [(str(kind), text) for kind, text in self._segments]


__all__ = (
    "InterpreterString",
)
