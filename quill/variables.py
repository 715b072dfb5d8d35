"""
variables: make-style immediate and recursive variables, plus function calls.

two flavours of variables, like make
- immediate (":="): the value is expanded once, when it is defined. the
  stored value keeps its quoting, so a value defined from '"a b"' expands
  later to the single word "a b".
- recursive ("="): the value is stored unexpanded and re-expanded at every
  use, so it sees the variables defined after it.

references
- $(name) expands the variable; undefined names expand to "" (as in make).
- $(function arguments...) calls a registered function (see quill.functions)
  when the first word names one.
- a reference written inside double quotes expands to quoted text (never
  split into words). an unquoted reference to a recursive or immediate value
  keeps the value's own quoting; a plain string value is unquoted text.

cycles
- expansion keeps a stack of the variables being expanded; meeting one of
  them again raises RecursiveExpansionError instead of recursing forever.
  a chain of recursive variables deeper than `limit` raises it too.
- an immediate definition expands its value once, against the table as it
  is then: "a := $(a) x" appends to a previous a, and a self reference to
  an undefined name is simply empty.
"""
import re

from .faults import RecursiveExpansionError, FaultCode, getdoc
from .lexer import Segment, SegmentKind
from .strings import InterpreterString

_SPLIT = re.compile(r"\s+")


class Variables:
    """
    the variable table of an interpreter.

    values are either plain strings or InterpreterString instances.
    """

    def __init__(self, values=None, /, limit=100):
        self._values = dict(values or {})
        self._stack = []
        self.limit = limit

    def define(self, name, value, /, interpreter=None):
        """
        bind name to value.

        parameters
        - value: str | InterpreterString
        - interpreter: when given, an InterpreterString value is expanded now
          (immediate variable); otherwise it is kept as is (recursive variable).
        """
        if not isinstance(name, str) or not name.strip():
            raise TypeError("variable name must be a non-empty string")
        if isinstance(value, InterpreterString):
            if interpreter is not None:
                value = value.expand(interpreter)
        elif not isinstance(value, str):
            raise TypeError("variable value must be a string or an interpreter-string")
        self._values[name.strip()] = value

    def undefine(self, name, /):
        self._values.pop(name, None)

    def defined(self, name, /):
        return name in self._values

    def get(self, name, /, default=None):
        return self._values.get(name, default)

    def names(self):
        return sorted(self._values)

    def expand_variable(self, name, interpreter, /, quoted=False):
        """
        expanded segments of a variable (no function lookup).

        returns
        - list[Segment] with quoted/unquoted kinds only.

        raises
        - RecursiveExpansionError: when name is already being expanded, or
          when more than `limit` variables are being expanded.
        """
        if name in self._stack:
            chain = self._stack[self._stack.index(name):] + [name]
            raise RecursiveExpansionError(
                "variable %r refers to itself (%s)" % (name, " → ".join(chain)),
                title="recursive variable",
                code=FaultCode.RECURSIVE_EXPANSION,
                hint="define one of them with ':=' to expand it only once",
                variable=name,
                chain=tuple(chain),
                docs=getdoc(FaultCode.RECURSIVE_EXPANSION),
            )

        value = self._values.get(name, "")
        if isinstance(value, str):
            kind = SegmentKind.QUOTED if quoted else SegmentKind.UNQUOTED
            return [Segment(kind, value)] if value else []

        if len(self._stack) >= self.limit:
            raise RecursiveExpansionError(
                "variable %r is nested more than %d levels deep (from %r)" % (name, self.limit, self._stack[0]),
                title="variables nested too deep",
                code=FaultCode.RECURSIVE_EXPANSION,
                hint="define some of the intermediate variables with ':='",
                variable=name,
                depth=len(self._stack),
                docs=getdoc(FaultCode.RECURSIVE_EXPANSION),
            )

        self._stack.append(name)
        try:
            segments = value.expand(interpreter).segments
        finally:
            self._stack.pop()

        if quoted:
            return [Segment(SegmentKind.QUOTED, "".join(segment.text for segment in segments))]
        return list(segments)

    def expand_reference(self, text, interpreter, /, quoted=False):
        """
        expand the inside of a $(...) reference.

        a reference whose first word names a registered function is a function
        call (unless it is a single word that is also a defined variable);
        anything else is a variable name.
        """
        text = text.strip()
        name, *rest = _SPLIT.split(text, 1)
        function = interpreter.get_function(name) if name else None
        if function is not None and (rest or not self.defined(name)):
            result = function.call(interpreter, rest[0] if rest else "")
            kind = SegmentKind.QUOTED if quoted else SegmentKind.UNQUOTED
            return [Segment(kind, result)] if result else []
        return self.expand_variable(text, interpreter, quoted)

    def expand(self, name, interpreter, /):
        """
        fully expand a variable to a string.
        """
        return "".join(segment.text for segment in self.expand_variable(name, interpreter))

    def snapshot(self):
        """
        independent copy of the table (values are immutable).
        """
        return Variables(self._values, limit=self.limit)

    def __contains__(self, name):
        return name in self._values

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "Variables(%r)" % self._values


__all__ = (
    "Variables",
)
