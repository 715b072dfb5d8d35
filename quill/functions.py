"""
named functions callable from scripts as $(name arguments...).

a function wraps a python callable whose first parameter receives the
execution target (the object commands act upon). the remaining parameters
are text:
- a callable taking exactly one text parameter receives the whole argument
  text, expanded but unsplit ($(strip   a b  ) → strip(target, "a b")).
- otherwise the argument text is expanded and split on whitespace, quotes
  protecting embedded spaces ($(word 2 "a b" c) → word(target, "2", "a b", "c")).
- the number of words must match the callable's positional parameters unless
  it accepts *args; a mismatch raises ArgumentCountMismatchError.

the result is converted with str() and substituted literally.
"""
import inspect

from .faults import (
    QuillException,
    ArgumentCountMismatchError,
    DelegatedCommandError,
    FaultCode,
    getdoc,
)
from .internals import ModelType, sanitize_name, sanitize_text
from .strings import InterpreterString
from .utils import Unset, pluralize


class Function(metaclass=ModelType, sealed=True):
    """
    a script function.

    properties
    - name: identifier used in $(name ...)
    - callback: callable(target, *texts)
    - descr: optional documentation
    - arity: number of text parameters (minimum when variadic)
    - variadic: whether extra words are accepted
    """
    __introspectable__ = (
        "name",
        "arity",
        "variadic",
        "descr",
    )

    def __init__(self, name, callback, /, descr=Unset):
        self._name = sanitize_name(type(self), name)
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} 'callback' must be callable")
        self._callback = callback
        self._descr = sanitize_text(type(self), descr)

        parameters = list(inspect.signature(callback).parameters.values())
        if not parameters or parameters[0].kind not in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            raise TypeError(f"{type(self).__typename__} callback must take the target as first positional parameter")
        self._arity = sum(
            parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            and parameter.default is inspect.Parameter.empty
            for parameter in parameters[1:]
        )
        self._maximum = sum(
            parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            for parameter in parameters[1:]
        )
        self._variadic = any(parameter.kind is inspect.Parameter.VAR_POSITIONAL for parameter in parameters)

    @property
    def callback(self):
        return self._callback

    def arguments(self, text, interpreter, /):
        """
        the text arguments the callback receives for a reference's argument text.
        """
        string = InterpreterString.parse(text, strict=False)
        if self._maximum == 1 and not self._variadic:
            return [string.expand_to_string(interpreter)]
        words = string.expand_and_split(r"\s+", interpreter)
        if len(words) < self._arity or (len(words) > self._maximum and not self._variadic):
            expected = self._arity if self._arity == self._maximum or self._variadic else "%d to %d" % (self._arity, self._maximum)
            raise ArgumentCountMismatchError(
                "function %r expects %s%s %s but got %d" % (
                    self.name,
                    "at least " if self._variadic else "",
                    expected,
                    "argument" if expected == 1 else pluralize("argument"),
                    len(words),
                ),
                title="wrong number of function arguments",
                code=FaultCode.ARGUMENT_COUNT_MISMATCH,
                hint="quote arguments containing spaces (for example: $(%s \"a b\"))" % self.name,
                function=self.name,
                expected=self._arity,
                given=len(words),
                docs=getdoc(FaultCode.ARGUMENT_COUNT_MISMATCH),
            )
        return words

    def call(self, interpreter, text="", /):
        """
        run the function for a $(name text) reference; returns the result text.
        """
        arguments = self.arguments(text, interpreter)
        try:
            result = self._callback(interpreter.target, *arguments)
        except QuillException:
            raise
        except Exception as exception:
            raise DelegatedCommandError(
                "function %r failed: %s" % (self.name, exception),
                title="function error",
                code=FaultCode.DELEGATED_ERROR,
                hint="check the arguments given to $(%s ...)" % self.name,
                function=self.name,
                exception=exception,
                docs=getdoc(FaultCode.DELEGATED_ERROR),
            ) from exception
        return "" if result is None else str(result)


__all__ = (
    "Function",
)
