"""
Argbind binding engine: map runtime inputs onto a command instance.

Two independent folds compute what goes where, then bind() injects the
results and reports every violation of a phase in one fault.

- bind_parameters(schema, inputs) -> (bindings, remaining)
  • leading scalar parameters (by order) take one input each;
  • the sequence parameter, if declared, takes all remaining inputs;
  • MissingParameterValueError when inputs run out before the scalars do.

- bind_options(schema, inputs, environ) -> (bindings, unsatisfied, unconsumed)
  • environment phase: variables matching an option's env name
    (sequence options split on os.pathsep);
  • direct phase: every input whose alias is the option's long or short name,
    values concatenated in input order; replaces the environment binding.

- bind(schema, instance, parameters, options, environ)
  • positional fold → inject → UnrecognizedParametersError
  • option fold → inject → MissingRequiredOptionsError → UnrecognizedOptionsError

A binding is a (descriptor, values) pair where values is a tuple of raw
strings; descriptors convert them during injection.
"""
import difflib
import itertools
import operator
import os
from typing import NamedTuple

from .faults import *
from .utils import *


class OptionInput(NamedTuple):
    """
    One occurrence of an option on the command line.

    - alias: the literal token the caller used ("--output" or "-o").
    - values: raw strings supplied with that occurrence, in order.
    """
    alias: str
    values: tuple[str, ...] = ()


def _option_input(input):
    input = input if isinstance(input, OptionInput) else OptionInput(*input)
    if isinstance(input.values, str):
        raise TypeError(f"option input {input.alias!r} values must be a sequence of strings, not a string")
    return input


def bind_parameters(schema, inputs, /):
    """
    positional fold.

    returns
    - bindings: tuple of (parameter, values) in binding order.
    - remaining: tuple of inputs no parameter consumed.

    raises
    - MissingParameterValueError naming every scalar parameter left without input.
    - TypeError when inputs is a bare string.
    """
    if isinstance(inputs, str):
        raise TypeError("positional inputs must be a sequence of strings, not a string")
    inputs = tuple(inputs)
    parameters = sorted(schema.parameters, key=operator.attrgetter("order"))

    scalars = list(itertools.takewhile(operator.attrgetter("scalar"), parameters))
    sequence = next((parameter for parameter in parameters if not parameter.scalar), None)

    if missing := scalars[len(inputs):]:
        raise MissingParameterValueError(
            bulletize(
                "Missing value for parameter:" if len(missing) == 1 else "Missing values for parameters:",
                map(str, missing)
            ),
            title="missing parameter value" if len(missing) == 1 else pluralize("missing parameter value"),
            code=FaultCode.MISSING_PARAMETER_VALUE,
            hint="usage: %s" % schema,
            items=tuple(parameter.display for parameter in missing),
            schema=schema,
        )

    bindings = [(parameter, (input,)) for parameter, input in zip(scalars, inputs)]
    remaining = inputs[len(scalars):]

    if sequence is not None:
        bindings.append((sequence, remaining))
        remaining = ()

    return tuple(bindings), remaining


def bind_options(schema, inputs, environ, /):
    """
    option fold.

    returns
    - bindings: tuple of (option, values); at most one entry per option,
      direct input replacing environment input.
    - unsatisfied: required options bound by no source, in declaration order.
    - unconsumed: option inputs whose alias matches no declared option.

    an environment value shadowed by direct input is dropped from the
    bindings, so it is never converted: a malformed variable cannot fail a
    command that received the option on the command line.

    raises
    - TypeError when an input's values are a bare string.
    """
    inputs = tuple(map(_option_input, inputs))
    bindings = {}

    for variable, value in environ.items():
        option = next((option for option in schema.options if option.env == variable), None)
        if option is None:
            continue
        bindings[option] = (value,) if option.scalar else tuple(value.split(os.pathsep))

    consumed = set()
    for option in schema.options:
        if not (matched := [index for index, input in enumerate(inputs) if option.matches(input.alias)]):
            continue
        bindings[option] = tuple(itertools.chain.from_iterable(inputs[index].values for index in matched))
        consumed.update(matched)

    unsatisfied = tuple(option for option in schema.options if option.required and option not in bindings)
    unconsumed = tuple(input for index, input in enumerate(inputs) if index not in consumed)

    return tuple(bindings.items()), unsatisfied, unconsumed


def _unrecognized_hint(schema, aliases):
    """
    suggest the closest declared name for the first unknown alias.
    """
    names = [name for option in schema.options for name in option.names]
    if suggestions := difflib.get_close_matches(aliases[0], names, 1):
        return "did you mean %r?" % suggestions[0]
    if names:
        return "known options: %s" % ", ".join(names)
    return "this command takes no options"


def bind(schema, instance, parameters=(), options=(), environ=Unset, /, **context):
    """
    bind every input onto instance, or fail with one fault per phase.

    parameters
    - parameters: raw positional strings.
    - options: OptionInput items (or (alias, values) pairs).
    - environ: mapping of environment variables (defaults to os.environ).
    - context: forwarded to descriptor injection (warning rendering options).

    order of checks
    - positional: MissingParameterValueError, then injection, then
      UnrecognizedParametersError; a positional failure stops before options.
    - options: injection, then MissingRequiredOptionsError, then
      UnrecognizedOptionsError.

    returns
    - the same instance, fully bound.
    """
    environ = coalesce(environ, os.environ)

    bindings, remaining = bind_parameters(schema, parameters)
    for parameter, values in bindings:
        parameter.inject(instance, values, **context)

    if remaining:
        raise UnrecognizedParametersError(
            bulletize("Unrecognized parameters provided:", remaining),
            title=pluralize("unrecognized parameter") if len(remaining) > 1 else "unrecognized parameter",
            code=FaultCode.UNRECOGNIZED_PARAMETERS,
            hint="usage: %s" % schema,
            items=remaining,
            schema=schema,
        )

    bindings, unsatisfied, unconsumed = bind_options(schema, options, environ)
    for option, values in bindings:
        option.inject(instance, values, **context)

    if unsatisfied:
        raise MissingRequiredOptionsError(
            bulletize("Missing values for some of the required options:", (option.display for option in unsatisfied)),
            title=pluralize("missing required option") if len(unsatisfied) > 1 else "missing required option",
            code=FaultCode.MISSING_REQUIRED_OPTIONS,
            hint="pass %s or set %s" % (unsatisfied[0].display, unsatisfied[0].env)
            if unsatisfied[0].env else "pass %s on the command line" % unsatisfied[0].display,
            items=tuple(option.display for option in unsatisfied),
            schema=schema,
        )

    if unconsumed:
        aliases = tuple(dict.fromkeys(input.alias for input in unconsumed))
        raise UnrecognizedOptionsError(
            bulletize("Unrecognized options provided:", aliases),
            title=pluralize("unrecognized option") if len(aliases) > 1 else "unrecognized option",
            code=FaultCode.UNRECOGNIZED_OPTIONS,
            hint=_unrecognized_hint(schema, aliases),
            items=aliases,
            schema=schema,
        )

    return instance


__all__ = (
    "OptionInput",
    "bind_parameters",
    "bind_options",
    "bind",
)
