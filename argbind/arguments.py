r"""
Argbind argument descriptors.

Overview
- Descriptors
  • Parameter[_T]: positional slot (order, arity, display name).
  • Option[_T]: named slot (long name, short alias, environment variable,
    arity, requiredness).
  Both are Python data descriptors: declared as class attributes of a command,
  they learn their field name through __set_name__ and store bound values in
  the command instance's __dict__.

- Arity
  • nargs Unset → scalar slot, binds exactly one value.
  • nargs "*"   → sequence slot, binds zero or more values as a list.

- Injection
  • inject(instance, values) converts raw strings with the declared 'type'
    and stores the result on the instance. This is the only place where raw
    values become typed values; the binding engine never converts.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    fields listed in __introspectable__ as read-only properties (see mirror()).

Validation highlights
- order must be a non-negative integer.
- metavar/descr/env are trimmed; empty strings are rejected.
- Option names: at most one long name (r"--[^\W\d_](-?[^\W_]+)*") and at most
  one short name (r"-[^\W\d_]"), at least one of them.
- type must be callable.

Quick example:
    >>> class Deploy(Command):
    ...     target = Parameter(0)
    ...     hosts = Parameter(1, nargs="*")
    ...     output = Option("--output", "-o", env="DEPLOY_OUTPUT", required=True)
    ...     retries = Option("--retries", type=int, default=3)
"""
import copy
import functools
import operator
import re

from .faults import FaultCode, UncastableValueError, DeprecatedArgumentWarning, trigger
from .utils import *

_TRUTHY = frozenset({"true", "yes", "on", "1"})
_FALSY = frozenset({"false", "no", "off", "0"})


class ArgumentType(type):
    """
    Metaclass for argument descriptors.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in declaration errors and diagnostics.
    - Expose names listed in __introspectable__ as read-only properties via
      mirror(), unless the class body or a base already defines them.
    - Provide stable __repr__/__rich_repr__ for diagnostics and pretty printers.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
                if name not in namespace and not any(hasattr(base, name) for base in bases)
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(names=('--output', '-o'), env='OUTPUT', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs from __displayable__ or __introspectable__.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate metadata shared by every descriptor.

    - metavar: Unset or a non-empty string (trimmed).
    - descr: Unset or a non-empty string (trimmed); Unset becomes None.
    - type: callable converter.
    - nargs: Unset (scalar) or "*" (sequence).

    Mutates metadata in place; raises TypeError/ValueError on bad declarations.
    """
    for name in ("metavar", "descr"):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = object

    metadata["descr"] = coalesce(metadata["descr"])

    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(nargs := metadata["nargs"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'nargs' must be a string")
    elif isinstance(nargs, str) and nargs != "*":
        raise ValueError(f"{cls.__typename__} 'nargs' must be '*' when specified")


def _sanitize_positional_metadata(cls, metadata, /):
    """
    Internal: validate the positional order of a Parameter.
    """
    if not isinstance(order := metadata["order"], int) or isinstance(order, bool):
        raise TypeError(f"{cls.__typename__} 'order' must be an integer")
    elif order < 0:
        raise ValueError(f"{cls.__typename__} 'order' must be a non-negative integer")


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate names and environment variable of an Option.

    - names: one long name (--name) and/or one short name (-n); the result is
      split into metadata["name"] and metadata["short"] (None when absent).
    - env: Unset or a non-empty string without '=' or whitespace; Unset becomes None.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    name = short = None
    for token in metadata.pop("names"):
        if not isinstance(token, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (token := token.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", token):
            if name is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one long name")
            name = token
        elif re.fullmatch(r"-[^\W\d_]", token):
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one short name")
            short = token
        else:
            raise ValueError(f"{cls.__typename__} names must be '--long-name' or '-x' shaped (unicodes are allowed)")

    metadata["name"] = name
    metadata["short"] = short

    if not isinstance(env := metadata["env"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'env' must be a string")
    elif isinstance(env, str) and not re.fullmatch(r"[^\s=]+", env := env.strip()):
        raise ValueError(f"{cls.__typename__} 'env' must be a non-empty name without '=' or whitespace")
    metadata["env"] = coalesce(env)


def _parse_bool(value):
    """
    Convert a raw string into a bool; blank strings mean True (presence).
    """
    if not (lowered := value.strip().lower()):
        return True
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError("invalid boolean literal %r" % value)


class Argument:
    """
    Shared descriptor behavior of Parameter and Option.

    Storage
    - Bound values live in instance.__dict__[field]; nothing is stored on the
      descriptor itself after declaration, so one descriptor can serve many
      command instances concurrently.
    - Reading an unbound slot yields the default: the declared one, else None
      for scalars and an empty list for sequences. Sequence defaults are
      copied into the instance on first read.
    """

    @property
    def field(self):
        """
        Attribute name on the command class (None until the class is created).
        """
        return coalesce(self._field)

    @property
    def scalar(self):
        return self._nargs is Unset

    @property
    def default(self):
        if self._default is not Unset:
            return self._default
        return None if self.scalar else []

    def __set_name__(self, owner, name):
        if self._field is not Unset and (self._owner, self._field) != (owner, name):
            raise TypeError(
                f"{type(self).__typename__} already declared as {self._owner.__qualname__}.{self._field}"
            )
        self._owner = owner
        self._field = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance.__dict__[self._field]
        except KeyError:
            if self.scalar:
                return self.default
            # one private copy per instance
            return instance.__dict__.setdefault(self._field, copy.copy(self.default))

    def __set__(self, instance, value):
        instance.__dict__[self._field] = value

    def _coerce(self, value):
        """
        Convert one raw string with the declared type; failures become faults.
        """
        try:
            return _parse_bool(value) if self._type is bool else self._type(value)
        except (ValueError, TypeError) as exception:
            raise UncastableValueError(
                bulletize(
                    "Can't convert the provided value to type %r for %s %s:" % (
                        getattr(self._type, "__name__", repr(self._type)), type(self).__typename__, self
                    ),
                    [value]
                ),
                title="uncastable value",
                code=FaultCode.UNCASTABLE_VALUE,
                hint=str(exception),
                items=(value,),
                argument=self,
            ) from exception

    def inject(self, instance, values, /, **context):
        """
        Convert and store raw values on a command instance.

        contract
        - values: a sequence of raw strings (a bare string is rejected).
        - sequence slot: every value is converted; the result is a list.
        - scalar slot: exactly one value is converted; zero values are only
          accepted for bool slots (presence means True).
        - context: forwarded to trigger() for the deprecation warning.

        raises
        - UncastableValueError when conversion or arity fails.
        """
        if isinstance(values, str):
            raise TypeError(f"{type(self).__typename__} inject() values must be a sequence of strings")
        values = list(values)

        if not self.scalar:
            converted = [self._coerce(value) for value in values]
        elif len(values) == 1:
            converted = self._coerce(values[0])
        elif not values and self._type is bool:
            converted = True
        elif not values:
            raise UncastableValueError(
                bulletize("Missing value for %s:" % type(self).__typename__, [self]),
                title="missing value",
                code=FaultCode.UNCASTABLE_VALUE,
                hint="pass exactly one value to %s" % self.display,
                items=(),
                argument=self,
            )
        else:
            raise UncastableValueError(
                bulletize("Can't bind several values to scalar %s %s:" % (type(self).__typename__, self), values),
                title="too many values",
                code=FaultCode.UNCASTABLE_VALUE,
                hint="pass exactly one value to %s" % self.display,
                items=tuple(values),
                argument=self,
            )

        instance.__dict__[self._field] = converted

        if self._deprecated:
            trigger(DeprecatedArgumentWarning(
                "%s %s is deprecated" % (type(self).__typename__, self.display),
                title="deprecated argument",
                code=FaultCode.DEPRECATED_ARGUMENT,
                hint="check the command help for its replacement",
                argument=self,
            ), **context)


class Parameter[_T](Argument, metaclass=ArgumentType):
    """
    Positional slot specification.

    Parameters
    - order: int
      Position in the binding sequence; unique within a command.
    - metavar: Unset | str
      Display name; defaults to the field name.
    - type: Callable[[str], _T]
      Converter applied to each raw value (bool gets literal parsing).
    - nargs: Unset | "*"
      Scalar when Unset; "*" makes it the (single, last) sequence parameter.
    - default: Any
      Value read back when the slot was never bound.
    - descr: Unset | str
      Short description, unused by binding.
    - deprecated: bool
      Emit a DeprecatedArgumentWarning whenever the slot gets bound.
    """

    __introspectable__ = (
        "order",
        "metavar",
        "type",
        "nargs",
        "default",
        "descr",
        "deprecated",
    )

    def __init__(
            self,
            order,
            metavar=Unset,
            /,
            type=str,
            nargs=Unset,
            default=Unset,
            descr=Unset,
            *,
            deprecated=False
    ):
        metadata = {
            "order": order,
            "metavar": metavar,
            "type": type,
            "nargs": nargs,
            "default": default,
            "descr": descr,
            "deprecated": bool(deprecated),
        }
        _sanitize_positional_metadata(Parameter, metadata)
        _sanitize_metadata(Parameter, metadata)

        self._field = Unset
        self._owner = Unset
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def metavar(self):
        return coalesce(self._metavar, self.field)

    @property
    def display(self):
        return self.metavar

    def __str__(self):
        return "<%s%s>" % (self.metavar, "" if self.scalar else "...")


class Option[_T](Argument, metaclass=ArgumentType):
    """
    Named slot specification.

    Parameters
    - names: "--long" and/or "-x"
      Aliases matched exactly against the alias of option inputs.
    - env: Unset | str
      Environment variable feeding this option (case-sensitive name). Sequence
      options split the variable on os.pathsep.
    - type, nargs, default, metavar, descr, deprecated: as for Parameter.
    - required: bool
      Binding fails unless the environment or a direct input supplies it.
    """

    __introspectable__ = (
        "name",
        "short",
        "env",
        "metavar",
        "type",
        "nargs",
        "default",
        "required",
        "descr",
        "deprecated",
    )
    __displayable__ = (
        "name",
        "short",
        "env",
        "nargs",
        "required",
    )

    def __init__(
            self,
            *names,
            env=Unset,
            metavar=Unset,
            type=str,
            nargs=Unset,
            default=Unset,
            required=False,
            descr=Unset,
            deprecated=False
    ):
        metadata = {
            "names": names,
            "env": env,
            "metavar": metavar,
            "type": type,
            "nargs": nargs,
            "default": default,
            "required": bool(required),
            "descr": descr,
            "deprecated": bool(deprecated),
        }
        _sanitize_named_metadata(Option, metadata)
        _sanitize_metadata(Option, metadata)

        self._field = Unset
        self._owner = Unset
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def metavar(self):
        return coalesce(self._metavar, self.field)

    @property
    def names(self):
        return tuple(name for name in (self._name, self._short) if name)

    @property
    def display(self):
        return self._name or self._short

    def matches(self, alias, /):
        """
        Exact comparison of an input alias against the long and short names.
        """
        return alias is not None and alias in self.names

    def __str__(self):
        return "|".join(self.names)


__all__ = (
    "Parameter",
    "Option",
)

# Internal machinery, not part of the public API.
del ArgumentType
