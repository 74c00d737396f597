"""
Argbind command schemas: immutable descriptors of command types.

What this module provides
- CommandSchema: the command descriptor (type, name, descr, parameters, options)
  with discovery, name matching, usage rendering and instantiation.
- CommandSchema.resolve(type): the schema of a command type, or None when the
  type is not a command (not an error).
- CommandSchema.discover(pattern): schemas of every command type defined in the
  modules matched by a dotted module glob.
- CommandSchema.stub: the "no command registered" schema; it binds nothing.

Discovery rules
- A command type is a class deriving from Command, decorated with @command
  (on the class itself), not abstract and not Command itself.
- Parameters and options are the Parameter/Option class attributes, base
  classes first; a subclass may override or hide an inherited one.
- Declarations are validated once: unique parameter orders, at most one
  sequence parameter placed last, unique option names, short names and
  environment variable names. Violations raise TypeError.
"""
import builtins
import collections
import importlib
import inspect
import operator

from .activators import DefaultActivator
from .arguments import Parameter, Option
from .binding import bind
from .commands import Command
from .utils import *


def _iscommand(type):
    return (
        isinstance(type, builtins.type) and
        issubclass(type, Command) and
        type is not Command and
        "__command__" in vars(type) and
        not inspect.isabstract(type)
    )


def _collect_arguments(type):
    """
    Scan class attributes for descriptors, base classes first.
    """
    arguments = {}
    for klass in reversed(type.__mro__):
        for name, object in vars(klass).items():
            if isinstance(object, Parameter | Option):
                arguments[name] = object
            else:
                arguments.pop(name, None)
    parameters = [argument for argument in arguments.values() if isinstance(argument, Parameter)]
    options = [argument for argument in arguments.values() if isinstance(argument, Option)]
    return parameters, options


def _validate_parameters(cls, type, parameters):
    """
    Enforce unique orders and a single, trailing sequence parameter.
    """
    orders = collections.Counter(parameter.order for parameter in parameters)
    if duplicates := sorted(order for order, count in orders.items() if count > 1):
        raise TypeError(f"{cls.__typename__} {type.__qualname__!r} parameter order {duplicates[0]} is already in use")

    sequences = [parameter for parameter in parameters if not parameter.scalar]
    if len(sequences) > 1:
        raise TypeError(
            f"{cls.__typename__} {type.__qualname__!r} cannot have more than one sequence parameter "
            f"({', '.join(parameter.field for parameter in sequences)})"
        )
    if sequences and sequences[0] is not max(parameters, key=operator.attrgetter("order")):
        raise TypeError(
            f"{cls.__typename__} {type.__qualname__!r} sequence parameter {sequences[0].field!r} must be the last one"
        )


def _validate_options(cls, type, options):
    """
    Enforce unique names, short names and environment variable names.
    """
    for attribute, label in (("name", "name"), ("short", "short name"), ("env", "environment variable")):
        seen = set()
        for option in options:
            if (value := getattr(option, attribute)) is None:
                continue
            if value in seen:
                raise TypeError(f"{cls.__typename__} {type.__qualname__!r} option {label} {value!r} is already in use")
            seen.add(value)


class CommandSchema:
    """
    Immutable descriptor of one command type.

    Properties
    - type: the command class (None for the stub).
    - name: None for the default command.
    - descr: free text, unused by binding.
    - parameters: tuple of Parameter sorted by order.
    - options: tuple of Option in declaration order.
    - default: True when the schema has no name.

    Operations
    - matches(name): case-insensitive name comparison.
    - bind(instance, parameters, options, environ): bind an existing instance.
    - instantiate(parameters, options, environ, activator=...): activate then bind.
    - str(schema): usage fragment ("name <param> <rest...> --opt|-o").
    """
    __typename__ = "command-schema"

    type = mirror("type")
    name = mirror("name")
    descr = mirror("descr")
    parameters = mirror("parameters")
    options = mirror("options")

    def __init__(self, type, name=None, descr=None, parameters=(), options=()):
        self._type = type
        self._name = name.strip() or None if isinstance(name, str) else None
        self._descr = descr
        self._parameters = tuple(sorted(parameters, key=operator.attrgetter("order")))
        self._options = tuple(options)

    @property
    def default(self):
        return self._name is None

    @classmethod
    def resolve(cls, type, /):
        """
        Return the schema of a command type, or None if it is not one.
        """
        if not _iscommand(type):
            return None

        metadata = vars(type)["__command__"]
        parameters, options = _collect_arguments(type)
        _validate_parameters(cls, type, parameters)
        _validate_options(cls, type, options)

        return cls(type, metadata.name, metadata.descr, parameters, options)

    @classmethod
    def discover(cls, source, /):
        """
        Resolve every command type defined in the modules matching a glob.

        Parameters
        - source: str
          Dotted module glob expanded with mglob (e.g., "app.commands.*").

        Returns
        - list of CommandSchema in module order, then definition order.
          Types imported from other modules are skipped.

        Raises
        - TypeError when source is not a string or a module cannot be imported.
        """
        if not isinstance(source, str):
            raise TypeError("discover() argument must be a string")

        schemas = {}
        for name in mglob(source):
            try:
                module = importlib.import_module(name)
            except ImportError as exception:
                raise TypeError(f"unable to import module {name!r}") from exception
            for object in vars(module).values():
                if not isinstance(object, type) or object.__module__ != module.__name__ or object in schemas:
                    continue
                if (schema := cls.resolve(object)) is not None:
                    schemas[object] = schema
        return list(schemas.values())

    def matches(self, name, /):
        if name is None or self._name is None:
            return name is None and self._name is None
        return name.casefold() == self._name.casefold()

    def bind(self, instance, parameters=(), options=(), environ=Unset, /, **context):
        return bind(self, instance, parameters, options, environ, **context)

    def instantiate(self, parameters=(), options=(), environ=Unset, /, *, activator=Unset, **context):
        """
        Activate an empty command and bind every input onto it.

        The instance is only returned when binding succeeds; any fault
        (activation, binding, conversion) propagates unchanged.
        """
        instance = coalesce(activator, DefaultActivator()).activate(self._type)
        return self.bind(instance, parameters, options, environ, **context)

    def __str__(self):
        return " ".join([*filter(None, [self._name]), *map(str, self._parameters), *map(str, self._options)])

    def __rich_repr__(self):
        yield "type", self._type
        yield "name", self._name
        yield "parameters", self._parameters
        yield "options", self._options

    def __repr__(self):
        return f"{self.__typename__}({", ".join("%s=%r" % pair for pair in self.__rich_repr__())})"


CommandSchema.stub = CommandSchema(None)


__all__ = (
    "CommandSchema",
)
