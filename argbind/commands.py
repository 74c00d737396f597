"""
Argbind command layer: the capability contract and its declaration metadata.

- Command: abstract base every bindable command type derives from. Concrete
  commands declare Parameter/Option descriptors as class attributes and
  implement execute(console).
- command(...): class decorator attaching CommandMetadata (name, descr) under
  __command__. A command without a name is the default command.

Quick start
    from argbind import Command, Parameter, Option, command, invoke

    @command("greet", descr="say hello")
    class Greet(Command):
        name = Parameter(0)
        loud = Option("--loud", "-l", type=bool, default=False)

        def execute(self, console):
            console.print(self.name.upper() if self.loud else self.name)

    invoke(Greet, ["world"], [("--loud", ())])
"""
import inspect
from abc import ABC, abstractmethod
from typing import NamedTuple

from .utils import *


class CommandMetadata(NamedTuple):
    """
    Declaration metadata of a command type.

    - name: None for the default (unnamed) command.
    - descr: free text, unused by binding.
    """
    name: str | None
    descr: str | None


class Command(ABC):
    """
    Capability contract of a bindable command.

    Subclasses are instantiated empty by an activator, bound by the schema,
    then executed. execute() receives a rich console and may return an int
    exit code (None means success).
    """

    @abstractmethod
    def execute(self, console, /):
        raise NotImplementedError


def _process_metadata(source, name, descr):
    """
    Validate and normalize @command(...) metadata.

    - name: Unset/None/blank → None (default command); other strings trimmed.
    - descr: Unset → the class docstring (cleaned) or None.
    """
    if not isinstance(name, str | Unset | None):
        raise TypeError("@command() 'name' must be a string")
    if not isinstance(descr, str | Unset | None):
        raise TypeError("@command() 'descr' must be a string")

    name = coalesce(name)
    descr = coalesce(descr, inspect.cleandoc(source.__doc__) if source.__doc__ else None)

    return CommandMetadata(name.strip() or None if name else None, descr.strip() or None if descr else None)


def command(name=Unset, /, *, descr=Unset):
    """
    Class decorator declaring a command type.

    Usage
    - @command              → default (unnamed) command
    - @command("deploy")    → named command
    - @command("deploy", descr="...")

    Rules
    - must decorate a class;
    - may be applied only once per class (metadata is not inherited).
    """
    if isinstance(name, type):
        return command()(name)

    @rename("command")
    def wrapper(source, /):
        if not isinstance(source, type):
            raise TypeError("@command() must be applied to a class")
        if "__command__" in vars(source):
            raise TypeError("@command() must be applied only once")
        source.__command__ = _process_metadata(source, name, descr)
        return source

    return wrapper


__all__ = (
    "Command",
    "CommandMetadata",
    "command",
)
