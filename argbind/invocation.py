"""
Argbind invocation: run a command type end-to-end.

invoke() is the thin layer between the binder and a process: it resolves the
schema, instantiates and binds the command, executes it with a rich console,
and turns faults into either exceptions (library use) or rendered diagnostics
plus an exit status (shell use).
"""
from rich.console import Console

from .faults import CommandException, trigger
from .schemas import CommandSchema
from .utils import *


def invoke(target, parameters=(), options=(), environ=Unset, /, *, activator=Unset, console=Unset, shell=False, fancy=False, colorful=False):
    """
    Resolve, bind and execute a command.

    Parameters
    - target: command type or CommandSchema.
    - parameters: raw positional strings.
    - options: OptionInput items or (alias, values) pairs.
    - environ: environment mapping (defaults to os.environ).
    - activator: object with activate(type) (defaults to DefaultActivator).
    - console: rich Console handed to execute() (a fresh stdout console by default).
    - shell, fancy, colorful: fault presentation flags (see faults.trigger).

    Returns
    - the exit code returned by execute(); None becomes 0.

    Faults
    - any CommandException raised while binding or executing goes through
      trigger(): re-raised when shell is False, otherwise printed to stderr
      followed by SystemExit(fault.exit_code).
    """
    if isinstance(target, CommandSchema):
        schema = target
    elif (schema := CommandSchema.resolve(target)) is None:
        raise TypeError("invoke() argument must be a command type or a command schema")

    flags = {"schema": schema, "shell": bool(shell), "fancy": bool(fancy), "colorful": bool(colorful)}

    try:
        instance = schema.instantiate(parameters, options, environ, activator=activator, **flags)
        result = instance.execute(coalesce(console, Console()))
    except CommandException as fault:
        return trigger(fault, **flags)

    if result is None:
        return 0
    if not isinstance(result, int) or isinstance(result, bool):
        raise TypeError(f"{type(instance).__qualname__}.execute() must return an integer or None")
    return result


__all__ = (
    "invoke",
)
