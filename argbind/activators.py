"""
Argbind activators: produce empty command instances for the binder.

An activator is any object with activate(type) -> instance. Failures surface
as ActivationError, which is kept distinct from binding faults so callers can
tell "the command could not be built" apart from "the input was wrong".

- DefaultActivator: calls the type without arguments.
- DelegateActivator: calls a user factory (e.g., a DI container lookup).
"""
from .faults import ActivationError, FaultCode
from .utils import bulletize


def _failure(type, reason):
    return ActivationError(
        bulletize("Failed to create an instance of the command type:", [getattr(type, "__qualname__", type)]),
        title="activation failure",
        code=FaultCode.ACTIVATION_FAILURE,
        hint=reason,
        items=(type,),
    )


class DefaultActivator:
    """
    Instantiate command types through their no-argument constructor.
    """

    def activate(self, type, /):
        try:
            return type()
        except Exception as exception:
            raise _failure(type, "the type must be constructible without arguments (%s)" % exception) from exception

    def __repr__(self):
        return "DefaultActivator()"


class DelegateActivator:
    """
    Instantiate command types through a factory callable.

    The factory receives the command type and must return an instance; a None
    result is reported as an activation failure.
    """

    def __init__(self, factory, /):
        if not callable(factory):
            raise TypeError("delegate-activator 'factory' must be callable")
        self._factory = factory

    def activate(self, type, /):
        try:
            instance = self._factory(type)
        except Exception as exception:
            raise _failure(type, "the activation factory raised %s" % exception.__class__.__name__) from exception
        if instance is None:
            raise _failure(type, "the activation factory returned None")
        return instance

    def __repr__(self):
        return f"DelegateActivator({self._factory!r})"


__all__ = (
    "DefaultActivator",
    "DelegateActivator",
)
