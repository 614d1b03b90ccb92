"""Exception types raised or captured by the decomposition engine."""

from __future__ import annotations

import inspect
from typing import NoReturn


class EngineError(Exception):
    """The engine failed with an unexpected internal error.

    Unlike member evaluation failures, this is never converted into a value:
    it signals a defect in the engine rather than in the inspected object.
    """

    @classmethod
    def not_initialized(cls, field_name: str) -> NoReturn:
        raise cls(f"Lookup engine internal error. {field_name} must be initialized before accessing it.")


class InvocationError(Exception):
    """Wraps an error raised by a dynamically invoked accessor.

    The evaluator unwraps chains of these (via ``__cause__``) and captures the
    innermost real error instead.
    """

    def __init__(self, member: str, message: str | None = None):
        self.member = member
        super().__init__(message or f"Invocation of '{member}' failed")


class UnsupportedMemberError(Exception):
    """Value of a member that has no invocable form and no resolver."""

    def __init__(self, member: str, parameters: tuple[inspect.Parameter, ...] = ()):
        self.member = member
        self.parameters = parameters
        if parameters:
            signature = ", ".join(str(p) for p in parameters)
            msg = f"Member '{member}' requires parameters: ({signature})"
        else:
            msg = f"Member '{member}' is not supported"
        super().__init__(msg)


class MemberDisabledError(RuntimeError):
    """Marker value of a member whose evaluation was disabled by a descriptor."""

    def __init__(self, message: str = "Member execution disabled"):
        super().__init__(message)
