"""Error classes and helpers"""

__all__ = [
    "RefClassError",
    "DuplicateFieldError",
    "AccessViolationError",
    "NoSuchAncestorMethodError",
    "PreconditionError",
    "LockedClassError",
    "NotCloneableError",
]


class RefClassError(Exception):
    """Base for all errors raised by refclass."""


class DuplicateFieldError(RefClassError):
    """Member name declared twice, or redeclared with another visibility."""


class AccessViolationError(RefClassError, AttributeError):
    """Private member reached from outside the instance's methods."""


class NoSuchAncestorMethodError(RefClassError, AttributeError):
    """Delegation call found no ancestor definition.

    Args:
        name: (str) Method name that was delegated
        owner: (str) Name of the class whose method made the call

    Attributes:
        name: (str) Method name that was delegated
        owner: (str) Name of the class whose method made the call
    """

    def __init__(self, name, owner):
        self.name = name
        self.owner = owner
        super().__init__(f"No ancestor of {owner} defines method '{name}'")


class PreconditionError(RefClassError):
    """Field consulted before it was set.

    Args:
        field: (str) Name of the unset field
        message: (str | None) Optional override for the default message

    Attributes:
        field: (str) Name of the unset field
    """

    def __init__(self, field, message=None):
        self.field = field
        super().__init__(message or f"{field} not set")


class LockedClassError(RefClassError):
    """Class was defined with lock_class and cannot be modified."""


class NotCloneableError(RefClassError):
    """Class was defined with cloneable=False."""
