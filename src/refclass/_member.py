"""Member declarations for class definitions"""

import functools

import refclass


__all__ = ["Member", "mutator", "check_name", "FIELD", "METHOD", "ACTIVE"]


FIELD = "field"
METHOD = "method"
ACTIVE = "active"

# Attributes of the private handle that members may not shadow
_reserved = frozenset(("super_", "require", "is_set"))


class Member:
    """A single field, method or active binding declared on a class.

    Members are immutable once created. Overriding a member on a subclass
    or through `ClassDef.set` replaces the whole Member.

    Args:
        name: (str) Member name
        kind: (str) One of FIELD, METHOD, ACTIVE
        private: (bool) Member is only reachable from methods
        value: (object) Default value for fields, function otherwise
        owner: (ClassDef | None) Class that declared this member

    Attributes:
        name: (str) Member name
        kind: (str) One of FIELD, METHOD, ACTIVE
        private: (bool) Member is only reachable from methods
        value: (object) Default value for fields, function otherwise
        owner: (ClassDef | None) Class that declared this member
    """
    __slots__ = ("name", "kind", "private", "value", "owner")

    def __init__(self, name, kind, private, value, owner):
        check_name(name)
        if kind != FIELD and not callable(value):
            raise TypeError(f"{kind.capitalize()} '{name}' must be callable, got {type(value).__name__}")
        if name == "initialize" and (kind != METHOD or private):
            raise ValueError("'initialize' must be declared as a public method")
        self.name = name
        self.kind = kind
        self.private = private
        self.value = value
        self.owner = owner

    def __repr__(self):
        visibility = "private" if self.private else "public"
        return f"Member<{visibility} {self.kind} {self.name}>"

    @property
    def visibility(self):
        """(str) 'private' or 'public'."""
        return "private" if self.private else "public"

    @property
    def is_mutator(self):
        """(bool) Method was declared with the mutator decorator."""
        return self.kind == METHOD and getattr(self.value, "mutator", False)

    def compatible(self, other):
        """(bool) Whether other may override this member."""
        return self.kind == other.kind and self.private == other.private

    def invoke(self, instance, args, kwargs):
        """Call a method with the instance and a private handle for it."""
        private = refclass.Receiver(instance, self.owner)
        return self.value(instance, private, *args, **kwargs)

    def get(self, instance):
        """Read an active binding."""
        private = refclass.Receiver(instance, self.owner)
        return self.value(instance, private)

    def put(self, instance, value):
        """Assign through an active binding."""
        private = refclass.Receiver(instance, self.owner)
        self.value(instance, private, value)


def check_name(name):
    """Reject names that cannot be used as members.

    Raises:
        ValueError: Name is not an identifier, is underscored, or reserved
    """
    if not isinstance(name, str) or not name.isidentifier():
        raise ValueError(f"Invalid member name {name!r}")
    if name.startswith("_"):
        raise ValueError(f"Member names may not start with an underscore: {name!r}")
    if name in _reserved:
        raise ValueError(f"Member name {name!r} is reserved")


def mutator(func):
    """Mark a method as a setter.

    The wrapped method's own result is discarded and the call yields the
    receiving instance, so setters can be chained::

        stat.set_threshold(0.02).set_label("iris")

    Callers keep using their original reference; the returned value is that
    same instance, never a copy.
    """
    @functools.wraps(func)
    def wrapper(self, private, *args, **kwargs):
        func(self, private, *args, **kwargs)
        return self

    wrapper.mutator = True
    return wrapper
