"""Instances and construction"""

import copy
import itertools

import refclass
from ._member import FIELD, METHOD, ACTIVE
from ._store import FieldStore


__all__ = ["Instance", "BoundMethod", "construct", "identity_of", "class_of", "is_instance"]


_identities = itertools.count(1)

# Defaults of these types are copied into each instance rather than shared
_percopy = (list, dict, set, bytearray)


class Instance:
    """A constructed object with its own identity and field store.

    Attribute access from outside reaches public fields, public methods and
    active bindings. Private members raise AccessViolationError. Methods get
    full access through the private handle they are called with.

    Reading a declared public field that is still UNSET raises
    PreconditionError, which is not an AttributeError, so `hasattr` raises
    too rather than reporting False. Use `describe` or a method calling
    `private.is_set` to test for a value.

    Plain assignment of an Instance shares it; use `clone` for a copy.
    Equality and hashing are by identity.

    The Python-level attributes all start with an underscore so they never
    collide with member names.
    """
    __slots__ = ("_class", "_store", "_table", "_declared", "_identity", "__weakref__")

    def __init__(self, classdef, store, table, declared):
        object.__setattr__(self, "_class", classdef)
        object.__setattr__(self, "_store", store)
        object.__setattr__(self, "_table", table)
        object.__setattr__(self, "_declared", declared)
        object.__setattr__(self, "_identity", next(_identities))

    def __repr__(self):
        return f"<{self._class.name} #{self._identity}>"

    def __str__(self):
        member = self._table.get("format")
        if member is not None and member.kind == METHOD and not member.private:
            return str(member.invoke(self, (), {}))
        return repr(self)

    def __dir__(self):
        names = [name for name, member in self._table.items() if not member.private]
        names.extend(name for name in self._store.public if name not in self._table)
        return names

    def __getattr__(self, name):
        # Only called when normal lookup fails, so never for slot names
        if name.startswith("_"):
            raise AttributeError(name)
        member = self._table.get(name)
        if member is None:
            if name in self._store.public:
                return self._store.read(name)
            raise AttributeError(f"{self._class.name} has no member '{name}'")
        if member.private:
            raise refclass.AccessViolationError(
                f"Private {member.kind} '{name}' of {self._class.name} is not accessible"
            )
        if member.kind == FIELD:
            return self._store.read(name)
        if member.kind == ACTIVE:
            return member.get(self)
        return BoundMethod(self, member)

    def __setattr__(self, name, value):
        member = self._table.get(name)
        if member is not None and member.private:
            raise refclass.AccessViolationError(
                f"Private {member.kind} '{name}' of {self._class.name} is not accessible"
            )
        _assign(self, member, name, value)

    def __delattr__(self, name):
        raise refclass.AccessViolationError(f"Cannot remove '{name}' from {self._class.name}")

    def __copy__(self):
        return refclass.clone(self)

    def __deepcopy__(self, memo):
        return refclass.deep_clone(self, memo)


def _assign(instance, member, name, value):
    """Write a field or active binding, checking everything but visibility."""
    if member is None:
        if name.startswith("_"):
            raise AttributeError(f"Cannot assign '{name}'")
        store = instance._store
        if name in store.public:
            store.write(name, value)
        elif instance._class.lock_objects:
            raise refclass.AccessViolationError(
                f"Cannot add field '{name}' to locked {instance._class.name} instance"
            )
        else:
            refclass.check_name(name)
            store.declare(name, value)
    elif member.kind == FIELD:
        instance._store.write(name, value)
    elif member.kind == ACTIVE:
        member.put(instance, value)
    else:
        raise refclass.AccessViolationError(f"Cannot assign to method '{name}'")


class BoundMethod:
    """A method bound to the instance it was looked up on.

    Args:
        instance: (Instance) Receiving instance
        member: (Member) Method declaration to run
    """
    __slots__ = ("instance", "member")

    def __init__(self, instance, member):
        self.instance = instance
        self.member = member

    def __repr__(self):
        return f"BoundMethod<{self.member.owner.name}.{self.member.name} of {self.instance!r}>"

    def __call__(self, *args, **kwargs):
        return self.member.invoke(self.instance, args, kwargs)


def construct(classdef, *args, **kwargs):
    """Create an instance and run its initializer.

    Fields start at their declared defaults, nearest class wins. List,
    dict, set and bytearray defaults are shallow copied per instance.
    The nearest `initialize` method is called with the arguments and its
    result is discarded.

    Args:
        classdef: (ClassDef) Class to instantiate
        *args, **kwargs: Passed to `initialize`
    Returns:
        (Instance) The new instance
    Raises:
        DuplicateFieldError: Class chain was modified into a conflict
        TypeError: Arguments given to a class without `initialize`
    """
    if not isinstance(classdef, refclass.ClassDef):
        raise TypeError(f"Expected ClassDef, got {type(classdef).__name__}")

    table = classdef.resolve()
    store = FieldStore()
    for name, member in table.items():
        if member.kind == FIELD:
            value = member.value
            if isinstance(value, _percopy):
                value = copy.copy(value)
            store.declare(name, value, member.private)

    instance = Instance(classdef, store, table, classdef.snapshot())

    initialize = table.get("initialize")
    if initialize is not None:
        initialize.invoke(instance, args, kwargs)
    elif args or kwargs:
        raise TypeError(f"{classdef.name} has no initialize method to take arguments")
    return instance


def identity_of(instance):
    """(int) Identity token of an instance, unique within the process."""
    if not isinstance(instance, Instance):
        raise TypeError(f"Expected Instance, got {type(instance).__name__}")
    return instance._identity


def class_of(instance):
    """(ClassDef) Class an instance was constructed from."""
    if not isinstance(instance, Instance):
        raise TypeError(f"Expected Instance, got {type(instance).__name__}")
    return instance._class


def is_instance(value, classdef):
    """(bool) Whether value is an Instance of classdef or one of its subclasses."""
    if not isinstance(value, Instance):
        return False
    return any(cls is classdef for cls in value._class.ancestors())
