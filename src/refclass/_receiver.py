"""Private handle given to methods, and superclass delegation"""

import refclass
from ._instance import BoundMethod, _assign
from ._member import FIELD, ACTIVE, METHOD


__all__ = ["Receiver", "Delegate"]


class Receiver:
    """Full access handle to an instance, passed to methods as `private`.

    Reads and writes reach both the public and private partitions of the
    instance store, along with private methods. Each method call gets its
    own receiver bound to the class that defined the running method, which
    is where `super_` starts looking.

    Args:
        instance: (Instance) Receiving instance
        owner: (ClassDef) Class that defined the running method
    """
    __slots__ = ("_instance", "_owner")

    def __init__(self, instance, owner):
        object.__setattr__(self, "_instance", instance)
        object.__setattr__(self, "_owner", owner)

    def __repr__(self):
        return f"Receiver<{self._owner.name} for {self._instance!r}>"

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        instance = self._instance
        member = instance._table.get(name)
        if member is None:
            if name in instance._store.public:
                return instance._store.read(name)
            raise AttributeError(f"{instance._class.name} has no member '{name}'")
        if member.kind == FIELD:
            return instance._store.read(name)
        if member.kind == ACTIVE:
            return member.get(instance)
        return BoundMethod(instance, member)

    def __setattr__(self, name, value):
        instance = self._instance
        _assign(instance, instance._table.get(name), name, value)

    @property
    def super_(self):
        """(Delegate) Ancestor methods relative to the defining class."""
        return Delegate(self._instance, self._owner)

    def require(self, name):
        """Value of a field that must be set.

        Raises:
            PreconditionError: Field is declared but unset
            AttributeError: No such field
        """
        if name not in self._instance._store:
            raise AttributeError(f"{self._instance._class.name} has no field '{name}'")
        return self._instance._store.read(name)

    def is_set(self, name):
        """(bool) Whether a field exists and holds a value."""
        return self._instance._store.is_set(name)


class Delegate:
    """Lookup of ancestor method implementations.

    Resolution starts at the parent of the class that defined the calling
    method, not the parent of the instance's class, so chains of any depth
    delegate one level at a time.

    Args:
        instance: (Instance) Receiving instance, shared with the caller
        owner: (ClassDef) Class that defined the calling method
    """
    __slots__ = ("_instance", "_owner")

    def __init__(self, instance, owner):
        self._instance = instance
        self._owner = owner

    def __repr__(self):
        return f"Delegate<above {self._owner.name}>"

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return BoundMethod(self._instance, self._resolve(name))

    def __call__(self, name, *args, **kwargs):
        return self._resolve(name).invoke(self._instance, args, kwargs)

    def _resolve(self, name):
        """Nearest ancestor declaration of a method.

        Looks in the declarations the instance captured when it was
        constructed, so later `ClassDef.set` calls do not reach it.

        Returns:
            (Member) Method declared strictly above the defining class
        Raises:
            NoSuchAncestorMethodError: No ancestor declares the method
        """
        declared = self._instance._declared
        cls = self._owner.parent
        while cls is not None:
            member = declared.get(cls, {}).get(name)
            if member is not None and member.kind == METHOD:
                return member
            cls = cls.parent
        raise refclass.NoSuchAncestorMethodError(name, self._owner.name)
