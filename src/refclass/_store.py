"""Per-instance field storage"""

import refclass


__all__ = ["FieldStore", "UNSET"]


class _Unset:
    """Marker for a declared field that holds no value yet.

    There is exactly one instance, `UNSET`. It survives copying and deep
    copying as itself so cloned stores keep their unset fields unset.
    """
    __slots__ = ()

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return "UNSET"


UNSET = _Unset()


class FieldStore:
    """Named field values split into public and private partitions.

    A name lives in at most one partition. The store itself does no access
    checking; visibility is enforced by whoever hands out the store.

    Args:
        public: (dict | None) Initial public values
        private: (dict | None) Initial private values

    Attributes:
        public: (dict) Public field name to value
        private: (dict) Private field name to value
    """
    __slots__ = ("public", "private")

    def __init__(self, public=None, private=None):
        self.public = public if public is not None else {}
        self.private = private if private is not None else {}

    def __repr__(self):
        return f"FieldStore(public={list(self.public)}, private={list(self.private)})"

    def __contains__(self, name):
        return name in self.public or name in self.private

    def partition(self, name):
        """(dict | None) The partition holding name, if any."""
        if name in self.public:
            return self.public
        if name in self.private:
            return self.private
        return None

    def declare(self, name, value, private=False):
        """Add a new field to the given partition."""
        if name in self:
            raise KeyError(f"Field '{name}' already in store")
        (self.private if private else self.public)[name] = value

    def read(self, name):
        """Current value of a field.

        Raises:
            KeyError: Field is not in the store
            PreconditionError: Field is declared but unset
        """
        partition = self.partition(name)
        if partition is None:
            raise KeyError(name)
        value = partition[name]
        if value is UNSET:
            raise refclass.PreconditionError(name)
        return value

    def is_set(self, name):
        """(bool) Whether the field exists and holds a value."""
        partition = self.partition(name)
        return partition is not None and partition[name] is not UNSET

    def write(self, name, value):
        """Replace the value of an existing field."""
        partition = self.partition(name)
        if partition is None:
            raise KeyError(name)
        partition[name] = value

    def copy(self):
        """(FieldStore) New store with the same values, shared by reference."""
        return FieldStore(dict(self.public), dict(self.private))
