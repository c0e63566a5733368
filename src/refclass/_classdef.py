"""Class definitions and layout resolution"""

import logging
import types

import refclass
from ._member import Member, FIELD, METHOD, ACTIVE


__all__ = ["ClassDef", "define_class", "add_method"]


log = logging.getLogger(__name__)


def _clone_method(self, private, deep=False):
    return refclass.clone(self, deep=deep)


class ClassDef:
    """A class definition used to construct instances.

    The declarations of a class are only changed after definition through
    `set`. Everything else is fixed when `define_class` returns.

    Args:
        name: (str) Class name
        parent: (ClassDef | None) Single parent class
        lock_objects: (bool) Instances reject fields that were not declared
        lock_class: (bool) Class rejects `set` after definition
        cloneable: (bool) Instances get a public clone() method

    Attributes:
        name: (str) Class name
        parent: (ClassDef | None) Single parent class
        lock_objects: (bool) Instances reject fields that were not declared
        lock_class: (bool) Class rejects `set` after definition
        cloneable: (bool) Instances may be cloned
    """
    __slots__ = ("name", "parent", "lock_objects", "lock_class", "cloneable", "_members")

    def __init__(self, name, parent=None, lock_objects=True, lock_class=False, cloneable=True):
        if not isinstance(name, str) or not name:
            raise ValueError(f"Invalid class name {name!r}")
        if parent is not None and not isinstance(parent, ClassDef):
            raise TypeError(f"Parent must be a ClassDef, got {type(parent).__name__}")
        self.name = name
        self.parent = parent
        self.lock_objects = lock_objects
        self.lock_class = lock_class
        self.cloneable = cloneable
        self._members = {}

    def __repr__(self):
        return f"ClassDef<{self.name}>"

    def new(self, *args, **kwargs):
        """Construct an instance, same as `construct(self, ...)`."""
        return refclass.construct(self, *args, **kwargs)

    def _declared(self, kind, private):
        return types.MappingProxyType({
            m.name: m.value for m in self._members.values()
            if m.kind == kind and m.private == private
        })

    @property
    def public_fields(self):
        """(Mapping) Own public field defaults."""
        return self._declared(FIELD, False)

    @property
    def private_fields(self):
        """(Mapping) Own private field defaults."""
        return self._declared(FIELD, True)

    @property
    def methods(self):
        """(Mapping) Own public methods."""
        return self._declared(METHOD, False)

    @property
    def private_methods(self):
        """(Mapping) Own private methods."""
        return self._declared(METHOD, True)

    @property
    def active(self):
        """(Mapping) Own active bindings."""
        return self._declared(ACTIVE, False)

    def declared(self, name):
        """(Member | None) Member declared directly on this class."""
        return self._members.get(name)

    def ancestors(self):
        """Iterate this class and then each parent up to the root."""
        cls = self
        while cls is not None:
            yield cls
            cls = cls.parent

    def lineage(self):
        """(list[str]) Class names from this class up to the root."""
        return [cls.name for cls in self.ancestors()]

    def snapshot(self):
        """(dict[ClassDef, dict[str, Member]]) Copy of each class's own declarations."""
        return {cls: dict(cls._members) for cls in self.ancestors()}

    def resolve(self):
        """Build the effective member table for instances of this class.

        Walks from the root down so the nearest declaration of each name
        wins. Overridden ancestor members stay on their own class and are
        reached through delegation.

        Returns:
            (dict[str, Member]) Member name to effective member
        Raises:
            DuplicateFieldError: A name changes visibility or kind along the chain
        """
        table = {}
        for cls in reversed(list(self.ancestors())):
            for name, member in cls._members.items():
                prior = table.get(name)
                if prior is not None and not prior.compatible(member):
                    raise refclass.DuplicateFieldError(
                        f"{cls.name} declares {member.visibility} {member.kind} '{name}' "
                        f"but {prior.owner.name} declares it as {prior.visibility} {prior.kind}"
                    )
                table[name] = member
        if self.cloneable:
            table["clone"] = Member("clone", METHOD, False, _clone_method, self)
        return table

    def _check_member(self, member):
        if self.cloneable and member.name == "clone":
            raise refclass.DuplicateFieldError(
                f"'clone' is provided for cloneable class {self.name}"
            )
        if self.parent is not None:
            prior = self.parent.resolve().get(member.name)
            if prior is not None and prior.name != "clone" and not prior.compatible(member):
                raise refclass.DuplicateFieldError(
                    f"{self.name} declares {member.visibility} {member.kind} '{member.name}' "
                    f"but {prior.owner.name} declares it as {prior.visibility} {prior.kind}"
                )

    def set(self, visibility, name, value, overwrite=False):
        """Add or replace a member after the class is defined.

        Only instances constructed afterwards see the change.

        Args:
            visibility: (str) 'public', 'private' or 'active'
            name: (str) Member name
            value: (object) Callables become methods, anything else a field
                default. Active bindings must be callable.
            overwrite: (bool) Allow replacing a member declared on this class
        Returns:
            (ClassDef) This class
        Raises:
            LockedClassError: Class was defined with lock_class
            DuplicateFieldError: Name exists without overwrite, or the
                replacement changes visibility or kind
        """
        if self.lock_class:
            raise refclass.LockedClassError(f"Class {self.name} is locked")
        if visibility == "active":
            member = Member(name, ACTIVE, False, value, self)
        elif visibility in ("public", "private"):
            kind = METHOD if callable(value) else FIELD
            member = Member(name, kind, visibility == "private", value, self)
        else:
            raise ValueError(f"Unknown visibility {visibility!r}")

        existing = self._members.get(name)
        if existing is not None:
            if not overwrite:
                raise refclass.DuplicateFieldError(
                    f"{self.name} already has member '{name}', pass overwrite=True to replace it"
                )
            if not existing.compatible(member):
                raise refclass.DuplicateFieldError(
                    f"Cannot replace {existing.visibility} {existing.kind} '{name}' "
                    f"with {member.visibility} {member.kind}"
                )
        self._check_member(member)

        self._members[name] = member
        log.debug("%s.set %s %s '%s'", self.name, member.visibility, member.kind, name)
        return self


def define_class(name, public_fields=None, private_fields=None, methods=None, parent=None,
                 *, private_methods=None, active=None,
                 lock_objects=True, lock_class=False, cloneable=None):
    """Define a new class.

    Args:
        name: (str) Class name
        public_fields: (Mapping | None) Public field name to default value
        private_fields: (Mapping | None) Private field name to default value
        methods: (Mapping | None) Public method name to function
        parent: (ClassDef | None) Class to inherit from
        private_methods: (Mapping | None) Private method name to function
        active: (Mapping | None) Active binding name to function
        lock_objects: (bool) Instances reject undeclared fields
        lock_class: (bool) Reject `set` after definition
        cloneable: (bool | None) Provide clone(), None inherits from the parent
    Returns:
        (ClassDef) The new class
    Raises:
        DuplicateFieldError: A name is declared twice on this class or
            conflicts with an ancestor's visibility or kind
    """
    if cloneable is None:
        cloneable = parent.cloneable if isinstance(parent, ClassDef) else True
    elif cloneable and isinstance(parent, ClassDef) and not parent.cloneable:
        raise ValueError(f"{name} cannot be cloneable when parent {parent.name} is not")

    classdef = ClassDef(name, parent, lock_objects, lock_class, cloneable)

    groups = (
        (public_fields, FIELD, False),
        (private_fields, FIELD, True),
        (methods, METHOD, False),
        (private_methods, METHOD, True),
        (active, ACTIVE, False),
    )
    members = {}
    for declarations, kind, private in groups:
        for member_name, value in (declarations or {}).items():
            member = Member(member_name, kind, private, value, classdef)
            prior = members.get(member_name)
            if prior is not None:
                raise refclass.DuplicateFieldError(
                    f"{name} declares '{member_name}' as both "
                    f"{prior.visibility} {prior.kind} and {member.visibility} {member.kind}"
                )
            classdef._check_member(member)
            members[member_name] = member

    classdef._members = members
    log.debug("defined %s(%s) with %d members", name, parent.name if parent else "", len(members))
    return classdef


def add_method(classdef, name, func, private=False, overwrite=False):
    """Add or override a method on an existing class.

    Shorthand for `classdef.set("private" if private else "public", ...)`
    restricted to callables.
    """
    if not callable(func):
        raise TypeError(f"Method '{name}' must be callable, got {type(func).__name__}")
    return classdef.set("private" if private else "public", name, func, overwrite=overwrite)
