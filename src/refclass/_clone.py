"""Copying instances"""

import copy
import logging

import refclass
from ._instance import Instance
from ._member import METHOD
from ._store import FieldStore


__all__ = ["clone", "deep_clone"]


log = logging.getLogger(__name__)


def clone(instance, deep=False):
    """Copy an instance into a new identity.

    The clone shares the class and method table of the original and
    `initialize` is not run again.

    A shallow clone copies each field by reference, so mutable values
    (lists, other instances) are shared with the original. A deep clone
    passes every field through `copy.deepcopy`, which clones any nested
    instance deeply as well. Objects reached twice are copied once.

    Args:
        instance: (Instance) Instance to copy
        deep: (bool) Recursively clone nested values
    Returns:
        (Instance) The copy
    Raises:
        NotCloneableError: Class was defined with cloneable=False
    """
    if not isinstance(instance, Instance):
        raise TypeError(f"Expected Instance, got {type(instance).__name__}")
    if deep:
        return deep_clone(instance, {})
    _check_cloneable(instance)
    result = Instance(instance._class, instance._store.copy(), instance._table, instance._declared)
    log.debug("cloned %r as %r", instance, result)
    return result


def deep_clone(instance, memo):
    """Deep clone sharing a `copy.deepcopy` memo.

    This is what `Instance.__deepcopy__` calls, so instances nested inside
    lists or dicts are handled by the same walk. If the class chain defines
    a private `deep_clone(name, value)` method it is called on the new
    instance for every field and its result is stored instead.
    """
    _check_cloneable(instance)
    result = Instance(instance._class, FieldStore(), instance._table, instance._declared)
    memo[id(instance)] = result

    hook = instance._table.get("deep_clone")
    if hook is not None and not (hook.kind == METHOD and hook.private):
        hook = None

    source = instance._store
    # Seed with the original values so a hook sees a complete store
    result._store.public.update(source.public)
    result._store.private.update(source.private)
    for partition in (result._store.public, result._store.private):
        for name, value in list(partition.items()):
            if hook is not None:
                partition[name] = hook.invoke(result, (name, value), {})
            else:
                partition[name] = copy.deepcopy(value, memo)

    log.debug("deep cloned %r as %r", instance, result)
    return result


def _check_cloneable(instance):
    if not instance._class.cloneable:
        raise refclass.NotCloneableError(f"Instances of {instance._class.name} cannot be cloned")
