"""Tests for shallow and deep cloning."""

import copy

import pytest

import refclass
import rctest


def _owner_class():
    """Class holding a nested counter instance and a list."""
    counter_cls = rctest.make_counter()

    def initialize(self, private):
        self.counter = counter_cls.new()
        private.tags = ["a"]

    def tags(self, private):
        return private.tags

    owner_cls = refclass.define_class(
        "Owner",
        public_fields={"counter": None, "label": "x"},
        private_fields={"tags": None},
        methods={"initialize": initialize, "tags": tags},
    )
    return owner_cls


def test_clone_new_identity():
    original = rctest.make_counter().new().bump()
    copied = refclass.clone(original)
    assert copied is not original
    assert refclass.identity_of(copied) != refclass.identity_of(original)
    assert refclass.class_of(copied) is refclass.class_of(original)
    assert copied.count == 1
    assert copied.hidden_count() == 1


def test_shallow_scalars_independent():
    original = rctest.make_counter().new()
    copied = refclass.clone(original)
    copied.bump(5)
    assert original.count == 0
    assert original.hidden_count() == 0
    assert copied.count == 5


def test_shallow_shares_nested():
    """Nested instances and lists are shared after a shallow clone."""
    original = _owner_class().new()
    copied = original.clone()
    assert copied.counter is original.counter
    copied.counter.bump()
    assert original.counter.count == 1
    copied.tags().append("b")
    assert original.tags() == ["a", "b"]
    copied.label = "y"
    assert original.label == "x"


def test_deep_independent():
    """Deep clones share nothing mutable with the original."""
    original = _owner_class().new()
    copied = refclass.clone(original, deep=True)
    assert copied.counter is not original.counter
    copied.counter.bump()
    copied.tags().append("b")
    assert original.counter.count == 0
    assert original.tags() == ["a"]
    assert copied.counter.count == 1


def test_deep_nested_in_containers():
    """Instances inside lists are cloned deeply too."""
    counter_cls = rctest.make_counter()
    group_cls = refclass.define_class("Group", public_fields={"members": []})
    group = group_cls.new()
    group.members.extend([counter_cls.new(), counter_cls.new()])
    copied = group.clone(deep=True)
    copied.members[0].bump()
    assert group.members[0].count == 0
    assert refclass.is_instance(copied.members[1], counter_cls)


def test_deep_preserves_sharing_and_cycles():
    node_cls = refclass.define_class("Node", public_fields={"peer": None, "other": None})
    a, b = node_cls.new(), node_cls.new()
    a.peer, a.other = b, b
    b.peer = a
    copied = refclass.clone(a, deep=True)
    assert copied.peer is copied.other
    assert copied.peer is not b
    assert copied.peer.peer is copied


def test_deep_clone_hook():
    """A private deep_clone method decides how each field is copied."""
    def deep_clone(self, private, name, value):
        if name == "cache":
            return {}
        return copy.deepcopy(value)

    cls = refclass.define_class(
        "Cached",
        public_fields={"cache": {}, "items": []},
        private_methods={"deep_clone": deep_clone},
    )
    original = cls.new()
    original.cache["k"] = 1
    original.items.append(1)
    copied = original.clone(deep=True)
    assert copied.cache == {}
    assert copied.items == [1]
    assert copied.items is not original.items
    shallow = original.clone()
    assert shallow.cache is original.cache


def test_clone_keeps_unset():
    stat = rctest.make_stat()
    copied = stat.clone(deep=True)
    with pytest.raises(refclass.PreconditionError):
        copied.get_significant_results()
    copied.set_threshold(0.02)
    with pytest.raises(refclass.PreconditionError):
        stat.get_threshold()


def test_clone_does_not_initialize():
    calls = []

    def initialize(self, private):
        calls.append(1)

    cls = refclass.define_class("Once", methods={"initialize": initialize})
    instance = cls.new()
    instance.clone()
    instance.clone(deep=True)
    assert calls == [1]


def test_clone_keeps_method_table():
    """Clones use the methods the original was built with."""
    cls = rctest.make_counter()
    original = cls.new()
    refclass.add_method(cls, "later", lambda self, private: 1)
    assert not hasattr(original.clone(), "later")


def test_clone_keeps_ancestor_methods():
    """Clones delegate to the ancestor methods the original was built with."""
    def child_total(self, private):
        return private.super_.total() + 1

    base = refclass.define_class("Base", methods={"total": lambda self, private: 10})
    child = refclass.define_class("Child", methods={"total": child_total}, parent=base)
    original = child.new()
    refclass.add_method(base, "total", lambda self, private: 100, overwrite=True)
    assert original.clone(deep=True).total() == 11


def test_deep_clone_hook_adds_fields():
    """A hook may add fields to an unlocked clone while it is being filled."""
    def deep_clone(self, private, name, value):
        private.copied = name
        return value

    cls = refclass.define_class(
        "Growing",
        public_fields={"a": 1, "b": 2},
        private_methods={"deep_clone": deep_clone},
        lock_objects=False,
    )
    copied = cls.new().clone(deep=True)
    assert (copied.a, copied.b) == (1, 2)
    assert copied.copied == "b"


def test_copy_module():
    original = _owner_class().new()
    assert copy.copy(original).counter is original.counter
    assert copy.deepcopy(original).counter is not original.counter


def test_not_cloneable():
    cls = rctest.make_counter(cloneable=False)
    instance = cls.new()
    assert not hasattr(instance, "clone")
    with pytest.raises(refclass.NotCloneableError):
        refclass.clone(instance)
    with pytest.raises(refclass.NotCloneableError):
        refclass.clone(instance, deep=True)
    with pytest.raises(TypeError):
        refclass.clone(object())


def test_deep_clone_uncloneable_nested():
    inner = rctest.make_counter(cloneable=False).new()
    outer = refclass.define_class("Outer", public_fields={"inner": inner}).new()
    assert outer.clone().inner is inner
    with pytest.raises(refclass.NotCloneableError):
        outer.clone(deep=True)
