#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import re

from .Obj import Obj


def _camel_to_snake(name):
    return re.sub(r'(?<=[a-z0-9])([A-Z])', r'_\1', name).lower()


def lookup(cls, name, default=None):
    """Find name in the class dicts along cls.__mro__ without binding.

    Returns default when no class in the MRO defines it.
    """
    for klass in cls.__mro__:
        d = klass.__dict__
        if name in d:
            return d[name]
    return default


class Trap(Obj):
    """
    Trap is the closed enum of fundamental object operations a
    Customizable subclass may intercept.

    Every trap has a reserved hook name, `trap_` plus the snake_case
    operation name. A class overrides a trap by defining that method.
    """

    _vals = None
    _by_name = None

    def __init__(self, ordinal, name, takes_default=False):
        self._ordinal = ordinal
        self._name = name
        self._hook = "trap_" + _camel_to_snake(name)
        self._takes_default = takes_default

    @staticmethod
    def vals():
        """All traps in ordinal order"""
        return Trap._vals

    @staticmethod
    def from_str(name, checked=True):
        """Parse trap from its operation name (ownKeys) or snake form (own_keys)"""
        trap = Trap._by_name.get(name)
        if trap is None and isinstance(name, str):
            trap = Trap._by_name.get(name.replace("trap_", "", 1))
        if trap is not None:
            return trap
        if checked:
            from .Err import ParseErr
            raise ParseErr.make_str("Trap", name)
        return None

    @staticmethod
    def overrides(cls):
        """List the traps cls overrides"""
        return [t for t in Trap._vals if t.is_overridden(cls)]

    def name(self):
        return self._name

    def ordinal(self):
        return self._ordinal

    def hook(self):
        """Reserved method name a subclass defines to override this trap"""
        return self._hook

    def takes_default(self):
        """True when the hook receives a get_default callback as last argument"""
        return self._takes_default

    def resolve(self, cls):
        """Return the unbound hook cls defines for this trap, or None"""
        return lookup(cls, self._hook)

    def is_overridden(self, cls):
        return self.resolve(cls) is not None

    def equals(self, other):
        return self is other

    def hash(self):
        return hash(self._ordinal)

    def to_str(self):
        return self._name


Trap.apply = Trap(0, "apply")
Trap.construct = Trap(1, "construct")
Trap.get = Trap(2, "get")
Trap.set = Trap(3, "set")
Trap.has = Trap(4, "has")
Trap.delete_property = Trap(5, "deleteProperty")
Trap.define_property = Trap(6, "defineProperty")
Trap.get_own_property_descriptor = Trap(7, "getOwnPropertyDescriptor", takes_default=True)
Trap.get_prototype_of = Trap(8, "getPrototypeOf")
Trap.set_prototype_of = Trap(9, "setPrototypeOf")
Trap.is_extensible = Trap(10, "isExtensible", takes_default=True)
Trap.prevent_extensions = Trap(11, "preventExtensions", takes_default=True)
Trap.own_keys = Trap(12, "ownKeys", takes_default=True)

Trap._vals = (
    Trap.apply, Trap.construct, Trap.get, Trap.set, Trap.has,
    Trap.delete_property, Trap.define_property, Trap.get_own_property_descriptor,
    Trap.get_prototype_of, Trap.set_prototype_of, Trap.is_extensible,
    Trap.prevent_extensions, Trap.own_keys,
)
Trap._by_name = {}
for _trap in Trap._vals:
    Trap._by_name[_trap.name()] = _trap
    Trap._by_name[_camel_to_snake(_trap.name())] = _trap
