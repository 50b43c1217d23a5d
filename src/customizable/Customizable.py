#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Handle import Handle
from .Log import Log
from .Ordinary import Ordinary, Shape, assign_attr, remove_attr

_log = Log.get("customizable")


class Customizable:
    """
    Base class for objects whose fundamental operations can be
    intercepted.

    Instantiating a subclass builds a plain instance, runs __init__ on
    it, and returns a Handle in its place. A subclass overrides an
    operation by defining its trap hook; see Trap for the names:

        class Shouty(Customizable):
            def trap_get(self, target, key):
                return Reflect.get(target, key).upper()

    Hooks run with the handle as self. target is the underlying
    instance; Reflect called on it performs the default behaviour
    without re-entering any hook.

    The underlying instance itself follows the default object model
    for direct access (in __init__ or from a hook): non-writable and
    non-configurable properties, extensibility and accessor properties
    are enforced here, without dispatching to hooks.
    """

    # __shape is mangled to Shape.SLOT
    __slots__ = ('__dict__', '__weakref__', '__shape')

    def __new__(cls, *args, **kwargs):
        target = object.__new__(cls)
        object.__setattr__(target, Shape.SLOT, Shape())
        target.__init__(*args, **kwargs)
        if _log.is_debug():
            _log.debug(f"made {cls.__name__} handle")
        # Not an instance of cls, so type.__call__ skips __init__ on it
        return Handle(target, cls)

    def __getattr__(self, name):
        shape = Shape.of(self)
        if shape is not None and name in shape.accessors:
            return Ordinary.get(self, name)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'", name=name)

    __setattr__ = assign_attr
    __delattr__ = remove_attr
