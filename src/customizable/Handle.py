#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from collections.abc import Sequence
from functools import partial

from .Descriptor import PropertyDescriptor
from .Err import TrapErr
from .Log import Log
from .Ordinary import Ordinary
from .Trap import Trap, lookup

_log = Log.get("customizable")


def _target(handle):
    return object.__getattribute__(handle, '_target')


def _hook(handle, trap):
    """Bound override for trap, or None when the class does not define one"""
    cls = object.__getattribute__(handle, '_type')
    hook = trap.resolve(cls)
    if hook is None:
        return None
    if _log.is_debug():
        _log.debug(f"{cls.__name__}.{trap.hook()} intercepted {trap.name()}")
    if hasattr(hook, '__get__'):
        return hook.__get__(handle, cls)
    return hook


def _special(handle, name):
    """Special method name of the target's class bound to the handle, or None"""
    cls = type(_target(handle))
    impl = lookup(cls, name)
    if impl is None:
        return None
    if hasattr(impl, '__get__'):
        return impl.__get__(handle, cls)
    return impl


def _forward(name, missing):
    """Pass-through for a special method; missing formats the TypeError raised without one"""
    def method(self, *args):
        impl = _special(self, name)
        if impl is None:
            raise TypeError(missing.format(type(_target(self)).__name__))
        return impl(*args)
    method.__name__ = name
    return method


def _forward_operator(name):
    """Pass-through for an operator, NotImplemented when the class lacks it"""
    def method(self, *args):
        impl = _special(self, name)
        if impl is None:
            return NotImplemented
        return impl(*args)
    method.__name__ = name
    return method


def _index_iter(handle):
    i = 0
    while True:
        try:
            yield handle[i]
        except IndexError:
            return
        i += 1


class Handle:
    """
    Virtualized handle returned in place of a Customizable instance.

    The handle owns no attribute state. It holds the underlying instance
    and the class trap hooks are resolved on, and routes each
    fundamental operation either to that class's trap_* hook or to the
    Ordinary default. Hooks run with the handle as self.

    The static methods perform one operation each and are what both the
    Python syntax below and Reflect go through.
    """

    __slots__ = ('_target', '_type', '__weakref__')

    def __init__(self, target, type_):
        object.__setattr__(self, '_target', target)
        object.__setattr__(self, '_type', type_)

    @staticmethod
    def is_handle(obj):
        return type(obj) is Handle

    #################################################################
    # Operations
    #################################################################

    @staticmethod
    def apply(handle, args=(), kwargs=None):
        kwargs = kwargs or {}
        hook = _hook(handle, Trap.apply)
        if hook is not None:
            return hook(*args, **kwargs)
        return Ordinary.apply(_target(handle), args, kwargs, handle)

    @staticmethod
    def construct(handle, args=(), kwargs=None):
        kwargs = kwargs or {}
        hook = _hook(handle, Trap.construct)
        if hook is None:
            return Ordinary.construct(_target(handle), args, kwargs)
        result = hook(*args, **kwargs)
        if isinstance(result, (str, bytes)) or not isinstance(result, Sequence) or len(result) == 0:
            cls = object.__getattribute__(handle, '_type')
            raise TrapErr(f"{cls.__name__}.trap_construct must return a non-empty sequence, not {result!r}")
        return result[0]

    @staticmethod
    def get(handle, key):
        target = _target(handle)
        hook = _hook(handle, Trap.get)
        if hook is not None:
            return hook(target, key)
        return Ordinary.get(target, key, handle)

    @staticmethod
    def set(handle, key, value):
        target = _target(handle)
        hook = _hook(handle, Trap.set)
        if hook is not None:
            return hook(target, key, value)
        return Ordinary.set(target, key, value, handle)

    @staticmethod
    def has(handle, key):
        target = _target(handle)
        hook = _hook(handle, Trap.has)
        if hook is not None:
            return bool(hook(target, key))
        return Ordinary.has(target, key)

    @staticmethod
    def delete_property(handle, key):
        target = _target(handle)
        hook = _hook(handle, Trap.delete_property)
        if hook is not None:
            return hook(target, key)
        return Ordinary.delete_property(target, key)

    @staticmethod
    def define_property(handle, key, descriptor):
        target = _target(handle)
        desc = PropertyDescriptor.coerce(descriptor)
        hook = _hook(handle, Trap.define_property)
        if hook is not None:
            return bool(hook(target, key, desc))
        return Ordinary.define_property(target, key, desc)

    @staticmethod
    def get_own_property_descriptor(handle, key):
        target = _target(handle)
        hook = _hook(handle, Trap.get_own_property_descriptor)
        if hook is None:
            return Ordinary.get_own_property_descriptor(target, key)
        result = hook(target, key, partial(Ordinary.get_own_property_descriptor, target, key))
        if result is None:
            return None
        return PropertyDescriptor.coerce(result)

    @staticmethod
    def get_prototype_of(handle):
        target = _target(handle)
        hook = _hook(handle, Trap.get_prototype_of)
        if hook is not None:
            return hook(target)
        return Ordinary.get_prototype_of(target)

    @staticmethod
    def set_prototype_of(handle, prototype):
        target = _target(handle)
        hook = _hook(handle, Trap.set_prototype_of)
        if hook is not None:
            return hook(target, prototype)
        return Ordinary.set_prototype_of(target, prototype)

    @staticmethod
    def is_extensible(handle):
        target = _target(handle)
        hook = _hook(handle, Trap.is_extensible)
        if hook is not None:
            return bool(hook(target, partial(Ordinary.is_extensible, target)))
        return Ordinary.is_extensible(target)

    @staticmethod
    def prevent_extensions(handle):
        target = _target(handle)
        hook = _hook(handle, Trap.prevent_extensions)
        if hook is not None:
            return bool(hook(target, partial(Ordinary.prevent_extensions, target)))
        return Ordinary.prevent_extensions(target)

    @staticmethod
    def own_keys(handle):
        target = _target(handle)
        hook = _hook(handle, Trap.own_keys)
        if hook is None:
            return Ordinary.own_keys(target)
        keys = list(hook(target, partial(Ordinary.own_keys, target)))
        for key in keys:
            if not isinstance(key, str):
                cls = object.__getattribute__(handle, '_type')
                raise TrapErr(f"{cls.__name__}.trap_own_keys returned a non-string key: {key!r}")
        return keys

    #################################################################
    # Python syntax
    #################################################################

    def __getattribute__(self, name):
        if name == '__class__':
            return Handle.get_prototype_of(self)
        return Handle.get(self, name)

    def __setattr__(self, name, value):
        if name == '__class__':
            if Handle.set_prototype_of(self, value) is False:
                raise TypeError(f"cannot set __class__ of non-extensible '{type(_target(self)).__name__}' object")
            return
        Handle.set(self, name, value)

    def __delattr__(self, name):
        Handle.delete_property(self, name)

    def __contains__(self, key):
        return Handle.has(self, key)

    def __call__(self, *args, **kwargs):
        return Handle.apply(self, args, kwargs)

    def __dir__(self):
        keys = list(Handle.own_keys(self))
        keys.extend(dir(Handle.get_prototype_of(self)))
        return list(dict.fromkeys(keys))

    def __repr__(self):
        cls = type(_target(self))
        r = lookup(cls, '__repr__')
        if r is object.__repr__:
            return f"<{cls.__module__}.{cls.__qualname__} handle at {hex(id(self))}>"
        return r(self)

    def __str__(self):
        s = lookup(type(_target(self)), '__str__')
        if s is object.__str__:
            return Handle.__repr__(self)
        return s(self)

    #################################################################
    # Protocols
    #################################################################

    # Not interceptable: each runs the class's own special method with
    # the handle as self, and fails like the plain instance without one.

    __len__ = _forward('__len__', "object of type '{}' has no len()")
    __getitem__ = _forward('__getitem__', "'{}' object is not subscriptable")
    __setitem__ = _forward('__setitem__', "'{}' object does not support item assignment")
    __delitem__ = _forward('__delitem__', "'{}' object doesn't support item deletion")
    __next__ = _forward('__next__', "'{}' object is not an iterator")
    __hash__ = _forward('__hash__', "unhashable type: '{}'")
    __format__ = _forward('__format__', "unsupported format string passed to {}.__format__")
    __bytes__ = _forward('__bytes__', "cannot convert '{}' object to bytes")
    __index__ = _forward('__index__', "'{}' object cannot be interpreted as an integer")
    __enter__ = _forward('__enter__', "'{}' object does not support the context manager protocol")
    __exit__ = _forward('__exit__', "'{}' object does not support the context manager protocol")
    __aenter__ = _forward('__aenter__', "'{}' object does not support the asynchronous context manager protocol")
    __aexit__ = _forward('__aexit__', "'{}' object does not support the asynchronous context manager protocol")
    __neg__ = _forward('__neg__', "bad operand type for unary -: '{}'")
    __pos__ = _forward('__pos__', "bad operand type for unary +: '{}'")
    __invert__ = _forward('__invert__', "bad operand type for unary ~: '{}'")
    __abs__ = _forward('__abs__', "bad operand type for abs(): '{}'")

    def __bool__(self):
        impl = _special(self, '__bool__')
        if impl is not None:
            return impl()
        impl = _special(self, '__len__')
        if impl is not None:
            return impl() != 0
        return True

    def __iter__(self):
        impl = _special(self, '__iter__')
        if impl is not None:
            return impl()
        if _special(self, '__getitem__') is not None:
            return _index_iter(self)
        raise TypeError(f"'{type(_target(self)).__name__}' object is not iterable")

    def __int__(self):
        impl = _special(self, '__int__') or _special(self, '__index__')
        if impl is None:
            raise TypeError(f"int() argument must be a string, a bytes-like object or a real number, "
                            f"not '{type(_target(self)).__name__}'")
        return impl()

    def __float__(self):
        impl = _special(self, '__float__')
        if impl is not None:
            return impl()
        impl = _special(self, '__index__')
        if impl is None:
            raise TypeError(f"float() argument must be a string or a real number, "
                            f"not '{type(_target(self)).__name__}'")
        return float(impl())


for _op in ('eq', 'ne', 'lt', 'le', 'gt', 'ge'):
    setattr(Handle, f"__{_op}__", _forward_operator(f"__{_op}__"))

for _op in ('add', 'sub', 'mul', 'matmul', 'truediv', 'floordiv', 'mod', 'divmod',
            'pow', 'lshift', 'rshift', 'and', 'xor', 'or'):
    setattr(Handle, f"__{_op}__", _forward_operator(f"__{_op}__"))
    setattr(Handle, f"__r{_op}__", _forward_operator(f"__r{_op}__"))
    if _op != 'divmod':
        setattr(Handle, f"__i{_op}__", _forward_operator(f"__i{_op}__"))
