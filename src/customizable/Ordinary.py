#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import types

from .Descriptor import DescFlags, PropertyDescriptor, same_value
from .Err import NotExtensibleErr, ReadonlyErr
from .Trap import lookup

_absent = object()


class Shape:
    """Object-model bookkeeping kept in a slot of every Customizable instance.

    extensible: false once prevent_extensions ran
    flags:      key -> DescFlags attribute bits, only for data properties
                whose attributes differ from DescFlags.Default
    accessors:  key -> complete accessor PropertyDescriptor
    """

    __slots__ = ('extensible', 'flags', 'accessors')

    # Mangled name of Customizable.__shape
    SLOT = "_Customizable__shape"

    def __init__(self):
        self.extensible = True
        self.flags = {}
        self.accessors = {}

    @staticmethod
    def of(obj):
        """Shape of a Customizable instance, None for any other object"""
        try:
            return object.__getattribute__(obj, Shape.SLOT)
        except AttributeError:
            return None


def _own_dict(obj):
    try:
        return object.__getattribute__(obj, '__dict__')
    except AttributeError:
        return None


def _check_key(key):
    if not isinstance(key, str):
        raise TypeError(f"attribute name must be string, not '{type(key).__name__}'")


def _type_name(obj):
    return type(obj).__name__


def _rebind(val, target, receiver):
    """Present target-bound results as bound to receiver"""
    if val is target:
        return receiver
    if isinstance(val, types.MethodType) and val.__self__ is target:
        return types.MethodType(val.__func__, receiver)
    return val


def _data_descriptor(cls, key):
    """Class-level data descriptor for key that can run on a receiver, or None.

    Slot members and getset descriptors are tied to the instance layout
    and only ever run on the target.
    """
    attr = lookup(cls, key)
    if attr is None or isinstance(attr, (types.MemberDescriptorType, types.GetSetDescriptorType)):
        return None
    kind = type(attr)
    if hasattr(kind, '__get__') and (hasattr(kind, '__set__') or hasattr(kind, '__delete__')):
        return attr
    return None


def assign_attr(self, name, value):
    """__setattr__ of Customizable instances"""
    Ordinary.assign(self, name, value)


def remove_attr(self, name):
    """__delattr__ of Customizable instances"""
    Ordinary.remove(self, name)


def _compatible(current, desc):
    """Whether desc may be applied over the existing property current"""
    if current.configurable():
        return True
    if desc.has("configurable") and desc.configurable():
        return False
    if desc.has("enumerable") and desc.enumerable() != current.enumerable():
        return False
    if desc.is_generic():
        return True
    if desc.is_accessor() != current.is_accessor():
        return False
    if current.is_accessor():
        if desc.has("get") and desc.get() is not current.get():
            return False
        if desc.has("set") and desc.set() is not current.set():
            return False
        return True
    if not current.writable():
        if desc.has("writable") and desc.writable():
            return False
        if desc.has("value") and not same_value(desc.value(), current.value()):
            return False
    return True


class Ordinary:
    """
    Default behaviour of the fundamental operations.

    Each function acts on an underlying instance (or any plain object)
    directly and never dispatches to trap hooks. Where a receiver is
    accepted it is the handle the operation arrived through: getters,
    setters and __call__ run with it as self, and target-bound methods
    read back are rebound to it.
    """

    @staticmethod
    def get(target, key, receiver=None):
        _check_key(key)
        shape = Shape.of(target)
        if shape is not None:
            acc = shape.accessors.get(key)
            if acc is not None:
                getter = acc.get()
                if getter is None:
                    raise AttributeError(f"property '{key}' of '{_type_name(target)}' object has no getter")
                return getter(target if receiver is None else receiver)
        if receiver is None:
            return getattr(target, key)
        desc = _data_descriptor(type(target), key)
        if desc is not None:
            return desc.__get__(receiver, type(target))
        return _rebind(getattr(target, key), target, receiver)

    @staticmethod
    def set(target, key, value, receiver=None):
        """Assign key, through the class's own __setattr__ when it defines one"""
        _check_key(key)
        custom = lookup(type(target), '__setattr__')
        if custom is not object.__setattr__ and custom is not assign_attr:
            type(target).__setattr__(target, key, value)
            return True
        return Ordinary.assign(target, key, value, receiver)

    @staticmethod
    def assign(target, key, value, receiver=None):
        """Store key under the object model, without consulting __setattr__"""
        _check_key(key)
        if key == '__class__':
            if not Ordinary.set_prototype_of(target, value):
                raise TypeError(f"cannot set __class__ of non-extensible '{_type_name(target)}' object")
            return True

        desc = None if receiver is None else _data_descriptor(type(target), key)

        shape = Shape.of(target)
        if shape is None:
            if desc is not None:
                desc.__set__(receiver, value)
            else:
                setattr(target, key, value)
            return True

        acc = shape.accessors.get(key)
        if acc is not None:
            setter = acc.set()
            if setter is None:
                raise ReadonlyErr(f"property '{key}' of '{_type_name(target)}' object has no setter")
            setter(target if receiver is None else receiver, value)
            return True

        if desc is not None:
            desc.__set__(receiver, value)
            return True

        if key in _own_dict(target):
            if not shape.flags.get(key, DescFlags.Default) & DescFlags.Writable:
                raise ReadonlyErr(f"'{_type_name(target)}' object attribute '{key}' is read-only")
        elif not shape.extensible and not hasattr(lookup(type(target), key), '__set__'):
            # class-level data descriptors (property, slots) still accept writes
            raise NotExtensibleErr(f"cannot add attribute '{key}' to non-extensible '{_type_name(target)}' object")

        object.__setattr__(target, key, value)
        return True

    @staticmethod
    def has(target, key):
        _check_key(key)
        shape = Shape.of(target)
        if shape is not None and key in shape.accessors:
            return True
        d = _own_dict(target)
        if d is not None and key in d:
            return True
        return lookup(type(target), key, _absent) is not _absent

    @staticmethod
    def delete_property(target, key):
        """Delete key, through the class's own __delattr__ when it defines one"""
        _check_key(key)
        custom = lookup(type(target), '__delattr__')
        if custom is not object.__delattr__ and custom is not remove_attr:
            type(target).__delattr__(target, key)
            return True
        return Ordinary.remove(target, key)

    @staticmethod
    def remove(target, key):
        """Delete key under the object model, without consulting __delattr__"""
        _check_key(key)
        shape = Shape.of(target)
        if shape is None:
            delattr(target, key)
            return True

        acc = shape.accessors.get(key)
        if acc is not None:
            if not acc.configurable():
                raise ReadonlyErr(f"cannot delete non-configurable attribute '{key}' of '{_type_name(target)}' object")
            del shape.accessors[key]
            return True

        if not shape.flags.get(key, DescFlags.Default) & DescFlags.Configurable:
            raise ReadonlyErr(f"cannot delete non-configurable attribute '{key}' of '{_type_name(target)}' object")
        object.__delattr__(target, key)
        shape.flags.pop(key, None)
        return True

    @staticmethod
    def get_own_property_descriptor(target, key):
        """Descriptor of an own property, or None"""
        _check_key(key)
        shape = Shape.of(target)
        if shape is not None and key in shape.accessors:
            return shape.accessors[key]
        d = _own_dict(target)
        if d is None or key not in d:
            return None
        flags = DescFlags.Default if shape is None else shape.flags.get(key, DescFlags.Default)
        return PropertyDescriptor.data(d[key], flags)

    @staticmethod
    def define_property(target, key, descriptor):
        """Define or reconfigure an own property; False when refused.

        Attributes a descriptor leaves out default to false for a new
        property and keep their current value for an existing one. Plain
        objects only hold default data properties, so for them an absent
        attribute means true and any false attribute or accessor is refused.
        """
        _check_key(key)
        desc = PropertyDescriptor.coerce(descriptor)
        shape = Shape.of(target)

        if shape is None:
            if desc.is_accessor():
                return False
            if desc.has("writable") and not desc.writable():
                return False
            if desc.has("enumerable") and not desc.enumerable():
                return False
            if desc.has("configurable") and not desc.configurable():
                return False
            if desc.has("value"):
                setattr(target, key, desc.value())
            elif not Ordinary.has(target, key):
                setattr(target, key, None)
            return True

        current = Ordinary.get_own_property_descriptor(target, key)
        if current is None:
            if not shape.extensible:
                return False
            new = desc.complete()
        else:
            if not _compatible(current, desc):
                return False
            new = current.merge(desc)

        d = _own_dict(target)
        if new.is_accessor():
            d.pop(key, None)
            shape.flags.pop(key, None)
            shape.accessors[key] = new
        else:
            shape.accessors.pop(key, None)
            d[key] = new.value()
            if new.flags() == DescFlags.Default:
                shape.flags.pop(key, None)
            else:
                shape.flags[key] = new.flags()
        return True

    @staticmethod
    def get_prototype_of(target):
        return type(target)

    @staticmethod
    def set_prototype_of(target, prototype):
        """Reassign the class of target; False when target is not extensible.

        Uses native __class__ assignment, so an incompatible layout
        raises TypeError.
        """
        if not isinstance(prototype, type):
            raise TypeError(f"__class__ must be set to a class, not '{_type_name(prototype)}' object")
        if type(target) is prototype:
            return True
        shape = Shape.of(target)
        if shape is not None and not shape.extensible:
            return False
        object.__setattr__(target, '__class__', prototype)
        return True

    @staticmethod
    def is_extensible(target):
        shape = Shape.of(target)
        if shape is not None:
            return shape.extensible
        return _own_dict(target) is not None

    @staticmethod
    def prevent_extensions(target):
        """Lock target against new properties.

        Plain objects cannot be locked: returns True only when they are
        already non-extensible.
        """
        shape = Shape.of(target)
        if shape is not None:
            shape.extensible = False
            return True
        return not Ordinary.is_extensible(target)

    @staticmethod
    def own_keys(target):
        """Own attribute names in insertion order, then accessor names"""
        d = _own_dict(target)
        keys = list(d) if d is not None else []
        shape = Shape.of(target)
        if shape is not None:
            keys.extend(shape.accessors)
        return keys

    @staticmethod
    def apply(target, args=(), kwargs=None, receiver=None):
        call = lookup(type(target), '__call__')
        if call is None:
            raise TypeError(f"'{_type_name(target)}' object is not callable")
        if hasattr(call, '__get__'):
            call = call.__get__(target if receiver is None else receiver, type(target))
        return call(*args, **(kwargs or {}))

    @staticmethod
    def construct(target, args=(), kwargs=None):
        """New instance of target's class, or of target itself when it is a class"""
        cls = target if isinstance(target, type) else type(target)
        return cls(*args, **(kwargs or {}))
