#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Handle import Handle
from .Ordinary import Ordinary


class Reflect:
    """
    Perform a fundamental operation on any object.

    On a handle the operation dispatches exactly as the equivalent
    Python syntax would, hooks included. On anything else, including
    the target passed to a hook, it runs the default behaviour.
    """

    @staticmethod
    def is_handle(obj):
        """True if obj is a virtualized handle; triggers no operation"""
        return Handle.is_handle(obj)

    @staticmethod
    def apply(target, /, *args, **kwargs):
        if Handle.is_handle(target):
            return Handle.apply(target, args, kwargs)
        return Ordinary.apply(target, args, kwargs)

    @staticmethod
    def construct(target, /, *args, **kwargs):
        if Handle.is_handle(target):
            return Handle.construct(target, args, kwargs)
        return Ordinary.construct(target, args, kwargs)

    @staticmethod
    def get(target, key, receiver=None):
        """Read key; on a plain target, getters and methods bind to receiver if given.

        Hooks use Reflect.get(target, key, self) to read the default
        value while keeping methods bound to the handle.
        """
        if Handle.is_handle(target):
            return Handle.get(target, key)
        return Ordinary.get(target, key, receiver)

    @staticmethod
    def set(target, key, value, receiver=None):
        if Handle.is_handle(target):
            return Handle.set(target, key, value)
        return Ordinary.set(target, key, value, receiver)

    @staticmethod
    def has(target, key):
        if Handle.is_handle(target):
            return Handle.has(target, key)
        return Ordinary.has(target, key)

    @staticmethod
    def delete_property(target, key):
        if Handle.is_handle(target):
            return Handle.delete_property(target, key)
        return Ordinary.delete_property(target, key)

    @staticmethod
    def define_property(target, key, descriptor):
        """Define a property from a PropertyDescriptor or a mapping of its fields"""
        if Handle.is_handle(target):
            return Handle.define_property(target, key, descriptor)
        return Ordinary.define_property(target, key, descriptor)

    @staticmethod
    def get_own_property_descriptor(target, key):
        if Handle.is_handle(target):
            return Handle.get_own_property_descriptor(target, key)
        return Ordinary.get_own_property_descriptor(target, key)

    @staticmethod
    def get_prototype_of(target):
        if Handle.is_handle(target):
            return Handle.get_prototype_of(target)
        return Ordinary.get_prototype_of(target)

    @staticmethod
    def set_prototype_of(target, prototype):
        if Handle.is_handle(target):
            return Handle.set_prototype_of(target, prototype)
        return Ordinary.set_prototype_of(target, prototype)

    @staticmethod
    def is_extensible(target):
        if Handle.is_handle(target):
            return Handle.is_extensible(target)
        return Ordinary.is_extensible(target)

    @staticmethod
    def prevent_extensions(target):
        if Handle.is_handle(target):
            return Handle.prevent_extensions(target)
        return Ordinary.prevent_extensions(target)

    @staticmethod
    def own_keys(target):
        if Handle.is_handle(target):
            return Handle.own_keys(target)
        return Ordinary.own_keys(target)
