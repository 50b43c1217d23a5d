#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#


class Err(Exception):
    """Base error class"""

    def __init__(self, msg=None, cause=None):
        Exception.__init__(self, msg)
        self._msg = msg
        self._cause = cause
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def make(cls, msg=None, cause=None):
        """Factory method - creates instance of the calling class"""
        return cls(msg, cause)

    def msg(self):
        return self._msg if self._msg is not None else ""

    def cause(self):
        return self._cause

    def to_str(self):
        name = type(self).__name__
        if self._msg:
            return f"{name}: {self._msg}"
        return name

    def __str__(self):
        return self._msg if self._msg is not None else ""


class ArgErr(Err, TypeError):
    """Malformed argument, such as an invalid property descriptor"""
    pass


class TrapErr(Err, TypeError):
    """A trap hook returned a value that breaks its operation's contract"""
    pass


class ReadonlyErr(Err, AttributeError):
    """Modification of a non-writable or non-configurable property"""
    pass


class NotExtensibleErr(Err, AttributeError):
    """New property added to an instance whose extensions were prevented"""
    pass


class ParseErr(Err, ValueError):
    """Parse error"""

    @staticmethod
    def make_str(type_name, s):
        return ParseErr(f"Invalid {type_name}: '{s}'")


class NameErr(Err, ValueError):
    """Invalid name error"""
    pass
