#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import logging
from datetime import datetime

from .Obj import Obj


class LogLevel(Obj):
    """
    LogLevel represents the severity of a log message.
    """

    _levels = {}
    _vals_list = None

    def __init__(self, name, ordinal):
        self._name = name
        self._ordinal = ordinal

    @staticmethod
    def from_str(name, checked=True):
        """Parse LogLevel from string"""
        level = LogLevel._levels.get(str(name).lower())
        if level is not None:
            return level
        if checked:
            from .Err import ParseErr
            raise ParseErr.make_str("LogLevel", name)
        return None

    @staticmethod
    def vals():
        """Get all log level values"""
        if LogLevel._vals_list is None:
            LogLevel._vals_list = (LogLevel._debug, LogLevel._info, LogLevel._warn,
                                   LogLevel._err, LogLevel._silent)
        return LogLevel._vals_list

    @staticmethod
    def debug():
        return LogLevel._debug

    @staticmethod
    def info():
        return LogLevel._info

    @staticmethod
    def warn():
        return LogLevel._warn

    @staticmethod
    def err():
        return LogLevel._err

    @staticmethod
    def silent():
        return LogLevel._silent

    def name(self):
        return self._name

    def ordinal(self):
        return self._ordinal

    def py_level(self):
        """Matching stdlib logging level"""
        return _PY_LEVELS.get(self._name, logging.CRITICAL + 10)

    def to_str(self):
        return self._name

    def __lt__(self, other):
        return self._ordinal < other._ordinal

    def __le__(self, other):
        return self._ordinal <= other._ordinal

    def __gt__(self, other):
        return self._ordinal > other._ordinal

    def __ge__(self, other):
        return self._ordinal >= other._ordinal

    def equals(self, other):
        return isinstance(other, LogLevel) and self._ordinal == other._ordinal

    def hash(self):
        return hash(self._ordinal)


# Define log levels - stored in private class attributes
LogLevel._debug = LogLevel("debug", 0)
LogLevel._info = LogLevel("info", 1)
LogLevel._warn = LogLevel("warn", 2)
LogLevel._err = LogLevel("err", 3)
LogLevel._silent = LogLevel("silent", 4)

for _level in (LogLevel._debug, LogLevel._info, LogLevel._warn, LogLevel._err, LogLevel._silent):
    LogLevel._levels[_level.name()] = _level

_PY_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "err": logging.ERROR,
}


class LogRec(Obj):
    """
    LogRec represents a single log record.
    """

    def __init__(self, time, level, log_name, msg, err=None):
        self._time = time
        self._level = level
        self._log_name = log_name
        self._msg = msg
        self._err = err

    def time(self):
        return self._time

    def level(self):
        return self._level

    def log_name(self):
        return self._log_name

    def msg(self):
        return self._msg

    def err(self):
        return self._err

    def to_str(self):
        return f"[{self._level.name()}] [{self._log_name}] {self._msg}"


class Log(Obj):
    """
    Log provides logging functionality.

    Each Log forwards its records to the stdlib logger of the same name
    and to the global handlers. The initial level comes from the
    `logLevel` config key (see Env.config), defaulting to info.
    """

    _logs = {}
    _handlers = []

    def __init__(self, name, register=True):
        if not Log._is_valid_name(name):
            from .Err import NameErr
            raise NameErr(f"Invalid log name: {name}")

        if register and name in Log._logs:
            from .Err import ArgErr
            raise ArgErr(f"Log already registered: {name}")

        self._name = name
        self._level = Log._configured_level()
        self._py_logger = logging.getLogger(name)

        if register:
            Log._logs[name] = self

    @staticmethod
    def _configured_level():
        from .Env import Env
        configured = Env.cur().config("logLevel")
        if configured is None:
            return LogLevel._info
        return LogLevel.from_str(configured)

    @staticmethod
    def _is_valid_name(name):
        """Validate log name - identifier characters and dots only"""
        if not name:
            return False
        for c in name:
            if not (c.isalnum() or c == '.' or c == '_'):
                return False
        return True

    @staticmethod
    def make(name, register=True):
        return Log(name, register)

    @staticmethod
    def get(name):
        """Get or create a log by name"""
        if name in Log._logs:
            return Log._logs[name]
        return Log(name, True)

    @staticmethod
    def find(name, checked=True):
        """Find a registered log by name"""
        if name in Log._logs:
            return Log._logs[name]
        if checked:
            from .Err import Err
            raise Err(f"Unknown log: {name}")
        return None

    @staticmethod
    def list_():
        return list(Log._logs.values())

    def name(self):
        return self._name

    def level(self, value=None):
        """Get or set log level - log.level() or log.level(new_level)"""
        if value is None:
            return self._level
        self._level = value
        return None

    def is_enabled(self, level):
        return level._ordinal >= self._level._ordinal

    def is_debug(self):
        return self.is_enabled(LogLevel._debug)

    def is_info(self):
        return self.is_enabled(LogLevel._info)

    def is_warn(self):
        return self.is_enabled(LogLevel._warn)

    def is_err(self):
        return self.is_enabled(LogLevel._err)

    def debug(self, msg, err=None):
        if self.is_enabled(LogLevel._debug):
            self._log(LogLevel._debug, msg, err)

    def info(self, msg, err=None):
        if self.is_enabled(LogLevel._info):
            self._log(LogLevel._info, msg, err)

    def warn(self, msg, err=None):
        if self.is_enabled(LogLevel._warn):
            self._log(LogLevel._warn, msg, err)

    def err(self, msg, err=None):
        if self.is_enabled(LogLevel._err):
            self._log(LogLevel._err, msg, err)

    def _log(self, level, msg, err):
        rec = LogRec(datetime.now(), level, self._name, msg, err)
        self.log(rec)

    def log(self, rec):
        """Log a record - can be overridden by subclasses"""
        for handler in Log._handlers:
            try:
                handler(rec)
            except Exception as e:
                self._py_logger.error("Log handler %r failed: %s", handler, e)

        self._py_logger.log(rec._level.py_level(), rec._msg, exc_info=rec._err)

    def to_str(self):
        return self._name

    @staticmethod
    def handlers():
        """Get global log handlers"""
        return list(Log._handlers)

    @staticmethod
    def add_handler(handler):
        """Add a global log handler, a callable taking a LogRec"""
        if not callable(handler):
            from .Err import ArgErr
            raise ArgErr(f"Log handler not callable: {handler!r}")
        Log._handlers.append(handler)

    @staticmethod
    def remove_handler(handler):
        if handler in Log._handlers:
            Log._handlers.remove(handler)
