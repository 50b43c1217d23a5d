#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import os
import re
from pathlib import Path

from .Obj import Obj


def _camel_to_upper_snake(name):
    """Convert a camelCase config key to UPPER_SNAKE (logLevel -> LOG_LEVEL)"""
    return re.sub(r'(?<=[a-z0-9])([A-Z])', r'_\1', name).upper()


class Env(Obj):
    """Runtime environment: environment variables and config props"""

    _instance = None

    # Config props live under etc/{POD}/ in the working directory
    POD = "customizable"

    def __init__(self):
        self._props_cache = {}

    @staticmethod
    def cur():
        if Env._instance is None:
            Env._instance = Env()
        return Env._instance

    @staticmethod
    def reset():
        """Drop the current environment so the next cur() re-reads config"""
        Env._instance = None

    def vars(self):
        """Return environment variables as a dict copy"""
        return dict(os.environ)

    def work_dir(self):
        return Path(os.getcwd())

    def etc_dir(self):
        return self.work_dir() / "etc" / Env.POD

    def props(self, path):
        """Load a props file into a dict, caching by resolved path.

        Lines are `key=value`; blank lines and lines starting with
        `#` or `//` are skipped. Missing files yield an empty dict.
        """
        path = Path(path)
        cache_key = str(path.resolve())
        if cache_key in self._props_cache:
            return self._props_cache[cache_key]

        props = {}
        if path.exists():
            with open(path, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith('#') or line.startswith('//'):
                        continue
                    if '=' not in line:
                        continue
                    key, val = line.split('=', 1)
                    props[key.strip()] = val.strip()

        self._props_cache[cache_key] = props
        return props

    def config(self, key, def_=None):
        """Get a configuration value.

        Looks up the environment variable CUSTOMIZABLE_<KEY> first
        (camelCase keys become UPPER_SNAKE), then etc/customizable/config.props,
        then returns def_.
        """
        env_key = f"{Env.POD.upper()}_{_camel_to_upper_snake(key)}"
        val = os.environ.get(env_key)
        if val is not None:
            return val

        props = self.props(self.etc_dir() / "config.props")
        return props.get(key, def_)

    def to_str(self):
        return f"Env({self.work_dir()})"
