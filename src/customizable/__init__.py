#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

# customizable - objects with interceptable fundamental operations

# Base types
from .Obj import Obj

# Interception
from .Trap import Trap
from .Customizable import Customizable
from .Handle import Handle
from .Reflect import Reflect

# Object model
from .Descriptor import PropertyDescriptor, DescFlags

# Environment
from .Env import Env
from .Log import Log, LogLevel, LogRec

# Errors
from .Err import Err, ArgErr, TrapErr, ReadonlyErr, NotExtensibleErr, ParseErr, NameErr
