#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import math

from .Obj import Obj


class DescFlags:
    """Property attribute and field-presence bit masks."""
    Writable = 0x0001
    Enumerable = 0x0002
    Configurable = 0x0004

    # Attributes of a property created by plain assignment
    Default = Writable | Enumerable | Configurable

    # Field presence, shifted above the attribute bits
    HasValue = 0x0100
    HasGet = 0x0200
    HasSet = 0x0400
    HasWritable = 0x0800
    HasEnumerable = 0x1000
    HasConfigurable = 0x2000


_FIELDS = {
    "value": DescFlags.HasValue,
    "get": DescFlags.HasGet,
    "set": DescFlags.HasSet,
    "writable": DescFlags.HasWritable,
    "enumerable": DescFlags.HasEnumerable,
    "configurable": DescFlags.HasConfigurable,
}

_ATTRS = (
    ("writable", DescFlags.HasWritable, DescFlags.Writable),
    ("enumerable", DescFlags.HasEnumerable, DescFlags.Enumerable),
    ("configurable", DescFlags.HasConfigurable, DescFlags.Configurable),
)

_absent = object()


class PropertyDescriptor(Obj):
    """
    Describes one property: either a data property (value, writable) or
    an accessor property (get, set), plus enumerable and configurable.

    Descriptors may be partial. A descriptor passed to define_property
    only changes the fields it carries; has(field) tells which those are.
    Getters are called with the instance as their only argument and
    setters with the instance and the new value, like property().
    """

    def __init__(self, value=_absent, get=_absent, set=_absent,
                 writable=None, enumerable=None, configurable=None):
        super().__init__()
        from .Err import ArgErr
        present = 0
        flags = 0
        if value is not _absent:
            present |= DescFlags.HasValue
        if get is not _absent:
            if get is not None and not callable(get):
                raise ArgErr(f"Getter must be callable: {get!r}")
            present |= DescFlags.HasGet
        if set is not _absent:
            if set is not None and not callable(set):
                raise ArgErr(f"Setter must be callable: {set!r}")
            present |= DescFlags.HasSet
        for (field, has_mask, attr_mask), val in zip(_ATTRS, (writable, enumerable, configurable)):
            if val is not None:
                present |= has_mask
                if val:
                    flags |= attr_mask

        if present & (DescFlags.HasGet | DescFlags.HasSet) and \
                present & (DescFlags.HasValue | DescFlags.HasWritable):
            raise ArgErr("Invalid property descriptor. Cannot both specify accessors and a value or writable attribute")

        self._value = None if value is _absent else value
        self._get = None if get is _absent else get
        self._set = None if set is _absent else set
        self._flags = flags
        self._present = present

    @staticmethod
    def make(fields):
        """Create a descriptor from a mapping of field name to value"""
        from .Err import ArgErr
        for key in fields:
            if key not in _FIELDS:
                raise ArgErr(f"Unknown property descriptor field: {key!r}")
        return PropertyDescriptor(**fields)

    @staticmethod
    def coerce(obj):
        """Accept a PropertyDescriptor or a mapping"""
        if isinstance(obj, PropertyDescriptor):
            return obj
        if hasattr(obj, "keys") and hasattr(obj, "__getitem__"):
            return PropertyDescriptor.make(dict(obj))
        from .Err import ArgErr
        raise ArgErr(f"Property descriptor must be a mapping, not '{type(obj).__name__}'")

    @staticmethod
    def data(value, flags=DescFlags.Default):
        """Complete data descriptor with attributes from a DescFlags mask"""
        return PropertyDescriptor(value=value,
                                  writable=bool(flags & DescFlags.Writable),
                                  enumerable=bool(flags & DescFlags.Enumerable),
                                  configurable=bool(flags & DescFlags.Configurable))

    def has(self, field):
        mask = _FIELDS.get(field)
        if mask is None:
            from .Err import ArgErr
            raise ArgErr(f"Unknown property descriptor field: {field!r}")
        return (self._present & mask) != 0

    def value(self):
        return self._value

    def get(self):
        return self._get

    def set(self):
        return self._set

    def writable(self):
        return (self._flags & DescFlags.Writable) != 0

    def enumerable(self):
        return (self._flags & DescFlags.Enumerable) != 0

    def configurable(self):
        return (self._flags & DescFlags.Configurable) != 0

    def flags(self):
        """Attribute bits (writable, enumerable, configurable)"""
        return self._flags

    def is_accessor(self):
        return (self._present & (DescFlags.HasGet | DescFlags.HasSet)) != 0

    def is_data(self):
        return (self._present & (DescFlags.HasValue | DescFlags.HasWritable)) != 0

    def is_generic(self):
        return not self.is_accessor() and not self.is_data()

    def complete(self):
        """Fill absent fields with defaults: None values and false attributes"""
        fields = self.to_dict()
        if self.is_accessor():
            fields.setdefault("get", None)
            fields.setdefault("set", None)
        else:
            fields.setdefault("value", None)
            fields.setdefault("writable", False)
        fields.setdefault("enumerable", False)
        fields.setdefault("configurable", False)
        return PropertyDescriptor(**fields)

    def merge(self, other):
        """Return a descriptor with other's fields applied over this one.

        Switching between data and accessor kinds drops the fields of
        the old kind, keeping enumerable and configurable.
        """
        fields = self.to_dict()
        if other.is_accessor() and self.is_data():
            fields.pop("value", None)
            fields.pop("writable", None)
            fields.setdefault("get", None)
            fields.setdefault("set", None)
        elif other.is_data() and self.is_accessor():
            fields.pop("get", None)
            fields.pop("set", None)
            fields.setdefault("value", None)
            fields.setdefault("writable", False)
        fields.update(other.to_dict())
        return PropertyDescriptor(**fields)

    def to_dict(self):
        """Only the fields present, keyed by field name"""
        fields = {}
        if self._present & DescFlags.HasValue:
            fields["value"] = self._value
        if self._present & DescFlags.HasGet:
            fields["get"] = self._get
        if self._present & DescFlags.HasSet:
            fields["set"] = self._set
        for field, has_mask, attr_mask in _ATTRS:
            if self._present & has_mask:
                fields[field] = (self._flags & attr_mask) != 0
        return fields

    def equals(self, that):
        if not isinstance(that, PropertyDescriptor):
            return False
        if self._present != that._present or self._flags != that._flags:
            return False
        return same_value(self._value, that._value) and \
            self._get is that._get and self._set is that._set

    def hash(self):
        return hash((self._present, self._flags))

    def to_str(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"PropertyDescriptor({fields})"


def same_value(a, b):
    """Identity or equality, with NaN equal to NaN and 0.0 distinct from -0.0"""
    if a is b:
        return True
    if type(a) is float and type(b) is float:
        if a != a:
            return b != b
        if a == 0.0 and b == 0.0:
            return math.copysign(1.0, a) == math.copysign(1.0, b)
        return a == b
    try:
        return type(a) is type(b) and bool(a == b)
    except (TypeError, ValueError):
        return False
