#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

class Obj:
    """Base class for the runtime value types (descriptors, traps, levels)"""

    _hash_counter = 0

    def equals(self, that):
        return self is that

    def hash(self):
        # Lazily assigned; value types override equals() and hash() together
        if not hasattr(self, '_hash'):
            Obj._hash_counter += 1
            self._hash = Obj._hash_counter
        return self._hash

    def to_str(self):
        return f"{type(self).__name__}@{self.hash()}"

    def __str__(self):
        return self.to_str()

    def __eq__(self, other):
        return self.equals(other)

    def __ne__(self, other):
        return not self.equals(other)

    def __hash__(self):
        return self.hash()

    def __repr__(self):
        return self.to_str()
