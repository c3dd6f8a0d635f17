import enum

import numpy as np
from h5py import h5t

from typh5.errors import InvalidArgument, NativeFailure, TypeMismatch, native_call
from typh5.handle import ResourceHandle

VARIABLE = h5t.VARIABLE

NUMERIC_KINDS = "biuf"


class DatatypeClass(enum.Enum):
    UNSUPPORTED = "unsupported"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"


class StringEncoding(enum.Enum):
    ASCII = "ascii"
    UTF8 = "utf-8"


_CLASSES = {
    h5t.INTEGER: DatatypeClass.INTEGER,
    h5t.FLOAT: DatatypeClass.FLOAT,
    h5t.STRING: DatatypeClass.STRING,
}

_CSETS = {
    StringEncoding.ASCII: h5t.CSET_ASCII,
    StringEncoding.UTF8: h5t.CSET_UTF8,
}


class Datatype(ResourceHandle):
    @classmethod
    def from_dtype(cls, dtype):
        dtype = np.dtype(dtype)
        if dtype.kind not in NUMERIC_KINDS:
            raise TypeMismatch(f"No numeric datatype for numpy dtype {dtype}.")

        with native_call("create datatype", str(dtype)):
            if dtype.kind == "b":
                # stored with the width of hbool_t
                tid = h5t.NATIVE_UINT8.copy()
            else:
                tid = h5t.py_create(dtype).copy()
        return cls._wrap(tid)

    @classmethod
    def from_value(cls, value):
        from typh5.binding import binding_for_value
        return binding_for_value(value).datatype(value)

    @classmethod
    def variable_string(cls, encoding=StringEncoding.UTF8):
        return cls._string(encoding, VARIABLE)

    @classmethod
    def fixed_string(cls, size, encoding=StringEncoding.UTF8):
        if size <= 0:
            raise InvalidArgument(f"A fixed-width string needs a positive width, got {size}.")
        return cls._string(encoding, size)

    @classmethod
    def _string(cls, encoding, length):
        with native_call("create string datatype"):
            tid = h5t.C_S1.copy()
        datatype = cls._wrap(tid)
        datatype.set_string_traits(encoding, length)
        return datatype

    def get_class(self):
        self._require_valid("query the datatype class")
        with native_call("get_class"):
            code = self._oid.get_class()
        return _CLASSES.get(code, DatatypeClass.UNSUPPORTED)

    def is_string(self):
        return self.get_class() is DatatypeClass.STRING

    def size(self):
        self._require_valid("query the datatype size")
        with native_call("get_size"):
            return int(self._oid.get_size())

    def get_string_traits(self):
        if not self.is_string():
            raise TypeMismatch("String traits requested from a non-string datatype.")

        with native_call("get_string_traits", self.name()):
            cset = self._oid.get_cset()
            variable = self._oid.is_variable_str()
            size = self._oid.get_size()
        encoding = StringEncoding.ASCII if cset == h5t.CSET_ASCII else StringEncoding.UTF8
        return encoding, VARIABLE if variable else int(size)

    def set_string_traits(self, encoding, length):
        if not self.is_string():
            raise TypeMismatch("String traits set on a non-string datatype.")
        if length == 0:
            raise InvalidArgument("A string datatype cannot have length 0.")

        encoding = StringEncoding(encoding)
        with native_call("set_string_traits"):
            if length != VARIABLE and self._oid.is_variable_str():
                # libhdf5 keeps a variable-length string variable on set_size
                old, self._oid = self._oid, h5t.C_S1.copy()
                h5t.TypeID.close(old)
            self._oid.set_cset(_CSETS[encoding])
            self._oid.set_size(length)
            if length == VARIABLE:
                applied = self._oid.is_variable_str()
            else:
                applied = not self._oid.is_variable_str() and self._oid.get_size() == length
        if not applied:
            raise NativeFailure("set_string_traits", f"{encoding.value}, length {length}",
                                "the string datatype did not take the new length")

    def equal(self, other):
        if not (self.is_valid() and other.is_valid()):
            return False
        with native_call("equal"):
            return bool(self._oid.equal(other._oid))

    @property
    def dtype(self):
        """Numpy dtype of an in-memory element of this type."""
        clazz = self.get_class()
        if clazz is DatatypeClass.STRING:
            encoding, length = self.get_string_traits()
            if length == VARIABLE:
                return h5t.string_dtype(encoding.value)
            return np.dtype(f"S{length}")
        elif clazz is DatatypeClass.UNSUPPORTED:
            raise TypeMismatch("Unsupported datatype class has no numpy counterpart.")

        with native_call("dtype"):
            dtype = self._oid.dtype
        return dtype.newbyteorder("=")
