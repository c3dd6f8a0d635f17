import enum
import logging

from h5py import h5a, h5d, h5f, h5g, h5i, h5s, h5t
from h5py._objects import ObjectID

from typh5.errors import InvalidHandle, native_call


class Category(enum.Enum):
    INVALID = "invalid"
    FILE = "file"
    GROUP = "group"
    DATASET = "dataset"
    DATATYPE = "datatype"
    DATASPACE = "dataspace"
    ATTRIBUTE = "attribute"
    OTHER = "other"


_CATEGORIES = {
    h5i.FILE: Category.FILE,
    h5i.GROUP: Category.GROUP,
    h5i.DATASET: Category.DATASET,
    h5i.DATATYPE: Category.DATATYPE,
    h5i.DATASPACE: Category.DATASPACE,
    h5i.ATTR: Category.ATTRIBUTE,
}

# Release primitive per category; anything else goes through ObjectID.close.
_RELEASE = {
    Category.FILE: h5f.FileID.close,
    Category.GROUP: h5g.GroupID.close,
    Category.DATASET: h5d.DatasetID.close,
    Category.DATATYPE: h5t.TypeID.close,
    Category.DATASPACE: h5s.SpaceID.close,
    Category.ATTRIBUTE: h5a.AttrID.close,
}


class ResourceHandle:
    """
    Shared ownership of one HDF5 identifier.

    A valid handle owns exactly one increment of the identifier's reference
    count. The increment is held by an h5py ObjectID, so it is also given
    back when the handle is garbage collected without being closed.
    """

    def __init__(self):
        self._oid = None

    @classmethod
    def _wrap(cls, oid, incref=False):
        """Build a handle of this class around an h5py identifier.

        With incref=False the handle adopts the increment oid already owns
        (the identifier was just returned by an open/create call).
        """
        handle = cls.__new__(cls)
        handle._oid = None
        handle._acquire(oid, incref)
        return handle

    def _acquire(self, oid, incref):
        if oid is None or not oid.valid:
            return
        if incref:
            with native_call("inc_ref"):
                h5i.inc_ref(oid)
            # a second ObjectID on the same hid owns the new increment
            oid = type(oid)(oid.id)
        self._oid = oid
        logging.debug(f"Acquired id {oid.id} (incref={incref}).")

    def _require_valid(self, operation):
        if not self.is_valid():
            raise InvalidHandle(f"Cannot {operation}: the {type(self).__name__} handle is invalid or closed.")

    def is_valid(self):
        # Live query: closing the file invalidates everything opened from it.
        return self._oid is not None and bool(self._oid.valid)

    def category(self):
        if not self.is_valid():
            return Category.INVALID
        with native_call("get_type"):
            code = h5i.get_type(self._oid)
        return _CATEGORIES.get(code, Category.OTHER)

    def is_group(self):
        return self.category() is Category.GROUP

    def is_dataset(self):
        return self.category() is Category.DATASET

    def name(self):
        if not self.is_valid():
            return None
        with native_call("get_name"):
            name = h5i.get_name(self._oid)
        return name.decode("utf-8") if name is not None else None

    def refcount(self):
        if not self.is_valid():
            return 0
        with native_call("get_ref"):
            return h5i.get_ref(self._oid)

    def copy(self):
        return type(self)._wrap(self._oid if self.is_valid() else None, incref=True)

    __copy__ = copy

    def assign(self, other):
        """Drop the current identifier, then share other's."""
        if other is self:
            return self
        if self.is_valid():
            self.close()
        if other.is_valid():
            self._acquire(other._oid, incref=True)
        return self

    def close(self):
        if not self.is_valid():
            self._oid = None
            return False

        category = self.category()
        oid, self._oid = self._oid, None
        release = _RELEASE.get(category, ObjectID.close)
        logging.debug(f"Releasing {category.value} id {oid.id}.")
        with native_call("close", category.value):
            release(oid)
        return True

    def __bool__(self):
        return self.is_valid()

    def __eq__(self, other):
        if not isinstance(other, ResourceHandle):
            return NotImplemented
        if not (self.is_valid() and other.is_valid()):
            return False
        return self._oid.id == other._oid.id

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    def __enter__(self):
        return self

    def __exit__(self, exception_type, exception_value, traceback):
        self.close()

    def __repr__(self):
        if not self.is_valid():
            return f"<{type(self).__name__} (invalid)>"
        return f"<{type(self).__name__} {self.name() or self.category().value}>"
