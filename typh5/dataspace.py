from h5py import h5s

from typh5.errors import InvalidArgument, native_call
from typh5.handle import ResourceHandle


class Dataspace(ResourceHandle):
    """
    Shape of a stored value.

    The dimension sequence given to the constructor reads as:
        ()        invalid dataspace
        (0,)      null dataspace, no elements
        (1,)      scalar dataspace
        (n, ...)  simple dataspace
    """

    def __init__(self, dims=()):
        super().__init__()
        dims = tuple(int(d) for d in dims)
        if not dims:
            return
        if any(d < 0 for d in dims):
            raise InvalidArgument(f"Dataspace dimensions must not be negative, got {dims}.")

        with native_call("create dataspace", str(dims)):
            if dims == (0,):
                sid = h5s.create(h5s.NULL)
            elif dims == (1,):
                sid = h5s.create(h5s.SCALAR)
            else:
                sid = h5s.create_simple(dims)
        self._acquire(sid, incref=False)

    @classmethod
    def scalar(cls):
        return cls((1,))

    @classmethod
    def null(cls):
        return cls((0,))

    def _extent_type(self):
        with native_call("get_simple_extent_type"):
            return self._oid.get_simple_extent_type()

    def dimensions(self):
        if not self.is_valid():
            return ()

        extent = self._extent_type()
        if extent == h5s.SIMPLE:
            with native_call("get_simple_extent_dims"):
                return tuple(int(d) for d in self._oid.get_simple_extent_dims())
        elif extent == h5s.SCALAR:
            return (1,)
        elif extent == h5s.NULL:
            return (0,)
        return ()

    def size(self):
        self._require_valid("query the size of a dataspace")
        with native_call("get_simple_extent_npoints"):
            return int(self._oid.get_simple_extent_npoints())

    def is_scalar(self):
        return self.is_valid() and self._extent_type() == h5s.SCALAR

    def is_null(self):
        return self.is_valid() and self._extent_type() == h5s.NULL

    @property
    def rank(self):
        return len(self.dimensions()) if not (self.is_scalar() or self.is_null()) else 0
