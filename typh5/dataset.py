from h5py import h5s

from typh5.binding import read_value, write_value
from typh5.dataspace import Dataspace
from typh5.dtypes import Datatype
from typh5.errors import native_call
from typh5.node import Node


class Dataset(Node):
    def datatype(self):
        self._require_valid("query the dataset datatype")
        with native_call("get_type", self.name()):
            return Datatype._wrap(self._oid.get_type())

    def dataspace(self):
        self._require_valid("query the dataset dataspace")
        with native_call("get_space", self.name()):
            return Dataspace._wrap(self._oid.get_space())

    @property
    def shape(self):
        with self.dataspace() as space:
            return space.dimensions()

    def write(self, value, memspace=None, memtype=None):
        """
        Write value over the whole dataset.

        memspace and memtype override the memory side of the transfer; by
        default both follow from value. The element count must match the
        stored dataspace and text only goes to string datasets.
        """
        self._require_valid("write")
        if memspace is not None:
            memspace._require_valid("write through a memory dataspace")
        if memtype is not None:
            memtype._require_valid("write through a memory datatype")

        target = self.name()
        mspace = memspace._oid if memspace is not None else h5s.ALL

        def write(buf, mtype):
            with native_call("write", target):
                self._oid.write(mspace, h5s.ALL, buf, mtype=mtype)

        with self.datatype() as filetype, self.dataspace() as filespace:
            write_value(write, value, filetype, filespace,
                        memsize=memspace.size() if memspace is not None else None,
                        memtype=memtype)

    def read(self, dtype=None, sequence=None):
        """
        Read the whole dataset.

        Text comes back as str or a list of str, numbers as a numpy scalar or
        a 1-D numpy array. sequence forces one form or the other; dtype
        overrides the numeric memory type.
        """
        self._require_valid("read")
        target = self.name()

        def read(buf, mtype):
            with native_call("read", target):
                self._oid.read(h5s.ALL, h5s.ALL, buf, mtype=mtype)

        with self.datatype() as filetype, self.dataspace() as filespace:
            return read_value(read, filetype, filespace, dtype, sequence)

    def __repr__(self):
        if not self.is_valid():
            return "<Dataset (invalid)>"
        return f"<Dataset {self.name()} shape={self.shape}>"
