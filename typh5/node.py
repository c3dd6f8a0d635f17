import logging

from h5py import h5, h5a, h5p

from typh5.binding import binding_for_value, read_value, write_value
from typh5.dataspace import Dataspace
from typh5.dtypes import Datatype
from typh5.errors import ContainerError, InvalidArgument, NotFound, TypeMismatch, native_call
from typh5.handle import ResourceHandle


def encode_name(name):
    return name.encode("utf-8") if isinstance(name, str) else bytes(name)


class Attribute(ResourceHandle):
    def datatype(self):
        self._require_valid("query the attribute datatype")
        with native_call("attribute datatype"):
            return Datatype._wrap(self._oid.get_type())

    def dataspace(self):
        self._require_valid("query the attribute dataspace")
        with native_call("attribute dataspace"):
            return Dataspace._wrap(self._oid.get_space())


class Node(ResourceHandle):
    """A group or a dataset: anything that carries attributes."""

    def has_attribute(self, name):
        self._require_valid("look up an attribute")
        with native_call("has_attribute", name):
            return bool(h5a.exists(self._oid, encode_name(name)))

    def _open_attribute(self, name):
        if not self.has_attribute(name):
            raise NotFound(f"No attribute '{name}' on {self.name()}.")
        with native_call("open attribute", name):
            return Attribute._wrap(h5a.open(self._oid, encode_name(name)))

    def tracks_attribute_order(self):
        self._require_valid("query attribute creation order")
        with native_call("get_attr_creation_order"):
            cpl = self._oid.get_create_plist()
            try:
                return bool(cpl.get_attr_creation_order() & h5p.CRT_ORDER_TRACKED)
            finally:
                cpl.close()

    def attribute_names(self):
        names = []

        def collect(name, *args):
            names.append(name.decode("utf-8"))

        if self.tracks_attribute_order():
            index_type = h5.INDEX_CRT_ORDER
        else:
            index_type = h5.INDEX_NAME
        with native_call("attribute_names", self.name()):
            h5a.iterate(self._oid, collect, index_type=index_type, order=h5.ITER_INC)
        return names

    def attribute_type(self, name):
        with self._open_attribute(name) as attr:
            return attr.datatype()

    def read_attribute(self, name, dtype=None):
        with self._open_attribute(name) as attr:

            def read(buf, mtype):
                with native_call("read attribute", name):
                    attr._oid.read(buf, mtype=mtype)

            return read_value(read, attr.datatype(), attr.dataspace(), dtype)

    def write_attribute(self, name, value):
        self._require_valid("write an attribute")
        binding = binding_for_value(value)
        if binding.sequence:
            raise InvalidArgument(f"Attribute '{name}' must hold a single value, not a sequence.")

        natural = binding.datatype(value)
        created = not self.has_attribute(name)
        if created:
            space = Dataspace.scalar()
            with native_call("create attribute", name):
                attr = Attribute._wrap(h5a.create(self._oid, encode_name(name), natural._oid, space._oid))
            logging.debug(f"Created attribute {name} on {self.name()}.")
        else:
            attr = self._open_attribute(name)
            with attr.datatype() as stored:
                if not stored.equal(natural):
                    attr.close()
                    raise TypeMismatch(f"Attribute '{name}' is stored with a different datatype.")

        def write(buf, mtype):
            with native_call("write attribute", name):
                attr._oid.write(buf, mtype=mtype)

        try:
            with attr, attr.dataspace() as space:
                write_value(write, value, natural, space)
        except ContainerError:
            if created:
                with native_call("delete attribute", name):
                    h5a.delete(self._oid, encode_name(name))
            raise

    def delete_attribute(self, name):
        if not self.has_attribute(name):
            raise NotFound(f"No attribute '{name}' on {self.name()}.")
        with native_call("delete attribute", name):
            h5a.delete(self._oid, encode_name(name))

    def to_group(self):
        from typh5.group import Group
        return Group._wrap(self._oid if self.is_group() else None, incref=True)

    def to_dataset(self):
        from typh5.dataset import Dataset
        return Dataset._wrap(self._oid if self.is_dataset() else None, incref=True)
