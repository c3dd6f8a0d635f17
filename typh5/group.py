import logging

from h5py import h5d, h5g, h5p

from typh5.binding import binding_for_value
from typh5.dataset import Dataset
from typh5.errors import ContainerError, NameCollision, NotFound, WrongKind, native_call
from typh5.handle import Category
from typh5.link import iter_links, link_create_plist, object_kind
from typh5.node import Node, encode_name


class Group(Node):
    def exists(self, name):
        """
        Whether name resolves below this group.

        Paths are checked one component at a time, so a missing or
        non-group intermediate gives False instead of an error.
        """
        if not self.is_valid():
            return False
        parts = [part for part in name.split("/") if part]
        path = "/" if name.startswith("/") else ""
        if not parts:
            # only "/" names something: the root group
            return path == "/"

        for i, part in enumerate(parts):
            path += part
            with native_call("exists", path):
                if not self._oid.links.exists(encode_name(path)):
                    return False
            if i < len(parts) - 1:
                if object_kind(self._oid, path) is not Category.GROUP:
                    return False
                path += "/"
        return True

    def _kind(self, name):
        if not self.exists(name):
            return None
        return object_kind(self._oid, name)

    def is_group(self, name=None):
        if name is None:
            return super().is_group()
        return self._kind(name) is Category.GROUP

    def is_dataset(self, name=None):
        if name is None:
            return super().is_dataset()
        return self._kind(name) is Category.DATASET

    def __contains__(self, name):
        return self.exists(name)

    def tracks_creation_order(self):
        self._require_valid("query link creation order")
        with native_call("get_link_creation_order"):
            cpl = self._oid.get_create_plist()
            try:
                return bool(cpl.get_link_creation_order() & h5p.CRT_ORDER_TRACKED)
            finally:
                cpl.close()

    def create_group(self, name, track_creation_order=False):
        self._require_valid("create a group")
        if self.exists(name):
            raise NameCollision(f"'{name}' already exists in {self.name()}.")

        with native_call("create group", name):
            gcpl = h5p.create(h5p.GROUP_CREATE)
            if track_creation_order:
                flags = h5p.CRT_ORDER_TRACKED | h5p.CRT_ORDER_INDEXED
                gcpl.set_link_creation_order(flags)
                gcpl.set_attr_creation_order(flags)
            gid = h5g.create(self._oid, encode_name(name), lcpl=link_create_plist(), gcpl=gcpl)
        logging.debug(f"Created group {name} (creation order tracked: {track_creation_order}).")
        return Group._wrap(gid)

    def open_group(self, name):
        self._require_valid("open a group")
        kind = self._kind(name)
        if kind is None:
            raise NotFound(f"No group '{name}' in {self.name()}.")
        if kind is not Category.GROUP:
            raise WrongKind(f"'{name}' is a {kind.value}, not a group.")
        with native_call("open group", name):
            return Group._wrap(h5g.open(self._oid, encode_name(name)))

    def open_dataset(self, name):
        self._require_valid("open a dataset")
        kind = self._kind(name)
        if kind is None:
            raise NotFound(f"No dataset '{name}' in {self.name()}.")
        if kind is not Category.DATASET:
            raise WrongKind(f"'{name}' is a {kind.value}, not a dataset.")
        with native_call("open dataset", name):
            return Dataset._wrap(h5d.open(self._oid, encode_name(name)))

    def open(self, name):
        kind = self._kind(name)
        if kind is Category.GROUP:
            return self.open_group(name)
        elif kind is Category.DATASET:
            return self.open_dataset(name)
        elif kind is None:
            raise NotFound(f"No object '{name}' in {self.name()}.")
        raise WrongKind(f"'{name}' is a {kind.value}, neither a group nor a dataset.")

    def __getitem__(self, name):
        return self.open(name)

    def create_dataset(self, name, dataspace, datatype):
        self._require_valid("create a dataset")
        dataspace._require_valid("create a dataset from a dataspace")
        datatype._require_valid("create a dataset from a datatype")
        if self.exists(name):
            raise NameCollision(f"'{name}' already exists in {self.name()}.")

        with native_call("create dataset", name):
            dsid = h5d.create(self._oid, encode_name(name), datatype._oid, dataspace._oid, lcpl=link_create_plist())
        logging.debug(f"Created dataset {name} with dimensions {dataspace.dimensions()}.")
        return Dataset._wrap(dsid)

    def unlink(self, name):
        self._require_valid("unlink")
        if not self.exists(name):
            raise NotFound(f"No object '{name}' in {self.name()}.")
        with native_call("unlink", name):
            self._oid.unlink(encode_name(name))

    def write(self, name, value):
        """
        Store value under name.

        An existing dataset is overwritten in place; otherwise a dataset with
        the natural type and shape of value is created first, and removed
        again if the write fails.
        """
        self._require_valid("write")
        kind = self._kind(name)
        if kind is Category.DATASET:
            with self.open_dataset(name) as dataset:
                dataset.write(value)
            return
        elif kind is not None:
            raise WrongKind(f"'{name}' is a {kind.value}, not a dataset.")

        binding = binding_for_value(value)
        with binding.dataspace(value) as space, binding.datatype(value) as datatype:
            dataset = self.create_dataset(name, space, datatype)
        try:
            with dataset:
                dataset.write(value)
        except ContainerError:
            logging.debug(f"Writing {name} failed, removing the new dataset.")
            self.unlink(name)
            raise

    def read(self, name, dtype=None, sequence=None):
        with self.open_dataset(name) as dataset:
            return dataset.read(dtype, sequence)

    def links(self, creation_order=False):
        self._require_valid("list links")
        if creation_order and not self.tracks_creation_order():
            logging.debug(f"{self.name()} does not track creation order, listing links by name.")
            creation_order = False
        return list(iter_links(self._oid, creation_order))

    def group_names(self, creation_order=False):
        return [link.name for link in self.links(creation_order) if link.kind is Category.GROUP]

    def dataset_names(self, creation_order=False):
        return [link.name for link in self.links(creation_order) if link.kind is Category.DATASET]

    def sub_groups(self, creation_order=False):
        return [self.open_group(name) for name in self.group_names(creation_order)]

    def datasets(self, creation_order=False):
        return [self.open_dataset(name) for name in self.dataset_names(creation_order)]

    def __iter__(self):
        for link in self.links():
            yield link.name

    def __len__(self):
        self._require_valid("count links")
        with native_call("get_num_objs"):
            return self._oid.get_num_objs()
