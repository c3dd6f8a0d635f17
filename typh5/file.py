import logging
import os

from h5py import h5f, h5g, h5p

from typh5 import config
from typh5.errors import AlreadyOpen, ContainerError, EmptyTarget, InvalidArgument, NotAContainer, native_call
from typh5.group import Group
from typh5.handle import ResourceHandle

MODES = ("r", "r+", "w")


class File:
    def __init__(self, name=None):
        self._name = name
        self._id = ResourceHandle()
        self.error_string = ""

    @property
    def file_name(self):
        return self._name

    def set_file_name(self, name):
        if self.is_open():
            logging.debug(f"Ignoring new file name {name}, {self._name} is open.")
            return
        self._name = name

    def is_open(self):
        return self._id.is_valid()

    def open(self, mode=config.DEFAULT_MODE):
        """
        Open the container, creating it when the target does not exist.

        mode is "r" (read-only), "r+" (read-write) or "w" (create, truncating
        any existing file).
        """
        try:
            self._open(mode)
        except ContainerError as exc:
            self.error_string = str(exc)
            raise
        self.error_string = ""
        return self

    def _open(self, mode):
        if self.is_open():
            raise AlreadyOpen(f"{self._name} is already open.")
        if not self._name:
            raise EmptyTarget("No file name set.")
        if mode not in MODES:
            raise InvalidArgument(f"Unknown mode {mode!r}, expected one of {MODES}.")

        name = os.fsencode(self._name)
        with native_call("file access property list"):
            fapl = h5p.create(h5p.FILE_ACCESS)
            fapl.set_fclose_degree(config.CLOSE_DEGREE)

        if mode == "w" or not os.path.exists(self._name):
            with native_call("create", self._name):
                fid = h5f.create(name, h5f.ACC_TRUNC, fapl=fapl)
            logging.debug(f"Created {self._name}.")
        else:
            # the signature check leaves the target untouched
            if not File.is_hdf5(self._name):
                raise NotAContainer(f"{self._name} is not an HDF5 file.")
            flags = h5f.ACC_RDONLY if mode == "r" else h5f.ACC_RDWR
            with native_call("open", self._name):
                fid = h5f.open(name, flags, fapl=fapl)
            logging.debug(f"Opened {self._name} with mode {mode}.")

        self._id = ResourceHandle._wrap(fid)

    def close(self):
        closed = self._id.close()
        if closed:
            logging.debug(f"Closed {self._name}.")
        return closed

    def root(self):
        if not self.is_open():
            return Group()
        with native_call("open root group", self._name):
            return Group._wrap(h5g.open(self._id._oid, b"/"))

    def __getitem__(self, name):
        with self.root() as root:
            return root[name]

    def __enter__(self):
        return self

    def __exit__(self, exception_type, exception_value, traceback):
        self.close()

    def __repr__(self):
        return f"<File {self._name} ({'open' if self.is_open() else 'closed'})>"

    @staticmethod
    def is_hdf5(path):
        """
        Look for the HDF5 signature at byte 0, 512, 1024, 2048, ... without
        calling the HDF5 library.
        """
        if not os.path.isfile(path):
            return False

        with open(path, "rb") as fh:
            offset = 0
            while offset <= config.MAX_SUPERBLOCK_OFFSET:
                fh.seek(offset)
                signature = fh.read(len(config.SIGNATURE))
                if signature == config.SIGNATURE:
                    return True
                if len(signature) < len(config.SIGNATURE):
                    return False
                offset = offset * 2 if offset else 512
        return False
