import os
import tempfile
import unittest

import h5py

import typh5
from typh5 import File


class Files(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.name = os.path.join(self._tmp.name, "file.h5")

    def tearDown(self):
        self._tmp.cleanup()

    def test_creates_missing(self):
        f = File(self.name)
        self.assertFalse(f.is_open())
        self.assertIs(f.open(), f)
        self.assertTrue(f.is_open())
        root = f.root()
        self.assertEqual(root.name(), "/")
        self.assertEqual(root.group_names(), [])
        self.assertEqual(root.dataset_names(), [])
        self.assertTrue(f.close())
        self.assertFalse(f.close())

        self.assertTrue(File.is_hdf5(self.name))

    def test_already_open(self):
        with File(self.name).open("w") as f:
            with self.assertRaises(typh5.AlreadyOpen):
                f.open()
            self.assertIn("already open", f.error_string)

    def test_empty_target(self):
        with self.assertRaises(typh5.EmptyTarget):
            File().open()
        with self.assertRaises(typh5.EmptyTarget):
            File("").open()

    def test_unknown_mode(self):
        with self.assertRaises(typh5.InvalidArgument):
            File(self.name).open("x")
        self.assertFalse(os.path.exists(self.name))

    def test_not_a_container(self):
        with open(self.name, "w") as fh:
            fh.write("not an HDF5 file")

        f = File(self.name)
        with self.assertRaises(typh5.NotAContainer):
            f.open()
        self.assertFalse(f.is_open())
        self.assertTrue(f.error_string)
        with open(self.name) as fh:
            self.assertEqual(fh.read(), "not an HDF5 file")

    def test_truncate(self):
        with File(self.name).open("w") as f:
            f.root().write("d", 1)
        with File(self.name).open("w") as f:
            self.assertFalse(f.root().exists("d"))

    def test_read_only(self):
        with File(self.name).open("w") as f:
            f.root().write("d", 1)

        with File(self.name).open("r") as f:
            root = f.root()
            self.assertEqual(root.read("d"), 1)
            with self.assertRaises(typh5.NativeFailure):
                root.write("d", 2)
            with self.assertRaises(typh5.NativeFailure):
                root.create_group("g")

    def test_read_write(self):
        with File(self.name).open("w") as f:
            f.root().write("d", 1)

        with File(self.name).open("r+") as f:
            f.root().write("d", 2)
            f.root().write("e", 3)

        with File(self.name).open("r") as f:
            self.assertEqual(f["d"].read(), 2)
            self.assertEqual(f["e"].read(), 3)

    def test_file_name(self):
        f = File()
        f.set_file_name(self.name)
        self.assertEqual(f.file_name, self.name)
        f.open()
        f.set_file_name("other.h5")
        self.assertEqual(f.file_name, self.name)
        f.close()

    def test_root_of_closed_file(self):
        self.assertFalse(File(self.name).root().is_valid())

    def test_is_hdf5(self):
        self.assertFalse(File.is_hdf5(self.name))
        self.assertFalse(File.is_hdf5(self._tmp.name))

        with open(self.name, "wb") as fh:
            fh.write(b"\0" * 100)
        self.assertFalse(File.is_hdf5(self.name))

    def test_is_hdf5_user_block(self):
        with h5py.File(self.name, "w", userblock_size=512) as f:
            f["d"] = 5
        with open(self.name, "rb") as fh:
            self.assertNotEqual(fh.read(8), b"\x89HDF\r\n\x1a\n")

        self.assertTrue(File.is_hdf5(self.name))
        with File(self.name).open("r") as f:
            self.assertEqual(f["d"].read(), 5)


if __name__ == "__main__":
    unittest.main()
