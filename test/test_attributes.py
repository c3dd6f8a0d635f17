import os
import tempfile
import unittest

import h5py
import numpy as np

import typh5
from typh5 import DatatypeClass, StringEncoding


class Attributes(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.name = os.path.join(self._tmp.name, "attributes.h5")
        self.f = typh5.File(self.name).open("w")
        self.root = self.f.root()

    def tearDown(self):
        self.f.close()
        self._tmp.cleanup()

    def test_roundtrip(self):
        g = self.root.create_group("g")
        g.write_attribute("count", 3)
        g.write_attribute("scale", 0.5)
        g.write_attribute("flag", True)
        g.write_attribute("label", "größe")

        self.assertTrue(g.has_attribute("count"))
        self.assertFalse(g.has_attribute("missing"))
        self.assertEqual(g.read_attribute("count"), 3)
        self.assertEqual(g.read_attribute("scale"), 0.5)
        self.assertTrue(g.read_attribute("flag", dtype=bool))
        self.assertEqual(g.read_attribute("label"), "größe")
        self.assertEqual(g.read_attribute("count", dtype=float), 3.0)

    def test_on_datasets(self):
        self.root.write("d", [1, 2, 3])
        d = self.root.open_dataset("d")
        d.write_attribute("units", "m")
        self.assertEqual(d.read_attribute("units"), "m")
        self.assertEqual(d.attribute_names(), ["units"])

    def test_overwrite_same_type(self):
        self.root.write_attribute("count", 3)
        self.root.write_attribute("count", 5)
        self.assertEqual(self.root.read_attribute("count"), 5)

        self.root.write_attribute("label", "old")
        self.root.write_attribute("label", "new")
        self.assertEqual(self.root.read_attribute("label"), "new")

    def test_type_mismatch(self):
        self.root.write_attribute("count", 3)
        with self.assertRaises(typh5.TypeMismatch):
            self.root.write_attribute("count", 2.5)
        with self.assertRaises(typh5.TypeMismatch):
            self.root.write_attribute("count", "three")
        self.assertEqual(self.root.read_attribute("count"), 3)

    def test_sequences_rejected(self):
        with self.assertRaises(typh5.InvalidArgument):
            self.root.write_attribute("values", [1, 2, 3])
        with self.assertRaises(typh5.InvalidArgument):
            self.root.write_attribute("labels", ["a", "b"])
        self.assertFalse(self.root.has_attribute("values"))

    def test_missing(self):
        with self.assertRaises(typh5.NotFound):
            self.root.read_attribute("missing")
        with self.assertRaises(typh5.NotFound):
            self.root.attribute_type("missing")
        with self.assertRaises(typh5.NotFound):
            self.root.delete_attribute("missing")

    def test_attribute_type(self):
        self.root.write_attribute("count", 3)
        self.root.write_attribute("label", "x")
        self.assertIs(self.root.attribute_type("count").get_class(), DatatypeClass.INTEGER)
        self.assertEqual(self.root.attribute_type("count").size(), 8)
        self.assertEqual(self.root.attribute_type("label").get_string_traits(),
                         (StringEncoding.UTF8, typh5.VARIABLE))

    def test_delete(self):
        self.root.write_attribute("count", 3)
        self.root.delete_attribute("count")
        self.assertFalse(self.root.has_attribute("count"))

    def test_names_by_creation_order(self):
        g = self.root.create_group("ordered", track_creation_order=True)
        for name in ("zeta", "alpha", "mu"):
            g.write_attribute(name, 1)
        self.assertEqual(g.attribute_names(), ["zeta", "alpha", "mu"])

    def test_names_by_name(self):
        g = self.root.create_group("plain")
        for name in ("zeta", "alpha", "mu"):
            g.write_attribute(name, 1)
        self.assertEqual(g.attribute_names(), ["alpha", "mu", "zeta"])

    def test_h5py_attributes(self):
        self.f.close()
        with h5py.File(self.name, "a") as f:
            f.attrs["text"] = "from h5py"
            f.attrs["fixed"] = np.bytes_(b"abc")
            f.attrs["value"] = np.float32(1.5)

        self.f.open("r")
        root = self.f.root()
        self.assertEqual(root.read_attribute("text"), "from h5py")
        self.assertEqual(root.read_attribute("fixed"), "abc")
        self.assertEqual(root.read_attribute("value"), 1.5)
        self.assertEqual(root.read_attribute("value").dtype, np.dtype("float32"))

    def test_read_by_h5py(self):
        self.root.write_attribute("label", "größe")
        self.root.write_attribute("count", 3)
        self.f.close()

        with h5py.File(self.name, "r") as f:
            self.assertEqual(f.attrs["label"], "größe")
            self.assertEqual(f.attrs["count"], 3)


if __name__ == "__main__":
    unittest.main()
