import io
import os
import tempfile
import unittest
import numpy as np

from PyObjMeshLib import Face, Mesh, ObjFileLoader
from PyObjMeshLib.core.errors import (
    FileAccessError,
    InvalidArgumentError,
    InvalidContextError,
    MalformedInputError,
    OutOfRangeError,
)


TWO_OBJECTS = (
    "o left\nv 0 0 0\nv 1 0 0\nv 0 1 0\nvn 0 0 1\nf 1//1 2//1 3//1\n"
    "o right\nv 2 0 0\nv 3 0 0\nv 2 1 0\ns 5\nf 4 5 6\n"
)


class ObjFileLoaderTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = self.write("scene.obj", TWO_OBJECTS)

    def write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_load_on_construction(self):
        loader = ObjFileLoader(self.path)
        self.assertEqual(loader.mesh_count, 2)
        self.assertEqual(len(loader), 2)
        self.assertEqual([m.name for m in loader], ["left", "right"])
        self.assertEqual(loader.get_mesh(1).get_face(0).smoothing_group, 5)
        self.assertEqual(loader.get_mesh_by_name("left").normal_count, 1)

    def test_empty_loader(self):
        loader = ObjFileLoader()
        self.assertEqual(loader.mesh_count, 0)
        with self.assertRaises(OutOfRangeError):
            loader.get_mesh(0)

    def test_second_parse_is_invalid_context(self):
        loader = ObjFileLoader(self.path)
        with self.assertRaises(InvalidContextError):
            loader.read_file(self.path)
        self.assertEqual(loader.mesh_count, 2)

    def test_parse_after_add_is_invalid_context(self):
        loader = ObjFileLoader()
        loader.add_mesh(Mesh("manual"))
        with self.assertRaises(InvalidContextError):
            loader.read_stream(io.StringIO(TWO_OBJECTS))

    def test_missing_file(self):
        with self.assertRaises(FileAccessError):
            ObjFileLoader(os.path.join(self.tmp.name, "nope.obj"))

    def test_failed_parse_leaves_loader_empty(self):
        bad = self.write("bad.obj", TWO_OBJECTS + "f 1 2 99\n")
        loader = ObjFileLoader()
        with self.assertRaises(MalformedInputError):
            loader.read_file(bad)
        self.assertEqual(loader.mesh_count, 0)
        loader.read_file(self.path)
        self.assertEqual(loader.mesh_count, 2)

    def test_get_mesh_out_of_range(self):
        loader = ObjFileLoader(self.path)
        with self.assertRaises(OutOfRangeError):
            loader.get_mesh(2)
        with self.assertRaises(KeyError):
            loader.get_mesh_by_name("middle")

    def test_add_mesh_stores_a_copy(self):
        m = Mesh("mine", geometry=[0.0, 0.0, 0.0], faces=[Face(0, 0, 0)])
        loader = ObjFileLoader()
        loader.add_mesh(m)
        m.add_geometry([1.0, 1.0, 1.0])
        m.name = "changed"
        stored = loader.get_mesh(0)
        self.assertEqual(stored.vertex_count, 1)
        self.assertEqual(stored.name, "mine")
        stored.clear_face_data()
        self.assertEqual(m.face_count, 1)

    def test_add_mesh_rejects_other_types(self):
        with self.assertRaises(InvalidArgumentError):
            ObjFileLoader().add_mesh("not a mesh")

    def test_write_and_reload(self):
        loader = ObjFileLoader(self.path)
        out = os.path.join(self.tmp.name, "copy.obj")
        loader.write_file(out)
        again = ObjFileLoader(out)
        self.assertEqual(again.meshes, loader.meshes)

    def test_write_stream(self):
        loader = ObjFileLoader()
        loader.add_mesh(Mesh("tri", geometry=[0, 0, 0, 1, 0, 0, 0, 1, 0], faces=[Face(0, 1, 2)]))
        buf = io.StringIO()
        loader.write_stream(buf)
        self.assertIn("f 1 2 3", buf.getvalue())

    def test_write_to_bad_path(self):
        loader = ObjFileLoader(self.path)
        with self.assertRaises(FileAccessError):
            loader.write_file(os.path.join(self.tmp.name, "missing", "x.obj"))

    def test_unindexed_from_loaded_mesh(self):
        loader = ObjFileLoader(self.path)
        g, n, t = loader.get_mesh(0).get_mesh_geometry_unindexed(scale=2.0)
        self.assertEqual(g.size, 9)
        np.testing.assert_allclose(n, [0, 0, 2] * 3)
        self.assertFalse(np.any(t))


if __name__ == "__main__":
    unittest.main()
