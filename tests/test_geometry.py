import unittest
import numpy as np

from PyObjMeshLib import Face, Mesh, unindexed_geometry
from PyObjMeshLib.core.errors import MalformedDataError


QUAD_V = [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 1.0, 1.0, 0.0, 0.0, 1.0, 0.0]


def make_quad():
    m = Mesh("quad", geometry=QUAD_V, normals=[0.0, 0.0, 1.0], texcoords=[0.0, 0.0, 0.0, 1.0, 1.0, 0.0])
    m.set_face_data([
        Face(0, 1, 2, 0, 0, 0, 0, 1, 1),
        Face(0, 2, 3, 0, 0, 0, 0, 1, 0),
    ])
    return m


class UnindexedGeometryTests(unittest.TestCase):
    def test_corner_count_regardless_of_sharing(self):
        m = make_quad()
        g, n, t = m.get_mesh_geometry_unindexed()
        for arr in (g, n, t):
            self.assertEqual(arr.size, m.face_count * 9)

    def test_corner_order(self):
        g, _, _ = make_quad().get_mesh_geometry_unindexed(normals=False, texture=False)
        expected = np.array([
            0, 0, 0, 1, 0, 0, 1, 1, 0,
            0, 0, 0, 1, 1, 0, 0, 1, 0,
        ], float)
        np.testing.assert_allclose(g, expected)

    def test_texture_and_normal_resolved_by_own_index(self):
        _, n, t = make_quad().get_mesh_geometry_unindexed(geometry=False)
        np.testing.assert_allclose(n.reshape(-1, 3), np.tile([0.0, 0.0, 1.0], (6, 1)))
        np.testing.assert_allclose(t.reshape(-1, 3)[:3], [[0, 0, 0], [1, 1, 0], [1, 1, 0]])
        np.testing.assert_allclose(t.reshape(-1, 3)[5], [0, 0, 0])

    def test_skipped_channels_are_none(self):
        g, n, t = make_quad().get_mesh_geometry_unindexed(geometry=True, normals=False, texture=False)
        self.assertIsNotNone(g)
        self.assertIsNone(n)
        self.assertIsNone(t)

    def test_scale_applied(self):
        g, _, _ = make_quad().get_mesh_geometry_unindexed(scale=2.5)
        self.assertAlmostEqual(float(g.max()), 2.5)

    def test_dtype(self):
        g, n, t = unindexed_geometry(make_quad(), dtype=np.float32)
        self.assertEqual(g.dtype, np.float32)
        self.assertEqual(t.dtype, np.float32)

    def test_unset_channel_yields_zeros(self):
        m = Mesh("bare", geometry=QUAD_V[:9], faces=[Face(0, 1, 2)])
        g, n, t = m.get_mesh_geometry_unindexed()
        self.assertEqual(n.size, 9)
        self.assertFalse(np.any(n))
        self.assertFalse(np.any(t))

    def test_out_of_range_index_fails(self):
        m = Mesh("bad", geometry=QUAD_V[:9], faces=[Face(0, 1, 3)])
        with self.assertRaises(MalformedDataError):
            m.get_mesh_geometry_unindexed()

    def test_unrequested_channel_not_checked(self):
        m = Mesh("bad_n", geometry=QUAD_V[:9], faces=[Face(0, 1, 2, 5, 5, 5)])
        g, n, t = m.get_mesh_geometry_unindexed(normals=False)
        self.assertEqual(g.size, 9)
        with self.assertRaises(MalformedDataError):
            m.get_mesh_geometry_unindexed(geometry=False)

    def test_unset_vertex_index_fails(self):
        m = Mesh("nov", geometry=QUAD_V[:9], faces=[Face(-1, 1, 2)])
        with self.assertRaises(MalformedDataError):
            m.get_mesh_geometry_unindexed()

    def test_empty_mesh(self):
        g, n, t = Mesh().get_mesh_geometry_unindexed()
        self.assertEqual((g.size, n.size, t.size), (0, 0, 0))


class IndexedGeometryTests(unittest.TestCase):
    def test_scaled_copies(self):
        m = make_quad()
        V, N, T, F = m.get_mesh_geometry(scale=3.0)
        np.testing.assert_allclose(V, np.asarray(QUAD_V) * 3.0)
        np.testing.assert_allclose(N, [0.0, 0.0, 3.0])
        self.assertEqual(T.size, 6)
        np.testing.assert_array_equal(F, m.faces)

    def test_outputs_are_independent(self):
        m = make_quad()
        V, N, T, F = m.get_mesh_geometry()
        V[:] = -1.0
        F[:] = 0
        self.assertEqual(m.get_vertex(1)[0], 1.0)
        self.assertEqual(m.get_face(1).vertices, (0, 2, 3))

    def test_invalid_indices_fail(self):
        m = Mesh("bad", geometry=QUAD_V, faces=[Face(0, 1, 4)])
        with self.assertRaises(MalformedDataError):
            m.get_mesh_geometry()


if __name__ == "__main__":
    unittest.main()
