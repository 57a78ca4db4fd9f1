import numpy as np
import pyvista as pv

from ..core.mesh import Mesh
from ..utils.validation import ensure_mesh


def mesh_to_pyvista(mesh: Mesh, scale: float = 1.0):
    ensure_mesh(mesh)
    V, N, _, F = mesh.get_mesh_geometry(scale=scale)
    V = V.reshape(-1, 3)
    tri = np.asarray(F[:, 0:3], np.int64)
    n_faces = tri.shape[0]
    faces = np.hstack([np.full((n_faces, 1), 3, dtype=np.int64), tri]).ravel()
    poly = pv.PolyData(V, faces)
    if mesh.normal_count == mesh.vertex_count and mesh.normal_count > 0:
        poly.point_data["Normals"] = np.asarray(mesh.normals, float).reshape(-1, 3)
    return poly


def show_mesh(mesh: Mesh, scale: float = 1.0):
    pl = pv.Plotter()
    pl.set_background("white")
    pl.add_mesh(mesh_to_pyvista(mesh, scale), color="lightgray", show_edges=True, label=mesh.name)
    pl.add_axes(line_width=2)
    pl.add_legend(bcolor="white")
    pl.show()
