import numpy as np
import pytest
import trimesh


def _face_normals(mesh):
    v = np.asarray(mesh.vertices, dtype=float)
    tri = np.asarray(mesh.indices, dtype=np.int64).reshape(-1, 3)
    a, b, c = v[tri[:, 0]], v[tri[:, 1]], v[tri[:, 2]]
    return tri, np.cross(b - a, c - a)


@pytest.fixture
def winding_matches_normals():
    """Cada triángulo antihorario visto desde la normal de su primer vértice."""
    def check(mesh):
        tri, cross = _face_normals(mesh)
        n = np.asarray(mesh.normals, dtype=float)[tri[:, 0]]
        dots = np.einsum("ij,ij->i", cross, n)
        return bool(np.all(dots > 0.0))
    return check


@pytest.fixture
def topology():
    """Trimesh sin normales y con vértices fusionados, para comprobar cierre y orientación."""
    def build(mesh):
        tm = trimesh.Trimesh(
            vertices=np.asarray(mesh.vertices, dtype=float),
            faces=np.asarray(mesh.indices, dtype=np.int64).reshape(-1, 3),
            process=False,
        )
        tm.merge_vertices()
        return tm
    return build
