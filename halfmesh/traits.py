# Copyright 2024, m3shware
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.


""" Geometric mesh traits.

Convenience functions to compute vertex and face normals, face areas and
related quantities. Nothing is cached: every call reads the current vertex
coordinates of the mesh.

All functions report unknown handles and degenerate configurations by
returning :obj:`None` instead of raising.
"""

import numpy as np

import halfmesh.linalg as linalg


def _face_points(mesh, face):
    # Coordinates of the corners of a face or None for unknown handles.
    f = mesh._faces.get(face)

    if f is None:
        return None

    return [mesh._verts[v]._point for v in f._verts]


def bounds(points):
    r""" Bounding box vertices.

    Corner vertices of the axis-aligned bounding box.

    Parameters
    ----------
    points : array_like, shape (n, k)
        Coordinates of :math:`n` points in :math:`\mathbb{R}^k`,
        one point per row.

    Returns
    -------
    a : ~numpy.ndarray
        Holds the minimum value for each dimension.
    b : ~numpy.ndarray
        Holds the maximum value for each dimension.
    """
    return np.min(points, axis=0), np.max(points, axis=0)


def face_normal(mesh, face):
    """ Face normal.

    Compute face normal as cross product of the edge vectors that leave
    the first corner of a face.

    Parameters
    ----------
    mesh : Mesh
        A mesh.
    face : int
        Face handle.

    Returns
    -------
    ~numpy.ndarray, shape (3, ) or None
        Unit normal vector. :obj:`None` for unknown faces and for faces
        whose first three corners are collinear.

    Note
    ----
    Faces are assumed to be planar. For a non-planar polygon the result
    is the normal of the triangle spanned by its first three corners.
    """
    points = _face_points(mesh, face)

    if points is None:
        return None

    p0, p1, p2 = points[:3]

    return linalg.unit_or_none(linalg.cross(p1 - p0, p2 - p0))


def face_normals(mesh):
    """ Normals of all faces.

    Returns
    -------
    dict
        Maps face handles to unit normal vectors (or :obj:`None` for
        degenerate faces).
    """
    return {f: face_normal(mesh, f) for f in mesh._faces}


def face_area(mesh, face):
    """ Face area.

    Triangles use half the length of the edge cross product. A polygon
    with :math:`n > 3` corners is split into the fan of triangles
    :math:`(0, i, i+1)`, :math:`i = 1, \\ldots, n-2`, and the triangle
    areas are summed up.

    Parameters
    ----------
    mesh : Mesh
        A mesh.
    face : int
        Face handle.

    Returns
    -------
    float or None
        Non-negative area, :obj:`None` for unknown faces.

    Note
    ----
    Exact for convex planar polygons only.
    """
    points = _face_points(mesh, face)

    if points is None:
        return None

    p0 = points[0]
    area = 0.0

    for p1, p2 in zip(points[1:-1], points[2:]):
        area += 0.5 * linalg.norm(linalg.cross(p1 - p0, p2 - p0))

    return area


def face_centroid(mesh, face):
    """ Face centroid.

    Average of the corner coordinates of a face, :obj:`None` for unknown
    faces.
    """
    points = _face_points(mesh, face)

    if points is None:
        return None

    return np.mean(points, axis=0)


def area(mesh):
    """ Total surface area.
    """
    return sum(face_area(mesh, f) for f in mesh._faces)


def edge_length(mesh, u, v):
    """ Edge length.

    Parameters
    ----------
    mesh : Mesh
        A mesh.
    u, v : int
        Vertex handles of the end points.

    Returns
    -------
    float or None
        Distance of the end points or :obj:`None` if `u` and `v` are not
        adjacent.
    """
    if (u, v) not in mesh._halfs:
        return None

    return linalg.norm(mesh._verts[v]._point - mesh._verts[u]._point)


def vertex_normal(mesh, vertex):
    """ Vertex normal.

    Area weighted average of the normals of all faces incident to a
    vertex.

    Parameters
    ----------
    mesh : Mesh
        A mesh.
    vertex : int
        Vertex handle.

    Returns
    -------
    ~numpy.ndarray, shape (3, ) or None
        Unit normal vector. :obj:`None` for unknown and isolated vertices,
        if all incident faces have zero area, or if the weighted normals
        cancel out.
    """
    faces = mesh.vertex_faces(vertex)

    if not faces:
        return None

    normal = np.zeros(3)
    total = 0.0

    for f in faces:
        n = face_normal(mesh, f)

        # Degenerate corner: no direction to contribute.
        if n is None:
            continue

        a = face_area(mesh, f)
        normal += a * n
        total += a

    if total == 0.0:
        return None

    return linalg.unit_or_none(normal)


def vertex_normals(mesh):
    """ Normals of all vertices.

    Each face broadcasts its area weighted normal to its corners. The
    result agrees with :func:`vertex_normal` evaluated per vertex (up to
    round-off) but takes a single pass over the faces.

    Returns
    -------
    dict
        Maps vertex handles to unit normals or :obj:`None`.
    """
    sums = {v: np.zeros(3) for v in mesh._verts}
    totals = dict.fromkeys(mesh._verts, 0.0)

    for f, face in mesh._faces.items():
        n = face_normal(mesh, f)

        if n is None:
            continue

        a = face_area(mesh, f)

        for v in face._verts:
            sums[v] += a * n
            totals[v] += a

    return {v: linalg.unit_or_none(sums[v]) if totals[v] != 0.0 else None
            for v in mesh._verts}
