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


""" Combinatorial mesh item neighborhood iterators.

Breadth-first traversals over vertex adjacency and face adjacency of a
:class:`~halfmesh.hds.Mesh`. Items are reported together with their
combinatorial distance to the seed item.
"""

from collections import deque


def verts_bfs(mesh, vertex, stop=None, start=0):
    """ Breadth-first vertex neighborhood iterator.

    Parameters
    ----------
    mesh : Mesh
        A mesh.
    vertex : int
        The seed vertex.
    stop : int, optional
        All vertices at edge distance less or equal to `stop` are visited.
    start : int, optional
        Vertex reporting starts at the given distance level.

    Yields
    ------
    int
        Next vertex handle in breadth-first search.
    int
        Distance to `vertex`.


    The 1-ring of a vertex, without the vertex itself, is visited by

    >>> ring = [v for v, _ in verts_bfs(mesh, vertex, stop=1, start=1)]

    Note
    ----
    Nothing is reported for unknown seed vertices.
    """
    if not mesh.has_vertex(vertex):
        return

    queue = deque([vertex])
    level = {vertex: 0}

    while queue:
        v = queue.popleft()
        d = level[v]

        # Stop when all vertices at distance stop (i.e., number of
        # edges traversed) have been found.
        if stop is not None and d > stop:
            return

        if start <= d:
            yield v, d

        for w in sorted(mesh.vertex_neighbors(v)):
            # Vertices with assigned level information are either
            # in the queue right now or have been removed earlier.
            if w not in level:
                queue.append(w)
                level[w] = d + 1


def faces_bfs(mesh, face, stop=None, start=0):
    """ Breadth-first face neighborhood iterator.

    Faces are neighbors if they share an edge.

    Parameters
    ----------
    mesh : Mesh
        A mesh.
    face : int
        The seed face.
    stop : int, optional
        All faces at distance less or equal to `stop` are visited.
    start : int, optional
        Face reporting starts at the given distance level.

    Yields
    ------
    int
        The next face handle in breadth-first search.
    int
        Distance to `face`.
    """
    if not mesh.has_face(face):
        return

    queue = deque([face])
    level = {face: 0}

    while queue:
        f = queue.popleft()
        d = level[f]

        if stop is not None and d > stop:
            return

        if start <= d:
            yield f, d

        for g in mesh.face_neighbors(f):
            if g not in level:
                queue.append(g)
                level[g] = d + 1


def components(mesh):
    """ Edge connected face components.

    Returns
    -------
    list[list[int]]
        Face handles grouped by connected component, in order of the
        first face of each component.
    """
    seen = set()
    result = []

    for f in mesh.faces:
        if f in seen:
            continue

        component = [g for g, _ in faces_bfs(mesh, f)]
        seen.update(component)
        result.append(component)

    return result
