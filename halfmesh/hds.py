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


""" Polygon mesh kernel.

A polygonal surface is described by three containers:

    - a dictionary of :class:`Vertex` objects keyed by vertex handle,
    - a dictionary of :class:`Face` objects keyed by face handle,
    - and a dictionary that maps directed edges, i.e. pairs of vertex
      handles, to the handle of the face that owns them.

These containers and the relations between their items are managed by
the :class:`Mesh` class. Handles are small non-negative integers that are
unique within one mesh.

For every face with vertex cycle ``[v0, v1, ..., vn-1]`` the halfedge
dictionary maps each pair ``(vi, vi+1)`` to the face handle. The opposite
pair is mapped as well, either to the face on the other side or to
:obj:`None` if the edge is a boundary edge.

Note
----
Invalid input is reported by :obj:`None` (or :obj:`False`) return values.
A mutation that fails leaves the mesh unchanged. Non-manifold input is
tolerated: if two faces claim the same directed edge the last one wins.
"""

import logging
import operator
import uuid
from time import perf_counter

import numpy as np

import halfmesh.data as data
import halfmesh.linalg as linalg
import halfmesh.traits as traits
from halfmesh.spacehash import PRECISION, SpaceHash


logger = logging.getLogger(__name__)


@data.register
class Mesh:
    """ Mesh kernel.

    The combinatorics of a mesh can be built incrementally via
    :meth:`add_vertex` and :meth:`add_face`, by welding a polygon soup
    (:meth:`from_polygon_soup`), or by converting a sequence of vertex
    coordinates and a sequence of face definitions.

    Parameters
    ----------
    points : array_like, optional
        Vertex coordinates, one point per row. Vertex handles are row
        indices.
    faces : array_like, optional
        Face definitions, 0-based vertex indexing. Invalid faces are
        skipped.
    name : str, optional
        Name tag.

    Raises
    ------
    ValueError
        If face definitions are given without points.
    """

    def __init__(self, points=None, faces=None, *, name=None):
        """ Initialize from vertex and face lists.
        """
        if points is None and faces is not None:
            msg = "face definitions require 'points' argument != None"
            raise ValueError(msg)

        self._verts = dict()
        self._faces = dict()

        # A dictionary that maps pairs of vertex handles to face handles
        # (or None on the boundary side of an edge). Useful and efficient
        # for checking if vertices are adjacent.
        self._halfs = dict()

        # Targets of outgoing halfedges per vertex. Keeps neighborhood
        # queries independent of the size of the halfedge dictionary.
        self._vhout = dict()

        # Edge attributes are keyed by the sorted pair of vertex handles.
        self._edge_attrs = dict()

        self._next_vertex = 0
        self._next_face = 0

        # Values reported for attributes not set on an item itself.
        self.default_vertex_attributes = dict()
        self.default_face_attributes = dict()
        self.default_edge_attributes = dict()

        self._data = data.Data()
        self.name = name

        if points is not None:
            for point in points:
                self.add_vertex(point)

        if faces is not None:
            for face in faces:
                self.add_face(face)

    def __repr__(self):
        v, e, f = self.size
        return f'Mesh(vertices={v}, edges={e}, faces={f})'

    def __iter__(self):
        """ Face iterator.

        Visits all faces in insertion order.

        Yields
        ------
        Face
            Next face.
        """
        return iter(self._faces.values())

    def __copy__(self):
        """ Mesh copy, equivalent to :meth:`copy`.
        """
        return self.copy()

    def __deepcopy__(self, memo):
        # The copy method never shares containers or coordinate arrays.
        return self.copy()

    def __bool__(self):
        return True

    @property
    def name(self):
        """ Name property.

        Stored as given, at most 32 bytes when UTF-8 encoded.

        :type: str
        """
        return self._data.name

    @name.setter
    def name(self, value):
        self._data.name = '' if value is None else value

    @property
    def guid(self):
        """ Unique identifier.

        :type: uuid.UUID
        """
        return self._data.guid

    @property
    def data(self):
        """ Identity block (name, identifier, parent, adjacency,
        transformation).

        :type: ~halfmesh.data.Data
        """
        return self._data

    @property
    def points(self):
        """ Vertex coordinate array.

        Copy of all vertex coordinates, one row per vertex in order of
        :attr:`vertices`.

        :type: ~numpy.ndarray
        """
        if not self._verts:
            return np.empty((0, 3))

        return np.array([v._point for v in self._verts.values()])

    @property
    def vertices(self):
        """ Vertex dictionary.

        Maps vertex handles to :class:`Vertex` instances. This dictionary
        should not be modified directly.

        :type: dict[int, Vertex]
        """
        return self._verts

    @property
    def faces(self):
        """ Face dictionary.

        Maps face handles to :class:`Face` instances. This dictionary
        should not be modified directly.

        :type: dict[int, Face]

        The face definitions used to build a mesh are recovered with

        >>> faces = [list(f) for f in mesh]
        """
        return self._faces

    @property
    def halfedges(self):
        """ Halfedge dictionary.

        Dictionary that maps pairs of vertex handles to the handle of the
        face on the left of the directed edge, or to :obj:`None` on the
        boundary. To check whether two vertices are adjacent use

        .. code-block:: python

           (v, w) in mesh.halfedges                 # True or False
           f = mesh.halfedges.get((v, w))           # face handle or None

        :type: dict[tuple[int, int], int or None]
        """
        return self._halfs

    @property
    def size(self):
        """ Mesh size.

        The attribute value :math:`(v, e, f)` holds the number of vertices,
        the number of edges, and the number of faces.

        :type: (int, int, int)
        """
        return self.vertex_count, self.edge_count(), self.face_count

    @property
    def vertex_count(self):
        """ Number of vertices, including isolated ones.

        :type: int
        """
        return len(self._verts)

    @property
    def face_count(self):
        """ Number of faces.

        :type: int
        """
        return len(self._faces)

    @classmethod
    def from_polygon_soup(cls, polygons, precision=PRECISION, *, quiet=True):
        """ Weld polygons into a mesh.

        Polygons are given by their corner coordinates. Corners that
        snap to the same node of a grid with spacing `precision` become
        a single vertex. The first point seen for a grid node determines
        the vertex coordinates.

        Parameters
        ----------
        polygons : iterable
            Sequence of polygons, each a sequence of points.
        precision : float, optional
            Welding precision, see
            :func:`~halfmesh.spacehash.geometric_key`.
        quiet : bool, optional
            Suppress console output.

        Returns
        -------
        Mesh
            New mesh. One face per valid polygon, in input order.

        Raises
        ------
        ValueError
            If `precision` is not positive or a point does not have three
            coordinates.

        Note
        ----
        Welded corners that follow each other along a polygon are merged.
        Polygons left with less than three corners, or that visit a
        vertex twice, are skipped without adding any vertices. Compare
        :attr:`face_count` with the number of input polygons to detect
        skipped polygons.
        """
        CBOLD = '\33[1m'                    # bold text, white on black
        CEND = '\33[0m'

        start = perf_counter()

        mesh = cls()
        index = SpaceHash(precision)
        num_points = 0
        skipped = 0

        for k, polygon in enumerate(polygons):
            points = [linalg.as_point(p) for p in polygon]
            num_points += len(points)

            # Non-finite coordinates have no grid node.
            if points and not np.isfinite(points).all():
                logger.debug('skipping polygon #%d with non-finite '
                             'coordinates', k)
                skipped += 1
                continue

            # Drop repeated keys along the (cyclic) corner sequence.
            ring = []

            for point in points:
                key = index.key(point)

                if not ring or ring[-1][0] != key:
                    ring.append((key, point))

            while len(ring) > 1 and ring[0][0] == ring[-1][0]:
                ring.pop()

            # Validate before touching the mesh. Vertices of rejected
            # polygons must not end up in the mesh.
            if len(ring) < 3 or len({key for key, _ in ring}) != len(ring):
                logger.debug('skipping polygon #%d with %d distinct corners',
                             k, len(ring))
                skipped += 1
                continue

            face = []

            for _, point in ring:
                v = index.get(point)

                if v is None:
                    v = index.insert(point, mesh.add_vertex(point))

                face.append(v)

            if mesh.add_face(face) is None:
                logger.debug('skipping polygon #%d, face rejected', k)
                skipped += 1

        if not quiet:
            v, e, f = mesh.size
            print(f'welded {CBOLD}{num_points}{CEND} points ' +
                  f'({perf_counter()-start:.3f} sec, {precision=})')
            print(f'\t├─ {v} vertices')
            print(f'\t├─ {e} edges')
            print(f'\t├─ {f} faces')
            print(f'\t└─ {skipped} polygons skipped')

        return mesh

    def add_vertex(self, point, handle=None, **kwargs):
        """ Create and add new vertex.

        Parameters
        ----------
        point : array_like, shape (3, )
            Vertex coordinates.
        handle : int, optional
            Explicit vertex handle. A vertex already stored under this
            handle is replaced silently.
        **kwargs
            Attribute name and value pairs.

        Raises
        ------
        ValueError
            If `point` has the wrong shape or `handle` is negative.

        Returns
        -------
        int
            Handle of the new vertex.

        Note
        ----
        Handles are allocated from a counter. Explicit handles push the
        counter past themselves, so automatically allocated handles never
        collide with explicit ones.
        """
        point = linalg.as_point(point)
        handle = self._allocate(handle, '_next_vertex')

        self._verts[handle] = Vertex(handle, point, kwargs)
        self._vhout.setdefault(handle, set())

        return handle

    def position(self, vertex):
        """ Vertex coordinates.

        Returns
        -------
        ~numpy.ndarray, shape (3, ) or None
            Copy of the coordinates, :obj:`None` for unknown vertices.
        """
        v = self._verts.get(vertex)
        return None if v is None else v._point.copy()

    def set_position(self, vertex, point):
        """ Move a vertex.

        Returns
        -------
        bool
            :obj:`False` for unknown vertices.
        """
        v = self._verts.get(vertex)

        if v is None:
            return False

        v._point = linalg.as_point(point)
        return True

    def set_attribute(self, vertex, name, value):
        """ Set vertex attribute.

        Parameters
        ----------
        vertex : int
            Vertex handle.
        name : str
            Attribute name.
        value : float
            Attribute value. Replaces a previously stored value.

        Returns
        -------
        bool
            :obj:`False` for unknown vertices.
        """
        v = self._verts.get(vertex)

        if v is None:
            return False

        v.attributes[name] = value
        return True

    def get_attribute(self, vertex, name):
        """ Get vertex attribute.

        Falls back to :attr:`default_vertex_attributes` if the attribute
        is not set on the vertex.

        Returns
        -------
        object
            Attribute value, :obj:`None` for unknown vertices or unknown
            attribute names.
        """
        v = self._verts.get(vertex)

        if v is None:
            return None

        return v.attributes.get(name, self.default_vertex_attributes.get(name))

    def add_face(self, face, handle=None, **kwargs):
        """ Create and add new face.

        Vertex handles used in the definition of a face have to refer to
        existing vertices of the mesh.

        Parameters
        ----------
        face : list[int] or list[Vertex]
            Combinatorial face definition, vertex handles in winding
            order.
        handle : int, optional
            Explicit face handle. A face already stored under this handle
            is detached and replaced.
        **kwargs
            Attribute name and value pairs.

        Returns
        -------
        int or None
            Handle of the new face. :obj:`None` if there are less than
            three vertices, a vertex appears twice, or a vertex does not
            exist. The mesh is not modified in these cases.

        Note
        ----
        The halfedge ``(u, v)`` of each edge of the face is mapped to the
        new face, overwriting a previous owner. The opposite halfedge is
        added as a boundary halfedge if it does not exist yet.
        """
        face = tuple(operator.index(v) for v in face)
        n = len(face)

        # Check for degeneracies: All vertices have to be topologically
        # different and there need to be at least three of them.
        # Duplicate coordinates are not a problem.
        if n < 3:
            logger.debug('rejected face %s: less than three vertices', face)
            return None

        if len(set(face)) != n:
            logger.debug('rejected face %s: duplicate vertices', face)
            return None

        missing = [v for v in face if v not in self._verts]

        if missing:
            logger.debug('rejected face %s: unknown vertices %s',
                         face, missing)
            return None

        if handle is not None and operator.index(handle) in self._faces:
            self._detach_face(operator.index(handle))

        handle = self._allocate(handle, '_next_face')

        for v, w in zip(face, face[1:] + face[:1]):
            self._add_halfedge(v, w, handle)

            # A halfedge should always have a pair. Create a boundary
            # edge if the pair does not exist yet.
            if (w, v) not in self._halfs:
                self._add_halfedge(w, v, None)

        self._faces[handle] = Face(handle, face, kwargs)

        return handle

    def face_vertices(self, face):
        """ Vertex handles of a face in winding order.

        Returns
        -------
        list[int] or None
            :obj:`None` for unknown faces.
        """
        f = self._faces.get(face)
        return None if f is None else list(f._verts)

    def set_face_attribute(self, face, name, value):
        """ Set face attribute, see :meth:`set_attribute`.
        """
        f = self._faces.get(face)

        if f is None:
            return False

        f.attributes[name] = value
        return True

    def get_face_attribute(self, face, name):
        """ Get face attribute, see :meth:`get_attribute`.
        """
        f = self._faces.get(face)

        if f is None:
            return None

        return f.attributes.get(name, self.default_face_attributes.get(name))

    def set_edge_attribute(self, u, v, name, value):
        """ Set edge attribute.

        Edge attributes are shared by both directions of an edge.

        Returns
        -------
        bool
            :obj:`False` if `u` and `v` are not adjacent.
        """
        if (u, v) not in self._halfs:
            return False

        self._edge_attrs.setdefault(_edge_key(u, v), dict())[name] = value
        return True

    def get_edge_attribute(self, u, v, name):
        """ Get edge attribute.

        Returns
        -------
        object
            Attribute value or default value, :obj:`None` if `u` and `v`
            are not adjacent or the name is unknown.
        """
        if (u, v) not in self._halfs:
            return None

        attrs = self._edge_attrs.get(_edge_key(u, v), dict())

        return attrs.get(name, self.default_edge_attributes.get(name))

    def has_vertex(self, vertex):
        return vertex in self._verts

    def has_face(self, face):
        return face in self._faces

    def has_edge(self, u, v):
        return (u, v) in self._halfs

    def halfedge_face(self, u, v):
        """ Face on the left of the halfedge ``(u, v)``.

        Returns
        -------
        int or None
            Face handle. :obj:`None` on the boundary side of an edge and
            if `u` and `v` are not adjacent.
        """
        return self._halfs.get((u, v))

    def edges(self):
        """ Edge iterator.

        Yields
        ------
        tuple[int, int]
            Each edge once, as a pair of vertex handles in ascending
            order.
        """
        return ((u, v) for u, v in self._halfs if u < v)

    def edge_count(self):
        """ Number of edges.

        Both halfedges of an edge are always present, hence each edge
        accounts for two dictionary entries.
        """
        assert len(self._halfs) % 2 == 0

        return len(self._halfs) // 2

    def boundary_edges(self):
        """ Boundary halfedges.

        Returns
        -------
        list[tuple[int, int]]
            All halfedges not owned by a face.
        """
        return [h for h, f in self._halfs.items() if f is None]

    def is_boundary_edge(self, u, v):
        """ Topological state.

        An edge is a boundary edge if one of its halfedges has no face.
        :obj:`False` for vertices that are not adjacent.
        """
        if (u, v) not in self._halfs:
            return False

        return self._halfs[u, v] is None or self._halfs[v, u] is None

    def is_boundary_vertex(self, vertex):
        """ Topological state.

        A vertex is a boundary vertex if one of its outgoing halfedges
        is a boundary halfedge. Isolated and unknown vertices are not
        boundary vertices.
        """
        return any(self._halfs[vertex, w] is None
                   for w in self._vhout.get(vertex, ()))

    def is_closed(self):
        """ Check for boundary halfedges.

        A mesh without any boundary halfedges is closed.
        """
        return all(f is not None for f in self._halfs.values())

    def vertex_neighbors(self, vertex):
        """ Adjacent vertices.

        Returns
        -------
        set[int]
            Handles of all vertices connected to `vertex` by an edge.
            Empty for isolated and unknown vertices.
        """
        return set(self._vhout.get(vertex, ()))

    def vertex_degree(self, vertex):
        """ Number of adjacent vertices, :obj:`None` for unknown vertices.
        """
        if vertex not in self._verts:
            return None

        return len(self._vhout[vertex])

    def vertex_faces(self, vertex):
        """ Incident faces.

        Linear search over all faces. Cache the result if it is needed
        repeatedly.

        Returns
        -------
        list[int]
            Handles of faces that use `vertex`, in face insertion order.
        """
        return [h for h, f in self._faces.items() if vertex in f._verts]

    def face_neighbors(self, face):
        """ Faces sharing an edge with `face`.

        Returns
        -------
        list[int] or None
            Handles of adjacent faces in edge order of `face`, each listed
            once. :obj:`None` for unknown faces.
        """
        f = self._faces.get(face)

        if f is None:
            return None

        nbrs = (self._halfs[w, v] for v, w in f.halfedges())

        return list(dict.fromkeys(g for g in nbrs
                                  if g is not None and g != face))

    def euler_characteristic(self):
        """ Euler characteristic :math:`V - E + F`.
        """
        v, e, f = self.size
        return v - e + f

    def face_normal(self, face):
        """ Unit face normal, see :func:`~halfmesh.traits.face_normal`.
        """
        return traits.face_normal(self, face)

    def face_area(self, face):
        """ Face area, see :func:`~halfmesh.traits.face_area`.
        """
        return traits.face_area(self, face)

    def vertex_normal(self, vertex):
        """ Unit vertex normal, see :func:`~halfmesh.traits.vertex_normal`.
        """
        return traits.vertex_normal(self, vertex)

    def clear(self):
        """ Clear all mesh items.

        Empties all containers and resets handle allocation. Default
        attribute values are kept.
        """
        # Dictionaries are cleared in place instead of resetting them to
        # a new empty container.
        self._verts.clear()
        self._faces.clear()
        self._halfs.clear()
        self._vhout.clear()
        self._edge_attrs.clear()

        self._next_vertex = 0
        self._next_face = 0

    def clone(self, mesh):
        """ In-place mesh copy.

        Implements assignment operator like behavior. Performs the same
        operation as :meth:`copy` but assigns the result to the mesh
        instance `self`.

        Parameters
        ----------
        mesh : Mesh
            Source mesh.

        Returns
        -------
        Mesh
            The mesh `self`.
        """
        if mesh is self:
            return self

        self._verts = {h: v.copy() for h, v in mesh._verts.items()}
        self._faces = {h: f.copy() for h, f in mesh._faces.items()}

        # Keys and values are immutable, shallow copies suffice.
        self._halfs = dict(mesh._halfs)
        self._vhout = {v: set(ws) for v, ws in mesh._vhout.items()}
        self._edge_attrs = {e: dict(a) for e, a in mesh._edge_attrs.items()}

        self._next_vertex = mesh._next_vertex
        self._next_face = mesh._next_face

        self.default_vertex_attributes = dict(mesh.default_vertex_attributes)
        self.default_face_attributes = dict(mesh.default_face_attributes)
        self.default_edge_attributes = dict(mesh.default_edge_attributes)

        # A copy is a new object. It keeps the name but gets its own
        # identifier.
        self._data = mesh._data.copy()
        self._data.guid = uuid.uuid4()

        return self

    def copy(self):
        """ Return mesh copy.

        Duplicate combinatorics, vertex coordinates, and attributes of a
        mesh. No container or coordinate array is shared with the copy.

        Returns
        -------
        Mesh
            Copy of the mesh.
        """
        return self.__class__().clone(self)

    def to_json_data(self, minimal=False):
        """ JSON compatible representation.

        Parameters
        ----------
        minimal : bool, optional
            Leave out the identity fields.

        Returns
        -------
        dict
            Dictionary with ``dtype`` and ``data`` items (and the identity
            fields of :class:`~halfmesh.data.Data` unless `minimal`).

        Note
        ----
        The halfedge dictionary is not stored, it is rebuilt from the
        faces on load.
        """
        payload = {
            'vertex': {str(h): v._point.tolist()
                       for h, v in self._verts.items()},
            'vertexdata': {str(h): dict(v.attributes)
                           for h, v in self._verts.items() if v.attributes},
            'face': {str(h): list(f._verts) for h, f in self._faces.items()},
            'facedata': {str(h): dict(f.attributes)
                         for h, f in self._faces.items() if f.attributes},
            'edgedata': {f'{u}-{v}': dict(a)
                         for (u, v), a in self._edge_attrs.items()},
            'default_vertex_attributes': dict(self.default_vertex_attributes),
            'default_face_attributes': dict(self.default_face_attributes),
            'default_edge_attributes': dict(self.default_edge_attributes),
            'max_vertex': self._next_vertex - 1,
            'max_face': self._next_face - 1,
        }

        result = {'dtype': data.dtype(self.__class__), 'data': payload}

        if not minimal:
            result.update(self._data.to_json_data())

        return result

    @classmethod
    def from_json_data(cls, obj):
        """ Restore mesh from its JSON compatible representation.

        Parameters
        ----------
        obj : dict
            Dictionary as returned by :meth:`to_json_data`.

        Raises
        ------
        ValueError
            If the type tag does not match.
        KeyError
            If the payload is incomplete.

        Returns
        -------
        Mesh
            New mesh. The halfedge dictionary is rebuilt from the faces.
        """
        tag = obj.get('dtype')

        if tag != data.dtype(cls):
            raise ValueError(f'expected dtype {data.dtype(cls)!r}, '
                             f'got {tag!r}')

        payload = obj['data']
        mesh = cls()

        mesh.default_vertex_attributes.update(
            payload.get('default_vertex_attributes', {}))
        mesh.default_face_attributes.update(
            payload.get('default_face_attributes', {}))
        mesh.default_edge_attributes.update(
            payload.get('default_edge_attributes', {}))

        vertexdata = payload.get('vertexdata', {})
        facedata = payload.get('facedata', {})

        for key, point in payload['vertex'].items():
            v = mesh.add_vertex(point, int(key))
            mesh._verts[v].attributes.update(vertexdata.get(key, {}))

        for key, face in payload['face'].items():
            f = mesh.add_face(face, int(key))

            if f is None:
                logger.warning('dropped invalid face #%s %s', key, face)
            else:
                mesh._faces[f].attributes.update(facedata.get(key, {}))

        for key, attrs in payload.get('edgedata', {}).items():
            u, v = (int(h) for h in key.split('-'))

            for name, value in attrs.items():
                mesh.set_edge_attribute(u, v, name, value)

        mesh._next_vertex = max(mesh._next_vertex,
                                payload.get('max_vertex', -1) + 1)
        mesh._next_face = max(mesh._next_face,
                              payload.get('max_face', -1) + 1)

        if 'guid' in obj:
            mesh._data = data.Data.from_json_data(obj)

        return mesh

    def _allocate(self, handle, counter):
        """ Handle allocation.

        Parameters
        ----------
        handle : int or None
            Explicit handle or :obj:`None` to draw the next handle from
            the counter.
        counter : str
            Name of the counter attribute.

        Raises
        ------
        ValueError
            For negative handles.

        Returns
        -------
        int
            The allocated handle.
        """
        if handle is None:
            handle = getattr(self, counter)
        else:
            handle = operator.index(handle)

            if handle < 0:
                raise ValueError(f'handle has to be non-negative, '
                                 f'got {handle}')

        setattr(self, counter, max(getattr(self, counter), handle + 1))

        return handle

    def _add_halfedge(self, v, w, face):
        """ Map halfedge ``(v, w)`` to `face`.

        Internal helper function for face creation. Overwrites an
        existing entry.
        """
        assert v != w

        self._halfs[v, w] = face
        self._vhout[v].add(w)

    def _detach_face(self, face):
        """ Remove a face from the halfedge dictionary.

        A halfedge owned by the face passes to the most recently added
        remaining face that uses it, or becomes a boundary halfedge. Edges
        without a face on either side are removed together with their
        attributes.
        """
        f = self._faces.pop(face)

        for v, w in f.halfedges():
            if self._halfs.get((v, w)) != face:
                continue

            # Another face may have lost this halfedge to the detached
            # one earlier on.
            owner = None

            for g, other in self._faces.items():
                if (v, w) in set(other.halfedges()):
                    owner = g

            self._halfs[v, w] = owner

            if owner is None and self._halfs[w, v] is None:
                del self._halfs[v, w]
                del self._halfs[w, v]
                self._vhout[v].discard(w)
                self._vhout[w].discard(v)
                self._edge_attrs.pop(_edge_key(v, w), None)

    def _check(self):
        """ Perform sanity checks.
        """
        for (v, w), f in self._halfs.items():
            assert v in self._verts and w in self._verts
            assert (w, v) in self._halfs
            assert w in self._vhout[v]

            if f is not None:
                assert f in self._faces
                assert (v, w) in set(self._faces[f].halfedges())

        for v, targets in self._vhout.items():
            assert v in self._verts

            for w in targets:
                assert (v, w) in self._halfs

        for v in self._verts:
            assert v < self._next_vertex

        for h, f in self._faces.items():
            assert h < self._next_face
            assert f._idx == h
            assert len(f) >= 3 and len(set(f._verts)) == len(f)

            for v, w in f.halfedges():
                assert (v, w) in self._halfs
                assert (w, v) in self._halfs

        for u, v in self._edge_attrs:
            assert u < v and (u, v) in self._halfs


def _edge_key(u, v):
    return (u, v) if u < v else (v, u)


class Vertex:
    """ Vertex of a mesh.

    Parameters
    ----------
    index : int
        Vertex handle.
    point : ~numpy.ndarray, shape (3, )
        Vertex coordinates.
    attributes : dict, optional
        Attribute name and value pairs.

    Note
    ----
    In addition to :attr:`index`, implementations of the special functions
    :meth:`~object.__int__` and :meth:`~object.__index__` are provided.
    The latter makes it possible to pass vertex instances wherever a
    vertex handle is expected.
    """

    def __init__(self, index, point, attributes=None):
        self._idx = index
        self._point = point
        self.attributes = dict(attributes or {})

    def __repr__(self):
        return f'Vertex({self._idx})'

    def __str__(self):
        return f'v {self._idx} {self._point}'

    def __index__(self):
        return self._idx

    def __int__(self):
        return self._idx

    @property
    def index(self):
        """ Vertex handle.

        :type: int
        """
        return self._idx

    @property
    def point(self):
        """ Vertex coordinates.

        Read access to vertex coordinates, use
        :meth:`Mesh.set_position` to move a vertex.

        :type: ~numpy.ndarray
        """
        return self._point.copy()

    def copy(self):
        return Vertex(self._idx, self._point.copy(), self.attributes)


class Face:
    """ Face of a mesh.

    A face is a closed polygon given by an immutable sequence of vertex
    handles in winding order.

    Parameters
    ----------
    index : int
        Face handle.
    verts : tuple[int, ...]
        Vertex handles.
    attributes : dict, optional
        Attribute name and value pairs.
    """

    def __init__(self, index, verts, attributes=None):
        self._idx = index
        self._verts = tuple(verts)
        self.attributes = dict(attributes or {})

    def __repr__(self):
        return f'Face({self._idx})'

    def __str__(self):
        return f'f {self._idx} {list(self._verts)}'

    def __index__(self):
        return self._idx

    def __int__(self):
        return self._idx

    def __len__(self):
        """ Number of vertices of the face.
        """
        return len(self._verts)

    def __contains__(self, vertex):
        return vertex in self._verts

    def __iter__(self):
        """ Vertex handles in winding order.
        """
        return iter(self._verts)

    def __getitem__(self, index):
        return self._verts[index]

    @property
    def index(self):
        """ Face handle.

        :type: int
        """
        return self._idx

    @property
    def vertices(self):
        """ Vertex handles in winding order.

        :type: tuple[int, ...]
        """
        return self._verts

    def halfedges(self):
        """ Directed boundary edges of the face.

        Yields
        ------
        tuple[int, int]
            Consecutive pairs of vertex handles, closing the cycle.
        """
        return zip(self._verts, self._verts[1:] + self._verts[:1])

    def copy(self):
        return Face(self._idx, self._verts, self.attributes)
