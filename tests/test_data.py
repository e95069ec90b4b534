"""Tests for identity data and the JSON envelope."""
import json
import uuid

import numpy as np
import pytest

import halfmesh.data as data
from halfmesh.data import Data
from halfmesh.hds import Mesh


class TestData:

    def test_defaults(self):
        d = Data()
        assert d.name == ''
        assert isinstance(d.guid, uuid.UUID)
        assert d.parent is None
        assert d.adjacency_indices == []
        assert d.transformation == data.identity_matrix()

    def test_identity_matrix(self):
        m = np.array(data.identity_matrix()).reshape(4, 4)
        np.testing.assert_array_equal(m, np.eye(4))

    def test_name_length(self):
        Data('a' * 32)
        Data('é' * 16)
        with pytest.raises(ValueError):
            Data('a' * 33)
        with pytest.raises(ValueError):
            Data().name = 'é' * 17

    def test_adjacency(self):
        d = Data('wall')
        other = uuid.uuid4()
        d.add_adjacency(other, 'joint')
        assert d.adjacency_indices == [other]
        assert d.adjacency_types == ['joint']

    def test_round_trip(self):
        d = Data('slab')
        d.parent = uuid.uuid4()
        d.add_adjacency(uuid.uuid4(), 'support')
        d.transformation[12] = 5.0
        assert Data.from_json_data(d.to_json_data()) == d

    def test_name_from_bytes(self):
        guid = str(uuid.uuid4())
        d = Data.from_json_data({'name': [104, 105, 0, 0], 'guid': guid})
        assert d.name == 'hi'
        assert str(d.guid) == guid

    def test_short_transformation_is_padded(self):
        d = Data.from_json_data({'guid': str(uuid.uuid4()),
                                 'transformation': [1.0, 2.0]})
        assert d.transformation == [1.0, 2.0] + [0.0] * 14

    def test_copy_keeps_guid(self):
        d = Data('beam')
        assert d.copy() == d
        assert d.copy() is not d


class TestMeshJson:

    def test_dtype(self, triangle):
        assert data.dtype(Mesh) == 'openmodel.geometry/Mesh'
        assert triangle.to_json_data()['dtype'] == 'openmodel.geometry/Mesh'

    def test_minimal(self, triangle):
        assert set(triangle.to_json_data(minimal=True)) == {'dtype', 'data'}
        full = triangle.to_json_data()
        assert {'name', 'guid', 'parent', 'adjacency_indices',
                'adjacency_types', 'transformation'} <= set(full)

    def test_payload(self, triangle):
        payload = triangle.to_json_data(minimal=True)['data']
        assert payload['vertex']['1'] == [1.0, 0.0, 0.0]
        assert payload['face'] == {'0': [0, 1, 2]}
        assert 'halfedges' not in payload

    def test_round_trip(self, cube):
        cube.set_attribute(6, 'weight', 0.25)
        cube.set_face_attribute(1, 'area', 1.0)
        cube.set_edge_attribute(1, 0, 'crease', 1.0)
        cube.default_vertex_attributes['weight'] = 1.0
        other = data.json_loads(data.json_dumps(cube))

        assert isinstance(other, Mesh)
        assert other.size == (8, 12, 6)
        assert other.halfedges == cube.halfedges
        assert other.guid == cube.guid
        assert other.name == 'cube'
        assert other.get_attribute(6, 'weight') == 0.25
        assert other.get_attribute(0, 'weight') == 1.0
        assert other.get_face_attribute(1, 'area') == 1.0
        assert other.get_edge_attribute(0, 1, 'crease') == 1.0
        np.testing.assert_allclose(other.points, cube.points)
        other._check()

    def test_handles_survive(self):
        mesh = Mesh()
        for h in (10, 3, 7):
            mesh.add_vertex([h, 0.0, h % 2], h)
        mesh.add_face([3, 7, 10], 4)

        other = Mesh.from_json_data(mesh.to_json_data())
        assert sorted(other.vertices) == [3, 7, 10]
        assert other.face_vertices(4) == [3, 7, 10]
        assert other.add_vertex([0, 0, 0]) == 11
        assert other.add_face([3, 10, 11]) == 5

    def test_rebuilds_halfedges_from_faces(self, two_triangles):
        obj = json.loads(data.json_dumps(two_triangles))
        other = Mesh.from_json_data(obj)
        assert other.halfedges == two_triangles.halfedges

    def test_invalid_face_dropped(self, triangle, caplog):
        obj = triangle.to_json_data(minimal=True)
        obj['data']['face']['1'] = [0, 1, 9]
        other = Mesh.from_json_data(obj)
        assert other.face_count == 1
        assert 'dropped invalid face' in caplog.text

    def test_wrong_dtype(self, triangle):
        obj = triangle.to_json_data()
        obj['dtype'] = 'openmodel.geometry/Point'
        with pytest.raises(ValueError):
            Mesh.from_json_data(obj)

    def test_nested(self, triangle, two_triangles):
        doc = {'meshes': [triangle, two_triangles],
               'meta': {'scale': np.float64(2.0), 'origin': np.zeros(3)},
               'other': {'dtype': 'openmodel.geometry/Unknown', 'data': 1}}
        result = data.json_loads(data.json_dumps(doc, pretty=True))

        assert [m.face_count for m in result['meshes']] == [1, 2]
        assert result['meta'] == {'scale': 2.0, 'origin': [0.0, 0.0, 0.0]}
        assert result['other']['dtype'] == 'openmodel.geometry/Unknown'

    def test_not_serializable(self):
        with pytest.raises(TypeError):
            data.json_dumps({'x': object()})

    def test_file(self, tmp_path, cube):
        path = tmp_path / 'cube.json'
        data.json_dump(cube, path)
        other = data.json_load(path)
        assert other.size == cube.size
        assert other.guid == cube.guid
