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


""" Identity data and JSON envelope.

Every geometric object serializes to a JSON object that carries a
namespaced type tag and a type specific payload:

.. code-block:: json

    {"dtype": "openmodel.geometry/Mesh",
     "data": {...},
     "name": "", "guid": "...", "parent": null,
     "adjacency_indices": [], "adjacency_types": [],
     "transformation": [1.0, 0.0, ...]}

The identity fields are left out when serializing in *minimal* mode.
Classes take part in encoding and decoding by implementing
``to_json_data(minimal)`` and ``from_json_data(data)`` and by being
registered with :func:`register`.
"""

import json
import logging
import uuid
from pathlib import Path

import numpy as np


DTYPE_NAMESPACE = 'openmodel.geometry'
""" Namespace prefix of all type tags. """

NAME_MAX_BYTES = 32
""" Maximum length of a name in UTF-8 encoded bytes. """

logger = logging.getLogger(__name__)

_registry = dict()


def identity_matrix():
    """ Flattened 4x4 identity matrix.

    Returns
    -------
    list[float]
        16 values, column-major order.
    """
    return [1.0 if i % 5 == 0 else 0.0 for i in range(16)]


def dtype(cls):
    """ Type tag of a class.

    >>> dtype(Data)
    'openmodel.geometry/Data'
    """
    return f'{DTYPE_NAMESPACE}/{cls.__name__}'


def register(cls):
    """ Class decorator.

    Makes instances of `cls` known to :func:`json_loads` and friends by
    their type tag.
    """
    _registry[dtype(cls)] = cls
    return cls


def _check_name(name):
    if len(name.encode('utf-8')) > NAME_MAX_BYTES:
        raise ValueError(f'name exceeds {NAME_MAX_BYTES} bytes: {name!r}')

    return name


class Data:
    """ Identity block of a geometric object.

    Parameters
    ----------
    name : str, optional
        Name tag, at most :data:`NAME_MAX_BYTES` bytes when UTF-8
        encoded.

    Raises
    ------
    ValueError
        If `name` is too long.
    """

    def __init__(self, name=''):
        self._name = _check_name(name)
        self.guid = uuid.uuid4()
        self.parent = None
        self.adjacency = []
        self.transformation = identity_matrix()

    def __repr__(self):
        return f'Data({self._name!r}, guid={self.guid})'

    def __eq__(self, other):
        if not isinstance(other, Data):
            return NotImplemented

        return self.to_json_data() == other.to_json_data()

    @property
    def name(self):
        """ Name tag.

        :type: str
        """
        return self._name

    @name.setter
    def name(self, value):
        self._name = _check_name(value)

    @property
    def adjacency_indices(self):
        """ Identifiers of adjacent objects.

        :type: list[uuid.UUID]
        """
        return [guid for guid, _ in self.adjacency]

    @property
    def adjacency_types(self):
        """ Relation types, parallel to :attr:`adjacency_indices`.

        :type: list[str]
        """
        return [kind for _, kind in self.adjacency]

    def add_adjacency(self, guid, kind):
        """ Record a relation to another object.
        """
        self.adjacency.append((uuid.UUID(str(guid)), str(kind)))

    def copy(self):
        """ Copy with the same identifier.
        """
        other = Data(self._name)
        other.guid = self.guid
        other.parent = self.parent
        other.adjacency = list(self.adjacency)
        other.transformation = list(self.transformation)

        return other

    def to_json_data(self):
        """ Identity fields as a JSON compatible dictionary.
        """
        return {'name': self._name,
                'guid': str(self.guid),
                'parent': None if self.parent is None else str(self.parent),
                'adjacency_indices': [str(g) for g in self.adjacency_indices],
                'adjacency_types': self.adjacency_types,
                'transformation': [float(x) for x in self.transformation]}

    @classmethod
    def from_json_data(cls, data):
        """ Restore identity fields.

        Missing optional fields get their default values. The name may
        also be given as a list of byte values, and a transformation with
        fewer than 16 entries is padded with zeros.

        Raises
        ------
        ValueError
            If the name or an identifier is invalid.
        KeyError
            If the ``guid`` field is missing.
        """
        name = data.get('name', '')

        if isinstance(name, list):
            name = bytes(name).split(b'\0', 1)[0].decode('utf-8')

        result = cls(name)
        result.guid = uuid.UUID(data['guid'])

        if data.get('parent') is not None:
            result.parent = uuid.UUID(data['parent'])

        result.adjacency = [(uuid.UUID(g), str(k)) for g, k in
                            zip(data.get('adjacency_indices', []),
                                data.get('adjacency_types', []))]

        matrix = data.get('transformation')

        if matrix is not None:
            matrix = [float(x) for x in matrix[:16]]
            result.transformation = matrix + [0.0] * (16 - len(matrix))

        return result


def _default(obj):
    # Fallback of the JSON encoder for geometric objects and NumPy types.
    if hasattr(obj, 'to_json_data'):
        return obj.to_json_data()
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.generic):
        return obj.item()
    elif isinstance(obj, uuid.UUID):
        return str(obj)

    raise TypeError(f'object of type {type(obj).__name__} is not '
                    f'JSON serializable')


def _object_hook(obj):
    # Decode embedded geometric objects at any depth. Unknown type tags
    # are left alone.
    cls = _registry.get(obj.get('dtype'))

    if cls is None:
        if isinstance(obj.get('dtype'), str):
            logger.debug('unknown dtype %r left undecoded', obj['dtype'])

        return obj

    return cls.from_json_data(obj)


def json_dumps(obj, pretty=False):
    """ Serialize to JSON string.

    Parameters
    ----------
    obj : object
        Geometric object or arbitrary nested structure of lists,
        dictionaries and geometric objects.
    pretty : bool, optional
        Indent the output.

    Returns
    -------
    str
        JSON document.
    """
    return json.dumps(obj, default=_default, indent=4 if pretty else None)


def json_loads(s):
    """ Deserialize JSON string.

    Objects with a registered type tag are converted to instances of the
    respective class.
    """
    return json.loads(s, object_hook=_object_hook)


def json_dump(obj, filename, pretty=True):
    """ Write JSON file.

    Parameters
    ----------
    obj : object
        Object to be serialized, see :func:`json_dumps`.
    filename : str or ~pathlib.Path
        Output file name.
    pretty : bool, optional
        Indent the output.
    """
    Path(filename).write_text(json_dumps(obj, pretty=pretty),
                              encoding='utf-8')


def json_load(filename):
    """ Read JSON file, see :func:`json_loads`.
    """
    return json_loads(Path(filename).read_text(encoding='utf-8'))
