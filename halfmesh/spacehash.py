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


""" Spatial deduplication index.

Coordinates are snapped to a regular grid of spacing `precision`. Points
that snap to the same grid node share a string key and are considered
to be the same vertex. Used to weld a polygon soup into a mesh with
shared vertices, see :meth:`~halfmesh.hds.Mesh.from_polygon_soup`.
"""

import math

import halfmesh.linalg as linalg


PRECISION = 1e-10
""" Default welding precision. """


def _decimals(precision):
    # Number of decimals needed to tell grid nodes of the given spacing
    # apart. The small offset absorbs log10 round-off for powers of ten.
    return max(0, math.ceil(-math.log10(precision) - 1e-9))


def geometric_key(point, precision=PRECISION):
    """ Quantization key.

    Parameters
    ----------
    point : array_like, shape (3, )
        Point coordinates.
    precision : float, optional
        Grid spacing, has to be positive.

    Raises
    ------
    ValueError
        If `precision` is not positive.

    Returns
    -------
    str
        Comma separated coordinates of the nearest grid node, formatted
        with a fixed number of decimals.


    Points closer to each other than the grid spacing usually share a
    key, but two points on different sides of a rounding boundary never
    do.

    >>> geometric_key([0.1 + 0.2, 0.0, -1e-12])
    '0.3000000000,0.0000000000,0.0000000000'
    """
    if not precision > 0.0:
        raise ValueError(f'precision has to be positive, got {precision}')

    n = _decimals(precision)

    # Adding 0.0 turns a negative zero into a positive one. Both have to
    # produce the same key.
    x, y, z = (round(c / precision) * precision + 0.0 for c in point)

    return f'{x:.{n}f},{y:.{n}f},{z:.{n}f}'


class SpaceHash:
    """ Map of quantization keys to vertex handles.

    Parameters
    ----------
    precision : float, optional
        Grid spacing used to compute keys.

    Note
    ----
    The first handle stored for a key wins. Later insertions of points
    with the same key are ignored.
    """

    def __init__(self, precision=PRECISION):
        if not precision > 0.0:
            raise ValueError(f'precision has to be positive, got {precision}')

        self._precision = precision
        self._cells = dict()

    def __len__(self):
        return len(self._cells)

    @property
    def precision(self):
        """ Grid spacing.

        :type: float
        """
        return self._precision

    def key(self, point):
        """ Quantization key of a point.
        """
        return geometric_key(linalg.as_point(point), self._precision)

    def get(self, point, default=None):
        """ Handle stored for the grid node closest to `point`.
        """
        return self._cells.get(self.key(point), default)

    def insert(self, point, handle):
        """ Store handle unless the key is already taken.

        Parameters
        ----------
        point : array_like, shape (3, )
            Point coordinates.
        handle : int
            Vertex handle.

        Returns
        -------
        int
            The handle stored for the key of `point`, which is `handle`
            only if the key was new.
        """
        return self._cells.setdefault(self.key(point), handle)
