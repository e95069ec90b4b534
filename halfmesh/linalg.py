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


""" Basic vector math.

Non-vectorized helpers for vectors in 3-space. Mesh queries work on one
face or vertex at a time where these beat the equivalent NumPy calls.
"""

import math
import numpy as np


def as_point(value):
    """ Coordinate conversion.

    Parameters
    ----------
    value : array_like, shape (3, )
        Point or vector coordinates.

    Raises
    ------
    ValueError
        If `value` does not hold exactly three coordinates.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Fresh float64 array, never a view of `value`.
    """
    point = np.array(value, dtype=float)

    if point.shape != (3, ):
        raise ValueError(f'expected three coordinates, got shape '
                         f'{point.shape}')

    return point


def cross(u, v):
    r""" Cross product.

    Alternative to NumPy's vectorized :func:`~numpy.cross` function.

    Parameters
    ----------
    u, v : array_like, shape (3, )
        Vector in :math:`\mathbb{R}^3`.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Cross product of vectors :math:`\mathbf{u}` and :math:`\mathbf{v}`.
    """
    # Unpack the arrays. This will also catch any problem with array shape.
    u0, u1, u2 = u
    v0, v1, v2 = v

    return np.array([u1*v2 - u2*v1,
                     u2*v0 - u0*v2,
                     u0*v1 - u1*v0])


def norm(u):
    r""" Length of vector.

    Parameters
    ----------
    u : array_like, shape (3, )
        Vector in :math:`\mathbb{R}^3`.

    Returns
    -------
    float
        Euclidean length of the vector :math:`\mathbf{u}`.
    """
    return math.sqrt(u[0]*u[0] + u[1]*u[1] + u[2]*u[2])


def unit_or_none(u, eps=0.0):
    """ Checked vector normalization.

    Parameters
    ----------
    u : ~numpy.ndarray, shape (3, )
        Vector in 3-space.
    eps : float, optional
        Vectors of length less or equal to `eps` count as zero vectors.

    Returns
    -------
    ~numpy.ndarray or None
        Normalized copy of `u` or :obj:`None` for a (numerically) zero
        vector. Non-finite lengths are treated the same way.
    """
    length = norm(u)

    if not math.isfinite(length) or length <= eps:
        return None

    return u / length
