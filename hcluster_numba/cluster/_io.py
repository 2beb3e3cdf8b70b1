"""
Raw persistence of linkage matrices.

The file holds the (n - 1) x 4 float64 matrix verbatim, in native byte order
and without any header. n is recovered as the number of rows plus one.
"""

import logging

import numpy as np

from ..errors import InvalidInput
from ._validation import as_linkage

logger = logging.getLogger(__name__)

_ROW_BYTES = 4 * np.dtype(np.double).itemsize


def save_linkage(Z, file):
    """
    Write linkage matrix `Z` to `file`, a path or a binary file object.
    """
    Z = np.ascontiguousarray(as_linkage(Z))
    data = Z.tobytes()
    if hasattr(file, 'write'):
        file.write(data)
    else:
        with open(file, 'wb') as fp:
            fp.write(data)
    logger.debug('save_linkage: %d rows, %d bytes', Z.shape[0], len(data))


def load_linkage(file):
    """
    Read a linkage matrix written by `save_linkage`.

    Raises `InvalidInput` when the stream is empty or its length is not a
    whole number of rows.
    """
    if hasattr(file, 'read'):
        data = file.read()
    else:
        with open(file, 'rb') as fp:
            data = fp.read()

    if not data or len(data) % _ROW_BYTES:
        raise InvalidInput('A linkage file holds a multiple of %d bytes, '
                           'got %d.' % (_ROW_BYTES, len(data)))

    Z = np.frombuffer(data, dtype=np.double).reshape(-1, 4).copy()
    logger.debug('load_linkage: %d rows', Z.shape[0])
    return Z
