"""Hierarchical clustering kernels compiled with numba."""

import logging

from .errors import HierarchyError, InvalidInput, MalformedLinkage, AsymmetricChild

__version__ = '0.1.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())
