"""
Low-level API that translates the binary data of a document into a Python
structure.

All the data structures in this subpackage inherit from one of the objects
defined in :py:mod:`psdlite.psd.base` module.
"""

from .document import Document

__all__ = ["Document"]
