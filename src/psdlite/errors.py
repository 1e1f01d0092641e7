"""
Exceptions raised while decoding a document.
"""


class PSDError(Exception):
    """Base class of the errors raised by psdlite."""


class FormatError(PSDError, ValueError):
    """
    The stream is not a well-formed document: bad signature, unsupported
    version, out-of-range header field or a bad block signature.

    Format errors abort the whole load.
    """


class MalformedSubrecordError(PSDError):
    """
    A tagged sub-record inside a layer record has a bad signature.

    The layer reader recovers from this by discarding the rest of the
    sub-record list.
    """
