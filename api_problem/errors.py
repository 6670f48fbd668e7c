"""Exceptions raised while building, serializing or parsing problem documents."""


class ProblemError(Exception):
    """Base class for all api_problem errors."""


class ParseError(ProblemError, ValueError):
    """A JSON or XML payload could not be turned into a ProblemDocument.

    This covers syntactically malformed input as well as well-formed input
    with the wrong shape, e.g. a JSON array at the top level or an XML
    document whose root element is not <problem>.
    """


class InvalidExtensionKey(ProblemError, ValueError):
    """An extension property key can not be used.

    Raised when assigning an extension under one of the reserved RFC7807
    member names, when a key path is empty or not made of strings, and when
    serializing to XML a key which is not a valid XML element name.
    """


class InvalidXMLCharacter(ProblemError, ValueError):
    """A value contains a character which can not appear in an XML document.

    XML 1.0 forbids most control characters (e.g. NUL or ESC) even when
    escaped, so such values can only be serialized to JSON.
    """
