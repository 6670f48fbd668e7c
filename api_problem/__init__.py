"""RFC7807 problem details documents with JSON and XML serialization."""

__title__ = 'api-problem'
__version__ = '0.1.0'
__description__ = 'RFC7807 problem details documents with JSON and XML serialization'
__author__ = 'Vapor IO'
__license__ = 'GNU General Public License v3.0'

from .errors import (  # noqa: E402
    InvalidExtensionKey, InvalidXMLCharacter, ParseError, ProblemError,
)
from .problem import CONTENT_TYPE, CONTENT_TYPE_XML, ProblemDocument  # noqa: E402

__all__ = [
    'CONTENT_TYPE',
    'CONTENT_TYPE_XML',
    'InvalidExtensionKey',
    'InvalidXMLCharacter',
    'ParseError',
    'ProblemDocument',
    'ProblemError',
]
