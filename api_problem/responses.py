"""Starlette responses which render problem documents.

These let an application return a ProblemDocument directly from an endpoint
or an exception handler with the correct problem media type.
"""

from typing import Any, Mapping

from starlette.responses import Response

from .problem import CONTENT_TYPE, CONTENT_TYPE_XML, ProblemDocument


class ProblemResponse(Response):
    """A Response for RFC7807 problem documents, serialized as JSON."""

    media_type: str = CONTENT_TYPE

    def __init__(self, *args, debug: bool = False, **kwargs) -> None:
        self.debug: bool = debug
        super(ProblemResponse, self).__init__(*args, **kwargs)

    def init_headers(self, headers: Mapping[str, str] = None) -> None:
        h = dict(headers) if headers else {}
        if hasattr(self, 'problem') and self.problem.headers:
            h.update(self.problem.headers)

        super(ProblemResponse, self).init_headers(h)

    def render(self, content: Any) -> bytes:
        """Render the provided content as a problem document."""
        if isinstance(content, ProblemDocument):
            p = content
        elif isinstance(content, dict):
            p = ProblemDocument.from_dict(content)
        else:
            p = ProblemDocument(
                status=500,
                title='Application Error',
                detail='Got unexpected content when trying to generate error response',
                content=str(content),
            )

        # Dynamically set the response status_code to match
        # the status code of the problem document.
        self.status_code = p.status or 500

        self.problem = p
        return self.serialize(p).encode('utf-8')

    def serialize(self, problem: ProblemDocument) -> str:
        return problem.to_json(pretty=self.debug)


class ProblemXMLResponse(ProblemResponse):
    """A Response for RFC7807 problem documents, serialized as XML."""

    media_type: str = CONTENT_TYPE_XML

    def serialize(self, problem: ProblemDocument) -> str:
        return problem.to_xml(pretty=self.debug)
