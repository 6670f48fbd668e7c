"""RFC7807 problem documents and their JSON and XML representations.

For details on the Problem format, see: https://tools.ietf.org/html/rfc7807
"""

import copy
import functools
import json
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from . import schema
from .errors import InvalidExtensionKey, InvalidXMLCharacter, ParseError

CONTENT_TYPE = 'application/problem+json'
CONTENT_TYPE_XML = 'application/problem+xml'

# The RFC7807 members, in the order they are serialized.
FIELDS = ('type', 'title', 'status', 'detail', 'instance')

# Namespace used by the XML format in RFC7807, Appendix A.
XML_NAMESPACE = 'urn:ietf:rfc:7807'
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# NCName, per the NameStartChar and NameChar productions of XML 1.0 (5th ed.)
# without ':'.
_NAME_START_CHARS = (
    'A-Z_a-z\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u02ff\u0370-\u037d\u037f-\u1fff'
    '\u200c-\u200d\u2070-\u218f\u2c00-\u2fef\u3001-\ud7ff\uf900-\ufdcf'
    '\ufdf0-\ufffd\U00010000-\U000effff'
)
_NAME_CHARS = _NAME_START_CHARS + '\\-.0-9\u00b7\u0300-\u036f\u203f-\u2040'
_XML_NAME = re.compile('[' + _NAME_START_CHARS + '][' + _NAME_CHARS + ']*')

# Anything outside the XML 1.0 Char production.
_XML_INVALID_CHAR = re.compile('[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]')

# Marks an empty mapping or list, which would otherwise read back as "".
CONTAINER_ATTRIBUTE = 'container'

_MISSING = object()

Path = Union[str, Sequence[str]]


class ProblemDocument:
    """An RFC 7807 problem details document.

    A document has the five members defined by the RFC as attributes and an
    open-ended store of extension members in `extensions`. Extensions are
    read and written with item access, where the key is either a single name
    or a tuple of names addressing a nested member:

        problem = ProblemDocument('Out of credit', 'https://example.com/probs/out-of-credit')
        problem['balance'] = 30
        problem['account', 'owner'] = 'Zim'
        problem['account']['owner']  # -> 'Zim'

    Intermediate mappings are created as needed when writing a nested member.
    Reading a member which does not exist gives None.

    The RFC7807 member names are reserved: they can not be used as top-level
    extension keys and are only set through their attributes.
    """

    CONTENT_TYPE = CONTENT_TYPE
    CONTENT_TYPE_XML = CONTENT_TYPE_XML

    # Additional HTTP headers to send along with the document when it is
    # rendered by a ProblemResponse. Subclasses may override.
    headers: Dict[str, str] = {}

    def __init__(
            self,
            title: Optional[str] = None,
            type: Optional[str] = None,
            status: Optional[int] = None,
            detail: Optional[str] = None,
            instance: Optional[str] = None,
            **extensions: Any,
    ) -> None:
        self.type = type
        self.title: Optional[str] = title
        self.status = status
        self.detail: Optional[str] = detail
        self.instance: Optional[str] = instance
        self.extensions: Dict[str, Any] = {}

        for key, value in extensions.items():
            self.set(key, value)

    @property
    def type(self) -> str:
        """The problem type URI. Defaults to "about:blank"."""
        return self._type

    @type.setter
    def type(self, value: Optional[str]) -> None:
        self._type = str(value) if value else 'about:blank'

    @property
    def status(self) -> Optional[int]:
        """The HTTP status code for this occurrence of the problem, if any."""
        return self._status

    @status.setter
    def status(self, value: Optional[int]) -> None:
        self._status = None if value is None else int(value)

    def get(self, path: Path, default: Any = None) -> Any:
        """Get an extension member, or `default` if it does not exist."""
        node: Any = self.extensions
        for key in _keys(path):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def set(self, path: Path, value: Any) -> None:
        """Set an extension member, creating intermediate mappings as needed.

        Raises:
            InvalidExtensionKey: The path is empty, contains a non-string key,
                or starts with a reserved RFC7807 member name.
            TypeError: An intermediate member exists but is not a mapping.
        """
        keys = _keys(path)
        if keys[0] in FIELDS:
            raise InvalidExtensionKey(
                f"'{keys[0]}' is a reserved problem member, set it through "
                f"the '{keys[0]}' attribute instead",
            )

        node = self.extensions
        for key in keys[:-1]:
            child = node.get(key)
            if child is None:
                child = node[key] = {}
            elif not isinstance(child, dict):
                raise TypeError(
                    f'extension member {key!r} holds a {type(child).__name__}, not a mapping',
                )
            node = child
        node[keys[-1]] = value

    def has(self, path: Path) -> bool:
        """Check whether an extension member exists."""
        return self.get(path, _MISSING) is not _MISSING

    def unset(self, path: Path) -> None:
        """Remove an extension member. Removing a missing member is a no-op."""
        keys = _keys(path)
        parent = self.get(keys[:-1]) if len(keys) > 1 else self.extensions
        if isinstance(parent, dict):
            parent.pop(keys[-1], None)

    def __getitem__(self, path: Path) -> Any:
        return self.get(path)

    def __setitem__(self, path: Path, value: Any) -> None:
        self.set(path, value)

    def __delitem__(self, path: Path) -> None:
        self.unset(path)

    def __contains__(self, path: object) -> bool:
        return self.has(path)  # type: ignore[arg-type]

    def to_dict(self) -> Dict[str, Any]:
        """Get a dictionary representation of the problem document.

        Returns:
            The RFC7807 members which are set (empty strings count as
            unset), followed by all extension
            members at the top level. The extension values are copies, so
            the result can be modified without affecting the document.
        """
        d: Dict[str, Any] = {'type': self.type}

        if self.title:
            d['title'] = str(self.title)
        if self.status is not None:
            d['status'] = int(self.status)
        if self.detail:
            d['detail'] = str(self.detail)
        if self.instance:
            d['instance'] = str(self.instance)

        d.update(copy.deepcopy(self.extensions))
        return d

    def to_json(self, pretty: bool = False) -> str:
        """Render the problem document as JSON.

        Args:
            pretty: Indent the output, making it easier for humans to read.
                Otherwise, the JSON is serialized in a compact format.

        Returns:
            The JSON-serialized document.
        """
        if pretty:
            return json.dumps(
                self.to_dict(),
                ensure_ascii=False,
                allow_nan=False,
                indent=2,
            )
        else:
            return json.dumps(
                self.to_dict(),
                ensure_ascii=False,
                allow_nan=False,
                indent=None,
                separators=(',', ':'),
            )

    def to_xml(self, complex_properties: bool = True, pretty: bool = False) -> str:
        """Render the problem document as XML.

        The document is rendered under a <problem> root element. Each member
        becomes a child element named after its key. Mappings become nested
        elements and lists become a container element with one <item> child
        per entry. All leaf values are rendered as text, so their types are
        not preserved.

        Args:
            complex_properties: Render extension members whose values are
                mappings or lists. If false, only scalar extensions are rendered.
            pretty: Indent the output, making it easier for humans to read.

        Returns:
            The XML-serialized document, including the XML declaration.

        Raises:
            InvalidExtensionKey: An extension key is not a valid XML element name,
                or a nested mapping has "item" as its only key, which would
                read back as a list.
            InvalidXMLCharacter: A value contains a character which XML 1.0
                can not represent, e.g. a control character.
        """
        root = ET.Element('problem')
        for key, value in self.to_dict().items():
            if not complex_properties and isinstance(value, (dict, list)):
                continue
            _append_element(root, key, value)

        if pretty:
            ET.indent(root, space='  ')
        return XML_DECLARATION + ET.tostring(root, encoding='unicode')

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ProblemDocument':
        """Create a new problem document from a dictionary.

        Keys matching the RFC7807 members are coerced to their expected types
        and set on the document. All other keys become extension members.

        Args:
            data: The dictionary to convert into a problem document.

        Returns:
            A new ProblemDocument populated from the dictionary.

        Raises:
            ParseError: An RFC7807 member has a value of the wrong type.
        """
        try:
            fields = schema.Problem.model_validate(data)
        except ValidationError as e:
            raise ParseError(f'invalid problem members: {e}') from e

        doc = cls(
            title=fields.title,
            type=fields.type,
            status=fields.status,
            detail=fields.detail,
            instance=fields.instance,
        )
        doc.extensions.update(copy.deepcopy(fields.model_extra or {}))
        return doc

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> 'ProblemDocument':
        """Create a new problem document from its JSON representation.

        Raises:
            ParseError: The text is not valid JSON, is not a JSON object, or
                has an RFC7807 member of the wrong type.
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ParseError(f'invalid problem JSON: {e}') from e

        if not isinstance(data, dict):
            raise ParseError(f'expected a JSON object, got {type(data).__name__}')
        return cls.from_dict(data)

    @classmethod
    def from_xml(cls, text: Union[str, bytes]) -> 'ProblemDocument':
        """Create a new problem document from its XML representation.

        Both un-namespaced documents and documents in the RFC7807 namespace
        are accepted. Extension members are rebuilt from the element structure
        with every leaf value as a string.

        Raises:
            ParseError: The text is not well-formed XML, the root element is
                not <problem>, or an RFC7807 member has a value of the wrong type.
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ParseError(f'invalid problem XML: {e}') from e

        if _local_name(root.tag) != 'problem':
            raise ParseError(f'expected a <problem> root element, got <{root.tag}>')

        data = _element_mapping(root)
        for field in FIELDS:
            # Unset members are never rendered, so an empty one means "unset".
            if data.get(field) == '':
                del data[field]
        return cls.from_dict(data)

    def __str__(self) -> str:
        return f'ProblemDocument:<{self.to_dict()}>'

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProblemDocument):
            return False
        return self.__dict__ == other.__dict__


def _keys(path: Path) -> Tuple[str, ...]:
    if isinstance(path, str):
        keys: Tuple[Any, ...] = (path,)
    elif isinstance(path, (tuple, list)):
        keys = tuple(path)
    else:
        keys = ()

    if not keys or not all(isinstance(key, str) for key in keys):
        raise InvalidExtensionKey(f'invalid extension member path: {path!r}')
    return keys


@functools.lru_cache(maxsize=256)
def _is_xml_name(name: str) -> bool:
    if not _XML_NAME.fullmatch(name) or name.lower().startswith('xml'):
        return False
    if name.isascii():
        return True

    # Expat checks names against older Unicode tables than the 5th edition
    # productions, so non-ASCII names must also be accepted by the parser.
    try:
        ET.fromstring(f'<{name}/>')
    except ET.ParseError:
        return False
    return True


def _append_element(parent: ET.Element, key: Any, value: Any) -> None:
    if not isinstance(key, str) or not _is_xml_name(key):
        raise InvalidExtensionKey(f'{key!r} is not a valid XML element name')

    element = ET.SubElement(parent, key)
    if isinstance(value, dict):
        if list(value) == ['item']:
            raise InvalidExtensionKey(
                f"{key!r} has 'item' as its only key, which can not be told "
                f"apart from a list in XML",
            )
        if not value:
            element.set(CONTAINER_ATTRIBUTE, 'map')
        for k, v in value.items():
            _append_element(element, k, v)
    elif isinstance(value, list):
        if not value:
            element.set(CONTAINER_ATTRIBUTE, 'list')
        for v in value:
            _append_element(element, 'item', v)
    elif value is not None:
        element.text = _element_text(key, value)


def _element_text(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'

    text = str(value)
    match = _XML_INVALID_CHAR.search(text)
    if match:
        raise InvalidXMLCharacter(
            f'{key!r} contains the character {match.group()!r}, which can not be '
            f'represented in XML',
        )
    return text


def _local_name(tag: str) -> str:
    prefix = '{' + XML_NAMESPACE + '}'
    if tag.startswith(prefix):
        return tag[len(prefix):]
    return tag


def _element_value(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        container = element.get(CONTAINER_ATTRIBUTE)
        if container == 'map':
            return {}
        if container == 'list':
            return []
        return element.text or ''
    if all(_local_name(child.tag) == 'item' for child in children):
        return [_element_value(child) for child in children]
    return _element_mapping(element)


def _element_mapping(element: ET.Element) -> Dict[str, Any]:
    mapping: Dict[str, Any] = {}
    repeated: List[str] = []

    # Repeated sibling elements are collected into a list.
    for child in element:
        key = _local_name(child.tag)
        value = _element_value(child)
        if key not in mapping:
            mapping[key] = value
        elif key in repeated:
            mapping[key].append(value)
        else:
            mapping[key] = [mapping[key], value]
            repeated.append(key)
    return mapping
