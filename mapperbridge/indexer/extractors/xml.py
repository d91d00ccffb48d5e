"""MyBatis mapper XML extractor.

Finds the mapper namespace and the statement elements (select, insert,
update, delete, resultMap, sql) with their ids. Opening tags may span
several lines and the id attribute may appear anywhere among the others.

The extract_* functions expect sanitized text; parse_xml_mapper() and
get_id_at_position() sanitize raw content themselves.
"""

import re

from . import BaseExtractor, LineMap
from ..config import XML_EXTENSIONS
from ..models import StatementKind, StatementRecord, XmlMapperDocument
from ..sanitizer import sanitize_xml_content

MYBATIS_DOCTYPE_PATTERN = re.compile(r"<!DOCTYPE\s+mapper[^>]*mybatis", re.IGNORECASE)

MAPPER_NAMESPACE_PATTERN = re.compile(
    r"<mapper\s[^>]*?(?<![\w.:-])namespace\s*=\s*(?:\"([^\"]*)\"|'([^']*)')"
)

STATEMENT_TAG_PATTERN = re.compile(
    r"<(select|insert|update|delete|resultMap|sql)\s([^>]*)",
    re.IGNORECASE,
)

ID_ATTRIBUTE_PATTERN = re.compile(r"(?<![\w.:-])id\s*=\s*(?:\"([^\"]*)\"|'([^']*)')")


def _quoted_value(match: re.Match, first_group: int = 1) -> tuple[str, int, int]:
    """Return (value, start, end) of whichever quote style matched."""
    group = first_group if match.group(first_group) is not None else first_group + 1
    return match.group(group), match.start(group), match.end(group)


def _normalize_kind(tag_name: str) -> StatementKind:
    lowered = tag_name.lower()
    if lowered == "resultmap":
        return StatementKind.RESULT_MAP
    return StatementKind(lowered)


def is_mybatis_xml(content: str) -> bool:
    """True if the text has a mapper DOCTYPE or a <mapper namespace=...> tag."""
    return bool(MYBATIS_DOCTYPE_PATTERN.search(content) or MAPPER_NAMESPACE_PATTERN.search(content))


def extract_namespace(content: str) -> str | None:
    """Return the namespace attribute of the mapper tag."""
    match = MAPPER_NAMESPACE_PATTERN.search(content)
    if not match:
        return None
    value = _quoted_value(match)[0].strip()
    return value or None


def extract_statements(content: str) -> list[StatementRecord]:
    """Extract statement elements in document order.

    The recorded position is the tag's opening angle bracket.
    """
    statements: list[StatementRecord] = []
    lines = LineMap(content)

    for match in STATEMENT_TAG_PATTERN.finditer(content):
        id_match = ID_ATTRIBUTE_PATTERN.search(match.group(2))
        if not id_match:
            continue
        statement_id = _quoted_value(id_match)[0]
        if not statement_id:
            continue
        statements.append(
            StatementRecord(
                id=statement_id,
                kind=_normalize_kind(match.group(1)),
                position=lines.position(match.start()),
            )
        )

    return statements


def get_id_at_position(content: str, line: int, column: int) -> str | None:
    """Return the id attribute value under the cursor on the given line.

    Both boundaries are inclusive: the column just after the opening quote
    and the column of the closing quote both count.
    """
    lines = sanitize_xml_content(content).split("\n")
    if line < 0 or line >= len(lines):
        return None

    for match in ID_ATTRIBUTE_PATTERN.finditer(lines[line]):
        value, start, end = _quoted_value(match)
        if value and start <= column <= end:
            return value

    return None


def parse_xml_mapper(uri: str, content: str) -> XmlMapperDocument | None:
    """Parse mapper XML into an XmlMapperDocument.

    Returns None unless the file is MyBatis mapper XML with a namespace.
    Duplicate statement ids: the last one wins in statement_by_id.
    """
    sanitized = sanitize_xml_content(content)

    if not is_mybatis_xml(sanitized):
        return None

    namespace = extract_namespace(sanitized)
    if not namespace:
        return None

    return XmlMapperDocument.build(uri, namespace, extract_statements(sanitized))


class XmlMapperExtractor(BaseExtractor):
    """Extractor for MyBatis mapper XML files."""

    kind = "xml"

    def supported_extensions(self) -> list[str]:
        return list(XML_EXTENSIONS)

    def parse(self, uri: str, content: str) -> XmlMapperDocument | None:
        return parse_xml_mapper(uri, content)
