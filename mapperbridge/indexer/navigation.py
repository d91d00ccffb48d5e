"""Cross-reference queries for editor integrations.

Turns a raw document plus cursor position into a counterpart location, and
lists the counterpart of every method/statement in a mapper file. Nothing
here renders anything; hosts map SymbolLocation / CounterpartLink onto their
own navigation primitives.
"""

import re

from .extractors.java import (
    extract_interface_name,
    extract_methods,
    extract_package_name,
    get_method_name_at_position,
    is_mapper_interface,
)
from .extractors.xml import extract_namespace, extract_statements, get_id_at_position, is_mybatis_xml
from .mapper_index import MapperIndex
from .models import CounterpartLink, SymbolLocation
from .sanitizer import sanitize_java_content, sanitize_xml_content

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_OPEN_PAREN_AHEAD = re.compile(r"\s*\(")


def _identifier_at(line_text: str, column: int) -> re.Match | None:
    for match in _IDENTIFIER.finditer(line_text):
        if match.start() <= column <= match.end():
            return match
    return None


def _mapper_fqn(sanitized_java: str) -> str | None:
    package_name = extract_package_name(sanitized_java)
    interface_name = extract_interface_name(sanitized_java)
    if not package_name or not interface_name:
        return None
    return f"{package_name}.{interface_name}"


async def resolve_java_definition(
    index: MapperIndex, content: str, line: int, column: int
) -> SymbolLocation | None:
    """Statement for the mapper method under the cursor in a Java mapper file."""
    await index.ensure_initialized()

    method_name = get_method_name_at_position(content, line, column)
    sanitized = sanitize_java_content(content)
    if method_name is None:
        # identifier directly followed by "(" (e.g. a declaration the extractor skipped)
        lines = sanitized.split("\n")
        if not 0 <= line < len(lines):
            return None
        match = _identifier_at(lines[line], column)
        if match is None or not _OPEN_PAREN_AHEAD.match(lines[line], match.end()):
            return None
        method_name = match.group(0)

    namespace = _mapper_fqn(sanitized)
    if namespace is None:
        return None
    return index.find_statement(namespace, method_name)


async def resolve_xml_definition(
    index: MapperIndex, content: str, line: int, column: int
) -> SymbolLocation | None:
    """Java method for the statement id under the cursor in mapper XML."""
    await index.ensure_initialized()

    statement_id = get_id_at_position(content, line, column)
    if statement_id is None:
        return None

    namespace = extract_namespace(sanitize_xml_content(content))
    if namespace is None:
        return None
    return index.find_method(namespace, statement_id)


async def java_statement_links(index: MapperIndex, content: str) -> list[CounterpartLink]:
    """For each method of a Java mapper, the XML statement it maps to."""
    sanitized = sanitize_java_content(content)
    if not is_mapper_interface(sanitized):
        return []

    await index.ensure_initialized()

    namespace = _mapper_fqn(sanitized)
    if namespace is None:
        return []

    links = []
    for method in extract_methods(sanitized):
        target = index.find_statement(namespace, method.name)
        if target is not None:
            links.append(CounterpartLink(method.name, method.position, target))
    return links


async def xml_method_links(index: MapperIndex, content: str) -> list[CounterpartLink]:
    """For each statement of a mapper XML file, the Java method it maps to."""
    sanitized = sanitize_xml_content(content)
    if not is_mybatis_xml(sanitized):
        return []

    await index.ensure_initialized()

    namespace = extract_namespace(sanitized)
    if namespace is None:
        return []

    links = []
    for statement in extract_statements(sanitized):
        target = index.find_method(namespace, statement.id)
        if target is not None:
            links.append(CounterpartLink(statement.id, statement.position, target))
    return links
