"""Java mapper interface extractor.

Pulls the package name, the mapper type name and the declared methods out
of a Java mapper interface (or abstract class). Pattern based: it finds
signature shapes, it does not build a syntax tree.

The extract_* functions expect sanitized text. parse_java_mapper() and
get_method_name_at_position() take raw file content and sanitize it.
"""

import re

from . import BaseExtractor, LineMap
from ..config import JAVA_EXTENSIONS
from ..models import JavaMapperDocument, MethodRecord
from ..sanitizer import sanitize_java_content

PACKAGE_PATTERN = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)

# Optional annotation run (same or prior lines), modifiers, then the type keyword.
TYPE_DECLARATION_PATTERN = re.compile(
    r"^[ \t]*(?:@[\w.]+(?:\s*\([^)]*\))?\s*)*"
    r"(?P<modifiers>(?:(?:public|protected|private|static|abstract|strictfp|sealed|non-sealed)\s+)*)"
    r"(?P<keyword>interface|class)\s+(?P<name>[A-Za-z_$][\w$]*)",
    re.MULTILINE,
)

# Return type (identifier, dotted, generic and/or array form) then a name and "(".
METHOD_HEAD_PATTERN = re.compile(
    r"(?<![\w$.])"
    r"(?P<rtype>[A-Za-z_$][\w$.]*(?:\s*<[^;{}()=]*>)?(?:\s*\[\s*\])*)"
    r"\s+(?P<name>[A-Za-z_$][\w$]*)\s*\("
)

THROWS_AND_TERMINATOR_PATTERN = re.compile(
    r"\s*(?:throws\s+[\w$.]+(?:\s*<[^;{}()]*>)?(?:\s*,\s*[\w$.]+(?:\s*<[^;{}()]*>)?)*)?\s*(?P<term>[;{])"
)

PRIMITIVE_TYPES = frozenset(
    {"void", "boolean", "byte", "char", "short", "int", "long", "float", "double"}
)

RESERVED_WORDS = PRIMITIVE_TYPES | frozenset(
    {
        "if", "else", "for", "while", "do", "switch", "case", "default",
        "break", "continue", "return", "try", "catch", "finally", "throw",
        "throws", "new", "this", "super", "class", "interface", "enum",
        "extends", "implements", "package", "import", "public", "private",
        "protected", "static", "final", "abstract", "native", "synchronized",
        "transient", "volatile", "strictfp", "assert", "instanceof", "goto",
        "const", "true", "false", "null",
    }
)

# Words that may precede "name(" without being a return type
_NON_TYPE_WORDS = (RESERVED_WORDS - PRIMITIVE_TYPES) | frozenset({"record", "yield", "var"})


def extract_package_name(content: str) -> str | None:
    """Return the first top-level package declaration."""
    match = PACKAGE_PATTERN.search(content)
    return match.group(1) if match else None


def _find_type_declaration(content: str) -> re.Match | None:
    for match in TYPE_DECLARATION_PATTERN.finditer(content):
        if match.group("keyword") == "interface":
            return match
        if re.search(r"\babstract\b", match.group("modifiers")):
            return match
    return None


def extract_interface_name(content: str) -> str | None:
    """Return the name of the first interface or abstract class declaration."""
    match = _find_type_declaration(content)
    return match.group("name") if match else None


def is_mapper_interface(content: str) -> bool:
    """Fast rejection filter: does the text declare an interface or abstract class?"""
    return _find_type_declaration(content) is not None


def _closing_paren(content: str, open_index: int) -> int:
    """Index of the parenthesis closing the one at open_index, or -1."""
    depth = 0
    for i in range(open_index, len(content)):
        ch = content[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _closing_brace(content: str, open_index: int) -> int:
    depth = 0
    for i in range(open_index, len(content)):
        ch = content[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return len(content)


def extract_methods(content: str) -> list[MethodRecord]:
    """Extract method declarations in source order.

    A signature may span several lines. Default and static method bodies
    are skipped so calls inside them are not mistaken for declarations.
    """
    methods: list[MethodRecord] = []
    lines = LineMap(content)
    pos = 0

    while True:
        match = METHOD_HEAD_PATTERN.search(content, pos)
        if not match:
            break

        name = match.group("name")
        rtype_head = re.match(r"[\w$]+", match.group("rtype")).group(0)
        if name in RESERVED_WORDS or rtype_head in _NON_TYPE_WORDS:
            pos = match.end("name")
            continue

        close = _closing_paren(content, match.end() - 1)
        if close == -1:
            break

        tail = THROWS_AND_TERMINATOR_PATTERN.match(content, close + 1)
        if not tail:
            pos = match.end("name")
            continue

        methods.append(MethodRecord(name=name, position=lines.position(match.start("name"))))

        if tail.group("term") == "{":
            pos = _closing_brace(content, tail.end() - 1) + 1
        else:
            pos = tail.end()

    return methods


def parse_java_mapper(uri: str, content: str) -> JavaMapperDocument | None:
    """Parse a Java file into a JavaMapperDocument.

    Returns None when the file is not mapper-like or when the package or
    type name cannot be determined.
    """
    sanitized = sanitize_java_content(content)

    if not is_mapper_interface(sanitized):
        return None

    package_name = extract_package_name(sanitized)
    if not package_name:
        return None

    interface_name = extract_interface_name(sanitized)
    if not interface_name:
        return None

    return JavaMapperDocument.build(uri, package_name, interface_name, extract_methods(sanitized))


def get_method_name_at_position(content: str, line: int, column: int) -> str | None:
    """Return the declared method name under the cursor, if any.

    The cursor counts as on the name from its first character up to and
    including the position just past its last character.
    """
    if line < 0 or line >= content.count("\n") + 1:
        return None

    for method in extract_methods(sanitize_java_content(content)):
        if method.position.line != line:
            continue
        start = method.position.column
        if start <= column <= start + len(method.name):
            return method.name

    return None


class JavaMapperExtractor(BaseExtractor):
    """Extractor for Java mapper interfaces."""

    kind = "java"

    def supported_extensions(self) -> list[str]:
        return list(JAVA_EXTENSIONS)

    def parse(self, uri: str, content: str) -> JavaMapperDocument | None:
        return parse_java_mapper(uri, content)
