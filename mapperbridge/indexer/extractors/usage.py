"""Mapper usage extractor.

Finds call sites of known mappers in arbitrary Java code (services,
controllers, tests). Works in two passes over sanitized text:

1. Collect fields and method parameters whose type resolves, through the
   file's imports, to a known mapper fully-qualified name.
2. Collect ``variable.method(`` calls whose left side is one of those names.

Every function here takes raw file content and sanitizes it.
"""

import re
from collections.abc import Iterable, Mapping

from . import LineMap
from ..models import MapperCallRecord, MapperFieldRecord
from ..sanitizer import sanitize_java_content

IMPORT_PATTERN = re.compile(r"^\s*import\s+([\w.]+(?:\.\*)?)\s*;", re.MULTILINE)

# @Autowired private final UserMapper userMapper;  /  @Resource UserMapper userMapper = ...
FIELD_PATTERN = re.compile(
    r"(?:@\w+(?:\([^)]*\))?\s*)*"
    r"(?:(?:private|protected|public)\s+)?(?:static\s+)?(?:final\s+)?"
    r"(\w+)\s+(\w+)\s*[;=]"
)

# void run(@Param("m") UserMapper userMapper, String name)
PARAMETER_PATTERN = re.compile(r"(?:@\w+(?:\([^)]*\))?\s+)*(?:final\s+)?(\w+)\s+(\w+)\s*[,)]")

CALL_PATTERN = re.compile(r"\b(\w+)\.(\w+)\s*\(")


def build_import_map(content: str) -> dict[str, str]:
    """Map simple class names to fully-qualified names from import declarations.

    Wildcard imports are ignored: a simple name cannot be resolved from them.
    """
    import_map: dict[str, str] = {}
    for match in IMPORT_PATTERN.finditer(sanitize_java_content(content)):
        fqn = match.group(1)
        if fqn.endswith("*"):
            continue
        simple_name = fqn.rpartition(".")[2]
        if simple_name and simple_name != fqn:
            import_map[simple_name] = fqn
    return import_map


def extract_mapper_fields(
    content: str,
    import_map: Mapping[str, str],
    known_mapper_fqns: Iterable[str],
) -> list[MapperFieldRecord]:
    """Find fields and parameters typed as a known mapper.

    Each variable name is bound once: the first declaration in the file wins.
    """
    known = known_mapper_fqns if isinstance(known_mapper_fqns, (set, frozenset)) else set(known_mapper_fqns)
    sanitized = sanitize_java_content(content)
    lines = LineMap(sanitized)

    candidates: list[tuple[int, str, str]] = []
    for pattern in (FIELD_PATTERN, PARAMETER_PATTERN):
        for match in pattern.finditer(sanitized):
            candidates.append((match.start(1), match.group(1), match.group(2)))
    candidates.sort(key=lambda item: item[0])

    fields: list[MapperFieldRecord] = []
    seen: set[str] = set()
    for offset, type_name, variable_name in candidates:
        if variable_name in seen:
            continue
        fqn = import_map.get(type_name)
        if not fqn or fqn not in known:
            continue
        seen.add(variable_name)
        fields.append(
            MapperFieldRecord(
                field_name=variable_name,
                mapper_simple_type_name=type_name,
                mapper_fully_qualified_name=fqn,
                declaration_line=lines.position(offset).line,
            )
        )

    return fields


def extract_mapper_calls(content: str, fields: Iterable[MapperFieldRecord]) -> list[MapperCallRecord]:
    """Find ``field.method(`` calls through the given mapper-typed variables."""
    field_map = {field.field_name: field for field in fields}
    if not field_map:
        return []

    sanitized = sanitize_java_content(content)
    lines = LineMap(sanitized)
    calls: list[MapperCallRecord] = []

    for match in CALL_PATTERN.finditer(sanitized):
        field = field_map.get(match.group(1))
        if field is None:
            continue
        calls.append(
            MapperCallRecord(
                field_name=field.field_name,
                method_name=match.group(2),
                position=lines.position(match.start(1)),
                mapper_fully_qualified_name=field.mapper_fully_qualified_name,
            )
        )

    return calls
