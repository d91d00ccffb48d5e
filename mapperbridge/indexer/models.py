"""Record types shared by the extractors and the mapper index.

Lines and columns are zero-based. Columns are Python string offsets (code
points); use SourcePosition.to_utf16() when a host addresses text in UTF-16
code units.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class IndexState(str, Enum):
    """Lifecycle of a MapperIndex."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class StatementKind(str, Enum):
    """Element kinds that declare a mapper statement."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    RESULT_MAP = "resultMap"
    SQL = "sql"


@dataclass(frozen=True)
class SourcePosition:
    """Zero-based line/column pair."""

    line: int
    column: int

    def to_utf16(self, line_text: str) -> "SourcePosition":
        """Return the same position with the column counted in UTF-16 code units."""
        prefix = line_text[: self.column]
        units = len(prefix.encode("utf-16-le")) // 2
        return SourcePosition(self.line, units)


@dataclass(frozen=True)
class StatementRecord:
    """A statement element (select/insert/...) declared in mapper XML."""

    id: str
    kind: StatementKind
    position: SourcePosition


@dataclass(frozen=True)
class MethodRecord:
    """A method declared in a Java mapper interface."""

    name: str
    position: SourcePosition


@dataclass(frozen=True)
class XmlMapperDocument:
    """Parsed mapper XML file.

    statement_by_id follows last-write-wins for duplicate ids.
    """

    uri: str
    namespace: str
    statements: tuple[StatementRecord, ...]
    statement_by_id: Mapping[str, StatementRecord] = field(repr=False)

    @classmethod
    def build(cls, uri: str, namespace: str, statements: list[StatementRecord]) -> "XmlMapperDocument":
        by_id: dict[str, StatementRecord] = {}
        for statement in statements:
            by_id[statement.id] = statement
        return cls(uri, namespace, tuple(statements), MappingProxyType(by_id))


@dataclass(frozen=True)
class JavaMapperDocument:
    """Parsed Java mapper interface.

    method_by_name keeps the first declaration of an overloaded name, while
    methods retains every declaration in source order.
    """

    uri: str
    package_name: str
    interface_name: str
    methods: tuple[MethodRecord, ...]
    method_by_name: Mapping[str, MethodRecord] = field(repr=False)

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.package_name}.{self.interface_name}"

    @classmethod
    def build(
        cls, uri: str, package_name: str, interface_name: str, methods: list[MethodRecord]
    ) -> "JavaMapperDocument":
        by_name: dict[str, MethodRecord] = {}
        for method in methods:
            by_name.setdefault(method.name, method)
        return cls(uri, package_name, interface_name, tuple(methods), MappingProxyType(by_name))


@dataclass(frozen=True)
class MapperFieldRecord:
    """A field or parameter typed as a known mapper interface."""

    field_name: str
    mapper_simple_type_name: str
    mapper_fully_qualified_name: str
    declaration_line: int


@dataclass(frozen=True)
class MapperCallRecord:
    """A call like ``userMapper.findById(`` through a mapper-typed variable."""

    field_name: str
    method_name: str
    position: SourcePosition
    mapper_fully_qualified_name: str


@dataclass(frozen=True)
class SymbolLocation:
    """Where a statement or method lives."""

    uri: str
    position: SourcePosition


@dataclass(frozen=True)
class MapperUsage:
    """A mapper call site resolved to its XML statement."""

    call: MapperCallRecord
    target: SymbolLocation


@dataclass(frozen=True)
class CounterpartLink:
    """A symbol in one file paired with its counterpart in the other artifact."""

    name: str
    position: SourcePosition
    target: SymbolLocation
