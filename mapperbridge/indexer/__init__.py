"""mapperbridge indexer package.

This package provides the text-analysis and indexing engine:
- sanitizer: length/newline preserving blanking of comments, strings, CDATA
- extractors: Java mapper, mapper XML, and mapper usage extractors
- MapperIndex: owns parsed documents and answers O(1) cross-reference lookups
- workspace: file enumeration, content access and change feed collaborators

ARCHITECTURAL CONTRACT: data flows strictly upward
=================================================
sanitizer -> extractors -> MapperIndex. Extractors never see the index and
the index is the only object hosts query. Positions produced on sanitized
text are valid on the original text because sanitizing keeps lengths and
line breaks in place.
"""

from .exceptions import FileReadError, IndexInitializationError, MapperIndexError
from .extractors import ExtractorRegistry
from .extractors.java import get_method_name_at_position
from .extractors.xml import get_id_at_position
from .mapper_index import MapperIndex
from .models import IndexState, SymbolLocation
from .workspace import ChangeEvent, ChangeKind, LocalWorkspace, Workspace

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "ExtractorRegistry",
    "FileReadError",
    "IndexInitializationError",
    "IndexState",
    "LocalWorkspace",
    "MapperIndex",
    "MapperIndexError",
    "SymbolLocation",
    "Workspace",
    "get_id_at_position",
    "get_method_name_at_position",
]
