"""Mapper index orchestration.

MapperIndex owns every parsed mapper document and answers cross-reference
lookups in O(1):

    namespace -> XmlMapperDocument -> statement id -> StatementRecord
    fqn       -> JavaMapperDocument -> method name -> MethodRecord

plus URI-keyed maps of both document kinds for incremental updates.

Concurrency model: all state lives on one asyncio loop. Initialization is
single-flight (every caller awaits the same task), file reads during the
scan fan out under a semaphore, and map mutations never span an await so
readers always see remove-old/insert-new as one step.
"""

import asyncio
import copy
from typing import Any

from ..config_runtime import DEFAULTS
from ..utils.logging import logger
from .config import MAX_SCAN_CONCURRENCY
from .extractors import ExtractorRegistry
from .extractors.usage import build_import_map, extract_mapper_calls, extract_mapper_fields
from .models import (
    IndexState,
    JavaMapperDocument,
    MapperUsage,
    SymbolLocation,
    XmlMapperDocument,
)
from .workspace import ChangeEvent, ChangeKind, Subscription, Workspace

MapperDocument = XmlMapperDocument | JavaMapperDocument


class MapperIndex:
    """Bidirectional index between mapper XML statements and Java mapper methods."""

    def __init__(
        self,
        workspace: Workspace,
        config: dict[str, Any] | None = None,
        registry: ExtractorRegistry | None = None,
        watch_changes: bool = True,
    ):
        """Initialize an empty, uninitialized index.

        Args:
            workspace: File enumeration, content access and change feed
            config: Runtime config (see config_runtime); missing keys use defaults
            registry: Extractor registry; discovered automatically when omitted
            watch_changes: Subscribe to the workspace change feed once ready
        """
        self.workspace = workspace
        self.config = copy.deepcopy(DEFAULTS)
        for section, values in (config or {}).items():
            if section in self.config and isinstance(values, dict):
                self.config[section].update(values)
        limits = self.config["limits"]
        limits["scan_concurrency"] = max(1, min(int(limits["scan_concurrency"]), MAX_SCAN_CONCURRENCY))
        self.registry = registry or ExtractorRegistry()
        self.watch_changes = watch_changes

        self._state = IndexState.UNINITIALIZED
        self._xml_by_namespace: dict[str, XmlMapperDocument] = {}
        self._xml_by_uri: dict[str, XmlMapperDocument] = {}
        self._java_by_fqn: dict[str, JavaMapperDocument] = {}
        self._java_by_uri: dict[str, JavaMapperDocument] = {}

        self._init_task: asyncio.Future | None = None
        # Bumped by dispose(); work started under an older epoch never commits
        self._epoch = 0
        # Sequence number of the newest pending change per URI; only that one commits.
        # Entries are dropped once applied, so the map holds in-flight URIs only.
        self._change_seq = 0
        self._generations: dict[str, int] = {}
        self._subscriptions: list[Subscription] = []
        self._event_tasks: set[asyncio.Task] = set()

        self.scan_count = 0
        self.counts = {"xml": 0, "java": 0, "skipped": 0}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> IndexState:
        return self._state

    def is_ready(self) -> bool:
        return self._state is IndexState.READY

    async def ensure_initialized(self) -> None:
        """Build the index on first use.

        Concurrent callers share one scan. If the scan fails, every waiting
        caller receives the error and the index returns to uninitialized so
        a later call can retry.
        """
        if self._state is IndexState.READY:
            return
        if self._init_task is None or self._init_task.cancelled():
            self._init_task = asyncio.ensure_future(self._initialize(self._epoch))
        await asyncio.shield(self._init_task)

    async def _initialize(self, epoch: int) -> None:
        if epoch == self._epoch:
            self._state = IndexState.INITIALIZING
            self.counts = {"xml": 0, "java": 0, "skipped": 0}
        self.scan_count += 1
        logger.info("Starting mapper index initialization")

        try:
            documents = await self._scan()
            if epoch != self._epoch:
                logger.debug("Index disposed during initialization; discarding scan results")
                return
            subscriptions = self._subscribe()
        except asyncio.CancelledError:
            if epoch == self._epoch:
                self._state = IndexState.UNINITIALIZED
                self._init_task = None
            logger.warning("Mapper index initialization cancelled")
            raise
        except Exception:
            if epoch == self._epoch:
                self._state = IndexState.UNINITIALIZED
                self._init_task = None
            logger.opt(exception=True).error("Mapper index initialization failed")
            raise

        self._subscriptions.extend(subscriptions)
        for document in documents:
            self._insert(document)
        self._state = IndexState.READY

        self.counts["xml"] = len(self._xml_by_uri)
        self.counts["java"] = len(self._java_by_uri)
        logger.info(
            "Mapper index ready: {} XML mappers, {} Java mappers",
            self.counts["xml"],
            self.counts["java"],
        )

    async def _scan(self) -> list[MapperDocument]:
        xml_uris = await self.workspace.find_files(self.config["mappers"]["xml_mapper_globs"])
        java_uris = await self.workspace.find_files(self.config["mappers"]["java_mapper_globs"])
        uris = list(dict.fromkeys([*xml_uris, *java_uris]))
        logger.debug("Scanning {} mapper candidates", len(uris))

        semaphore = asyncio.Semaphore(self.config["limits"]["scan_concurrency"])

        async def load(uri: str) -> MapperDocument | None:
            async with semaphore:
                return await self._load_document(uri)

        results = await asyncio.gather(*(load(uri) for uri in uris))
        return [document for document in results if document is not None]

    async def _load_document(self, uri: str) -> MapperDocument | None:
        """Read and parse one file. Failures are logged; the file is left out."""
        extractor = self.registry.for_uri(uri)
        if extractor is None:
            return None

        try:
            content = await self.workspace.read_text(uri)
        except Exception as e:
            self.counts["skipped"] += 1
            logger.warning("Skipping unreadable mapper candidate {}: {}", uri, e)
            return None

        try:
            return extractor.parse(uri, content)
        except Exception:
            self.counts["skipped"] += 1
            logger.opt(exception=True).warning("Failed to parse {} as {} mapper", uri, extractor.kind)
            return None

    def _subscribe(self) -> list[Subscription]:
        if not self.watch_changes:
            return []
        mappers = self.config["mappers"]
        globs = list(dict.fromkeys([*mappers["xml_mapper_globs"], *mappers["java_mapper_globs"]]))
        return [self.workspace.watch(globs, self._handle_change)]

    def dispose(self) -> None:
        """Drop all documents and subscriptions and return to uninitialized.

        An initialization still in flight finishes but does not commit.
        """
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
        for task in list(self._event_tasks):
            if not task.done():
                task.cancel()
        self._event_tasks.clear()

        self._xml_by_namespace.clear()
        self._xml_by_uri.clear()
        self._java_by_fqn.clear()
        self._java_by_uri.clear()
        self._generations.clear()

        self._epoch += 1
        self._init_task = None
        self._state = IndexState.UNINITIALIZED
        self.registry.cleanup()
        logger.debug("Mapper index disposed")

    # ------------------------------------------------------------------
    # Map maintenance
    # ------------------------------------------------------------------

    def _insert(self, document: MapperDocument) -> None:
        if isinstance(document, XmlMapperDocument):
            self._xml_by_uri[document.uri] = document
            self._xml_by_namespace[document.namespace] = document
        else:
            self._java_by_uri[document.uri] = document
            self._java_by_fqn[document.fully_qualified_name] = document

    def _remove_uri(self, uri: str) -> None:
        xml_doc = self._xml_by_uri.pop(uri, None)
        if xml_doc is not None and self._xml_by_namespace.get(xml_doc.namespace) is xml_doc:
            del self._xml_by_namespace[xml_doc.namespace]
            # another file declaring the same namespace takes over
            for other in self._xml_by_uri.values():
                if other.namespace == xml_doc.namespace:
                    self._xml_by_namespace[other.namespace] = other
                    break

        java_doc = self._java_by_uri.pop(uri, None)
        if java_doc is not None:
            fqn = java_doc.fully_qualified_name
            if self._java_by_fqn.get(fqn) is java_doc:
                del self._java_by_fqn[fqn]
                for other in self._java_by_uri.values():
                    if other.fully_qualified_name == fqn:
                        self._java_by_fqn[fqn] = other
                        break

    async def _wait_for_initialization(self) -> None:
        task = self._init_task
        if task is not None and not task.done():
            await asyncio.wait({task})

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    def _handle_change(self, event: ChangeEvent) -> None:
        logger.debug("File {}: {}", event.kind.value, event.uri)
        if event.kind is ChangeKind.DELETED:
            coro = self.on_file_deleted(event.uri)
        elif event.kind is ChangeKind.CREATED:
            coro = self.on_file_created(event.uri)
        else:
            coro = self.on_file_changed(event.uri)
        task = asyncio.ensure_future(coro)
        self._event_tasks.add(task)
        task.add_done_callback(self._event_tasks.discard)

    def _next_generation(self, uri: str) -> int:
        self._change_seq += 1
        self._generations[uri] = self._change_seq
        return self._change_seq

    async def _reindex(self, uri: str) -> None:
        await self._wait_for_initialization()
        epoch = self._epoch
        generation = self._next_generation(uri)

        document = await self._load_document(uri)

        if epoch != self._epoch or self._generations.get(uri) != generation:
            return
        del self._generations[uri]
        self._remove_uri(uri)
        if document is not None:
            self._insert(document)

    async def on_file_changed(self, uri: str) -> None:
        """Re-parse a file and replace its document wholesale."""
        await self._reindex(uri)

    async def on_file_created(self, uri: str) -> None:
        await self._reindex(uri)

    async def on_file_deleted(self, uri: str) -> None:
        """Remove a file's documents from every map."""
        await self._wait_for_initialization()
        # supersedes any re-read still in flight for this file
        self._generations.pop(uri, None)
        self._remove_uri(uri)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_statement(self, namespace: str, statement_id: str) -> SymbolLocation | None:
        document = self._xml_by_namespace.get(namespace)
        if document is None:
            return None
        statement = document.statement_by_id.get(statement_id)
        if statement is None:
            return None
        return SymbolLocation(document.uri, statement.position)

    def find_method(self, fully_qualified_name: str, method_name: str) -> SymbolLocation | None:
        document = self._java_by_fqn.get(fully_qualified_name)
        if document is None:
            return None
        method = document.method_by_name.get(method_name)
        if method is None:
            return None
        return SymbolLocation(document.uri, method.position)

    def get_known_mapper_fqns(self) -> frozenset[str]:
        return frozenset(self._java_by_fqn)

    def get_xml_mapper_by_namespace(self, namespace: str) -> XmlMapperDocument | None:
        return self._xml_by_namespace.get(namespace)

    def get_xml_mapper_by_uri(self, uri: str) -> XmlMapperDocument | None:
        return self._xml_by_uri.get(uri)

    def get_java_mapper_by_fqn(self, fully_qualified_name: str) -> JavaMapperDocument | None:
        return self._java_by_fqn.get(fully_qualified_name)

    def get_java_mapper_by_uri(self, uri: str) -> JavaMapperDocument | None:
        return self._java_by_uri.get(uri)

    def xml_mappers(self) -> list[XmlMapperDocument]:
        return sorted(self._xml_by_namespace.values(), key=lambda d: d.namespace)

    def java_mappers(self) -> list[JavaMapperDocument]:
        return sorted(self._java_by_fqn.values(), key=lambda d: d.fully_qualified_name)

    async def find_mapper_usages(self, content: str) -> list[MapperUsage]:
        """Resolve mapper call sites in arbitrary Java code to their statements.

        Calls whose statement is not indexed are left out.
        """
        await self.ensure_initialized()

        known = self.get_known_mapper_fqns()
        if not known:
            return []

        fields = extract_mapper_fields(content, build_import_map(content), known)
        usages = []
        for call in extract_mapper_calls(content, fields):
            target = self.find_statement(call.mapper_fully_qualified_name, call.method_name)
            if target is not None:
                usages.append(MapperUsage(call, target))
        return usages
