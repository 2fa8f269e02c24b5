"""Compiler - drives the pipeline over a project's layout documents.

Per document: resolve styles and includes, extract bindings, convert the
tree, emit artifacts. Documents the build cache reports as fresh are
skipped. A failing document never affects another document's artifacts or
cache entry.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from layoutc.ast.node import LayoutNode
from layoutc.ast.parser import DocumentStore
from layoutc.compiler.bindings import BindingExtractor
from layoutc.compiler.cache import BuildCache
from layoutc.compiler.converters import ConversionContext, ConverterRegistry
from layoutc.compiler.layout import LayoutStrategySelector
from layoutc.compiler.renderer import CodeEmitter
from layoutc.compiler.resolver import Resolver
from layoutc.compiler.spec import Artifact, Bindings, GeneratedArtifact
from layoutc.compiler.tracker import DependencyRecord, DependencyTracker
from layoutc.config import ProjectConfig
from layoutc.exceptions import InvalidAttributeError, LayoutError

log = logging.getLogger(__name__)


class Status(str, Enum):
    COMPILED = "compiled"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DocumentResult:
    """Outcome of one top-level document."""

    document: str
    status: Status
    tree: Optional[LayoutNode] = None
    bindings: Optional[Bindings] = None
    dependencies: Optional[DependencyRecord] = None
    artifacts: List[Artifact] = field(default_factory=list)
    generated: List[GeneratedArtifact] = field(default_factory=list)
    warnings: List[InvalidAttributeError] = field(default_factory=list)
    error: Optional[LayoutError] = None
    compiled_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.status is not Status.FAILED


@dataclass
class BuildReport:
    """Per-document summary of one build."""

    results: List[DocumentResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    def by_status(self, status: Status) -> List[DocumentResult]:
        return [r for r in self.results if r.status is status]

    @property
    def compiled(self) -> List[str]:
        return [r.document for r in self.by_status(Status.COMPILED)]

    @property
    def skipped(self) -> List[str]:
        return [r.document for r in self.by_status(Status.SKIPPED)]

    @property
    def failed(self) -> List[str]:
        return [r.document for r in self.by_status(Status.FAILED)]

    @property
    def generated(self) -> List[GeneratedArtifact]:
        """Files written by this build, for the project manifest."""
        return [g for r in self.results for g in r.generated]

    def groups(self) -> Dict[str, List[Path]]:
        """Generated paths keyed by their logical group name."""
        grouped: Dict[str, List[Path]] = {}
        for g in self.generated:
            grouped.setdefault(g.group, []).append(g.path)
        return grouped

    def summary(self) -> List[str]:
        lines = []
        for r in self.results:
            if r.status is Status.FAILED:
                lines.append(f"FAIL {r.document}: {r.error}")
            elif r.status is Status.SKIPPED:
                lines.append(f"SKIP {r.document}")
            else:
                lines.append(f"PASS {r.document}")
        lines.append(
            f"{len(self.compiled)} compiled, {len(self.skipped)} skipped, "
            f"{len(self.failed)} failed"
        )
        return lines


class Compiler:
    """Compiles the layout documents of one project.

    Args:
        root: Project root holding layoutc.yaml and the document folders.
        config: Overrides the configuration read from `root`.
        registry: Converter registry; a fresh one with the built-in
            converters when omitted.
    """

    def __init__(
        self,
        root: Path,
        config: Optional[ProjectConfig] = None,
        registry: Optional[ConverterRegistry] = None,
    ):
        self.config = config or ProjectConfig.load(Path(root))
        self.paths = self.config.paths(Path(root))
        self.store = DocumentStore(
            self.paths.layouts, self.paths.styles, self.config.partial_prefix
        )
        self.cache = BuildCache(self.paths.cache, self.store)
        self.registry = registry or ConverterRegistry()
        self.selector = LayoutStrategySelector()
        self.extractor = BindingExtractor(
            self.config.event_attributes, strict=self.config.strict_bindings
        )
        self.emitter = CodeEmitter(
            self.paths.views,
            self.paths.data,
            view_group=self.config.view_group,
            data_group=self.config.data_group,
            partial_prefix=self.config.partial_prefix,
        )

    def discover(self) -> List[str]:
        return self.store.discover()

    def compile_document(self, document_id: str, write: bool = True) -> DocumentResult:
        """Compile one document without consulting or updating the cache.

        Args:
            document_id: Top-level document identifier.
            write: Write the artifacts. When False they are only rendered.

        Returns:
            A COMPILED result.

        Raises:
            LayoutError: Any fatal error of this document.
        """
        compiled_at = datetime.now(timezone.utc)
        tracker = DependencyTracker(document_id)
        resolver = Resolver(self.store, tracker, self.config.substitution)

        tree = resolver.resolve(document_id)
        bindings = self.extractor.extract(tree)

        ctx = ConversionContext(registry=self.registry, selector=self.selector)
        fragment = self.registry.convert(tree, ctx)

        artifacts = self.emitter.render(document_id, fragment, bindings)
        generated = self.emitter.write(artifacts) if write else []

        return DocumentResult(
            document=document_id,
            status=Status.COMPILED,
            tree=tree,
            bindings=bindings,
            dependencies=tracker.record(),
            artifacts=artifacts,
            generated=generated,
            warnings=resolver.warnings + bindings.warnings,
            compiled_at=compiled_at,
        )

    def build(
        self, documents: Optional[Iterable[str]] = None, force: bool = False
    ) -> BuildReport:
        """Compile every stale document.

        Args:
            documents: Identifiers to consider. Defaults to all discovered
                top-level documents.
            force: Compile even documents the cache reports as fresh.

        Returns:
            The per-document report. Failed documents are listed there,
            never raised.
        """
        ids = list(documents) if documents is not None else self.discover()
        log.info(f"Building {len(ids)} document(s)")

        if self.config.workers > 1 and len(ids) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
                results = list(pool.map(lambda d: self._build_one(d, force), ids))
        else:
            results = [self._build_one(d, force) for d in ids]

        report = BuildReport(results=results)
        if report.compiled:
            self.cache.mark_build()

        for line in report.summary():
            log.info(line)
        return report

    def _build_one(self, document_id: str, force: bool) -> DocumentResult:
        if not force and not self.cache.needs_rebuild(document_id):
            log.info(f"{document_id}: up to date")
            return DocumentResult(document=document_id, status=Status.SKIPPED)

        try:
            result = self.compile_document(document_id)
        except LayoutError as e:
            log.error(f"{document_id}: {e}")
            return DocumentResult(document=document_id, status=Status.FAILED, error=e)

        self.cache.commit(document_id, result.dependencies, result.compiled_at)
        log.info(f"{document_id}: compiled")
        return result
