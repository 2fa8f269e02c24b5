from .cache import BuildCache, CacheEntry
from .compiler import BuildReport, Compiler, DocumentResult, Status
from .converters import ConverterRegistry, NodeKind
from .layout import LayoutStrategySelector
from .renderer import CodeEmitter
from .resolver import Resolver
from .spec import Strategy
from .tracker import DependencyRecord, DependencyTracker

__all__ = [
    "BuildCache",
    "BuildReport",
    "CacheEntry",
    "CodeEmitter",
    "Compiler",
    "ConverterRegistry",
    "DependencyRecord",
    "DependencyTracker",
    "DocumentResult",
    "LayoutStrategySelector",
    "NodeKind",
    "Resolver",
    "Status",
    "Strategy",
]
