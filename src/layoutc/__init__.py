"""layoutc - compiles declarative JSON layouts into SwiftUI sources."""

from layoutc.compiler import BuildReport, Compiler, ConverterRegistry, Strategy
from layoutc.config import ProjectConfig
from layoutc.exceptions import (
    CyclicIncludeError,
    InvalidAttributeError,
    LayoutError,
    NotFoundError,
    ParseError,
    WriteFailureError,
)
from layoutc.logs import setup_logging

__version__ = "0.1.0"

__all__ = [
    "BuildReport",
    "Compiler",
    "ConverterRegistry",
    "CyclicIncludeError",
    "InvalidAttributeError",
    "LayoutError",
    "NotFoundError",
    "ParseError",
    "ProjectConfig",
    "Strategy",
    "WriteFailureError",
    "setup_logging",
]
