from .node import LayoutNode
from .parser import DocumentStore

__all__ = ["LayoutNode", "DocumentStore"]
