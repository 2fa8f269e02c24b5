"""Converter registry - maps a node's kind to the converter emitting its code.

Built-in kinds resolve through the NodeKind enum; kinds registered at
runtime go through a name-keyed table that is checked first, so a
registration can also replace a built-in. Each registry is an ordinary
object: compilers never share one unless handed the same instance.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Type, Union

from layoutc.ast.node import LayoutNode
from layoutc.compiler.converters.base import ConversionContext, Converter
from layoutc.compiler.converters.containers import (
    BlurConverter,
    CollectionConverter,
    ContainerConverter,
    GradientViewConverter,
    ScrollConverter,
    TableConverter,
)
from layoutc.compiler.converters.widgets import (
    ButtonConverter,
    IconLabelConverter,
    ImageConverter,
    IndicatorConverter,
    LabelConverter,
    NetworkImageConverter,
    PlaceholderConverter,
    ProgressConverter,
    RadioConverter,
    SegmentConverter,
    SelectBoxConverter,
    SliderConverter,
    SpacerConverter,
    TextFieldConverter,
    TextViewConverter,
    ToggleConverter,
    WebConverter,
)
from layoutc.compiler.spec import Fragment

log = logging.getLogger(__name__)


class NodeKind(str, Enum):
    VIEW = "View"
    SAFE_AREA_VIEW = "SafeAreaView"
    LABEL = "Label"
    TEXT = "Text"
    BUTTON = "Button"
    IMAGE = "Image"
    CIRCLE_IMAGE = "CircleImage"
    NETWORK_IMAGE = "NetworkImage"
    TEXT_FIELD = "TextField"
    TOGGLE = "Toggle"
    SWITCH = "Switch"
    CHECK = "Check"
    SCROLL = "Scroll"
    SCROLL_VIEW = "ScrollView"
    SPACER = "Spacer"
    ICON_LABEL = "IconLabel"
    TEXT_VIEW = "TextView"
    CHECKBOX = "Checkbox"
    RADIO = "Radio"
    SEGMENT = "Segment"
    SLIDER = "Slider"
    PROGRESS = "Progress"
    INDICATOR = "Indicator"
    SELECT_BOX = "SelectBox"
    WEB = "Web"
    GRADIENT_VIEW = "GradientView"
    BLUR = "Blur"
    TABLE = "Table"
    COLLECTION = "Collection"

    @classmethod
    def parse(cls, kind: Optional[str]) -> Optional["NodeKind"]:
        try:
            return cls(kind)
        except ValueError:
            return None


BUILTIN_CONVERTERS: Dict[NodeKind, Type[Converter]] = {
    NodeKind.VIEW: ContainerConverter,
    NodeKind.SAFE_AREA_VIEW: ContainerConverter,
    NodeKind.LABEL: LabelConverter,
    NodeKind.TEXT: LabelConverter,
    NodeKind.BUTTON: ButtonConverter,
    NodeKind.IMAGE: ImageConverter,
    NodeKind.CIRCLE_IMAGE: ImageConverter,
    NodeKind.NETWORK_IMAGE: NetworkImageConverter,
    NodeKind.TEXT_FIELD: TextFieldConverter,
    NodeKind.TOGGLE: ToggleConverter,
    NodeKind.SWITCH: ToggleConverter,
    NodeKind.CHECK: ToggleConverter,
    NodeKind.SCROLL: ScrollConverter,
    NodeKind.SCROLL_VIEW: ScrollConverter,
    NodeKind.SPACER: SpacerConverter,
    NodeKind.ICON_LABEL: IconLabelConverter,
    NodeKind.TEXT_VIEW: TextViewConverter,
    NodeKind.CHECKBOX: ToggleConverter,
    NodeKind.RADIO: RadioConverter,
    NodeKind.SEGMENT: SegmentConverter,
    NodeKind.SLIDER: SliderConverter,
    NodeKind.PROGRESS: ProgressConverter,
    NodeKind.INDICATOR: IndicatorConverter,
    NodeKind.SELECT_BOX: SelectBoxConverter,
    NodeKind.WEB: WebConverter,
    NodeKind.GRADIENT_VIEW: GradientViewConverter,
    NodeKind.BLUR: BlurConverter,
    NodeKind.TABLE: TableConverter,
    NodeKind.COLLECTION: CollectionConverter,
}

ConverterLike = Union[Converter, Type[Converter]]


class ConverterRegistry:
    """Kind -> converter lookup for one compiler."""

    def __init__(self, builtins: bool = True):
        self._builtin: Dict[NodeKind, Converter] = (
            {kind: cls() for kind, cls in BUILTIN_CONVERTERS.items()} if builtins else {}
        )
        self._external: Dict[str, Converter] = {}
        self._placeholder = PlaceholderConverter()

    def register(self, kind: str, converter: ConverterLike) -> None:
        """Register a converter (class or instance) for `kind`."""
        if isinstance(converter, type):
            if not issubclass(converter, Converter):
                raise TypeError(f"{converter} is not a Converter")
            converter = converter()
        elif not isinstance(converter, Converter):
            raise TypeError(f"{converter!r} is not a Converter")

        if kind in self._external:
            log.debug(f"Replacing converter for {kind}")
        self._external[kind] = converter

    def converter(self, kind: str) -> Callable[[Type[Converter]], Type[Converter]]:
        """Decorator form of `register`."""

        def decorator(cls: Type[Converter]) -> Type[Converter]:
            self.register(kind, cls)
            return cls

        return decorator

    def unregister(self, kind: str) -> None:
        self._external.pop(kind, None)

    def is_registered(self, kind: Optional[str]) -> bool:
        return kind in self._external or NodeKind.parse(kind) in self._builtin

    def lookup(self, kind: Optional[str]) -> Converter:
        if kind is not None and kind in self._external:
            return self._external[kind]
        known = NodeKind.parse(kind)
        if known is not None and known in self._builtin:
            return self._builtin[known]
        log.warning(f"No converter for kind {kind!r}, emitting placeholder")
        return self._placeholder

    def convert(self, node: LayoutNode, ctx: Optional[ConversionContext] = None) -> Fragment:
        ctx = ctx or ConversionContext(registry=self)
        return self.lookup(node.kind).convert(node, ctx)


__all__ = [
    "BUILTIN_CONVERTERS",
    "ConversionContext",
    "Converter",
    "ConverterRegistry",
    "NodeKind",
]
