"""Scanning, render dispatch, offset mapping and truncation."""

from .dispatcher import RenderDispatcher, RenderResult, SegmentRecord
from .layout import LayoutMeasurer, LayoutResult, MonospaceLayout
from .scanner import Segment, scan
from .spans import OffsetMap, OffsetMapBuilder, UnmappedPolicy
from .truncation import TruncationController, TruncationState

__all__ = [
    "RenderDispatcher",
    "RenderResult",
    "SegmentRecord",
    "LayoutMeasurer",
    "LayoutResult",
    "MonospaceLayout",
    "Segment",
    "scan",
    "OffsetMap",
    "OffsetMapBuilder",
    "UnmappedPolicy",
    "TruncationController",
    "TruncationState",
]
