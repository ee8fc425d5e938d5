"""Exceptions raised by the jigsaw engine.

Every error here is fatal for the run: it is raised where detected and left
to propagate to the CLI or the web endpoint, which report it and stop.
"""

from __future__ import annotations

from typing import Optional


class JigsawError(Exception):
    """Base class for every engine failure."""


class TileParseError(JigsawError, ValueError):
    def __init__(self, message: str, *, line: Optional[int] = None, block: Optional[int] = None):
        self.line = line
        self.block = block
        where = []
        if block is not None:
            where.append(f"block {block}")
        if line is not None:
            where.append(f"line {line}")
        if where:
            message = f"{message} ({', '.join(where)})"
        super().__init__(message)


class SearchExhausted(JigsawError):
    """No arrangement of the tiles satisfies every edge constraint."""


class SearchAborted(JigsawError):
    """The search hit a configured limit before reaching a verdict."""


class PlacementInvariantError(JigsawError):
    """A finished placement has a missing/duplicate id or a mismatched edge."""


class MotifNotFound(JigsawError):
    """No orientation of the composite image contains the motif."""


__all__ = [
    "JigsawError",
    "TileParseError",
    "SearchExhausted",
    "SearchAborted",
    "PlacementInvariantError",
    "MotifNotFound",
]
