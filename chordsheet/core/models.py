"""
Data models for the chord sheet extractor.
These models represent the value types passed between pipeline stages.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union
from enum import Enum


class LineKind(Enum):
    """Classification of a horizontal line of text"""
    CHORD = "chord"
    LYRIC = "lyric"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Fragment:
    """Positioned text run as delivered by a fragment source.

    Coordinates are normalized so that a larger ``y`` is higher on the page.
    """
    text: str
    x: float
    y: float
    width: float
    height: float = 0.0

    @property
    def end_x(self) -> float:
        return self.x + self.width

    @property
    def average_char_width(self) -> float:
        """Width of one character, assuming evenly spaced glyphs"""
        return self.width / max(1, len(self.text))

    def __str__(self) -> str:
        return f"{type(self).__name__}('{self.text[:50]}', x={self.x:.1f}, y={self.y:.1f})"


@dataclass(frozen=True)
class Token(Fragment):
    """A fragment after adjacency merging; the unit lines are built from"""

    @classmethod
    def from_fragment(cls, fragment: Fragment) -> "Token":
        return cls(
            text=fragment.text,
            x=fragment.x,
            y=fragment.y,
            width=fragment.width,
            height=fragment.height,
        )


@dataclass(frozen=True)
class Line:
    """Tokens sharing (approximately) one baseline, ordered by ascending x"""
    y: float
    tokens: Tuple[Token, ...]
    kind: LineKind = LineKind.UNKNOWN

    @property
    def text(self) -> str:
        """Raw token texts joined by single spaces (for logging)"""
        return " ".join(token.text for token in self.tokens)

    def with_kind(self, kind: LineKind) -> "Line":
        return Line(y=self.y, tokens=self.tokens, kind=kind)


@dataclass(frozen=True)
class ReconstructedCouplet:
    """A chord line realigned over the lyric line beneath it"""
    chord_text: str
    lyric_text: str

    def to_text(self) -> str:
        return f"{self.chord_text}\n{self.lyric_text}"


@dataclass(frozen=True)
class Couplet:
    """A paired chord line and the lyric line directly below it"""
    chord_line: Line
    lyric_line: Line


# One unit of page output, in top-to-bottom order
PageBlock = Union[Couplet, Line]

ClassifiedPage = List[Line]
IndexToXMap = List[float]
