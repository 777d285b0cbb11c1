"""
Pair Detector for the chord sheet extractor

Finds chord lines sitting directly above a lyric line so the two can be
realigned together.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from chordsheet.config import ExtractionConfig
from chordsheet.core.models import Couplet, Line, LineKind, PageBlock


@dataclass
class PairingResult:
    """Couplet index pairs, the lines left unpaired, and the page order of both"""
    pairs: List[Tuple[int, int]] = field(default_factory=list)
    singles: List[int] = field(default_factory=list)
    blocks: List[PageBlock] = field(default_factory=list)


class PairDetector:
    """
    Pairs each chord line with the lyric line that immediately follows it.

    Lines are scanned greedily top to bottom; a line consumed by a pair is not
    reconsidered.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.logger = logging.getLogger(__name__)

    def is_couplet(self, upper: Line, lower: Line) -> bool:
        """Check if ``upper`` is a chord line close enough above lyric line ``lower``"""
        return (upper.kind == LineKind.CHORD and
                lower.kind == LineKind.LYRIC and
                abs(upper.y - lower.y) < self.config.pair_max_distance)

    def detect(self, lines: Sequence[Line]) -> PairingResult:
        """
        Detect couplets in a classified page.

        Args:
            lines: Classified lines sorted by descending y

        Returns:
            PairingResult with pairs, singles and ordered page blocks
        """
        result = PairingResult()

        i = 0
        while i < len(lines):
            if i + 1 < len(lines) and self.is_couplet(lines[i], lines[i + 1]):
                result.pairs.append((i, i + 1))
                result.blocks.append(Couplet(chord_line=lines[i], lyric_line=lines[i + 1]))
                i += 2
            else:
                result.singles.append(i)
                result.blocks.append(lines[i])
                i += 1

        self.logger.debug(f"Found {len(result.pairs)} couplets and {len(result.singles)} single lines")
        return result
