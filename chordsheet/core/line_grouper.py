"""
Line Grouper for the chord sheet extractor

Buckets tokens into horizontal lines by vertical position.
"""

import logging
from typing import Dict, List, Optional, Sequence

from chordsheet.config import ExtractionConfig
from chordsheet.core.models import Line, Token


class LineGrouper:
    """
    Groups tokens into lines using a fixed vertical tolerance.

    A token joins the first existing bucket whose representative y is within
    the tolerance. The representative y is the y of the bucket's first token
    and is never re-centred, so tokens drifting steadily across the tolerance
    window can end up in two lines.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.logger = logging.getLogger(__name__)

    def group(self, tokens: Sequence[Token]) -> List[Line]:
        """
        Group the tokens of one page into lines.

        Args:
            tokens: Tokens of a single page

        Returns:
            Lines sorted by descending y (top of page first), each with its
            tokens sorted by ascending x
        """
        buckets: Dict[float, List[Token]] = {}

        for token in tokens:
            # Find existing line within tolerance
            found_line = None
            for line_y in buckets.keys():
                if abs(token.y - line_y) <= self.config.y_tolerance:
                    found_line = line_y
                    break

            if found_line is not None:
                buckets[found_line].append(token)
            else:
                buckets[token.y] = [token]

        lines = [
            Line(y=line_y, tokens=tuple(sorted(line_tokens, key=lambda t: t.x)))
            for line_y, line_tokens in buckets.items()
        ]
        lines.sort(key=lambda line: line.y, reverse=True)

        self.logger.debug(f"Grouped {len(tokens)} tokens into {len(lines)} lines")
        return lines
