"""
Token Merger for the chord sheet extractor

Text extraction frequently splits one visual run (for example the chord "Am7")
into several fragments with near-zero gaps. This module coalesces such
fragments back into single tokens while keeping distinct, visibly spaced
tokens (for example "Em" and "G7") apart.
"""

import logging
from typing import List, Optional, Sequence

from chordsheet.config import ExtractionConfig
from chordsheet.core.models import Fragment, Token


class TokenMerger:
    """
    Merges horizontally adjacent fragments that share a baseline.

    Fragments are walked in ascending x order. Each baseline keeps one open
    accumulator; a fragment joins it when the horizontal gap lies in
    ``[merge_gap_min, half an average character width of the accumulator)``.
    Fragments share a baseline when their y values are within the line
    grouping tolerance, unless ``merge_baseline_tolerance`` is set, so a
    slightly raised extension still joins its chord root.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.logger = logging.getLogger(__name__)

    def merge(self, fragments: Sequence[Fragment]) -> List[Token]:
        """
        Merge the fragments of one page into tokens.

        Args:
            fragments: Unordered fragments of a single page

        Returns:
            Tokens sorted by ascending x
        """
        tokens: List[Token] = []
        open_tokens: List[Token] = []  # one accumulator per baseline

        for fragment in sorted(fragments, key=lambda f: f.x):
            index = self._find_baseline(open_tokens, fragment.y)
            if index is None:
                open_tokens.append(Token.from_fragment(fragment))
                continue

            current = open_tokens[index]
            if self.should_merge(current, fragment):
                open_tokens[index] = self._merge_pair(current, fragment)
            else:
                tokens.append(current)
                open_tokens[index] = Token.from_fragment(fragment)

        tokens.extend(open_tokens)
        tokens.sort(key=lambda t: t.x)

        self.logger.debug(f"Merged {len(fragments)} fragments into {len(tokens)} tokens")
        return tokens

    def should_merge(self, current: Fragment, following: Fragment) -> bool:
        """Check whether ``following`` continues the run ending with ``current``"""
        gap = following.x - current.end_x
        threshold = current.average_char_width * self.config.merge_threshold_factor
        return self.config.merge_gap_min <= gap < threshold

    def _find_baseline(self, open_tokens: List[Token], y: float) -> Optional[int]:
        for index, token in enumerate(open_tokens):
            if abs(token.y - y) <= self.config.get_merge_baseline_tolerance():
                return index
        return None

    @staticmethod
    def _merge_pair(current: Token, following: Fragment) -> Token:
        return Token(
            text=current.text + following.text,
            x=current.x,
            y=current.y,
            width=following.end_x - current.x,
            height=max(current.height, following.height),
        )
