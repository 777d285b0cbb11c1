"""
Alignment Reconstructor for the chord sheet extractor

This module rebuilds the visual column alignment between a chord line and the
lyric line beneath it using only positional data. The lyric line is rendered
to a string while recording the original x-coordinate of every character; each
chord is then written into a blank line at the first character column whose
x-coordinate reaches the chord's x-coordinate.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from chordsheet.config import ExtractionConfig
from chordsheet.core.exceptions import UnplaceableChordError
from chordsheet.core.models import Couplet, IndexToXMap, Line, ReconstructedCouplet, Token


class AlignmentReconstructor:
    """
    Realigns chord tokens onto the character columns of a lyric line.

    Placement uses a single cursor per chord line that only moves forward.
    Every cursor advance and every buffer write is bounds-checked; a chord
    that falls outside the lyric line raises UnplaceableChordError.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.logger = logging.getLogger(__name__)

    def build_lyric_map(self, tokens: Sequence[Token]) -> Tuple[str, IndexToXMap]:
        """
        Render lyric tokens to a string with a per-character x-coordinate map.

        A space is inserted between two tokens when their gap exceeds
        ``lyric_space_factor`` average character widths of the right-hand
        token; the space is mapped to the midpoint of the gap.

        Args:
            tokens: Lyric tokens sorted by ascending x

        Returns:
            Tuple of (lyric string, index-to-x map of the same length)
        """
        chars: List[str] = []
        index_to_x: IndexToXMap = []
        previous: Optional[Token] = None

        for token in tokens:
            char_width = token.average_char_width

            if previous is not None:
                gap = token.x - previous.end_x
                if gap > self.config.lyric_space_factor * char_width:
                    chars.append(' ')
                    index_to_x.append((previous.end_x + token.x) / 2)

            for char_index, char in enumerate(token.text):
                chars.append(char)
                index_to_x.append(token.x + char_index * char_width)

            previous = token

        return ''.join(chars), index_to_x

    def place_chords(self, chords: Sequence[Tuple[str, float]], index_to_x: IndexToXMap) -> str:
        """
        Write chord texts into a blank line at their mapped character columns.

        Args:
            chords: (text, x) pairs sorted by ascending x
            index_to_x: Character x-coordinates of the lyric line

        Returns:
            The chord line, with trailing spaces removed

        Raises:
            UnplaceableChordError: If a chord lies beyond the lyric line or
                does not fit in the remaining columns
        """
        length = len(index_to_x)
        buffer = [' '] * length
        cursor = 0

        for text, x in chords:
            while cursor < length and index_to_x[cursor] < x:
                cursor += 1

            if cursor >= length:
                raise UnplaceableChordError(text, x, "beyond the end of the lyric line")

            end = cursor + len(text)
            if end > length:
                raise UnplaceableChordError(
                    text, x, f"needs columns {cursor}-{end - 1} but the lyric line has {length}"
                )

            buffer[cursor:end] = list(text)
            self.logger.debug(f"Placed chord '{text}' at x={x:.1f} -> column {cursor}")

        return ''.join(buffer).rstrip(' ')

    def reconstruct(self, chord_line: Line, lyric_line: Line) -> ReconstructedCouplet:
        """
        Realign a chord line over its lyric line.

        Args:
            chord_line: Line classified as CHORD
            lyric_line: Line classified as LYRIC, directly below ``chord_line``

        Returns:
            ReconstructedCouplet with the positioned chord text and lyric text
        """
        lyric_text, index_to_x = self.build_lyric_map(lyric_line.tokens)
        chords = [(token.text, token.x) for token in sorted(chord_line.tokens, key=lambda t: t.x)]
        chord_text = self.place_chords(chords, index_to_x)
        return ReconstructedCouplet(chord_text=chord_text, lyric_text=lyric_text)

    def reconstruct_couplet(self, couplet: Couplet) -> ReconstructedCouplet:
        return self.reconstruct(couplet.chord_line, couplet.lyric_line)
