"""
Line Classifier for the chord sheet extractor

This module labels a line of tokens as a chord line, a lyric line, or an
unknown line (printed verbatim) using token-level chord pattern matching and
ratio heuristics. Classification is a pure function of the token texts.
"""

import re
import logging
from typing import List, Optional, Sequence

from chordsheet.config import ExtractionConfig
from chordsheet.core.chords import CHORD_GRAMMAR, has_non_chord_letters
from chordsheet.core.models import LineKind, Token

CHORD_PATTERN = re.compile(CHORD_GRAMMAR)
SECTION_MARKER_PATTERN = re.compile(r'^\[.*\]$')


def line_terms(tokens: Sequence[Token]) -> List[str]:
    """Trimmed, non-empty token texts"""
    terms = []
    for token in tokens:
        term = token.text.strip()
        if term:
            terms.append(term)
    return terms


def is_chord_like(term: str, max_length: int = 15) -> bool:
    """Check if a single term is a chord symbol (e.g. "Am7", "F#m7b5", "D/F#")"""
    return len(term) <= max_length and CHORD_PATTERN.fullmatch(term) is not None


def is_section_marker(terms: Sequence[str]) -> bool:
    """Check for a bracketed marker such as "[Intro]" or "[Chorus]" """
    return bool(terms) and SECTION_MARKER_PATTERN.match(''.join(terms)) is not None


class LineClassifier:
    """
    Classifies lines as CHORD, LYRIC or UNKNOWN.

    Rules, first match wins:
      1. no terms -> UNKNOWN
      2. chord ratio above ``chord_ratio_threshold`` -> CHORD
      3. bracketed section marker -> UNKNOWN
      4. any term with letters impossible in chord notation -> LYRIC
      5. chord ratio above ``sparse_chord_ratio_threshold`` -> CHORD
      6. otherwise LYRIC
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.logger = logging.getLogger(__name__)

    def classify(self, tokens: Sequence[Token]) -> LineKind:
        """
        Classify one line's tokens.

        Args:
            tokens: Tokens of a single line

        Returns:
            The line's LineKind
        """
        return self.classify_terms(line_terms(tokens))

    def classify_terms(self, terms: Sequence[str]) -> LineKind:
        """Classify a line from its trimmed, non-empty terms"""
        if not terms:
            return LineKind.UNKNOWN

        chord_count = sum(1 for term in terms if is_chord_like(term, self.config.max_chord_length))
        chord_ratio = chord_count / len(terms)

        if chord_ratio > self.config.chord_ratio_threshold:
            kind = LineKind.CHORD
        elif is_section_marker(terms):
            kind = LineKind.UNKNOWN
        elif any(has_non_chord_letters(term) for term in terms):
            kind = LineKind.LYRIC
        elif chord_ratio > self.config.sparse_chord_ratio_threshold:
            # Sparse chord line over implicit rests
            kind = LineKind.CHORD
        else:
            kind = LineKind.LYRIC

        self.logger.debug(f"Classified {list(terms)!r} as {kind.value} (chord ratio {chord_ratio:.2f})")
        return kind


def classify_line(tokens: Sequence[Token], config: Optional[ExtractionConfig] = None) -> LineKind:
    """Classify one line's tokens with the given (or default) configuration"""
    return LineClassifier(config).classify(tokens)
