"""
ChordPro Exporter for the chord sheet extractor

This module converts assembled chord-over-lyric text into ChordPro format,
moving each chord from the line above into the lyric at its column. Lines are
recognized with the same LineClassifier the extraction pipeline uses, so every
chord line the pipeline paired with a lyric is folded into it.
"""

import re
import logging
from typing import List, Optional, Tuple

from chordsheet.config import ExtractionConfig
from chordsheet.core.line_classifier import LineClassifier, is_chord_like
from chordsheet.core.models import LineKind

WORD_PATTERN = re.compile(r'\S+')


def find_chord_columns(line: str, classifier: Optional[LineClassifier] = None) -> List[Tuple[int, str]]:
    """
    (column, chord) for every chord on a chord line, or [] for other lines.

    Bar marks and annotations such as "|" or "x2" on a chord line are not
    chords and are left out.
    """
    classifier = classifier or LineClassifier()
    words = [(match.start(), match.group()) for match in WORD_PATTERN.finditer(line)]

    if classifier.classify_terms([word for _, word in words]) != LineKind.CHORD:
        return []

    max_length = classifier.config.max_chord_length
    return [(column, word) for column, word in words if is_chord_like(word, max_length)]


def merge_chords_into_lyric(chords: List[Tuple[int, str]], lyric: str) -> str:
    """Insert ``[chord]`` markers into a lyric at the given columns"""
    result = ""
    lyric_pos = 0

    for position, chord in sorted(chords):
        # Chords past the end of the lyric go after it
        target = min(position, len(lyric))
        if target > lyric_pos:
            result += lyric[lyric_pos:target]
            lyric_pos = target
        result += f"[{chord}]"

    if lyric_pos < len(lyric):
        result += lyric[lyric_pos:]

    return result


class ChordProExporter:
    """
    Exports chord sheet text to ChordPro.

    A chord line directly followed by a lyric line is folded into it; chord
    lines without a lyric become a line of bracketed chords; all other lines,
    including blank ones and section markers, are kept as they are.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.classifier = LineClassifier(self.config)
        self.logger = logging.getLogger(__name__)

    def export(self, text: str, title: Optional[str] = None) -> str:
        """
        Convert chord sheet text to ChordPro.

        Args:
            text: Assembled chord-over-lyric text
            title: Optional song title for the ``{title: ...}`` directive

        Returns:
            ChordPro formatted string
        """
        source_lines = text.split('\n')
        lines: List[str] = []

        if title:
            lines.append(f"{{title: {title}}}")
            lines.append("")

        i = 0
        merged = 0
        while i < len(source_lines):
            line = source_lines[i]
            chords = find_chord_columns(line, self.classifier)

            if not chords:
                lines.append(line)
                i += 1
                continue

            next_line = source_lines[i + 1] if i + 1 < len(source_lines) else ""
            if self._is_lyric(next_line):
                lines.append(merge_chords_into_lyric(chords, next_line))
                merged += 1
                i += 2
            else:
                lines.append(" ".join(f"[{chord}]" for _, chord in chords))
                i += 1

        self.logger.info(f"ChordPro export complete: {len(lines)} lines, {merged} chord lines merged")
        return "\n".join(lines)

    def _is_lyric(self, line: str) -> bool:
        return self.classifier.classify_terms(WORD_PATTERN.findall(line)) == LineKind.LYRIC
