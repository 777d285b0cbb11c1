"""
Page/Document Assembler for the chord sheet extractor

Serializes paired and unpaired lines into text, concatenates pages, and
normalizes whitespace over the finished document.
"""

import re
import logging
from typing import Iterable, List, Optional, Sequence

from chordsheet.config import ExtractionConfig
from chordsheet.core.alignment import AlignmentReconstructor
from chordsheet.core.models import Couplet, Line, PageBlock, Token

TRAILING_SPACE_PATTERN = re.compile(r'[ \t]+(?=\n|$)')
EXCESS_NEWLINES_PATTERN = re.compile(r'\n{3,}')


def normalize_document_text(text: str) -> str:
    """Strip trailing spaces on every line and collapse runs of blank lines.

    Idempotent: normalizing already-normalized text returns it unchanged.
    """
    text = TRAILING_SPACE_PATTERN.sub('', text)
    return EXCESS_NEWLINES_PATTERN.sub('\n\n', text)


class DocumentAssembler:
    """
    Turns page blocks into text.

    Couplets are realigned by the AlignmentReconstructor; single lines are
    rendered with a space wherever the gap between two tokens exceeds
    ``line_space_factor`` average character widths of the left token.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None,
                 reconstructor: Optional[AlignmentReconstructor] = None):
        self.config = config or ExtractionConfig()
        self.reconstructor = reconstructor or AlignmentReconstructor(self.config)
        self.logger = logging.getLogger(__name__)

    def render_line(self, tokens: Sequence[Token]) -> str:
        """Render a line that is not part of a couplet"""
        parts: List[str] = []
        previous: Optional[Token] = None

        for token in tokens:
            if previous is not None:
                gap = token.x - previous.end_x
                if gap > self.config.line_space_factor * previous.average_char_width:
                    parts.append(' ')
            parts.append(token.text)
            previous = token

        return ''.join(parts)

    def render_page(self, blocks: Iterable[PageBlock]) -> str:
        """
        Render one page's blocks in top-to-bottom order.

        Raises:
            UnplaceableChordError: Propagated from couplet realignment
        """
        rendered: List[str] = []

        for block in blocks:
            if isinstance(block, Couplet):
                rendered.append(self.reconstructor.reconstruct_couplet(block).to_text())
            elif isinstance(block, Line):
                rendered.append(self.render_line(block.tokens))

        return '\n'.join(rendered)

    def assemble_document(self, pages: Iterable[str]) -> str:
        """Join rendered pages with a blank line and normalize the result"""
        document = '\n\n'.join(page for page in pages if page)
        return normalize_document_text(document)
