"""
Chord Sheet Extractor

Runs the positional extraction pipeline over a whole document: token merging,
line grouping, line classification, couplet pairing, chord realignment and
document assembly. Pages are processed strictly in order, each one awaited
from the fragment source before the next is requested.
"""

import asyncio
import logging
from typing import Optional, Sequence

from chordsheet.config import ExtractionConfig
from chordsheet.core.alignment import AlignmentReconstructor
from chordsheet.core.assembler import DocumentAssembler
from chordsheet.core.fragment_source import FragmentSource
from chordsheet.core.line_classifier import LineClassifier
from chordsheet.core.line_grouper import LineGrouper
from chordsheet.core.models import ClassifiedPage, Fragment, Line
from chordsheet.core.pair_detector import PairDetector
from chordsheet.core.token_merger import TokenMerger
from chordsheet.core.pdf_extractor import PDFFragmentSource


class ChordSheetExtractor:
    """
    Turns positioned text fragments into a chord-over-lyric text sheet.

    An UnplaceableChordError from any page aborts the whole document; no
    partial text is returned.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.logger = logging.getLogger(__name__)

        # Initialize components
        self.token_merger = TokenMerger(self.config)
        self.line_grouper = LineGrouper(self.config)
        self.line_classifier = LineClassifier(self.config)
        self.pair_detector = PairDetector(self.config)
        self.assembler = DocumentAssembler(self.config, AlignmentReconstructor(self.config))

    def classify_lines(self, lines: Sequence[Line]) -> ClassifiedPage:
        """Label every line with its LineKind"""
        return [line.with_kind(self.line_classifier.classify(line.tokens)) for line in lines]

    def process_page(self, fragments: Sequence[Fragment]) -> str:
        """
        Extract the text of one page.

        Args:
            fragments: The page's fragments

        Returns:
            The page text, or an empty string for a page without text
        """
        tokens = self.token_merger.merge(fragments)
        if not tokens:
            return ""

        lines = self.classify_lines(self.line_grouper.group(tokens))
        pairing = self.pair_detector.detect(lines)
        return self.assembler.render_page(pairing.blocks)

    async def extract_document(self, source: FragmentSource) -> str:
        """
        Extract the chord sheet text of a whole document.

        Args:
            source: Fragment source for the document

        Returns:
            Normalized multi-line text

        Raises:
            UnplaceableChordError: If a chord cannot be placed over its lyric
        """
        self.logger.info(f"Extracting chord sheet from {source.get_description()}")

        pages = []
        for page_index in range(source.page_count):
            fragments = await source.get_page_fragments(page_index)
            if not fragments:
                self.logger.debug(f"Page {page_index + 1}: no fragments, skipped")
                continue

            page_text = self.process_page(fragments)
            if not page_text.strip():
                self.logger.debug(f"Page {page_index + 1}: no tokens, skipped")
                continue

            pages.append(page_text)

        document = self.assembler.assemble_document(pages)
        self.logger.info(f"Extracted {len(pages)} page(s), {len(document)} characters")
        return document

    def extract_document_sync(self, source: FragmentSource) -> str:
        """Blocking wrapper around extract_document for callers outside an event loop"""
        return asyncio.run(self.extract_document(source))

    async def extract_pdf_async(self, pdf_path: str) -> str:
        with PDFFragmentSource(pdf_path, self.config) as source:
            return await self.extract_document(source)

    def extract_pdf(self, pdf_path: str) -> str:
        """
        Extract the chord sheet text of a PDF file.

        Raises:
            FileNotFoundError: If the PDF does not exist
            UnplaceableChordError: If a chord cannot be placed over its lyric
        """
        return asyncio.run(self.extract_pdf_async(pdf_path))
