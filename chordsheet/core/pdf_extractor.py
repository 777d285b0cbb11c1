"""
PDF Extractor for the chord sheet extractor

This module reads positioned text fragments from PDF files using PyMuPDF.
Spans are split into fragments at long runs of whitespace or wide gaps,
using per-character boxes, so chords spaced out along one span become
separate fragments while the words of a lyric stay together.
"""

import asyncio
import fitz  # PyMuPDF
import logging
from typing import Any, Dict, List, Optional
from pathlib import Path

from chordsheet.config import ExtractionConfig
from chordsheet.core.assembler import normalize_document_text
from chordsheet.core.fragment_source import FragmentSource
from chordsheet.core.models import Fragment


class PDFFragmentSource(FragmentSource):
    """
    Fragment source backed by a PDF file.

    PyMuPDF reports coordinates from the top-left corner with y growing
    downward; fragments are converted so that a larger y is higher on the
    page (``page_height - baseline``).
    """

    def __init__(self, pdf_path: str, config: Optional[ExtractionConfig] = None):
        self.pdf_path = str(pdf_path)
        self.config = config or ExtractionConfig()
        self.logger = logging.getLogger(__name__)

        if not Path(self.pdf_path).exists():
            raise FileNotFoundError(f"PDF file not found: {self.pdf_path}")

        self.doc = fitz.open(self.pdf_path)
        self.logger.debug(f"Opened PDF with {len(self.doc)} pages: {self.pdf_path}")

    @property
    def page_count(self) -> int:
        return len(self.doc)

    def close(self) -> None:
        self.doc.close()

    def __enter__(self) -> "PDFFragmentSource":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    async def get_page_fragments(self, page_index: int) -> List[Fragment]:
        """Read one page's fragments in a worker thread"""
        return await asyncio.to_thread(self.extract_page_fragments, page_index)

    def extract_page_fragments(self, page_index: int) -> List[Fragment]:
        """
        Extract the text fragments of a single page.

        Args:
            page_index: Page number (0-based)

        Returns:
            List of Fragment objects for this page
        """
        page = self.doc[page_index]
        page_height = page.rect.height
        fragments = []

        text_dict = page.get_text("rawdict")

        for block in text_dict["blocks"]:
            if "lines" not in block:
                continue  # Skip image blocks

            for line in block["lines"]:
                for span in line["spans"]:
                    fragments.extend(self._split_span(span, page_height))

        self.logger.debug(f"Page {page_index + 1}: extracted {len(fragments)} fragments")
        return fragments

    def _split_span(self, span: Dict[str, Any], page_height: float) -> List[Fragment]:
        """Split a rawdict span into fragments at long whitespace runs and wide gaps"""
        bbox = span.get("bbox", (0, 0, 0, 0))
        height = float(bbox[3] - bbox[1])

        fragments = []
        current: List[Dict[str, Any]] = []
        pending_space: List[Dict[str, Any]] = []

        for char in span.get("chars", []):
            if char["c"].isspace():
                pending_space.append(char)
                continue

            if current:
                if (len(pending_space) >= self.config.whitespace_split_run or
                        self._is_wide_gap(current, char)):
                    fragments.append(self._create_fragment(current, page_height, height))
                    current = []
                else:
                    current.extend(pending_space)
            pending_space = []

            current.append(char)

        if current:
            fragments.append(self._create_fragment(current, page_height, height))

        return fragments

    def _is_wide_gap(self, current: List[Dict[str, Any]], char: Dict[str, Any]) -> bool:
        """Check if ``char`` starts well past the end of the run in ``current``.

        MuPDF may report a single synthesized space for a large horizontal
        jump, so the space count alone does not separate spaced-out chords.
        """
        run_start = current[0]["bbox"][0]
        run_end = current[-1]["bbox"][2]
        char_width = (run_end - run_start) / len(current)
        return char["bbox"][0] - run_end > self.config.split_gap_factor * char_width

    @staticmethod
    def _create_fragment(chars: List[Dict[str, Any]], page_height: float, height: float) -> Fragment:
        x0 = chars[0]["bbox"][0]
        x1 = chars[-1]["bbox"][2]
        baseline = chars[0]["origin"][1]

        return Fragment(
            text=''.join(char["c"] for char in chars),
            x=float(x0),
            y=float(page_height - baseline),
            width=float(x1 - x0),
            height=height,
        )

    def extract_plain_text(self) -> str:
        """
        Layout-agnostic text of the whole document.

        Used as a fallback when positional extraction fails; chord alignment
        is whatever the PDF's own text order gives.
        """
        self.logger.info(f"Extracting plain text from PDF: {self.pdf_path}")
        pages = [page.get_text("text").strip('\n') for page in self.doc]
        return normalize_document_text('\n\n'.join(page for page in pages if page.strip()))
