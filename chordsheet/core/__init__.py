"""
Core components for the Chord Sheet Extractor
"""

from .models import Fragment, Token, Line, LineKind, Couplet, ReconstructedCouplet, PageBlock
from .exceptions import ChordSheetError, UnplaceableChordError
from .fragment_source import FragmentSource, InMemoryFragmentSource
from .token_merger import TokenMerger
from .line_grouper import LineGrouper
from .line_classifier import LineClassifier, classify_line, is_chord_like
from .pair_detector import PairDetector, PairingResult
from .alignment import AlignmentReconstructor
from .assembler import DocumentAssembler, normalize_document_text
from .chordpro_exporter import ChordProExporter
from .chords import parse_chords_in_line, get_all_chords_in_song, get_root_note, split_sections
from .pdf_extractor import PDFFragmentSource

__all__ = [
    'Fragment', 'Token', 'Line', 'LineKind', 'Couplet', 'ReconstructedCouplet', 'PageBlock',
    'ChordSheetError', 'UnplaceableChordError',
    'FragmentSource', 'InMemoryFragmentSource', 'PDFFragmentSource',
    'TokenMerger', 'LineGrouper', 'LineClassifier', 'classify_line', 'is_chord_like',
    'PairDetector', 'PairingResult', 'AlignmentReconstructor',
    'DocumentAssembler', 'normalize_document_text', 'ChordProExporter',
    'parse_chords_in_line', 'get_all_chords_in_song', 'get_root_note', 'split_sections'
]
