"""
Document-level extractors for the Chord Sheet Extractor
"""

from .chord_sheet_extractor import ChordSheetExtractor

__all__ = ['ChordSheetExtractor']
