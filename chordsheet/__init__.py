"""
Chord Sheet Extractor

Recovers chord-over-lyric text layout from positioned text fragments
extracted from fixed-layout documents such as PDF songbooks.
"""

__version__ = "1.0.0"
__author__ = "Chord Sheet Extractor Team"
