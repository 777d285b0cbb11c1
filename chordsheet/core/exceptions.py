"""
Exceptions raised by the chord sheet extractor.
"""


class ChordSheetError(Exception):
    """Base class for extraction errors"""


class UnplaceableChordError(ChordSheetError):
    """A chord's x-position cannot be mapped onto its lyric line's characters.

    Raised when the chord lies beyond the last mapped lyric character, or when
    writing the chord text would run past the end of the lyric line.
    """

    def __init__(self, chord: str, x: float, reason: str = ""):
        self.chord = chord
        self.x = x
        self.reason = reason
        message = f"Cannot place chord '{chord}' at x={x:.1f}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
