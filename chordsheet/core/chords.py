"""
Chord text utilities

Helpers for working with chord symbols in already-assembled chord sheet text:
finding the chords on a line, collecting every chord in a song, reducing a
chord to its root note, and splitting a song into sections.
"""

import re
from typing import List, Optional

# Root note with optional accidental
ROOT_GRAMMAR = r'[A-G](?:##|#|bb|b)?'

# Root, quality, extension, suspension, alteration and slash bass
CHORD_GRAMMAR = (
    ROOT_GRAMMAR +
    r'(?:maj|min|m7b5|m|aug|dim|sus|add|-|\+|°|ø)?'
    r'[0-9]*'
    r'(?:sus[0-9])?'
    r'(?:\(?[b#][0-9]+\)?)?'
    r'(?:/' + ROOT_GRAMMAR + r')?'
)

CHORD_SEARCH_PATTERN = re.compile(r'\b' + CHORD_GRAMMAR + r'\b')

# Chord vocabulary words that contain letters outside A-G
CHORD_WORDS_PATTERN = re.compile(r'min|maj|aug|dim|sus|add|flat', re.IGNORECASE)
NON_CHORD_LETTER_PATTERN = re.compile(r'[h-zH-Z]')

FLAT_TO_SHARP = {
    'Db': 'C#',
    'Eb': 'D#',
    'Gb': 'F#',
    'Ab': 'G#',
    'Bb': 'A#',
}


def has_non_chord_letters(text: str) -> bool:
    """Check for letters that cannot appear in chord notation"""
    return bool(NON_CHORD_LETTER_PATTERN.search(CHORD_WORDS_PATTERN.sub('', text)))


def parse_chords_in_line(line: str) -> List[str]:
    """
    Find the chords on a line of chord sheet text.

    A line that, once its chord symbols are removed, still contains letters
    that cannot belong to chord notation is treated as lyrics and yields no
    chords.

    Returns:
        Unique chords in order of first appearance
    """
    if not line or has_non_chord_letters(CHORD_SEARCH_PATTERN.sub('', line)):
        return []

    chords: List[str] = []
    for match in CHORD_SEARCH_PATTERN.finditer(line):
        chord = match.group()
        if chord and chord not in chords:
            chords.append(chord)
    return chords


def get_all_chords_in_song(content: str) -> List[str]:
    """Unique chords over every line of a song, in order of first appearance"""
    all_chords: List[str] = []
    for line in content.split('\n'):
        for chord in parse_chords_in_line(line):
            if chord not in all_chords:
                all_chords.append(chord)
    return all_chords


def get_root_note(chord: str) -> Optional[str]:
    """Root note of a chord, with flats normalized to sharps"""
    if not chord:
        return None

    root = chord[0].upper()
    if len(chord) > 1 and chord[1] in ('#', 'b'):
        root += chord[1]

    return FLAT_TO_SHARP.get(root, root)


def split_sections(content: str) -> List[str]:
    """Split song text into blank-line separated sections"""
    sections = re.split(r'\n\s*\n', content)
    return [section.strip() for section in sections if section.strip()]
