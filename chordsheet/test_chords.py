"""
Tests for chord text utilities and ChordPro export
"""

import sys

import pytest

from chordsheet.core.chordpro_exporter import (
    ChordProExporter,
    find_chord_columns,
    merge_chords_into_lyric,
)
from chordsheet.core.chords import (
    get_all_chords_in_song,
    get_root_note,
    has_non_chord_letters,
    parse_chords_in_line,
    split_sections,
)


def test_parse_chords_in_line():
    assert parse_chords_in_line("G  C  Am7") == ["G", "C", "Am7"]
    assert parse_chords_in_line("Am    Em   C/G") == ["Am", "Em", "C/G"]


def test_parse_chords_keeps_first_appearance_only():
    assert parse_chords_in_line("G   G   D   G") == ["G", "D"]


def test_parse_chords_rejects_lyrics():
    assert parse_chords_in_line("Amazing grace how sweet") == []
    assert parse_chords_in_line("Dm is great") == []
    assert parse_chords_in_line("") == []


def test_chord_vocabulary_is_not_lyric_text():
    assert not has_non_chord_letters("Cmaj7 Dsus4 Fdim")
    assert has_non_chord_letters("hello")


def test_get_all_chords_in_song():
    song = "G       C\nAmazing grace how sweet\n\nG   D\nthe sound\n[Chorus]\nEm  C"

    assert get_all_chords_in_song(song) == ["G", "C", "D", "Em"]


def test_get_root_note():
    assert get_root_note("Am") == "A"
    assert get_root_note("F#m") == "F#"
    assert get_root_note("Bbm7") == "A#"
    assert get_root_note("Db") == "C#"
    assert get_root_note("c") == "C"
    assert get_root_note("") is None


def test_split_sections():
    content = "\nVerse one\nline two\n\n  \n\nChorus\n\n"

    assert split_sections(content) == ["Verse one\nline two", "Chorus"]


# ChordPro export

def test_find_chord_columns():
    assert find_chord_columns("G       C") == [(0, "G"), (8, "C")]
    assert find_chord_columns("Amazing grace") == []
    assert find_chord_columns("   ") == []


def test_merge_chords_into_lyric():
    lyric = "Amazing grace how sweet"

    assert merge_chords_into_lyric([(0, "G"), (8, "C")], lyric) == "[G]Amazing [C]grace how sweet"


def test_chord_past_lyric_end_is_appended():
    assert merge_chords_into_lyric([(0, "G"), (3, "D")], "Go") == "[G]Go[D]"


def test_export_folds_chords_into_lyrics():
    text = "[Verse 1]\nG       C\nAmazing grace how sweet"

    assert ChordProExporter().export(text) == "[Verse 1]\n[G]Amazing [C]grace how sweet"


def test_export_chord_line_without_lyric():
    text = "D   G\n\nGo tell it"

    assert ChordProExporter().export(text) == "[D] [G]\n\nGo tell it"


def test_export_chord_line_before_section_marker():
    text = "Em  C\n[Chorus]"

    assert ChordProExporter().export(text) == "[Em] [C]\n[Chorus]"


def test_export_folds_sparse_chord_line():
    """Test that bar marks on a chord line are dropped, not turned into chords"""
    text = "G   |    |    D\nGo tell it on the mountain"

    assert ChordProExporter().export(text) == "[G]Go tell it on [D]the mountain"


def test_export_folds_annotated_chord_line():
    text = "G   C   D   Em  x2\nOver the hills and everywhere"

    assert ChordProExporter().export(text) == "[G]Over[C] the[D] hil[Em]ls and everywhere"


def test_chord_columns_skip_non_chord_terms():
    assert find_chord_columns("G   |    |    D") == [(0, "G"), (14, "D")]
    assert find_chord_columns("Dm is great") == []


def test_export_with_title():
    exported = ChordProExporter().export("G\nGo tell it", title="Go Tell It")

    assert exported.split("\n") == ["{title: Go Tell It}", "", "[G]Go tell it"]


def main():
    """Run this module's tests directly"""
    return pytest.main([__file__, "-v"])


if __name__ == "__main__":
    sys.exit(main())
