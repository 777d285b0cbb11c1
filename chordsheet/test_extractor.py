"""
Tests for the Chord Sheet Extractor pipeline, PDF source and CLI

PDF fixtures are generated with PyMuPDF into pytest's tmp_path.
"""

import asyncio
import sys

import fitz  # PyMuPDF
import pytest

from chordsheet import chordsheet_cli
from chordsheet.core.exceptions import UnplaceableChordError
from chordsheet.core.fragment_source import InMemoryFragmentSource
from chordsheet.core.models import Fragment
from chordsheet.core.pdf_extractor import PDFFragmentSource
from chordsheet.parsers.chord_sheet_extractor import ChordSheetExtractor


def make_fragment(text, x, y, width=None, char_width=6.0):
    if width is None:
        width = len(text) * char_width
    return Fragment(text=text, x=x, y=y, width=width, height=10.0)


def amazing_grace_page():
    return [
        make_fragment("Amazing Grace", 72.0, 760.0),
        make_fragment("[Verse", 72.0, 730.0, width=36.0),
        make_fragment("1]", 116.0, 730.0),
        make_fragment("G", 72.0, 700.0),
        make_fragment("C", 120.0, 700.0),
        make_fragment("Amazing grace how sweet", 72.0, 686.0, width=138.0),
    ]


def go_tell_it_page():
    return [
        make_fragment("G", 72.0, 700.0),
        make_fragment("Go tell it", 72.0, 686.0),
    ]


class RecordingSource(InMemoryFragmentSource):
    """In-memory source that records which pages were requested"""

    def __init__(self, pages):
        super().__init__(pages)
        self.requested = []

    async def get_page_fragments(self, page_index):
        self.requested.append(page_index)
        return await super().get_page_fragments(page_index)


def write_song_pdf(path):
    """One-page PDF with a chord line 14pt above its lyric line"""
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 100), "G", fontsize=12)
    page.insert_text((120, 100), "C", fontsize=12)
    page.insert_text((72, 114), "Amazing grace how sweet", fontsize=12)
    doc.save(str(path))
    doc.close()
    return path


def write_unplaceable_pdf(path):
    """One-page PDF with a chord far to the right of its short lyric"""
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((400, 100), "D", fontsize=12)
    page.insert_text((72, 114), "Go", fontsize=12)
    doc.save(str(path))
    doc.close()
    return path


# In-memory pipeline

def test_extract_single_page():
    extractor = ChordSheetExtractor()
    text = extractor.extract_document_sync(InMemoryFragmentSource([amazing_grace_page()]))

    assert text == "Amazing Grace\n[Verse 1]\nG       C\nAmazing grace how sweet"


def test_pages_are_joined_with_blank_line():
    extractor = ChordSheetExtractor()
    source = InMemoryFragmentSource([amazing_grace_page(), go_tell_it_page()])

    text = extractor.extract_document_sync(source)

    assert text.endswith("Amazing grace how sweet\n\nG\nGo tell it")


def test_empty_pages_are_skipped():
    extractor = ChordSheetExtractor()
    blank = [make_fragment("   ", 72.0, 700.0)]
    source = InMemoryFragmentSource([[], go_tell_it_page(), blank, [], go_tell_it_page()])

    assert extractor.extract_document_sync(source) == "G\nGo tell it\n\nG\nGo tell it"


def test_empty_document():
    assert ChordSheetExtractor().extract_document_sync(InMemoryFragmentSource([])) == ""


def test_unplaceable_chord_aborts_document():
    extractor = ChordSheetExtractor()
    bad_page = [
        make_fragment("D", 400.0, 700.0),
        make_fragment("Go", 72.0, 686.0),
    ]
    source = InMemoryFragmentSource([go_tell_it_page(), bad_page])

    with pytest.raises(UnplaceableChordError) as exc_info:
        extractor.extract_document_sync(source)

    assert exc_info.value.chord == "D"


def test_pages_requested_in_order():
    source = RecordingSource([go_tell_it_page(), [], go_tell_it_page()])
    ChordSheetExtractor().extract_document_sync(source)

    assert source.requested == [0, 1, 2]


def test_out_of_range_page():
    source = InMemoryFragmentSource([go_tell_it_page()])

    with pytest.raises(IndexError):
        asyncio.run(source.get_page_fragments(1))


def test_process_page_without_tokens():
    assert ChordSheetExtractor().process_page([]) == ""


def test_output_is_normalized():
    """Test that trailing spaces never survive into the document"""
    extractor = ChordSheetExtractor()
    page = [
        make_fragment("[Chorus]  ", 72.0, 760.0),
        make_fragment("Sing", 72.0, 700.0),
    ]
    text = extractor.extract_document_sync(InMemoryFragmentSource([page]))

    assert text == "[Chorus]\nSing"


# PDF source

def test_pdf_fragments(tmp_path):
    pdf_path = write_song_pdf(tmp_path / "song.pdf")

    with PDFFragmentSource(str(pdf_path)) as source:
        assert source.page_count == 1
        page_height = source.doc[0].rect.height
        fragments = source.extract_page_fragments(0)

    by_text = {fragment.text: fragment for fragment in fragments}
    assert set(by_text) == {"G", "C", "Amazing grace how sweet"}
    assert by_text["G"].y == pytest.approx(page_height - 100, abs=0.5)
    assert by_text["G"].y > by_text["Amazing grace how sweet"].y
    assert by_text["G"].x == pytest.approx(72, abs=2)
    assert by_text["C"].x > by_text["G"].end_x


def test_extract_pdf(tmp_path):
    pdf_path = write_song_pdf(tmp_path / "song.pdf")

    text = ChordSheetExtractor().extract_pdf(str(pdf_path))
    chord_text, lyric_text = text.split("\n")

    assert lyric_text == "Amazing grace how sweet"
    assert chord_text.startswith("G ")
    assert chord_text.split() == ["G", "C"]
    # "C" sits over "grace", which starts at column 8
    assert 7 <= chord_text.index("C") <= 10


def test_extract_plain_text(tmp_path):
    pdf_path = write_song_pdf(tmp_path / "song.pdf")

    with PDFFragmentSource(str(pdf_path)) as source:
        text = source.extract_plain_text()

    assert "Amazing grace how sweet" in text
    assert not text.endswith("\n")


def test_missing_pdf(tmp_path):
    with pytest.raises(FileNotFoundError):
        PDFFragmentSource(str(tmp_path / "missing.pdf"))


# CLI

def test_cli_single_file(tmp_path):
    pdf_path = write_song_pdf(tmp_path / "song.pdf")
    output = tmp_path / "out.txt"

    assert chordsheet_cli.main(["-i", str(pdf_path), "-o", str(output)]) == 0
    assert output.read_text(encoding="utf-8").splitlines()[1] == "Amazing grace how sweet"


def test_cli_both_formats_into_directory(tmp_path):
    pdf_path = write_song_pdf(tmp_path / "song.pdf")
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    assert chordsheet_cli.main(["-i", str(pdf_path), "-f", "both", "-o", str(out_dir)]) == 0

    assert (out_dir / "song.txt").exists()
    chordpro = (out_dir / "song.chordpro").read_text(encoding="utf-8")
    assert chordpro.startswith("{title: song}")
    assert "[G]Amazing" in chordpro


def test_cli_folder(tmp_path):
    in_dir = tmp_path / "pdfs"
    in_dir.mkdir()
    write_song_pdf(in_dir / "one.pdf")
    write_song_pdf(in_dir / "two.pdf")
    out_dir = tmp_path / "sheets"

    assert chordsheet_cli.main(["-i", str(in_dir), "-o", str(out_dir)]) == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["one.txt", "two.txt"]


def test_cli_missing_input(tmp_path):
    assert chordsheet_cli.main(["-i", str(tmp_path / "missing.pdf")]) == 1


def test_cli_unplaceable_chord_fails_without_fallback(tmp_path):
    pdf_path = write_unplaceable_pdf(tmp_path / "bad.pdf")
    output = tmp_path / "bad.txt"

    assert chordsheet_cli.main(["-i", str(pdf_path), "-o", str(output)]) == 1
    assert not output.exists()


def test_cli_fallback_writes_plain_text(tmp_path):
    pdf_path = write_unplaceable_pdf(tmp_path / "bad.pdf")
    output = tmp_path / "bad.txt"

    assert chordsheet_cli.main(["-i", str(pdf_path), "-o", str(output), "--fallback"]) == 0

    lines = output.read_text(encoding="utf-8").split()
    assert "D" in lines
    assert "Go" in lines


def test_cli_folder_with_failed_file(tmp_path, capsys):
    in_dir = tmp_path / "pdfs"
    in_dir.mkdir()
    write_song_pdf(in_dir / "good.pdf")
    write_unplaceable_pdf(in_dir / "bad.pdf")
    out_dir = tmp_path / "sheets"

    assert chordsheet_cli.main(["-i", str(in_dir), "-o", str(out_dir)]) == 1

    assert sorted(p.name for p in out_dir.iterdir()) == ["good.txt"]
    printed = capsys.readouterr().out
    assert "Processed: 1 files" in printed
    assert "Failed: 1 files" in printed


def test_cli_list_chords(tmp_path, capsys):
    pdf_path = write_song_pdf(tmp_path / "song.pdf")

    assert chordsheet_cli.main(["-i", str(pdf_path), "-o", str(tmp_path / "out.txt"), "--list-chords"]) == 0

    printed = capsys.readouterr().out
    assert "Chords: G, C" in printed
    assert "Root notes: G, C" in printed


def main():
    """Run this module's tests directly"""
    return pytest.main([__file__, "-v"])


if __name__ == "__main__":
    sys.exit(main())
