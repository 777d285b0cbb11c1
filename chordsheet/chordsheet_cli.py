#!/usr/bin/env python3
"""
Chord Sheet Extractor CLI

Command-line interface for extracting chord-over-lyric text sheets from PDF
files, optionally exported as ChordPro.
"""

import argparse
import logging
import sys
import os
from pathlib import Path
from typing import Optional

from chordsheet.config import ExtractionConfig
from chordsheet.core.chordpro_exporter import ChordProExporter
from chordsheet.core.chords import get_all_chords_in_song, get_root_note
from chordsheet.core.exceptions import UnplaceableChordError
from chordsheet.core.pdf_extractor import PDFFragmentSource
from chordsheet.parsers.chord_sheet_extractor import ChordSheetExtractor

FORMAT_SUFFIXES = {
    'text': 'txt',
    'chordpro': 'chordpro',
}

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Reduce noise from some modules
    logging.getLogger('fitz').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def build_config(args) -> ExtractionConfig:
    """Extraction config with command-line overrides applied"""
    overrides = {}
    if args.y_tolerance is not None:
        overrides['y_tolerance'] = args.y_tolerance
    if args.pair_distance is not None:
        overrides['pair_max_distance'] = args.pair_distance
    return ExtractionConfig(**overrides)


def determine_output_path(input_path: str, output_path: Optional[str], suffix: str) -> str:
    """Determine the output file path"""
    if output_path:
        if os.path.isdir(output_path):
            # Output is a directory, generate filename
            return os.path.join(output_path, f"{Path(input_path).stem}.{suffix}")
        else:
            return output_path
    else:
        return str(Path(input_path).with_suffix(f'.{suffix}'))


def extract_text(pdf_path: str, extractor: ChordSheetExtractor, fallback: bool) -> str:
    """Positional extraction, falling back to plain text if allowed"""
    try:
        return extractor.extract_pdf(pdf_path)
    except UnplaceableChordError as e:
        if not fallback:
            raise
        logger.warning(f"Positional extraction failed for {pdf_path} ({e}); using plain text")
        with PDFFragmentSource(pdf_path, extractor.config) as source:
            return source.extract_plain_text()


def write_outputs(pdf_path: str, text: str, args, single_file: bool) -> None:
    """Write the text and/or ChordPro versions of one extracted document"""
    formats = ['text', 'chordpro'] if args.format == 'both' else [args.format]
    title = args.title or Path(pdf_path).stem

    for format_type in formats:
        content = text
        if format_type == 'chordpro':
            content = ChordProExporter().export(text, title)

        suffix = FORMAT_SUFFIXES[format_type]
        output = args.output if single_file or (args.output and os.path.isdir(args.output)) else None
        if output and not os.path.isdir(output) and len(formats) > 1:
            # One output file name, several formats: vary the suffix
            output = str(Path(output).with_suffix(f'.{suffix}'))
        output_path = determine_output_path(pdf_path, output, suffix)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content + '\n')
        print(f"✅ {format_type} saved to: {output_path}")


def print_chord_summary(text: str) -> None:
    """Print the chords used in a song and their root notes"""
    chords = get_all_chords_in_song(text)
    if not chords:
        print("🎸 No chords found")
        return

    roots = []
    for chord in chords:
        root = get_root_note(chord)
        if root not in roots:
            roots.append(root)

    print(f"🎸 Chords: {', '.join(chords)}")
    print(f"   Root notes: {', '.join(roots)}")


def extract_single_file(args) -> int:
    """Extract a single PDF file"""
    try:
        extractor = ChordSheetExtractor(build_config(args))

        print(f"🎵 Extracting {args.input}...")
        text = extract_text(args.input, extractor, args.fallback)
        write_outputs(args.input, text, args, single_file=True)
        if args.list_chords:
            print_chord_summary(text)
        return 0

    except Exception as e:
        print(f"❌ Error extracting {args.input}: {str(e)}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def extract_folder(args) -> int:
    """Extract all PDF files in a folder"""
    input_dir = Path(args.input)
    if not input_dir.is_dir():
        print(f"❌ Input path is not a directory: {args.input}")
        return 1

    pdf_files = sorted(input_dir.glob("*.pdf"))
    if not pdf_files:
        print(f"❌ No PDF files found in: {args.input}")
        return 1

    print(f"🎵 Found {len(pdf_files)} PDF files to process")

    if args.output:
        Path(args.output).mkdir(parents=True, exist_ok=True)

    extractor = ChordSheetExtractor(build_config(args))
    processed = 0
    failed = 0

    for pdf_file in pdf_files:
        try:
            print(f"\n🎵 Processing: {pdf_file.name}")
            text = extract_text(str(pdf_file), extractor, args.fallback)
            write_outputs(str(pdf_file), text, args, single_file=False)
            if args.list_chords:
                print_chord_summary(text)
            processed += 1

        except Exception as e:
            print(f"   ❌ Failed: {str(e)}")
            failed += 1
            if args.verbose:
                import traceback
                traceback.print_exc()

    print(f"\n📊 Batch Processing Complete:")
    print(f"   ✅ Processed: {processed} files")
    print(f"   ❌ Failed: {failed} files")
    print(f"   📁 Output: {args.output or 'same as input'}")

    return 0 if failed == 0 else 1


def main(argv=None) -> int:
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Chord Sheet PDF Extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract a single PDF to aligned text
  %(prog)s -i song.pdf

  # Extract to both text and ChordPro in an output folder
  %(prog)s -i song.pdf -f both -o output/

  # Extract a folder, falling back to plain text when chords cannot be placed
  %(prog)s -i pdfs/ -o sheets/ --fallback
        """
    )

    # Input/Output arguments
    parser.add_argument("--input", "-i", required=True,
                        help="Input PDF file or directory")
    parser.add_argument("--output", "-o",
                        help="Output file or directory (optional)")

    # Format selection
    parser.add_argument("--format", "-f", default="text",
                        choices=["text", "chordpro", "both"],
                        help="Output format (default: text)")
    parser.add_argument("--title", "-t",
                        help="Song title for ChordPro output (default: file name)")
    parser.add_argument("--list-chords", action="store_true",
                        help="Print the chords used in each extracted song")

    # Extraction tuning
    parser.add_argument("--fallback", action="store_true",
                        help="Use plain-text extraction when a chord cannot be placed")
    parser.add_argument("--y-tolerance", type=float,
                        help="Vertical tolerance for grouping text into lines (pixels)")
    parser.add_argument("--pair-distance", type=float,
                        help="Maximum distance between a chord line and its lyric line (pixels)")

    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose output")
    parser.add_argument("--batch", "-b", action="store_true",
                        help="Process all PDFs in input directory")

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        print(f"❌ Input path does not exist: {args.input}")
        return 1

    if args.batch or os.path.isdir(args.input):
        return extract_folder(args)
    else:
        return extract_single_file(args)


if __name__ == "__main__":
    sys.exit(main())
