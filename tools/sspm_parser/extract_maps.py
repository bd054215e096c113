#!/usr/bin/env python3
"""
SSPM Map Extractor

Decodes SSPM rhythm game maps and exports them to JSON.

Usage:
    python -m sspm_parser.extract_maps <input.sspm> [output.json]
    python -m sspm_parser.extract_maps --batch <input_dir> <output_dir>
    python -m sspm_parser.extract_maps --info <input.sspm> [--star-rating 4.2]

The output JSON holds the header, metadata, strings, custom fields,
marker definitions and markers sorted by position. Audio and cover
data are reported by length only.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from .difficulty import calculate_performance_points, extract_notes
from .sspm_parser import parse_file

logger = logging.getLogger(__name__)

# Accuracy values reported alongside a full combo
REPORTED_ACCURACIES = (1.0, 0.99496)


def print_info(input_path: str, star_rating: Optional[float] = None):
    """Print a summary of one map."""
    parsed = parse_file(input_path)
    meta = parsed.metadata
    strings = parsed.strings

    print(f"File: {Path(input_path).name}")
    print(f"  Signature: {parsed.header.signature!r} v{parsed.header.version}")
    print(f"  Map: {strings.map_name} ({strings.map_id})")
    print(f"  Song: {strings.song_name}")
    print(f"  Mappers: {', '.join(strings.mappers)}")
    print(f"  Difficulty: {meta.difficulty}  Rating: {meta.rating}")
    print(f"  Notes: {meta.note_count}  Markers: {meta.marker_count}")
    print(f"  Audio: {len(parsed.audio) if parsed.audio else 0} bytes")
    print(f"  Cover: {len(parsed.cover) if parsed.cover else 0} bytes")
    print(f"  Custom fields: {len(parsed.custom_data.fields)}")
    for definition in parsed.marker_definitions:
        tags = ", ".join(f"0x{tag:02x}" for tag in definition.values)
        print(f"    - {definition.id}: [{tags}]")
    print(f"  Decoded notes: {len(extract_notes(parsed))}")

    if star_rating is not None:
        for accuracy in REPORTED_ACCURACIES:
            pp = calculate_performance_points(star_rating, accuracy)
            print(f"  PP @ {accuracy * 100:.3f}%: {pp}")


def extract_single(input_path: str, output_path: Optional[str] = None) -> bool:
    """Extract a single .sspm file to JSON."""
    try:
        parsed = parse_file(input_path)

        if output_path is None:
            output_path = str(Path(input_path).with_suffix('.json'))

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(parsed.to_dict(), f, indent=2, ensure_ascii=False)

        print(f"Extracted {len(parsed.markers)} markers to {output_path}")
        return True

    except (OSError, ValueError) as e:
        logger.debug("Extraction failed", exc_info=True)
        print(f"Error extracting {input_path}: {e}", file=sys.stderr)
        return False


def extract_batch(input_dir: str, output_dir: str) -> Tuple[int, int]:
    """Extract all .sspm files from a directory."""
    input_path = Path(input_dir)
    output_path = Path(output_dir)

    if not input_path.is_dir():
        print(f"Input directory not found: {input_dir}", file=sys.stderr)
        return 0, 0

    output_path.mkdir(parents=True, exist_ok=True)

    success = 0
    failed = 0

    for sspm_file in sorted(input_path.glob('*.sspm')):
        json_file = output_path / (sspm_file.stem + '.json')
        if extract_single(str(sspm_file), str(json_file)):
            success += 1
        else:
            failed += 1

    return success, failed


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Decode SSPM rhythm game maps to JSON',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s song.sspm                      # Extract to song.json
  %(prog)s song.sspm out.json             # Extract to specific file
  %(prog)s --batch ./maps ./json          # Extract all .sspm files
  %(prog)s --info song.sspm               # Show map info only
  %(prog)s --info song.sspm --star-rating 4.2
        """
    )

    parser.add_argument('input', help='Input .sspm file or directory (with --batch)')
    parser.add_argument('output', nargs='?', help='Output .json file or directory')
    parser.add_argument('--batch', action='store_true', help='Process all .sspm files in directory')
    parser.add_argument('--info', action='store_true', help='Show map info without extracting')
    parser.add_argument('--star-rating', type=float, help='Star rating used for PP output with --info')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    if args.info:
        try:
            print_info(args.input, args.star_rating)
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    if args.batch:
        if not args.output:
            print("Output directory required with --batch", file=sys.stderr)
            return 1

        success, failed = extract_batch(args.input, args.output)
        print(f"\nBatch complete: {success} succeeded, {failed} failed")
        return 0 if failed == 0 else 1

    return 0 if extract_single(args.input, args.output) else 1


if __name__ == '__main__':
    sys.exit(main())
