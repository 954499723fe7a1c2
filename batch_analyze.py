#!/usr/bin/env python3
"""Batch classify images and generate HTML vibe reports."""

import argparse
import logging
import sys
import time
from pathlib import Path

from search_terms import search_terms_for
from vibe import analyze_image, render_html


def find_images(directory: Path) -> list[Path]:
    """Find all image files in directory."""
    extensions = {'.jpg', '.jpeg', '.png', '.webp'}
    images = set()
    for ext in extensions:
        images.update(directory.glob(f'*{ext}'))
        images.update(directory.glob(f'*{ext.upper()}'))
    return sorted(images)


def main():
    parser = argparse.ArgumentParser(
        description='Batch classify images and generate HTML vibe reports.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Directory containing images to analyze'
    )
    parser.add_argument(
        '--output', '-o',
        required=True,
        help='Directory for HTML output files'
    )
    parser.add_argument(
        '--colors', '-n',
        type=int,
        default=5,
        help='Number of palette colors to extract per image (default: 5)'
    )
    parser.add_argument(
        '--no-downscale',
        action='store_true',
        help='Process at full resolution instead of downscaling to 256px'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log palette stats and scores'
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    input_dir = Path(args.input)
    output_dir = Path(args.output)

    if not input_dir.is_dir():
        print(f"Error: Input directory not found: {input_dir}", file=sys.stderr)
        sys.exit(2)

    output_dir.mkdir(parents=True, exist_ok=True)

    images = find_images(input_dir)
    if not images:
        print(f"No images found in {input_dir}", file=sys.stderr)
        sys.exit(2)

    total = len(images)
    succeeded = 0
    failed = []
    vibe_counts = {}
    downscale = not args.no_downscale

    batch_start = time.perf_counter()

    for i, image_path in enumerate(images, 1):
        try:
            img_start = time.perf_counter()
            analysis = analyze_image(str(image_path), args.colors, downscale=downscale)
            html = render_html(analysis, str(image_path), search_terms_for(analysis.vibe))
            img_elapsed = time.perf_counter() - img_start

            output_file = output_dir / f"{image_path.stem}-vibe.html"
            if output_file.exists():
                print(f"  Warning: Overwriting {output_file.name}", file=sys.stderr)
            output_file.write_text(html)

            print(f"[{i}/{total}] {image_path.name} → {analysis.vibe} ({img_elapsed:.2f}s)")
            vibe_counts[analysis.vibe] = vibe_counts.get(analysis.vibe, 0) + 1
            succeeded += 1

        except Exception as e:
            error_msg = f"{type(e).__name__}: {e}"
            print(f"[{i}/{total}] {image_path.name} → ERROR: {error_msg}", file=sys.stderr)
            failed.append((image_path.name, error_msg))

    batch_elapsed = time.perf_counter() - batch_start

    # Summary
    print()
    print(f"Completed: {succeeded}/{total} succeeded in {batch_elapsed:.2f}s")
    if succeeded > 0:
        print(f"Average: {batch_elapsed / succeeded:.2f}s per image")
        breakdown = ", ".join(f"{vibe} {count}" for vibe, count in
                              sorted(vibe_counts.items(), key=lambda kv: -kv[1]))
        print(f"Vibes: {breakdown}")
    if failed:
        print(f"Failed ({len(failed)}):")
        for name, error in failed:
            print(f"  - {name}: {error}")
        sys.exit(1)


if __name__ == '__main__':
    main()
