#!/usr/bin/env python3
"""
topapercraft.py — Convert equirectangular panoramas to printable paper nets.

For each input image the script writes one PNG page (3508 × 2480 px, A4
landscape at 300 DPI) next to the input:

    {stem}_sphere.png   12 "orange-peel" gores, glue into a sphere
    {stem}_cube.png     cube cross with solid cut and dashed fold lines

Usage:
    topapercraft <panorama.jpg> [<panorama2.jpg> ...]
    topapercraft --shape cube --instructions pano.jpg
    topapercraft --gores 16 --workers 4 --output-dir prints/ *.jpg

Dependencies: Pillow, numpy
"""

import sys
import os
import argparse

from .compositor import (
    DEFAULT_GORES, PAGE_HEIGHT, PAGE_WIDTH, SHAPES,
    ProjectionRequest, load_source, render,
)
from .errors import PanocraftError

ASSEMBLY_STEPS: dict[str, list[str]] = {
    'sphere': [
        "Print: print the page on A4, preferably on heavier card stock.",
        "Cut: carefully cut out each gore along its curved outline.",
        "Glue the edges: join neighbouring gores edge to edge, lining up the "
        "tips (the poles) so the sphere stays symmetric.",
        "Close: keep gluing until one seam is left, then glue it shut.",
    ],
    'cube': [
        "Print: print the page on A4, preferably on heavier card stock.",
        "Cut: cut along the solid outer outline of the cross.",
        "Fold: fold inwards along every dashed line between the squares.",
        "Glue: form an open box first, then close the lid.",
    ],
}

ASSEMBLY_TIPS: dict[str, str] = {
    'sphere': "Tip: small folds along the gore edges make them easier to join.",
    'cube': "Tip: score the folds with a ruler first for crisp, square edges.",
}


def output_path(img_path: str, shape: str, output_dir: str | None = None) -> str:
    """Where the page for *img_path* is written: {stem}_{shape}.png."""
    stem = os.path.splitext(os.path.basename(img_path))[0]
    out_dir = output_dir if output_dir else os.path.dirname(os.path.abspath(img_path))
    return os.path.join(out_dir, f"{stem}_{shape}.png")


def print_instructions(shape: str, num_gores: int = DEFAULT_GORES) -> None:
    print(f"How to assemble your {shape}:")
    for i, step in enumerate(ASSEMBLY_STEPS[shape], start=1):
        if shape == 'sphere':
            step = step.replace("each gore", f"each of the {num_gores} gores")
        print(f"  {i}. {step}")
    print(f"  {ASSEMBLY_TIPS[shape]}")


# ── Main processing ───────────────────────────────────────────────────────────

def process_image(img_path: str, shape: str, num_gores: int = DEFAULT_GORES,
                  workers: int = 1, output_dir: str | None = None) -> bool:
    img_path = os.path.abspath(img_path)
    out_path = output_path(img_path, shape, output_dir)

    print(f"\nProcessing: {img_path}")

    source = load_source(img_path)
    W, H = source.size
    print(f"Source:     {W} × {H} px")
    if W != 2 * H:
        print(f"WARNING: {os.path.basename(img_path)} is not 2:1 — "
              f"it is mapped as if it were a full equirectangular panorama", file=sys.stderr)
    print(f"Page:       {PAGE_WIDTH} × {PAGE_HEIGHT} px")
    print(f"Net:        {shape}" + (f" ({num_gores} gores)" if shape == 'sphere' else ""))

    request = ProjectionRequest(source, shape, num_gores)
    print(f"  Projecting … ", end='', flush=True)
    png = render(request, workers=workers)
    del source, request
    print("done")

    print(f"  Saving … ", end='', flush=True)
    with open(out_path, 'wb') as fh:
        fh.write(png)
    print("done")

    print(f"Done → {out_path}\n")
    return True


# ── CLI ───────────────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog='topapercraft',
        description='Convert equirectangular panoramas to printable sphere or cube nets.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            'Output: {stem}_sphere.png or {stem}_cube.png next to each input image.\n'
            'Pages are A4 landscape at 300 DPI (3508 × 2480 px).'
        ),
    )
    parser.add_argument('images', nargs='+', help='Equirectangular image path(s)')
    parser.add_argument('--shape', choices=SHAPES, default='sphere',
                        help='net to build (default: sphere)')
    parser.add_argument('--gores', type=int, default=DEFAULT_GORES,
                        help=f'number of sphere gores (default: {DEFAULT_GORES})')
    parser.add_argument('--workers', type=int, default=1,
                        help='worker threads per image (default: 1)')
    parser.add_argument('--output-dir', default=None,
                        help='write pages here instead of next to the inputs')
    parser.add_argument('--instructions', action='store_true',
                        help='print assembly instructions after rendering')
    args = parser.parse_args(argv)

    if args.output_dir and not os.path.isdir(args.output_dir):
        print(f"ERROR: output directory not found: {args.output_dir}", file=sys.stderr)
        sys.exit(1)

    failed = 0
    for path in args.images:
        if not os.path.isfile(path):
            print(f"ERROR: file not found: {path}", file=sys.stderr)
            failed += 1
            continue
        try:
            if not process_image(path, args.shape, args.gores, args.workers, args.output_dir):
                failed += 1
        except PanocraftError as exc:
            print(f"\nERROR processing {path}: {exc}", file=sys.stderr)
            failed += 1
        except Exception as exc:
            print(f"\nERROR processing {path}: {exc}", file=sys.stderr)
            import traceback
            traceback.print_exc()
            failed += 1

    if args.instructions and failed < len(args.images):
        print_instructions(args.shape, args.gores)

    sys.exit(1 if failed else 0)


if __name__ == '__main__':
    main()
