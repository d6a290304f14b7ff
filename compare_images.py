"""
Compare two renders pixel-wise. Saves a diff image if they differ and prints the max channel difference.
Usage:
  python compare_images.py results/seq.png results/par.png [--diff results/diff.png]
"""

import argparse
import sys

from whitted.compare import compare_images


def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument('a')
    p.add_argument('b')
    p.add_argument('--diff', default='results/diff.png')
    args = p.parse_args(argv)
    try:
        result = compare_images(args.a, args.b, diff_path=args.diff)
    except ValueError as e:
        print("DIFFERENT SIZES:", e)
        return 2
    if result.identical:
        print("IDENTICAL")
        return 0
    print("Max per-channel diff:", result.max_diff)
    print(f"Saved diff to {args.diff}, bbox: {result.bbox}")
    return 1


if __name__ == '__main__':
    sys.exit(main())
