#!/usr/bin/env python3
"""
Demo: Parse the example story and print the runtime hand-off formats.

Pass a script path to parse your own file instead.
"""

import logging
import sys

from knotparse.examples import build_example_document
from knotparse.parser import parse_file
from knotparse.serialization import document_to_json, document_to_yaml


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if len(sys.argv) > 1:
        document = parse_file(sys.argv[1])
    else:
        document = build_example_document()

    print("=" * 80)
    print("STORY SCRIPT PARSER DEMO")
    print("=" * 80)

    print("\nKNOTS:")
    print("-" * 80)
    for knot, stitches in document.root.items():
        for stitch, items in stitches.items():
            print(f"  {knot}.{stitch}: {len(items)} item(s)")

    print("\nJSON:")
    print("-" * 80)
    print(document_to_json(document))

    print("\nYAML:")
    print("-" * 80)
    print(document_to_yaml(document))
    print("=" * 80)


if __name__ == "__main__":
    main()
