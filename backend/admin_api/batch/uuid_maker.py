"""
Print UUID4 values, one per line.

Usage:
    admin-api-uuid [-n COUNT]
"""

from __future__ import annotations

import argparse
import sys
import uuid


def make_uuids(count: int) -> list[str]:
    return [str(uuid.uuid4()) for _ in range(max(0, int(count)))]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate UUID4 values")
    parser.add_argument("-n", "--count", type=int, default=1, help="How many to print")
    args = parser.parse_args(argv)

    for value in make_uuids(args.count):
        print(value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
