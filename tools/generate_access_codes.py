#!/usr/bin/env python3
"""
Access Code Generator
Print random access codes for the ACCESS_CODES setting
"""

import argparse
import secrets

# No 0/O or 1/I, codes get read aloud and typed on phones
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6


def generate_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def generate_codes(count: int, length: int = CODE_LENGTH) -> list[str]:
    """Generate ``count`` distinct codes"""
    if count > len(CODE_ALPHABET) ** length:
        raise ValueError(f"Cannot generate {count} distinct codes of length {length}")
    codes: set[str] = set()
    while len(codes) < count:
        codes.add(generate_code(length))
    return sorted(codes)


def main():
    parser = argparse.ArgumentParser(description="Generate access codes")
    parser.add_argument("--count", type=int, default=10, help="Number of codes to generate")
    parser.add_argument("--length", type=int, default=CODE_LENGTH, help="Characters per code")
    parser.add_argument("--env", action="store_true", help="Print as an ACCESS_CODES= line for .env")

    args = parser.parse_args()

    codes = generate_codes(args.count, args.length)
    if args.env:
        print(f"ACCESS_CODES={','.join(codes)}")
    else:
        for code in codes:
            print(code)


if __name__ == "__main__":
    main()
