#!/usr/bin/env python3
"""
Randomised self-test for the Montgomery engine.

Draws random odd moduli band by band (one band per bit length), random
operands a, b in [0, n), and compares the Montgomery product with the
plain (a * b) % n. The first mismatch is fatal and reports the (a, b, n)
triple so it can be reproduced with the "check" command.

Usage:
    python selftest.py [--min-bits 1] [--max-bits 30] [--iterations 1000] [--seed S]
    python selftest.py check N A B
"""

import argparse
import random
import sys

from montgomery import InvalidModulus, MontgomeryContext

DEFAULT_MIN_BITS = 1
DEFAULT_MAX_BITS = 30
DEFAULT_ITERATIONS = 1000


class SelfTestFailure(AssertionError):
    """Montgomery product differs from the reference product."""

    def __init__(self, a, b, n, result, expected):
        super().__init__(
            f"Montgomery multiplication test failed: res={result}, ref={expected} "
            f"(a={a}, b={b}, n={n})"
        )
        self.a = a
        self.b = b
        self.n = n
        self.result = result
        self.expected = expected


def random_odd_modulus(rng, bitlen):
    """
    Draw an odd modulus with exactly bitlen + 1 bits.

    Args:
        rng (random.Random): Source of randomness
        bitlen (int): Band index, 1 <= bitlen <= 30

    Returns:
        int: odd n with 2^bitlen < n < 2^(bitlen + 1)
    """
    if not DEFAULT_MIN_BITS <= bitlen <= DEFAULT_MAX_BITS:
        raise ValueError(f"bitlen must be in [1, 30], got {bitlen}")
    min_n = (1 << bitlen) + 1
    max_n = (1 << (bitlen + 1)) - 1
    n = 0
    while n % 2 == 0:
        n = rng.randint(min_n, max_n)
    return n


def montgomery_product(ctx, a, b):
    """(a * b) mod n computed through the Montgomery domain."""
    a_ = ctx.convert_in(a)
    b_ = ctx.convert_in(b)
    return ctx.convert_out(ctx.multiply(a_, b_))


def check_product(ctx, a, b):
    """True if the Montgomery product of a and b matches (a * b) % n."""
    return montgomery_product(ctx, a, b) == (a * b) % ctx.n


def run_selftest(min_bits=DEFAULT_MIN_BITS, max_bits=DEFAULT_MAX_BITS,
                 iterations=DEFAULT_ITERATIONS, seed=None, progress=None):
    """
    Run the randomised comparison over every bit-length band.

    Args:
        min_bits (int): First band
        max_bits (int): Last band (inclusive)
        iterations (int): Moduli drawn per band
        seed: Seed for the random generator, None for a random run
        progress (callable): Called with the modulus bit length at the
            start of each band

    Returns:
        int: Number of products checked

    Raises:
        SelfTestFailure: on the first mismatch
    """
    rng = random.Random(seed)
    checked = 0
    for bitlen in range(min_bits, max_bits + 1):
        if progress is not None:
            progress(bitlen + 1)
        for _ in range(iterations):
            n = random_odd_modulus(rng, bitlen)
            ctx = MontgomeryContext(n)
            a = rng.randint(0, n - 1)
            b = rng.randint(0, n - 1)
            result = montgomery_product(ctx, a, b)
            expected = (a * b) % n
            if result != expected:
                raise SelfTestFailure(a, b, n, result, expected)
            checked += 1
    return checked


def parse_value(value_str):
    """Parse a value string as decimal or hexadecimal."""
    if value_str.lower().startswith('0x'):
        return int(value_str, 16)
    else:
        return int(value_str)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Compare Montgomery multiplication against (a * b) % n.")
    parser.add_argument("--min-bits", type=int, default=DEFAULT_MIN_BITS)
    parser.add_argument("--max-bits", type=int, default=DEFAULT_MAX_BITS)
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS)
    parser.add_argument("--seed", type=int, default=None)

    commands = parser.add_subparsers(dest="command")
    check = commands.add_parser("check", help="check a single (n, a, b) triple")
    check.add_argument("n", type=parse_value)
    check.add_argument("a", type=parse_value)
    check.add_argument("b", type=parse_value)
    return parser


def _check_triple(n, a, b):
    ctx = MontgomeryContext(n)
    result = montgomery_product(ctx, a, b)
    expected = (a * b) % n
    print(f"n={n}, a={a}, b={b}")
    print(f"res={result}, ref={expected}")
    if result != expected:
        print("ERROR: results differ")
        return 1
    print("OK")
    return 0


def main(argv=None):
    """Command line entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    if args.command == "check":
        try:
            return _check_triple(args.n, args.a, args.b)
        except ValueError as e:
            print(f"Error: {e}")
            return 2

    if not DEFAULT_MIN_BITS <= args.min_bits <= args.max_bits <= DEFAULT_MAX_BITS:
        print("Error: bit range must satisfy 1 <= --min-bits <= --max-bits <= 30")
        return 2

    try:
        checked = run_selftest(args.min_bits, args.max_bits, args.iterations, args.seed,
                               progress=lambda bits: print(f"bitlen={bits}"))
    except SelfTestFailure as e:
        print(f"res={e.result}, ref={e.expected}")
        print(f"a={e.a}, b={e.b}, n={e.n}")
        print(f"❌ {e}")
        return 1
    except InvalidModulus as e:
        print(f"Error: {e}")
        return 2

    print(f"✓ {checked} products matched")
    return 0


if __name__ == "__main__":
    sys.exit(main())
