"""
Montgomery modular multiplication for word-sized odd moduli.

Computes (a * b) mod n without division in the multiplication path. All
operations go through a single REDC reduction; entry into the Montgomery
domain uses the precomputed constant r^2 mod n.

Moduli are limited to n < 2^31 so that r = 2^bit_length(n) fits in 32
bits and every intermediate product fits a 64-bit accumulator.
"""

from modutil import InverseNotFound, bit_length, hensel_2adic_root, mod_mult_inv

MIN_MODULUS = 3
MAX_MODULUS = (1 << 31) - 1
ACCUMULATOR_BITS = 64

INVERSE_METHODS = ("euclid", "hensel")

__all__ = [
    "ACCUMULATOR_BITS",
    "INVERSE_METHODS",
    "InvalidModulus",
    "InverseNotFound",
    "MAX_MODULUS",
    "MIN_MODULUS",
    "MontgomeryContext",
    "new_context",
]


class InvalidModulus(ValueError):
    """Raised when a modulus cannot be used to build a Montgomery context."""

    def __init__(self, modulus, reason):
        super().__init__(f"Invalid modulus n={modulus!r}: {reason}")
        self.modulus = modulus
        self.reason = reason


def _check_modulus(n):
    if not isinstance(n, int) or isinstance(n, bool):
        raise InvalidModulus(n, "modulus must be an integer")
    if n < MIN_MODULUS:
        raise InvalidModulus(n, "modulus must be >= 3")
    if n % 2 == 0:
        raise InvalidModulus(n, "modulus must be odd")
    if n > MAX_MODULUS:
        raise InvalidModulus(n, "modulus must be less than 2^31")


class MontgomeryContext:
    """
    Domain constants for one odd modulus n.

    The context is immutable after construction and can be shared
    between threads. Values passed to multiply() and convert_out() must
    already be in Montgomery form; nothing checks this.
    """

    def __init__(self, n, inverse="euclid"):
        """
        Derive the Montgomery constants for n.

        Args:
            n (int): Odd modulus, 3 <= n < 2^31
            inverse (str): How to derive r^(-1) and n'. "euclid" runs the
                extended Euclidean algorithm on (n, r), "hensel" lifts
                n' = -n^(-1) mod r bit by bit.

        Raises:
            InvalidModulus: if n fails a precondition
            ValueError: if inverse is not a known method
        """
        _check_modulus(n)
        if inverse not in INVERSE_METHODS:
            raise ValueError(f"Unknown inverse method: {inverse!r}")

        self.n = n
        self.r_bit_len = bit_length(n)
        assert 1 <= self.r_bit_len <= 31

        r = 1 << self.r_bit_len
        self.r_mask = r - 1

        if inverse == "euclid":
            self.r_inv_mod = mod_mult_inv(n, r)
            # r * r_inv_mod = 1 (mod n), so the division is exact
            self.n_inv_mod = (r * self.r_inv_mod - 1) // n
        else:
            self.n_inv_mod = hensel_2adic_root(self.r_bit_len, n)
            # n * n_inv_mod = -1 (mod r), so the division is exact
            self.r_inv_mod = (n * self.n_inv_mod + 1) >> self.r_bit_len

        self.r2_mod_n = (r * r) % n

    @property
    def r(self):
        """The radix 2^r_bit_len."""
        return self.r_mask + 1

    @property
    def one(self):
        """1 in Montgomery form (r mod n)."""
        return self.redc(self.r2_mod_n)

    def redc(self, t):
        """
        Montgomery reduction: compute t * r^(-1) mod n.

        Args:
            t (int): Input value, 0 <= t < n * r

        Returns:
            int: t * r^(-1) mod n, in [0, n)
        """
        s = ((t & self.r_mask) * self.n_inv_mod) & self.r_mask
        # t + s*n is a multiple of r by construction of n_inv_mod
        u = (t + s * self.n) >> self.r_bit_len
        if u >= self.n:
            u -= self.n
        return u

    def convert_in(self, x):
        """
        Convert a plain residue to Montgomery form: x * r mod n.

        Raises:
            ValueError: if x is outside [0, n)
        """
        if not 0 <= x < self.n:
            raise ValueError(f"Value {x} is outside [0, {self.n})")
        return self.redc(x * self.r2_mod_n)

    def convert_out(self, x):
        """Convert from Montgomery form back to a plain residue."""
        return self.redc(x)

    def multiply(self, a, b):
        """
        Montgomery multiplication: compute (a * b * r^(-1)) mod n.
        Both inputs must be in Montgomery form; so is the result.
        """
        return self.redc(a * b)

    def square(self, a):
        return self.multiply(a, a)

    def __repr__(self):
        return f"MontgomeryContext(n={self.n}, r_bit_len={self.r_bit_len})"


def new_context(n):
    """Build a MontgomeryContext for n, raising InvalidModulus if n is unusable."""
    return MontgomeryContext(n)
