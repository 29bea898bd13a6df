"""
Modular arithmetic helpers for the Montgomery engine.

Stateless functions only: bit length, non-negative remainder, the
modular inverse of the radix and a 2-adic Hensel lift for n'.
"""


class InverseNotFound(ArithmeticError):
    """Raised when the Euclidean loop ends with gcd(n, r) != 1."""

    def __init__(self, n, r):
        super().__init__(f"Reciprocal of r={r} does not exist modulo n={n}")
        self.n = n
        self.r = r


def bit_length(n):
    """Number of bits required to represent n (0 for n == 0)."""
    result = 0
    while n > 0:
        n >>= 1
        result += 1
    return result


def mod(x, n):
    """Remainder of x modulo n, always in [0, n)."""
    result = x % n
    if result < 0:
        result += n
    return result


def mod_mult_inv(n, r):
    """
    Calculate r^(-1) mod n.

    Simplified extended Euclidean algorithm: only the coefficient of r is
    tracked, since the coefficient of n is never needed.

    Args:
        n (int): Odd modulus (>= 3)
        r (int): Radix, a power of two

    Returns:
        int: y in [0, n) such that (y * r) % n == 1

    Raises:
        InverseNotFound: if gcd(n, r) != 1
    """
    x = n
    y = r % n
    a = 0
    b = 1

    while y != 0:
        q = x // y
        a, b = b, a - q * b
        x, y = y, x % y

    if x != 1:
        raise InverseNotFound(n, r)

    return mod(a, n)


def hensel_2adic_root(r_bits, q):
    """
    Hensel's lemma for 2-adic numbers: solve q*x + 1 = 0 mod 2^r_bits.

    Starts from the root x = 1 of f(x) = q*x + 1 mod 2 and lifts it one
    bit at a time: a_k = a_(k-1) + t * 2^(k-1) with t in {0, 1} chosen so
    that f(a_k) = 0 mod 2^k.

    Args:
        r_bits (int): Number of bits of the 2-adic modulus (>= 1)
        q (int): Odd integer

    Returns:
        int: x in [0, 2^r_bits) with q*x = -1 mod 2^r_bits
    """
    if r_bits < 1:
        raise ValueError(f"r_bits must be >= 1, got {r_bits}")
    if q % 2 == 0:
        raise ValueError(f"q must be odd, got {q}")

    root = 1
    for k in range(2, r_bits + 1):
        mask = (1 << k) - 1
        if (q * root + 1) & mask:
            root += 1 << (k - 1)

    return root
