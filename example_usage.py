"""
Example usage of the Montgomery multiplication engine.
Shows the derived constants and a chained product kept in the Montgomery domain.
"""

from montgomery import InvalidModulus, new_context


def main():
    print("Montgomery Modular Multiplication")
    print("=" * 40)

    n = 1280541179
    ctx = new_context(n)

    print("Montgomery Parameters:")
    print(f"  n:          {ctx.n} (0x{ctx.n:08x})")
    print(f"  R bit len:  {ctx.r_bit_len}")
    print(f"  R:          0x{ctx.r:x}")
    print(f"  R^-1 mod n: {ctx.r_inv_mod}")
    print(f"  n':         {ctx.n_inv_mod}")
    print(f"  R^2 mod n:  {ctx.r2_mod_n}")
    print()

    # Example 1: single product
    print("Example 1: Single Multiplication")
    print("-" * 32)

    a, b = 1115177062, 95490452
    a_mont = ctx.convert_in(a)
    b_mont = ctx.convert_in(b)
    result = ctx.convert_out(ctx.multiply(a_mont, b_mont))
    expected = (a * b) % n

    print(f"a = {a}, b = {b}")
    print(f"Montgomery form: a' = {a_mont}, b' = {b_mont}")
    print(f"Result:   {result}")
    print(f"Expected: {expected}")
    print(f"Success:  {result == expected}")
    print()

    # Example 2: stay in the domain across several multiplications
    print("Example 2: Chained Product")
    print("-" * 32)

    factors = [12345, 67890, 424242, 999999937]
    acc = ctx.one
    for f in factors:
        acc = ctx.multiply(acc, ctx.convert_in(f))
    result = ctx.convert_out(acc)

    expected = 1
    for f in factors:
        expected = (expected * f) % n

    print(f"Factors:  {factors}")
    print(f"Result:   {result}")
    print(f"Expected: {expected}")
    print(f"Success:  {result == expected}")
    print()

    # Example 3: rejected modulus
    print("Example 3: Invalid Modulus")
    print("-" * 32)
    try:
        new_context(1 << 20)
    except InvalidModulus as e:
        print(f"Rejected: {e}")


if __name__ == "__main__":
    main()
