"""
Codes and hyperplanes for logarithmic-size piecewise-linear formulations.

Segment p of a d-segment function is labelled with code h^p; the encoding
constraints force the integer vector y to equal the code of the segment
containing x. Codes are lists indexed from bit 0.
"""

from typing import List


Code = List[int]


def num_code_bits(num_segments: int) -> int:
    """Bits needed to label num_segments segments: ceil(log2(d))."""
    if num_segments < 1:
        raise ValueError(f"num_segments must be positive, got {num_segments}")
    return (num_segments - 1).bit_length()


def reflected_gray_codes(k: int) -> List[Code]:
    """
    Binary reflected Gray code of k bits.

    Consecutive codes differ in exactly one bit.
    """
    if k < 0:
        raise ValueError(f"Invalid code length {k}")
    if k == 0:
        return [[]]
    prev = reflected_gray_codes(k - 1)
    return [code + [0] for code in prev] + [code + [1] for code in reversed(prev)]


def zigzag_codes(k: int) -> List[Code]:
    """
    Binary zig-zag code of k bits.

    Paired with zigzag_hyperplanes these reproduce integer_zigzag_codes.
    """
    if k < 0:
        raise ValueError(f"Invalid code length {k}")
    if k == 0:
        return [[]]
    prev = zigzag_codes(k - 1)
    return [code + [0] for code in prev] + [code + [1] for code in prev]


def integer_zigzag_codes(k: int) -> List[Code]:
    """
    Integer zig-zag code of k bits; entry i ranges over [0, 2^(k-1-i)].
    """
    if k < 0:
        raise ValueError(f"Invalid code length {k}")
    if k == 0:
        return [[]]
    prev = integer_zigzag_codes(k - 1)
    offset = [2 ** (k - 2 - i) for i in range(k - 1)]
    return (
        [code + [0] for code in prev]
        + [[c + o for c, o in zip(code, offset)] + [1] for code in prev]
    )


def unit_vector_hyperplanes(k: int) -> List[Code]:
    """The k unit vectors e_0, ..., e_{k-1}."""
    return [[1 if j == i else 0 for j in range(k)] for i in range(k)]


def zigzag_hyperplanes(k: int) -> List[Code]:
    """
    Hyperplanes b^i with b^i_i = 1 and b^i_j = 2^(j-i-1) for j > i.
    """
    hyperplanes = []
    for i in range(k):
        hp = [0] * k
        hp[i] = 1
        for j in range(i + 1, k):
            hp[j] = 2 ** (j - i - 1)
        hyperplanes.append(hp)
    return hyperplanes


def dot(a: Code, b: Code) -> int:
    return sum(x * y for x, y in zip(a, b))
