"""Genotype codec for the phase-known DO state space.

Genotype codes (1-based, as seen by the HMM engine):
  1 .. 64   ordered founder pair (left, right), autosome or female X
  65 .. 72  single founder on a male X

The ordered pair is laid out row-major over the 8×8 founder grid:

    gen - 1 = (left - 1) * 8 + (right - 1)

so code 1 is (1, 1), code 8 is (1, 8) and code 9 is (2, 1).
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from dopk.types import N_FOUNDERS, N_GENO, N_GENO_X


def decode_geno(gen: int) -> Tuple[int, int]:
    """Decode a genotype code in 1..64 to its ordered founder pair.

    Args:
        gen: Genotype code.

    Returns:
        (left, right) founder indices, each in 1..8.

    Raises:
        ValueError: If gen is outside 1..64.
    """
    if not 1 <= gen <= N_GENO:
        raise ValueError(f"genotype code must be in 1..{N_GENO}, got {gen}")
    left, right = divmod(int(gen) - 1, N_FOUNDERS)
    return left + 1, right + 1


def encode_geno(left: int, right: int) -> int:
    """Inverse of decode_geno()."""
    if not (1 <= left <= N_FOUNDERS and 1 <= right <= N_FOUNDERS):
        raise ValueError(
            f"founder indices must be in 1..{N_FOUNDERS}, got ({left}, {right})"
        )
    return (int(left) - 1) * N_FOUNDERS + int(right)


def decode_male_x(gen: int) -> int:
    """Founder index (1..8) carried by a male-X genotype code (65..72)."""
    if not N_GENO < gen <= N_GENO_X:
        raise ValueError(
            f"male X genotype code must be in {N_GENO + 1}..{N_GENO_X}, got {gen}"
        )
    return int(gen) - N_GENO


def encode_male_x(founder: int) -> int:
    """Inverse of decode_male_x()."""
    if not 1 <= founder <= N_FOUNDERS:
        raise ValueError(f"founder index must be in 1..{N_FOUNDERS}, got {founder}")
    return N_GENO + int(founder)


def founder_pairs() -> np.ndarray:
    """(64, 2) array of decode_geno() for codes 1..64, in code order."""
    return np.array([decode_geno(g) for g in range(1, N_GENO + 1)], dtype=np.int64)


def possible_gen(is_x_chr: bool, is_female: bool) -> np.ndarray:
    """Genotype codes an individual can carry at one locus.

    Returns:
        int array: 1..64 for autosomes and female X, 65..72 for male X.
    """
    if is_x_chr and not is_female:
        return np.arange(N_GENO + 1, N_GENO_X + 1)
    return np.arange(1, N_GENO + 1)


def ngen(is_x_chr: bool) -> int:
    """Number of genotype codes to allocate for a chromosome.

    The X needs room for both sexes (64 female + 8 male codes).
    """
    return N_GENO_X if is_x_chr else N_GENO


def nalleles() -> int:
    return N_FOUNDERS
