"""Recombinant-haplotype probabilities for Diversity Outcross mice.

For two loci at recombination fraction r, rec_prob_*() give the probability
that a haplotype in a generation-s DO mouse carries a different founder at
the right locus than at the left one. The DO was founded from pre-CC mice
taken at several sib-mating generations, so each variant is a mixture over
the pre-CC table in dopk.types:

    recprob(r, s) = Σ_k alpha_k · f(min(r, 1/2), s, k)

r may be anything in [0, 1]; fractions above 1/2 are treated as unlinked
loci, which keeps recprob non-decreasing in r over the whole range.

f() is built in two stages.

Pre-CC stage (exact two-locus recursion):
  For the chromosomes of the current sib pair keep the matrix
      S[x, y] = Pr(chromosome x at the left locus and chromosome y at the
                   right locus come from the same founder)
  A gamete g drawn from chromosomes (p, q) has
      S[g, g] = (1-r)/2 (S[p,p] + S[q,q]) + r/2 (S[p,q] + S[q,p])
  and for two different new chromosomes g, h, S[g, h] is the average of
  S over the parental chromosomes they may copy. Starting from inbred
  founders (S = I), the CC funnel and k generations of sib mating give
  the pre-CC statistics. The X follows X inheritance: AB female × CD male
  gives an ABCD female, EF female × GH male an EFGH male, and a male
  passes his single X unchanged to his daughters.

DO stage (random mating of unrelated mice, d = S - 1/8):
  autosome   d(s) = (1-r)^(s-1) d(1)
  X          d_m(t+1) = (1-r) d_f(t)
             d_f(t+1) = ((1-r) d_f(t) + d_m(t)) / 2
  where generation 1 are the offspring of pre-CC mice and d_f is the mean
  over a female's two X chromosomes.

References:
  - Broman (2005) Genetics 169:1133 (RIL by sib mating, 8-way funnel)
  - Broman (2012) Genetics 190:403 (intermediate generations of RIL)
  - Broman (2012) G3 2:199 (haplotype probabilities in the DO)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable, Dict, Sequence, Tuple

import numpy as np

from dopk.types import N_FOUNDERS, PRECC_ALPHA, PRECC_GEN, ChrType


# Same-founder probability for loci on chromosomes from unrelated lineages
_UNLINKED = 1.0 / N_FOUNDERS

# Mixtures accept r in [0, 1] and evaluate larger fractions at this value
MAX_REC_FRAC = 0.5

# Each recipe entry is the pair of parental chromosome indices a new
# chromosome is drawn from; (p, p) copies chromosome p unchanged.

# Autosome. G1 (AB, CD, EF, GH) individuals are identical to the founders
# at the two-locus level, so the funnel starts at G2 from S = I_8.
_AUTO_G2 = ((0, 1), (2, 3), (4, 5), (6, 7))            # ABCD, EFGH
_AUTO_SIB = ((0, 1), (2, 3), (0, 1), (2, 3))           # female (0,1), male (2,3)

# X chromosome, founders A, B, C, E, F (D, G and H X's are not transmitted)
_X_G2 = ((0, 1), (2, 2), (3, 4))                       # ABCD female (0,1), EFGH male (2)
_X_SIB = ((0, 1), (2, 2), (0, 1))                      # female (0,1), male (2)
_N_X_FOUNDERS = 5


# ═══════════════════════════════════════════════════════════════════════
# TWO-LOCUS PEDIGREE RECURSION
# ═══════════════════════════════════════════════════════════════════════


def _meiosis(S: np.ndarray, recipe: Sequence[Tuple[int, int]], r: float) -> np.ndarray:
    """Advance the same-founder matrix by one generation.

    Args:
        S: (n_old, n_old) same-founder matrix of the parental chromosomes.
        recipe: For each new chromosome, the parental pair it is drawn from.
        r: Recombination fraction.

    Returns:
        (len(recipe), len(recipe)) same-founder matrix of the offspring.
    """
    n_new = len(recipe)
    T = np.zeros((n_new, S.shape[0]))
    for g, (p, q) in enumerate(recipe):
        T[g, p] += 0.5
        T[g, q] += 0.5

    S_new = T @ S @ T.T
    for g, (p, q) in enumerate(recipe):
        S_new[g, g] = (
            (1.0 - r) * 0.5 * (S[p, p] + S[q, q])
            + r * 0.5 * (S[p, q] + S[q, p])
        )
    return S_new


def _gamete(S: np.ndarray, p: int, q: int, r: float) -> float:
    """Same-founder probability on a gamete from chromosomes p and q."""
    return (1.0 - r) * 0.5 * (S[p, p] + S[q, q]) + r * 0.5 * (S[p, q] + S[q, p])


@lru_cache(maxsize=4096)
def precc_same_founder_auto(r: float, k: int) -> float:
    """Autosomal same-founder probability on a gamete of a pre-CC mouse.

    Args:
        r: Recombination fraction.
        k: Sib-mating generation of the pre-CC mouse (G2:Fk), k >= 1.

    Returns:
        Pr(gamete has the same founder at both loci).
    """
    S = _meiosis(np.eye(N_FOUNDERS), _AUTO_G2, r)
    for _ in range(k):
        S = _meiosis(S, _AUTO_SIB, r)
    return float(_gamete(S, 0, 1, r))


@lru_cache(maxsize=4096)
def precc_same_founder_x(r: float, k: int) -> Tuple[float, float]:
    """X-chromosome same-founder probabilities for a pre-CC sib pair.

    Args:
        r: Recombination fraction.
        k: Sib-mating generation of the pre-CC mice (G2:Fk), k >= 1.

    Returns:
        (female gamete, male X): Pr(same founder at both loci) on an X
        transmitted by a pre-CC female, and on the X of a pre-CC male.
    """
    S = _meiosis(np.eye(_N_X_FOUNDERS), _X_G2, r)
    for _ in range(k):
        S = _meiosis(S, _X_SIB, r)
    return float(_gamete(S, 0, 1, r)), float(S[2, 2])


# ═══════════════════════════════════════════════════════════════════════
# DO GENERATIONS
# ═══════════════════════════════════════════════════════════════════════


def _check_args(r: float, s: int) -> None:
    if not 0.0 <= r <= 1.0:
        raise ValueError(f"recombination fraction must be in [0, 1], got {r}")
    if s < 1:
        raise ValueError(f"no. generations must be >= 1, got {s}")


def _x_deviations(r: float, s: int, k: int) -> Tuple[float, float]:
    """(female, male) departures from 1/8 of the X same-founder probability."""
    female_gamete, male_x = precc_same_founder_x(r, k)
    d_f = 0.5 * (female_gamete + male_x) - _UNLINKED
    d_m = female_gamete - _UNLINKED
    for _ in range(s - 1):
        d_f, d_m = 0.5 * ((1.0 - r) * d_f + d_m), (1.0 - r) * d_f
    return d_f, d_m


def _to_recprob(d: float) -> float:
    return min(1.0, max(0.0, 1.0 - (_UNLINKED + d)))


def do_rec_auto(r: float, s: int, k: int) -> float:
    """Autosomal recombinant probability for pre-CC generation k."""
    d = precc_same_founder_auto(r, k) - _UNLINKED
    return _to_recprob((1.0 - r) ** (s - 1) * d)


def do_rec_female_x(r: float, s: int, k: int) -> float:
    """Female X recombinant probability for pre-CC generation k."""
    return _to_recprob(_x_deviations(r, s, k)[0])


def do_rec_male_x(r: float, s: int, k: int) -> float:
    """Male X recombinant probability for pre-CC generation k."""
    return _to_recprob(_x_deviations(r, s, k)[1])


# ═══════════════════════════════════════════════════════════════════════
# PRE-CC MIXTURE
# ═══════════════════════════════════════════════════════════════════════


@lru_cache(maxsize=4096)
def _mixture(f: Callable[[float, int, int], float], r: float, s: int) -> float:
    _check_args(r, s)
    # r > 1/2 has no meiotic interpretation; such loci behave as unlinked
    r = min(float(r), MAX_REC_FRAC)
    s = int(s)
    return float(sum(
        alpha * f(r, s, k) for k, alpha in zip(PRECC_GEN, PRECC_ALPHA)
    ))


def rec_prob_auto(r: float, s: int) -> float:
    """Pr(recombinant haplotype), autosome, DO generation s."""
    return _mixture(do_rec_auto, r, s)


def rec_prob_female_x(r: float, s: int) -> float:
    """Pr(recombinant haplotype), female X, DO generation s."""
    return _mixture(do_rec_female_x, r, s)


def rec_prob_male_x(r: float, s: int) -> float:
    """Pr(recombinant haplotype), male X, DO generation s."""
    return _mixture(do_rec_male_x, r, s)


REC_PROB_BY_CHRTYPE: Dict[ChrType, Callable[[float, int], float]] = {
    ChrType.AUTOSOME: rec_prob_auto,
    ChrType.FEMALE_X: rec_prob_female_x,
    ChrType.MALE_X:   rec_prob_male_x,
}


def rec_prob(chrtype: ChrType, r: float, s: int) -> float:
    """Dispatch to the mixture for ``chrtype``."""
    return REC_PROB_BY_CHRTYPE[ChrType(chrtype)](r, s)
