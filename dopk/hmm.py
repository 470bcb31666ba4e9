"""HMM probabilities for the phase-known Diversity Outcross.

The external HMM engine calls, per individual:
  - init()  log Pr(genotype) at the first marker
  - emit()  log Pr(observed call | genotype)
  - step()  log Pr(genotype at right marker | genotype at left marker)

All three are pure functions of their arguments. With ``strict=True`` the
genotype codes are checked on every call and a ValueError is raised on
codes outside the state space; with ``strict=False`` the check is skipped
and the caller must only pass codes from possible_gen().

Batch forms (init_vector, emit_vector, step_matrix) evaluate the same
quantities over the whole state space with NumPy.

Genetic map estimation (est_rec_frac) is not available for the DO, and
nrec() is not computed.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from dopk.codec import decode_geno, founder_pairs, ngen
from dopk.recombination import rec_prob
from dopk.types import (
    N_FOUNDERS,
    N_GENO,
    ChrType,
    FounderGenotype,
    ObservedGenotype,
)
from dopk.validation import check_geno


LOG_7 = math.log(N_FOUNDERS - 1)   # non-self founders a recombinant can switch to


# ═══════════════════════════════════════════════════════════════════════
# EMISSION TABLES
# ═══════════════════════════════════════════════════════════════════════

# Pr(obs | expected class) = intercept + slope * error_prob.
# Columns follow ObservedGenotype: MISSING, A, H, B, NOT_B, NOT_A.

# Both founder alleles known; rows are the consensus (f1 + f2) // 2.
#                 -      A     H     B    notB  notA
_BOTH_INTERCEPT = np.array([
    [1.0,  1.0,  1.0,  1.0,  1.0,  1.0],     # (unused)
    [1.0,  1.0,  0.0,  0.0,  1.0,  0.0],     # A
    [1.0,  0.0,  1.0,  0.0,  1.0,  1.0],     # H
    [1.0,  0.0,  0.0,  1.0,  0.0,  1.0],     # B
])
_BOTH_SLOPE = np.array([
    [0.0,  0.0,  0.0,  0.0,  0.0,  0.0],
    [0.0, -1.0,  0.5,  0.5, -0.5,  1.0],
    [0.0,  0.5, -1.0,  0.5, -0.5, -0.5],
    [0.0,  0.5,  0.5, -1.0,  1.0, -0.5],
])

# A single founder allele decides the call; rows follow FounderGenotype,
# and unknown (MISSING / H) founders are uninformative.
#                 -      A     H     B    notB  notA
_ONE_INTERCEPT = np.array([
    [1.0,  1.0,  1.0,  1.0,  1.0,  1.0],     # MISSING
    [1.0,  1.0,  1.0,  0.0,  1.0,  0.0],     # A
    [1.0,  1.0,  1.0,  1.0,  1.0,  1.0],     # H
    [1.0,  0.0,  1.0,  1.0,  0.0,  1.0],     # B
])
_ONE_SLOPE = np.array([
    [0.0,  0.0,  0.0,  0.0,  0.0,  0.0],
    [0.0, -1.0,  0.0,  1.0, -1.0,  1.0],
    [0.0,  0.0,  0.0,  0.0,  0.0,  0.0],
    [0.0,  1.0,  0.0, -1.0,  1.0, -1.0],
])


def _log(x):
    """Natural log that maps 0 to -inf without warnings."""
    with np.errstate(divide='ignore'):
        return np.log(x)


def _known_alleles(founder_geno) -> np.ndarray:
    """Founder calls with het / missing / anything else set to 0 (unknown)."""
    fg = np.asarray(founder_geno).astype(np.int64)
    known = (fg == FounderGenotype.A) | (fg == FounderGenotype.B)
    return np.where(known, fg, 0)


def _n_generations(cross_info) -> int:
    return int(np.asarray(cross_info).ravel()[0])


def _require_geno(gen: int, is_observed_value: bool, is_x_chr: bool,
                  is_female: bool, cross_info) -> None:
    if not check_geno(gen, is_observed_value, is_x_chr, is_female, cross_info):
        raise ValueError("genotype value not allowed")


# ═══════════════════════════════════════════════════════════════════════
# INITIAL PROBABILITIES
# ═══════════════════════════════════════════════════════════════════════


def init(
    true_gen: int,
    is_x_chr: bool,
    is_female: bool,
    cross_info: Optional[Sequence[int]] = None,
    strict: bool = True,
) -> float:
    """log Pr(true_gen): uniform over 64 founder pairs, or 8 on a male X."""
    if strict:
        _require_geno(true_gen, False, is_x_chr, is_female, cross_info)
    return -math.log(ChrType.from_flags(is_x_chr, is_female).n_states)


def init_vector(
    is_x_chr: bool,
    is_female: bool,
    cross_info: Optional[Sequence[int]] = None,
) -> np.ndarray:
    """init() over possible_gen(is_x_chr, is_female)."""
    n = ChrType.from_flags(is_x_chr, is_female).n_states
    return np.full(n, -math.log(n))


# ═══════════════════════════════════════════════════════════════════════
# EMISSION PROBABILITIES
# ═══════════════════════════════════════════════════════════════════════


def emit(
    obs_gen: int,
    true_gen: int,
    error_prob: float,
    founder_geno: Sequence[int],
    is_x_chr: bool,
    is_female: bool,
    cross_info: Optional[Sequence[int]] = None,
    strict: bool = True,
) -> float:
    """log Pr(obs_gen | true_gen) at one marker.

    Args:
        obs_gen: Observed call (ObservedGenotype code).
        true_gen: Genotype code from possible_gen().
        error_prob: Genotyping error probability.
        founder_geno: (8,) founder calls at this marker (FounderGenotype).
        is_x_chr: Marker is on the X chromosome.
        is_female: Individual is female.
        cross_info: Individual's cross information (unused here).
        strict: Check both codes and raise ValueError if out of range.

    Returns:
        Log emission probability; 0.0 for a missing call or when the
        founder alleles at this marker are unknown.
    """
    if strict:
        _require_geno(true_gen, False, is_x_chr, is_female, cross_info)
        _require_geno(obs_gen, True, is_x_chr, is_female, cross_info)

    if obs_gen == ObservedGenotype.MISSING:
        return 0.0

    alleles = _known_alleles(founder_geno)

    if is_x_chr and not is_female:
        allele = alleles[int(true_gen) - N_GENO - 1]
        prob = _ONE_INTERCEPT[allele, obs_gen] + _ONE_SLOPE[allele, obs_gen] * error_prob
        return float(_log(prob))

    left, right = decode_geno(true_gen)
    f1 = alleles[left - 1]
    f2 = alleles[right - 1]

    if f1 and f2:
        consensus = (f1 + f2) // 2
        prob = (_BOTH_INTERCEPT[consensus, obs_gen]
                + _BOTH_SLOPE[consensus, obs_gen] * error_prob)
    else:
        allele = max(f1, f2)
        prob = _ONE_INTERCEPT[allele, obs_gen] + _ONE_SLOPE[allele, obs_gen] * error_prob
    return float(_log(prob))


def emit_vector(
    obs_gen: int,
    error_prob: float,
    founder_geno: Sequence[int],
    is_x_chr: bool,
    is_female: bool,
    cross_info: Optional[Sequence[int]] = None,
) -> np.ndarray:
    """emit() for every genotype in possible_gen(is_x_chr, is_female).

    Returns:
        (8,) for a male X, otherwise (64,) log emission probabilities.
    """
    obs_gen = int(obs_gen)
    alleles = _known_alleles(founder_geno)

    if is_x_chr and not is_female:
        prob = _ONE_INTERCEPT[alleles, obs_gen] + _ONE_SLOPE[alleles, obs_gen] * error_prob
        return _log(prob)

    pairs = founder_pairs()
    f1 = alleles[pairs[:, 0] - 1]
    f2 = alleles[pairs[:, 1] - 1]
    both = (f1 > 0) & (f2 > 0)

    consensus = (f1 + f2) // 2
    single = np.maximum(f1, f2)
    prob = np.where(
        both,
        _BOTH_INTERCEPT[np.where(both, consensus, 0), obs_gen]
        + _BOTH_SLOPE[np.where(both, consensus, 0), obs_gen] * error_prob,
        _ONE_INTERCEPT[single, obs_gen] + _ONE_SLOPE[single, obs_gen] * error_prob,
    )
    return _log(prob)


# ═══════════════════════════════════════════════════════════════════════
# TRANSITION PROBABILITIES
# ═══════════════════════════════════════════════════════════════════════


def _step_logs(rec_frac: float, chrtype: ChrType, cross_info) -> tuple:
    """(log Pr(haplotype keeps founder), log Pr(switch to one given founder))."""
    recprob = rec_prob(chrtype, rec_frac, _n_generations(cross_info))
    return float(_log(1.0 - recprob)), float(_log(recprob)) - LOG_7


def step(
    gen_left: int,
    gen_right: int,
    rec_frac: float,
    is_x_chr: bool,
    is_female: bool,
    cross_info: Sequence[int],
    strict: bool = True,
) -> float:
    """log Pr(gen_right | gen_left) across an interval.

    Each of the two ordered haplotypes independently keeps its founder
    with probability 1 - recprob or switches to one of the 7 other
    founders with probability recprob / 7, so for AA/AB-type patterns

        no change         2 log(1 - recprob)
        one position      log(recprob) + log(1 - recprob) - log 7
        both positions    2 log(recprob) - log 49

    A male X carries a single haplotype.

    Args:
        gen_left: Genotype code at the left marker.
        gen_right: Genotype code at the right marker.
        rec_frac: Recombination fraction between the markers.
        is_x_chr: Interval is on the X chromosome.
        is_female: Individual is female.
        cross_info: Individual's cross information; element 0 is the
            number of DO generations.
        strict: Check both codes and raise ValueError if out of range.
    """
    if strict:
        _require_geno(gen_left, False, is_x_chr, is_female, cross_info)
        _require_geno(gen_right, False, is_x_chr, is_female, cross_info)

    chrtype = ChrType.from_flags(is_x_chr, is_female)
    log_stay, log_switch = _step_logs(rec_frac, chrtype, cross_info)

    if chrtype == ChrType.MALE_X:
        return log_stay if gen_left == gen_right else log_switch

    left1, left2 = decode_geno(gen_left)
    right1, right2 = decode_geno(gen_right)
    return ((log_stay if left1 == right1 else log_switch)
            + (log_stay if left2 == right2 else log_switch))


def step_matrix(
    rec_frac: float,
    is_x_chr: bool,
    is_female: bool,
    cross_info: Sequence[int],
) -> np.ndarray:
    """step() over possible_gen() × possible_gen().

    Returns:
        (n, n) array; entry [i, j] is log Pr(state j | state i).
    """
    chrtype = ChrType.from_flags(is_x_chr, is_female)
    log_stay, log_switch = _step_logs(rec_frac, chrtype, cross_info)

    if chrtype == ChrType.MALE_X:
        return np.where(np.eye(N_FOUNDERS, dtype=bool), log_stay, log_switch)

    pairs = founder_pairs()
    same1 = pairs[:, None, 0] == pairs[None, :, 0]
    same2 = pairs[:, None, 1] == pairs[None, :, 1]
    return (np.where(same1, log_stay, log_switch)
            + np.where(same2, log_stay, log_switch))


# ═══════════════════════════════════════════════════════════════════════
# ALLELE DOSAGE
# ═══════════════════════════════════════════════════════════════════════


def geno2allele_matrix(is_x_chr: bool) -> np.ndarray:
    """Map genotype probabilities to expected founder allele dosage.

    Returns:
        (ngen(is_x_chr), 8) matrix. Rows 0..63 put 0.5 on each founder of
        the ordered pair; on the X, rows 64..71 put 1.0 on the male's
        single founder.
    """
    result = np.zeros((ngen(is_x_chr), N_FOUNDERS))
    rows = np.arange(N_GENO)
    pairs = founder_pairs()
    np.add.at(result, (rows, pairs[:, 0] - 1), 0.5)
    np.add.at(result, (rows, pairs[:, 1] - 1), 0.5)

    if is_x_chr:
        result[N_GENO:, :] = np.eye(N_FOUNDERS)
    return result


# ═══════════════════════════════════════════════════════════════════════
# NOT AVAILABLE FOR THE DO
# ═══════════════════════════════════════════════════════════════════════


def nrec(
    gen_left: int,
    gen_right: int,
    is_x_chr: bool,
    is_female: bool,
    cross_info: Optional[Sequence[int]] = None,
) -> float:
    """Number of recombination events between two genotypes: not computed."""
    return np.nan


def est_rec_frac(gamma, is_x_chr: bool, cross_info, n_gen: int) -> float:
    """Genetic map estimation is not available for the Diversity Outcross.

    Raises:
        NotImplementedError: Always.
    """
    raise NotImplementedError("est_map not yet available for Diversity Outcross")
