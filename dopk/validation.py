"""Pre-flight checks on the data handed to the DO cross model.

Every check returns a bool. Problems in the *data* never raise: they are
reported with a UserWarning and a False return, and the caller decides
whether to abort the analysis. check_geno() is the exception in that it is
silent; it backs the strict-mode domain checks in dopk.hmm.
"""

from __future__ import annotations

import warnings
from typing import Optional, Sequence

import numpy as np

from dopk.types import (
    FOUNDER_GENO_VALUES,
    N_FOUNDERS,
    N_GENO,
    N_GENO_X,
    ObservedGenotype,
)


_OBSERVED_VALUES = frozenset(int(v) for v in ObservedGenotype)


def _report(message: str) -> None:
    warnings.warn(message, UserWarning, stacklevel=3)


def _as_float_array(values) -> np.ndarray:
    """Coerce to float so that None entries become NaN."""
    if values is None:
        return np.empty(0, dtype=np.float64)
    return np.asarray(values, dtype=np.float64)


# ═══════════════════════════════════════════════════════════════════════
# GENOTYPE CODES
# ═══════════════════════════════════════════════════════════════════════


def check_geno(
    gen: int,
    is_observed_value: bool,
    is_x_chr: bool,
    is_female: bool,
    cross_info: Optional[Sequence[int]] = None,
) -> bool:
    """Is ``gen`` a legal code in this context?

    Args:
        gen: Observed marker call or true genotype code.
        is_observed_value: True to check against the observed-call domain
            (ObservedGenotype); False for the true-genotype domain.
        is_x_chr: Locus is on the X chromosome.
        is_female: Individual is female.
        cross_info: Unused; part of the engine's call signature.

    Returns:
        True if allowed.
    """
    if is_observed_value:
        return gen in _OBSERVED_VALUES

    if not is_x_chr or is_female:
        return 1 <= gen <= N_GENO
    return N_GENO < gen <= N_GENO_X


# ═══════════════════════════════════════════════════════════════════════
# PER-INDIVIDUAL COVARIATES
# ═══════════════════════════════════════════════════════════════════════


def check_is_female_vector(is_female, any_x_chr: bool) -> bool:
    """Check the sex vector.

    Only needed when the data include the X chromosome; in that case it
    must be present and fully observed (None / NaN count as missing).
    """
    if not any_x_chr:
        return True

    values = _as_float_array(is_female).ravel()
    if values.size == 0:
        _report("is_female not provided, but needed to handle X chromosome")
        return False

    if np.isnan(values).any():
        _report("is_female contains missing values (it shouldn't)")
        return False

    return True


def check_crossinfo(cross_info, any_x_chr: bool) -> bool:
    """Check the cross_info matrix (individuals × columns).

    Column 0 holds the number of DO generations for each individual and
    must be observed and >= 1. A 1-D input is read as that single column.
    The check does not depend on ``any_x_chr``.
    """
    ci = _as_float_array(cross_info)
    if ci.ndim == 1:
        ci = ci.reshape(-1, 1) if ci.size else ci.reshape(0, 0)

    if ci.ndim != 2 or ci.shape[1] == 0:
        _report(
            "cross_info not provided, but should at least one column, "
            "with no. generations"
        )
        return False

    n_gen = ci[:, 0]
    missing = np.isnan(n_gen)
    result = True
    if missing.any():
        result = False
        _report("cross_info has missing values (it shouldn't)")
    if (n_gen[~missing] < 1).any():
        result = False
        _report("cross_info has invalid values; no. generations should be >= 1")

    return result


# ═══════════════════════════════════════════════════════════════════════
# FOUNDER GENOTYPES
# ═══════════════════════════════════════════════════════════════════════


def check_founder_geno_size(founder_geno, n_markers: int) -> bool:
    """Founder genotypes must be an 8 × n_markers matrix."""
    fg = _as_float_array(founder_geno)
    if fg.ndim != 2:
        _report(
            f"founder_geno should be a founders x markers matrix, "
            f"got {fg.ndim} dimension(s)"
        )
        return False

    result = True
    n_fg_founders, n_fg_markers = fg.shape
    if n_fg_markers != n_markers:
        result = False
        _report("founder_geno has incorrect number of markers")
    if n_fg_founders != N_FOUNDERS:
        result = False
        _report(f"founder_geno should have {N_FOUNDERS} founders")

    return result


def check_founder_geno_values(founder_geno) -> bool:
    """Founder genotypes must be missing (0), hom-A (1) or hom-B (3)."""
    fg = _as_float_array(founder_geno)
    allowed = np.array(sorted(int(v) for v in FOUNDER_GENO_VALUES), dtype=np.float64)
    if not np.isin(fg, allowed).all():
        _report("founder_geno contains invalid values; should be in {0, 1, 3}")
        return False
    return True


def need_founder_geno() -> bool:
    """The DO emission model is defined in terms of founder genotypes."""
    return True
