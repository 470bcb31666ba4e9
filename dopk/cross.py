"""DOPKCross: the phase-known Diversity Outcross as seen by an HMM engine.

Bundles the pure functions of dopk.codec, dopk.validation and dopk.hmm
behind one object with the cross-type interface the engine expects,
binding the two model settings (strict mode, default error probability).

Usage:
    from dopk.cross import DOPKCross

    cross = DOPKCross(strict=True)
    for g in cross.possible_gen(is_x_chr=False, is_female=True):
        cross.init(g, False, True, cross_info)

The object holds no other state and can be shared across threads.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from dopk import codec, hmm, validation
from dopk.config import DOPKConfig, ModelSection


class DOPKCross:
    """Phase-known DO cross type.

    Args:
        strict: Check genotype codes on every init/emit/step call.
        error_prob: Error probability used by emit() when none is given.
    """

    crosstype = "dopk"
    phase_known = True

    def __init__(self, strict: bool = True, error_prob: float = ModelSection.error_prob):
        self.strict = strict
        self.error_prob = error_prob

    @classmethod
    def from_config(cls, config: DOPKConfig) -> "DOPKCross":
        return cls(strict=config.model.strict, error_prob=config.model.error_prob)

    def __repr__(self) -> str:
        return f"DOPKCross(strict={self.strict}, error_prob={self.error_prob})"

    # ── state space ──────────────────────────────────────────────────

    def possible_gen(self, is_x_chr: bool, is_female: bool,
                     cross_info: Optional[Sequence[int]] = None) -> np.ndarray:
        return codec.possible_gen(is_x_chr, is_female)

    def ngen(self, is_x_chr: bool) -> int:
        return codec.ngen(is_x_chr)

    def nalleles(self) -> int:
        return codec.nalleles()

    def geno2allele_matrix(self, is_x_chr: bool) -> np.ndarray:
        return hmm.geno2allele_matrix(is_x_chr)

    # ── HMM probabilities ────────────────────────────────────────────

    def init(self, true_gen: int, is_x_chr: bool, is_female: bool,
             cross_info: Optional[Sequence[int]] = None) -> float:
        return hmm.init(true_gen, is_x_chr, is_female, cross_info, strict=self.strict)

    def emit(self, obs_gen: int, true_gen: int, error_prob: Optional[float],
             founder_geno: Sequence[int], is_x_chr: bool, is_female: bool,
             cross_info: Optional[Sequence[int]] = None) -> float:
        """log Pr(obs_gen | true_gen); error_prob=None uses self.error_prob."""
        if error_prob is None:
            error_prob = self.error_prob
        return hmm.emit(obs_gen, true_gen, error_prob, founder_geno,
                        is_x_chr, is_female, cross_info, strict=self.strict)

    def step(self, gen_left: int, gen_right: int, rec_frac: float,
             is_x_chr: bool, is_female: bool, cross_info: Sequence[int]) -> float:
        return hmm.step(gen_left, gen_right, rec_frac, is_x_chr, is_female,
                        cross_info, strict=self.strict)

    def init_vector(self, is_x_chr: bool, is_female: bool,
                    cross_info: Optional[Sequence[int]] = None) -> np.ndarray:
        return hmm.init_vector(is_x_chr, is_female, cross_info)

    def emit_vector(self, obs_gen: int, error_prob: Optional[float],
                    founder_geno: Sequence[int], is_x_chr: bool, is_female: bool,
                    cross_info: Optional[Sequence[int]] = None) -> np.ndarray:
        if error_prob is None:
            error_prob = self.error_prob
        if self.strict and not validation.check_geno(obs_gen, True, is_x_chr,
                                                     is_female, cross_info):
            raise ValueError("genotype value not allowed")
        return hmm.emit_vector(obs_gen, error_prob, founder_geno,
                               is_x_chr, is_female, cross_info)

    def step_matrix(self, rec_frac: float, is_x_chr: bool, is_female: bool,
                    cross_info: Sequence[int]) -> np.ndarray:
        return hmm.step_matrix(rec_frac, is_x_chr, is_female, cross_info)

    def nrec(self, gen_left: int, gen_right: int, is_x_chr: bool, is_female: bool,
             cross_info: Optional[Sequence[int]] = None) -> float:
        return hmm.nrec(gen_left, gen_right, is_x_chr, is_female, cross_info)

    def est_rec_frac(self, gamma, is_x_chr: bool, cross_info, n_gen: int) -> float:
        return hmm.est_rec_frac(gamma, is_x_chr, cross_info, n_gen)

    # ── data checks ──────────────────────────────────────────────────
    # Bound directly so that their warnings point at the caller's line.

    check_geno = staticmethod(validation.check_geno)
    check_is_female_vector = staticmethod(validation.check_is_female_vector)
    check_crossinfo = staticmethod(validation.check_crossinfo)
    check_founder_geno_size = staticmethod(validation.check_founder_geno_size)
    check_founder_geno_values = staticmethod(validation.check_founder_geno_values)
    need_founder_geno = staticmethod(validation.need_founder_geno)
