"""Core constants and enumerations for the phase-known DO cross model.

This module is the SINGLE SOURCE OF TRUTH for:
  - Founder / genotype counts (N_FOUNDERS, N_GENO, N_GENO_X)
  - ObservedGenotype, FounderGenotype, ChrType enumerations
  - The pre-CC progenitor mixture (PRECC_GEN, PRECC_ALPHA)

All modules import these from here. No other module hard-codes 8 or 64.

References:
  - Svenson et al. (2012) Genetics 190:437 (DO founding from 144 pre-CC mice)
  - Broman (2012) G3 2:199 (haplotype probabilities in the DO)
"""

from enum import IntEnum


# ═══════════════════════════════════════════════════════════════════════
# STATE SPACE SIZES
# ═══════════════════════════════════════════════════════════════════════

N_FOUNDERS = 8                         # A/J, B6, 129, NOD, NZO, CAST, PWK, WSB
N_GENO = N_FOUNDERS * N_FOUNDERS       # 64 ordered (phase-known) founder pairs
N_GENO_X = N_GENO + N_FOUNDERS         # 72 = female block + hemizygous male block


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class ObservedGenotype(IntEnum):
    """Marker calls on a DO individual.

    NOT_A / NOT_B come from platforms that only resolve a dominant call:
      NOT_A = "B or het", NOT_B = "A or het".
    """
    MISSING = 0
    A       = 1   # homozygous A
    H       = 2   # heterozygous
    B       = 3   # homozygous B
    NOT_B   = 4   # A or H
    NOT_A   = 5   # B or H


class FounderGenotype(IntEnum):
    """Marker calls on the inbred founder strains.

    A het call on an inbred founder cannot be resolved to an allele, so
    emission treats H the same as MISSING.
    """
    MISSING = 0
    A       = 1
    H       = 2
    B       = 3


# Allowed entries of a founder genotype matrix. Founders are inbred, so a
# het call (H) is a genotyping artefact and is rejected up front.
FOUNDER_GENO_VALUES = frozenset({FounderGenotype.MISSING, FounderGenotype.A, FounderGenotype.B})


class ChrType(IntEnum):
    """Chromosome / sex combination that selects a model variant."""
    AUTOSOME = 0
    FEMALE_X = 1
    MALE_X   = 2

    @classmethod
    def from_flags(cls, is_x_chr: bool, is_female: bool) -> "ChrType":
        """Map the (is_x_chr, is_female) flags used by the HMM engine."""
        if not is_x_chr:
            return cls.AUTOSOME
        return cls.FEMALE_X if is_female else cls.MALE_X

    @property
    def n_states(self) -> int:
        """Number of genotype states for this variant (64 or 8)."""
        return N_FOUNDERS if self == ChrType.MALE_X else N_GENO


# ═══════════════════════════════════════════════════════════════════════
# PRE-CC PROGENITOR MIXTURE
# ═══════════════════════════════════════════════════════════════════════

# The DO was initiated from 144 partially inbred pre-CC mice taken at
# sib-mating generations G2:F4 .. G2:F12 (Svenson et al. 2012).
PRECC_GEN = (4, 5, 6, 7, 8, 9, 10, 11, 12)
PRECC_ALPHA = tuple(
    n / 144.0 for n in (21, 64, 24, 10, 5, 9, 5, 3, 3)
)
