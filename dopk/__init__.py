"""dopk: phase-known Diversity Outcross cross model for genotype HMMs.

Supplies the per-locus pieces a generic HMM engine needs to reconstruct
founder mosaics in 8-founder Diversity Outcross (DO) mice:
  - Genotype state space (64 ordered founder pairs; 8 states on a male X)
  - Initial, emission and transition log-probabilities
  - Recombinant-haplotype probabilities averaged over the pre-CC design
  - Pre-flight checks on founder genotypes, sex and cross information
"""

__version__ = "0.1.0"
