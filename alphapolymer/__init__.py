"""AlphaPolymer - Amino acid polymer modelling for proteomics.

This library models peptides and proteins as residues plus per-site
modification slots, digests them with configurable proteases, and enumerates
every distinct placement of a set of modifications (isoforms).

Numba-compiled kernels handle cleavage-site scanning, plain-sequence masses
and batch unranking of modification combinations; chemical formulas are
handled with pyteomics.
"""

__version__ = "0.1.0"

from alphapolymer import constants
from alphapolymer import database
from alphapolymer import proteomics

from alphapolymer.exceptions import (
    AlphaPolymerError,
    ParseError,
    InvalidResidueError,
    UnterminatedModificationError,
    UnresolvedModificationError,
    PositionOutOfRangeError,
    InvalidArgumentError,
)
from alphapolymer.residues import Residue, RESIDUES, get_residue, try_get_residue
from alphapolymer.modifications import (
    Modification,
    ModificationSites,
    Terminus,
    get_modification,
    try_get_modification,
    register_modification,
    parse_modifications,
    apply_modifications,
)
from alphapolymer.proteomics import (
    AminoAcidPolymer,
    Peptide,
    parse,
    subrange,
    Fragment,
    FragmentType,
    generate_isoforms,
    generate_isoforms_of,
    generate_isoforms_range,
    count_isoforms,
)
from alphapolymer.database import (
    Protease,
    DigestionParams,
    digest,
    digest_sequence,
    get_protease,
)

__all__ = [
    # Submodules
    "constants",
    "database",
    "proteomics",

    # Errors
    "AlphaPolymerError",
    "ParseError",
    "InvalidResidueError",
    "UnterminatedModificationError",
    "UnresolvedModificationError",
    "PositionOutOfRangeError",
    "InvalidArgumentError",

    # Residues and modifications
    "Residue",
    "RESIDUES",
    "get_residue",
    "try_get_residue",
    "Modification",
    "ModificationSites",
    "Terminus",
    "get_modification",
    "try_get_modification",
    "register_modification",
    "parse_modifications",
    "apply_modifications",

    # Polymers
    "AminoAcidPolymer",
    "Peptide",
    "parse",
    "subrange",

    # Fragments
    "Fragment",
    "FragmentType",

    # Isoforms
    "generate_isoforms",
    "generate_isoforms_of",
    "generate_isoforms_range",
    "count_isoforms",

    # Digestion
    "Protease",
    "DigestionParams",
    "digest",
    "digest_sequence",
    "get_protease",
]
