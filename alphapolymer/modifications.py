"""Chemical modifications and the sites they may occupy.

This module provides the ``Modification`` value type, the ``ModificationSites``
flag set describing where a modification may attach, a process-wide registry
of named modifications, and helpers for mapping search-engine style
modification strings onto polymers.

Key Features
------------
- Immutable modifications defined by name, mass delta and optional formula
- Site masks for residues, peptide termini and protein termini
- Registry of common modifications (Carbamidomethyl, Oxidation, Acetyl, ...)
- Parse modification strings from result files ("Oxidation@M" + "5")

Examples
--------
>>> oxidation = get_modification("Oxidation")
>>> oxidation.get_sites(AminoAcidPolymer("MPEPMK"))
[1, 5]

>>> mods = parse_modifications("Carbamidomethyl@C;Oxidation@M", "3;7")
>>> # Returns: [(Carbamidomethyl, 3), (Oxidation, 7)]  # 1-based positions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntFlag
from functools import cached_property
from typing import Dict, List, Optional, Tuple

from pyteomics import mass

from .chemistry import composition_to_formula, formula_mass, parse_formula
from .constants import (
    ACETYL_MASS,
    AMIDATION_MASS,
    CARBAMIDOMETHYL_MASS,
    DEAMIDATION_MASS,
    DIMETHYL_MASS,
    METHYL_MASS,
    OXIDATION_MASS,
    PHOSPHO_MASS,
)
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


# =============================================================================
# Sites
# =============================================================================

class ModificationSites(IntFlag):
    """Positions a modification is allowed to occupy.

    One bit per residue letter, plus the peptide and protein termini.
    """
    NONE = 0
    A = 1 << 0
    R = 1 << 1
    N = 1 << 2
    D = 1 << 3
    C = 1 << 4
    E = 1 << 5
    Q = 1 << 6
    G = 1 << 7
    H = 1 << 8
    I = 1 << 9
    L = 1 << 10
    K = 1 << 11
    M = 1 << 12
    F = 1 << 13
    P = 1 << 14
    S = 1 << 15
    T = 1 << 16
    W = 1 << 17
    Y = 1 << 18
    V = 1 << 19
    U = 1 << 20
    O = 1 << 21
    NPEP = 1 << 22
    PEPC = 1 << 23
    NPROT = 1 << 24
    PROTC = 1 << 25

    ANY_RESIDUE = (1 << 22) - 1
    NTERMINUS = NPEP | NPROT
    CTERMINUS = PEPC | PROTC
    TERMINI = NTERMINUS | CTERMINUS
    ALL = ANY_RESIDUE | TERMINI

    @classmethod
    def from_letters(cls, letters: str) -> "ModificationSites":
        """Combine the flags of every residue letter in ``letters``."""
        sites = cls.NONE
        for letter in letters:
            try:
                sites |= cls[letter]
            except KeyError:
                raise InvalidArgumentError(f"No modification site for residue letter {letter!r}") from None
        return sites


class Terminus(IntFlag):
    """Polymer ends: [N]-PEPTIDE-[C]."""
    N = 1
    C = 2
    BOTH = N | C


# =============================================================================
# Modification
# =============================================================================

@dataclass(frozen=True)
class Modification:
    """Mass/formula delta attachable to a polymer.

    Two modifications are equal when name, mass and formula agree; the site
    mask is not part of the identity.

    Attributes
    ----------
    name : str
        Name written between brackets in annotated sequences
    monoisotopic_mass : float
        Mass delta in Daltons
    formula : str, optional
        Formula delta in Hill order, None if only the mass is known
    sites : ModificationSites
        Where the modification may attach
    """
    name: str
    monoisotopic_mass: float
    formula: Optional[str] = None
    sites: ModificationSites = field(default=ModificationSites.NONE, compare=False)

    @classmethod
    def from_formula(
        cls,
        formula: str,
        name: Optional[str] = None,
        sites: ModificationSites = ModificationSites.NONE,
    ) -> "Modification":
        """Build a modification from a formula string, mass computed from NIST tables."""
        composition = parse_formula(formula)
        return cls(
            name=name if name is not None else formula,
            monoisotopic_mass=formula_mass(composition),
            formula=composition_to_formula(composition),
            sites=sites,
        )

    @classmethod
    def from_mass(
        cls,
        monoisotopic_mass: float,
        sites: ModificationSites = ModificationSites.NONE,
    ) -> "Modification":
        """Build a mass-only modification named by its signed mass, e.g. '+15.9949'."""
        monoisotopic_mass = float(monoisotopic_mass)
        return cls(name=f"{monoisotopic_mass:+}", monoisotopic_mass=monoisotopic_mass, sites=sites)

    @property
    def has_formula(self) -> bool:
        return self.formula is not None

    @cached_property
    def composition(self) -> Optional[mass.Composition]:
        # Shared between callers, treat as read-only
        if self.formula is None:
            return None
        return parse_formula(self.formula) if self.formula else mass.Composition()

    def get_sites(self, polymer) -> List[int]:
        """Slot indices this modification may occupy on ``polymer``.

        Slot 0 is the N-terminus, slots 1..N are residues and N+1 is the
        C-terminus. Protein-terminal sites only count when the polymer end
        is also the end of the protein it came from.

        Parameters
        ----------
        polymer : AminoAcidPolymer
            Polymer to inspect

        Returns
        -------
        sites : List[int]
            Ascending slot indices (empty when nothing matches)
        """
        sites = []
        mask = self.sites

        if mask & ModificationSites.NPEP or (
            mask & ModificationSites.NPROT and polymer.is_protein_n_terminal
        ):
            sites.append(0)

        if mask & ModificationSites.ANY_RESIDUE:
            for i, residue in enumerate(polymer.residues, start=1):
                if mask & residue.site:
                    sites.append(i)

        if mask & ModificationSites.PEPC or (
            mask & ModificationSites.PROTC and polymer.is_protein_c_terminal
        ):
            sites.append(len(polymer) + 1)

        return sites

    def __str__(self) -> str:
        return self.name


# =============================================================================
# Named Modification Registry
# =============================================================================

CARBAMIDOMETHYL = Modification("Carbamidomethyl", CARBAMIDOMETHYL_MASS, "C2H3NO", ModificationSites.C)
OXIDATION = Modification("Oxidation", OXIDATION_MASS, "O", ModificationSites.M)
ACETYL = Modification("Acetyl", ACETYL_MASS, "C2H2O", ModificationSites.NTERMINUS | ModificationSites.K)
PHOSPHO = Modification(
    "Phospho", PHOSPHO_MASS, "HO3P",
    ModificationSites.S | ModificationSites.T | ModificationSites.Y,
)
DEAMIDATION = Modification("Deamidation", DEAMIDATION_MASS, "H-1N-1O", ModificationSites.N | ModificationSites.Q)
AMIDATED = Modification("Amidated", AMIDATION_MASS, "HNO-1", ModificationSites.CTERMINUS)
METHYL = Modification("Methyl", METHYL_MASS, "CH2", ModificationSites.K | ModificationSites.R)
DIMETHYL = Modification(
    "Dimethyl", DIMETHYL_MASS, "C2H4",
    ModificationSites.K | ModificationSites.R | ModificationSites.NPEP,
)

_MODIFICATIONS: Dict[str, Modification] = {
    mod.name: mod
    for mod in (CARBAMIDOMETHYL, OXIDATION, ACETYL, PHOSPHO, DEAMIDATION, AMIDATED, METHYL, DIMETHYL)
}


def register_modification(modification: Modification, overwrite: bool = False) -> None:
    """Add a named modification to the process-wide registry.

    Raises
    ------
    InvalidArgumentError
        If the name is taken by a different modification and ``overwrite`` is False
    """
    existing = _MODIFICATIONS.get(modification.name)
    if existing is not None and existing != modification and not overwrite:
        raise InvalidArgumentError(f"Modification name already registered: {modification.name}")
    _MODIFICATIONS[modification.name] = modification


def try_get_modification(name: str) -> Optional[Modification]:
    """Look up a registered modification, None if unknown."""
    return _MODIFICATIONS.get(name)


def get_modification(name: str) -> Modification:
    """Look up a registered modification by name."""
    modification = _MODIFICATIONS.get(name)
    if modification is None:
        raise InvalidArgumentError(f"Unknown modification: {name}")
    return modification


def registered_modifications() -> List[Modification]:
    return list(_MODIFICATIONS.values())


# =============================================================================
# Modification String Parsing
# =============================================================================

def parse_modifications(mods: str, mod_sites: str) -> List[Tuple[Modification, int]]:
    """Parse modification strings into (modification, position) tuples.

    Parses modification strings from proteomics result files (e.g. MaxQuant,
    AlphaDIA) into registered ``Modification`` objects.

    Parameters
    ----------
    mods : str
        Modification string, e.g., "Carbamidomethyl@C;Oxidation@M"
        Multiple modifications separated by semicolons
    mod_sites : str
        Modification sites (1-based positions), e.g., "3;6"
        Position 0 denotes the N-terminus

    Returns
    -------
    List[Tuple[Modification, int]]
        List of (modification, position) tuples with 1-based positions

    Examples
    --------
    >>> parse_modifications("Oxidation@M", "5")
    [(Modification(name='Oxidation', ...), 5)]

    >>> parse_modifications("", "")
    []

    Notes
    -----
    - Handles byte strings (from pandas/numpy)
    - Skips malformed entries and unknown modification names
    """
    if not mods:
        return []

    mod_list = mods.split(";")
    site_list = str(mod_sites).split(";")

    result = []
    for mod, site in zip(mod_list, site_list):
        mod = mod.strip()
        site = str(site).strip()

        # Handle byte strings from pandas/numpy
        if site.startswith("b'") and site.endswith("'"):
            site = site[2:-1]

        if "@" not in mod or not site.isdigit():
            continue

        name = mod.split("@")[0]
        modification = try_get_modification(name)
        if modification is None:
            logger.warning(f"Skipping unknown modification '{name}' at site {site}")
            continue
        result.append((modification, int(site)))

    return result


def apply_modifications(polymer, modifications: List[Tuple[Modification, int]]) -> None:
    """Place parsed (modification, position) pairs onto ``polymer``.

    Position 0 goes to the N-terminus, everything else through the
    positional setter (1-based).
    """
    for modification, position in modifications:
        if position == 0:
            polymer.n_terminus_modification = modification
        else:
            polymer.set_modification(modification, position)
