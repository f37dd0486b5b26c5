"""Residue catalog: the fixed amino acid alphabet.

Residues are created once at import time and shared by reference between all
polymers. Masses come from ``AA_MASSES_DICT``, formulas from ``AA_FORMULAS``.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from pyteomics import mass

from .chemistry import parse_formula
from .constants import AA_FORMULAS, AA_MASSES_DICT, AA_NAMES
from .exceptions import InvalidResidueError
from .modifications import ModificationSites


@dataclass(frozen=True)
class Residue:
    """Immutable amino acid residue.

    Attributes
    ----------
    letter : str
        One-letter code
    name : str
        Full name (e.g. "Alanine")
    symbol : str
        Three-letter code (e.g. "Ala")
    formula : str
        Residue formula (amino acid minus H2O)
    monoisotopic_mass : float
        Residue mass in Daltons
    site : ModificationSites
        Site flag matched against modification masks
    """
    letter: str
    name: str
    symbol: str
    formula: str
    monoisotopic_mass: float
    site: ModificationSites = field(compare=False)
    composition: mass.Composition = field(compare=False, hash=False, repr=False)

    def __str__(self) -> str:
        return self.letter


def _build_catalog() -> Dict[str, Residue]:
    catalog = {}
    for letter, formula in AA_FORMULAS.items():
        name, symbol = AA_NAMES[letter]
        catalog[letter] = Residue(
            letter=letter,
            name=name,
            symbol=symbol,
            formula=formula,
            monoisotopic_mass=AA_MASSES_DICT[letter],
            site=ModificationSites[letter],
            composition=parse_formula(formula),
        )
    return catalog


RESIDUES: Dict[str, Residue] = _build_catalog()


def try_get_residue(letter: str) -> Optional[Residue]:
    """Look up a residue by one-letter code, None if unknown."""
    return RESIDUES.get(letter)


def get_residue(letter: str) -> Residue:
    """Look up a residue by one-letter code.

    Raises
    ------
    InvalidResidueError
        If the letter is not in the catalog
    """
    residue = RESIDUES.get(letter)
    if residue is None:
        raise InvalidResidueError(letter)
    return residue
