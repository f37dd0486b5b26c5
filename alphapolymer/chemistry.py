"""Chemical formula handling on top of pyteomics.

Formulas are stored as plain strings on immutable values and converted to
``pyteomics.mass.Composition`` objects when they need to be summed. The
string form is always written in Hill order (C, H, then alphabetical) with
isotopes in pyteomics bracket notation, e.g. ``C[13]6H12N[15]2O``.

Examples
--------
>>> comp = parse_formula("C2H3NO")
>>> round(formula_mass(comp), 6)
57.021464
>>> composition_to_formula(comp + parse_formula("H-1"))
'C2H2NO'
"""

import re
from typing import Optional

from pyteomics import mass
from pyteomics.auxiliary import PyteomicsError

from .exceptions import InvalidArgumentError

# Element (optionally with isotope number) followed by an optional signed count
_FORMULA_PATTERN = re.compile(r'^(?:[A-Z][a-z]*(?:\[\d+\])?-?\d*)+$')
_ATOM_PATTERN = re.compile(r'([A-Z][a-z]*)(?:\[(\d+)\])?')


def is_valid_formula(formula: str) -> bool:
    """Check that ``formula`` is a formula built from known elements.

    Parameters
    ----------
    formula : str
        Candidate formula, e.g. ``"C2H3NO"`` or ``"H-1N-1O"``

    Returns
    -------
    valid : bool
        True if every atom is a known element (and known isotope)
    """
    if not formula or not _FORMULA_PATTERN.match(formula):
        return False

    for element, isotope in _ATOM_PATTERN.findall(formula):
        isotopes = mass.nist_mass.get(element)
        if isotopes is None:
            return False
        if isotope and int(isotope) not in isotopes:
            return False
    return True


def try_parse_formula(formula: str) -> Optional[mass.Composition]:
    """Parse a formula string, returning None if it is not a formula."""
    if not is_valid_formula(formula):
        return None
    try:
        return mass.Composition(formula=formula)
    except PyteomicsError:
        return None


def parse_formula(formula: str) -> mass.Composition:
    """Parse a formula string into a Composition.

    Raises
    ------
    InvalidArgumentError
        If the string is not a valid chemical formula
    """
    composition = try_parse_formula(formula)
    if composition is None:
        raise InvalidArgumentError(f"Not a valid chemical formula: {formula!r}")
    return composition


def formula_mass(composition: mass.Composition) -> float:
    """Monoisotopic mass of a composition (may be negative for deltas)."""
    if not composition:
        return 0.0
    return mass.calculate_mass(composition=composition)


def _hill_key(atom: str):
    element, isotope = _ATOM_PATTERN.match(atom).groups()
    if element == 'C':
        rank = 0
    elif element == 'H':
        rank = 1
    else:
        rank = 2
    return rank, element, int(isotope) if isotope else 0


def composition_to_formula(composition: mass.Composition) -> str:
    """Write a composition as a Hill-ordered formula string.

    Zero counts are dropped and a count of one is implicit.
    """
    parts = []
    for atom in sorted(composition, key=_hill_key):
        count = composition[atom]
        if count == 0:
            continue
        parts.append(atom if count == 1 else f"{atom}{count}")
    return "".join(parts)


def heavy_delta(composition: mass.Composition) -> mass.Composition:
    """Delta promoting every 12C to 13C and every 14N to 15N.

    Only the light isotopes present in ``composition`` are promoted; atoms
    that are already labelled are left alone.
    """
    delta = mass.Composition()
    carbons = composition.get('C', 0)
    nitrogens = composition.get('N', 0)
    if carbons:
        delta['C'] = -carbons
        delta['C[13]'] = carbons
    if nitrogens:
        delta['N'] = -nitrogens
        delta['N[15]'] = nitrogens
    return delta
