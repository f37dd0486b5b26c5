"""Pytest configuration for AlphaPolymer tests.

This module provides common fixtures and configuration for all tests.
"""

import numpy as np
import pytest


@pytest.fixture
def simple_peptide():
    """Simple peptide for basic tests."""
    return "PEPTIDE"


@pytest.fixture
def tryptic_peptides():
    """Collection of typical tryptic peptides."""
    return [
        "PEPTIDE",
        "ACDEK",
        "TESTPEPTIDER",
        "YGGFMTSEK",
        "LGEHNIDVLEGNEQFINAAK",
    ]


@pytest.fixture
def aa_masses_dict():
    """Amino acid masses dictionary."""
    from alphapolymer.constants import AA_MASSES_DICT
    return AA_MASSES_DICT


@pytest.fixture
def h2o_mass():
    """Water mass constant."""
    from alphapolymer.constants import H2O_MASS
    return H2O_MASS


@pytest.fixture
def phospho():
    """Phosphorylation (S/T/Y)."""
    from alphapolymer.modifications import get_modification
    return get_modification("Phospho")


@pytest.fixture
def oxidation():
    """Oxidation (M)."""
    from alphapolymer.modifications import get_modification
    return get_modification("Oxidation")


@pytest.fixture
def protein():
    """Small protein with one tryptic site blocked by proline."""
    from alphapolymer.proteomics import AminoAcidPolymer
    return AminoAcidPolymer("MAAKPEPTIDERSAMPLESTYK")


# Random seed for reproducibility
@pytest.fixture(scope="session", autouse=True)
def set_random_seed():
    """Set random seed for reproducible tests."""
    np.random.seed(42)
