"""Physical constants, residue tables and modification masses.

This module provides the constants used throughout AlphaPolymer: residue
formulas and monoisotopic masses, the default terminal groups, common
modification masses and default digestion settings. Values are sourced from
NIST or established proteomics standards.

Residue masses are provided in both dictionary and ord()-indexed array
formats for compatibility with both standard Python and Numba JIT-compiled
code.

Sources
-------
- NIST physical constants: https://physics.nist.gov/cgi-bin/cuu/Value
- IUPAC amino acid masses: https://www.unimod.org/masses.html
- Unimod modification masses: https://www.unimod.org/modifications_list.php
"""

import numpy as np

# =============================================================================
# Fundamental Physical Constants (NIST values)
# =============================================================================

# Proton mass (NOT hydrogen atom mass!)
# Source: NIST 2018 CODATA
PROTON_MASS = 1.007276466622  # Da

# Water mass (H2O)
# Calculated: 2*1.007825 + 15.994915 = 18.010564684
H2O_MASS = 18.010564684  # Da

# Ammonia mass (NH3)
# Calculated: 14.003074 + 3*1.007825 = 17.026549101
NH3_MASS = 17.026549101  # Da

# Carbon monoxide mass (CO)
# Calculated: 12.000000 + 15.994915 = 27.994914620
CO_MASS = 27.994914620  # Da

# =============================================================================
# Ion Type Offsets
# =============================================================================

# Singly protonated fragment m/z = sum of residue masses + offset

# b-ions: [M + H]+
B_ION_OFFSET = PROTON_MASS

# y-ions: [M + H2O + H]+
Y_ION_OFFSET = H2O_MASS + PROTON_MASS

# a-ions: b-ions minus CO
A_ION_OFFSET = PROTON_MASS - CO_MASS

# c-ions: b-ions plus NH3
C_ION_OFFSET = PROTON_MASS + NH3_MASS

# =============================================================================
# Terminal Groups
# =============================================================================

# Unmodified polymer: H-[residues]-OH
# [N]-PEPTIDE-[C]
DEFAULT_N_TERMINUS_FORMULA = "H"
DEFAULT_C_TERMINUS_FORMULA = "OH"

# =============================================================================
# Amino Acid Residues
# =============================================================================

# Residue formulas (residue form, i.e. the free amino acid minus H2O)
AA_FORMULAS = {
    'A': 'C3H5NO',
    'R': 'C6H12N4O',
    'N': 'C4H6N2O2',
    'D': 'C4H5NO3',
    'C': 'C3H5NOS',
    'E': 'C5H7NO3',
    'Q': 'C5H8N2O2',
    'G': 'C2H3NO',
    'H': 'C6H7N3O',
    'I': 'C6H11NO',
    'L': 'C6H11NO',
    'K': 'C6H12N2O',
    'M': 'C5H9NOS',
    'F': 'C9H9NO',
    'P': 'C5H7NO',
    'S': 'C3H5NO2',
    'T': 'C4H7NO2',
    'W': 'C11H10N2O',
    'Y': 'C9H9NO2',
    'V': 'C5H9NO',
    'U': 'C3H5NOSe',  # Selenocysteine
    'O': 'C12H19N3O2',  # Pyrrolysine
}

# Standard 20 amino acids plus U/O
# Source: IUPAC/Unimod mass tables
# Values are monoisotopic masses of residues (not including N/C terminals)
AA_MASSES_DICT = {
    'A': 71.037114,   # Alanine
    'R': 156.101111,  # Arginine
    'N': 114.042927,  # Asparagine
    'D': 115.026943,  # Aspartic acid
    'C': 103.009185,  # Cysteine (unmodified)
    'E': 129.042593,  # Glutamic acid
    'Q': 128.058578,  # Glutamine
    'G': 57.021464,   # Glycine
    'H': 137.058912,  # Histidine
    'I': 113.084064,  # Isoleucine
    'L': 113.084064,  # Leucine
    'K': 128.094963,  # Lysine
    'M': 131.040485,  # Methionine
    'F': 147.068414,  # Phenylalanine
    'P': 97.052764,   # Proline
    'S': 87.032028,   # Serine
    'T': 101.047679,  # Threonine
    'W': 186.079313,  # Tryptophan
    'Y': 163.063329,  # Tyrosine
    'V': 99.068414,   # Valine
    'U': 150.953636,  # Selenocysteine
    'O': 237.147727,  # Pyrrolysine
}

AA_NAMES = {
    'A': ('Alanine', 'Ala'),
    'R': ('Arginine', 'Arg'),
    'N': ('Asparagine', 'Asn'),
    'D': ('Aspartic Acid', 'Asp'),
    'C': ('Cysteine', 'Cys'),
    'E': ('Glutamic Acid', 'Glu'),
    'Q': ('Glutamine', 'Gln'),
    'G': ('Glycine', 'Gly'),
    'H': ('Histidine', 'His'),
    'I': ('Isoleucine', 'Ile'),
    'L': ('Leucine', 'Leu'),
    'K': ('Lysine', 'Lys'),
    'M': ('Methionine', 'Met'),
    'F': ('Phenylalanine', 'Phe'),
    'P': ('Proline', 'Pro'),
    'S': ('Serine', 'Ser'),
    'T': ('Threonine', 'Thr'),
    'W': ('Tryptophan', 'Trp'),
    'Y': ('Tyrosine', 'Tyr'),
    'V': ('Valine', 'Val'),
    'U': ('Selenocysteine', 'Sec'),
    'O': ('Pyrrolysine', 'Pyl'),
}

# =============================================================================
# ord()-Indexed Arrays for Numba
# =============================================================================

# Access via: AA_MASSES[ord('A')] → 71.037114
# Unknown letters map to 0.0
AA_MASSES = np.zeros(256, dtype=np.float64)

for aa, mass in AA_MASSES_DICT.items():
    AA_MASSES[ord(aa)] = mass

# =============================================================================
# Common Modification Masses
# =============================================================================

# Carbamidomethylation of Cysteine (Unimod:4)
# C2H3NO: 57.021464 Da
CARBAMIDOMETHYL_MASS = 57.021464

# Oxidation of Methionine (Unimod:35)
# O: 15.994915 Da
OXIDATION_MASS = 15.994915

# Acetylation (Protein N-term, Unimod:1)
# C2H2O: 42.010565 Da
ACETYL_MASS = 42.010565

# Phosphorylation (Unimod:21)
# HPO3: 79.966331 Da
PHOSPHO_MASS = 79.966331

# Deamidation (Unimod:7)
# NH → O: 0.984016 Da
DEAMIDATION_MASS = 0.984016

# C-terminal amidation (Unimod:2)
# OH → NH2: -0.984016 Da
AMIDATION_MASS = -0.984016

# Methylation (Unimod:34)
# CH2: 14.015650 Da
METHYL_MASS = 14.015650

# Dimethylation (Unimod:36)
# C2H4: 28.031300 Da
DIMETHYL_MASS = 28.031300

# =============================================================================
# Sequence Notation
# =============================================================================

# Bracket token promoting every C/N of the preceding residue to 13C/15N
HEAVY_MARKER = "#"

# =============================================================================
# Default Digestion Settings
# =============================================================================

DEFAULT_MIN_LENGTH = 1
DEFAULT_MAX_MISSED_CLEAVAGES = 0

# Typical bounds for tryptic peptides in a search space
DATABASE_MIN_LENGTH = 7
DATABASE_MAX_LENGTH = 35
DATABASE_MISSED_CLEAVAGES = 2
