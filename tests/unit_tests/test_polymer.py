"""Unit tests for AminoAcidPolymer parsing, state and mutation."""

import pytest

from alphapolymer.constants import AA_MASSES_DICT, H2O_MASS, OXIDATION_MASS, PHOSPHO_MASS
from alphapolymer.exceptions import (
    InvalidArgumentError,
    InvalidResidueError,
    ParseError,
    PositionOutOfRangeError,
    UnresolvedModificationError,
    UnterminatedModificationError,
)
from alphapolymer.modifications import Modification, Terminus, get_modification, register_modification
from alphapolymer.proteomics import AminoAcidPolymer, Peptide, parse, subrange


def bare_mass(sequence):
    return sum(AA_MASSES_DICT[aa] for aa in sequence) + H2O_MASS


class TestParsing:
    """Test sequence notation parsing."""

    def test_plain_sequence(self, simple_peptide):
        polymer = AminoAcidPolymer(simple_peptide)
        assert polymer.sequence == "PEPTIDE"
        assert str(polymer) == "PEPTIDE"
        assert len(polymer) == 7
        assert polymer.modifications == (None,) * 9

    def test_empty_sequence(self):
        polymer = AminoAcidPolymer("")
        assert len(polymer) == 0
        assert polymer.sequence == ""
        assert abs(polymer.monoisotopic_mass - H2O_MASS) < 1e-6

    def test_spaces_ignored(self):
        assert AminoAcidPolymer("PEP TIDE") == AminoAcidPolymer("PEPTIDE")

    def test_residue_modification(self, oxidation):
        polymer = parse("PEPM[Oxidation]TIDE")
        assert polymer.sequence == "PEPMTIDE"
        assert polymer.get_modification(4) == oxidation
        assert str(polymer) == "PEPM[Oxidation]TIDE"

    def test_terminal_modifications(self):
        polymer = AminoAcidPolymer("[Acetyl]-PEPTIDE-[Amidated]")
        assert polymer.n_terminus_modification == get_modification("Acetyl")
        assert polymer.c_terminus_modification == get_modification("Amidated")
        assert polymer.get_modification(0) == get_modification("Acetyl")
        assert polymer.get_modification(8) == get_modification("Amidated")
        assert str(polymer) == "[Acetyl]-PEPTIDE-[Amidated]"

    def test_n_terminal_without_dash(self):
        assert AminoAcidPolymer("[Acetyl]PEPTIDE") == AminoAcidPolymer("[Acetyl]-PEPTIDE")

    def test_formula_token(self):
        polymer = AminoAcidPolymer("PEPC[C2H3NO]K")
        mod = polymer.get_modification(4)
        assert mod.name == "C2H3NO"
        assert mod.formula == "C2H3NO"
        assert abs(mod.monoisotopic_mass - 57.021464) < 1e-5

    def test_mass_token(self):
        polymer = AminoAcidPolymer("PEPM[+15.995]K")
        mod = polymer.get_modification(4)
        assert mod.name == "+15.995"
        assert mod.formula is None
        assert polymer.composition is None
        assert polymer.chemical_formula is None
        assert abs(polymer.monoisotopic_mass - (bare_mass("PEPMK") + 15.995)) < 1e-6

    def test_negative_mass_token(self):
        polymer = AminoAcidPolymer("PEPK[-1.5]")
        assert polymer.get_modification(4).monoisotopic_mass == -1.5

    def test_named_before_formula(self):
        """A registered name wins over a formula reading of the same token."""
        named = Modification("CO", 99.0)
        register_modification(named)
        polymer = AminoAcidPolymer("PM[CO]K")
        assert polymer.get_modification(2) is named
        assert polymer.composition is None

    def test_heavy_marker(self):
        polymer = AminoAcidPolymer("PEPK[#]")
        heavy = polymer.get_modification(4)
        assert heavy.name == "#"
        assert heavy.formula == "C-6C[13]6N-2N[15]2"
        assert abs(polymer.monoisotopic_mass - bare_mass("PEPK") - 8.014199) < 1e-4
        assert str(polymer) == "PEPK[#]"

    def test_heavy_marker_depends_on_residue(self):
        polymer = AminoAcidPolymer("K[#]R[#]")
        assert polymer.get_modification(1) != polymer.get_modification(2)

    def test_round_trip(self):
        texts = [
            "PEPTIDE",
            "[Acetyl]-PEPC[Carbamidomethyl]TM[Oxidation]IDEK[#]-[Amidated]",
            "PEPC[C2H3NO]K",
            "PEPM[+15.995]K",
            "S[Phospho]T[Phospho]Y[Phospho]",
        ]
        for text in texts:
            polymer = AminoAcidPolymer(text)
            assert str(polymer) == text
            assert AminoAcidPolymer(str(polymer)) == polymer


class TestParseErrors:
    """Test malformed input is rejected."""

    def test_invalid_residue(self):
        with pytest.raises(InvalidResidueError) as excinfo:
            AminoAcidPolymer("PEPXTIDE")
        assert excinfo.value.character == "X"
        assert excinfo.value.position == 3

    def test_lowercase_rejected(self):
        with pytest.raises(InvalidResidueError):
            AminoAcidPolymer("peptide")

    def test_unterminated(self):
        with pytest.raises(UnterminatedModificationError) as excinfo:
            AminoAcidPolymer("PEPM[Oxidation")
        assert excinfo.value.position == 4

    def test_unresolved(self):
        with pytest.raises(UnresolvedModificationError) as excinfo:
            AminoAcidPolymer("PEP[NotAMod]")
        assert excinfo.value.token == "NotAMod"

    def test_heavy_marker_at_terminus_unresolved(self):
        with pytest.raises(UnresolvedModificationError):
            AminoAcidPolymer("[#]-PEPTIDE")

    def test_bare_dash(self):
        with pytest.raises(InvalidResidueError):
            AminoAcidPolymer("PEP-TIDE")

    def test_text_after_c_terminus(self):
        with pytest.raises(InvalidResidueError):
            AminoAcidPolymer("PEPTIDE-[Amidated]K")

    def test_errors_are_value_errors(self):
        """Callers catching ValueError also see parse failures."""
        with pytest.raises(ParseError):
            AminoAcidPolymer("PEP[")
        with pytest.raises(ValueError):
            AminoAcidPolymer("PEP[")


class TestDerivedValues:
    """Test mass, composition and text forms."""

    def test_mass_unmodified(self, tryptic_peptides):
        for peptide in tryptic_peptides:
            assert abs(AminoAcidPolymer(peptide).monoisotopic_mass - bare_mass(peptide)) < 1e-5

    def test_mass_additivity(self):
        polymer = AminoAcidPolymer("[Acetyl]-PEPC[Carbamidomethyl]M[Oxidation]K-[Amidated]")
        expected = (
            bare_mass("PEPCMK")
            + get_modification("Acetyl").monoisotopic_mass
            + get_modification("Carbamidomethyl").monoisotopic_mass
            + get_modification("Oxidation").monoisotopic_mass
            + get_modification("Amidated").monoisotopic_mass
        )
        assert abs(polymer.monoisotopic_mass - expected) < 1e-5

    def test_chemical_formula(self, simple_peptide):
        assert AminoAcidPolymer(simple_peptide).chemical_formula == "C34H53N7O15"

    def test_chemical_formula_with_modification(self):
        assert AminoAcidPolymer("M[Oxidation]").chemical_formula == "C5H11NO3S"

    def test_composition_is_a_copy(self):
        polymer = AminoAcidPolymer("PEPTIDE")
        composition = polymer.composition
        composition['C'] += 100
        assert polymer.chemical_formula == "C34H53N7O15"

    def test_queries_are_idempotent(self):
        polymer = AminoAcidPolymer("PEPM[Oxidation]K")
        assert polymer.monoisotopic_mass == polymer.monoisotopic_mass
        assert polymer.chemical_formula == polymer.chemical_formula
        assert str(polymer) == str(polymer)

    def test_get_residue(self):
        polymer = AminoAcidPolymer("PEK")
        assert polymer.get_residue(3).letter == "K"
        with pytest.raises(PositionOutOfRangeError):
            polymer.get_residue(0)

    def test_residue_count(self):
        polymer = AminoAcidPolymer("PEPTIDE")
        assert polymer.residue_count() == 7
        assert polymer.residue_count("P") == 2
        assert polymer.residue_count(polymer.get_residue(2)) == 2


class TestMutation:
    """Test setters, no-op writes and cache invalidation."""

    def test_set_modification(self, phospho):
        polymer = AminoAcidPolymer("PEPTIDE")
        before = polymer.monoisotopic_mass
        polymer.set_modification(phospho, 4)
        assert str(polymer) == "PEPT[Phospho]IDE"
        assert abs(polymer.monoisotopic_mass - before - PHOSPHO_MASS) < 1e-6

    def test_clear_modification(self, phospho):
        polymer = AminoAcidPolymer("PEPT[Phospho]IDE")
        polymer.set_modification(None, 4)
        assert polymer == AminoAcidPolymer("PEPTIDE")

    def test_equal_write_is_noop(self, oxidation):
        polymer = AminoAcidPolymer("PEPMTIDE")
        polymer.set_modification(oxidation, 4)
        mass = polymer.monoisotopic_mass
        cached = polymer._computed

        polymer.set_modification(oxidation, 4)
        assert polymer._computed is cached

        # A different object with equal value is also a no-op
        polymer.set_modification(Modification("Oxidation", OXIDATION_MASS, "O"), 4)
        assert polymer._computed is cached
        assert polymer.monoisotopic_mass == mass

    def test_effective_write_invalidates(self, oxidation, phospho):
        polymer = AminoAcidPolymer("PEPMTIDE")
        polymer.set_modification(oxidation, 4)
        _ = polymer.monoisotopic_mass
        polymer.set_modification(phospho, 5)
        assert polymer._computed is None
        assert str(polymer) == "PEPM[Oxidation]T[Phospho]IDE"

    def test_position_out_of_range(self, phospho):
        polymer = AminoAcidPolymer("PEPTIDE")
        with pytest.raises(PositionOutOfRangeError):
            polymer.set_modification(phospho, 0)
        with pytest.raises(PositionOutOfRangeError):
            polymer.set_modification(phospho, 8)
        with pytest.raises(IndexError):
            polymer.get_modification(9)

    def test_set_modification_at_letter(self, oxidation):
        polymer = AminoAcidPolymer("MPEPMK")
        assert polymer.set_modification_at_letter(oxidation, "M") == 2
        assert str(polymer) == "M[Oxidation]PEPM[Oxidation]K"
        assert polymer.set_modification_at_letter(oxidation, "W") == 0

    def test_set_modification_at_residue(self):
        polymer = AminoAcidPolymer("ACDC")
        cam = get_modification("Carbamidomethyl")
        assert polymer.set_modification_at_residue(cam, polymer.get_residue(2)) == 2
        assert str(polymer) == "AC[Carbamidomethyl]DC[Carbamidomethyl]"

    def test_set_modification_at_positions_is_atomic(self, phospho):
        polymer = AminoAcidPolymer("STYK")
        with pytest.raises(PositionOutOfRangeError):
            polymer.set_modification_at_positions(phospho, [1, 2, 10])
        assert polymer == AminoAcidPolymer("STYK")

        assert polymer.set_modification_at_positions(phospho, [1, 3]) == 2
        assert str(polymer) == "S[Phospho]TY[Phospho]K"

    def test_terminus_modifications(self):
        polymer = AminoAcidPolymer("PEPTIDE")
        acetyl = get_modification("Acetyl")
        polymer.set_terminus_modification(acetyl, Terminus.BOTH)
        assert str(polymer) == "[Acetyl]-PEPTIDE-[Acetyl]"

        polymer.clear_terminus_modification(Terminus.C)
        assert str(polymer) == "[Acetyl]-PEPTIDE"

        polymer.clear_terminus_modification()
        assert polymer == AminoAcidPolymer("PEPTIDE")

    def test_terminus_groups(self):
        polymer = AminoAcidPolymer("PEPTIDE")
        amide = Modification.from_formula("NH2")
        polymer.c_terminus = amide
        assert polymer.c_terminus == amide
        assert abs(polymer.monoisotopic_mass - (bare_mass("PEPTIDE") - 0.984016)) < 1e-5
        # Terminus groups are not written in the sequence notation
        assert str(polymer) == "PEPTIDE"
        assert polymer != AminoAcidPolymer("PEPTIDE")

    def test_clear_modifications(self):
        polymer = AminoAcidPolymer("[Acetyl]-PEPM[Oxidation]K-[Amidated]")
        polymer.clear_modifications()
        assert polymer == AminoAcidPolymer("PEPMK")

    def test_contains_modification(self, oxidation, phospho):
        polymer = AminoAcidPolymer("PEPM[Oxidation]K")
        assert polymer.contains_modification(oxidation)
        assert not polymer.contains_modification(phospho)


class TestEquality:
    """Test value equality."""

    def test_equal(self):
        assert AminoAcidPolymer("PEPM[Oxidation]K") == AminoAcidPolymer("PEPM[Oxidation]K")

    def test_reflexive(self):
        polymer = AminoAcidPolymer("PEPTIDE")
        assert polymer == polymer

    def test_different_modifications(self):
        assert AminoAcidPolymer("PEPM[Oxidation]K") != AminoAcidPolymer("PEPMK")

    def test_isobaric_sequences_differ(self):
        assert AminoAcidPolymer("PEPTIDE") != AminoAcidPolymer("PEPTLDE")

    def test_peptide_equals_polymer(self):
        assert Peptide("PEPTIDE") == AminoAcidPolymer("PEPTIDE")

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(AminoAcidPolymer("PEPTIDE"))

    def test_other_types(self):
        assert AminoAcidPolymer("PEPTIDE") != "PEPTIDE"


class TestSubrange:
    """Test copying residue ranges."""

    @pytest.fixture
    def modified_protein(self):
        return AminoAcidPolymer("[Acetyl]-MAAKPEPM[Oxidation]TIDER-[Amidated]")

    def test_n_terminal_range(self, modified_protein):
        peptide = AminoAcidPolymer.from_polymer(modified_protein, 0, 4)
        assert str(peptide) == "[Acetyl]-MAAK"

    def test_c_terminal_range_clamped(self, modified_protein):
        peptide = AminoAcidPolymer.from_polymer(modified_protein, 4, 100)
        assert str(peptide) == "PEPM[Oxidation]TIDER-[Amidated]"

    def test_internal_range(self, modified_protein):
        peptide = AminoAcidPolymer.from_polymer(modified_protein, 5, 4)
        assert str(peptide) == "EPM[Oxidation]T"

    def test_without_modifications(self, modified_protein):
        peptide = AminoAcidPolymer.from_polymer(modified_protein, 0, None, include_modifications=False)
        assert peptide == AminoAcidPolymer("MAAKPEPMTIDER")

    def test_terminus_groups_follow_ends(self):
        protein = AminoAcidPolymer("PEPTIDEK")
        protein.c_terminus = Modification.from_formula("NH2")
        assert AminoAcidPolymer.from_polymer(protein, 4).c_terminus == protein.c_terminus
        assert AminoAcidPolymer.from_polymer(protein, 0, 4).c_terminus.formula == "HO"

    def test_empty_range_at_end(self, modified_protein):
        peptide = AminoAcidPolymer.from_polymer(modified_protein, len(modified_protein))
        assert len(peptide) == 0

    def test_first_residue_out_of_range(self, modified_protein):
        with pytest.raises(PositionOutOfRangeError):
            AminoAcidPolymer.from_polymer(modified_protein, -1)
        with pytest.raises(PositionOutOfRangeError):
            AminoAcidPolymer.from_polymer(modified_protein, len(modified_protein) + 1)

    def test_negative_length(self, modified_protein):
        with pytest.raises(InvalidArgumentError):
            AminoAcidPolymer.from_polymer(modified_protein, 2, -1)

    def test_copy_is_independent(self, modified_protein, phospho):
        copy = modified_protein.copy()
        assert copy == modified_protein
        copy.set_modification(phospho, 9)
        assert copy != modified_protein


class TestPeptide:
    """Test peptide provenance."""

    def test_subrange_provenance(self, protein):
        peptide = subrange(protein, 4, 8)
        assert isinstance(peptide, Peptide)
        assert peptide.sequence == "PEPTIDER"
        assert peptide.parent is protein
        assert peptide.start_residue == 4
        assert peptide.end_residue == 11

    def test_standalone_peptide(self):
        peptide = Peptide("PEPTIDE")
        assert peptide.parent is None
        assert peptide.start_residue == 0
        assert peptide.end_residue == 6
        assert peptide.is_protein_n_terminal
        assert peptide.is_protein_c_terminal

    def test_protein_termini(self, protein):
        assert subrange(protein, 0, 4).is_protein_n_terminal
        assert not subrange(protein, 0, 4).is_protein_c_terminal
        assert subrange(protein, 12).is_protein_c_terminal
        assert not subrange(protein, 12).is_protein_n_terminal

    def test_copy_keeps_provenance(self, protein):
        peptide = subrange(protein, 4, 8)
        copy = peptide.copy()
        assert isinstance(copy, Peptide)
        assert copy.parent is protein
        assert copy.start_residue == 4
        assert copy.end_residue == 11

    def test_sub_peptide(self, protein):
        peptide = subrange(protein, 4, 8)
        sub = peptide.get_sub_peptide(2, 3)
        assert sub.sequence == "PTI"
        assert sub.parent is peptide
        assert sub.start_residue == 2

    def test_parent_not_mutated(self, protein, phospho):
        peptide = subrange(protein, 4, 8)
        peptide.set_modification(phospho, 4)
        assert protein == AminoAcidPolymer("MAAKPEPTIDERSAMPLESTYK")
