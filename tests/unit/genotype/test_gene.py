"""
Unit tests for Gene class.

Tests cover initialization, copying, equality, serialization and string representations.
"""

import pytest

from neatris.genotype.gene import Gene, GENE_VERSION


# ============================================================================
# Test: Constructor
# ============================================================================

class TestGeneInit:
    """Test Gene initialization."""

    def test_default_initialization(self):
        gene = Gene()

        assert gene.into == 0
        assert gene.out == 0
        assert gene.weight == 0.0
        assert gene.enabled is True
        assert gene.innovation == 0

    def test_basic_initialization(self):
        """Test standard initialization with all parameters."""
        gene = Gene(into=3, out=1000000, weight=-1.25, enabled=False, innovation=17)

        assert gene.into == 3
        assert gene.out == 1000000
        assert gene.weight == -1.25
        assert gene.enabled is False
        assert gene.innovation == 17

    def test_slots_prevent_new_attributes(self):
        gene = Gene()
        with pytest.raises(AttributeError):
            gene.bias = 1.0


# ============================================================================
# Test: copy and equality
# ============================================================================

class TestGeneCopy:
    """Test Gene copy and equality."""

    def test_copy_is_equal_but_independent(self):
        gene = Gene(1, 2, 0.5, True, 9)
        copy = gene.copy()

        assert copy == gene
        assert copy is not gene

        copy.weight  = 1.5
        copy.enabled = False
        assert gene.weight == 0.5
        assert gene.enabled is True

    def test_genes_differing_in_any_field_are_not_equal(self):
        gene = Gene(1, 2, 0.5, True, 9)

        assert gene != Gene(0, 2, 0.5, True, 9)
        assert gene != Gene(1, 3, 0.5, True, 9)
        assert gene != Gene(1, 2, 0.6, True, 9)
        assert gene != Gene(1, 2, 0.5, False, 9)
        assert gene != Gene(1, 2, 0.5, True, 10)

    def test_gene_is_unhashable(self):
        with pytest.raises(TypeError):
            hash(Gene())


# ============================================================================
# Test: serialization
# ============================================================================

class TestGeneSerialization:
    """Test Gene to_dict / from_dict."""

    def test_to_dict_fields(self):
        gene = Gene(4, 7, -0.75, False, 12)

        assert gene.to_dict() == {"version": GENE_VERSION,
                                   "into": 4,
                                   "out": 7,
                                   "weight": -0.75,
                                   "innovation": 12,
                                   "enabled": False}

    def test_from_dict_restores_gene(self):
        gene = Gene(4, 7, -0.75, False, 12)
        assert Gene.from_dict(gene.to_dict()) == gene

    def test_from_dict_without_version_or_enabled(self):
        """Records without version tag are read as version 0; 'enabled' defaults to True."""
        gene = Gene.from_dict({"into": 1, "out": 5, "weight": 2.0, "innovation": 3})

        assert gene == Gene(1, 5, 2.0, True, 3)

    def test_from_dict_rejects_newer_version(self):
        gene_dict = Gene(1, 2, 0.5, True, 9).to_dict()
        gene_dict["version"] = GENE_VERSION + 1

        with pytest.raises(ValueError, match="unsupported gene version"):
            Gene.from_dict(gene_dict)

    @pytest.mark.parametrize("record", [[], "gene", 3, None])
    def test_from_dict_rejects_non_object(self, record):
        with pytest.raises(ValueError, match="must be an object"):
            Gene.from_dict(record)

    def test_from_dict_missing_field_raises(self):
        with pytest.raises(KeyError):
            Gene.from_dict({"into": 1, "out": 2, "weight": 0.0})


# ============================================================================
# Test: string representations
# ============================================================================

class TestGeneRepr:

    def test_str_shows_state(self):
        assert str(Gene(1, 2, 0.5, True, 9))  == "[009,E,01=>02,+0.50]"
        assert str(Gene(1, 2, -0.5, False, 9)) == "[009,D,01=>02,-0.50]"

    def test_repr_contains_fields(self):
        r = repr(Gene(1, 2, 0.5, True, 9))
        assert r.startswith("Gene(")
        assert "innovation=009" in r
