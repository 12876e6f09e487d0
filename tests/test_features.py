"""Tests for generegions.core.features and generegions.core.structure.

Tests cover:
- FeatureNode and Region data structures
- Strand validation and MalformedFeatureError
- Exon/CDS resolution order
- Strand-aware coordinate adjustment
"""

import pickle

import pytest

from generegions.core.features import (
    REGION_COLUMNS,
    Feature,
    FeatureNode,
    MalformedFeatureError,
    Region,
    require_strand,
    tag_matches,
)
from generegions.core.structure import adjust_region, resolve_children


# =============================================================================
# Data Structure Tests
# =============================================================================


class TestFeatureNode:
    """Tests for FeatureNode."""

    def test_length(self):
        """Length is inclusive of both ends."""
        node = FeatureNode("e1", "chr1", 100, 200, 1, "exon")
        assert node.length == 101

    def test_add_child(self):
        """Children can be attached after creation."""
        tx = FeatureNode("tx", "chr1", 100, 200, 1, "mRNA")
        tx.add_child(FeatureNode(None, "chr1", 100, 200, 1, "exon"))
        assert len(tx.children) == 1

    def test_satisfies_feature_protocol(self):
        """FeatureNode can be used wherever a Feature is expected."""
        node = FeatureNode("e1", "chr1", 100, 200, 1, "exon")
        assert isinstance(node, Feature)

    def test_tag_matches_case_insensitive(self):
        """Tag tokens match as case-insensitive substrings."""
        node = FeatureNode("u", "chr1", 1, 10, 1, "five_prime_UTR")
        assert tag_matches(node, "utr")
        assert not tag_matches(node, "exon")


class TestRegion:
    """Tests for Region records."""

    def test_to_row_column_order(self):
        """Rows follow REGION_COLUMNS order."""
        region = Region("T1", "T1_TSS", "chr1", 100, 100, 1, parent_name="G")
        row = region.to_row()
        assert len(row) == len(REGION_COLUMNS)
        assert row == ("G", "T1", "T1_TSS", "chr1", 100, 100, 1)

    def test_with_parent_returns_copy(self):
        """Assigning a parent leaves the original untouched."""
        region = Region("T1", "T1_TSS", "chr1", 100, 100, 1)
        parented = region.with_parent("G")
        assert parented.parent_name == "G"
        assert region.parent_name is None

    def test_frozen(self):
        """Regions cannot be modified in place."""
        region = Region("T1", "T1_TSS", "chr1", 100, 100, 1)
        with pytest.raises(AttributeError):
            region.start = 5

    def test_length(self):
        """Single-base regions have length 1."""
        assert Region("T1", "x", "chr1", 100, 100, 1).length == 1


# =============================================================================
# Strand Validation Tests
# =============================================================================


class TestRequireStrand:
    """Tests for strand validation."""

    @pytest.mark.parametrize("strand", [1, -1])
    def test_valid_strand(self, strand):
        """Valid strands are returned unchanged."""
        node = FeatureNode("tx", "chr1", 1, 10, strand, "mRNA")
        assert require_strand(node) == strand

    def test_unknown_strand_raises(self):
        """Strand 0 cannot be oriented."""
        node = FeatureNode("tx", "chr1", 1, 10, 0, "mRNA")
        with pytest.raises(MalformedFeatureError, match="tx"):
            require_strand(node)

    def test_error_is_value_error(self):
        """MalformedFeatureError is a ValueError."""
        assert issubclass(MalformedFeatureError, ValueError)

    def test_error_pickles(self):
        """Errors keep their details when sent between processes."""
        error = MalformedFeatureError("strand must be 1 or -1, got 0", feature_name="tx")
        restored = pickle.loads(pickle.dumps(error))
        assert restored.feature_name == "tx"
        assert str(restored) == str(error)


# =============================================================================
# Exon/CDS Resolver Tests
# =============================================================================


class TestResolveChildren:
    """Tests for resolve_children."""

    def test_forward_sorted_by_start(self, forward_transcript):
        """Forward-strand exons come back in ascending start order."""
        children = resolve_children(forward_transcript)
        assert [c.start for c in children] == [100, 200, 300]

    def test_reverse_sorted_by_end_descending(self, reverse_transcript):
        """Reverse-strand exons come back 5'->3', highest end first."""
        children = resolve_children(reverse_transcript)
        assert [c.end for c in children] == [400, 200]

    def test_prefers_exons_over_cds(self, make_transcript):
        """CDS children are ignored when exons exist."""
        tx = make_transcript("tx", [(100, 200), (300, 400)])
        tx.add_child(FeatureNode(None, "chr1", 150, 200, 1, "CDS"))
        children = resolve_children(tx)
        assert len(children) == 2
        assert all(c.primary_tag == "exon" for c in children)

    def test_falls_back_to_cds(self, make_transcript):
        """CDS and UTR children stand in for missing exons."""
        tx = make_transcript("tx", [(300, 400), (100, 200)], exon_tag="CDS")
        tx.add_child(FeatureNode(None, "chr1", 50, 99, 1, "five_prime_UTR"))
        children = resolve_children(tx)
        assert [c.start for c in children] == [50, 100, 300]

    def test_tag_case_ignored(self, make_transcript):
        """Exon tags match whatever their case."""
        tx = make_transcript("tx", [(300, 400), (100, 200)], exon_tag="EXON")
        tx.add_child(FeatureNode(None, "chr1", 100, 400, 1, "Cds"))
        children = resolve_children(tx)
        assert [c.primary_tag for c in children] == ["EXON", "EXON"]

    def test_no_children(self, make_transcript):
        """Transcripts without exon-like children give None."""
        tx = make_transcript("tx", [(100, 200)], exon_tag="intron_like_thing")
        assert resolve_children(tx) is None

    def test_unknown_strand_raises(self, make_transcript):
        """Ordering needs a strand."""
        tx = make_transcript("tx", [(100, 200)], strand=0)
        with pytest.raises(MalformedFeatureError):
            resolve_children(tx)


# =============================================================================
# Coordinate Adjuster Tests
# =============================================================================


class TestAdjustRegion:
    """Tests for adjust_region."""

    def test_forward_strand(self):
        """Forward strand: start moves start, stop moves stop."""
        region = Region("T1", "T1_TSS", "chr1", 100, 100, 1)
        adjusted = adjust_region(region, start_adj=-50, stop_adj=50)
        assert (adjusted.start, adjusted.stop) == (50, 150)

    def test_reverse_strand(self):
        """Reverse strand: upstream is toward higher coordinates."""
        region = Region("T1", "T1_TSS", "chr1", 400, 400, -1)
        adjusted = adjust_region(region, start_adj=-50, stop_adj=50)
        assert (adjusted.start, adjusted.stop) == (350, 450)

    def test_reverse_strand_start_only(self):
        """A 5' shift on the reverse strand moves the stop coordinate."""
        region = Region("T1", "x", "chr1", 100, 200, -1)
        adjusted = adjust_region(region, start_adj=10)
        assert (adjusted.start, adjusted.stop) == (100, 190)

    def test_zero_offsets_identity(self):
        """Zero offsets return the same record."""
        region = Region("T1", "x", "chr1", 100, 200, 1)
        assert adjust_region(region) is region

    @pytest.mark.parametrize("strand", [1, -1])
    def test_round_trip(self, strand):
        """Opposite offsets restore the original coordinates."""
        region = Region("T1", "x", "chr1", 100, 200, strand)
        shifted = adjust_region(region, start_adj=-30, stop_adj=15)
        assert adjust_region(shifted, start_adj=30, stop_adj=-15) == region

    def test_inverted_range_allowed(self):
        """Large negative offsets can invert the range."""
        region = Region("T1", "x", "chr1", 100, 110, 1)
        adjusted = adjust_region(region, stop_adj=-50)
        assert adjusted.start > adjusted.stop

    def test_other_fields_preserved(self):
        """Only coordinates change."""
        region = Region("T1", "x", "chr1", 100, 110, 1, parent_name="G")
        adjusted = adjust_region(region, start_adj=5)
        assert adjusted.name == "x"
        assert adjusted.parent_name == "G"
        assert adjusted.seq_id == "chr1"
