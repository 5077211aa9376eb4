"""Unit tests for pilon.bed module."""

import pytest

from pilon.bed import BED_CATEGORIES, BedWriter, bed_line
from pilon.genome import Region


def read_lines(path):
    with open(path) as f:
        return f.read().splitlines()


class TestBedLine:
    """Tests for the bed_line function."""

    @pytest.mark.unit
    def test_unconfirmed_span(self):
        line = bed_line("chr1", Region("chr1", 100, 110), "?", "255,0,0")
        assert line == "chr1\t100\t110\t?\t0\t+\t99\t110\t255,0,0"

    @pytest.mark.unit
    def test_uses_chromosome_key(self):
        line = bed_line("scaffold1", Region("other", 5, 5), "G", "32,32,32")
        assert line.split("\t")[0] == "scaffold1"


class TestMakeBedTrack:
    """Tests for BedWriter.make_bed_track."""

    @pytest.mark.unit
    def test_header(self, tmp_path, stub_region):
        path = tmp_path / "Pilon.bed"
        BedWriter({"chr1": [stub_region(10)]}).make_bed_track(str(path), "Pilon")
        assert read_lines(path) == ['track description="Issues found by Pilon" name="Pilon"']

    @pytest.mark.unit
    def test_header_options(self, tmp_path, stub_region):
        path = tmp_path / "Pilon.bed"
        BedWriter({"chr1": [stub_region(10)]}).make_bed_track(str(path), "Pilon", "visibility=2")
        assert read_lines(path)[0].endswith('name="Pilon" visibility=2')

    @pytest.mark.unit
    def test_single_unconfirmed(self, tmp_path, stub_region, span):
        path = tmp_path / "Pilon.bed"
        region = stub_region(200, unconfirmed=[span("chr1", 100, 110)])
        BedWriter({"chr1": [region]}).make_bed_track(str(path), "Pilon")
        assert read_lines(path)[1:] == ["chr1\t100\t110\t?\t0\t+\t99\t110\t255,0,0"]

    @pytest.mark.unit
    def test_category_labels_and_colors(self):
        assert [(label, rgb) for _, label, rgb in BED_CATEGORIES] == [
            ("?", "255,0,0"),
            ("#", "0,0,255"),
            ("X", "255,0,0"),
            ("I", "255,255,0"),
            ("D", "255,0,255"),
            ("G", "32,32,32"),
            ("B", "0,255,255"),
        ]

    @pytest.mark.unit
    def test_categories_grouped_across_regions(self, tmp_path, stub_region, span):
        """Within a chromosome, each category covers every region before the next."""
        path = tmp_path / "Pilon.bed"
        first = stub_region(
            50, gaps=[span("c", 10, 20)], unconfirmed=[span("c", 1, 5)], breaks=[span("c", 30, 30)]
        )
        second = stub_region(50, unconfirmed=[span("c", 60, 61)], deletions=[span("c", 70, 72)])
        other = stub_region(10, insertions=[span("d", 3, 4)], collapsed=[span("d", 1, 9)])
        BedWriter({"c": [first, second], "d": [other]}).make_bed_track(str(path), "Pilon")

        labels = [(line.split("\t")[0], line.split("\t")[3]) for line in read_lines(path)[1:]]
        assert labels == [
            ("c", "?"),
            ("c", "?"),
            ("c", "D"),
            ("c", "G"),
            ("c", "B"),
            ("d", "#"),
            ("d", "I"),
        ]

    @pytest.mark.unit
    def test_prefix(self, tmp_path, stub_region, span):
        prefix = str(tmp_path / "run.")
        region = stub_region(5, changed=[span("c", 2, 2)])
        BedWriter({"c": [region]}, prefix).make_bed_track("Pilon.bed", "Pilon")
        assert read_lines(prefix + "Pilon.bed")[1] == "c\t2\t2\tX\t0\t+\t1\t2\t255,0,0"
