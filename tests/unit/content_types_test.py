"""Unit tests for MIME type resolution."""

import pytest

from galaxy_history.domain.content_types import (
    DEFAULT_CONTENT_TYPE,
    MIME_TYPES,
    content_type_for_extension,
    content_type_for_filename,
)


class TestContentTypeForExtension:
    """Test extension based lookup."""

    @pytest.mark.parametrize(
        ("extension", "expected"),
        [
            ("pdf", "application/pdf"),
            ("png", "image/png"),
            ("bam", "application/octet-stream"),
            ("html", "text/html"),
            ("svg", "image/svg+xml"),
            ("biom1", "application/json"),
        ],
    )
    def test_known_extensions(self, extension, expected):
        """Known extensions resolve to their MIME type."""
        assert content_type_for_extension(extension) == expected

    def test_leading_dot_is_ignored(self):
        """'.png' resolves like 'png'."""
        assert content_type_for_extension(".png") == "image/png"

    def test_unknown_extension_is_plain_text(self):
        """Most Galaxy datatypes are text, so unknown means text/plain."""
        assert content_type_for_extension("fastqsanger") == DEFAULT_CONTENT_TYPE
        assert content_type_for_extension("bed") == "text/plain"

    def test_missing_extension_is_plain_text(self):
        """None and empty extensions resolve to text/plain."""
        assert content_type_for_extension(None) == "text/plain"
        assert content_type_for_extension("") == "text/plain"

    def test_compound_extension_uses_envelope(self):
        """Without decompression the last segment decides."""
        assert content_type_for_extension("fastq.gz") == "application/gzip"
        assert content_type_for_extension("vcf.bz2") == "application/x-bzip2"

    def test_compound_extension_decompressed_uses_content(self):
        """With decompression the second to last segment decides."""
        assert content_type_for_extension("fastq.gz", decompress=True) == "text/plain"
        assert content_type_for_extension("tar.gz", decompress=True) == "application/x-tar"

    def test_tgz_is_tar_gz(self):
        """'tgz' is treated as 'tar.gz'."""
        assert content_type_for_extension("tgz") == "application/gzip"
        assert content_type_for_extension("tgz", decompress=True) == "application/x-tar"

    def test_single_extension_ignores_decompress(self):
        """Decompression only matters for compound extensions."""
        assert content_type_for_extension("pdf", decompress=True) == "application/pdf"

    def test_zip_is_not_decompressed(self):
        """ZIP archives keep their own type even in decompress mode."""
        assert content_type_for_extension("zip", decompress=True) == "application/zip"

    def test_leading_dot_compound(self):
        """A leading dot is stripped before splitting."""
        assert content_type_for_extension(".txt.pdf") == "application/pdf"

    def test_is_pure(self):
        """Repeated lookups give the same answer."""
        assert content_type_for_extension("fastq.gz") == content_type_for_extension("fastq.gz")

    def test_table_is_read_only(self):
        """The lookup table cannot be modified."""
        with pytest.raises(TypeError):
            MIME_TYPES["pdf"] = "text/plain"


class TestContentTypeForFilename:
    """Test file name based lookup used for extra files."""

    def test_simple_filename(self):
        """Suffix after the first dot is used."""
        assert content_type_for_filename("plot.png") == "image/png"

    def test_nested_path(self):
        """Only the base name is considered."""
        assert content_type_for_filename("report_files/img/plot.svg") == "image/svg+xml"

    def test_compound_suffix(self):
        """Compound suffixes honour the decompress flag."""
        assert content_type_for_filename("bundle.tar.gz") == "application/gzip"
        assert content_type_for_filename("bundle.tar.gz", decompress=True) == "application/x-tar"

    def test_no_suffix(self):
        """Files without suffix are text."""
        assert content_type_for_filename("README") == "text/plain"
        assert content_type_for_filename(".hidden") == "text/plain"
