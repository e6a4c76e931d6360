"""File suffix to MIME type resolution for archive members.

Mappings follow Galaxy's ``config/datatypes_conf.xml`` with a few additions
for plain compression and archive envelopes (``gz``, ``bz2``, ``tar``, ``zip``).
Unknown suffixes resolve to ``text/plain`` since most Galaxy datatypes
(BED, GFF, FASTA, CSV, SAM, ...) are text based.
"""

from types import MappingProxyType

DEFAULT_CONTENT_TYPE = "text/plain"

MIME_TYPES = MappingProxyType(
    {
        "ab1": "application/octet-stream",
        "analyze75": "application/xml",
        "anvio_state": "application/json",
        "arff": "text/plain",
        "asn1": "text/plain",
        "asn1-binary": "application/octet-stream",
        "bam": "application/octet-stream",
        "bcf": "application/octet-stream",
        "bcf_uncompressed": "application/octet-stream",
        "bigbed": "application/octet-stream",
        "bigwig": "application/octet-stream",
        "binary": "application/octet-stream",
        "biom1": "application/json",
        "biom2": "application/octet-stream",
        "blastdbd": "text/html",
        "blastdbn": "text/html",
        "blastdbp": "text/html",
        "blastxml": "application/xml",
        "bmp": "image/bmp",
        "bowtie_base_index": "text/html",
        "bowtie_color_index": "text/html",
        "bz2": "application/x-bzip2",
        "cisml": "application/xml",
        "consensusxml": "application/xml",
        "cool": "application/octet-stream",
        "cram": "application/octet-stream",
        "cxb": "application/octet-stream",
        "d3_hierarchy": "application/json",
        "dada2_sequencetable": "application/text",
        "dada2_uniques": "application/text",
        "data": "application/octet-stream",
        "data_manager_json": "application/json",
        "eps": "image/eps",
        "featurexml": "application/xml",
        "fphe": "text/html",
        "fps": "text/html",
        "geojson": "application/json",
        "gif": "image/gif",
        "gz": "application/gzip",
        "h5": "application/octet-stream",
        "h5ad": "application/octet-stream",
        "hivtrace": "application/json",
        "hlf": "application/octet-stream",
        "html": "text/html",
        "idpdb": "application/octet-stream",
        "idxml": "application/xml",
        "im": "image/im",
        "imzml": "application/xml",
        "interprophet_pepxml": "application/xml",
        "isa-json": "application/isa-tools",
        "isa-tab": "application/isa-tools",
        "jpeg": "image/jpeg",
        "jpg": "image/jpeg",
        "loom": "application/octet-stream",
        "maskinfo-asn1": "text/plain",
        "maskinfo-asn1-binary": "application/octet-stream",
        "mcool": "application/octet-stream",
        "memexml": "application/xml",
        "mrxs": "image/mirax",
        "mz5": "application/octet-stream",
        "mzdata": "application/xml",
        "mzid": "application/xml",
        "mzml": "application/xml",
        "mzq": "application/xml",
        "mzxml": "application/xml",
        "neostore": "text/html",
        "netcdf": "application/octet-stream",
        "nmrml": "application/xml",
        "nrrd": "image/nrrd",
        "obfs": "text/html",
        "obo": "text/html",
        "osw": "application/octet-stream",
        "owl": "text/html",
        "oxlicg": "application/octet-stream",
        "oxligl": "application/octet-stream",
        "oxling": "application/octet-stream",
        "oxliss": "application/octet-stream",
        "oxlist": "application/octet-stream",
        "oxlits": "application/octet-stream",
        "pbm": "image/pbm",
        "pcd": "image/pcd",
        "pcx": "image/pcx",
        "pdf": "application/pdf",
        "peptideprophet_pepxml": "application/xml",
        "pepxml": "application/xml",
        "pgm": "image/pgm",
        "png": "image/png",
        "pphe": "text/html",
        "ppm": "image/ppm",
        "pqp": "application/octet-stream",
        "probam": "application/octet-stream",
        "protxml": "application/xml",
        "psd": "image/psd",
        "pssm-asn1": "text/plain",
        "qcml": "application/xml",
        "rast": "image/rast",
        "raw_pepxml": "application/xml",
        "rgb": "image/rgb",
        "rna_eps": "image/eps",
        "sbml": "application/xml",
        "scf": "application/octet-stream",
        "sff": "application/octet-stream",
        "shp": "application/octet-stream",
        "sqlite": "application/octet-stream",
        "sra": "application/octet-stream",
        "svg": "image/svg+xml",
        "svslide": "image/sakura",
        "tandem": "application/xml",
        "tar": "application/x-tar",
        "tiff": "image/tiff",
        "trafoxml": "application/xml",
        "traml": "application/xml",
        "twobit": "application/octet-stream",
        "uniprotxml": "application/xml",
        "vms": "image/hamamatsu",
        "xbm": "image/xbm",
        "xml": "application/xml",
        "xpm": "image/xpm",
        "zip": "application/zip",
    }
)


def content_type_for_extension(extension: str | None, decompress: bool = False) -> str:
    """Return the MIME type for a file extension.

    Args:
        extension: A single suffix (``pdf``) or a dotted compound (``fastq.gz``).
            A leading dot is ignored and ``tgz`` is read as ``tar.gz``.
        decompress: For compound suffixes, resolve the second to last segment
            (the decompressed content) instead of the last one (the envelope).

    Returns:
        The MIME type, or ``text/plain`` for unknown suffixes

    Example:
        >>> content_type_for_extension("fastq.gz")
        'application/gzip'
        >>> content_type_for_extension("fastq.gz", decompress=True)
        'text/plain'
    """
    if not extension:
        return DEFAULT_CONTENT_TYPE
    extension = extension.removeprefix(".")
    if extension == "tgz":
        extension = "tar.gz"

    suffix = extension
    if "." in extension:
        parts = extension.split(".")
        suffix = parts[-2] if decompress else parts[-1]

    return MIME_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)


def content_type_for_filename(filename: str, decompress: bool = False) -> str:
    """Return the MIME type for a file name, using everything after its first dot."""
    basename = filename.rsplit("/", 1)[-1]
    if "." not in basename.lstrip("."):
        return DEFAULT_CONTENT_TYPE
    return content_type_for_extension(basename.lstrip(".").split(".", 1)[1], decompress)
