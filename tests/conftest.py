"""Pytest fixtures for gt2vcf tests."""

import gzip
from pathlib import Path

import pytest

REFERENCE_HEADER = (
    "##fileformat=VCFv4.2\n"
    "##contig=<ID=1,length=249250621>\n"
    "##contig=<ID=X,length=155270560>\n"
    "##INFO=<ID=GENE,Number=1,Type=String,Description=\"Gene symbol\">\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n"
)

REFERENCE_ROWS = [
    "1\t100\trs1\tA\tG\t.\t.\tGENE=ABC\n",
    "1\t200\trs2\tC\tT\t.\t.\t.\n",
    "1\t300\trs3\tA\tT\t.\t.\t.\n",
]


def write_reference(path: Path, rows) -> Path:
    with gzip.open(path, "wt") as f:
        f.write(REFERENCE_HEADER)
        f.writelines(rows)
    return path


def data_lines(vcf_path: Path) -> list[str]:
    """Non-header lines of a (b)gzipped vcf."""
    with gzip.open(vcf_path, "rt") as f:
        return [line.rstrip("\n") for line in f if not line.startswith("#")]


def header_lines(vcf_path: Path) -> list[str]:
    with gzip.open(vcf_path, "rt") as f:
        return [line.rstrip("\n") for line in f if line.startswith("#")]


@pytest.fixture
def reference_vcf(tmp_path: Path) -> Path:
    """rs1 (A/G), rs2 (C/T) and rs3 (A/T) on chromosome 1."""
    return write_reference(tmp_path / "reference.vcf.gz", REFERENCE_ROWS)


@pytest.fixture
def twentythree_file(tmp_path: Path) -> Path:
    """23andme style input with rs1 and rs2 called."""
    path = tmp_path / "genome_Jane.txt"
    path.write_text(
        "# This data file generated by 23andMe\n"
        "# rsid\tchromosome\tposition\tgenotype\n"
        "rs1\t1\t100\tAG\n"
        "rs2\t1\t200\tCC\n"
        "rs9\t1\t900\tTT\n"
    )
    return path


@pytest.fixture
def ancestry_file(tmp_path: Path) -> Path:
    """Ancestry style input, alleles split over two columns."""
    path = tmp_path / "AncestryDNA.txt"
    path.write_text(
        "#AncestryDNA raw data download\n"
        "rsid\tchromosome\tposition\tallele1\tallele2\n"
        "rs1\t1\t100\tA\tG\n"
        "rs2\t1\t200\tC\tC\n"
    )
    return path
