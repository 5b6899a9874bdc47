import os
from dataclasses import dataclass
from enum import Enum

DEFAULT_REFERENCE = 'reference/reference.vcf.gz'
OUTPUT_SUFFIX = '.vcf.gz'

class RawFormat(Enum):
    TWENTYTHREE_AND_ME = '23andme'
    ANCESTRY = 'ancestry'

class UnmatchedAllelePolicy(Enum):
    REFERENCE = 'reference'
    SKIP = 'skip'
    FAIL = 'fail'

@dataclass(frozen=True)
class ConvertConfig:
    """Settings for one conversion run.

    raw_format: vendor column layout of the input file
    input_path: raw genotype calls, plain text, zip or gzip
    output_path: block-compressed vcf to write
    reference_path: gzipped reference vcf carrying the site definitions
    double_allosomes: turn single-allele X/Y calls into homozygous pairs
    unmatched_allele: what to do when a called allele is not REF or ALT
    index_output: write a tabix index next to the output
    debug: print extra progress output
    """
    raw_format: RawFormat
    input_path: str
    output_path: str = None
    reference_path: str = DEFAULT_REFERENCE
    double_allosomes: bool = False
    unmatched_allele: UnmatchedAllelePolicy = UnmatchedAllelePolicy.REFERENCE
    index_output: bool = False
    debug: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'raw_format', RawFormat(self.raw_format))
        object.__setattr__(self, 'unmatched_allele', UnmatchedAllelePolicy(self.unmatched_allele))
        if not self.output_path:
            object.__setattr__(self, 'output_path', default_output_path(self.input_path))

    @property
    def sample_name(self):
        return sample_name(self.input_path)

def default_output_path(input_path):
    root, _ = os.path.splitext(input_path)
    return root + OUTPUT_SUFFIX

def sample_name(input_path):
    name, _ = os.path.splitext(os.path.basename(input_path))
    return name
