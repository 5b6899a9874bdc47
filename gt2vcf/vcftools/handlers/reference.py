import collections
import gzip

import vcfpy
from vcfpy import exceptions as vcfpy_exceptions

import gt2vcf.utils.logger as log
from gt2vcf.utils.exceptions import ReferenceCatalogError

GT_FORMAT = collections.OrderedDict([
    ('ID', 'GT'),
    ('Number', '.'),
    ('Type', 'Integer'),
    ('Description', 'Genotype')
])

FIXED_COLUMNS = 8
READ_ERRORS = (OSError, EOFError, ValueError, vcfpy_exceptions.VCFPyException)

# fixed is the first eight columns exactly as they appear in the catalog
ReferenceSite = collections.namedtuple('ReferenceSite', ['chrom', 'pos', 'ids', 'ref', 'alts', 'fixed'])

def augment_header(header, sample_name):
    """Single-sample copy of the reference header with the GT format registered."""
    lines = [line for line in header.lines if not is_gt_format_line(line)]
    augmented = vcfpy.Header(lines=lines, samples=vcfpy.SamplesInfos([sample_name]))
    augmented.add_format_line(GT_FORMAT)
    return augmented

def is_gt_format_line(line):
    return line.key == 'FORMAT' and getattr(line, 'mapping', {}).get('ID') == 'GT'

def split_field(value, sep):
    if value == '.':
        return []
    return value.split(sep)

def parse_site(line, path, line_number):
    fields = line.rstrip('\r\n').split('\t')
    if len(fields) < FIXED_COLUMNS:
        raise ReferenceCatalogError(
            f"{path}: line {line_number}: expected {FIXED_COLUMNS} columns, found {len(fields)}"
        )
    chrom, pos = fields[0], fields[1]
    if not (pos.isascii() and pos.isdigit()):
        raise ReferenceCatalogError(f"{path}: line {line_number}: invalid position '{pos}'")
    return ReferenceSite(chrom, int(pos), split_field(fields[2], ';'), fields[3],
                         split_field(fields[4], ','), '\t'.join(fields[:FIXED_COLUMNS]))

def open_text(path):
    if path.endswith('.gz'):
        return gzip.open(path, 'rt')
    return open(path, 'rt')

class ReferenceStream:
    """Forward-only pass over the reference vcf, one site at a time.

    vcfpy parses the header; data lines are split here so the fixed columns
    reach the output without being re-serialized.
    """

    def __init__(self, path, sample_name):
        self.path = path
        self.sample_name = sample_name
        self.stream = None
        self.header = None
        self.line_number = 0

    def __enter__(self):
        log.logit(f"Opening reference: {self.path}")
        try:
            reader = vcfpy.Reader.from_path(self.path)
        except READ_ERRORS as e:
            raise ReferenceCatalogError(f"error opening reference file {self.path}: {e}") from e
        try:
            self.header = augment_header(reader.header, self.sample_name)
        finally:
            reader.close()

        try:
            self.stream = open_text(self.path)
        except OSError as e:
            raise ReferenceCatalogError(f"error opening reference file {self.path}: {e}") from e
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.stream is not None:
            self.stream.close()
            self.stream = None
        return False

    def __iter__(self):
        if self.stream is None:
            raise ReferenceCatalogError(f"reference {self.path} is not open")
        while True:
            try:
                line = self.stream.readline()
            except READ_ERRORS as e:
                raise ReferenceCatalogError(f"error reading reference {self.path}: {e}") from e
            if not line:
                return
            self.line_number += 1
            if line.startswith('#') or not line.strip():
                continue
            yield parse_site(line, self.path, self.line_number)

def open_reference(path, sample_name):
    return ReferenceStream(path, sample_name)
