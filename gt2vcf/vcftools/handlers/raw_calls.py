import io, gzip, zipfile
import collections
from contextlib import contextmanager

import gt2vcf.utils.logger as log
from gt2vcf.utils.exceptions import InputError, ParseError
from gt2vcf.vcftools.config import RawFormat

RawCall = collections.namedtuple('RawCall', ['marker_id', 'chrom', 'pos', 'alleles'])

HEADER_TOKEN = 'rsid'
ZIP_MAGIC = (b'PK\x03\x04', b'PK\x05\x06')
GZIP_MAGIC = b'\x1f\x8b'

# 1-based column holding the position, and the columns each vendor needs
POSITION_COLUMN = 3
REQUIRED_COLUMNS = {
    RawFormat.TWENTYTHREE_AND_ME : 4,
    RawFormat.ANCESTRY           : 5
}

class TextSource:
    kind = 'text'

    def __init__(self, path):
        self.path = path

    @contextmanager
    def open(self):
        try:
            handle = open(self.path, 'rt', encoding='utf-8')
        except OSError as e:
            raise InputError(f"failed to open raw input {self.path}: {e}") from e
        with handle:
            yield handle

class GzipSource(TextSource):
    kind = 'gzip'

    @contextmanager
    def open(self):
        with gzip.open(self.path, 'rt', encoding='utf-8') as handle:
            yield handle

class ZipSource(TextSource):
    kind = 'zip'

    @contextmanager
    def open(self):
        try:
            archive = zipfile.ZipFile(self.path)
        except (OSError, zipfile.BadZipFile) as e:
            raise InputError(f"failed to read zipped input {self.path}: {e}") from e
        with archive:
            entries = [info for info in archive.infolist() if not info.is_dir()]
            if not entries:
                raise InputError(f"zipped input {self.path} does not contain any file")
            if len(entries) > 1:
                log.warn(f"{self.path} holds {len(entries)} files, reading only {entries[0].filename}")
            with archive.open(entries[0]) as raw:
                yield io.TextIOWrapper(raw, encoding='utf-8')

def detect_source(path):
    try:
        with open(path, 'rb') as f:
            magic = f.read(4)
    except OSError as e:
        raise InputError(f"error checking input file for type {path}: {e}") from e
    if magic.startswith(ZIP_MAGIC):
        return ZipSource(path)
    if magic.startswith(GZIP_MAGIC):
        return GzipSource(path)
    return TextSource(path)

def is_skipped(line):
    return not line.strip() or line.startswith('#') or line.startswith(HEADER_TOKEN)

def parse_line(line, raw_format, path, line_number):
    fields = line.rstrip('\r\n').split('\t')
    required = REQUIRED_COLUMNS[raw_format]
    if len(fields) < required:
        raise ParseError(path, line_number, len(fields) + 1, line.rstrip('\r\n'), reason="missing column in")

    value = fields[POSITION_COLUMN - 1].strip()
    # unsigned ascii digits only
    if not (value.isascii() and value.isdigit()):
        raise ParseError(path, line_number, POSITION_COLUMN, value, reason="error parsing position")
    pos = int(value)

    # ancestry splits the two alleles across columns 4 and 5,
    # 23andme joins them in column 4
    if raw_format is RawFormat.ANCESTRY:
        alleles = fields[3].strip() + fields[4].strip()
    else:
        alleles = fields[3].strip()

    return RawCall(fields[0].strip(), fields[1].strip(), pos, alleles)

def read_calls(stream, raw_format, path):
    for line_number, line in enumerate(stream, start=1):
        if is_skipped(line):
            continue
        yield parse_line(line, raw_format, path, line_number)

def load_raw_calls(path, raw_format, debug=False):
    raw_format = RawFormat(raw_format)
    source = detect_source(path)
    log.logit(f"Reading {raw_format.value} calls from {source.kind} input: {path}")
    calls = {}
    rows = 0
    try:
        with source.open() as stream:
            for call in read_calls(stream, raw_format, path):
                calls[call.marker_id] = call
                rows += 1
    except (OSError, EOFError, UnicodeDecodeError, zipfile.BadZipFile) as e:
        raise InputError(f"failed to read raw input {path}: {e}") from e
    if rows != len(calls):
        log.debug(f"{rows - len(calls)} duplicate markers replaced by their later rows", debug)
    log.logit(f"Indexed {len(calls)} markers from {path}")
    return calls
