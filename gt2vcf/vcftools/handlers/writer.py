import vcfpy
import pysam

import gt2vcf.utils.logger as log
from gt2vcf.utils.exceptions import OutputError

def format_variant(variant):
    return f"{variant.site.fixed}\tGT\t{variant.genotype}"

class VariantWriter:
    """Single-sample vcf output, always bgzf compressed whatever the file name."""

    def __init__(self, path, header):
        self.path = path
        self.header = header
        self.writer = None
        self.count = 0

    def __enter__(self):
        try:
            stream = open(self.path, 'wb')
        except OSError as e:
            raise OutputError(f"error opening file for vcf output {self.path}: {e}") from e
        try:
            self.writer = vcfpy.Writer.from_stream(stream, self.header, self.path, use_bgzf=True)
        except OSError as e:
            stream.close()
            raise OutputError(f"error writing vcf header to {self.path}: {e}") from e
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.writer is not None:
            try:
                self.writer.close()
            except OSError as e:
                if exc_type is None:
                    raise OutputError(f"error finishing vcf output {self.path}: {e}") from e
            finally:
                self.writer = None
        return False

    def write(self, variant):
        try:
            print(format_variant(variant), file=self.writer.stream)
        except OSError as e:
            raise OutputError(f"error writing vcf output {self.path}: {e}") from e
        self.count += 1

    def write_all(self, variants):
        for variant in variants:
            self.write(variant)
        return self.count

def open_writer(path, header):
    return VariantWriter(path, header)

def index_output(path):
    log.logit(f"Indexing {path}")
    try:
        return pysam.tabix_index(path, preset="vcf", force=True, keep_original=True)
    except (OSError, ValueError) as e:
        raise OutputError(f"error indexing vcf output {path}: {e}") from e
