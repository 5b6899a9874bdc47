import collections

import gt2vcf.utils.logger as log
from gt2vcf.utils.exceptions import UnmatchedAlleleError
from gt2vcf.vcftools.config import UnmatchedAllelePolicy

ALLOSOMES = {'X', 'Y', 'CHRX', 'CHRY'}
PROGRESS_EVERY = 100000

STAT_LABELS = collections.OrderedDict([
    ('reference_records', 'Reference records read'),
    ('matched', 'Records matched to raw calls'),
    ('written', 'Records written'),
    ('doubled_allosomes', 'Hemizygous allosome calls doubled'),
    ('unmatched_alleles', 'Called alleles not found in REF or ALT'),
    ('skipped_sites', 'Sites dropped for unmatched alleles'),
])
ALWAYS_REPORTED = {'reference_records', 'matched', 'written'}
WARNED = {'unmatched_alleles', 'skipped_sites'}

MergedVariant = collections.namedtuple('MergedVariant', ['site', 'genotype'])

class MergeStats:
    def __init__(self):
        self.reference_records = 0
        self.matched = 0
        self.written = 0
        self.doubled_allosomes = 0
        self.unmatched_alleles = 0
        self.skipped_sites = 0

    def as_dict(self):
        return collections.OrderedDict((name, getattr(self, name)) for name in STAT_LABELS)

    def report(self):
        for name, count in self.as_dict().items():
            if count and name in WARNED:
                log.warn(f"{STAT_LABELS[name]}: {count}")
            elif count or name in ALWAYS_REPORTED:
                log.logit(f"{STAT_LABELS[name]}: {count}")

def is_allosome(chrom):
    return chrom.upper() in ALLOSOMES

def double_allosome_call(alleles, chrom):
    if len(alleles) == 1 and is_allosome(chrom):
        return alleles * 2
    return alleles

def allele_index_list(site):
    return [site.ref] + list(site.alts)

def find_allele(allele, alleles):
    for i, candidate in enumerate(alleles):
        if candidate == allele:
            return i
    return None

def genotype_indices(called, alleles, policy=UnmatchedAllelePolicy.REFERENCE, marker_id=None, stats=None):
    """Index of every called allele within [REF] + ALT.

    Returns None when the site should be dropped.
    """
    indices = []
    for allele in called:
        index = find_allele(allele, alleles)
        if index is None:
            if policy is UnmatchedAllelePolicy.FAIL:
                raise UnmatchedAlleleError(marker_id, allele, alleles)
            if stats is not None:
                stats.unmatched_alleles += 1
            if policy is UnmatchedAllelePolicy.SKIP:
                return None
            index = 0
        indices.append(index)
    return indices

def render_genotype(indices):
    return '/'.join(str(i) for i in indices)

def lookup_call(site, raw_calls):
    for marker_id in site.ids:
        call = raw_calls.get(marker_id)
        if call is not None:
            return call
    return None

def merge(sites, raw_calls, config, sample_name, stats=None):
    """Join reference sites with raw calls by rsid, in reference order."""
    stats = stats if stats is not None else MergeStats()
    for site in sites:
        stats.reference_records += 1
        if stats.reference_records % PROGRESS_EVERY == 0:
            log.debug(f"{stats.reference_records} reference records processed for {sample_name}, {stats.written} written", config.debug)

        call = lookup_call(site, raw_calls)
        if call is None:
            continue
        stats.matched += 1

        called = call.alleles
        if config.double_allosomes:
            called = double_allosome_call(called, site.chrom)
            if len(called) != len(call.alleles):
                stats.doubled_allosomes += 1

        indices = genotype_indices(called, allele_index_list(site), config.unmatched_allele, call.marker_id, stats)
        if indices is None:
            stats.skipped_sites += 1
            continue

        stats.written += 1
        yield MergedVariant(site, render_genotype(indices))
