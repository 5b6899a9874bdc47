import gt2vcf.utils.logger as log
from gt2vcf.vcftools.handlers.raw_calls import load_raw_calls
from gt2vcf.vcftools.handlers.reference import open_reference
from gt2vcf.vcftools.handlers.merge import MergeStats, merge
from gt2vcf.vcftools.handlers.writer import open_writer, index_output

def convert(config):
    log.logit(f"Converting {config.raw_format.value} data: {config.input_path}", color="green")
    raw_calls = load_raw_calls(config.input_path, config.raw_format, config.debug)

    stats = MergeStats()
    sample_name = config.sample_name
    with open_reference(config.reference_path, sample_name) as reference:
        with open_writer(config.output_path, reference.header) as writer:
            writer.write_all(merge(reference, raw_calls, config, sample_name, stats))

    if config.index_output:
        index_output(config.output_path)

    stats.report()
    log.logit(f"Finished writing {config.output_path}", color="green")
    return stats
