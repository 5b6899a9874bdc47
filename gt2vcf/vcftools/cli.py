import sys, signal
import click
from clint.textui import puts, colored

from gt2vcf.version import __version__
from gt2vcf.utils.exceptions import Gt2VcfError
from gt2vcf.vcftools.config import DEFAULT_REFERENCE, RawFormat, UnmatchedAllelePolicy

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])

def run_push(input_vcf, project, bucket, dataset_name, variantset_name):
    from gt2vcf.vcftools.handlers.uploader import GenomicsUploader
    uploader = GenomicsUploader.from_default_credentials(project, bucket,
                                                        dataset_name=dataset_name,
                                                        variantset_name=variantset_name)
    return uploader.import_vcf(input_vcf)

@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
def cli():
    '''Convert raw genotype calls from 23andme or ancestry.com into vcf format and upload them to google genomics.'''
    # to make this script/module behave nicely with unix pipes
    # http://newbebweb.blogspot.com/2012/02/python-head-ioerror-errno-32-broken.html
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)

@cli.command('conv', short_help="convert raw data to vcf format")
@click.argument('raw_type', type=click.Choice([f.value for f in RawFormat], case_sensitive=False))
@click.argument('input_data', type=click.Path(exists=True, dir_okay=False))
@click.option('--output-file', '-o', 'output_file', type=click.Path(), default=None, help="Path to the gzipped vcf output (default: input with a .vcf.gz extension)")
@click.option('--vcf-ref', '-v', 'vcf_ref', type=click.Path(), default=DEFAULT_REFERENCE, envvar='GT2VCF_REFERENCE', show_default=True, help="Path to the gzipped vcf reference data")
@click.option('--double-allosomes', is_flag=True, default=False, help="Write single-allele X and Y calls as homozygous diploid genotypes")
@click.option('--unmatched', 'unmatched',
              type=click.Choice([p.value for p in UnmatchedAllelePolicy], case_sensitive=False),
              default=UnmatchedAllelePolicy.REFERENCE.value, show_default=True,
              help="What to do with a called allele that is neither REF nor ALT: call it reference, drop the site or fail")
@click.option('--index', 'index_output', is_flag=True, default=False, help="Write a tabix index next to the output")
@click.option('--google-project', '-g', 'project', type=click.STRING, default=None, help="The google cloud project to push your vcf into")
@click.option('--bucket', '-b', 'bucket', type=click.STRING, default=None, help="Google cloud storage bucket used for staging")
@click.option('--push', '-p', 'push', is_flag=True, default=False, help="Push the generated vcf into google genomics")
@click.option('--debug', '-d', is_flag=True, show_default=True, default=False, help="Print extra debugging output")
def conv(raw_type, input_data, output_file, vcf_ref, double_allosomes, unmatched, index_output, project, bucket, push, debug):
    """
    Join RAW_TYPE genotype calls in INPUT_DATA (zip or ascii) with the reference vcf by rsid.
    """
    if push and (not project or not bucket):
        raise click.UsageError("if --push is used to push the output of conversion into google genomics, a project and bucket must be specified")

    from gt2vcf.vcftools.config import ConvertConfig
    import gt2vcf.vcftools.converter as converter
    config = ConvertConfig(raw_format=raw_type.lower(),
                           input_path=input_data,
                           output_path=output_file,
                           reference_path=vcf_ref,
                           double_allosomes=double_allosomes,
                           unmatched_allele=unmatched.lower(),
                           index_output=index_output,
                           debug=debug)
    try:
        converter.convert(config)
    except Gt2VcfError as e:
        sys.exit(f"[err] {e}")
    puts(f"\nvcf output at: {colored.cyan(config.output_path)}\n")

    if push:
        try:
            run_push(config.output_path, project, bucket, "2vcf dataset", "2vcf variants")
        except Gt2VcfError as e:
            sys.exit(f"[err] {e}")
        puts(colored.green(f"---> Submitted {config.output_path} for import into {project}"))

@cli.command('push', short_help="push a vcf into google genomics")
@click.argument('input_data', type=click.Path(exists=True, dir_okay=False))
@click.option('--google-project', '-g', 'project', type=click.STRING, required=True, help="The google cloud project to push your vcf into")
@click.option('--bucket', '-b', 'bucket', type=click.STRING, required=True, help="Google cloud storage bucket used for staging")
@click.option('--dataset-name', '-d', 'dataset_name', default="2vcf dataset", show_default=True,
              help="Dataset to load variants into, created when no dataset of this name exists")
@click.option('--variantset-name', '-v', 'variantset_name', default="2vcf variants", show_default=True,
              help="Variantset to load variants into, created when no variantset of this name exists")
def push(input_data, project, bucket, dataset_name, variantset_name):
    """
    Stage INPUT_DATA in a bucket and import it into google genomics.
    """
    try:
        job = run_push(input_data, project, bucket, dataset_name, variantset_name)
    except Gt2VcfError as e:
        sys.exit(f"[err] {e}")
    puts(colored.green(f"---> Import of ({input_data}) started as operation {job.name}"))
