import os
import collections

from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions
from googleapiclient import errors as api_errors

import gt2vcf.utils.logger as log
from gt2vcf.utils.exceptions import UploadError

GENOMICS_SCOPE = 'https://www.googleapis.com/auth/genomics'
CHUNK_SIZE = 10 * 256 * 1024

GOOGLE_ERRORS = (auth_exceptions.GoogleAuthError, api_errors.Error, api_exceptions.GoogleAPIError)
UPLOAD_ERRORS = (OSError,) + GOOGLE_ERRORS

ImportJob = collections.namedtuple('ImportJob', ['name', 'source_uri', 'variantset_id'])

class GenomicsUploader:
    """Stages a vcf in cloud storage and hands it to the genomics variant importer.

    The import runs asynchronously on the service side; the returned ImportJob
    carries the operation name and nothing here polls it.
    """

    def __init__(self, project, bucket, storage_client, genomics_service,
                 dataset_name='2vcf dataset', variantset_name='2vcf variants'):
        self.project = project
        self.bucket = bucket
        self.storage_client = storage_client
        self.genomics = genomics_service
        self.dataset_name = dataset_name
        self.variantset_name = variantset_name

    @classmethod
    def from_default_credentials(cls, project, bucket, **kwargs):
        import google.auth
        from google.cloud import storage
        from googleapiclient import discovery

        try:
            credentials, _ = google.auth.default(scopes=[GENOMICS_SCOPE])
            storage_client = storage.Client(project=project)
            genomics_service = discovery.build('genomics', 'v1', credentials=credentials, cache_discovery=False)
        except GOOGLE_ERRORS as e:
            raise UploadError(f"could not connect to google cloud project {project}: {e}") from e
        return cls(project, bucket, storage_client, genomics_service, **kwargs)

    def stage_vcf(self, input_file):
        filename = os.path.basename(input_file)
        gcs_url = f"gs://{self.bucket}/{filename}"
        staging = self.storage_client.bucket(self.bucket)
        blob = staging.blob(filename, chunk_size=CHUNK_SIZE)
        if blob.exists():
            log.logit(f"{gcs_url} already staged")
            return gcs_url
        log.logit(f"Staging {input_file} to {gcs_url}")
        blob.upload_from_filename(input_file)
        log.logit(f"Copied {os.path.getsize(input_file)} bytes to staging bucket")
        return gcs_url

    def get_or_create_dataset(self):
        response = self.genomics.datasets().list(projectId=self.project).execute()
        for dataset in response.get('datasets', []):
            if dataset.get('name') == self.dataset_name:
                log.logit(f"Found existing dataset \"{self.dataset_name}\"")
                return dataset
        log.logit(f"Could not find dataset named \"{self.dataset_name}\", creating it now")
        return self.genomics.datasets().create(body={
            'name': self.dataset_name,
            'projectId': self.project
        }).execute()

    def get_or_create_variantset(self, dataset):
        response = self.genomics.variantsets().search(body={'datasetIds': [dataset['id']]}).execute()
        for variantset in response.get('variantSets', []):
            if variantset.get('name') == self.variantset_name:
                log.logit(f"Found existing variantset \"{self.variantset_name}\"")
                return variantset
        log.logit(f"Could not find variantset named \"{self.variantset_name}\", creating it now")
        return self.genomics.variantsets().create(body={
            'name': self.variantset_name,
            'datasetId': dataset['id']
        }).execute()

    def import_vcf(self, input_file):
        if not os.path.exists(input_file):
            raise UploadError(f"vcf to import does not exist: {input_file}")
        try:
            gcs_url = self.stage_vcf(input_file)
            dataset = self.get_or_create_dataset()
            variantset = self.get_or_create_variantset(dataset)
            operation = self.genomics.variants().import_(body={
                'format': 'FORMAT_VCF',
                'variantSetId': variantset['id'],
                'sourceUris': [gcs_url]
            }).execute()
        except UPLOAD_ERRORS as e:
            raise UploadError(f"failed to import {input_file} into project {self.project}: {e}") from e
        job = ImportJob(operation.get('name'), gcs_url, variantset['id'])
        log.logit(f"Check on import progress with: gcloud alpha genomics operations describe {job.name}")
        return job
