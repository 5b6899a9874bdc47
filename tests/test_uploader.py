"""Tests for the google genomics uploader, against in-memory fakes."""

from pathlib import Path

import pytest
from google.api_core import exceptions as api_exceptions

from gt2vcf.utils.exceptions import UploadError
from gt2vcf.vcftools.handlers.uploader import GenomicsUploader, ImportJob


class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name

    def exists(self):
        return self.name in self.bucket.objects

    def upload_from_filename(self, filename):
        self.bucket.objects[self.name] = Path(filename).read_bytes()


class FakeBucket:
    def __init__(self):
        self.objects = {}

    def blob(self, name, chunk_size=None):
        return FakeBlob(self, name)


class FakeStorage:
    def __init__(self):
        self.buckets = {}

    def bucket(self, name):
        return self.buckets.setdefault(name, FakeBucket())


class Request:
    def __init__(self, result):
        self.result = result

    def execute(self):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeResource:
    def __init__(self, service, kind):
        self.service = service
        self.kind = kind

    def list(self, projectId):
        return Request({"datasets": list(self.service.datasets)})

    def search(self, body):
        return Request({"variantSets": [vs for vs in self.service.variantsets
                                        if vs["datasetId"] in body["datasetIds"]]})

    def create(self, body):
        created = dict(body, id=f"{self.kind}{len(self.service.created) + 1}")
        self.service.created.append(created)
        getattr(self.service, self.kind).append(created)
        return Request(created)

    def import_(self, body):
        self.service.imports.append(body)
        return Request(self.service.import_result)


class FakeGenomics:
    def __init__(self, datasets=None, variantsets=None, import_result=None):
        self.datasets = list(datasets or [])
        self.variantsets = list(variantsets or [])
        self.created = []
        self.imports = []
        self.import_result = import_result if import_result is not None else {"name": "operations/123"}


class Service:
    def __init__(self, fake):
        self.fake = fake

    def datasets(self):
        return FakeResource(self.fake, "datasets")

    def variantsets(self):
        return FakeResource(self.fake, "variantsets")

    def variants(self):
        return FakeResource(self.fake, "variants")


@pytest.fixture
def vcf(tmp_path: Path) -> Path:
    path = tmp_path / "jane.vcf.gz"
    path.write_bytes(b"not really bgzf")
    return path


def uploader(fake, storage=None, **kwargs):
    return GenomicsUploader("proj", "staging", storage or FakeStorage(), Service(fake), **kwargs)


class TestStageVcf:
    def test_uploads_new_object(self, vcf: Path) -> None:
        storage = FakeStorage()

        url = uploader(FakeGenomics(), storage).stage_vcf(str(vcf))

        assert url == "gs://staging/jane.vcf.gz"
        assert storage.buckets["staging"].objects["jane.vcf.gz"] == b"not really bgzf"

    def test_existing_object_not_uploaded_again(self, vcf: Path) -> None:
        storage = FakeStorage()
        storage.bucket("staging").objects["jane.vcf.gz"] = b"old"

        url = uploader(FakeGenomics(), storage).stage_vcf(str(vcf))

        assert url == "gs://staging/jane.vcf.gz"
        assert storage.buckets["staging"].objects["jane.vcf.gz"] == b"old"


class TestDatasetsAndVariantsets:
    def test_finds_existing_dataset(self) -> None:
        fake = FakeGenomics(datasets=[{"id": "d7", "name": "2vcf dataset"}])

        assert uploader(fake).get_or_create_dataset()["id"] == "d7"
        assert fake.created == []

    def test_creates_missing_dataset(self) -> None:
        fake = FakeGenomics(datasets=[{"id": "d7", "name": "other"}])

        dataset = uploader(fake, dataset_name="mine").get_or_create_dataset()

        assert dataset["name"] == "mine"
        assert dataset["projectId"] == "proj"

    def test_finds_existing_variantset(self) -> None:
        fake = FakeGenomics(variantsets=[{"id": "v1", "name": "2vcf variants", "datasetId": "d7"}])

        assert uploader(fake).get_or_create_variantset({"id": "d7"})["id"] == "v1"

    def test_creates_missing_variantset(self) -> None:
        fake = FakeGenomics(variantsets=[{"id": "v1", "name": "2vcf variants", "datasetId": "other"}])

        variantset = uploader(fake).get_or_create_variantset({"id": "d7"})

        assert variantset["datasetId"] == "d7"
        assert variantset["name"] == "2vcf variants"


class TestImportVcf:
    def test_import_returns_job(self, vcf: Path) -> None:
        fake = FakeGenomics(datasets=[{"id": "d7", "name": "2vcf dataset"}],
                            variantsets=[{"id": "v1", "name": "2vcf variants", "datasetId": "d7"}])

        job = uploader(fake).import_vcf(str(vcf))

        assert job == ImportJob("operations/123", "gs://staging/jane.vcf.gz", "v1")
        assert fake.imports == [{
            "format": "FORMAT_VCF",
            "variantSetId": "v1",
            "sourceUris": ["gs://staging/jane.vcf.gz"],
        }]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(UploadError, match="does not exist"):
            uploader(FakeGenomics()).import_vcf(str(tmp_path / "missing.vcf.gz"))

    def test_service_error_is_wrapped(self, vcf: Path) -> None:
        fake = FakeGenomics(import_result=api_exceptions.TooManyRequests("quota exceeded"))

        with pytest.raises(UploadError, match="quota exceeded"):
            uploader(fake).import_vcf(str(vcf))

    def test_programming_errors_are_not_wrapped(self, vcf: Path) -> None:
        fake = FakeGenomics(import_result=KeyError("id"))

        with pytest.raises(KeyError):
            uploader(fake).import_vcf(str(vcf))
