"""Root pytest configuration for managed-files tests."""
import pytest

from managed_files.context import ReconcileContext
from managed_files.models import ClusterSpec
from managed_files.settings import Settings, TERRAFORM_MANAGED_FILES
from managed_files.storage.factory import StorageContext
from managed_files.storage.memfs import MemFSContext

from .storage.fakes.fake_s3 import FakeS3Client


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires real cloud credentials)"
    )


# Keep the developer's environment out of settings loaded in tests
@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Automatically clear managed-files environment variables."""
    for key in (
        "MANAGED_FILES_CONFIG_BASE",
        "MANAGED_FILES_FEATURE_FLAGS",
        "MANAGED_FILES_S3_REGION",
        "MANAGED_FILES_S3_ENDPOINT",
        "MANAGED_FILES_S3_SSE",
        "MANAGED_FILES_EXT_TIMEOUT",
        "AZURE_STORAGE_CONNECTION_STRING",
        "AZURE_STORAGE_ACCOUNT",
        "AZURE_STORAGE_KEY",
        "MANAGED_FILES_AZURE_BLOB_ENDPOINT",
    ):
        monkeypatch.delenv(key, raising=False)


# Standardized test fixtures
@pytest.fixture
def settings():
    """Standard test settings."""
    return Settings(s3_region="us-east-1")


@pytest.fixture
def terraform_settings():
    """Settings with Terraform managed files enabled."""
    return Settings(s3_region="us-east-1", feature_flags=frozenset({TERRAFORM_MANAGED_FILES}))


@pytest.fixture
def memfs():
    """Standard in-memory filesystem for testing."""
    return MemFSContext()


@pytest.fixture
def s3_client():
    """Standard fake S3 client with a 'state-store' bucket."""
    return FakeS3Client()


@pytest.fixture
def storage(settings, memfs, s3_client):
    """Storage factory wired to the in-memory filesystem and fake S3."""
    return StorageContext(settings, memfs=memfs, s3_client=s3_client)


@pytest.fixture
def cluster():
    """Standard cluster spec."""
    return ClusterSpec(name="dev.example.com", config_base="memfs://clusters/dev.example.com")


@pytest.fixture
def context(settings, storage, cluster):
    """Reconcile context whose config base is memfs://clusters/dev.example.com."""
    return ReconcileContext.create(settings, cluster=cluster, storage=storage)


@pytest.fixture
def s3_context(settings, storage):
    """Reconcile context whose config base is s3://state-store/dev.example.com."""
    cluster = ClusterSpec(name="dev.example.com", config_base="s3://state-store/dev.example.com")
    return ReconcileContext.create(settings, cluster=cluster, storage=storage)


@pytest.fixture
def terraform_context(terraform_settings, memfs, s3_client):
    """S3-backed context with the TerraformManagedFiles flag on."""
    storage = StorageContext(terraform_settings, memfs=memfs, s3_client=s3_client)
    cluster = ClusterSpec(name="dev.example.com", config_base="s3://state-store/dev.example.com")
    return ReconcileContext.create(terraform_settings, cluster=cluster, storage=storage)
