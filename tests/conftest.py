"""Test configuration and fixtures for prefix-manifest."""

import pytest
from botocore.exceptions import ClientError

from prefix_manifest.objectstorage.listing import RetryPolicy
from prefix_manifest.objectstorage.store import (
    ListPage,
    StoreObject,
    is_directory_placeholder,
)


def make_client_error(code, status, operation="ListObjectsV2"):
    """Build a botocore ClientError with the given code and HTTP status."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} message"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


def make_page(objects, next_token=None):
    """Build a ListPage from (path, size) pairs."""
    return ListPage(
        objects=tuple(
            StoreObject(path, size, is_directory_placeholder(path))
            for path, size in objects
        ),
        next_token=next_token,
    )


class FakeStoreClient:
    """In-memory store client serving pre-built pages keyed by token.

    ``failures`` maps a token to a list of errors raised, in order, before
    the page is served. An error listed under ``always_fail`` is raised on
    every fetch of that token.
    """

    def __init__(self, pages, failures=None, always_fail=None, sizes=None):
        self.pages = pages
        self.failures = {
            token: list(errors) for token, errors in (failures or {}).items()
        }
        self.always_fail = always_fail or {}
        self.sizes = sizes or {}
        self.calls = []
        self.describe_calls = 0

    def list_page(self, bucket, prefix, token=None):
        self.calls.append((bucket, prefix, token))
        if token in self.always_fail:
            raise self.always_fail[token]
        pending = self.failures.get(token)
        if pending:
            raise pending.pop(0)
        return self.pages[token]

    def describe_bucket(self, bucket):
        self.describe_calls += 1
        return {"name": bucket, "location": "test"}

    def object_size(self, bucket, path):
        return self.sizes[path]


@pytest.fixture
def no_wait_policy():
    """Retry policy that never sleeps between attempts."""
    return RetryPolicy(max_attempts=3, sleep=lambda seconds: None)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
