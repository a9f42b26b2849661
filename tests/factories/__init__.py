"""Test factories for creating test data."""

from tests.factories.datasets import DEFAULT_DATASETS, DatasetServer, first_remote_url

__all__ = [
    "DEFAULT_DATASETS",
    "DatasetServer",
    "first_remote_url",
]
