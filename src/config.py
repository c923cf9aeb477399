"""Run configuration for the storage-class quota tool."""

import os
from dataclasses import dataclass

from models import ConfigurationError, Intent, Migrate
from utils import describe_namespace, is_valid_storage_class_name

DEFAULT_WORKERS = 1
# Matches the client-side default of the Kubernetes Go client
DEFAULT_QPS = 5.0


def env_default(name: str, default: str | None = None) -> str | None:
    """Read a setting from the environment, treating empty as unset."""
    return os.environ.get(name) or default


@dataclass(frozen=True)
class RunConfig:
    """Immutable, validated configuration for one run.

    Built once at startup and passed explicitly to the runner.
    """

    intent: Intent
    namespace: str | None = None
    kubeconfig: str | None = None
    context: str | None = None
    workers: int = DEFAULT_WORKERS
    qps: float = DEFAULT_QPS
    pushgateway: str | None = None

    def __post_init__(self) -> None:
        for name in self.intent.storage_classes:
            if not is_valid_storage_class_name(name):
                raise ConfigurationError(
                    f"invalid storageclass name {name!r}, "
                    "must be a lowercase RFC 1123 subdomain"
                )
        if isinstance(self.intent, Migrate) and (
            self.intent.from_storage_class == self.intent.to_storage_class
        ):
            raise ConfigurationError(
                "--from and --to must name different storage classes"
            )
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if self.qps < 0:
            raise ConfigurationError(f"qps must not be negative, got {self.qps}")

    @property
    def scope(self) -> str:
        return describe_namespace(self.namespace)
