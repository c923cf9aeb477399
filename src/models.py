"""Domain models for the storage-class quota tool.

This module defines typed data structures for intents, quota objects and
per-object outcomes, keeping illegal states unrepresentable where practical.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from constants import (
    FIELD_MANAGER_MIGRATION,
    FIELD_MANAGER_RESTRICTION,
    FIELD_MANAGER_ZERO,
)
from utils import storage_class_key


# =============================================================================
# Enums for constrained values
# =============================================================================


class OutcomeStatus(Enum):
    """Result of processing one resource quota."""

    APPLIED = "Applied"
    SKIPPED = "Skipped"
    FAILED = "Failed"


# =============================================================================
# Intents
# =============================================================================


@dataclass(frozen=True)
class Restrict:
    """Cap (or forbid, with a zero quota) usage of a storage class."""

    storage_class: str
    quota: str

    name: ClassVar[str] = "restrict"
    field_manager: ClassVar[str] = FIELD_MANAGER_RESTRICTION

    @property
    def storage_classes(self) -> tuple[str, ...]:
        return (self.storage_class,)


@dataclass(frozen=True)
class Unrestrict:
    """Remove the storage-class cap entirely."""

    storage_class: str

    name: ClassVar[str] = "unrestrict"
    field_manager: ClassVar[str] = FIELD_MANAGER_RESTRICTION

    @property
    def storage_classes(self) -> tuple[str, ...]:
        return (self.storage_class,)


@dataclass(frozen=True)
class Migrate:
    """Move the generic storage quota onto a storage class.

    The existing ``requests.storage`` value is copied to ``to_storage_class``
    and ``from_storage_class`` is set to zero. The generic key itself is
    left in place.
    """

    from_storage_class: str
    to_storage_class: str

    name: ClassVar[str] = "migrate"
    field_manager: ClassVar[str] = FIELD_MANAGER_MIGRATION

    @property
    def storage_classes(self) -> tuple[str, ...]:
        return (self.from_storage_class, self.to_storage_class)


@dataclass(frozen=True)
class ZeroInit:
    """Initialize a storage-class quota to zero unless it already is."""

    storage_class: str

    name: ClassVar[str] = "set-zero"
    field_manager: ClassVar[str] = FIELD_MANAGER_ZERO

    @property
    def storage_classes(self) -> tuple[str, ...]:
        return (self.storage_class,)


Intent = Union[Restrict, Unrestrict, Migrate, ZeroInit]


# =============================================================================
# Cluster state and patches
# =============================================================================


@dataclass(frozen=True)
class QuotaRef:
    """Identity of a ResourceQuota object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class QuotaObject:
    """Snapshot of a ResourceQuota's hard limits, as listed."""

    ref: QuotaRef
    hard: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, rq: Any) -> "QuotaObject":
        """Create from a V1ResourceQuota returned by the Kubernetes client."""
        hard = (rq.spec.hard if rq.spec else None) or {}
        return cls(
            ref=QuotaRef(namespace=rq.metadata.namespace, name=rq.metadata.name),
            hard={k: str(v) for k, v in hard.items()},
        )


@dataclass(frozen=True)
class QuotaPatch:
    """Partial update of ``spec.hard``.

    A value of None removes the key under strategic-merge semantics.
    """

    hard: dict[str, str | None]

    @classmethod
    def for_storage_classes(cls, values: dict[str, str | None]) -> "QuotaPatch":
        """Build a patch keyed by storage-class name instead of quota key."""
        return cls(hard={storage_class_key(sc): v for sc, v in values.items()})

    def to_body(self) -> dict[str, Any]:
        """Convert to the request body sent to the API server."""
        return {"spec": {"hard": dict(self.hard)}}

    def __str__(self) -> str:
        return json.dumps(self.to_body(), sort_keys=True)


# =============================================================================
# Outcomes
# =============================================================================


@dataclass(frozen=True)
class PatchOutcome:
    """Result of computing and applying a patch to one ResourceQuota."""

    ref: QuotaRef
    status: OutcomeStatus
    reason: str = ""
    error: Exception | None = None

    @classmethod
    def applied(cls, ref: QuotaRef) -> "PatchOutcome":
        return cls(ref=ref, status=OutcomeStatus.APPLIED)

    @classmethod
    def skipped(cls, ref: QuotaRef, reason: str) -> "PatchOutcome":
        return cls(ref=ref, status=OutcomeStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, ref: QuotaRef, error: Exception) -> "PatchOutcome":
        return cls(ref=ref, status=OutcomeStatus.FAILED, reason=str(error), error=error)


@dataclass(frozen=True)
class BatchResult:
    """Ordered outcomes of a run, one per object in scope."""

    outcomes: tuple[PatchOutcome, ...] = ()

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def failures(self) -> list[tuple[QuotaRef, Exception]]:
        """(object, cause) pairs for every failed outcome, in order."""
        return [
            (o.ref, o.error)
            for o in self.outcomes
            if o.status == OutcomeStatus.FAILED and o.error is not None
        ]

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def error(self) -> "BatchFailedError | None":
        """Aggregate error, or None if no object failed."""
        failures = self.failures
        if not failures:
            return None
        return BatchFailedError(failures)


# =============================================================================
# Exceptions
# =============================================================================


class QuotaToolError(Exception):
    """Base exception for quota tool errors."""

    pass


class ConfigurationError(QuotaToolError):
    """Invalid or missing configuration."""

    pass


class InvalidQuantityError(QuotaToolError):
    """A quota size string could not be parsed."""

    pass


class ConnectFailureError(QuotaToolError):
    """Could not build an authenticated Kubernetes client."""

    pass


class StorageClassNotFoundError(QuotaToolError):
    """A referenced StorageClass does not exist."""

    pass


class LookupFailureError(QuotaToolError):
    """Error while checking whether a StorageClass exists."""

    pass


class ListFailureError(QuotaToolError):
    """Listing ResourceQuotas failed."""

    pass


class NoQuotaObjectsError(QuotaToolError):
    """The selected scope contains no ResourceQuota objects."""

    pass


class BatchFailedError(QuotaToolError):
    """One or more ResourceQuota patches failed."""

    def __init__(self, failures: list[tuple[QuotaRef, Exception]]) -> None:
        self.failures = list(failures)
        details = "; ".join(f"{ref}: {cause}" for ref, cause in self.failures)
        super().__init__(
            f"{len(self.failures)} ResourceQuota patch(es) failed: {details}"
        )
