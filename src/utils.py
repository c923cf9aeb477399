"""Utility functions for the storage-class quota tool."""

import re

from constants import STORAGE_CLASS_KEY_SUFFIX

# DNS-1123 subdomain, the format Kubernetes enforces for StorageClass names
_DNS1123_SUBDOMAIN = re.compile(
    r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"
)
_DNS1123_SUBDOMAIN_MAX_LENGTH = 253


def is_valid_storage_class_name(name: str) -> bool:
    """Check if a string is a valid StorageClass name.

    Names end up inside quota keys, so anything outside the DNS-1123
    subdomain format is rejected before it reaches a patch.
    """
    if not name or not isinstance(name, str):
        return False
    if len(name) > _DNS1123_SUBDOMAIN_MAX_LENGTH:
        return False
    return _DNS1123_SUBDOMAIN.match(name) is not None


def storage_class_key(storage_class: str) -> str:
    """Build the ResourceQuota key limiting requests for a storage class.

    Example: 'rbd-ceph-csi' -> 'rbd-ceph-csi.storageclass.storage.k8s.io/requests.storage'
    """
    return f"{storage_class}{STORAGE_CLASS_KEY_SUFFIX}"


def describe_namespace(namespace: str | None) -> str:
    """Human-readable namespace scope for log messages."""
    return f"namespace/{namespace}" if namespace else "all namespaces"
