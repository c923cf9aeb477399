"""Computation of ResourceQuota patches.

Everything in this module is pure: given an intent and the listed state of a
single ResourceQuota, it returns the patch to apply or the reason to skip.
"""

from constants import GENERIC_STORAGE_KEY, ZERO_QUANTITY
from models import Intent, Migrate, QuotaObject, QuotaPatch, Restrict, Unrestrict, ZeroInit
from quantity import is_zero_quantity
from utils import storage_class_key

SKIP_NO_EXISTING_QUOTA = "no existing quota"
SKIP_ALREADY_ZERO = "already zero"


def compute_patch(intent: Intent, obj: QuotaObject) -> QuotaPatch | str:
    """Decide what to do with one ResourceQuota.

    Returns:
        A QuotaPatch to apply, or a skip reason string
    """
    if isinstance(intent, Restrict):
        return QuotaPatch.for_storage_classes({intent.storage_class: intent.quota})

    if isinstance(intent, Unrestrict):
        return QuotaPatch.for_storage_classes({intent.storage_class: None})

    if isinstance(intent, Migrate):
        # Read from the listed snapshot, never from a partially patched object
        existing = obj.hard.get(GENERIC_STORAGE_KEY)
        if existing is None:
            return SKIP_NO_EXISTING_QUOTA
        # The generic key is intentionally left in place
        return QuotaPatch.for_storage_classes(
            {
                intent.to_storage_class: existing,
                intent.from_storage_class: ZERO_QUANTITY,
            }
        )

    if isinstance(intent, ZeroInit):
        if is_zero_quantity(obj.hard.get(storage_class_key(intent.storage_class))):
            return SKIP_ALREADY_ZERO
        return QuotaPatch.for_storage_classes({intent.storage_class: ZERO_QUANTITY})

    raise TypeError(f"unsupported intent: {intent!r}")
