"""Constants used across the quota tool."""

# Quota keys scoped to a storage class look like
# "<class>.storageclass.storage.k8s.io/requests.storage"
STORAGE_CLASS_KEY_SUFFIX = ".storageclass.storage.k8s.io/requests.storage"

# Generic (class-independent) storage request limit
GENERIC_STORAGE_KEY = "requests.storage"

ZERO_QUANTITY = "0"

# Field managers recorded on every patch so the mutation is attributable
FIELD_MANAGER_RESTRICTION = "storageclass-restriction"
FIELD_MANAGER_MIGRATION = "storageclass-migration"
FIELD_MANAGER_ZERO = "storageclass-quota-zero"

# Process exit codes
EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_FATAL = 2

METRICS_JOB_NAME = "storageclass-quota"
