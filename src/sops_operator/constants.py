"""Constants for the SOPS Operator."""

from datetime import timedelta

# API Group
API_GROUP = "craftypath.github.io"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_SOPS_SECRET = "SopsSecret"
PLURAL_SOPS_SECRETS = "sopssecrets"

# Controller identity
FIELD_MANAGER = "sops-operator"

# Status values
STATUS_SUCCESS = "Success"
STATUS_FAILURE = "Failure"

# Apply results
RESULT_CREATED = "created"
RESULT_UPDATED = "updated"
RESULT_UNCHANGED = "unchanged"

# Event Types
EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"

# Event Reasons
EVENT_REASON_PROCESSING_ERROR = "ProcessingError"

# Retry schedule
FAST_RETRY_DELAY = timedelta(seconds=1)
MAX_RETRY_DELAY = timedelta(hours=6)
