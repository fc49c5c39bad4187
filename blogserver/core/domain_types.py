"""Domain Types — enums shared by the runtime and the API layer.

Design Decisions:
    - str Enums: serialize to JSON (health probe, log extras) without custom encoders
"""

from enum import Enum


class LifecycleState(str, Enum):
    """BlogRuntime lifecycle. RUNNING and SAVED alternate while serving."""
    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"
    RUNNING = "running"
    SAVED = "saved"
    TERMINATED = "terminated"


class MissingDataPolicy(str, Enum):
    """What start() does when the data file does not exist."""
    START_EMPTY = "start_empty"
    FAIL = "fail"
