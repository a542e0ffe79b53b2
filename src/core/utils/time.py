"""
Time-related utilities for the pipeline.

Storage keys are prefixed with the current Unix time in milliseconds so that
keys sort by upload time and two uploads in different milliseconds can never
collide.
"""

import time


def epoch_millis() -> int:
    """Return the current Unix time in whole milliseconds.

    Example:
        1700000000000
    """
    return time.time_ns() // 1_000_000
