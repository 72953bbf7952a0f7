"""
Relative date labels a schedule's date range may use.
"""

from typing import List

MAX_DAY_OFFSET = 30


def date_range_labels() -> List[str]:
    """``today``, ``tomorrow``, then ``in 2 days`` .. ``in 30 days``."""
    return ["today", "tomorrow"] + [f"in {n} days" for n in range(2, MAX_DAY_OFFSET + 1)]
