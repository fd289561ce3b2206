"""
Approximate token counting.

One token is taken to be four characters. The figure is a comparative cost
signal for chunk boundaries, not a tokenizer.

Dependencies: math
System role: Cost metric for the chunker
"""

import math

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """
    Estimate the token count of a piece of text.

    Args:
        text: Any string (may be empty)

    Returns:
        int: ceil(len(text) / 4)
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)
