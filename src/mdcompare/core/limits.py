"""Caller-side size policy for comparisons

The comparison core never enforces a size bound; the store and the CLI call
check_diff_size before handing pathologically large inputs to it.
"""

from mdcompare.core.errors import InvalidInputError
from mdcompare.core.models import Granularity
from mdcompare.core.utils.tokens import tokenize


def check_diff_size(old: str | None, new: str | None, granularity: Granularity, max_tokens: int) -> None:
    """Raise InvalidInputError when len(old_tokens) * len(new_tokens) exceeds max_tokens. 0 disables."""
    if max_tokens <= 0:
        return
    product = len(tokenize(old or "", granularity)) * len(tokenize(new or "", granularity))
    if product > max_tokens:
        raise InvalidInputError(
            f"Documents too large to compare by {Granularity(granularity).value} "
            f"({product} token pairs > limit {max_tokens})"
        )
