# lineshift/utils/backlog.py

from collections import deque
from typing import Deque, Sequence


def seed_backlog(product_kinds: Sequence[str], repetitions: int) -> Deque[str]:
    """
    Build the initial work queue for stage 1.

    The kinds are laid down in order, ``repetitions`` times over, so
    ("ProductA", "ProductB") x 100 alternates A, B, A, B, ...
    """
    backlog: Deque[str] = deque()
    for _ in range(repetitions):
        backlog.extend(product_kinds)
    return backlog
