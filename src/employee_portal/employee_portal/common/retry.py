from __future__ import annotations

import logging
from typing import Callable, TypeVar

from ..core.exceptions import TransientError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def call_with_retry(fn: Callable[..., T], *args, retries: int = 1, **kwargs) -> T:
    """Call ``fn`` and retry it ``retries`` more times on TransientError.

    Domain errors and unexpected exceptions propagate on the first failure.
    """
    attempt = 0
    while True:
        try:
            return fn(*args, **kwargs)
        except TransientError as e:
            if attempt >= retries:
                raise
            attempt += 1
            logger.warning("Transient failure in %s (%s), retrying", getattr(fn, "__name__", fn), e)
