from usercss.resolver.placeholders import Placeholder, find_placeholders, iter_batches
from usercss.resolver.resolver import DEFAULT_BATCH_SIZE, replacement_for, resolve

__all__ = [
    "Placeholder",
    "find_placeholders",
    "iter_batches",
    "DEFAULT_BATCH_SIZE",
    "replacement_for",
    "resolve",
]
