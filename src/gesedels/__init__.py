"""gesedels — a namespaced key-value store over plaintext HTTP.

Pairs are addressed by a case-insensitive ``(user, name)`` identity and
stored, whitespace-trimmed, in a single-file transactional database.
"""

from gesedels.exceptions import GesedelsError, StoreError, TxNotWritableError
from gesedels.pairs import delete_pair, get_pair, list_pairs, set_pair
from gesedels.responses import write_error, write_failure, write_http
from gesedels.sanitise import is_private, pair_key, pair_value

__all__ = [
    "GesedelsError",
    "StoreError",
    "TxNotWritableError",
    "delete_pair",
    "get_pair",
    "is_private",
    "list_pairs",
    "pair_key",
    "pair_value",
    "set_pair",
    "write_error",
    "write_failure",
    "write_http",
]
