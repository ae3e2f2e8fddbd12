"""ID generation utilities.

Ids are opaque to the namespace engine; the time component only keeps them
roughly sortable in logs and Redis scans.
"""

import random
import string
import time

FOLDER_ID_PREFIX = "fld"
FILE_ID_PREFIX = "fil"

_BASE36 = string.digits + string.ascii_lowercase
_RANDOM_LENGTH = 8


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID with optional prefix.

    Format: {prefix}_{epoch_ms in base36}{8 random chars}
    Example: fld_m1a2b3c4k9x0p2qz
    """
    stamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(_BASE36, k=_RANDOM_LENGTH))
    body = stamp + suffix
    return f"{prefix}_{body}" if prefix else body


def _to_base36(num: int) -> str:
    digits = []
    while True:
        num, rem = divmod(num, 36)
        digits.append(_BASE36[rem])
        if num == 0:
            return "".join(reversed(digits))
