"""Record and token ids."""

from cuid2 import cuid_wrapper

# Default CUID2 length (24) fits the 32-char id columns.
_next_id = cuid_wrapper()


def generate_cuid() -> str:
    """Return a fresh CUID2 used as entity id or JWT jti."""
    return str(_next_id())
