from uuid import uuid4


def new_id() -> str:
    """Opaque unique identifier for ledger records."""
    return uuid4().hex
