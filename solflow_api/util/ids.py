import uuid

import ulid


def new_id(prefix: str = "") -> str:
    """
    Time-sortable id (ULID) with an optional prefix, e.g. "payment_01J9...".
    """
    return prefix + str(ulid.new())


def new_uuid() -> str:
    """Opaque random id for workflow graphs."""
    return str(uuid.uuid4())
