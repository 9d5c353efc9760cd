"""Identifier generation for persisted rows."""

from cuid2 import cuid_wrapper

_cuid = cuid_wrapper()


def new_record_id() -> str:
    """Return a CUID2 used as primary key for cases, documents and journal entries."""
    result = _cuid()
    if not isinstance(result, str):
        raise TypeError(f"Expected str from cuid generator, got {type(result).__name__}")
    return result
