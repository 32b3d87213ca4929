"""Translate psycopg errors into domain exceptions."""

from collections.abc import Iterator
from contextlib import contextmanager

import psycopg
from psycopg import errors

from rbacconsole.domain.exceptions import AlreadyExists, RemoteStoreError


@contextmanager
def store_errors(
    duplicate: type[AlreadyExists] = AlreadyExists,
    duplicate_message: str | None = None,
) -> Iterator[None]:
    """Re-raise unique violations as `duplicate`, any other psycopg error as RemoteStoreError."""
    try:
        yield
    except errors.UniqueViolation as e:
        raise duplicate(duplicate_message or _message(e)) from e
    except psycopg.Error as e:
        raise RemoteStoreError(_message(e)) from e


def _message(e: psycopg.Error) -> str:
    if e.diag and e.diag.message_primary:
        return e.diag.message_primary
    return str(e) or type(e).__name__
