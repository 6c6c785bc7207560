import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError


class StoreError(Exception):
    """A document store operation failed; the caller may retry."""

    def __init__(self, operation: str):
        super().__init__(f"Store operation '{operation}' failed")
        self.operation = operation


class IdentityProviderError(Exception):
    """The identity provider could not complete a sign-in."""


@contextmanager
def store_operation(logger: logging.Logger, operation: str):
    """Log and translate driver errors raised inside the block into StoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store operation %s failed", operation)
        raise StoreError(operation) from exc
