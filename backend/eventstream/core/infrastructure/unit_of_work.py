"""
Unit of Work with after-completion callbacks.

Coordinates the host transaction boundary with side effects that must only
happen once the transaction is durable. Participants enlist callbacks with
``on_commit`` / ``on_rollback``; the unit of work awaits them after the
database commit succeeds or after the rollback completes.

Usage Examples:
    async with UnitOfWork(session) as uow:
        provider = factory.create(uow)
        provider.on_event(event)
        # session committed, then commit callbacks run

    uow = UnitOfWork()
    uow.on_commit(flush_buffer)
    try:
        ...
        await uow.commit()
    except Exception:
        await uow.rollback()
        raise

Error Handling:
    - UnitOfWorkError: commit after commit, commit after rollback
    - TransactionError: database commit failures (session is rolled back)
    - Callback failures are logged and never undo a completed commit
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventstream.core.errors import InfrastructureError
from eventstream.core.logging import get_logger

logger = get_logger(__name__)

CompletionCallback = Callable[[], Awaitable[None]]


class UnitOfWorkError(InfrastructureError):
    """Base exception for Unit of Work operations."""

    default_code = "UNIT_OF_WORK_ERROR"
    retryable = False


class TransactionError(UnitOfWorkError):
    """Raised when database transaction operations fail."""

    default_code = "TRANSACTION_ERROR"
    retryable = True


class TransactionContext(Protocol):
    """
    Registration surface of an ambient transaction.

    Commit callbacks run only after the commit has really succeeded;
    rollback callbacks run only after a rollback.
    """

    def on_commit(self, callback: CompletionCallback) -> None:
        """Run ``callback`` after a successful commit."""

    def on_rollback(self, callback: CompletionCallback) -> None:
        """Run ``callback`` after a rollback."""


class UnitOfWork:
    """
    Transaction boundary with after-completion hooks.

    Transaction Semantics:
    - Database changes (if a session is attached) are committed first
    - Commit callbacks run in registration order after the commit
    - A failing callback is logged; remaining callbacks still run
    - Any failure before the commit triggers rollback and rollback callbacks
    """

    def __init__(self, session: AsyncSession | None = None):
        """
        Initialize Unit of Work.

        Args:
            session: Optional SQLAlchemy async session committed with the unit
        """
        self.session = session
        self._commit_callbacks: list[CompletionCallback] = []
        self._rollback_callbacks: list[CompletionCallback] = []
        self._committed = False
        self._rolled_back = False

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    def on_commit(self, callback: CompletionCallback) -> None:
        self._commit_callbacks.append(callback)

    def on_rollback(self, callback: CompletionCallback) -> None:
        self._rollback_callbacks.append(callback)

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Commit on clean exit, roll back when the block raised.

        A block that raises after committing leaves the commit in place and
        the original exception propagates.
        """
        if exc_type is not None:
            if self._committed or self._rolled_back:
                return
            logger.info(
                "Rolling back due to exception",
                exception_type=exc_type.__name__,
                exception_message=str(exc_val) if exc_val else None,
            )
            await self.rollback()
            return

        if not self._committed and not self._rolled_back:
            await self.commit()

    async def commit(self) -> None:
        """
        Commit database changes, then run commit callbacks.

        Raises:
            TransactionError: If the database commit fails
            UnitOfWorkError: If already committed or rolled back
        """
        if self._committed:
            raise UnitOfWorkError("Unit of Work already committed")

        if self._rolled_back:
            raise UnitOfWorkError("Cannot commit after rollback")

        if self.session is not None:
            try:
                await self.session.commit()
            except SQLAlchemyError as e:
                logger.exception("Database commit failed", error=str(e))
                await self.rollback()
                raise TransactionError(f"Database commit failed: {e}", cause=e)

        self._committed = True
        logger.debug(
            "Unit of Work committed", callbacks=len(self._commit_callbacks)
        )

        await self._run_callbacks(self._commit_callbacks, "commit")

    async def rollback(self) -> None:
        """Roll back database changes, then run rollback callbacks."""
        if self._rolled_back:
            return

        if self._committed:
            raise UnitOfWorkError("Cannot roll back after commit")

        self._rolled_back = True

        if self.session is not None:
            try:
                await self.session.rollback()
            except SQLAlchemyError as e:
                logger.exception("Database rollback failed", error=str(e))

        logger.debug(
            "Unit of Work rolled back", callbacks=len(self._rollback_callbacks)
        )

        await self._run_callbacks(self._rollback_callbacks, "rollback")

    async def _run_callbacks(
        self, callbacks: list[CompletionCallback], phase: str
    ) -> None:
        for callback in callbacks:
            try:
                await callback()
            except Exception as e:
                logger.exception(
                    "After-completion callback failed", phase=phase, error=str(e)
                )
