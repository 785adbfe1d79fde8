"""
Tests for the Unit of Work.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from eventstream.core.infrastructure.unit_of_work import (
    TransactionError,
    UnitOfWork,
    UnitOfWorkError,
)


@pytest.fixture
def mock_session():
    """Mock AsyncSession."""
    session = Mock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


class TestUnitOfWorkCommit:
    """Test suite for commit behaviour."""

    @pytest.mark.asyncio
    async def test_commit_runs_callbacks_in_order(self, mock_session):
        """Test callbacks run after the session commit, in registration order."""
        # Arrange
        uow = UnitOfWork(mock_session)
        calls = []

        async def first():
            calls.append(("first", mock_session.commit.await_count))

        async def second():
            calls.append(("second", mock_session.commit.await_count))

        uow.on_commit(first)
        uow.on_commit(second)

        # Act
        await uow.commit()

        # Assert
        assert calls == [("first", 1), ("second", 1)]
        assert uow.committed is True

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_stop_others(self):
        """Test callback failures are isolated."""
        uow = UnitOfWork()
        later = AsyncMock()
        uow.on_commit(AsyncMock(side_effect=RuntimeError("boom")))
        uow.on_commit(later)

        await uow.commit()

        later.assert_awaited_once()
        assert uow.committed is True

    @pytest.mark.asyncio
    async def test_commit_twice_raises(self):
        uow = UnitOfWork()
        await uow.commit()

        with pytest.raises(UnitOfWorkError):
            await uow.commit()

    @pytest.mark.asyncio
    async def test_commit_after_rollback_raises(self):
        uow = UnitOfWork()
        await uow.rollback()

        with pytest.raises(UnitOfWorkError):
            await uow.commit()

    @pytest.mark.asyncio
    async def test_database_failure_rolls_back(self, mock_session):
        """Test a failed session commit rolls back and skips commit callbacks."""
        # Arrange
        mock_session.commit.side_effect = OperationalError(
            "COMMIT", {}, Exception("db down")
        )
        uow = UnitOfWork(mock_session)
        on_commit = AsyncMock()
        on_rollback = AsyncMock()
        uow.on_commit(on_commit)
        uow.on_rollback(on_rollback)

        # Act
        with pytest.raises(TransactionError):
            await uow.commit()

        # Assert
        mock_session.rollback.assert_awaited_once()
        on_commit.assert_not_awaited()
        on_rollback.assert_awaited_once()
        assert uow.rolled_back is True


class TestUnitOfWorkRollback:
    """Test suite for rollback behaviour."""

    @pytest.mark.asyncio
    async def test_rollback_runs_rollback_callbacks_only(self, mock_session):
        uow = UnitOfWork(mock_session)
        on_commit = AsyncMock()
        on_rollback = AsyncMock()
        uow.on_commit(on_commit)
        uow.on_rollback(on_rollback)

        await uow.rollback()

        mock_session.rollback.assert_awaited_once()
        on_rollback.assert_awaited_once()
        on_commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rollback_is_idempotent(self):
        uow = UnitOfWork()
        on_rollback = AsyncMock()
        uow.on_rollback(on_rollback)

        await uow.rollback()
        await uow.rollback()

        on_rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rollback_after_commit_raises(self):
        uow = UnitOfWork()
        await uow.commit()

        with pytest.raises(UnitOfWorkError):
            await uow.rollback()


class TestUnitOfWorkContextManager:
    """Test suite for async context manager usage."""

    @pytest.mark.asyncio
    async def test_clean_exit_commits(self):
        on_commit = AsyncMock()

        async with UnitOfWork() as uow:
            uow.on_commit(on_commit)

        on_commit.assert_awaited_once()
        assert uow.committed is True

    @pytest.mark.asyncio
    async def test_exception_rolls_back_and_propagates(self):
        on_commit = AsyncMock()
        on_rollback = AsyncMock()

        with pytest.raises(ValueError):
            async with UnitOfWork() as uow:
                uow.on_commit(on_commit)
                uow.on_rollback(on_rollback)
                raise ValueError("business failure")

        on_commit.assert_not_awaited()
        on_rollback.assert_awaited_once()
        assert uow.rolled_back is True

    @pytest.mark.asyncio
    async def test_exception_after_commit_propagates_unchanged(self):
        """Test a block failing after commit keeps the commit and its own error."""
        # Arrange
        on_commit = AsyncMock()
        on_rollback = AsyncMock()

        # Act
        with pytest.raises(ValueError, match="after commit"):
            async with UnitOfWork() as uow:
                uow.on_commit(on_commit)
                uow.on_rollback(on_rollback)
                await uow.commit()
                raise ValueError("after commit")

        # Assert
        on_commit.assert_awaited_once()
        on_rollback.assert_not_awaited()
        assert uow.committed is True
        assert uow.rolled_back is False
