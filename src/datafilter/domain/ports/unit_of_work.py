"""Unit-of-work abstraction around a local store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType


@runtime_checkable
class UnitOfWork[TStore](Protocol):
    """Transaction boundary owning one local store.

    The reconciler never commits; callers decide via ``commit`` or
    ``rollback`` once a pass has finished or failed.
    """

    @property
    def store(self) -> TStore: ...

    def __enter__(self) -> UnitOfWork[TStore]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
