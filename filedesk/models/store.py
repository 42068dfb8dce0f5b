from typing import Any, Mapping, NamedTuple, Optional, Protocol, Sequence


class ExecuteResult(NamedTuple):
    inserted_id: Optional[int]
    affected_count: int


class StateStore(Protocol):
    """Read/write interface of the persistent project store."""

    def query(self, statement: str, params: Sequence[Any] = ()) -> Sequence[Mapping[str, Any]]: ...

    def execute(self, statement: str, params: Sequence[Any] = ()) -> ExecuteResult: ...
