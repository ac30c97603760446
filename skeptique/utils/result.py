from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Falha esperada de uma chamada externa (sem exceção)."""
    reason: str
    detail: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap_or(self, default: Any) -> Any:
        return default


Result = Union[Ok[T], Err]
