"""
Admin API entities: users and call results.
"""
from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class User:
    """Account in the target project. Only id and email are shown in the console."""
    id: str
    email: str = ""
    created_at: Optional[str] = None

    @staticmethod
    def from_dict(data: dict) -> "User":
        return User(
            id=str(data.get("id", "")),
            email=data.get("email") or "",
            created_at=data.get("created_at"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AdminResult:
    """
    Outcome of one admin call.

    Mirrors the `{data, error}` shape of the admin API: a failed call still
    returns normally, with `error` set. Callers turn a set `error` into a raise.
    """
    data: Any = None
    error: Optional[Exception] = None

    def unwrap(self) -> Any:
        """Return data, raising the carried error if there is one."""
        if self.error is not None:
            raise self.error
        return self.data
