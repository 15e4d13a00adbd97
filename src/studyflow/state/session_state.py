from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class SessionState:
    username: str
    is_authenticated: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"username": self.username, "is_authenticated": self.is_authenticated}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionState":
        authenticated = data.get("is_authenticated", False)
        if not isinstance(authenticated, bool):
            raise TypeError("is_authenticated must be a boolean")
        return cls(username=str(data["username"]), is_authenticated=authenticated)
