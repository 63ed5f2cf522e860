"""
Operator authentication.

Operators are kept in a JSON users file with werkzeug password hashes:

    [
        {"id": "1", "username": "pharm1", "fullName": "Sara Ali",
         "passwordHash": "scrypt:32768:8:1$..."}
    ]

Use `flask create-user` to add entries.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from werkzeug.security import check_password_hash, generate_password_hash

from models.identity import Operator
from .datafile import load_records, save_records
from logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login attempt."""

    success: bool
    user: Optional[Operator] = None
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "user": self.user.to_dict()}
        return {"success": False, "message": self.message}


class UserDirectory:
    """File-backed operator accounts."""

    def __init__(self, users_file: Union[str, Path]):
        self.users_file = Path(users_file)
        self._users: List[Dict[str, Any]] = load_records(self.users_file, "users")

    def reload(self) -> None:
        self._users = load_records(self.users_file, "users")

    def _find(self, username: str) -> Optional[Dict[str, Any]]:
        wanted = username.strip().lower()
        for user in self._users:
            if str(user.get("username", "")).lower() == wanted:
                return user
        return None

    def login(self, username: str, password: str) -> LoginResult:
        """
        Check credentials.

        Unknown user and wrong password produce the same message.
        """
        if not username or not password:
            return LoginResult(False, message="Username and password are required")

        user = self._find(username)
        if user is None or not check_password_hash(user.get("passwordHash", ""), password):
            logger.info(f"Failed login for '{username}'")
            return LoginResult(False, message="Invalid username or password")

        operator = Operator(
            user_id=str(user.get("id", "")),
            full_name=user.get("fullName") or user.get("username", ""),
            username=user.get("username", ""),
        )
        logger.info(f"Operator {operator.username} logged in")
        return LoginResult(True, user=operator)

    def add_user(self, username: str, password: str, full_name: str) -> Operator:
        """
        Create an operator account and save the users file.

        Raises:
            ValueError: If the username is taken or a field is blank
        """
        if not username.strip() or not password or not full_name.strip():
            raise ValueError("username, password and full name are required")
        if self._find(username) is not None:
            raise ValueError(f"User '{username}' already exists")

        next_id = 1 + max((int(u["id"]) for u in self._users if str(u.get("id", "")).isdigit()), default=0)
        record = {
            "id": str(next_id),
            "username": username.strip(),
            "fullName": full_name.strip(),
            "passwordHash": generate_password_hash(password),
        }
        self._users.append(record)
        save_records(self.users_file, self._users)
        logger.info(f"Created user {record['username']}")
        return Operator(user_id=record["id"], full_name=record["fullName"], username=record["username"])
