# vidhub/services/tokens/dto.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class TokenSubject:
    """
    Identity embedded in an access token.

    :param id: User id (``sub`` claim).
    :type id: int
    :param username: ``username`` claim.
    :param email: ``email`` claim.
    :param full_name: ``fullName`` claim.
    """

    id: int
    username: str
    email: str
    full_name: str

    def claims(self) -> dict[str, Any]:
        return {"username": self.username, "email": self.email, "fullName": self.full_name}


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str
