from flask import current_app
from flask_login import UserMixin
from jose import jwt, JWTError


class SessionTokenError(Exception):
    """Session token không hợp lệ (sai chữ ký, sai định dạng, thiếu claim)"""


class Identity(UserMixin):
    """Danh tính đã xác thực của request hiện tại, giải mã từ session token"""

    def __init__(self, user_id, is_admin=False):
        self.user_id = user_id
        self.is_admin = is_admin

    def get_id(self):
        return str(self.user_id)

    def __eq__(self, other):
        if not isinstance(other, Identity):
            return NotImplemented
        return self.user_id == other.user_id and self.is_admin == other.is_admin

    def __repr__(self):
        return f'<Identity {self.user_id} admin={self.is_admin}>'


def create_session_token(user_id: int, is_admin: bool) -> str:
    """
    Creates a signed session token.

    The token carries the user id and the admin flag and has no expiry; it
    lives only as long as the server-side session that holds it.

    Parameters:
        user_id (int): The id of the authenticated user.
        is_admin (bool): Whether the user has the admin role.

    Returns:
        str: The encoded token.
    """
    claims = {"userId": user_id, "isAdmin": bool(is_admin)}
    return jwt.encode(
        claims,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM'],
    )


def verify_session_token(token: str) -> Identity:
    """
    Verify a session token and decode it into an Identity.

    Parameters:
        token (str): The encoded token taken from the session.

    Returns:
        Identity: The user id and admin flag carried by the token.

    Raises:
        SessionTokenError: If the signature is invalid, the token is malformed
        or a required claim is missing.
    """
    try:
        claims = jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
    except JWTError as e:
        raise SessionTokenError(str(e)) from e

    user_id = claims.get("userId")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise SessionTokenError("Token is missing a valid userId claim")
    return Identity(user_id, bool(claims.get("isAdmin", False)))
