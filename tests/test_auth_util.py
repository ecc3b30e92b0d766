import pytest
from jose import jwt

from quizportal.auth_util import (Identity, SessionTokenError,
                                  create_session_token, verify_session_token)


def test_token_carries_identity(app):
    with app.app_context():
        token = create_session_token(7, True)
        assert verify_session_token(token) == Identity(7, True)


def test_token_signed_with_other_secret_is_rejected(app):
    forged = jwt.encode({'userId': 1, 'isAdmin': True}, 'not-the-secret', algorithm='HS256')
    with app.app_context():
        with pytest.raises(SessionTokenError):
            verify_session_token(forged)


def test_token_without_user_id_is_rejected(app):
    with app.app_context():
        token = jwt.encode({'isAdmin': False}, app.config['JWT_SECRET_KEY'], algorithm='HS256')
        with pytest.raises(SessionTokenError):
            verify_session_token(token)


def test_garbage_token_is_rejected(app):
    with app.app_context():
        with pytest.raises(SessionTokenError):
            verify_session_token('not-a-jwt')


def test_identity_is_flask_login_user(app):
    identity = Identity(3)
    assert identity.is_authenticated
    assert identity.get_id() == '3'
    assert identity.is_admin is False
