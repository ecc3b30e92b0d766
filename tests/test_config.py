from datetime import datetime

import pytest

from quizportal import create_app
from quizportal.config import TestingConfig


def test_missing_secrets_fail_startup():
    class NoSecrets(TestingConfig):
        SECRET_KEY = None
        JWT_SECRET_KEY = ''

    with pytest.raises(RuntimeError) as excinfo:
        create_app(NoSecrets)
    assert 'SECRET_KEY' in str(excinfo.value)
    assert 'JWT_SECRET_KEY' in str(excinfo.value)


def test_local_datetime_filter_uses_app_timezone(app):
    local_datetime = app.jinja_env.filters['local_datetime']
    # Asia/Ho_Chi_Minh = UTC+7
    assert local_datetime(datetime(2024, 1, 1, 10, 0)) == '01/01/2024 17:00'
    assert local_datetime(None) == ''


def test_security_headers(client):
    resp = client.get('/login')
    assert resp.headers['X-Content-Type-Options'] == 'nosniff'
    assert resp.headers['X-Frame-Options'] == 'SAMEORIGIN'


def test_unknown_route_renders_404(client):
    resp = client.get('/no-such-page')
    assert resp.status_code == 404
    assert b'Page not found' in resp.data
