from quizportal.auth_util import verify_session_token
from quizportal.models import User

from quizportal import db

from conftest import login, location_path, database_down


def test_root_redirects_to_login(client):
    resp = client.get('/')
    assert resp.status_code == 302
    assert location_path(resp) == '/login'


def test_login_and_register_pages_render(client):
    assert client.get('/login').status_code == 200
    assert client.get('/register').status_code == 200


def test_register_creates_user_with_hashed_password(app, client):
    resp = client.post('/register', data={'username': 'bob', 'password': 'hunter2'})

    assert resp.status_code == 302
    assert location_path(resp) == '/login'
    with app.app_context():
        user = User.query.filter_by(username='bob').one()
        assert user.password_hash != 'hunter2'
        assert user.check_password('hunter2')
        assert user.is_admin is False


def test_register_admin_flag(app, client):
    client.post('/register', data={'username': 'boss', 'password': 'pw', 'is_admin': 'y'})

    with app.app_context():
        assert User.query.filter_by(username='boss').one().is_admin is True


def test_register_duplicate_username_is_400(app, client):
    first = client.post('/register', data={'username': 'bob', 'password': 'one'})
    second = client.post('/register', data={'username': 'bob', 'password': 'two'})

    assert first.status_code == 302
    assert second.status_code == 400
    assert b'Username already exists' in second.data
    with app.app_context():
        assert User.query.filter_by(username='bob').count() == 1


def test_register_missing_password_is_400(client):
    resp = client.post('/register', data={'username': 'bob', 'password': ''})
    assert resp.status_code == 400


def test_login_redirects_by_role(client, make_user):
    make_user('alice')
    make_user('root', is_admin=True)

    resp = login(client, 'alice')
    assert resp.status_code == 302
    assert location_path(resp) == '/user-dashboard'

    resp = login(client, 'root')
    assert resp.status_code == 302
    assert location_path(resp) == '/admin'


def test_login_stores_signed_token_in_session(app, client, make_user):
    user_id = make_user('alice')
    login(client, 'alice')

    with client.session_transaction() as sess:
        token = sess['token']
    with app.test_request_context():
        identity = verify_session_token(token)
    assert identity.user_id == user_id
    assert identity.is_admin is False


def test_wrong_password_and_unknown_user_both_401(client, make_user):
    make_user('alice', password='right')

    wrong_password = login(client, 'alice', 'wrong')
    unknown_user = login(client, 'nobody', 'right')

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert b'Invalid credentials' in wrong_password.data
    assert b'Invalid credentials' in unknown_user.data


def test_login_missing_fields_is_400(client):
    resp = client.post('/login', data={'username': '', 'password': ''})
    assert resp.status_code == 400


def test_unauthenticated_access_redirects_to_login(client):
    for path in ('/user-dashboard', '/admin'):
        resp = client.get(path)
        assert resp.status_code == 302
        assert location_path(resp) == '/login'

    resp = client.post('/submit-answers', data={})
    assert location_path(resp) == '/login'


def test_non_admin_gets_403_on_admin_routes(user_client):
    assert user_client.get('/admin').status_code == 403
    assert user_client.post('/admin/questions', data={'question_text': 'x'}).status_code == 403


def test_tampered_token_is_treated_as_anonymous(client, make_user):
    make_user('alice')
    login(client, 'alice')
    with client.session_transaction() as sess:
        sess['token'] = sess['token'][:-4] + 'abcd'

    resp = client.get('/user-dashboard')
    assert resp.status_code == 302
    assert location_path(resp) == '/login'


def test_logout_clears_session(user_client):
    resp = user_client.get('/logout')

    assert resp.status_code == 302
    assert location_path(resp) == '/login'
    with user_client.session_transaction() as sess:
        assert 'token' not in sess
    assert location_path(user_client.get('/user-dashboard')) == '/login'


def test_logged_in_user_visiting_login_is_sent_to_dashboard(user_client):
    resp = user_client.get('/login')
    assert resp.status_code == 302
    assert location_path(resp) == '/user-dashboard'


def test_register_database_failure_is_500_and_rolled_back(app, client, monkeypatch):
    monkeypatch.setattr(db.session, 'commit', database_down)

    resp = client.post('/register', data={'username': 'bob', 'password': 'hunter2'})

    assert resp.status_code == 500
    assert b'User registration failed' in resp.data
    with app.app_context():
        assert User.query.filter_by(username='bob').first() is None


def test_session_cookie_holds_only_an_opaque_id(user_client):
    cookie = user_client.get_cookie('session')

    assert cookie is not None
    with user_client.session_transaction() as sess:
        token = sess['token']
    assert token
    assert token not in cookie.value
    assert token.split('.')[1] not in cookie.value


def test_cookie_replayed_after_logout_is_anonymous(user_client):
    stolen = user_client.get_cookie('session').value
    assert user_client.get('/user-dashboard').status_code == 200

    user_client.get('/logout')
    user_client.set_cookie('session', stolen)
    resp = user_client.get('/user-dashboard')

    assert resp.status_code == 302
    assert location_path(resp) == '/login'


def test_logout_store_failure_is_500(app, user_client, monkeypatch):
    app.config['PROPAGATE_EXCEPTIONS'] = False
    monkeypatch.setattr(app.session_interface, 'save_session', database_down)

    resp = user_client.get('/logout')

    assert resp.status_code == 500
    assert b'Something went wrong' in resp.data
