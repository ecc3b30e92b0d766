from urllib.parse import urlparse

import pytest
from sqlalchemy.exc import OperationalError

from quizportal import create_app, db
from quizportal.config import TestingConfig
from quizportal.models import User, Question, Answer


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(username, password='secret', is_admin=False):
        with app.app_context():
            user = User(username=username, is_admin=is_admin)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.user_id
    return _make_user


@pytest.fixture
def questions(app):
    """
    Q1: 10 đúng, 11 sai
    Q2: 20 sai, 21 đúng
    Q3: 30 đúng, 31 sai
    """
    layout = {
        1: [(10, True), (11, False)],
        2: [(20, False), (21, True)],
        3: [(30, True), (31, False)],
    }
    with app.app_context():
        for question_id, answers in layout.items():
            question = Question(question_id=question_id, question_text=f'Question number {question_id}?')
            for answer_id, is_correct in answers:
                question.answers.append(Answer(answer_id=answer_id,
                                               answer_text=f'Option {answer_id}',
                                               is_correct=is_correct))
            db.session.add(question)
        db.session.commit()
    return layout


def login(client, username, password='secret'):
    return client.post('/login', data={'username': username, 'password': password})


def submission(*pairs):
    data = {}
    for idx, (question_id, answer_id) in enumerate(pairs):
        data[f'answers-{idx}-question_id'] = str(question_id)
        data[f'answers-{idx}-answer_id'] = str(answer_id)
    return data


def location_path(response):
    return urlparse(response.headers['Location']).path


@pytest.fixture
def user_client(client, make_user):
    make_user('alice')
    login(client, 'alice')
    return client


@pytest.fixture
def admin_client(client, make_user):
    make_user('root', is_admin=True)
    login(client, 'root')
    return client


def database_down(*args, **kwargs):
    raise OperationalError('SELECT 1', {}, Exception('database is unavailable'))
