import pytest
from sqlalchemy.exc import OperationalError

from app import create_app
from config import TestConfig
from extensions import db
from routes.auth import hash_password
import store

PASSWORD = 'Secret123'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(email='ada@example.com', full_name='Ada Lovelace', password=PASSWORD):
        with app.app_context():
            return store.create_user(full_name, email, hash_password(password)).value
    return _make


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD):
        resp = client.post('/auth/login', json={'email': email, 'password': password})
        assert resp.status_code == 200, resp.get_json()
        return resp
    return _login


@pytest.fixture
def quiz_payload():
    return {
        'title': 'AI Basics',
        'description': 'Warm-up round',
        'duration': 5,
        'questions': [
            {
                'id': 'q1',
                'text': 'Which language is most used for AI?',
                'points': 10,
                'answers': [
                    {'id': 'q1a', 'text': 'Python', 'isCorrect': True},
                    {'id': 'q1b', 'text': 'COBOL', 'isCorrect': False},
                ],
            },
            {
                'id': 'q2',
                'text': 'When is IEEE Day celebrated?',
                'points': 5,
                'answers': [
                    {'id': 'q2a', 'text': 'March', 'isCorrect': False},
                    {'id': 'q2b', 'text': 'October', 'isCorrect': True},
                ],
            },
        ],
    }


class DownQuery:
    """Stands in for Model.query while the database is unreachable."""

    def __getattr__(self, name):
        raise OperationalError("SELECT 1", {}, Exception("database is down"))


@pytest.fixture
def database_down(app, monkeypatch):
    def _down(*models):
        # Reading Model.query needs an app context
        with app.app_context():
            for model in models:
                monkeypatch.setattr(model, 'query', DownQuery())
    return _down
