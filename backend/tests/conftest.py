import os
import sys
import pytest

# Ensure the backend root (containing the `scoreboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scoreboard import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DATABASE_CONFIGURED = True
    BCRYPT_LOG_ROUNDS = 4
    STARTING_POINTS = 100000
    CHALLENGE_DURATION_SEC = 12 * 60 * 60
    TEAMS = [('team1', 'Team 1'), ('team2', 'Team 2')]
    SCORER_USERNAME = 'scorer'
    SCORER_PASSWORD = 'password'
    CORS_ORIGINS = []


class UnconfiguredConfig(TestConfig):
    DATABASE_CONFIGURED = False


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import scoreboard.models  # noqa: F401
        from scoreboard.models import User
        from scoreboard.services.game import seed_defaults
        db.create_all()
        seed_defaults(application)
        user = User(username='scorer')
        user.set_password('password')
        db.session.add(user)
        db.session.commit()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def unconfigured_app():
    application = create_app(UnconfiguredConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def scorer_client(flask_app):
    test_client = flask_app.test_client()
    res = test_client.post('/login', json={'username': 'scorer', 'password': 'password'})
    assert res.status_code == 200
    return test_client


@pytest.fixture()
def game_session(flask_app):
    from scoreboard.services.game import GameSession
    return GameSession.from_app(flask_app)
