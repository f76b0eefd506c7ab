import os
import json
from typing import Dict
from dotenv import load_dotenv
from cryptography.fernet import Fernet
from pydantic import TypeAdapter, ValidationError
from crossword_data import EVENT_ANSWER_KEY

load_dotenv()

_answer_key_adapter = TypeAdapter(Dict[str, str])


def _load_answer_key():
    # A JSON file {clue_id: answer} replaces the bundled event key
    path = os.environ.get('CROSSWORD_ANSWER_KEY_FILE')
    if not path:
        return dict(EVENT_ANSWER_KEY)
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    try:
        return _answer_key_adapter.validate_python(data)
    except ValidationError as e:
        raise ValueError(
            f"CROSSWORD_ANSWER_KEY_FILE {path} must map clue ids to answer strings: "
            f"{e.errors(include_url=False)}"
        ) from e


def _database_uri():
    if os.environ.get('DATABASE_URL'):
        return os.environ['DATABASE_URL']
    return (
        f"mysql+pymysql://{os.environ.get('MYSQL_USER')}:{os.environ.get('MYSQL_PASSWORD')}"
        f"@{os.environ.get('MYSQL_HOST')}/{os.environ.get('MYSQL_DB')}"
    )


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'hard-to-guess-string'

    # Database Config
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Encryption of quiz bodies and crossword clues at rest
    AES_KEY = os.environ.get('AES_KEY')
    AES_KEY_PATH = os.environ.get('AES_KEY_PATH') or 'aes.key'

    # Crossword scoring
    CROSSWORD_ANSWER_KEY = _load_answer_key()
    CROSSWORD_POINTS_PER_CLUE = 5
    CROSSWORD_COMPLETION_BONUS = 5

    # Leaderboards
    LEADERBOARD_DEFAULT_LIMIT = 10
    LEADERBOARD_MAX_LIMIT = 100

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    AES_KEY = Fernet.generate_key().decode()
    BCRYPT_LOG_ROUNDS = 4
    LOG_LEVEL = 'DEBUG'
