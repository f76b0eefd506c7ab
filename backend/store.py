import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from functools import wraps
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from crypto_utils import CipherError
from extensions import db, aes
from models import User, Quiz, QuizAttempt, CrosswordPuzzle, CrosswordAttempt
from schemas import (
    DecodeError, decode, UserRecord, QuizRecord, QuizAttemptRecord,
    CrosswordPuzzleRecord, CrosswordAttemptRecord,
)

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE = 'store_unavailable'
DECODE = 'decode'


@dataclass(frozen=True)
class Result:
    """Outcome of a store call.

    ``ok`` carries a value, ``empty`` means the store answered and had
    nothing, ``error`` means the answer could not be determined.
    """
    status: str
    value: Any = None
    error_kind: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, value):
        return cls('ok', value)

    @classmethod
    def empty(cls):
        return cls('empty')

    @classmethod
    def failed(cls, error_kind, message=None):
        return cls('error', error_kind=error_kind, message=message)

    @property
    def is_ok(self):
        return self.status == 'ok'

    @property
    def is_empty(self):
        return self.status == 'empty'

    @property
    def is_error(self):
        return self.status == 'error'

    def value_or(self, default):
        return self.value if self.is_ok else default


def store_call(action):
    """Turn store and decode failures of the wrapped call into failed Results."""
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except SQLAlchemyError:
                db.session.rollback()
                logger.exception("Store unavailable while trying to %s", action)
                return Result.failed(STORE_UNAVAILABLE, f"Could not {action}")
            except (DecodeError, CipherError) as e:
                logger.warning("Bad stored document while trying to %s: %s", action, e)
                return Result.failed(DECODE, str(e))
        return wrapper
    return decorator


def _found(value):
    return Result.ok(value) if value is not None else Result.empty()


# --- Decoding rows into typed records ---

def user_record(row):
    return decode(UserRecord, {
        'id': row.id,
        'full_name': row.full_name,
        'email': row.email,
        'password_hash': row.password_hash,
        'phone_number': row.phone_number,
        'food_preference': row.food_preference,
        'gender': row.gender,
        'nic': row.nic,
        'university_name': row.university_name,
        'preferred_track_session_1': row.preferred_track_session_1,
        'preferred_track_session_2': row.preferred_track_session_2,
        'preferred_track_session_3': row.preferred_track_session_3,
    })


def quiz_record(row):
    return decode(QuizRecord, {
        'id': row.id,
        'title': row.title,
        'description': row.description,
        'questions': aes.decrypt(row.questions_json),
        'created_by': row.created_by,
        'created_at': row.created_at,
        'updated_at': row.updated_at,
        'is_active': row.is_active,
        'duration': row.duration,
    })


def quiz_attempt_record(row):
    return decode(QuizAttemptRecord, {
        'id': row.id,
        'user_id': row.user_id,
        'quiz_id': row.quiz_id,
        'answers': row.answers,
        'score': row.score,
        'max_score': row.max_score,
        'completed_at': row.completed_at,
        'time_spent': row.time_spent or 0,
    })


def puzzle_record(row):
    return decode(CrosswordPuzzleRecord, {
        'id': row.id,
        'title': row.title,
        'description': row.description,
        'grid_size': {'rows': row.grid_rows, 'cols': row.grid_cols},
        'clues': aes.decrypt(row.clues_json),
        'created_by': row.created_by,
        'created_at': row.created_at,
        'is_active': row.is_active,
    })


def crossword_attempt_record(row):
    return decode(CrosswordAttemptRecord, {
        'id': row.id,
        'user_id': row.user_id,
        'puzzle_id': row.puzzle_id,
        'answers': row.answers,
        'score': row.score,
        'max_score': row.max_score,
        'completed_at': row.completed_at,
        'time_spent': row.time_spent or 0,
        'is_complete': row.is_complete,
    })


# --- Users ---

@store_call("load user")
def get_user(user_id):
    row = db.session.get(User, user_id)
    return _found(user_record(row) if row else None)


@store_call("load user")
def get_user_by_email(email):
    row = User.query.filter(db.func.lower(User.email) == email.strip().lower()).first()
    return _found(user_record(row) if row else None)


@store_call("load users")
def get_all_users():
    return Result.ok([user_record(row) for row in User.query.all()])


@store_call("create user")
def create_user(full_name, email, password_hash, **profile):
    row = User(full_name=full_name, email=email, password_hash=password_hash, **profile)
    db.session.add(row)
    db.session.commit()
    return Result.ok(user_record(row))


# --- Quizzes ---

def _with_ids(questions):
    # Question and answer ids are generated once at creation time
    token = uuid.uuid4().hex[:8]
    out = []
    for q_index, question in enumerate(questions):
        q = question.model_dump()
        q['id'] = q['id'] or f"q_{token}_{q_index}"
        for a_index, answer in enumerate(q['answers']):
            answer['id'] = answer['id'] or f"a_{token}_{q_index}_{a_index}"
        out.append(q)
    return out


@store_call("create quiz")
def create_quiz(quiz_in, created_by):
    now = datetime.utcnow()
    row = Quiz(
        title=quiz_in.title,
        description=quiz_in.description,
        questions_json=aes.encrypt(_with_ids(quiz_in.questions)),
        created_by=created_by,
        created_at=now,
        updated_at=now,
        is_active=quiz_in.is_active,
        duration=quiz_in.duration,
    )
    db.session.add(row)
    db.session.commit()
    logger.info("Quiz %s created by user %s", row.id, created_by)
    return Result.ok(quiz_record(row))


@store_call("load quiz")
def get_quiz(quiz_id):
    row = db.session.get(Quiz, quiz_id)
    return _found(quiz_record(row) if row else None)


@store_call("load quizzes")
def get_all_quizzes(active_only=False):
    query = Quiz.query
    if active_only:
        query = query.filter_by(is_active=True)
    rows = query.order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()
    return Result.ok([quiz_record(row) for row in rows])


@store_call("update quiz")
def update_quiz(quiz_id, updates):
    row = db.session.get(Quiz, quiz_id)
    if row is None:
        return Result.empty()

    changes = updates.model_dump(exclude_unset=True)
    if 'title' in changes:
        row.title = updates.title
    if 'description' in changes:
        row.description = updates.description
    if 'duration' in changes:
        row.duration = updates.duration
    if changes.get('is_active') is not None:
        row.is_active = updates.is_active
    if changes.get('questions') is not None:
        row.questions_json = aes.encrypt(_with_ids(updates.questions))
    row.updated_at = datetime.utcnow()

    db.session.commit()
    return Result.ok(quiz_record(row))


@store_call("delete quiz")
def delete_quiz(quiz_id):
    row = db.session.get(Quiz, quiz_id)
    if row is None:
        return Result.empty()
    db.session.delete(row)
    db.session.commit()
    logger.info("Quiz %s deleted", quiz_id)
    return Result.ok(True)


# --- Crossword puzzles ---

@store_call("create crossword puzzle")
def create_crossword_puzzle(puzzle_in, created_by):
    row = CrosswordPuzzle(
        title=puzzle_in.title,
        description=puzzle_in.description,
        grid_rows=puzzle_in.grid_size.rows,
        grid_cols=puzzle_in.grid_size.cols,
        clues_json=aes.encrypt([clue.model_dump() for clue in puzzle_in.clues]),
        created_by=created_by,
        created_at=datetime.utcnow(),
        is_active=puzzle_in.is_active,
    )
    db.session.add(row)
    db.session.commit()
    logger.info("Crossword puzzle %s created by user %s", row.id, created_by)
    return Result.ok(puzzle_record(row))


@store_call("load crossword puzzle")
def get_crossword_puzzle(puzzle_id):
    """Full puzzle including answers. Callers strip answers before responding."""
    row = db.session.get(CrosswordPuzzle, puzzle_id)
    return _found(puzzle_record(row) if row else None)


@store_call("load crossword puzzle")
def find_crossword_puzzle_by_title(title):
    row = CrosswordPuzzle.query.filter_by(title=title).first()
    return _found(puzzle_record(row) if row else None)


@store_call("load crossword puzzles")
def get_all_crossword_puzzles(active_only=False):
    query = CrosswordPuzzle.query
    if active_only:
        query = query.filter_by(is_active=True)
    rows = query.order_by(CrosswordPuzzle.created_at.desc(), CrosswordPuzzle.id.desc()).all()
    return Result.ok([puzzle_record(row) for row in rows])


# --- Attempts (read side) ---

@store_call("load quiz attempts")
def get_all_quiz_attempts(quiz_id=None):
    query = QuizAttempt.query
    if quiz_id is not None:
        query = query.filter_by(quiz_id=quiz_id)
    return Result.ok([quiz_attempt_record(row) for row in query.order_by(QuizAttempt.id).all()])


@store_call("load crossword attempts")
def get_all_crossword_attempts():
    rows = CrosswordAttempt.query.order_by(CrosswordAttempt.id).all()
    return Result.ok([crossword_attempt_record(row) for row in rows])
