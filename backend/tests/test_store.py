from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from attempts import (
    get_user_quiz_attempts, record_crossword_attempt, record_quiz_attempt, score_quiz,
)
from crossword_data import EVENT_PUZZLE
from extensions import db
from leaderboard import get_leaderboard
from models import CrosswordAttempt, Quiz, QuizAttempt, User
from schemas import CrosswordAttemptIn, CrosswordPuzzleIn, QuizAttemptIn, QuizIn, QuizUpdateIn
import store


def _quiz(app, payload, created_by):
    with app.app_context():
        return store.create_quiz(QuizIn.model_validate(payload), created_by=created_by).value


def test_quiz_round_trip_keeps_questions_and_ids(app, make_user, quiz_payload):
    user = make_user()
    quiz = _quiz(app, quiz_payload, user.id)
    with app.app_context():
        loaded = store.get_quiz(quiz.id)
    assert loaded.is_ok
    assert loaded.value.title == 'AI Basics'
    assert [q.id for q in loaded.value.questions] == ['q1', 'q2']
    assert loaded.value.max_score == 15


def test_missing_ids_are_generated(app, make_user, quiz_payload):
    for question in quiz_payload['questions']:
        question.pop('id')
        for answer in question['answers']:
            answer.pop('id')
    quiz = _quiz(app, quiz_payload, make_user().id)
    ids = [q.id for q in quiz.questions] + [a.id for q in quiz.questions for a in q.answers]
    assert all(ids)
    assert len(set(ids)) == len(ids)


def test_questions_are_encrypted_at_rest(app, make_user, quiz_payload):
    quiz = _quiz(app, quiz_payload, make_user().id)
    with app.app_context():
        raw = db.session.get(Quiz, quiz.id).questions_json
    assert 'Python' not in raw
    assert 'isCorrect' not in raw and 'is_correct' not in raw


def test_unknown_quiz_is_empty_not_an_error(app):
    with app.app_context():
        result = store.get_quiz(12345)
    assert result.is_empty
    assert not result.is_error


def test_corrupted_document_is_a_decode_failure(app, make_user, quiz_payload):
    quiz = _quiz(app, quiz_payload, make_user().id)
    with app.app_context():
        db.session.get(Quiz, quiz.id).questions_json = 'not-a-fernet-token'
        db.session.commit()
        result = store.get_quiz(quiz.id)
    assert result.is_error
    assert result.error_kind == store.DECODE


def test_update_quiz_stamps_updated_at(app, make_user, quiz_payload):
    quiz = _quiz(app, quiz_payload, make_user().id)
    with app.app_context():
        result = store.update_quiz(quiz.id, QuizUpdateIn(title='Renamed', is_active=False))
    assert result.value.title == 'Renamed'
    assert result.value.is_active is False
    assert result.value.updated_at >= quiz.updated_at
    assert result.value.questions == quiz.questions


def test_delete_quiz(app, make_user, quiz_payload):
    quiz = _quiz(app, quiz_payload, make_user().id)
    with app.app_context():
        assert store.delete_quiz(quiz.id).is_ok
        assert store.get_quiz(quiz.id).is_empty
        assert store.delete_quiz(quiz.id).is_empty


def test_list_quizzes_newest_first_and_active_filter(app, make_user, quiz_payload):
    user = make_user()
    first = _quiz(app, quiz_payload, user.id)
    quiz_payload['title'] = 'Second'
    second = _quiz(app, quiz_payload, user.id)
    with app.app_context():
        store.update_quiz(first.id, QuizUpdateIn(is_active=False))
        everything = store.get_all_quizzes().value
        active = store.get_all_quizzes(active_only=True).value
    assert [q.id for q in everything] == [second.id, first.id]
    assert [q.id for q in active] == [second.id]


def test_quiz_needs_a_correct_answer_per_question(quiz_payload):
    for answer in quiz_payload['questions'][0]['answers']:
        answer['isCorrect'] = False
    with pytest.raises(ValidationError, match="at least one correct answer"):
        QuizIn.model_validate(quiz_payload)


def test_duplicate_question_ids_are_rejected(quiz_payload):
    quiz_payload['questions'][1]['id'] = 'q1'
    with pytest.raises(ValidationError, match='Duplicate question id q1'):
        QuizIn.model_validate(quiz_payload)
    with pytest.raises(ValidationError, match='Duplicate question id q1'):
        QuizUpdateIn.model_validate({'questions': quiz_payload['questions']})


def test_duplicate_answer_ids_within_a_question_are_rejected(quiz_payload):
    quiz_payload['questions'][0]['answers'][1]['id'] = 'q1a'
    with pytest.raises(ValidationError, match='Duplicate answer id q1a'):
        QuizIn.model_validate(quiz_payload)


def test_one_choice_scores_only_its_own_question(app, make_user, quiz_payload):
    # Answer ids may repeat across questions without leaking points
    quiz_payload['questions'][1]['answers'][1]['id'] = 'q1a'
    quiz = _quiz(app, quiz_payload, make_user().id)
    assert score_quiz(quiz, {'q1': 'q1a'}) == (10, 15)


def test_update_refuses_explicit_nulls():
    with pytest.raises(ValidationError, match='title cannot be null'):
        QuizUpdateIn.model_validate({'title': None})
    assert QuizUpdateIn.model_validate({'duration': None}).model_dump(exclude_unset=True) == {'duration': None}


def test_crossword_clues_are_encrypted_and_decoded(app, make_user):
    user = make_user()
    with app.app_context():
        puzzle = store.create_crossword_puzzle(CrosswordPuzzleIn.model_validate(EVENT_PUZZLE), user.id).value
        loaded = store.get_crossword_puzzle(puzzle.id).value
    assert loaded.grid_size.rows == 15
    assert {c.id: c.answer for c in loaded.clues}['down_12'] == 'PYTHON'
    assert all(c.answer is None for c in loaded.without_answers().clues)


def test_authenticate_by_email(app, make_user):
    from routes.auth import authenticate_user
    make_user(email='Grace@Example.com', password='Hopper123')
    with app.app_context():
        assert authenticate_user('grace@example.com', 'Hopper123').is_ok
        assert authenticate_user('grace@example.com', 'wrong-Pass1').is_empty
        assert authenticate_user('nobody@example.com', 'Hopper123').is_empty


# --- Attempt recording ---

def test_score_quiz_counts_points_of_correct_choices(app, make_user, quiz_payload):
    quiz = _quiz(app, quiz_payload, make_user().id)
    assert score_quiz(quiz, {'q1': 'q1a', 'q2': 'q2a'}) == (10, 15)
    assert score_quiz(quiz, {}) == (0, 15)
    assert score_quiz(quiz, {'q1': 'q1a', 'q2': 'q2b', 'q9': 'x'}) == (15, 15)


def test_completion_time_is_assigned_by_the_server(app, make_user):
    user = make_user()
    client_time = datetime(1999, 1, 1)
    attempt_in = QuizAttemptIn.model_validate({
        'userId': user.id, 'quizId': 1, 'answers': {'q1': 'a'}, 'score': 5, 'maxScore': 10,
        'timeSpent': 30, 'completedAt': client_time.isoformat(),
    })
    before = datetime.utcnow() - timedelta(seconds=1)
    with app.app_context():
        result = record_quiz_attempt(attempt_in)
    assert result.is_ok
    assert result.value.completed_at >= before
    assert result.value.completed_at != client_time


def test_score_above_max_is_rejected():
    with pytest.raises(ValidationError, match="exceed"):
        QuizAttemptIn(user_id=1, quiz_id=1, score=11, max_score=10)


def test_same_quiz_twice_gives_two_attempts_and_both_count(app, make_user):
    user = make_user()
    attempt_in = QuizAttemptIn(user_id=user.id, quiz_id=7, answers={'q1': 'a'}, score=8, max_score=10)
    with app.app_context():
        first = record_quiz_attempt(attempt_in).value
        second = record_quiz_attempt(attempt_in).value
        history = get_user_quiz_attempts(user.id).value
        board = get_leaderboard().value
    assert first.id != second.id
    assert len(history) == 2
    assert board[0].total_score == 16
    assert board[0].quizzes_completed == 2


def test_recording_fails_softly_when_the_store_is_down(app, make_user, monkeypatch):
    user = make_user()

    def boom():
        from sqlalchemy.exc import OperationalError
        raise OperationalError("INSERT", {}, Exception("database is down"))

    with app.app_context():
        monkeypatch.setattr(db.session, 'commit', boom)
        result = record_crossword_attempt(CrosswordAttemptIn(
            user_id=user.id, puzzle_id=1, answers={}, score=0, max_score=65))
        monkeypatch.undo()
        assert CrosswordAttempt.query.count() == 0
    assert result.is_error
    assert result.error_kind == store.STORE_UNAVAILABLE


def test_reads_fail_softly_when_the_store_is_down(app, database_down):
    database_down(User, QuizAttempt)
    with app.app_context():
        users = store.get_all_users()
        board = get_leaderboard()
    assert users.is_error
    assert board.is_error
    assert board.value_or([]) == []
