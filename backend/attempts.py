"""Recording of quiz and crossword attempts.

Attempts are append-only facts: every submission is a new row stamped with
the server's clock, and nothing here updates or deletes one.
"""
import logging
from datetime import datetime

from extensions import db
from models import QuizAttempt, CrosswordAttempt
from store import Result, store_call, quiz_attempt_record, crossword_attempt_record

logger = logging.getLogger(__name__)


def score_quiz(quiz, answers):
    """Score chosen answer ids against a quiz; returns (score, max_score)."""
    score = 0
    max_score = 0
    for question in quiz.questions:
        max_score += question.points
        chosen = answers.get(question.id)
        if chosen and any(a.id == chosen and a.is_correct for a in question.answers):
            score += question.points
    return score, max_score


@store_call("record quiz attempt")
def record_quiz_attempt(attempt_in):
    row = QuizAttempt(
        user_id=attempt_in.user_id,
        quiz_id=attempt_in.quiz_id,
        answers=dict(attempt_in.answers),
        score=attempt_in.score,
        max_score=attempt_in.max_score,
        time_spent=attempt_in.time_spent,
        completed_at=datetime.utcnow(),
    )
    db.session.add(row)
    db.session.commit()
    logger.info("Quiz attempt %s recorded: user %s quiz %s score %s/%s",
                row.id, row.user_id, row.quiz_id, row.score, row.max_score)
    return Result.ok(quiz_attempt_record(row))


@store_call("record crossword attempt")
def record_crossword_attempt(attempt_in):
    row = CrosswordAttempt(
        user_id=attempt_in.user_id,
        puzzle_id=attempt_in.puzzle_id,
        answers=dict(attempt_in.answers),
        score=attempt_in.score,
        max_score=attempt_in.max_score,
        time_spent=attempt_in.time_spent,
        is_complete=attempt_in.is_complete,
        completed_at=datetime.utcnow(),
    )
    db.session.add(row)
    db.session.commit()
    logger.info("Crossword attempt %s recorded: user %s puzzle %s score %s/%s",
                row.id, row.user_id, row.puzzle_id, row.score, row.max_score)
    return Result.ok(crossword_attempt_record(row))


@store_call("load quiz history")
def get_user_quiz_attempts(user_id):
    rows = (QuizAttempt.query.filter_by(user_id=user_id)
            .order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc()).all())
    return Result.ok([quiz_attempt_record(row) for row in rows])


@store_call("load crossword history")
def get_user_crossword_attempts(user_id):
    rows = (CrosswordAttempt.query.filter_by(user_id=user_id)
            .order_by(CrosswordAttempt.completed_at.desc(), CrosswordAttempt.id.desc()).all())
    return Result.ok([crossword_attempt_record(row) for row in rows])


@store_call("load crossword attempt")
def get_crossword_attempt(attempt_id):
    row = db.session.get(CrosswordAttempt, attempt_id)
    if row is None:
        return Result.empty()
    return Result.ok(crossword_attempt_record(row))


@store_call("load quiz attempt")
def get_quiz_attempt(attempt_id):
    row = db.session.get(QuizAttempt, attempt_id)
    if row is None:
        return Result.empty()
    return Result.ok(quiz_attempt_record(row))
