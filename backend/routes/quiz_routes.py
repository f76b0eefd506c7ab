import logging
from flask import Blueprint, request, session, jsonify, current_app
from pydantic import ValidationError
from routes.auth import login_required, error_response, validation_response
from schemas import QuizIn, QuizUpdateIn, QuizSubmissionIn, QuizAttemptIn
from attempts import score_quiz, record_quiz_attempt, get_user_quiz_attempts, get_quiz_attempt
import leaderboard
import store

logger = logging.getLogger(__name__)

quiz_bp = Blueprint('quiz', __name__)


def leaderboard_limit():
    default = current_app.config['LEADERBOARD_DEFAULT_LIMIT']
    ceiling = current_app.config['LEADERBOARD_MAX_LIMIT']
    limit = request.args.get('limit', default, type=int)
    return min(max(limit, 1), ceiling)


def quiz_view(quiz):
    # Correct flags are only shown to the quiz's creator
    if quiz.created_by == session.get('user_id'):
        return quiz.to_json()
    return quiz.public_view().to_json(exclude_none=True)


def _load_owned_quiz(quiz_id):
    result = store.get_quiz(quiz_id)
    if not result.is_ok:
        return None, error_response(result)
    if result.value.created_by != session['user_id']:
        return None, (jsonify({'error': 'Unauthorized'}), 403)
    return result.value, None


@quiz_bp.route('/')
@login_required
def list_quizzes():
    include_inactive = request.args.get('include_inactive') == '1'
    result = store.get_all_quizzes(active_only=not include_inactive)
    if result.is_error:
        return error_response(result)
    return jsonify({'quizzes': [quiz_view(q) for q in result.value]})


@quiz_bp.route('/create', methods=['POST'])
@login_required
def create_quiz():
    try:
        quiz_in = QuizIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return validation_response(e)

    result = store.create_quiz(quiz_in, created_by=session['user_id'])
    if not result.is_ok:
        return error_response(result)
    return jsonify({'message': 'Quiz created successfully', 'quiz': result.value.to_json()}), 201


@quiz_bp.route('/<int:quiz_id>')
@login_required
def get_quiz(quiz_id):
    result = store.get_quiz(quiz_id)
    if not result.is_ok:
        return error_response(result)
    return jsonify({'quiz': quiz_view(result.value)})


@quiz_bp.route('/update/<int:quiz_id>', methods=['POST'])
@login_required
def update_quiz(quiz_id):
    _, denied = _load_owned_quiz(quiz_id)
    if denied:
        return denied
    try:
        updates = QuizUpdateIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return validation_response(e)

    result = store.update_quiz(quiz_id, updates)
    if not result.is_ok:
        return error_response(result)
    return jsonify({'message': 'Quiz updated', 'quiz': result.value.to_json()})


@quiz_bp.route('/delete/<int:quiz_id>', methods=['POST'])
@login_required
def delete_quiz(quiz_id):
    _, denied = _load_owned_quiz(quiz_id)
    if denied:
        return denied
    result = store.delete_quiz(quiz_id)
    if not result.is_ok:
        return error_response(result)
    return jsonify({'message': 'Quiz deleted'})


@quiz_bp.route('/submit/<int:quiz_id>', methods=['POST'])
@login_required
def submit_quiz(quiz_id):
    try:
        submission = QuizSubmissionIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return validation_response(e)

    found = store.get_quiz(quiz_id)
    if not found.is_ok:
        return error_response(found)
    quiz = found.value
    if not quiz.is_active:
        logger.info("User %s submitted to closed quiz %s", session['user_id'], quiz_id)
        return jsonify({'error': 'Quiz Closed'}), 403

    score, max_score = score_quiz(quiz, submission.answers)
    attempt_in = QuizAttemptIn(
        user_id=session['user_id'],
        quiz_id=quiz_id,
        answers=submission.answers,
        score=score,
        max_score=max_score,
        time_spent=submission.time_spent,
    )
    result = record_quiz_attempt(attempt_in)
    if not result.is_ok:
        return error_response(result)
    return jsonify({'message': f'Quiz Submitted! You scored {score} / {max_score}.',
                    'attempt': result.value.to_json()}), 201


@quiz_bp.route('/history')
@login_required
def history():
    result = get_user_quiz_attempts(session['user_id'])
    if result.is_error:
        return error_response(result)
    return jsonify({'attempts': [a.to_json() for a in result.value]})


@quiz_bp.route('/attempt/<int:attempt_id>')
@login_required
def attempt_details(attempt_id):
    result = get_quiz_attempt(attempt_id)
    if not result.is_ok:
        return error_response(result)
    attempt = result.value
    if attempt.user_id != session['user_id']:
        return jsonify({'error': 'Unauthorized'}), 403

    item = {'attempt': attempt.to_json(), 'quiz': None}
    quiz = store.get_quiz(attempt.quiz_id)
    if quiz.is_ok:
        # Answers are revealed once the quiz is closed
        q = quiz.value
        item['quiz'] = q.to_json() if not q.is_active else quiz_view(q)
    return jsonify(item)


@quiz_bp.route('/leaderboard')
def global_leaderboard():
    result = leaderboard.get_leaderboard(leaderboard_limit())
    if result.is_error:
        return error_response(result)
    return jsonify({'leaderboard': [e.to_json() for e in result.value]})


@quiz_bp.route('/leaderboard/<int:quiz_id>')
def quiz_leaderboard(quiz_id):
    result = leaderboard.get_quiz_leaderboard(quiz_id, leaderboard_limit())
    if result.is_error:
        return error_response(result)
    return jsonify({'quizId': quiz_id, 'leaderboard': [e.to_json() for e in result.value]})
