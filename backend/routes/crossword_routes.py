import logging
from flask import Blueprint, request, session, jsonify, current_app
from pydantic import ValidationError
from routes.auth import login_required, error_response, validation_response
from routes.quiz_routes import leaderboard_limit
from schemas import CrosswordPuzzleIn, CrosswordSubmissionIn, CrosswordAttemptIn
from attempts import record_crossword_attempt, get_user_crossword_attempts, get_crossword_attempt
from crossword import create_grid, create_grid_with_answers, clue_numbers
import leaderboard
import store

logger = logging.getLogger(__name__)

crossword_bp = Blueprint('crossword', __name__)


def validator():
    return current_app.extensions['crossword_validator']


def puzzle_view(puzzle):
    # Answers are only shown to the puzzle's creator
    if puzzle.created_by == session.get('user_id'):
        return puzzle.to_json()
    return puzzle.without_answers().to_json(exclude_none=True)


@crossword_bp.route('/')
@login_required
def list_puzzles():
    result = store.get_all_crossword_puzzles(active_only=True)
    if result.is_error:
        return error_response(result)
    return jsonify({'puzzles': [puzzle_view(p) for p in result.value]})


@crossword_bp.route('/create', methods=['POST'])
@login_required
def create_puzzle():
    try:
        puzzle_in = CrosswordPuzzleIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return validation_response(e)

    result = store.create_crossword_puzzle(puzzle_in, created_by=session['user_id'])
    if not result.is_ok:
        return error_response(result)
    return jsonify({'message': 'Crossword puzzle created', 'puzzle': puzzle_view(result.value)}), 201


@crossword_bp.route('/<int:puzzle_id>')
@login_required
def get_puzzle(puzzle_id):
    result = store.get_crossword_puzzle(puzzle_id)
    if not result.is_ok:
        return error_response(result)
    puzzle = result.value
    return jsonify({
        'puzzle': puzzle_view(puzzle),
        'grid': create_grid(puzzle),
        'numbers': clue_numbers(puzzle),
    })


@crossword_bp.route('/validate', methods=['POST'])
@login_required
def validate_answers():
    try:
        submission = CrosswordSubmissionIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return validation_response(e)
    return jsonify(validator().validate(submission.answers).to_dict())


@crossword_bp.route('/submit/<int:puzzle_id>', methods=['POST'])
@login_required
def submit_puzzle(puzzle_id):
    try:
        submission = CrosswordSubmissionIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return validation_response(e)

    found = store.get_crossword_puzzle(puzzle_id)
    if not found.is_ok:
        return error_response(found)
    if not found.value.is_active:
        return jsonify({'error': 'Puzzle Closed'}), 403

    outcome = validator().validate(submission.answers)
    attempt_in = CrosswordAttemptIn(
        user_id=session['user_id'],
        puzzle_id=puzzle_id,
        answers=submission.answers,
        score=outcome.score,
        max_score=outcome.max_score,
        time_spent=submission.time_spent,
        is_complete=outcome.is_complete,
    )
    result = record_crossword_attempt(attempt_in)
    if not result.is_ok:
        return error_response(result)
    return jsonify({'attempt': result.value.to_json(), 'result': outcome.to_dict()}), 201


@crossword_bp.route('/attempt/<int:attempt_id>')
@login_required
def attempt_results(attempt_id):
    result = get_crossword_attempt(attempt_id)
    if not result.is_ok:
        return error_response(result)
    attempt = result.value
    if attempt.user_id != session['user_id']:
        return jsonify({'error': 'Unauthorized'}), 403

    found = store.get_crossword_puzzle(attempt.puzzle_id)
    if not found.is_ok:
        return error_response(found)
    puzzle = found.value
    return jsonify({
        'attempt': attempt.to_json(),
        'puzzle': puzzle_view(puzzle),
        'grid': create_grid_with_answers(puzzle, attempt.answers),
        'numbers': clue_numbers(puzzle),
        'correctAnswers': validator().validate(attempt.answers).correct_answers,
    })


@crossword_bp.route('/history')
@login_required
def history():
    result = get_user_crossword_attempts(session['user_id'])
    if result.is_error:
        return error_response(result)
    return jsonify({'attempts': [a.to_json() for a in result.value]})


@crossword_bp.route('/leaderboard')
def crossword_leaderboard():
    result = leaderboard.get_crossword_leaderboard(leaderboard_limit())
    if result.is_error:
        return error_response(result)
    logger.debug("Crossword leaderboard served with %d rows", len(result.value))
    return jsonify({'leaderboard': [e.to_json() for e in result.value]})
