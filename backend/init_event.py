import os
import logging
from flask import current_app
from schemas import CrosswordPuzzleIn
from crossword import answer_key_from_clues
from crossword_data import EVENT_PUZZLE
from routes.auth import hash_password
import store

logger = logging.getLogger(__name__)


def ensure_organiser():
    email = os.environ.get('ORGANISER_EMAIL')
    password = os.environ.get('ORGANISER_PASSWORD')
    full_name = os.environ.get('ORGANISER_NAME') or 'Event Organiser'

    if not email or not password:
        logger.error("ORGANISER_EMAIL and ORGANISER_PASSWORD must be set in .env")
        return None

    existing = store.get_user_by_email(email)
    if existing.is_ok:
        logger.info("Organiser account confirmed: %s", email)
        return existing.value
    if existing.is_error:
        return None

    created = store.create_user(full_name, email, hash_password(password))
    if not created.is_ok:
        return None
    logger.info("Organiser account created: %s", email)
    return created.value


def ensure_event_puzzle(organiser):
    puzzle_in = CrosswordPuzzleIn.model_validate(EVENT_PUZZLE)
    existing = store.find_crossword_puzzle_by_title(puzzle_in.title)
    if existing.is_ok:
        logger.info("Crossword '%s' already present (id %s)", puzzle_in.title, existing.value.id)
        return existing.value
    if existing.is_error:
        return None

    created = store.create_crossword_puzzle(puzzle_in, created_by=organiser.id)
    if created.is_ok:
        logger.info("Crossword '%s' seeded with %d clues", puzzle_in.title, len(puzzle_in.clues))
        return created.value
    return None


def key_matches_puzzle(puzzle):
    """True when the configured answer key scores exactly this puzzle's clues."""
    configured = current_app.extensions['crossword_validator']
    stored = answer_key_from_clues(puzzle.clues)
    if stored != configured.answer_key:
        logger.warning("Configured crossword answer key does not match puzzle '%s'; "
                       "submissions will be scored against the configured key", puzzle.title)
        return False
    return True


def init_event(app=None):
    if app is None:
        from app import create_app
        app = create_app()
    with app.app_context():
        organiser = ensure_organiser()
        if organiser is None:
            return None
        puzzle = ensure_event_puzzle(organiser)
        if puzzle is not None:
            key_matches_puzzle(puzzle)
        logger.info("Setup Complete.")
        return puzzle


if __name__ == '__main__':
    init_event()
