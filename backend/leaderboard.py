"""Leaderboards, recomputed from the full attempt history on every request.

Two aggregation strategies exist for quizzes:

* ``TOTAL_SCORE`` (global board): every attempt adds its score and counts as
  one completed quiz, so retaking a quiz counts again.
* ``BEST_PER_QUIZ`` (per-quiz board): only a user's best score on each quiz
  counts, and each quiz counts once.

Users whose record cannot be found are left off the board.
"""
import store
from schemas import LeaderboardEntry, CrosswordLeaderboardEntry
from store import Result

TOTAL_SCORE = 'total_score'
BEST_PER_QUIZ = 'best_per_quiz'
STRATEGIES = (TOTAL_SCORE, BEST_PER_QUIZ)

DEFAULT_LIMIT = 10


class _UserStats:
    def __init__(self):
        self.total_score = 0
        self.attempts = 0
        self.best_by_item = {}
        self.last_date = None
        self.best_time = None

    def add(self, item_id, attempt):
        self.total_score += attempt.score
        self.attempts += 1
        best = self.best_by_item.get(item_id)
        if best is None or attempt.score > best:
            self.best_by_item[item_id] = attempt.score
        if self.last_date is None or attempt.completed_at > self.last_date:
            self.last_date = attempt.completed_at
        # No recorded answers or no measured time means no usable time
        if attempt.answers and attempt.time_spent > 0:
            if self.best_time is None or attempt.time_spent < self.best_time:
                self.best_time = attempt.time_spent

    def totals(self, strategy):
        if strategy == BEST_PER_QUIZ:
            return sum(self.best_by_item.values()), len(self.best_by_item)
        return self.total_score, self.attempts


def _group(attempts, item_of):
    stats = {}
    for attempt in attempts:
        stats.setdefault(attempt.user_id, _UserStats()).add(item_of(attempt), attempt)
    return stats


def rank(entries, limit=DEFAULT_LIMIT):
    # sorted() is stable, so ties keep the order users were first seen in
    return sorted(entries, key=lambda e: -e.total_score)[:max(limit, 0)]


def aggregate_quiz_attempts(attempts, users, strategy=TOTAL_SCORE, quiz_id=None, limit=DEFAULT_LIMIT):
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown leaderboard strategy: {strategy}")
    if quiz_id is not None:
        attempts = [a for a in attempts if a.quiz_id == quiz_id]

    users_by_id = {u.id: u for u in users}
    entries = []
    for user_id, stats in _group(attempts, lambda a: a.quiz_id).items():
        user = users_by_id.get(user_id)
        if user is None:
            continue
        total, count = stats.totals(strategy)
        entries.append(LeaderboardEntry(
            user_id=user_id,
            user_name=user.full_name,
            email=user.email,
            total_score=total,
            quizzes_completed=count,
            average_score=total / count,
            last_quiz_date=stats.last_date,
            best_quiz_time=stats.best_time,
        ))
    return rank(entries, limit)


def aggregate_crossword_attempts(attempts, users, limit=DEFAULT_LIMIT):
    users_by_id = {u.id: u for u in users}
    entries = []
    for user_id, stats in _group(attempts, lambda a: a.puzzle_id).items():
        user = users_by_id.get(user_id)
        if user is None:
            continue
        total, count = stats.totals(TOTAL_SCORE)
        entries.append(CrosswordLeaderboardEntry(
            user_id=user_id,
            user_name=user.full_name,
            email=user.email,
            total_score=total,
            puzzles_completed=count,
            average_score=total / count,
            last_puzzle_date=stats.last_date,
        ))
    return rank(entries, limit)


# --- Store-backed boards ---

def _load(attempts_result):
    if attempts_result.is_error:
        return attempts_result, None
    users_result = store.get_all_users()
    if users_result.is_error:
        return users_result, None
    return None, users_result.value


def get_leaderboard(limit=DEFAULT_LIMIT):
    attempts = store.get_all_quiz_attempts()
    failure, users = _load(attempts)
    if failure is not None:
        return failure
    return Result.ok(aggregate_quiz_attempts(attempts.value, users, TOTAL_SCORE, limit=limit))


def get_quiz_leaderboard(quiz_id, limit=DEFAULT_LIMIT):
    attempts = store.get_all_quiz_attempts(quiz_id=quiz_id)
    failure, users = _load(attempts)
    if failure is not None:
        return failure
    return Result.ok(aggregate_quiz_attempts(attempts.value, users, BEST_PER_QUIZ,
                                             quiz_id=quiz_id, limit=limit))


def get_crossword_leaderboard(limit=DEFAULT_LIMIT):
    attempts = store.get_all_crossword_attempts()
    failure, users = _load(attempts)
    if failure is not None:
        return failure
    return Result.ok(aggregate_crossword_attempts(attempts.value, users, limit=limit))
