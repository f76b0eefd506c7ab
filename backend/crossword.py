"""Server-side crossword scoring and grid layout.

Answer keys never leave this side of the application: the validator is
built from configuration in ``create_app`` and players only ever see clue
views passed through ``strip_answers``.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

ACROSS = 'across'
DOWN = 'down'


def normalize_answer(text):
    return (text or '').strip().upper()


@dataclass(frozen=True)
class ValidationOutcome:
    score: int
    max_score: int
    is_complete: bool
    correct_answers: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self):
        return {
            'score': self.score,
            'maxScore': self.max_score,
            'isComplete': self.is_complete,
            'correctAnswers': dict(self.correct_answers),
        }


class CrosswordValidator:
    """Scores submitted crossword answers against an injected answer key.

    Each correct clue earns ``points_per_clue``. The completion bonus is
    awarded when every clue of the key is correct, so completion is measured
    against the size of the key and not against the clue count of whichever
    puzzle the submission came from.
    """

    def __init__(self, answer_key: Mapping[str, str], points_per_clue: int = 5,
                 completion_bonus: int = 5):
        self._answer_key = {clue_id: normalize_answer(answer) for clue_id, answer in answer_key.items()}
        self.points_per_clue = points_per_clue
        self.completion_bonus = completion_bonus

    @property
    def clue_ids(self):
        return list(self._answer_key)

    @property
    def answer_key(self):
        return dict(self._answer_key)

    @property
    def max_score(self) -> int:
        return len(self._answer_key) * self.points_per_clue + self.completion_bonus

    def is_correct(self, clue_id: str, submitted: Optional[str]) -> bool:
        expected = self._answer_key.get(clue_id)
        return expected is not None and normalize_answer(submitted) == expected

    def validate(self, submitted: Mapping[str, Optional[str]]) -> ValidationOutcome:
        # Ids outside the key are ignored entirely
        correct_answers = {clue_id: self.is_correct(clue_id, submitted.get(clue_id))
                           for clue_id in self._answer_key}
        correct_count = sum(1 for ok in correct_answers.values() if ok)

        score = correct_count * self.points_per_clue
        is_complete = correct_count == len(self._answer_key)
        if is_complete:
            score += self.completion_bonus

        return ValidationOutcome(score=score, max_score=self.max_score,
                                 is_complete=is_complete, correct_answers=correct_answers)


def answer_key_from_clues(clues) -> Dict[str, str]:
    """{clue_id: answer} for stored clues that still carry their answer."""
    return {clue.id: normalize_answer(clue.answer) for clue in clues if clue.answer}


def strip_answers(clue):
    """Copy of a clue record with the answer removed, for players."""
    return clue.model_copy(update={'answer': None})


# --- Grid layout ---

def cell_positions(clue):
    """(row, col) of every cell the clue occupies."""
    for i in range(clue.length):
        if clue.direction == ACROSS:
            yield clue.start_row, clue.start_col + i
        else:
            yield clue.start_row + i, clue.start_col


def clue_fits(clue, rows: int, cols: int) -> bool:
    if clue.start_row < 0 or clue.start_col < 0:
        return False
    return all(row < rows and col < cols for row, col in cell_positions(clue))


def _empty_grid(rows, cols):
    return [[None for _ in range(cols)] for _ in range(rows)]


def create_grid(puzzle) -> List[List[Optional[str]]]:
    """Blank grid of the puzzle's size; nothing about the answers is revealed."""
    return _empty_grid(puzzle.grid_size.rows, puzzle.grid_size.cols)


def create_grid_with_answers(puzzle, answers: Mapping[str, str]) -> List[List[Optional[str]]]:
    """Grid with '' on every letter cell and the submitted letters filled in.

    Cells outside any clue stay ``None``.
    """
    rows, cols = puzzle.grid_size.rows, puzzle.grid_size.cols
    grid = _empty_grid(rows, cols)

    for clue in puzzle.clues:
        for row, col in cell_positions(clue):
            if row < rows and col < cols and grid[row][col] is None:
                grid[row][col] = ''

    for clue in puzzle.clues:
        letters = normalize_answer(answers.get(clue.id))
        for (row, col), letter in zip(cell_positions(clue), letters):
            if row < rows and col < cols:
                grid[row][col] = letter

    return grid


def clue_numbers(puzzle) -> List[List[Optional[int]]]:
    rows, cols = puzzle.grid_size.rows, puzzle.grid_size.cols
    numbers = _empty_grid(rows, cols)
    for clue in puzzle.clues:
        if clue.start_row < rows and clue.start_col < cols:
            numbers[clue.start_row][clue.start_col] = clue.number
    return numbers
