from types import SimpleNamespace

from crossword import CrosswordValidator, answer_key_from_clues, strip_answers
from crossword_data import EVENT_ANSWER_KEY, EVENT_PUZZLE
from schemas import CrosswordClueRecord, CrosswordPuzzleIn


def test_small_key_full_marks_with_case_and_whitespace():
    validator = CrosswordValidator({'c1': 'CAT', 'c2': 'DOG'})
    out = validator.validate({'c1': 'cat ', 'c2': 'dog'})
    assert out.correct_answers == {'c1': True, 'c2': True}
    assert out.score == 15
    assert out.max_score == 15
    assert out.is_complete is True


def test_every_exact_answer_completes_the_event_puzzle():
    validator = CrosswordValidator(EVENT_ANSWER_KEY)
    submission = {clue_id: f"  {answer.lower()} " for clue_id, answer in EVENT_ANSWER_KEY.items()}
    out = validator.validate(submission)
    assert out.is_complete is True
    assert out.score == out.max_score == 65


def test_empty_submission_marks_every_clue_wrong():
    validator = CrosswordValidator(EVENT_ANSWER_KEY)
    out = validator.validate({})
    assert out.score == 0
    assert out.is_complete is False
    assert set(out.correct_answers) == set(EVENT_ANSWER_KEY)
    assert not any(out.correct_answers.values())


def test_max_score_is_constant_across_calls():
    validator = CrosswordValidator(EVENT_ANSWER_KEY)
    seen = {validator.validate(s).max_score for s in ({}, {'down_12': 'python'}, {'x': 'y'})}
    assert seen == {len(EVENT_ANSWER_KEY) * 5 + 5}


def test_adding_a_correct_answer_never_lowers_the_score():
    validator = CrosswordValidator(EVENT_ANSWER_KEY)
    submission = {}
    previous = validator.validate(submission).score
    for clue_id, answer in EVENT_ANSWER_KEY.items():
        submission[clue_id] = answer
        score = validator.validate(submission).score
        assert score >= previous
        previous = score
    assert previous == 65


def test_unknown_clue_ids_are_ignored():
    validator = CrosswordValidator({'c1': 'CAT'})
    out = validator.validate({'c1': 'CAT', 'bogus': 'CAT'})
    assert out.correct_answers == {'c1': True}
    assert out.score == 10
    assert out.is_complete is True


def test_wrong_answers_score_nothing_and_block_the_bonus():
    validator = CrosswordValidator({'c1': 'CAT', 'c2': 'DOG'})
    out = validator.validate({'c1': 'CAT', 'c2': 'DOGS'})
    assert out.correct_answers == {'c1': True, 'c2': False}
    assert out.score == 5
    assert out.is_complete is False


def test_completion_is_measured_against_the_whole_key():
    # A submission covering only part of the key never earns the bonus,
    # even if it is perfect for the clues it does cover.
    validator = CrosswordValidator(EVENT_ANSWER_KEY)
    subset = {'across_3': 'IEEE', 'down_12': 'PYTHON'}
    out = validator.validate(subset)
    assert out.score == 10
    assert out.is_complete is False


def test_key_is_normalised_and_scoring_is_configurable():
    validator = CrosswordValidator({'c1': ' cat '}, points_per_clue=2, completion_bonus=10)
    out = validator.validate({'c1': 'Cat'})
    assert out.score == 12
    assert out.max_score == 12


def test_to_dict_uses_wire_names():
    out = CrosswordValidator({'c1': 'CAT'}).validate({'c1': 'cow'})
    assert out.to_dict() == {
        'score': 0,
        'maxScore': 10,
        'isComplete': False,
        'correctAnswers': {'c1': False},
    }


def test_answer_key_from_stored_clues_matches_the_bundled_key():
    puzzle = CrosswordPuzzleIn.model_validate(EVENT_PUZZLE)
    assert answer_key_from_clues(puzzle.clues) == EVENT_ANSWER_KEY


def test_answer_key_skips_clues_without_answers():
    clues = [SimpleNamespace(id='c1', answer=' cat'), SimpleNamespace(id='c2', answer=None)]
    assert answer_key_from_clues(clues) == {'c1': 'CAT'}


def test_strip_answers_leaves_the_rest_of_the_clue():
    clue = CrosswordClueRecord(id='c1', number=1, clue='Pet', answer='CAT', direction='across',
                               start_row=0, start_col=0, length=3)
    stripped = strip_answers(clue)
    assert stripped.answer is None
    assert clue.answer == 'CAT'
    assert 'answer' not in stripped.to_json(exclude_none=True)
    assert stripped.clue == 'Pet'
