import re
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from crossword import clue_fits, normalize_answer, strip_answers

Direction = Literal['across', 'down']

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class DecodeError(ValueError):
    """A stored document does not have the shape of the entity it should decode to."""

    def __init__(self, entity, errors):
        self.entity = entity
        self.errors = errors
        super().__init__(f'could not decode {entity}: {errors}')


class CamelModel(BaseModel):
    # JSON on the wire is camelCase, Python attributes are snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self, **kwargs):
        return self.model_dump(by_alias=True, mode='json', **kwargs)


def decode(model, data):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(model.__name__, e.errors(include_url=False)) from e


# --- Sign in ---

class SignInIn(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=8)

    @field_validator('email')
    @classmethod
    def valid_email(cls, v):
        v = v.strip()
        if not EMAIL_RE.match(v):
            raise ValueError('Please enter a valid email address')
        return v

    @field_validator('password')
    @classmethod
    def strong_password(cls, v):
        if not (re.search(r'[a-z]', v) and re.search(r'[A-Z]', v) and re.search(r'\d', v)):
            raise ValueError('Password must contain at least one uppercase letter, one lowercase letter, and one number')
        return v


# --- Quiz input ---

class AnswerIn(CamelModel):
    id: Optional[str] = None
    text: str = Field(min_length=1)
    is_correct: bool


class QuestionIn(CamelModel):
    id: Optional[str] = None
    text: str = Field(min_length=1)
    answers: List[AnswerIn] = Field(min_length=2)
    points: int = Field(ge=1)
    time_limit: Optional[int] = None

    @model_validator(mode='after')
    def has_correct_answer(self):
        if not any(a.is_correct for a in self.answers):
            raise ValueError('Each question must have at least one correct answer')
        duplicates = _duplicate_ids(self.answers)
        if duplicates:
            raise ValueError(f'Duplicate answer id {duplicates[0]} in question {self.id}')
        return self


def _duplicate_ids(items):
    # Missing ids are generated by the store and never collide
    seen, duplicates = set(), []
    for item in items:
        if item.id is None:
            continue
        if item.id in seen:
            duplicates.append(item.id)
        seen.add(item.id)
    return duplicates


def _unique_question_ids(questions):
    duplicates = _duplicate_ids(questions or [])
    if duplicates:
        raise ValueError(f'Duplicate question id {duplicates[0]}')
    return questions


class QuizIn(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    questions: List[QuestionIn] = Field(min_length=1)
    duration: Optional[int] = Field(default=None, ge=1)
    is_active: bool = True

    @field_validator('questions')
    @classmethod
    def unique_question_ids(cls, v):
        return _unique_question_ids(v)


class QuizUpdateIn(CamelModel):
    """Partial update; omitted fields keep their value, ``duration`` may be cleared."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    questions: Optional[List[QuestionIn]] = Field(default=None, min_length=1)
    duration: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None

    @field_validator('title', 'description', 'questions', 'is_active')
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f'{to_camel(info.field_name)} cannot be null')
        return v

    @field_validator('questions')
    @classmethod
    def unique_question_ids(cls, v):
        return _unique_question_ids(v)


# --- Crossword input ---

class GridSize(CamelModel):
    rows: int = Field(ge=1)
    cols: int = Field(ge=1)


class CrosswordClueIn(CamelModel):
    id: str = Field(min_length=1)
    number: int = Field(ge=1)
    clue: str = Field(min_length=1)
    answer: str
    direction: Direction
    start_row: int = Field(ge=0)
    start_col: int = Field(ge=0)
    length: int = Field(ge=1)
    points: int = Field(default=5, ge=0)

    @field_validator('answer')
    @classmethod
    def letters_only(cls, v):
        v = normalize_answer(v)
        if not v.isalpha():
            raise ValueError('Answer must consist of letters only')
        return v

    @model_validator(mode='after')
    def length_matches(self):
        if len(self.answer) != self.length:
            raise ValueError(f'Answer for {self.id} has {len(self.answer)} letters, declared length is {self.length}')
        return self


class CrosswordPuzzleIn(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    grid_size: GridSize
    clues: List[CrosswordClueIn] = Field(min_length=1)
    is_active: bool = True

    @model_validator(mode='after')
    def clues_placeable(self):
        seen = set()
        for clue in self.clues:
            if clue.id in seen:
                raise ValueError(f'Duplicate clue id {clue.id}')
            seen.add(clue.id)
            if not clue_fits(clue, self.grid_size.rows, self.grid_size.cols):
                raise ValueError(f'Clue {clue.id} does not fit inside the grid')
        return self


# --- Submissions ---

class QuizSubmissionIn(CamelModel):
    answers: Dict[str, str] = Field(default_factory=dict)  # question_id -> answer_id
    time_spent: int = 0


class CrosswordSubmissionIn(CamelModel):
    answers: Dict[str, str] = Field(default_factory=dict)  # clue_id -> text
    time_spent: int = 0


class AttemptIn(CamelModel):
    user_id: int
    answers: Dict[str, str] = Field(default_factory=dict)
    score: int = Field(ge=0)
    max_score: int = Field(ge=0)
    time_spent: int = 0

    @model_validator(mode='after')
    def score_within_max(self):
        if self.score > self.max_score:
            raise ValueError('score cannot exceed maxScore')
        return self


class QuizAttemptIn(AttemptIn):
    quiz_id: int


class CrosswordAttemptIn(AttemptIn):
    puzzle_id: int
    is_complete: bool = False


# --- Stored entities ---

class UserRecord(CamelModel):
    id: int
    full_name: str
    email: str
    password_hash: str = Field(exclude=True, repr=False)
    phone_number: Optional[str] = None
    food_preference: Optional[str] = None  # Vegetarian, Non-vegetarian
    gender: Optional[str] = None
    nic: Optional[str] = None
    university_name: Optional[str] = None
    preferred_track_session_1: Optional[str] = None
    preferred_track_session_2: Optional[str] = None
    preferred_track_session_3: Optional[str] = None


class AnswerRecord(CamelModel):
    id: str
    text: str
    is_correct: Optional[bool] = None


class QuestionRecord(CamelModel):
    id: str
    text: str
    answers: List[AnswerRecord]
    points: int
    time_limit: Optional[int] = None


class QuizRecord(CamelModel):
    id: int
    title: str
    description: str
    questions: List[QuestionRecord]
    created_by: int
    created_at: datetime
    updated_at: datetime
    is_active: bool
    duration: Optional[int] = None

    @property
    def max_score(self):
        return sum(q.points for q in self.questions)

    def public_view(self):
        """Copy with every isCorrect flag removed, for players taking the quiz."""
        questions = [
            q.model_copy(update={'answers': [a.model_copy(update={'is_correct': None}) for a in q.answers]})
            for q in self.questions
        ]
        return self.model_copy(update={'questions': questions})


class QuizAttemptRecord(CamelModel):
    id: int
    user_id: int
    quiz_id: int
    answers: Dict[str, str]
    score: int
    max_score: int
    completed_at: datetime
    time_spent: int = 0


class CrosswordClueRecord(CamelModel):
    id: str
    number: int
    clue: str
    answer: Optional[str] = None
    direction: Direction
    start_row: int
    start_col: int
    length: int
    points: int = 5


class CrosswordPuzzleRecord(CamelModel):
    id: int
    title: str
    description: str
    grid_size: GridSize
    clues: List[CrosswordClueRecord]
    created_by: int
    created_at: datetime
    is_active: bool

    def without_answers(self):
        return self.model_copy(update={'clues': [strip_answers(c) for c in self.clues]})


class CrosswordAttemptRecord(CamelModel):
    id: int
    user_id: int
    puzzle_id: int
    answers: Dict[str, str]
    score: int
    max_score: int
    completed_at: datetime
    time_spent: int = 0
    is_complete: bool = False


# --- Leaderboards (derived, never stored) ---

class LeaderboardEntry(CamelModel):
    user_id: int
    user_name: str
    email: str
    total_score: int
    quizzes_completed: int
    average_score: float
    last_quiz_date: datetime
    best_quiz_time: Optional[int] = None


class CrosswordLeaderboardEntry(CamelModel):
    user_id: int
    user_name: str
    email: str
    total_score: int
    puzzles_completed: int
    average_score: float
    last_puzzle_date: datetime
