from extensions import db
from datetime import datetime


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    phone_number = db.Column(db.String(32), nullable=True)
    food_preference = db.Column(db.String(32), nullable=True)  # Vegetarian, Non-vegetarian
    gender = db.Column(db.String(16), nullable=True)
    nic = db.Column(db.String(32), nullable=True)
    university_name = db.Column(db.String(200), nullable=True)
    preferred_track_session_1 = db.Column(db.String(64), nullable=True)
    preferred_track_session_2 = db.Column(db.String(64), nullable=True)
    preferred_track_session_3 = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    quiz_attempts = db.relationship('QuizAttempt', backref='player', lazy=True)
    crossword_attempts = db.relationship('CrosswordAttempt', backref='player', lazy=True)


class Quiz(db.Model):
    __tablename__ = 'quizzes'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    questions_json = db.Column(db.Text, nullable=False)  # Encrypted JSON blob, answers carry isCorrect
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True)
    duration = db.Column(db.Integer, nullable=True)  # minutes


class QuizAttempt(db.Model):
    # Append-only: rows are inserted once and never updated
    __tablename__ = 'quiz_attempts'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    quiz_id = db.Column(db.Integer, nullable=False, index=True)  # survives deletion of the quiz
    answers = db.Column(db.JSON, nullable=False)  # {question_id: answer_id}
    score = db.Column(db.Integer, nullable=False)
    max_score = db.Column(db.Integer, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=False)
    time_spent = db.Column(db.Integer, default=0)  # seconds, client measured


class CrosswordPuzzle(db.Model):
    __tablename__ = 'crossword_puzzles'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    grid_rows = db.Column(db.Integer, nullable=False)
    grid_cols = db.Column(db.Integer, nullable=False)
    clues_json = db.Column(db.Text, nullable=False)  # Encrypted JSON blob, clues carry their answers
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True)


class CrosswordAttempt(db.Model):
    __tablename__ = 'crossword_attempts'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    puzzle_id = db.Column(db.Integer, nullable=False, index=True)
    answers = db.Column(db.JSON, nullable=False)  # {clue_id: submitted text}
    score = db.Column(db.Integer, nullable=False)
    max_score = db.Column(db.Integer, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=False)
    time_spent = db.Column(db.Integer, default=0)
    is_complete = db.Column(db.Boolean, default=False)
