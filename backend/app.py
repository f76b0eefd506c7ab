import os
import logging
from flask import Flask, jsonify, session
from config import Config
from extensions import db, bcrypt, aes
from crossword import CrosswordValidator

logger = logging.getLogger(__name__)


def create_database_if_missing(app):
    # Only MySQL needs the schema created up front
    if not app.config['SQLALCHEMY_DATABASE_URI'].startswith('mysql'):
        return
    import pymysql
    try:
        conn = pymysql.connect(
            host=os.environ.get('MYSQL_HOST'),
            user=os.environ.get('MYSQL_USER'),
            password=os.environ.get('MYSQL_PASSWORD')
        )
        try:
            with conn.cursor() as cursor:
                cursor.execute(f"CREATE DATABASE IF NOT EXISTS {os.environ.get('MYSQL_DB')}")
        finally:
            conn.close()
    except pymysql.MySQLError as e:
        logger.warning("DB setup skipped (ignore if DB exists/permissions): %s", e)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # Initialize Extensions
    db.init_app(app)
    bcrypt.init_app(app)
    aes.init_app(app)

    app.extensions['crossword_validator'] = CrosswordValidator(
        app.config['CROSSWORD_ANSWER_KEY'],
        points_per_clue=app.config['CROSSWORD_POINTS_PER_CLUE'],
        completion_bonus=app.config['CROSSWORD_COMPLETION_BONUS'],
    )

    create_database_if_missing(app)

    # Register Blueprints
    from routes.auth import auth_bp
    from routes.quiz_routes import quiz_bp
    from routes.crossword_routes import crossword_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(quiz_bp, url_prefix='/quiz')
    app.register_blueprint(crossword_bp, url_prefix='/crossword')

    @app.route('/')
    def index():
        return jsonify({
            'service': 'eventquiz',
            'signed_in': 'user_id' in session,
            'user': session.get('full_name'),
        })

    # Create Database Tables
    with app.app_context():
        db.create_all()

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
