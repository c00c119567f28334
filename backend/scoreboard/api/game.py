from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from scoreboard import db
from scoreboard.errors import ScoreboardError, ValidationError
from scoreboard.services.game import GameSession


game_api = Blueprint('game_api', __name__)

REQUIRED_TABLES = ('game_state', 'teams', 'scores')


@game_api.errorhandler(ScoreboardError)
def handle_scoreboard_error(exc):
    if exc.status_code >= 500:
        current_app.logger.warning(f"[request-failed] {request.method} {request.path} {exc.message}")
    return jsonify(exc.to_dict()), exc.status_code


@game_api.route('/game', methods=['GET'])
def get_game():
    snapshot = GameSession.from_app().snapshot()
    return jsonify(snapshot.to_dict())


@game_api.route('/game', methods=['POST'])
@login_required
def update_game():
    data = request.get_json(silent=True) or {}
    action = data.get('action')
    session = GameSession.from_app()
    if action == 'start':
        session.start_timer()
        return jsonify({'success': True})
    if action == 'reset':
        session.reset_game()
        return jsonify({'success': True})
    return jsonify({'error': 'Invalid action'}), 400


@game_api.route('/scores', methods=['POST'])
@login_required
def add_score():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Invalid teamId or score (must be 0-180)')
    remaining = GameSession.from_app().add_score(data.get('teamId'), data.get('score'))
    return jsonify({'success': True, 'remainingPoints': remaining})


@game_api.route('/check-db', methods=['GET'])
def check_db():
    if not current_app.config.get('DATABASE_CONFIGURED', True):
        return jsonify({
            'connected': False,
            'error': 'No database connection string found',
            'message': 'Set DATABASE_URL or POSTGRES_URL',
        })
    try:
        db.session.execute(text('SELECT 1'))
        db.session.commit()
        existing = set(inspect(db.engine).get_table_names())
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.warning(f"[check-db] {exc}")
        return jsonify({
            'connected': False,
            'tablesExist': False,
            'error': str(exc),
            'message': f'Database error: {exc}',
        })

    missing = [t for t in REQUIRED_TABLES if t not in existing]
    if missing:
        return jsonify({
            'connected': True,
            'tablesExist': False,
            'error': f"Missing tables: {', '.join(missing)}",
            'message': "Database is connected but tables don't exist. Run `flask db upgrade` then `flask seed`.",
        })
    return jsonify({
        'connected': True,
        'tablesExist': True,
        'message': 'Database is connected and tables exist',
    })


@game_api.route('/debug-auth', methods=['GET'])
def debug_auth():
    """Reports which auth settings are present, never their values."""
    cfg = current_app.config
    username = cfg.get('SCORER_USERNAME') or ''
    password = cfg.get('SCORER_PASSWORD') or ''
    configured = {
        'SECRET_KEY': bool(cfg.get('SECRET_KEY')),
        'AUTH_CREDENTIALS_USERNAME': bool(username),
        'AUTH_CREDENTIALS_PASSWORD': bool(password),
    }
    return jsonify({
        'configured': configured,
        'lengths': {
            'username': len(username),
            'password': len(password),
        },
        'allSet': all(configured.values()),
    })
