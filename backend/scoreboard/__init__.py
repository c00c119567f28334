from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS', []))

    if not flask_app.config.get('DATABASE_CONFIGURED', True):
        flask_app.logger.warning("[config] DATABASE_URL/POSTGRES_URL not set; writes will be refused")

    # Import and register blueprints here
    from scoreboard.main import main
    flask_app.register_blueprint(main)

    from scoreboard.api.game import game_api
    # Mount under /api to match the display and scorer pages
    flask_app.register_blueprint(game_api, url_prefix='/api')

    # Flask-Login user loader
    from scoreboard.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Unauthorized'}), 401

    def _seed_scorer():
        username = flask_app.config.get('SCORER_USERNAME')
        password = flask_app.config.get('SCORER_PASSWORD')
        if not (username and password):
            print('AUTH_CREDENTIALS_USERNAME/PASSWORD not set; no scorer account seeded.')
            return
        user = User.query.filter_by(username=username).first()
        if user is None:
            user = User(username=username)
            db.session.add(user)
        user.set_password(password)
        db.session.commit()

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from scoreboard.services.game import seed_defaults
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            seed_defaults(flask_app)
            _seed_scorer()
            print('Database has been reset and seeded!')

    @click.command('seed')
    def seed_command():
        """Inserts the game state row, teams and scorer account if missing."""
        from scoreboard.services.game import seed_defaults
        with flask_app.app_context():
            seed_defaults(flask_app)
            _seed_scorer()
            print('Defaults seeded.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_command)

    return flask_app
