from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from sqlalchemy import inspect
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

SCHEMA_TABLES = ('user', 'teams', 'players', 'games', 'player_stats')


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from scoreboard.errors import register_error_handlers
    register_error_handlers(flask_app)

    from scoreboard.main import main
    flask_app.register_blueprint(main)

    from scoreboard.api.sports import sports
    flask_app.register_blueprint(sports, url_prefix='/api/sports')

    from scoreboard.api.teams import teams
    flask_app.register_blueprint(teams, url_prefix='/api/teams')

    from scoreboard.api.players import players
    flask_app.register_blueprint(players, url_prefix='/api/players')

    from scoreboard.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from scoreboard.api.stats import stats
    flask_app.register_blueprint(stats, url_prefix='/api/stats')

    from scoreboard.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from scoreboard.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Sign in required'}), 401

    @click.command('init-db')
    def init_db_command():
        """Creates any missing tables, player_stats included."""
        import scoreboard.models  # noqa: F401
        with flask_app.app_context():
            existing = set(inspect(db.engine).get_table_names())
            missing = [t for t in SCHEMA_TABLES if t not in existing]
            if not missing:
                print('Database tables already exist')
                return
            flask_app.logger.info(f"[init-db] creating tables={','.join(missing)}")
            db.create_all()
            print('Database initialization complete')

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from scoreboard.models import User
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            users = ['testuser1', 'testuser2', 'testuser3']
            for u in users:
                user = User(username=u)
                user.set_password('password')
                db.session.add(user)

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(init_db_command)
    flask_app.cli.add_command(db_reset_command)

    return flask_app
