import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _parse_origins(value):
    if not value or value == '*':
        return '*'
    if isinstance(value, str):
        return [o.strip() for o in value.split(',') if o.strip()]
    return list(value)


def create_app(config_class=Config, timers=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _parse_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        ping_interval=flask_app.config.get('SOCKETIO_PING_INTERVAL', 10),
        ping_timeout=flask_app.config.get('SOCKETIO_PING_TIMEOUT', 5),
    )

    # One match per process, owned by the controller
    from redlight.broadcast import StateBroadcaster
    from redlight.models import MatchSettings
    from redlight.services.game import MatchController, BackgroundTimers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    seed = flask_app.config.get('RANDOM_SEED')
    flask_app.extensions['redlight'] = MatchController(
        MatchSettings.from_config(flask_app.config),
        timers or BackgroundTimers(socketio, logger=flask_app.logger),
        StateBroadcaster(socketio, namespace=namespace),
        rng=random.Random(seed) if seed is not None else random.Random(),
        logger=flask_app.logger,
    )

    # Import and register blueprints here
    from redlight.main import main
    flask_app.register_blueprint(main)

    from redlight.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/game')

    # Register Socket.IO event handlers on the configured namespace
    from redlight.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    return flask_app
