from flask import Blueprint, current_app, jsonify
from redlight.models import COUNTDOWN, PLAYING

game = Blueprint('game', __name__)


def _controller():
    return current_app.extensions['redlight']


@game.route('/state', methods=['GET'])
def get_game_state():
    payload = _controller().display_view()
    # Timing so clients can size their animations
    cfg = current_app.config
    payload['settings'] = {
        'win_threshold': float(cfg.get('WIN_THRESHOLD', 100)),
        'grace_period_ms': int(cfg.get('GRACE_PERIOD_MS', 350)),
        'countdown_from': int(cfg.get('COUNTDOWN_FROM', 3)),
    }
    return jsonify(payload)


@game.route('/start', methods=['POST'])
def start_game():
    controller = _controller()
    if not controller.start_match():
        # Idempotent start: already counting down or playing
        if controller.match.phase in (COUNTDOWN, PLAYING):
            return jsonify(controller.display_view())
        return jsonify({'error': 'No players in game'}), 400
    return jsonify(controller.display_view())


@game.route('/reset', methods=['POST'])
def reset_game():
    controller = _controller()
    controller.reset_match()
    return jsonify(controller.display_view())
