import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Light cycle (milliseconds, inclusive ranges)
    GREEN_MIN_MS = int(os.environ.get('GREEN_MIN_MS', '1500'))
    GREEN_MAX_MS = int(os.environ.get('GREEN_MAX_MS', '5000'))
    RED_MIN_MS = int(os.environ.get('RED_MIN_MS', '2000'))
    RED_MAX_MS = int(os.environ.get('RED_MAX_MS', '4000'))
    # Time after the red flip before holders are swept
    GRACE_PERIOD_MS = int(os.environ.get('GRACE_PERIOD_MS', '350'))
    # Progress points needed to finish, and points gained per tick while holding on green
    WIN_THRESHOLD = float(os.environ.get('WIN_THRESHOLD', '100'))
    PROGRESS_RATE = float(os.environ.get('PROGRESS_RATE', '2.5'))
    TICK_INTERVAL_MS = int(os.environ.get('TICK_INTERVAL_MS', '100'))
    # 3-2-1 countdown before play
    COUNTDOWN_FROM = int(os.environ.get('COUNTDOWN_FROM', '3'))
    COUNTDOWN_STEP_MS = int(os.environ.get('COUNTDOWN_STEP_MS', '1000'))
    NAME_MAX_LENGTH = int(os.environ.get('NAME_MAX_LENGTH', '15'))
    # Optional: fixed seed for the light durations. Empty means system randomness.
    RANDOM_SEED = os.environ.get('RANDOM_SEED') or None
    # Comma-separated list, or '*'
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Optional: base URL advertised in the join QR code (e.g. https://game.example.com)
    PUBLIC_BASE_URL = os.environ.get('PUBLIC_BASE_URL') or None
    PHONE_PATH = os.environ.get('PHONE_PATH', '/phone.html')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    SOCKETIO_PING_INTERVAL = int(os.environ.get('SOCKETIO_PING_INTERVAL', '10'))
    SOCKETIO_PING_TIMEOUT = int(os.environ.get('SOCKETIO_PING_TIMEOUT', '5'))
    PORT = int(os.environ.get('PORT', '3000'))
