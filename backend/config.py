import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///leaderboard.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Comma separated list of origins allowed to open a socket
    CORS_ORIGINS = [o for o in os.environ.get('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000').split(',') if o]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Match timers (seconds)
    MATCH_DURATION_SEC = float(os.environ.get('MATCH_DURATION_SEC', '120'))
    RESPAWN_DELAY_SEC = float(os.environ.get('RESPAWN_DELAY_SEC', '3'))
    # Minimum simultaneous players for a match to start and stay alive
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    # World rectangle positions are clamped into (inset by the player radius)
    WORLD_WIDTH = float(os.environ.get('WORLD_WIDTH', '1920'))
    WORLD_HEIGHT = float(os.environ.get('WORLD_HEIGHT', '1080'))
    PLAYER_RADIUS = float(os.environ.get('PLAYER_RADIUS', '15'))
    # Spawn rectangle: origin plus size
    SPAWN_X = float(os.environ.get('SPAWN_X', '100'))
    SPAWN_Y = float(os.environ.get('SPAWN_Y', '100'))
    SPAWN_WIDTH = float(os.environ.get('SPAWN_WIDTH', '800'))
    SPAWN_HEIGHT = float(os.environ.get('SPAWN_HEIGHT', '500'))
