import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(os.getcwd(), 'typetrainer.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Word pool source: JSON list of {"word": ..., "meaning": ...}
    WORDS_PATH = os.environ.get('WORDS_PATH') or os.path.join(BASE_DIR, 'data', 'words.json')
    # Pause between a finished word and the next one (ms)
    ADVANCE_DELAY_MS = int(os.environ.get('ADVANCE_DELAY_MS', '1000'))
    # Number of recent scores shown in the history table
    HISTORY_LIMIT = int(os.environ.get('HISTORY_LIMIT', '5'))
    # Glyph drawn in place of a hidden character
    MASK_PLACEHOLDER = os.environ.get('MASK_PLACEHOLDER', '_')
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173',
        ).split(',')
        if origin.strip()
    ]
    # Optional: heartbeat interval for advance timer logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
