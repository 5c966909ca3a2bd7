from datetime import timedelta, timezone
from flask import Blueprint, jsonify, request, current_app
from typetrainer import db
from typetrainer.models import TypingScore
from typetrainer.services.typing.levels import LEVELS, is_known_level
from typetrainer.services.typing.word_pool import load_file


typing_api = Blueprint('typing_api', __name__)

MAX_HISTORY_LIMIT = 50
MAX_TZ_OFFSET_MIN = 14 * 60


def get_word_pool(app=None):
    """Load the configured word file once per app and cache it."""
    app = app or current_app
    pool = app.extensions.get('typetrainer_words')
    if pool is None:
        pool = load_file(app.config['WORDS_PATH'])
        app.extensions['typetrainer_words'] = pool
    return pool


def parse_user_id(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def save_score(user_id, score, level=None):
    """Persist one finished session. Returns the stored row, or None on failure."""
    record = TypingScore(user_id=parse_user_id(user_id), score=int(score), level=level)
    try:
        db.session.add(record)
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.error(f"[score-save-failed] user={user_id} score={score}: {exc}")
        return None
    current_app.logger.info(f"[score-saved] user={record.user_id} score={record.score} level={record.level}")
    return record


def _history_limit():
    default = int(current_app.config.get('HISTORY_LIMIT', 5))
    try:
        limit = int(request.args.get('limit', default))
    except (TypeError, ValueError):
        limit = default
    return max(1, min(limit, MAX_HISTORY_LIMIT))


def _display_tz():
    """``tz_offset`` query arg in browser ``getTimezoneOffset()`` minutes (UTC minus local)."""
    try:
        offset = int(request.args.get('tz_offset', 0))
    except (TypeError, ValueError):
        return timezone.utc
    if abs(offset) > MAX_TZ_OFFSET_MIN:
        return timezone.utc
    return timezone(timedelta(minutes=-offset))


@typing_api.route('/', methods=['GET'])
def typing_home():
    user_id = parse_user_id(request.args.get('user_id'))
    history = TypingScore.recent_for_user(user_id, _history_limit())
    tz = _display_tz()
    return jsonify({
        'levels': [preset.to_dict() for preset in LEVELS.values()],
        'history': [row.to_dict(tz) for row in history],
        'word_count': len(get_word_pool()),
    }), 200


@typing_api.route('/levels', methods=['GET'])
def list_levels():
    return jsonify([preset.to_dict() for preset in LEVELS.values()]), 200


@typing_api.route('/history', methods=['GET'])
def get_history():
    """
    Returns the most recent scores for a user, newest first.
    Display dates follow the optional ``tz_offset`` (minutes, browser convention).
    """
    user_id = parse_user_id(request.args.get('user_id'))
    history = TypingScore.recent_for_user(user_id, _history_limit())
    tz = _display_tz()
    return jsonify([row.to_dict(tz) for row in history]), 200


@typing_api.route('/scores', methods=['POST'])
def submit_score():
    data = request.get_json(silent=True) or {}
    try:
        score = int(float(data.get('score')))
    except (TypeError, ValueError, OverflowError):
        return jsonify({'error': 'A numeric score is required'}), 400

    level = data.get('level')
    if level is not None and not is_known_level(level):
        return jsonify({'error': f'Unknown level: {level}'}), 400

    record = save_score(data.get('user_id'), score, level)
    if record is None:
        return jsonify({'error': 'Could not save score'}), 500
    return jsonify(record.to_dict(_display_tz())), 201
