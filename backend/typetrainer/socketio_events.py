from flask_socketio import emit
from flask import current_app, request
from typetrainer import socketio
from typetrainer.api.typing import get_word_pool, parse_user_id, save_score
from typetrainer.services.typing.engine import SessionEngine
from typetrainer.services.typing.levels import DEFAULT_LEVEL, is_known_level
from typetrainer.services.typing.scheduler import AppDispatcher, AppScheduler
from typetrainer.services.typing.scoring import ScoreReporter
from dataclasses import dataclass
from typing import Dict
import threading


class SocketRenderer:
    """Pushes engine snapshots to one socket."""

    def __init__(self, sid: str, namespace: str):
        self.sid = sid
        self.namespace = namespace

    def render(self, state):
        socketio.emit('render', state.to_dict(), to=self.sid, namespace=self.namespace)

    def finish(self, result):
        socketio.emit('completed', result.to_dict(), to=self.sid, namespace=self.namespace)


class SocketSpeaker:
    """Asks the client to pronounce a word; playback happens in the browser."""

    def __init__(self, sid: str, namespace: str):
        self.sid = sid
        self.namespace = namespace

    def speak(self, word):
        socketio.emit('speak', {'word': word}, to=self.sid, namespace=self.namespace)

    def cancel(self):
        socketio.emit('speak_cancel', {}, to=self.sid, namespace=self.namespace)


@dataclass
class LiveSession:
    user_id: int
    engine: SessionEngine
    lock: threading.RLock


_sessions: Dict[str, LiveSession] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _state_payload(engine: SessionEngine) -> dict:
    payload = engine.snapshot().to_dict()
    payload.update({
        'state': engine.state.value,
        'level': engine.level,
        'word_index': engine.word_index,
        'correct_count': engine.correct_count,
        'speech_enabled': engine.speech_enabled,
        'result': engine.result.to_dict() if engine.result else None,
    })
    return payload


def _build_session(sid: str, namespace: str, user_id: int, level: str) -> LiveSession:
    app = current_app._get_current_object()
    lock = threading.RLock()

    def _persist(payload):
        live = _sessions.get(sid)
        save_score(live.user_id if live else user_id, payload['score'], payload['level'])

    engine = SessionEngine(
        pool=get_word_pool(app),
        renderer=SocketRenderer(sid, namespace),
        speaker=SocketSpeaker(sid, namespace),
        reporter=ScoreReporter(_persist, dispatch=AppDispatcher(app, label=f"persist sid={sid}")),
        scheduler=AppScheduler(app, lock=lock, label=f"sid={sid}"),
        advance_delay_ms=int(app.config.get('ADVANCE_DELAY_MS', 1000)),
        placeholder=app.config.get('MASK_PLACEHOLDER', '_'),
        level=level,
    )
    return LiveSession(user_id=user_id, engine=engine, lock=lock)


def _live_or_error():
    live = _sessions.get(_get_sid())
    if live is None:
        emit('error', {'message': 'No active session; send start_session first'})
    return live


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # Any advance still pending for this socket runs against an orphaned engine
    _sessions.pop(_get_sid(), None)


def handle_start_session(data=None):
    data = data or {}
    level = data.get('level') or DEFAULT_LEVEL
    if not is_known_level(level):
        emit('error', {'message': f'Unknown level: {level}'})
        return
    sid = _get_sid()
    user_id = parse_user_id(data.get('user_id'))
    live = _sessions.get(sid)
    if live is not None:
        # Reuse the engine so its generation counter invalidates pending advances
        with live.lock:
            live.user_id = user_id
            live.engine.select_level(level)
    else:
        live = _build_session(sid, request.namespace, user_id, level)
        _sessions[sid] = live
    current_app.logger.info(f"[session-start] sid={sid} user={user_id} level={level} words={live.engine.total}")


def handle_select_level(data=None):
    level = (data or {}).get('level')
    if not is_known_level(level):
        emit('error', {'message': f'Unknown level: {level}'})
        return
    live = _live_or_error()
    if live is None:
        return
    with live.lock:
        live.engine.select_level(level)


def handle_restart(data=None):
    live = _live_or_error()
    if live is None:
        return
    with live.lock:
        live.engine.restart()


def handle_key(data=None):
    live = _live_or_error()
    if live is None:
        return
    key = (data or {}).get('key')
    with live.lock:
        live.engine.press(key)


def handle_toggle_speech(data=None):
    live = _live_or_error()
    if live is None:
        return
    with live.lock:
        live.engine.set_speech_enabled(bool((data or {}).get('enabled')))


def handle_get_state(data=None):
    live = _live_or_error()
    if live is None:
        return
    with live.lock:
        emit('state', _state_payload(live.engine))


HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'start_session': handle_start_session,
    'select_level': handle_select_level,
    'restart': handle_restart,
    'key': handle_key,
    'toggle_speech': handle_toggle_speech,
    'get_state': handle_get_state,
}


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace='/ws')

    if testing:
        for event, handler in HANDLERS.items():
            socketio.on_event(event, handler, namespace='/')
