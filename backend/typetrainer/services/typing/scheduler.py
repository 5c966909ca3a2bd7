import time

from typetrainer import socketio


def schedule_advance(app, delay: float, callback, lock=None, label: str = '') -> None:
    """Run ``callback`` once after ``delay`` seconds.

    - Runs inline in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Otherwise sleeps on a Socket.IO background task, then calls back inside an app context
    - ``lock`` (if given) is held while the callback runs
    """

    def _fire():
        try:
            app.logger.info(f"[advance-fire] {label}")
        except Exception:
            pass
        if lock is None:
            callback()
            return
        with lock:
            callback()

    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        _fire()
        return

    try:
        app.logger.info(f"[advance-set] {label} delay={delay}s")
    except Exception:
        pass

    def _worker(wait: float):
        # heartbeat sleep loop if enabled
        try:
            hb = int(app.config.get('TIMER_HEARTBEAT_SEC', 0))
        except Exception:
            hb = 0
        if hb and hb > 0:
            slept = 0.0
            while slept < wait:
                step = min(hb, wait - slept)
                time.sleep(step)
                slept += step
                try:
                    app.logger.info(f"[advance-heartbeat] {label} remaining={max(0.0, wait - slept)}s")
                except Exception:
                    pass
        elif wait > 0:
            time.sleep(wait)
        with app.app_context():
            _fire()

    socketio.start_background_task(_worker, delay)


class AppScheduler:
    """Adapts ``schedule_advance`` to the engine's ``schedule(delay, callback)`` interface."""

    def __init__(self, app, lock=None, label: str = ''):
        self.app = app
        self.lock = lock
        self.label = label

    def schedule(self, delay_seconds, callback):
        schedule_advance(self.app, delay_seconds, callback, lock=self.lock, label=self.label)


def run_in_background(app, fn, *args, label: str = '') -> None:
    """Run ``fn(*args)`` on a Socket.IO background task inside an app context.

    Follows the same TESTING rule as ``schedule_advance``: inline unless
    ENABLE_SCHEDULER_IN_TESTS is set.
    """

    def _worker():
        with app.app_context():
            fn(*args)

    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        fn(*args)
        return
    try:
        app.logger.info(f"[background-task] {label}")
    except Exception:
        pass
    socketio.start_background_task(_worker)


class AppDispatcher:
    """``dispatch(fn, *args)`` callable for ``ScoreReporter`` backed by ``run_in_background``."""

    def __init__(self, app, label: str = ''):
        self.app = app
        self.label = label

    def __call__(self, fn, *args):
        run_in_background(self.app, fn, *args, label=self.label)
