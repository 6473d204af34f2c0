"""In-memory registry of live colony sessions."""
import threading


class SessionRegistry:
    """Maps session ids to their running GameEngine.

    Colonies live only as long as the process; the database keeps session
    and action records, never colony state.
    """

    def __init__(self):
        self._engines = {}
        self._lock = threading.Lock()

    def add(self, engine):
        with self._lock:
            self._engines[engine.session_id] = engine
        return engine

    def get(self, session_id):
        with self._lock:
            return self._engines.get(session_id)

    def remove(self, session_id):
        with self._lock:
            engine = self._engines.pop(session_id, None)
        if engine is not None:
            engine.stop_realtime()
        return engine

    def clear(self):
        with self._lock:
            engines = list(self._engines.values())
            self._engines.clear()
        for engine in engines:
            engine.stop_realtime()

    def __len__(self):
        with self._lock:
            return len(self._engines)

    def __contains__(self, session_id):
        with self._lock:
            return session_id in self._engines


# Global instance
_session_registry = None


def get_session_registry():
    """Get or create the global session registry."""
    global _session_registry
    if _session_registry is None:
        _session_registry = SessionRegistry()
    return _session_registry
