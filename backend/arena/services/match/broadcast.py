import logging


class EventBroadcaster:
    """Stateless Socket.IO relay with three addressing modes.

    Extra positional args become extra Socket.IO arguments, so
    ``to_all('gameOver', scores, players)`` arrives as two arguments.
    Delivery is best-effort: a failing emit is logged and dropped.
    """

    def __init__(self, socketio, namespace: str = '/', logger=None):
        self.socketio = socketio
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)

    def to_sender(self, sid: str, event: str, *args) -> None:
        self._emit(event, args, to=sid)

    def to_others(self, sid: str, event: str, *args) -> None:
        self._emit(event, args, skip_sid=sid)

    def to_all(self, event: str, *args) -> None:
        self._emit(event, args)

    def _emit(self, event, args, **kwargs):
        data = args[0] if len(args) == 1 else tuple(args)
        try:
            self.socketio.emit(event, data, namespace=self.namespace, **kwargs)
        except Exception:
            self.logger.exception(f"[emit-failed] event={event} target={kwargs or 'all'}")
