from flask import current_app, request
from arena import socketio


def _session():
    return current_app.extensions['arena.session']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.debug(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    _session().disconnect(_get_sid())


def handle_check_name(name):
    # Returned value is delivered as the client's ack callback argument
    return _session().check_name(name)


def handle_register(name):
    _session().register(_get_sid(), name)


def handle_update_position(pos):
    _session().update_position(_get_sid(), pos)


def handle_shoot(bullet):
    _session().shoot(_get_sid(), bullet)


def handle_hit(claim):
    _session().hit(claim)


def handle_event_error(exc):
    event = (getattr(request, 'event', None) or {}).get('message')
    current_app.logger.exception(f"[event-failed] event={event} sid={getattr(request, 'sid', None)}: {exc}")


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the arena protocol handlers on ``namespace``.

    Any exception escaping a handler is logged by ``handle_event_error`` and
    goes no further, so one bad event never takes the session down.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('checkName', handle_check_name, namespace=namespace)
    socketio.on_event('register', handle_register, namespace=namespace)
    socketio.on_event('updatePosition', handle_update_position, namespace=namespace)
    socketio.on_event('shoot', handle_shoot, namespace=namespace)
    socketio.on_event('hit', handle_hit, namespace=namespace)
    socketio.on_error_default(handle_event_error)
