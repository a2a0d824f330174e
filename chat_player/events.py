"""Observable event channel."""

from .debugging import log


class EventChannel():
    """Holds the handlers subscribed to each event and calls them when the
    event is published."""

    def __init__(self):
        self._handlers = {}

    def subscribe(self, event, handler):
        """Call `handler(payload)` every time `event` is published

        :param event: Name of the event, e.g. 'chat'
        :type event: str
        :param handler: Function called with the published payload
        :type handler: function
        :raises TypeError: if the handler is not callable
        :return: The handler, so this can be used as a decorator
        :rtype: function
        """
        if not callable(handler):
            raise TypeError(f'Handler must be callable: {handler!r}')
        self._handlers.setdefault(event, []).append(handler)
        return handler

    def unsubscribe(self, event, handler):
        handlers = self._handlers.get(event) or []
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event, payload=None):
        """Call every handler subscribed to `event` with `payload`. An error
        raised by one handler is logged and does not stop the others.

        :param event: Name of the event
        :type event: str
        :param payload: Value passed to each handler, defaults to None
        :type payload: object, optional
        :return: Number of handlers called
        :rtype: int
        """
        handlers = list(self._handlers.get(event) or [])
        if not handlers:
            log('debug', f'No handlers subscribed to "{event}".')

        for handler in handlers:
            try:
                handler(payload)
            except Exception as e:
                log('error', f'Error in "{event}" handler {handler!r}: {e} ({e.__class__.__name__})')

        return len(handlers)

    def handler_count(self, event):
        return len(self._handlers.get(event) or [])
