"""Fake clock, transport and response builders used by the tests."""
from chat_player.context import ClientContext
from chat_player.scheduling import Timers


class ManualClock():
    """A clock which only moves forward when something sleeps on it."""

    def __init__(self, now=1000.0):
        self.now = now

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.now += max(seconds, 0)


def create_timers(clock):
    return Timers(clock.time, clock.sleep)


class FakeTransport():
    """Returns (or raises) the queued responses in order and records every request."""

    def __init__(self, responses, on_exhausted=None):
        self.responses = list(responses)
        self.on_exhausted = on_exhausted
        self.requests = []

    def post(self, url, data):
        self.requests.append((url, data))

        if not self.responses:
            if self.on_exhausted is not None:
                self.on_exhausted()
            return {}

        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def continuations(self):
        return [data['continuation'] for _, data in self.requests]

    def create_context(self):
        return ClientContext(self.post)


def text_renderer(record_id, text='hi', timestamp_usec=0, author_id='UC_author', author_name='alice', **kwargs):
    renderer = {
        'id': record_id,
        'message': {'runs': [{'text': text}]},
        'authorName': {'simpleText': author_name},
        'authorExternalChannelId': author_id,
        'timestampUsec': str(timestamp_usec),
    }
    renderer.update(kwargs)
    return renderer


def text_action(*args, **kwargs):
    return {'addChatItemAction': {'item': {
        'liveChatTextMessageRenderer': text_renderer(*args, **kwargs)
    }}}


def paid_action(record_id, text='thanks', amount='$2.00', **kwargs):
    renderer = text_renderer(record_id, text, **kwargs)
    renderer.update({
        'purchaseAmountText': {'simpleText': amount},
        'headerBackgroundColor': 4291821568,
        'headerTextColor': 4294967295,
        'bodyBackgroundColor': 4293271831,
        'bodyTextColor': 4294967295,
    })
    return {'addChatItemAction': {'item': {
        'liveChatPaidMessageRenderer': renderer
    }}}


def replay_action(action, offset_ms):
    return {'replayChatItemAction': {
        'actions': [action],
        'videoOffsetTimeMsec': str(offset_ms)
    }}


def chat_response(actions=None, continuations=None):
    info = {}
    if actions is not None:
        info['actions'] = actions
    if continuations is not None:
        info['continuations'] = continuations
    return {'continuationContents': {'liveChatContinuation': info}}


def timed(token, timeout_ms=1000):
    return {'timedContinuationData': {'continuation': token, 'timeoutMs': timeout_ms}}


def invalidation(token, timeout_ms=1000):
    return {'invalidationContinuationData': {'continuation': token, 'timeoutMs': timeout_ms}}
