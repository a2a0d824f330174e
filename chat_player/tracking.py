"""Tracking of chat messages which have already been delivered."""


class DedupTracker():
    """Remembers the id of every chat record accepted during a session.

    Consecutive responses of a live chat may return the same messages, so
    a record is only accepted the first time its id is seen. Ids are never
    forgotten, since the number of messages is bounded by the length of
    the stream.
    """

    def __init__(self):
        self._delivered = set()

    def accept(self, record):
        """Check whether a record should be delivered, and remember it if so

        :param record: The chat record
        :type record: ChatRecord
        :return: True if the record has not been seen before, False otherwise
        :rtype: bool
        """
        if record.id in self._delivered:
            return False
        self._delivered.add(record.id)
        return True

    def __contains__(self, record_id):
        return record_id in self._delivered

    def __len__(self):
        return len(self._delivered)
