class DeferredCall:
    """One-shot callback fired after a delay, driven by simulated frame time.

    Scheduling replaces any pending call; ``cancel()`` drops it.
    """

    def __init__(self):
        self._remaining_ms = None
        self._callback = None

    @property
    def pending(self):
        return self._callback is not None

    def schedule(self, delay_ms, callback):
        self._remaining_ms = float(delay_ms)
        self._callback = callback

    def cancel(self):
        self._remaining_ms = None
        self._callback = None

    def advance(self, elapsed_ms):
        """Count down; returns True if the callback fired on this call."""
        if self._callback is None:
            return False
        self._remaining_ms -= elapsed_ms
        if self._remaining_ms > 0:
            return False
        callback = self._callback
        self.cancel()
        callback()
        return True
