# tests/fake_session.py

import json

SAMPLE_PAYLOAD = {
    "meta": [],
    "data": {
        "temperature": 22.5,
        "consumption": 10.1,
        "dissipation": 9.9,
        "setpoint": 24.0,
        "mpue": 1.02,
        "pump1rpm": 1500,
        "pump2rpm": 1480,
    },
}


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)
        self.closed = False

    def json(self):
        return json.loads(self.text)

    def iter_content(self, chunk_size=1):
        raw = self.text.encode("utf-8")
        for start in range(0, len(raw), chunk_size):
            yield raw[start:start + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    """
    Stand-in for requests.Session.

    Each queued item is either a FakeResponse or an exception to raise.
    The last item repeats once the queue is drained.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None, stream=False):
        self.calls.append({"url": url, "params": params, "timeout": timeout, "stream": stream})
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item
