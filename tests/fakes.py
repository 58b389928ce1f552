import json
import threading

import requests


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else (json.dumps(body) if body is not None else "")

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """
    Stands in for requests.Session / the requests module.
    `responses` is consumed in order; an Exception instance is raised instead of returned.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self._lock = threading.Lock()

    def _next(self, method, url, kwargs):
        with self._lock:
            self.calls.append({"method": method, "url": url, **kwargs})
            response = self.responses.pop(0) if self.responses else FakeResponse(200, {})
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)


class RecordingMapSurface:
    def __init__(self):
        self.markers = []
        self.routes = []
        self.cleared = 0
        self.messages = []

    def place_markers(self, markers):
        self.markers = list(markers)

    def draw_route(self, route):
        self.routes.append(route)

    def clear_route(self):
        self.cleared += 1

    def show_message(self, text):
        self.messages.append(text)
