"""Audit event shipping to the central log server"""
import json
import logging
from pythonjsonlogger.jsonlogger import JsonFormatter
import requests
from requests.exceptions import RequestException

EVENT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class LogServerHandler(logging.Handler):
    """POST each audit record to ``{url}/events`` as ``{"event": {...}}``

    Every event is stamped with the emitting service and its version, so
    mediator registration and client provisioning events from several
    deployments can be told apart on the log server.
    """

    def __init__(self, url, jwt, service='openhim_mediators', version=None):
        super().__init__()
        self.jwt = jwt
        self.url = f"{url}/events"
        self.service = service
        self.version = version
        self.setFormatter(JsonFormatter(EVENT_FORMAT))

    def event(self, record):
        event = json.loads(self.format(record))
        event.setdefault('service', self.service)
        if self.version and not event.get('version'):
            event['version'] = self.version
        event.setdefault('tags', [])
        return {"event": event}

    def emit(self, record):
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.jwt}"
        }
        try:
            response = requests.post(url=self.url, headers=headers, json=self.event(record))
            response.raise_for_status()
        except RequestException as ex:
            # can't use the event logger to report its own failure
            root_logger = logging.getLogger('root')
            root_logger.error("error submitting event to logserver: %s", self.url)
            root_logger.exception(ex)
