"""OpenHIM core API client

Implements the OpenHIM token authentication scheme: the user's salt is
obtained from ``/authenticate/<username>`` and every subsequent request
carries ``auth-*`` headers derived from it, the password and a timestamp.
"""
from datetime import datetime, timezone
import hashlib
import logging

from flask import current_app
import requests

logger = logging.getLogger(__name__)


class OpenHIMError(Exception):
    """Raised when the OpenHIM core API rejects or fails a request"""
    pass


def sha512_hex(*parts):
    shasum = hashlib.sha512()
    for part in parts:
        shasum.update(part.encode('utf-8'))
    return shasum.hexdigest()


class OpenHIMClient:
    def __init__(self, api_url, username, password, trust_self_signed=True):
        self.api_url = api_url
        self.username = username
        self.password = password
        self.verify = not trust_self_signed
        self._auth = None

    @classmethod
    def from_config(cls, config):
        """Build client from flask (or any mapping) configuration"""
        return cls(
            api_url=config.get('OPENHIM_API_URL'),
            username=config.get('OPENHIM_USERNAME'),
            password=config.get('OPENHIM_PASSWORD'),
            trust_self_signed=config.get('OPENHIM_TRUST_SELF_SIGNED', True),
        )

    def authenticate(self):
        """Fetch and retain the user's auth salt from OpenHIM core

        :returns: the authentication details, i.e. ``{"salt": ..., "ts": ...}``
        :raises OpenHIMError: if the user isn't known to the core API
        """
        url = f"{self.api_url}/authenticate/{self.username}"
        response = requests.get(url, verify=self.verify)
        if response.status_code != 200:
            raise OpenHIMError(
                f"User {self.username} not found when authenticating with core API")
        self._auth = response.json()
        return self._auth

    def gen_auth_headers(self):
        """Generate request headers from the retained authentication details"""
        if not self._auth:
            raise OpenHIMError(f"{self.username} has not been authenticated")

        salt = self._auth['salt']
        now = datetime.now(timezone.utc).isoformat()
        passhash = sha512_hex(salt, self.password)
        token = sha512_hex(passhash, salt, now)
        return {
            'auth-username': self.username,
            'auth-ts': now,
            'auth-salt': salt,
            'auth-token': token,
        }

    def get_token(self):
        """Authenticate afresh and return auth headers

        Never raises; failure is logged and returned as
        ``{"error": <message>, "status": "error"}``
        """
        try:
            self.authenticate()
            return self.gen_auth_headers()
        except (OpenHIMError, requests.exceptions.RequestException, KeyError, ValueError) as error:
            logger.error("unable to obtain OpenHIM token: %s", error)
            return {'error': str(error), 'status': 'error'}

    def _post(self, path, body):
        headers = self.get_token()
        if 'error' in headers:
            raise OpenHIMError(headers['error'])
        headers['Content-Type'] = 'application/json'
        return requests.post(
            f"{self.api_url}{path}", headers=headers, json=body, verify=self.verify)

    def register_mediator(self, mediator):
        """Register the given MediatorDescriptor with OpenHIM core"""
        response = self._post('/mediators', mediator.as_json())
        if response.status_code != 201:
            raise OpenHIMError(
                "Received a non-201 response code, the response body was: "
                f"{response.text}")
        logger.debug("registered mediator %s", mediator.urn)

    def install_channel(self, mediator):
        """Create the mediator's default channel; returns the response text"""
        response = self._post('/channels', mediator.default_channel)
        if not response.ok:
            raise OpenHIMError(
                f"Channel install for {mediator.urn} failed "
                f"({response.status_code}): {response.text}")
        logger.debug("installed channel for %s: %s", mediator.urn, response.text)
        return response.text

    def create_client(self, client_record):
        """POST given client record to ``/clients``; returns raw response text"""
        response = self._post('/clients', client_record)
        logger.debug("create client: %s", response.text)
        return response.text


def get_openhim_token():
    """Auth headers for the OpenHIM instance configured on current_app"""
    return OpenHIMClient.from_config(current_app.config).get_token()
