"""Provisioning of OpenHIM API clients"""
import hashlib
import secrets

from flask import current_app

from openhim_mediators.audit import audit_entry
from openhim_mediators.openhim import OpenHIMClient

PASSWORD_ALGORITHM = "sha512"
SALT_BYTES = 16


def gen_client_password(password):
    """Salt and hash password as OpenHIM core expects for client basic auth

    :returns: dict with hex encoded ``passwordSalt`` and ``passwordHash``
    """
    password_salt = secrets.token_bytes(SALT_BYTES).hex()
    shasum = hashlib.new(PASSWORD_ALGORITHM)
    shasum.update(password.encode('utf-8'))
    shasum.update(password_salt.encode('utf-8'))
    return {
        "passwordSalt": password_salt,
        "passwordHash": shasum.hexdigest(),
    }


def client_record(name, password):
    details = gen_client_password(password)
    return {
        "clientID": name,
        "name": name,
        "passwordAlgorithm": PASSWORD_ALGORITHM,
        "passwordHash": details["passwordHash"],
        "passwordSalt": details["passwordSalt"],
        "roles": ["*"],
    }


def create_client(name, password, client=None):
    """Create OpenHIM client `name` authenticating with `password`

    :param client: OpenHIMClient, configured from current_app if not given
    :returns: raw text of the OpenHIM response
    """
    if client is None:
        client = OpenHIMClient.from_config(current_app.config)
    response = client.create_client(client_record(name, password))
    audit_entry(
        f"create client {name}",
        extra={'tags': ['openhim', 'clients'], 'clientID': name})
    return response
