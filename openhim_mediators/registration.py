"""Startup registration of the mediator catalog with OpenHIM"""
from concurrent.futures import ThreadPoolExecutor, as_completed
import logging

import requests

from openhim_mediators.audit import audit_entry
from openhim_mediators.mediators import MEDIATORS
from openhim_mediators.openhim import OpenHIMError

logger = logging.getLogger(__name__)

REGISTER = 'register'
INSTALL = 'install'


class RegistrationReport:
    """Outcome of a registration run; failures hold (urn, step, message)"""

    def __init__(self):
        self.authenticated = False
        self.auth_error = None
        self.registered = []
        self.installed = []
        self.failures = []

    @property
    def ok(self):
        return self.authenticated and not self.failures

    def __repr__(self):
        return (
            f"<RegistrationReport authenticated={self.authenticated} "
            f"registered={len(self.registered)} installed={len(self.installed)} "
            f"failures={len(self.failures)}>")


def register_mediators(client, mediators=MEDIATORS, max_workers=None):
    """Authenticate, then register every mediator and install its channel

    Authentication failure is recorded but does not prevent the attempts
    to register and install.  Registration and channel installation run
    as independent tasks; one failing never blocks another.  Nothing is
    retried.

    :param client: OpenHIMClient to register through
    :param mediators: sequence of MediatorDescriptor, defaults to the catalog
    :param max_workers: thread pool size, executor default if None
    :returns: RegistrationReport
    """
    report = RegistrationReport()
    try:
        client.authenticate()
        report.authenticated = True
        logger.info("OpenHIM authenticated successfully")
    except (OpenHIMError, requests.exceptions.RequestException, ValueError) as error:
        report.auth_error = str(error)
        logger.error("OpenHIM authentication failed: %s", error)

    tasks = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        for mediator in mediators:
            tasks[executor.submit(client.register_mediator, mediator)] = (mediator.urn, REGISTER)
            tasks[executor.submit(client.install_channel, mediator)] = (mediator.urn, INSTALL)

        for future in as_completed(tasks):
            urn, step = tasks[future]
            try:
                future.result()
            except (OpenHIMError, requests.exceptions.RequestException) as error:
                report.failures.append((urn, step, str(error)))
                logger.error("%s failed for %s: %s", step, urn, error)
                audit_entry(
                    f"mediator {step} failed",
                    level='error',
                    extra={'tags': ['openhim', 'mediator', step], 'urn': urn, 'error': str(error)})
                continue

            if step == REGISTER:
                report.registered.append(urn)
            else:
                report.installed.append(urn)

    return report
