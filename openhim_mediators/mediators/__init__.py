"""Mediator catalog

Mediator descriptors registered with OpenHIM at startup, in registration
order.  Each descriptor is bundled as JSON alongside this module, in the
format accepted by the OpenHIM core ``/mediators`` endpoint.
"""
from copy import deepcopy
import json
import os

CATALOG_DIR = os.path.dirname(os.path.abspath(__file__))

# registration order
CATALOG_FILES = (
    'shr.json',
    'advanced_search.json',
    'mpi.json',
    'ips.json',
    'fhir_base.json',
)


class MediatorDescriptor:
    """Read only view of a mediator registration document"""

    def __init__(self, config):
        for key in ('urn', 'name'):
            if not config.get(key):
                raise ValueError(f"mediator config missing required '{key}'")
        channels = config.get('defaultChannelConfig')
        if not isinstance(channels, list) or not channels:
            raise ValueError(
                f"mediator {config['urn']} lacks a defaultChannelConfig")
        self._config = deepcopy(config)

    def __repr__(self):
        return f"<MediatorDescriptor {self.urn}>"

    @property
    def urn(self):
        return self._config['urn']

    @property
    def name(self):
        return self._config['name']

    @property
    def version(self):
        return self._config.get('version')

    @property
    def default_channel(self):
        """Channel definition installed for this mediator, a copy"""
        return deepcopy(self._config['defaultChannelConfig'][0])

    def as_json(self):
        """Registration document for the ``/mediators`` endpoint, a copy"""
        return deepcopy(self._config)


def load_mediator(path):
    with open(path) as f:
        return MediatorDescriptor(json.load(f))


def load_mediators(filenames=CATALOG_FILES, directory=CATALOG_DIR):
    return tuple(
        load_mediator(os.path.join(directory, filename))
        for filename in filenames)


MEDIATORS = load_mediators()
