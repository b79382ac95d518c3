"""Default configuration

Use env var to override
"""
import os

OPENHIM_API_URL = os.getenv("OPENHIM_API_URL")
OPENHIM_USERNAME = os.getenv("OPENHIM_USERNAME")
OPENHIM_PASSWORD = os.getenv("OPENHIM_PASSWORD")
# OpenHIM core ships with a self signed certificate
OPENHIM_TRUST_SELF_SIGNED = os.getenv("OPENHIM_TRUST_SELF_SIGNED", 'true').lower() == 'true'

FHIR_BASE_URL = os.getenv("FHIR_BASE_URL")

LOGSERVER_TOKEN = os.getenv('LOGSERVER_TOKEN')
LOGSERVER_URL = os.getenv('LOGSERVER_URL')

# NB log level hardcoded at INFO for logserver
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG').upper()

VERSION_STRING = os.getenv("VERSION_STRING")
