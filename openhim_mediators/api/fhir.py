from copy import deepcopy
from datetime import datetime, timezone
import json
from urllib.parse import quote

from fhirclient.models.observation import Observation
from flask import current_app
import requests

FHIR_ERROR_TEXT = "FHIRFetch: server error"


class MalformedResourceError(ValueError):
    """Raised when a FHIR response lacks the shape required to process it"""
    pass


def fhir_request(url, method="GET", data=None):
    """Execute request on configured FHIR server - return result envelope

    :param url: path relative to ``FHIR_BASE_URL``, i.e. ``/Patient?identifier=x``
    :param method: HTTP verb, GET, POST, PUT, PATCH, DELETE
    :param data: JSON serializable body; ignored for GET and DELETE

    Never raises on failure.  Returns
    ``{"status": "success"|"error", "statusText": ..., "data": ...}``
    where ``data`` is the parsed JSON response on success, or the
    exception on error.  Callers must check ``status``.
    """
    full_url = f"{current_app.config.get('FHIR_BASE_URL')}{url}"
    VERB = method.upper()
    kwargs = {"headers": {"Content-Type": "application/json"}}

    try:
        if VERB not in ("GET", "DELETE"):
            kwargs["data"] = json.dumps(data)
        response = requests.request(VERB, full_url, **kwargs)
        response.raise_for_status()
        result = response.json()
    except (requests.exceptions.RequestException, TypeError, ValueError) as error:
        current_app.logger.error(f"Failed FHIR call ({VERB} {full_url}): {error}")
        return {
            "status": "error",
            "statusText": FHIR_ERROR_TEXT,
            "data": error,
        }

    return {
        "status": "success",
        "statusText": response.reason,
        "data": result,
    }


def first_in_bundle(bundle):
    """Return first resource from a search bundle, None if no matches

    :raises MalformedResourceError: when the bundle shape can't be trusted,
      i.e. neither ``total`` nor ``entry`` is present, ``total`` isn't
      an integer, or a positive ``total`` comes without entries
    """
    if not isinstance(bundle, dict) or bundle.get('resourceType', 'Bundle') != 'Bundle':
        raise MalformedResourceError(f"expected search Bundle, got: {bundle!r}")

    total = bundle.get('total')
    if total is not None and (isinstance(total, bool) or not isinstance(total, int)):
        raise MalformedResourceError(f"Bundle 'total' is not an integer: {total!r}")
    entries = bundle.get('entry')
    if entries is None:
        if total is None:
            raise MalformedResourceError("Bundle lacks both 'total' and 'entry'")
        if total > 0:
            raise MalformedResourceError(f"Bundle total {total} without any 'entry'")
        return None

    if not isinstance(entries, list):
        raise MalformedResourceError("Bundle 'entry' is not a list")
    if not entries:
        return None

    resource = entries[0].get('resource') if isinstance(entries[0], dict) else None
    if not isinstance(resource, dict):
        raise MalformedResourceError("Bundle entry lacks a 'resource'")
    return resource


def patient_search_path(identifier):
    return f"/Patient?identifier={quote(identifier, safe='')}"


def parse_identifiers(identifier):
    """Look up patient by identifier; map each of its identifiers by id

    :returns: None if the search failed or no patient matches, otherwise
      list of single entry dicts, ``{identifier["id"]: identifier}``, in
      the patient's order
    :raises MalformedResourceError: on unexpected search results
    """
    result = fhir_request(patient_search_path(identifier))
    if result["status"] != "success":
        return None
    patient = first_in_bundle(result["data"])
    if patient is None:
        return None
    return [{ident.get('id'): ident} for ident in patient.get('identifier', [])]


def get_patient_by_cross_border_id(cross_border_id):
    """Return Patient resource holding the given identifier, or None"""
    result = fhir_request(patient_search_path(cross_border_id))
    if result["status"] != "success":
        return None
    try:
        return first_in_bundle(result["data"])
    except MalformedResourceError as error:
        current_app.logger.error(f"Patient search for {cross_border_id}: {error}")
        return None


def get_patient_summary(cross_border_id):
    """Return the patient summary ($summary) document, None on any failure"""
    patient = get_patient_by_cross_border_id(cross_border_id)
    if patient is None or 'id' not in patient:
        current_app.logger.info(f"no patient found for {cross_border_id}")
        return None

    result = fhir_request(f"/Patient/{patient['id']}/$summary")
    if result["status"] != "success":
        return None
    return result["data"]


def observation(patient_id, codes, encounter_id=None):
    """Build (but don't persist) an Observation for the given patient

    :param patient_id: Patient.id of the subject
    :param codes: list of Coding dicts for ``Observation.code``
    :param encounter_id: accepted for callers; encounter linkage is not yet recorded

    Codings are stored exactly as given.  The resource is loaded into the
    fhirclient model non-strict, so shape problems are logged, not raised.
    """
    now = datetime.now(timezone.utc).isoformat()
    resource = {
        "resourceType": "Observation",
        "status": "final",
        "code": {"coding": codes},
        "subject": {"reference": f"Patient/{patient_id}"},
        "effectiveDateTime": now,
        "issued": now,
    }
    Observation(deepcopy(resource), strict=False)
    return resource


# Extension points: parsing and bundle generation are not implemented;
# callers must tolerate None

def parse_observation_resource(data):
    return None


def parse_encounter_resource(data):
    return None


def parse_medication(data):
    return None


def parse_fhir_bundle(bundle):
    return None


def generate_fhir_bundle(resources):
    return None
