from datetime import datetime
import re
import uuid

JURISDICTION_PATTERN = re.compile(r'[A-Z]{2}')


def generate_cross_border_id(jurisdiction, now=None):
    """Generate a human readable cross-border patient identifier

    Format is ``<jurisdiction>-<year>-<month>-<suffix>``, i.e. ``KE-2024-03-4F2A1``,
    where jurisdiction is the upper cased first two characters of the
    given value and suffix is taken from a fresh uuid4.

    NB uniqueness is not verified; callers needing it must search for
    the identifier before use.
    """
    prefix = jurisdiction.upper()[:2]
    if not JURISDICTION_PATTERN.fullmatch(prefix):
        raise ValueError(f"Invalid jurisdiction for cross-border id: {jurisdiction!r}")

    now = now or datetime.now()
    suffix = str(uuid.uuid4())[:5].upper()
    return f"{prefix}-{now.year:04d}-{now.month:02d}-{suffix}"
