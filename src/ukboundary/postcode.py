"""UK postcode normalisation and fragment hierarchy."""

import re

from ukboundary.exceptions import InvalidInput

# Full postcode written without the separating space, e.g. "SW1A0AA".
_COMPACT_POSTCODE_RE = re.compile(r"^([A-Z]{1,2}\d[A-Z\d]?)(\d[A-Z]{2})$")

_MIN_BROADEN_LENGTH = 1


def normalise(raw: str) -> str:
    """
    Upper-case, trim and collapse whitespace, e.g. ' sw1a   0aa ' -> 'SW1A 0AA'.

    A full postcode typed without its space is split into outward and
    inward codes ('sw1a0aa' -> 'SW1A 0AA'). Anything else is left as typed,
    since partial postcodes ('SE21', 'M') are valid queries.

    Raises InvalidInput if nothing but whitespace was entered.
    """
    cleaned = " ".join(raw.upper().split())
    if not cleaned:
        raise InvalidInput(raw)
    match = _COMPACT_POSTCODE_RE.match(cleaned)
    if match:
        return f"{match.group(1)} {match.group(2)}"
    return cleaned


def outward_code(normalised: str) -> str:
    """Return the segment before the first space (or the whole string)."""
    return normalised.split(" ", 1)[0]


def _broaden(code: str) -> str | None:
    """Return the next broader form of an outward code, or None to stop."""
    last = code[-1]
    if last.isalpha() and any(ch.isdigit() for ch in code):
        return code[:-1]
    if last.isdigit():
        broader = code[:-1]
        if not broader or broader == code:
            return None
        return broader
    return None


def hierarchy(raw: str) -> list[str]:
    """
    Build the list of postcode fragments to query, most specific first.

    >>> hierarchy("SW1A 0AA")
    ['SW1A 0AA', 'SW1A', 'SW1', 'SW']

    The result never contains duplicates and each fragment is no longer
    than the one before it.
    """
    pc = normalise(raw)

    fragments: list[str] = []
    if " " in pc:
        fragments.append(pc)

    code = outward_code(pc)
    fragments.append(code)

    while len(code) > _MIN_BROADEN_LENGTH:
        broader = _broaden(code)
        if broader is None:
            break
        fragments.append(broader)
        code = broader

    return list(dict.fromkeys(fragments))
