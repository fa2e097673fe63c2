"""CIP code normalization.

Completions files and users spell the same program code several ways:
``51.2001``, ``512001``, ``51.2``, ``="51.2001"`` (Excel exports).  Every
comparison in the engine goes through :func:`normalize_cip` on *both* sides
so that those variants match.
"""

from utils.patterns import CIP_CANONICAL, CIP_STRIP_CHARS


def normalize_cip(raw: str | None) -> str:
    """Canonicalize a CIP code to ``NN.NNNN``.

    Never raises.  Input that cannot be canonicalized is returned cleaned
    (digits and dots only) so that it simply matches nothing.

    Examples:
        normalize_cip("512001")   -> "51.2001"
        normalize_cip("51.2")     -> "51.2000"
        normalize_cip("51.2001")  -> "51.2001"
        normalize_cip("")         -> ""
    """
    if raw is None:
        return ""
    cleaned = CIP_STRIP_CHARS.sub("", str(raw))
    # Run-together six-digit form: 512001 -> 51.2001
    if "." not in cleaned and len(cleaned) >= 4:
        cleaned = f"{cleaned[:2]}.{cleaned[2:]}"
    match = CIP_CANONICAL.match(cleaned)
    if not match:
        return cleaned
    series, fraction = match.groups()
    return f"{series}.{(fraction + '0000')[:4]}"
