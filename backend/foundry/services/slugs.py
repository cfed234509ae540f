"""URL slug helpers shared by RoleService and TeamService."""

import re
import secrets
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """
    'Acme Corp. (EU)' → 'acme-corp-eu'

    Accents are folded to ASCII; every run of other characters becomes a
    single hyphen; leading/trailing hyphens are trimmed.
    """
    ascii_value = (
        unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    )
    return _NON_ALNUM.sub("-", ascii_value.lower()).strip("-")


def slug_with_suffix(slug: str) -> str:
    """Disambiguate a taken slug: 'acme' → 'acme-3f9a1c'."""
    return f"{slug}-{secrets.token_hex(3)}"
