import re

VERSION_RE = re.compile(r"v(\d+)")


def extract_version(name: str) -> int | None:
    """Return the number of the first 'v<digits>' token in a container name, or None."""
    match = VERSION_RE.search(name)
    if match is None:
        return None
    return int(match.group(1))
