"""Player API version reported by ``Api.version`` and checked by plugins."""

VERSION = "0.1.0"


def version_tuple(version: str) -> tuple[int, ...]:
    """``"7.10.2-beta"`` -> ``(7, 10, 2)``. Non-numeric parts stop the parse."""
    parts: list[int] = []
    for part in version.split("+")[0].split("-")[0].split("."):
        if not part.isdigit():
            break
        parts.append(int(part))
    return tuple(parts)
