import re
from pathlib import Path

SERVICE_NAME = "geoworld-service"
APP_TITLE = "GeoWorld Finder: Maps-grounded answers about the world around you"


def _read_version() -> str:
    changelog = Path(__file__).resolve().parent.parent / "CHANGELOG.md"
    if changelog.exists():
        match = re.search(r"##\s*\[(.+?)\]", changelog.read_text())
        if match:
            return match.group(1)
    return "unknown"


VERSION = _read_version()
