import re
from pathlib import Path

_RELATIVE_SQLITE = re.compile(r"^(sqlite(?:\+\w+)?:///)\./(.*)$")


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Resolve a relative SQLite URL such as 'sqlite:///./raffle.db' against
    ``project_root``.

    Driver-qualified forms ('sqlite+pysqlite:///./...') keep their driver.
    Absolute paths, in-memory databases and non-SQLite URLs are returned as-is.
    """
    match = _RELATIVE_SQLITE.match(url)
    if match is None:
        return url
    prefix, rel = match.groups()
    return f"{prefix}{(project_root / rel).resolve()}"
