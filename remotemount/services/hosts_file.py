"""
Hosts file reader.

The hosts file lists one target per line as `local_name=remote_spec`.
Everything after a `#` is a comment and blank lines are ignored. Lines that
do not fit the syntax are reported and skipped; they never abort the run.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Tuple

import aiofiles

from remotemount.core.exceptions import HostsFileError

HOST_LINE_PATTERN = re.compile(r"^([-A-Za-z0-9_][-A-Za-z0-9_.]*)=(.*)$")


def parse_hosts(lines: Iterable[str], source: str = "<hosts>") -> List[Tuple[str, str]]:
    """Parse hosts file lines into (local_name, remote_spec) pairs, in file order."""
    entries: List[Tuple[str, str]] = []
    seen = set()

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line[:-1] if raw_line.endswith("\n") else raw_line
        comment_pos = line.find("#")
        if comment_pos >= 0:
            line = line[:comment_pos]
        if line == "":
            continue

        match = HOST_LINE_PATTERN.match(line)
        if not match:
            logging.warning(f"Bad line {line_number} in {source}: {line!r}")
            continue

        local_name, remote_spec = match.group(1), match.group(2)
        if local_name in seen:
            logging.warning(
                f"Duplicate name {local_name!r} on line {line_number} in {source}, skipping"
            )
            continue

        seen.add(local_name)
        entries.append((local_name, remote_spec))

    return entries


async def read_hosts(path: Path) -> List[Tuple[str, str]]:
    """Read and parse the hosts file. An unreadable file is fatal."""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            lines = await f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise HostsFileError(str(path), str(e)) from e

    entries = parse_hosts(lines, source=str(path))
    logging.info(f"Read {len(entries)} target(s) from {path}")
    return entries
