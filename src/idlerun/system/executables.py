"""
Executable path resolution.

This module resolves the command given on the command line to an
absolute path, searching PATH for bare names, and checks that the
result is a regular file the effective user may execute.
"""

import logging
import os
import stat
from typing import Optional

from ..validation import ValidationError

logger = logging.getLogger(__name__)


def is_executable(path: str) -> bool:
    """Check whether ``path`` is a regular file the effective user can run.

    Permission bits are chosen by ownership: the owner bits apply when
    the effective uid owns the file, the group bits when the file's
    group is the effective gid or one of the supplementary groups,
    otherwise the other bits. Both read and execute permission are
    required, since interpreted scripts must be readable to run.

    Args:
        path: File system path to check.

    Returns:
        True if the file can be executed, False otherwise (including
        when it does not exist).
    """
    try:
        info = os.stat(path)
    except OSError as e:
        logger.debug(f"Cannot stat {path}: {e}")
        return False

    if not stat.S_ISREG(info.st_mode):
        return False

    euid = os.geteuid()
    if euid == 0:
        # root bypasses read checks but still needs one execute bit
        return bool(info.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))

    if info.st_uid == euid:
        required = stat.S_IRUSR | stat.S_IXUSR
    elif info.st_gid == os.getegid() or info.st_gid in os.getgroups():
        required = stat.S_IRGRP | stat.S_IXGRP
    else:
        required = stat.S_IROTH | stat.S_IXOTH

    return (info.st_mode & required) == required


def resolve_executable(name: str, search_path: Optional[str] = None) -> str:
    """Resolve a command name to the absolute path of an executable file.

    Names containing a slash are canonicalised directly. Bare names are
    looked up in each directory of ``search_path`` (the PATH environment
    variable by default) in order; an empty entry means the current
    directory.

    Args:
        name: Command as given by the user.
        search_path: Colon-separated directory list, defaults to $PATH.

    Returns:
        Absolute path of the executable.

    Raises:
        ValidationError: If no executable file can be found.
    """
    if not name:
        raise ValidationError("Missing executable argument", field_name="command", value=name)

    if "/" in name:
        resolved = os.path.realpath(name)
        if is_executable(resolved):
            return resolved
        raise ValidationError(f"Cannot find executable: {name}", field_name="command", value=name)

    if search_path is None:
        search_path = os.environ.get("PATH", "")
    if not search_path:
        raise ValidationError(
            f"Cannot find executable: {name} (PATH is empty)",
            field_name="command",
            value=name,
        )

    for directory in search_path.split(os.pathsep):
        candidate = os.path.join(directory or os.curdir, name)
        if is_executable(candidate):
            resolved = os.path.abspath(candidate)
            logger.debug(f"Resolved {name} to {resolved}")
            return resolved

    raise ValidationError(f"Cannot find executable: {name}", field_name="command", value=name)
