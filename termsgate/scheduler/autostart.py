"""
XDG autostart entry for the logon trigger.

Desktop sessions that follow the freedesktop autostart convention launch every
``*.desktop`` file in the autostart directory at logon. The entry starts the
trigger daemon, which then runs the prompt agent.
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Sequence

logger = logging.getLogger("termsgate")

DESKTOP_TEMPLATE = """[Desktop Entry]
Type=Application
Name={name}
Comment=Terms of use acceptance prompt
Exec={exec_line}
Terminal=false
NoDisplay=true
X-GNOME-Autostart-enabled=true
"""


def desktop_entry_path(autostart_dir: Path, task_name: str) -> Path:
    return Path(autostart_dir) / f"{task_name}.desktop"


# Characters that force an Exec argument into double quotes
_RESERVED = set(' \t\n"\'\\><~|&;$*?#()`')
_NEEDS_BACKSLASH = re.compile(r'(["`$\\])')


def quote_exec_arg(arg: str) -> str:
    """Quote one argument for a desktop entry Exec key.

    Only double quotes are recognized there; inside them ", `, $ and \\
    take a backslash. A literal % is written as %%.
    """
    arg = arg.replace('%', '%%')
    if arg and not any(ch in _RESERVED for ch in arg):
        return arg
    return '"' + _NEEDS_BACKSLASH.sub(r'\\\1', arg) + '"'


def render_exec_line(command: Sequence[str]) -> str:
    line = ' '.join(quote_exec_arg(str(part)) for part in command)
    # Exec is a string value; its own backslash escaping is undone before quoting
    return line.replace('\\', '\\\\')


def render_desktop_entry(task_name: str, command: Sequence[str]) -> str:
    return DESKTOP_TEMPLATE.format(name=task_name, exec_line=render_exec_line(command))


def write_desktop_entry(autostart_dir: Path, task_name: str, command: Sequence[str]) -> Path:
    """Write (or replace) the entry atomically; raises OSError."""
    target = desktop_entry_path(autostart_dir, task_name)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix='.autostart-', suffix='.tmp', dir=str(target.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(render_desktop_entry(task_name, command))
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    logger.info(f"Autostart entry written: {target}")
    return target


def remove_desktop_entry(autostart_dir: Path, task_name: str) -> bool:
    """Remove the entry; returns False if it was already absent."""
    target = desktop_entry_path(autostart_dir, task_name)
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    logger.info(f"Autostart entry removed: {target}")
    return True
