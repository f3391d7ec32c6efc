"""Multi-line text editing through an external process.

The editor process speaks a line protocol: it receives the seed text on
stdin as one line with newlines escaped as a backslash followed by `n`,
and on success prints the edited text in the same form and exits 0. Any
other exit status means the user cancelled or the editor failed.
"""
import logging
import os
import shlex
import subprocess
import sys

from typing import List, Sequence

from contactvault.utils.errors import EditorError

logger = logging.getLogger(__name__)

EDITOR_ENV = "CVAULT_EDITOR"
NEWLINE_ESCAPE = "\\n"


def escape_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\n", NEWLINE_ESCAPE)


def unescape_newlines(text: str) -> str:
    return text.replace(NEWLINE_ESCAPE, "\n")


def default_editor_command() -> List[str]:
    return [sys.executable, "-m", "contactvault.ui.notes_editor", "--title", "{title}"]


def resolve_editor_command(configured: str | None = None) -> List[str]:
    """Pick the editor command: explicit value, then $CVAULT_EDITOR, then the bundled notes form."""
    raw = configured or os.environ.get(EDITOR_ENV)
    if not raw:
        return default_editor_command()
    argv = shlex.split(raw)
    if not argv:
        return default_editor_command()
    return argv


class EditorBridge:
    def __init__(self, command: Sequence[str] | None = None):
        self.command = list(command) if command else default_editor_command()

    def _argv(self, title: str) -> List[str]:
        return [part.replace("{title}", title) for part in self.command]

    def edit_text(self, title: str, initial_text: str) -> str:
        argv = self._argv(title)
        logger.debug("spawning editor %s", argv[0])
        try:
            proc = subprocess.run(
                argv,
                input=escape_newlines(initial_text) + "\n",
                capture_output=True,
                text=True,
                encoding="utf-8",
            )
        except OSError as e:
            raise EditorError(f"Could not start editor {argv[0]!r}: {e}") from e
        except UnicodeDecodeError as e:
            raise EditorError(f"Editor {argv[0]!r} wrote output that is not UTF-8") from e

        logger.debug("editor exited with status %d", proc.returncode)
        if proc.returncode != 0:
            diagnostic = proc.stderr.strip() or f"editor exited with status {proc.returncode}"
            raise EditorError(diagnostic)
        return unescape_newlines(proc.stdout).rstrip()
