"""Subprocess bridge for the bash filter.

Pipes text through a shell script and captures what it prints. The script
runs in strict mode (``set -euo pipefail``) so any failing command fails the
whole filter.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import IO, Callable, Union

from qwt.exceptions import ShellError

logger = logging.getLogger(__name__)

ScriptBuilder = Union[str, Callable[[str], str]]

STRICT_MODE = "set -euo pipefail"


def build_script(script: ScriptBuilder, text: str) -> str:
    """Return the script source, calling the builder with the input if needed."""
    if callable(script):
        return str(script(text))
    return str(script)


def run_script(
    script: ScriptBuilder,
    text: str,
    *,
    shell: str = "bash",
    options: str = STRICT_MODE,
) -> str:
    """Run a shell script with ``text`` on stdin and return its stdout.

    stdin is written and stderr is drained on their own threads while this
    thread reads stdout, so neither side can block on a full pipe buffer.
    Both threads are joined before the captured stderr is looked at.

    Args:
        script: Script text, or a callable building it from ``text``.
        text: Data fed verbatim to the script's stdin.
        shell: Shell executable.
        options: Prelude run before the script.

    Returns:
        Everything the script wrote to stdout.

    Raises:
        ShellError: If the shell cannot be started, a pipe fails, or the
            script exits non-zero. The message starts with the trimmed stderr.
    """
    source = build_script(script, text)
    argv = [shell, "-c", f"{options}; {source}" if options else source]
    logger.debug("Running %s script: %s", shell, source)

    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ShellError("", f"input is not valid utf-8: {e}") from e

    try:
        process = subprocess.Popen(
            argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise ShellError("", f"failed to start {shell}: {e}") from e

    assert process.stdin is not None
    assert process.stdout is not None
    assert process.stderr is not None

    stderr_chunks: list[bytes] = []
    errors: list[OSError] = []

    writer = threading.Thread(
        target=_feed, args=(process.stdin, data, errors), daemon=True
    )
    drainer = threading.Thread(
        target=_drain, args=(process.stderr, stderr_chunks, errors), daemon=True
    )
    writer.start()
    drainer.start()

    try:
        output = process.stdout.read()
    except OSError as e:
        errors.append(e)
        output = b""
    finally:
        process.stdout.close()
        returncode = process.wait()
        writer.join()
        drainer.join()

    stderr = b"".join(stderr_chunks).decode("utf-8", errors="replace")
    logger.debug("%s exited with status %d", shell, returncode)

    if returncode != 0:
        raise ShellError(stderr, f"exit status {returncode}")
    if errors:
        raise ShellError(stderr, f"pipe error: {errors[0]}")

    try:
        return output.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ShellError(stderr, f"output is not valid utf-8: {e}") from e


def _feed(pipe: IO[bytes], data: bytes, errors: list[OSError]) -> None:
    """Write data to the process stdin and close it."""
    try:
        pipe.write(data)
    except BrokenPipeError:
        # The script exited or closed stdin without reading everything.
        logger.debug("stdin closed before all input was written")
    except OSError as e:
        errors.append(e)
    finally:
        try:
            pipe.close()
        except BrokenPipeError:
            pass


def _drain(pipe: IO[bytes], chunks: list[bytes], errors: list[OSError]) -> None:
    """Copy the process stderr into memory until EOF."""
    try:
        chunks.append(pipe.read())
    except OSError as e:
        errors.append(e)
    finally:
        pipe.close()
