"""Reading and scanning the NUnit test result log."""

from pathlib import Path

from xamarin_uitest_action.errors import ResultLogError

FAILURE_MARKER = "<failure>"
MESSAGE_PREFIX = "<message>"


def read_result_log(path: Path) -> str:
    """Return the content of the result log written by the test runner.

    Raises:
        ResultLogError: If the file does not exist or cannot be read

    """
    if not path.exists():
        raise ResultLogError(f"test result not exist at: {path}")

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ResultLogError(f"Failed to read file ({path}), error: {e}") from e


def extract_failure_message(content: str) -> str:
    """Return the last failure message of a result log.

    A message only counts when its line directly follows a `<failure>` line.
    Returns an empty string when the log holds no such pair.
    """
    failure_line_found = False
    last_failure_message = ""

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if line == FAILURE_MARKER:
            failure_line_found = True
            continue

        if failure_line_found and line.startswith(MESSAGE_PREFIX):
            last_failure_message = line

        failure_line_found = False

    return last_failure_message
