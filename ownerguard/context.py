"""CI context for a coverage check.

The token and pull request number come from the CI host. They are read from
mappings handed in by the caller, never from process state, so the checker
and its tests do not depend on the environment they run in.

Example:
    >>> ctx = read_required_context(
    ...     {"GITHUB_TOKEN": "token", "GITHUB_REF": "refs/pull/23/merge"}
    ... )
    >>> ctx.pull_request
    23
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ownerguard.core.constants import EnvVar, ErrorCode
from ownerguard.core.errors import ConfigurationError

_PULL_REF = re.compile(r"^refs/pull/(\d+)/")


@dataclass(frozen=True)
class CheckContext:
    """Explicit inputs describing the change set under check.

    The token is only required to be present; the check itself makes no API
    calls with it.
    """

    token: str
    pull_request: int

    def __repr__(self) -> str:
        return f"CheckContext(token='***', pull_request={self.pull_request})"


def read_required_context(
    environ: Mapping[str, str], event: Optional[Mapping[str, Any]] = None
) -> CheckContext:
    """Build a CheckContext from CI variables.

    The pull request number is taken from the event payload's ``number``
    when present, otherwise parsed from ``GITHUB_REF``
    (``refs/pull/<number>/merge``).

    Args:
        environ: Environment-like mapping
        event: Parsed webhook event payload, if available

    Returns:
        Check context

    Raises:
        ConfigurationError: If the token or pull request number is missing
    """
    token = environ.get(EnvVar.TOKEN)
    if not token:
        raise ConfigurationError(f"Failed to read {EnvVar.TOKEN}", ErrorCode.NOT_FOUND)

    if event and event.get("number") is not None:
        try:
            return CheckContext(token=token, pull_request=int(event["number"]))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Event payload has invalid pull request number: {event['number']!r}"
            ) from e

    ref = environ.get(EnvVar.REF)
    if not ref:
        raise ConfigurationError(f"Failed to read {EnvVar.REF}", ErrorCode.NOT_FOUND)

    match = _PULL_REF.match(ref)
    if not match:
        raise ConfigurationError(f"{EnvVar.REF} is not a pull request ref: {ref}")

    return CheckContext(token=token, pull_request=int(match.group(1)))


def load_event(environ: Mapping[str, str]) -> Optional[Dict[str, Any]]:
    """Load the webhook event payload named by ``GITHUB_EVENT_PATH``.

    Returns:
        Parsed payload, or None if the variable is unset

    Raises:
        ConfigurationError: If the payload file cannot be read or parsed
    """
    event_path = environ.get(EnvVar.EVENT_PATH)
    if not event_path:
        return None

    try:
        with open(Path(event_path), "r", encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read event payload {event_path}: {e}", ErrorCode.NOT_FOUND
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid event payload {event_path}: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Event payload must be a JSON object: {event_path}")
    return payload
