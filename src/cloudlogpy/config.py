"""Handler configuration.

Uses frozen dataclasses so a configured handler can't be changed behind its
back. Invalid settings fail at construction time, never per record.
"""

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

from cloudlogpy.core.levels import LEVEL_INFO, parse_level
from cloudlogpy.core.rewrite import ReplaceAttr

logger = logging.getLogger(__name__)

# Environment variable set by App Engine, Cloud Run and Cloud Functions.
# https://cloud.google.com/appengine/docs/standard/python3/runtime#environment_variables
PROJECT_ENV_VAR = "GOOGLE_CLOUD_PROJECT"

_INVALID_PROJECT_RE = re.compile(r"[/\s]")


@dataclass(frozen=True)
class HandlerOptions:
    """Generic options for the JSON emitter.

    Attributes:
        level: Minimum level to log, as an int or a level name.
        add_source: Whether to write the source location of log calls.
        replace_attr: Optional hook called for every non-group attribute
            after the built-in fields have been translated. Returning None
            drops the attribute.
    """

    level: int | str = LEVEL_INFO
    add_source: bool = False
    replace_attr: ReplaceAttr | None = None

    def __post_init__(self) -> None:
        """Validate and normalize the options."""
        object.__setattr__(self, "level", parse_level(self.level))
        if self.replace_attr is not None and not callable(self.replace_attr):
            raise TypeError("replace_attr must be callable")


@dataclass(frozen=True)
class Options:
    """Cloud Logging specific options.

    Attributes:
        project_id: Alphanumeric Google Cloud project ID. If empty, the
            handler tries to detect it from the environment.
    """

    project_id: str = ""

    def __post_init__(self) -> None:
        """Reject project IDs that can't appear in a trace resource name."""
        if _INVALID_PROJECT_RE.search(self.project_id):
            raise ValueError(f"invalid project ID: {self.project_id!r}")


def resolve_project_id(
    options: Options, environ: Mapping[str, str] | None = None
) -> str:
    """Return the configured project ID or the one from the environment.

    Returns:
        The project ID, or "" if none is known. Trace fields are then left
        out of log records.
    """
    if options.project_id:
        return options.project_id
    env = os.environ if environ is None else environ
    project_id = env.get(PROJECT_ENV_VAR, "").strip()
    if _INVALID_PROJECT_RE.search(project_id):
        logger.warning("Ignoring invalid %s=%r", PROJECT_ENV_VAR, project_id)
        return ""
    if project_id:
        logger.debug("Using project ID %r from %s", project_id, PROJECT_ENV_VAR)
    else:
        logger.debug("No project ID configured, trace fields will be omitted")
    return project_id
