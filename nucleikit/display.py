"""Terminal presentation: severity colours, template log lines and the banner."""

from __future__ import annotations

import logging
import sys
from typing import Callable

from nucleikit.config import VERSION
from nucleikit.severity import Severity

logger = logging.getLogger(__name__)

_RESET = "\x1b[0m"
_BRIGHT_BLUE = "94"
_BRIGHT_YELLOW = "93"
_BOLD = "1"
_WHITE = "37"
_FG_ORANGE = "38;5;208"

_SEVERITY_CODES = {
    Severity.INFO: "34",
    Severity.LOW: "32",
    Severity.MEDIUM: "33",
    Severity.HIGH: _FG_ORANGE,
    Severity.CRITICAL: "31",
}

_BANNER_ART = r"""
                     __     _
   ____  __  _______/ /__  (_)
  / __ \/ / / / ___/ / _ \/ /
 / / / / /_/ / /__/ /  __/ /
/_/ /_/\__,_/\___/_/\___/_/   {version}
"""


def _paint(text: str, code: str, use_color: bool) -> str:
    return f"\x1b[{code}m{text}{_RESET}" if use_color else text


def get_color(template_severity: Severity, use_color: bool = True) -> str:
    """Return the severity name coloured for its level."""
    code = _SEVERITY_CODES.get(template_severity)
    if code is None:
        logger.warning("The '%s' severity does not have an color associated!", template_severity)
        code = _WHITE
    return _paint(str(template_severity), code, use_color)


def severity_colorizer(use_color: bool = True) -> Callable[[Severity], str]:
    """Return a function that colours severities."""
    return lambda template_severity: get_color(template_severity, use_color)


def append_at_sign_to_authors(author: str) -> str:
    """Prefix each comma separated author with ``@``.

    With several authors the decision is taken from the first one: if it
    already starts with ``@`` all are kept as given, otherwise all are prefixed.
    """
    authors = author.split(",")
    if len(authors) == 1:
        only = authors[0]
        return only if only.startswith("@") else f"@{only}"
    if authors[0].startswith("@"):
        return ",".join(authors)
    return ",".join(f"@{name}" for name in authors)


def template_log_msg(
    template_id: str,
    name: str,
    author: str,
    template_severity: Severity,
    use_color: bool = True,
) -> str:
    """Format the one-line summary shown when listing a template."""
    return "[{}] {} ({}) [{}]".format(
        _paint(template_id, _BRIGHT_BLUE, use_color),
        _paint(name, _BOLD, use_color),
        _paint(append_at_sign_to_authors(author), _BRIGHT_YELLOW, use_color),
        get_color(template_severity, use_color),
    )


def banner() -> str:
    """Return the start-up banner including the engine version."""
    return _BANNER_ART.replace("{version}", VERSION)


def show_banner() -> None:
    """Write the banner and the usage warnings to standard error."""
    err = sys.stderr
    print(banner(), file=err)
    print("[WRN] Use with caution. You are responsible for your actions", file=err)
    print(
        "[WRN] Developers assume no liability and are not responsible for any misuse or damage.",
        file=err,
    )