"""Placeholder substitution for CNI config templates.

Network metadata carries CNI config as free-form JSON. String values in it
may reference values of the local host:

    "$HOST_IP"                     whole value replaced by the host's agent IP
    "10.0.0.1,${HOST_IP}"          every ${KEY} occurrence replaced in place
    "__host_label__:io.example/x"  whole value replaced by the host label, or ""

Keys come from Host.keywords(). Anything that is not a known keyword is
left exactly as written.
"""

from __future__ import annotations

import re
from typing import Any

from cni_driver.schemas import Host

HOST_LABEL_KEYWORD = "__host_label__"

_WHOLE_TOKEN = re.compile(r"^\$([A-Za-z_][A-Za-z0-9_]*)$")
_INLINE_TOKEN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def substitute(value: Any, host: Host) -> Any:
    """Return a copy of value with every recognised placeholder replaced.

    Dicts and lists are walked recursively, strings are substituted, every
    other scalar is returned unchanged. The input is never modified.

    Args:
        value: Any JSON-like value
        host: Host whose values fill the placeholders

    Returns:
        A structure of the same shape as value
    """
    return _substitute(value, host, host.keywords())


def _substitute(value: Any, host: Host, keywords: dict[str, str]) -> Any:
    if isinstance(value, dict):
        return {key: _substitute(item, host, keywords) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute(item, host, keywords) for item in value]
    if isinstance(value, str):
        return _substitute_string(value, host, keywords)
    return value


def _substitute_string(value: str, host: Host, keywords: dict[str, str]) -> str:
    if value.startswith(HOST_LABEL_KEYWORD):
        _, _, label = value.partition(":")
        return host.labels.get(label.strip(), "") if label.strip() else ""

    match = _WHOLE_TOKEN.match(value)
    if match:
        return keywords.get(match.group(1), value)

    def _inline(m: re.Match) -> str:
        return keywords.get(m.group(1), m.group(0))

    return _INLINE_TOKEN.sub(_inline, value)
