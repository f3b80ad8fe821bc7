# SPDX-License-Identifier: Apache-2.0
"""Reconciler configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .exceptions import ConfigError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def parse_bool(value: str, name: str = "value") -> bool:
    """Parse an environment-style boolean (``1/true/yes/on`` and opposites).

    Raises:
        ConfigError: If the string is not a recognised boolean.
    """
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"invalid boolean for {name}: {value!r}")


@dataclass(frozen=True)
class ReconcilerConfig:
    """Settings shared by the reconciler and the bundled backends."""

    use_ucm: bool = False
    """Activity-based (UCM) versioning: reassign activities before checkin."""

    drain_failed_folder_renames: bool = False
    """Forget a pending folder rename even when its backend call failed.

    Off by default, so a failed folder rename is retried on the next
    commit. Turning it on reproduces the older drain-on-dispatch behaviour.
    """

    cleartool: str = "cleartool"
    """Executable used by the cleartool backend."""

    view_root: Optional[Path] = None
    """Working directory for backend commands (default: current directory)."""

    timeout: Optional[float] = None
    """Per-command timeout in seconds for subprocess backends."""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ReconcilerConfig:
        """Build a config from ``CCBATCH_*`` environment variables.

        Raises:
            ConfigError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        kwargs = {}
        if "CCBATCH_UCM" in env:
            kwargs["use_ucm"] = parse_bool(env["CCBATCH_UCM"], "CCBATCH_UCM")
        if "CCBATCH_DRAIN_FAILED_RENAMES" in env:
            kwargs["drain_failed_folder_renames"] = parse_bool(
                env["CCBATCH_DRAIN_FAILED_RENAMES"], "CCBATCH_DRAIN_FAILED_RENAMES"
            )
        if env.get("CCBATCH_CLEARTOOL"):
            kwargs["cleartool"] = env["CCBATCH_CLEARTOOL"]
        if env.get("CCBATCH_VIEW_ROOT"):
            kwargs["view_root"] = Path(env["CCBATCH_VIEW_ROOT"])
        if env.get("CCBATCH_TIMEOUT"):
            try:
                timeout = float(env["CCBATCH_TIMEOUT"])
            except ValueError:
                raise ConfigError(
                    f"invalid timeout for CCBATCH_TIMEOUT: {env['CCBATCH_TIMEOUT']!r}"
                ) from None
            if timeout <= 0:
                raise ConfigError("CCBATCH_TIMEOUT must be positive")
            kwargs["timeout"] = timeout
        return cls(**kwargs)
