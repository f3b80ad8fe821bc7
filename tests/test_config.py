# SPDX-License-Identifier: Apache-2.0
"""Tests for ReconcilerConfig."""

from pathlib import Path

import pytest

from ccbatch.config import ReconcilerConfig, parse_bool
from ccbatch.exceptions import ConfigError


def test_defaults():
    config = ReconcilerConfig()
    assert config.use_ucm is False
    assert config.drain_failed_folder_renames is False
    assert config.cleartool == "cleartool"
    assert config.view_root is None
    assert config.timeout is None


def test_from_env():
    config = ReconcilerConfig.from_env({
        "CCBATCH_UCM": "yes",
        "CCBATCH_CLEARTOOL": "/opt/rational/bin/cleartool",
        "CCBATCH_VIEW_ROOT": "/view/dev",
        "CCBATCH_TIMEOUT": "30",
    })
    assert config.use_ucm is True
    assert config.cleartool == "/opt/rational/bin/cleartool"
    assert config.view_root == Path("/view/dev")
    assert config.timeout == 30.0


def test_from_empty_env():
    assert ReconcilerConfig.from_env({}) == ReconcilerConfig()


@pytest.mark.parametrize("value", ["maybe", "2"])
def test_invalid_bool(value):
    with pytest.raises(ConfigError):
        ReconcilerConfig.from_env({"CCBATCH_UCM": value})


@pytest.mark.parametrize("value", ["soon", "-1"])
def test_invalid_timeout(value):
    with pytest.raises(ConfigError):
        ReconcilerConfig.from_env({"CCBATCH_TIMEOUT": value})


def test_parse_bool():
    assert parse_bool("On") is True
    assert parse_bool("0") is False


def test_frozen():
    with pytest.raises(Exception):
        ReconcilerConfig().use_ucm = True
