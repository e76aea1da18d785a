#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Central configuration access.
#
"""
Central configuration access helpers.

The YAML file is the single source of truth; a few values can be
overridden from the environment (or a ``.env`` file).
"""

import os
from typing import Any

from dotenv import load_dotenv

from hookline.utils import load_config

load_dotenv()

DEFAULT_CONFIG_PATH = "cfg/config.yaml"


def get_config_path(config_path: str | None = None) -> str:
    return config_path or os.environ.get("HOOKLINE_CONFIG", DEFAULT_CONFIG_PATH)


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    login_attempt = os.environ.get("HOOKLINE_LOGIN_ATTEMPT")
    if login_attempt:
        config.setdefault("app", {})["login_attempt"] = int(login_attempt)
    return config


def get_config(config_path: str | None = None) -> dict[str, Any]:
    return _apply_env_overrides(load_config(config_path=get_config_path(config_path)))


def get_config_section(
    section: str | None = None,
    config_path: str | None = None,
) -> dict[str, Any]:
    if section:
        return get_config(config_path).get(section) or {}
    return get_config(config_path)
