from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import re

from probkit import __version__

_RELEASE = r"\d+(\.\d+)*([abc]|rc)?\d*(\.post\d+)?(\.dev\d+)?"


def test_version_pep440() -> None:
    assert re.fullmatch(rf"(\d+!)?{_RELEASE}", __version__)


def test_version_matches_project_metadata() -> None:
    assert __version__ == "0.1.0"
