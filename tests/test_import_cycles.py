"""Import-cycle regression tests."""

from __future__ import annotations

import subprocess
import sys

import pytest


@pytest.mark.parametrize(
    "statement",
    [
        "from localstore.kernel.lancedb import open_for_testing",
        "from localstore.config import settings",
        "from localstore.domain import Status",
    ],
)
def test_module_imports_in_clean_interpreter(statement):
    """Each entry point should import without relying on earlier imports."""
    process = subprocess.run(
        [sys.executable, "-c", f"{statement}; print('ok')"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert process.returncode == 0, process.stderr
    assert "ok" in process.stdout
