"""Every module imports on its own, in a fresh interpreter."""

from __future__ import annotations

import pkgutil
import subprocess
import sys

import pytest

import findr

MODULES = sorted(
    ["findr", *(m.name for m in pkgutil.walk_packages(findr.__path__, prefix="findr."))]
)


@pytest.mark.parametrize("module", MODULES)
def test_module_imports_standalone(module: str) -> None:
    result = subprocess.run([sys.executable, "-c", f"import {module}"], capture_output=True, text=True)
    assert result.returncode == 0, result.stderr


def test_public_api() -> None:
    assert findr.Findr is not None
    assert set(findr.__all__) <= set(dir(findr))
