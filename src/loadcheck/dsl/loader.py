"""Load a ``Scenario`` out of a Python file on disk."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from loadcheck._internal.errors import ScenarioError
from loadcheck.dsl.scenario import Scenario


def _exec_file(path: Path) -> ModuleType:
    module_name = f"_loadcheck_file_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot import {path}"
        raise ScenarioError(msg)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Error while importing {path}: {exc}"
        raise ScenarioError(msg) from exc
    return module


def load_scenario(file_path: str | Path) -> Scenario:
    """Import *file_path* and return the scenario it declares.

    The file must define exactly one module-level ``@scenario``.

    Raises:
        ScenarioError: If the path is not an existing ``.py`` file, the
            import fails, or the module holds zero or several scenarios.
    """
    path = Path(file_path)
    if path.suffix != ".py":
        msg = f"{path} is not a Python file"
        raise ScenarioError(msg)
    if not path.is_file():
        msg = f"{path} does not exist"
        raise ScenarioError(msg)

    module = _exec_file(path)
    found = [value for value in vars(module).values() if isinstance(value, Scenario)]
    if len(found) != 1:
        msg = f"{path} must declare exactly one @scenario, found {len(found)}"
        raise ScenarioError(msg)
    return found[0]
