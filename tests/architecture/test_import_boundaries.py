"""
Import-boundary enforcement.

1. Domain purity      -- lifecycle_kernel/domain/** may not import SQLAlchemy,
                         YAML, the db layer, services, or outer packages.
2. Kernel direction   -- lifecycle_kernel/** may not import lifecycle_config
                         or lifecycle_modules.
3. Config direction   -- lifecycle_config/** may not import lifecycle_modules.
4. SQLAlchemy confined -- only lifecycle_kernel/db/** (and tests) import it.

All scanning is done via AST -- these tests are read-only.
"""

import ast
import glob
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _python_files(root: str) -> list[str]:
    """Return all .py files under *root*, sorted for deterministic order."""
    return sorted(glob.glob(f"{ROOT / root}/**/*.py", recursive=True))


def _extract_imports(filepath: str) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    tree = ast.parse(Path(filepath).read_text(), filename=filepath)
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    """True if *module* equals or is a child of any prefix."""
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _violations(root: str, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for path in _python_files(root):
        for lineno, module in _extract_imports(path):
            if _matches_any(module, forbidden):
                found.append(f"{Path(path).relative_to(ROOT)}:{lineno} imports {module}")
    return found


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestDomainPurity:

    def test_domain_files_found(self):
        assert _python_files("lifecycle_kernel/domain")

    def test_domain_has_no_infrastructure_imports(self):
        forbidden = (
            "sqlalchemy",
            "yaml",
            "lifecycle_kernel.db",
            "lifecycle_kernel.services",
            "lifecycle_config",
            "lifecycle_modules",
        )
        # entity.py references the engine for typing only
        violations = [
            v
            for v in _violations("lifecycle_kernel/domain", forbidden)
            if not v.startswith("lifecycle_kernel/domain/entity.py")
            or "lifecycle_kernel.services.lifecycle_engine" not in v
        ]
        assert violations == []


class TestDependencyDirection:

    def test_kernel_does_not_import_outer_layers(self):
        assert _violations("lifecycle_kernel", ("lifecycle_config", "lifecycle_modules")) == []

    def test_config_does_not_import_modules(self):
        assert _violations("lifecycle_config", ("lifecycle_modules",)) == []

    def test_sqlalchemy_confined_to_db_layer(self):
        offenders = [
            v
            for root in ("lifecycle_kernel", "lifecycle_config", "lifecycle_modules")
            for v in _violations(root, ("sqlalchemy",))
            if not v.startswith("lifecycle_kernel/db/")
        ]
        assert offenders == []

    def test_yaml_confined_to_loader(self):
        offenders = [
            v
            for root in ("lifecycle_kernel", "lifecycle_config", "lifecycle_modules")
            for v in _violations(root, ("yaml",))
            if not v.startswith("lifecycle_config/loader.py")
        ]
        assert offenders == []
