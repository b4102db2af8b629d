import ast
import sys
import unittest
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ROOT = _REPO_ROOT / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

_SERVICE_SETTINGS = _BACKEND_ROOT / "config" / "settings.py"
_SERVICE_DATABASE = _BACKEND_ROOT / "config" / "database.py"
_INFRA_SETTINGS = _BACKEND_ROOT / "infrastructure" / "config" / "settings.py"

_ENV_HELPERS = {"_get_env_int", "_get_env_bool", "_get_env_float"}


def _parse(py_file: Path) -> ast.AST:
    return ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))


def _backend_files() -> list[Path]:
    return sorted(p for p in _BACKEND_ROOT.rglob("*.py") if "__pycache__" not in p.parts)


def _const_str(node: ast.AST | None) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _is_os_environ(node: ast.AST) -> bool:
    return (
        isinstance(node, ast.Attribute)
        and node.attr == "environ"
        and isinstance(node.value, ast.Name)
        and node.value.id == "os"
    )


def env_keys(tree: ast.AST) -> set[str]:
    """Environment variable names read via os.getenv / os.environ / _get_env_* helpers."""
    keys: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Call) and node.args:
            func = node.func
            name = None
            if isinstance(func, ast.Attribute) and isinstance(func.value, ast.Name) and func.value.id == "os":
                name = func.attr if func.attr == "getenv" else None
            elif isinstance(func, ast.Attribute) and func.attr == "get" and _is_os_environ(func.value):
                name = "environ.get"
            elif isinstance(func, ast.Name) and func.id in _ENV_HELPERS:
                name = func.id
            key = _const_str(node.args[0])
            if name and key:
                keys.add(key)
        elif isinstance(node, ast.Subscript) and _is_os_environ(node.value):
            key = _const_str(node.slice)
            if key:
                keys.add(key)
    return keys


def expected_owner(key: str) -> Path:
    if key.startswith(("TMDB_", "POSTGRES_POOL_")):
        return _INFRA_SETTINGS
    if key.startswith("POSTGRES_"):
        return _SERVICE_DATABASE
    return _SERVICE_SETTINGS


def _imports(tree: ast.AST, module: str) -> bool:
    for node in ast.walk(tree):
        names: list[str] = []
        if isinstance(node, ast.Import):
            names = [alias.name for alias in node.names]
        elif isinstance(node, ast.ImportFrom) and node.module:
            names = [node.module]
        if any(n == module or n.startswith(module + ".") for n in names):
            return True
    return False


class TestEnvOwnership(unittest.TestCase):
    def test_only_config_modules_read_the_environment(self) -> None:
        owners = {_SERVICE_SETTINGS, _SERVICE_DATABASE, _INFRA_SETTINGS}
        offenders = [
            f"{p.relative_to(_REPO_ROOT)}: {sorted(env_keys(_parse(p)))}"
            for p in _backend_files()
            if p not in owners and env_keys(_parse(p))
        ]
        self.assertFalse(
            offenders,
            msg="Read settings from config/ or infrastructure/config/, not os.environ:\n" + "\n".join(offenders),
        )

    def test_each_variable_is_read_by_its_owner(self) -> None:
        misplaced: list[str] = []
        for owner in (_SERVICE_SETTINGS, _SERVICE_DATABASE, _INFRA_SETTINGS):
            for key in env_keys(_parse(owner)):
                if expected_owner(key) != owner:
                    misplaced.append(
                        f"{key} read in {owner.relative_to(_REPO_ROOT)}, "
                        f"belongs to {expected_owner(key).relative_to(_REPO_ROOT)}"
                    )
        self.assertFalse(misplaced, msg="\n".join(misplaced))

    def test_documented_variables_are_present(self) -> None:
        self.assertTrue(
            {"APP_TIMEZONE", "WATCHLIST_UPCOMING_LIMIT", "RECOMMENDATIONS_LIMIT", "SERVER_WORKERS"}
            <= env_keys(_parse(_SERVICE_SETTINGS))
        )
        self.assertTrue(
            {"POSTGRES_DSN", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB"} <= env_keys(_parse(_SERVICE_DATABASE))
        )
        self.assertTrue(
            {"TMDB_API_TOKEN", "TMDB_API_KEY", "TMDB_BASE_URL", "POSTGRES_POOL_MAX_SIZE"}
            <= env_keys(_parse(_INFRA_SETTINGS))
        )


class TestConfigImports(unittest.TestCase):
    def test_infrastructure_uses_its_own_settings(self) -> None:
        offenders = [
            str(p.relative_to(_REPO_ROOT))
            for p in _backend_files()
            if (_BACKEND_ROOT / "infrastructure") in p.parents and _imports(_parse(p), "config")
        ]
        self.assertFalse(offenders, msg="infrastructure must not import service-side `config.*`:\n" + "\n".join(offenders))

    def test_server_and_application_do_not_read_infra_settings(self) -> None:
        layers = (_BACKEND_ROOT / "server", _BACKEND_ROOT / "application")
        offenders = [
            str(p.relative_to(_REPO_ROOT))
            for p in _backend_files()
            if any(layer in p.parents for layer in layers) and _imports(_parse(p), "infrastructure.config")
        ]
        self.assertFalse(offenders, msg="TMDB/pool settings stay behind infrastructure factories:\n" + "\n".join(offenders))


class TestServerWorkers(unittest.TestCase):
    def test_in_memory_fallback_runs_a_single_worker(self) -> None:
        from config.settings import resolve_server_workers

        self.assertEqual(resolve_server_workers(4, dsn=None), 1)
        self.assertEqual(resolve_server_workers(4, dsn=""), 1)

    def test_postgres_allows_the_requested_workers(self) -> None:
        from config.settings import resolve_server_workers

        self.assertEqual(resolve_server_workers(4, dsn="postgresql://u:p@db:5432/cinelog"), 4)
        self.assertEqual(resolve_server_workers(0, dsn="postgresql://u:p@db:5432/cinelog"), 1)

    def test_uvicorn_config_matches_store_backend(self) -> None:
        from config.database import get_postgres_dsn
        from config.settings import REQUESTED_SERVER_WORKERS, UVICORN_CONFIG

        if get_postgres_dsn() is None:
            self.assertEqual(UVICORN_CONFIG["workers"], 1)
        else:
            self.assertEqual(UVICORN_CONFIG["workers"], max(1, REQUESTED_SERVER_WORKERS))


if __name__ == "__main__":
    unittest.main()
