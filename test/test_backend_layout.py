import unittest
from pathlib import Path


class TestBackendLayout(unittest.TestCase):
    def test_backend_code_is_scoped_under_backend_dir(self) -> None:
        repo_root = Path(__file__).resolve().parents[1]

        # Guard-rail: backend code should not drift back to repo root.
        banned_root_dirs = [
            "server",
            "application",
            "config",
            "domain",
            "infrastructure",
        ]
        found = [name for name in banned_root_dirs if (repo_root / name).exists()]
        self.assertFalse(
            found,
            msg=(
                "Backend packages must live under `backend/`. "
                f"Found unexpected root-level directories: {found}"
            ),
        )

    def test_each_layer_exists(self) -> None:
        backend_root = Path(__file__).resolve().parents[1] / "backend"
        missing = [
            name
            for name in ("application", "config", "domain", "infrastructure", "server")
            if not (backend_root / name).is_dir()
        ]
        self.assertFalse(missing, msg=f"Missing backend layers: {missing}")
