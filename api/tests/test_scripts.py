import importlib.util
from pathlib import Path

import uvicorn

SCRIPTS_DIR = Path(__file__).resolve().parents[1] / "scripts"


def _load_script(name):
    spec = importlib.util.spec_from_file_location(f"scripts_{name}", SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_serve_runs_app_under_uvicorn(monkeypatch):
    calls = []
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    _load_script("serve").main(["--port", "9001", "--reload"])

    assert calls == [("app.main:app", {"host": "0.0.0.0", "port": 9001, "reload": True})]
