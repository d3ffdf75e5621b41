"""MovieMitra discovery application package."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "app": "app.main",
    "create_app": "app.main",
    "DiscoverySession": "app.session",
    "SessionRegistry": "app.session",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> Any:
    # Resolved lazily so importing a submodule never builds the FastAPI app.
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module 'app' has no attribute {name}")
    return getattr(import_module(module_name), name)
