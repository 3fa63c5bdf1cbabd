"""Registries of databases and models, and the bootstrap step that freezes them."""

from __future__ import annotations

import threading
from typing import Any

from kate.orm.model_info import ModelInfo
from kate.orm.models_utils import get_full_name

DEFAULT_DB = "default"


class _Registry:
    """Databases by name and model infos by full name."""

    def __init__(self):
        self.lock = threading.RLock()
        self.databases: dict[str, Any] = {}
        self.models: dict[str, ModelInfo] = {}
        self.done = False


_registry = _Registry()


def add_database(name: str, db: Any) -> None:
    """Register the connection ``db`` under ``name``; a name can be used once."""
    with _registry.lock:
        if name in _registry.databases:
            raise ValueError(f"database name `{name}` already registered, cannot reuse")
        _registry.databases[name] = db


def get_database(name: str) -> Any:
    """Return the database registered under ``name``."""
    with _registry.lock:
        try:
            return _registry.databases[name]
        except KeyError:
            raise LookupError(f"unknown database name {name}") from None


def get_model_info(full_name: str) -> ModelInfo | None:
    """Return the info of the model registered under ``full_name``, or None."""
    with _registry.lock:
        return _registry.models.get(full_name)


def _register(affix: str, db: str, model: Any, is_prefix: bool) -> None:
    full_name = get_full_name(model)
    if full_name in _registry.models:
        raise ValueError(f"register model: model `{full_name}` repeat register, must be unique")

    mi = ModelInfo(model)
    if mi.fields.pk is None:
        raise ValueError(f"register model: `{full_name}` need a primary key field")

    table = mi.table
    if affix:
        table = affix + table if is_prefix else table + affix

    mi.db = db
    mi.table = table
    mi.model = model
    _registry.models[full_name] = mi


def _register_all(func_name: str, affix: str, db: str, models: tuple, is_prefix: bool) -> None:
    with _registry.lock:
        if _registry.done:
            raise RuntimeError(f"{func_name} must be run before BootStrap")
        for model in models:
            _register(affix, db, model, is_prefix)


def register_model(db: str, *args: Any) -> None:
    """Register dataclass models (classes or instances) stored in database ``db``."""
    _register_all("RegisterModel", "", db, args, True)


def register_model_with_prefix(prefix: str, db: str, *args: Any) -> None:
    """Register models whose table names get ``prefix`` in front."""
    _register_all("RegisterModelWithPrefix", prefix, db, args, True)


def register_model_with_suffix(suffix: str, db: str, *args: Any) -> None:
    """Register models whose table names get ``suffix`` appended."""
    _register_all("RegisterModelWithSuffix", suffix, db, args, False)


def boot_strap() -> None:
    """Freeze the model registry; a database named ``default`` must exist."""
    with _registry.lock:
        if _registry.done:
            return
        if DEFAULT_DB not in _registry.databases:
            raise RuntimeError("must have one register DataBase alias named `default`")
        _registry.done = True


def reset_model_cache() -> None:
    """Forget every registered model so that models can be registered again."""
    with _registry.lock:
        _registry.models.clear()
        _registry.done = False