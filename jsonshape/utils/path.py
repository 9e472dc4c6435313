from __future__ import annotations

import importlib
import pkgutil
from types import ModuleType
from typing import TypeVar

from .. import logs

log = logs.get(__name__)

T = TypeVar('T')


def import_package(pkgname: str) -> dict[str, Exception]:
    """Import all modules in *pkgname* and return any exceptions that occur."""
    exceptions: dict[str, Exception] = {}
    pkg = importlib.import_module(pkgname)
    for _, modname, ispkg in pkgutil.iter_modules(getattr(pkg, '__path__', [])):
        if ispkg:
            continue
        try:
            import_module(modname, pkgname)
        except Exception as exc:
            exceptions[modname] = exc
    return exceptions


def import_module(modname: str, pkgname: str | None = None) -> ModuleType:
    """Import a module, optionally relative to *pkgname*."""
    name = '.'.join(filter(None, [pkgname, modname]))
    log.debug('loading: %s', name)
    if pkgname:
        return importlib.import_module(f'.{modname}', pkgname)
    return importlib.import_module(modname)


def import_class(base_type: type[T], name: str) -> type[T]:
    """Import a class from `module.Class` notation and check it is a `base_type`."""
    try:
        mod_name, cls_name = name.rsplit('.', 1)
    except ValueError:
        raise KeyError(name) from None

    try:
        mod = import_module(mod_name)
        cls = getattr(mod, cls_name)
    except (ImportError, AttributeError) as exc:
        raise KeyError(name) from exc

    if not (isinstance(cls, type) and issubclass(cls, base_type)):
        raise KeyError(name)
    return cls
