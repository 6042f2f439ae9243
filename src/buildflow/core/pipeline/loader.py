# src/buildflow/core/pipeline/loader.py
"""
Carga de plugins a partir de specifiers.

Este módulo define o `PluginLoader`, a capacidade abstrata de transformar
um specifier (caminho/nome de módulo) em uma instância de `Plugin`,
invocando a factory exportada com a configuração ativa e, quando houver,
as opções específicas do plugin.

Padrões de chamada:
    - Carga suave (`try_load`): usada por diretivas `build:*`;
      qualquer falha vira `None` ("nenhum plugin encontrado")
    - Carga estrita (`load`): usada por plugins explícitos e `bundle:*`; qualquer falha
      vira `PluginLoadFailure` e aborta a resolução

Implementações:
    - ModulePluginLoader   → import dinâmico relativo ao diretório de trabalho
    - RegistryPluginLoader → mapa em memória de factories conhecidas

Formato de specifier do `ModulePluginLoader`:
    - "pkg.modulo"              → factory `plugin` do módulo
    - "pkg.modulo:make_plugin"  → factory nomeada
    - "./plugins/css.py"        → arquivo relativo ao diretório de trabalho
    - "/abs/plugin.py:factory"  → arquivo absoluto com factory nomeada

Invariantes:
    - A ordem de carga é a ordem de chamada (sem paralelismo)
    - `load` nunca devolve None

Limites explícitos:
    - Não executa hooks do plugin
    - Não valida `input`/`output` (responsabilidade do resolvedor)
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.machinery
import importlib.util
import os
import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from buildflow.core.exceptions import PluginLoadFailure

from .types import Plugin


PluginFactory = Callable[..., Any]

DEFAULT_FACTORY_ATTR = "plugin"


class PluginLoader(ABC):
    """
    Capacidade abstrata de resolução e instanciação de plugins.

    Subclasses implementam apenas `resolve_factory`; a invocação da factory
    e a normalização do retorno são comuns a todas as implementações.
    """

    @abstractmethod
    def resolve_factory(self, specifier: str) -> PluginFactory:
        """Resolve o specifier para a factory; levanta exceção se não existir."""

    def load(self, specifier: str, config: Any, options: Optional[Dict[str, Any]] = None) -> Plugin:
        """
        Carga estrita: resolve, invoca a factory e normaliza o retorno.

        A factory é chamada como `factory(config)` quando não há opções e
        como `factory(config, options)` caso contrário.

        Raises:
            PluginLoadFailure: Em qualquer falha de resolução ou invocação.
        """
        try:
            factory = self.resolve_factory(specifier)
            result = factory(config) if options is None else factory(config, options)
            if result is None:
                raise TypeError("plugin factory returned None")
            return Plugin.from_factory_result(result)
        except PluginLoadFailure:
            raise
        except Exception as exc:
            raise PluginLoadFailure(
                message=f'Failed to load plugin "{specifier}": {exc}',
                details={
                    "specifier": specifier,
                    "exception_class": exc.__class__.__name__,
                    "exc_message": str(exc),
                },
                hint="Verifique se o plugin está instalado e exporta uma factory válida.",
            ) from exc

    def try_load(self, specifier: str, config: Any) -> Optional[Plugin]:
        """Carga suave: devolve None quando o specifier não é um plugin."""
        try:
            return self.load(specifier, config)
        except PluginLoadFailure:
            return None


class RegistryPluginLoader(PluginLoader):
    """Loader sobre um mapa em memória `specifier -> factory`."""

    def __init__(self, factories: Mapping[str, PluginFactory]):
        self._factories: Dict[str, PluginFactory] = dict(factories)

    def resolve_factory(self, specifier: str) -> PluginFactory:
        if specifier not in self._factories:
            raise LookupError(f"Unknown plugin: {specifier}")
        return self._factories[specifier]


def _split_specifier(specifier: str, default_attr: str) -> Tuple[str, str]:
    # "C:\\x.py" não é suportado; o separador de factory é o último ":".
    target, sep, attr = specifier.rpartition(":")
    if sep and attr and "/" not in attr and "\\" not in attr:
        return target, attr
    return specifier, default_attr


def _looks_like_path(target: str) -> bool:
    return (
        target.startswith((".", "/", "~"))
        or target.endswith(".py")
        or os.sep in target
        or "/" in target
    )


@contextmanager
def _search_path_first(directory: str) -> Iterator[None]:
    sys.path.insert(0, directory)
    try:
        yield
    finally:
        try:
            sys.path.remove(directory)
        except ValueError:
            pass


def _module_alias(label: str, path: Path) -> str:
    digest = hashlib.sha256(str(path).encode("utf-8")).hexdigest()[:12]
    return f"buildflow_plugin_{label}_{digest}"


class ModulePluginLoader(PluginLoader):
    """
    Loader que importa plugins como módulos Python.

    Specifiers são resolvidos relativamente a `cwd` (por padrão, o diretório
    de trabalho do processo no momento da carga). Módulos encontrados em
    `cwd` são registrados sob um nome derivado do caminho absoluto, de modo
    que projetos diferentes com plugins homônimos nunca compartilham o mesmo
    módulo. Somente nomes ausentes de `cwd` caem no `sys.path` corrente
    (pacotes instalados).
    """

    def __init__(self, cwd: Optional[str] = None, factory_attr: str = DEFAULT_FACTORY_ATTR):
        self._cwd = cwd
        self.factory_attr = factory_attr

    @property
    def cwd(self) -> Path:
        return Path(self._cwd) if self._cwd is not None else Path.cwd()

    def resolve_factory(self, specifier: str) -> PluginFactory:
        if not isinstance(specifier, str) or not specifier.strip():
            raise ValueError("specifier must be a non-empty string")

        target, attr = _split_specifier(specifier.strip(), self.factory_attr)
        with _search_path_first(str(self.cwd)):
            if _looks_like_path(target):
                module = self._import_file(target)
            else:
                module = self._import_module(target)

        factory = getattr(module, attr, None)
        if not callable(factory):
            raise AttributeError(f"module {module.__name__!r} has no callable {attr!r}")
        return factory

    def _import_module(self, name: str) -> ModuleType:
        top, _, rest = name.partition(".")
        importlib.invalidate_caches()
        found = importlib.machinery.PathFinder.find_spec(top, [str(self.cwd)])
        if found is None or found.origin is None:
            return importlib.import_module(name)

        package = self._exec_location(
            top,
            Path(found.origin),
            is_package=found.submodule_search_locations is not None,
        )
        if not rest:
            return package
        return importlib.import_module(f"{package.__name__}.{rest}")

    def _import_file(self, target: str) -> ModuleType:
        path = Path(target).expanduser()
        if not path.is_absolute():
            path = self.cwd / path
        is_package = path.is_dir()
        if is_package:
            path = path / "__init__.py"
        elif path.suffix != ".py" and not path.exists():
            path = path.with_suffix(".py")
        if not path.is_file():
            raise FileNotFoundError(f"plugin file not found: {path}")
        label = path.parent.name if is_package else path.stem
        return self._exec_location(label, path, is_package=is_package)

    def _exec_location(self, label: str, path: Path, *, is_package: bool) -> ModuleType:
        path = path.resolve()
        module_name = _module_alias(label, path)
        cached = sys.modules.get(module_name)
        if cached is not None:
            return cached

        spec = importlib.util.spec_from_file_location(
            module_name,
            path,
            submodule_search_locations=[str(path.parent)] if is_package else None,
        )
        if spec is None or spec.loader is None:
            raise ImportError(f"cannot load plugin from {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        return module
