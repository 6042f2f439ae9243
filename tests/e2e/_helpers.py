"""Common helpers for Buildflow end-to-end tests.

Centraliza boilerplate para cenários E2E:
- materialização de um projeto em tmp_path (config YAML + módulos de plugin)
- troca temporária do diretório de trabalho

Princípios:
- usar APENAS APIs públicas do core
- plugins são módulos Python reais, carregados pelo `ModulePluginLoader`
"""

from __future__ import annotations

import os
import textwrap
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@contextmanager
def _pushd(path: Path):
    """Temporarily chdir to `path`.

    Specifiers de plugin são resolvidos relativamente ao diretório de
    trabalho do processo; nos testes, ele é o diretório do projeto.
    """
    prev = Path.cwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(prev)


def write_plugin(project_dir: Path, relpath: str, body: str) -> Path:
    path = project_dir / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def write_config(project_dir: Path, config: Dict[str, Any], *, name: str = "buildflow.yaml") -> Path:
    path = project_dir / name
    path.write_text(yaml.safe_dump(config, sort_keys=False), encoding="utf-8")
    return path


def materialize_project(
    project_dir: Path,
    *,
    scripts: Dict[str, str],
    plugins: Optional[list] = None,
    plugin_files: Optional[Dict[str, str]] = None,
) -> Path:
    for relpath, body in (plugin_files or {}).items():
        write_plugin(project_dir, relpath, body)
    return write_config(project_dir, {"scripts": scripts, "plugins": plugins or []})
