# tests/conftest.py
"""
Fixtures compartilhados para testes do Buildflow.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações de build mínimas e determinísticas
- factories de plugins em memória (via `RegistryPluginLoader`)
- contexto de resolução controlado (ResolutionContext)
- caminho dos módulos de plugin reais usados pelo `ModulePluginLoader`

Decisões arquiteturais:
    - Plugins de teste são factories simples, sem hooks reais
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture executa comandos de shell
    - Nenhuma fixture depende do diretório de trabalho do processo

Limites explícitos:
    - Não substituir testes de integração (ver tests/e2e)
    - Não validar semântica completa da resolução
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest


FIXTURE_PLUGINS_DIR = Path(__file__).parent / "fixtures" / "plugins"


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    YAML de configuração padrão (defaults) semelhante ao uso real do projeto.

    Representa o conteúdo típico de um `buildflow.defaults.yaml`, sobre o
    qual a configuração local é aplicada via deep-merge.

    Returns:
        str: Conteúdo YAML representando configuração padrão (defaults).
    """

    return """\
scripts:
  "run:lint": "eslint ."
  "build:css": "postcss"
  "mount:public": "mount public --to /"
plugins:
  - plugin-sass
"""


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """
    YAML de configuração local (override) semelhante ao uso real do projeto.

    Sobrescreve um comando existente, adiciona uma diretiva nova e
    substitui integralmente a lista de plugins.

    Returns:
        str: Conteúdo YAML representando configuração local de override.
    """

    return """\
scripts:
  "run:lint": "eslint src"
  "mount:src": "mount src --to /_dist_"
plugins:
  - [plugin-options, {mode: strict}]
"""


# =====================================================
# Plugin fixtures
# =====================================================

def _transform(contents, **_):
    return contents


@pytest.fixture
def plugin_factories() -> dict:
    """
    Factories de plugins em memória, indexadas por specifier.

    Cobrem os formatos de plugin relevantes para a resolução:
        - plugin-babel:    sem nome nem extensões (uso típico em `build:*`)
        - plugin-sass:     declara nome, `input` e `output`
        - plugin-svelte:   declara apenas `defaultBuildScript`
        - plugin-no-input: não declara `input` nem `defaultBuildScript`
        - plugin-webpack:  bundler sem nome
        - plugin-rollup:   bundler com nome
        - plugin-broken:   factory que falha ao ser invocada
        - plugin-options:  ecoa config e opções recebidas em hooks

    Returns:
        dict: Mapa `specifier -> factory`.
    """

    def babel(config):
        return {"name": "babel-from-factory", "input": [".ignored"], "build": _transform}

    def sass(config, options=None):
        return {"name": "sass", "input": ["scss", ".sass"], "output": ".css", "build": _transform}

    def svelte(config, options=None):
        return {"defaultBuildScript": "build:svelte", "build": _transform}

    def no_input(config, options=None):
        return {"name": "no-input"}

    def webpack(config):
        return {"bundle": _transform}

    def rollup(config):
        return {"name": "rollup", "bundle": _transform}

    def broken(config, options=None):
        raise RuntimeError("factory exploded")

    def with_options(config, options=None):
        return {"input": [".txt"], "received_config": config, "received_options": options}

    return {
        "plugin-babel": babel,
        "plugin-sass": sass,
        "plugin-svelte": svelte,
        "plugin-no-input": no_input,
        "plugin-webpack": webpack,
        "plugin-rollup": rollup,
        "plugin-broken": broken,
        "plugin-options": with_options,
    }


@pytest.fixture
def registry_loader(plugin_factories):
    """Loader em memória sobre `plugin_factories`."""
    from buildflow.core.pipeline.loader import RegistryPluginLoader

    return RegistryPluginLoader(plugin_factories)


@pytest.fixture
def fixture_plugins_dir() -> Path:
    """Diretório com módulos de plugin reais (tests/fixtures/plugins)."""
    return FIXTURE_PLUGINS_DIR


# =====================================================
# Resolution context fixtures
# =====================================================

@pytest.fixture
def dummy_ctx():
    """
    ResolutionContext determinístico para testes.

    `run_id` e `created_at` são fixos para garantir reprodutibilidade.
    """
    from buildflow.core.pipeline.context import ResolutionContext

    return ResolutionContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=None,
        meta={"source": "pytest"},
    )
