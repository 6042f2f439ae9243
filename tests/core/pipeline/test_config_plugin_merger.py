# tests/core/pipeline/test_config_plugin_merger.py
"""
Testes do merge de plugins explícitos (`merge_config_plugins`).

Os testes asseguram que:
- plugins explícitos são anexados após os plugins de scripts
- `defaultBuildScript` deriva `input`/`output` quando `input` está ausente
- `name` é preenchido com o specifier quando ausente
- specifier declarado em `scripts` e em `plugins` é rejeitado
- plugin sem `input` e sem `defaultBuildScript` é rejeitado
- falha de carga de plugin explícito é fatal
"""

import pytest

from buildflow.core.config.model import BuildConfig
from buildflow.core.exceptions import (
    AmbiguousPluginRegistration,
    MissingPluginInput,
    PluginLoadFailure,
)
from buildflow.core.pipeline.loader import RegistryPluginLoader
from buildflow.core.pipeline.resolver import merge_config_plugins, resolve_scripts
from buildflow.core.pipeline.types import Plugin


def _merge(data, loader, ctx=None):
    config = BuildConfig.from_dict(data)
    scripts = resolve_scripts(config, loader, ctx)
    return merge_config_plugins(config, scripts.script_plugins, loader, ctx)


def test_explicit_plugins_come_after_script_plugins(registry_loader):
    plugins = _merge(
        {
            "scripts": {"build:js": "plugin-babel"},
            "plugins": ["plugin-sass", ["plugin-options", {"mode": "strict"}]],
        },
        registry_loader,
    )

    assert [p.name for p in plugins] == ["plugin-babel", "sass", "plugin-options"]


def test_default_build_script_derives_extensions(registry_loader):
    (plugin,) = _merge({"plugins": ["plugin-svelte"]}, registry_loader)

    assert plugin.name == "plugin-svelte"
    assert plugin.input == (".svelte",)
    assert plugin.output == (".svelte",)


def test_declared_input_wins_over_nothing(registry_loader):
    (plugin,) = _merge({"plugins": ["plugin-sass"]}, registry_loader)

    assert plugin.name == "sass"
    assert plugin.input == (".scss", ".sass")
    assert plugin.output == (".css",)


def test_options_reach_the_factory(registry_loader):
    (plugin,) = _merge({"plugins": [["plugin-options", {"mode": "strict"}]]}, registry_loader)

    assert plugin.hooks["received_options"] == {"mode": "strict"}
    assert isinstance(plugin.hooks["received_config"], BuildConfig)


def test_same_specifier_in_scripts_and_plugins_is_ambiguous(registry_loader):
    with pytest.raises(AmbiguousPluginRegistration) as exc_info:
        _merge(
            {"scripts": {"build:scss": "plugin-sass"}, "plugins": ["plugin-sass"]},
            registry_loader,
        )

    assert exc_info.value.details == {"specifier": "plugin-sass"}


def test_shell_build_command_does_not_conflict(registry_loader):
    # "postcss" não é plugin: vira comando de shell e não entra em script_plugins
    plugins = _merge(
        {"scripts": {"build:css": "postcss"}, "plugins": ["plugin-sass"]},
        registry_loader,
    )

    assert [p.name for p in plugins] == ["sass"]


def test_missing_input_is_fatal(registry_loader):
    with pytest.raises(MissingPluginInput):
        _merge({"plugins": ["plugin-no-input"]}, registry_loader)


@pytest.mark.parametrize("default_build_script", ["build:", "build:,", "build"])
def test_default_build_script_without_extensions_is_fatal(default_build_script):
    loader = RegistryPluginLoader(
        {"plugin-empty": lambda config, options: {"defaultBuildScript": default_build_script}}
    )

    with pytest.raises(MissingPluginInput) as exc_info:
        _merge({"plugins": ["plugin-empty"]}, loader)

    assert exc_info.value.details["default_build_script"] == default_build_script


@pytest.mark.parametrize("specifier", ["plugin-broken", "not-installed"])
def test_explicit_plugin_load_failure_is_fatal(registry_loader, specifier):
    with pytest.raises(PluginLoadFailure):
        _merge({"plugins": [specifier]}, registry_loader)


def test_every_resolved_plugin_has_name_and_input(registry_loader):
    plugins = _merge(
        {
            "scripts": {"build:js,jsx": "plugin-babel"},
            "plugins": ["plugin-sass", "plugin-svelte", "plugin-options"],
        },
        registry_loader,
    )

    assert all(isinstance(p, Plugin) and p.name and p.input for p in plugins)
