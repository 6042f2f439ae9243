# src/buildflow/core/config/model.py
"""
Modelo estrutural da configuração de build.

Este módulo define `BuildConfig` e `PluginRef`, a representação validada
da configuração ativa consumida pelo resolvedor de pipeline.

Uma configuração de build possui duas seções relevantes para a resolução:
    - scripts: mapa ordenado `"tipo:ext1,ext2" -> comando`
    - plugins: lista de referências (`"specifier"` ou `["specifier", {opções}]`)

Decisões arquiteturais:
    - A validação estrutural acontece uma única vez, em `BuildConfig.from_dict`
    - O mapa `raw` preserva a configuração completa, que é repassada às
      factories de plugins como "configuração ativa"
    - A ordem de declaração das diretivas é preservada

Invariantes:
    - Toda chave de `scripts` contém `:` e um tipo não vazio
    - Todo comando de `scripts` é string
    - Todo `PluginRef` possui specifier não vazio

Limites explícitos:
    - Não classifica diretivas
    - Não carrega plugins
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import InvalidBuildConfigError


# Diretiva reservada para o diretório interno de dependências.
WEB_MODULES_MOUNT_ID = "mount:web_modules"

DEFAULT_DEPENDENCIES_DIR = ".buildflow/web_modules"


@dataclass(frozen=True)
class PluginRef:
    """
    Referência explícita a um plugin declarada na seção `plugins`.

    Campos:
        - specifier: caminho/nome do módulo do plugin
        - options: opções específicas do plugin (dict, vazio quando a
          referência é uma string simples)
    """

    specifier: str
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def parse(cls, ref: Any, *, index: int) -> "PluginRef":
        if isinstance(ref, str):
            specifier, options = ref, {}
        elif isinstance(ref, (list, tuple)) and len(ref) == 2:
            specifier, options = ref[0], ref[1]
        else:
            raise InvalidBuildConfigError(
                f"plugins[{index}] deve ser string ou par [specifier, options], "
                f"recebido: {ref!r}"
            )

        if not isinstance(specifier, str) or not specifier.strip():
            raise InvalidBuildConfigError(
                f"plugins[{index}]: specifier deve ser string não vazia"
            )
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise InvalidBuildConfigError(
                f"plugins[{index}]: options deve ser dict, "
                f"recebido: {type(options).__name__}"
            )
        return cls(specifier=specifier, options=dict(options))


@dataclass(frozen=True)
class BuildConfig:
    """
    Configuração de build validada e pronta para resolução.

    Campos:
        - scripts: diretivas na ordem de declaração
        - plugins: referências explícitas de plugins na ordem de declaração
        - dependencies_dir: diretório interno de dependências (em disco)
          usado pelo mount sintético `mount:web_modules`
        - raw: configuração completa validada, repassada às factories

    Invariantes:
        - Instâncias nunca são alteradas após criadas
        - `scripts` e `plugins` refletem exatamente a ordem do input
    """

    scripts: Dict[str, str] = field(default_factory=dict)
    plugins: Tuple[PluginRef, ...] = ()
    dependencies_dir: str = DEFAULT_DEPENDENCIES_DIR
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildConfig":
        """
        Valida a estrutura de uma configuração e produz um `BuildConfig`.

        Chaves ausentes assumem valores vazios (`scripts: {}`, `plugins: []`).
        Chaves desconhecidas são preservadas apenas em `raw`.

        Raises:
            InvalidBuildConfigError: Se `scripts`, `plugins` ou
                `dependencies_dir` violarem o formato esperado.
        """
        if not isinstance(data, Mapping):
            raise InvalidBuildConfigError(
                f"Config deve ser um mapa, recebido: {type(data).__name__}"
            )

        scripts = _validate_scripts(data.get("scripts") or {})

        raw_plugins = data.get("plugins") or []
        if not isinstance(raw_plugins, (list, tuple)):
            raise InvalidBuildConfigError(
                f"plugins deve ser lista, recebido: {type(raw_plugins).__name__}"
            )
        plugins = tuple(PluginRef.parse(ref, index=i) for i, ref in enumerate(raw_plugins))

        dependencies_dir = data.get("dependencies_dir", DEFAULT_DEPENDENCIES_DIR)
        if not isinstance(dependencies_dir, str) or not dependencies_dir.strip():
            raise InvalidBuildConfigError("dependencies_dir deve ser string não vazia")

        return cls(
            scripts=scripts,
            plugins=plugins,
            dependencies_dir=dependencies_dir,
            raw=dict(data),
        )

    def has_script(self, key: str) -> bool:
        return key in self.scripts


def _validate_scripts(scripts: Any) -> Dict[str, str]:
    if not isinstance(scripts, Mapping):
        raise InvalidBuildConfigError(
            f"scripts deve ser um mapa, recebido: {type(scripts).__name__}"
        )

    validated: Dict[str, str] = {}
    for key, cmd in scripts.items():
        if not isinstance(key, str) or ":" not in key:
            raise InvalidBuildConfigError(
                f"scripts[{key!r}]: chave deve ter o formato \"tipo:ext1,ext2\""
            )
        script_type, _, _ = key.partition(":")
        if not script_type.strip():
            raise InvalidBuildConfigError(f"scripts[{key!r}]: tipo de diretiva vazio")
        if not isinstance(cmd, str):
            raise InvalidBuildConfigError(
                f"scripts[{key!r}]: comando deve ser string, recebido: {type(cmd).__name__}"
            )
        validated[key] = cmd
    return validated


def coerce_config(config: Optional[Any]) -> BuildConfig:
    """Aceita `BuildConfig`, mapa bruto ou None e devolve um `BuildConfig`."""
    if config is None:
        return BuildConfig()
    if isinstance(config, BuildConfig):
        return config
    return BuildConfig.from_dict(config)
