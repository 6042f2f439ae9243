# src/buildflow/core/config/__init__.py

"""
Camada de configuração do Buildflow.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
mesclar e validar estruturalmente a configuração de build consumida pelo
resolvedor de pipeline.

A configuração no Buildflow é:
    - declarativa
    - determinística
    - composta por duas seções: `scripts` (diretivas) e `plugins`

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Validação estrutural de `scripts` e `plugins` (`BuildConfig`)

Invariantes:
    - Chaves de diretiva sempre possuem o formato `tipo:extensões`
    - Referências de plugin são sempre string ou par `[specifier, options]`
    - Conflitos estruturais são tratados como erro

Limites explícitos:
    - Não carrega plugins
    - Não classifica diretivas (responsabilidade de core.pipeline)
"""

from .errors import (
    ConfigError,
    ConfigSyntaxError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidBuildConfigError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .loader import load_config
from .model import (
    DEFAULT_DEPENDENCIES_DIR,
    WEB_MODULES_MOUNT_ID,
    BuildConfig,
    PluginRef,
)

__all__ = [
    "BuildConfig",
    "PluginRef",
    "DEFAULT_DEPENDENCIES_DIR",
    "WEB_MODULES_MOUNT_ID",
    "load_config",
    "ConfigError",
    "ConfigSyntaxError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidBuildConfigError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
]
