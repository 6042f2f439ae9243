"""
Loader canônico de configuração do Buildflow.

Este módulo é responsável por carregar, validar estruturalmente e resolver
a configuração de build efetiva consumida pelo resolvedor de pipeline.

A configuração é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

Responsabilidades do módulo:
    - Carregar arquivos de configuração em YAML ou JSON
    - Converter erros de sintaxe em `ConfigSyntaxError` com o caminho do arquivo
    - Resolver a configuração final via `deep_merge` (ver política em merge.py)
    - Produzir um `BuildConfig` validado

Invariantes:
    - O arquivo de defaults é obrigatório
    - Overrides nunca mutam os defaults
    - A ordem das diretivas de `scripts` é preservada

Limites explícitos:
    - Não carrega plugins
    - Não resolve diretivas
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, TextIO
import json

import yaml  # PyYAML

from .merge import deep_merge
from .model import BuildConfig
from .errors import (
    ConfigSyntaxError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)


_READERS: Dict[str, Callable[[TextIO], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def _read_document(path: Path) -> Dict[str, Any]:
    """
    Lê um documento de configuração (YAML ou JSON) como mapa.

    Documentos vazios equivalem a `{}`; para o arquivo local isso significa
    "nenhum override".

    Raises:
        UnsupportedConfigFormatError: Extensão fora de `.yaml`, `.yml`, `.json`.
        ConfigSyntaxError: Conteúdo que o parser não consegue interpretar.
        InvalidConfigRootTypeError: Raiz que não é um mapa.
    """
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedConfigFormatError(
            f"Formato não suportado: {path.suffix or '<sem extensão>'} ({path})"
        )

    try:
        with path.open("r", encoding="utf-8") as f:
            data = reader(f)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigSyntaxError(f"Configuração inválida em {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root de {path} deve ser dict, recebido: {type(data).__name__}"
        )
    return data


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> BuildConfig:
    """
    Carrega e resolve a configuração de build efetiva.

    Política de resolução:
        - O arquivo de defaults é obrigatório
        - O arquivo local é opcional; quando ausente no disco é ignorado
        - Diretivas do local sobrescrevem as da base, na mesma posição
        - `plugins` do local substitui integralmente a lista base
        - Chaves `null` no local removem a entrada da base

    Args:
        defaults_path (str): Caminho para o arquivo de configuração base.
        local_path (Optional[str]): Caminho opcional para overrides locais.

    Returns:
        BuildConfig: Configuração validada.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        ConfigSyntaxError: Se algum arquivo não puder ser interpretado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
        InvalidBuildConfigError: Se `scripts` ou `plugins` forem inválidos.
    """
    defaults_file = Path(defaults_path)
    if not defaults_file.is_file():
        raise DefaultsNotFoundError(f"Arquivo de defaults não encontrado: {defaults_file}")

    effective = _read_document(defaults_file)

    if local_path is not None and Path(local_path).is_file():
        effective = deep_merge(effective, _read_document(Path(local_path)))

    return BuildConfig.from_dict(effective)
