"""
Deep-merge entre a configuração base e os overrides locais do Buildflow.

Este módulo implementa a política usada para compor a configuração de
build efetiva a partir de um arquivo de defaults e de um arquivo local.

Política de merge:
    - `null` no override → remove a chave do resultado
      (ex.: `scripts: {"build:css": null}` descarta a diretiva;
      `plugins:` vazio limpa a lista de plugins explícitos)
    - mapa sobre mapa (ex.: `scripts`) → merge recursivo por chave
    - lista (ex.: `plugins`) → substituição integral
    - escalar → sobrescrita direta
    - conflito de tipos → `ConfigTypeConflictError`

Invariantes:
    - Nenhum input é mutado
    - Chaves sobrescritas mantêm a posição da base; chaves novas entram ao
      final, pois diretivas são resolvidas na ordem de declaração
"""

from copy import deepcopy
from typing import Any, Dict, List

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compõe `override` sobre `base` segundo a política do módulo.

    Args:
        base (Dict[str, Any]): Configuração base (defaults).
        override (Dict[str, Any]): Overrides locais.

    Returns:
        Dict[str, Any]: Nova configuração.

    Raises:
        ConfigTypeConflictError: Se a mesma chave tiver tipos incompatíveis.
    """
    return _merge(base, override, path=[])


def _merge(base: Any, override: Any, *, path: List[str]) -> Dict[str, Any]:
    if not isinstance(base, dict) or not isinstance(override, dict):
        where = ".".join(path) or "<raiz>"
        raise ConfigTypeConflictError(
            f"Merge em '{where}' requer mapas, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, value in override.items():
        if value is None:
            result.pop(key, None)
            continue

        if key not in result:
            result[key] = deepcopy(value)
            continue

        current = result[key]
        if isinstance(current, dict) or isinstance(value, dict):
            result[key] = _merge(current, value, path=path + [str(key)])
        elif isinstance(current, list) != isinstance(value, list):
            raise ConfigTypeConflictError(
                f"Conflito de tipo em '{'.'.join(path + [str(key)])}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )
        else:
            result[key] = deepcopy(value)

    return result
