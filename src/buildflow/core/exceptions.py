"""
Buildflow — Canonical Exceptions

Este módulo define as exceções tipadas da resolução de pipeline de build.

Objetivo:
- Permitir que o resolvedor levante exceções semânticas tipadas
- Facilitar o mapeamento determinístico para BuildflowErrorPayload
- Evitar ValueError/RuntimeError genéricos nas falhas de configuração

Regras:
- Toda exceção aqui é terminal: a resolução é abortada, sem resultado parcial.
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class BuildflowException(Exception):
    """Base class para exceções de resolução do Buildflow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Diretivas de scripts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MalformedMountDirective(BuildflowException):
    """Diretiva `mount:*` não segue o formato `mount dir [--to /PATH]`."""


@dataclass(frozen=True)
class BundlerLoadFailure(BuildflowException):
    """Specifier de uma diretiva `bundle:*` não pôde ser carregado como plugin."""


# ---------------------------------------------------------------------------
# Plugins explícitos
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AmbiguousPluginRegistration(BuildflowException):
    """Mesmo specifier declarado em `scripts` e em `plugins`."""


@dataclass(frozen=True)
class MissingPluginInput(BuildflowException):
    """Plugin explícito não declara `input` nem `defaultBuildScript`."""


@dataclass(frozen=True)
class PluginLoadFailure(BuildflowException):
    """Specifier não pôde ser resolvido, importado ou instanciado."""
