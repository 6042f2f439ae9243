"""
Buildflow — Canonical Error Structures

Este módulo define o formato serializável dos erros de resolução do
Buildflow. Um erro de configuração é sempre terminal, mas precisa ser
reportado ao processo chamador de forma:

- explícita
- serializável
- acionável (com indicação de onde corrigir)

Nenhum fallback silencioso é aplicado aqui.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from buildflow.core.config.errors import ConfigError
from buildflow.core.exceptions import (
    AmbiguousPluginRegistration,
    BuildflowException,
    BundlerLoadFailure,
    MalformedMountDirective,
    MissingPluginInput,
    PluginLoadFailure,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildflowErrorPayload:
    """
    Payload canônico de erro do Buildflow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao usuário (onde corrigir a configuração)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro
# ---------------------------------------------------------------------------

MALFORMED_MOUNT_DIRECTIVE = "MALFORMED_MOUNT_DIRECTIVE"
AMBIGUOUS_PLUGIN_REGISTRATION = "AMBIGUOUS_PLUGIN_REGISTRATION"
MISSING_PLUGIN_INPUT = "MISSING_PLUGIN_INPUT"
BUNDLER_LOAD_FAILURE = "BUNDLER_LOAD_FAILURE"
PLUGIN_LOAD_FAILURE = "PLUGIN_LOAD_FAILURE"

CONFIG_INVALID = "CONFIG_INVALID"
RESOLUTION_UNEXPECTED_ERROR = "RESOLUTION_UNEXPECTED_ERROR"


_EXCEPTION_CODES = (
    (MalformedMountDirective, MALFORMED_MOUNT_DIRECTIVE),
    (AmbiguousPluginRegistration, AMBIGUOUS_PLUGIN_REGISTRATION),
    (MissingPluginInput, MISSING_PLUGIN_INPUT),
    (BundlerLoadFailure, BUNDLER_LOAD_FAILURE),
    (PluginLoadFailure, PLUGIN_LOAD_FAILURE),
)


def exception_to_error(exc: Exception) -> BuildflowErrorPayload:
    """Converte exceções em BuildflowErrorPayload (serializável, acionável).

    Regras:
    - BuildflowException: já vem com message/details/hint.
    - ConfigError: erro estrutural da configuração.
    - Demais exceções: encapsuladas como erro inesperado, sem stack trace.
    """
    if isinstance(exc, BuildflowException):
        code = next(
            (c for cls, c in _EXCEPTION_CODES if isinstance(exc, cls)),
            RESOLUTION_UNEXPECTED_ERROR,
        )
        return BuildflowErrorPayload(
            type=code,
            message=exc.message,
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    if isinstance(exc, ConfigError):
        return BuildflowErrorPayload(
            type=CONFIG_INVALID,
            message=str(exc),
            details={"exception_class": exc.__class__.__name__},
            hint="Revise as seções `scripts` e `plugins` do arquivo de configuração.",
        )

    return BuildflowErrorPayload(
        type=RESOLUTION_UNEXPECTED_ERROR,
        message="Falha inesperada durante a resolução do pipeline",
        details={
            "exception_class": exc.__class__.__name__,
            "exc_message": str(exc),
        },
        hint="Verifique o stacktrace para diagnosticar a falha. Nenhum fallback é aplicado automaticamente.",
    )
