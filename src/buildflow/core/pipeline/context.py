# src/buildflow/core/pipeline/context.py
"""
Contexto de uma passada de resolução de configuração.

Este módulo define o `ResolutionContext`, a estrutura que registra,
de forma explícita e estruturada, o que o resolvedor decidiu sobre cada
diretiva e cada plugin durante uma passada de resolução.

O ResolutionContext atua como:
    - log estruturado de eventos da resolução
    - coletor de warnings não fatais agrupados por diretiva

Princípios fundamentais:
    - Isolamento por passada (cada resolução possui seu próprio contexto)
    - Ausência de estado global compartilhado
    - Eventos são dicionários simples, serializáveis

Invariantes:
    - Todo evento inclui `run_id`, `directive`, `level`, `message` e `timestamp`
    - Warnings são agrupados pela chave da diretiva (ou specifier)

Limites explícitos:
    - Não influencia o resultado da resolução
    - Não persiste eventos automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4


@dataclass
class ResolutionContext:
    """
    Contexto de uma passada de resolução do pipeline de build.

    Campos:
        - run_id: identificador da passada
        - created_at: timestamp de criação (timezone-aware)
        - config: configuração ativa (BuildConfig ou mapa bruto)
        - meta: metadados livres fornecidos pelo chamador
        - events: log estruturado, em ordem de emissão
        - warnings: warnings não fatais por diretiva

    Limites explícitos:
        - Não executa plugins nem comandos
        - Não decide políticas de erro (o resolvedor propaga as exceções)
    """

    run_id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    config: Any = None
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list)
    warnings: Dict[str, List[str]] = field(default_factory=dict)

    def log(self, *, directive: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "directive": directive,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, directive: str, message: str) -> None:
        if directive not in self.warnings:
            self.warnings[directive] = []
        self.warnings[directive].append(message)
        self.log(directive=directive, level="warning", message=message)

    def events_for(self, directive: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["directive"] == directive]
