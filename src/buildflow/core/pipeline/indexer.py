# src/buildflow/core/pipeline/indexer.py
"""
Indexação do pipeline de build por extensão.

Este módulo transforma a lista final de plugins no mapa
`extensão -> [plugins]` usado pelos colaboradores de build para rotear
cada arquivo para sua cadeia de transformação.

Invariantes:
    - A ordem dentro de cada sequência é a ordem da lista de plugins
    - Nenhuma reordenação, deduplicação ou detecção de ciclo é feita
    - A função é pura: a mesma lista sempre produz o mesmo mapa
"""

from __future__ import annotations

from typing import Iterable

from .types import BuildPipeline, Plugin


def create_build_pipeline(plugins: Iterable[Plugin]) -> BuildPipeline:
    pipeline: BuildPipeline = {}
    for plugin in plugins:
        # apenas `input` importa aqui; `output` é tratado durante o build
        for ext in plugin.input:
            pipeline.setdefault(ext, []).append(plugin)
    return pipeline
