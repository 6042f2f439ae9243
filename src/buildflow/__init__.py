# src/buildflow/__init__.py
"""
Buildflow — resolvedor declarativo de pipelines de build.

Este pacote raiz define o namespace público do Buildflow, cuja
responsabilidade é transformar uma configuração declarativa de build
(diretivas `scripts` + lista explícita de `plugins`) em um pipeline
normalizado, indexado por extensão de arquivo.

Princípios centrais:
    - A resolução é uma passada única, síncrona e determinística
    - Configuração, classificação de diretivas e indexação são responsabilidades separadas
    - Erros de configuração são fatais e tipados

Arquitetura em alto nível:
    - core.config   → carregamento, merge e validação estrutural da configuração
    - core.pipeline → classificação de diretivas, carga de plugins e indexação

Limites explícitos:
    - Não executa hooks de plugins
    - Não executa comandos de shell
    - Não observa o filesystem nem implementa dev server
"""
# src/buildflow/__init__.py
from .core.pipeline.resolver import load_plugins, resolve_build_pipeline
from .core.pipeline.indexer import create_build_pipeline

__all__ = ["load_plugins", "resolve_build_pipeline", "create_build_pipeline"]
