# src/buildflow/core/__init__.py
"""
Core do Buildflow.

Este pacote reúne a implementação canônica da resolução de configuração
de build, independente de CLI, dev server ou executores de processos.

O core é projetado para ser:
    - determinístico
    - testável de forma isolada
    - livre de efeitos colaterais além da carga dinâmica de plugins

Componentes principais:
    - config     → carregamento, merge e validação estrutural da configuração
    - pipeline   → classificador de diretivas, parser de mount, loader de
                   plugins, resolvedor de scripts, merge de plugins e indexador
    - exceptions → exceções tipadas da resolução
    - errors     → payloads de erro serializáveis

Limites explícitos:
    - Não executa comandos nem hooks
    - Não persiste o resultado da resolução
"""
