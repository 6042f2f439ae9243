"""
# Pipeline Core — Buildflow

Este pacote implementa a resolução da configuração de build em um
pipeline normalizado, indexado por extensão de arquivo.

## Componentes

- **directives**
  - `parse_script`: classificador de chaves `tipo:ext1,ext2`
  - `parse_mount`: parser de comandos `mount dir [--to /PATH]`

- **loader**
  - `PluginLoader`: capacidade abstrata de carga (suave/estrita)
  - `ModulePluginLoader`, `RegistryPluginLoader`

- **resolver**
  - `resolve_scripts`: fold sobre as diretivas de `scripts`
  - `merge_config_plugins`: plugins explícitos após os de scripts
  - `load_plugins`, `resolve_build_pipeline`: fachadas

- **indexer**
  - `create_build_pipeline`: mapa extensão → plugins em ordem

- **context**
  - `ResolutionContext`: eventos estruturados e warnings da passada

## Limites Explícitos

- Não executa hooks de plugins nem comandos de shell
- Não observa o filesystem nem implementa dev server
"""
