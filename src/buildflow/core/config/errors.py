# src/buildflow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Buildflow.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento, o merge e a validação estrutural da configuração de build.

As exceções aqui definidas representam **violações estruturais
explícitas** da configuração, e não falhas de resolução de plugins.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros estruturais são tratados como falhas fatais
    - Mensagens de erro são claras e direcionadas ao usuário

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção aqui representa erro de carga de plugin

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de core.pipeline
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do Buildflow.

    Todas as exceções levantadas durante carregamento, merge e validação
    estrutural da configuração devem herdar desta classe.

    Limites explícitos:
        - Não representa falha de carga de plugin
        - Não representa diretiva de mount malformada (erro de resolução)
    """


class DefaultsNotFoundError(ConfigError):
    """
    Exceção levantada quando o arquivo de configuração base (defaults)
    não é encontrado no caminho especificado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório
        - Não há tentativa de inferir ou criar defaults automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do arquivo de configuração
    não é suportado pelo loader.

    Formatos suportados:
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).

    Limites explícitos:
        - Não tenta normalizar ou encapsular estruturas inválidas
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"scripts": {"run:lint": "eslint ."}}
        - override: {"scripts": "run:lint"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class InvalidBuildConfigError(ConfigError):
    """
    Exceção levantada quando `scripts` ou `plugins` violam o formato esperado.

    Casos cobertos:
        - `scripts` não é um mapa de string para string
        - chave de diretiva sem `:` ou com tipo vazio
        - `plugins` não é uma lista
        - referência de plugin que não é string nem par `[specifier, options]`

    Decisões arquiteturais:
        - Chaves de diretiva malformadas são rejeitadas aqui, antes da
          resolução, para que o classificador opere apenas sobre entrada válida
    """


class ConfigSyntaxError(ConfigError):
    """
    Exceção levantada quando um arquivo de configuração não pode ser lido
    como YAML/JSON válido.

    A mensagem inclui o caminho do arquivo e a posição reportada pelo parser.
    """
