# src/buildflow/core/pipeline/types.py
"""
Tipos canônicos do pipeline de build do Buildflow.

Este módulo define as estruturas fundamentais produzidas pela resolução
de configuração e consumidas por colaboradores externos (build, dev server,
bundler, runner de comandos).

Componentes principais:
    - ScriptType      → enum dos tipos de diretiva conhecidos
    - ScriptDirective → diretiva classificada (tipo + extensões)
    - Plugin          → capacidade de transformação, imutável
    - RunCmd          → comando literal identificado por diretiva
    - MountedDir      → mapeamento diretório em disco → caminho de URL
    - ResolvedPlugins → resultado imutável de uma passada de resolução

Princípios fundamentais:
    - Tipos são imutáveis após a resolução
    - Extensões são sempre prefixadas por um único ponto
    - Hooks de plugins são opacos para o core

Limites explícitos:
    - Não executa hooks nem comandos
    - Não contém lógica de resolução
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union


class ScriptType(str, Enum):
    """
    Tipos de diretiva reconhecidos pelo resolvedor de scripts.

    Tipos definidos:
        - RUN: comando literal executado por colaboradores externos
        - BUILD: plugin de build ou comando de shell por extensão
        - MOUNT: mapeamento de diretório para caminho de URL
        - BUNDLE: plugin de bundling final (slot único)

    Diretivas com outros tipos são ignoradas pelo resolvedor, com warning.
    """
    RUN = "run"
    BUILD = "build"
    MOUNT = "mount"
    BUNDLE = "bundle"


def normalize_extension(ext: str) -> str:
    """Garante exatamente um ponto à esquerda (`js`, `.js`, `..js` → `.js`)."""
    return "." + ext.strip().lstrip(".")


def unique_extensions(exts: Iterable[str]) -> Tuple[str, ...]:
    """Normaliza e remove duplicatas preservando a primeira ocorrência."""
    seen: Dict[str, None] = {}
    for ext in exts:
        if not isinstance(ext, str) or not ext.strip().lstrip("."):
            continue
        seen.setdefault(normalize_extension(ext), None)
    return tuple(seen)


@dataclass(frozen=True)
class ScriptDirective:
    """
    Diretiva `tipo:ext1,ext2` já classificada.

    Campos:
        - script_type: tipo em minúsculas (ex.: "build")
        - extensions: extensões normalizadas, únicas, em ordem de declaração
    """
    script_type: str
    extensions: Tuple[str, ...]


@dataclass(frozen=True)
class RunCmd:
    id: str
    cmd: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "cmd": self.cmd}


@dataclass(frozen=True)
class MountedDir:
    """
    Mapeamento de um diretório em disco para um caminho de URL.

    Invariantes:
        - `from_disk` e `to_url` terminam com `/`
        - `to_url` começa com `/`
    """
    id: str
    from_disk: str
    to_url: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "fromDisk": self.from_disk, "toUrl": self.to_url}


_PLUGIN_FIELDS = {
    "name": "name",
    "input": "input",
    "output": "output",
    "defaultBuildScript": "default_build_script",
    "default_build_script": "default_build_script",
}


@dataclass(frozen=True)
class Plugin:
    """
    Plugin de build imutável.

    Um plugin é um pacote polimórfico de capacidades: o core interpreta
    apenas sua identidade (`name`) e suas extensões (`input`/`output`);
    qualquer outro atributo devolvido pela factory é preservado em `hooks`
    sem interpretação.

    Campos:
        - name: identificador do plugin
        - input: extensões aceitas (prefixadas por ponto, únicas)
        - output: extensões produzidas
        - default_build_script: diretiva usada para derivar `input`/`output`
          quando o plugin não declara `input`
        - hooks: hooks de transformação/ciclo de vida, opacos para o core

    Invariantes:
        - Após a resolução, `name` e `input` nunca são vazios
    """
    name: Optional[str] = None
    input: Tuple[str, ...] = ()
    output: Tuple[str, ...] = ()
    default_build_script: Optional[str] = None
    hooks: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_factory_result(cls, result: Any) -> "Plugin":
        """
        Constrói um `Plugin` a partir do retorno de uma factory.

        Aceita uma instância de `Plugin` ou um mapa. Em mapas, as chaves
        `name`, `input`, `output` e `defaultBuildScript`
        (ou `default_build_script`) são interpretadas; as demais viram hooks.
        Um `input`/`output` string é tratado como conjunto de um elemento.
        Instâncias de `Plugin` também têm as extensões normalizadas.

        Raises:
            TypeError: Se o retorno não for `Plugin` nem mapa.
        """
        if isinstance(result, Plugin):
            return result.with_extensions(
                input=_as_extensions(result.input),
                output=_as_extensions(result.output),
            )
        if not isinstance(result, Mapping):
            raise TypeError(
                f"plugin factory must return a mapping or Plugin, got {type(result).__name__}"
            )

        known: Dict[str, Any] = {}
        hooks: Dict[str, Any] = {}
        for key, value in result.items():
            if key in _PLUGIN_FIELDS:
                known[_PLUGIN_FIELDS[key]] = value
            else:
                hooks[key] = value

        return cls(
            name=known.get("name") or None,
            input=_as_extensions(known.get("input")),
            output=_as_extensions(known.get("output")),
            default_build_script=known.get("default_build_script") or None,
            hooks=hooks,
        )

    def with_extensions(self, *, input: Iterable[str], output: Iterable[str]) -> "Plugin":
        return replace(self, input=unique_extensions(input), output=unique_extensions(output))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "input": list(self.input),
            "output": list(self.output),
            "defaultBuildScript": self.default_build_script,
            "hooks": sorted(self.hooks),
        }


def _as_extensions(value: Union[None, str, Iterable[str]]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return unique_extensions([value])
    return unique_extensions(value)


@dataclass(frozen=True)
class ResolvedPlugins:
    """
    Resultado imutável de uma passada de resolução de configuração.

    Campos:
        - plugins: plugins derivados de scripts seguidos dos plugins explícitos
        - bundler: plugin do slot de bundling (ou None)
        - run_commands: comandos `run:*` na ordem de declaração
        - build_commands: extensão → comando de shell de fallback `build:*`
        - mounted_dirs: mounts declarados + mount sintético de dependências

    Invariantes:
        - Nenhum campo é alterado após a criação
        - `build_commands` é exposto como mapa somente leitura
    """
    plugins: Tuple[Plugin, ...]
    bundler: Optional[Plugin]
    run_commands: Tuple[RunCmd, ...]
    build_commands: Mapping[str, RunCmd]
    mounted_dirs: Tuple[MountedDir, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "build_commands", MappingProxyType(dict(self.build_commands)))

    def to_dict(self) -> Dict[str, Any]:
        """Resumo serializável do resultado (hooks listados apenas por nome)."""
        return {
            "plugins": [p.to_dict() for p in self.plugins],
            "bundler": self.bundler.to_dict() if self.bundler is not None else None,
            "runCommands": [r.to_dict() for r in self.run_commands],
            "buildCommands": {ext: r.to_dict() for ext, r in self.build_commands.items()},
            "mountedDirs": [m.to_dict() for m in self.mounted_dirs],
        }


BuildPipeline = Dict[str, List[Plugin]]
