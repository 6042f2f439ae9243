# src/buildflow/core/pipeline/directives.py
"""
Mini-gramáticas das diretivas de `scripts`.

Este módulo implementa os dois parsers textuais usados pelo resolvedor:

    - Classificador de diretiva: chave `"tipo:ext1,ext2"` → `ScriptDirective`
    - Parser de mount: comando `"mount dir [--to /PATH]"` → `MountedDir`

Cada gramática é tratada como tokenizer + validador explícitos, e nunca
como fatiamento de string espalhado pelo resolvedor.

Decisões arquiteturais:
    - A chave inteira é convertida para minúsculas antes da classificação,
      portanto extensões também são comparadas em minúsculas
    - O comando de mount é tokenizado com regras de aspas de shell e as
      opções são interpretadas com `argparse`
    - `mount:web_modules` tem o diretório em disco forçado para o
      diretório interno de dependências; o argumento do usuário só define
      a rota de URL nesse caso

Invariantes:
    - Extensões produzidas possuem exatamente um ponto à esquerda
    - Mounts produzidos terminam com `/` e `to_url` começa com `/`

Limites explícitos:
    - Não valida o formato da chave (responsabilidade de core.config)
    - Não carrega plugins
"""

from __future__ import annotations

import argparse
import posixpath
import shlex
from typing import List, Optional, Tuple

from buildflow.core.config.model import WEB_MODULES_MOUNT_ID
from buildflow.core.exceptions import MalformedMountDirective

from .types import MountedDir, ScriptDirective, unique_extensions


_MOUNT_FORMAT_HINT = 'Use o formato: "mount dir [--to /PATH]"'


def parse_script(script: str) -> ScriptDirective:
    """
    Classifica uma chave de diretiva `tipo:ext1,ext2`.

    Exemplos:
        - "build:js,jsx"  → ("build", (".js", ".jsx"))
        - "BUILD:js,JS"   → ("build", (".js",))
        - "mount:public"  → ("mount", (".public",))

    Args:
        script (str): Chave da diretiva, já validada pela camada de config.

    Returns:
        ScriptDirective: Tipo em minúsculas e extensões únicas normalizadas.
    """
    script_type, _, ext_match = script.lower().partition(":")
    return ScriptDirective(
        script_type=script_type.strip(),
        extensions=unique_extensions(ext_match.split(",")),
    )


def normalize_dir(path: str) -> str:
    """Normaliza um caminho estilo POSIX garantindo `/` ao final."""
    normalized = posixpath.normpath(path)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if not normalized.endswith("/"):
        normalized += "/"
    return normalized


def _tokenize_mount(directive_id: str, cmd: str) -> List[str]:
    try:
        return shlex.split(cmd)
    except ValueError as exc:
        raise MalformedMountDirective(
            message=f"scripts[{directive_id}] could not be parsed: {exc}",
            details={"directive": directive_id, "cmd": cmd},
            hint=_MOUNT_FORMAT_HINT,
        ) from exc


def _mount_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mount", add_help=False, allow_abbrev=False, exit_on_error=False)
    parser.add_argument("dir", nargs="*")
    parser.add_argument("--to")
    return parser


def _parse_mount_args(directive_id: str, cmd: str, args: List[str]) -> Tuple[List[str], Optional[str]]:
    """
    Separa o diretório (posicional) da opção `--to`.

    Opções desconhecidas são ignoradas; tokens soltos que o parser não
    consumiu contam como posicionais.
    """
    try:
        namespace, extras = _mount_arg_parser().parse_known_args(args)
    except argparse.ArgumentError as exc:
        raise MalformedMountDirective(
            message=f"scripts[{directive_id}] could not be parsed: {exc}",
            details={"directive": directive_id, "cmd": cmd},
            hint=_MOUNT_FORMAT_HINT,
        ) from exc

    positional = list(namespace.dir) + [token for token in extras if not token.startswith("-")]
    return positional, namespace.to


def parse_mount(directive_id: str, cmd: str, *, dependencies_dir: str) -> MountedDir:
    """
    Interpreta o comando de uma diretiva `mount:*`.

    Regras:
        - o primeiro token deve ser literalmente `mount`
        - deve existir exatamente um argumento posicional (o diretório)
        - `--to`, quando informado, deve ser um caminho de URL iniciado por `/`

    Args:
        directive_id (str): Chave original da diretiva (ex.: "mount:public").
        cmd (str): Comando da diretiva (ex.: "mount public --to /").
        dependencies_dir (str): Diretório interno de dependências.

    Returns:
        MountedDir: Mapeamento normalizado.

    Raises:
        MalformedMountDirective: Se o comando violar qualquer regra acima.
    """
    tokens = _tokenize_mount(directive_id, cmd)
    if not tokens or tokens[0] != "mount":
        raise MalformedMountDirective(
            message=f"scripts[{directive_id}] must use the mount command",
            details={"directive": directive_id, "cmd": cmd},
            hint=_MOUNT_FORMAT_HINT,
        )

    positional, to = _parse_mount_args(directive_id, cmd, tokens[1:])
    if len(positional) != 1:
        raise MalformedMountDirective(
            message=f'scripts[{directive_id}] must use the format: "mount dir [--to /PATH]"',
            details={"directive": directive_id, "cmd": cmd, "positional": positional},
            hint=_MOUNT_FORMAT_HINT,
        )

    if to is not None and not to.startswith("/"):
        raise MalformedMountDirective(
            message=f'scripts[{directive_id}]: "--to {to}" must be a URL path, and start with a "/"',
            details={"directive": directive_id, "cmd": cmd, "to": to},
            hint=_MOUNT_FORMAT_HINT,
        )

    dir_disk = positional[0]
    dir_url = to or f"/{dir_disk}"

    if directive_id == WEB_MODULES_MOUNT_ID:
        dir_disk = dependencies_dir

    return MountedDir(
        id=directive_id,
        from_disk=normalize_dir(dir_disk + "/"),
        to_url=normalize_dir(dir_url + "/"),
    )


def default_dependencies_mount(dependencies_dir: str) -> MountedDir:
    """Mount sintético do diretório interno de dependências em `/web_modules/`."""
    return MountedDir(
        id=WEB_MODULES_MOUNT_ID,
        from_disk=normalize_dir(dependencies_dir + "/"),
        to_url="/web_modules/",
    )
