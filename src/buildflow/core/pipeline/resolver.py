# src/buildflow/core/pipeline/resolver.py
"""
Resolvedor de diretivas e merge de plugins do Buildflow.

Este módulo transforma a configuração ativa (`scripts` + `plugins`) no
resultado normalizado consumido pelos colaboradores de build:
plugins, bundler, comandos `run`, comandos de build de fallback e mounts.

Etapas:
    1. resolve_scripts       → fold único sobre as diretivas, em ordem
    2. merge_config_plugins  → plugins explícitos após os derivados de scripts
    3. load_plugins          → fachada que executa 1 + 2 e registra eventos
    4. resolve_build_pipeline→ fachada que também indexa o pipeline

Despacho por tipo de diretiva:
    - run:    comando literal registrado em `run_commands`
    - build:  plugin (carga suave) ou comando de shell por extensão
    - mount:  mapeamento de diretório (ver `parse_mount`)
    - bundle: plugin obrigatório no slot único de bundler

Decisões arquiteturais:
    - Cada diretiva produz um novo acumulador imutável (`ScriptResolution`);
      nenhuma diretiva depende da ordem das demais, exceto o mount padrão
      de dependências, aplicado somente ao final e somente se nenhuma
      diretiva `mount:web_modules` existir
    - Diretivas `build:*` repetidas para o mesmo plugin unem suas extensões
      na entrada já registrada
    - Um specifier não pode ser declarado em `scripts` e em `plugins`

Invariantes:
    - Plugins derivados de scripts vêm antes dos plugins explícitos
    - Todo plugin do resultado possui `name` e `input` não vazios
    - Nenhum resultado parcial é devolvido em caso de erro

Limites explícitos:
    - Não executa hooks nem comandos
    - Não observa o filesystem
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from buildflow.core.config.model import WEB_MODULES_MOUNT_ID, BuildConfig, coerce_config
from buildflow.core.errors import exception_to_error
from buildflow.core.exceptions import (
    AmbiguousPluginRegistration,
    BuildflowException,
    BundlerLoadFailure,
    MissingPluginInput,
    PluginLoadFailure,
)

from .context import ResolutionContext
from .directives import default_dependencies_mount, parse_mount, parse_script
from .indexer import create_build_pipeline
from .loader import ModulePluginLoader, PluginLoader
from .types import (
    BuildPipeline,
    MountedDir,
    Plugin,
    ResolvedPlugins,
    RunCmd,
    ScriptDirective,
    ScriptType,
)


@dataclass(frozen=True)
class ScriptResolution:
    """
    Acumulador imutável do fold sobre as diretivas de `scripts`.

    Campos:
        - run_commands: comandos `run:*` em ordem de declaração
        - build_commands: extensão → comando de shell (última diretiva vence)
        - script_plugins: specifier → plugin derivado de `build:*`
        - mounted_dirs: mounts em ordem de declaração
        - bundler: slot único de bundler
    """
    run_commands: Tuple[RunCmd, ...] = ()
    build_commands: Mapping[str, RunCmd] = field(default_factory=dict)
    script_plugins: Mapping[str, Plugin] = field(default_factory=dict)
    mounted_dirs: Tuple[MountedDir, ...] = ()
    bundler: Optional[Plugin] = None

    @property
    def plugins(self) -> Tuple[Plugin, ...]:
        return tuple(self.script_plugins.values())


@dataclass(frozen=True)
class _Env:
    config: BuildConfig
    loader: PluginLoader
    ctx: ResolutionContext


_Handler = Callable[[ScriptResolution, str, str, ScriptDirective, _Env], ScriptResolution]


def _apply_run(state: ScriptResolution, key: str, cmd: str, directive: ScriptDirective, env: _Env) -> ScriptResolution:
    env.ctx.log(directive=key, level="info", message="run command registered", cmd=cmd)
    return replace(state, run_commands=state.run_commands + (RunCmd(id=key, cmd=cmd),))


def _apply_build(state: ScriptResolution, key: str, cmd: str, directive: ScriptDirective, env: _Env) -> ScriptResolution:
    plugin = env.loader.try_load(cmd, env.config)

    if plugin is None:
        build_commands = dict(state.build_commands)
        for ext in directive.extensions:
            build_commands[ext] = RunCmd(id=key, cmd=cmd)
        env.ctx.log(
            directive=key,
            level="info",
            message="build command registered",
            cmd=cmd,
            extensions=list(directive.extensions),
        )
        return replace(state, build_commands=build_commands)

    existing = state.script_plugins.get(cmd)
    if existing is not None:
        registered = existing.with_extensions(
            input=existing.input + directive.extensions,
            output=existing.output + directive.extensions,
        )
        message = "script plugin extended"
    else:
        registered = replace(plugin, name=cmd).with_extensions(
            input=directive.extensions,
            output=directive.extensions,
        )
        message = "script plugin registered"

    env.ctx.log(
        directive=key,
        level="info",
        message=message,
        plugin=cmd,
        input=list(registered.input),
    )
    return replace(state, script_plugins={**state.script_plugins, cmd: registered})


def _apply_mount(state: ScriptResolution, key: str, cmd: str, directive: ScriptDirective, env: _Env) -> ScriptResolution:
    mounted = parse_mount(key, cmd, dependencies_dir=env.config.dependencies_dir)
    env.ctx.log(
        directive=key,
        level="info",
        message="directory mounted",
        from_disk=mounted.from_disk,
        to_url=mounted.to_url,
    )
    return replace(state, mounted_dirs=state.mounted_dirs + (mounted,))


def _apply_bundle(state: ScriptResolution, key: str, cmd: str, directive: ScriptDirective, env: _Env) -> ScriptResolution:
    try:
        bundler = env.loader.load(cmd, env.config)
    except PluginLoadFailure as exc:
        raise BundlerLoadFailure(
            message=f'Failed to load plugin "{cmd}". Only installed plugins are supported for bundle:*',
            details={
                "directive": key,
                "specifier": cmd,
                "exception_class": exc.details.get("exception_class"),
                "exc_message": exc.details.get("exc_message"),
            },
            hint="Instale o plugin de bundling ou remova a diretiva bundle:*.",
        ) from exc

    if not bundler.name:
        bundler = replace(bundler, name=cmd)

    env.ctx.log(
        directive=key,
        level="info",
        message="bundler registered",
        plugin=bundler.name,
        replaced=state.bundler.name if state.bundler is not None else None,
    )
    return replace(state, bundler=bundler)


_HANDLERS: Dict[str, _Handler] = {
    ScriptType.RUN.value: _apply_run,
    ScriptType.BUILD.value: _apply_build,
    ScriptType.MOUNT.value: _apply_mount,
    ScriptType.BUNDLE.value: _apply_bundle,
}


def resolve_scripts(
    config: BuildConfig,
    loader: PluginLoader,
    ctx: Optional[ResolutionContext] = None,
) -> ScriptResolution:
    """
    Resolve todas as diretivas de `scripts` em um único fold.

    Após o fold, se nenhuma diretiva `mount:web_modules` existir, o mount
    sintético do diretório interno de dependências é anexado.

    Raises:
        MalformedMountDirective: Se uma diretiva `mount:*` for inválida.
        BundlerLoadFailure: Se o plugin de uma diretiva `bundle:*` não carregar.
    """
    env = _Env(config=config, loader=loader, ctx=ctx if ctx is not None else ResolutionContext(config=config))

    state = ScriptResolution()
    for key, cmd in config.scripts.items():
        directive = parse_script(key)
        handler = _HANDLERS.get(directive.script_type)
        if handler is None:
            env.ctx.add_warning(
                directive=key,
                message=f'unknown script type "{directive.script_type}", directive ignored',
            )
            continue
        state = handler(state, key, cmd, directive, env)

    if not config.has_script(WEB_MODULES_MOUNT_ID):
        default_mount = default_dependencies_mount(config.dependencies_dir)
        env.ctx.log(
            directive=WEB_MODULES_MOUNT_ID,
            level="debug",
            message="default dependencies mount applied",
            from_disk=default_mount.from_disk,
            to_url=default_mount.to_url,
        )
        state = replace(state, mounted_dirs=state.mounted_dirs + (default_mount,))

    return state


def merge_config_plugins(
    config: BuildConfig,
    script_plugins: Mapping[str, Plugin],
    loader: PluginLoader,
    ctx: Optional[ResolutionContext] = None,
) -> Tuple[Plugin, ...]:
    """
    Anexa os plugins explícitos de `plugins` após os plugins de scripts.

    Para cada referência, na ordem de declaração:
        - rejeita specifier já registrado via `build:*`
        - carrega o plugin de forma estrita, repassando as opções
        - exige `input` ou `defaultBuildScript` com ao menos uma extensão
        - deriva `input`/`output` do `defaultBuildScript` quando necessário
        - preenche `name` com o specifier quando ausente

    Returns:
        Tuple[Plugin, ...]: Lista final de plugins.

    Raises:
        AmbiguousPluginRegistration: Specifier declarado nos dois mecanismos.
        PluginLoadFailure: Plugin explícito não pôde ser carregado.
        MissingPluginInput: Plugin sem `input` e sem `defaultBuildScript`.
    """
    plugins = list(script_plugins.values())

    for ref in config.plugins:
        specifier = ref.specifier
        if specifier in script_plugins:
            raise AmbiguousPluginRegistration(
                message=f"[{specifier}]: loaded in both `scripts` and `plugins`. Please choose one (preferably `plugins`).",
                details={"specifier": specifier},
                hint="Remova a diretiva build:* correspondente e mantenha o plugin em `plugins`.",
            )

        plugin = loader.load(specifier, config, ref.options)

        if not plugin.default_build_script and not plugin.input:
            raise MissingPluginInput(
                message=f"[{specifier}]: missing input options",
                details={"specifier": specifier},
                hint="O plugin deve declarar `input` ou `defaultBuildScript`.",
            )

        if not plugin.input:
            extensions = parse_script(plugin.default_build_script).extensions
            if not extensions:
                raise MissingPluginInput(
                    message=f'[{specifier}]: defaultBuildScript "{plugin.default_build_script}" declares no extensions',
                    details={"specifier": specifier, "default_build_script": plugin.default_build_script},
                    hint="Declare `input` ou um `defaultBuildScript` no formato \"build:ext\".",
                )
            plugin = plugin.with_extensions(input=extensions, output=extensions)

        if not plugin.name:
            plugin = replace(plugin, name=specifier)

        if ctx is not None:
            ctx.log(
                directive=specifier,
                level="info",
                message="config plugin registered",
                plugin=plugin.name,
                input=list(plugin.input),
            )
        plugins.append(plugin)

    return tuple(plugins)


def load_plugins(
    config: Any,
    *,
    loader: Optional[PluginLoader] = None,
    ctx: Optional[ResolutionContext] = None,
) -> ResolvedPlugins:
    """
    Executa uma passada completa de resolução de configuração.

    Args:
        config: `BuildConfig` ou mapa bruto com `scripts` e `plugins`.
        loader: Loader de plugins (padrão: `ModulePluginLoader()`).
        ctx: Contexto para eventos e warnings (opcional).

    Returns:
        ResolvedPlugins: Resultado imutável da resolução.

    Raises:
        BuildflowException: Em qualquer erro de resolução (terminal).
        ConfigError: Se a configuração bruta for estruturalmente inválida.
    """
    ctx = ctx if ctx is not None else ResolutionContext(config=config)
    loader = loader if loader is not None else ModulePluginLoader()

    try:
        build_config = coerce_config(config)
        scripts = resolve_scripts(build_config, loader, ctx)
        plugins = merge_config_plugins(build_config, scripts.script_plugins, loader, ctx)
    except Exception as exc:
        error = exception_to_error(exc)
        details = exc.details if isinstance(exc, BuildflowException) else {}
        ctx.log(
            directive=details.get("directive") or details.get("specifier") or "<config>",
            level="error",
            message=error.message,
            error=error.to_dict(),
        )
        raise

    return ResolvedPlugins(
        plugins=plugins,
        bundler=scripts.bundler,
        run_commands=scripts.run_commands,
        build_commands=scripts.build_commands,
        mounted_dirs=scripts.mounted_dirs,
    )


def resolve_build_pipeline(
    config: Any,
    *,
    loader: Optional[PluginLoader] = None,
    ctx: Optional[ResolutionContext] = None,
) -> Tuple[ResolvedPlugins, BuildPipeline]:
    """Resolve a configuração e indexa o pipeline por extensão."""
    resolved = load_plugins(config, loader=loader, ctx=ctx)
    return resolved, create_build_pipeline(resolved.plugins)
