# tests/core/config/test_merge.py
"""
Testes da política de deep-merge de configuração.

Os testes asseguram que:
- valores escalares são sobrescritos corretamente
- dicionários (ex.: `scripts`) são mesclados de forma recursiva
- listas (ex.: `plugins`) são sobrescritas integralmente
- conflitos de tipo são detectados e rejeitados explicitamente
- objetos de entrada não são mutados durante o merge
- a ordem de declaração das diretivas é preservada

Limites explícitos:
    - Não valida carregamento de arquivos YAML
    - Não valida a estrutura de `BuildConfig`
"""

import pytest

try:
    from buildflow.core.config.merge import deep_merge
    from buildflow.core.config.errors import ConfigTypeConflictError
except Exception as e:  # noqa: BLE001
    deep_merge = None
    ConfigTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing merge/errors modules. Implement:\n"
            "- src/buildflow/core/config/merge.py (deep_merge)\n"
            "- src/buildflow/core/config/errors.py (ConfigTypeConflictError)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_merge_simple_override():
    _require_imports()

    base = {"a": 1, "b": 2}
    override = {"b": 99}

    out = deep_merge(base, override)

    assert out == {"a": 1, "b": 99}
    assert base == {"a": 1, "b": 2}
    assert override == {"b": 99}


def test_merge_nested_scripts_keeps_declaration_order():
    """
    Verifica que `scripts` é mesclado recursivamente sem perder a ordem.

    Invariantes:
        - Chaves sobrescritas mantêm a posição da base
        - Chaves novas do override são anexadas ao final
    """
    _require_imports()

    base = {"scripts": {"run:lint": "eslint .", "build:css": "postcss"}}
    override = {"scripts": {"mount:src": "mount src", "run:lint": "eslint src"}}

    out = deep_merge(base, override)

    assert list(out["scripts"]) == ["run:lint", "build:css", "mount:src"]
    assert out["scripts"]["run:lint"] == "eslint src"


def test_merge_plugins_list_override_total():
    _require_imports()

    base = {"plugins": ["plugin-sass", "plugin-svelte"]}
    override = {"plugins": [["plugin-options", {"mode": "strict"}]]}

    out = deep_merge(base, override)

    assert out == {"plugins": [["plugin-options", {"mode": "strict"}]]}


def test_merge_type_conflict_raises():
    """
    Verifica que conflitos de tipo entre base e override são erro fatal.

    Exemplo: `scripts` declarado como mapa na base e como string no override.
    """
    _require_imports()

    base = {"scripts": {"run:lint": "eslint ."}}
    override = {"scripts": "run:lint"}  # dict vs str

    with pytest.raises(ConfigTypeConflictError):
        deep_merge(base, override)


def test_merge_null_drops_directive():
    """
    Verifica que `null` no override descarta a diretiva da base.

    Invariantes:
        - As demais diretivas mantêm a ordem da base
    """
    _require_imports()

    base = {"scripts": {"run:lint": "eslint .", "build:css": "postcss", "mount:public": "mount public"}}
    override = {"scripts": {"build:css": None}}

    out = deep_merge(base, override)

    assert list(out["scripts"]) == ["run:lint", "mount:public"]
    assert "build:css" in base["scripts"]


def test_merge_null_clears_plugins():
    _require_imports()

    out = deep_merge({"plugins": ["plugin-sass"], "scripts": {}}, {"plugins": None})

    assert out == {"scripts": {}}


def test_merge_null_for_unknown_key_is_noop():
    _require_imports()

    assert deep_merge({"a": 1}, {"b": None}) == {"a": 1}


def test_merge_list_vs_scalar_conflict_names_key():
    _require_imports()

    with pytest.raises(ConfigTypeConflictError) as exc_info:
        deep_merge({"plugins": ["plugin-sass"]}, {"plugins": "plugin-sass"})

    assert "plugins" in str(exc_info.value)
