"""
Plugin de CSS de teste — Buildflow

Factory padrão (`plugin`) que declara apenas `defaultBuildScript`;
as extensões são derivadas pelo resolvedor.
"""

from __future__ import annotations


def plugin(config, options=None):
    return {
        "defaultBuildScript": "build:css",
        "options": dict(options or {}),
        "build": lambda contents, **_: contents,
    }
