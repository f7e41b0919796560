"""Plugin system for shlinkrun."""

from .base import (
    ContextMenuProvider,
    Disposable,
    Plugin,
    PluginRegistry,
    QueryProvider,
    SettingsProvider,
)

__all__ = [
    'Plugin',
    'QueryProvider',
    'ContextMenuProvider',
    'SettingsProvider',
    'Disposable',
    'PluginRegistry',
]
