"""shlinkrun - A launcher plugin for creating short URLs on Shlink instances."""

from .exceptions import (
    ShlinkError,
    InvalidUrl,
    NoInstancesConfigured,
    MismatchedHostsAndKeys,
    ConfigurationError,
    BackendError,
    MalformedResponse,
    TransportError,
    Cancelled,
)
from .types import Query, Result, ContextMenuResult, Theme
from .settings import BackendInstance, ShlinkSettings, split_lines
from .dispatcher import ShortenRequest, ShortenResult, create_short_url, acreate_short_url, shorten
from .interpreter import QueryTerms, interpret, parse_terms
from .lifecycle import EventHook, Subscription
from .host import PublicApi, PluginInitContext, ConsoleApi
from .plugins.base import (
    Plugin, QueryProvider, ContextMenuProvider, SettingsProvider, Disposable, PluginRegistry,
)
from .skill import (
    RiskLevel, ConfigParam,
    SkillDescriptor, SkillResult, Skill, skill,
)
from .manifest import PluginManifest, PluginRequirements
from .safety import (
    SafetyError, SafetyPolicy,
    set_policy, get_policy, reset_policy,
    SecurityError, SecurityContext,
    set_security_context, get_security_context, reset_security_context,
)

__version__ = '0.1.0'

__all__ = [
    # Errors
    'ShlinkError',
    'InvalidUrl',
    'NoInstancesConfigured',
    'MismatchedHostsAndKeys',
    'ConfigurationError',
    'BackendError',
    'MalformedResponse',
    'TransportError',
    'Cancelled',
    # Host surface
    'Query',
    'Result',
    'ContextMenuResult',
    'Theme',
    'EventHook',
    'Subscription',
    'PublicApi',
    'PluginInitContext',
    'ConsoleApi',
    # Core
    'BackendInstance',
    'ShlinkSettings',
    'split_lines',
    'ShortenRequest',
    'ShortenResult',
    'create_short_url',
    'acreate_short_url',
    'shorten',
    'QueryTerms',
    'interpret',
    'parse_terms',
    # Plugin system
    'Plugin',
    'QueryProvider',
    'ContextMenuProvider',
    'SettingsProvider',
    'Disposable',
    'PluginRegistry',
    'PluginManifest',
    'PluginRequirements',
    # Skill system
    'RiskLevel',
    'ConfigParam',
    'SkillDescriptor',
    'SkillResult',
    'Skill',
    'skill',
    # Safety
    'SafetyError',
    'SafetyPolicy',
    'set_policy',
    'get_policy',
    'reset_policy',
    'SecurityError',
    'SecurityContext',
    'set_security_context',
    'get_security_context',
    'reset_security_context',
]
