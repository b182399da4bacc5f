"""Service wiring for memoryrank.

Uses the scitrera-app-framework plugin pattern for service initialization.
Every service package under ``memoryrank.services`` registers its plugins here;
the enabled implementation of each extension point is chosen from
``MEMORYRANK_*`` configuration.
"""
import logging
from logging import Logger

from scitrera_app_framework import (
    Variables, get_variables, get_logger, init_framework_desktop,
    async_plugins_ready, async_plugins_stopping
)
from .config import MEMORYRANK_DATA_DIR


# noinspection PyTypeHints
def preconfigure(v: Variables = None, test_mode: bool = False, test_logger: Logger = None) -> (Variables, object):
    """Bootstrap the framework once and register every plugin under ``memoryrank.services``."""
    from scitrera_app_framework import register_package_plugins
    from . import services

    additional_kwargs = {} if not test_mode else {
        'fault_handler': False,
        'fixed_logger': test_logger,
        'pyroscope': False,
        'shutdown_hooks': False,
    }

    # safe to call repeatedly; the framework only initializes once per Variables
    v: Variables = init_framework_desktop(
        'memoryrank',
        base_plugins=False,
        stateful_chdir=True,
        stateful_root_env_key=MEMORYRANK_DATA_DIR,
        async_auto_enabled=False,  # async plugin lifecycle is driven by initialize_services()
        v=v,
        **additional_kwargs
    )

    logging.getLogger('sentence_transformers').setLevel(logging.WARNING)
    logging.getLogger('urllib3.connectionpool').setLevel(logging.WARNING)
    logging.getLogger('filelock').setLevel(logging.WARNING)

    if v.get('__preconfigure_complete__', default=False):
        return v, services

    logger = get_logger(v)
    logger.debug('Registering memoryrank services')
    register_package_plugins(services.__package__, v, recursive=True)

    v.set('__preconfigure_complete__', True)
    return v, services


async def initialize_services(v: Variables = None) -> Variables:
    """Initialize all services; async readiness hooks run in dependency order."""
    v, _ = preconfigure(v)
    logger = get_logger(v)

    logger.debug("Initializing services")
    from scitrera_app_framework.core.plugins import init_all_plugins
    init_all_plugins(v, async_enabled=False)
    await async_plugins_ready(v)

    return v


async def shutdown_services(v: Variables = None) -> None:
    """Stop all services."""
    v = get_variables(v)
    logger = get_logger(v)

    logger.debug("Shutting down services")
    await async_plugins_stopping(v)

    from scitrera_app_framework.core.plugins import shutdown_all_plugins
    shutdown_all_plugins(v)
