import importlib
import pkgutil

from marketplace.logging import logger


def load_handlers() -> list[str]:
    """
    Import every module of this package so that their
    ``@pkg_router.register`` decorators run.

    Returns:
        Names of the handler modules found.
    """
    modules = []
    for _, module_name, _ in pkgutil.iter_modules(__path__):
        importlib.import_module(f"{__name__}.{module_name}")
        modules.append(module_name)

    logger.debug(f"Loaded ws handler modules: {modules}")
    return modules


load_handlers()
