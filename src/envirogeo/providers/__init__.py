"""Provider registry for real-data parameters.

``get_provider()`` returns the provider serving a parameter, or
``None`` when the parameter only has the synthetic pipeline or no data
functions are configured.
"""

from __future__ import annotations

from envirogeo.config import Config
from envirogeo.providers.base import DataProvider

_PROVIDER_REGISTRY: dict[str, type[DataProvider]] = {}
_REGISTRY_INITIALIZED = False


def _init_registry() -> None:
    """Populate the registry on first use (lazy import)."""
    global _REGISTRY_INITIALIZED  # noqa: PLW0603
    if _REGISTRY_INITIALIZED:
        return

    from envirogeo.providers.ndvi import NDVIFunctionProvider

    for provider_cls in (NDVIFunctionProvider,):
        for parameter in provider_cls.parameters:
            _PROVIDER_REGISTRY[parameter] = provider_cls
    _REGISTRY_INITIALIZED = True


def get_registered_parameters() -> list[str]:
    """Return sorted parameter ids that have a real-data provider."""
    _init_registry()
    return sorted(_PROVIDER_REGISTRY)


def get_provider(parameter: str, config: Config) -> DataProvider | None:
    """Return a configured provider for *parameter*, if any.

    Args:
        parameter: Parameter identifier.
        config: Configuration snapshot.

    Returns:
        A provider instance, or ``None`` when *parameter* has no
        real-data path or ``config.functions_url`` is unset.

    Example:
        >>> get_provider("AQI", Config()) is None
        True
    """
    _init_registry()
    provider_cls = _PROVIDER_REGISTRY.get(parameter)
    if provider_cls is None or config.functions_url is None:
        return None
    return provider_cls(config=config)
