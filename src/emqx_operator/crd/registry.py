"""CRD Registry for the resource kinds served by the admission webhooks."""

import importlib
import pkgutil
import logging

logger = logging.getLogger(__name__)


class CRDRegistry:
    """Global registry for CRD models with auto-discovery."""

    _instance = None
    _initialised = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._models = {}
            cls._instance._initialised = False
        return cls._instance

    def __init__(self):
        if not self._initialised:
            self._models = {}
            self._initialised = True

    @classmethod
    def register(cls, group, version, kind, plural=None):
        """Decorator to register CRD models.

        Args:
            group: API group (e.g., 'apps.emqx.io')
            version: API version (e.g., 'v1beta3')
            kind: Kind name (e.g., 'EmqxBroker')
            plural: Plural name (defaults to kind.lower() + 's')
        """

        def decorator(model_class):
            if not hasattr(model_class, "__annotations__"):
                raise ValueError(
                    f"CRD model {model_class.__name__} must have type annotations"
                )

            registry_instance = cls()
            key = f"{group}/{version}/{kind}"

            registry_instance._models[key] = {
                "model": model_class,
                "group": group,
                "version": version,
                "kind": kind,
                "plural": plural or f"{kind.lower()}s",
            }

            logger.debug(f"Registered CRD: {key}")
            return model_class

        return decorator

    def discover_models(self, package_paths=None):
        """Auto-discover all CRD models in specified packages.

        Args:
            package_paths: List of package paths to search (e.g., ['emqx_operator.models'])
        """
        if package_paths is None:
            package_paths = ["emqx_operator.models"]

        for package_path in package_paths:
            self._discover_in_package(package_path)

    def _discover_in_package(self, package_path):
        """Import every submodule of a package so its decorators run."""
        try:
            package = importlib.import_module(package_path)
        except ImportError:
            logger.warning(f"Package {package_path} not found")
            return

        if hasattr(package, "__path__"):
            for _, module_name, _ in pkgutil.iter_modules(package.__path__):
                full_module_name = f"{package_path}.{module_name}"
                try:
                    importlib.import_module(full_module_name)
                    logger.debug(f"Discovered models in {full_module_name}")
                except ImportError as e:
                    logger.warning(f"Could not import {full_module_name}: {e}")

    def get_all_models(self):
        """Get all registered CRD models."""
        return self._models.copy()

    def get_model_by_key(self, group, version, kind):
        """Get a specific CRD model by its key."""
        key = f"{group}/{version}/{kind}"
        return self._models.get(key)

    def get_model_by_plural(self, group, version, plural):
        """Get a CRD model by the plural name used in admission requests."""
        for model_info in self._models.values():
            if (
                model_info["group"] == group
                and model_info["version"] == version
                and model_info["plural"] == plural
            ):
                return model_info
        return None

    def list_registered_models(self):
        """List all registered model keys."""
        return list(self._models.keys())
