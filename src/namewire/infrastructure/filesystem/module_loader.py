import hashlib
import importlib
import importlib.util
import logging
import os
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

from namewire.domain import IModuleLoader, ModuleLoadError

logger = logging.getLogger(__name__)

MODULE_PREFIX = "_namewire_loaded_"


class ModuleLoader(IModuleLoader):
    """Loads Python source files and modules and returns their exports.

    A file's export is, in order of preference: the attribute named by
    ``export_attribute``, the attribute named after the file stem (``a.py``
    exports ``a``), or the module itself.

    Loaded files are cached in ``sys.modules`` under a name derived from their
    real path, so loading the same file twice in one process returns the same
    objects.

    Attributes:
        _export_attribute: Module attribute holding the export.
    """

    def __init__(self, export_attribute: str = "__export__") -> None:
        self._export_attribute = export_attribute

    @staticmethod
    def module_name_for(real_path: str) -> str:
        """Return the ``sys.modules`` key used for a file."""
        return MODULE_PREFIX + hashlib.sha1(real_path.encode("utf-8")).hexdigest()[:16]

    def _export_of(self, module: ModuleType, real_path: str) -> Any:
        if hasattr(module, self._export_attribute):
            return getattr(module, self._export_attribute)
        stem = Path(real_path).stem
        if hasattr(module, stem):
            return getattr(module, stem)
        return module

    def load(self, path: str) -> Any:
        """Load the file at ``path`` and return its export.

        Args:
            path: Path to a Python source file.

        Raises:
            ModuleLoadError: If the file is missing, not a Python module, or raises on import.
        """
        real_path = os.path.realpath(path)
        module_name = self.module_name_for(real_path)

        module = sys.modules.get(module_name)
        if module is None:
            if not os.path.isfile(real_path):
                raise ModuleLoadError(str(path), "no such file")

            spec = importlib.util.spec_from_file_location(module_name, real_path)
            if spec is None or spec.loader is None:
                raise ModuleLoadError(str(path), "not a loadable Python module")

            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            try:
                spec.loader.exec_module(module)
            except Exception as e:
                sys.modules.pop(module_name, None)
                raise ModuleLoadError(str(path), f"{type(e).__name__}: {e}") from e
            logger.debug("Loaded module %s from %s", module_name, real_path)

        return self._export_of(module, real_path)

    def require(self, module_name: str) -> Any:
        """Import a module by its logical name and return it.

        Args:
            module_name: Dotted module name, e.g. ``"json"`` or ``"os.path"``.

        Raises:
            ModuleLoadError: If the module cannot be imported.
        """
        try:
            return importlib.import_module(module_name)
        except ImportError as e:
            raise ModuleLoadError(module_name, str(e)) from e
