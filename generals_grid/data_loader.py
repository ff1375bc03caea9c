"""
YAML Data Loader for the generals grid catalog.

Loads the human-curated catalog file and parses it into Pydantic models.
Handles validation and provides helpful error messages for malformed data.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .catalog import Catalog
from .models import TEAM_SIZE, CatalogData

logger = logging.getLogger(__name__)

CATALOG_ENV_VAR = "GENERALS_GRID_CATALOG"
DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.yaml"


class CatalogLoadError(Exception):
    """Raised when a catalog file exists but cannot be parsed or validated."""


def get_catalog_path() -> Path:
    """Get the catalog file path."""
    # Check environment variable first
    if env_path := os.environ.get(CATALOG_ENV_VAR):
        return Path(env_path)

    return DEFAULT_CATALOG_PATH


class DataLoader:
    """
    Loads the catalog from a YAML file.

    All loaded data is human-curated; the loader only validates and
    reshapes what the file provides.
    """

    def __init__(self, catalog_path: str | Path | None = None):
        """
        Initialize the data loader.

        Args:
            catalog_path: Path to the catalog YAML file. Defaults to
                          get_catalog_path().
        """
        self.catalog_path = Path(catalog_path) if catalog_path else get_catalog_path()

    def _load_yaml_file(self, file_path: Path) -> dict:
        """Load a single YAML file."""
        with open(file_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def load_catalog_data(self) -> CatalogData:
        """
        Load and validate the raw catalog document.

        Raises:
            FileNotFoundError: If the catalog file does not exist.
            CatalogLoadError: If the file is not valid YAML or fails validation.
        """
        if not self.catalog_path.exists():
            raise FileNotFoundError(f"Catalog file not found: {self.catalog_path}")

        try:
            data = self._load_yaml_file(self.catalog_path)
            if not isinstance(data, dict):
                raise CatalogLoadError(f"Catalog root must be a mapping: {self.catalog_path}")
            catalog_data = CatalogData.model_validate(data)

        except ValidationError as e:
            logger.error(f"Validation error in {self.catalog_path}:\n{e}")
            raise CatalogLoadError(f"Invalid catalog {self.catalog_path}") from e
        except yaml.YAMLError as e:
            logger.error(f"YAML parse error in {self.catalog_path}:\n{e}")
            raise CatalogLoadError(f"Unreadable catalog {self.catalog_path}") from e

        if len(catalog_data.roles) != TEAM_SIZE:
            logger.warning(
                f"Catalog {self.catalog_path} defines {len(catalog_data.roles)} roles, "
                f"expected {TEAM_SIZE}"
            )
        return catalog_data

    def load_catalog(self) -> Catalog:
        """
        Load the catalog.

        Returns:
            Read-only Catalog built from the file.
        """
        catalog = Catalog(self.load_catalog_data())
        logger.info(f"Loaded catalog '{catalog.name}': {len(catalog.roles)} roles, {len(catalog)} units")
        return catalog


def load_catalog(catalog_path: str | Path | None = None) -> Catalog:
    """Shortcut for DataLoader(catalog_path).load_catalog()."""
    return DataLoader(catalog_path).load_catalog()
