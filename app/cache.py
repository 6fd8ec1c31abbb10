"""
Config cache module.

This module provides in-memory caching of the YAML catalogs and the JSON
seed file so they are read from disk once per process.
"""

import json
import os
from typing import Dict, Any, Optional
from threading import Lock

import yaml

CONFIG_DIR = os.path.join(os.path.dirname(__file__), "config")


def _config_path(env_var: str, filename: str) -> str:
    return os.getenv(env_var) or os.path.join(CONFIG_DIR, filename)


class ConfigCache:
    """Thread-safe configuration cache."""

    def __init__(self):
        self._coverage_catalog: Optional[Dict[str, Any]] = None
        self._form_catalog: Optional[Dict[str, Any]] = None
        self._seed_data: Optional[Dict[str, Any]] = None
        self._lock = Lock()

    def _load_yaml(self, path: str) -> Dict[str, Any]:
        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Malformed catalog file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Catalog file {path} must contain a mapping")
        return data

    def get_coverage_catalog(self) -> Dict[str, Any]:
        """Get the raw coverage catalog, loading from disk if not cached."""
        if self._coverage_catalog is None:
            with self._lock:
                if self._coverage_catalog is None:  # Double-check locking
                    self._coverage_catalog = self._load_yaml(
                        _config_path("COVERAGE_CATALOG_PATH", "coverage_catalog.yaml")
                    )
        return self._coverage_catalog

    def get_form_catalog(self) -> Dict[str, Any]:
        """Get the raw ACORD form field catalog."""
        if self._form_catalog is None:
            with self._lock:
                if self._form_catalog is None:
                    self._form_catalog = self._load_yaml(
                        _config_path("ACORD_FORMS_PATH", "acord_forms.yaml")
                    )
        return self._form_catalog

    def get_seed_data(self) -> Dict[str, Any]:
        """Get cached seed data. A missing seed file yields no submissions."""
        if self._seed_data is None:
            with self._lock:
                if self._seed_data is None:
                    seed_file = _config_path("SEED_DATA_PATH", "seed.json")
                    if not os.path.exists(seed_file):
                        self._seed_data = {"submissions": []}
                    else:
                        with open(seed_file, 'r') as f:
                            self._seed_data = json.load(f)
        return self._seed_data

    def get_seed_submissions(self) -> list:
        """Get demo submissions from the seed file."""
        return self.get_seed_data().get("submissions", [])

    def clear_cache(self):
        """Clear all cached data (useful for testing)."""
        with self._lock:
            self._coverage_catalog = None
            self._form_catalog = None
            self._seed_data = None

# Global cache instance
config_cache = ConfigCache()
