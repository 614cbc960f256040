"""File-based feature repository.

One YAML document per feature under ``.fogit/features``. File names are
the slugified feature name; on collision with a different feature the
first 8 characters of the ID (then the full ID) are appended.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

import yaml

from fogit.core.entity import BaseRepository, PersistenceError
from fogit.core.utils.io import ensure_directory, parse_yaml_string, read_yaml, write_yaml
from fogit.core.utils.paths import get_features_dir
from fogit.core.utils.text import slugify

from .models import Feature, FeatureState

logger = logging.getLogger(__name__)

FEATURE_FILE_SUFFIXES = (".yml", ".yaml")

StateFilter = Union[FeatureState, str, Iterable[Union[FeatureState, str]], None]


def feature_filename(name: str, feature_id: str, existing: Set[str]) -> str:
    """Pick a file name for a feature, avoiding names already in ``existing``."""
    slug = slugify(name) or f"feature-{feature_id[:8]}"

    filename = f"{slug}.yml"
    if filename not in existing:
        return filename
    filename = f"{slug}-{feature_id[:8]}.yml"
    if filename not in existing:
        return filename
    return f"{slug}-{feature_id}.yml"


def parse_feature(text: str) -> Optional[Feature]:
    """Parse a feature record, returning None for unreadable documents."""
    data = parse_yaml_string(text, default=None)
    if not isinstance(data, dict):
        return None
    try:
        return Feature.from_dict(data)
    except (KeyError, TypeError, ValueError):
        return None


def _normalize_states(state: StateFilter) -> Optional[Set[FeatureState]]:
    if state is None:
        return None
    if isinstance(state, (FeatureState, str)):
        return {FeatureState(state)}
    return {FeatureState(s) for s in state}


class FeatureRepository(BaseRepository[Feature]):
    """CRUD over ``.fogit/features/*.yml`` with a derived-state filter."""

    entity_type = "feature"

    def __init__(self, project_root: Path) -> None:
        self.project_root = Path(project_root)
        self.features_dir = get_features_dir(self.project_root)

    # ---------- file helpers ----------

    def _iter_files(self) -> List[Path]:
        if not self.features_dir.exists():
            return []
        return sorted(
            p for p in self.features_dir.iterdir()
            if p.is_file() and p.suffix in FEATURE_FILE_SUFFIXES
        )

    def _load_file(self, path: Path) -> Optional[Feature]:
        try:
            data = read_yaml(path, default=None, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("skipping unreadable feature file %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            return None
        try:
            return Feature.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("skipping invalid feature file %s: %s", path, exc)
            return None

    def _index(self) -> Dict[str, Path]:
        """Map feature ID -> file path."""
        index: Dict[str, Path] = {}
        for path in self._iter_files():
            feature = self._load_file(path)
            if feature is not None and feature.id not in index:
                index[feature.id] = path
        return index

    def path_for(self, feature_id: str) -> Optional[Path]:
        return self._index().get(feature_id)

    def _write(self, path: Path, feature: Feature) -> None:
        try:
            write_yaml(path, feature.to_dict())
        except OSError as exc:
            raise PersistenceError(
                f"failed to write feature {feature.id}: {exc}",
                entity_type=self.entity_type,
                entity_id=feature.id,
            ) from exc

    # ---------- BaseRepository hooks ----------

    def _do_create(self, entity: Feature) -> Feature:
        entity.validate()
        ensure_directory(self.features_dir)
        existing = {p.name for p in self._iter_files()}
        path = self.features_dir / feature_filename(entity.name, entity.id, existing)
        self._write(path, entity)
        logger.debug("created feature %s at %s", entity.id, path)
        return entity

    def _do_get(self, entity_id: str) -> Optional[Feature]:
        for path in self._iter_files():
            feature = self._load_file(path)
            if feature is not None and feature.id == entity_id:
                return feature
        return None

    def _do_update(self, entity: Feature) -> None:
        entity.validate()
        path = self.path_for(entity.id)
        if path is None:
            # exists() already passed; the file vanished in between.
            path = self.features_dir / feature_filename(
                entity.name, entity.id, {p.name for p in self._iter_files()}
            )
        self._write(path, entity)

    def _do_delete(self, entity_id: str) -> bool:
        path = self.path_for(entity_id)
        if path is None:
            return False
        path.unlink()
        return True

    def _do_list_all(self) -> List[Feature]:
        features: List[Feature] = []
        seen: Set[str] = set()
        for path in self._iter_files():
            feature = self._load_file(path)
            if feature is None or feature.id in seen:
                continue
            seen.add(feature.id)
            features.append(feature)
        return features

    # ---------- queries ----------

    def list(self, state: StateFilter = None) -> List[Feature]:
        """All features in file-name order, optionally filtered by derived state."""
        wanted = _normalize_states(state)
        features = self._do_list_all()
        if wanted is None:
            return features
        return [f for f in features if f.state in wanted]


__all__ = [
    "FeatureRepository",
    "feature_filename",
    "parse_feature",
]
