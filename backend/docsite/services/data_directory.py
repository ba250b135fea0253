"""
Docsite Backend - Data Directory
=================================

What:  Structured YAML data shared by pages, per language.
How:   `<site_root>/data/<name>/<file>.yml` is loaded for English and
       `<site_root>/translations/<lang>/data/<name>/<file>.yml` for each
       translation. The result for a (name, language) pair is a dict keyed
       by file stem:

           get_deep_data_by_language("learning-tracks", "ja")
           → {"get-started": {...tracks...}, "actions": {...tracks...}}

Translation fallback:
    Each English file is replaced by its translated counterpart when one
    exists and parses. Translated files that fail to parse fall back to the
    English file with a warning. Translated files without an English
    counterpart are kept as-is; consumers decide what to do with them.

Loaded data is shared by every request and must be treated as read-only.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import aiofiles
import yaml

from docsite.exceptions import DataDirectoryError

logger = logging.getLogger(__name__)

# language → dataset name → file stem → parsed YAML
DataTree = Dict[str, Dict[str, Dict[str, Any]]]


async def _read_yaml_files(directory: Path) -> Dict[str, Any]:
    """Parse every `*.yml` file in `directory`, keyed by stem. Errors are left to the caller."""
    documents: Dict[str, Any] = {}
    for file in sorted(directory.glob("*.yml")):
        async with aiofiles.open(file, "r", encoding="utf-8") as fh:
            text = await fh.read()
        documents[file.stem] = yaml.safe_load(text) or {}
    return documents


class DataDirectory:
    """Language-scoped lookup of structured site data."""

    def __init__(self, data: Optional[DataTree] = None, default_language: str = "en"):
        self.default_language = default_language
        self._data: DataTree = data or {}
        self._data.setdefault(default_language, {})

    @property
    def languages(self) -> List[str]:
        return sorted(self._data)

    def get_deep_data_by_language(self, name: str, language: str) -> Mapping[str, Any]:
        english = self._data[self.default_language].get(name, {})
        if language == self.default_language:
            return english
        return self._data.get(language, {}).get(name, english)

    @classmethod
    async def from_directory(
        cls,
        site_root: Path,
        names: Iterable[str],
        languages: Iterable[str],
        default_language: str = "en",
    ) -> "DataDirectory":
        """
        Load the datasets listed in `names` for every language.

        Raises:
            DataDirectoryError: An English data file is not valid YAML.
        """
        names = list(names)
        data: DataTree = {default_language: {}}

        for name in names:
            directory = site_root / "data" / name
            try:
                data[default_language][name] = await _read_yaml_files(directory)
            except yaml.YAMLError as exc:
                raise DataDirectoryError(
                    message="Invalid data file",
                    context={"dataset": name, "error": str(exc)},
                ) from exc

        for language in languages:
            if language == default_language:
                continue
            translated_root = site_root / "translations" / language / "data"
            if not translated_root.is_dir():
                continue
            data[language] = {
                name: await cls._load_translated(
                    translated_root / name, data[default_language][name], language
                )
                for name in names
            }

        logger.info("Loaded data sets %s for %d languages", names, len(data))
        return cls(data, default_language)

    @staticmethod
    async def _load_translated(
        directory: Path, english: Dict[str, Any], language: str
    ) -> Dict[str, Any]:
        merged = dict(english)
        for file in sorted(directory.glob("*.yml")):
            async with aiofiles.open(file, "r", encoding="utf-8") as fh:
                text = await fh.read()
            try:
                merged[file.stem] = yaml.safe_load(text) or {}
            except yaml.YAMLError as exc:
                logger.warning(
                    "Falling back to English for %s (%s): %s", file.name, language, exc
                )
        return merged
