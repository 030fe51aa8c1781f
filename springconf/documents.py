"""YAML document loading with profile filtering.

A YAML source may hold several documents separated by ``---``. Each
document is checked against the active profiles, dot-separated keys are
expanded, and the surviving documents are deep-merged in file order.
"""

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from springconf.errors import (
    ConfigParseError,
    ProfileOverlayError,
    SourceUnavailableError,
    SpringConfError,
)
from springconf.observability.logging import get_logger
from springconf.observability.metrics import PROFILE_OVERLAY_ERRORS
from springconf.profiles import PROFILES_KEY, should_use_document
from springconf.properties import expand_properties, merge_properties

logger = get_logger(__name__)

BOOTSTRAP_FILE = "bootstrap.yml"
APPLICATION_FILE = "application.yml"
PROFILE_FILE_TEMPLATE = "application-{profile}.yml"


def parse_yaml_documents(text: str, path: Path | str = "<string>") -> list[Any]:
    """Parse YAML text into its ordered list of documents.

    Raises:
        ConfigParseError: If the YAML syntax is invalid
    """
    try:
        return list(yaml.safe_load_all(text))
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML in {path}: {e}", path) from e


async def read_yaml_documents(path: Path) -> list[Any]:
    """Read a YAML file and return its documents.

    The file is read in a worker thread so the event loop is not blocked.

    Raises:
        SourceUnavailableError: If the file doesn't exist or can't be read
        ConfigParseError: If the YAML syntax is invalid
    """
    logger.debug("loading_config_file", path=str(path))
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailableError(f"Configuration file not readable: {path}", path) from e

    return parse_yaml_documents(text, path)


def merge_documents(documents: Sequence[Any], active_profiles: Sequence[str]) -> dict[str, Any]:
    """Filter documents by profile and merge the survivors in order."""
    retained: list[dict[str, Any]] = []
    for document in documents:
        if not should_use_document(document, active_profiles):
            continue
        content = {key: value for key, value in document.items() if key != PROFILES_KEY}
        retained.append(expand_properties(content))
    return merge_properties(retained)


async def load_document(path: Path, active_profiles: Sequence[str]) -> dict[str, Any]:
    """Load a YAML source into a single nested property set.

    Args:
        path: YAML file to read
        active_profiles: Profiles used to filter the file's documents

    Returns:
        Merged property set of every applicable document
    """
    documents = await read_yaml_documents(path)
    properties = merge_documents(documents, active_profiles)

    logger.debug(
        "config_file_loaded",
        path=str(path),
        document_count=len(documents),
        key_count=len(properties),
    )
    return properties


async def _load_profile_overlay(
    config_dir: Path,
    profile: str,
    active_profiles: Sequence[str],
) -> dict[str, Any] | None:
    """Load application-<profile>.yml, or None when the file is absent.

    Raises:
        ProfileOverlayError: If the overlay exists but can't be loaded
    """
    overlay_path = config_dir / PROFILE_FILE_TEMPLATE.format(profile=profile)
    if not await asyncio.to_thread(overlay_path.is_file):
        logger.debug("profile_overlay_not_found", path=str(overlay_path), profile=profile)
        return None

    try:
        return await load_document(overlay_path, active_profiles)
    except SpringConfError as e:
        raise ProfileOverlayError(
            f"Error reading profile-specific yaml {overlay_path}: {e.message}",
            overlay_path,
            profile,
        ) from e


async def load_application_config(
    config_dir: Path,
    active_profiles: Sequence[str],
) -> dict[str, Any]:
    """Read the application's configuration files and merge them.

    Loading order:
    1. application.yml (required)
    2. application-<profile>.yml for each active profile, in order (optional)

    A missing overlay is skipped silently; a malformed one is logged and
    skipped.

    Raises:
        SourceUnavailableError: If application.yml can't be read
        ConfigParseError: If application.yml is invalid YAML
    """
    base = await load_document(config_dir / APPLICATION_FILE, active_profiles)
    layers = [base]

    for profile in active_profiles:
        try:
            overlay = await _load_profile_overlay(config_dir, profile, active_profiles)
        except ProfileOverlayError as e:
            PROFILE_OVERLAY_ERRORS.labels(profile=profile).inc()
            logger.error(
                "profile_overlay_failed",
                path=str(e.path),
                profile=profile,
                error=e.message,
            )
            continue

        if overlay is not None:
            layers.append(overlay)

    return merge_properties(layers)
