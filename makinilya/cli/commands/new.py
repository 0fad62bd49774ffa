"""New command: scaffold a project directory."""

import logging
from argparse import Namespace
from pathlib import Path

from makinilya import defaults


logger = logging.getLogger(__name__)


def new_project(args: Namespace) -> int:
    """Write Config.yaml, Context.yaml and one example scene under ``args.path``."""
    base_directory = Path(args.path)
    config_path = base_directory / defaults.CONFIG_PATH
    if config_path.exists():
        logger.error(f"Project already exists: {config_path}")
        return 1

    chapter_directory = base_directory / defaults.DRAFT_DIRECTORY / defaults.EXAMPLE_CHAPTER
    try:
        chapter_directory.mkdir(parents=True, exist_ok=True)
        (chapter_directory / defaults.EXAMPLE_SCENE_NAME).write_text(defaults.EXAMPLE_SCENE, encoding='utf-8')
        (base_directory / defaults.CONTEXT_PATH).write_text(defaults.EXAMPLE_CONTEXT, encoding='utf-8')
        config_path.write_text(defaults.EXAMPLE_CONFIG, encoding='utf-8')
    except OSError as e:
        logger.error(f"Failed to create project: {e}")
        return 1

    logger.info(f"Created new project in {base_directory}")
    return 0
