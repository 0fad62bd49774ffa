"""Check command: list placeholders and report every failure."""

import logging
from argparse import Namespace
from pathlib import Path

from makinilya.assembler import StoryAssembler
from makinilya.exceptions import (
    ConfigValidationError,
    ContextError,
    ProjectError,
    TextSyntaxError,
)
from makinilya.loader import ProjectLoader
from makinilya.text.parser import parse, variable_paths


logger = logging.getLogger(__name__)


def check_manuscript(args: Namespace) -> int:
    """Print each scene's placeholder paths, then validate the whole draft."""
    try:
        project_root = Path(args.path)
        if not project_root.is_dir():
            logger.error(f"Project directory not found: {project_root}")
            return 1

        project = ProjectLoader(project_root).load(create_missing=False)

        for chapter in project.chapters:
            for scene in chapter.scenes:
                try:
                    paths = variable_paths(parse(scene.text))
                except TextSyntaxError:
                    # Reported below with the rest of the assembly errors
                    continue
                for path in paths:
                    print(f"{chapter.name}/{scene.name}: {path}")

        result = StoryAssembler(project.context, max_workers=args.jobs).assemble(project.chapters)
        for error in result.errors:
            logger.error(str(error))

        if result.is_valid:
            logger.info("Check passed: all placeholders resolved")
            return 0
        return 2

    except ConfigValidationError as e:
        for error in e.errors:
            logger.error(f"Validation error: {error.message} ({error.path})")
        return e.exit_code
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except (ContextError, ProjectError) as e:
        logger.error(str(e))
        return 2
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
