"""Build command implementation."""

import logging
from argparse import Namespace
from pathlib import Path

from makinilya.assembler import StoryAssembler
from makinilya.exceptions import ConfigValidationError, ContextError, ProjectError
from makinilya.loader import ProjectLoader
from makinilya.render import render_text, write_manuscript


logger = logging.getLogger(__name__)


def build_manuscript(args: Namespace) -> int:
    """
    Build the manuscript for the project at ``args.path``.

    Exit codes: 0 success, 1 I/O or unexpected error, 2 configuration,
    syntax or resolution errors.
    """
    try:
        project_root = Path(args.path)
        if not project_root.is_dir():
            logger.error(f"Project directory not found: {project_root}")
            return 1

        logger.info(f"Loading project: {project_root.resolve()}")
        project = ProjectLoader(project_root).load()

        assembler = StoryAssembler(project.context, max_workers=args.jobs)
        result = assembler.assemble(
            project.chapters,
            title=project.config.title,
            pen_name=project.config.pen_name
        )

        for error in result.errors:
            logger.error(str(error))

        if not result.is_valid and not args.best_effort:
            logger.error(f"Build failed with {len(result.errors)} error(s); nothing written")
            return 2

        output_path = Path(args.output) if args.output else project.output_path
        write_manuscript(render_text(result.story, project.config), output_path)

        return 0 if result.is_valid else 2

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
