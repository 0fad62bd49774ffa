"""Plain-text manuscript renderer."""

import logging
from pathlib import Path
from typing import List, Optional

from makinilya.loader import ProjectConfig
from makinilya.story import Story


logger = logging.getLogger(__name__)

SCENE_BREAK = '#'
PAGE_WIDTH = 72


def render_text(story: Story, config: Optional[ProjectConfig] = None) -> str:
    """
    Render a story as a plain-text manuscript.

    Layout: contact block and word count, centered title and pen name, then
    each chapter heading followed by its scenes. Scenes inside a chapter are
    separated by a centered '#'.
    """
    config = config or ProjectConfig()
    title = story.title or config.title
    pen_name = story.pen_name or config.pen_name

    lines: List[str] = []
    if config.author:
        lines.extend(config.author.lines())
    lines.append(f"{story.word_count():,} words")
    lines.extend(['', '', title.center(PAGE_WIDTH).rstrip(), f"by {pen_name}".center(PAGE_WIDTH).rstrip()])
    if config.agent:
        lines.extend(['', 'Represented by:'])
        lines.extend(config.agent.lines())

    for chapter in story.chapters:
        lines.extend(['', '', chapter.name.center(PAGE_WIDTH).rstrip(), ''])
        for index, scene in enumerate(chapter.scenes):
            if index > 0:
                lines.extend(['', SCENE_BREAK.center(PAGE_WIDTH).rstrip(), ''])
            lines.extend(scene.text.rstrip('\n').split('\n'))

    return '\n'.join(lines) + '\n'


def write_manuscript(text: str, output_path: Path) -> Path:
    """Write rendered text as UTF-8, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding='utf-8')
    logger.info(f"Wrote manuscript: {output_path}")
    return output_path
