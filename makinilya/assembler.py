"""Story assembly: parse and resolve every scene, collecting all failures."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from makinilya.context import Context
from makinilya.exceptions import AssemblyError, StoryAssemblyError, TextSyntaxError
from makinilya.story import Chapter, ChapterSource, Scene, SceneSource, Story
from makinilya.text.parser import parse
from makinilya.variables.resolver import ContextResolver


logger = logging.getLogger(__name__)


@dataclass
class AssemblyResult:
    """Results of story assembly."""
    story: Story
    errors: List[AssemblyError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True if every scene parsed and resolved."""
        return len(self.errors) == 0


class StoryAssembler:
    """Builds a Story from chapter sources and one shared context."""

    def __init__(
        self,
        context: Union[Context, Mapping[str, Any]],
        max_workers: Optional[int] = None
    ):
        """
        Initialize assembler.

        Args:
            context: Context root shared by every scene
            max_workers: Scene worker threads; None or 1 processes scenes inline
        """
        self.resolver = ContextResolver(context)
        self.max_workers = max_workers

    def assemble(
        self,
        chapters: Sequence[ChapterSource],
        title: str = '',
        pen_name: str = ''
    ) -> AssemblyResult:
        """
        Parse and resolve every scene, keeping source order.

        A failing scene does not stop its siblings. It is still part of the
        returned story with best-effort text: unresolved placeholders keep
        their markers, and a scene with a syntax error keeps its raw text.

        Args:
            chapters: Chapters in the order they should appear
            title: Story title for the renderer
            pen_name: Author pen name for the renderer

        Returns:
            AssemblyResult with the story and every error in source order
        """
        jobs: List[Tuple[str, SceneSource]] = [
            (chapter.name, scene) for chapter in chapters for scene in chapter.scenes
        ]
        logger.debug(f"Assembling {len(jobs)} scene(s) in {len(chapters)} chapter(s)")

        if self.max_workers and self.max_workers > 1 and len(jobs) > 1:
            # map() yields results in submission order, not completion order
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(lambda job: self._process_scene(*job), jobs))
        else:
            outcomes = [self._process_scene(chapter_name, scene) for chapter_name, scene in jobs]

        errors: List[AssemblyError] = []
        built_chapters: List[Chapter] = []
        index = 0
        for chapter in chapters:
            scenes: List[Scene] = []
            for _ in chapter.scenes:
                scene, scene_errors = outcomes[index]
                scenes.append(scene)
                errors.extend(scene_errors)
                index += 1
            built_chapters.append(Chapter(name=chapter.name, scenes=tuple(scenes)))

        story = Story(chapters=tuple(built_chapters), title=title, pen_name=pen_name)
        if errors:
            logger.debug(f"Assembly finished with {len(errors)} error(s)")
        return AssemblyResult(story=story, errors=errors)

    def _process_scene(
        self,
        chapter_name: str,
        source: SceneSource
    ) -> Tuple[Scene, List[AssemblyError]]:
        """Parse and resolve one scene; failures are returned, never raised."""
        try:
            expressions = parse(source.text)
        except TextSyntaxError as e:
            logger.debug(f"Syntax error in {chapter_name}/{source.name}: {e}")
            return Scene(source.name, source.text), [AssemblyError(
                chapter=chapter_name,
                scene=source.name,
                kind='syntax',
                detail=str(e),
                path=e.excerpt,
                offset=e.offset
            )]

        text, resolve_errors = self.resolver.interpolate(expressions)
        errors = [
            AssemblyError(
                chapter=chapter_name,
                scene=source.name,
                kind=error.kind,
                detail=error.message,
                path=error.path,
                offset=error.offset
            )
            for error in resolve_errors
        ]
        return Scene(source.name, text), errors


def build_story(
    chapters: Sequence[ChapterSource],
    context: Union[Context, Mapping[str, Any]],
    max_workers: Optional[int] = None,
    title: str = '',
    pen_name: str = ''
) -> Story:
    """
    Assemble a story, failing if any scene failed.

    Raises:
        StoryAssemblyError: With the complete error list and best-effort story
    """
    result = StoryAssembler(context, max_workers=max_workers).assemble(
        chapters, title=title, pen_name=pen_name
    )
    if not result.is_valid:
        raise StoryAssemblyError(result.errors, story=result.story)
    return result.story
