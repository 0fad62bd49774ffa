"""Story tree: chapters of scenes, before and after assembly."""

from dataclasses import dataclass
from typing import Iterator, List, Tuple


# Scene files carry this extension inside the draft directory
MAKINILYA_TEXT_EXTENSION = '.mt'


@dataclass(frozen=True)
class SceneSource:
    """Raw text of one scene as discovered on disk."""
    name: str
    text: str


@dataclass(frozen=True)
class ChapterSource:
    """Ordered scene sources of one chapter."""
    name: str
    scenes: Tuple[SceneSource, ...] = ()


@dataclass(frozen=True)
class Scene:
    """Fully resolved scene text."""
    name: str
    text: str


@dataclass(frozen=True)
class Chapter:
    """Ordered resolved scenes of one chapter."""
    name: str
    scenes: Tuple[Scene, ...] = ()


@dataclass(frozen=True)
class Story:
    """Root of the assembled document, handed to a renderer."""
    chapters: Tuple[Chapter, ...] = ()
    title: str = ''
    pen_name: str = ''

    def scenes(self) -> Iterator[Tuple[Chapter, Scene]]:
        """Iterate (chapter, scene) pairs in document order."""
        for chapter in self.chapters:
            for scene in chapter.scenes:
                yield chapter, scene

    def word_count(self) -> int:
        """Number of whitespace-separated words across all scenes."""
        return sum(len(scene.text.split()) for _, scene in self.scenes())

    def as_tree(self) -> List[Tuple[str, List[Tuple[str, str]]]]:
        """Plain nested-list form: [(chapter, [(scene, text), ...]), ...]."""
        return [
            (chapter.name, [(scene.name, scene.text) for scene in chapter.scenes])
            for chapter in self.chapters
        ]
