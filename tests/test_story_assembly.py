"""Tests for story assembly: ordering, error accumulation, parallel workers."""

import pytest

from makinilya.assembler import AssemblyResult, StoryAssembler, build_story
from makinilya.context import Context
from makinilya.exceptions import ContextError, StoryAssemblyError
from makinilya.story import ChapterSource, SceneSource, Story


@pytest.fixture
def context():
    return Context.from_mapping({'a': {'b': 'X'}, 'names': {'mc': 'Core'}, 'age': 21})


def chapter(name, *scenes):
    return ChapterSource(name=name, scenes=tuple(SceneSource(n, t) for n, t in scenes))


class TestAssembly:
    """Sequential assembly."""

    def test_resolves_every_scene_in_order(self, context):
        chapters = [
            chapter("Chapter 1", ("Scene 1", "Hi, I am {{ names.mc }}."), ("Scene 2", "Age {{ age }}")),
            chapter("Chapter 2", ("Scene 1", "{{ a.b }}")),
        ]

        result = StoryAssembler(context).assemble(chapters, title="T", pen_name="P")

        assert isinstance(result, AssemblyResult)
        assert result.is_valid
        assert result.story.as_tree() == [
            ("Chapter 1", [("Scene 1", "Hi, I am Core."), ("Scene 2", "Age 21")]),
            ("Chapter 2", [("Scene 1", "X")]),
        ]
        assert result.story.title == "T"
        assert result.story.pen_name == "P"

    def test_one_bad_scene_does_not_hide_siblings(self, context):
        chapters = [chapter("Chapter 1", ("good", "{{ a.b }}"), ("bad", "{{ a.c }}"))]

        result = StoryAssembler(context).assemble(chapters)

        assert not result.is_valid
        assert len(result.errors) == 1
        error = result.errors[0]
        assert (error.chapter, error.scene, error.kind, error.path) == ("Chapter 1", "bad", "not_found", "a.c")
        assert result.story.as_tree() == [("Chapter 1", [("good", "X"), ("bad", "{{ a.c }}")])]

    def test_all_errors_reported_in_source_order(self, context):
        chapters = [
            chapter("c1", ("s1", "{{ a.b.c }} and {{ a }}")),
            chapter("c2", ("s1", "Hello {{ a.b"), ("s2", "{{ missing }}")),
        ]

        result = StoryAssembler(context).assemble(chapters)

        assert [(e.chapter, e.scene, e.kind) for e in result.errors] == [
            ("c1", "s1", "not_indexable"),
            ("c1", "s1", "not_scalar"),
            ("c2", "s1", "syntax"),
            ("c2", "s2", "not_found"),
        ]

    def test_syntax_error_keeps_raw_text(self, context):
        result = StoryAssembler(context).assemble([chapter("c", ("s", "Hello {{ a.b"))])

        error = result.errors[0]
        assert error.kind == 'syntax'
        assert error.offset == 6
        assert error.path == "{{ a.b"
        assert result.story.chapters[0].scenes[0].text == "Hello {{ a.b"

    def test_syntax_error_independent_of_context(self):
        result = StoryAssembler(Context.from_mapping({})).assemble([chapter("c", ("s", "Hello {{ a.b"))])
        assert [e.kind for e in result.errors] == ['syntax']

    def test_empty_chapters(self, context):
        result = StoryAssembler(context).assemble([chapter("empty"), chapter("also empty")])
        assert result.is_valid
        assert [c.name for c in result.story.chapters] == ["empty", "also empty"]

    def test_error_string_mentions_location(self, context):
        result = StoryAssembler(context).assemble([chapter("c1", ("s1", "{{ a.c }}"))])
        assert "[not_found] c1/s1@0" in str(result.errors[0])


class TestParallelAssembly:
    """Thread-pool assembly keeps discovery order."""

    def test_order_preserved_with_workers(self, context):
        chapters = [
            chapter(f"Chapter {c}", *[(f"Scene {s}", f"{c}-{s} {{{{ a.b }}}}") for s in range(20)])
            for c in range(5)
        ]

        sequential = StoryAssembler(context).assemble(chapters)
        parallel = StoryAssembler(context, max_workers=8).assemble(chapters)

        assert parallel.story == sequential.story
        assert parallel.story.chapters[3].scenes[7].text == "3-7 X"

    def test_errors_ordered_with_workers(self, context):
        chapters = [chapter("c", *[(f"s{i}", "{{ nope }}" if i % 2 else "ok") for i in range(10)])]

        result = StoryAssembler(context, max_workers=4).assemble(chapters)

        assert [e.scene for e in result.errors] == ["s1", "s3", "s5", "s7", "s9"]


class TestBuildStory:
    """All-or-nothing wrapper."""

    def test_returns_story_when_valid(self, context):
        story = build_story([chapter("c", ("s", "{{ names.mc }}"))], context)
        assert isinstance(story, Story)
        assert story.chapters[0].scenes[0].text == "Core"

    def test_raises_with_full_error_list(self, context):
        chapters = [chapter("c", ("s1", "{{ a.c }}"), ("s2", "{{ a.b }}"), ("s3", "{{ 1x }}"))]

        with pytest.raises(StoryAssemblyError) as exc_info:
            build_story(chapters, context)

        error = exc_info.value
        assert error.exit_code == 2
        assert [e.scene for e in error.errors] == ["s1", "s3"]
        assert error.story.chapters[0].scenes[1].text == "X"

    def test_word_count(self, context):
        story = build_story([chapter("c", ("s1", "one two"), ("s2", "three\nfour  five"))], context)
        assert story.word_count() == 5


class TestPlainMappingContext:
    """Plain mappings are validated before any scene is processed."""

    def test_plain_mapping_accepted(self):
        result = StoryAssembler({'a': {'b': 'X'}}).assemble([chapter("c", ("s", "{{ a.b }}"))])
        assert result.story.chapters[0].scenes[0].text == "X"

    def test_unsupported_leaf_rejected_up_front(self):
        with pytest.raises(ContextError) as exc_info:
            StoryAssembler({'a': 'A', 'n': None})
        assert "'n'" in str(exc_info.value)

    def test_build_story_rejects_unsupported_leaf(self):
        chapters = [chapter("c", ("ok", "x {{ a }}"), ("bad", "{{ n }}"))]
        with pytest.raises(ContextError):
            build_story(chapters, {'a': 'A', 'n': None})
