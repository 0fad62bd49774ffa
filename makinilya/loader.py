"""Project loader: configuration validation and draft discovery."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from makinilya import defaults
from makinilya.context import Context, PreservingLoader, load_context
from makinilya.exceptions import ConfigValidationError, ProjectError, ValidationError
from makinilya.story import MAKINILYA_TEXT_EXTENSION, ChapterSource, SceneSource


logger = logging.getLogger(__name__)


@dataclass
class ContactInformation:
    """Contact block printed on the title page."""
    name: Optional[str] = None
    address_1: Optional[str] = None
    address_2: Optional[str] = None
    mobile_number: Optional[str] = None
    email_address: Optional[str] = None

    def lines(self) -> List[str]:
        """Non-empty contact fields in display order."""
        values = [self.name, self.address_1, self.address_2, self.mobile_number, self.email_address]
        return [value for value in values if value]


@dataclass
class ProjectConfig:
    """Resolved project configuration with defaults applied."""
    draft_directory: Path = Path(defaults.DRAFT_DIRECTORY)
    context_path: Path = Path(defaults.CONTEXT_PATH)
    output_path: Path = Path(defaults.OUTPUT_PATH)
    title: str = defaults.DEFAULT_TITLE
    pen_name: str = defaults.DEFAULT_PEN_NAME
    author: Optional[ContactInformation] = None
    agent: Optional[ContactInformation] = None


@dataclass
class Project:
    """Everything a build needs, read from one project directory."""
    root: Path
    config: ProjectConfig
    context: Context
    chapters: List[ChapterSource] = field(default_factory=list)

    @property
    def output_path(self) -> Path:
        return self.root / self.config.output_path


class ProjectLoader:
    """Loads and validates a manuscript project directory."""

    KNOWN_SECTIONS = {
        'project': {'draft_directory', 'context_path', 'output_path'},
        'story': {'title', 'pen_name'},
        'author': {'name', 'address_1', 'address_2', 'mobile_number', 'email_address'},
        'agent': {'name', 'address_1', 'address_2', 'mobile_number', 'email_address'},
    }
    PATH_FIELDS = ('draft_directory', 'context_path', 'output_path')

    def __init__(self, root: Path):
        """Initialize loader with the project root."""
        self.root = Path(root).resolve()
        self.errors: List[ValidationError] = []

    def load(self, create_missing: bool = True) -> Project:
        """
        Load configuration, context and draft.

        Args:
            create_missing: Create the draft directory if it does not exist

        Raises:
            ConfigValidationError: If Config.yaml is invalid
            FileNotFoundError: If the context file is missing
            ContextError: If the context file is invalid
            ProjectError: If a scene cannot be read
        """
        config = self.load_config()
        context = load_context(self.root / config.context_path)
        chapters = self.discover(self.root / config.draft_directory, create_missing=create_missing)
        return Project(root=self.root, config=config, context=context, chapters=chapters)

    def load_config(self) -> ProjectConfig:
        """Load and validate Config.yaml; a missing file means all defaults."""
        self.errors = []
        config_path = self.root / defaults.CONFIG_PATH
        if not config_path.exists():
            logger.info(f"No {defaults.CONFIG_PATH} in {self.root}, using defaults")
            return ProjectConfig()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                raw = yaml.load(f, Loader=PreservingLoader)
        except yaml.YAMLError as e:
            self._add_error(f"Failed to load config: {e}")
            self._raise_validation_errors()

        if raw is None:
            return ProjectConfig()
        if not isinstance(raw, dict):
            self._add_error("Config must be a YAML object/dictionary")
            self._raise_validation_errors()

        self._validate(raw)
        if self.errors:
            self._raise_validation_errors()

        return self._build_config(raw)

    def _validate(self, raw: Dict[str, Any]):
        """Validate section names, keys, value types and path safety."""
        for section, values in raw.items():
            if section not in self.KNOWN_SECTIONS:
                self._add_error(f"Unknown section '{section}'", str(section))
                continue
            if values is None:
                continue
            if not isinstance(values, dict):
                self._add_error(f"Section '{section}' must be a dictionary", section)
                continue

            for key, value in values.items():
                location = f"{section}.{key}"
                if key not in self.KNOWN_SECTIONS[section]:
                    self._add_error(f"Unknown field '{key}'", location)
                elif not isinstance(value, str):
                    self._add_error(
                        f"Field must be a string, got {type(value).__name__}", location
                    )
                elif section == 'project' and key in self.PATH_FIELDS:
                    self._validate_path_safety(value, location)

    def _validate_path_safety(self, path: str, location: str):
        """Paths must be relative and stay inside the project."""
        if not path:
            self._add_error("Path cannot be empty", location)
        elif os.path.isabs(path):
            self._add_error(f"Absolute paths not allowed: {path}", location)
        elif '..' in Path(path).parts:
            self._add_error(f"Parent directory traversal not allowed: {path}", location)

    def _build_config(self, raw: Dict[str, Any]) -> ProjectConfig:
        project = raw.get('project') or {}
        story = raw.get('story') or {}
        config = ProjectConfig(
            draft_directory=Path(project.get('draft_directory', defaults.DRAFT_DIRECTORY)),
            context_path=Path(project.get('context_path', defaults.CONTEXT_PATH)),
            output_path=Path(project.get('output_path', defaults.OUTPUT_PATH)),
            title=story.get('title', defaults.DEFAULT_TITLE),
            pen_name=story.get('pen_name', defaults.DEFAULT_PEN_NAME),
        )
        if raw.get('author'):
            config.author = ContactInformation(**raw['author'])
        if raw.get('agent'):
            config.agent = ContactInformation(**raw['agent'])
        return config

    def discover(self, draft_directory: Path, create_missing: bool = True) -> List[ChapterSource]:
        """
        Read chapters and scenes from the draft directory.

        Chapters are sub-directories, scenes are ``.mt`` files inside them.
        Both are ordered lexicographically by name. A missing draft directory
        yields no chapters and is created empty when ``create_missing`` is set.

        Raises:
            ProjectError: If the draft path is not a directory or a scene is not UTF-8
        """
        if not draft_directory.exists():
            if create_missing:
                logger.info(f"Creating empty draft directory: {draft_directory}")
                draft_directory.mkdir(parents=True, exist_ok=True)
            else:
                logger.warning(f"Draft directory not found: {draft_directory}")
            return []
        if not draft_directory.is_dir():
            raise ProjectError(f"Draft path is not a directory: {draft_directory}")

        chapters: List[ChapterSource] = []
        for entry in sorted(draft_directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                chapters.append(self._read_chapter(entry))
            elif entry.suffix == MAKINILYA_TEXT_EXTENSION:
                logger.warning(f"Skipping scene outside of a chapter: {entry.name}")

        logger.debug(f"Discovered {len(chapters)} chapter(s) in {draft_directory}")
        return chapters

    def _read_chapter(self, directory: Path) -> ChapterSource:
        scenes: List[SceneSource] = []
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                logger.warning(f"Skipping nested directory in chapter '{directory.name}': {entry.name}")
                continue
            if entry.suffix != MAKINILYA_TEXT_EXTENSION:
                continue
            try:
                text = entry.read_text(encoding='utf-8')
            except UnicodeDecodeError as e:
                raise ProjectError(f"Scene is not valid UTF-8: {entry}") from e
            scenes.append(SceneSource(name=entry.stem, text=text))
        return ChapterSource(name=directory.name, scenes=tuple(scenes))

    def _add_error(self, message: str, path: str = ""):
        """Add a validation error."""
        self.errors.append(ValidationError(message=message, path=path))

    def _raise_validation_errors(self):
        """Raise validation errors if any exist."""
        if self.errors:
            raise ConfigValidationError(self.errors)
