"""Skill metadata model with SKILL.md front matter parsing."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from agentsync.config.defaults import SKILL_FILE
from agentsync.utils.validation import ParseResult, parse_model

# YAML front matter between --- markers at the top of the file
_FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)


class SkillMetadata(BaseModel):
    """Front matter of a SKILL.md descriptor."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(min_length=1, max_length=128, description="Skill name")
    description: str = Field(min_length=1, description="What the skill does")
    allowed_tools: Optional[list[str]] = Field(default=None, alias="allowed-tools")
    model: Optional[str] = None

    @field_validator("name", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


def extract_frontmatter(content: str) -> Optional[Any]:
    """Extract and parse the YAML front matter of a markdown document.

    Args:
        content: Markdown text

    Returns:
        Parsed YAML value, or None if there is no front matter block

    Raises:
        yaml.YAMLError: If the block is not valid YAML
    """
    match = _FRONTMATTER_PATTERN.match(content)
    if not match:
        return None
    return yaml.safe_load(match.group(1))


def parse_skill_metadata(content: str) -> ParseResult[SkillMetadata]:
    """Validate the front matter of SKILL.md text.

    Args:
        content: SKILL.md text

    Returns:
        ParseResult holding SkillMetadata or the problems found
    """
    try:
        data = extract_frontmatter(content)
    except yaml.YAMLError as e:
        return ParseResult.failure(f"invalid YAML front matter: {e}")

    if data is None:
        return ParseResult.failure("missing YAML front matter")
    if not isinstance(data, dict):
        return ParseResult.failure("front matter must be a mapping")
    return parse_model(SkillMetadata, data)


def validate_skill(skill_dir: Path) -> ParseResult[SkillMetadata]:
    """Validate a skill directory.

    Args:
        skill_dir: Path to the skill directory

    Returns:
        ParseResult holding SkillMetadata or the problems found
    """
    skill_md = skill_dir / SKILL_FILE
    if not skill_md.is_file():
        return ParseResult.failure(f"{SKILL_FILE} not found")

    try:
        content = skill_md.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return ParseResult.failure(f"cannot read {SKILL_FILE}: {e}")

    return parse_skill_metadata(content)
