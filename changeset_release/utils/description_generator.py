import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import anthropic

from ..config.settings import DEFAULT_AI_MODEL
from ..models import ReleaseType, normalize_release_type

NO_COMMITS_MARKER = "No recent commits provided."
FALLBACK_RELEASE_TYPE: ReleaseType = "patch"


class CompletionClient(ABC):
    """Single-turn text completion: one prompt in, one text out."""

    @abstractmethod
    def complete(self, model: str, prompt: str) -> str:
        pass


class AnthropicCompletionClient(CompletionClient):
    """Completion client backed by the Anthropic Messages API."""

    def __init__(self, api_key: Optional[str] = None, max_tokens: int = 300):
        self.client = anthropic.Anthropic(
            api_key=api_key
        )  # Uses ANTHROPIC_API_KEY env var if None
        self.max_tokens = max_tokens

    def complete(self, model: str, prompt: str) -> str:
        message = self.client.messages.create(
            model=model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(
            block.text for block in message.content if getattr(block, "type", "text") == "text"
        )


def format_commit_list(recent_commits: List[str]) -> str:
    return "\n".join(f"- {commit}" for commit in recent_commits)


def build_description_prompt(
    package_name: str, release_type: str, recent_commits: List[str]
) -> str:
    commit_context = (
        f"Recent commits:\n{format_commit_list(recent_commits)}"
        if recent_commits
        else NO_COMMITS_MARKER
    )

    return f"""You are writing a changeset description for an npm package release.

Package: {package_name}
Release type: {release_type}

{commit_context}

Write a concise, clear changeset description (1-3 sentences) that describes what changed in this release.
Focus on user-facing changes and benefits. Do not include markdown formatting, bullet points, or headers.
Just write the plain text description."""


def build_release_type_prompt(recent_commits: List[str]) -> str:
    return f"""Analyze these git commits and determine the appropriate semantic version bump:

{format_commit_list(recent_commits)}

Rules:
- "patch" for bug fixes, small changes, documentation
- "minor" for new features that are backwards compatible
- "major" for breaking changes

Respond with ONLY one word: patch, minor, or major"""


class DescriptionGenerator:
    """
    Writes changeset descriptions and suggests release types from commit history.

    The two operations fail differently. ``describe_release`` re-raises any
    completion error so the caller can choose a fallback message or abort.
    ``suggest_release_type`` never raises and degrades to ``"patch"``.
    """

    def __init__(
        self, client: Optional[CompletionClient] = None, model: str = DEFAULT_AI_MODEL
    ):
        self.client = client or AnthropicCompletionClient()
        self.model = model
        self.logger = logging.getLogger(__name__)

    def describe_release(
        self, package_name: str, release_type: str, recent_commits: List[str]
    ) -> str:
        """
        Generate a plain-prose changeset description.

        Args:
            package_name: Name of the package being released
            release_type: patch, minor or major
            recent_commits: Commit summaries, most recent first

        Returns:
            The trimmed description text

        Raises:
            Whatever the completion client raises, unmodified
        """
        self.logger.debug("Generating changeset description with AI...")
        prompt = build_description_prompt(package_name, release_type, recent_commits)

        try:
            text = self.client.complete(self.model, prompt)
        except Exception as e:
            self.logger.warning(f"AI generation failed: {e}")
            raise

        return text.strip()

    def suggest_release_type(self, recent_commits: List[str]) -> ReleaseType:
        """Suggest a semantic version bump, falling back to patch on any doubt."""
        self.logger.debug("Analyzing commits to suggest release type...")

        if not recent_commits:
            return FALLBACK_RELEASE_TYPE

        try:
            text = self.client.complete(self.model, build_release_type_prompt(recent_commits))
        except Exception as e:
            self.logger.warning(f"Release type suggestion failed, using patch: {e}")
            return FALLBACK_RELEASE_TYPE

        suggestion = normalize_release_type(text)
        if suggestion is None:
            self.logger.debug(f"Unrecognized release type suggestion: {text!r}")
            return FALLBACK_RELEASE_TYPE
        return suggestion  # type: ignore[return-value]
