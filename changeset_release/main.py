"""Main entry point for the changeset-release CLI."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__
from .config.repo_loader import RepoConfigLoader
from .config.settings import DEFAULT_COMMIT_COUNT, ReleaseSettings, get_clone_url
from .errors import GitCommandError, ReleaseError
from .models import RELEASE_TYPES, ReleaseRequest, ReleaseResult, RepoConfig
from .release.coordinator import ReleaseCoordinator

load_dotenv(override=True)


def resolve_repo_config(
    repo: str, clone_url: Optional[str] = None, config_path: Optional[str] = None
) -> RepoConfig:
    """Resolve a repository from the CLI: explicit URL -> registry file -> env."""
    if clone_url:
        return RepoConfig(repo=repo, clone_url=clone_url)

    if config_path:
        return RepoConfigLoader(Path(config_path)).load(repo)

    env_url = get_clone_url()
    if not env_url:
        raise ValueError(
            f"No clone URL for '{repo}': pass --clone-url, --config or set GIT_REPOSITORY_URL"
        )
    return RepoConfig(repo=repo, clone_url=env_url)


def format_release_output(result: ReleaseResult) -> str:
    """Format a successful release for display."""
    type_note = " 🤖" if result.ai_suggested_type else ""
    message_note = " 🤖" if result.ai_generated_message else ""

    output = [
        f"✅ Released {result.package_name} (was {result.package_version})",
        f"  🌿 Branch: {result.branch_name}",
        f"  📦 Release type: {result.release_type}{type_note}",
        f"  📝 Changeset: {result.changeset_id}",
        f"  🔖 Commit: {result.commit_sha}",
        f"  💬 Message{message_note}: {result.message}",
    ]
    return "\n".join(output)


def build_parser(settings: ReleaseSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Create a release branch with a changeset and push it"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--repo", "-r", required=True, help="Repository identifier")
    parser.add_argument("--clone-url", help="Git URL to clone (overrides --config)")
    parser.add_argument(
        "--config", "-c", help="Path to repository configuration YAML file"
    )
    parser.add_argument(
        "--branch", "-b", help="Release branch name (default: release-<repo>)"
    )
    parser.add_argument(
        "--type", "-t", choices=RELEASE_TYPES, help="Release type (default: AI or patch)"
    )
    parser.add_argument("--message", "-m", help="Changeset message")
    parser.add_argument(
        "--fallback-message",
        help="Changeset message to use if AI description generation fails",
    )
    parser.add_argument(
        "--commit-message", help="Commit message (default: 'Release <package>')"
    )
    parser.add_argument(
        "--ai",
        action=argparse.BooleanOptionalAction,
        default=settings.ai.enabled,
        help="Use AI to suggest the release type and write the message",
    )
    parser.add_argument(
        "--commits",
        type=int,
        default=DEFAULT_COMMIT_COUNT,
        help="Number of recent commits to give the AI",
    )
    parser.add_argument("--temp-dir", help="Directory to create workspaces in")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    settings = ReleaseSettings.from_env()
    args = build_parser(settings).parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if args.temp_dir:
        settings = ReleaseSettings.from_env(args.temp_dir)

    print("📦 Changeset Release")
    print("=" * 50)

    try:
        repo_config = resolve_repo_config(args.repo, args.clone_url, args.config)
        request = ReleaseRequest(
            repo_config=repo_config,
            branch_name=args.branch or f"release-{repo_config.repo}",
            release_type=args.type,
            message=args.message,
            fallback_message=args.fallback_message,
            commit_message=args.commit_message,
            use_ai=args.ai,
            commit_count=args.commits,
        )

        print(f"📍 Target repository: {repo_config.clone_url}")
        result = ReleaseCoordinator(settings=settings).run(request)
        print(format_release_output(result))
        return 0

    except GitCommandError as e:
        print(f"❌ Git operation failed: {e}")
        if args.verbose and e.command:
            print(f"   Command: {' '.join(e.command)}")
        return 1
    except ReleaseError as e:
        print(f"❌ Release failed: {e}")
        return 1
    except Exception as e:
        print(f"Critical Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
