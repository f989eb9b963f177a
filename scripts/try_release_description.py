#!/usr/bin/env python3
"""Ask the completion API for a release type and description for a local repository."""

import logging
import os
import sys

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from changeset_release.git import RepositoryClient  # noqa: E402
from changeset_release.utils.description_generator import DescriptionGenerator  # noqa: E402


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    repo_path = sys.argv[1] if len(sys.argv) > 1 else project_root
    client = RepositoryClient(repo_path)

    commits = client.read_recent_commits(10)
    package_name = client.read_package_name()

    print(f"Package: {package_name}")
    print(f"Analyzing {len(commits)} commits from {repo_path}")
    print("This will make a real API call to Anthropic's Messages API...")

    generator = DescriptionGenerator()
    release_type = generator.suggest_release_type(commits)
    print(f"🎯 Suggested release type: {release_type}")

    try:
        description = generator.describe_release(package_name, release_type, commits)
        print(f"✅ Description: {description}")
    except Exception as e:
        print(f"❌ Description generation failed: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
