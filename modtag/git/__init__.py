"""Git operations module.

Usage:
    from modtag.git import Repository

    repo = Repository(Path("."))
    match repo.changed_files(base_sha, head_sha):
        case Ok(paths):
            print(paths)
        case Err(error):
            print(error.message)
"""

from modtag.git.repository import (
    GitError,
    Repository,
)

__all__ = [
    "GitError",
    "Repository",
]
