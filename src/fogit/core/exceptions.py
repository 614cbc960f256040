from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence


class FogitError(Exception):
    """Base exception for fogit."""

    #: Stable machine-readable code used by the CLI in ``--json`` mode.
    code: str = "error"

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.code,
            "context": self.context,
        }


class ConfigError(FogitError, ValueError):
    """Raised when configuration is missing, malformed or fails validation."""

    code = "config_error"

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FogitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class BranchPolicyError(FogitError, ValueError):
    """Raised for invalid branch flag combinations."""

    code = "invalid_branch_flags"

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FogitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class FeatureNotFoundError(FogitError, FileNotFoundError):
    """Raised when no feature matches an identifier.

    ``suggestions`` holds fuzzy matches (possibly empty) that a caller may
    offer to the user.
    """

    code = "feature_not_found"

    def __init__(
        self,
        message: str = "",
        *,
        identifier: Optional[str] = None,
        suggestions: Optional[Sequence[Any]] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if identifier is not None:
            ctx["identifier"] = identifier
        FogitError.__init__(self, message, context=ctx)
        FileNotFoundError.__init__(self, message)
        self.identifier = identifier
        self.suggestions: List[Any] = list(suggestions or [])


class AmbiguousFeatureError(FogitError, LookupError):
    """Raised when a name matches more than one feature."""

    code = "ambiguous_feature"

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FogitError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class FeatureStateError(FogitError, ValueError):
    """Raised when a feature is in the wrong lifecycle state for an operation."""

    code = "invalid_feature_state"

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FogitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class RelationshipError(FogitError, ValueError):
    """Raised when a relationship is invalid, duplicated or would form a cycle."""

    code = "invalid_relationship"

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FogitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ClosedFeatureError(FeatureStateError):
    """Raised when switching to a closed feature."""

    code = "feature_closed"


class RemoteOnlyFeatureError(FogitError):
    """Raised when a feature only exists on a remote branch."""

    code = "feature_on_remote"


class NoActiveFeatureError(FogitError):
    """Raised when no open feature is bound to the current branch."""

    code = "no_active_feature"


class GitError(FogitError, RuntimeError):
    """Raised when a git invocation fails."""

    code = "git_error"

    def __init__(
        self,
        message: str = "",
        *,
        args: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if args is not None:
            ctx["args"] = list(args)
        if returncode is not None:
            ctx["returncode"] = returncode
        if stderr:
            ctx["stderr"] = stderr.strip()
        FogitError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)


class NotAGitRepositoryError(GitError):
    """Raised when the working directory is not inside a git repository."""

    code = "not_a_git_repository"


class BranchExistsError(GitError):
    """Raised when creating a branch that already exists."""

    code = "branch_exists"


class EmptyRepositoryError(GitError):
    """Raised when an operation needs at least one commit."""

    code = "empty_repository"


class NothingToCommitError(GitError):
    """Raised by the git layer when a commit would be empty."""

    code = "nothing_to_commit"


class MergeConflictError(GitError):
    """Raised by the git layer when a merge stops on conflicts."""

    code = "merge_conflict"

    def __init__(
        self,
        message: str = "",
        *,
        conflict_files: Optional[Sequence[str]] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context=context)
        self.conflict_files: List[str] = list(conflict_files or [])


class UncommittedChangesError(FogitError):
    """Raised when the working tree must be clean."""

    code = "uncommitted_changes"


class TargetBranchMissingError(FogitError):
    """Raised when the merge target branch does not exist."""

    code = "target_branch_missing"


class MergeInProgressError(FogitError):
    """Raised when a new merge starts while a conflicted one is pending."""

    code = "merge_in_progress"


class NoMergeInProgressError(FogitError):
    """Raised by continue/abort when there is nothing to resume."""

    code = "no_merge_in_progress"


class ConflictsRemainingError(FogitError):
    """Raised by continue while unresolved conflicts are still present."""

    code = "conflicts_remaining"

    def __init__(
        self,
        message: str = "",
        *,
        conflict_files: Optional[Sequence[str]] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if conflict_files:
            ctx["conflict_files"] = list(conflict_files)
        super().__init__(message, context=ctx)
        self.conflict_files: List[str] = list(conflict_files or [])


class MergeFailedError(FogitError, RuntimeError):
    """Raised when a merge fails for a reason other than conflicts."""

    code = "merge_failed"

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FogitError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


__all__ = [
    "FogitError",
    "ConfigError",
    "BranchPolicyError",
    "FeatureNotFoundError",
    "AmbiguousFeatureError",
    "FeatureStateError",
    "ClosedFeatureError",
    "RelationshipError",
    "RemoteOnlyFeatureError",
    "NoActiveFeatureError",
    "GitError",
    "NotAGitRepositoryError",
    "BranchExistsError",
    "EmptyRepositoryError",
    "NothingToCommitError",
    "MergeConflictError",
    "UncommittedChangesError",
    "TargetBranchMissingError",
    "MergeInProgressError",
    "NoMergeInProgressError",
    "ConflictsRemainingError",
    "MergeFailedError",
]
