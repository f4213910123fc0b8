"""Tests for branch selection and linked worktree creation."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from grm import worktrees
from grm.exceptions import (
    NoCurrentRepositoryError,
    NoMatchingBranchError,
    UnmanagedRepositoryError,
    ValidationError,
)
from grm.git import local_branches as git_branches

from .helpers import HAS_GIT, git, make_repo, make_runtime


class SelectBranchTests(unittest.TestCase):
    def test_prefers_most_segments_then_longest(self) -> None:
        branches = ["main", "api", "fix-api", "feature/api", "feature/api-v2", "user/x/api"]

        self.assertEqual(worktrees.select_branch(branches, "api"), "user/x/api")

    def test_longest_wins_within_same_depth(self) -> None:
        branches = ["feature/api", "feature/api-v2"]

        self.assertEqual(worktrees.select_branch(branches, "api"), "feature/api-v2")

    def test_exact_single_match(self) -> None:
        self.assertEqual(worktrees.select_branch(["main", "develop"], "dev"), "develop")

    def test_length_counts_utf8_bytes(self) -> None:
        branches = ["x/abcdefg", "x/\u00e9\u00e9\u00e9\u00e9"]

        self.assertEqual(worktrees.select_branch(branches, "x/"), "x/\u00e9\u00e9\u00e9\u00e9")

    def test_no_match_raises(self) -> None:
        with self.assertRaises(NoMatchingBranchError):
            worktrees.select_branch(["main"], "release")


class PlanWorktreeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.root = Path("/srv/grm")
        self.repo = self.root / "github.com/foo/bar"

    def test_plan_uses_matched_branch(self) -> None:
        runtime = make_runtime(self.root, repository=self.repo)
        with mock.patch("grm.worktrees.git.local_branches", return_value=["main", "feature/login"]), mock.patch(
            "grm.worktrees.git.main_worktree", return_value=self.repo
        ):
            plan = worktrees.plan_worktree(runtime, "login")

        self.assertEqual(plan.branch, "feature/login")
        self.assertEqual(plan.path, self.root / "worktrees/github.com/foo/bar/feature/login")
        self.assertEqual(plan.name, "feature__login")
        self.assertFalse(plan.create_branch)

    def test_plan_resolves_main_worktree_from_linked_worktree(self) -> None:
        linked = self.root / "worktrees/github.com/foo/bar/main"
        runtime = make_runtime(self.root, repository=linked)
        with mock.patch("grm.worktrees.git.local_branches", return_value=["main", "topic"]), mock.patch(
            "grm.worktrees.git.main_worktree", return_value=self.repo
        ) as main_worktree:
            plan = worktrees.plan_worktree(runtime, "topic")

        main_worktree.assert_called_once_with(linked)
        self.assertEqual(plan.path, self.root / "worktrees/github.com/foo/bar/topic")

    def test_raw_name_creates_missing_branch(self) -> None:
        runtime = make_runtime(self.root, repository=self.repo)
        with mock.patch("grm.worktrees.git.local_branches", return_value=["main"]), mock.patch(
            "grm.worktrees.git.main_worktree", return_value=self.repo
        ):
            plan = worktrees.plan_worktree(runtime, "ma", raw=True)

        self.assertEqual(plan.branch, "ma")
        self.assertTrue(plan.create_branch)

    def test_unmanaged_repository(self) -> None:
        runtime = make_runtime(self.root, repository=Path("/home/me/src/bar"))
        with mock.patch("grm.worktrees.git.local_branches", return_value=["main"]), mock.patch(
            "grm.worktrees.git.main_worktree", return_value=Path("/home/me/src/bar")
        ):
            with self.assertRaises(UnmanagedRepositoryError):
                worktrees.plan_worktree(runtime, "main")

    def test_requires_current_repository(self) -> None:
        with self.assertRaises(NoCurrentRepositoryError):
            worktrees.plan_worktree(make_runtime(self.root), "main")


@unittest.skipUnless(HAS_GIT, "git is not installed")
class CreateWorktreeGitTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.repo = make_repo(self.root / "github.com/foo/bar", "feature/login", "topic")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_nested_branch_keeps_single_segment_name(self) -> None:
        runtime = make_runtime(self.root, repository=self.repo)
        plan = worktrees.plan_worktree(runtime, "login")
        target = worktrees.create_worktree(runtime, plan)

        self.assertEqual(target, self.root / "worktrees/github.com/foo/bar/feature/login")
        self.assertTrue((target / ".git").is_file())
        self.assertTrue((self.repo / ".git/worktrees/feature__login").is_dir())
        self.assertFalse((target.parent / "feature__login").exists())
        self.assertEqual(git("rev-parse", "--abbrev-ref", "HEAD", cwd=target).strip(), "feature/login")

    def test_worktree_of_worktree_resolves_main_copy(self) -> None:
        runtime = make_runtime(self.root, repository=self.repo)
        first = worktrees.create_worktree(runtime, worktrees.plan_worktree(runtime, "topic"))

        nested_runtime = make_runtime(self.root, repository=first)
        plan = worktrees.plan_worktree(nested_runtime, "login")

        self.assertEqual(plan.path, self.root / "worktrees/github.com/foo/bar/feature/login")

    def test_branch_shadowed_by_tag_keeps_its_name(self) -> None:
        git("branch", "release", cwd=self.repo)
        git("tag", "release", cwd=self.repo)
        runtime = make_runtime(self.root, repository=self.repo)

        self.assertIn("release", git_branches(self.repo))
        plan = worktrees.plan_worktree(runtime, "release")
        target = worktrees.create_worktree(runtime, plan)

        self.assertEqual(plan.branch, "release")
        self.assertEqual(plan.name, "release")
        self.assertEqual(target, self.root / "worktrees/github.com/foo/bar/release")
        self.assertEqual(git("symbolic-ref", "HEAD", cwd=target).strip(), "refs/heads/release")

    def test_existing_non_empty_directory_is_rejected(self) -> None:
        runtime = make_runtime(self.root, repository=self.repo)
        plan = worktrees.plan_worktree(runtime, "topic")
        plan.path.mkdir(parents=True)
        (plan.path / "keep.txt").write_text("data")

        with self.assertRaises(ValidationError):
            worktrees.create_worktree(runtime, plan)

    def test_empty_directory_is_replaced(self) -> None:
        runtime = make_runtime(self.root, repository=self.repo)
        plan = worktrees.plan_worktree(runtime, "topic")
        plan.path.mkdir(parents=True)

        target = worktrees.create_worktree(runtime, plan)

        self.assertTrue((target / ".git").is_file())


if __name__ == "__main__":
    unittest.main()
