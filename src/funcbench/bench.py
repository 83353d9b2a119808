"""Running Go benchmarks on the current tree and on the comparison target."""

import os
import subprocess
import tempfile
from typing import Callable, List

import structlog
from git.exc import BadName, GitError

from .benchcmp import BenchCmp, correlate, parse_benchmarks
from .env import Environment
from .errors import BenchmarkError


logger = structlog.get_logger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


class Benchmarker:
    """Benchmarks the environment's tree against its comparison target."""

    def __init__(
        self,
        result_cache: str,
        bench_time: str = "1s",
        timeout: str = "2h",
        package_path: str = "./...",
        runner: Runner = subprocess.run,
    ):
        self.result_cache = result_cache
        self.bench_time = bench_time
        self.timeout = timeout
        self.package_path = package_path
        self._run = runner

    def bench_command(self, bench_func: str) -> List[str]:
        return [
            "go", "test",
            "-run", "^$",
            "-bench", bench_func,
            "-benchmem",
            "-benchtime", self.bench_time,
            "-timeout", self.timeout,
            self.package_path,
        ]

    def exec_benchmark(self, workdir: str, bench_func: str) -> str:
        """Run the benchmarks in ``workdir`` and return go test's output."""
        cmd = self.bench_command(bench_func)
        logger.info("Running benchmarks", workdir=workdir, command=" ".join(cmd))
        try:
            result = self._run(cmd, cwd=workdir, capture_output=True, text=True)
        except OSError as e:
            raise BenchmarkError(f"running {cmd[0]}: {e}") from e

        if result.returncode != 0:
            output = (result.stdout or "") + (result.stderr or "")
            logger.debug("Benchmark command output", output=output)
            raise BenchmarkError(
                f"benchmark command failed with exit code {result.returncode}",
                output=output,
            )
        return result.stdout

    def _resolve_target(self, env: Environment) -> str:
        repo = env.repo
        target = env.compare_target
        try:
            return repo.commit(target).hexsha
        except (BadName, ValueError, GitError):
            pass

        # Shallow clones only hold the default branch; fetch the target.
        try:
            repo.remotes.origin.fetch(target, depth=1)
            return repo.commit("FETCH_HEAD").hexsha
        except (AttributeError, IndexError, BadName, ValueError, GitError) as e:
            raise BenchmarkError(f"resolving compare target {target}: {e}") from e

    def _save_result(self, name: str, output: str) -> str:
        os.makedirs(self.result_cache, exist_ok=True)
        path = os.path.join(self.result_cache, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(output)
        return path

    def _remove_worktree(self, env: Environment, worktree: str) -> None:
        try:
            env.repo.git.worktree("remove", "--force", worktree)
        except GitError as e:
            raise BenchmarkError(f"removing worktree for {env.compare_target}: {e}") from e

    def compare_to_target(self, env: Environment) -> List[BenchCmp]:
        """Benchmark the compare target and the current tree and pair the results."""
        if env.compare_target == ".":
            raise BenchmarkError("comparing sub-benchmarks of a single run is not supported")

        target_sha = self._resolve_target(env)
        repo = env.repo

        with tempfile.TemporaryDirectory(prefix="funcbench-") as tmp:
            worktree = os.path.join(tmp, "target")
            try:
                repo.git.worktree("add", "--detach", worktree, target_sha)
            except GitError as e:
                raise BenchmarkError(f"adding worktree for {env.compare_target}: {e}") from e

            try:
                old_out = self.exec_benchmark(worktree, env.bench_func)
            except BenchmarkError:
                try:
                    self._remove_worktree(env, worktree)
                except BenchmarkError as e:
                    logger.warning("Failed to remove worktree", worktree=worktree, error=str(e))
                raise
            self._remove_worktree(env, worktree)

        new_out = self.exec_benchmark(repo.working_tree_dir, env.bench_func)

        self._save_result(f"{target_sha}.txt", old_out)
        self._save_result("current.txt", new_out)

        cmps = correlate(parse_benchmarks(old_out), parse_benchmarks(new_out))
        if not cmps:
            raise BenchmarkError(
                f"no benchmarks matching {env.bench_func!r} to compare against {env.compare_target}"
            )
        logger.info("Compared benchmarks", count=len(cmps), compare_target=env.compare_target)
        return cmps
