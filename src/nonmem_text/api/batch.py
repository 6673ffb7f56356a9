"""
Concurrent parsing of many NONMEM output files.

Parse calls share no state, so they run independently in a
concurrent.futures pool. Each worker returns a plain result dictionary;
aggregation happens in the calling process.

Usage:
    result = parse_many(Path('runs').glob('*.lst'), max_workers=8)
    for path, report in result.results.items():
        print(path, report.objective_function_value)
    for path, error in result.failures.items():
        print(f"{path} failed: {error}")
"""

from concurrent.futures import (
    Executor,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    as_completed,
)
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union
import logging

from nonmem_text.parsers.report_parser import parse_report

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of a parse_many() call, keyed by path string."""
    results: Dict[str, Any] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.failures)


def _parse_worker(parser: Callable[[Path], Any], path: str) -> Dict[str, Any]:
    """
    Parse one file in a worker.

    Returns:
        {'success': True, 'path': str, 'result': parsed object}
        or {'success': False, 'path': str, 'error': str, 'error_type': str}
    """
    try:
        return {
            'success': True,
            'path': path,
            'result': parser(Path(path)),
        }
    except Exception as e:
        logger.error(f"Worker failed to parse {path}: {e}", exc_info=True)
        return {
            'success': False,
            'path': path,
            'error': str(e),
            'error_type': type(e).__name__,
        }


def parse_many(
    paths: Iterable[Union[str, Path]],
    parser: Callable[[Path], Any] = parse_report,
    max_workers: Optional[int] = None,
    use_processes: bool = True
) -> BatchResult:
    """
    Parse files concurrently.

    A failing file is recorded in BatchResult.failures and does not stop
    the batch. Nothing is retried.

    Args:
        paths: Files to parse
        parser: Module-level callable taking a Path (default: parse_report);
            must be picklable when use_processes is True
        max_workers: Pool size (default: executor default)
        use_processes: Use a process pool (CPU-bound parsing) instead of
            a thread pool

    Returns:
        BatchResult with parsed objects and error messages by path
    """
    path_list = [str(p) for p in paths]
    batch = BatchResult()
    if not path_list:
        return batch

    logger.info(
        f"Parsing {len(path_list)} file(s) with "
        f"{'processes' if use_processes else 'threads'} "
        f"(max_workers={max_workers or 'default'})"
    )

    executor_cls = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
    executor: Executor
    with executor_cls(max_workers=max_workers) as executor:
        futures = [
            executor.submit(_parse_worker, parser, path)
            for path in path_list
        ]
        for future in as_completed(futures):
            outcome = future.result()
            if outcome['success']:
                batch.results[outcome['path']] = outcome['result']
            else:
                batch.failures[outcome['path']] = (
                    f"{outcome['error_type']}: {outcome['error']}"
                )

    logger.info(f"Batch complete: {batch.succeeded} parsed, {batch.failed} failed")
    return batch
