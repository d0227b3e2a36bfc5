"""
Batch rendering of STL folders to SVG.

Provides:
- Folder-based batch conversion (STL -> SVG), one document per file
- Progress callback and summary reporting
- Optional thread-pool execution

Usage:
    from mesh_svg.batch import batch_convert

    results = batch_convert(input_dir="./models", output_dir="./renders", parallel=True)
    print(results.summary())
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from mesh_svg.project_config import ProjectConfig, load_config

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, 'ConversionResult'], None]


@dataclass
class ConversionResult:
    """Outcome of rendering one file."""
    input_path: Path
    output_path: Optional[Path] = None
    success: bool = False
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def status(self) -> str:
        return "OK" if self.success else "FAILED"


@dataclass
class BatchResult:
    """Outcome of a batch run."""
    results: List[ConversionResult] = field(default_factory=list)
    total_duration_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    @property
    def success_rate(self) -> float:
        """Percentage of successful files (0 for an empty batch)."""
        if self.total == 0:
            return 0.0
        return 100.0 * self.successful / self.total

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            "Batch Render Summary",
            "=" * 40,
            f"Total files:     {self.total}",
            f"Successful:      {self.successful}",
            f"Failed:          {self.failed}",
            f"Success rate:    {self.success_rate:.1f}%",
            f"Total time:      {self.total_duration_seconds:.1f}s",
            "",
        ]
        if self.failed:
            lines.append("Failed files:")
            lines.extend(
                f"  - {r.input_path.name}: {r.error}" for r in self.results if not r.success
            )
        return "\n".join(lines)

    def to_dict(self) -> Dict:
        """JSON-serializable form."""
        return {
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'success_rate': self.success_rate,
            'total_duration_seconds': self.total_duration_seconds,
            'results': [
                {
                    'input': str(r.input_path),
                    'output': str(r.output_path) if r.output_path else None,
                    'success': r.success,
                    'error': r.error,
                    'duration': r.duration_seconds,
                }
                for r in self.results
            ],
        }


def find_stl_files(
    input_dir: Union[str, Path],
    pattern: str = "*.stl",
    recursive: bool = False,
) -> List[Path]:
    """STL files in a directory (also matching an upper-case .STL extension), sorted.

    Raises:
        FileNotFoundError: if the directory does not exist.
        NotADirectoryError: if the path is a file.
    """
    input_dir = Path(input_dir)
    if not input_dir.exists():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if not input_dir.is_dir():
        raise NotADirectoryError(f"Not a directory: {input_dir}")

    glob = input_dir.rglob if recursive else input_dir.glob
    files = set(glob(pattern))
    files.update(glob(pattern.replace('.stl', '.STL')))

    result = sorted(files)
    logger.info("Found %d STL files in %s", len(result), input_dir)
    return result


def convert_single_file(
    input_path: Path,
    output_dir: Path,
    config: Optional[ProjectConfig] = None,
    output_prefix: str = "",
    output_suffix: str = "",
) -> ConversionResult:
    """Render one STL file; failures are captured in the result, not raised."""
    start_time = time.perf_counter()
    output_path = output_dir / f"{output_prefix}{input_path.stem}{output_suffix}.svg"
    result = ConversionResult(input_path=input_path)

    try:
        # main.py lives outside the package
        from main import run_pipeline

        run_pipeline(
            model=str(input_path),
            output_svg=str(output_path),
            config=config,
            scale=1.0,
        )
        result.success = True
        result.output_path = output_path
    except Exception as e:
        result.error = str(e)
        logger.error("Failed to render %s: %s", input_path.name, e)

    result.duration_seconds = time.perf_counter() - start_time
    return result


def _report(i: int, total: int, result: ConversionResult,
            progress_callback: Optional[ProgressCallback]) -> None:
    if progress_callback:
        progress_callback(i, total, result)
    logger.info("[%d/%d] %s: %s (%.1fs)",
                i, total, result.input_path.name, result.status, result.duration_seconds)


def batch_convert(
    input_dir: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None,
    pattern: str = "*.stl",
    recursive: bool = False,
    config: Optional[ProjectConfig] = None,
    config_path: Optional[Union[str, Path]] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
    output_prefix: Optional[str] = None,
    output_suffix: Optional[str] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> BatchResult:
    """Render every STL file of a directory to SVG.

    Each file is an independent render, so files may run in a thread pool;
    results then arrive in completion order.

    Args:
        input_dir: directory containing STL files.
        output_dir: output directory (default: ``config.output.output_dir``
            or the input directory).
        pattern: glob pattern for STL files.
        recursive: search subdirectories.
        config: project configuration; loaded from ``config_path`` or the
            input directory when None.
        config_path: explicit .meshsvg.json path.
        parallel: use a thread pool.
        max_workers: thread pool size (None = executor default).
        output_prefix, output_suffix: output filename decoration; None
            uses the configuration.
        progress_callback: called after each file as (current, total, result).

    Returns:
        BatchResult with per-file results.
    """
    start_time = time.perf_counter()
    input_dir = Path(input_dir)

    if config is None:
        config = load_config(model_path=input_dir / "model.stl", explicit_config=config_path)

    stl_files = find_stl_files(input_dir, pattern, recursive)
    if output_dir is None:
        output_dir = config.output.output_dir or input_dir
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    prefix = config.output.prefix if output_prefix is None else output_prefix
    suffix = config.output.suffix if output_suffix is None else output_suffix

    if not stl_files:
        logger.warning("No STL files found in %s", input_dir)
        return BatchResult(total_duration_seconds=time.perf_counter() - start_time)

    logger.info("Starting batch render: %d files, parallel=%s", len(stl_files), parallel)
    results: List[ConversionResult] = []
    total = len(stl_files)

    if parallel:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(convert_single_file, path, output_dir, config, prefix, suffix)
                for path in stl_files
            ]
            for i, future in enumerate(as_completed(futures), 1):
                result = future.result()
                results.append(result)
                _report(i, total, result, progress_callback)
    else:
        for i, path in enumerate(stl_files, 1):
            result = convert_single_file(path, output_dir, config, prefix, suffix)
            results.append(result)
            _report(i, total, result, progress_callback)

    batch_result = BatchResult(
        results=results,
        total_duration_seconds=time.perf_counter() - start_time,
    )
    logger.info(
        "Batch render complete: %d/%d successful (%.1f%%) in %.1fs",
        batch_result.successful, batch_result.total,
        batch_result.success_rate, batch_result.total_duration_seconds,
    )
    return batch_result


def batch_convert_cli(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for batch rendering."""
    import argparse

    from mesh_svg.logging_config import configure_default_logging

    parser = argparse.ArgumentParser(description="Render a folder of STL files to SVG")
    parser.add_argument("input_dir", help="Directory containing STL files")
    parser.add_argument("-o", "--output", dest="output_dir",
                        help="Output directory (default: same as input)")
    parser.add_argument("-p", "--pattern", default="*.stl", help="File pattern (default: *.stl)")
    parser.add_argument("-r", "--recursive", action="store_true", help="Search subdirectories")
    parser.add_argument("-c", "--config", dest="config_path", help="Path to .meshsvg.json")
    parser.add_argument("--parallel", action="store_true", help="Render files in a thread pool")
    parser.add_argument("-j", "--jobs", type=int, dest="max_workers", help="Maximum threads")
    parser.add_argument("--prefix", default=None, help="Output filename prefix")
    parser.add_argument("--suffix", default=None, help="Output filename suffix")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    configure_default_logging(verbose=args.verbose)

    try:
        result = batch_convert(
            input_dir=args.input_dir,
            output_dir=args.output_dir,
            pattern=args.pattern,
            recursive=args.recursive,
            config_path=args.config_path,
            parallel=args.parallel,
            max_workers=args.max_workers,
            output_prefix=args.prefix,
            output_suffix=args.suffix,
        )
    except (FileNotFoundError, NotADirectoryError) as e:
        logger.error("Batch render failed: %s", e)
        return 1

    print("\n" + result.summary())
    return 0 if result.failed == 0 else 1


if __name__ == "__main__":
    import sys
    sys.exit(batch_convert_cli())
