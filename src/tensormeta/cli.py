from typing import List, Optional

import typer

from .bench import STYLES, run_loop_iteration
from .config import settings
from .logging import get_logger
from .metadata import MAX_RANK, StackArrayError, to_metadata

app = typer.Typer(help="tensormeta – fixed-capacity tensor metadata arrays", no_args_is_help=True)


@app.command()
def show(
    values: Optional[List[int]] = typer.Argument(None, help="Shape or stride values"),
) -> None:
    """
    Build metadata from VALUES and print its derived views.
    """
    logger = get_logger(__name__)

    try:
        meta = to_metadata(values or [])
    except StackArrayError as exc:
        logger.error(f"Cannot build metadata: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(f"metadata: {meta}")
    typer.echo(f"length:   {len(meta)}")
    typer.echo(f"product:  {meta.product()}")
    typer.echo(f"max:      {meta.max()}")
    typer.echo(f"reversed: {meta.reversed()}")


@app.command()
def bench(
    rank: int = typer.Option(MAX_RANK, "--rank", "-r", help="Number of dimensions to iterate over"),
    iterations: int = typer.Option(100_000, "--iterations", "-n", help="Traversals per style"),
    style: Optional[List[str]] = typer.Option(None, "--style", "-s", help=f"Styles to run: {', '.join(STYLES)}"),
) -> None:
    """
    Time loop iteration over metadata with each traversal style.
    """
    logger = get_logger(__name__)

    logger.info(f"Benchmarking rank {rank} metadata over {iterations} iterations")
    try:
        results = run_loop_iteration(rank, iterations, styles=style or STYLES)
    except (StackArrayError, ValueError) as exc:
        logger.error(f"Benchmark failed: {exc}")
        raise typer.Exit(code=1) from exc

    for result in results:
        typer.echo(
            f"{result.style:<8} {result.seconds:10.6f}s  "
            f"{result.ns_per_iteration:10.1f} ns/iter  checksum={result.checksum}"
        )


@app.command()
def info() -> None:
    """
    Print the active metadata settings.
    """
    typer.echo(f"max rank:      {settings.max_rank}")
    typer.echo(f"bounds checks: {'on' if settings.bounds_checks else 'off'}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
