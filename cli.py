from __future__ import annotations

import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from clustering import index_records, select_representatives, strategy_from_config
from clustering.representative import OccurrenceFeatures
from interpretation.location.matcher import PointCountryMatcher
from interpretation.record import RecordInterpreter, max_workers_from_config
from io_utils.logs import setup_logging
from io_utils.read import iter_raw_terms, iter_rows, read_pairs
from io_utils.write import write_clusters_csv, write_interpreted, write_issue_summary


def load_config(config_path: Optional[Path]) -> Dict[str, Any]:
    cfg_path = resources.files("config").joinpath("config.default.toml")
    with cfg_path.open("rb") as f:
        config = tomllib.load(f)
    if config_path:
        with config_path.open("rb") as f:
            user_cfg = tomllib.load(f)
        _deep_update(config, user_cfg)
    return config


def _deep_update(d: Dict[str, Any], u: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict) and isinstance(d.get(k), dict):
            _deep_update(d[k], v)
        else:
            d[k] = v
    return d


def setup_run(output: Path, config: Optional[Path]) -> Dict[str, Any]:
    """Load configuration and configure logging for a run."""
    cfg = load_config(config)
    log_cfg = cfg.get("logging", {})
    setup_logging(output, level=log_cfg.get("level", "INFO"), json_format=bool(log_cfg.get("json", False)))
    return cfg


def interpret_cli(
    input_path: Path,
    output: Path,
    config: Optional[Path] = None,
    point_matcher: Optional[PointCountryMatcher] = None,
) -> int:
    """Interpret every record of ``input_path`` and write the results to ``output``.

    Writes ``interpreted.jsonl`` (one row per record), ``issues.csv``
    (records per issue type) and ``run.log``.  Returns the record count.
    """
    cfg = setup_run(output, config)
    interpreter = RecordInterpreter.from_config(cfg, point_matcher)
    records = list(iter_raw_terms(input_path))
    results = interpreter.interpret_batch(records, max_workers=max_workers_from_config(cfg))
    write_interpreted(output, results)
    write_issue_summary(output, results)
    logging.info("Interpreted %d records. Output written to %s", len(results), output)
    return len(results)


def cluster_cli(pairs_path: Path, records_path: Path, output: Path, config: Optional[Path] = None) -> int:
    """Cluster duplicate pairs and write ``clusters.csv``; return the cluster count."""
    cfg = setup_run(output, config)
    strategy = strategy_from_config(cfg)
    pairs = read_pairs(pairs_path)
    records = index_records(OccurrenceFeatures.from_mapping(row) for row in iter_rows(records_path))
    results = select_representatives(pairs, records, strategy)
    write_clusters_csv(output, results)
    logging.info(
        "Built %d clusters from %d pairs (%s strategy). Output written to %s",
        len(results),
        len(pairs),
        strategy,
        output,
    )
    return len(results)


app = typer.Typer(help="Occurrence record interpretation and duplicate clustering")


@app.command()
def interpret(
    input: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="CSV, TSV or JSON Lines file of raw Darwin Core records",
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        file_okay=False,
        dir_okay=True,
        help="Output directory",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        file_okay=True,
        help="Optional config file",
    ),
) -> None:
    count = interpret_cli(input, output, config)
    typer.echo(f"Interpreted {count} records into {output}")


@app.command()
def cluster(
    pairs: Path = typer.Option(
        ...,
        "--pairs",
        "-p",
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="CSV of candidate-duplicate identifier pairs",
    ),
    records: Path = typer.Option(
        ...,
        "--records",
        "-r",
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="Interpreted records (CSV or JSON Lines) with id, coordinates and date parts",
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        file_okay=False,
        dir_okay=True,
        help="Output directory",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        file_okay=True,
        help="Optional config file",
    ),
) -> None:
    try:
        count = cluster_cli(pairs, records, output, config)
    except KeyError as exc:
        typer.echo(f"❌ {exc.args[0]}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Wrote {count} clusters to {output / 'clusters.csv'}")


if __name__ == "__main__":
    app()
