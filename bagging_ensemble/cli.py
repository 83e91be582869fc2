#!filepath: bagging_ensemble/cli.py
from pathlib import Path
from typing import List, Optional

import typer
from rich import print

from bagging_ensemble import __version__, init_logging
from bagging_ensemble.config.app_config import AppConfig

app = typer.Typer(help="Bagging ensemble CLI")


def _load_config(config: Optional[Path]) -> AppConfig:
    cfg = AppConfig.load(str(config)) if config is not None else AppConfig()
    init_logging(cfg.log)
    return cfg


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def train(
        data: Path = typer.Argument(..., help="training parquet file"),
        out: Path = typer.Argument(..., help="model output directory"),
        config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config"),
        features: Optional[List[str]] = typer.Option(
            None, "--feature", "-f", help="scalar feature columns to assemble"
        ),
        overwrite: bool = typer.Option(False, "--overwrite"),
):
    """
    Fit a bagging ensemble and save it to OUT.
    """
    from bagging_ensemble.data.dataset import Dataset
    from bagging_ensemble.learners.registry import resolve_base_learner
    from bagging_ensemble.observability.instrumentation import Instrumentation
    from bagging_ensemble.training.bagging_regressor import BaggingRegressor

    cfg = _load_config(config)
    dataset = Dataset.read_parquet(
        data,
        feature_columns=features or None,
        features_col=cfg.bagging.features_col,
    )

    print(f"[green]Training {cfg.bagging.num_base_learners} members on {dataset.count()} rows[/green]")

    estimator = BaggingRegressor(
        resolve_base_learner(cfg.learner),
        cfg.bagging,
        inst=Instrumentation(),
    )
    model = estimator.fit(dataset)
    model.save(out, overwrite=overwrite)

    print(f"[blue]Saved {model.uid} -> {out}[/blue]")


@app.command()
def predict(
        model_dir: Path = typer.Argument(..., help="saved model directory"),
        data: Path = typer.Argument(..., help="input parquet file"),
        out: Path = typer.Argument(..., help="output parquet file"),
        features: Optional[List[str]] = typer.Option(None, "--feature", "-f"),
):
    """
    Append the ensemble prediction column and write a parquet file.
    """
    from bagging_ensemble.data.dataset import Dataset
    from bagging_ensemble.persistence.codec import load_model

    model = load_model(model_dir)
    dataset = Dataset.read_parquet(
        data,
        feature_columns=features or None,
        features_col=model.config.features_col,
    )
    model.transform(dataset).write_parquet(out)

    print(f"[green]Wrote {dataset.count()} predictions -> {out}[/green]")


@app.command()
def inspect(model_dir: Path = typer.Argument(..., help="saved model directory")):
    """
    Print members and hyperparameters of a saved model.
    """
    from bagging_ensemble.persistence.codec import load_model

    model = load_model(model_dir)
    print(f"[yellow]{model.uid}[/yellow] members={model.num_base_models} parent={model.parent}")
    for key, value in model.config.model_dump().items():
        print(f"  {key}: {value}")
    for idx, member in enumerate(model.members):
        print(f"  model-{idx}: subspace={list(member.subspace)} {member.model!r}")


if __name__ == "__main__":
    app()

# python -m bagging_ensemble.cli train data.parquet models/bagging -c config/base.yml
