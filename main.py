from pathlib import Path
from typing import Dict, Optional

import typer

from docfold.crossval import SequenceLabelerCrossValidator
from docfold.exceptions import CorpusFormatError
from docfold.formats import CoNLL03Reader, CorpusConfig
from docfold.sequence import group_documents
from docfold.training import LogisticTaggerFactory

app = typer.Typer()


def _corpus_config(reset_mode: str, encoding: str) -> CorpusConfig:
    try:
        return CorpusConfig(reset_mode=reset_mode, encoding=encoding)  # type: ignore[arg-type]
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def crossval(
    corpus: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Tab-separated BIO corpus."),
    folds: int = typer.Option(10, "--folds", min=1, help="Number of cross-validation folds."),
    reset_mode: str = typer.Option(
        "docstart",
        "--reset-mode",
        help="When to clear adaptive features: docstart, yes (every sentence) or no.",
        show_default=True,
    ),
    lang: str = typer.Option("en", "--lang", help="Language code recorded on trained models."),
    label_type: Optional[str] = typer.Option(
        None,
        "--label-type",
        help="Restrict training and evaluation to a single span type.",
    ),
    encoding: str = typer.Option("utf-8", "--encoding", help="Corpus file encoding."),
    c: float = typer.Option(1.0, "--c", help="Inverse regularization strength of the tagger."),
    max_iter: int = typer.Option(1000, "--max-iter", help="Solver iteration cap for the tagger."),
) -> None:
    """
    Run document-aware k-fold cross-validation of the logistic BIO tagger on CORPUS.
    """
    config = _corpus_config(reset_mode, encoding)
    validator = SequenceLabelerCrossValidator(
        language=lang,
        label_type=label_type,
        params={"C": c, "max_iter": max_iter},
        factory=LogisticTaggerFactory(),
    )

    try:
        with CoNLL03Reader.from_path(corpus, config) as reader:
            result = validator.try_evaluate(reader, folds)
    except CorpusFormatError as exc:
        typer.echo(f"[crossval] Corpus error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except UnicodeDecodeError as exc:
        typer.echo(f"[crossval] Encoding error: {exc} (try --encoding)", err=True)
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        # e.g. a fold whose training side has no tokens
        typer.echo(f"[crossval] Training error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not result.ok or result.counts is None:
        typer.echo(f"[crossval] Configuration error: {result.error}", err=True)
        raise typer.Exit(code=2)

    counts = result.counts
    print(
        f"[crossval] {folds} folds: TP={counts.true_positives} FP={counts.false_positives} "
        f"FN={counts.false_negatives}"
    )
    print(f"[crossval] Precision={counts.precision:.4f} Recall={counts.recall:.4f} F1={counts.f1:.4f}")


@app.command()
def stats(
    corpus: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Tab-separated BIO corpus."),
    reset_mode: str = typer.Option("docstart", "--reset-mode", help="docstart, yes or no."),
    encoding: str = typer.Option("utf-8", "--encoding", help="Corpus file encoding."),
) -> None:
    """
    Print sentence, token, span and document counts for CORPUS.
    """
    config = _corpus_config(reset_mode, encoding)
    try:
        with CoNLL03Reader.from_path(corpus, config) as reader:
            samples = list(reader)
    except CorpusFormatError as exc:
        typer.echo(f"[stats] Corpus error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except UnicodeDecodeError as exc:
        typer.echo(f"[stats] Encoding error: {exc} (try --encoding)", err=True)
        raise typer.Exit(code=1) from exc

    documents = sum(1 for _ in group_documents(samples))
    tokens = sum(len(sample.tokens) for sample in samples)
    span_types: Dict[str, int] = {}
    for sample in samples:
        for span in sample.spans:
            span_types[span.type] = span_types.get(span.type, 0) + 1

    print(
        f"[stats] {documents} documents, {len(samples)} sentences, {tokens} tokens, "
        f"{sum(span_types.values())} spans"
    )
    for span_type in sorted(span_types):
        print(f"[stats]   {span_type}: {span_types[span_type]}")


if __name__ == "__main__":
    app()
