"""KFP v2 pipeline — PDF ingestion into the vector index.

Wraps the ``ingest_pdf`` component so a document upload can be turned into
a pipeline run (e.g. from an S3 event handler submitting the compiled YAML).

Compile
-------
    python -m pipelines.ingestion_pipeline --compile
"""

from kfp import compiler, dsl

from pipelines.components.ingest import ingest_pdf


@dsl.pipeline(
    name="pdf-ingestion-pipeline",
    description=(
        "Download a PDF from S3, split it into chunks, embed every chunk "
        "and upsert the vectors into the document's namespace."
    ),
)
def ingestion_pipeline(file_key: str) -> None:
    """Single-step ingestion of the PDF stored under *file_key*."""
    ingest_pdf(file_key=file_key)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="PDF ingestion pipeline")
    parser.add_argument(
        "--compile",
        action="store_true",
        help="Compile pipeline to YAML",
    )
    parser.add_argument(
        "--output",
        default="pipelines/compiled/ingestion_pipeline.yaml",
        help="Output path for compiled YAML",
    )
    args = parser.parse_args()

    if args.compile:
        compiler.Compiler().compile(ingestion_pipeline, args.output)
        print(f"Pipeline compiled → {args.output}")
