"""KFP v2 component — Ingest one PDF from S3 into the vector index.

Checks that the vector index answers, then runs the whole ``pdf_ingest`` pipeline (fetch → extract → chunk → embed →
upsert) for a single storage key inside the project image, so the heavy
collaborators (pypdf, sentence-transformers, chromadb) are already
installed.  Configuration comes from the pod environment, exactly as for
local runs (see ``pdf_ingest.config.Settings``).

Local testing
-------------
    from pipelines.components.ingest import ingest_pdf
    ingest_pdf.python_func(
        file_key="uploads/1700000000report.pdf",
        metrics=_FakeArtifact("/tmp/metrics"),
    )
"""

from kfp import dsl


@dsl.component(
    base_image="python:3.11-slim",
    target_image="pdf-ingest:0.1.0",
)
def ingest_pdf(
    file_key: str,
    metrics: dsl.Output[dsl.Metrics],
) -> str:
    """Ingest the PDF stored under *file_key* and report statistics.

    Parameters
    ----------
    file_key:
        S3 object key of the PDF inside the configured bucket.
    metrics:
        Output Metrics artifact with ingestion statistics.

    Returns
    -------
    str
        Summary, e.g. ``"Upserted 42 vectors from 3 pages into namespace 'uploads-report.pdf'"``.
    """
    import asyncio
    import logging

    from pdf_ingest.errors import UploadError
    from pdf_ingest.index import get_vector_index
    from pdf_ingest.pipeline import ingest_document

    logging.basicConfig(level=logging.INFO)
    log = logging.getLogger("ingest_pdf")

    index = get_vector_index()
    if not index.health_check():
        raise UploadError(f"Vector index {index.index_name!r} is not reachable")

    result = asyncio.run(ingest_document(file_key))

    metrics.log_metric("pages", len(result.pages))
    metrics.log_metric("chunks", len(result.all_chunks))
    metrics.log_metric("vectors_upserted", result.records_upserted)

    msg = (f"Upserted {result.records_upserted} vectors from {len(result.pages)} "
           f"pages into namespace '{result.namespace}'")
    log.info(msg)
    return msg
