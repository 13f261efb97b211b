"""
Pipelines — Kubeflow Pipelines (KFP v2) components and pipeline definitions.

The component runs inside the project image and delegates to
:mod:`pdf_ingest.pipeline`.
"""
