"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Storage
    aws_region: str = "us-east-1"
    s3_bucket: str = Field(default="", description="Bucket holding the uploaded PDF documents")
    aws_access_key_id: str = Field(
        default="",
        description="Leave empty to fall back to boto3's default credential chain",
    )
    aws_secret_access_key: str = ""
    scratch_dir: str = Field(
        default="",
        description="Directory for downloaded blobs. Empty means the system temp dir.",
    )
    keep_downloads: bool = False

    # Embedding
    embedding_provider: str = Field(default="huggingface", description="'huggingface' or 'openai'")
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    openai_api_key: str = ""
    openai_embedding_model: str = "text-embedding-ada-002"
    embed_concurrency: int = Field(default=8, ge=1, description="Max in-flight embedding calls")

    # Vector index
    vector_backend: str = Field(default="chroma", description="'chroma' or 'pinecone'")
    index_name: str = "chatpdf"
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    pinecone_api_key: str = ""

    # Chunking
    chunk_size: int = 1000
    chunk_overlap: int = 200
    preview_max_bytes: int = Field(
        default=36000,
        description="Byte cap for the page preview stored as record metadata",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Process-wide singleton; import `settings` wherever needed.
settings = Settings()
