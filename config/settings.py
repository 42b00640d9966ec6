"""
Centralized configuration for the FinChat backend.

All settings are loaded from environment variables via .env file.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    # OpenAI (primary)
    openai_api_key: Optional[str] = Field(default=None, env="OPENAI_API_KEY")
    openai_llm_model: str = Field(default="gpt-4o", env="OPENAI_LLM_MODEL")
    max_tokens: int = Field(default=150, env="MAX_TOKENS")
    title_max_tokens: int = Field(default=50, env="TITLE_MAX_TOKENS")
    temperature: float = Field(default=0.7, env="TEMPERATURE")

    # AWS / Bedrock (secondary)
    aws_region: str = Field(default="us-east-1", env="AWS_REGION")
    bedrock_llm_model_id: str = Field(
        default="us.anthropic.claude-sonnet-4-20250514-v1:0", env="BEDROCK_LLM_MODEL_ID"
    )

    # Hugging Face inference
    huggingface_api_token: Optional[str] = Field(default=None, env="HUGGINGFACE_API_TOKEN")
    hf_embedding_url: str = Field(
        default=(
            "https://api-inference.huggingface.co/pipeline/feature-extraction/"
            "sentence-transformers/all-mpnet-base-v2"
        ),
        env="HF_EMBEDDING_URL",
    )
    hf_sentiment_url: str = Field(
        default=(
            "https://api-inference.huggingface.co/models/"
            "mrm8488/distilroberta-finetuned-financial-news-sentiment-analysis"
        ),
        env="HF_SENTIMENT_URL",
    )
    embedding_dimension: int = Field(default=768, env="EMBEDDING_DIMENSION")

    # Pinecone
    pinecone_api_key: str = Field(default="", env="PINECONE_API_KEY")
    pinecone_index_name: str = Field(default="banking77_embeddings", env="PINECONE_INDEX_NAME")
    top_k: int = Field(default=5, env="TOP_K")
    search_nprobe: int = Field(default=16, env="SEARCH_NPROBE")
    search_consistency: str = Field(default="bounded", env="SEARCH_CONSISTENCY")

    # Market data
    cache_ttl_seconds: int = Field(default=3600, env="CACHE_TTL_SECONDS")
    cache_max_entries: int = Field(default=1024, env="CACHE_MAX_ENTRIES")
    news_feed_url: str = Field(
        default="https://finance.yahoo.com/rss/headline?s={symbol}", env="NEWS_FEED_URL"
    )
    news_limit: int = Field(default=10, env="NEWS_LIMIT")

    # Retry
    retry_max_attempts: int = Field(default=3, env="RETRY_MAX_ATTEMPTS")
    retry_initial_delay_ms: int = Field(default=1000, env="RETRY_INITIAL_DELAY_MS")
    http_timeout_seconds: float = Field(default=30.0, env="HTTP_TIMEOUT_SECONDS")

    # API
    api_host: str = Field(default="0.0.0.0", env="API_HOST")
    api_port: int = Field(default=5000, env="API_PORT")
    api_title: str = Field(default="FinChat Persona API", env="API_TITLE")
    api_version: str = Field(default="1.0.0", env="API_VERSION")
    cors_origins: str = Field(default="*", env="CORS_ORIGINS")
    rate_limit_requests: int = Field(default=100, env="RATE_LIMIT_REQUESTS")
    rate_limit_window_seconds: int = Field(default=900, env="RATE_LIMIT_WINDOW_SECONDS")

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
