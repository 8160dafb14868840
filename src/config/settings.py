"""Application settings and configuration."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file if present
load_dotenv()

DEFAULT_JOB_INSTRUCTIONS = (
    "You are an expert exam writer. Your task is to generate questions based on "
    "the document provided. You must return the response as a single, valid JSON "
    "object and nothing else."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OPENAI CONFIG
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
        validation_alias="OPENAI_API_KEY",
    )

    # Model Configuration
    model_name: str = Field(
        default="gpt-4o",
        description="Model bound to each generation job",
        validation_alias="MODEL_NAME",
    )

    job_name: str = Field(
        default="Question Generation Assistant",
        description="Name given to the per-request job definition",
        validation_alias="JOB_NAME",
    )

    job_instructions: str = Field(
        default=DEFAULT_JOB_INSTRUCTIONS,
        description="System instructions of the per-request job definition",
        validation_alias="JOB_INSTRUCTIONS",
    )

    # Run Settings
    poll_interval_seconds: float = Field(
        default=1.5,
        ge=0.1,
        le=10.0,
        description="Delay between two run status checks",
        validation_alias="POLL_INTERVAL",
    )

    run_timeout_seconds: float = Field(
        default=120.0,
        ge=1.0,
        le=1800.0,
        description="Give up on a run that has not finished after this long",
        validation_alias="RUN_TIMEOUT",
    )

    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0.0,
        description="Timeout for a single API call",
        validation_alias="REQUEST_TIMEOUT",
    )

    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="SDK-level retries for rate limits and transient errors",
        validation_alias="MAX_RETRIES",
    )

    delete_uploaded_files: bool = Field(
        default=True,
        description="Also delete the uploaded corpus file after each run",
        validation_alias="DELETE_UPLOADED_FILES",
    )

    # Output Settings
    default_output_path: str = Field(
        default="quiz",
        description="Default output file name",
        validation_alias="DEFAULT_OUTPUT",
    )

    output_dir: str = Field(
        default="output",
        description="Directory exported documents are written to",
        validation_alias="OUTPUT_DIR",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level",
        validation_alias="LOG_LEVEL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }


# Loaded once, then shared by the API, the CLI and the pipeline
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
