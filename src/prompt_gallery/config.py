"""Configuration management using pydantic-settings.

Loads from environment variables and .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes:
        archive_extension: Suffix an uploaded file must carry to be opened as an archive.
        image_extensions: Entry name suffixes treated as raster images.
        sentinel: Placeholder used for any metadata field that is absent.
        comment_tags: Tag names searched, in order, for the JSON parameter blob.
        max_concurrent_entries: Upper bound on entries decoded at the same time.
        export_dir: Default directory images are saved to by the CLI.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format for production.
        log_file: Optional file that also receives the logs (rotated and gzipped).

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Archive intake
    archive_extension: str = "zip"
    image_extensions: list[str] = ["png", "jpg", "jpeg", "gif", "bmp", "tiff"]

    # Metadata
    sentinel: str = "N/A"
    comment_tags: list[str] = ["Comment", "comment", "UserComment"]

    # Pipeline
    max_concurrent_entries: int = 8

    # Downloads
    export_dir: str = "./exported"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None

    @property
    def export_path(self) -> Path:
        """Return the export directory as a Path object.

        Returns:
            Path: Resolved path to the export directory.

        """
        return Path(self.export_dir)


# Global settings instance
settings = Settings()
