import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Storage settings
    data_dir: str = os.getenv("LIBRARY_DATA_DIR", ".")
    books_file: str = os.getenv("LIBRARY_BOOKS_FILE", "books.db")
    members_file: str = os.getenv("LIBRARY_MEMBERS_FILE", "members.db")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

    # CLI output mode: plain | json | rich
    cli_output: str = os.getenv("LIB_CLI_OUTPUT", "plain").lower()

    def books_path(self, data_dir: Optional[str] = None) -> str:
        return os.path.join(data_dir or self.data_dir, self.books_file)

    def members_path(self, data_dir: Optional[str] = None) -> str:
        return os.path.join(data_dir or self.data_dir, self.members_file)


settings = Settings()
