import os
import logging
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurations for the JSON Patch engine and its command line tool.
    """
    model_config = SettingsConfigDict(
        env_prefix='SJP_',
        env_file_encoding='utf-8',
    )

    case_insensitive_fields: bool = Field(
        True,
        description='Match model fields against pointer segments ignoring case and underscores',
    )
    enforce_schema: bool = Field(
        True,
        description='Validate values written into typed slots against their annotation',
    )
    output_indent: int = Field(
        2,
        ge=0,
        description='Indentation used when printing JSON documents from the CLI',
    )

    logging_level: Literal['CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG', 'NOTSET'] = Field(
        'INFO',
        description='Logging level for the library'
    )


CONFIG = Settings(_env_file=os.getenv('SJP_ENV_FILE', 'conf/.env'))      # type: ignore
LOGGER = logging.getLogger('Simple JSON Patch')
LOGGER.setLevel(CONFIG.logging_level.upper())   # pylint: disable=no-member

if not LOGGER.hasHandlers():
    console_handler = logging.StreamHandler()
    console_handler.setLevel(CONFIG.logging_level.upper())      # pylint: disable=no-member

    formatter = logging.Formatter(
        fmt='[%(asctime)s] [%(process)d] [%(levelname)s]: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S %z'
    )
    console_handler.setFormatter(formatter)

    LOGGER.addHandler(console_handler)


LOGGER.debug('System configuration loaded: %s', CONFIG.model_dump_json())
