"""
Gateway Configuration
"""
import os


class Config:
    """Base configuration."""
    # Emitters: inline list of emitter mappings and/or a YAML file
    PLACEHOLDER_DUMP = ()
    PLACEHOLDER_DUMP_CONFIG = os.getenv("PLACEHOLDER_DUMP_CONFIG", "configs/placeholder_dump.yaml")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing configuration: no emitter file unless a test sets one."""
    DEBUG = False
    TESTING = True
    PLACEHOLDER_DUMP_CONFIG = None


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
