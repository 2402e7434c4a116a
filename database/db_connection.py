# File: database/db_connection.py
import os
import yaml

DEFAULT_CREDENTIALS = os.getenv("GRADER_DB_CREDENTIALS", "credentials.yaml")

def get_db_params(config_path: str = DEFAULT_CREDENTIALS) -> dict:
    """
    Load database connection parameters from a YAML file.
    """
    with open(config_path, "r") as f:
        cfg = yaml.safe_load(f) or {}
    return {
        "host":     cfg.get("host", "localhost"),
        "port":     cfg.get("port", 5432),
        "database": cfg.get("database", "java_grader"),
        "user":     cfg.get("user"),
        "password": cfg.get("password")
    }
