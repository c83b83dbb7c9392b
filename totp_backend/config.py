import os


class Config:
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # "*" or a comma-separated list of allowed origins for the tile frontend
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # QR export image
    QR_BOX_SIZE = int(os.environ.get("QR_BOX_SIZE", "10"))
    QR_BORDER = int(os.environ.get("QR_BORDER", "4"))

    HOST = os.environ.get("HOST", "127.0.0.1")
    PORT = int(os.environ.get("PORT", "5000"))


class TestConfig(Config):
    TESTING = True
    LOG_LEVEL = "WARNING"
    QR_BOX_SIZE = 2
    QR_BORDER = 1


def cors_origins(value: str):
    """Turn the CORS_ORIGINS setting into what flask_cors expects."""
    value = (value or "").strip()
    if not value or value == "*":
        return "*"
    return [origin.strip() for origin in value.split(",") if origin.strip()]
