import os

class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")
    API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8080/api")
    NOTICE_DURATION_MS = int(os.environ.get("NOTICE_DURATION_MS", "3000"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    API_BASE_URL = "http://api.test/api"
