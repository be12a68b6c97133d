import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv("JWT_ACCESS_TOKEN_HOURS", "12")))

    ORCID_API_URL = os.getenv("ORCID_API_URL", "https://pub.orcid.org/v3.0")
    ORCID_TIMEOUT = float(os.getenv("ORCID_TIMEOUT", "10"))
    ORCID_USER_AGENT = os.getenv("ORCID_USER_AGENT", "Hospitium Research Platform/1.0")

    ACTIVITY_LOG_PATH = os.getenv("ACTIVITY_LOG_PATH", os.path.join("logs", "activity.log"))
    INVITATION_TTL_DAYS = int(os.getenv("INVITATION_TTL_DAYS", "30"))

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///hospitium-dev.db")

class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")

class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"

config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
