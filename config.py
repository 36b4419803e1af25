from dataclasses import dataclass
from pathlib import Path
import os

CONFIG_DIR = Path(__file__).resolve().parent

@dataclass
class AwsConfig:
    access_key_id: str
    secret_access_key: str
    region: str

@dataclass
class JwtConfig:
    secret: str
    expiration: int

@dataclass
class PostgresConfig:
    host: str
    port: int
    database: str
    username: str
    password: str

    @property
    def url(self) -> str:
        return f'postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}'

@dataclass
class AppConfig:
    salt: str
    frontend_url: str

@dataclass
class UploadsConfig:
    bucket: str
    prefix: str
    presign_expiry: int

@dataclass
class IngestionConfig:
    batch_size: int

@dataclass
class Config:
    aws: AwsConfig
    jwt: JwtConfig
    postgres: PostgresConfig
    app: AppConfig
    uploads: UploadsConfig
    ingestion: IngestionConfig

def _load_from_file(target: Path) -> Config:
    import configparser
    _config = configparser.ConfigParser()
    _config.read(target)

    return Config(
        aws=AwsConfig(
            access_key_id=_config.get('AWS', 'ACCESS_KEY_ID', fallback=''),
            secret_access_key=_config.get('AWS', 'SECRET_ACCESS_KEY', fallback=''),
            region=_config.get('AWS', 'REGION', fallback='ap-southeast-2')
        ),
        jwt=JwtConfig(
            secret=_config['JWT']['SECRET'],
            expiration=_config.getint('JWT', 'EXPIRATION', fallback=86400)
        ),
        postgres=PostgresConfig(
            host=_config.get('POSTGRES', 'HOST', fallback='localhost'),
            port=_config.getint('POSTGRES', 'PORT', fallback=5432),
            database=_config.get('POSTGRES', 'DATABASE', fallback='etsyviz'),
            username=_config.get('POSTGRES', 'USERNAME', fallback='etsyviz'),
            password=_config.get('POSTGRES', 'PASSWORD', fallback='')
        ),
        app=AppConfig(
            salt=_config['APP']['SALT'],
            frontend_url=_config.get('APP', 'FRONTEND_URL', fallback='http://localhost:3000')
        ),
        uploads=UploadsConfig(
            bucket=_config.get('UPLOADS', 'BUCKET', fallback='etsyviz-uploads'),
            prefix=_config.get('UPLOADS', 'PREFIX', fallback='uploads'),
            presign_expiry=_config.getint('UPLOADS', 'PRESIGN_EXPIRY', fallback=900)
        ),
        ingestion=IngestionConfig(
            batch_size=_config.getint('INGESTION', 'BATCH_SIZE', fallback=500)
        )
    )

def _config_path() -> Path:
    explicit = os.getenv('ETSYVIZ_CONFIG')
    if explicit:
        return Path(explicit)
    local = CONFIG_DIR / 'config.ini'
    if local.exists():
        return local
    return CONFIG_DIR / 'sample_config.ini'

def database_url() -> str:
    """Return the database URL, preferring the DATABASE_URL environment variable."""
    return os.getenv('DATABASE_URL') or config.postgres.url

config = _load_from_file(_config_path())
