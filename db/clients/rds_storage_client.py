import logging
from contextlib import contextmanager
from sqlalchemy import create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from config import database_url
from db.clients.base_storage_client import BaseStorageClient
from utils.errors import StorageError

logger = logging.getLogger(__name__)

def get_db_session(db_url: str = None):
    """Create a session factory bound to a new engine and return both.

    The caller owns the engine and must ``dispose()`` it once done.
    """
    db_url = db_url or database_url()
    try:
        engine = create_engine(db_url)
        SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        return SessionLocal, engine
    except (SQLAlchemyError, ValueError) as e:
        logger.error("[RdsStorageClient] Could not create database engine: %s", e)
        raise StorageError(f"Could not connect to the database: {e}")

@contextmanager
def db_session(session_maker=None):
    """Yield a session from ``session_maker``.

    Without a session maker, a short-lived engine on the configured database is
    created and disposed when the block exits.
    """
    engine = None
    if session_maker is None:
        session_maker, engine = get_db_session()
    try:
        with session_maker() as session:
            yield session
    finally:
        if engine is not None:
            engine.dispose()

def to_dict(orm) -> dict:
    """Column values of a mapped object."""
    return {column.key: getattr(orm, column.key) for column in orm.__table__.columns}

class RdsStorageClient(BaseStorageClient):
    """A client for one table of the relational database."""
    def __init__(self, **config: dict):
        """Initialize the RDS storage client with configuration parameters.

        Args:
            base_orm (any): The ORM class of the table.
            db_url (str, optional): Database URL. Defaults to the configured database.
            create_tables (bool, optional): Whether to create missing tables on connect.
        """
        super().__init__(**config)
        self.base_orm: __class__ = config.get('base_orm')
        if not self.base_orm:
            raise ValueError("Base ORM class must be provided in the configuration.")
        self.db_url = config.get('db_url')
        self.create_tables = config.get('create_tables', True)
        self.session_maker = None
        self.engine = None
        self.connected = False

    def connect(self):
        """Connect to the database. The URL is resolved here so tests can point it elsewhere."""
        self.session_maker, self.engine = get_db_session(self.db_url or database_url())
        if self.create_tables:
            self.base_orm.metadata.create_all(self.engine, tables=[self.base_orm.__table__])
        self.connected = True

    def disconnect(self):
        """Disconnect from the database."""
        if self.engine:
            self.engine.dispose()
        self.engine = None
        self.connected = False

    def _require_connection(self):
        if not self.connected:
            raise ConnectionError("Not connected to the RDS database.")

    def _select(self, keys: dict, order_by: str = None, descending: bool = False, limit: int = None):
        query = select(self.base_orm).filter_by(**keys)
        if order_by:
            column = getattr(self.base_orm, order_by)
            query = query.order_by(column.desc() if descending else column.asc())
        if limit:
            query = query.limit(limit)
        return query

    def get(self, keys: dict, order_by: str = None, descending: bool = False, limit: int = None) -> list[dict]:
        """Retrieve the rows matching every key."""
        self._require_connection()
        with self.session_maker() as session:
            rows = session.scalars(self._select(keys, order_by, descending, limit)).all()
            return [to_dict(row) for row in rows]

    def exists(self, keys: dict) -> bool:
        """Whether a row matching every key exists."""
        self._require_connection()
        with self.session_maker() as session:
            return session.scalars(self._select(keys, limit=1)).first() is not None

    def put(self, value: dict):
        """Store a row, updating the existing one with the same primary key."""
        self._require_connection()
        with self.session_maker() as session:
            keys = self.base_orm.__table__.primary_key.columns.keys()
            value_keys = {key: value[key] for key in keys if key in value}
            existing_orm = session.get(self.base_orm, value_keys) if len(value_keys) == len(keys) else None
            if existing_orm:
                for key, val in value.items():
                    setattr(existing_orm, key, val)
            else:
                session.add(self.base_orm(**value))
            session.commit()

    def delete(self, keys: dict):
        """Delete the rows matching every key."""
        self._require_connection()
        # Protect against empty keys to avoid accidental deletion of all rows
        if not keys:
            raise ValueError("Keys must not be empty. Provide at least one key to delete an object.")
        with self.session_maker() as session:
            result = session.execute(delete(self.base_orm).filter_by(**keys))
            if result.rowcount == 0:
                raise ValueError(f"No objects found with keys: {keys}")
            session.commit()

    def list(self, order_by: str = None, descending: bool = False, limit: int = None) -> list[dict]:
        """List all rows in the table."""
        return self.get({}, order_by=order_by, descending=descending, limit=limit)
