import logging
from typing import List
from pydantic import BaseModel
from db.clients.base_storage_client import BaseStorageClient
from uuid import uuid4

logger = logging.getLogger(__name__)

class Repository():
    def __init__(self,
                 model: BaseModel = BaseModel,
                 client: BaseStorageClient = BaseStorageClient,
                 keys: list[str] = ['id'],
                 auto_generate_key: bool = True,
                 verbose: bool = False,
                 auto_connect: bool = False
                ):
        """Initialize the repository with a model and a storage client.

        Args:
            model (BaseModel): The Pydantic model to use for validation.
            client (BaseStorageClient): The storage client to use for data operations.
            keys (list[str]): The list of primary keys to identify items in the storage.
            auto_generate_key (bool): Whether to automatically generate keys if they are not provided.
            verbose (bool): Whether to log every operation for debugging.
        """
        self._client = client
        self._model = model
        self._keys = keys
        self._auto_generate_key = auto_generate_key
        self._verbose = verbose
        if auto_connect:
            self.connect()

    def connect(self) -> None:
        """Connect to the storage client."""
        if self._verbose: logger.debug("[Repository] connect")
        self._client.connect()

    def disconnect(self) -> None:
        """Disconnect from the storage client."""
        if self._verbose: logger.debug("[Repository] disconnect")
        self._client.disconnect()

    def _item_keys(self, item: dict) -> dict:
        return {key: item.get(key) for key in self._keys}

    def create(self, item: dict | BaseModel) -> dict:
        """Add a new item to the storage, if it doesn't exist."""
        if isinstance(item, BaseModel):
            item = item.model_dump()
        else:
            item = dict(item)
        if self._verbose: logger.debug("[Repository] create %s", item)

        # If auto_generate_key is True, generate the missing keys
        for key in self._keys:
            if self._auto_generate_key and not item.get(key):
                item[key] = str(uuid4())
            elif key not in item:
                raise ValueError(f"Item must have a '{key}' key.")

        keys = self._item_keys(item)
        if self._client.exists(keys):
            raise ValueError(f"Item with keys {keys} already exists.")

        self._client.put(item)
        return item

    def update(self, item: dict | BaseModel) -> None:
        """Update an existing item in the storage. Dict items may be partial."""
        if isinstance(item, BaseModel):
            item = item.model_dump()
        if self._verbose: logger.debug("[Repository] update %s", item)

        keys = self._item_keys(item)
        if not self._client.exists(keys):
            raise ValueError(f"Item with keys {keys} does not exist.")

        self._client.put(item)

    def list(self, **kwargs) -> list[BaseModel]:
        """Retrieve all items from the storage."""
        return [self._model.model_validate(item) for item in self._client.list(**kwargs)]

    def get(self, keys: dict, default = None, **kwargs) -> List | None:
        """Retrieve the items matching one or more keys."""
        data = self._client.get(keys, **kwargs)
        if not data:
            return default
        return [self._model.model_validate(item) for item in data]

    def get_first(self, keys: dict, default = None, **kwargs) -> BaseModel | None:
        """Retrieve the first item from the storage by one or more keys."""
        data = self._client.get(keys, limit=1, **kwargs)
        if not data:
            return default
        return self._model.model_validate(data[0])

    def delete(self, item: BaseModel | dict) -> None:
        """Delete an item from the storage."""
        if isinstance(item, BaseModel):
            dump = item.model_dump()
            item_keys = {key: dump[key] for key in self._keys if key in dump}
        else:
            item_keys = item
        self._client.delete(item_keys)

    def create_session(self) -> 'RepositorySession':
        """Create a session for the repository."""
        return RepositorySession(self)

class RepositorySession():
    def __init__(self, repository: 'Repository'):
        """Initialize the repository session."""
        self._repository = repository

    def __enter__(self):
        """Enter the repository session."""
        self._repository.connect()
        return self._repository

    def __exit__(self, exc_type, exc_value, traceback):
        """Exit the repository session."""
        self._repository.disconnect()
