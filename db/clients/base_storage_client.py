class BaseStorageClient:
    """Base class for a client to a storage system that can store and retrieve rows.

    Subclassed by specific storage client implementations. The dashboard only
    ships the relational one.
    """
    def __init__(self, **config: dict):
        """Initialize the storage client with configuration parameters.

        Args:
            config (dict): Configuration parameters for the storage client.
        """
        self.config = config
        self.connected = False

    def connect(self):
        """Connect to the storage system."""
        raise NotImplementedError("Subclasses should implement this method.")

    def disconnect(self):
        """Disconnect from the storage system."""
        raise NotImplementedError("Subclasses should implement this method.")

    def get(self, keys: dict, **kwargs) -> list[dict]:
        """Get the objects matching every key."""
        raise NotImplementedError("Subclasses should implement this method.")

    def exists(self, keys: dict) -> bool:
        """Whether an object matching every key exists."""
        raise NotImplementedError("Subclasses should implement this method.")

    def put(self, value: dict):
        """Put an object into the storage system, replacing the one with the same key."""
        raise NotImplementedError("Subclasses should implement this method.")

    def delete(self, keys: dict):
        """Delete the objects matching every key."""
        raise NotImplementedError("Subclasses should implement this method.")

    def list(self, **kwargs) -> list[dict]:
        """List all objects in the storage system."""
        raise NotImplementedError("Subclasses should implement this method.")
