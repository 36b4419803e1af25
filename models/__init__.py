from .base import Base, StringArray
from .user import User, UserORM
from .product import ProductORM
from .store import StoreORM
from .category import CategoryORM
from .category_node import CategoryNode, CategoryNodeORM, ROOT_PARENT_KEY
from .upload_history import UploadHistory, UploadHistoryORM, UploadStatus

# ORM class behind each browsable/ingestible table name
TABLE_MODELS = {
    'products': ProductORM,
    'stores': StoreORM,
    'categories': CategoryORM,
}
