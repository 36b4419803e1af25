from db.clients.rds_storage_client import RdsStorageClient
from db.repository import Repository
from models.upload_history import UploadHistory, UploadHistoryORM
from models.user import User, UserORM

users_repository = Repository(
    model=User,
    client=RdsStorageClient(
        base_orm=UserORM
    )
)

upload_history_repository = Repository(
    model=UploadHistory,
    client=RdsStorageClient(
        base_orm=UploadHistoryORM
    )
)
