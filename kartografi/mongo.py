from __future__ import annotations

import logging
from typing import Any

from pymongo import MongoClient
from pymongo.errors import ServerSelectionTimeoutError
from pymongo.server_api import ServerApi

log = logging.getLogger(__name__)

_client: MongoClient | None = None


def connect(uri: str | None, db_name: str | None, timeout_ms: int = 5000) -> Any:
    global _client

    if not uri:
        raise RuntimeError("MONGO_URI environment variable is not set")
    if not db_name:
        raise RuntimeError("MONGO_DB environment variable is not set")

    if _client is None:
        client: MongoClient = MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            server_api=ServerApi("1"),
        )
        try:
            client.admin.command("ping")
        except ServerSelectionTimeoutError as exc:
            client.close()
            raise RuntimeError("Unable to connect to MongoDB") from exc
        _client = client
        log.info("Connected to MongoDB database %s", db_name)

    return _client[db_name]
