import asyncio
import json
from pathlib import Path
from uuid import uuid4

from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import StoreError
from assistant_core.domain.scheduling import DocumentStore, SchedulingRequest
from assistant_core.infrastructure.logging.logger import logger


class JsonDocumentStore(DocumentStore):
    """本地 JSON Lines 文档存储，每个集合路径对应一个 .jsonl 文件，只追加。"""

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    async def append(self, collection_path: str, record: SchedulingRequest) -> None:
        doc_id = f"d-{uuid4().hex}"
        await asyncio.to_thread(self._write, collection_path, doc_id, record)
        logger.info(
            "Stored document",
            extra={"extra": {"collection": collection_path, "document_id": doc_id}},
        )

    def collection_file(self, collection_path: str) -> Path:
        parts = [p for p in collection_path.strip("/").split("/") if p]
        if not parts or any(p in (".", "..") for p in parts):
            raise StoreError(code="INVALID_COLLECTION", message=collection_path)
        return self._root.joinpath(*parts[:-1]) / f"{parts[-1]}.jsonl"

    def _write(self, collection_path: str, doc_id: str, record: SchedulingRequest) -> None:
        path = self.collection_file(collection_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = {"id": doc_id, **record.to_document()}
            line = json.dumps(payload, ensure_ascii=False)
            with path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            raise StoreError(code="STORE_WRITE_ERROR", message=str(e))
