"""
Локальная история проверок ценников (JSON файл)
"""
import threading
import uuid
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from app.models.domain import HistoryStats, PriceCheck, ScanHistoryItem
from app.core.enums import HistoryFilter
from app.core.exceptions import HistoryError
from app.core.logging import get_logger

logger = get_logger(__name__)

_history_adapter = TypeAdapter(List[ScanHistoryItem])


class HistoryService:
    """
    Хранит последние проверки, новые - первыми
    """

    def __init__(self, history_file: str, limit: int = 100):
        self.path = Path(history_file)
        self.limit = limit
        self._lock = threading.Lock()

    def get_history(self, history_filter: HistoryFilter = HistoryFilter.ALL) -> List[ScanHistoryItem]:
        """
        История проверок

        Args:
            history_filter: Все / только верные / только неверные
        """
        with self._lock:
            history = self._load()

        if history_filter == HistoryFilter.CORRECT:
            return [item for item in history if item.is_correct]
        if history_filter == HistoryFilter.INCORRECT:
            return [item for item in history if not item.is_correct]
        return history

    def add(self, check: PriceCheck, location: Optional[str] = None) -> ScanHistoryItem:
        """Добавить проверку в начало истории (сверх лимита старые записи удаляются)"""
        item = ScanHistoryItem(
            **check.model_dump(),
            id=uuid.uuid4().hex,
            location=location
        )

        with self._lock:
            history = self._load()
            history.insert(0, item)
            self._save(history[:self.limit])

        logger.info("Scan saved to history", item_id=item.id, is_correct=item.is_correct)
        return item

    def remove(self, item_id: str) -> bool:
        """
        Удалить запись

        Returns:
            True если запись была найдена
        """
        with self._lock:
            history = self._load()
            filtered = [item for item in history if item.id != item_id]
            if len(filtered) == len(history):
                return False
            self._save(filtered)

        logger.info("History item removed", item_id=item_id)
        return True

    def clear(self) -> None:
        with self._lock:
            try:
                self.path.unlink(missing_ok=True)
            except OSError as e:
                raise HistoryError(f"Failed to clear history: {str(e)}", details={"path": str(self.path)})
        logger.info("History cleared")

    def stats(self) -> HistoryStats:
        """Количество верных/неверных проверок и доля верных"""
        history = self.get_history()
        total = len(history)
        correct = sum(1 for item in history if item.is_correct)

        return HistoryStats(
            total=total,
            correct=correct,
            incorrect=total - correct,
            accuracy_percent=round(correct / total * 100) if total else 0
        )

    def _load(self) -> List[ScanHistoryItem]:
        if not self.path.exists():
            return []

        try:
            return _history_adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.error("Failed to load history", path=str(self.path), error=str(e))
            return []

    def _save(self, history: List[ScanHistoryItem]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(_history_adapter.dump_json(history, indent=2))
        except OSError as e:
            raise HistoryError(
                f"Failed to save history: {str(e)}",
                details={"path": str(self.path)}
            )
