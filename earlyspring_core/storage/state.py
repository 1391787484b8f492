"""
Local State Store implementation.

Namespaced JSON key-value storage backing the local alarm store.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from earlyspring_core.utils.exceptions import PersistenceError
from earlyspring_core.utils.logging import get_logger

logger = get_logger(__name__)


class LocalStateStore:
    """
    Namespaced JSON key-value store.

    Features:
    - File-based or in-memory storage
    - One JSON file per key, one directory per namespace
    - Atomic writes

    Example:
        >>> store = LocalStateStore(storage_path="./earlyspring_state")
        >>> await store.set_state("profiles", "user_123", {"plant_health": 90})
        >>> await store.get_state("profiles", "user_123")
        {'plant_health': 90}
    """

    def __init__(
        self,
        storage_path: Optional[str] = None,
        use_memory: bool = False,
    ):
        """
        Initialize state store.

        Args:
            storage_path: Storage directory (default ./earlyspring_state)
            use_memory: Keep everything in memory instead of files
        """
        self.use_memory = use_memory
        self._memory_store: Dict[str, Dict[str, Any]] = {}
        self.storage_path: Optional[Path] = None

        if use_memory:
            logger.info("state_store_initialized", mode="in-memory")
            return

        self.storage_path = Path(storage_path) if storage_path else Path("./earlyspring_state")
        try:
            self.storage_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(
                "Cannot create state directory",
                details={"storage_path": str(self.storage_path)},
                cause=e,
            )
        logger.info("state_store_initialized", storage_path=str(self.storage_path))

    async def set_state(self, namespace: str, key: str, value: Any) -> None:
        """
        Store a JSON-serializable value.

        Raises:
            PersistenceError: If storage fails
        """
        try:
            if self.use_memory:
                # Round-trip so stored values never alias caller objects
                self._memory_store.setdefault(namespace, {})[key] = json.loads(json.dumps(value))
            else:
                namespace_dir = self.storage_path / namespace
                namespace_dir.mkdir(exist_ok=True)

                state_file = namespace_dir / f"{key}.json"
                temp_file = state_file.with_suffix(".tmp")
                with open(temp_file, "w", encoding="utf-8") as f:
                    json.dump(value, f, indent=2, ensure_ascii=False)
                temp_file.replace(state_file)

            logger.debug("state_set", namespace=namespace, key=key)

        except (OSError, TypeError, ValueError) as e:
            logger.error("state_set_failed", namespace=namespace, key=key, error=str(e))
            raise PersistenceError(
                "Failed to store state",
                details={"namespace": namespace, "key": key},
                cause=e,
            )

    async def get_state(self, namespace: str, key: str, default: Any = None) -> Any:
        """
        Read a value.

        Returns:
            Stored value, or ``default`` when the key does not exist

        Raises:
            PersistenceError: If the stored value cannot be read
        """
        if self.use_memory:
            value = self._memory_store.get(namespace, {}).get(key)
            return default if value is None else json.loads(json.dumps(value))

        state_file = self.storage_path / namespace / f"{key}.json"
        if not state_file.exists():
            return default

        try:
            with open(state_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("state_get_failed", namespace=namespace, key=key, error=str(e))
            raise PersistenceError(
                "Failed to read state",
                details={"namespace": namespace, "key": key},
                cause=e,
            )

    async def delete_state(self, namespace: str, key: str) -> bool:
        """
        Delete a value.

        Returns:
            True if deleted, False if not found

        Raises:
            PersistenceError: If the file cannot be removed
        """
        if self.use_memory:
            if key in self._memory_store.get(namespace, {}):
                del self._memory_store[namespace][key]
                logger.debug("state_deleted", namespace=namespace, key=key)
                return True
            return False

        state_file = self.storage_path / namespace / f"{key}.json"
        if not state_file.exists():
            return False

        try:
            state_file.unlink()
        except OSError as e:
            raise PersistenceError(
                "Failed to delete state",
                details={"namespace": namespace, "key": key},
                cause=e,
            )
        logger.debug("state_deleted", namespace=namespace, key=key)
        return True

    async def list_keys(self, namespace: str) -> List[str]:
        """List the keys of a namespace."""
        if self.use_memory:
            return list(self._memory_store.get(namespace, {}).keys())

        namespace_dir = self.storage_path / namespace
        if not namespace_dir.exists():
            return []
        return sorted(f.stem for f in namespace_dir.glob("*.json"))

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get store statistics.

        Returns:
            Dict with mode, namespace count and key count
        """
        if self.use_memory:
            return {
                "mode": "in-memory",
                "namespaces": len(self._memory_store),
                "total_keys": sum(len(ns) for ns in self._memory_store.values()),
            }

        namespaces = 0
        total_keys = 0
        for namespace_dir in self.storage_path.iterdir():
            if namespace_dir.is_dir():
                namespaces += 1
                total_keys += len(list(namespace_dir.glob("*.json")))

        return {
            "mode": "file-based",
            "storage_path": str(self.storage_path),
            "namespaces": namespaces,
            "total_keys": total_keys,
        }
