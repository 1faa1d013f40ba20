from typing import Any, Dict, Iterable, List, Optional

import httpx


class FleetClient:
    """Lightweight client for the Farm Helper command API."""

    def __init__(
        self,
        base_url: str = "http://localhost:9002",
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)

    def list_workers(self) -> List[Dict[str, Any]]:
        return self._get("/api/workers")

    def get_worker_status(self, name: str) -> Optional[Dict[str, Any]]:
        response = self.client.get(f"{self.base_url}/api/workers/{name}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def is_hired(self, name: str) -> bool:
        return bool(self._get(f"/api/workers/{name}/hired").get("hired"))

    def hire(self, name: str, tasks: Iterable[str]) -> Dict[str, Any]:
        payload = {"name": name, "tasks": list(tasks)}
        response = self.client.post(f"{self.base_url}/api/workers", json=payload)
        response.raise_for_status()
        return response.json()

    def dismiss(self, name: str) -> Dict[str, Any]:
        response = self.client.delete(f"{self.base_url}/api/workers/{name}")
        response.raise_for_status()
        return response.json()

    def list_candidates(self, tasks: Iterable[str] = ()) -> List[Dict[str, Any]]:
        params = {}
        task_list = list(tasks)
        if task_list:
            params["tasks"] = ",".join(task_list)
        return self._get("/api/candidates", params=params)

    def drain_notices(self) -> List[Dict[str, Any]]:
        return self._get("/api/notices")

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self.client.get(f"{self.base_url}{path}", params=params)
        response.raise_for_status()
        return response.json()
