from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from execution.fleet_manager import FleetManager, HireResult
from execution.presentation import LoggingPresentation
from execution.tasks import TaskKind, parse_tasks, task_names
from world.models import Candidate


class HireRequest(BaseModel):
    name: str
    tasks: List[str] = Field(default_factory=list)


class HireResponse(BaseModel):
    result: str
    name: str
    cost: int
    money: int


def _parse_mask(names: Sequence[str]) -> TaskKind:
    try:
        return parse_tasks(names)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _split_tasks(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part for part in raw.split(",") if part.strip()]


_HIRE_ERRORS = {
    HireResult.ALREADY_HIRED: 409,
    HireResult.INSUFFICIENT_FUNDS: 402,
    HireResult.NO_TASKS: 400,
}


def create_app(fleet: FleetManager, candidates: Sequence[Candidate] = ()) -> FastAPI:
    """Command surface for the hiring UI: hire, dismiss, status."""
    app = FastAPI(title="Farm Helper")
    by_name: Dict[str, Candidate] = {c.name: c for c in candidates}

    @app.get("/api/workers")
    def list_workers() -> List[Dict[str, Any]]:
        return [status.to_dict() for status in fleet.active_workers()]

    @app.get("/api/workers/{name}")
    def get_worker(name: str) -> Dict[str, Any]:
        status = fleet.get_worker_status(name)
        if status is None:
            raise HTTPException(status_code=404, detail=f"{name} is not hired")
        return status.to_dict()

    @app.get("/api/workers/{name}/hired")
    def is_hired(name: str) -> Dict[str, Any]:
        return {"name": name, "hired": fleet.is_hired(name)}

    @app.post("/api/workers", response_model=HireResponse)
    def hire(payload: HireRequest) -> HireResponse:
        if by_name and payload.name not in by_name:
            raise HTTPException(status_code=404, detail=f"Unknown candidate: {payload.name}")
        candidate = by_name.get(payload.name) or Candidate(name=payload.name)
        tasks = _parse_mask(payload.tasks)
        cost = fleet.quote(candidate.name, tasks)
        result = fleet.hire(candidate, tasks, cost)
        if result in _HIRE_ERRORS:
            raise HTTPException(status_code=_HIRE_ERRORS[result], detail=result.value)
        return HireResponse(
            result=result.value,
            name=candidate.name,
            cost=cost,
            money=fleet.economy.money,
        )

    @app.delete("/api/workers/{name}")
    def dismiss(name: str) -> Dict[str, Any]:
        was_hired = fleet.is_hired(name)
        fleet.dismiss(name)
        return {"name": name, "dismissed": was_hired}

    @app.get("/api/candidates")
    def list_candidates(tasks: Optional[str] = Query(default=None)) -> List[Dict[str, Any]]:
        mask = _parse_mask(_split_tasks(tasks))
        return [
            {
                "name": entry.candidate.name,
                "display_name": entry.candidate.display_name,
                "hearts": entry.hearts,
                "cost": entry.cost,
                "hired": entry.hired,
                "tasks": task_names(mask),
            }
            for entry in fleet.roster(candidates, mask)
        ]

    @app.get("/api/notices")
    def drain_notices() -> List[Dict[str, Any]]:
        presentation = fleet.presentation
        if not isinstance(presentation, LoggingPresentation):
            return []
        return [
            {"key": n.key, "params": n.params, "kind": n.kind}
            for n in presentation.drain_notices()
        ]

    return app
