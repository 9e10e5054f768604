from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException

from domain.schemas import BatchRequest, ToolInvocation, ToolRequest, ToolResponse
from interface.cli import build_context, build_executor
from tools.registry import registry

app = FastAPI(title="MyBudget Engine API")
executor = build_executor()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/tools")
def list_tools() -> list[dict[str, Any]]:
    return [
        {"name": spec.name, "description": spec.description, "args_schema": spec.args_schema}
        for spec in registry.list_specs()
    ]


@app.post("/tools/{name}")
def run_tool(name: str, invocation: ToolInvocation) -> ToolResponse:
    if not registry.has_tool(name):
        raise HTTPException(status_code=404, detail=f"Tool not registered: {name}")
    request = ToolRequest(
        request_id=invocation.request_id,
        tool=name,
        args=invocation.args,
        context=invocation.context or build_context(),
    )
    return executor.run_call(request)


@app.post("/batch")
def run_batch(batch: BatchRequest) -> dict[str, Any]:
    responses = executor.run_batch(batch)
    return {
        "request_id": batch.request_id,
        "ok": all(r.ok for r in responses),
        "responses": [r.model_dump(mode="json") for r in responses],
    }
