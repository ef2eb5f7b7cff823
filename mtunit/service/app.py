"""FastAPI application entrypoint for mtunit service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..compiler import SuiteCompiler
from ..errors import MissingInputError, MTUnitError
from ..linker import link_expert
from ..logfile import colorize_log

_T = TypeVar("_T")


class RootRequest(BaseModel):
    root: str


class CompileResponse(BaseModel):
    output_path: str
    test_files: list[str]
    suites: dict[str, list[str]]


class LinkRequest(BaseModel):
    root: str
    expert_path: str


class PathResponse(BaseModel):
    path: str


class HealthResponse(BaseModel):
    status: str


def _default_compiler() -> SuiteCompiler:
    return SuiteCompiler()


async def _run_blocking(func: Callable[[], _T]) -> _T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    compiler_factory: Callable[[], SuiteCompiler] = _default_compiler,
    *,
    linker: Callable[[Path, str], Path] = link_expert,
    log_colorizer: Callable[[Path], Path] = colorize_log,
) -> FastAPI:
    """Create the FastAPI application exposing mtunit operations."""
    app = FastAPI(title="MTUnit Service", version="1.0.0")

    async def get_compiler() -> SuiteCompiler:
        return compiler_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/compile", response_model=CompileResponse)
    async def compile_tests(
        payload: RootRequest,
        compiler: SuiteCompiler = Depends(get_compiler),
    ) -> CompileResponse:
        result = await _run_blocking(lambda: compiler.run(payload.root))
        return CompileResponse(
            output_path=str(result.output_path),
            test_files=result.test_files,
            suites=result.suites,
        )

    @app.post("/link", response_model=PathResponse)
    async def link(payload: LinkRequest) -> PathResponse:
        path = await _run_blocking(lambda: linker(Path(payload.root), payload.expert_path))
        return PathResponse(path=str(path))

    @app.post("/log", response_model=PathResponse)
    async def log(payload: RootRequest) -> PathResponse:
        path = await _run_blocking(lambda: log_colorizer(Path(payload.root)))
        return PathResponse(path=str(path))

    @app.exception_handler(MissingInputError)
    async def missing_input_handler(_: Any, exc: MissingInputError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(MTUnitError)
    async def mtunit_error_handler(_: Any, exc: MTUnitError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000, *, app: Optional[FastAPI] = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(app or create_app(), host=host, port=port)
