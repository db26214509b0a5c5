import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from keygrid.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("keygrid")


def create_app() -> FastAPI:
    application = FastAPI(title="Keygrid Solver")

    @application.get("/health")
    async def health():
        return {"status": "ok"}

    @application.post("/solve")
    async def solve(request: Request):
        from starlette.concurrency import run_in_threadpool
        from keygrid.grid import GridModel
        from keygrid.metrics import StageTimer
        from keygrid.solver import Solver, parse_grid

        content_type = request.headers.get("content-type", "")
        logger.info("POST /solve content-type=%s", content_type)

        data = await request.body()
        if not data:
            raise HTTPException(400, "Empty request body, no grid received")
        if len(data) > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(413, f"Grid too large (max {settings.MAX_UPLOAD_BYTES} bytes)")

        timer = StageTimer()

        with timer.stage("parse"):
            try:
                if content_type.startswith("application/json"):
                    rows = _rows_from_json(await request.json())
                else:
                    rows = parse_grid(data.decode("utf-8"))
                grid = GridModel(rows, settings.STRICT_KEY_PAIRING)
                solver = Solver(grid, settings)
            except UnicodeDecodeError:
                raise HTTPException(400, "Grid text must be UTF-8")
            except ValueError as e:
                # GridError and malformed JSON bodies
                raise HTTPException(400, str(e))

        logger.info("Grid %dx%d with %d keys", grid.rows, grid.cols, grid.num_keys)

        with timer.stage("search"):
            result = await run_in_threadpool(solver.solve)

        logger.info("Solved: moves=%d visits=%d", result.moves, result.stats.visits)

        response = {
            "moves": result.moves,
            "rows": grid.rows,
            "cols": grid.cols,
            "keys": grid.num_keys,
            "path": [[cell.row, cell.col] for cell in result.path],
            "processing_time": timer.total_ms,
            "stage_timings": timer.summary(),
            "stats": result.stats.summary(),
        }

        if settings.DEBUG:
            _save_debug_artifacts(grid, response)

        return JSONResponse(response)

    @application.get("/api/settings")
    async def api_get_settings():
        from keygrid.settings import get_editable_settings, EDITABLE_FIELDS
        values = get_editable_settings(settings)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        from keygrid.settings import update_settings, get_editable_settings
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Settings body must be valid JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Settings body must be a JSON object")
        errors = update_settings(settings, **body)
        if errors:
            return JSONResponse({"updated": get_editable_settings(settings), "errors": errors}, status_code=400)
        if "LOG_LEVEL" in body:
            logging.getLogger("keygrid").setLevel(settings.LOG_LEVEL)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(settings)})

    return application


def _rows_from_json(body) -> list[str]:
    from keygrid.grid import GridError

    rows = body.get("grid") if isinstance(body, dict) else body
    if not isinstance(rows, list) or not all(isinstance(r, str) for r in rows):
        raise GridError("'grid' must be an array of strings")
    return rows


def _save_debug_artifacts(grid, response: dict):
    import json
    from datetime import datetime

    debug_dir = settings.DEBUG_DIR
    debug_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

    result = {
        "timestamp": ts,
        "grid": list(grid.row_strings()),
        **response,
    }
    with open(debug_dir / f"{ts}_result.json", "w") as f:
        json.dump(result, f, indent=2)

    logger.info("Saved debug artifacts to %s/%s_result.json", debug_dir, ts)


app = create_app()
