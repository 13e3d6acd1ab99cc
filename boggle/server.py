import copy
import logging

from fastapi import FastAPI, Request, HTTPException, BackgroundTasks
from fastapi.responses import JSONResponse

from boggle.settings import settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("boggle")

# Populated at startup; read-only while requests are served
_trie = None


def _load_dictionary(cfg=settings):
    from boggle.solver import load_trie
    logger.info("Loading dictionary from %s (lengths %d-%d)",
                cfg.DICTIONARY_PATH, cfg.MIN_WORD_LENGTH, cfg.MAX_WORD_LENGTH)
    return load_trie(str(cfg.DICTIONARY_PATH), cfg.MIN_WORD_LENGTH, cfg.MAX_WORD_LENGTH)


def _apply_log_level():
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)


def create_app(trie=None) -> FastAPI:
    """Build the app. A prebuilt *trie* skips loading the dictionary file."""
    from contextlib import asynccontextmanager

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        global _trie
        _apply_log_level()
        _trie = trie if trie is not None else _load_dictionary()
        logger.info("Trie loaded (%d words)", len(_trie))
        yield

    application = FastAPI(title="Boggle Solver", lifespan=lifespan)

    @application.get("/health")
    async def health():
        return {
            "status": "ok",
            "trie_loaded": _trie is not None,
            "word_count": len(_trie) if _trie is not None else 0,
        }

    @application.post("/solve")
    async def solve(request: Request, background_tasks: BackgroundTasks):
        from boggle.grid import InvalidGridError, random_grid, validate_grid
        from boggle.metrics import SearchStats, StageTimer
        from boggle.solver import find_path, rank_words, solve as solve_board
        from boggle.notifier import send_notification

        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Request body must be a JSON object")

        timer = StageTimer()

        with timer.stage("board"):
            try:
                if body.get("grid") is not None:
                    board = validate_grid(body["grid"])
                else:
                    rows = int(body.get("rows", settings.DEFAULT_ROWS))
                    cols = int(body.get("cols", settings.DEFAULT_COLS))
                    seed = body.get("seed")
                    if rows * cols > settings.MAX_GRID_CELLS:
                        raise HTTPException(413, f"Grid too large (max {settings.MAX_GRID_CELLS} cells)")
                    board = random_grid(rows, cols, None if seed is None else int(seed))
                max_results = int(body.get("max_results", settings.MAX_RESULTS))
            except (InvalidGridError, TypeError, ValueError) as e:
                raise HTTPException(400, str(e))

        rows, cols = len(board), len(board[0])
        if rows * cols > settings.MAX_GRID_CELLS:
            raise HTTPException(413, f"Grid too large (max {settings.MAX_GRID_CELLS} cells)")

        board_str = " / ".join(" ".join(row) for row in board)
        logger.info("Board %dx%d: %s", rows, cols, board_str)

        stats = SearchStats()
        with timer.stage("solve"):
            found = solve_board(_trie, board, settings.MIN_WORD_LENGTH, stats)

        with timer.stage("rank"):
            all_words = rank_words(found)
            words = all_words[:max_results] if max_results > 0 else all_words
            positions = {w: list(find_path(board, w)[0]) for w in words}

        logger.info("Found %d words (returning top %d)", len(all_words), len(words))

        if settings.NOTIFY_ENABLED:
            background_tasks.add_task(
                send_notification, all_words, board, timer.summary(),
                settings.NTFY_TOPIC, settings.NTFY_URL, settings.NOTIFY_WORDS_PER_GROUP,
            )

        return JSONResponse({
            "rows": rows,
            "cols": cols,
            "board": board,
            "words": words,
            "word_count": len(words),
            "total_found": len(all_words),
            "positions": positions,
            "processing_time": timer.total_ms,
            "stage_timings": timer.summary(),
            "search_stats": stats.as_dict(),
        })

    @application.get("/lookup/{text}")
    async def lookup(text: str):
        query = text.strip().upper()
        if not query.isascii() or not query.isalpha():
            raise HTTPException(400, f"Lookup text must be letters A-Z, got: {text!r}")
        return {"query": query, "result": _trie.query(query).name}

    @application.get("/api/settings")
    async def api_get_settings():
        from boggle.settings import get_editable_settings, EDITABLE_FIELDS
        values = get_editable_settings(settings)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        from boggle.settings import EDITABLE_FIELDS, TRIE_FIELDS, update_settings, get_editable_settings
        global _trie
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Request body must be a JSON object")

        # Validate and rebuild against a copy so a failed reload changes nothing
        candidate = copy.copy(settings)
        errors = update_settings(candidate, **body)
        new_trie = None
        if any(getattr(candidate, name) != getattr(settings, name) for name in TRIE_FIELDS):
            try:
                new_trie = _load_dictionary(candidate)
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Dictionary reload failed, settings unchanged: %s", e)
                raise HTTPException(503, f"Could not reload dictionary: {e}")

        for name in EDITABLE_FIELDS:
            setattr(settings, name, getattr(candidate, name))
        if new_trie is not None:
            _trie = new_trie
            logger.info("Trie reloaded (%d words)", len(_trie))
        _apply_log_level()

        if errors:
            return JSONResponse({"updated": get_editable_settings(settings), "errors": errors}, status_code=400)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(settings)})

    return application


def main():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


app = create_app()
