import logging
from collections import defaultdict

import httpx

logger = logging.getLogger("boggle")


def format_notification(
    words: list[str],
    board: list[list[str]],
    words_per_group: int = 10,
) -> tuple[str, str]:
    """Build the (title, body) of a results notification.

    The body lists up to *words_per_group* words of each length, longest
    lengths first, followed by the board and per-length counts.
    """
    by_length: dict[int, list[str]] = defaultdict(list)
    for w in words:
        by_length[len(w)].append(w)

    rows, cols = len(board), len(board[0]) if board else 0
    title = f"Boggle {rows}x{cols} - {len(words)} words"

    selected = []
    for length in sorted(by_length, reverse=True):
        selected.extend(sorted(by_length[length])[:words_per_group])

    grid = "\n".join(" ".join(row) for row in board)
    counts = " | ".join(f"{l}L:{len(g)}" for l, g in sorted(by_length.items(), reverse=True))
    body = ",".join(selected) + "\n\n" + grid + "\n\n" + counts
    return title, body


async def send_notification(
    words: list[str],
    board: list[list[str]],
    timings: dict,
    topic: str,
    ntfy_url: str = "https://ntfy.sh",
    words_per_group: int = 10,
):
    """Send solve results to ntfy.sh. Best-effort — failures are logged, not raised."""
    try:
        title, body = format_notification(words, board, words_per_group)
        if "total" in timings:
            body += f"\n{timings['total']:.0f}ms"

        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(
                f"{ntfy_url}/{topic}",
                content=body.encode("utf-8"),
                headers={
                    "Title": title,
                    "Priority": "default",
                    "Tags": "game_die",
                },
            )
            resp.raise_for_status()
            logger.info("Notification sent to %s/%s (status %d)", ntfy_url, topic, resp.status_code)

    except Exception as e:
        logger.error("Failed to send notification: %s", e)
