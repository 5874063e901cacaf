"""Monday.com GraphQL client producing Item trees for the report builder."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

import requests

from taskrelay.core.items import Board, Item
from taskrelay.monitoring.logging import get_logger
from taskrelay.utils.config import DEFAULT_MONDAY_API_URL

logger = get_logger(__name__)

BOARDS_QUERY = "query { boards { id name } }"

ITEMS_QUERY = """
query ($boardId: [ID!], $limit: Int!) {
  boards(ids: $boardId) {
    items_page(limit: $limit) {
      items {
        id
        name
        column_values { id value text type }
        subitems {
          id
          name
          column_values { id value text type }
        }
      }
    }
  }
}
"""


class MondayAPIError(RuntimeError):
    """Raised when Monday.com cannot be reached or returns errors."""


def _find_column(
    columns: Iterable[Dict[str, Any]],
    ids: Iterable[str],
    types: Iterable[str],
) -> Optional[Dict[str, Any]]:
    ids = {value.lower() for value in ids}
    types = {value.lower() for value in types}
    for column in columns or []:
        column_id = str(column.get("id") or "").lower()
        column_type = str(column.get("type") or "").lower()
        if column_id in ids or column_type in types:
            return column
    return None


def _column_text(column: Optional[Dict[str, Any]]) -> str:
    if not column:
        return ""
    return (column.get("text") or "").strip()


def parse_due_date(text: str) -> Optional[date]:
    """Parse Monday's date column text (``2024-05-01`` or ``2024-05-01 09:00``)."""
    if not text:
        return None
    try:
        return datetime.strptime(text.strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        logger.debug("monday.date.unparseable", text=text)
        return None


def item_from_payload(payload: Dict[str, Any], board_name: Optional[str] = None) -> Item:
    """Convert an item (or subitem) payload from the API into an Item."""
    columns = payload.get("column_values") or []
    status = _find_column(columns, ids=("status",), types=("status",))
    due = _find_column(columns, ids=("date",), types=("date",))
    person = _find_column(columns, ids=("person",), types=("people",))

    children = tuple(
        item_from_payload(sub, board_name=board_name)
        for sub in payload.get("subitems") or []
    )

    return Item(
        name=payload.get("name") or "",
        status_text=_column_text(status),
        due_date=parse_due_date(_column_text(due)),
        assignee=_column_text(person) or None,
        children=children,
        board_name=board_name,
        item_id=str(payload["id"]) if payload.get("id") is not None else None,
    )


class MondayClient:
    """Thin GraphQL client for the two queries the bot needs."""

    def __init__(
        self,
        api_token: str,
        api_url: str = DEFAULT_MONDAY_API_URL,
        timeout: int = 30,
        page_limit: int = 50,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            api_token: Monday.com personal or app API token
            api_url: GraphQL endpoint
            timeout: Request timeout in seconds
            page_limit: Maximum items fetched per board
            session: Optional requests session (tests inject a fake)
        """
        self.api_token = api_token
        self.api_url = api_url
        self.timeout = timeout
        self.page_limit = page_limit
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": self.api_token,
            "Content-Type": "application/json",
        }

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object."""
        if not self.api_token:
            logger.error("monday.no_api_token")
            raise MondayAPIError("MONDAY_API_TOKEN is not configured")

        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = self.session.post(
                self.api_url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.HTTPError as exc:
            text = exc.response.text[:500] if exc.response is not None else ""
            logger.error("monday.request.failed", error=str(exc), body=text)
            raise MondayAPIError(f"Monday API request failed: {exc}") from exc
        except requests.RequestException as exc:
            logger.error("monday.request.exception", error=str(exc))
            raise MondayAPIError(f"Monday API request failed: {exc}") from exc
        except ValueError as exc:
            logger.error("monday.response.invalid_json", error=str(exc))
            raise MondayAPIError("Monday API returned invalid JSON") from exc

        if body.get("errors"):
            logger.error("monday.graphql.errors", errors=json.dumps(body["errors"], indent=2))
            messages = "; ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in body["errors"]
            )
            raise MondayAPIError(f"Monday API error: {messages}")

        return body.get("data") or {}

    def list_boards(self) -> List[Board]:
        """Every board visible to the token."""
        data = self.execute(BOARDS_QUERY)
        boards = [Board(id=str(b["id"]), name=b.get("name") or "") for b in data.get("boards") or []]
        logger.debug("monday.boards.fetched", count=len(boards))
        return boards

    def selectable_boards(self) -> List[Board]:
        """Boards a user can pick, without the generated subitem boards."""
        return [board for board in self.list_boards() if not board.is_subitem_board]

    def get_board(self, board_id: str) -> Optional[Board]:
        board_id = str(board_id)
        for board in self.list_boards():
            if board.id == board_id:
                return board
        return None

    def fetch_items(self, board_id: str, board_name: Optional[str] = None) -> List[Item]:
        """Items (with subitems) of one board, in board order."""
        data = self.execute(
            ITEMS_QUERY,
            {"boardId": [str(board_id)], "limit": self.page_limit},
        )
        boards = data.get("boards") or []
        if not boards:
            logger.warning("monday.board.not_found", board_id=board_id)
            return []
        page = boards[0].get("items_page") or {}
        items = [item_from_payload(raw, board_name=board_name) for raw in page.get("items") or []]
        logger.debug("monday.items.fetched", board_id=board_id, count=len(items))
        return items

    def fetch_all_items(self) -> List[Item]:
        """Items from every board, each tagged with its board name.

        Subitem boards are skipped; their rows arrive as subitems of the
        parent board.
        """
        items: List[Item] = []
        for board in self.selectable_boards():
            items.extend(self.fetch_items(board.id, board_name=board.name))
        return items
