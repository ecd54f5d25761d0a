import unittest
from unittest.mock import MagicMock

import requests

from fakes import run, text_block
from notionvault.client import (
    NotionApiError,
    NotionAuthError,
    NotionClient,
    NotionNotFound,
    NotionRateLimited,
)
from notionvault.exceptions import FetchFailure
from notionvault.models.blocks import ParagraphBlock, UnknownBlock


def response(status=200, body=None, headers=None):
    resp = MagicMock()
    resp.status_code = status
    resp.headers = headers or {}
    resp.json.return_value = body if body is not None else {}
    resp.text = ""
    return resp


class NotionClientTest(unittest.TestCase):
    def setUp(self):
        self.session = MagicMock()
        self.session.headers = {}
        self.client = NotionClient("secret", session=self.session)

    def test_headers(self):
        self.assertEqual(self.session.headers["Authorization"], "Bearer secret")
        self.assertIn("Notion-Version", self.session.headers)

    def test_fetch_children_follows_cursor(self):
        self.session.get.side_effect = [
            response(
                body={
                    "results": [text_block("paragraph", [run("one")], "b1")],
                    "has_more": True,
                    "next_cursor": "c2",
                }
            ),
            response(
                body={
                    "results": [{"id": "b2", "type": "synced_block", "synced_block": {}}],
                    "has_more": False,
                    "next_cursor": None,
                }
            ),
        ]

        blocks = self.client.fetch_children("page")

        self.assertEqual(len(blocks), 2)
        self.assertIsInstance(blocks[0], ParagraphBlock)
        self.assertIsInstance(blocks[1], UnknownBlock)
        self.assertEqual(blocks[1].type, "synced_block")
        first, second = self.session.get.call_args_list
        self.assertEqual(first.args[0], "https://api.notion.com/v1/blocks/page/children")
        self.assertNotIn("start_cursor", first.kwargs["params"])
        self.assertEqual(second.kwargs["params"]["start_cursor"], "c2")

    def test_iter_database_pages(self):
        page = {
            "id": "p1",
            "parent": {"type": "database_id", "database_id": "db"},
            "properties": {"Name": {"id": "title", "type": "title", "title": [run("Hi")]}},
        }
        self.session.post.side_effect = [
            response(body={"results": [page], "has_more": True, "next_cursor": "n"}),
            response(body={"results": [], "has_more": False}),
        ]

        pages = list(self.client.iter_database_pages("db"))

        self.assertEqual([p.title() for p in pages], ["Hi"])
        self.assertTrue(pages[0].is_database_page)
        second = self.session.post.call_args_list[1]
        self.assertEqual(second.kwargs["json"]["start_cursor"], "n")

    def test_fetch_container_title(self):
        self.session.get.return_value = response(
            body={"id": "db", "title": [run("Projects")]}
        )
        self.assertEqual(self.client.fetch_container_title("db"), "Projects")

    def test_status_mapping(self):
        cases = [
            (401, NotionAuthError),
            (403, NotionAuthError),
            (404, NotionNotFound),
            (500, NotionApiError),
        ]
        for status, exc in cases:
            self.session.get.return_value = response(status, body={"message": "x"})
            with self.assertRaises(exc):
                self.client.fetch_document("p1")

    def test_rate_limited(self):
        self.session.get.return_value = response(429, headers={"Retry-After": "2"})
        with self.assertRaises(NotionRateLimited) as ctx:
            self.client.fetch_document("p1")
        self.assertEqual(ctx.exception.retry_after, 2.0)

    def test_errors_are_fetch_failures(self):
        self.session.get.side_effect = requests.ConnectionError("down")
        with self.assertRaises(FetchFailure):
            self.client.fetch_children("p1")

    def test_invalid_payload(self):
        self.session.get.return_value = response(body={"results": "nope"})
        with self.assertRaises(NotionApiError):
            self.client.fetch_children("p1")


if __name__ == "__main__":
    unittest.main()
