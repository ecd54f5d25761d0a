import os
import shutil
import tempfile
import unittest

from fakes import FakeSource, block, db_parent, make_page, run, text_block
from notionvault.exceptions import UnsupportedBlockKind, WriteFailure
from notionvault.rendering.exporter import DocumentRenderer, write_markdown
from notionvault.rendering.options import PropertyFilter


class DocumentRendererTest(unittest.TestCase):
    def setUp(self):
        self.vault = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.vault)
        self.page = make_page(
            "p1",
            "Row",
            parent=db_parent("db"),
            properties={"Done": {"type": "checkbox", "checkbox": True}},
        )

    def test_database_page_with_front_matter(self):
        source = FakeSource(children={"p1": [text_block("heading_1", [run("Title")])]})
        documents = DocumentRenderer(source, property_filter=PropertyFilter.including(["done"]))
        path = os.path.join(self.vault, "sub", "Row.md")

        documents.render_to_path(self.page, path, database_page=True)

        with open(path, encoding="utf-8") as f:
            self.assertEqual(f.read(), "---\nDone: true\n---\n# Title\n")
        self.assertEqual(os.listdir(os.path.join(self.vault, "sub")), ["Row.md"])

    def test_front_matter_only_for_database_pages(self):
        source = FakeSource(children={"p1": [text_block("paragraph", [run("x")])]})
        documents = DocumentRenderer(source, property_filter=PropertyFilter.all())
        self.assertEqual(documents.render(self.page, database_page=False), "x\n")

    def test_failed_render_leaves_no_file(self):
        source = FakeSource(
            children={
                "p1": [
                    text_block("paragraph", [run("fine")]),
                    block("synced_block", "s1"),
                ]
            }
        )
        path = os.path.join(self.vault, "Row.md")
        with self.assertRaises(UnsupportedBlockKind):
            DocumentRenderer(source).render_to_path(self.page, path, database_page=True)
        self.assertEqual(os.listdir(self.vault), [])

    def test_overwrites_existing_file(self):
        path = os.path.join(self.vault, "Row.md")
        write_markdown(path, "old")
        write_markdown(path, "new")
        with open(path, encoding="utf-8") as f:
            self.assertEqual(f.read(), "new")
        self.assertEqual(os.listdir(self.vault), ["Row.md"])

    def test_write_failure(self):
        blocker = os.path.join(self.vault, "file")
        with open(blocker, "w") as f:
            f.write("x")
        target = os.path.join(blocker, "Row.md")
        with self.assertRaises(WriteFailure) as ctx:
            write_markdown(target, "content")
        self.assertEqual(ctx.exception.path, target)


if __name__ == "__main__":
    unittest.main()
