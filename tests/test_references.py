import os
import shutil
import tempfile
import threading
import unittest

from fakes import (
    FakeSource,
    block,
    db_parent,
    make_page,
    page_mention,
    page_parent,
    run,
    text_block,
)
from notionvault.client import NotionNotFound
from notionvault.rendering.references import (
    RefState,
    ReferenceCache,
    ReferenceResolver,
)


def read(path):
    with open(path, encoding="utf-8") as f:
        return f.read()


class ReferenceCacheTest(unittest.TestCase):
    def test_claim_then_commit(self):
        cache = ReferenceCache()
        self.assertEqual(cache.claim("p1"), (True, None))
        claimed, entry = cache.claim("p1")
        self.assertFalse(claimed)
        self.assertIs(entry.state, RefState.IN_PROGRESS)

        cache.commit("p1", "[[One]]")
        claimed, entry = cache.claim("p1")
        self.assertFalse(claimed)
        self.assertIs(entry.state, RefState.DONE)
        self.assertEqual(entry.token, "[[One]]")

    def test_done_is_final(self):
        cache = ReferenceCache()
        cache.claim("p1")
        cache.commit("p1", "[[One]]")
        cache.commit("p1", "[[Other]]")
        self.assertEqual(cache.get("p1").token, "[[One]]")
        self.assertEqual(len(cache), 1)


class ReferenceResolverTest(unittest.TestCase):
    def setUp(self):
        self.vault = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.vault)

    def _resolver(self, source, root_db="root-db"):
        return ReferenceResolver(source, self.vault, root_database_id=root_db)

    def test_resolves_once(self):
        source = FakeSource(
            pages={"p2": make_page("p2", "Other")},
            children={"p2": [text_block("paragraph", [run("body")])]},
        )
        resolver = self._resolver(source)

        self.assertEqual(resolver.resolve("p2"), "[[Other]]")
        self.assertEqual(resolver.resolve("p2"), "[[Other]]")

        self.assertEqual(source.calls[("document", "p2")], 1)
        self.assertEqual(source.calls[("children", "p2")], 1)
        self.assertEqual(read(os.path.join(self.vault, "Other.md")), "body\n")

    def test_self_reference_does_not_recurse(self):
        source = FakeSource(
            pages={"p1": make_page("p1", "Self")},
            children={"p1": [text_block("paragraph", [run("me: "), page_mention("p1")])]},
        )
        resolver = self._resolver(source)

        self.assertEqual(resolver.resolve("p1"), "[[Self]]")
        self.assertEqual(read(os.path.join(self.vault, "Self.md")), "me: \n")

    def test_mutual_references(self):
        source = FakeSource(
            pages={"a": make_page("a", "A"), "b": make_page("b", "B")},
            children={
                "a": [text_block("paragraph", [page_mention("b")])],
                "b": [text_block("paragraph", [page_mention("a")])],
            },
        )
        resolver = self._resolver(source)

        self.assertEqual(resolver.resolve("a"), "[[A]]")
        self.assertEqual(read(os.path.join(self.vault, "A.md")), "[[B]]\n")
        # a was in progress while b rendered
        self.assertEqual(read(os.path.join(self.vault, "B.md")), "\n")

    def test_database_parent_destinations(self):
        source = FakeSource(
            pages={
                "in-root": make_page("in-root", "Sibling", parent=db_parent("root-db")),
                "in-other": make_page("in-other", "Task", parent=db_parent("other-db")),
            },
            databases={"other-db": "Projects"},
        )
        resolver = self._resolver(source)

        self.assertEqual(resolver.resolve("in-root"), "[[Sibling]]")
        self.assertEqual(resolver.resolve("in-other"), "[[Task]]")
        self.assertTrue(os.path.exists(os.path.join(self.vault, "Sibling.md")))
        self.assertTrue(os.path.exists(os.path.join(self.vault, "Projects", "Task.md")))
        self.assertEqual(source.calls[("container", "root-db")], 0)

    def test_root_database_id_ignores_dashes(self):
        source = FakeSource(
            pages={
                "p": make_page(
                    "p", "Row", parent=db_parent("1234abcd-0000-0000-0000-000000000000")
                )
            }
        )
        resolver = self._resolver(source, root_db="1234ABCD000000000000000000000000")
        self.assertEqual(resolver.resolve("p"), "[[Row]]")
        self.assertTrue(os.path.exists(os.path.join(self.vault, "Row.md")))

    def test_page_parent_destination(self):
        source = FakeSource(
            pages={
                "parent": make_page("parent", "Journal", title_key="title"),
                "child": make_page(
                    "child", "Entry", parent=page_parent("parent"), title_key="title"
                ),
                "untitled": make_page("untitled", "", parent=page_parent("parent")),
            }
        )
        resolver = self._resolver(source)

        self.assertEqual(resolver.resolve("child"), "[[Entry]]")
        self.assertTrue(os.path.exists(os.path.join(self.vault, "Journal", "Entry.md")))
        # a page without a title borrows its parent's
        self.assertEqual(resolver.resolve("untitled"), "[[Journal]]")
        self.assertTrue(
            os.path.exists(os.path.join(self.vault, "Journal", "Journal.md"))
        )

    def test_non_database_pages_have_no_front_matter(self):
        source = FakeSource(
            pages={"p": make_page("p", "Plain")},
            children={"p": [text_block("paragraph", [run("x")])]},
        )
        self._resolver(source).resolve("p")
        self.assertEqual(read(os.path.join(self.vault, "Plain.md")), "x\n")

    def test_failure_degrades_to_empty_and_is_not_retried(self):
        source = FakeSource()
        resolver = self._resolver(source)

        with self.assertLogs("notionvault.rendering.references", level="WARNING"):
            self.assertEqual(resolver.resolve("missing"), "")
        self.assertEqual(resolver.resolve("missing"), "")
        self.assertEqual(source.calls[("document", "missing")], 1)
        self.assertIs(resolver.cache.get("missing").state, RefState.DONE)

    def test_render_failure_degrades(self):
        source = FakeSource(
            pages={"p": make_page("p", "Broken")},
            failing={"p": NotionNotFound("gone")},
        )
        with self.assertLogs("notionvault.rendering.references", level="WARNING"):
            self.assertEqual(self._resolver(source).resolve("p"), "")

    def test_child_page_is_written_below_parent(self):
        source = FakeSource(
            pages={
                "parent": make_page("parent", "Journal"),
                "cp": make_page("cp", "Sub", parent=page_parent("parent")),
            },
            children={
                "parent": [block("child_page", "cp", title="Sub")],
                "cp": [text_block("paragraph", [run("nested")])],
            },
        )
        resolver = self._resolver(source)

        self.assertEqual(resolver.resolve("parent"), "[[Journal]]")
        self.assertEqual(read(os.path.join(self.vault, "Journal.md")), "[[Sub]]\n")
        self.assertEqual(
            read(os.path.join(self.vault, "Journal", "Sub.md")), "nested\n"
        )

    def test_concurrent_resolution_fetches_once(self):
        source = FakeSource(
            pages={"p": make_page("p", "Shared")},
            children={"p": [text_block("paragraph", [run("x")])]},
        )
        resolver = self._resolver(source)
        barrier = threading.Barrier(8)
        tokens = []
        lock = threading.Lock()

        def worker():
            barrier.wait()
            token = resolver.resolve("p")
            with lock:
                tokens.append(token)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        self.assertEqual(tokens, ["[[Shared]]"] * 8)
        self.assertEqual(source.calls[("document", "p")], 1)
        self.assertEqual(source.calls[("children", "p")], 1)

    def test_waiter_gets_token_while_owner_renders(self):
        rendering = threading.Event()
        release = threading.Event()

        class SlowSource(FakeSource):
            def fetch_children(self, block_id):
                if block_id == "p":
                    rendering.set()
                    release.wait(timeout=10)
                return super().fetch_children(block_id)

        source = SlowSource(
            pages={"p": make_page("p", "Shared")},
            children={"p": [text_block("paragraph", [run("x")])]},
        )
        resolver = self._resolver(source)
        owner = threading.Thread(target=resolver.resolve, args=("p",))
        owner.start()
        self.assertTrue(rendering.wait(timeout=10))

        # the owner is still inside the page body
        self.assertEqual(resolver.resolve("p"), "[[Shared]]")
        self.assertIs(resolver.cache.get("p").state, RefState.IN_PROGRESS)

        release.set()
        owner.join(timeout=10)
        self.assertIs(resolver.cache.get("p").state, RefState.DONE)

    def test_cross_thread_cycle_does_not_deadlock(self):
        both_rendering = threading.Barrier(2, timeout=10)

        class PairedSource(FakeSource):
            def fetch_children(self, block_id):
                if block_id in ("x", "y"):
                    both_rendering.wait()
                return super().fetch_children(block_id)

        source = PairedSource(
            pages={"x": make_page("x", "X"), "y": make_page("y", "Y")},
            children={
                "x": [text_block("paragraph", [page_mention("y")])],
                "y": [text_block("paragraph", [page_mention("x")])],
            },
        )
        resolver = self._resolver(source)
        tokens = {}

        def worker(page_id):
            tokens[page_id] = resolver.resolve(page_id)

        threads = [
            threading.Thread(target=worker, args=(page_id,)) for page_id in ("x", "y")
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        self.assertFalse(any(t.is_alive() for t in threads))
        self.assertEqual(tokens, {"x": "[[X]]", "y": "[[Y]]"})
        self.assertEqual(read(os.path.join(self.vault, "X.md")), "[[Y]]\n")
        self.assertEqual(read(os.path.join(self.vault, "Y.md")), "[[X]]\n")


if __name__ == "__main__":
    unittest.main()
