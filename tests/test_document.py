import io
import sys
import threading
import time
import unittest
from datetime import datetime
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from markupsafe import Markup

from mdserve.core.document import MarkdownFile
from mdserve.core.filesystem import FileInfo


def make_info(name="getting-started.md"):
    return FileInfo(name=name, size=0, mode=0o100644, mod_time=datetime(2024, 1, 2, 3, 4, 5), is_dir=False)


class CountingRender:
    """Render stand-in that counts calls and can be slowed down."""

    def __init__(self, delay=0.0, result=("<ul></ul>", "<p>body</p>")):
        self.calls = 0
        self.delay = delay
        self.result = result
        self._lock = threading.Lock()

    def __call__(self, content):
        with self._lock:
            self.calls += 1
        time.sleep(self.delay)
        return self.result


class TestMarkdownFile(unittest.TestCase):
    def test_load_with_front_matter(self):
        doc = MarkdownFile.load("hello.md", make_info("hello.md"), io.BytesIO(b"Title: Hello\n\n# Heading\n"))
        self.assertEqual(doc.get_attr("Title"), "Hello")
        self.assertEqual(doc.get_attr("title"), "Hello")
        self.assertEqual(doc.title, "Hello")
        self.assertEqual(doc.content, b"# Heading\n")

    def test_load_without_front_matter(self):
        data = b"# Heading\n\nParagraph\n"
        doc = MarkdownFile.load("getting-started.md", make_info(), io.BytesIO(data))
        self.assertEqual(doc.content, data)
        self.assertEqual(len(doc.metadata), 0)
        self.assertEqual(doc.get_attr("Title"), "")
        self.assertEqual(doc.title, "Getting Started")

    def test_body_and_toc_are_markup(self):
        render = CountingRender()
        doc = MarkdownFile("a.md", make_info("a.md"), b"x", render=render)
        self.assertFalse(doc.rendered)
        self.assertIsInstance(doc.body, Markup)
        self.assertIsInstance(doc.toc, Markup)
        self.assertEqual(str(doc.body), "<p>body</p>")
        self.assertEqual(str(doc.toc), "<ul></ul>")
        self.assertTrue(doc.rendered)

    def test_renders_once(self):
        render = CountingRender()
        doc = MarkdownFile("a.md", make_info("a.md"), b"x", render=render)
        first = doc.html()
        for _ in range(5):
            self.assertEqual(doc.html(), first)
            doc.body
            doc.toc
        self.assertEqual(render.calls, 1)

    def test_empty_result_is_cached(self):
        render = CountingRender(result=("", ""))
        doc = MarkdownFile("a.md", make_info("a.md"), b"", render=render)
        doc.html()
        doc.html()
        self.assertEqual(render.calls, 1)

    def test_concurrent_first_access_renders_once(self):
        render = CountingRender(delay=0.05)
        doc = MarkdownFile("a.md", make_info("a.md"), b"x", render=render)
        barrier = threading.Barrier(8)
        results = []

        def worker(i):
            barrier.wait()
            results.append(doc.body if i % 2 else doc.toc)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(render.calls, 1)
        self.assertEqual(len(results), 8)
        self.assertEqual({str(r) for r in results}, {"<p>body</p>", "<ul></ul>"})

    def test_real_pipeline_is_idempotent(self):
        doc = MarkdownFile.load("hello.md", make_info("hello.md"), io.BytesIO(b"Title: Hello\n\n# Heading\n"))
        first = doc.html()
        self.assertEqual(doc.html(), first)
        self.assertIn('<h1 id="heading">', first[1])


if __name__ == '__main__':
    unittest.main()
