import sys
import unittest
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from mdserve.core.renderer import build_policy
from mdserve.core.sanitizer import Policy, ugc_policy


class TestUGCPolicy(unittest.TestCase):
    def setUp(self):
        self.policy = ugc_policy()

    def test_script_removed_with_content(self):
        out = self.policy.sanitize('<p>hi</p><script>alert("x")</script>')
        self.assertEqual(out, '<p>hi</p>')

    def test_unknown_elements_are_unwrapped(self):
        out = self.policy.sanitize('<p><font color="red">text</font></p>')
        self.assertEqual(out, '<p>text</p>')

    def test_event_handlers_and_styles_dropped(self):
        out = self.policy.sanitize('<p onclick="evil()" style="color: red" id="intro">x</p>')
        self.assertEqual(out, '<p id="intro">x</p>')

    def test_links(self):
        out = self.policy.sanitize('<a href="https://example.com" target="_blank">ok</a>')
        self.assertIn('href="https://example.com"', out)
        self.assertIn('rel="nofollow"', out)
        self.assertNotIn('target', out)

    def test_javascript_urls_dropped(self):
        for href in ('javascript:alert(1)', ' JavaScript:alert(1)', 'java\tscript:alert(1)'):
            with self.subTest(href=href):
                out = self.policy.sanitize(f'<a href="{href}">x</a>')
                self.assertNotIn('href', out)

    def test_relative_and_mailto_urls_kept(self):
        self.assertIn('href="other.md"', self.policy.sanitize('<a href="other.md">x</a>'))
        self.assertIn('href="#section"', self.policy.sanitize('<a href="#section">x</a>'))
        self.assertIn('href="mailto:me@example.com"', self.policy.sanitize('<a href="mailto:me@example.com">x</a>'))

    def test_images(self):
        out = self.policy.sanitize('<img src="logo.png" alt="Logo" onerror="evil()">')
        self.assertIn('src="logo.png"', out)
        self.assertIn('alt="Logo"', out)
        self.assertNotIn('onerror', out)

    def test_comments_removed(self):
        self.assertEqual(self.policy.sanitize('<p>a<!-- secret --></p>'), '<p>a</p>')

    def test_code_language_class(self):
        out = self.policy.sanitize('<pre><code class="language-python">x</code></pre>')
        self.assertIn('class="language-python"', out)
        out = self.policy.sanitize('<pre><code class="evil">x</code></pre>')
        self.assertNotIn('class', out)

    def test_task_list_checkbox(self):
        out = self.policy.sanitize('<li><input type="checkbox" checked disabled> done</li>')
        self.assertIn('type="checkbox"', out)
        out = self.policy.sanitize('<li><input type="text" value="x"> no</li>')
        self.assertNotIn('<input', out)

    def test_text_is_escaped(self):
        out = self.policy.sanitize('<p>1 &lt; 2 &amp;&amp; &lt;script&gt;</p>')
        self.assertEqual(out, '<p>1 &lt; 2 &amp;&amp; &lt;script&gt;</p>')


class TestPolicyBuilder(unittest.TestCase):
    def test_span_style_needs_explicit_allow(self):
        html = '<span style="color: #008000">print</span>'
        self.assertEqual(ugc_policy().sanitize(html), '<span>print</span>')
        self.assertEqual(build_policy().sanitize(html), html)

    def test_span_style_pattern(self):
        out = build_policy().sanitize('<span style="background: url(javascript:x)">a</span>')
        self.assertEqual(out, '<span>a</span>')

    def test_style_only_on_span(self):
        out = build_policy().sanitize('<div style="background: #f8f8f8"><span style="color: #000">a</span></div>')
        self.assertEqual(out, '<div><span style="color: #000">a</span></div>')

    def test_empty_policy_strips_everything(self):
        self.assertEqual(Policy().sanitize('<div><b>bold</b> text</div>'), 'bold text')


if __name__ == '__main__':
    unittest.main()
