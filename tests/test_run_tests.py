import importlib.util
import sys
import unittest
from pathlib import Path

# Add project root to sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

_spec = importlib.util.spec_from_file_location("mdserve_run_tests", PROJECT_ROOT / "scripts" / "run_tests.py")
run_tests = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(run_tests)


class TestComponents(unittest.TestCase):
    def test_every_test_module_belongs_to_a_component(self):
        listed = {module for modules in run_tests.COMPONENTS.values() for module in modules}
        on_disk = {path.name for path in run_tests.TESTS_DIR.glob("test_*.py")}
        self.assertEqual(listed, on_disk)

    def test_select_all_by_default(self):
        files = run_tests.select_test_files([])
        self.assertEqual(len(files), sum(len(m) for m in run_tests.COMPONENTS.values()))

    def test_select_in_suite_order(self):
        files = run_tests.select_test_files(["http", "resolver"])
        self.assertEqual(
            [path.name for path in files],
            ["test_resolver.py", "test_handler.py", "test_app.py"],
        )

    def test_unknown_component(self):
        with self.assertRaises(ValueError) as ctx:
            run_tests.select_test_files(["render", "nope"])
        self.assertIn("nope", str(ctx.exception))


class TestArguments(unittest.TestCase):
    def test_split_argv(self):
        self.assertEqual(run_tests.split_argv(["http", "--", "-k", "middleware"]), (["http"], ["-k", "middleware"]))
        self.assertEqual(run_tests.split_argv(["--list"]), (["--list"], []))

    def test_build_pytest_args(self):
        report = Path("/tmp/report.xml")
        files = [run_tests.TESTS_DIR / "test_app.py"]
        args = run_tests.build_pytest_args(files, ["-x"], quiet=True, report_file=report)
        self.assertEqual(args, ["-q", "-ra", f"--junitxml={report}", str(files[0]), "-x"])

    def test_list_exits_cleanly(self):
        self.assertEqual(run_tests.main(["--list"]), 0)


if __name__ == '__main__':
    unittest.main()
